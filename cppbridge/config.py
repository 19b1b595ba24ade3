"""Generator settings, with environment variable fallbacks.

Resolution order for each setting:

1. Explicit argument (e.g. from the command line)
2. ``CPPBRIDGE_NAMESPACE`` / ``CPPBRIDGE_JOBS`` environment variables
3. The descriptor document's own namespace, then :data:`DEFAULT_NAMESPACE`
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_NAMESPACE = "cppbridge"
NAMESPACE_ENV = "CPPBRIDGE_NAMESPACE"
JOBS_ENV = "CPPBRIDGE_JOBS"
LOG_LEVEL_ENV = "CPPBRIDGE_LOG_LEVEL"


@dataclass
class GeneratorConfig:
    """Settings for one generation run.

    :param output_dir: Directory receiving the generated headers.
    :param namespace: C++ namespace override; None keeps the module's own.
    :param jobs: Number of units generated concurrently.
    :param dry_run: Render everything but write nothing.
    """

    output_dir: Path
    namespace: str | None = None
    jobs: int = 1
    dry_run: bool = False

    @classmethod
    def from_env(
        cls,
        output_dir: str | os.PathLike[str],
        namespace: str | None = None,
        jobs: int | None = None,
        dry_run: bool = False,
    ) -> GeneratorConfig:
        """Build a config, filling unset values from the environment."""
        if namespace is None:
            namespace = os.environ.get(NAMESPACE_ENV, "").strip() or None
        if jobs is None:
            jobs = _jobs_from_env()
        return cls(output_dir=Path(output_dir), namespace=namespace, jobs=jobs, dry_run=dry_run)

    def resolve_namespace(self, module_namespace: str) -> str:
        """Namespace to emit: override, then the module's, then the default."""
        return self.namespace or module_namespace or DEFAULT_NAMESPACE


def _jobs_from_env() -> int:
    raw = os.environ.get(JOBS_ENV)
    if not raw:
        return 1
    stripped = raw.strip()
    if stripped.isdigit() and int(stripped) > 0:
        return int(stripped)
    logger.warning("%s=%r is not a positive integer, ignoring", JOBS_ENV, raw)
    return 1


def log_level_from_env(default: int = logging.WARNING) -> int:
    """Logging level named by ``CPPBRIDGE_LOG_LEVEL``, or ``default``."""
    raw = os.environ.get(LOG_LEVEL_ENV)
    if not raw:
        return default
    level = logging.getLevelName(raw.strip().upper())
    if isinstance(level, int):
        return level
    logger.warning("%s=%r is not a logging level, ignoring", LOG_LEVEL_ENV, raw)
    return default
