"""Buffered, idempotent file output.

Generated text is collected in memory and only reaches the disk when it
differs from what the target file already holds. Replacement goes through
a temporary file in the same directory and :func:`os.replace`, so readers
never observe a half-written header.
"""

from __future__ import annotations

import contextlib
import logging
import os
import stat
import tempfile
from pathlib import Path

from cppbridge.errors import GenerationError

logger = logging.getLogger(__name__)

# Process umask, captured at import.
_UMASK = os.umask(0)
os.umask(_UMASK)


class FileWriteCache:
    """In-memory buffer bound to a target path.

    Example
    -------
    ::

        cache = FileWriteCache(out_dir / "c_Listener.h")
        cache.write(text)
        changed = cache.update_file_if_necessary()
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path)
        self._chunks: list[str] = []

    def write(self, text: str) -> None:
        self._chunks.append(text)

    def getvalue(self) -> str:
        return "".join(self._chunks)

    def is_up_to_date(self) -> bool:
        """True if the target already holds exactly the buffered text."""
        try:
            with open(self.path, encoding="utf-8", newline="") as f:
                existing = f.read()
        except FileNotFoundError:
            return False
        except UnicodeDecodeError:
            return False
        return existing == self.getvalue()

    def update_file_if_necessary(self) -> bool:
        """Write the buffer to the target path unless it is unchanged.

        :returns: True if the file was (re)written, False if skipped.
        :raises OSError: If the temporary file cannot be written or moved
            into place. The target is left untouched in that case.
        """
        if self.is_up_to_date():
            logger.debug("%s is up to date, not rewriting", self.path)
            return False

        try:
            mode = stat.S_IMODE(self.path.stat().st_mode)
        except FileNotFoundError:
            mode = 0o666 & ~_UMASK
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as tmp:
                tmp.write(self.getvalue())
            os.chmod(tmp_name, mode)
            os.replace(tmp_name, self.path)
        except BaseException:
            with contextlib.suppress(OSError):
                os.remove(tmp_name)
            raise
        logger.info("wrote %s", self.path)
        return True


def update_files(output_dir: str | os.PathLike[str], files: dict[str, str]) -> dict[str, bool]:
    """Persist several fully built buffers into ``output_dir``.

    Files are written in the given order. The first failure aborts the
    remaining writes.

    :param output_dir: Directory receiving the files.
    :param files: Mapping of file name to complete file text.
    :returns: Mapping of file name to whether it was rewritten.
    :raises GenerationError: If any write fails.
    """
    changed: dict[str, bool] = {}
    for file_name, text in files.items():
        cache = FileWriteCache(Path(output_dir) / file_name)
        cache.write(text)
        try:
            changed[file_name] = cache.update_file_if_necessary()
        except OSError as e:
            raise GenerationError(f"write failed: {e}") from e
    return changed
