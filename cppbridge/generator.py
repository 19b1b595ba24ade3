"""Run every registered writer over a binding module and persist the output.

Each enum and each interface is an independent unit: it is rendered on its
own and maps to its own files, so units can be processed concurrently.
All units are rendered before anything is written; a descriptor error
therefore leaves the output directory untouched.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

from cppbridge.config import GeneratorConfig
from cppbridge.errors import GenerationError
from cppbridge.file_cache import update_files
from cppbridge.ir import BindingModule
from cppbridge.writers import WriterBackend, get_writer, list_writers

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    """Outcome of a generation run.

    :param written: File names that were created or rewritten.
    :param unchanged: File names whose content was already current.
    :param files: Every rendered file, by name.
    """

    written: list[str] = field(default_factory=list)
    unchanged: list[str] = field(default_factory=list)
    files: dict[str, str] = field(default_factory=dict)


def split_units(module: BindingModule) -> list[BindingModule]:
    """Split ``module`` into one single-descriptor module per enum/interface."""
    units: list[BindingModule] = []
    for enum in module.enums:
        units.append(BindingModule(namespace=module.namespace, enums=[enum]))
    for interface in module.interfaces:
        units.append(
            BindingModule(
                namespace=module.namespace,
                interfaces=[interface],
                signatures={interface.name: module.signatures_for(interface)},
            )
        )
    return units


class Generator:
    """Generates all headers for a :class:`BindingModule`.

    Example
    -------
    ::

        config = GeneratorConfig.from_env("out", namespace="app")
        result = Generator(config).generate(load_module("bindings.json"))
    """

    def __init__(self, config: GeneratorConfig) -> None:
        self.config = config

    def _writers(self, namespace: str) -> list[WriterBackend]:
        options: dict[str, dict[str, object]] = {"interface": {"namespace": namespace}}
        return [get_writer(name, **options.get(name, {})) for name in list_writers()]

    def render(self, module: BindingModule) -> dict[str, str]:
        """Render every unit of ``module`` without touching the disk.

        :raises GenerationError: If any unit fails or two units produce
            the same file name.
        """
        writers = self._writers(self.config.resolve_namespace(module.namespace))
        units = split_units(module)

        def render_unit(unit: BindingModule) -> dict[str, str]:
            files: dict[str, str] = {}
            for writer in writers:
                files.update(writer.write(unit))
            logger.debug("rendered %s", ", ".join(files))
            return files

        with ThreadPoolExecutor(max_workers=max(1, self.config.jobs)) as executor:
            rendered = list(executor.map(render_unit, units))

        files: dict[str, str] = {}
        for unit_files in rendered:
            for file_name, text in unit_files.items():
                if file_name in files:
                    raise GenerationError(f"more than one declaration generates {file_name}")
                files[file_name] = text
        return files

    def generate(self, module: BindingModule) -> GenerationResult:
        """Render ``module`` and write changed files to the output directory.

        :raises GenerationError: On invalid descriptors or failed writes.
        """
        result = GenerationResult(files=self.render(module))
        if self.config.dry_run:
            logger.info("dry run: %d files rendered, nothing written", len(result.files))
            return result

        items = list(result.files.items())
        with ThreadPoolExecutor(max_workers=max(1, self.config.jobs)) as executor:
            outcomes = list(
                executor.map(lambda item: update_files(self.config.output_dir, {item[0]: item[1]}), items)
            )

        for outcome in outcomes:
            for file_name, changed in outcome.items():
                (result.written if changed else result.unchanged).append(file_name)
        logger.info(
            "%d files written, %d unchanged in %s",
            len(result.written),
            len(result.unchanged),
            self.config.output_dir,
        )
        return result
