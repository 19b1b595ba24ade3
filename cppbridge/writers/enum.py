"""Generate standalone C enum headers from enum descriptors.

Enumerators are numbered by declaration position; explicit or sparse
values are not supported.
"""

from __future__ import annotations

import os

from cppbridge.codegen import CodeGen
from cppbridge.comments import format_doc_comments
from cppbridge.errors import GenerationError
from cppbridge.file_cache import update_files
from cppbridge.ir import BindingModule, EnumDescriptor


def enum_header_name(enum: EnumDescriptor) -> str:
    """File name of the header generated for ``enum``."""
    return f"c_{enum.name}.h"


def enum_to_c_header(enum: EnumDescriptor) -> str:
    """Render a C header declaring ``enum``.

    :raises GenerationError: If the enum has no items.
    """
    if not enum.items:
        raise GenerationError(f"enum {enum.name!r} has no items")

    gen = CodeGen()
    gen.header_preamble()
    gen.line()
    gen.comment_block(format_doc_comments(enum.doc_comments, True))

    last = len(enum.items) - 1
    with gen.block(f"enum {enum.name} {{", "};"):
        for i, item in enumerate(enum.items):
            gen.comment_block(format_doc_comments(item.doc_comments, False))
            if i == last:
                gen.line(f"{item.name} = {i}")
                gen.line()
            else:
                gen.line(f"{item.name} = {i},")

    return gen.output()


def generate_code_for_enum(output_dir: str | os.PathLike[str], enum: EnumDescriptor) -> bool:
    """Write ``c_<Name>.h`` for ``enum`` into ``output_dir``.

    :returns: True if the file was rewritten, False if it was unchanged.
    :raises GenerationError: On an invalid descriptor or a failed write.
    """
    file_name = enum_header_name(enum)
    changed = update_files(output_dir, {file_name: enum_to_c_header(enum)})
    return changed[file_name]


class EnumWriter:
    """Writer that generates one C header per enum.

    Example
    -------
    ::

        from cppbridge.writers import get_writer

        files = get_writer("enum").write(module)
    """

    def write(self, module: BindingModule) -> dict[str, str]:
        """Render every enum of ``module``."""
        return {enum_header_name(enum): enum_to_c_header(enum) for enum in module.enums}

    @property
    def name(self) -> str:
        return "enum"

    @property
    def format_description(self) -> str:
        return "C enum headers"


# Uses bottom-of-module self-registration; register_writer lives in the
# package __init__, which imports this module lazily.
from cppbridge.writers import register_writer  # noqa: E402

register_writer("enum", EnumWriter, description="C enum headers")
