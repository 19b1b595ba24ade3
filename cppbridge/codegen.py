"""Line-oriented code builder used by the header writers."""

from __future__ import annotations

from types import TracebackType

# Banner placed at the top of every generated header.
GENERATED_BANNER = "// Automatically generated by cppbridge"


class CodeGen:
    """Accumulates lines of generated code with indentation support."""

    def __init__(self, indent_str: str = "    ") -> None:
        self._lines: list[str] = []
        self._indent = 0
        self._indent_str = indent_str

    def line(self, text: str = "") -> None:
        """Add a line at the current indentation. Empty lines stay empty."""
        if text:
            self._lines.append(self._indent_str * self._indent + text)
        else:
            self._lines.append("")

    def raw(self, text: str) -> None:
        """Add pre-formatted text verbatim; embedded newlines split lines."""
        self._lines.extend(text.split("\n"))

    def comment_block(self, comments: str) -> None:
        """Add a pre-rendered comment block, skipping it when empty."""
        if comments:
            self.raw(comments)

    def indent(self) -> None:
        self._indent += 1

    def dedent(self) -> None:
        if self._indent > 0:
            self._indent -= 1

    def block(self, header: str, footer: str = "}") -> _BlockContext:
        """Context manager emitting ``header``, an indented body, then ``footer``."""
        return _BlockContext(self, header, footer)

    def header_preamble(self) -> None:
        """Emit the generated-file banner and include guard."""
        self.line(GENERATED_BANNER)
        self.line("#pragma once")

    def output(self) -> str:
        """Generated text, newline-terminated."""
        if not self._lines:
            return ""
        return "\n".join(self._lines) + "\n"


class _BlockContext:
    def __init__(self, gen: CodeGen, header: str, footer: str) -> None:
        self._gen = gen
        self._header = header
        self._footer = footer

    def __enter__(self) -> _BlockContext:
        self._gen.line(self._header)
        self._gen.indent()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self._gen.dedent()
        self._gen.line(self._footer)
