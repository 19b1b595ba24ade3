"""Render documentation comments as C line comments."""

from __future__ import annotations

from collections.abc import Sequence

# Indentation of comments attached to struct/class/enum members.
MEMBER_INDENT = "    "


def _is_blank_block_line(line: str) -> bool:
    return not line.strip().strip("*")


def strip_doc_comment_decoration(comment: str) -> list[str]:
    """Strip documentation markers from a raw doc comment.

    ``/// text`` and ``//! text`` lose their three-character marker; the
    leading space is kept so the text lines up after ``//``. Block comments
    (``/** ... */`` and ``/*! ... */``) lose their delimiters, blank first
    and last lines, and a ``*`` gutter shared by all remaining lines.
    Anything else is returned unchanged.

    :param comment: One raw documentation comment.
    :returns: The comment text, one entry per line.
    """
    if comment.startswith(("///", "//!")):
        return [comment[3:]]

    if comment.startswith(("/**", "/*!")) and comment.endswith("*/") and len(comment) >= 5:
        lines = comment[3:-2].split("\n")
        if len(lines) > 1:
            if _is_blank_block_line(lines[0]):
                lines = lines[1:]
            if lines and _is_blank_block_line(lines[-1]):
                lines = lines[:-1]
        if len(lines) > 1 and all(line.lstrip().startswith("*") for line in lines):
            lines = [line.lstrip()[1:] for line in lines]
        return lines

    return [comment]


def format_doc_comments(doc_comments: Sequence[str], top_level: bool) -> str:
    """Convert raw doc comments into a block of ``//`` comments.

    :param doc_comments: Raw documentation lines.
    :param top_level: True for comments on the enum/struct/class itself;
        False for member comments, which get a 4-space indent.
    :returns: Newline-joined comment lines without a trailing newline,
        or ``""`` when there is nothing to emit.
    """
    indent = "" if top_level else MEMBER_INDENT
    lines: list[str] = []
    for comment in doc_comments:
        for text in strip_doc_comment_decoration(comment):
            lines.append(f"{indent}//{text}")
    return "\n".join(lines)
