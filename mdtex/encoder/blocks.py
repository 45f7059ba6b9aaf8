"""
Line-oriented Markdown → LaTeX block transformer.

Each trimmed line is classified as a heading, a list item, a blank line or a
paragraph.  Consecutive list items share one ``itemize`` environment; the
environment is closed by the first line that is not a list item, or at the
end of the input.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Union

from .inline import format_inline

LIST_OPEN = r"\begin{itemize}"
LIST_CLOSE = r"\end{itemize}"

_HEADING_COMMANDS = {1: "section*", 2: "subsection*"}
_DEEPEST_HEADING = "subsubsection*"
_HEADING_RE = re.compile(r"^#+")


@dataclass(frozen=True)
class Heading:
    level: int
    text: str


@dataclass(frozen=True)
class ListItem:
    text: str


@dataclass(frozen=True)
class Blank:
    pass


@dataclass(frozen=True)
class Paragraph:
    text: str


BlockLine = Union[Heading, ListItem, Blank, Paragraph]


def classify_line(line: str) -> BlockLine:
    """Classify one raw Markdown line by its leading characters."""
    trimmed = line.strip()
    if not trimmed:
        return Blank()
    m = _HEADING_RE.match(trimmed)
    if m:
        level = len(m.group(0))
        return Heading(level=level, text=trimmed[level:].strip())
    if trimmed.startswith("- "):
        return ListItem(trimmed[2:])
    return Paragraph(trimmed)


def transform_blocks(markdown: str) -> str:
    """Convert a Markdown body to LaTeX blocks joined by newlines."""
    out: list[str] = []
    in_list = False

    for line in markdown.split("\n"):
        block = classify_line(line)

        if isinstance(block, ListItem):
            if not in_list:
                out.append(LIST_OPEN)
                in_list = True
            out.append(f"  \\item {format_inline(block.text)}")
            continue

        if in_list:
            out.append(LIST_CLOSE)
            in_list = False

        if isinstance(block, Heading):
            command = _HEADING_COMMANDS.get(block.level, _DEEPEST_HEADING)
            out.append(f"\\{command}{{{format_inline(block.text)}}}")
        elif isinstance(block, Blank):
            out.append("")
        else:
            # Trailing newline leaves a blank line after the paragraph
            out.append(format_inline(block.text) + "\n")

    if in_list:
        out.append(LIST_CLOSE)

    return "\n".join(out)
