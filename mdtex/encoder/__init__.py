"""Markdown → LaTeX encoder."""
from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from .blocks import transform_blocks
from .document import LATEX_POSTAMBLE, LATEX_PREAMBLE, MarkdownDocument, Source, assemble
from .escaper import escape_latex
from .inline import format_inline


def markdown_to_latex(title: str, markdown: str, sources: Iterable[Any] = ()) -> str:
    """Encode a Markdown body (plus optional sources) as a full LaTeX document."""
    return assemble(title, transform_blocks(markdown), sources)


__all__ = [
    "LATEX_POSTAMBLE",
    "LATEX_PREAMBLE",
    "MarkdownDocument",
    "Source",
    "assemble",
    "escape_latex",
    "format_inline",
    "markdown_to_latex",
    "transform_blocks",
]
