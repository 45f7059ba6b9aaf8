"""
Format a single line of Markdown into inline LaTeX.

Pipeline for each line:
  1. Start with one ``Text`` span holding the whole line.
  2. Split ``Text`` spans on links ``[text](url)``.
  3. Split the remaining ``Text`` spans on bold ``**text**``.
  4. Split the remaining ``Text`` spans on italic ``*text*``.
  5. Render every span, escaping only the text it carries (never URLs).

A substring consumed by an earlier pass is never scanned again, so italic
can not fire inside a bold span.  Ambiguous input such as ``*a**b*`` is
resolved purely by this pass order; it is not CommonMark.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Union

from .escaper import escape_latex


@dataclass(frozen=True)
class Text:
    content: str


@dataclass(frozen=True)
class Bold:
    content: str


@dataclass(frozen=True)
class Italic:
    content: str


@dataclass(frozen=True)
class Link:
    text: str
    url: str


InlineSpan = Union[Text, Bold, Italic, Link]

_LINK_RE = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")
_BOLD_RE = re.compile(r"\*\*(.*?)\*\*")
# A lone '*' (not part of '**') up to the next '*'
_ITALIC_RE = re.compile(r"(?<!\*)\*(?!\*)(.*?)\*")

_PASSES: tuple[tuple[re.Pattern[str], Callable[[re.Match[str]], InlineSpan]], ...] = (
    (_LINK_RE, lambda m: Link(text=m.group(1), url=m.group(2))),
    (_BOLD_RE, lambda m: Bold(m.group(1))),
    (_ITALIC_RE, lambda m: Italic(m.group(1))),
)


def split_spans(line: str) -> list[InlineSpan]:
    """Tokenize *line* into typed spans, in link → bold → italic order."""
    spans: list[InlineSpan] = [Text(line)]
    for pattern, make_span in _PASSES:
        spans = _split_text_spans(spans, pattern, make_span)
    return spans


def format_inline(line: str) -> str:
    """Render one line of Markdown as LaTeX."""
    return "".join(render_span(span) for span in split_spans(line))


def render_span(span: InlineSpan) -> str:
    if isinstance(span, Text):
        return escape_latex(span.content)
    if isinstance(span, Bold):
        return f"\\textbf{{{escape_latex(span.content)}}}"
    if isinstance(span, Italic):
        return f"\\textit{{{escape_latex(span.content)}}}"
    if isinstance(span, Link):
        return f"\\href{{{span.url}}}{{{escape_latex(span.text)}}}"
    raise TypeError(f"Unknown inline span: {span!r}")


def _split_text_spans(
    spans: list[InlineSpan],
    pattern: re.Pattern[str],
    make_span: Callable[[re.Match[str]], InlineSpan],
) -> list[InlineSpan]:
    out: list[InlineSpan] = []
    for span in spans:
        if not isinstance(span, Text):
            out.append(span)
            continue
        text = span.content
        last = 0
        for m in pattern.finditer(text):
            if m.start() > last:
                out.append(Text(text[last:m.start()]))
            out.append(make_span(m))
            last = m.end()
        if last < len(text):
            out.append(Text(text[last:]))
    return out
