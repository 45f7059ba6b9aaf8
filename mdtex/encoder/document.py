"""
Assemble a complete LaTeX document from a transformed body.
"""
from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from .escaper import escape_latex

DEFAULT_SOURCE_TITLE = "Source"

LATEX_PREAMBLE = r"""\documentclass[11pt,a4paper]{article}
\usepackage[utf8]{inputenc}
\usepackage[T1]{fontenc}
\usepackage{lmodern}
\usepackage[margin=1in]{geometry}
\usepackage{hyperref}
\usepackage{titlesec}
\usepackage{fancyhdr}
\usepackage{xcolor}

\definecolor{reportblue}{RGB}{0,75,120}
\hypersetup{colorlinks=true, linkcolor=reportblue, urlcolor=reportblue}

\titleformat{\section}{\Large\bfseries\color{reportblue}}{\thesection}{1em}{}
\titleformat{\subsection}{\large\bfseries\color{reportblue}}{\thesubsection}{1em}{}

\pagestyle{fancy}
\fancyhf{}
\rhead{Research Report}
\lfoot{\today}
\rfoot{\thepage}
\setlength{\parskip}{0.6em}
\setlength{\parindent}{0pt}

\begin{document}"""

LATEX_POSTAMBLE = r"\end{document}"


@dataclass(frozen=True)
class Source:
    """A bibliography entry rendered in the trailing Sources section."""

    url: str
    title: str = DEFAULT_SOURCE_TITLE

    @classmethod
    def coerce(cls, value: Any) -> "Source":
        """Build a Source from a Source, a mapping, or an object with attributes.

        A missing or empty title falls back to ``"Source"``; a missing URL
        becomes the empty string.  Nothing else is validated.
        """
        if isinstance(value, Source):
            return value
        if isinstance(value, Mapping):
            title, url = value.get("title"), value.get("url")
        else:
            title, url = getattr(value, "title", None), getattr(value, "url", None)
        return cls(url="" if url is None else str(url), title=str(title) if title else DEFAULT_SOURCE_TITLE)


@dataclass(frozen=True)
class MarkdownDocument:
    """Immutable encoder input: a title, a Markdown body and its sources."""

    title: str
    body: str
    sources: tuple[Source, ...] = field(default_factory=tuple)


def render_sources(sources: Iterable[Any]) -> str:
    """Render the Sources section, or an empty string when there are none."""
    items = [Source.coerce(s) for s in sources]
    if not items:
        return ""
    lines = [r"\section*{Sources}", r"\begin{enumerate}"]
    for source in items:
        lines.append(
            f"  \\item \\textbf{{{escape_latex(source.title)}}}: "
            f"\\href{{{source.url}}}{{{escape_latex(source.url)}}}"
        )
    lines.append(r"\end{enumerate}")
    return "\n".join(lines)


def assemble(title: str, body: str, sources: Iterable[Any] = ()) -> str:
    """Wrap an already-transformed LaTeX *body* in the fixed document template."""
    parts = [
        LATEX_PREAMBLE,
        f"\\title{{{escape_latex(title)}}}",
        r"\date{\today}",
        r"\maketitle",
        "",
        body,
        "",
    ]
    sources_section = render_sources(sources)
    if sources_section:
        parts.extend([sources_section, ""])
    parts.append(LATEX_POSTAMBLE)
    return "\n".join(parts) + "\n"
