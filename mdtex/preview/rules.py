"""
Ordered regex rewrite rules used to sanitize LaTeX before previewing.

Every stage of the preview pipeline is a tuple of ``RewriteRule`` applied
strictly in sequence.  Later rules may rely on earlier ones having run
(e.g. tables are unwrapped before ``&`` is turned into a cell separator).
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Iterable, Union

Replacement = Union[str, Callable[[re.Match[str]], str]]

POLYFILL_COMMANDS = "\\newcommand{\\href}[2]{#2}\n\\newcommand{\\url}[1]{#1}"


@dataclass(frozen=True)
class RewriteRule:
    """A single regex substitution.

    *replacement* is either an ``re`` template or a callable; *count* of 0
    rewrites every occurrence, 1 only the first.
    """

    name: str
    pattern: re.Pattern[str]
    replacement: Replacement
    count: int = 0
    rationale: str = ""

    def apply(self, text: str) -> str:
        return self.pattern.sub(self.replacement, text, count=self.count)


def apply_rules(text: str, rules: Iterable[RewriteRule]) -> str:
    """Apply *rules* to *text* in order."""
    for rule in rules:
        text = rule.apply(text)
    return text


def _rule(
    name: str,
    pattern: str,
    replacement: Replacement = "",
    *,
    count: int = 0,
    flags: int = 0,
    rationale: str = "",
) -> RewriteRule:
    return RewriteRule(name, re.compile(pattern, flags), replacement, count, rationale)


def _literal(text: str) -> Callable[[re.Match[str]], str]:
    """Replacement that inserts *text* verbatim (no template escapes)."""
    return lambda _m: text


# ---------------------------------------------------------------------------
# Step 1 – packages and package configuration
# ---------------------------------------------------------------------------

PACKAGE_RULES: tuple[RewriteRule, ...] = (
    _rule(
        "usepackage-with-options",
        r"\\usepackage\[.*?\]\{.*?\}",
        rationale="the preview engine only ships a handful of packages",
    ),
    _rule("usepackage", r"\\usepackage\{.*?\}", rationale="same, without options"),
    _rule("geometry", r"\\geometry\{[^}]+\}", rationale="page geometry is meaningless in HTML"),
    _rule("hypersetup", r"\\hypersetup\{[^}]+\}", rationale="hyperref is not loaded"),
)

# ---------------------------------------------------------------------------
# Step 3 – formatting commands the engine rejects
# ---------------------------------------------------------------------------

FORMATTING_RULES: tuple[RewriteRule, ...] = (
    _rule("titleformat", r"\\titleformat[\s\S]*?\n\n", rationale="titlesec, up to the next blank line"),
    _rule("pagestyle", r"\\pagestyle\{[^}]+\}", rationale="no pages in a preview"),
    _rule("fancyhf", r"\\fancyhf\{\}", rationale="fancyhdr"),
    _rule("headers-footers", r"\\[rl](head|foot)\{.*?\}", rationale="fancyhdr"),
    _rule("setlength", r"\\setlength\{.*?\}", rationale="lengths are not tracked"),
    _rule(
        "definecolor",
        r"\\definecolor\{[^}]+\}\{[^}]+\}\{[^}]+\}",
        rationale="xcolor is not loaded",
    ),
)

# ---------------------------------------------------------------------------
# Step 4 – raw passthrough polyfill injection
# ---------------------------------------------------------------------------

INJECT_POLYFILLS = _rule(
    "inject-polyfills",
    r"(\\documentclass.*?\})",
    lambda m: m.group(1) + "\n" + POLYFILL_COMMANDS,
    count=1,
    flags=re.DOTALL,
    rationale="define \\href and \\url right after the class declaration",
)

# ---------------------------------------------------------------------------
# Attempt 2 – degrade the body into a bare fragment
# ---------------------------------------------------------------------------

STRUCTURE_RULES: tuple[RewriteRule, ...] = (
    _rule("documentclass", r"\\documentclass[\s\S]*?\{.*?\}", count=1),
    _rule("begin-document", r"\\begin\s*\{document\}", count=1),
    _rule("end-document", r"\\end\s*\{document\}", count=1),
    _rule("maketitle", r"\\maketitle", rationale="metadata macros break fragment parsing"),
    _rule("title", r"\\title\{.*?\}"),
    _rule("date", r"\\date\{.*?\}"),
    _rule("author", r"\\author\{.*?\}"),
)

LINK_RULES: tuple[RewriteRule, ...] = (
    _rule("href", r"\\href\{[^}]+\}\{(.+?)\}", r"\1", rationale="macro polyfills are unreliable in fragments"),
    _rule("url", r"\\url\{(.*?)\}", r"\1"),
)

ENVIRONMENT_RULES: tuple[RewriteRule, ...] = (
    _rule("begin-abstract", r"\\begin\{abstract\}", _literal("\\textbf{Abstract}\n\n")),
    _rule("end-abstract", r"\\end\{abstract\}", _literal("\n\n")),
    _rule("begin-quote", r"\\begin\{quote\}"),
    _rule("end-quote", r"\\end\{quote\}"),
    _rule("begin-table", r"\\begin\{table\}(\[.*?\])?"),
    _rule("end-table", r"\\end\{table\}"),
    _rule("centering", r"\\centering"),
    _rule("begin-tabular", r"\\begin\{tabular\}\{.*?\}"),
    _rule("end-tabular", r"\\end\{tabular\}"),
    _rule("hline", r"\\hline"),
)

SEPARATOR_RULES: tuple[RewriteRule, ...] = (
    _rule("cell-separator", r"&", _literal(" | "), rationale="tables become pipe-separated text"),
    _rule("row-end", r"\\\\", _literal("\n\n"), rationale="each table row becomes a paragraph"),
)

FALLBACK_RULES: tuple[RewriteRule, ...] = (
    STRUCTURE_RULES + LINK_RULES + ENVIRONMENT_RULES + SEPARATOR_RULES
)
