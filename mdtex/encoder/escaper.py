"""
Escape literal text so it can be embedded in a LaTeX document.

The substitution table is part of the output contract: documents already
produced by the encoder depend on these exact sequences.
"""
from __future__ import annotations

import re

# Order matters: the table is matched in a single pass, so the braces and
# backslashes introduced by one entry are never re-escaped by a later one.
LATEX_SPECIAL_CHARS: tuple[tuple[str, str], ...] = (
    ("\\", r"\textbackslash{}"),
    ("{", r"\{"),
    ("}", r"\}"),
    ("$", r"\$"),
    ("&", r"\&"),
    ("#", r"\#"),
    ("^", r"\textasciicircum{}"),
    ("_", r"\_"),
    ("~", r"\textasciitilde{}"),
    ("%", r"\%"),
)

_REPLACEMENTS = dict(LATEX_SPECIAL_CHARS)
_SPECIAL_RE = re.compile("|".join(re.escape(ch) for ch, _ in LATEX_SPECIAL_CHARS))


def escape_latex(text: str) -> str:
    """Return *text* with every reserved LaTeX character escaped.

    Escape exactly once: feeding the result back in escapes the inserted
    backslashes and braces a second time.
    """
    return _SPECIAL_RE.sub(lambda m: _REPLACEMENTS[m.group(0)], text)
