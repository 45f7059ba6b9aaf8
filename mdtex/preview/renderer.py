"""
Lightweight LaTeX → HTML engine used for live previews.

The engine tokenizes with pylatexenc's ``LatexWalker`` in non-tolerant mode,
so unbalanced braces, unterminated environments and runaway math raise, and
then walks the node tree emitting HTML.  It understands a deliberately small
subset of LaTeX: sectioning, basic text styles, lists, quotes, title
metadata, ``\\newcommand`` macros and verbatim math.  Anything else is an
error, which is what lets the caller fall back to a degraded rendering.

A ``PreviewRenderer`` is stateful: it remembers the declared document class,
whether a ``document`` environment was seen, user-defined macros and section
counters.  Parsing a second full document with the same instance fails with
"Two \\documentclass commands", so construct one instance per parse.
"""
from __future__ import annotations

import datetime
import html
import re
from dataclasses import dataclass
from typing import Iterable, Optional

from pylatexenc.latexwalker import (
    LatexCharsNode,
    LatexCommentNode,
    LatexEnvironmentNode,
    LatexGroupNode,
    LatexMacroNode,
    LatexMathNode,
    LatexSpecialsNode,
    LatexWalker,
    LatexWalkerError,
)
from pylatexenc.macrospec import EnvironmentSpec, LatexContextDb, MacroSpec

# Argument specs for the macros the engine knows; every other macro is parsed
# without arguments, so user macros pick theirs up from the following groups.
_MACRO_ARGS: dict[str, str] = {
    "documentclass": "[{",
    "usepackage": "[{",
    "newcommand": "*{[[{",
    "renewcommand": "*{[[{",
    "title": "{",
    "author": "{",
    "date": "{",
    "section": "*[{",
    "subsection": "*[{",
    "subsubsection": "*[{",
    "paragraph": "*[{",
    "textbf": "{",
    "textit": "{",
    "emph": "{",
    "texttt": "{",
    "underline": "{",
    "textsc": "{",
    "label": "{",
    "item": "[",
}

_INLINE_TAGS: dict[str, tuple[str, str]] = {
    "textbf": ("<strong>", "</strong>"),
    "textit": ("<em>", "</em>"),
    "emph": ("<em>", "</em>"),
    "texttt": ("<code>", "</code>"),
    "underline": ("<u>", "</u>"),
    "textsc": ('<span class="textsc">', "</span>"),
}

# heading tag, counter index (None = never numbered)
_SECTIONS: dict[str, tuple[str, Optional[int]]] = {
    "section": ("h2", 0),
    "subsection": ("h3", 1),
    "subsubsection": ("h4", 2),
    "paragraph": ("h5", None),
}

# Already HTML-safe output for symbol macros
_LITERAL_MACROS: dict[str, str] = {
    "{": "{",
    "}": "}",
    "$": "$",
    "&": "&amp;",
    "#": "#",
    "_": "_",
    "%": "%",
    " ": " ",
    ",": " ",
    "textbackslash": "\\",
    "textasciicircum": "^",
    "textasciitilde": "~",
    "ldots": "…",
    "dots": "…",
    "LaTeX": "LaTeX",
    "TeX": "TeX",
    "quad": "&emsp;",
}

_NOOP_MACROS = frozenset(
    {"tableofcontents", "newpage", "clearpage", "noindent", "label", "smallskip", "medskip", "bigskip"}
)
_LINE_BREAK_MACROS = frozenset({"\\", "newline", "linebreak"})
_PREAMBLE_MACROS = frozenset({"documentclass", "usepackage", "newcommand", "renewcommand", "title", "author", "date"})
_DOCUMENT_CLASSES = frozenset({"article", "report", "book"})
BUILTIN_PACKAGES = frozenset({"inputenc", "fontenc", "lmodern", "amsmath", "amssymb", "latexsym", "textcomp"})

_BUILTIN_MACROS = frozenset(
    set(_MACRO_ARGS)
    | set(_LITERAL_MACROS)
    | _NOOP_MACROS
    | _LINE_BREAK_MACROS
    | {"today", "maketitle", "par"}
)

_LISTS = {"itemize": "ul", "enumerate": "ol", "description": "dl"}
_BLOCKS = {
    "quote": ("<blockquote>", "</blockquote>"),
    "quotation": ("<blockquote>", "</blockquote>"),
    "center": ('<div class="center">', "</div>"),
    "flushleft": ('<div class="flushleft">', "</div>"),
    "flushright": ('<div class="flushright">', "</div>"),
}

_PARAGRAPH_BREAK_RE = re.compile(r"\n[ \t\r]*\n\s*")
_PARAM_RE = re.compile(r"#([1-9])")
_TYPOGRAPHY = (("---", "—"), ("--", "–"), ("``", "“"), ("''", "”"), ("~", "&nbsp;"))

DEFAULT_MAX_MACRO_DEPTH = 32


class LatexRenderError(ValueError):
    """The preview engine could not parse or render its input."""


@dataclass(frozen=True)
class RenderedDocument:
    body_html: str
    title_html: Optional[str] = None


@dataclass(frozen=True)
class _UserMacro:
    nargs: int
    body: str


def _latex_context() -> LatexContextDb:
    db = LatexContextDb()
    db.add_context_category(
        "mdtex-preview",
        macros=[MacroSpec(name, args) for name, args in _MACRO_ARGS.items()],
        environments=[],
        specials=[],
    )
    db.set_unknown_macro_spec(MacroSpec(""))
    db.set_unknown_environment_spec(EnvironmentSpec(""))
    return db


class PreviewRenderer:
    """Single-use LaTeX → HTML renderer.

    *packages* extends the set of package names ``\\usepackage`` accepts;
    *today* pins the date printed by ``\\today``.
    """

    def __init__(
        self,
        *,
        max_macro_depth: int = DEFAULT_MAX_MACRO_DEPTH,
        packages: Iterable[str] = (),
        today: Optional[datetime.date] = None,
    ) -> None:
        self.max_macro_depth = max_macro_depth
        self.packages = BUILTIN_PACKAGES | frozenset(packages)
        self.today = today or datetime.date.today()
        self._context = _latex_context()
        self._class_declared = False
        self._document_seen = False
        self._document_done = False
        self._macros: dict[str, _UserMacro] = {}
        self._meta: dict[str, str] = {}
        self._counters = [0, 0, 0]
        self._depth = 0
        self._capturing = 0

    def parse(self, latex: str) -> RenderedDocument:
        """Render *latex* and return the HTML body.

        Raises ``LatexRenderError`` on any parse or render failure.
        """
        out = _Output()
        self._document_done = False
        self._render_nodes(self._parse(latex), out)
        if self._class_declared and not self._document_seen:
            raise LatexRenderError("Missing \\begin{document}")
        return RenderedDocument(body_html=out.html(), title_html=self._meta.get("title"))

    # ------------------------------------------------------------------
    # Parsing
    # ------------------------------------------------------------------

    def _parse(self, latex: str) -> list:
        walker = LatexWalker(latex, latex_context=self._context, tolerant_parsing=False)
        try:
            nodes, _pos, _len = walker.get_latex_nodes()
        except LatexWalkerError as exc:
            raise LatexRenderError(str(exc)) from exc
        return list(nodes)

    @property
    def _in_preamble(self) -> bool:
        return self._class_declared and not self._document_seen and not self._capturing

    # ------------------------------------------------------------------
    # Node walking
    # ------------------------------------------------------------------

    def _render_nodes(self, nodes: list, out: _Output) -> None:
        i = 0
        while i < len(nodes):
            if self._document_done:
                return
            node = nodes[i]
            i += 1
            if isinstance(node, LatexCommentNode):
                continue
            if isinstance(node, LatexCharsNode):
                self._chars(node.chars, out)
            elif isinstance(node, LatexSpecialsNode):
                self._chars(node.specials_chars, out)
            elif isinstance(node, LatexGroupNode):
                self._render_nodes(list(node.nodelist), out)
            elif isinstance(node, LatexMathNode):
                self._math(node, out)
            elif isinstance(node, LatexEnvironmentNode):
                self._environment(node, out)
            elif isinstance(node, LatexMacroNode):
                user = self._macros.get(node.macroname)
                if user is None:
                    self._macro(node, out)
                else:
                    args, i = self._take_arguments(node, nodes, i, user.nargs)
                    self._expand(node.macroname, user, args, out)

    def _render_inline(self, nodes: list) -> str:
        sub = _Output()
        self._capturing += 1
        try:
            self._render_nodes(nodes, sub)
        finally:
            self._capturing -= 1
        return sub.inline_html()

    def _chars(self, text: str, out: _Output) -> None:
        if self._in_preamble:
            if text.strip():
                raise LatexRenderError("Missing \\begin{document}: text found in the preamble")
            return
        if "&" in text:
            raise LatexRenderError("Misplaced alignment tab character &")
        for k, piece in enumerate(_PARAGRAPH_BREAK_RE.split(text)):
            if k:
                out.paragraph_break()
            if piece:
                out.inline(_typeset(piece))

    def _math(self, node: LatexMathNode, out: _Output) -> None:
        if self._in_preamble:
            raise LatexRenderError("Missing \\begin{document}: math found in the preamble")
        source = html.escape(node.latex_verbatim(), quote=False)
        if node.displaytype == "display":
            out.block(f'<div class="math display">{source}</div>')
        else:
            out.inline(f'<span class="math">{source}</span>')

    # ------------------------------------------------------------------
    # Macros
    # ------------------------------------------------------------------

    def _macro(self, node: LatexMacroNode, out: _Output) -> None:
        name = node.macroname
        if self._in_preamble and name not in _PREAMBLE_MACROS:
            raise LatexRenderError(f"\\{name} is not allowed before \\begin{{document}}")

        if name == "documentclass":
            self._documentclass(node)
        elif name == "usepackage":
            self._usepackage(node)
        elif name in ("newcommand", "renewcommand"):
            self._define(node, renew=name == "renewcommand")
        elif name in ("title", "author", "date"):
            self._meta[name] = self._render_inline(_argument(node, 0) or [])
        elif name == "today":
            out.inline(self._today_text())
        elif name == "maketitle":
            out.block(self._title_block())
        elif name in _SECTIONS:
            out.block(self._heading(node))
        elif name in _INLINE_TAGS:
            open_tag, close_tag = _INLINE_TAGS[name]
            out.inline(open_tag + self._render_inline(_argument(node, 0) or []) + close_tag)
        elif name in _LITERAL_MACROS:
            out.inline(_LITERAL_MACROS[name])
        elif name in _LINE_BREAK_MACROS:
            out.inline("<br>")
        elif name == "par":
            out.paragraph_break()
        elif name == "item":
            raise LatexRenderError("\\item outside of a list environment")
        elif name in _NOOP_MACROS:
            return
        else:
            raise LatexRenderError(f"Unknown macro: \\{name}")

    def _documentclass(self, node: LatexMacroNode) -> None:
        if self._class_declared:
            raise LatexRenderError("Two \\documentclass commands. The document may only declare one class.")
        name = _verbatim(_argument(node, 1) or []).strip()
        if name not in _DOCUMENT_CLASSES:
            raise LatexRenderError(f"Unknown document class: {name or '(empty)'}")
        self._class_declared = True

    def _usepackage(self, node: LatexMacroNode) -> None:
        if not self._in_preamble:
            raise LatexRenderError("\\usepackage may only appear in the preamble")
        names = [p.strip() for p in _verbatim(_argument(node, 1) or []).split(",") if p.strip()]
        for name in names:
            if name not in self.packages:
                raise LatexRenderError(f"Package {name} is not available in the preview")

    def _define(self, node: LatexMacroNode, *, renew: bool) -> None:
        command = node.macroname
        target = next(
            (n for n in _argument(node, 1) or [] if isinstance(n, LatexMacroNode)),
            None,
        )
        if target is None:
            raise LatexRenderError(f"\\{command}: missing command name")
        name = target.macroname
        exists = name in self._macros or name in _BUILTIN_MACROS
        if renew and not exists:
            raise LatexRenderError(f"\\renewcommand: \\{name} is not defined")
        if not renew and exists:
            raise LatexRenderError(f"\\newcommand: \\{name} is already defined")

        nargs = 0
        nargs_nodes = _argument(node, 2)
        if nargs_nodes is not None:
            raw = _verbatim(nargs_nodes).strip()
            if not (raw.isdigit() and 0 <= int(raw) <= 9):
                raise LatexRenderError(f"\\{command}: invalid argument count '{raw}'")
            nargs = int(raw)
        if _argument(node, 3) is not None:
            raise LatexRenderError(f"\\{command}: optional arguments are not supported")

        self._macros[name] = _UserMacro(nargs=nargs, body=_verbatim(_argument(node, 4) or []))

    def _take_arguments(
        self, node: LatexMacroNode, nodes: list, i: int, nargs: int
    ) -> tuple[list[str], int]:
        """Collect *nargs* brace groups for a user macro starting at ``nodes[i]``."""
        args = [
            _verbatim(arg.nodelist if isinstance(arg, LatexGroupNode) else [arg])
            for arg in (node.nodeargd.argnlist if node.nodeargd is not None else [])
            if arg is not None
        ][:nargs]
        while len(args) < nargs:
            while i < len(nodes) and _is_blank(nodes[i]):
                i += 1
            if i >= len(nodes) or not isinstance(nodes[i], LatexGroupNode):
                raise LatexRenderError(f"\\{node.macroname}: expected {nargs} argument(s)")
            args.append(_verbatim(nodes[i].nodelist))
            i += 1
        return args, i

    def _expand(self, name: str, macro: _UserMacro, args: list[str], out: _Output) -> None:
        if self._depth >= self.max_macro_depth:
            raise LatexRenderError(f"\\{name}: macro expansion nested too deeply")

        def _substitute(m: re.Match[str]) -> str:
            index = int(m.group(1))
            if index > len(args):
                raise LatexRenderError(f"\\{name}: illegal parameter number #{index}")
            return args[index - 1]

        expanded = _PARAM_RE.sub(_substitute, macro.body)
        self._depth += 1
        try:
            self._render_nodes(self._parse(expanded), out)
        finally:
            self._depth -= 1

    def _heading(self, node: LatexMacroNode) -> str:
        tag, level = _SECTIONS[node.macroname]
        text = self._render_inline(_argument(node, 2) or [])
        starred = _argument(node, 0) is not None
        if level is not None and not starred:
            self._counters[level] += 1
            for deeper in range(level + 1, len(self._counters)):
                self._counters[deeper] = 0
            number = ".".join(str(c) for c in self._counters[: level + 1])
            text = f'<span class="secnum">{number}</span> {text}'
        return f"<{tag}>{text}</{tag}>"

    def _title_block(self) -> str:
        if "title" not in self._meta:
            raise LatexRenderError("\\maketitle: no \\title given")
        parts = [f'<h1 class="title">{self._meta["title"]}</h1>']
        if self._meta.get("author"):
            parts.append(f'<div class="author">{self._meta["author"]}</div>')
        date = self._meta.get("date", self._today_text())
        if date:
            parts.append(f'<div class="date">{date}</div>')
        return '<div class="titlepage">' + "".join(parts) + "</div>"

    def _today_text(self) -> str:
        d = self.today
        return f"{d:%B} {d.day}, {d.year}"

    # ------------------------------------------------------------------
    # Environments
    # ------------------------------------------------------------------

    def _environment(self, node: LatexEnvironmentNode, out: _Output) -> None:
        name = node.environmentname
        if name == "document":
            self._document(node, out)
            return
        if self._in_preamble:
            raise LatexRenderError(f"\\begin{{{name}}} is not allowed before \\begin{{document}}")
        if name in _LISTS:
            out.block(self._list(node, _LISTS[name]))
        elif name in _BLOCKS:
            open_tag, close_tag = _BLOCKS[name]
            inner = _Output()
            self._render_nodes(list(node.nodelist), inner)
            out.block(open_tag + inner.html() + close_tag)
        else:
            raise LatexRenderError(f"Unknown environment: {name}")

    def _document(self, node: LatexEnvironmentNode, out: _Output) -> None:
        if self._document_seen:
            raise LatexRenderError("Two document environments; \\begin{document} may only appear once")
        self._document_seen = True
        self._render_nodes(list(node.nodelist), out)
        self._document_done = True

    def _list(self, node: LatexEnvironmentNode, tag: str) -> str:
        groups: list[tuple[Optional[list], list]] = []
        for child in node.nodelist:
            if isinstance(child, LatexMacroNode) and child.macroname == "item":
                groups.append((_argument(child, 0), []))
            elif groups:
                groups[-1][1].append(child)
            elif not _is_blank(child):
                raise LatexRenderError(f"Missing \\item in {node.environmentname}")

        rows: list[str] = []
        for label_nodes, body_nodes in groups:
            label = self._render_inline(label_nodes) if label_nodes is not None else None
            body = _Output()
            self._render_nodes(body_nodes, body)
            if tag == "dl":
                rows.append(f"<dt>{label or ''}</dt><dd>{body.item_html()}</dd>")
            elif label is not None:
                rows.append(f'<li><span class="item-label">{label}</span> {body.item_html()}</li>')
            else:
                rows.append(f"<li>{body.item_html()}</li>")
        return f"<{tag}>\n" + "\n".join(rows) + f"\n</{tag}>"


class _Output:
    """Accumulates inline HTML into paragraphs and block-level elements."""

    def __init__(self) -> None:
        self._blocks: list[tuple[str, str]] = []
        self._inline: list[str] = []

    def inline(self, fragment: str) -> None:
        self._inline.append(fragment)

    def paragraph_break(self) -> None:
        text = " ".join("".join(self._inline).split())
        self._inline.clear()
        if text:
            self._blocks.append(("p", text))

    def block(self, fragment: str) -> None:
        self.paragraph_break()
        self._blocks.append(("block", fragment))

    def html(self) -> str:
        self.paragraph_break()
        return "\n".join(f"<p>{c}</p>" if kind == "p" else c for kind, c in self._blocks)

    def inline_html(self) -> str:
        self.paragraph_break()
        return " ".join(c for _, c in self._blocks)

    def item_html(self) -> str:
        self.paragraph_break()
        if len(self._blocks) == 1 and self._blocks[0][0] == "p":
            return self._blocks[0][1]
        return self.html()


def _argument(node: LatexMacroNode, index: int) -> Optional[list]:
    """Return the node list of argument *index*, or None when it is absent."""
    argd = node.nodeargd
    if argd is None or index >= len(argd.argnlist):
        return None
    arg = argd.argnlist[index]
    if arg is None:
        return None
    if isinstance(arg, LatexGroupNode):
        return list(arg.nodelist)
    return [arg]


def _verbatim(nodes: Iterable) -> str:
    return "".join(n.latex_verbatim() for n in nodes)


def _is_blank(node) -> bool:
    if isinstance(node, LatexCommentNode):
        return True
    return isinstance(node, LatexCharsNode) and not node.chars.strip()


def _typeset(text: str) -> str:
    text = html.escape(text, quote=False)
    for src, dst in _TYPOGRAPHY:
        text = text.replace(src, dst)
    return text
