"""
Sanitize arbitrary LaTeX and decide how to wrap it for previewing.

Input may be a complete document, a document whose body can not be located,
or a bare fragment.  ``classify`` maps the package-stripped text onto exactly
one of three structures, and ``plan_preview`` builds the text handed to the
first render attempt together with the sanitized body kept for the fallback.
"""
from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from typing import Union

from .rules import (
    FALLBACK_RULES,
    FORMATTING_RULES,
    INJECT_POLYFILLS,
    PACKAGE_RULES,
    POLYFILL_COMMANDS,
    apply_rules,
)

_BEGIN_DOCUMENT_RE = re.compile(r"\\begin\s*\{document\}")
_END_DOCUMENT_RE = re.compile(r"\\end\s*\{document\}")
_DOCUMENTCLASS_MARKER = "\\documentclass"


class PreviewMode(enum.Enum):
    FULL_DOCUMENT = "full-document"
    RAW_PASSTHROUGH = "raw-passthrough"
    FRAGMENT = "fragment"


@dataclass(frozen=True)
class ExtractedDocument:
    """``\\begin{document}`` was found; *body* is what lies inside it."""

    body: str
    mode = PreviewMode.FULL_DOCUMENT


@dataclass(frozen=True)
class RawDocument:
    """A ``\\documentclass`` without a locatable body; kept verbatim."""

    source: str
    mode = PreviewMode.RAW_PASSTHROUGH

    @property
    def body(self) -> str:
        return self.source


@dataclass(frozen=True)
class BareFragment:
    """No document structure at all; wrapped in a shell like an extracted body."""

    body: str
    mode = PreviewMode.FULL_DOCUMENT


DocumentStructure = Union[ExtractedDocument, RawDocument, BareFragment]


@dataclass(frozen=True)
class PreviewPlan:
    structure: DocumentStructure
    candidate: str
    sanitized_body: str

    @property
    def mode(self) -> PreviewMode:
        return self.structure.mode


def strip_packages(latex: str) -> str:
    """Remove package directives and package configuration (step 1)."""
    return apply_rules(latex, PACKAGE_RULES)


def classify(text: str) -> DocumentStructure:
    """Pick the structure of package-stripped LaTeX *text*."""
    begin = _BEGIN_DOCUMENT_RE.search(text)
    if begin:
        body = text[begin.end():]
        end = _END_DOCUMENT_RE.search(body)
        if end:
            body = body[:end.start()]
        return ExtractedDocument(body)
    if _DOCUMENTCLASS_MARKER in text:
        return RawDocument(text)
    return BareFragment(text)


def sanitize_body(body: str) -> str:
    """Strip formatting commands the preview engine rejects (step 3)."""
    return apply_rules(body, FORMATTING_RULES)


def wrap_in_shell(body: str) -> str:
    """Embed *body* in a minimal article with the link polyfills."""
    return (
        "\n\\documentclass{article}\n"
        f"{POLYFILL_COMMANDS}\n"
        "\\begin{document}\n"
        f"{body}\n"
        "\\end{document}"
    )


def build_candidate(structure: DocumentStructure, sanitized_body: str) -> str:
    """Build the text for the first render attempt (step 4)."""
    if isinstance(structure, RawDocument):
        return INJECT_POLYFILLS.apply(structure.source)
    return wrap_in_shell(sanitized_body)


def plan_preview(latex: str) -> PreviewPlan:
    """Run steps 1–4 on *latex*."""
    structure = classify(strip_packages(latex))
    sanitized = sanitize_body(structure.body)
    return PreviewPlan(
        structure=structure,
        candidate=build_candidate(structure, sanitized),
        sanitized_body=sanitized,
    )


def degrade_for_fallback(sanitized_body: str) -> str:
    """Reduce a sanitized body to the bare fragment used by the second attempt."""
    return apply_rules(sanitized_body, FALLBACK_RULES).strip()
