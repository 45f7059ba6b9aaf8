"""
Render arbitrary LaTeX to an HTML preview with a two-attempt fallback.

Strategy
--------
1. Parse the candidate built by ``plan_preview`` (the body wrapped in a safe
   shell, or the raw document with link polyfills injected).
2. If that fails, strip structure, links, tables and other environments
   from the sanitized body and parse what is left as a bare fragment.

Each attempt gets its own freshly constructed renderer: an engine that
failed half-way through a document still believes a class was declared,
and reusing it turns every later parse into a spurious
"Two \\documentclass commands" error.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional, Protocol

from ..config import PreviewConfig
from .renderer import LatexRenderError, PreviewRenderer, RenderedDocument
from .structure import PreviewMode, degrade_for_fallback, plan_preview

logger = logging.getLogger(__name__)

PREVIEW_STYLES = """
<style>
  body { font-family: "Times New Roman", Times, serif; padding: 40px; line-height: 1.6; max-width: 800px; margin: 0 auto; background: white; color: black; }
  h1, h2, h3 { color: #004b78; margin-top: 1.5em; }
  a { color: #004b78; text-decoration: none; }
  li { margin-bottom: 0.5em; }
  table { border-collapse: collapse; width: 100%; margin: 1em 0; }
  th, td { border: 1px solid #ddd; padding: 8px; text-align: left; }
  th { background-color: #f2f2f2; }
</style>
"""


class Renderer(Protocol):
    def parse(self, latex: str) -> RenderedDocument:  # pragma: no cover - structural protocol
        """Render *latex*, raising on failure."""


RendererFactory = Callable[[], Renderer]


@dataclass
class PreviewAttempt:
    mode: PreviewMode
    source: str
    html: Optional[str] = None
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.html is not None


@dataclass
class PreviewResult:
    """Outcome of ``render_preview``: exactly one of *html* / *error* is set."""

    html: Optional[str] = None
    error: Optional[str] = None
    attempts: list[PreviewAttempt] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.html is not None

    @property
    def mode(self) -> Optional[PreviewMode]:
        """Mode of the attempt that produced the HTML, if any."""
        for attempt in self.attempts:
            if attempt.succeeded:
                return attempt.mode
        return None

    @property
    def fell_back(self) -> bool:
        return len(self.attempts) > 1


def default_renderer_factory(config: Optional[PreviewConfig] = None) -> RendererFactory:
    """Return a factory building a new ``PreviewRenderer`` on every call."""
    config = config or PreviewConfig()

    def _factory() -> PreviewRenderer:
        return PreviewRenderer(
            max_macro_depth=config.max_macro_depth,
            packages=config.packages,
        )

    return _factory


def render_preview(
    latex: str,
    *,
    config: Optional[PreviewConfig] = None,
    renderer_factory: Optional[RendererFactory] = None,
) -> PreviewResult:
    """Render *latex* to an HTML fragment, falling back once on failure.

    Never raises for string input: when both attempts fail, the second
    attempt's message is returned in ``PreviewResult.error``.
    """
    config = config or PreviewConfig()
    factory = renderer_factory or default_renderer_factory(config)
    styles = PREVIEW_STYLES if config.styles else ""

    plan = plan_preview(latex)
    logger.debug("Preview mode %s; candidate starts %r", plan.mode.value, plan.candidate[:100])

    first = _attempt(factory, plan.mode, plan.candidate)
    if first.succeeded:
        return PreviewResult(html=styles + first.html, attempts=[first])
    logger.warning("Preview parse failed, retrying as a fragment: %s", first.error)

    fragment = degrade_for_fallback(plan.sanitized_body)
    second = _attempt(factory, PreviewMode.FRAGMENT, fragment)
    if second.succeeded:
        return PreviewResult(html=styles + second.html, attempts=[first, second])
    logger.error("Fragment preview failed: %s", second.error)
    return PreviewResult(error=second.error, attempts=[first, second])


def _attempt(factory: RendererFactory, mode: PreviewMode, source: str) -> PreviewAttempt:
    attempt = PreviewAttempt(mode=mode, source=source)
    renderer = factory()
    try:
        attempt.html = renderer.parse(source).body_html
    except LatexRenderError as exc:
        attempt.error = str(exc) or "Syntax error in LaTeX"
    except Exception as exc:
        # Engine bugs are reported like parse errors, never raised.
        attempt.error = f"{type(exc).__name__}: {exc}"
    return attempt
