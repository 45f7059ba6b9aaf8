"""LaTeX → HTML preview with structural sanitization and fallback rendering."""
from __future__ import annotations

from .fallback import PREVIEW_STYLES, PreviewAttempt, PreviewResult, render_preview
from .renderer import LatexRenderError, PreviewRenderer, RenderedDocument
from .session import PreviewSession
from .structure import PreviewMode, PreviewPlan, plan_preview

__all__ = [
    "PREVIEW_STYLES",
    "LatexRenderError",
    "PreviewAttempt",
    "PreviewMode",
    "PreviewPlan",
    "PreviewRenderer",
    "PreviewResult",
    "PreviewSession",
    "RenderedDocument",
    "plan_preview",
    "render_preview",
]
