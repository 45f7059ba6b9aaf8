"""Programmatic API for server-side mdtex usage."""
from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any, Optional, Union

from .config import Config, resolve_config
from .encoder import markdown_to_latex
from .encoder.document import MarkdownDocument
from .preview.fallback import PreviewResult, RendererFactory
from .preview.fallback import render_preview as _render_preview


def encode(title: str, markdown_body: str, sources: Iterable[Any] = ()) -> str:
    """Encode a Markdown report as a complete LaTeX document.

    Args:
        title: Document title; escaped before it is embedded.
        markdown_body: Markdown using headings, ``- `` lists, paragraphs,
            ``**bold**``, ``*italic*`` and ``[text](url)`` links.
        sources: Sequence of ``Source`` objects or ``{"title", "url"}``
            mappings listed in a trailing Sources section.

    Returns:
        LaTeX text.  Never raises for string input.
    """
    return markdown_to_latex(title, markdown_body, sources)


def encode_document(document: MarkdownDocument) -> str:
    """Encode a ``MarkdownDocument`` (e.g. one returned by ``read_markdown``)."""
    return markdown_to_latex(document.title, document.body, document.sources)


def render_preview(
    latex: str,
    *,
    config: Union[Config, Mapping[str, Any], str, Path, None] = None,
    renderer_factory: Optional[RendererFactory] = None,
) -> PreviewResult:
    """Render arbitrary LaTeX to an HTML preview fragment.

    Args:
        latex: A full document or a fragment; it is never modified.
        config: ``None``, a ``Config``, a mapping using the ``config.yaml``
            schema, or a path to a YAML config file.
        renderer_factory: Zero-argument callable returning a fresh renderer;
            called once per attempt.

    Returns:
        ``PreviewResult`` with ``html`` on success or ``error`` when both the
        primary and the fallback attempt failed.
    """
    resolved = resolve_config(config)
    return _render_preview(latex, config=resolved.preview, renderer_factory=renderer_factory)
