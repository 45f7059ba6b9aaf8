from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

from .api import encode, encode_document, render_preview
from .config import Config, PreviewConfig
from .encoder import markdown_to_latex
from .encoder.document import MarkdownDocument, Source
from .preview import LatexRenderError, PreviewMode, PreviewResult, PreviewSession

try:
    __version__ = version("mdtex")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    "__version__",
    "Config",
    "LatexRenderError",
    "MarkdownDocument",
    "PreviewConfig",
    "PreviewMode",
    "PreviewResult",
    "PreviewSession",
    "Source",
    "encode",
    "encode_document",
    "markdown_to_latex",
    "render_preview",
]
