from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version as pkg_version

project = "mdtex"
author = "mdtex contributors"

try:
    release = pkg_version("mdtex")
except PackageNotFoundError:
    release = "0.0.0"
version = release

extensions = [
    "myst_parser",
    "sphinx.ext.autodoc",
    "sphinx.ext.napoleon",
]

exclude_patterns = ["_build", "Thumbs.db", ".DS_Store"]

myst_enable_extensions = [
    "colon_fence",
]

html_theme = "furo"
html_static_path: list[str] = []
