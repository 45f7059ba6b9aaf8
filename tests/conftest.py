"""
Shared pytest fixtures and configuration for mdtex tests.

This module provides:
- Markdown and LaTeX source fixtures
- Configuration fixtures
- A renderer factory with a pinned date, so ``\\today`` is deterministic
- Temporary file fixtures for CLI and reader tests
"""
from __future__ import annotations

import datetime

import pytest


FIXED_DATE = datetime.date(2024, 3, 5)


# ==============================================================================
# Global pytest configuration
# ==============================================================================

def pytest_configure(config):
    """Global pytest configuration - runs once at test session start."""
    import warnings
    warnings.filterwarnings('ignore', category=DeprecationWarning)
    warnings.filterwarnings('ignore', category=PendingDeprecationWarning)


# ==============================================================================
# Configuration fixtures
# ==============================================================================

@pytest.fixture
def default_config():
    """Return default configuration."""
    from mdtex.config import Config
    return Config()


@pytest.fixture
def plain_preview_config():
    """Preview configuration without the style block, for exact HTML asserts."""
    from mdtex.config import PreviewConfig
    return PreviewConfig(styles=False)


@pytest.fixture
def fixed_date_factory():
    """Renderer factory whose ``\\today`` is always March 5, 2024."""
    from mdtex.preview.renderer import PreviewRenderer

    def _factory():
        return PreviewRenderer(today=FIXED_DATE)

    return _factory


# ==============================================================================
# Source fixtures
# ==============================================================================

@pytest.fixture
def sample_markdown():
    """Markdown body using every construct the encoder understands."""
    return (
        "# Overview\n"
        "\n"
        "Growth was **strong** this quarter, up *12%* on [last year](https://example.com/q).\n"
        "\n"
        "## Highlights\n"
        "\n"
        "- Revenue & margin\n"
        "- Costs under_control\n"
        "\n"
        "Closing remarks."
    )


@pytest.fixture
def sample_sources():
    """Sources as plain mappings, one without a title."""
    return [
        {"title": "Annual report", "url": "https://example.com/report"},
        {"url": "https://example.org/data"},
    ]


@pytest.fixture
def full_document():
    """A well-formed document loading packages the preview does not ship."""
    return (
        "\\documentclass[11pt]{article}\n"
        "\\usepackage[utf8]{inputenc}\n"
        "\\usepackage{hyperref}\n"
        "\\hypersetup{colorlinks=true}\n"
        "\\begin{document}\n"
        "\\section{Intro}\n"
        "Hello \\textbf{world}.\n"
        "\\end{document}\n"
    )


@pytest.fixture
def tabular_document():
    """A document whose table the preview engine cannot render."""
    return (
        "\\documentclass{article}\n"
        "\\begin{document}\n"
        "\\begin{table}[h]\n"
        "\\centering\n"
        "\\begin{tabular}{|l|l|}\n"
        "\\hline\n"
        "Name & Value \\\\\n"
        "\\hline\n"
        "\\end{tabular}\n"
        "\\end{table}\n"
        "\\end{document}\n"
    )


# ==============================================================================
# Temporary file fixtures
# ==============================================================================

@pytest.fixture
def temp_md(tmp_path):
    """Write a Markdown report with front matter and return its path."""
    md_path = tmp_path / "report.md"
    md_path.write_text(
        "---\n"
        "title: Quarterly Report\n"
        "sources:\n"
        "  - title: Annual report\n"
        "    url: https://example.com/report\n"
        "  - https://example.org/data\n"
        "---\n"
        "# Summary\n"
        "\n"
        "- First point\n"
        "- Second point\n",
        encoding="utf-8",
    )
    return md_path


@pytest.fixture
def temp_tex(tmp_path, full_document):
    """Write a full LaTeX document and return its path."""
    tex_path = tmp_path / "paper.tex"
    tex_path.write_text(full_document, encoding="utf-8")
    return tex_path


@pytest.fixture
def temp_config(tmp_path):
    """Write a preview config to a temporary file and return its path."""
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        "preview:\n"
        "  debounce_seconds: 0.1\n"
        "  styles: false\n"
        "  packages: [tikz]\n",
        encoding="utf-8",
    )
    return config_path
