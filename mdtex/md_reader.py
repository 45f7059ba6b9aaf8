"""
Read a Markdown report file into a ``MarkdownDocument``.

Markdown format support
-----------------------
- Optional YAML front matter between ``---`` delimiters carrying:
    title: Report title
    sources:
      - title: Source name
        url: https://example.com
      - https://example.org          # bare URL, titled "Source"
- Everything after the front matter is the Markdown body.
- Without a front matter title the file stem is used.
"""
from __future__ import annotations

import re
import warnings
from pathlib import Path
from typing import Any

import yaml

from .encoder.document import MarkdownDocument, Source

# YAML front matter at the very start of the file
_FRONT_MATTER_RE = re.compile(r"\A---[ \t]*\n(.*?)\n---[ \t]*\n", re.DOTALL)


def read_markdown(path: Path) -> MarkdownDocument:
    """Parse a ``.md`` file and return the encoder input it describes."""
    text = Path(path).read_text(encoding="utf-8")
    return parse_markdown(text, default_title=Path(path).stem)


def parse_markdown(text: str, *, default_title: str = "Untitled") -> MarkdownDocument:
    front_matter, body = split_front_matter(text)
    title = front_matter.get("title")
    return MarkdownDocument(
        title=str(title) if title else default_title,
        body=body,
        sources=_parse_sources(front_matter.get("sources")),
    )


def split_front_matter(text: str) -> tuple[dict[str, Any], str]:
    """Split YAML front matter from body, returning ``(front_matter, body)``."""
    match = _FRONT_MATTER_RE.match(text)
    if not match:
        return {}, text
    try:
        front_matter = yaml.safe_load(match.group(1)) or {}
    except yaml.YAMLError:
        front_matter = {}
    if not isinstance(front_matter, dict):
        front_matter = {}
    return front_matter, text[match.end():]


def _parse_sources(raw: Any) -> tuple[Source, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, list):
        warnings.warn(
            f"Ignoring front matter 'sources': expected a list, got {type(raw).__name__}.",
            RuntimeWarning,
            stacklevel=3,
        )
        return ()
    sources: list[Source] = []
    for entry in raw:
        if isinstance(entry, str):
            sources.append(Source(url=entry))
        else:
            sources.append(Source.coerce(entry))
    return tuple(sources)
