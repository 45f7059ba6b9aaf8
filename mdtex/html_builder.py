"""
Wrap a preview fragment in a standalone HTML page.
"""
from __future__ import annotations

import html

# Split into head/tail so we never have to escape CSS braces
_HEAD = """\
<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1.0" />
  <title>{title}</title>
</head>
<body>
"""

_TAIL = """\
</body>
</html>
"""

_ERROR_BLOCK = """\
<div class="mdtex-error" style="font-family: monospace; color: #b00020; border: 1px solid #b00020; padding: 12px; margin: 12px 0;">
  Error: {message}
</div>
"""


def build_page(fragment: str, title: str = "mdtex preview") -> str:
    """Return a complete HTML page around *fragment*."""
    return _HEAD.format(title=html.escape(title)) + fragment + "\n" + _TAIL


def build_error_page(message: str, previous: str = "", title: str = "mdtex preview") -> str:
    """Page showing *message* above the last good preview (if any)."""
    block = _ERROR_BLOCK.format(message=html.escape(message))
    return build_page(block + previous, title)
