"""gfmify -- GitHub-flavoured Markdown to sanitized HTML and plain text.

Public re-exports
-----------------

* **Pipelines:** :func:`render`, :func:`strip`, :func:`strip_split_by_sections`
* **Configuration:** :class:`RenderOptions`
* **Rendering:** :class:`GfmRenderer`
* **Errors:** Every :class:`GfmifyError` subclass and :class:`ErrorCode`
* **Models:** :class:`MarkdownSection`, :class:`Token`, :class:`TokenKind`

Usage::

    from gfmify import RenderOptions, render, strip

    html = render("# Hello\\n\\n[docs](/docs)", RenderOptions(base_url="https://example.com/"))
    text = strip("# Hello\\n\\n**World**")
"""

from __future__ import annotations

# ── Configuration ───────────────────────────────────────────────────────
from gfmify.config import RenderOptions

# ── Pipelines ───────────────────────────────────────────────────────────
from gfmify.converter.md_to_html import render
from gfmify.converter.md_to_text import strip, strip_split_by_sections
from gfmify.converter.renderer import GfmRenderer

# ── Errors ──────────────────────────────────────────────────────────────
from gfmify.errors import (
    ErrorCode,
    GfmifyConversionError,
    GfmifyError,
    GfmifyMathError,
    GfmifyOptionsError,
)

# ── Models ──────────────────────────────────────────────────────────────
from gfmify.models import MarkdownSection, Token, TokenKind

__all__ = [
    # Pipelines
    "render",
    "strip",
    "strip_split_by_sections",
    # Configuration
    "RenderOptions",
    # Rendering
    "GfmRenderer",
    # Errors
    "ErrorCode",
    "GfmifyConversionError",
    "GfmifyError",
    "GfmifyMathError",
    "GfmifyOptionsError",
    # Models
    "MarkdownSection",
    "Token",
    "TokenKind",
]
