"""Markdown conversion pipelines.

Public API:

- :func:`render` -- Markdown to sanitized HTML.
- :func:`strip` -- Markdown to plain text.
- :func:`strip_split_by_sections` -- Markdown to plain-text sections.
- :class:`GfmRenderer` -- the HTML rendering rules.
- :class:`TokenNormalizer` -- mistune AST to canonical tokens.
"""

from gfmify.converter.md_to_html import render
from gfmify.converter.md_to_text import reduce_tokens, strip, strip_split_by_sections
from gfmify.converter.renderer import GfmRenderer
from gfmify.converter.tokens import TokenNormalizer, create_tokenizer, tokenize

__all__ = [
    "GfmRenderer",
    "TokenNormalizer",
    "create_tokenizer",
    "reduce_tokens",
    "render",
    "strip",
    "strip_split_by_sections",
    "tokenize",
]
