"""Public data models for gfmify.

* :class:`TokenKind` / :class:`Token` -- the closed, canonical token model
  produced by :mod:`gfmify.converter.tokens` and consumed by the plain-text
  reduction.
* :class:`MarkdownSection` -- one header-delimited section of plain text.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


# ---------------------------------------------------------------------------
# Tokens
# ---------------------------------------------------------------------------

class TokenKind(str, Enum):
    """Every token type the reduction passes must handle."""

    HEADING = "heading"
    PARAGRAPH = "paragraph"
    TEXT = "text"
    CODE = "code"
    CODESPAN = "codespan"
    HTML = "html"
    LINK = "link"
    IMAGE = "image"
    LIST = "list"
    LIST_ITEM = "list_item"
    TABLE = "table"
    BLOCKQUOTE = "blockquote"
    HR = "hr"
    SPACE = "space"
    STRONG = "strong"
    EM = "em"
    DEL = "del"
    BR = "br"
    DEF = "def"
    ESCAPE = "escape"


TableCell = tuple["Token", ...]


@dataclass(frozen=True)
class Token:
    """A single normalized Markdown token.

    Attributes
    ----------
    kind:
        The token type.
    raw:
        Source text for leaf tokens (text, code, html, space, codespan).
    children:
        Ordered child tokens.  ``None`` for leaves.
    depth:
        Heading level (1-6).  ``0`` for everything else.
    lang:
        Code fence info string, or ``None``.
    title:
        Link/image title, or ``None``.
    text:
        Image alt text, or the decoded text of a codespan.
    header:
        Table header cells.
    rows:
        Table body rows.
    """

    kind: TokenKind
    raw: str = ""
    children: tuple[Token, ...] | None = None
    depth: int = 0
    lang: str | None = None
    title: str | None = None
    text: str = ""
    header: tuple[TableCell, ...] = ()
    rows: tuple[tuple[TableCell, ...], ...] = ()


# ---------------------------------------------------------------------------
# Plain-text sections
# ---------------------------------------------------------------------------

@dataclass
class MarkdownSection:
    """A header-delimited section of stripped Markdown.

    Attributes
    ----------
    header:
        Plain text of the heading that opened the section.  Empty for the
        root section.
    depth:
        Heading level, ``0`` for the root section.
    content:
        Plain text between this heading and the next one.
    """

    header: str = ""
    depth: int = 0
    content: str = ""
