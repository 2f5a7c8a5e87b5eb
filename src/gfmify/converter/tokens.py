"""Tokenize Markdown and normalize to canonical :class:`~gfmify.models.Token` trees.

mistune v3 is the tokenizer.  :func:`create_tokenizer` builds a parser with
the GFM plugin set and an optional replacement ``codespan`` rule;
:class:`TokenNormalizer` maps mistune's AST dicts onto the closed
:class:`~gfmify.models.TokenKind` set:

    heading, paragraph, text, code, codespan, html, link, image, list,
    list_item, table, blockquote, hr, space, strong, em, del, br

``def`` and ``escape`` never come out of mistune (reference definitions
are consumed by the parser, escapes become text) but stay in the enum so
that every consumer handles them.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import Any

import mistune
from mistune.core import InlineState
from mistune.inline_parser import InlineParser

from gfmify.config import RenderOptions
from gfmify.models import Token, TokenKind

PLUGINS: tuple[str, ...] = (
    "strikethrough",
    "table",
    "task_lists",
    "url",
    "footnotes",
)

CodespanRule = Callable[[InlineParser, "re.Match[str]", InlineState], int]


def create_tokenizer(
    options: RenderOptions,
    codespan: CodespanRule | None = None,
    renderer: Any = None,
) -> mistune.Markdown:
    """Build a mistune parser for one call.

    Parameters
    ----------
    options:
        ``breaks`` turns on hard-wrap mode.
    codespan:
        Replacement for mistune's ``codespan`` inline rule.  Receives the
        inline parser, the opening backtick match and the inline state, and
        returns the position after the span.
    renderer:
        A mistune renderer.  ``None`` makes the parser return AST tokens.
    """
    md = mistune.create_markdown(
        escape=False,
        hard_wrap=options.breaks,
        renderer=renderer,
        plugins=list(PLUGINS),
    )
    if codespan is not None:
        md.inline.register("codespan", None, codespan)
    return md


# ---------------------------------------------------------------------------
# Mistune-to-canonical type mapping
# ---------------------------------------------------------------------------

_CONTAINER_MAP: dict[str, TokenKind] = {
    "paragraph": TokenKind.PARAGRAPH,
    "block_text": TokenKind.PARAGRAPH,
    "block_quote": TokenKind.BLOCKQUOTE,
    "list": TokenKind.LIST,
    "footnotes": TokenKind.LIST,
    "list_item": TokenKind.LIST_ITEM,
    "task_list_item": TokenKind.LIST_ITEM,
    "footnote_item": TokenKind.LIST_ITEM,
    "link": TokenKind.LINK,
    "strong": TokenKind.STRONG,
    "emphasis": TokenKind.EM,
    "strikethrough": TokenKind.DEL,
}

_LEAF_MAP: dict[str, TokenKind] = {
    "text": TokenKind.TEXT,
    "codespan": TokenKind.CODESPAN,
    "block_html": TokenKind.HTML,
    "inline_html": TokenKind.HTML,
}

# Leaves whose raw text is fixed.
_FIXED_MAP: dict[str, tuple[TokenKind, str]] = {
    "softbreak": (TokenKind.TEXT, "\n"),
    "linebreak": (TokenKind.BR, ""),
    "blank_line": (TokenKind.SPACE, "\n"),
    "thematic_break": (TokenKind.HR, ""),
}

# Types that carry no readable text.
_SKIP_TYPES: frozenset[str] = frozenset({
    "footnote_ref",
    "block_error",
})


class TokenNormalizer:
    """Convert mistune AST dicts into immutable :class:`Token` trees."""

    def normalize(self, tokens: list[dict]) -> tuple[Token, ...]:
        """Normalize a token list, dropping tokens with no canonical type."""
        result: list[Token] = []
        for token in tokens:
            normalized = self._normalize_token(token)
            if normalized is not None:
                result.append(normalized)
        return tuple(result)

    def _normalize_token(self, token: dict) -> Token | None:
        raw_type = token.get("type", "")

        if raw_type in _SKIP_TYPES:
            return None

        if raw_type in _FIXED_MAP:
            kind, raw = _FIXED_MAP[raw_type]
            return Token(kind=kind, raw=raw)

        if raw_type in _LEAF_MAP:
            kind = _LEAF_MAP[raw_type]
            raw = token.get("raw", "")
            text = raw if kind is TokenKind.CODESPAN else ""
            return Token(kind=kind, raw=raw, text=text)

        if raw_type in _CONTAINER_MAP:
            return Token(
                kind=_CONTAINER_MAP[raw_type],
                children=self.normalize(token.get("children") or []),
            )

        if raw_type == "heading":
            return Token(
                kind=TokenKind.HEADING,
                depth=token.get("attrs", {}).get("level", 1),
                children=self.normalize(token.get("children") or []),
            )

        if raw_type == "block_code":
            return self._normalize_code(token)

        if raw_type == "image":
            return self._normalize_image(token)

        if raw_type == "table":
            return self._normalize_table(token)

        # Unknown token: skip silently
        return None

    def _normalize_code(self, token: dict) -> Token:
        code = token.get("raw", "")
        if code.endswith("\n"):
            code = code[:-1]
        info = (token.get("attrs") or {}).get("info")
        return Token(kind=TokenKind.CODE, raw=code, text=code, lang=info or None)

    def _normalize_image(self, token: dict) -> Token:
        attrs = token.get("attrs") or {}
        children = self.normalize(token.get("children") or [])
        return Token(
            kind=TokenKind.IMAGE,
            title=attrs.get("title") or None,
            text=_plain_text(children),
        )

    def _normalize_table(self, token: dict) -> Token:
        header: tuple[tuple[Token, ...], ...] = ()
        rows: list[tuple[tuple[Token, ...], ...]] = []
        for part in token.get("children") or []:
            if part.get("type") == "table_head":
                header = self._normalize_row(part)
            elif part.get("type") == "table_body":
                for row in part.get("children") or []:
                    rows.append(self._normalize_row(row))
        return Token(kind=TokenKind.TABLE, header=header, rows=tuple(rows))

    def _normalize_row(self, row: dict) -> tuple[tuple[Token, ...], ...]:
        return tuple(
            self.normalize(cell.get("children") or [])
            for cell in row.get("children") or []
            if cell.get("type") == "table_cell"
        )


def _plain_text(tokens: tuple[Token, ...]) -> str:
    parts: list[str] = []
    for token in tokens:
        if token.children:
            parts.append(_plain_text(token.children))
        elif token.kind in (TokenKind.TEXT, TokenKind.CODESPAN):
            parts.append(token.raw)
    return "".join(parts)


def tokenize(
    markdown: str,
    options: RenderOptions,
    codespan: CodespanRule | None = None,
) -> tuple[Token, ...]:
    """Parse *markdown* and return the normalized token tree."""
    md = create_tokenizer(options, codespan=codespan)
    raw_tokens = md(markdown)
    if isinstance(raw_tokens, str):
        return ()
    return TokenNormalizer().normalize(raw_tokens)
