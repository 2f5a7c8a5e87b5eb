"""Syntax highlighting for fenced code blocks.

Pygments does the lexing; the token stream is emitted as Prism-style
``<span class="token KIND">`` markup so that the class allow-list stays
small and stable.  Token types without a Prism counterpart are emitted as
escaped plain text.
"""

from __future__ import annotations

from html import escape

import pygments
from pygments.lexer import Lexer
from pygments.lexers import get_lexer_by_name
from pygments.token import (
    Comment,
    Generic,
    Keyword,
    Name,
    Number,
    Operator,
    Punctuation,
    String,
    _TokenType,
)
from pygments.util import ClassNotFound

# Most specific first: the first ancestor match wins.
_PRISM_CLASSES: tuple[tuple[_TokenType, str], ...] = (
    (Keyword.Constant, "boolean"),
    (Keyword, "keyword"),
    (Operator.Word, "keyword"),
    (Name.Function, "function"),
    (Name.Class, "class-name"),
    (Name.Tag, "tag"),
    (Name.Attribute, "attr-name"),
    (Name.Property, "property"),
    (String.Regex, "regex"),
    (String, "string"),
    (Number, "number"),
    (Comment, "comment"),
    (Operator, "operator"),
    (Punctuation, "punctuation"),
    (Generic.Deleted, "deleted"),
    (Generic.Inserted, "inserted"),
)


def find_lexer(language: str) -> Lexer | None:
    """Return the lexer registered under *language*, or ``None``."""
    if not language:
        return None
    try:
        return get_lexer_by_name(language, stripnl=False, ensurenl=False)
    except ClassNotFound:
        return None


def prism_class(ttype: _TokenType) -> str | None:
    for parent, name in _PRISM_CLASSES:
        if ttype in parent:
            return name
    return None


def highlight(code: str, lexer: Lexer) -> str:
    """Highlight *code* with *lexer* and return escaped HTML."""
    parts: list[str] = []
    for ttype, value in pygments.lex(code, lexer):
        if not value:
            continue
        text = escape(value, quote=False)
        name = prism_class(ttype)
        if name is None:
            parts.append(text)
        else:
            parts.append(f'<span class="token {name}">{text}</span>')
    return "".join(parts)
