"""Markdown-to-plain-text reduction.

The token tree is folded into an ordered list of
:class:`~gfmify.models.MarkdownSection`.  Index 0 is the root section for
text before the first heading; every heading opens a new section.  Text
inside a heading's own inline tokens goes to the section's ``header``,
everything else to its ``content``.

Each :class:`~gfmify.models.TokenKind` has exactly one handler in
:data:`_HANDLERS`.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass, field

from mistune.core import InlineState
from mistune.inline_parser import InlineParser

from gfmify.config import RenderOptions
from gfmify.converter.math import strip_math
from gfmify.converter.renderer import normalize_language
from gfmify.converter.tokens import tokenize
from gfmify.models import MarkdownSection, Token, TokenKind
from gfmify.observability.metrics import NoopMetricsHook
from gfmify.sanitize import EMPTY_ALLOW_LIST, sanitize_html

_NEWLINE_RUN_RE = re.compile(r"\n{3,}")


def _squash(text: str) -> str:
    return _NEWLINE_RUN_RE.sub("\n", text.strip())


# ---------------------------------------------------------------------------
# Codespan rule
# ---------------------------------------------------------------------------

def parse_verbatim_codespan(
    inline: InlineParser, m: re.Match[str], state: InlineState
) -> int:
    """Codespan rule that keeps the span's text exactly as written.

    Newlines become spaces and one space is trimmed from each end when
    both ends have one and the span is not all spaces.  Backslashes and
    entities are left alone.
    """
    marker = m.group(0)
    closing = re.compile(r"(.*?[^`])" + marker + r"(?!`)", re.S)
    end = closing.match(state.src, m.end())
    if end is None:
        state.append_token({"type": "text", "raw": marker})
        return m.end()

    code = end.group(1).replace("\n", " ")
    if code.strip(" ") and code.startswith(" ") and code.endswith(" "):
        code = code[1:-1]
    state.append_token({"type": "codespan", "raw": code})
    return end.end()


# ---------------------------------------------------------------------------
# Reduction
# ---------------------------------------------------------------------------

@dataclass
class _Reduction:
    """Mutable accumulator for one strip call."""

    sections: list[MarkdownSection] = field(
        default_factory=lambda: [MarkdownSection()]
    )

    def append(self, text: str, header: bool) -> None:
        section = self.sections[-1]
        if header:
            section.header += text
        else:
            section.content += text

    def open_section(self, depth: int) -> None:
        current = self.sections[-1]
        current.header = _squash(current.header)
        current.content = _squash(current.content)
        self.sections.append(MarkdownSection(depth=depth))

    def finish(self) -> list[MarkdownSection]:
        for section in self.sections:
            section.header = _squash(section.header)
            section.content = _squash(section.content)
        return self.sections


_Handler = Callable[[Token, _Reduction, bool], None]


def _walk(tokens: tuple[Token, ...], acc: _Reduction, header: bool) -> None:
    for token in tokens:
        _HANDLERS[token.kind](token, acc, header)


def _recurse(token: Token, acc: _Reduction, header: bool) -> None:
    if token.children:
        _walk(token.children, acc, header)


def _heading(token: Token, acc: _Reduction, header: bool) -> None:
    acc.open_section(token.depth)
    _walk(token.children or (), acc, True)


def _text(token: Token, acc: _Reduction, header: bool) -> None:
    if token.children:
        _walk(token.children, acc, header)
    else:
        acc.append(token.raw, header)


def _codespan(token: Token, acc: _Reduction, header: bool) -> None:
    acc.append(token.text, header)


def _code(token: Token, acc: _Reduction, header: bool) -> None:
    if normalize_language(token.lang) != "math":
        acc.append(token.text, header)


def _html(token: Token, acc: _Reduction, header: bool) -> None:
    acc.append(sanitize_html(token.raw, EMPTY_ALLOW_LIST).strip() + "\n\n", header)


def _image(token: Token, acc: _Reduction, header: bool) -> None:
    acc.append(token.title or token.text, header)


def _table(token: Token, acc: _Reduction, header: bool) -> None:
    for line in (token.header, *token.rows):
        for cell in line:
            _walk(cell, acc, header)
            acc.append(" ", header)
        acc.append("\n", header)


def _list_item(token: Token, acc: _Reduction, header: bool) -> None:
    _recurse(token, acc, header)
    acc.append("\n", header)


def _space(token: Token, acc: _Reduction, header: bool) -> None:
    acc.append(token.raw, header)


_HANDLERS: dict[TokenKind, _Handler] = {
    TokenKind.HEADING: _heading,
    TokenKind.PARAGRAPH: _recurse,
    TokenKind.TEXT: _text,
    TokenKind.CODE: _code,
    TokenKind.CODESPAN: _codespan,
    TokenKind.HTML: _html,
    TokenKind.LINK: _recurse,
    TokenKind.IMAGE: _image,
    TokenKind.LIST: _recurse,
    TokenKind.LIST_ITEM: _list_item,
    TokenKind.TABLE: _table,
    TokenKind.BLOCKQUOTE: _recurse,
    TokenKind.HR: _recurse,
    TokenKind.SPACE: _space,
    TokenKind.STRONG: _recurse,
    TokenKind.EM: _recurse,
    TokenKind.DEL: _recurse,
    TokenKind.BR: _recurse,
    TokenKind.DEF: _recurse,
    TokenKind.ESCAPE: _recurse,
}


def reduce_tokens(tokens: tuple[Token, ...]) -> list[MarkdownSection]:
    """Fold a token tree into header-delimited plain-text sections."""
    acc = _Reduction()
    _walk(tokens, acc, False)
    return acc.finish()


# ---------------------------------------------------------------------------
# Public entry points
# ---------------------------------------------------------------------------

def strip_split_by_sections(
    markdown: str, options: RenderOptions | None = None
) -> list[MarkdownSection]:
    """Strip Markdown syntax and split the text into sections by heading.

    Parameters
    ----------
    markdown:
        Markdown source.
    options:
        Render options.  ``emojify`` and ``breaks`` apply; math spans are
        always removed.

    Returns
    -------
    list[MarkdownSection]
        Root section first (depth 0), then one section per heading in
        document order.
    """
    options = options or RenderOptions()
    if options.emojify is not None:
        markdown = options.emojify(markdown)
    markdown = strip_math(markdown)

    tokens = tokenize(markdown, options, codespan=parse_verbatim_codespan)
    sections = reduce_tokens(tokens)
    (options.metrics or NoopMetricsHook()).increment("gfmify.strip_total")
    return sections


def strip(markdown: str, options: RenderOptions | None = None) -> str:
    """Strip all Markdown syntax and return plain text.

    Sections are joined as ``header``, blank line, ``content``; runs of
    three or more newlines collapse to one and the result ends with
    exactly one newline.
    """
    sections = strip_split_by_sections(markdown, options)
    joined = "\n\n".join(s.header + "\n\n" + s.content for s in sections)
    return _NEWLINE_RUN_RE.sub("\n", joined.strip()) + "\n"
