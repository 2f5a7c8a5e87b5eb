"""GitHub-flavoured HTML rendering rules.

:class:`GfmRenderer` is a :class:`mistune.HTMLRenderer` strategy object that
overrides the per-token rules whose output differs from plain CommonMark
HTML:

* headings carry a slug ``id`` and a hidden anchor link;
* fenced code is highlighted (or rendered as MathML for ```` ```math ````);
* links are resolved against the base URL and marked ``noopener``;
* images always carry ``alt`` and ``title``;
* alerts, footnotes, task items and aligned table cells use GitHub markup.

The renderer holds no per-document state.  :func:`github_extras` installs
the parser hooks that attach per-call state (the heading slug registry) to
``state.env``, so one renderer instance can serve any number of calls.
"""

from __future__ import annotations

import logging
import re
from html import unescape
from typing import Any

import mistune
from mistune.core import BlockState
from mistune.util import escape

from gfmify.converter.highlight import find_lexer, highlight
from gfmify.converter.math import render_math
from gfmify.errors import GfmifyMathError
from gfmify.utils.slugger import Slugger
from gfmify.utils.urls import resolve_url

logger = logging.getLogger("gfmify.renderer")

ANCHOR_ICON = (
    '<svg class="octicon octicon-link" viewBox="0 0 16 16" width="16" '
    'height="16" aria-hidden="true"><path fill-rule="evenodd" '
    'd="M7.775 3.275a.75.75 0 001.06 1.06l1.25-1.25a2 2 0 112.83 2.83l-2.5 '
    "2.5a2 2 0 01-2.83 0 .75.75 0 00-1.06 1.06 3.5 3.5 0 004.95 0l2.5-2.5a3.5 "
    "3.5 0 00-4.95-4.95l-1.25 1.25zm-4.69 9.64a2 2 0 010-2.83l2.5-2.5a2 2 0 "
    "012.83 0 .75.75 0 001.06-1.06 3.5 3.5 0 00-4.95 0l-2.5 2.5a3.5 3.5 0 "
    "004.95 4.95l1.25-1.25a.75.75 0 00-1.06-1.06l-1.25 1.25a2 2 0 01-2.83 "
    '0z"></path></svg>'
)

ALERT_TITLES: dict[str, str] = {
    "note": "Note",
    "tip": "Tip",
    "important": "Important",
    "warning": "Warning",
    "caution": "Caution",
}

# variant -> (octicon name, 16px path data)
ALERT_ICONS: dict[str, tuple[str, str]] = {
    "note": (
        "info",
        "M0 8a8 8 0 1 1 16 0A8 8 0 0 1 0 8Zm8-6.5a6.5 6.5 0 1 0 0 13 6.5 6.5 "
        "0 0 0 0-13ZM6.5 7.75A.75.75 0 0 1 7.25 7h1a.75.75 0 0 1 .75.75v2.75h"
        ".25a.75.75 0 0 1 0 1.5h-2a.75.75 0 0 1 0-1.5h.25v-2h-.25a.75.75 0 0 "
        "1-.75-.75ZM8 6a1 1 0 1 1 0-2 1 1 0 0 1 0 2Z",
    ),
    "tip": (
        "light-bulb",
        "M8 1.5c-2.363 0-4 1.69-4 3.75 0 .984.424 1.625.984 2.304l.214.253c"
        ".223.264.47.556.673.848.284.411.537.896.621 1.49a.75.75 0 0 1-1.484"
        ".211c-.04-.282-.163-.547-.37-.847a8.456 8.456 0 0 0-.542-.68c-.084-"
        ".1-.173-.205-.268-.32C3.201 7.75 2.5 6.766 2.5 5.25 2.5 2.31 4.863 0 "
        "8 0s5.5 2.31 5.5 5.25c0 1.516-.701 2.5-1.328 3.259-.095.115-.184.22-"
        ".268.319-.207.245-.383.453-.541.681-.208.3-.33.565-.37.847a.751.751 "
        "0 0 1-1.485-.212c.084-.593.337-1.078.621-1.489.203-.292.45-.584.673-"
        ".848.075-.088.147-.173.213-.253.561-.679.985-1.32.985-2.304 0-2.06-"
        "1.637-3.75-4-3.75ZM5.75 12h4.5a.75.75 0 0 1 0 1.5h-4.5a.75.75 0 0 1 "
        "0-1.5ZM6 15.25a.75.75 0 0 1 .75-.75h2.5a.75.75 0 0 1 0 1.5h-2.5a.75"
        ".75 0 0 1-.75-.75Z",
    ),
    "important": (
        "report",
        "M0 1.75C0 .784.784 0 1.75 0h12.5C15.216 0 16 .784 16 1.75v9.5A1.75 "
        "1.75 0 0 1 14.25 13H8.06l-2.573 2.573A1.458 1.458 0 0 1 3 14.543V13"
        "H1.75A1.75 1.75 0 0 1 0 11.25Zm1.75-.25a.25.25 0 0 0-.25.25v9.5c0 "
        ".138.112.25.25.25h2a.75.75 0 0 1 .75.75v2.19l2.72-2.72a.749.749 0 0 "
        "1 .53-.22h6.5a.25.25 0 0 0 .25-.25v-9.5a.25.25 0 0 0-.25-.25Zm7 2.25"
        "v2.5a.75.75 0 0 1-1.5 0v-2.5a.75.75 0 0 1 1.5 0ZM9 9a1 1 0 1 1-2 0 1 "
        "1 0 0 1 2 0Z",
    ),
    "warning": (
        "alert",
        "M6.457 1.047c.659-1.234 2.427-1.234 3.086 0l6.082 11.378A1.75 1.75 0 "
        "0 1 14.082 15H1.918a1.75 1.75 0 0 1-1.543-2.575Zm1.763.707a.25.25 0 "
        "0 0-.44 0L1.698 13.132a.25.25 0 0 0 .22.368h12.164a.25.25 0 0 0 .22-"
        ".368Zm.53 3.996v2.5a.75.75 0 0 1-1.5 0v-2.5a.75.75 0 0 1 1.5 0ZM9 11"
        "a1 1 0 1 1-2 0 1 1 0 0 1 2 0Z",
    ),
    "caution": (
        "stop",
        "M4.47.22A.749.749 0 0 1 5 0h6c.199 0 .389.079.53.22l4.25 4.25c.141.14"
        ".22.331.22.53v6a.749.749 0 0 1-.22.53l-4.25 4.25A.749.749 0 0 1 11 "
        "16H5a.749.749 0 0 1-.53-.22L.22 11.53A.749.749 0 0 1 0 11V5c0-.199"
        ".079-.389.22-.53Zm.84 1.28L1.5 5.31v5.38l3.81 3.81h5.38l3.81-3.81V5"
        ".31L10.69 1.5ZM8 4a.75.75 0 0 1 .75.75v3.5a.75.75 0 0 1-1.5 0v-3.5A"
        ".75.75 0 0 1 8 4Zm0 8a1 1 0 1 1 0-2 1 1 0 0 1 0 2Z",
    ),
}

_ALERT_MARKER_RE = re.compile(
    r"^\[!(" + "|".join(ALERT_TITLES) + r")\][ \t]*(?:\n|$)", re.IGNORECASE
)
_TAG_RE = re.compile(r"<[^>]*>")
_SUMMARY_END_RE = re.compile(r"</summary>\n\n+\Z")


def alert_icon(variant: str) -> str:
    """Return the octicon ``<svg>`` for an alert *variant*, or ``""``."""
    if variant not in ALERT_ICONS:
        return ""
    name, path = ALERT_ICONS[variant]
    return (
        f'<svg class="octicon octicon-{name} mr-2" viewBox="0 0 16 16" '
        f'width="16" height="16" aria-hidden="true"><path d="{path}"></path></svg>'
    )


def inline_text(tokens: list[dict[str, Any]]) -> str:
    """Fold mistune inline tokens into the text a reader sees.

    Link and image URLs are dropped; image alt text is kept.
    """
    return unescape(_fold_text(tokens))


def _fold_text(tokens: list[dict[str, Any]]) -> str:
    parts: list[str] = []
    for tok in tokens:
        children = tok.get("children")
        if children:
            parts.append(_fold_text(children))
        elif tok["type"] in ("text", "codespan"):
            parts.append(tok.get("raw", ""))
        elif tok["type"] in ("softbreak", "linebreak"):
            parts.append(" ")
    return "".join(parts)


def normalize_language(info: str | None) -> str:
    """Return the first comma-separated segment of *info*, lowercased."""
    if not info:
        return ""
    return info.split(",")[0].strip().lower()


class GfmRenderer(mistune.HTMLRenderer):
    """HTML renderer producing GitHub-style markup.

    Parameters
    ----------
    base_url:
        Links that are not in-document anchors are resolved against it.
    allow_math:
        Render ```` ```math ```` fences as display MathML.
    """

    def __init__(
        self,
        base_url: str | None = None,
        allow_math: bool = False,
    ) -> None:
        # Raw HTML passes through; the sanitization gate filters it.
        super().__init__(escape=False)
        self.base_url = base_url
        self.allow_math = allow_math

    def render_token(self, token: dict[str, Any], state: BlockState) -> str:
        # Headings parsed after the id hook (footnote bodies) get their
        # slug here.
        if token["type"] == "heading":
            attrs = token.setdefault("attrs", {})
            if "id" not in attrs:
                slugger = state.env.setdefault("slugger", Slugger())
                attrs["id"] = slugger.slug(inline_text(token.get("children", [])))
        return super().render_token(token, state)

    # ── Block rules ─────────────────────────────────────────────────────

    def heading(self, text: str, level: int, **attrs: Any) -> str:
        slug = escape(attrs.get("id") or "")
        return (
            f'<h{level} id="{slug}"><a class="anchor" aria-hidden="true" '
            f'tabindex="-1" href="#{slug}">{ANCHOR_ICON}</a>{text}</h{level}>\n'
        )

    def block_code(self, code: str, info: str | None = None) -> str:
        if code.endswith("\n"):
            code = code[:-1]
        language = normalize_language(info)

        if language == "math" and self.allow_math:
            try:
                return render_math(code, display=True)
            except GfmifyMathError as err:
                logger.warning(
                    "math block rendering failed",
                    extra={"extra_fields": {
                        "display": "block",
                        "expression": code,
                        "error": str(err.cause or err),
                    }},
                )

        lexer = find_lexer(language)
        if lexer is None:
            if language:
                logger.debug("no lexer for language %r", language)
            return f'<pre><code class="notranslate">{escape(code)}</code></pre>\n'

        return (
            f'<div class="highlight highlight-source-{escape(language)} '
            f'notranslate"><pre>{highlight(code, lexer)}</pre></div>\n'
        )

    def block_html(self, html: str) -> str:
        # A list inside <summary> needs a blank line in the source; the
        # output keeps a single newline.
        return _SUMMARY_END_RE.sub("</summary>\n", super().block_html(html))

    def alert(self, text: str, variant: str) -> str:
        title = ALERT_TITLES.get(variant, variant.title())
        return (
            f'<div class="markdown-alert markdown-alert-{variant}">\n'
            f'<p class="markdown-alert-title">{alert_icon(variant)}{title}</p>\n'
            f"{text}</div>\n"
        )

    def task_list_item(self, text: str, checked: bool = False) -> str:
        box = '<input type="checkbox" disabled'
        box += " checked />" if checked else " />"
        if text.startswith("<p>"):
            text = text.replace("<p>", "<p>" + box + " ", 1)
        else:
            text = box + " " + text
        return "<li>" + text + "</li>\n"

    def table_cell(
        self, text: str, align: str | None = None, head: bool = False
    ) -> str:
        tag = "th" if head else "td"
        align_attr = f' align="{align}"' if align else ""
        return f"  <{tag}{align_attr}>{text}</{tag}>\n"

    # ── Footnotes ───────────────────────────────────────────────────────

    def footnote_ref(self, key: str, index: int) -> str:
        i = str(index)
        return (
            f'<sup><a href="#footnote-{i}" id="footnote-ref-{i}" '
            f'data-footnote-ref aria-describedby="footnote-label">{i}</a></sup>'
        )

    def footnotes(self, text: str) -> str:
        return (
            '<section class="footnotes" data-footnotes>\n'
            '<h2 id="footnote-label" class="sr-only">Footnotes</h2>\n'
            f"<ol>\n{text}</ol>\n</section>\n"
        )

    def footnote_item(self, text: str, key: str, index: int) -> str:
        i = str(index)
        back = (
            f'<a href="#footnote-ref-{i}" data-footnote-backref '
            f'aria-label="Back to reference {i}">↩</a>'
        )
        text = text.rstrip()
        if text.endswith("</p>"):
            text = text[:-4] + " " + back + "</p>"
        else:
            text = text + back
        return f'<li id="footnote-{i}">\n{text}\n</li>\n'

    # ── Inline rules ────────────────────────────────────────────────────

    def link(self, text: str, url: str, title: str | None = None) -> str:
        title_attr = f' title="{escape(title)}"' if title else ""
        if url.startswith("#"):
            return f'<a href="{self.safe_url(url)}"{title_attr}>{text}</a>'
        if self.base_url:
            try:
                url = resolve_url(url, self.base_url)
            except ValueError:
                logger.debug("kept unresolvable href %r", url)
        return (
            f'<a href="{self.safe_url(url)}"{title_attr} '
            f'rel="noopener noreferrer">{text}</a>'
        )

    def image(self, text: str, url: str, title: str | None = None) -> str:
        alt = _TAG_RE.sub("", text)
        return (
            f'<img src="{self.safe_url(url)}" alt="{alt}" '
            f'title="{escape(title or "")}" />'
        )


# ---------------------------------------------------------------------------
# Parser hooks
# ---------------------------------------------------------------------------

def _assign_heading_ids(md: mistune.Markdown, state: BlockState) -> None:
    """Give every heading a unique slug ``id``, in document order.

    The slug comes from the heading's visible text, so the inline content
    is parsed here and stored as the token's children.
    """
    slugger = Slugger()
    state.env["slugger"] = slugger

    def walk(tokens: list[dict[str, Any]]) -> None:
        for tok in tokens:
            if tok["type"] == "heading":
                if "text" in tok:
                    text = tok.pop("text").strip(" \r\n\t\f")
                    tok["children"] = md.inline(text, state.env)
                attrs = tok.setdefault("attrs", {})
                attrs["id"] = slugger.slug(inline_text(tok.get("children") or []))
                continue
            children = tok.get("children")
            if isinstance(children, list):
                walk(children)

    walk(state.tokens)


def _convert_alerts(md: mistune.Markdown, state: BlockState) -> None:
    """Turn ``> [!NOTE]`` style block quotes into ``alert`` tokens, at any depth."""

    def walk(tokens: list[dict[str, Any]]) -> None:
        for tok in tokens:
            children = tok.get("children")
            if not isinstance(children, list):
                continue
            if tok["type"] == "block_quote":
                _mark_alert(tok, children)
            walk(children)

    walk(state.tokens)


def _mark_alert(tok: dict[str, Any], children: list[dict[str, Any]]) -> None:
    if not children or children[0].get("type") != "paragraph":
        return
    first = children[0]
    match = _ALERT_MARKER_RE.match(first.get("text", ""))
    if match is None:
        return
    rest = first["text"][match.end():]
    if rest.strip():
        first["text"] = rest
    else:
        children.pop(0)
    tok["type"] = "alert"
    tok["attrs"] = {"variant": match.group(1).lower()}


def github_extras(md: mistune.Markdown) -> None:
    """mistune plugin: heading ids and GitHub alerts.

    Must be applied after the parser's other plugins so that the id hook
    sees the final token tree.
    """
    md.before_render_hooks.append(_convert_alerts)
    md.before_render_hooks.append(_assign_heading_ids)


def render_inline(md: mistune.Markdown, markdown: str) -> str:
    """Render *markdown* with the inline grammar only."""
    state = md.block.state_cls()
    tokens = md.inline(markdown, state.env)
    return md.renderer(tokens, state)
