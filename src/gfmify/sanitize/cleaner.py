"""HTML sanitization built on bleach.

bleach drops every tag and attribute outside the allow-list and rejects
unsafe URL schemes.  :class:`GfmFilter` then runs over the sanitized
html5lib token stream and applies the rules bleach has no hook for:

* class tokens are filtered per tag against literal, wildcard and regex
  rules;
* ``src`` of ``img`` and ``video`` is resolved against the media base URL
  and dropped when resolution fails;
* protocol-relative ``href``, ``src`` and ``cite`` values are removed;
* ``script``, ``style``, ``textarea`` and ``option`` elements are removed
  along with their text.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from functools import partial
from typing import Any

from bleach.css_sanitizer import CSSSanitizer
from bleach.html5lib_shim import Filter
from bleach.sanitizer import Cleaner

from gfmify.sanitize.allowlist import AllowList, class_allowed
from gfmify.utils.urls import is_protocol_relative, resolve_url

logger = logging.getLogger("gfmify.sanitize")

ALLOWED_PROTOCOLS: frozenset[str] = frozenset(
    {"http", "https", "ftp", "mailto", "tel"}
)

_MEDIA_TAGS = frozenset({"img", "video"})
_URL_ATTRIBUTES = frozenset({"href", "src", "cite"})
_TAG_TOKENS = frozenset({"StartTag", "EmptyTag"})
_ALL_TAG_TOKENS = _TAG_TOKENS | {"EndTag"}

# Removed together with everything inside them unless explicitly allowed.
DROP_CONTENT_TAGS: frozenset[str] = frozenset(
    {"script", "style", "textarea", "option"}
)


class GfmFilter(Filter):
    """html5lib filter for class tokens, media URLs and protocol-relative URLs.

    Also removes :data:`DROP_CONTENT_TAGS` elements with their text.  The
    cleaner lets those tags through bleach's tokenizer so that they arrive
    here as balanced start/end tokens instead of loose text.
    """

    def __init__(
        self,
        source: Any,
        *,
        allow_list: AllowList,
        media_base_url: str | None = None,
    ) -> None:
        super().__init__(source)
        self.allow_list = allow_list
        self.media_base_url = media_base_url
        self.dropped = DROP_CONTENT_TAGS - allow_list.tags

    def __iter__(self) -> Iterator[dict[str, Any]]:
        skip_depth = 0
        for token in super().__iter__():
            kind = token["type"]
            if skip_depth:
                if kind == "StartTag":
                    skip_depth += 1
                elif kind == "EndTag":
                    skip_depth -= 1
                continue
            if token.get("name") in self.dropped and kind in _ALL_TAG_TOKENS:
                if kind == "StartTag":
                    skip_depth = 1
                continue
            if kind in _TAG_TOKENS and token.get("data"):
                token["data"] = self._filter_attributes(
                    token["name"], dict(token["data"])
                )
            yield token

    def _filter_attributes(
        self, tag: str, attrs: dict[tuple[str | None, str], str]
    ) -> dict[tuple[str | None, str], str]:
        for key in list(attrs):
            name = key[1]
            value = attrs[key]

            if name in _URL_ATTRIBUTES and is_protocol_relative(value):
                logger.debug("dropped protocol-relative %s on <%s>", name, tag)
                del attrs[key]
                continue

            if name == "src" and tag in _MEDIA_TAGS and self.media_base_url:
                try:
                    attrs[key] = resolve_url(value, self.media_base_url)
                except ValueError:
                    logger.debug("dropped unresolvable src on <%s>", tag)
                    del attrs[key]
                continue

            if name == "class":
                rules = self.allow_list.classes.get(tag, ())
                kept = [c for c in value.split() if class_allowed(c, rules)]
                if kept:
                    attrs[key] = " ".join(kept)
                else:
                    del attrs[key]
        return attrs


def _attribute_filter(allow_list: AllowList):
    def allow(tag: str, name: str, value: str) -> bool:
        return allow_list.allows_attribute(tag, name, value)

    return allow


def build_cleaner(
    allow_list: AllowList, media_base_url: str | None = None
) -> Cleaner:
    """Build a bleach :class:`~bleach.sanitizer.Cleaner` for *allow_list*."""
    return Cleaner(
        tags=allow_list.tags | DROP_CONTENT_TAGS,
        attributes=_attribute_filter(allow_list),
        protocols=ALLOWED_PROTOCOLS,
        strip=True,
        strip_comments=True,
        filters=[
            partial(
                GfmFilter,
                allow_list=allow_list,
                media_base_url=media_base_url,
            )
        ],
        css_sanitizer=CSSSanitizer(),
    )


def sanitize_html(
    html: str,
    allow_list: AllowList,
    media_base_url: str | None = None,
) -> str:
    """Filter *html* down to *allow_list*.

    Parameters
    ----------
    html:
        Untrusted HTML.
    allow_list:
        Resolved allow-list, usually from
        :func:`~gfmify.sanitize.allowlist.build_allow_list`.
    media_base_url:
        Base for resolving relative ``img``/``video`` sources.

    Returns
    -------
    str
        HTML that contains no tag, attribute or class outside
        *allow_list*.  Never raises for dirty input.
    """
    if not html:
        return ""
    return build_cleaner(allow_list, media_base_url).clean(html)
