"""Allow-list tables for the sanitization gate.

The resolved allow-list is the fixed baseline below, the option-gated
families (``iframe``, MathML), and the caller's extra tags, classes and
attributes.  Extras always union with the defaults; they never replace
them.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from re import Pattern
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from gfmify.config import RenderOptions

# ---------------------------------------------------------------------------
# Tags
# ---------------------------------------------------------------------------

BASELINE_TAGS: tuple[str, ...] = (
    # sections
    "address", "article", "aside", "footer", "header",
    "h1", "h2", "h3", "h4", "h5", "h6", "hgroup", "main", "nav", "section",
    # block text
    "blockquote", "dd", "div", "dl", "dt", "figcaption", "figure", "hr",
    "li", "ol", "p", "pre", "ul",
    # inline text
    "a", "abbr", "b", "bdi", "bdo", "br", "cite", "code", "data", "dfn",
    "em", "i", "kbd", "mark", "q", "rb", "rp", "rt", "rtc", "ruby", "s",
    "samp", "small", "span", "strong", "sub", "sup", "time", "u", "var",
    "wbr",
    # tables
    "caption", "col", "colgroup", "table", "tbody", "td", "tfoot", "th",
    "thead", "tr",
)

GFM_TAGS: tuple[str, ...] = (
    "img", "video", "svg", "path", "circle", "figure", "figcaption", "del",
    "details", "summary", "input",
)

IFRAME_TAGS: tuple[str, ...] = ("iframe",)

MATHML_TAGS: tuple[str, ...] = (
    "math", "maction", "annotation", "annotation-xml", "menclose", "merror",
    "mfenced", "mfrac", "mi", "mmultiscripts", "mn", "mo", "mover",
    "mpadded", "mphantom", "mprescripts", "mroot", "mrow", "ms",
    "semantics", "mspace", "msqrt", "mstyle", "msub", "msup", "msubsup",
    "mtable", "mtd", "mtext", "mtr",
)

# SVG and MathML elements.  The HTML parser restores the camelCase of
# their attribute names; on every other element it lowercases them.
FOREIGN_TAGS: frozenset[str] = frozenset(("svg", "path", "circle") + MATHML_TAGS)

# ---------------------------------------------------------------------------
# Classes
# ---------------------------------------------------------------------------

DEFAULT_CLASSES: dict[str, tuple[str, ...]] = {
    "div": (
        "highlight", "highlight-source-*", "notranslate",
        "markdown-alert", "markdown-alert-*",
    ),
    "span": (
        "token", "keyword", "operator", "number", "boolean", "function",
        "string", "comment", "class-name", "regex", "regex-delimiter", "tag",
        "attr-name", "punctuation", "script-punctuation", "script",
        "plain-text", "property", "prefix", "line", "deleted", "inserted",
    ),
    "a": ("anchor",),
    "p": ("markdown-alert-title",),
    "svg": ("octicon", "octicon-alert", "octicon-link"),
    "h2": ("sr-only",),
    "section": ("footnotes",),
}

# ---------------------------------------------------------------------------
# Attributes
# ---------------------------------------------------------------------------

_HEADING_ATTRS = ("id",)

DEFAULT_ATTRIBUTES: dict[str, tuple[str, ...]] = {
    "a": (
        "id", "aria-hidden", "href", "tabindex", "rel", "target", "title",
        "data-footnote-ref", "data-footnote-backref", "aria-label",
        "aria-describedby",
    ),
    "img": ("src", "alt", "height", "width", "align", "title"),
    "video": (
        "src", "alt", "height", "width", "autoplay", "muted", "loop",
        "playsinline", "poster", "controls", "title",
    ),
    "svg": ("viewBox", "width", "height", "aria-hidden", "background"),
    "path": ("fill-rule", "d"),
    "circle": ("cx", "cy", "r", "stroke", "stroke-width", "fill", "alpha"),
    "h1": _HEADING_ATTRS,
    "h2": _HEADING_ATTRS,
    "h3": _HEADING_ATTRS,
    "h4": _HEADING_ATTRS,
    "h5": _HEADING_ATTRS,
    "h6": _HEADING_ATTRS,
    "li": ("id",),
    "td": ("colspan", "rowspan", "align", "width"),
    "th": ("colspan", "rowspan", "align", "width"),
    "iframe": ("src", "width", "height"),
    "details": ("open",),
    "section": ("data-footnotes",),
    "input": ("checked", "disabled", "type"),
}

MATHML_ATTRIBUTES: dict[str, tuple[str, ...]] = {
    "span": ("aria-hidden", "style"),
    "math": ("xmlns", "display"),
    "annotation": ("encoding",),
    "mstyle": ("displaystyle", "scriptlevel"),
    "mi": ("mathvariant",),
}

# (tag, attribute) -> the only values that attribute may carry.
VALUE_CONSTRAINTS: dict[tuple[str, str], frozenset[str]] = {
    ("input", "type"): frozenset({"checkbox"}),
}


ClassRule = Union[str, Pattern]


@dataclass(frozen=True)
class AllowList:
    """A fully resolved allow-list.

    Attributes
    ----------
    tags:
        Every tag that survives sanitization.
    attributes:
        Allowed attribute names per tag.  ``class`` is implied for every
        tag present in *classes*.
    classes:
        Per-tag class rules: ``True`` (any class) or a tuple of literal
        names, ``*`` wildcard patterns, and compiled regexes.
    """

    tags: frozenset[str] = frozenset()
    attributes: dict[str, frozenset[str]] = field(default_factory=dict)
    classes: dict[str, Union[bool, tuple[ClassRule, ...]]] = field(
        default_factory=dict
    )

    def allows_attribute(self, tag: str, name: str, value: str) -> bool:
        """Return whether *name*=*value* may appear on *tag*.

        Attribute names on SVG and MathML elements are compared exactly.
        On HTML elements the parser has already lowercased *name*, so it is
        compared against the lowercased allow-list entries.
        """
        if name == "class":
            return bool(self.classes.get(tag))
        names = self.attributes.get(tag, frozenset()) | self.attributes.get(
            "*", frozenset()
        )
        if name not in names:
            if tag in FOREIGN_TAGS or name != name.lower():
                return False
            if name not in {n.lower() for n in names}:
                return False
        allowed_values = VALUE_CONSTRAINTS.get((tag, name))
        return allowed_values is None or value in allowed_values


EMPTY_ALLOW_LIST = AllowList()
"""Strips every tag; only text survives."""


# ---------------------------------------------------------------------------
# Class rule matching
# ---------------------------------------------------------------------------

def compile_class_rule(rule: ClassRule) -> Pattern:
    """Turn a literal, ``*`` wildcard, or regex class rule into a pattern."""
    if isinstance(rule, Pattern):
        return rule
    return re.compile(".*".join(re.escape(part) for part in rule.split("*")))


def class_allowed(name: str, rules: Union[bool, tuple[ClassRule, ...]]) -> bool:
    if rules is True:
        return True
    if not rules:
        return False
    return any(compile_class_rule(rule).fullmatch(name) for rule in rules)


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------

def _union(*groups: tuple[str, ...] | list[str]) -> tuple[str, ...]:
    seen: dict[str, None] = {}
    for group in groups:
        for item in group:
            seen.setdefault(item, None)
    return tuple(seen)


def build_allow_list(options: RenderOptions) -> AllowList:
    """Resolve the allow-list for *options*.

    Parameters
    ----------
    options:
        Render options.  ``allow_iframes`` and ``allow_math`` gate their
        element families; ``allowed_tags``, ``allowed_classes`` and
        ``allowed_attributes`` are unioned with the defaults.

    Returns
    -------
    AllowList
        The resolved, immutable allow-list.
    """
    tags: tuple[str, ...] = _union(BASELINE_TAGS, GFM_TAGS)
    if options.allow_iframes:
        tags = _union(tags, IFRAME_TAGS)
    if options.allow_math:
        tags = _union(tags, MATHML_TAGS)
    tags = _union(tags, options.allowed_tags)

    attributes: dict[str, tuple[str, ...]] = dict(DEFAULT_ATTRIBUTES)
    extras = [options.allowed_attributes]
    if options.allow_math:
        extras.insert(0, MATHML_ATTRIBUTES)
    for extra in extras:
        for tag, names in extra.items():
            attributes[tag] = _union(attributes.get(tag, ()), names)

    classes: dict[str, Union[bool, tuple[ClassRule, ...]]] = dict(DEFAULT_CLASSES)
    for tag, rules in options.allowed_classes.items():
        current = classes.get(tag, ())
        if rules is True or current is True:
            classes[tag] = True
        elif rules:
            classes[tag] = tuple(current) + tuple(rules)

    return AllowList(
        tags=frozenset(tags),
        attributes={tag: frozenset(names) for tag, names in attributes.items()},
        classes=classes,
    )
