"""Render configuration for gfmify.

:class:`RenderOptions` captures every knob accepted by :func:`gfmify.render`,
:func:`gfmify.strip` and :func:`gfmify.strip_split_by_sections`.  An options
object is read-only once constructed; the single documented default-filling
(``media_base_url`` falls back to ``base_url``) happens in ``__post_init__``.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable
from dataclasses import dataclass, field
from re import Pattern
from typing import TYPE_CHECKING, Union

from gfmify.errors import GfmifyOptionsError

if TYPE_CHECKING:
    from gfmify.converter.renderer import GfmRenderer
    from gfmify.observability.metrics import MetricsHook

ClassRule = Union[str, Pattern]
"""A literal class name, a ``*`` wildcard pattern, or a compiled regex."""

AllowedClasses = dict[str, Union[bool, list[ClassRule]]]
"""Per-tag class allow-list.  ``True`` allows any class on the tag."""


@dataclass
class RenderOptions:
    """Options for a single render or strip call.

    Parameters
    ----------
    base_url:
        Links that are not in-document anchors are resolved against this
        URL.  Resolution failures keep the original ``href``.
    media_base_url:
        ``src`` of ``img`` and ``video`` elements is resolved against this
        URL.  Defaults to *base_url*.
    inline:
        Render with the inline grammar only, so the output carries no
        block wrapping such as ``<p>``.
    allow_iframes:
        Allow ``iframe`` elements through sanitization.
    allow_math:
        Convert ``$$ ... $$`` / `` $...$`` spans and ```` ```math ```` fences
        to MathML and allow the MathML element family.
    disable_html_sanitization:
        Return the renderer output as-is.  Only use with trusted input.
    renderer:
        A custom :class:`~gfmify.converter.renderer.GfmRenderer` to use
        instead of a fresh one.
    allowed_tags:
        Extra tags, added to the default allow-list.
    allowed_classes:
        Extra classes per tag, added to the default allow-list.
    allowed_attributes:
        Extra attributes per tag, added to the default allow-list.
    breaks:
        Turn every newline inside a paragraph into ``<br>``.
    emojify:
        Text transform applied to the Markdown source before tokenization,
        e.g. ``emoji.emojize`` with ``language="alias"``.
    metrics:
        A :class:`~gfmify.observability.MetricsHook` implementation.
        Defaults to a no-op hook.
    """

    # ── URLs ────────────────────────────────────────────────────────────
    base_url: str | None = None

    media_base_url: str | None = None

    # ── Mode ────────────────────────────────────────────────────────────
    inline: bool = False

    breaks: bool = False

    # ── Features ────────────────────────────────────────────────────────
    allow_iframes: bool = False

    allow_math: bool = False

    # ── Sanitization ────────────────────────────────────────────────────
    disable_html_sanitization: bool = False

    allowed_tags: list[str] = field(default_factory=list)

    allowed_classes: AllowedClasses = field(default_factory=dict)

    allowed_attributes: dict[str, list[str]] = field(default_factory=dict)

    # ── Collaborators ───────────────────────────────────────────────────
    renderer: GfmRenderer | None = None

    emojify: Callable[[str], str] | None = None

    # ── Observability ──────────────────────────────────────────────────
    metrics: MetricsHook | None = None

    def __post_init__(self) -> None:
        """Validate the options and fill ``media_base_url``."""
        for name in ("base_url", "media_base_url"):
            value = getattr(self, name)
            if value is not None and not isinstance(value, str):
                raise GfmifyOptionsError(
                    f"{name} must be a string or None, got {type(value).__name__}",
                    context={"field": name, "value": value},
                )

        if not isinstance(self.allowed_tags, (list, tuple)) or not all(
            isinstance(tag, str) for tag in self.allowed_tags
        ):
            raise GfmifyOptionsError(
                "allowed_tags must be a list of tag names",
                context={"field": "allowed_tags", "value": self.allowed_tags},
            )
        for name in ("allowed_classes", "allowed_attributes"):
            value = getattr(self, name)
            if not isinstance(value, dict):
                raise GfmifyOptionsError(
                    f"{name} must be a dict keyed by tag name",
                    context={"field": name, "value": value},
                )

        if self.emojify is not None and not callable(self.emojify):
            raise GfmifyOptionsError(
                "emojify must be callable",
                context={"field": "emojify", "value": self.emojify},
            )

        if self.media_base_url is None:
            self.media_base_url = self.base_url

    def __repr__(self) -> str:
        """Show only fields that differ from their defaults."""
        parts: list[str] = []
        for f in dataclasses.fields(self):
            val = getattr(self, f.name)
            if f.default is not dataclasses.MISSING:
                default = f.default
            elif f.default_factory is not dataclasses.MISSING:
                default = f.default_factory()
            else:
                default = None
            if f.name == "media_base_url" and val == self.base_url:
                continue
            if val != default:
                parts.append(f"{f.name}={val!r}")
        return f"RenderOptions({', '.join(parts)})"
