"""Sanitization gate: allow-list resolution and HTML filtering."""

from __future__ import annotations

from gfmify.sanitize.allowlist import (
    EMPTY_ALLOW_LIST,
    AllowList,
    build_allow_list,
)
from gfmify.sanitize.cleaner import GfmFilter, sanitize_html

__all__ = [
    "EMPTY_ALLOW_LIST",
    "AllowList",
    "GfmFilter",
    "build_allow_list",
    "sanitize_html",
]
