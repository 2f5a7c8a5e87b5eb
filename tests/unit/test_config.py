"""Tests for RenderOptions defaults, validation and repr."""

from __future__ import annotations

import re

import pytest

from gfmify.config import RenderOptions
from gfmify.converter.renderer import GfmRenderer
from gfmify.errors import ErrorCode, GfmifyOptionsError
from gfmify.observability import MetricsHook, NoopMetricsHook


class TestDefaults:
    def test_all_defaults(self):
        opts = RenderOptions()
        assert opts.base_url is None
        assert opts.media_base_url is None
        assert opts.inline is False
        assert opts.breaks is False
        assert opts.allow_iframes is False
        assert opts.allow_math is False
        assert opts.disable_html_sanitization is False
        assert opts.allowed_tags == []
        assert opts.allowed_classes == {}
        assert opts.allowed_attributes == {}
        assert opts.renderer is None
        assert opts.emojify is None
        assert opts.metrics is None

    def test_mutable_defaults_not_shared(self):
        a, b = RenderOptions(), RenderOptions()
        a.allowed_tags.append("kbd")
        assert b.allowed_tags == []

    def test_media_base_url_filled_from_base_url(self):
        assert RenderOptions(base_url="https://h/").media_base_url == "https://h/"

    def test_explicit_media_base_url_kept(self):
        opts = RenderOptions(base_url="https://h/", media_base_url="https://cdn/")
        assert opts.media_base_url == "https://cdn/"

    def test_accepts_collaborators(self):
        renderer = GfmRenderer()
        opts = RenderOptions(renderer=renderer, emojify=str.upper)
        assert opts.renderer is renderer
        assert opts.emojify("a") == "A"

    def test_accepts_metrics_hook(self):
        hook = NoopMetricsHook()
        assert isinstance(hook, MetricsHook)
        assert RenderOptions(metrics=hook).metrics is hook

    def test_accepts_regex_class_rules(self):
        rule = re.compile(r"lang-\w+")
        assert RenderOptions(allowed_classes={"code": [rule]}).allowed_classes["code"] == [rule]


class TestValidation:
    @pytest.mark.parametrize(
        "kwargs, field",
        [
            ({"base_url": 42}, "base_url"),
            ({"media_base_url": b"https://h/"}, "media_base_url"),
            ({"allowed_tags": "img"}, "allowed_tags"),
            ({"allowed_tags": ["img", 3]}, "allowed_tags"),
            ({"allowed_classes": ["div"]}, "allowed_classes"),
            ({"allowed_attributes": None}, "allowed_attributes"),
            ({"emojify": "not callable"}, "emojify"),
        ],
    )
    def test_invalid_values_rejected(self, kwargs, field):
        with pytest.raises(GfmifyOptionsError) as exc_info:
            RenderOptions(**kwargs)
        err = exc_info.value
        assert err.code == ErrorCode.INVALID_OPTIONS
        assert err.context["field"] == field

    def test_options_error_is_value_error(self):
        with pytest.raises(ValueError):
            RenderOptions(base_url=1)


class TestRepr:
    def test_default_repr_is_empty(self):
        assert repr(RenderOptions()) == "RenderOptions()"

    def test_only_non_defaults_shown(self):
        r = repr(RenderOptions(allow_math=True, allowed_tags=["kbd"]))
        assert r == "RenderOptions(allow_math=True, allowed_tags=['kbd'])"

    def test_filled_media_base_url_hidden(self):
        assert repr(RenderOptions(base_url="https://h/")) == "RenderOptions(base_url='https://h/')"

    def test_distinct_media_base_url_shown(self):
        r = repr(RenderOptions(base_url="https://h/", media_base_url="https://cdn/"))
        assert "media_base_url='https://cdn/'" in r
