"""Tests for the gfmify error hierarchy."""

from __future__ import annotations

import pytest

from gfmify.errors import (
    ErrorCode,
    GfmifyConversionError,
    GfmifyError,
    GfmifyMathError,
    GfmifyOptionsError,
)


class TestHierarchy:
    @pytest.mark.parametrize(
        "cls", [GfmifyOptionsError, GfmifyConversionError, GfmifyMathError]
    )
    def test_all_inherit_from_base(self, cls):
        assert issubclass(cls, GfmifyError)

    def test_math_error_is_conversion_error(self):
        assert issubclass(GfmifyMathError, GfmifyConversionError)

    def test_options_error_is_value_error(self):
        assert issubclass(GfmifyOptionsError, ValueError)


class TestErrorAttributes:
    def test_codes(self):
        assert GfmifyOptionsError("m").code == ErrorCode.INVALID_OPTIONS
        assert GfmifyConversionError().code == ErrorCode.CONVERSION_ERROR
        assert GfmifyMathError("m").code == ErrorCode.MATH_RENDER_ERROR

    def test_error_code_is_str(self):
        assert ErrorCode.MATH_RENDER_ERROR == "MATH_RENDER_ERROR"

    def test_message_and_str(self):
        err = GfmifyMathError("could not render")
        assert err.message == "could not render"
        assert str(err) == "could not render"

    def test_context_defaults_to_empty_dict(self):
        assert GfmifyMathError("m").context == {}

    def test_cause_chained(self):
        cause = RuntimeError("engine")
        err = GfmifyMathError("m", context={"expression": "x"}, cause=cause)
        assert err.cause is cause
        assert err.__cause__ is cause

    def test_repr_includes_context(self):
        err = GfmifyOptionsError("bad", context={"field": "base_url"})
        r = repr(err)
        assert r.startswith("GfmifyOptionsError(code=")
        assert "'field': 'base_url'" in r

    def test_repr_without_context(self):
        assert "context" not in repr(GfmifyMathError("m"))
