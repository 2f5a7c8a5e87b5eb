"""Shared test fixtures for the gfmify test suite."""

from __future__ import annotations

import pytest

from gfmify.config import RenderOptions
from gfmify.converter.renderer import GfmRenderer


class RecordingMetrics:
    """MetricsHook that records every call for assertions."""

    def __init__(self) -> None:
        self.counters: list[tuple[str, int, dict[str, str] | None]] = []
        self.timings: list[tuple[str, float, dict[str, str] | None]] = []

    def increment(self, name, value=1, tags=None):
        self.counters.append((name, value, tags))

    def timing(self, name, ms, tags=None):
        self.timings.append((name, ms, tags))

    def names(self) -> list[str]:
        return [name for name, _, _ in self.counters]


@pytest.fixture
def options() -> RenderOptions:
    """Default render options."""
    return RenderOptions()


@pytest.fixture
def base_options() -> RenderOptions:
    """Render options with a base URL configured."""
    return RenderOptions(base_url="https://example.com/docs/")


@pytest.fixture
def unsafe_options() -> RenderOptions:
    """Render options that return renderer output unsanitized."""
    return RenderOptions(disable_html_sanitization=True)


@pytest.fixture
def renderer() -> GfmRenderer:
    """A bare renderer with no base URL and math disabled."""
    return GfmRenderer()


@pytest.fixture
def metrics() -> RecordingMetrics:
    return RecordingMetrics()
