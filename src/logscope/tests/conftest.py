"""Shared fixtures: fresh default session and settings per test."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from logscope import MemorySink, clear_settings_cache, reset_logging


@pytest.fixture(autouse=True)
def clean_logging() -> Iterator[None]:
    """Forget the default session and cached settings around each test."""
    clear_settings_cache()
    reset_logging()
    yield
    reset_logging()
    clear_settings_cache()


@pytest.fixture
def sink() -> MemorySink:
    return MemorySink()
