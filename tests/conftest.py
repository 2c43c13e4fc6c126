"""Shared fixtures for intlformat tests."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from intlformat import ApplicationDefaults, Formatter, FormatterConfig


@pytest.fixture
def defaults() -> ApplicationDefaults:
    """Defaults independent of the machine's environment."""
    return ApplicationDefaults(locale="en_US", timezone="UTC")


@pytest.fixture
def formatter(defaults: ApplicationDefaults) -> Formatter:
    """Formatter with the built-in configuration."""
    return Formatter(defaults=defaults)


@pytest.fixture
def make_formatter(defaults: ApplicationDefaults):
    """Build a formatter from a configuration mapping merged over the defaults."""

    def factory(data: dict | None = None, **kwargs) -> Formatter:
        kwargs.setdefault("defaults", defaults)
        return Formatter(FormatterConfig.from_dict(data or {}), **kwargs)

    return factory


@pytest.fixture
def utc_noon() -> datetime:
    return datetime(2024, 1, 31, 12, 0, tzinfo=timezone.utc)
