"""Shared test fixtures."""

from __future__ import annotations

import os

import pytest

# Keep test output free of INFO-level log lines
os.environ.setdefault("SAFECALC_LOG_LEVEL", "WARNING")


@pytest.fixture(autouse=True)
def _reset_calc_settings_cache():
    """Each test reads calculator.toml fresh."""
    import safecalc.config as config

    config._CALC_SETTINGS_CACHE = None
    yield
    config._CALC_SETTINGS_CACHE = None
