"""Shared fixtures: isolate the cached config and the package logger per test."""

import logging

import pytest

from recordschema.config import get_config


@pytest.fixture(autouse=True)
def _fresh_config(tmp_path, monkeypatch):
    monkeypatch.setenv("RECORDSCHEMA_HOME_DIR", str(tmp_path / "home"))
    get_config.cache_clear()
    yield
    get_config.cache_clear()


@pytest.fixture(autouse=True)
def _reset_logger():
    yield
    root = logging.getLogger("recordschema")
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    for f in root.filters[:]:
        root.removeFilter(f)
    root.addHandler(logging.NullHandler())
    root.propagate = True
    root.setLevel(logging.NOTSET)
