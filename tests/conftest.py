"""Pytest configuration and fixtures."""

import os

import pytest

from bibcheck.core.models import Entry


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch, tmp_path):
    """Isolate environment variables and config lookup for each test.

    This prevents a developer's own bibcheck configuration from leaking
    into test runs.
    """
    original_env = os.environ.copy()
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg-config"))
    monkeypatch.delenv("BIBCHECK_MODE", raising=False)
    monkeypatch.delenv("BIBCHECK_FILE_DIR", raising=False)

    yield

    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def make_entry():
    """Factory for entries: ``make_entry("book", title="...")``."""

    def factory(entry_type: str = "article", key: str = "key2024", **fields: str):
        return Entry.create(key, entry_type, fields)

    return factory
