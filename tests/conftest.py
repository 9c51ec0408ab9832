"""Shared pytest fixtures."""

import pytest

ENV_VARS = ("LOG_LEVEL", "DATABASE_URL", "OUTPUT_DIR")


@pytest.fixture
def clean_env(monkeypatch):
    """Unset every environment variable the application reads."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def write_config(tmp_path):
    """Write YAML text to a config file and return its path."""

    def _write(text: str, name: str = "config.yaml"):
        path = tmp_path / name
        path.write_text(text)
        return path

    return _write
