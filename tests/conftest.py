# tests/conftest.py

from __future__ import annotations

from pathlib import Path

import pytest

from tdcli.utils.config import EffectiveConfig

from .fakes import FakeSession


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep every test away from the real config file, .env files and token."""
    for name in ("TODOIST_API_TOKEN", "TODOIST_ENDPOINT", "TODOIST_TIMEOUT", "TODOIST_RETRIES"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture()
def config() -> EffectiveConfig:
    return EffectiveConfig(endpoint="https://api.todoist.test", api_token="secret-token", timeout=1000, retries=2)


@pytest.fixture()
def session() -> FakeSession:
    return FakeSession()
