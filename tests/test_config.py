import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from tdcli.errors import ConfigError, UsageError
from tdcli.utils.config import (
    DEFAULT_ENDPOINT,
    DEFAULT_RETRIES,
    DEFAULT_TIMEOUT_MS,
    EffectiveConfig,
    StoredConfig,
    coerce_value,
    is_secret_key,
    load_stored_config,
    parse_set_assignments,
    redact_config,
    resolve_config_path,
    resolve_effective_config,
    save_stored_config,
)


def test_config_path_uses_xdg_config_home():
    assert resolve_config_path({"XDG_CONFIG_HOME": "/tmp/xdg"}) == Path("/tmp/xdg/todoist/config.json")


def test_config_path_falls_back_to_home(isolated_env):
    assert resolve_config_path({}) == isolated_env / ".config" / "todoist" / "config.json"


def test_parse_set_assignments():
    assert parse_set_assignments(["endpoint=https://api.todoist.com", "retries=3"]) == {
        "endpoint": "https://api.todoist.com",
        "retries": "3",
    }


@pytest.mark.parametrize("bad", ["retries", "=3", "retries="])
def test_parse_set_assignments_rejects_malformed_input(bad):
    with pytest.raises(UsageError):
        parse_set_assignments([bad])


def test_defaults_apply_when_nothing_is_set():
    effective = resolve_effective_config(StoredConfig(), env={})
    assert effective.endpoint == DEFAULT_ENDPOINT
    assert effective.timeout == DEFAULT_TIMEOUT_MS
    assert effective.retries == DEFAULT_RETRIES
    assert effective.api_token is None


def test_flag_beats_env_beats_stored():
    stored = StoredConfig(timeout=1000, retries=1, endpoint="https://stored.example.com")
    env = {"TODOIST_TIMEOUT": "2000", "TODOIST_ENDPOINT": "https://env.example.com"}

    assert resolve_effective_config(stored, env={}).timeout == 1000
    assert resolve_effective_config(stored, env=env).timeout == 2000
    assert resolve_effective_config(stored, env=env, overrides={"timeout": 3000}).timeout == 3000

    effective = resolve_effective_config(stored, env=env, overrides={"endpoint": "https://flag.example.com"})
    assert effective.endpoint == "https://flag.example.com"
    assert effective.retries == 1


def test_env_token_wins_over_stored_token():
    stored = StoredConfig(api_token="from-file")
    assert resolve_effective_config(stored, env={"TODOIST_API_TOKEN": "from-env"}).api_token == "from-env"
    assert resolve_effective_config(stored, env={}).api_token == "from-file"


@pytest.mark.parametrize(
    "env",
    [{"TODOIST_TIMEOUT": "soon"}, {"TODOIST_RETRIES": "11"}, {"TODOIST_ENDPOINT": "not a url"}],
)
def test_invalid_effective_config_is_a_config_error(env):
    with pytest.raises(ConfigError) as excinfo:
        resolve_effective_config(StoredConfig(), env=env)
    assert str(excinfo.value).startswith("Effective config is invalid")
    assert excinfo.value.exit_code == 1


def test_effective_config_is_immutable():
    effective = resolve_effective_config(StoredConfig(), env={})
    with pytest.raises(ValidationError):
        effective.timeout = 5


def test_missing_file_is_empty_config(tmp_path):
    assert load_stored_config(tmp_path / "missing.json") == StoredConfig()


def test_invalid_json_file(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json")
    with pytest.raises(ConfigError, match="not valid JSON"):
        load_stored_config(path)


def test_schema_violation_in_file(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"timeout": -5}))
    with pytest.raises(ConfigError, match="Config validation failed"):
        load_stored_config(path)


def test_saved_file_uses_camel_case_keys(tmp_path):
    path = tmp_path / "nested" / "config.json"

    save_stored_config({"apiToken": "abc", "retries": 4}, path)

    assert json.loads(path.read_text()) == {"apiToken": "abc", "retries": 4}
    assert path.read_text().endswith("\n")
    assert load_stored_config(path).api_token == "abc"


def test_save_refuses_invalid_values(tmp_path):
    with pytest.raises(ConfigError, match="Cannot save config"):
        save_stored_config({"retries": 99}, tmp_path / "config.json")


def test_redact_config_hides_token():
    effective = EffectiveConfig(endpoint=DEFAULT_ENDPOINT, api_token="abc")
    assert redact_config(effective) == {
        "endpoint": DEFAULT_ENDPOINT,
        "apiToken": "***redacted***",
        "timeout": DEFAULT_TIMEOUT_MS,
        "retries": DEFAULT_RETRIES,
    }
    assert redact_config(StoredConfig())["apiToken"] is None


@pytest.mark.parametrize(
    "key, secret",
    [("apiToken", True), ("api_key", True), ("client-secret", True), ("endpoint", False), ("timeout", False)],
)
def test_is_secret_key(key, secret):
    assert is_secret_key(key) is secret


def test_coerce_value():
    assert coerce_value("timeout", "5000") == 5000
    assert coerce_value("endpoint", "https://x") == "https://x"
    with pytest.raises(UsageError):
        coerce_value("retries", "many")
