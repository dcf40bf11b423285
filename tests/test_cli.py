"""
Test suite for the main CLI interface.
"""

import json

import pytest
from typer.testing import CliRunner

from tdcli import __version__
from tdcli.cli import app
from tdcli.errors import InvalidReminderValue, ReminderCommandFailed, TransportFailure
from tdcli.todoist_api import Task
from tdcli.utils.config import load_stored_config

from .fakes import FakeSession, make_response

runner = CliRunner()


@pytest.fixture()
def client(mocker):
    """Replace the API client the task commands build."""
    factory = mocker.patch("tdcli.commands.common.TodoistClient")
    return factory.return_value


class TestCLI:
    """Test cases for the main CLI application."""

    def test_cli_help(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "Todoist CLI" in result.stdout

    def test_cli_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.stdout

    @pytest.mark.parametrize("command", ["list", "ls", "find", "add", "create", "update", "done", "delete", "rm"])
    def test_task_commands_exist(self, command):
        result = runner.invoke(app, ["task", command, "--help"])
        assert result.exit_code == 0

    def test_invalid_command(self):
        result = runner.invoke(app, ["nonexistent-command"])
        assert result.exit_code == 2


class TestTaskCommands:
    def test_add_with_reminders_prints_task_id(self, client):
        client.add_task.return_value = Task(id="42", content="Buy milk")

        result = runner.invoke(
            app, ["--plain", "task", "add", "Buy milk", "--priority", "3", "--reminder", "30", "--reminder", "tomorrow"]
        )

        assert result.exit_code == 0, result.output
        assert result.stdout.strip() == "42"
        client.add_task.assert_called_once_with(
            "Buy milk", project_id=None, due_string=None, priority=3, reminders=["30", "tomorrow"]
        )

    def test_add_json_output(self, client):
        client.add_task.return_value = Task(id="42", content="Buy milk", url="https://t/42")

        result = runner.invoke(app, ["--json", "task", "a", "Buy milk"])

        assert result.exit_code == 0
        assert json.loads(result.stdout)["data"]["task"]["id"] == "42"

    def test_priority_out_of_range_is_a_usage_error(self, client):
        result = runner.invoke(app, ["task", "add", "Buy milk", "--priority", "5"])
        assert result.exit_code == 2
        client.add_task.assert_not_called()

    def test_list_plain_lines_respect_limit(self, client):
        client.list_tasks.return_value = [Task(id=str(i), content=f"task {i}") for i in range(5)]

        result = runner.invoke(app, ["--plain", "task", "ls", "--project-id", "p1", "--limit", "2"])

        assert result.exit_code == 0
        assert result.stdout.splitlines() == ["0\ttask 0", "1\ttask 1"]
        client.list_tasks.assert_called_once_with(project_id="p1", filter=None)

    def test_list_human_table(self, client):
        client.list_tasks.return_value = [Task(id="1", content="Buy milk", project_id="p1")]

        result = runner.invoke(app, ["task", "list"])

        assert result.exit_code == 0
        assert "Buy milk" in result.stdout

    def test_find_filters_locally_after_server_search(self, client):
        client.list_tasks.return_value = [
            Task(id="1", content="Buy  milk"),
            Task(id="2", content="Buy milk and bread"),
            Task(id="3", content="Call mom"),
        ]

        result = runner.invoke(app, ["--plain", "task", "find", "buy MILK", "--exact"])

        assert result.exit_code == 0
        assert result.stdout.splitlines() == ["1\tBuy  milk"]
        client.list_tasks.assert_called_once_with(project_id=None, filter="search: buy MILK")

    def test_find_rejects_blank_query(self, client):
        result = runner.invoke(app, ["task", "find", "   "])
        assert result.exit_code == 2
        assert "must not be empty" in result.output

    def test_update_without_changes_is_a_usage_error(self, client):
        result = runner.invoke(app, ["task", "update", "7"])
        assert result.exit_code == 2
        assert "No updates provided" in result.output
        client.update_task.assert_not_called()

    def test_update_reminder_only(self, client):
        client.update_task.return_value = Task(id="7", content="x")

        result = runner.invoke(app, ["--plain", "task", "up", "7", "--reminder", "15"])

        assert result.exit_code == 0
        client.update_task.assert_called_once_with(
            "7", content=None, due_string=None, priority=None, reminders=["15"]
        )

    def test_done_and_delete(self, client):
        done = runner.invoke(app, ["--json", "task", "done", "7"])
        deleted = runner.invoke(app, ["--plain", "task", "rm", "8"])

        assert json.loads(done.stdout) == {"data": {"closed": "7"}}
        assert deleted.stdout.strip() == "8"
        client.close_task.assert_called_once_with("7")
        client.delete_task.assert_called_once_with("8")


class TestCLIErrors:
    """Test error handling in CLI commands."""

    def test_json_error_envelope(self, client):
        client.list_tasks.side_effect = TransportFailure("Todoist API 500: boom", status_code=500)

        result = runner.invoke(app, ["--json", "task", "list"])

        assert result.exit_code == 1
        assert json.loads(result.stdout) == {"error": {"message": "Todoist API 500: boom", "exitCode": 1}}

    def test_plain_error_line(self, client):
        client.add_task.side_effect = ReminderCommandFailed("42", "INVALID_DATE")

        result = runner.invoke(app, ["task", "add", "x", "--reminder", "someday"])

        assert result.exit_code == 1
        assert "Error: Failed to add reminder to task 42: INVALID_DATE" in result.output

    def test_usage_failures_exit_with_two(self, client):
        client.add_task.side_effect = InvalidReminderValue("0")

        result = runner.invoke(app, ["task", "add", "x", "--reminder", "0"])

        assert result.exit_code == 2

    def test_missing_token_reaches_the_user(self):
        result = runner.invoke(app, ["--json", "task", "list"])

        assert result.exit_code == 1
        assert "token not configured" in json.loads(result.stdout)["error"]["message"]

    def test_malformed_api_payload_gets_the_error_envelope(self, mocker, monkeypatch):
        monkeypatch.setenv("TODOIST_API_TOKEN", "abc")
        mocker.patch(
            "tdcli.todoist_api.http_client.requests.Session",
            return_value=FakeSession(make_response(200, json_body=[{"id": 42, "content": "x"}])),
        )

        result = runner.invoke(app, ["--json", "task", "ls"])

        assert result.exit_code == 1
        error = json.loads(result.stdout)["error"]
        assert error["message"].startswith("Unexpected response from Todoist API")
        assert error["exitCode"] == 1

    def test_invalid_flag_override_is_reported(self, client):
        result = runner.invoke(app, ["--json", "--endpoint", "ftp://nowhere", "task", "list"])

        assert result.exit_code == 1
        assert "Effective config is invalid" in json.loads(result.stdout)["error"]["message"]


class TestConfigCommands:
    def test_set_and_get_value(self):
        assert runner.invoke(app, ["cfg", "set", "timeout", "5000"]).exit_code == 0

        result = runner.invoke(app, ["--plain", "config", "get", "timeout"])

        assert result.stdout.strip() == "timeout=5000"

    def test_set_key_value_pairs(self):
        result = runner.invoke(app, ["config", "set", "retries=4", "endpoint=https://api.example.com"])

        assert result.exit_code == 0
        stored = load_stored_config()
        assert (stored.retries, stored.endpoint) == (4, "https://api.example.com")

    def test_secret_in_argv_is_refused(self):
        result = runner.invoke(app, ["config", "set", "apiToken", "abc"])
        assert result.exit_code == 2
        assert "Refusing secret in argv" in result.output

    def test_secret_from_stdin_is_stored_and_redacted(self):
        assert runner.invoke(app, ["config", "set", "apiToken", "-"], input="abc123\n").exit_code == 0
        assert load_stored_config().api_token == "abc123"

        result = runner.invoke(app, ["--json", "config", "get", "apiToken"])
        assert json.loads(result.stdout) == {"data": {"apiToken": "***redacted***"}}

    def test_unknown_key(self):
        result = runner.invoke(app, ["config", "get", "colour"])
        assert result.exit_code == 2

    def test_unset(self):
        runner.invoke(app, ["config", "set", "retries=5", "timeout=100"])
        result = runner.invoke(app, ["config", "unset", "retries"])
        assert result.exit_code == 0
        assert load_stored_config().retries is None
        assert load_stored_config().timeout == 100

    def test_import_keeps_stored_token(self):
        runner.invoke(app, ["config", "set", "apiToken", "-"], input="abc123")

        result = runner.invoke(app, ["config", "import", "--json"], input='{"retries": 1, "timeout": "900"}')

        assert result.exit_code == 0
        stored = load_stored_config()
        assert (stored.retries, stored.timeout, stored.api_token) == (1, 900, "abc123")

    def test_import_refuses_secrets(self):
        result = runner.invoke(app, ["config", "import", "--json"], input='{"apiToken": "x"}')
        assert result.exit_code == 2

    def test_import_rejects_boolean_numbers(self):
        result = runner.invoke(app, ["config", "import", "--json"], input='{"retries": true}')

        assert result.exit_code == 2
        assert "Invalid numeric value for retries" in result.output
        assert load_stored_config().retries is None

    def test_export_prints_effective_config(self, monkeypatch):
        monkeypatch.setenv("TODOIST_RETRIES", "0")
        result = runner.invoke(app, ["config", "export", "--json"])
        assert json.loads(result.stdout)["retries"] == 0

    def test_list_shows_path(self, isolated_env):
        result = runner.invoke(app, ["--plain", "cfg", "ls"])
        assert result.stdout.strip() == f"path={isolated_env / 'xdg' / 'todoist' / 'config.json'}"


class TestDoctor:
    def test_missing_token_fails_and_skips_reachability(self):
        result = runner.invoke(app, ["--json", "doctor"])

        assert result.exit_code == 1
        report = json.loads(result.stdout)
        assert report["status"] == "fail"
        checks = {check["name"]: check["status"] for check in report["checks"]}
        assert checks["auth_token"] == "FAIL"
        assert checks["endpoint_reachability"] == "WARN"

    def test_all_checks_pass(self, mocker, monkeypatch):
        monkeypatch.setenv("TODOIST_API_TOKEN", "abc")
        factory = mocker.patch("tdcli.commands.doctor_command.TodoistClient")

        result = runner.invoke(app, ["--plain", "check"])

        assert result.exit_code == 0, result.output
        factory.return_value.check_reachability.assert_called_once_with()
        assert "endpoint_reachability\tOK" in result.stdout

    def test_unreachable_endpoint(self, mocker, monkeypatch):
        monkeypatch.setenv("TODOIST_API_TOKEN", "abc")
        factory = mocker.patch("tdcli.commands.doctor_command.TodoistClient")
        factory.return_value.check_reachability.side_effect = TransportFailure("Request failed: refused")

        result = runner.invoke(app, ["doctor"])

        assert result.exit_code == 1
        assert "status=fail" in result.stdout
        assert "Request failed: refused" in result.output
