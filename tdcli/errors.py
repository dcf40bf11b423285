"""Error types shared by the API layer and the command handlers.

Every failure the CLI can report is a :class:`CliError`.  The ``exit_code``
attribute is the process exit status the CLI uses when the error reaches the
top level: ``1`` for runtime / API failures, ``2`` for invalid usage.
"""
from __future__ import annotations

from typing import Optional


class CliError(Exception):
    """Base class for errors surfaced to the user."""

    def __init__(self, message: str, exit_code: int = 1) -> None:
        super().__init__(message)
        self.message = message
        self.exit_code = exit_code

    def __str__(self) -> str:
        return self.message


class UsageError(CliError):
    """Raised when command-line input is invalid."""

    def __init__(self, message: str) -> None:
        super().__init__(message, exit_code=2)


class ConfigError(CliError):
    """Raised when the stored or effective configuration cannot be used."""


class InvalidReminderValue(UsageError):
    """Raised for a numeric reminder value that is zero or out of range."""

    def __init__(self, value: str) -> None:
        super().__init__(f"Invalid reminder minutes value: {value}")
        self.value = value


class AuthenticationMissing(CliError):
    """Raised before any network activity when no API token is configured."""

    def __init__(self) -> None:
        super().__init__(
            "Todoist API token not configured. "
            "Set TODOIST_API_TOKEN or run: todoist cfg set apiToken -"
        )


class TransportFailure(CliError):
    """Raised when a request still fails after the last retry."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ReminderCommandFailed(CliError):
    """Raised when the sync endpoint rejects one of the reminder commands."""

    def __init__(self, task_id: str, status: str) -> None:
        super().__init__(f"Failed to add reminder to task {task_id}: {status}")
        self.task_id = task_id
        self.status = status


def to_cli_error(error: BaseException) -> CliError:
    if isinstance(error, CliError):
        return error
    return CliError(str(error) or "Unknown error", exit_code=1)
