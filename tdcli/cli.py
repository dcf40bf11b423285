#!/usr/bin/env python3
"""Typer application for the ``todoist`` command."""
from typing import Callable, List, Optional

import typer

from . import __version__
from .commands.add_command import handle_add
from .commands.common import GlobalOptions, error_boundary
from .commands.complete_command import handle_complete
from .commands.config_command import (
    handle_config_export,
    handle_config_get,
    handle_config_import,
    handle_config_list,
    handle_config_path,
    handle_config_set,
    handle_config_unset,
)
from .commands.delete_command import handle_delete
from .commands.doctor_command import handle_doctor
from .commands.list_command import handle_list
from .commands.search_command import handle_find
from .commands.update_command import handle_update
from .errors import UsageError
from .utils.config import load_env_vars
from .utils.logger import configure_logging

REMINDER_HELP = (
    "Reminder value. Repeat for multiple reminders. "
    "Number => minutes before due, otherwise absolute due date/time string."
)

# Create app instance
app = typer.Typer(
    name="todoist",
    help="Todoist CLI - Manage tasks, reminders and configuration from the terminal.",
    no_args_is_help=True,
)
task_app = typer.Typer(help="Manage Todoist tasks.", no_args_is_help=True)
config_app = typer.Typer(help="Manage CLI configuration.", no_args_is_help=True)

app.add_typer(task_app, name="task")
app.add_typer(config_app, name="config")
app.add_typer(config_app, name="cfg", hidden=True)


def command(target: typer.Typer, name: str, *aliases: str, **kwargs) -> Callable:
    """Register a command under ``name`` plus hidden aliases."""

    def decorator(func: Callable) -> Callable:
        target.command(name, **kwargs)(func)
        for alias in aliases:
            target.command(alias, hidden=True, **kwargs)(func)
        return func

    return decorator


def _options(ctx: typer.Context) -> GlobalOptions:
    return ctx.find_object(GlobalOptions) or GlobalOptions()


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    json_output: bool = typer.Option(False, "--json", help="Output machine-readable JSON."),
    plain: bool = typer.Option(False, "--plain", help="Output stable plain lines."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Reduce non-critical logs."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose diagnostics."),
    timeout: Optional[int] = typer.Option(None, "--timeout", min=1, help="Request timeout in ms."),
    retries: Optional[int] = typer.Option(None, "--retries", min=0, help="Retry count."),
    endpoint: Optional[str] = typer.Option(None, "--endpoint", help="Todoist API endpoint."),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show the version and exit."
    ),
):
    """Todoist CLI - Manage tasks, reminders and configuration from the terminal."""
    load_env_vars()
    configure_logging(verbose=verbose, quiet=quiet)
    ctx.obj = GlobalOptions(
        json_output=json_output,
        plain=plain,
        quiet=quiet,
        verbose=verbose,
        timeout=timeout,
        retries=retries,
        endpoint=endpoint,
    )


# --- task ---------------------------------------------------------------------

@command(task_app, "list", "ls")
def task_list(
    ctx: typer.Context,
    project_id: Optional[str] = typer.Option(None, "--project-id", help="Filter by project."),
    filter_query: Optional[str] = typer.Option(None, "--filter", help="Todoist filter query."),
    limit: int = typer.Option(50, "--limit", min=1, help="Max tasks to return."),
):
    """List tasks."""
    options = _options(ctx)
    with error_boundary(options):
        handle_list(options, project_id, filter_query, limit)


@command(task_app, "find", "search", "f")
def task_find(
    ctx: typer.Context,
    query: str = typer.Argument(..., help="Search query."),
    project_id: Optional[str] = typer.Option(None, "--project-id", help="Filter by project."),
    limit: int = typer.Option(20, "--limit", min=1, help="Max matches to return."),
    show_all: bool = typer.Option(False, "--all", help="Return all matches."),
    exact: bool = typer.Option(False, "--exact", help="Require exact normalized content match."),
):
    """Find tasks by content text."""
    options = _options(ctx)
    with error_boundary(options):
        handle_find(options, query, project_id, limit, show_all=show_all, exact=exact)


@command(task_app, "add", "a", "create")
def task_add(
    ctx: typer.Context,
    content: str = typer.Argument(..., help="Task content."),
    project_id: Optional[str] = typer.Option(None, "--project-id", help="Project ID."),
    due_string: Optional[str] = typer.Option(None, "--due-string", help="Natural language due date."),
    priority: Optional[int] = typer.Option(None, "--priority", min=1, max=4, help="Priority 1-4."),
    reminder: Optional[List[str]] = typer.Option(None, "--reminder", help=REMINDER_HELP),
):
    """Add a new task."""
    options = _options(ctx)
    with error_boundary(options):
        handle_add(
            options,
            content,
            project_id=project_id,
            due_string=due_string,
            priority=priority,
            reminders=list(reminder or []),
        )


@command(task_app, "update", "up", "edit")
def task_update(
    ctx: typer.Context,
    task_id: str = typer.Argument(..., help="Task ID."),
    content: Optional[str] = typer.Option(None, "--content", help="Updated task content."),
    due_string: Optional[str] = typer.Option(None, "--due-string", help="Updated natural language due date."),
    priority: Optional[int] = typer.Option(None, "--priority", min=1, max=4, help="Updated priority 1-4."),
    reminder: Optional[List[str]] = typer.Option(None, "--reminder", help="Reminder value to add. " + REMINDER_HELP),
):
    """Update an existing task."""
    options = _options(ctx)
    with error_boundary(options):
        handle_update(
            options,
            task_id,
            content=content,
            due_string=due_string,
            priority=priority,
            reminders=list(reminder or []),
        )


@command(task_app, "done", "c", "complete")
def task_done(ctx: typer.Context, task_id: str = typer.Argument(..., help="Task ID.")):
    """Mark task complete."""
    options = _options(ctx)
    with error_boundary(options):
        handle_complete(options, task_id)


@command(task_app, "delete", "del", "rm")
def task_delete(ctx: typer.Context, task_id: str = typer.Argument(..., help="Task ID.")):
    """Delete task."""
    options = _options(ctx)
    with error_boundary(options):
        handle_delete(options, task_id)


# --- config -------------------------------------------------------------------

@command(config_app, "list", "ls")
def config_list(ctx: typer.Context):
    """List effective configuration."""
    options = _options(ctx)
    with error_boundary(options):
        handle_config_list(options)


@command(config_app, "path")
def config_path(ctx: typer.Context):
    """Print config file path."""
    options = _options(ctx)
    with error_boundary(options):
        handle_config_path(options)


@command(config_app, "get")
def config_get(ctx: typer.Context, keys: List[str] = typer.Argument(..., help="Config keys.")):
    """Get one or more effective config keys."""
    options = _options(ctx)
    with error_boundary(options):
        handle_config_get(options, keys)


@command(config_app, "set")
def config_set(ctx: typer.Context, values: List[str] = typer.Argument(..., help="key value OR key=value ...")):
    """Set config values: key value OR key=value key=value."""
    options = _options(ctx)
    with error_boundary(options):
        handle_config_set(options, values)


@command(config_app, "unset")
def config_unset(ctx: typer.Context, keys: List[str] = typer.Argument(..., help="Config keys.")):
    """Unset one or more keys."""
    options = _options(ctx)
    with error_boundary(options):
        handle_config_unset(options, keys)


@command(config_app, "import")
def config_import(
    ctx: typer.Context,
    json_input: bool = typer.Option(False, "--json", help="Read JSON payload from stdin."),
):
    """Import config from stdin JSON payload."""
    options = _options(ctx)
    with error_boundary(options):
        if not (json_input or options.json_output):
            raise UsageError("config import requires --json")
        handle_config_import(options)


@command(config_app, "export")
def config_export(
    ctx: typer.Context,
    json_export: bool = typer.Option(False, "--json", help="Output JSON."),
):
    """Export effective config."""
    options = _options(ctx)
    with error_boundary(options):
        if not (json_export or options.json_output):
            raise UsageError("config export requires --json")
        handle_config_export(options)


# --- doctor -------------------------------------------------------------------

@command(app, "doctor", "check")
def doctor(ctx: typer.Context):
    """Run readiness checks."""
    options = _options(ctx)
    with error_boundary(options):
        code = handle_doctor(options)
    if code:
        raise typer.Exit(code=code)


def main() -> None:
    app(prog_name="todoist")


if __name__ == "__main__":
    main()
