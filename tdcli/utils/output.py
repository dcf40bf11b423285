"""
Rendering of command results in the three output modes.

* ``json``  - one line ``{"data": ...}`` (errors: ``{"error": {...}}``)
* ``plain`` - stable tab-separated lines meant for scripts
* ``human`` - rich tables / pretty JSON
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Any, Iterable, List, Optional, Sequence

import typer
from pydantic import BaseModel
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..errors import CliError


class OutputMode(str, Enum):
    human = "human"
    plain = "plain"
    json = "json"


def detect_output_mode(json_output: bool = False, plain: bool = False) -> OutputMode:
    if json_output:
        return OutputMode.json
    if plain:
        return OutputMode.plain
    return OutputMode.human


def to_jsonable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True)
    if isinstance(value, dict):
        return {key: to_jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(item) for item in value]
    return value


def print_data(mode: OutputMode, data: Any, plain_lines: Optional[Iterable[str]] = None) -> None:
    if mode is OutputMode.json:
        typer.echo(json.dumps({"data": to_jsonable(data)}))
        return

    if mode is OutputMode.plain:
        for line in plain_lines or ():
            typer.echo(line)
        return

    if isinstance(data, str):
        typer.echo(data)
        return

    Console().print_json(data=to_jsonable(data))


def task_lines(tasks: Sequence[Any]) -> List[str]:
    return [f"{task.id}\t{task.content}" for task in tasks]


def print_tasks(mode: OutputMode, tasks: Sequence[Any]) -> None:
    """Print a task list; human mode gets a table."""
    if mode is not OutputMode.human:
        print_data(mode, {"tasks": list(tasks), "count": len(tasks)}, task_lines(tasks))
        return

    console = Console()
    if not tasks:
        console.print("No tasks found.")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Content", style="green")
    table.add_column("Project", style="yellow")
    table.add_column("Done", style="magenta")
    for task in tasks:
        table.add_row(escape(task.id), escape(task.content), task.project_id or "-", "✓" if task.is_completed else " ")
    console.print(table)
    console.print(f"{len(tasks)} task(s)")


def report_error(mode: OutputMode, error: CliError) -> None:
    if mode is OutputMode.json:
        typer.echo(json.dumps({"error": {"message": error.message, "exitCode": error.exit_code}}))
    else:
        typer.echo(f"Error: {error.message}", err=True)
