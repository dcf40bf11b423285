"""
Readiness checks for ``todoist doctor`` (alias ``check``).

Each check yields OK / WARN / FAIL with an optional hint.  Any FAIL makes the
command exit with status 1.
"""
from __future__ import annotations

import json
import os
import sys
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Callable, List, Optional

import typer
from rich.console import Console

from ..errors import CliError
from ..todoist_api import TodoistClient
from ..utils.config import EffectiveConfig, load_stored_config, resolve_config_path, resolve_effective_config
from ..utils.output import OutputMode
from .common import GlobalOptions

MIN_PYTHON = (3, 9)

_STYLES = {"OK": ("✅", "green"), "WARN": ("⚠️", "yellow"), "FAIL": ("❌", "red")}


@dataclass
class CheckResult:
    name: str
    status: str  # "OK" | "WARN" | "FAIL"
    hint: Optional[str] = None

    def to_dict(self) -> dict:
        return {k: v for k, v in asdict(self).items() if v is not None}


def _check_python() -> CheckResult:
    if sys.version_info >= MIN_PYTHON:
        return CheckResult("python_runtime", "OK")
    return CheckResult("python_runtime", "FAIL", f"Python {'.'.join(map(str, MIN_PYTHON))}+ is required")


def _check_config_dir(config_path: Path) -> CheckResult:
    config_dir = config_path.parent
    # the directory is created on first save, so check the closest existing ancestor
    target = next((p for p in (config_dir, *config_dir.parents) if p.exists()), None)
    if target is not None and os.access(target, os.R_OK | os.W_OK | os.X_OK):
        return CheckResult("config_directory_access", "OK")
    return CheckResult("config_directory_access", "FAIL", f"Cannot access {config_dir} or create it")


def run_checks(
    options: GlobalOptions,
    client_factory: Optional[Callable[[EffectiveConfig], TodoistClient]] = None,
) -> List[CheckResult]:
    client_factory = client_factory or TodoistClient
    checks = [_check_python()]

    config_path = resolve_config_path()
    checks.append(_check_config_dir(config_path))

    effective: Optional[EffectiveConfig] = None
    try:
        effective = resolve_effective_config(load_stored_config(config_path), overrides=options.overrides())
        checks.append(CheckResult("config_validation", "OK"))
    except CliError as exc:
        checks.append(CheckResult("config_validation", "FAIL", exc.message))

    if effective is None or not effective.api_token:
        checks.append(CheckResult("auth_token", "FAIL", "Set TODOIST_API_TOKEN or todoist cfg set apiToken -"))
        checks.append(CheckResult("endpoint_reachability", "WARN", "Skipped (missing auth token)"))
        return checks

    checks.append(CheckResult("auth_token", "OK"))
    try:
        client_factory(effective).check_reachability()
        checks.append(CheckResult("endpoint_reachability", "OK"))
    except CliError as exc:
        checks.append(CheckResult("endpoint_reachability", "FAIL", exc.message))
    return checks


def overall_status(checks: List[CheckResult]) -> str:
    statuses = {check.status for check in checks}
    if "FAIL" in statuses:
        return "fail"
    if "WARN" in statuses:
        return "warn"
    return "ok"


def render_checks(mode: OutputMode, checks: List[CheckResult]) -> None:
    overall = overall_status(checks)
    if mode is OutputMode.json:
        typer.echo(json.dumps({"status": overall, "checks": [check.to_dict() for check in checks]}))
    elif mode is OutputMode.plain:
        for check in checks:
            typer.echo(f"{check.name}\t{check.status}\t{check.hint or ''}".rstrip())
    else:
        console = Console(stderr=True)
        for check in checks:
            icon, style = _STYLES[check.status]
            suffix = f" - {check.hint}" if check.hint else ""
            console.print(f"{icon} {check.status} {check.name}{suffix}", style=style, markup=False)
        typer.echo(f"status={overall}")


def handle_doctor(options: GlobalOptions) -> int:
    """Run every check, print the report and return the exit status."""
    checks = run_checks(options)
    render_checks(options.mode, checks)
    return 1 if overall_status(checks) == "fail" else 0
