"""Pieces shared by every command handler."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict, Iterator, Optional

import typer

from ..errors import CliError, to_cli_error
from ..todoist_api import TodoistClient
from ..utils.config import EffectiveConfig, load_effective_config
from ..utils.output import OutputMode, detect_output_mode, report_error

log = logging.getLogger(__name__)


@dataclass
class GlobalOptions:
    """Options given before the sub-command (``todoist --json task ls``)."""

    json_output: bool = False
    plain: bool = False
    quiet: bool = False
    verbose: bool = False
    timeout: Optional[int] = None
    retries: Optional[int] = None
    endpoint: Optional[str] = None

    @property
    def mode(self) -> OutputMode:
        return detect_output_mode(json_output=self.json_output, plain=self.plain)

    def overrides(self) -> Dict[str, Any]:
        return {"endpoint": self.endpoint, "timeout": self.timeout, "retries": self.retries}


def effective_config(options: GlobalOptions) -> EffectiveConfig:
    return load_effective_config(options.overrides())


def build_client(options: GlobalOptions) -> TodoistClient:
    return TodoistClient(effective_config(options))


@contextmanager
def error_boundary(options: GlobalOptions) -> Iterator[None]:
    """Report a failure in the active output mode and exit with its code."""
    try:
        yield
    except (CliError, OSError) as exc:
        log.debug("command failed", exc_info=True)
        error = to_cli_error(exc)
        report_error(options.mode, error)
        raise typer.Exit(code=error.exit_code)
