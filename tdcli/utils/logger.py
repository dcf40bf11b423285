"""Shared logger initialization for the CLI.

Usage:
    from tdcli.utils.logger import configure_logging
    configure_logging(verbose=True)

Library modules only call ``logging.getLogger(__name__)``; the CLI callback
decides where records go and at which level.
"""
from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

_FORMAT = "%(message)s"  # rich handler already adds time & level


def level_for(verbose: bool = False, quiet: bool = False) -> int:
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.ERROR
    return logging.WARNING


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Idempotently attach a stderr RichHandler to the root logger."""
    level = level_for(verbose=verbose, quiet=quiet)
    root = logging.getLogger()
    root.setLevel(level)

    handler = next((h for h in root.handlers if isinstance(h, RichHandler)), None)
    if handler is None:
        handler = RichHandler(console=Console(stderr=True), rich_tracebacks=True, show_path=False)
        handler.setFormatter(logging.Formatter(_FORMAT))
        root.addHandler(handler)
    handler.setLevel(level)
