"""
Handlers for ``todoist config`` (alias ``cfg``).

Secrets (``apiToken``) never travel through argv: the only way to store one
is ``todoist cfg set apiToken -`` with the value piped on stdin.
"""
import json
from typing import Any, Dict, List

import typer

from ..errors import UsageError
from ..utils.config import (
    REDACTED,
    config_value,
    coerce_value,
    ensure_allowed_key,
    is_secret_key,
    load_stored_config,
    parse_set_assignments,
    redact_config,
    resolve_config_path,
    resolve_effective_config,
    save_stored_config,
)
from ..utils.io import read_all_stdin, read_stdin_trimmed
from ..utils.output import print_data
from .common import GlobalOptions


def handle_config_list(options: GlobalOptions) -> None:
    stored = load_stored_config()
    effective = resolve_effective_config(stored, overrides=options.overrides())
    path = str(resolve_config_path())
    data = {"path": path, "stored": redact_config(stored), "effective": redact_config(effective)}
    print_data(options.mode, data, [f"path={path}"])


def handle_config_path(options: GlobalOptions) -> None:
    path = str(resolve_config_path())
    print_data(options.mode, {"path": path}, [path])


def handle_config_get(options: GlobalOptions, keys: List[str]) -> None:
    for key in keys:
        ensure_allowed_key(key)

    effective = resolve_effective_config(load_stored_config(), overrides=options.overrides())
    data: Dict[str, Any] = {}
    for key in keys:
        value = config_value(effective, key)
        data[key] = REDACTED if is_secret_key(key) and value else value

    plain = [f"{key}={'' if data[key] is None else data[key]}" for key in keys]
    print_data(options.mode, data, plain)


def handle_config_set(options: GlobalOptions, values: List[str]) -> None:
    """Accepts either ``<key> <value>`` or one or more ``key=value`` pairs."""
    updates: Dict[str, Any] = {}

    if len(values) == 2 and "=" not in values[0]:
        key, raw_value = values
        ensure_allowed_key(key)
        if is_secret_key(key):
            if raw_value != "-":
                raise UsageError(
                    f"Refusing secret in argv for key {key}. Use stdin: printf 'token' | todoist cfg set {key} -"
                )
            updates[key] = read_stdin_trimmed()
        else:
            updates[key] = coerce_value(key, raw_value)
    else:
        for key, raw_value in parse_set_assignments(values).items():
            ensure_allowed_key(key)
            if is_secret_key(key):
                raise UsageError(f"Secret key {key} must be set via stdin and '-' placeholder")
            updates[key] = coerce_value(key, raw_value)

    current = load_stored_config().to_file_dict()
    save_stored_config({**current, **updates})
    print_data(options.mode, {"updated": list(updates)}, list(updates))


def handle_config_unset(options: GlobalOptions, keys: List[str]) -> None:
    current = load_stored_config().to_file_dict()
    for key in keys:
        ensure_allowed_key(key)
        current.pop(key, None)
    save_stored_config(current)
    print_data(options.mode, {"unset": keys}, keys)


def handle_config_import(options: GlobalOptions) -> None:
    """Replace the stored settings with a JSON object read from stdin.

    Secrets cannot be imported; an already stored token is kept.
    """
    raw = read_all_stdin()
    if not raw.strip():
        raise UsageError("No JSON input provided on stdin")
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise UsageError(f"Invalid JSON input: {exc}")
    if not isinstance(parsed, dict):
        raise UsageError("JSON input must be an object")

    imported: Dict[str, Any] = {}
    for key, value in parsed.items():
        ensure_allowed_key(key, context="Unsupported key in import")
        if is_secret_key(key):
            raise UsageError(f"Refusing secret import for key {key}. Use stdin secret set command instead.")
        if value is None:
            continue
        numeric = isinstance(value, int) and not isinstance(value, bool)
        imported[key] = value if numeric else coerce_value(key, str(value))

    kept = {k: v for k, v in load_stored_config().to_file_dict().items() if is_secret_key(k)}
    save_stored_config({**imported, **kept})
    print_data(options.mode, {"imported": list(imported)}, list(imported))


def handle_config_export(options: GlobalOptions) -> None:
    """Print the effective configuration, token included, as JSON."""
    effective = resolve_effective_config(load_stored_config(), overrides=options.overrides())
    typer.echo(json.dumps(effective.model_dump(by_alias=True)))
