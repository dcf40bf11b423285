"""
Reminder scheduling through the Todoist sync endpoint.

The REST API has no reminder route, so reminders are sent as ``reminder_add``
commands in one ``POST /api/v1/sync`` call.  The server answers with a
``sync_status`` map keyed by each command's ``uuid``; only ``"ok"`` counts as
success.
"""

from __future__ import annotations

import json
import logging
import uuid
from typing import Callable, Iterable, List, Optional, Sequence
from urllib.parse import urlencode

from ..errors import ReminderCommandFailed
from .data_models import SYNC_OK, ReminderCommand, ReminderSpec, SyncResponse, validate_response
from .http_client import FORM_CONTENT_TYPE, HttpTransport
from .reminders import parse_reminder_value

SYNC_PATH = "/api/v1/sync"

log = logging.getLogger(__name__)


def _uuid4() -> str:
    return str(uuid.uuid4())


class ReminderBatch:
    def __init__(self, transport: HttpTransport, id_factory: Optional[Callable[[], str]] = None) -> None:
        self.transport = transport
        self.id_factory = id_factory or _uuid4

    def add_reminders(self, task_id: str, raw_values: Iterable[str]) -> None:
        """Parse ``raw_values`` and attach them to ``task_id`` in one sync call.

        Parsing happens before anything is sent, so one bad value means no
        request at all.
        """
        specs = [parse_reminder_value(value) for value in raw_values]
        self.submit(task_id, specs)

    def submit(self, task_id: str, specs: Sequence[ReminderSpec]) -> None:
        if not specs:
            return

        commands = self.build_commands(task_id, specs)
        body = urlencode({"commands": json.dumps([command.to_payload() for command in commands])})
        payload = self.transport.send("POST", SYNC_PATH, body=body, content_type=FORM_CONTENT_TYPE)
        result = validate_response(SyncResponse, payload or {})

        for command in commands:
            status = result.status_for(command.uuid)
            if status != SYNC_OK:
                raise ReminderCommandFailed(task_id, "unknown error" if status is None else str(status))

        log.info("Added %d reminder(s) to task %s", len(commands), task_id)

    def build_commands(self, task_id: str, specs: Sequence[ReminderSpec]) -> List[ReminderCommand]:
        return [
            ReminderCommand(uuid=self.id_factory(), temp_id=self.id_factory(), task_id=task_id, spec=spec)
            for spec in specs
        ]
