"""Parsing of ``--reminder`` values."""
from __future__ import annotations

import math
import re

from ..errors import InvalidReminderValue
from .data_models import ReminderSpec

_MINUTES_RE = re.compile(r"[0-9]+")


def parse_reminder_value(raw: str) -> ReminderSpec:
    """Turn one reminder argument into a :class:`ReminderSpec`.

    A value made only of ASCII digits is a number of minutes before the task
    is due.  Anything else (``"tomorrow 9am"``, ``"2026-03-01T09:00:00Z"``,
    ``"-5"``, ``"3.5"``) is handed to the server as an absolute due date,
    untouched.
    """
    if _MINUTES_RE.fullmatch(raw):
        # float() overflows to inf on absurdly long digit strings
        if not math.isfinite(float(raw)) or int(raw) <= 0:
            raise InvalidReminderValue(raw)
        return ReminderSpec(kind="relative", minute_offset=int(raw))

    return ReminderSpec(kind="absolute", due_date=raw)
