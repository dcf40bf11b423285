"""
Data models representing Todoist objects (tasks, reminders, sync commands).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, ValidationError

from ..errors import TransportFailure
from ..utils.config import first_validation_issue

REMINDER_ADD = "reminder_add"
SYNC_OK = "ok"

ModelT = TypeVar("ModelT", bound=BaseModel)


def validate_response(model: Type[ModelT], payload: Any) -> ModelT:
    """Validate an API payload, reporting a schema mismatch as a transport failure."""
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise TransportFailure(f"Unexpected response from Todoist API: {first_validation_issue(exc)}")


class Task(BaseModel):
    id: str
    content: str = ""
    project_id: str = ""
    is_completed: bool = False
    url: str = ""
    # priority, due, labels, etc. are kept as-is for output

    model_config = ConfigDict(extra="allow", frozen=True)


class BareTaskList(BaseModel):
    """``GET /tasks`` answered with a JSON array."""

    kind: Literal["bare"] = "bare"
    tasks: List[Task]


class WrappedTaskList(BaseModel):
    """``GET /tasks`` answered with ``{"results": [...]}``."""

    kind: Literal["wrapped"] = "wrapped"
    tasks: List[Task]


TaskListResponse = Union[BareTaskList, WrappedTaskList]


def decode_task_list(payload: Any) -> TaskListResponse:
    """Tag the list response with the shape it arrived in.

    Anything that is neither an array nor an object carrying a ``results``
    array decodes to an empty wrapped list.
    """
    if isinstance(payload, list):
        return validate_response(BareTaskList, {"tasks": payload})
    results = payload.get("results") if isinstance(payload, dict) else None
    if not isinstance(results, list):
        results = []
    return validate_response(WrappedTaskList, {"tasks": results})


@dataclass(frozen=True)
class ReminderSpec:
    kind: Literal["relative", "absolute"]
    minute_offset: Optional[int] = None
    due_date: Optional[str] = None

    def to_args(self, task_id: str) -> Dict[str, Any]:
        args: Dict[str, Any] = {"item_id": task_id, "type": self.kind}
        if self.kind == "relative":
            args["minute_offset"] = self.minute_offset
        else:
            args["due"] = {"date": self.due_date}
        return args


@dataclass(frozen=True)
class ReminderCommand:
    uuid: str
    temp_id: str
    task_id: str
    spec: ReminderSpec
    type: str = field(default=REMINDER_ADD)

    def to_payload(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "uuid": self.uuid,
            "temp_id": self.temp_id,
            "args": self.spec.to_args(self.task_id),
        }


class SyncResponse(BaseModel):
    sync_status: Optional[Dict[str, Any]] = None

    model_config = ConfigDict(extra="allow")

    def status_for(self, correlation_id: str) -> Optional[Any]:
        return (self.sync_status or {}).get(correlation_id)
