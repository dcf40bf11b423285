"""Task-related operations for Todoist."""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, Sequence

import requests

from ..errors import TransportFailure
from ..utils.config import EffectiveConfig
from .batch_operations import ReminderBatch
from .data_models import ReminderSpec, Task, decode_task_list, validate_response
from .http_client import HttpTransport
from .reminders import parse_reminder_value

TASKS_PATH = "/api/v1/tasks"
PROJECTS_PATH = "/api/v1/projects"

log = logging.getLogger(__name__)


def _compact(fields: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in fields.items() if value is not None}


class TodoistClient:
    """High-level task API bound to one effective configuration.

    ``add_task`` and ``update_task`` run in two steps: the task request, then
    (only when reminders were given) one sync call for the reminders.  The
    second step never undoes the first; if it fails the task stays saved and
    the reminder error is raised on its own.
    """

    def __init__(
        self,
        config: EffectiveConfig,
        session: Optional[requests.Session] = None,
        id_factory: Optional[Callable[[], str]] = None,
    ) -> None:
        self.config = config
        self.transport = HttpTransport(config, session=session)
        self.reminders = ReminderBatch(self.transport, id_factory=id_factory)

    def list_tasks(self, project_id: Optional[str] = None, filter: Optional[str] = None) -> List[Task]:
        payload = self.transport.request_json(
            "GET", TASKS_PATH, query={"project_id": project_id, "filter": filter}
        )
        return decode_task_list(payload).tasks

    def add_task(
        self,
        content: str,
        project_id: Optional[str] = None,
        due_string: Optional[str] = None,
        priority: Optional[int] = None,
        reminders: Optional[Sequence[str]] = None,
    ) -> Task:
        specs = self._parse_reminders(reminders)
        payload = _compact(
            {"content": content, "project_id": project_id, "due_string": due_string, "priority": priority}
        )
        task = validate_response(Task, self.transport.request_json("POST", TASKS_PATH, payload=payload))
        log.info("Created task %s", task.id)
        self._attach_reminders(task, specs)
        return task

    def update_task(
        self,
        task_id: str,
        content: Optional[str] = None,
        due_string: Optional[str] = None,
        priority: Optional[int] = None,
        reminders: Optional[Sequence[str]] = None,
    ) -> Task:
        specs = self._parse_reminders(reminders)
        payload = _compact({"content": content, "due_string": due_string, "priority": priority})
        task = validate_response(
            Task,
            self.transport.request_json("POST", f"{TASKS_PATH}/{task_id}", payload=payload)
        )
        log.info("Updated task %s", task.id)
        self._attach_reminders(task, specs)
        return task

    def close_task(self, task_id: str) -> None:
        self.transport.request_json("POST", f"{TASKS_PATH}/{task_id}/close")
        log.info("Closed task %s", task_id)

    def delete_task(self, task_id: str) -> None:
        self.transport.request_json("DELETE", f"{TASKS_PATH}/{task_id}")
        log.info("Deleted task %s", task_id)

    def check_reachability(self) -> None:
        """Cheap authenticated GET used by ``todoist doctor``."""
        self.transport.request_json("GET", PROJECTS_PATH)

    @staticmethod
    def _parse_reminders(reminders: Optional[Sequence[str]]) -> List[ReminderSpec]:
        return [parse_reminder_value(value) for value in reminders or ()]

    def _attach_reminders(self, task: Task, specs: List[ReminderSpec]) -> None:
        if not specs:
            return
        try:
            self.reminders.submit(task.id, specs)
        except TransportFailure as exc:
            raise TransportFailure(
                f"Task {task.id} was saved but its reminders were not: {exc}",
                status_code=exc.status_code,
            ) from exc
