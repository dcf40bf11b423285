from typing import List, Optional

from ..utils.output import print_data
from .common import GlobalOptions, build_client


def handle_add(
    options: GlobalOptions,
    content: str,
    project_id: Optional[str] = None,
    due_string: Optional[str] = None,
    priority: Optional[int] = None,
    reminders: Optional[List[str]] = None,
) -> None:
    """
    Creates a new task, then attaches any reminders to it.
    """
    client = build_client(options)
    task = client.add_task(
        content,
        project_id=project_id,
        due_string=due_string,
        priority=priority,
        reminders=reminders or [],
    )
    print_data(options.mode, {"task": task}, [task.id])
