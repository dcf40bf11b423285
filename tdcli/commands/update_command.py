from typing import List, Optional

from ..errors import UsageError
from ..utils.output import print_data
from .common import GlobalOptions, build_client


def handle_update(
    options: GlobalOptions,
    task_id: str,
    content: Optional[str] = None,
    due_string: Optional[str] = None,
    priority: Optional[int] = None,
    reminders: Optional[List[str]] = None,
) -> None:
    """Updates an existing task; reminders given here are added, never replaced."""
    if not content and not due_string and priority is None and not reminders:
        raise UsageError("No updates provided. Use --content, --due-string, --priority, or --reminder.")

    client = build_client(options)
    task = client.update_task(
        task_id,
        content=content,
        due_string=due_string,
        priority=priority,
        reminders=reminders or [],
    )
    print_data(options.mode, {"task": task}, [task.id])
