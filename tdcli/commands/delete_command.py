"""
Handles the logic for the 'task delete' command.
"""
from ..utils.output import print_data
from .common import GlobalOptions, build_client


def handle_delete(options: GlobalOptions, task_id: str) -> None:
    """Handles deletion of a task. This action is permanent."""
    build_client(options).delete_task(task_id)
    print_data(options.mode, {"deleted": task_id}, [task_id])
