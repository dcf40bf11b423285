from ..utils.output import print_data
from .common import GlobalOptions, build_client


def handle_complete(options: GlobalOptions, task_id: str) -> None:
    """Mark a task complete."""
    build_client(options).close_task(task_id)
    print_data(options.mode, {"closed": task_id}, [task_id])
