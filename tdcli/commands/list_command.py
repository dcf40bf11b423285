from typing import Optional

from ..utils.output import print_tasks
from .common import GlobalOptions, build_client


def handle_list(options: GlobalOptions, project_id: Optional[str], filter_query: Optional[str], limit: int) -> None:
    """
    Lists tasks, optionally narrowed by project and a Todoist filter query.
    """
    client = build_client(options)
    tasks = client.list_tasks(project_id=project_id, filter=filter_query)
    print_tasks(options.mode, tasks[:limit])
