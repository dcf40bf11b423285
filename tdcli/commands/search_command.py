import re
from typing import List, Optional

from ..errors import UsageError
from ..todoist_api import Task
from ..utils.output import print_tasks
from .common import GlobalOptions, build_client

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_search_text(value: str) -> str:
    return _WHITESPACE_RE.sub(" ", value.replace("\u00a0", " ").strip()).casefold()


def match_tasks(tasks: List[Task], query: str, exact: bool = False) -> List[Task]:
    wanted = normalize_search_text(query)
    if exact:
        return [t for t in tasks if normalize_search_text(t.content) == wanted]
    return [t for t in tasks if wanted in normalize_search_text(t.content)]


def handle_find(
    options: GlobalOptions,
    query: str,
    project_id: Optional[str],
    limit: int,
    show_all: bool = False,
    exact: bool = False,
) -> None:
    """
    Search tasks by content.  The server-side ``search:`` filter narrows the
    list first; the local match then applies the exact/substring rule.
    """
    if not normalize_search_text(query):
        raise UsageError("<query> must not be empty")

    client = build_client(options)
    tasks = client.list_tasks(project_id=project_id, filter=f"search: {query}")
    matches = match_tasks(tasks, query, exact=exact)
    if not show_all:
        matches = matches[:limit]
    print_tasks(options.mode, matches)
