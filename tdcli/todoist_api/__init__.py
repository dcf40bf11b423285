"""
Todoist API layer package.
Implements the REST task calls and the sync-based reminder commands.
"""

from .batch_operations import ReminderBatch
from .data_models import ReminderSpec, Task
from .http_client import HttpTransport
from .reminders import parse_reminder_value
from .task_operations import TodoistClient

__all__ = [
    'HttpTransport',
    'ReminderBatch',
    'ReminderSpec',
    'Task',
    'TodoistClient',
    'parse_reminder_value',
]
