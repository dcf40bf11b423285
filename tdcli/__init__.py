"""
tdcli: command-line client for the Todoist task API.

Create, list, find, update, complete and delete tasks, schedule reminders,
manage the stored configuration and run a readiness check.
"""

__version__ = "0.1.0"

# Import the main CLI app for entry point
from .cli import app, main

__all__ = ["app", "main", "__version__"]
