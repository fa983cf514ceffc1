"""Services used by the ingestion workflow."""

from .duplicate_resolver import DuplicateResolver
from .task_poller import TaskPoller

__all__ = ["DuplicateResolver", "TaskPoller"]
