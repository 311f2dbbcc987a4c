from .task_models import UNSET, Task, TaskStatus
from .task_repo import MemoryTaskRepo, SqliteTaskRepo
from .task_store import TaskStore

__all__ = [
    "UNSET",
    "MemoryTaskRepo",
    "SqliteTaskRepo",
    "Task",
    "TaskStatus",
    "TaskStore",
]
