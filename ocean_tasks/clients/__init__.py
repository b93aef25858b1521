"""HTTP-клиенты внешних сервисов."""

from .task_mapper import TaskMapper
from .tasks_api import GENERIC_FAILURE_MESSAGE, UNSET, RemoteOperationError, TaskRemote, TasksAPIClient

__all__ = ["GENERIC_FAILURE_MESSAGE", "RemoteOperationError", "TaskMapper", "TaskRemote", "TasksAPIClient", "UNSET"]
