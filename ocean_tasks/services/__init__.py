"""Сервисный слой приложения."""

from .context import ClientContext
from .edit_session import EditSession
from .sync import SyncEngine
from .task_store import TaskStore, TaskView

__all__ = ["ClientContext", "EditSession", "SyncEngine", "TaskStore", "TaskView"]
