"""Общее состояние клиента."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from ocean_tasks.models import TaskCounts, TaskFilter
from ocean_tasks.services.edit_session import EditSession
from ocean_tasks.services.task_store import TaskStore, TaskView

LOGGER = logging.getLogger(__name__)


@dataclass
class ClientContext:
    """Явно передаваемый контейнер состояния клиента.

    Коллекцию, сообщение об ошибке и флаг загрузки изменяет только
    ``SyncEngine``; ``edit`` и ``filter`` принадлежат слою отображения.
    Сообщение об ошибке одно (последнее) и не сбрасывается при успехе.
    """

    store: TaskStore = field(default_factory=TaskStore)
    edit: EditSession = field(default_factory=EditSession)
    filter: TaskFilter = TaskFilter.ALL
    error: Optional[str] = None
    loading: bool = False

    def report_error(self, message: str) -> None:
        LOGGER.debug("Ошибка для пользователя: %s", message)
        self.error = message

    def clear_error(self) -> None:
        self.error = None

    def set_filter(self, task_filter: TaskFilter | str) -> None:
        self.filter = TaskFilter(task_filter)

    def visible(self) -> TaskView:
        return self.store.view(self.filter)

    def counts(self) -> TaskCounts:
        return self.store.counts()


__all__ = ["ClientContext"]
