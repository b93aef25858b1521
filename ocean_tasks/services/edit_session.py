"""Состояние редактирования задачи."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from ocean_tasks.models import Task

if TYPE_CHECKING:
    import asyncio

    from ocean_tasks.services.sync import SyncEngine

LOGGER = logging.getLogger(__name__)


class EditSession:
    """Единственная на процесс сессия редактирования.

    Либо ни одна задача не редактируется, либо ровно одна (``target_id``) с
    черновиками заголовка и описания. Начало редактирования другой задачи
    молча отбрасывает несохранённый черновик.
    """

    def __init__(self) -> None:
        self._target_id: Optional[str] = None
        self._draft_title = ""
        self._draft_description = ""

    @property
    def target_id(self) -> Optional[str]:
        return self._target_id

    @property
    def draft_title(self) -> str:
        return self._draft_title

    @property
    def draft_description(self) -> str:
        return self._draft_description

    def is_editing(self, task_id: Optional[str] = None) -> bool:
        if task_id is None:
            return self._target_id is not None
        return self._target_id == task_id

    def begin_edit(self, task: Task) -> None:
        if self._target_id is not None and self._target_id != task.id:
            LOGGER.debug("Черновик задачи %s отброшен", self._target_id)
        self._target_id = task.id
        self._draft_title = task.title
        self._draft_description = task.description or ""

    def update_draft(self, field: str, value: str) -> None:
        if self._target_id is None:
            raise RuntimeError("Нет задачи в режиме редактирования")
        if field == "title":
            self._draft_title = value
        elif field == "description":
            self._draft_description = value
        else:
            raise ValueError(f"Неизвестное поле черновика: {field}")

    def cancel(self) -> None:
        self._reset()

    def end(self, task_id: str) -> None:
        """Выходит из режима редактирования, только если редактируется ``task_id``."""
        if self._target_id == task_id:
            self._reset()

    def commit(self, engine: "SyncEngine") -> Optional["asyncio.Task[None]"]:
        # Сессию закрывает сам движок; при пустом заголовке она остаётся открытой.
        if self._target_id is None:
            return None
        return engine.save_edit(self._target_id, self._draft_title, self._draft_description)

    def _reset(self) -> None:
        self._target_id = None
        self._draft_title = ""
        self._draft_description = ""


__all__ = ["EditSession"]
