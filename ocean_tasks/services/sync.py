"""Оптимистичная синхронизация задач с удалённым API."""
from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable, Coroutine, Optional, Set, Tuple

from ocean_tasks.clients import RemoteOperationError, TaskRemote
from ocean_tasks.models import Task, TaskValidationError, normalize_description, normalize_title
from ocean_tasks.services.context import ClientContext

LOGGER = logging.getLogger(__name__)

LOAD_FAILED = "Failed to load tasks"
CREATE_FAILED = "Failed to create task"
UPDATE_FAILED = "Failed to update task"
SAVE_FAILED = "Failed to save task"
DELETE_FAILED = "Failed to delete task"

TEMP_ID_PREFIX = "temp-"


def error_message(exc: BaseException, default: str) -> str:
    """Текст ошибки для пользователя или стандартное сообщение операции."""
    message = str(exc).strip()
    return message or default


class SyncEngine:
    """Оркестратор изменений коллекции задач.

    Каждое намерение пользователя проходит две фазы: синхронное оптимистичное
    изменение ``TaskStore`` и асинхронный запрос к API, по завершении которого
    локальное состояние либо фиксируется авторитетным ответом, либо
    откатывается. Методы-намерения возвращают запланированную задачу
    ``asyncio`` (или ``None``, если запрос не нужен) и требуют запущенного
    цикла событий. Ошибки API не пробрасываются наружу, а попадают в
    ``ClientContext.error``.
    """

    def __init__(
        self,
        context: ClientContext,
        remote: TaskRemote,
        *,
        clock_ns: Callable[[], int] = time.time_ns,
    ) -> None:
        self._ctx = context
        self._remote = remote
        self._clock_ns = clock_ns
        self._last_stamp = 0
        self._pending: Set[asyncio.Task[None]] = set()

    @property
    def context(self) -> ClientContext:
        return self._ctx

    @property
    def pending(self) -> int:
        return len(self._pending)

    # region public API
    async def load(self) -> None:
        """Первичная загрузка полного списка задач."""
        self._ctx.loading = True
        self._ctx.clear_error()
        try:
            tasks = await self._remote.list()
        except RemoteOperationError as exc:
            LOGGER.warning("Не удалось загрузить задачи: %s", exc)
            self._ctx.report_error(error_message(exc, LOAD_FAILED))
            return
        finally:
            self._ctx.loading = False
        self._ctx.store.load(tasks)
        LOGGER.info("Загружено задач: %s", len(tasks))

    def create(self, title: str, description: Optional[str] = None) -> Optional[asyncio.Task[None]]:
        loop = asyncio.get_running_loop()
        try:
            clean_title = normalize_title(title)
        except TaskValidationError as exc:
            self._ctx.report_error(str(exc))
            return None
        clean_description = normalize_description(description)
        temp_id = self._temporary_id()
        now = datetime.now(timezone.utc)
        optimistic = Task(
            id=temp_id,
            title=clean_title,
            description=clean_description,
            completed=False,
            created_at=now,
            updated_at=now,
        )
        self._ctx.store.insert_at_front(optimistic)
        LOGGER.debug("Оптимистичное создание задачи %s", temp_id)
        return self._spawn(loop, self._reconcile_create(temp_id, clean_title, clean_description))

    def toggle(self, task: Task) -> asyncio.Task[None]:
        loop = asyncio.get_running_loop()
        next_completed = not task.completed
        # Флаг ставится на актуальную запись: ``task`` может быть устаревшей копией.
        current = self._ctx.store.get(task.id)
        if current is not None:
            self._ctx.store.replace(task.id, replace(current, completed=next_completed))
        LOGGER.debug("Оптимистичное переключение задачи %s → %s", task.id, next_completed)
        return self._spawn(loop, self._reconcile_toggle(task.id, task.completed, next_completed))

    def save_edit(
        self, task_id: str, draft_title: str, draft_description: Optional[str]
    ) -> Optional[asyncio.Task[None]]:
        loop = asyncio.get_running_loop()
        try:
            title = normalize_title(draft_title)
        except TaskValidationError as exc:
            self._ctx.report_error(str(exc))
            return None
        previous = self._ctx.store.get(task_id)
        if previous is None:
            return None
        updated = replace(previous, title=title, description=normalize_description(draft_description))
        self._ctx.store.replace(task_id, updated)
        self._ctx.edit.end(task_id)
        LOGGER.debug("Оптимистичное редактирование задачи %s", task_id)
        return self._spawn(loop, self._reconcile_edit(previous, updated))

    def delete(self, task_id: str) -> asyncio.Task[None]:
        loop = asyncio.get_running_loop()
        snapshot = self._ctx.store.snapshot()
        self._ctx.store.remove(task_id)
        LOGGER.debug("Оптимистичное удаление задачи %s", task_id)
        return self._spawn(loop, self._reconcile_delete(task_id, snapshot))

    async def wait_settled(self) -> None:
        """Ожидает завершения всех запущенных согласований."""
        while self._pending:
            await asyncio.gather(*list(self._pending))

    def close(self) -> None:
        self._remote.close()

    # endregion

    # region reconciliation
    async def _reconcile_create(self, temp_id: str, title: str, description: Optional[str]) -> None:
        try:
            created = await self._remote.create(title, description, False)
        except RemoteOperationError as exc:
            LOGGER.warning("Не удалось создать задачу %s: %s", temp_id, exc)
            self._ctx.store.remove(temp_id)
            self._ctx.report_error(error_message(exc, CREATE_FAILED))
            return
        self._ctx.store.replace(temp_id, created)
        LOGGER.debug("Задача %s создана как %s", temp_id, created.id)

    async def _reconcile_toggle(self, task_id: str, original_completed: bool, next_completed: bool) -> None:
        try:
            updated = await self._remote.update(task_id, completed=next_completed)
        except RemoteOperationError as exc:
            LOGGER.warning("Не удалось обновить задачу %s: %s", task_id, exc)
            # Откатывается только флаг, остальные поля могли измениться параллельно.
            current = self._ctx.store.get(task_id)
            if current is not None:
                self._ctx.store.replace(task_id, replace(current, completed=original_completed))
            self._ctx.report_error(error_message(exc, UPDATE_FAILED))
            return
        self._ctx.store.replace(task_id, updated)

    async def _reconcile_edit(self, previous: Task, updated: Task) -> None:
        try:
            saved = await self._remote.update(
                updated.id,
                title=updated.title,
                description=updated.description,
                completed=updated.completed,
            )
        except RemoteOperationError as exc:
            LOGGER.warning("Не удалось сохранить задачу %s: %s", previous.id, exc)
            self._ctx.store.replace(previous.id, previous)
            self._ctx.report_error(error_message(exc, SAVE_FAILED))
            return
        self._ctx.store.replace(updated.id, saved)

    async def _reconcile_delete(self, task_id: str, snapshot: Tuple[Task, ...]) -> None:
        try:
            await self._remote.delete(task_id)
        except RemoteOperationError as exc:
            LOGGER.warning("Не удалось удалить задачу %s, восстанавливаем список: %s", task_id, exc)
            # Восстанавливается вся коллекция на момент удаления, включая
            # перезапись изменений, зафиксированных после снимка.
            self._ctx.store.load(snapshot)
            self._ctx.report_error(error_message(exc, DELETE_FAILED))
            return
        LOGGER.debug("Задача %s удалена", task_id)

    # endregion

    def _spawn(
        self, loop: asyncio.AbstractEventLoop, coro: Coroutine[object, object, None]
    ) -> asyncio.Task[None]:
        task = loop.create_task(coro)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    def _temporary_id(self) -> str:
        stamp = max(self._clock_ns(), self._last_stamp + 1)
        existing = set(self._ctx.store.ids())
        while f"{TEMP_ID_PREFIX}{stamp}" in existing:
            stamp += 1
        self._last_stamp = stamp
        return f"{TEMP_ID_PREFIX}{stamp}"


__all__ = [
    "CREATE_FAILED",
    "DELETE_FAILED",
    "LOAD_FAILED",
    "SAVE_FAILED",
    "SyncEngine",
    "UPDATE_FAILED",
    "error_message",
]
