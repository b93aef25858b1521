"""HTTP-клиент для API задач."""
from __future__ import annotations

import asyncio
import logging
import threading
from typing import List, Optional, Protocol, Union

import requests

from ocean_tasks.config import ApiSettings
from ocean_tasks.models import Task
from ocean_tasks.clients.task_mapper import TaskMapper

LOGGER = logging.getLogger(__name__)

GENERIC_FAILURE_MESSAGE = "Network request failed"


class RemoteOperationError(RuntimeError):
    """Ошибка API задач (транспорт или ответ сервера)."""


class _Unset:
    def __repr__(self) -> str:
        return "UNSET"


UNSET = _Unset()
"""Маркер «поле не передано» для частичного обновления."""


class TaskRemote(Protocol):
    """Удалённая коллекция задач, источник истины."""

    async def list(self) -> List[Task]: ...

    async def create(
        self, title: str, description: Optional[str] = None, completed: bool = False
    ) -> Task: ...

    async def update(
        self,
        task_id: str,
        *,
        title: Optional[str] = None,
        description: Union[Optional[str], _Unset] = UNSET,
        completed: Optional[bool] = None,
    ) -> Task: ...

    async def delete(self, task_id: str) -> None: ...

    def close(self) -> None: ...


class TasksAPIClient:
    """Минимальный клиент REST API задач.

    Блокирующие вызовы ``requests`` выполняются в отдельном потоке, чтобы
    не задерживать цикл событий, в котором работает движок синхронизации.
    ``requests.Session`` не гарантирует потокобезопасность, поэтому запросы
    через общую сессию сериализуются блокировкой.
    """

    def __init__(
        self,
        config: ApiSettings,
        session: Optional[requests.Session] = None,
        mapper: Optional[TaskMapper] = None,
    ) -> None:
        self._config = config
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "User-Agent": config.user_agent,
                "Accept": "application/json",
            }
        )
        self._mapper = mapper or TaskMapper()
        self._session_lock = threading.Lock()

    @property
    def base_url(self) -> str:
        return self._config.base_url.rstrip("/")

    @property
    def collection_url(self) -> str:
        return f"{self.base_url}{self._config.tasks_path}"

    # region low-level helpers
    def _request(self, method: str, endpoint: str = "", **kwargs) -> requests.Response:
        url = self.collection_url
        if endpoint:
            url = f"{url}/{endpoint.lstrip('/')}"
        LOGGER.debug("%s %s", method, url)
        try:
            with self._session_lock:
                response = self._session.request(method, url, timeout=self._config.timeout, **kwargs)
        except requests.RequestException as exc:
            raise RemoteOperationError(str(exc) or GENERIC_FAILURE_MESSAGE) from exc
        if response.status_code >= 400:
            message = self._error_message(response)
            LOGGER.warning("Ошибка API %s при запросе %s %s: %s", response.status_code, method, url, message)
            raise RemoteOperationError(message)
        return response

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        try:
            payload = response.json()
        except ValueError:
            payload = None
        if isinstance(payload, dict):
            for key in ("message", "error", "detail"):
                value = payload.get(key)
                if isinstance(value, str) and value.strip():
                    return value.strip()
        return f"Request failed with status {response.status_code}"

    def _json(self, response: requests.Response) -> object:
        try:
            return response.json()
        except ValueError as exc:
            raise RemoteOperationError("API вернул некорректный JSON") from exc

    def _to_task(self, response: requests.Response) -> Task:
        payload = self._json(response)
        if not isinstance(payload, dict):
            raise RemoteOperationError("API вернул некорректное представление задачи")
        try:
            return self._mapper.map_task(payload)
        except (KeyError, ValueError, TypeError, AttributeError) as exc:
            raise RemoteOperationError(str(exc)) from exc

    # endregion

    # region sync API
    def list_tasks(self) -> List[Task]:
        response = self._request("GET")
        try:
            return self._mapper.map_tasks(self._json(response))
        except (KeyError, ValueError, TypeError, AttributeError) as exc:
            raise RemoteOperationError(str(exc)) from exc

    def create_task(self, title: str, description: Optional[str] = None, completed: bool = False) -> Task:
        payload = self._mapper.to_payload(title=title, description=description, completed=completed)
        return self._to_task(self._request("POST", json=payload))

    def update_task(
        self,
        task_id: str,
        *,
        title: Optional[str] = None,
        description: Union[Optional[str], _Unset] = UNSET,
        completed: Optional[bool] = None,
    ) -> Task:
        payload = self._mapper.to_payload(
            title=title,
            description=None if description is UNSET else description,
            completed=completed,
            include_description=description is not UNSET,
        )
        return self._to_task(self._request("PATCH", task_id, json=payload))

    def delete_task(self, task_id: str) -> None:
        self._request("DELETE", task_id)

    # endregion

    # region async API (TaskRemote)
    async def list(self) -> List[Task]:
        return await asyncio.to_thread(self.list_tasks)

    async def create(self, title: str, description: Optional[str] = None, completed: bool = False) -> Task:
        return await asyncio.to_thread(self.create_task, title, description, completed)

    async def update(
        self,
        task_id: str,
        *,
        title: Optional[str] = None,
        description: Union[Optional[str], _Unset] = UNSET,
        completed: Optional[bool] = None,
    ) -> Task:
        return await asyncio.to_thread(
            lambda: self.update_task(task_id, title=title, description=description, completed=completed)
        )

    async def delete(self, task_id: str) -> None:
        await asyncio.to_thread(self.delete_task, task_id)

    # endregion

    def close(self) -> None:
        self._session.close()


__all__ = ["GENERIC_FAILURE_MESSAGE", "RemoteOperationError", "TaskRemote", "TasksAPIClient", "UNSET"]
