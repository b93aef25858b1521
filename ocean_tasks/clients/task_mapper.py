"""Маппинг задач между API и внутренними моделями."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, Optional

from dateutil import parser

from ocean_tasks.models import Task, normalize_description


class TaskMapper:
    """Конвертация JSON-представления задач в модели и обратно."""

    @staticmethod
    def _parse_datetime(value: object) -> datetime:
        if value is None or value == "":
            return datetime.now(timezone.utc)
        if not isinstance(value, str):
            raise ValueError(f"Некорректная метка времени в ответе API: {value!r}")
        return parser.isoparse(value)

    def map_task(self, payload: object) -> Task:
        if not isinstance(payload, dict):
            raise ValueError(f"Ожидался объект задачи в ответе API: {payload!r}")
        fields = payload.get("data") if isinstance(payload.get("data"), dict) else payload
        task_id = fields.get("id")
        if task_id is None or task_id == "":
            raise ValueError(f"В ответе API нет идентификатора задачи: {payload!r}")
        title = fields.get("title")
        if not isinstance(title, str) or not title.strip():
            raise ValueError(f"В ответе API у задачи {task_id} нет заголовка")
        created_at = self._parse_datetime(fields.get("createdAt") or fields.get("created_at"))
        updated_at = fields.get("updatedAt") or fields.get("updated_at")
        description = fields.get("description")
        if description is not None and not isinstance(description, str):
            raise ValueError(f"Некорректное описание у задачи {task_id}")
        return Task(
            id=str(task_id),
            title=title,
            description=normalize_description(description),
            completed=bool(fields.get("completed", False)),
            created_at=created_at,
            updated_at=self._parse_datetime(updated_at) if updated_at else created_at,
        )

    def map_tasks(self, payload: object) -> list[Task]:
        items = payload.get("data", []) if isinstance(payload, dict) else payload
        if not isinstance(items, list):
            raise ValueError("Ожидался список задач в ответе API")
        return [self.map_task(item) for item in items]

    @staticmethod
    def to_payload(
        *,
        title: Optional[str] = None,
        description: Optional[str] = None,
        completed: Optional[bool] = None,
        include_description: bool = False,
    ) -> Dict[str, object]:
        """Собирает тело запроса только из переданных полей.

        Отсутствующее описание передаётся явным ``null`` лишь при
        ``include_description=True``, чтобы PATCH мог его очистить.
        """
        payload: Dict[str, object] = {}
        if title is not None:
            payload["title"] = title
        if description is not None or include_description:
            payload["description"] = description
        if completed is not None:
            payload["completed"] = completed
        return payload


__all__ = ["TaskMapper"]
