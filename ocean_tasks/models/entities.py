"""Определения доменных сущностей."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

EMPTY_TITLE_MESSAGE = "Title cannot be empty"


class TaskValidationError(ValueError):
    """Некорректные данные задачи, отклоняются локально без запроса к API."""


class TaskFilter(str, Enum):
    """Фильтр отображения списка задач."""

    ALL = "all"
    ACTIVE = "active"
    COMPLETED = "completed"

    def matches(self, task: "Task") -> bool:
        if self is TaskFilter.ACTIVE:
            return not task.completed
        if self is TaskFilter.COMPLETED:
            return task.completed
        return True


@dataclass(frozen=True, slots=True)
class Task:
    """Задача пользователя.

    Экземпляры неизменяемы: любое изменение оформляется через
    ``dataclasses.replace``, поэтому снимки состояния можно хранить как есть.
    """

    id: str
    title: str
    description: Optional[str]
    completed: bool
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True, slots=True)
class TaskCounts:
    """Счётчики задач по статусу."""

    total: int = 0
    active: int = 0
    completed: int = 0


def normalize_title(value: Optional[str]) -> str:
    title = (value or "").strip()
    if not title:
        raise TaskValidationError(EMPTY_TITLE_MESSAGE)
    return title


def normalize_description(value: Optional[str]) -> Optional[str]:
    """Пустое описание (или из одних пробелов) считается отсутствующим."""
    description = (value or "").strip()
    return description or None


__all__ = [
    "EMPTY_TITLE_MESSAGE",
    "Task",
    "TaskCounts",
    "TaskFilter",
    "TaskValidationError",
    "normalize_description",
    "normalize_title",
]
