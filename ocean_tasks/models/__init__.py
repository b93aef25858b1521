"""Доменные модели клиента задач."""

from .entities import (
    EMPTY_TITLE_MESSAGE,
    Task,
    TaskCounts,
    TaskFilter,
    TaskValidationError,
    normalize_description,
    normalize_title,
)

__all__ = [
    "EMPTY_TITLE_MESSAGE",
    "Task",
    "TaskCounts",
    "TaskFilter",
    "TaskValidationError",
    "normalize_description",
    "normalize_title",
]
