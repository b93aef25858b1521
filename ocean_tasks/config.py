"""Загрузка и валидация конфигурации приложения."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

DEFAULT_BASE_URL = "http://localhost:3001"
BASE_URL_ENV = "TASKS_API_BASE_URL"


class ApiSettings(BaseModel):
    """Настройки подключения к API задач."""

    base_url: str = Field(DEFAULT_BASE_URL, description="Базовый URL сервиса задач")
    tasks_path: str = Field("/tasks", description="Корневой путь коллекции задач")
    timeout: float = Field(30.0, gt=0, description="Таймаут HTTP-запроса в секундах")
    user_agent: str = Field("ocean-tasks/0.1", description="Заголовок User-Agent")

    @field_validator("base_url")
    @classmethod
    def _strip_base_url(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("base_url не может быть пустым")
        return value.rstrip("/")

    @field_validator("tasks_path")
    @classmethod
    def _normalize_path(cls, value: str) -> str:
        return "/" + value.strip().strip("/")


class AppConfig(BaseModel):
    """Корневая конфигурация приложения."""

    api: ApiSettings = Field(default_factory=ApiSettings)

    @classmethod
    def load(
        cls,
        path: Optional[Path | str] = None,
        *,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "AppConfig":
        """Загружает конфигурацию из YAML-файла (если он есть) и окружения.

        Переменная ``TASKS_API_BASE_URL`` имеет приоритет над значением из файла.
        """
        environ = os.environ if environ is None else environ
        raw: dict = {}
        if path is not None:
            path = Path(path)
            if path.exists():
                raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        if not isinstance(raw, dict):
            raise ValueError(f"Конфигурация {path} некорректна: ожидался YAML-словарь")
        env_base_url = environ.get(BASE_URL_ENV)
        if env_base_url:
            api = dict(raw.get("api") or {})
            api["base_url"] = env_base_url
            raw = {**raw, "api": api}
        try:
            return cls.model_validate(raw)
        except ValidationError as exc:
            raise ValueError(f"Конфигурация {path or '<env>'} некорректна: {exc}") from exc


__all__ = ["AppConfig", "ApiSettings", "BASE_URL_ENV", "DEFAULT_BASE_URL"]
