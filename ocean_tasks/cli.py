"""CLI-интерфейс для работы со списком задач."""
from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Awaitable, Callable, Optional

import typer

from ocean_tasks.clients import TaskRemote, TasksAPIClient
from ocean_tasks.config import AppConfig
from ocean_tasks.models import Task, TaskFilter
from ocean_tasks.services import ClientContext, SyncEngine

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

app = typer.Typer(help="Ocean Tasks: управление списком задач")

RemoteFactory = Callable[[AppConfig], TaskRemote]


def configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format=LOG_FORMAT)


def _default_remote(config: AppConfig) -> TaskRemote:
    return TasksAPIClient(config.api)


remote_factory: RemoteFactory = _default_remote
"""Фабрика клиента API; тесты подменяют её фейком."""


def build_engine(config_path: Optional[Path]) -> SyncEngine:
    config = AppConfig.load(config_path)
    return SyncEngine(ClientContext(), remote_factory(config))


def render(context: ClientContext) -> None:
    for task in context.visible():
        mark = "x" if task.completed else " "
        line = f"[{mark}] {task.id}  {task.title}"
        if task.description:
            line += f" - {task.description}"
        typer.echo(line)
    counts = context.counts()
    typer.echo(f"all: {counts.total}  active: {counts.active}  completed: {counts.completed}")


def run_intent(
    config_path: Optional[Path],
    intent: Callable[[SyncEngine], Awaitable[None]],
    *,
    task_filter: TaskFilter = TaskFilter.ALL,
) -> None:
    """Загружает список, выполняет намерение, дожидается согласования и печатает итог."""

    async def _run() -> ClientContext:
        engine = build_engine(config_path)
        try:
            await engine.load()
            if engine.context.error is None:
                await intent(engine)
                await engine.wait_settled()
        finally:
            engine.close()
        return engine.context

    context = asyncio.run(_run())
    context.set_filter(task_filter)
    render(context)
    if context.error:
        typer.echo(f"Ошибка: {context.error}", err=True)
        raise typer.Exit(code=1)


def _require_task(engine: SyncEngine, task_id: str) -> Task:
    task = engine.context.store.get(task_id)
    if task is None:
        raise typer.BadParameter(f"Задача {task_id} не найдена", param_hint="TASK_ID")
    return task


ConfigOption = typer.Option(None, "--config", "-c", help="Путь к YAML конфигурации")
VerbosityOption = typer.Option(0, "--verbose", "-v", count=True, help="Уровень логирования")


@app.command("list")
def list_tasks(
    task_filter: TaskFilter = typer.Option(TaskFilter.ALL, "--filter", "-f", help="Какие задачи показать"),
    config_path: Optional[Path] = ConfigOption,
    verbosity: int = VerbosityOption,
) -> None:
    """Выводит задачи и счётчики."""
    configure_logging(verbosity)

    async def intent(engine: SyncEngine) -> None:
        return None

    run_intent(config_path, intent, task_filter=task_filter)


@app.command("add")
def add_task(
    title: str = typer.Argument(..., help="Заголовок задачи"),
    description: Optional[str] = typer.Option(None, "--description", "-d", help="Описание"),
    config_path: Optional[Path] = ConfigOption,
    verbosity: int = VerbosityOption,
) -> None:
    """Создаёт задачу."""
    configure_logging(verbosity)

    async def intent(engine: SyncEngine) -> None:
        engine.create(title, description)

    run_intent(config_path, intent)


@app.command("toggle")
def toggle_task(
    task_id: str = typer.Argument(..., help="ID задачи"),
    config_path: Optional[Path] = ConfigOption,
    verbosity: int = VerbosityOption,
) -> None:
    """Переключает признак выполнения."""
    configure_logging(verbosity)

    async def intent(engine: SyncEngine) -> None:
        engine.toggle(_require_task(engine, task_id))

    run_intent(config_path, intent)


@app.command("edit")
def edit_task(
    task_id: str = typer.Argument(..., help="ID задачи"),
    title: Optional[str] = typer.Option(None, "--title", "-t", help="Новый заголовок"),
    description: Optional[str] = typer.Option(None, "--description", "-d", help="Новое описание"),
    config_path: Optional[Path] = ConfigOption,
    verbosity: int = VerbosityOption,
) -> None:
    """Редактирует заголовок и/или описание задачи."""
    configure_logging(verbosity)

    async def intent(engine: SyncEngine) -> None:
        task = _require_task(engine, task_id)
        session = engine.context.edit
        session.begin_edit(task)
        if title is not None:
            session.update_draft("title", title)
        if description is not None:
            session.update_draft("description", description)
        session.commit(engine)

    run_intent(config_path, intent)


@app.command("delete")
def delete_task(
    task_id: str = typer.Argument(..., help="ID задачи"),
    config_path: Optional[Path] = ConfigOption,
    verbosity: int = VerbosityOption,
) -> None:
    """Удаляет задачу."""
    configure_logging(verbosity)

    async def intent(engine: SyncEngine) -> None:
        _require_task(engine, task_id)
        engine.delete(task_id)

    run_intent(config_path, intent)


@app.command("info")
def info(config_path: Optional[Path] = ConfigOption) -> None:
    """Показывает адрес API."""
    config = AppConfig.load(config_path)
    typer.echo(f"API: {config.api.base_url}")


if __name__ == "__main__":
    app()
