"""Локальная коллекция задач."""
from __future__ import annotations

from typing import Iterable, Iterator, List, Optional, Tuple

from ocean_tasks.models import Task, TaskCounts, TaskFilter


class TaskView:
    """Ленивое представление коллекции по фильтру.

    Каждая итерация заново проходит по текущему состоянию хранилища, поэтому
    представление можно перебирать многократно.
    """

    def __init__(self, store: "TaskStore", task_filter: TaskFilter) -> None:
        self._store = store
        self._filter = task_filter

    @property
    def filter(self) -> TaskFilter:
        return self._filter

    def __iter__(self) -> Iterator[Task]:
        return (task for task in self._store if self._filter.matches(task))

    def __repr__(self) -> str:
        return f"TaskView(filter={self._filter.value!r}, tasks={list(self)!r})"


class TaskStore:
    """Упорядоченная коллекция задач текущего процесса.

    Все операции синхронные и трогают только те записи, о которых их явно
    попросили. Поиск выполняется по ``id``; отсутствие записи не ошибка.
    """

    def __init__(self, tasks: Optional[Iterable[Task]] = None) -> None:
        self._tasks: List[Task] = list(tasks or [])

    def __iter__(self) -> Iterator[Task]:
        return iter(tuple(self._tasks))

    def __len__(self) -> int:
        return len(self._tasks)

    def __contains__(self, task_id: object) -> bool:
        return any(task.id == task_id for task in self._tasks)

    # region mutations
    def load(self, tasks: Iterable[Task]) -> None:
        self._tasks = list(tasks)

    def insert_at_front(self, task: Task) -> None:
        self._tasks.insert(0, task)

    def replace(self, task_id: str, task: Task) -> None:
        for index, current in enumerate(self._tasks):
            if current.id == task_id:
                self._tasks[index] = task
                return

    def remove(self, task_id: str) -> None:
        self._tasks = [task for task in self._tasks if task.id != task_id]

    # endregion

    # region queries
    def get(self, task_id: str) -> Optional[Task]:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    def ids(self) -> List[str]:
        return [task.id for task in self._tasks]

    def snapshot(self) -> Tuple[Task, ...]:
        return tuple(self._tasks)

    def view(self, task_filter: TaskFilter | str = TaskFilter.ALL) -> TaskView:
        return TaskView(self, TaskFilter(task_filter))

    def counts(self) -> TaskCounts:
        total = completed = 0
        for task in self._tasks:
            total += 1
            if task.completed:
                completed += 1
        return TaskCounts(total=total, active=total - completed, completed=completed)

    # endregion


__all__ = ["TaskStore", "TaskView"]
