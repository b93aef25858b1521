# tests/conftest.py

from __future__ import annotations

import pytest

from ocean_tasks.services import ClientContext, SyncEngine

from .fakes import FakeRemote, make_task


@pytest.fixture()
def remote() -> FakeRemote:
    return FakeRemote(
        [
            make_task("1", "Buy milk"),
            make_task("2", "Call mom"),
            make_task("3", "Pay rent", completed=True),
        ]
    )


@pytest.fixture()
def context() -> ClientContext:
    return ClientContext()


@pytest.fixture()
def reported(context: ClientContext, monkeypatch: pytest.MonkeyPatch) -> list[str]:
    """
    Every message surfaced on the error channel, in order.

    The context keeps only the latest message; tests need the full history to
    check that each failure is reported exactly once.
    """
    messages: list[str] = []
    original = context.report_error

    def record(message: str) -> None:
        messages.append(message)
        original(message)

    monkeypatch.setattr(context, "report_error", record)
    return messages


@pytest.fixture()
def engine(context: ClientContext, remote: FakeRemote) -> SyncEngine:
    return SyncEngine(context, remote)
