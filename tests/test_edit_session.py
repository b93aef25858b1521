# tests/test_edit_session.py

from __future__ import annotations

import pytest

from ocean_tasks.services import ClientContext, EditSession, SyncEngine

from .fakes import FakeRemote, make_task


def test_begin_edit_seeds_drafts() -> None:
    session = EditSession()
    session.begin_edit(make_task("1", "Buy milk", description="2 liters"))
    assert session.is_editing("1")
    assert (session.draft_title, session.draft_description) == ("Buy milk", "2 liters")


def test_absent_description_seeds_empty_draft() -> None:
    session = EditSession()
    session.begin_edit(make_task("1", "Buy milk"))
    assert session.draft_description == ""


def test_beginning_another_edit_discards_previous_draft(context: ClientContext) -> None:
    context.store.load([make_task("A", "Alpha"), make_task("B", "Beta")])
    before = context.store.snapshot()
    session = context.edit

    session.begin_edit(context.store.get("A"))
    session.update_draft("title", "Alpha unsaved")
    session.begin_edit(context.store.get("B"))

    assert session.target_id == "B"
    assert session.draft_title == "Beta"
    assert not session.is_editing("A")
    assert context.store.snapshot() == before


def test_update_draft_does_not_validate() -> None:
    session = EditSession()
    session.begin_edit(make_task("1"))
    session.update_draft("title", "")
    session.update_draft("description", "   ")
    assert session.draft_title == ""
    assert session.draft_description == "   "


def test_update_draft_rejects_unknown_field_and_viewing_state() -> None:
    session = EditSession()
    with pytest.raises(RuntimeError):
        session.update_draft("title", "x")
    session.begin_edit(make_task("1"))
    with pytest.raises(ValueError):
        session.update_draft("completed", "yes")


def test_cancel_returns_to_viewing() -> None:
    session = EditSession()
    session.begin_edit(make_task("1"))
    session.cancel()
    assert not session.is_editing()
    assert session.target_id is None


def test_end_only_affects_current_target() -> None:
    session = EditSession()
    session.begin_edit(make_task("1"))
    session.end("2")
    assert session.is_editing("1")
    session.end("1")
    assert not session.is_editing()


@pytest.mark.asyncio
async def test_commit_delegates_to_save_edit(engine: SyncEngine, context: ClientContext, remote: FakeRemote) -> None:
    await engine.load()
    session = context.edit
    session.begin_edit(context.store.get("1"))
    session.update_draft("title", "Buy bread")

    settle = session.commit(engine)
    assert not session.is_editing()
    await settle

    assert context.store.get("1").title == "Buy bread"
    assert remote.tasks[0].title == "Buy bread"


@pytest.mark.asyncio
async def test_commit_after_remote_failure_stays_in_viewing(
    engine: SyncEngine, context: ClientContext, remote: FakeRemote
) -> None:
    await engine.load()
    remote.fail("update", "nope")
    context.edit.begin_edit(context.store.get("1"))
    context.edit.update_draft("title", "Buy bread")

    await context.edit.commit(engine)

    assert not context.edit.is_editing()
    assert context.store.get("1").title == "Buy milk"
    assert context.error == "nope"


@pytest.mark.asyncio
async def test_commit_with_empty_title_keeps_editing(
    engine: SyncEngine, context: ClientContext, remote: FakeRemote
) -> None:
    await engine.load()
    context.edit.begin_edit(context.store.get("1"))
    context.edit.update_draft("title", "  ")

    assert context.edit.commit(engine) is None

    assert context.edit.is_editing("1")
    assert context.error == "Title cannot be empty"
    assert remote.count("update") == 0


def test_commit_without_edit_is_noop(engine: SyncEngine, context: ClientContext) -> None:
    assert context.edit.commit(engine) is None
