from __future__ import annotations

import asyncio
import contextvars

import pytest

from scopewire._internal.stack_storage import StackStorage


def test_get_stack_is_empty_outside_every_scope() -> None:
    storage: StackStorage[str] = StackStorage()

    assert storage.get_stack() == ()


def test_run_pushes_item_only_for_the_callback() -> None:
    storage: StackStorage[str] = StackStorage()

    seen = storage.run("a", storage.get_stack)

    assert seen == ("a",)
    assert storage.get_stack() == ()


def test_nested_runs_stack_items_in_push_order() -> None:
    storage: StackStorage[str] = StackStorage()

    seen = storage.run("outer", lambda: storage.run("inner", storage.get_stack))

    assert seen == ("outer", "inner")


def test_run_restores_stack_when_callback_raises() -> None:
    storage: StackStorage[str] = StackStorage()

    def fail() -> None:
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError, match="boom"):
        storage.run("a", fail)

    assert storage.get_stack() == ()


def test_take_item_yields_none_for_empty_stack() -> None:
    storage: StackStorage[str] = StackStorage()

    with storage.take_item() as item:
        assert item is None

    assert storage.get_stack() == ()


def test_take_item_hides_top_item_and_restores_it() -> None:
    storage: StackStorage[str] = StackStorage()

    def inspect_stack() -> tuple[str | None, tuple[str, ...], tuple[str, ...]]:
        with storage.take_item() as item:
            during = storage.get_stack()
        return item, during, storage.get_stack()

    item, during, after = storage.run("outer", lambda: storage.run("inner", inspect_stack))

    assert item == "inner"
    assert during == ("outer",)
    assert after == ("outer", "inner")


def test_take_item_restores_stack_when_block_raises() -> None:
    storage: StackStorage[str] = StackStorage()

    def inspect_stack() -> tuple[str, ...]:
        with pytest.raises(ValueError, match="inside"), storage.take_item():
            raise ValueError("inside")
        return storage.get_stack()

    assert storage.run("a", inspect_stack) == ("a",)


def test_push_and_pop_round_trip_the_stack() -> None:
    storage: StackStorage[str] = StackStorage()

    token = storage.push("a")
    try:
        assert storage.get_stack() == ("a",)
    finally:
        storage.pop(token)

    assert storage.get_stack() == ()


def test_copied_context_does_not_see_later_pushes() -> None:
    storage: StackStorage[str] = StackStorage()

    def fork() -> tuple[str, ...]:
        snapshot = contextvars.copy_context()
        storage.run("later", lambda: None)
        token = storage.push("after-fork")
        try:
            return snapshot.run(storage.get_stack)
        finally:
            storage.pop(token)

    assert storage.run("base", fork) == ("base",)


@pytest.mark.asyncio
async def test_run_keeps_coroutine_inside_scope_across_suspension() -> None:
    storage: StackStorage[str] = StackStorage()

    async def continuation() -> tuple[str, ...]:
        await asyncio.sleep(0)
        return storage.get_stack()

    result = await storage.run("a", continuation)

    assert result == ("a",)
    assert storage.get_stack() == ()


@pytest.mark.asyncio
async def test_run_snapshots_stack_at_call_time_for_coroutines() -> None:
    storage: StackStorage[str] = StackStorage()

    async def continuation() -> tuple[str, ...]:
        return storage.get_stack()

    pending = storage.run("a", continuation)
    token = storage.push("pushed-before-await")
    try:
        result = await pending
    finally:
        storage.pop(token)

    assert result == ("a",)


@pytest.mark.asyncio
async def test_run_returns_non_coroutine_awaitables_unchanged() -> None:
    storage: StackStorage[str] = StackStorage()

    async def read() -> tuple[str, ...]:
        return storage.get_stack()

    task = storage.run("a", lambda: asyncio.ensure_future(read()))

    assert isinstance(task, asyncio.Future)
    assert await task == ("a",)
