from __future__ import annotations

import inspect
from collections.abc import Callable, Coroutine, Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token
from typing import Any, Generic, TypeVar

T = TypeVar("T")
R = TypeVar("R")


class StackStorage(Generic[T]):
    """Branch-local stack of items backed by a ``ContextVar``.

    Every ``contextvars.Context`` copy (each ``asyncio`` task, each
    ``asyncio.to_thread`` call) is a separate branch that starts from a
    snapshot of its creator's stack. Stacks are stored as tuples and are never
    mutated in place, so sibling branches forked from the same ancestor never
    observe each other's pushes or removals.
    """

    __slots__ = ("_stack_var",)

    def __init__(self, name: str = "scopewire_stack") -> None:
        self._stack_var: ContextVar[tuple[T, ...]] = ContextVar(name, default=())

    def get_stack(self) -> tuple[T, ...]:
        """Return the current branch's stack, empty outside every scope."""
        return self._stack_var.get()

    @contextmanager
    def take_item(self) -> Iterator[T | None]:
        """Hide the top item for the duration of the ``with`` block.

        The block receives the removed item, or ``None`` when the stack is
        empty. While the block runs, the branch sees the next-outer item, which
        lets an item's own builder look up the value it shadows. On exit the
        stack is reset to exactly what it was.

        The block must stay synchronous: holding it open across an ``await``
        would leak the shortened stack to whatever the event loop runs in the
        same task meanwhile, and ``ContextVar.reset`` rejects tokens used from
        another context.
        """
        stack = self._stack_var.get()
        if not stack:
            yield None
            return

        token = self._stack_var.set(stack[:-1])
        try:
            yield stack[-1]
        finally:
            self._stack_var.reset(token)

    def push(self, item: T) -> Token[tuple[T, ...]]:
        """Make ``item`` the top of the stack until ``pop`` receives the token."""
        return self._stack_var.set((*self._stack_var.get(), item))

    def pop(self, token: Token[tuple[T, ...]]) -> None:
        """Restore the stack that was current before the matching ``push``."""
        self._stack_var.reset(token)

    def run(self, item: T, fn: Callable[[], R]) -> R:
        """Call ``fn`` in a branch whose stack is the current one plus ``item``.

        The calling branch never sees ``item``. When ``fn`` produces a
        coroutine, the returned value is a wrapping coroutine that re-establishes
        the same stack snapshot for the whole awaited extent of the wrapped
        one, so ``async def`` continuations stay inside the scope across their
        suspension points.
        """
        token = self.push(item)
        stack = self._stack_var.get()
        try:
            result = fn()
        finally:
            self.pop(token)

        if inspect.iscoroutine(result):
            return self._await_with_stack(stack, result)  # type: ignore[return-value]
        return result

    async def _await_with_stack(
        self,
        stack: tuple[T, ...],
        coroutine: Coroutine[Any, Any, R],
    ) -> R:
        token = self._stack_var.set(stack)
        try:
            return await coroutine
        finally:
            self._stack_var.reset(token)
