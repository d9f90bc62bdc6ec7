"""Test helpers for replacing context values without establishing scopes."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar, Union

from scopewire._internal.context import Context, Provider, Resolver, ScopeEstablisher, ScopeGuard

T = TypeVar("T")

MockTarget = Union[
    Context[T],
    Provider[T],
    Resolver[T],
    ScopeEstablisher[T],
    ScopeGuard[T],
]


def _context_of(target: MockTarget[T]) -> Context[T]:
    if isinstance(target, Context):
        return target
    if isinstance(target, (Provider, Resolver, ScopeEstablisher, ScopeGuard)):
        return target.context
    msg = f"Cannot mock {type(target).__name__}; pass a provider, resolver or Context."
    raise TypeError(msg)


class MockContext:
    """Install mock values on contexts and remember them for cleanup.

    A mock is consulted only when the current branch has no active scope for
    the context; a real provider always wins. Mocks persist on the context
    until overwritten, cleared with ``clear`` or removed by ``reset``.

    Examples:
        .. code-block:: python

            from scopewire.testing import mock_context

            mock_context(with_database, lambda: FakeDatabase())
            assert database() is database()

            mock_context.transient(with_request_id, lambda: uuid.uuid4())
            assert request_id() != request_id()

            mock_context.reset()

    """

    def __init__(self) -> None:
        self._mocked: list[Context[Any]] = []

    def __call__(self, target: MockTarget[T], builder: Callable[[], T]) -> None:
        """Build the mock value once, now, and return it from every fallback resolve."""
        context = _context_of(target)
        context.set_mock(builder())
        self._remember(context)

    def transient(self, target: MockTarget[T], builder: Callable[[], T]) -> None:
        """Call ``builder`` on every fallback resolve."""
        context = _context_of(target)
        context.set_mock_factory(builder)
        self._remember(context)

    def clear(self, target: MockTarget[T]) -> None:
        _context_of(target).clear_mock()

    def reset(self) -> None:
        """Clear every mock installed through this instance."""
        mocked, self._mocked = self._mocked, []
        for context in mocked:
            context.clear_mock()

    def _remember(self, context: Context[Any]) -> None:
        if not any(known is context for known in self._mocked):
            self._mocked.append(context)


mock_context = MockContext()
"""Shared ``MockContext`` instance for test suites."""


__all__ = [
    "MockContext",
    "mock_context",
]
