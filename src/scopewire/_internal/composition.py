from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any, TypeVar, overload

from scopewire._internal.context import ensure_callable
from scopewire.exceptions import ScopewireInvalidScopeError

R = TypeVar("R")

ScopeCallable = Callable[[Callable[[], Any]], Any]


class ComposedScope:
    """Nest several curried scopes; the first one is the outermost."""

    __slots__ = ("scopes",)

    def __init__(self, scopes: Iterable[ScopeCallable]) -> None:
        self.scopes: tuple[ScopeCallable, ...] = tuple(scopes)
        for index, scope in enumerate(self.scopes):
            if not callable(scope):
                msg = (
                    f"with_contexts() expects curried scopes such as provider(builder); "
                    f"item {index} is {type(scope).__name__}."
                )
                raise ScopewireInvalidScopeError(msg)

    def __call__(self, continuation: Callable[[], R]) -> R:
        ensure_callable(continuation, role="continuation")
        return self._run_from(0, continuation)  # type: ignore[no-any-return]

    def _run_from(self, index: int, continuation: Callable[[], Any]) -> Any:
        if index == len(self.scopes):
            return continuation()
        return self.scopes[index](lambda: self._run_from(index + 1, continuation))

    def __repr__(self) -> str:
        return f"ComposedScope({list(self.scopes)!r})"


@overload
def with_contexts(scopes: Iterable[ScopeCallable]) -> ComposedScope: ...


@overload
def with_contexts(scopes: Iterable[ScopeCallable], continuation: Callable[[], R]) -> R: ...


def with_contexts(
    scopes: Iterable[ScopeCallable],
    continuation: Callable[[], R] | None = None,
) -> R | ComposedScope:
    """Run ``continuation`` inside every scope in ``scopes`` at once.

    Each item is a curried scope, typically ``provider(builder)``. The first
    item becomes the outermost scope and the last the innermost, so later
    builders can resolve contexts established by earlier ones. An empty
    sequence runs ``continuation`` directly. Without ``continuation`` the
    composed scope is returned for later (and repeated) use.

    Examples:
        .. code-block:: python

            handle = with_contexts(
                [
                    with_config(load_config),
                    with_database(lambda: Database(config().dsn)),
                ],
            )
            handle(process_request)

    """
    composed = ComposedScope(scopes)
    if continuation is None:
        return composed
    return composed(continuation)
