from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any, TypeVar

from scopewire._internal.composition import ComposedScope, ScopeCallable

try:
    from fastapi import Depends, FastAPI
    from starlette.types import ASGIApp, Receive, Scope, Send
except ModuleNotFoundError as exc:  # pragma: no cover - exercised in optional import scenarios
    message = "FastAPI integration requires fastapi. Install with 'scopewire[fastapi]'."
    raise ModuleNotFoundError(message) from exc

T = TypeVar("T")

_SCOPED_CONNECTION_TYPES = frozenset({"http", "websocket"})


class ScopewireMiddleware:
    """ASGI middleware running every request inside a set of scopes.

    Each HTTP or websocket connection gets its own scope instances, so scoped
    providers build at most one value per request. Lifespan events pass
    through without scopes.

    Examples:
        .. code-block:: python

            app = FastAPI()
            app.add_middleware(
                ScopewireMiddleware,
                scopes=[with_database(lambda: Database(DSN))],
            )

    """

    def __init__(self, app: ASGIApp, *, scopes: Iterable[ScopeCallable]) -> None:
        self.app = app
        self._composed = ComposedScope(scopes)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] not in _SCOPED_CONNECTION_TYPES:
            await self.app(scope, receive, send)
            return
        await self._composed(lambda: self.app(scope, receive, send))


def setup_scopewire(app: FastAPI, scopes: Iterable[ScopeCallable]) -> None:
    """Install ``ScopewireMiddleware`` on ``app`` with the given curried scopes."""
    app.add_middleware(ScopewireMiddleware, scopes=tuple(scopes))


def Resolve(resolver: Callable[[], T]) -> Any:  # noqa: N802
    """Return a ``Depends`` marker that resolves a context for an endpoint.

    Examples:
        .. code-block:: python

            @app.get("/users")
            async def list_users(db: Database = Resolve(database)) -> list[str]:
                return db.users()

    """

    async def _resolve_dependency() -> T:
        return resolver()

    return Depends(_resolve_dependency)


__all__ = [
    "Resolve",
    "ScopewireMiddleware",
    "setup_scopewire",
]
