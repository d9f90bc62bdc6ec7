from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Callable
from contextvars import Token
from dataclasses import dataclass
from types import TracebackType
from typing import TYPE_CHECKING, Any, Generic, Literal, TypeVar, overload

from scopewire._internal.stack_storage import StackStorage
from scopewire.exceptions import ScopewireContextNotProvidedError, ScopewireInvalidScopeError
from scopewire.lifetime import Lifetime

if TYPE_CHECKING:
    from typing_extensions import Self

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

Builder = Callable[[], T]
Frame = Callable[[], Any]


@dataclass(frozen=True, slots=True)
class _MockSlot:
    """Fallback consulted when no scope is active for a context."""

    payload: Any
    is_factory: bool

    def get(self) -> Any:
        if self.is_factory:
            return self.payload()
        return self.payload


class _ScopedFrame:
    """Frame that builds its value on first call and replays it afterwards.

    A coroutine returned by an ``async def`` builder is wrapped in a task, so
    every resolve in the scope awaits the same shared result instead of
    re-awaiting a spent coroutine. The task is created while the frame is
    hidden, so the builder still sees the value it shadows.
    """

    __slots__ = ("_builder", "_initialized", "_value")

    def __init__(self, builder: Callable[[], Any]) -> None:
        self._builder = builder
        self._initialized = False
        self._value: Any = None

    def __call__(self) -> Any:
        if not self._initialized:
            value = self._builder()
            if inspect.iscoroutine(value):
                value = asyncio.ensure_future(value)
            self._value = value
            self._initialized = True
        return self._value


def ensure_callable(value: object, *, role: str) -> None:
    if not callable(value):
        msg = f"Expected a zero-argument callable for {role}, got {type(value).__name__}."
        raise ScopewireInvalidScopeError(msg)


class Context(Generic[T]):
    """One injectable dependency scoped to asynchronous call trees.

    A context owns a private branch-local stack of frames. Providers push a
    frame for the dynamic extent of a continuation; resolving reads the top
    frame of the current branch. When nothing is provided, the mock slot is
    consulted, then the ``required`` policy decides between raising
    ``ScopewireContextNotProvidedError`` and returning ``None``.

    The mock slot is shared by every branch. Installing mocks concurrently
    from several branches is not synchronized; serialize test setup instead.

    Examples:
        .. code-block:: python

            context: Context[Database] = Context(name="database")

            def handler() -> str:
                return context.resolve().dsn

            context.provider(lambda: Database("sqlite://"), handler)

    """

    __slots__ = ("_mock", "_required", "_storage", "name", "provider", "resolver")

    def __init__(self, *, required: bool = True, name: str | None = None) -> None:
        self._required = required
        self.name = name or "context"
        self._storage: StackStorage[Frame] = StackStorage(f"scopewire_{self.name}")
        self._mock: _MockSlot | None = None
        self.resolver: Resolver[T] = Resolver(self)
        self.provider: Provider[T] = Provider(self, Lifetime.SCOPED)

    @property
    def required(self) -> bool:
        """Whether resolving without a scope or mock raises; fixed at creation."""
        return self._required

    def __repr__(self) -> str:
        return f"Context(name={self.name!r}, required={self.required})"

    def resolve(self) -> T:
        """Return the value provided by the innermost active scope.

        While the top frame builds its value it is hidden from the current
        branch, so a builder that resolves this same context receives the
        value it shadows instead of recursing into itself.

        Raises:
            ScopewireContextNotProvidedError: If the context is required, no
                scope is active in the current branch and no mock is set.

        """
        with self._storage.take_item() as frame:
            if frame is not None:
                return frame()  # type: ignore[no-any-return]

        mock = self._mock
        if mock is not None:
            logger.debug("Resolving %r from its mock slot", self)
            return mock.get()  # type: ignore[no-any-return]

        if self.required:
            msg = (
                f"Context {self.name!r} is not provided. Call its provider (or "
                "provider.transient) around this code, set a mock, or create the "
                "context with required=False."
            )
            raise ScopewireContextNotProvidedError(msg)
        return None  # type: ignore[return-value]

    def is_provided(self) -> bool:
        """Return whether a scope for this context is active in the current branch."""
        return bool(self._storage.get_stack())

    def establish(self, builder: Builder[T], lifetime: Lifetime = Lifetime.SCOPED) -> Frame:
        """Build the frame a new scope pushes for ``builder``."""
        if lifetime is Lifetime.TRANSIENT:
            return builder
        return _ScopedFrame(builder)

    def run(self, frame: Frame, continuation: Callable[[], R]) -> R:
        return self._storage.run(frame, continuation)

    def push(self, frame: Frame) -> Token[tuple[Frame, ...]]:
        return self._storage.push(frame)

    def pop(self, token: Token[tuple[Frame, ...]]) -> None:
        self._storage.pop(token)

    @property
    def is_mocked(self) -> bool:
        return self._mock is not None

    def set_mock(self, value: T) -> None:
        """Return ``value`` from every resolve that finds no active scope."""
        self._mock = _MockSlot(payload=value, is_factory=False)
        logger.debug("Installed mock value for %r", self)

    def set_mock_factory(self, factory: Builder[T]) -> None:
        """Call ``factory`` on every resolve that finds no active scope."""
        ensure_callable(factory, role="mock factory")
        self._mock = _MockSlot(payload=factory, is_factory=True)
        logger.debug("Installed mock factory for %r", self)

    def clear_mock(self) -> None:
        """Remove any mock value or factory; real scopes are unaffected."""
        if self._mock is not None:
            logger.debug("Cleared mock for %r", self)
        self._mock = None


class Resolver(Generic[T]):
    """Zero-argument callable returning the current value of its context."""

    __slots__ = ("context",)

    def __init__(self, context: Context[T]) -> None:
        self.context = context

    def __call__(self) -> T:
        return self.context.resolve()

    def __repr__(self) -> str:
        return f"Resolver({self.context!r})"


class ScopeEstablisher(Generic[T]):
    """Reusable curried scope: ``establisher(continuation)`` runs inside a new scope.

    Every invocation is an independent scope instance, so scoped establishers
    build (and cache) a fresh value per invocation.
    """

    __slots__ = ("_builder", "context", "lifetime")

    def __init__(self, context: Context[T], builder: Builder[T], lifetime: Lifetime) -> None:
        self.context = context
        self.lifetime = lifetime
        self._builder = builder

    def __call__(self, continuation: Callable[[], R]) -> R:
        ensure_callable(continuation, role="continuation")
        frame = self.context.establish(self._builder, self.lifetime)
        return self.context.run(frame, continuation)

    def run(self, continuation: Callable[[], R]) -> R:
        return self(continuation)

    def __repr__(self) -> str:
        return f"ScopeEstablisher({self.context!r}, lifetime={self.lifetime.value!r})"


class ScopeGuard(Generic[T]):
    """Scope for the body of a ``with`` or ``async with`` block.

    Entering pushes a fresh frame (a fresh cache for scoped providers);
    leaving restores the stack on every exit path. Enter and exit must happen
    in the same branch: do not enter in one task and exit in another, and do
    not keep the guard open across ``yield`` in an async generator. A guard
    can be re-entered after it exits, each time as a new scope instance.
    """

    __slots__ = ("_builder", "_token", "context", "lifetime")

    def __init__(self, context: Context[T], builder: Builder[T], lifetime: Lifetime) -> None:
        self.context = context
        self.lifetime = lifetime
        self._builder = builder
        self._token: Token[tuple[Frame, ...]] | None = None

    def __enter__(self) -> Self:
        if self._token is not None:
            msg = f"{self!r} is already active; create another guard for nested scopes."
            raise ScopewireInvalidScopeError(msg)
        self._token = self.context.push(self.context.establish(self._builder, self.lifetime))
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        token, self._token = self._token, None
        if token is not None:
            self.context.pop(token)

    async def __aenter__(self) -> Self:
        return self.__enter__()

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.__exit__(exc_type, exc_value, traceback)

    def __repr__(self) -> str:
        return f"ScopeGuard({self.context!r}, lifetime={self.lifetime.value!r})"


class Provider(Generic[T]):
    """Establish scopes for one context.

    ``provider(builder, continuation)`` runs ``continuation`` immediately inside
    a new scope and returns its result. ``provider(builder)`` returns a
    ``ScopeEstablisher`` that can be invoked later, any number of times.
    ``provider.scope(builder)`` is the ``with``-statement form.

    The default provider caches the built value for the whole scope;
    ``provider.transient`` rebuilds it on every resolve.

    Examples:
        .. code-block:: python

            logger, with_logger = create_context()

            with_logger(lambda: Logger("app"), run_app)
            with_logger.transient(lambda: Logger("req"), handle_request)

            with with_logger.scope(lambda: Logger("job")):
                run_job()

    """

    __slots__ = ("_transient", "context", "lifetime")

    def __init__(self, context: Context[T], lifetime: Lifetime) -> None:
        self.context = context
        self.lifetime = lifetime
        self._transient: Provider[T] | None = None

    @property
    def transient(self) -> Provider[T]:
        """Sibling provider that rebuilds the value on every resolve."""
        if self.lifetime is Lifetime.TRANSIENT:
            return self
        if self._transient is None:
            self._transient = Provider(self.context, Lifetime.TRANSIENT)
        return self._transient

    @overload
    def __call__(self, builder: Builder[T]) -> ScopeEstablisher[T]: ...

    @overload
    def __call__(self, builder: Builder[T], continuation: Callable[[], R]) -> R: ...

    def __call__(
        self,
        builder: Builder[T],
        continuation: Callable[[], R] | None = None,
    ) -> R | ScopeEstablisher[T]:
        ensure_callable(builder, role="builder")
        establisher = ScopeEstablisher(self.context, builder, self.lifetime)
        if continuation is None:
            return establisher
        return establisher(continuation)

    def scope(self, builder: Builder[T]) -> ScopeGuard[T]:
        """Return a guard establishing a new scope for a ``with`` block."""
        ensure_callable(builder, role="builder")
        return ScopeGuard(self.context, builder, self.lifetime)

    def __repr__(self) -> str:
        return f"Provider({self.context!r}, lifetime={self.lifetime.value!r})"


@overload
def create_context(
    *,
    required: Literal[True] = True,
    name: str | None = None,
) -> tuple[Resolver[Any], Provider[Any]]: ...


@overload
def create_context(
    *,
    required: Literal[False],
    name: str | None = None,
) -> tuple[Resolver[Any | None], Provider[Any | None]]: ...


@overload
def create_context(
    *,
    required: bool,
    name: str | None = None,
) -> tuple[Resolver[Any], Provider[Any]]: ...


def create_context(
    *,
    required: bool = True,
    name: str | None = None,
) -> tuple[Resolver[Any], Provider[Any]]:
    """Create a context and return its ``(resolver, provider)`` pair.

    Args:
        required: When true, resolving without an active scope or mock raises
            ``ScopewireContextNotProvidedError``; when false it returns ``None``.
        name: Label used in ``repr`` and error messages.

    Returns:
        The resolver and the provider sharing one new ``Context``.

    Examples:
        .. code-block:: python

            database, with_database = create_context(name="database")

            def handler() -> None:
                database().execute("select 1")

            with_database(lambda: Database(), handler)

    """
    context: Context[Any] = Context(required=required, name=name)
    return context.resolver, context.provider
