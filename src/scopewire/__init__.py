from scopewire._internal.composition import ComposedScope, with_contexts
from scopewire._internal.context import (
    Context,
    Provider,
    Resolver,
    ScopeEstablisher,
    ScopeGuard,
    create_context,
)
from scopewire.exceptions import (
    ScopewireContextNotProvidedError,
    ScopewireError,
    ScopewireInvalidScopeError,
)
from scopewire.lifetime import Lifetime

__all__ = [
    "ComposedScope",
    "Context",
    "Lifetime",
    "Provider",
    "Resolver",
    "ScopeEstablisher",
    "ScopeGuard",
    "ScopewireContextNotProvidedError",
    "ScopewireError",
    "ScopewireInvalidScopeError",
    "create_context",
    "with_contexts",
]
