"""Errors raised when contexts are missing or misused.

This module demonstrates:

1. ``ScopewireContextNotProvidedError`` for required contexts.
2. ``None`` from optional contexts.
3. ``ScopewireInvalidScopeError`` for non-callable builders.
4. Builder errors propagating unchanged while the scope stays intact.
"""

from __future__ import annotations

from scopewire import (
    ScopewireContextNotProvidedError,
    ScopewireInvalidScopeError,
    create_context,
)

user, with_user = create_context(name="user")
trace_id, with_trace_id = create_context(name="trace_id", required=False)


def main() -> None:
    try:
        user()
    except ScopewireContextNotProvidedError as error:
        print(type(error).__name__)  # => ScopewireContextNotProvidedError

    print(f"optional={trace_id()}")  # => optional=None

    try:
        with_user("alice")  # type: ignore[arg-type]
    except ScopewireInvalidScopeError as error:
        print(type(error).__name__)  # => ScopewireInvalidScopeError

    def failing_builder() -> str:
        msg = "directory unavailable"
        raise ConnectionError(msg)

    def handler() -> bool:
        try:
            user()
        except ConnectionError as error:
            print(f"builder_error={error}")  # => builder_error=directory unavailable
        return user.context.is_provided()

    print(f"still_provided={with_user(failing_builder, handler)}")  # => still_provided=True


if __name__ == "__main__":
    main()
