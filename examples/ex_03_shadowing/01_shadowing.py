"""Nested scopes shadow outer ones, and builders can wrap the shadowed value.

This module demonstrates:

1. An inner scope hiding the outer value only for its own extent.
2. A builder resolving its own context to decorate the previous value.
"""

from __future__ import annotations

from scopewire import create_context

logger, with_logger = create_context(name="logger")


def log(message: str) -> str:
    return f"{logger()}: {message}"


def child_logger() -> str:
    return f"{logger()}.child"


def run() -> None:
    print(log("start"))  # => app: start
    print(with_logger(child_logger, lambda: log("inside")))  # => app.child: inside
    print(log("end"))  # => app: end


def main() -> None:
    with_logger(lambda: "app", run)


if __name__ == "__main__":
    main()
