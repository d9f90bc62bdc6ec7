"""Quickstart: provide a value for a call tree and resolve it anywhere inside.

This module demonstrates:

1. ``create_context`` returning a ``(resolver, provider)`` pair.
2. Providing a value around a function without passing it as an argument.
3. The curried provider form reused for several calls.
"""

from __future__ import annotations

from dataclasses import dataclass

from scopewire import create_context


@dataclass(slots=True)
class Database:
    dsn: str


database, with_database = create_context(name="database")


def load_user(user_id: int) -> str:
    return f"user {user_id} from {database().dsn}"


def handle_request() -> str:
    return load_user(7)


def main() -> None:
    print(with_database(lambda: Database("sqlite://app"), handle_request))  # => user 7 from sqlite://app

    in_replica = with_database(lambda: Database("sqlite://replica"))
    print(in_replica(handle_request))  # => user 7 from sqlite://replica
    print(in_replica(lambda: load_user(8)))  # => user 8 from sqlite://replica


if __name__ == "__main__":
    main()
