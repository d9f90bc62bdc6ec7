"""Compose several scopes with ``with_contexts``.

This module demonstrates:

1. The first scope being the outermost, so later builders can use it.
2. Reusing a composed scope; each use builds fresh scoped values.
"""

from __future__ import annotations

import itertools

from scopewire import create_context, with_contexts

_connections = itertools.count(1)

config, with_config = create_context(name="config")
connection, with_connection = create_context(name="connection")


def connect() -> str:
    return f"{config()['dsn']}#{next(_connections)}"


def main() -> None:
    request_scope = with_contexts(
        [
            with_config(lambda: {"dsn": "postgres://db"}),
            with_connection(connect),
        ],
    )

    print(request_scope(connection))  # => postgres://db#1
    print(request_scope(lambda: (connection(), connection())))  # => ('postgres://db#2', 'postgres://db#2')


if __name__ == "__main__":
    main()
