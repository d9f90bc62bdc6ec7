"""Scoped versus transient providers.

This module demonstrates:

1. Scoped providers build lazily, at most once per scope.
2. Transient providers build on every resolve.
3. The ``with`` form via ``provider.scope(...)``.
"""

from __future__ import annotations

import itertools

from scopewire import create_context

_ids = itertools.count(1)

request_id, with_request_id = create_context(name="request_id")


def next_id() -> int:
    return next(_ids)


def read_twice() -> tuple[int, int]:
    return request_id(), request_id()


def main() -> None:
    print(f"scoped={with_request_id(next_id, read_twice)}")  # => scoped=(1, 1)
    print(f"transient={with_request_id.transient(next_id, read_twice)}")  # => transient=(2, 3)

    lazy = with_request_id(next_id, lambda: "never resolved")
    print(f"lazy={lazy} next={next_id()}")  # => lazy=never resolved next=4

    with with_request_id.scope(next_id):
        print(f"with_block={read_twice()}")  # => with_block=(5, 5)


if __name__ == "__main__":
    main()
