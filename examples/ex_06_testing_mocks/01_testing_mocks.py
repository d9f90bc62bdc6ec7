"""Mock contexts in tests without wrapping code in providers.

This module demonstrates:

1. ``mock_context`` building one shared mock value.
2. ``mock_context.transient`` building a value per resolve.
3. Real scopes taking precedence over mocks, and ``reset`` removing them.
"""

from __future__ import annotations

import itertools

from scopewire import ScopewireContextNotProvidedError, create_context
from scopewire.testing import mock_context

_serials = itertools.count(1)

clock, with_clock = create_context(name="clock")


def main() -> None:
    mock_context(with_clock, lambda: f"frozen-{next(_serials)}")
    print(clock(), clock())  # => frozen-1 frozen-1

    mock_context.transient(with_clock, lambda: f"tick-{next(_serials)}")
    print(clock(), clock())  # => tick-2 tick-3

    print(with_clock(lambda: "real", clock))  # => real

    mock_context.reset()
    try:
        clock()
    except ScopewireContextNotProvidedError as error:
        print(type(error).__name__)  # => ScopewireContextNotProvidedError


if __name__ == "__main__":
    main()
