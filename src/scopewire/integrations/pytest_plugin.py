from __future__ import annotations

from collections.abc import Iterator

import pytest

from scopewire.testing import MockContext


@pytest.fixture()
def scopewire_mock() -> Iterator[MockContext]:
    """Yield a per-test ``MockContext`` whose mocks are cleared at teardown.

    Use it instead of the shared ``scopewire.testing.mock_context`` when mocks
    must not leak into later tests. Mocks installed on the same context by
    other means are cleared too if this fixture touched that context.

    Yields:
        A fresh ``MockContext`` instance.

    """
    mocks = MockContext()
    try:
        yield mocks
    finally:
        mocks.reset()
