"""Shared pytest fixtures for scopewire tests."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

import pytest

from scopewire import Context


@pytest.fixture()
def context() -> Iterator[Context[Any]]:
    """Required context whose mock slot is cleared after the test."""
    ctx: Context[Any] = Context(name="service")
    yield ctx
    ctx.clear_mock()


@pytest.fixture()
def optional_context() -> Context[Any]:
    """Context created with required=False."""
    return Context(required=False, name="optional_service")
