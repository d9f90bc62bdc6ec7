from __future__ import annotations

from enum import Enum


class Lifetime(str, Enum):
    """Select how a provider turns its builder into resolved values."""

    SCOPED = "scoped"
    """The builder runs at most once per scope; every resolve inside the scope shares the result."""

    TRANSIENT = "transient"
    """The builder runs on every resolve; no value is cached."""
