from __future__ import annotations

import itertools

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from scopewire import ScopewireContextNotProvidedError, create_context
from scopewire.integrations.fastapi import Resolve, ScopewireMiddleware, setup_scopewire


class RequestState:
    _serials = itertools.count()

    def __init__(self) -> None:
        self.serial = next(self._serials)


def test_setup_scopewire_shares_scoped_value_within_one_request() -> None:
    state, with_state = create_context(name="request_state")
    app = FastAPI()
    setup_scopewire(app, [with_state(RequestState)])

    @app.get("/state")
    async def read_state() -> dict[str, bool | int]:
        first = state()
        return {"same": first is state(), "serial": first.serial}

    client = TestClient(app)
    first = client.get("/state")
    second = client.get("/state")

    assert first.status_code == 200
    assert first.json()["same"] is True
    assert first.json()["serial"] != second.json()["serial"]


def test_resolve_dependency_injects_context_value() -> None:
    settings, with_settings = create_context(name="settings")
    app = FastAPI()
    app.add_middleware(
        ScopewireMiddleware,
        scopes=[with_settings(lambda: {"region": "eu-west-1"})],
    )

    @app.get("/region")
    async def read_region(current: dict[str, str] = Resolve(settings)) -> dict[str, str]:
        return {"region": current["region"]}

    response = TestClient(app).get("/region")

    assert response.status_code == 200
    assert response.json() == {"region": "eu-west-1"}


def test_composed_scopes_see_earlier_contexts() -> None:
    tenant, with_tenant = create_context(name="tenant")
    greeting, with_greeting = create_context(name="greeting")
    app = FastAPI()
    setup_scopewire(
        app,
        [
            with_tenant(lambda: "acme"),
            with_greeting(lambda: f"hello {tenant()}"),
        ],
    )

    @app.get("/greeting")
    async def read_greeting() -> dict[str, str]:
        return {"greeting": greeting()}

    response = TestClient(app).get("/greeting")

    assert response.json() == {"greeting": "hello acme"}


def test_routes_outside_middleware_are_unscoped() -> None:
    state, _ = create_context(name="request_state", required=False)
    app = FastAPI()

    @app.get("/state")
    async def read_state() -> dict[str, bool]:
        return {"provided": state() is not None}

    response = TestClient(app).get("/state")

    assert response.json() == {"provided": False}


def test_required_context_outside_middleware_raises() -> None:
    state, _ = create_context(name="request_state")
    app = FastAPI()

    @app.get("/state")
    async def read_state() -> dict[str, int]:
        return {"serial": state().serial}

    with pytest.raises(ScopewireContextNotProvidedError, match="request_state"):
        TestClient(app).get("/state")
