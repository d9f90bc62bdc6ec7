"""FastAPI integration: one scope per request.

This module demonstrates:

1. ``setup_scopewire`` installing request scopes as ASGI middleware.
2. Resolving contexts inside endpoints directly or through ``Resolve``.
"""

from __future__ import annotations

import itertools

from fastapi import FastAPI
from fastapi.testclient import TestClient

from scopewire import create_context
from scopewire.integrations.fastapi import Resolve, setup_scopewire

_sessions = itertools.count(1)

session, with_session = create_context(name="session")

app = FastAPI()
setup_scopewire(app, [with_session(lambda: f"session-{next(_sessions)}")])


@app.get("/whoami")
async def whoami(current: str = Resolve(session)) -> dict[str, str | bool]:
    return {"session": current, "same": current == session()}


def main() -> None:
    client = TestClient(app)
    print(client.get("/whoami").json())  # => {'session': 'session-1', 'same': True}
    print(client.get("/whoami").json())  # => {'session': 'session-2', 'same': True}


if __name__ == "__main__":
    main()
