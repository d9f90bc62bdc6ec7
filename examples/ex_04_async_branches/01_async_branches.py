"""Scopes follow asyncio code across awaits and stay isolated per task.

This module demonstrates:

1. An ``async def`` continuation seeing its scope after suspension points.
2. Sibling tasks started with ``asyncio.gather`` not seeing each other's scopes.
"""

from __future__ import annotations

import asyncio

from scopewire import create_context

tenant, with_tenant = create_context(name="tenant")


async def audited(label: str) -> str:
    await asyncio.sleep(0)
    return f"{label}:{tenant()}"


async def branch_with_override() -> str:
    return await with_tenant(lambda: "override", lambda: audited("one"))


async def handler() -> list[str]:
    results = await asyncio.gather(branch_with_override(), audited("two"))
    results.append(await audited("after"))
    return results


def main() -> None:
    results = asyncio.run(with_tenant(lambda: "acme", handler))
    print(results)  # => ['one:override', 'two:acme', 'after:acme']


if __name__ == "__main__":
    main()
