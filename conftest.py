"""
Root-level shared test fixtures.

Inherited by the package test suites (opsecret/*/tests) and tests/.
The 1Password Connect server is faked with httpx.MockTransport, so no test
touches the network.
"""

from __future__ import annotations

import json
import re
from collections.abc import Callable
from typing import Any
from urllib.parse import unquote

import httpx
import pytest
import pytest_asyncio

from opsecret.vault.client import ConnectClient

CONNECT_HOST = "https://connect.test"
CONNECT_TOKEN = "test-token"

_FILTER = re.compile(r'^(\w+) eq "((?:[^"\\]|\\.)*)"$')


def json_response(data: Any, status_code: int = 200) -> httpx.Response:
    return httpx.Response(
        status_code=status_code,
        content=json.dumps(data).encode(),
        headers={"content-type": "application/json"},
    )


def unescape_filter_value(value: str) -> str:
    return re.sub(r"\\(.)", r"\1", value)


class FakeConnect:
    """In-memory 1Password Connect server.

    ``vaults``: list of vault dicts.
    ``items``: vault id -> list of full item dicts (summaries are derived).
    ``overrides``: URL path -> response (or callable) served instead.
    """

    def __init__(self) -> None:
        self.vaults: list[dict[str, Any]] = []
        self.items: dict[str, list[dict[str, Any]]] = {}
        self.overrides: dict[str, httpx.Response | Callable[[httpx.Request], httpx.Response]] = {}
        self.requests: list[httpx.Request] = []

    def add_vault(self, vault_id: str, name: str) -> None:
        self.vaults.append({"id": vault_id, "name": name})
        self.items.setdefault(vault_id, [])

    def add_item(self, vault_id: str, item: dict[str, Any]) -> None:
        self.items.setdefault(vault_id, []).append(item)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.raw_path.decode().split("?", 1)[0]
        override = self.overrides.get(path)
        if override is not None:
            return override(request) if callable(override) else override

        segments = [unquote(s) for s in path.split("/")[2:]]  # drop "", "v1"
        flt = _parse_filter(request.url.params.get("filter"))

        if segments == ["vaults"]:
            return json_response([v for v in self.vaults if _matches(v, flt)])
        if len(segments) == 3 and segments[0] == "vaults" and segments[2] == "items":
            items = self.items.get(segments[1])
            if items is None:
                return json_response({"status": 404, "message": "Invalid Vault UUID"}, 404)
            summaries = [{"id": i["id"], "title": i["title"]} for i in items]
            return json_response([s for s in summaries if _matches(s, flt)])
        if len(segments) == 4 and segments[0] == "vaults" and segments[2] == "items":
            for item in self.items.get(segments[1], []):
                if item["id"] == segments[3]:
                    return json_response(item)
            return json_response({"status": 404, "message": "Invalid Item UUID"}, 404)
        return json_response({"status": 404, "message": "not found"}, 404)


def _parse_filter(raw: str | None) -> tuple[str, str] | None:
    if not raw:
        return None
    m = _FILTER.match(raw)
    assert m, f"malformed filter expression: {raw!r}"
    return m.group(1), unescape_filter_value(m.group(2))


def _matches(obj: dict[str, Any], flt: tuple[str, str] | None) -> bool:
    return flt is None or obj.get(flt[0]) == flt[1]


@pytest.fixture
def fake_connect() -> FakeConnect:
    return FakeConnect()


@pytest_asyncio.fixture
async def connect_client(fake_connect):
    """ConnectClient wired to the fake server."""
    http = httpx.AsyncClient(transport=httpx.MockTransport(fake_connect.handler))
    client = ConnectClient(CONNECT_HOST, CONNECT_TOKEN, http_client=http)
    yield client
    await http.aclose()


@pytest.fixture
def clean_env(monkeypatch):
    """Remove opsecret env vars that leak between tests."""
    for key in [
        "DRONE_BIND",
        "DRONE_DEBUG",
        "DRONE_SECRET",
        "OP_CONNECT_HOST",
        "OP_CONNECT_TOKEN",
        "OP_CONNECT_TIMEOUT",
    ]:
        monkeypatch.delenv(key, raising=False)
