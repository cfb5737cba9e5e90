"""
1Password Connect REST client.

Read-only: find a vault by name, find an item by title, load a full item.
One GET per call, bearer-token authorised, no retries.

Usage:
    async with ConnectClient("https://connect.example.com", token) as client:
        vault = await client.find_vault_by_name("Production Vault")
        summary = await client.find_item_by_title(vault.id, "Database Credentials")
        item = await client.get_item(vault.id, summary.id)
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote, urlsplit, urlunsplit

import httpx
from pydantic import TypeAdapter, ValidationError

from opsecret.errors import (
    AmbiguousItem,
    AmbiguousVault,
    ConfigError,
    ItemNotFound,
    StoreAPIError,
    TransportError,
    VaultNotFound,
    exactly_one,
)
from opsecret.vault.models import Item, ItemSummary, Vault

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 15.0
API_VERSION_PATH = "/v1"

_vault_list = TypeAdapter(list[Vault])
_item_list = TypeAdapter(list[ItemSummary])
_item = TypeAdapter(Item)


def normalize_base_url(base_url: str) -> str:
    """Validate the Connect host and return the versioned API root (``.../v1``)."""
    if not base_url:
        raise ConfigError("missing 1Password Connect host")
    try:
        parts = urlsplit(base_url)
    except ValueError as e:
        raise ConfigError(f"invalid 1Password Connect host: {e}") from e
    if not parts.scheme or not parts.netloc:
        raise ConfigError("1Password Connect host must include scheme and host")

    path = parts.path.rstrip("/")
    if not path.endswith(API_VERSION_PATH):
        path = path + API_VERSION_PATH
    return urlunsplit((parts.scheme, parts.netloc, path, "", ""))


def build_equals_filter(field: str, value: str) -> str:
    """Build a Connect filter expression: ``<field> eq "<escaped value>"``."""
    return f'{field} eq "{escape_filter_value(value)}"'


def escape_filter_value(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


def escape_path_segment(segment: str) -> str:
    """Percent-encode one URL path segment, including ``/``."""
    return quote(segment, safe="")


class ConnectClient:
    """Async client for the 1Password Connect API.

    Safe to share between concurrent resolutions: the only shared state is
    the underlying ``httpx.AsyncClient`` connection pool.
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = normalize_base_url(base_url)
        if not token:
            raise ConfigError("missing 1Password Connect token")
        self._token = token
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=timeout or DEFAULT_TIMEOUT)

    async def __aenter__(self) -> ConnectClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def find_vault_by_name(self, name: str) -> Vault:
        data = await self._get("vaults", params={"filter": build_equals_filter("name", name)})
        vaults = _decode(_vault_list, data or [])
        return exactly_one(
            vaults,
            VaultNotFound(f'vault "{name}" not found'),
            AmbiguousVault(f'multiple vaults match name "{name}"'),
        )

    async def find_item_by_title(self, vault_id: str, title: str) -> ItemSummary:
        path = f"vaults/{escape_path_segment(vault_id)}/items"
        data = await self._get(path, params={"filter": build_equals_filter("title", title)})
        items = _decode(_item_list, data or [])
        return exactly_one(
            items,
            ItemNotFound(f'item "{title}" not found in vault "{vault_id}"'),
            AmbiguousItem(f'multiple items named "{title}" found in vault "{vault_id}"'),
        )

    async def get_item(self, vault_id: str, item_id: str) -> Item:
        path = f"vaults/{escape_path_segment(vault_id)}/items/{escape_path_segment(item_id)}"
        data = await self._get(path)
        return _decode(_item, data)

    async def _get(self, path: str, params: dict[str, str] | None = None) -> Any:
        """GET ``{base_url}/{path}`` and return the decoded JSON body."""
        url = f"{self.base_url}/{path.lstrip('/')}"
        headers = {
            "Authorization": f"Bearer {self._token}",
            "Accept": "application/json",
        }
        logger.debug("GET %s params=%s", url, params)
        try:
            resp = await self._client.get(url, params=params, headers=headers)
        except httpx.RequestError as e:
            raise TransportError(f"1Password Connect request failed: GET {url}: {e!r}") from e

        if not resp.is_success:
            raise _api_error(resp)
        try:
            return resp.json()
        except ValueError as e:
            raise StoreAPIError(resp.status_code, f"invalid response body: {e}") from e


def _api_error(resp: httpx.Response) -> StoreAPIError:
    """Map a non-2xx response to StoreAPIError, preferring the JSON ``message``."""
    message = f"{resp.status_code} {resp.reason_phrase}".strip()
    try:
        payload = resp.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict) and isinstance(payload.get("message"), str) and payload["message"]:
        message = payload["message"]
    return StoreAPIError(resp.status_code, message)


def _decode(adapter: TypeAdapter[Any], data: Any) -> Any:
    try:
        return adapter.validate_python(data)
    except ValidationError as e:
        raise StoreAPIError(200, f"unexpected response shape: {e.error_count()} validation error(s)") from e
