"""
Secret resolver — turns a SecretRequest into a Secret.

Flow per request (strictly sequential, each step needs the previous result):
    parse path -> find vault by name -> find item by title -> load item -> select field

Stateless apart from the shared ConnectClient; safe to call concurrently.
Errors are re-raised as the same kind with the failing operation and name
prefixed, chained to the original. Cancellation is never caught.
"""

from __future__ import annotations

import logging
from typing import Any

from opsecret.errors import InvalidRequest, ItemFetchFailed, OpSecretError, StoreError
from opsecret.resolver.path import parse_path
from opsecret.resolver.selector import select_field
from opsecret.vault.client import ConnectClient
from opsecret.vault.models import Secret, SecretRequest


class SecretResolver:
    """Resolve ``vault/item[/field]`` secret requests against 1Password Connect."""

    def __init__(self, client: ConnectClient, logger: logging.Logger | None = None) -> None:
        self.client = client
        self.logger = logger or logging.getLogger(__name__)

    async def resolve(self, request: SecretRequest | None) -> Secret:
        if request is None:
            err = InvalidRequest("nil request")
            self.logger.error("secret request failed: %s", err)
            raise err

        log = logging.LoggerAdapter(self.logger, {"secret": request.name, "path": request.path})
        log.info("secret request received: name=%s path=%s", request.name, request.path)
        try:
            secret = await self._resolve(request, log)
        except OpSecretError as e:
            log.error("secret request failed: name=%s error=%s", request.name, e)
            raise
        return secret

    async def _resolve(self, request: SecretRequest, log: logging.LoggerAdapter[Any]) -> Secret:
        # The name is only a label for the returned secret; lookup uses the path.
        if not request.name:
            raise InvalidRequest("secret name must not be empty")

        try:
            vault_name, item_title, selector = parse_path(request.path)
        except OpSecretError as e:
            raise e.wrap(f'parse secret path "{request.path}"') from e

        try:
            vault = await self.client.find_vault_by_name(vault_name)
        except OpSecretError as e:
            raise e.wrap(f'lookup vault "{vault_name}"') from e

        try:
            summary = await self.client.find_item_by_title(vault.id, item_title)
        except OpSecretError as e:
            raise e.wrap(f'lookup item "{item_title}"') from e

        try:
            item = await self.client.get_item(vault.id, summary.id)
        except StoreError as e:
            raise ItemFetchFailed(f'load item "{item_title}": {e}') from e

        value = select_field(item, selector)

        log.info(
            "secret request succeeded: name=%s vault=%s item=%s field=%s",
            request.name,
            vault.name,
            item.title,
            selector or "<default password>",
        )
        return Secret(name=request.name, data=value)
