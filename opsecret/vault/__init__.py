"""
1Password Connect access — read-only REST client and data models.

Public API:
    ConnectClient(base_url, token)                 → async client
    client.find_vault_by_name(name)                → Vault
    client.find_item_by_title(vault_id, title)     → ItemSummary
    client.get_item(vault_id, item_id)             → Item
"""

from __future__ import annotations

from opsecret.vault.client import ConnectClient, build_equals_filter, escape_path_segment
from opsecret.vault.models import (
    Field,
    FieldSection,
    Item,
    ItemSummary,
    Secret,
    SecretRequest,
    Section,
    Vault,
)

__all__ = [
    "ConnectClient",
    "Field",
    "FieldSection",
    "Item",
    "ItemSummary",
    "Secret",
    "SecretRequest",
    "Section",
    "Vault",
    "build_equals_filter",
    "escape_path_segment",
]
