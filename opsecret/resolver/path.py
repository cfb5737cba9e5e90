"""Secret path parsing: ``vault/item[/field]``."""

from __future__ import annotations

from typing import NamedTuple

from opsecret.errors import MalformedPath


class ParsedPath(NamedTuple):
    vault: str
    item: str
    field: str  # "" when no selector was given


def parse_path(path: str) -> ParsedPath:
    """Split a secret path into vault name, item title and field selector.

    Only the first two ``/`` separate components, so the field selector may
    itself contain ``/`` (``Vault/Item/Section/Label``). Every component is
    stripped of surrounding whitespace.
    """
    parts = path.split("/", 2)
    if len(parts) < 2:
        raise MalformedPath("secret path must be formatted as vault/item[/field]")
    vault = parts[0].strip()
    item = parts[1].strip()
    if not vault or not item:
        raise MalformedPath("vault and item names cannot be empty")
    field = parts[2].strip() if len(parts) == 3 else ""
    return ParsedPath(vault, item, field)
