"""
Secret resolution engine.

Public API:
    SecretResolver(client).resolve(request)  → Secret
    parse_path(path)                         → ParsedPath(vault, item, field)
    select_field(item, selector)             → str
"""

from __future__ import annotations

from opsecret.resolver.engine import SecretResolver
from opsecret.resolver.path import ParsedPath, parse_path
from opsecret.resolver.selector import select_field

__all__ = ["ParsedPath", "SecretResolver", "parse_path", "select_field"]
