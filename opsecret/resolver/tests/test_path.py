"""Tests for secret path parsing."""

import pytest

from opsecret.errors import MalformedPath
from opsecret.resolver.path import parse_path


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("Vault/Item", ("Vault", "Item", "")),
        ("Vault/Item/Field", ("Vault", "Item", "Field")),
        (" Vault / Item / Field ", ("Vault", "Item", "Field")),
        ("Vault/Item/Service Keys/Token", ("Vault", "Item", "Service Keys/Token")),
        ("Vault/Item/", ("Vault", "Item", "")),
        ("Vault/Item/  ", ("Vault", "Item", "")),
    ],
)
def test_parse_path(path, expected):
    assert parse_path(path) == expected


def test_named_fields():
    parsed = parse_path("Production Vault/Database Credentials/password")
    assert parsed.vault == "Production Vault"
    assert parsed.item == "Database Credentials"
    assert parsed.field == "password"


@pytest.mark.parametrize("path", ["OnlyVault", ""])
def test_single_segment(path):
    with pytest.raises(MalformedPath, match="vault/item"):
        parse_path(path)


@pytest.mark.parametrize("path", ["Vault/ /Field", " /Item", "/Item", "Vault/"])
def test_empty_segments(path):
    with pytest.raises(MalformedPath, match="cannot be empty"):
        parse_path(path)
