"""
Field selection — pick exactly one value out of a loaded item.

Selectors:
    ""                     default password (purpose PASSWORD, then label "password")
    "notes" / "notesPlain" the item's plain-text notes
    "Label"                the field labelled Label
    "Section / Label"      the field labelled Label inside section(s) labelled Section

Matching is case-insensitive. Fields with an empty value never match. When
more than one field qualifies the selection fails rather than picking one.
"""

from __future__ import annotations

from opsecret.errors import (
    AmbiguousField,
    FieldNotFound,
    SectionNotFound,
    exactly_one,
)
from opsecret.vault.models import Field, Item

PASSWORD_PURPOSE = "PASSWORD"
DEFAULT_PASSWORD_LABEL = "password"
NOTES_SELECTORS = frozenset({"notes", "notesplain"})


def select_field(item: Item, selector: str) -> str:
    """Return the value chosen by ``selector`` from ``item``."""
    if selector == "":
        return default_password(item)
    if selector.casefold() in NOTES_SELECTORS:
        if not item.notes_plain:
            raise FieldNotFound(f'item "{item.title}" does not contain notes')
        return item.notes_plain

    section, label = split_qualified_label(selector)
    if section:
        return find_field_in_section(item, section, label)
    return find_field_by_label(item, label)


def default_password(item: Item) -> str:
    matches = [
        f for f in item.fields
        if f.purpose.casefold() == PASSWORD_PURPOSE.casefold() and f.value
    ]
    if not matches:
        # Older items store the password without the purpose tag.
        return find_field_by_label(item, DEFAULT_PASSWORD_LABEL)
    field = exactly_one(
        matches,
        FieldNotFound(f'item "{item.title}" has no password field'),
        AmbiguousField(
            f'item "{item.title}" defines multiple password fields; '
            "specify the desired field label"
        ),
    )
    return field.value


def find_field_by_label(item: Item, label: str) -> str:
    label = label.strip()
    matches = [f for f in item.fields if _label_matches(f, label) and f.value]
    field = exactly_one(
        matches,
        FieldNotFound(f'field "{label}" not found in item "{item.title}"'),
        AmbiguousField(
            f'field label "{label}" is ambiguous in item "{item.title}"; '
            "use a section-qualified label"
        ),
    )
    return field.value


def find_field_in_section(item: Item, section: str, label: str) -> str:
    section_ids = item.section_ids(section)
    if not section_ids:
        raise SectionNotFound(f'section "{section}" not found in item "{item.title}"')

    matches = [
        f for f in item.fields
        if f.section_id in section_ids and _label_matches(f, label) and f.value
    ]
    field = exactly_one(
        matches,
        FieldNotFound(f'field "{label}" not found in section "{section}" of item "{item.title}"'),
        AmbiguousField(f'field "{label}" is duplicated in section "{section}" of item "{item.title}"'),
    )
    return field.value


def split_qualified_label(selector: str) -> tuple[str, str]:
    """Split ``"Section / Label"`` once on ``/``; section is "" when unqualified."""
    section, sep, label = selector.partition("/")
    if not sep:
        return "", selector.strip()
    return section.strip(), label.strip()


def _label_matches(field: Field, label: str) -> bool:
    return field.label.casefold() == label.casefold()
