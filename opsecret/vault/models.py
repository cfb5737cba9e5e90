"""1Password Connect data models, decoded from the REST API's JSON."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field as PydanticField, model_validator


class _StoreModel(BaseModel):
    """Read-only view of a store object. Unknown keys are ignored, nulls become defaults."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class Vault(_StoreModel):
    id: str = ""
    name: str = ""


class ItemSummary(_StoreModel):
    id: str = ""
    title: str = ""


class FieldSection(_StoreModel):
    """Lookup-only reference from a field to its section."""

    id: str = ""


class Field(_StoreModel):
    id: str = ""
    label: str = ""
    value: str = ""
    purpose: str = ""  # USERNAME, PASSWORD, NOTES or empty
    type: str = ""
    section: FieldSection | None = None

    @property
    def section_id(self) -> str | None:
        return self.section.id if self.section else None


class Section(_StoreModel):
    id: str = ""
    label: str = ""


class Item(_StoreModel):
    """A full item: fields, sections and plain-text notes."""

    id: str = ""
    title: str = ""
    notes_plain: str = PydanticField(default="", alias="notesPlain")
    fields: list[Field] = []
    sections: list[Section] = []

    def section_ids(self, label: str) -> set[str]:
        """Ids of every section labelled ``label`` (case-insensitive). Labels may repeat."""
        wanted = label.casefold()
        return {s.id for s in self.sections if s.label.casefold() == wanted}


class SecretRequest(BaseModel):
    """A named secret request from the CI server.

    ``repo`` and ``build`` are sent by the CI server and accepted for
    correlation only.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = ""
    path: str = ""
    repo: dict[str, Any] | None = None
    build: dict[str, Any] | None = None


class Secret(BaseModel):
    """A resolved secret in the shape the CI server expects."""

    model_config = ConfigDict(frozen=True)

    name: str
    data: str
    pull_request: bool = False
