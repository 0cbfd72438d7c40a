"""Request and response schemas for the REST API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

Identifier = int | str


class FieldDefinitionModel(BaseModel):
    """Definition of one field; ``type`` accepts any tag, unknown tags are opaque."""

    type: str = Field(min_length=1)
    label: str = ""
    target_kind: str | None = None
    computed: bool = False
    read_only: bool = False


class NestedItemModel(BaseModel):
    """One revision of a nested composite item (paragraph)."""

    id: Identifier
    revision_id: Identifier | None = None
    definitions: dict[str, FieldDefinitionModel] = Field(default_factory=dict)
    values: dict[str, Any] = Field(default_factory=dict)


class ChangeRequest(BaseModel):
    """Two revisions of one record plus the data needed to resolve references."""

    entity_kind: str = Field(min_length=1)
    entity_id: Identifier
    revision_id: Identifier | None = None
    definitions: dict[str, FieldDefinitionModel]
    original: dict[str, Any] = Field(default_factory=dict)
    updated: dict[str, Any] = Field(default_factory=dict)
    paragraphs: list[NestedItemModel] = Field(default_factory=list)
    files: dict[str, str] = Field(default_factory=dict)
    actor_id: Identifier


class ChangeEntryModel(BaseModel):
    entity_kind: str
    entity_id: Identifier
    revision_id: Identifier | None
    field_label: str
    diff: str
    timestamp: int
    actor_id: Identifier


class ChangeResponse(BaseModel):
    changes: list[ChangeEntryModel]


class HealthResponse(BaseModel):
    status: str
    version: str


class ErrorResponse(BaseModel):
    """Error envelope returned for every non-2xx response."""

    error: str
    detail: str
