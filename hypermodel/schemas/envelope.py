"""Envelope Schemas — JSON:API resource objects as sent by clients.

Invariants:
    - ResourceObject.type is required; id is optional (absent on create)
    - attributes/relationships must be objects when present
    - Identifiers are coerced to str: the store treats them as opaque

Design Decisions:
    - extra="allow": unknown members (meta, links) pass through untouched
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _coerce_id(v: Any) -> Any:
    if isinstance(v, (int, float)) and not isinstance(v, bool):
        return str(v)
    return v


class ResourceIdentifier(BaseModel):
    """A `{type, id}` reference inside a relationship."""
    model_config = ConfigDict(extra="allow")

    type: str = Field(min_length=1)
    id: str = Field(min_length=1)

    @field_validator("id", mode="before")
    @classmethod
    def normalize_id(cls, v: Any) -> Any:
        return _coerce_id(v)


class ResourceObject(BaseModel):
    """The `data` member of a create/update request."""
    model_config = ConfigDict(extra="allow")

    type: str = Field(min_length=1)
    id: str | None = None
    attributes: dict[str, Any] = Field(default_factory=dict)
    relationships: dict[str, Any] = Field(default_factory=dict)

    @field_validator("id", mode="before")
    @classmethod
    def normalize_id(cls, v: Any) -> Any:
        return _coerce_id(v)

    @field_validator("attributes", "relationships", mode="before")
    @classmethod
    def default_when_null(cls, v: Any) -> Any:
        return {} if v is None else v
