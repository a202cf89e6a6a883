"""Page models — the persisted page schema and the payloads that touch it."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

from builder.kernel.types import BREAKPOINTS


class EditorNodeModel(BaseModel):
    """One node of the page tree, recursively."""

    id: str = Field(min_length=1)
    type: str = Field(min_length=1)
    props: dict[str, Any] = Field(default_factory=dict)
    styles: dict[str, dict[str, str]] = Field(default_factory=dict)
    children: list[EditorNodeModel] = Field(default_factory=list)

    @field_validator("styles")
    @classmethod
    def known_breakpoints(cls, v: dict[str, dict[str, str]]) -> dict[str, dict[str, str]]:
        unknown = sorted(set(v) - set(BREAKPOINTS))
        if unknown:
            raise ValueError(f"Unknown breakpoint(s): {', '.join(unknown)}")
        return v


class PageSchemaModel(BaseModel):
    """The persisted unit: {rootNodes, version}. version defaults to 1."""

    model_config = {"populate_by_name": True}

    root_nodes: list[EditorNodeModel] = Field(alias="rootNodes")
    version: int = 1

    def to_schema(self) -> dict[str, Any]:
        """Plain JSON-compatible dict in wire format."""
        return self.model_dump(by_alias=True)


class PageRecord(BaseModel):
    """A stored page: metadata plus its schema."""

    model_config = {"populate_by_name": True}

    id: str
    site_id: str = Field(alias="siteId")
    title: str
    slug: str
    schema_json: PageSchemaModel = Field(alias="schemaJson")
    seo_title: str | None = Field(default=None, alias="seoTitle")
    seo_description: str | None = Field(default=None, alias="seoDescription")
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC), alias="updatedAt")


class CreatePageRequest(BaseModel):
    """What the client sends to create a page, optionally from a starter template."""

    model_config = {"extra": "forbid", "populate_by_name": True}

    site_id: str = Field(min_length=1, alias="siteId")
    title: str = Field(min_length=1, max_length=200)
    slug: str = Field(min_length=1, max_length=200)
    template: str | None = None


class UpdatePageRequest(BaseModel):
    """What the client sends to PATCH a page. Every field is optional."""

    model_config = {"extra": "forbid", "populate_by_name": True}

    title: str | None = Field(default=None, min_length=1, max_length=200)
    slug: str | None = Field(default=None, min_length=1, max_length=200)
    schema_json: PageSchemaModel | None = Field(default=None, alias="schemaJson")
    seo_title: str | None = Field(default=None, max_length=200, alias="seoTitle")
    seo_description: str | None = Field(default=None, max_length=500, alias="seoDescription")


class GenerateRequest(BaseModel):
    """What the client sends to ask the AI for new content."""

    model_config = {"extra": "forbid"}

    prompt: str = Field(min_length=1, max_length=2000)
    context: str | None = None


class GenerateResponse(BaseModel):
    """Nodes proposed by the AI, ready for EditorStore.insert_nodes()."""

    nodes: list[dict[str, Any]]
    usage: dict[str, int] | None = None
