"""Repository for page operations."""

from __future__ import annotations

import asyncio
import copy
import logging
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from backend.models.page import CreatePageRequest, PageRecord, PageSchemaModel, UpdatePageRequest
from builder.kernel.autosave import PageStorage
from builder.kernel.nodes import create_empty_page_schema
from builder.kernel.validation import normalize_page_schema

logger = logging.getLogger(__name__)

# Fields a PATCH may clear by sending null
_NULLABLE_FIELDS = {"seo_title", "seo_description"}


class PageRepo(PageStorage):
    """
    All page-related storage operations, held in process.

    Also serves as the kernel's PageStorage: get()/put() read and write the
    schema of a page, so an Autosaver can save straight into it.
    """

    def __init__(self) -> None:
        self._pages: dict[str, PageRecord] = {}
        self._lock = asyncio.Lock()

    async def create(self, req: CreatePageRequest, schema: dict[str, Any] | None = None) -> PageRecord:
        """
        Create a new page.

        Args:
            req: CreatePageRequest with page details
            schema: Initial page schema; an empty page when omitted

        Returns:
            Newly created PageRecord
        """
        page = PageRecord(
            id=str(uuid4()),
            site_id=req.site_id,
            title=req.title,
            slug=req.slug,
            schema_json=PageSchemaModel.model_validate(schema or create_empty_page_schema()),
        )
        async with self._lock:
            self._pages[page.id] = page
        logger.info("Created page %s (%s)", page.id, page.slug)
        return page.model_copy(deep=True)

    async def get_page(self, page_id: str) -> PageRecord | None:
        """Fetch a page by id. Returns None if not found."""
        page = self._pages.get(page_id)
        return page.model_copy(deep=True) if page is not None else None

    async def update(self, page_id: str, req: UpdatePageRequest) -> PageRecord | None:
        """
        Apply the fields set on an UpdatePageRequest.

        Returns:
            Updated PageRecord, or None if the page doesn't exist
        """
        async with self._lock:
            page = self._pages.get(page_id)
            if page is None:
                return None
            changes = {
                k: v
                for k, v in req.model_dump(exclude_unset=True).items()
                if v is not None or k in _NULLABLE_FIELDS
            }
            if req.schema_json is not None:
                changes["schema_json"] = req.schema_json
            updated = page.model_copy(update={**changes, "updated_at": datetime.now(UTC)}, deep=True)
            self._pages[page_id] = updated
        return updated.model_copy(deep=True)

    async def delete(self, page_id: str) -> bool:
        """Delete a page. Returns True if it existed."""
        async with self._lock:
            return self._pages.pop(page_id, None) is not None

    async def list_for_site(self, site_id: str) -> list[PageRecord]:
        return [p.model_copy(deep=True) for p in self._pages.values() if p.site_id == site_id]

    # -- PageStorage ----------------------------------------------------------

    async def get(self, page_id: str) -> dict[str, Any] | None:
        page = self._pages.get(page_id)
        return page.schema_json.to_schema() if page is not None else None

    async def put(self, page_id: str, schema: dict[str, Any]) -> None:
        """
        Write a page schema.

        Raises:
            KeyError: no page with this id
            SchemaValidationError: the schema is structurally invalid
        """
        model = PageSchemaModel.model_validate(normalize_page_schema(copy.deepcopy(schema)))
        async with self._lock:
            page = self._pages.get(page_id)
            if page is None:
                raise KeyError(page_id)
            self._pages[page_id] = page.model_copy(
                update={"schema_json": model, "updated_at": datetime.now(UTC)}, deep=True
            )


# Singleton instance
page_repo = PageRepo()
