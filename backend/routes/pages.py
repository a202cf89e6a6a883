"""Page routes — create, get, update, delete pages; list starter templates."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from backend.models.page import CreatePageRequest, PageRecord, UpdatePageRequest
from backend.repos.page_repo import page_repo
from builder.kernel.templates import instantiate_template, list_templates
from builder.kernel.validation import validate_page_schema

logger = logging.getLogger(__name__)

router = APIRouter(tags=["pages"])


@router.get("/api/templates", status_code=200)
async def get_templates() -> list[dict[str, str]]:
    """Starter template metadata."""
    return list_templates()


@router.post("/api/pages", status_code=201)
async def create_page(req: CreatePageRequest) -> PageRecord:
    """Create a page, seeded from a starter template when one is named."""
    schema = None
    if req.template:
        try:
            schema = instantiate_template(req.template)[0]["schema"]
        except KeyError:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Template not found.") from None
    return await page_repo.create(req, schema)


@router.get("/api/pages/{page_id}", status_code=200)
async def get_page(page_id: str) -> PageRecord:
    """Get a single page by ID."""
    page = await page_repo.get_page(page_id)
    if not page:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Page not found.")
    return page


@router.patch("/api/pages/{page_id}", status_code=200)
async def update_page(page_id: str, req: UpdatePageRequest) -> PageRecord:
    """
    Update page metadata and/or schema.

    The payload is checked in full before anything is written: a schema with
    duplicate node ids or bad styles is rejected with 422 and the stored page
    is left untouched.
    """
    if req.schema_json is not None:
        errors = validate_page_schema(req.schema_json.to_schema())
        if errors:
            logger.info("Rejected schema for page %s: %s", page_id, errors)
            raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=errors)

    page = await page_repo.update(page_id, req)
    if not page:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Page not found.")
    return page


@router.delete("/api/pages/{page_id}", status_code=200)
async def delete_page(page_id: str) -> dict:
    """Delete a page."""
    if not await page_repo.delete(page_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Page not found.")
    return {"success": True}
