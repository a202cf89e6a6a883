"""
Pydantic models for SiteCraft.

All data shapes defined here. No imports from repos or routes.
"""

from backend.models.page import (
    CreatePageRequest,
    EditorNodeModel,
    GenerateRequest,
    GenerateResponse,
    PageRecord,
    PageSchemaModel,
    UpdatePageRequest,
)

__all__ = [
    # Page schema
    "EditorNodeModel",
    "PageSchemaModel",
    "PageRecord",
    # Requests / responses
    "CreatePageRequest",
    "UpdatePageRequest",
    "GenerateRequest",
    "GenerateResponse",
]
