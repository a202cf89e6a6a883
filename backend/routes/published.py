"""Public page serving — GET /p/{page_id} renders a page in published mode."""

from __future__ import annotations

import hashlib

from fastapi import APIRouter
from fastapi.responses import HTMLResponse, Response

from backend.repos.page_repo import page_repo
from builder.kernel.renderer import render_page
from builder.kernel.types import RenderOptions

router = APIRouter(tags=["published"])

# Cache-Control TTL: 1 minute browser, 5 minutes shared cache
_CACHE_CONTROL = "public, max-age=60, s-maxage=300"


@router.get("/p/{page_id}", response_class=HTMLResponse)
async def serve_published_page(page_id: str) -> Response:
    """
    Serve a page as static HTML: no editor markup, links live.

    Cache headers:
    - Cache-Control: public, short TTL (pages change on every save)
    - ETag: MD5 of the HTML content for conditional requests
    """
    page = await page_repo.get_page(page_id)

    if page is None:
        return HTMLResponse(
            content="<html><body><h1>404 — Page not found</h1></body></html>",
            status_code=404,
        )

    html = render_page(
        page.schema_json.to_schema(),
        RenderOptions(
            mode="published",
            title=page.seo_title or page.title,
            description=page.seo_description,
        ),
    )
    html_bytes = html.encode("utf-8")
    etag = f'"{hashlib.md5(html_bytes, usedforsecurity=False).hexdigest()}"'

    return Response(
        content=html_bytes,
        media_type="text/html; charset=utf-8",
        headers={
            "Cache-Control": _CACHE_CONTROL,
            "ETag": etag,
            "X-Content-Type-Options": "nosniff",
        },
    )
