"""
Tests for page routes and public page serving.

GET/PATCH/DELETE /api/pages/{id}, POST /api/pages, GET /api/templates,
GET /p/{id}, GET /health.
"""

import pytest
from httpx import AsyncClient


def _node(node_id, node_type="text", **props):
    return {"id": node_id, "type": node_type, "props": props, "styles": {"base": {}}, "children": []}


class TestHealth:
    async def test_health(self, client: AsyncClient):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}


class TestTemplates:
    async def test_list_templates(self, client: AsyncClient):
        response = await client.get("/api/templates")
        assert response.status_code == 200
        assert [t["name"] for t in response.json()] == ["Blank", "Landing Page", "Portfolio", "Business"]


class TestCreatePage:
    async def test_create_blank(self, client: AsyncClient):
        response = await client.post("/api/pages", json={"siteId": "s1", "title": "About", "slug": "about"})
        assert response.status_code == 201
        data = response.json()
        assert data["siteId"] == "s1"
        assert data["schemaJson"] == {"rootNodes": [], "version": 1}

    async def test_create_from_template(self, client: AsyncClient):
        response = await client.post(
            "/api/pages",
            json={"siteId": "s1", "title": "Home", "slug": "index", "template": "Business"},
        )
        assert response.status_code == 201
        roots = response.json()["schemaJson"]["rootNodes"]
        assert [n["type"] for n in roots] == ["navbar", "section", "section", "footer"]

    async def test_unknown_template(self, client: AsyncClient):
        response = await client.post(
            "/api/pages",
            json={"siteId": "s1", "title": "Home", "slug": "index", "template": "Nope"},
        )
        assert response.status_code == 404

    async def test_extra_fields_rejected(self, client: AsyncClient):
        response = await client.post(
            "/api/pages",
            json={"siteId": "s1", "title": "Home", "slug": "index", "owner": "me"},
        )
        assert response.status_code == 422


class TestGetPage:
    async def test_get(self, client: AsyncClient, page):
        response = await client.get(f"/api/pages/{page.id}")
        assert response.status_code == 200
        data = response.json()
        assert data["title"] == "Home"
        assert data["schemaJson"]["version"] == 1
        assert len(data["schemaJson"]["rootNodes"]) == 4

    async def test_missing(self, client: AsyncClient):
        response = await client.get("/api/pages/nope")
        assert response.status_code == 404


class TestUpdatePage:
    async def test_update_metadata(self, client: AsyncClient, page):
        response = await client.patch(
            f"/api/pages/{page.id}",
            json={"title": "Welcome", "seoDescription": "Our home page"},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["title"] == "Welcome"
        assert data["slug"] == "index"
        assert data["seoDescription"] == "Our home page"
        assert len(data["schemaJson"]["rootNodes"]) == 4

    async def test_update_schema(self, client: AsyncClient, page):
        schema = {"rootNodes": [_node("a", text="Hello")]}
        response = await client.patch(f"/api/pages/{page.id}", json={"schemaJson": schema})
        assert response.status_code == 200
        assert response.json()["schemaJson"] == {"rootNodes": [_node("a", text="Hello")], "version": 1}

    async def test_schema_roundtrips_exactly(self, client: AsyncClient, page):
        original = (await client.get(f"/api/pages/{page.id}")).json()["schemaJson"]
        response = await client.patch(f"/api/pages/{page.id}", json={"schemaJson": original})
        assert response.json()["schemaJson"] == original

    @pytest.mark.parametrize(
        "payload",
        [
            {"title": ""},
            {"title": "x" * 201},
            {"seoTitle": "x" * 201},
            {"seoDescription": "x" * 501},
            {"unknown": 1},
            {"schemaJson": {"rootNodes": [{"type": "text"}]}},
            {"schemaJson": {"rootNodes": [{"id": "a", "type": "text", "styles": {"xl": {}}}]}},
            {"schemaJson": {"rootNodes": [{"id": "a", "type": "text", "styles": {"base": {"fontSize": 16}}}]}},
        ],
    )
    async def test_invalid_payload_rejected(self, client: AsyncClient, page, payload):
        response = await client.patch(f"/api/pages/{page.id}", json=payload)
        assert response.status_code == 422

    async def test_duplicate_ids_rejected_without_partial_write(self, client: AsyncClient, page):
        schema = {"rootNodes": [_node("dup"), _node("dup")]}
        response = await client.patch(f"/api/pages/{page.id}", json={"title": "Changed", "schemaJson": schema})
        assert response.status_code == 422
        assert "Duplicate node id: dup" in response.json()["detail"]

        stored = (await client.get(f"/api/pages/{page.id}")).json()
        assert stored["title"] == "Home"
        assert len(stored["schemaJson"]["rootNodes"]) == 4

    async def test_missing(self, client: AsyncClient):
        response = await client.patch("/api/pages/nope", json={"title": "x"})
        assert response.status_code == 404


class TestDeletePage:
    async def test_delete(self, client: AsyncClient, page):
        response = await client.delete(f"/api/pages/{page.id}")
        assert response.status_code == 200
        assert (await client.get(f"/api/pages/{page.id}")).status_code == 404

    async def test_delete_missing(self, client: AsyncClient):
        assert (await client.delete("/api/pages/nope")).status_code == 404


class TestPublishedPage:
    async def test_serves_published_html(self, client: AsyncClient, page):
        response = await client.get(f"/p/{page.id}")
        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["ETag"].startswith('"')
        assert "<title>Home</title>" in response.text
        assert "Build Something Amazing" in response.text
        assert "data-node-id" not in response.text

    async def test_seo_title_used(self, client: AsyncClient, page):
        await client.patch(f"/api/pages/{page.id}", json={"seoTitle": "Acme | Home"})
        response = await client.get(f"/p/{page.id}")
        assert "<title>Acme | Home</title>" in response.text

    async def test_user_content_escaped(self, client: AsyncClient, page):
        schema = {"rootNodes": [_node("a", text="<script>alert(1)</script>")]}
        await client.patch(f"/api/pages/{page.id}", json={"schemaJson": schema})
        response = await client.get(f"/p/{page.id}")
        assert "<script>" not in response.text
        assert "&lt;script&gt;" in response.text

    async def test_missing(self, client: AsyncClient):
        response = await client.get("/p/nope")
        assert response.status_code == 404
