"""
Pytest configuration and fixtures for SiteCraft backend tests.
"""

from __future__ import annotations

import os

import httpx
import pytest
import pytest_asyncio

# Set test environment variables before importing config
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("ANTHROPIC_API_KEY", "test-anthropic-key")

from backend.main import app  # noqa: E402
from backend.models.page import CreatePageRequest  # noqa: E402
from backend.repos import page_repo as page_repo_module  # noqa: E402
from backend.repos.page_repo import PageRepo  # noqa: E402
from backend.services.ai_generator import get_ai_generator  # noqa: E402
from builder.kernel.validation import parse_generated_nodes  # noqa: E402


class FakeGenerator:
    """Stands in for AIGenerator: returns a canned reply or raises a canned error."""

    def __init__(self):
        self.reply = "[]"
        self.error: Exception | None = None
        self.calls: list[tuple[str, str | None]] = []
        self.last_usage = {"input_tokens": 10, "output_tokens": 20}

    async def generate(self, prompt, context=None):
        self.calls.append((prompt, context))
        if self.error is not None:
            raise self.error
        return parse_generated_nodes(self.reply)


@pytest.fixture(autouse=True)
def fresh_repo(monkeypatch):
    """Every test gets an empty page store."""
    repo = PageRepo()
    monkeypatch.setattr(page_repo_module, "page_repo", repo)
    for module in ("backend.routes.pages", "backend.routes.published"):
        monkeypatch.setattr(f"{module}.page_repo", repo)
    return repo


@pytest.fixture
def fake_generator():
    generator = FakeGenerator()
    app.dependency_overrides[get_ai_generator] = lambda: generator
    yield generator
    app.dependency_overrides.pop(get_ai_generator, None)


@pytest_asyncio.fixture
async def client():
    """Create test client."""
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client


@pytest_asyncio.fixture
async def page(fresh_repo):
    """A stored page seeded from the Landing Page template."""
    from builder.kernel.templates import instantiate_template

    schema = instantiate_template("Landing Page")[0]["schema"]
    return await fresh_repo.create(
        CreatePageRequest(site_id="site_1", title="Home", slug="index"),
        schema,
    )
