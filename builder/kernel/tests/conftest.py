"""
Kernel test configuration.

Shared fixtures: a fresh editor store, and a small hand-built page tree with
fixed ids so tests can address nodes by name.
"""

import pytest

from builder.kernel.nodes import create_node
from builder.kernel.store import EditorStore


def make_tree() -> list[dict]:
    """
    nav
    hero (section)
      title (heading)
      body (text)
    footer
    """
    hero = create_node(
        "section",
        {
            "children": [
                {**create_node("heading", {"props": {"text": "Welcome"}}), "id": "title"},
                {**create_node("text"), "id": "body"},
            ]
        },
    )
    return [
        {**create_node("navbar"), "id": "nav"},
        {**hero, "id": "hero"},
        {**create_node("footer"), "id": "footer"},
    ]


@pytest.fixture
def sample_tree():
    return make_tree()


@pytest.fixture
def store():
    s = EditorStore()
    s.initialize("site_1", "page_1", {"rootNodes": [], "version": 1})
    return s


@pytest.fixture
def loaded_store():
    s = EditorStore()
    s.initialize("site_1", "page_1", {"rootNodes": make_tree(), "version": 1})
    return s
