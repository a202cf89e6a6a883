"""
Repository layer for SiteCraft.

All page storage lives here and ONLY here. No storage access outside this module.
"""

from backend.repos.page_repo import PageRepo

__all__ = [
    "PageRepo",
]
