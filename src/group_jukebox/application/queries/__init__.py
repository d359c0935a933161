"""
Application Queries (CQRS Read Side)

Query objects and their handlers for read-only operations.
"""

from group_jukebox.application.queries.search_catalog import (
    SearchCatalogHandler,
    SearchCatalogQuery,
    SearchCatalogResult,
    render_listing,
)

__all__ = [
    "SearchCatalogQuery",
    "SearchCatalogResult",
    "SearchCatalogHandler",
    "render_listing",
]
