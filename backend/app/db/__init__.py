"""Database module for OpenSearch connectivity."""

from app.db.search_client import (
    BulkResult,
    IndexResult,
    SearchClient,
    SearchEngineError,
)

__all__ = ["BulkResult", "IndexResult", "SearchClient", "SearchEngineError"]
