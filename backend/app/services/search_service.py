"""Service executing search queries and shaping their results."""

import logging
from typing import Any

from app.db.search_client import SearchClient
from app.models.responses import SearchResponse

logger = logging.getLogger(__name__)


def _total_hits(total: Any) -> int:
    # OpenSearch (and Elasticsearch 7+) reports {"value": n, "relation": "eq"}; older versions a bare int.
    if isinstance(total, dict):
        return int(total.get("value", 0))
    return int(total or 0)


class SearchService:
    """Run a built query and return ``(document, score)`` pairs."""

    @staticmethod
    async def search(
        index: str,
        query: dict,
        size: int,
        offset: int = 0,
    ) -> SearchResponse:
        """
        Execute ``query`` against ``index``.

        Hits keep the order the engine returned them in. Engine failures
        propagate as SearchEngineError; an empty response means no matches.
        """
        raw = await SearchClient.search(index, query, size=size, offset=offset)
        hits = raw.get("hits", {})

        response = [(hit.get("_source", {}), hit.get("_score")) for hit in hits.get("hits", [])]
        num_results = _total_hits(hits.get("total"))

        logger.debug(f"Search on {index} returned {len(response)} of {num_results} hits")
        return SearchResponse(response=response, num_results=num_results)
