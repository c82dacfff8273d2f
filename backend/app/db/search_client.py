"""OpenSearch client for the sanctions search indices."""

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional

from opensearchpy import AsyncOpenSearch
from opensearchpy.exceptions import NotFoundError, OpenSearchException
from opensearchpy.helpers import async_bulk

from app.config import settings

logger = logging.getLogger(__name__)


class SearchEngineError(Exception):
    """A query could not be executed by the search engine."""


@dataclass
class IndexResult:
    """Outcome of an index lifecycle operation."""

    ok: bool
    response: Optional[dict] = None
    error: Optional[str] = None


@dataclass
class BulkResult:
    """Outcome of a bulk call; per-item failures do not roll back siblings."""

    ok: bool
    total: int = 0
    failures: list[dict] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def succeeded(self) -> int:
        return self.total - len(self.failures)


def _item_failures(items: Iterable[dict]) -> list[dict]:
    """Flatten the bulk helper's error items into failure records."""
    failures = []
    for item in items:
        for action, info in item.items():
            failures.append(
                {
                    "action": action,
                    "id": info.get("_id"),
                    "status": info.get("status"),
                    "error": info.get("error"),
                }
            )
    return failures


class SearchClient:
    """Async OpenSearch client shared by every request."""

    _client: AsyncOpenSearch | None = None

    @classmethod
    async def connect(cls) -> None:
        """Initialize the OpenSearch client."""
        if cls._client is not None:
            return

        cls._client = AsyncOpenSearch(
            hosts=[settings.OPENSEARCH_URL],
            timeout=settings.OPENSEARCH_TIMEOUT,
        )

        if not await cls._client.ping():
            logger.warning(f"OpenSearch at {settings.OPENSEARCH_URL} is not reachable yet")

    @classmethod
    async def disconnect(cls) -> None:
        """Close the OpenSearch client."""
        if cls._client is not None:
            await cls._client.close()
            cls._client = None

    @classmethod
    def get_client(cls) -> AsyncOpenSearch:
        """Get the OpenSearch client instance."""
        if cls._client is None:
            raise RuntimeError("Search client not initialized. Call connect() first.")
        return cls._client

    @classmethod
    async def ping(cls) -> bool:
        return await cls.get_client().ping()

    @classmethod
    async def delete_index(cls, name: str) -> IndexResult:
        """Delete an index; a missing index counts as deleted."""
        logger.info(f"Deleting {name} index...")
        try:
            response = await cls.get_client().indices.delete(index=name)
            return IndexResult(ok=True, response=response)
        except NotFoundError:
            logger.info(f"Index {name} does not exist, nothing to delete")
            return IndexResult(ok=True)
        except OpenSearchException as e:
            logger.error(f"Failed to delete index {name}: {e}")
            return IndexResult(ok=False, error=str(e))

    @classmethod
    async def create_index(
        cls,
        name: str,
        body: Optional[Mapping[str, Any]] = None,
    ) -> IndexResult:
        """
        Create an index unless it already exists.

        An index that already exists, or that another process creates between
        the existence check and the create call, counts as success.
        """
        logger.info(f"Creating {name} index...")
        client = cls.get_client()
        try:
            if await client.indices.exists(index=name):
                logger.info(f"Index {name} already exists")
                return IndexResult(ok=True)
            response = await client.indices.create(index=name, body=dict(body or {}))
            return IndexResult(ok=True, response=response)
        except OpenSearchException as e:
            if getattr(e, "error", None) == "resource_already_exists_exception":
                logger.info(f"Index {name} was created concurrently")
                return IndexResult(ok=True)
            logger.error(f"Failed to create index {name}: {e}")
            return IndexResult(ok=False, error=str(e))

    @classmethod
    async def bulk_add(
        cls,
        documents: list[dict],
        index_name: str,
        id_field: Optional[str] = None,
    ) -> BulkResult:
        """
        Index documents through the chunked bulk helper.

        Documents are keyed by ``id_field`` when given and present, otherwise
        by their zero-based position in ``documents``.
        """
        actions: list[dict] = []
        for position, document in enumerate(documents):
            doc_id = position
            if id_field and document.get(id_field) is not None:
                doc_id = document[id_field]
            actions.append(
                {
                    "_op_type": "index",
                    "_index": index_name,
                    "_id": str(doc_id),
                    "_source": document,
                }
            )

        logger.info(f"Bulk loading {len(documents)} documents into {index_name}...")
        return await cls._bulk(actions)

    @classmethod
    async def bulk_update(
        cls,
        operations: list[dict],
        index_name: str,
    ) -> BulkResult:
        """
        Apply partial updates through the chunked bulk helper.

        Each operation is ``{"id": <numeric id>, "body": <update body>}``. A
        batch containing a malformed operation is rejected without sending
        anything.
        """
        actions: list[dict] = []
        invalid: list[int] = []
        for position, op in enumerate(operations):
            try:
                doc_id = str(int(op["id"]))
                body = op["body"]
            except (KeyError, TypeError, ValueError):
                invalid.append(position)
                continue
            if not isinstance(body, Mapping):
                invalid.append(position)
                continue
            actions.append(
                {
                    "_op_type": "update",
                    "_index": index_name,
                    "_id": doc_id,
                    "_source": body,
                }
            )

        if invalid:
            logger.error(f"Rejecting bulk update: malformed operations at positions {invalid}")
            return BulkResult(
                ok=False,
                total=len(operations),
                error=f"Malformed update operations at positions {invalid}",
            )

        logger.info(f"Bulk updating {len(operations)} documents in {index_name}...")
        return await cls._bulk(actions, timeout=settings.BULK_TIMEOUT)

    @classmethod
    async def _bulk(cls, actions: list[dict], **params: Any) -> BulkResult:
        total = len(actions)
        if not actions:
            return BulkResult(ok=True, total=0)
        try:
            _, errors = await async_bulk(
                cls.get_client(),
                actions,
                chunk_size=settings.BULK_CHUNK_SIZE,
                max_chunk_bytes=settings.BULK_MAX_CHUNK_BYTES,
                raise_on_error=False,
                raise_on_exception=False,
                **params,
            )
        except OpenSearchException as e:
            logger.error(f"Bulk request failed: {e}")
            return BulkResult(ok=False, total=total, error=str(e))

        failures = _item_failures(errors)
        if failures:
            logger.error(f"{len(failures)} of {total} bulk items failed, first: {failures[0]}")
            return BulkResult(
                ok=False,
                total=total,
                failures=failures,
                error=f"{len(failures)} bulk items failed",
            )
        return BulkResult(ok=True, total=total)

    @classmethod
    async def indexing_stats(cls, name: str) -> Optional[int]:
        """Return the cumulative count of documents indexed into ``name``."""
        try:
            stats = await cls.get_client().indices.stats(index=name)
            return stats["indices"][name]["total"]["indexing"]["index_total"]
        except OpenSearchException as e:
            logger.error(f"Failed to read stats for {name}: {e}")
            return None
        except KeyError:
            logger.error(f"Stats response for {name} has no indexing counter")
            return None

    @classmethod
    async def search(
        cls,
        index: str,
        query: dict,
        size: int,
        offset: int = 0,
    ) -> dict:
        """Run a query and return the raw engine response."""
        body = {
            "size": size,
            "from": offset,
            "query": query,
        }
        try:
            return await cls.get_client().search(index=index, body=body)
        except OpenSearchException as e:
            logger.error(f"Search on {index} failed: {e}")
            raise SearchEngineError(str(e)) from e
