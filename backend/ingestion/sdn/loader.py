"""Batch loader: raw SDN/Non-SDN files -> snapshot -> OpenSearch."""

import json
import logging
from pathlib import Path
from typing import Any, Iterable, Optional

from app.config import settings
from app.db.search_client import BulkResult, SearchClient
from ingestion.sdn.index_settings import sdn_index_body
from ingestion.sdn.transformer import transform_entry

logger = logging.getLogger(__name__)


class LoadError(Exception):
    """The SDN load could not be completed."""


class TransformError(LoadError):
    """Transforming a single record failed; the whole batch is aborted."""

    def __init__(self, fixed_ref: Any, cause: Exception):
        self.fixed_ref = fixed_ref
        self.cause = cause
        super().__init__(f"Failed to transform entry {fixed_ref}: {cause}")


class BulkLoadError(LoadError):
    """A bulk call reported failed items; the successful items stay indexed."""

    def __init__(self, result: BulkResult):
        self.result = result
        self.failures = result.failures
        super().__init__(
            f"Bulk operation failed ({result.succeeded}/{result.total} succeeded): {result.error}"
        )


def read_records(path: Path) -> list[dict]:
    """Read a JSON array of records."""
    records = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(records, list):
        raise ValueError(f"{path} does not contain a JSON array")
    return records


def dedupe_entries(*sources: Iterable[dict]) -> tuple[list[dict], int]:
    """
    Concatenate sources in order and keep the first record per ``fixed_ref``.

    Returns the surviving records and the number of duplicates dropped.
    Records without a ``fixed_ref`` cannot be keyed and are skipped.
    """
    seen: set = set()
    unique: list[dict] = []
    dropped = 0
    for source in sources:
        for record in source:
            fixed_ref = record.get("fixed_ref")
            if fixed_ref is None:
                logger.warning("Skipping record without fixed_ref")
                dropped += 1
                continue
            if fixed_ref in seen:
                dropped += 1
                continue
            seen.add(fixed_ref)
            unique.append(record)
    return unique, dropped


def transform_entries(*sources: Iterable[dict]) -> list[dict]:
    """Dedupe the sources and transform every survivor, failing fast."""
    unique, dropped = dedupe_entries(*sources)
    if dropped:
        logger.info(f"Dropped {dropped} duplicate or unkeyed records")

    documents = []
    for record in unique:
        try:
            documents.append(transform_entry(record))
        except Exception as e:
            raise TransformError(record.get("fixed_ref"), e) from e
    return documents


class SDNLoader:
    """Build SDN search documents and load them into OpenSearch."""

    def __init__(
        self,
        update_dir: Optional[Path] = None,
        index_name: Optional[str] = None,
    ):
        self.update_dir = Path(update_dir or settings.UPDATE_FILES_DIR)
        self.index_name = index_name or settings.SDN_INDEX
        self.stats = {
            "primary_records": 0,
            "supplementary_records": 0,
            "documents": 0,
            "indexed_total": None,
        }

    @property
    def snapshot_path(self) -> Path:
        return self.update_dir / settings.SNAPSHOT_FILE

    def build_documents(self) -> list[dict]:
        """
        Transform the SDN and Non-SDN source files and write the snapshot.

        The SDN file comes first, so its records win over Non-SDN duplicates.
        """
        primary = read_records(self.update_dir / settings.SDN_FILE)
        supplementary = read_records(self.update_dir / settings.NON_SDN_FILE)
        self.stats["primary_records"] = len(primary)
        self.stats["supplementary_records"] = len(supplementary)
        logger.info(f"Read {len(primary)} SDN and {len(supplementary)} Non-SDN records")

        documents = transform_entries(primary, supplementary)
        self.stats["documents"] = len(documents)
        self.write_snapshot(documents)
        return documents

    def write_snapshot(self, documents: list[dict]) -> Path:
        self.snapshot_path.parent.mkdir(parents=True, exist_ok=True)
        self.snapshot_path.write_text(
            json.dumps(documents, ensure_ascii=False),
            encoding="utf-8",
        )
        logger.info(f"Wrote {len(documents)} documents to {self.snapshot_path}")
        return self.snapshot_path

    def read_snapshot(self) -> list[dict]:
        documents = read_records(self.snapshot_path)
        self.stats["documents"] = len(documents)
        return documents

    async def reload_index(self, documents: list[dict]) -> Optional[int]:
        """
        Replace the index contents with ``documents``.

        Readers may see an empty or partial index while this runs.
        """
        await SearchClient.delete_index(self.index_name)

        created = await SearchClient.create_index(self.index_name, sdn_index_body())
        if not created.ok:
            raise LoadError(f"Could not create index {self.index_name}: {created.error}")

        result = await SearchClient.bulk_add(documents, self.index_name, id_field="fixed_ref")
        if not result.ok:
            raise BulkLoadError(result)

        count = await SearchClient.indexing_stats(self.index_name)
        self.stats["indexed_total"] = count
        logger.info(f"{count} documents indexed into {self.index_name}")
        return count

    async def apply_updates(self, operations: list[dict]) -> BulkResult:
        """Apply ``{"id": ..., "body": ...}`` partial updates to the index."""
        result = await SearchClient.bulk_update(operations, self.index_name)
        if not result.ok:
            raise BulkLoadError(result)
        return result

    async def drop_index(self) -> bool:
        result = await SearchClient.delete_index(self.index_name)
        return result.ok
