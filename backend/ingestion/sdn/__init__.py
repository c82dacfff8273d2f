"""OFAC SDN / Non-SDN ingestion module."""

from ingestion.sdn.loader import (
    BulkLoadError,
    LoadError,
    SDNLoader,
    TransformError,
    dedupe_entries,
    transform_entries,
)
from ingestion.sdn.lookups import COUNTRY_SYNONYMS, CountrySynonyms
from ingestion.sdn.models import SanctionsEntry
from ingestion.sdn.transformer import transform_entry

__all__ = [
    "BulkLoadError",
    "COUNTRY_SYNONYMS",
    "CountrySynonyms",
    "LoadError",
    "SDNLoader",
    "SanctionsEntry",
    "TransformError",
    "dedupe_entries",
    "transform_entries",
    "transform_entry",
]
