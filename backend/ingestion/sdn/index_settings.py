"""OpenSearch settings and mappings for the SDN index.

Every searchable field is mapped as ``text`` up front. Left to dynamic
mapping, date-looking strings (``birthdate``, ``sanction_dates``) would become
``date`` and JSON numbers (``identity_id``) ``long``, and the fuzzy ``match``
clauses the query builder sends are rejected on those types.

Country-bearing fields and the ``all_fields`` blob are analyzed with a
``synonym`` analyzer built from the country synonym groups, so a query for
"DPRK" also matches text that only says "North Korea".
"""

from app.services.query_builder import SDN_SEARCH_FIELDS
from ingestion.sdn.lookups import COUNTRY_FIELDS, COUNTRY_SYNONYMS

SYNONYM_ANALYZER = "synonym"

SYNONYM_FIELDS = ("all_fields", *COUNTRY_FIELDS)


def _field_mapping(field: str) -> dict:
    if field in SYNONYM_FIELDS:
        return {"type": "text", "analyzer": SYNONYM_ANALYZER}
    return {"type": "text"}


def sdn_index_body() -> dict:
    """Return the ``settings``/``mappings`` body used to create the SDN index."""
    fields = dict.fromkeys((*SDN_SEARCH_FIELDS, *SYNONYM_FIELDS))
    return {
        "settings": {
            "analysis": {
                "filter": {
                    "country_synonyms": {
                        "type": "synonym",
                        "synonyms": COUNTRY_SYNONYMS.analyzer_rules(),
                    },
                },
                "analyzer": {
                    SYNONYM_ANALYZER: {
                        "tokenizer": "standard",
                        "filter": ["lowercase", "country_synonyms"],
                    },
                },
            },
        },
        "mappings": {
            "date_detection": False,
            "numeric_detection": False,
            "properties": {field: _field_mapping(field) for field in fields},
        },
    }
