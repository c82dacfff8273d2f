"""Normalize raw sanctions entries into search-index documents.

The transform is best effort: structural anomalies in a record (unexpected
document validity, dated aliases, no recognizable list) are logged and the
document is still produced.
"""

import logging
from typing import Any, Iterable, Mapping, Optional

from ingestion.sdn.lookups import (
    AIRCRAFT_FIELDS,
    ALL_FIELDS_SOURCES,
    COUNTRY_FIELDS,
    COUNTRY_SYNONYMS,
    NON_SDN_LIST,
    SDN_LIST,
    VESSEL_FIELDS,
    list_to_acronym,
    program_to_country,
)
from ingestion.sdn.models import (
    IdentityDocument,
    Location,
    SanctionsEntry,
)

logger = logging.getLogger(__name__)

SWIFT_BIC_FEATURE = "SWIFT/BIC"
KNOWN_VALIDITIES = ("Valid", "Fraudulent")


def has_value(value: Any) -> bool:
    """True unless ``value`` is None or an empty string/collection."""
    if value is None:
        return False
    if isinstance(value, (str, list, tuple, dict, set)):
        return len(value) > 0
    return True


def stringify(value: Any) -> str:
    """Render a field value as text; lists are comma-joined."""
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return ",".join(stringify(v) for v in value)
    return str(value)


def normalize_feature_key(key: str) -> str:
    """'Citizenship Country' -> 'citizenship_country'."""
    return "_".join(word.lower() for word in key.split(" "))


def build_sdn_display(lists: Iterable[str], fixed_ref: Any = None) -> str:
    """
    Build the list-membership label shown with a result.

    ``{"SDN", "Non-SDN"}`` -> ``"[SDN] [Non-SDN]"``;
    ``{"Non-SDN", "561List"}`` -> ``"[Non-SDN: 561List]"``;
    ``{"SDN"}`` -> ``"[SDN]"``.
    """
    remaining = set(lists)
    on_sdn = SDN_LIST in remaining

    if NON_SDN_LIST in remaining:
        remaining.discard(NON_SDN_LIST)
        display = ""
        if on_sdn:
            remaining.discard(SDN_LIST)
            display = "[SDN] "
        display += "[Non-SDN"
        if remaining:
            display += ": " + ", ".join(sorted(remaining))
        return display + "]"

    if on_sdn:
        return "[SDN]"

    logger.error(f"Entry {fixed_ref} is on no recognizable sanctions list: {sorted(remaining)}")
    return ""


def _absent(value: Optional[Any]) -> bool:
    # The source export writes missing issuers as the string "None".
    return value is None or value == "None"


def _parse_location(value: Any) -> Location:
    if isinstance(value, Location):
        return value
    return Location.model_validate_json(value)


def _normalize_document(
    document: IdentityDocument,
    countries: dict[str, None],
    document_countries: dict[str, None],
    fixed_ref: Any,
) -> tuple[dict, list[str]]:
    """Normalize one identifying document for display; returns it and its headers."""
    normalized = document.model_dump()
    headers: list[str] = []

    if document.validity not in KNOWN_VALIDITIES:
        logger.warning(
            f"Entry {fixed_ref}: unexpected document validity {document.validity!r} "
            f"(normally Valid or Fraudulent)"
        )

    for key in ("issued_by", "issuing_authority"):
        value = getattr(document, key)
        if _absent(value):
            normalized[key] = None
            continue
        headers.append(key)
        countries[value] = None
        document_countries[value] = None

    if _absent(document.issued_in):
        normalized["issued_in"] = None
    else:
        location = _parse_location(document.issued_in)
        headers.append("issued_in")
        if location.COUNTRY:
            countries[location.COUNTRY] = None
            document_countries[location.COUNTRY] = None
        normalized["issued_in"] = location.COMBINED

    for date_key, date_value in document.relevant_dates.items():
        normalized[date_key] = date_value
        headers.append(date_key)

    return normalized, headers


def transform_entry(raw: Mapping[str, Any]) -> dict:
    """
    Convert one raw sanctions entry into a flattened search document.

    The result holds the full source record plus the derived search fields;
    ``raw`` itself is not modified.
    """
    entry = SanctionsEntry.model_validate(raw)
    doc = entry.model_dump(by_alias=True)
    fixed_ref = entry.fixed_ref

    doc["identity_id"] = entry.identity.id
    doc["primary_display_name"] = entry.identity.primary.display_name

    countries: dict[str, None] = {}
    document_countries: dict[str, None] = {}
    lists: dict[str, None] = {}
    programs: set[str] = set()
    sanction_dates: list[str] = []

    for sanction in entry.sanctions_entries:
        if sanction.list_name:
            lists[list_to_acronym(sanction.list_name)] = None
        for program in sanction.program:
            if not program:
                continue
            programs.add(program)
            country = program_to_country(program)
            if country is not None:
                countries[country] = None
        for event in sanction.entry_events:
            if event:
                sanction_dates.append(str(event[0]))

    doc["programs"] = sorted(programs)
    doc["sanction_dates"] = sanction_dates
    doc["sdn_display"] = build_sdn_display(lists, fixed_ref)
    doc["is_sdn"] = SDN_LIST in lists

    doc["linked_profile_ids"] = [p.linked_id for p in entry.linked_profiles]
    doc["linked_profile_names"] = [p.linked_name.display_name for p in entry.linked_profiles]

    all_display_names = [doc["primary_display_name"]]
    aliases = []
    for alias in entry.identity.aliases:
        all_display_names.append(alias.display_name)
        if alias.date_period is not None:
            logger.error(
                f"Entry {fixed_ref}: alias {alias.display_name!r} has a date period, "
                f"which is not rendered"
            )
        rendered = alias.model_dump(exclude={"date_period"})
        rendered["strength"] = "weak" if alias.is_low_quality else "strong"
        aliases.append(rendered)
    doc["all_display_names"] = all_display_names
    doc["identity"]["aliases"] = aliases

    doc_id_numbers: list[Any] = []
    for feature_key, features in entry.features.items():
        combined_info: list[Any] = []
        for feature in features or []:
            if has_value(feature.details):
                combined_info.append(feature.details)
                if feature_key == SWIFT_BIC_FEATURE:
                    doc_id_numbers.extend([feature.details, feature_key])
            if has_value(feature.date):
                combined_info.append(feature.date)
            if feature.location is not None:
                if has_value(feature.location.COMBINED):
                    combined_info.append(feature.location.COMBINED)
                if has_value(feature.location.COUNTRY):
                    countries[feature.location.COUNTRY] = None
        doc[normalize_feature_key(feature_key)] = combined_info

    vessel_tags: list[str] = []
    documents = []
    document_headers: list[str] = []
    for document in entry.documents:
        for value in (document.id_number, document.type):
            if has_value(value):
                doc_id_numbers.append(value)
        if "Vessel" in document.type and has_value(document.id_number):
            vessel_tags.append(document.id_number)

        normalized, document_headers = _normalize_document(
            document, countries, document_countries, fixed_ref
        )
        documents.append(normalized)

    doc["documents"] = documents
    doc["document_headers"] = document_headers
    doc["doc_id_numbers"] = doc_id_numbers
    doc["document_countries"] = list(document_countries)
    doc["countries"] = list(countries)

    for field in COUNTRY_FIELDS:
        if doc.get(field) is not None:
            doc[field] = COUNTRY_SYNONYMS.expand(doc[field])

    doc["aircraft_tags"] = [
        stringify(doc[field]) for field in AIRCRAFT_FIELDS if has_value(doc.get(field))
    ]
    doc["vessel_tags"] = vessel_tags + [
        stringify(doc[field]) for field in VESSEL_FIELDS if has_value(doc.get(field))
    ]

    all_fields = [
        stringify(doc[field]) for field in ALL_FIELDS_SOURCES if has_value(doc.get(field))
    ]
    if doc["sdn_display"]:
        all_fields.append(doc["sdn_display"])
    doc["all_fields"] = all_fields

    return doc
