"""Build OpenSearch bool queries from search request parameters.

Every recognized field gets a fuzzy ``must`` clause plus an exact ``should``
clause boosted well above it, so exact matches rank first. Name searches add
phrase boosts that favour primary names over aliases.
"""

import re
from typing import Mapping, Optional

# Fields a /search/sdn request may filter on; anything else is ignored.
SDN_SEARCH_FIELDS: tuple[str, ...] = (
    "title",
    "countries",
    "birthdate",
    "place_of_birth",
    "location",
    "additional_sanctions_information_-_",
    "vessel_call_sign",
    "vessel_flag",
    "vessel_owner",
    "vessel_tonnage",
    "vessel_gross_registered_tonnage",
    "vessel_type",
    "nationality_country",
    "citizenship_country",
    "gender",
    "website",
    "email_address",
    "swift/bic",
    "ifca_determination_-_",
    "aircraft_construction_number_(also_called_l/n_or_s/n_or_f/n)",
    "aircraft_manufacturer's_serial_number_(msn)",
    "aircraft_manufacture_date",
    "aircraft_model",
    "aircraft_operator",
    "bik_(ru)",
    "un/locode",
    "aircraft_tail_number",
    "previous_aircraft_tail_number",
    "micex_code",
    "nationality_of_registration",
    "d-u-n-s_number",
    "identity_id",
    "primary_display_name",
    "all_display_names",
    "programs",
    "linked_profile_names",
    "linked_profile_ids",
    "doc_id_numbers",
    "fixed_ref",
    "party_sub_type",
    "aircraft_tags",
    "vessel_tags",
    "all_fields",
    "sanction_dates",
    "document_countries",
)

# "0" disables fuzzy edits; "NONE" leaves the fuzziness key out entirely.
FIELD_FUZZINESS: Mapping[str, str] = {
    "programs": "0",
    "doc_id_numbers": "0",
    "birthdate": "0",
    "fixed_ref": "NONE",
    "party_sub_type": "0",
    "sanction_dates": "0",
}
DEFAULT_FUZZINESS = "AUTO"
NO_FUZZINESS = "NONE"

FIELD_OPERATORS: Mapping[str, str] = {
    "programs": "or",
}
DEFAULT_OPERATOR = "and"

PHRASE_SLOP = 3
EXACT_BOOST = 1000
FUZZY_BOOST = 1
ALIAS_NAME_BOOST = 2000
PRIMARY_NAME_BOOST = 4000

YEAR_RANGE = re.compile(r"^[0-9]{4}-[0-9]{4}$")


def match_clause(
    field: str,
    query: str,
    fuzzy: bool = False,
    boost: Optional[float] = None,
    operator: Optional[str] = None,
) -> dict:
    """Build a ``match`` clause honouring per-field operator and fuzziness."""
    body: dict = {
        "query": query,
        "operator": operator or FIELD_OPERATORS.get(field, DEFAULT_OPERATOR),
    }
    if fuzzy:
        fuzziness = FIELD_FUZZINESS.get(field, DEFAULT_FUZZINESS)
        if fuzziness != NO_FUZZINESS:
            body["fuzziness"] = fuzziness
    if boost is not None:
        body["boost"] = boost
    return {"match": {field: body}}


def phrase_clause(field: str, query: str, boost: float, slop: int = PHRASE_SLOP) -> dict:
    return {"match_phrase": {field: {"query": query, "slop": slop, "boost": boost}}}


def expand_year_range(value: str) -> Optional[str]:
    """'2011-2013' -> ' 2011 2012 2013'; None when ``value`` is not a year range."""
    if not YEAR_RANGE.match(value):
        return None
    begin, end = (int(year) for year in value.split("-"))
    return "".join(f" {year}" for year in range(begin, end + 1))


def build_sdn_query(params: Mapping[str, str]) -> dict:
    """
    Translate /search/sdn parameters into a bool query.

    Keys outside SDN_SEARCH_FIELDS (including ``size`` and ``from``) are
    ignored, so a request with none of them yields empty clause lists.
    """
    must: list[dict] = []
    should: list[dict] = []

    for field, value in params.items():
        operator = None

        if field == "all_fields":
            should.append(phrase_clause("all_display_names", value, ALIAS_NAME_BOOST))
            should.append(phrase_clause("primary_display_name", value, PRIMARY_NAME_BOOST))

        if field == "all_display_names":
            should.append(phrase_clause("primary_display_name", value, ALIAS_NAME_BOOST))

        if field == "sanction_dates":
            years = expand_year_range(value)
            if years is not None:
                value = years
                operator = "or"

        if field in SDN_SEARCH_FIELDS:
            must.append(match_clause(field, value, fuzzy=True, boost=FUZZY_BOOST, operator=operator))
            should.append(match_clause(field, value, boost=EXACT_BOOST, operator=operator))

    return {"bool": {"must": must, "should": should}}


def build_press_release_query(text: str) -> dict:
    """Fuzzy match on the release body, boosted by phrase matches on body and title."""
    return {
        "bool": {
            "must": [
                {
                    "match": {
                        "content": {
                            "query": text,
                            "operator": DEFAULT_OPERATOR,
                            "fuzziness": DEFAULT_FUZZINESS,
                        },
                    },
                },
            ],
            "should": [
                phrase_clause("content", text, EXACT_BOOST),
                phrase_clause("title", text, EXACT_BOOST),
            ],
        },
    }


def is_empty_query(query: dict) -> bool:
    clauses = query.get("bool", {})
    return not clauses.get("must") and not clauses.get("should")
