"""Shared fixtures: raw sanctions records shaped like the OFAC JSON export."""

import copy

import pytest


BASE_ENTRY = {
    "fixed_ref": "36",
    "identity": {
        "id": 4001,
        "primary": {"display_name": "KIM Jong Un"},
        "aliases": [
            {"display_name": "KIM Jong-un", "is_low_quality": False, "date_period": None},
            {"display_name": "Kim Chong-un", "is_low_quality": True, "date_period": None},
        ],
    },
    "sanctions_entries": [
        {
            "list": "SDN List",
            "program": ["DPRK2", ""],
            "entry_events": [["2016-07-06", "Program Added"]],
        },
    ],
    "linked_profiles": [
        {"linked_id": 77, "linked_name": {"display_name": "Korea Workers' Party"}},
    ],
    "features": {
        "Birthdate": [{"details": None, "date": "1984-01-08", "location": None}],
        "Nationality Country": [{"details": "Korea, North", "date": None, "location": None}],
        "Location": [
            {
                "details": None,
                "date": None,
                "location": {"COMBINED": "Pyongyang, Korea, North", "COUNTRY": "Korea, North"},
            },
        ],
    },
    "documents": [
        {
            "id_number": "836410006",
            "type": "Passport",
            "validity": "Valid",
            "issued_by": "Korea, North",
            "issued_in": "None",
            "issuing_authority": "None",
            "relevant_dates": {"Issue Date": "2009-01-01"},
        },
    ],
}


def build_entry(**overrides) -> dict:
    """Deep copy of BASE_ENTRY with top-level keys replaced."""
    entry = copy.deepcopy(BASE_ENTRY)
    entry.update(copy.deepcopy(overrides))
    return entry


@pytest.fixture
def raw_entry() -> dict:
    return build_entry()


@pytest.fixture
def make_entry():
    return build_entry
