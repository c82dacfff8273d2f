"""Tests for the SDN record transformer."""

import copy
import json
import logging

import pytest

from ingestion.sdn.loader import transform_entries
from ingestion.sdn.transformer import (
    build_sdn_display,
    has_value,
    normalize_feature_key,
    stringify,
    transform_entry,
)

KOREA = {"NK", "DPRK", "Democratic People's Republic of Korea", "Korea, North", "North Korea"}


# --- helpers ---

class TestHelpers:
    def test_normalize_feature_key(self):
        assert normalize_feature_key("Citizenship Country") == "citizenship_country"
        assert normalize_feature_key("SWIFT/BIC") == "swift/bic"
        assert (
            normalize_feature_key("Additional Sanctions Information - ")
            == "additional_sanctions_information_-_"
        )

    def test_has_value(self):
        assert has_value(0)
        assert has_value(False)
        assert has_value("x")
        assert not has_value(None)
        assert not has_value("")
        assert not has_value([])
        assert not has_value({})

    def test_stringify(self):
        assert stringify(["a", "b"]) == "a,b"
        assert stringify(4001) == "4001"
        assert stringify(None) == ""


# --- sdn_display ---

class TestSdnDisplay:
    def test_sdn_and_non_sdn(self):
        assert build_sdn_display({"SDN", "Non-SDN"}) == "[SDN] [Non-SDN]"

    def test_non_sdn_with_other_lists(self):
        assert build_sdn_display({"Non-SDN", "561List"}) == "[Non-SDN: 561List]"

    def test_other_lists_are_sorted(self):
        assert build_sdn_display({"Non-SDN", "SSI", "EO13599"}) == "[Non-SDN: EO13599, SSI]"

    def test_sdn_only(self):
        assert build_sdn_display({"SDN"}) == "[SDN]"

    def test_no_recognizable_list_logs_error(self, caplog):
        with caplog.at_level(logging.ERROR, logger="ingestion.sdn.transformer"):
            assert build_sdn_display({"SSI"}, fixed_ref="99") == ""
        assert "99" in caplog.text

    def test_empty_lists(self, caplog):
        with caplog.at_level(logging.ERROR, logger="ingestion.sdn.transformer"):
            assert build_sdn_display(set()) == ""
        assert caplog.records


# --- transform_entry ---

class TestTransformEntry:
    def test_identity_fields(self, raw_entry):
        doc = transform_entry(raw_entry)
        assert doc["identity_id"] == 4001
        assert doc["primary_display_name"] == "KIM Jong Un"
        assert doc["fixed_ref"] == "36"

    def test_is_deterministic(self, raw_entry):
        assert transform_entry(raw_entry) == transform_entry(raw_entry)

    def test_does_not_modify_input(self, raw_entry):
        before = copy.deepcopy(raw_entry)
        transform_entry(raw_entry)
        assert raw_entry == before

    def test_output_is_json_serializable(self, raw_entry):
        doc = transform_entry(raw_entry)
        assert json.loads(json.dumps(doc)) == doc

    def test_programs_and_dates(self, make_entry):
        entry = make_entry(sanctions_entries=[
            {"list": "SDN List", "program": ["IRGC", "SDGT", ""], "entry_events": [["2019-04-15", "x"]]},
            {"list": "SDN List", "program": ["IRAN", "IRGC"], "entry_events": [["2012-01-01", "y"], []]},
        ])
        doc = transform_entry(entry)
        assert doc["programs"] == ["IRAN", "IRGC", "SDGT"]
        assert doc["sanction_dates"] == ["2019-04-15", "2012-01-01"]
        assert "Iran" in doc["countries"]

    def test_sdn_and_consolidated_display(self, make_entry):
        entry = make_entry(sanctions_entries=[
            {"list": "SDN List", "program": [], "entry_events": []},
            {"list": "Consolidated List", "program": [], "entry_events": []},
        ])
        doc = transform_entry(entry)
        assert doc["sdn_display"] == "[SDN] [Non-SDN]"
        assert doc["is_sdn"] is True

    def test_consolidated_part_561_display(self, make_entry):
        entry = make_entry(sanctions_entries=[
            {"list": "Consolidated List", "program": [], "entry_events": []},
            {"list": "Part 561 List", "program": [], "entry_events": []},
        ])
        doc = transform_entry(entry)
        assert doc["sdn_display"] == "[Non-SDN: 561List]"
        assert doc["is_sdn"] is False

    def test_linked_profiles_are_index_aligned(self, make_entry):
        entry = make_entry(linked_profiles=[
            {"linked_id": 1, "linked_name": {"display_name": "One"}},
            {"linked_id": 2, "linked_name": {"display_name": "Two"}},
        ])
        doc = transform_entry(entry)
        assert doc["linked_profile_ids"] == [1, 2]
        assert doc["linked_profile_names"] == ["One", "Two"]

    def test_display_names_and_alias_strength(self, raw_entry):
        doc = transform_entry(raw_entry)
        assert doc["all_display_names"] == ["KIM Jong Un", "KIM Jong-un", "Kim Chong-un"]
        aliases = doc["identity"]["aliases"]
        assert [a["strength"] for a in aliases] == ["strong", "weak"]
        assert all("date_period" not in a for a in aliases)

    def test_dated_alias_is_logged_not_fatal(self, raw_entry, caplog):
        raw_entry["identity"]["aliases"][0]["date_period"] = {"start": "2001", "end": "2005"}
        with caplog.at_level(logging.ERROR, logger="ingestion.sdn.transformer"):
            doc = transform_entry(raw_entry)
        assert "date period" in caplog.text
        assert "date_period" not in doc["identity"]["aliases"][0]

    def test_features_are_flattened(self, raw_entry):
        doc = transform_entry(raw_entry)
        assert doc["birthdate"] == ["1984-01-08"]
        assert doc["location"] == ["Pyongyang, Korea, North"]
        assert set(doc["nationality_country"]) == KOREA
        assert doc["nationality_country"][0] == "Korea, North"

    def test_swift_bic_feature_is_a_document_number(self, make_entry):
        entry = make_entry(
            features={"SWIFT/BIC": [{"details": "BMJIIRTH", "date": None, "location": None}]},
            documents=[],
        )
        doc = transform_entry(entry)
        assert doc["swift/bic"] == ["BMJIIRTH"]
        assert doc["doc_id_numbers"] == ["BMJIIRTH", "SWIFT/BIC"]

    def test_empty_feature_values_are_skipped(self, make_entry):
        entry = make_entry(features={"Gender": [{"details": "", "date": None, "location": None}]})
        doc = transform_entry(entry)
        assert doc["gender"] == []
        assert all(value != "" for value in doc["all_fields"])

    def test_documents(self, raw_entry):
        doc = transform_entry(raw_entry)
        assert doc["doc_id_numbers"] == ["836410006", "Passport"]
        document = doc["documents"][0]
        assert document["issued_by"] == "Korea, North"
        assert document["issued_in"] is None
        assert document["issuing_authority"] is None
        assert document["Issue Date"] == "2009-01-01"
        assert doc["document_headers"] == ["issued_by", "Issue Date"]
        assert doc["document_countries"] == ["Korea, North"]

    def test_issued_in_location_record(self, make_entry):
        entry = make_entry(documents=[{
            "id_number": "A1",
            "type": "National ID No.",
            "validity": "Valid",
            "issued_by": "None",
            "issued_in": json.dumps({"COMBINED": "Tehran, Iran", "COUNTRY": "Iran"}),
            "issuing_authority": "Central Bank",
            "relevant_dates": {},
        }])
        doc = transform_entry(entry)
        document = doc["documents"][0]
        assert document["issued_by"] is None
        assert document["issued_in"] == "Tehran, Iran"
        assert doc["document_headers"] == ["issuing_authority", "issued_in"]
        assert doc["document_countries"] == ["Central Bank", "Iran"]
        assert "Iran" in doc["countries"]

    def test_missing_issuers_are_absent(self, make_entry):
        entry = make_entry(documents=[{"id_number": "X9", "type": "Passport", "validity": "Valid"}])
        doc = transform_entry(entry)
        document = doc["documents"][0]
        assert document["issued_by"] is None
        assert document["issued_in"] is None
        assert doc["document_headers"] == []

    def test_unexpected_validity_is_warned(self, make_entry, caplog):
        entry = make_entry(documents=[{
            "id_number": "P1", "type": "Passport", "validity": "Expired",
            "issued_by": "None", "issued_in": "None", "issuing_authority": "None",
        }])
        with caplog.at_level(logging.WARNING, logger="ingestion.sdn.transformer"):
            doc = transform_entry(entry)
        assert "Expired" in caplog.text
        assert doc["doc_id_numbers"] == ["P1", "Passport"]

    def test_last_document_headers_win(self, make_entry):
        entry = make_entry(documents=[
            {"id_number": "1", "type": "Passport", "validity": "Valid", "issued_by": "Iran"},
            {"id_number": "2", "type": "Passport", "validity": "Valid", "issuing_authority": "Syria"},
        ])
        doc = transform_entry(entry)
        assert doc["document_headers"] == ["issuing_authority"]

    def test_countries_are_expanded(self, raw_entry):
        doc = transform_entry(raw_entry)
        assert doc["countries"][:2] == ["North Korea", "Korea, North"]
        assert set(doc["countries"]) == KOREA

    def test_vessel_tags(self, make_entry):
        entry = make_entry(
            features={
                "Vessel Flag": [{"details": "Iran", "date": None, "location": None}],
                "Vessel Type": [{"details": "Crude Oil Tanker", "date": None, "location": None}],
            },
            documents=[{
                "id_number": "IMO 9187629", "type": "Vessel Registration Identification",
                "validity": "Valid", "issued_by": "None", "issued_in": "None",
                "issuing_authority": "None",
            }],
        )
        doc = transform_entry(entry)
        assert doc["vessel_tags"] == ["IMO 9187629", "Iran", "Crude Oil Tanker"]
        assert doc["aircraft_tags"] == []

    def test_aircraft_tags(self, make_entry):
        entry = make_entry(features={
            "Aircraft Model": [{"details": "Boeing 747", "date": None, "location": None}],
            "Aircraft Tail Number": [{"details": "EP-MNE", "date": None, "location": None}],
        })
        doc = transform_entry(entry)
        assert doc["aircraft_tags"] == ["Boeing 747", "EP-MNE"]
        assert "Boeing 747" in doc["all_fields"]

    def test_all_fields(self, raw_entry):
        doc = transform_entry(raw_entry)
        assert doc["all_fields"][0] == "KIM Jong Un"
        assert "4001" in doc["all_fields"]
        assert "DPRK2" in doc["all_fields"]
        assert "KIM Jong Un,KIM Jong-un,Kim Chong-un" in doc["all_fields"]
        assert doc["all_fields"][-1] == "[SDN]"

    def test_minimal_entry(self):
        doc = transform_entry({"fixed_ref": 5, "identity": {"id": 5, "primary": {"display_name": "X"}}})
        assert doc["all_display_names"] == ["X"]
        assert doc["programs"] == []
        assert doc["countries"] == []
        assert doc["documents"] == []
        assert doc["sdn_display"] == ""

    def test_malformed_issued_in_raises(self, make_entry):
        entry = make_entry(documents=[{"id_number": "1", "type": "Passport", "issued_in": "{broken"}])
        with pytest.raises(ValueError):
            transform_entry(entry)


class TestNullRawValues:
    def test_null_alias_quality_is_strong(self, make_entry):
        entry = make_entry(identity={
            "id": 1,
            "primary": {"display_name": "X"},
            "aliases": [{"display_name": "Y", "is_low_quality": None, "date_period": None}],
        })

        doc = transform_entry(entry)

        assert doc["identity"]["aliases"][0]["strength"] == "strong"
        assert doc["all_display_names"] == ["X", "Y"]

    def test_null_labels_take_defaults(self, make_entry):
        entry = make_entry(
            identity={"id": 1, "primary": None, "aliases": None},
            sanctions_entries=[
                {"list": "SDN List", "program": None, "entry_events": [None, ["2020-01-01"]]},
                {"list": None, "program": ["IRAN"], "entry_events": None},
            ],
            documents=[{"id_number": "A1", "type": None, "validity": "Valid", "relevant_dates": None}],
            features={"Gender": None},
        )

        doc = transform_entry(entry)

        assert doc["primary_display_name"] == ""
        assert doc["programs"] == ["IRAN"]
        assert doc["sanction_dates"] == ["2020-01-01"]
        assert doc["sdn_display"] == "[SDN]"
        assert doc["doc_id_numbers"] == ["A1"]
        assert doc["gender"] == []

    def test_null_values_do_not_abort_batch(self, make_entry):
        broken = make_entry(fixed_ref="2")
        broken["identity"]["aliases"][1]["is_low_quality"] = None

        documents = transform_entries([make_entry(fixed_ref="1"), broken])

        assert [d["fixed_ref"] for d in documents] == ["1", "2"]
