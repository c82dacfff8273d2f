"""Static lookup tables for SDN normalization.

Every table here is immutable and built once at import. Country synonyms are
disjoint equivalence classes: a country present on a document is expanded to
every member of its class so that a query on any alias matches.
"""

from types import MappingProxyType
from typing import Iterable, Mapping, Optional

PROGRAM_COUNTRIES: Mapping[str, str] = MappingProxyType({
    "BALKANS": "Balkans",
    "BELARUS": "Belarus",
    "BURUNDI": "Burundi",
    "CAR": "Central African Republic",
    "CUBA": "Cuba",
    "DARFUR": "Darfur",
    "DPRK": "North Korea",
    "DPRK2": "North Korea",
    "DPRK3": "North Korea",
    "DPRK4": "North Korea",
    "DRCONGO": "Congo",
    "FSE-SY": "Syria",
    "HRIT-IR": "Iran",
    "HRIT-SY": "Syria",
    "IFSR": "Iran",
    "IRAN": "Iran",
    "IRAN-TRA": "Iran",
    "IRAQ": "Iraq",
    "IRAQ2": "Iraq",
    "IRGC": "Iran",
    "ISA": "Iran",
    "LEBANON": "Lebanon",
    "LIBYA2": "Libya",
    "LIBYA3": "Libya",
    "MAGNIT": "Russia",
    "NS-PLC": "Palestine",
    "SOMALIA": "Somalia",
    "SOUTH SUDAN": "South Sudan",
    "SYRIA": "Syria",
    "UKRAINE-EO13660": "Ukraine",
    "UKRAINE-EO13661": "Ukraine",
    "UKRAINE-EO13662": "Ukraine",
    "UKRAINE-EO13685": "Ukraine",
    "VENEZUELA": "Venezuela",
    "YEMEN": "Yemen",
    "ZIMBABWE": "Zimbabwe",
})

LIST_ACRONYMS: Mapping[str, str] = MappingProxyType({
    "Sectoral Sanctions Identifications": "SSI",
    "Non-SDN Palestinian Legislative Council": "NSPLC",
    "Executive Order 13599": "EO13599",
    "Part 561": "561List",
    "Consolidated": "Non-SDN",
})

SDN_LIST = "SDN"
NON_SDN_LIST = "Non-SDN"

COUNTRY_SYNONYM_GROUPS: tuple[tuple[str, ...], ...] = (
    ("NK", "DPRK", "Democratic People's Republic of Korea", "Korea, North", "North Korea"),
    ("DRC", "Democratic Republic of the Congo", "Congo, Democratic Republic of the"),
    ("US", "USA", "America", "United States"),
    ("Russian Federation", "Russia"),
    ("England", "UK", "United Kingdom", "Britain"),
    ("UAE", "United Arab Emirates"),
    ("CAR", "Central African Republic"),
)

# Feature-derived fields collected into the aircraft/vessel tag lists.
AIRCRAFT_FIELDS: tuple[str, ...] = (
    "aircraft_construction_number_(also_called_l/n_or_s/n_or_f/n)",
    "aircraft_manufacturer's_serial_number_(msn)",
    "aircraft_model",
    "aircraft_operator",
    "aircraft_tail_number",
    "previous_aircraft_tail_number",
)

VESSEL_FIELDS: tuple[str, ...] = (
    "vessel_call_sign",
    "other_vessel_call_sign",
    "vessel_flag",
    "other_vessel_flag",
    "vessel_owner",
    "vessel_tonnage",
    "vessel_gross_registered_tonnage",
    "vessel_type",
)

# Fields concatenated into ``all_fields``; linked_profile_ids and fixed_ref are left out.
ALL_FIELDS_SOURCES: tuple[str, ...] = (
    "primary_display_name",
    "identity_id",
    "all_display_names",
    "programs",
    "doc_id_numbers",
    "linked_profile_names",
    "location",
    "title",
    "birthdate",
    "place_of_birth",
    "additional_sanctions_information_-_",
    *VESSEL_FIELDS,
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
    "party_sub_type",
    "countries",
)

# Country-valued fields that get synonym expansion.
COUNTRY_FIELDS: tuple[str, ...] = (
    "countries",
    "nationality_country",
    "citizenship_country",
    "nationality_of_registration",
)


def program_to_country(program: str) -> Optional[str]:
    """Resolve a sanctions program code to the country it targets."""
    return PROGRAM_COUNTRIES.get(program)


def list_to_acronym(list_name: str) -> str:
    """Map a sanctions list name to its display acronym.

    A trailing " List" is dropped first; unknown names come back unchanged.
    """
    if list_name.endswith(" List"):
        list_name = list_name[: -len(" List")]
    return LIST_ACRONYMS.get(list_name, list_name)


class CountrySynonyms:
    """Alias -> equivalence class lookup over disjoint country groups."""

    def __init__(self, groups: Iterable[Iterable[str]]):
        lookup: dict[str, tuple[str, ...]] = {}
        for group in groups:
            members = tuple(group)
            for name in members:
                if name in lookup:
                    raise ValueError(f"Country {name!r} appears in more than one synonym group")
                lookup[name] = members
        self._lookup = MappingProxyType(lookup)
        self.groups = tuple(dict.fromkeys(lookup.values()))

    def group_for(self, country: str) -> Optional[tuple[str, ...]]:
        return self._lookup.get(country)

    def expand(self, countries: Iterable[str]) -> list[str]:
        """
        Union ``countries`` with the synonym group of each member.

        Input order is kept, group members follow in table order; duplicates
        are dropped.
        """
        values = list(countries)
        expanded = dict.fromkeys(values)
        for country in values:
            group = self._lookup.get(country)
            if group:
                expanded.update(dict.fromkeys(group))
        return list(expanded)

    def analyzer_rules(self) -> list[str]:
        """Synonym filter rules, one equivalence line per group.

        Commas inside a name would split the rule, so they are dropped; the
        standard tokenizer discards them from indexed text anyway.
        """
        return [", ".join(name.replace(",", "") for name in group) for group in self.groups]


COUNTRY_SYNONYMS = CountrySynonyms(COUNTRY_SYNONYM_GROUPS)
