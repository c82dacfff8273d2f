"""Pydantic models for raw sanctions-list records.

These mirror the JSON exported from the OFAC advanced XML. Unknown keys are
kept so that normalized documents carry the full source record for display.
"""

from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


class RawModel(BaseModel):
    """Base for raw records: extra keys allowed, numbers accepted as text."""

    model_config = ConfigDict(
        extra="allow",
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )

    @model_validator(mode="before")
    @classmethod
    def _nulls_take_defaults(cls, data: Any) -> Any:
        """Treat an explicit null like a missing key for fields with a non-null default."""
        if not isinstance(data, dict):
            return data
        defaulted = set()
        for name, info in cls.model_fields.items():
            if info.default is not None:
                defaulted.update(key for key in (name, info.alias) if key)
        return {
            key: value
            for key, value in data.items()
            if not (value is None and key in defaulted)
        }


class DisplayName(RawModel):
    display_name: str = ""


class Alias(RawModel):
    """Alternate name for an identity."""

    display_name: str = ""
    is_low_quality: bool = False
    date_period: Optional[Any] = None


class Identity(RawModel):
    id: Optional[Union[int, str]] = None
    primary: DisplayName = Field(default_factory=DisplayName)
    aliases: list[Alias] = Field(default_factory=list)


class SanctionsListEntry(RawModel):
    """Membership of the identity in one sanctions list."""

    list_name: str = Field("", alias="list")
    program: list[Optional[str]] = Field(default_factory=list)
    entry_events: list[Optional[list[Any]]] = Field(default_factory=list)


class LinkedProfile(RawModel):
    linked_id: Optional[Union[int, str]] = None
    linked_name: DisplayName = Field(default_factory=DisplayName)


class Location(RawModel):
    COMBINED: Optional[str] = None
    COUNTRY: Optional[str] = None


class Feature(RawModel):
    """One value of a keyed feature (birthdate, vessel flag, ...)."""

    details: Optional[str] = None
    date: Optional[Any] = None
    location: Optional[Location] = None


class IdentityDocument(RawModel):
    """Identifying document such as a passport or vessel registration."""

    id_number: Optional[str] = None
    type: str = ""
    validity: Optional[str] = None
    issued_by: Optional[str] = None
    # A JSON-encoded location record, or the literal "None".
    issued_in: Optional[Union[Location, str]] = None
    issuing_authority: Optional[str] = None
    relevant_dates: dict[str, Any] = Field(default_factory=dict)


class SanctionsEntry(RawModel):
    """A complete raw SDN / Non-SDN record."""

    fixed_ref: Optional[Union[int, str]] = None
    identity: Identity = Field(default_factory=Identity)
    sanctions_entries: list[SanctionsListEntry] = Field(default_factory=list)
    linked_profiles: list[LinkedProfile] = Field(default_factory=list)
    features: dict[str, Optional[list[Feature]]] = Field(default_factory=dict)
    documents: list[IdentityDocument] = Field(default_factory=list)
