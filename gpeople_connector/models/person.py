"""
Person data model for the Google People API.

Provides a Person representation with methods for:
- Decoding People API JSON with shape checks on every known field
- Encoding back to the API format for create/update requests
- Overlaying a subset of fields onto another Person (read-modify-write)
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any

# Person sub-fields that the API returns as a list of JSON objects
LIST_FIELDS = (
    "addresses",
    "ageRanges",
    "biographies",
    "birthdays",
    "calendarUrls",
    "clientData",
    "coverPhotos",
    "emailAddresses",
    "events",
    "externalIds",
    "genders",
    "imClients",
    "interests",
    "locales",
    "locations",
    "memberships",
    "miscKeywords",
    "names",
    "nicknames",
    "occupations",
    "organizations",
    "phoneNumbers",
    "photos",
    "relations",
    "sipAddresses",
    "skills",
    "urls",
    "userDefined",
)


class PersonDecodeError(ValueError):
    """Raised when a person payload does not match the expected shape."""

    pass


def _require_str(data: dict[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise PersonDecodeError(
            f"'{key}' must be a string, got {type(value).__name__}"
        )
    return value


def _require_object_list(data: dict[str, Any], key: str) -> list[dict[str, Any]]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise PersonDecodeError(f"'{key}' must be a list, got {type(value).__name__}")
    for entry in value:
        if not isinstance(entry, dict):
            raise PersonDecodeError(
                f"'{key}' entries must be objects, got {type(entry).__name__}"
            )
    return value


def _snake(name: str) -> str:
    return "".join(f"_{c.lower()}" if c.isupper() else c for c in name)


@dataclass
class Person:
    """
    A contact (person) resource.

    Sub-fields are kept in their API shape: each is a list of JSON objects
    (e.g. ``names`` is ``[{"givenName": "Ada", "familyName": "Lovelace"}]``).
    Keys the model does not know about are kept in ``extra`` so a decoded
    person encodes back to the same JSON.

    Attributes:
        resource_name: Server-issued ID (e.g., "people/c12345"), never set client-side
        etag: Required for updates, prevents concurrent modification conflicts
        metadata: Person metadata object (sources, deleted flag, ...)

    Usage:
        person = Person.from_api_response(response_json)
        person.names  # [{'displayName': 'Ada Lovelace', ...}]

        new_person = Person(names=[{"givenName": "Ada"}])
        body = new_person.to_api_format()
    """

    resource_name: str | None = None
    etag: str | None = None

    addresses: list[dict[str, Any]] = field(default_factory=list)
    age_ranges: list[dict[str, Any]] = field(default_factory=list)
    biographies: list[dict[str, Any]] = field(default_factory=list)
    birthdays: list[dict[str, Any]] = field(default_factory=list)
    calendar_urls: list[dict[str, Any]] = field(default_factory=list)
    client_data: list[dict[str, Any]] = field(default_factory=list)
    cover_photos: list[dict[str, Any]] = field(default_factory=list)
    email_addresses: list[dict[str, Any]] = field(default_factory=list)
    events: list[dict[str, Any]] = field(default_factory=list)
    external_ids: list[dict[str, Any]] = field(default_factory=list)
    genders: list[dict[str, Any]] = field(default_factory=list)
    im_clients: list[dict[str, Any]] = field(default_factory=list)
    interests: list[dict[str, Any]] = field(default_factory=list)
    locales: list[dict[str, Any]] = field(default_factory=list)
    locations: list[dict[str, Any]] = field(default_factory=list)
    memberships: list[dict[str, Any]] = field(default_factory=list)
    misc_keywords: list[dict[str, Any]] = field(default_factory=list)
    names: list[dict[str, Any]] = field(default_factory=list)
    nicknames: list[dict[str, Any]] = field(default_factory=list)
    occupations: list[dict[str, Any]] = field(default_factory=list)
    organizations: list[dict[str, Any]] = field(default_factory=list)
    phone_numbers: list[dict[str, Any]] = field(default_factory=list)
    photos: list[dict[str, Any]] = field(default_factory=list)
    relations: list[dict[str, Any]] = field(default_factory=list)
    sip_addresses: list[dict[str, Any]] = field(default_factory=list)
    skills: list[dict[str, Any]] = field(default_factory=list)
    urls: list[dict[str, Any]] = field(default_factory=list)
    user_defined: list[dict[str, Any]] = field(default_factory=list)

    metadata: dict[str, Any] | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_api_response(cls, person: dict[str, Any]) -> Person:
        """
        Create a Person from a Google People API response.

        Args:
            person: Dictionary from the People API containing person data

        Returns:
            Person instance populated from the API response

        Raises:
            PersonDecodeError: If the payload or one of its known fields has
                the wrong shape

        Example API response structure::

            {
                'resourceName': 'people/c12345',
                'etag': '%EgUBAi43PRoEAQIFByIMR0xCc0FMcnBLOXM9',
                'names': [{'displayName': 'John Doe', 'givenName': 'John'}],
                'emailAddresses': [{'value': 'john@example.com'}],
                'metadata': {'sources': [{'type': 'CONTACT', 'id': '12345'}]}
            }
        """
        if not isinstance(person, dict):
            raise PersonDecodeError(
                f"Person must be an object, got {type(person).__name__}"
            )

        kwargs: dict[str, Any] = {
            "resource_name": _require_str(person, "resourceName"),
            "etag": _require_str(person, "etag"),
        }
        for key in LIST_FIELDS:
            kwargs[_snake(key)] = _require_object_list(person, key)

        metadata = person.get("metadata")
        if metadata is not None and not isinstance(metadata, dict):
            raise PersonDecodeError(
                f"'metadata' must be an object, got {type(metadata).__name__}"
            )
        kwargs["metadata"] = metadata

        known = {"resourceName", "etag", "metadata", *LIST_FIELDS}
        kwargs["extra"] = {k: v for k, v in person.items() if k not in known}

        return cls(**kwargs)

    def to_api_format(self) -> dict[str, Any]:
        """
        Convert the Person to Google People API format.

        Returns:
            Dictionary in People API format

        Note:
            Only populated fields are included. resourceName and etag are
            included when set, so the result can be sent back on update.
        """
        body: dict[str, Any] = dict(self.extra)

        if self.resource_name is not None:
            body["resourceName"] = self.resource_name
        if self.etag is not None:
            body["etag"] = self.etag

        for key in LIST_FIELDS:
            values = getattr(self, _snake(key))
            if values:
                body[key] = values

        if self.metadata is not None:
            body["metadata"] = self.metadata

        return body

    def get_field(self, api_name: str) -> list[dict[str, Any]]:
        """Return a list sub-field by its API name (e.g. "emailAddresses")."""
        if api_name not in LIST_FIELDS:
            raise KeyError(f"Unknown person field: {api_name}")
        value: list[dict[str, Any]] = getattr(self, _snake(api_name))
        return value

    def set_field(self, api_name: str, values: list[dict[str, Any]]) -> None:
        """Replace a list sub-field by its API name."""
        if api_name not in LIST_FIELDS:
            raise KeyError(f"Unknown person field: {api_name}")
        setattr(self, _snake(api_name), values)

    def overlay(self, changes: Person, fields: list[str]) -> Person:
        """
        Return a copy of this person with ``fields`` taken from ``changes``.

        Fields outside ``fields`` keep this person's values. A field that is
        empty on ``changes`` is copied as empty, which clears it on update.

        Args:
            changes: Person holding the desired values
            fields: API names of the fields to take from ``changes``

        Returns:
            New Person; this instance is not modified
        """
        merged = copy.deepcopy(self)
        for name in fields:
            merged.set_field(name, copy.deepcopy(changes.get_field(name)))
        return merged

    @property
    def display_name(self) -> str:
        """Best-effort display name from the primary name entry."""
        if not self.names:
            return ""
        primary = self.names[0]
        display: str = primary.get("displayName", "")
        if display:
            return display
        parts = [primary.get("givenName"), primary.get("familyName")]
        return " ".join(p for p in parts if p)

    @property
    def emails(self) -> list[str]:
        """Email address values, skipping entries without a value."""
        return [e["value"] for e in self.email_addresses if e.get("value")]

    @property
    def phones(self) -> list[str]:
        """Phone number values, skipping entries without a value."""
        return [p["value"] for p in self.phone_numbers if p.get("value")]

    @property
    def deleted(self) -> bool:
        """True if the server marked this person deleted (sync responses)."""
        return bool((self.metadata or {}).get("deleted", False))

    def __str__(self) -> str:
        return f"Person({self.resource_name}, {self.display_name!r})"
