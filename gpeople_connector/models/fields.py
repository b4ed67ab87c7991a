"""
Field mask enumerations for the Google People API.

Each enum lists the sub-fields an endpoint accepts in one of its mask
parameters (personFields, readMask, updatePersonFields, groupFields,
copyMask). Members are ``str`` subclasses, so plain strings and enum
members can be mixed freely when building a mask.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum


class PersonField(str, Enum):
    """Fields accepted by ``personFields`` / ``readMask`` on person reads."""

    ADDRESSES = "addresses"
    AGE_RANGES = "ageRanges"
    BIOGRAPHIES = "biographies"
    BIRTHDAYS = "birthdays"
    CALENDAR_URLS = "calendarUrls"
    CLIENT_DATA = "clientData"
    COVER_PHOTOS = "coverPhotos"
    EMAIL_ADDRESSES = "emailAddresses"
    EVENTS = "events"
    EXTERNAL_IDS = "externalIds"
    GENDERS = "genders"
    IM_CLIENTS = "imClients"
    INTERESTS = "interests"
    LOCALES = "locales"
    LOCATIONS = "locations"
    MEMBERSHIPS = "memberships"
    METADATA = "metadata"
    MISC_KEYWORDS = "miscKeywords"
    NAMES = "names"
    NICKNAMES = "nicknames"
    OCCUPATIONS = "occupations"
    ORGANIZATIONS = "organizations"
    PHONE_NUMBERS = "phoneNumbers"
    PHOTOS = "photos"
    RELATIONS = "relations"
    SIP_ADDRESSES = "sipAddresses"
    SKILLS = "skills"
    URLS = "urls"
    USER_DEFINED = "userDefined"


class UpdatePersonField(str, Enum):
    """Fields accepted by ``updatePersonFields`` on updateContact."""

    ADDRESSES = "addresses"
    BIOGRAPHIES = "biographies"
    BIRTHDAYS = "birthdays"
    CALENDAR_URLS = "calendarUrls"
    CLIENT_DATA = "clientData"
    EMAIL_ADDRESSES = "emailAddresses"
    EVENTS = "events"
    EXTERNAL_IDS = "externalIds"
    GENDERS = "genders"
    IM_CLIENTS = "imClients"
    INTERESTS = "interests"
    LOCALES = "locales"
    LOCATIONS = "locations"
    MEMBERSHIPS = "memberships"
    MISC_KEYWORDS = "miscKeywords"
    NAMES = "names"
    NICKNAMES = "nicknames"
    OCCUPATIONS = "occupations"
    ORGANIZATIONS = "organizations"
    PHONE_NUMBERS = "phoneNumbers"
    RELATIONS = "relations"
    SIP_ADDRESSES = "sipAddresses"
    URLS = "urls"
    USER_DEFINED = "userDefined"


class OtherContactField(str, Enum):
    """Fields accepted by ``readMask`` on otherContacts endpoints."""

    EMAIL_ADDRESSES = "emailAddresses"
    METADATA = "metadata"
    NAMES = "names"
    PHONE_NUMBERS = "phoneNumbers"
    PHOTOS = "photos"


class CopyMaskField(str, Enum):
    """Fields accepted by ``copyMask`` when copying an other contact."""

    EMAIL_ADDRESSES = "emailAddresses"
    NAMES = "names"
    PHONE_NUMBERS = "phoneNumbers"


class GroupField(str, Enum):
    """Fields accepted by ``groupFields`` on contact group reads."""

    CLIENT_DATA = "clientData"
    GROUP_TYPE = "groupType"
    MEMBER_COUNT = "memberCount"
    METADATA = "metadata"
    NAME = "name"


class SortOrder(str, Enum):
    """Sort orders supported when listing connections."""

    LAST_MODIFIED_ASCENDING = "LAST_MODIFIED_ASCENDING"
    LAST_MODIFIED_DESCENDING = "LAST_MODIFIED_DESCENDING"
    FIRST_NAME_ASCENDING = "FIRST_NAME_ASCENDING"
    LAST_NAME_ASCENDING = "LAST_NAME_ASCENDING"


# Defaults used when a caller does not pass a mask
DEFAULT_PERSON_FIELDS = (
    PersonField.NAMES,
    PersonField.EMAIL_ADDRESSES,
    PersonField.PHONE_NUMBERS,
    PersonField.ORGANIZATIONS,
    PersonField.BIOGRAPHIES,
    PersonField.PHOTOS,
    PersonField.MEMBERSHIPS,
    PersonField.METADATA,
)

DEFAULT_OTHER_CONTACT_FIELDS = (
    OtherContactField.NAMES,
    OtherContactField.EMAIL_ADDRESSES,
    OtherContactField.PHONE_NUMBERS,
)

DEFAULT_GROUP_FIELDS = (
    GroupField.NAME,
    GroupField.GROUP_TYPE,
    GroupField.MEMBER_COUNT,
    GroupField.METADATA,
)

DEFAULT_COPY_MASK = (
    CopyMaskField.NAMES,
    CopyMaskField.EMAIL_ADDRESSES,
    CopyMaskField.PHONE_NUMBERS,
)


def field_values(fields: str | Enum | Iterable[str | Enum]) -> list[str]:
    """
    Return the wire names of a mask, preserving order.

    A single field name or enum member is a one-field mask.
    """
    if isinstance(fields, (str, Enum)):
        fields = [fields]
    return [f.value if isinstance(f, Enum) else str(f) for f in fields]
