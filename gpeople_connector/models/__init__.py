"""
gpeople_connector.models - Resource models

Person and ContactGroup records, field mask enumerations and list envelopes.
"""

from gpeople_connector.models.contact_group import ContactGroup
from gpeople_connector.models.fields import (
    CopyMaskField,
    GroupField,
    OtherContactField,
    PersonField,
    SortOrder,
    UpdatePersonField,
)
from gpeople_connector.models.pages import ListOptions, Page
from gpeople_connector.models.person import Person

__all__ = [
    "ContactGroup",
    "CopyMaskField",
    "GroupField",
    "ListOptions",
    "OtherContactField",
    "Page",
    "Person",
    "PersonField",
    "SortOrder",
    "UpdatePersonField",
]
