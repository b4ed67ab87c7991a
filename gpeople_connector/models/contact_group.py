"""
ContactGroup data model for the Google People API.

Provides a ContactGroup representation with methods for:
- Converting to/from Google People API contactGroups format
- Distinguishing user-created groups from system groups
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# Group types as defined by Google People API
GROUP_TYPE_UNSPECIFIED = "GROUP_TYPE_UNSPECIFIED"
GROUP_TYPE_USER_CONTACT_GROUP = "USER_CONTACT_GROUP"
GROUP_TYPE_SYSTEM_CONTACT_GROUP = "SYSTEM_CONTACT_GROUP"

# System group resource names
SYSTEM_GROUP_NAMES = frozenset(
    {
        "contactGroups/myContacts",
        "contactGroups/starred",
        "contactGroups/all",
        "contactGroups/friends",
        "contactGroups/family",
        "contactGroups/coworkers",
        "contactGroups/chatBuddies",
        "contactGroups/blocked",
    }
)


class ContactGroupDecodeError(ValueError):
    """Raised when a contact group payload does not match the expected shape."""

    pass


@dataclass
class ContactGroup:
    """
    A contact group (label) resource.

    Attributes:
        resource_name: Server-issued ID (e.g., "contactGroups/123abc")
        etag: Required for updates, prevents concurrent modification conflicts
        name: Display name of the group (e.g., "Family", "Work")
        group_type: USER_CONTACT_GROUP or SYSTEM_CONTACT_GROUP
        member_count: Number of members in the group
        member_resource_names: Contact resource names in the group (only
            returned when maxMembers is requested)
        formatted_name: Localized name returned by the API
        client_data: Client-specific key/value entries
        metadata: Group metadata (updateTime, deleted)

    Usage:
        group = ContactGroup.from_api_response(api_response)
        group.is_user_group()
        body = {"contactGroup": group.to_api_format()}
    """

    resource_name: str | None = None
    etag: str | None = None
    name: str = ""
    group_type: str = GROUP_TYPE_UNSPECIFIED

    member_count: int = 0
    member_resource_names: list[str] = field(default_factory=list)
    formatted_name: str | None = None
    client_data: list[dict[str, Any]] = field(default_factory=list)
    metadata: dict[str, Any] | None = None

    @classmethod
    def from_api_response(cls, group_data: dict[str, Any]) -> ContactGroup:
        """
        Create a ContactGroup from a Google People API response.

        Args:
            group_data: Dictionary from Google People API containing group data

        Returns:
            ContactGroup instance populated from the API response

        Raises:
            ContactGroupDecodeError: If the payload has the wrong shape

        Example API response structure::

            {
                'resourceName': 'contactGroups/123abc',
                'etag': 'xyz789',
                'name': 'My Custom Group',
                'formattedName': 'My Custom Group',
                'groupType': 'USER_CONTACT_GROUP',
                'memberCount': 5,
                'memberResourceNames': ['people/c1', 'people/c2', ...],
                'metadata': {'updateTime': '2024-01-01T00:00:00Z'}
            }
        """
        if not isinstance(group_data, dict):
            raise ContactGroupDecodeError(
                f"Contact group must be an object, got {type(group_data).__name__}"
            )

        for key in ("resourceName", "etag", "name", "formattedName", "groupType"):
            value = group_data.get(key)
            if value is not None and not isinstance(value, str):
                raise ContactGroupDecodeError(
                    f"'{key}' must be a string, got {type(value).__name__}"
                )

        member_count = group_data.get("memberCount", 0)
        if not isinstance(member_count, int) or isinstance(member_count, bool):
            raise ContactGroupDecodeError(
                f"'memberCount' must be an integer, got {type(member_count).__name__}"
            )

        member_resource_names = group_data.get("memberResourceNames", [])
        if not isinstance(member_resource_names, list) or not all(
            isinstance(m, str) for m in member_resource_names
        ):
            raise ContactGroupDecodeError(
                "'memberResourceNames' must be a list of strings"
            )

        client_data = group_data.get("clientData", [])
        if not isinstance(client_data, list):
            raise ContactGroupDecodeError("'clientData' must be a list")

        metadata = group_data.get("metadata")
        if metadata is not None and not isinstance(metadata, dict):
            raise ContactGroupDecodeError("'metadata' must be an object")

        return cls(
            resource_name=group_data.get("resourceName"),
            etag=group_data.get("etag"),
            name=group_data.get("name", ""),
            group_type=group_data.get("groupType", GROUP_TYPE_UNSPECIFIED),
            member_count=member_count,
            member_resource_names=member_resource_names,
            formatted_name=group_data.get("formattedName"),
            client_data=client_data,
            metadata=metadata,
        )

    def to_api_format(self) -> dict[str, Any]:
        """
        Convert ContactGroup to Google People API format.

        Returns:
            Dictionary in Google People API contactGroup format

        Note:
            Read-only fields the server computes (memberCount,
            memberResourceNames, formattedName, groupType) are included when
            set so that a fetched group can be sent back whole; the server
            ignores them on write.
        """
        group: dict[str, Any] = {}

        if self.resource_name is not None:
            group["resourceName"] = self.resource_name
        if self.etag is not None:
            group["etag"] = self.etag
        if self.name:
            group["name"] = self.name
        if self.formatted_name is not None:
            group["formattedName"] = self.formatted_name
        if self.group_type != GROUP_TYPE_UNSPECIFIED:
            group["groupType"] = self.group_type
        if self.member_count:
            group["memberCount"] = self.member_count
        if self.member_resource_names:
            group["memberResourceNames"] = self.member_resource_names
        if self.client_data:
            group["clientData"] = self.client_data
        if self.metadata is not None:
            group["metadata"] = self.metadata

        return group

    def is_user_group(self) -> bool:
        """
        Check if this is a user-created contact group.

        Returns:
            True if the group is a user contact group (not system)
        """
        return self.group_type == GROUP_TYPE_USER_CONTACT_GROUP

    def is_system_group(self) -> bool:
        """
        Check if this is a system contact group.

        Returns:
            True if the group is a system contact group
        """
        return (
            self.group_type == GROUP_TYPE_SYSTEM_CONTACT_GROUP
            or self.resource_name in SYSTEM_GROUP_NAMES
        )

    @property
    def deleted(self) -> bool:
        """True if the server marked this group deleted (sync responses)."""
        return bool((self.metadata or {}).get("deleted", False))

    def __repr__(self) -> str:
        """Return a readable string representation."""
        return (
            f"ContactGroup(resource_name={self.resource_name!r}, "
            f"name={self.name!r}, "
            f"group_type={self.group_type!r}, "
            f"member_count={self.member_count})"
        )
