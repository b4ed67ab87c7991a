"""
Google People API client.

Provides a typed interface to the People API v1 REST surface for:
- Listing contacts, other contacts and contact groups as lazy page streams
- Searching, fetching and batch-fetching contacts and groups
- Creating, updating and deleting contacts and contact groups
- Uploading and removing contact photos
- Changing contact group membership

Every operation builds a path, sends one request (update operations send a
GET first) and decodes the response; nothing is retried here beyond the
urllib3 retry policy mounted on the session.
"""

import logging
from collections.abc import Iterable
from enum import Enum
from pathlib import Path
from types import TracebackType
from typing import Any

import requests
from google.auth.credentials import Credentials

from gpeople_connector.api.errors import PeopleAPIError
from gpeople_connector.api.pagination import PageStream
from gpeople_connector.api.photo import load_photo_for_upload
from gpeople_connector.api.query import (
    join_mask,
    with_mask,
    with_params,
    with_repeated,
)
from gpeople_connector.api.responses import (
    handle_delete_response,
    handle_modify_response,
    handle_response,
    handle_response_with_null,
    handle_upload_photo_response,
)
from gpeople_connector.api.transport import build_session
from gpeople_connector.auth.google_auth import build_credentials
from gpeople_connector.config.connection import ConnectionConfig
from gpeople_connector.models.contact_group import ContactGroup
from gpeople_connector.models.fields import (
    DEFAULT_COPY_MASK,
    DEFAULT_GROUP_FIELDS,
    DEFAULT_OTHER_CONTACT_FIELDS,
    DEFAULT_PERSON_FIELDS,
    UpdatePersonField,
    field_values,
)
from gpeople_connector.models.pages import (
    ListOptions,
    decode_connections_page,
    decode_contact_groups_page,
    decode_group_batch,
    decode_other_contacts_page,
    decode_person_batch,
    decode_person_search,
)
from gpeople_connector.models.person import Person

# Mask type accepted by every operation: enum members or plain field names
Mask = str | Enum | Iterable[str | Enum]

# API limits
MAX_BATCH_GET_SIZE = 200
MAX_BATCH_DELETE_SIZE = 500
MAX_GROUP_MEMBERS = 1000

UPDATABLE_FIELDS = frozenset(f.value for f in UpdatePersonField)

logger = logging.getLogger(__name__)


def _require(value: str, name: str) -> None:
    if not value:
        raise ValueError(f"{name} is required")


class PeopleClient:
    """
    Google People API client.

    One client owns one HTTP session (created lazily from its credentials
    and connection settings). Independent calls may share a client; page
    streams returned by the list operations must each be consumed by a
    single caller.

    Attributes:
        credentials: google-auth credentials
        config: Connection settings forwarded to the transport

    Usage:
        client = PeopleClient.from_config(ConfigLoader().load_connection_config())

        for person in client.list_contacts([PersonField.NAMES]):
            print(person.display_name)

        person = client.get_contact("people/c12345", ["names", "emailAddresses"])
        client.update_contact(
            "people/c12345",
            Person(email_addresses=[{"value": "ada@example.com"}]),
            [UpdatePersonField.EMAIL_ADDRESSES],
        )
    """

    def __init__(
        self,
        credentials: Credentials | None = None,
        config: ConnectionConfig | None = None,
        session: requests.Session | None = None,
    ):
        """
        Initialize the client.

        Args:
            credentials: google-auth credentials (not needed if session is given)
            config: Connection settings (defaults when None)
            session: Pre-built session; skips session construction
        """
        self.credentials = credentials
        self.config = config or ConnectionConfig()
        self.base_url = self.config.base_url.rstrip("/")
        self._session = session

    @classmethod
    def from_config(cls, config: ConnectionConfig) -> "PeopleClient":
        """
        Create a client whose credentials come from ``config.auth``.

        Raises:
            AuthenticationError: If no usable credential source is configured
        """
        return cls(credentials=build_credentials(config.auth), config=config)

    @property
    def session(self) -> requests.Session:
        """
        Get or create the HTTP session.

        Raises:
            PeopleAPIError: If no credentials were supplied
        """
        if self._session is None:
            if self.credentials is None:
                raise PeopleAPIError("Cannot create a session without credentials")
            self._session = build_session(self.credentials, self.config)
        return self._session

    def close(self) -> None:
        """Close the HTTP session and release pooled connections."""
        if self._session is not None:
            self._session.close()
            self._session = None

    def __enter__(self) -> "PeopleClient":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def _request(
        self, method: str, path: str, body: dict[str, Any] | None = None
    ) -> requests.Response:
        url = f"{self.base_url}/{path.lstrip('/')}"
        kwargs: dict[str, Any] = {"timeout": self.config.request_timeout}
        if body is not None:
            kwargs["json"] = body
        return self.session.request(method, url, **kwargs)

    def _get(self, path: str) -> requests.Response:
        return self._request("GET", path)

    def _default_options(self, options: ListOptions | None) -> ListOptions:
        if options is not None:
            return options
        return ListOptions(page_size=self.config.page_size)

    # ========== Contact Methods ==========

    def list_contacts(
        self,
        person_fields: Mask = DEFAULT_PERSON_FIELDS,
        options: ListOptions | None = None,
    ) -> PageStream[Person]:
        """
        Stream the authenticated user's contacts.

        Pages are fetched lazily as the stream is consumed.

        Args:
            person_fields: Fields to return for each person
            options: Page size, sort order and sync token settings

        Returns:
            PageStream of Person; ``next_sync_token`` is set once the last
            page has been read if a sync token was requested

        Raises:
            ValueError: If person_fields is empty

        Note:
            If a sync token is expired the first pull raises an APIError with
            code 410 (or 400 FAILED_PRECONDITION); the caller should list
            again without a sync token.
        """
        path = with_mask("people/me/connections", "personFields", person_fields)
        logger.debug(f"Listing contacts: {path}")
        return PageStream(
            self._get, path, decode_connections_page, self._default_options(options)
        )

    def search_contacts(
        self,
        query: str,
        read_mask: Mask = DEFAULT_PERSON_FIELDS,
        page_size: int | None = None,
    ) -> list[Person]:
        """
        Search the user's contacts by name, email, phone or organization prefix.

        Args:
            query: Prefix query
            read_mask: Fields to return for each person
            page_size: Maximum results (server default 10, max 30)

        Returns:
            Matching people; an empty result body yields an empty list

        Raises:
            ValueError: If query or read_mask is empty
        """
        _require(query, "query")
        logger.debug(f"Searching contacts: {query!r}")

        path = with_mask("people:searchContacts", "readMask", read_mask)
        path = with_params(path, {"query": query, "pageSize": page_size})
        people = handle_response_with_null(self._get(path), decode_person_search)

        logger.info(f"Search for {query!r} returned {len(people or [])} contacts")
        return people or []

    def get_contact(
        self, resource_name: str, person_fields: Mask = DEFAULT_PERSON_FIELDS
    ) -> Person:
        """
        Get a single contact by resource name.

        Args:
            resource_name: Contact's resource name (e.g., "people/c12345")
            person_fields: Fields to return

        Returns:
            Person

        Raises:
            ValueError: If resource_name or person_fields is empty
            APIError: If the contact is not found (404) or the request fails
        """
        _require(resource_name, "resource_name")
        logger.debug(f"Getting contact: {resource_name}")

        path = with_mask(resource_name, "personFields", person_fields)
        return handle_response(self._get(path), Person.from_api_response)

    def get_batch_contacts(
        self, resource_names: list[str], person_fields: Mask = DEFAULT_PERSON_FIELDS
    ) -> list[Person]:
        """
        Get several contacts in one request.

        Args:
            resource_names: Up to 200 resource names
            person_fields: Fields to return

        Returns:
            People found, in response order; lookups that failed individually
            are skipped

        Raises:
            ValueError: If more than 200 names are given or person_fields is empty
        """
        if not resource_names:
            return []
        if len(resource_names) > MAX_BATCH_GET_SIZE:
            raise ValueError(
                f"At most {MAX_BATCH_GET_SIZE} resource names per batch get, "
                f"got {len(resource_names)}"
            )

        logger.debug(f"Batch getting {len(resource_names)} contacts")

        path = with_repeated("people:batchGet", "resourceNames", resource_names)
        path = with_mask(path, "personFields", person_fields)
        people = handle_response(self._get(path), decode_person_batch)

        logger.info(f"Batch got {len(people)} of {len(resource_names)} contacts")
        return people

    def create_contact(
        self, person: Person, person_fields: Mask = DEFAULT_PERSON_FIELDS
    ) -> Person:
        """
        Create a new contact.

        Args:
            person: Contact data (resource_name and etag are ignored)
            person_fields: Fields to return for the created person

        Returns:
            Created Person with server-issued resource_name and etag
        """
        logger.debug(f"Creating contact: {person.display_name}")

        body = person.to_api_format()
        body.pop("resourceName", None)
        body.pop("etag", None)

        path = with_mask("people:createContact", "personFields", person_fields)
        created = handle_response(
            self._request("POST", path, body), Person.from_api_response
        )

        logger.info(f"Created contact: {created.resource_name}")
        return created

    def update_contact(
        self,
        resource_name: str,
        person: Person,
        update_fields: Mask,
        person_fields: Mask | None = None,
    ) -> Person:
        """
        Update an existing contact.

        Fetches the current contact (default fields, metadata and
        ``update_fields``), takes exactly ``update_fields`` from ``person``
        (an empty field on ``person`` clears it), and PATCHes the merged
        contact with the fresh etag. The server applies only
        ``update_fields``.

        Args:
            resource_name: Contact's resource name
            person: Desired values for the fields being updated
            update_fields: Fields the server should apply
            person_fields: Fields to return (default: update_fields)

        Returns:
            Updated Person with its new etag

        Raises:
            ValueError: If resource_name or update_fields is empty
            APIError: 404 if not found, 400 FAILED_PRECONDITION if the contact
                changed between the fetch and the update
        """
        _require(resource_name, "resource_name")
        fields = field_values(update_fields)
        if not fields:
            raise ValueError("update_fields requires at least one field")
        unknown = [f for f in fields if f not in UPDATABLE_FIELDS]
        if unknown:
            raise ValueError(f"Fields cannot be updated: {', '.join(unknown)}")

        logger.debug(f"Updating contact {resource_name}: {','.join(fields)}")

        read_fields = list(dict.fromkeys(field_values(DEFAULT_PERSON_FIELDS) + fields))
        current = self.get_contact(resource_name, read_fields)
        merged = current.overlay(person, fields)
        body = merged.to_api_format()
        body["resourceName"] = current.resource_name or resource_name

        path = with_mask(f"{resource_name}:updateContact", "updatePersonFields", fields)
        path = with_mask(path, "personFields", person_fields or fields)
        updated = handle_response(
            self._request("PATCH", path, body), Person.from_api_response
        )

        logger.info(f"Updated contact: {resource_name}")
        return updated

    def delete_contact(self, resource_name: str) -> None:
        """
        Delete a contact.

        Args:
            resource_name: Contact's resource name

        Raises:
            APIError: If deletion fails (including 404)
        """
        _require(resource_name, "resource_name")
        logger.debug(f"Deleting contact: {resource_name}")

        handle_delete_response(self._request("DELETE", f"{resource_name}:deleteContact"))

        logger.info(f"Deleted contact: {resource_name}")

    def batch_delete_contacts(self, resource_names: list[str]) -> int:
        """
        Delete contacts in batches of up to 500.

        Args:
            resource_names: Resource names to delete

        Returns:
            Number of contacts deleted

        Raises:
            APIError: If a batch fails; earlier batches stay deleted
        """
        if not resource_names:
            return 0

        logger.debug(f"Batch deleting {len(resource_names)} contacts")

        deleted_count = 0
        for i in range(0, len(resource_names), MAX_BATCH_DELETE_SIZE):
            batch = resource_names[i : i + MAX_BATCH_DELETE_SIZE]
            handle_delete_response(
                self._request(
                    "POST", "people:batchDeleteContacts", {"resourceNames": batch}
                )
            )
            deleted_count += len(batch)

        logger.info(f"Batch deleted {deleted_count} contacts")
        return deleted_count

    # ========== Photo Methods ==========

    def update_contact_photo(
        self, resource_name: str, photo_path: Path | str, optimize: bool = False
    ) -> None:
        """
        Upload a local image as a contact's photo.

        Args:
            resource_name: Contact's resource name
            photo_path: Path to the image file
            optimize: Convert to JPEG and shrink to the API limits first

        Raises:
            PhotoError: If the file cannot be read or processed
            APIError: If the upload fails
        """
        _require(resource_name, "resource_name")
        logger.debug(f"Uploading photo for contact: {resource_name}")

        body = {"photoBytes": load_photo_for_upload(photo_path, optimize=optimize)}
        handle_upload_photo_response(
            self._request("PATCH", f"{resource_name}:updateContactPhoto", body)
        )

        logger.info(f"Uploaded photo for contact: {resource_name}")

    def delete_contact_photo(self, resource_name: str) -> None:
        """
        Remove a contact's photo.

        Args:
            resource_name: Contact's resource name

        Raises:
            APIError: If removal fails
        """
        _require(resource_name, "resource_name")
        logger.debug(f"Deleting photo for contact: {resource_name}")

        handle_upload_photo_response(
            self._request("DELETE", f"{resource_name}:deleteContactPhoto")
        )

        logger.info(f"Deleted photo for contact: {resource_name}")

    # ========== Other Contacts Methods ==========

    def list_other_contacts(
        self,
        read_mask: Mask = DEFAULT_OTHER_CONTACT_FIELDS,
        options: ListOptions | None = None,
    ) -> PageStream[Person]:
        """
        Stream the user's "other contacts" (auto-created from interactions).

        Args:
            read_mask: Fields to return (names, emailAddresses, phoneNumbers,
                photos, metadata)
            options: Page size and sync token settings; sort_order is not
                supported by this endpoint

        Returns:
            PageStream of Person

        Raises:
            ValueError: If read_mask is empty or a sort order is requested
        """
        options = self._default_options(options)
        if options.sort_order is not None:
            raise ValueError("otherContacts does not support sort_order")

        path = with_mask("otherContacts", "readMask", read_mask)
        logger.debug(f"Listing other contacts: {path}")
        return PageStream(self._get, path, decode_other_contacts_page, options)

    def search_other_contacts(
        self,
        query: str,
        read_mask: Mask = DEFAULT_OTHER_CONTACT_FIELDS,
        page_size: int | None = None,
    ) -> list[Person]:
        """
        Search "other contacts" by name, email or phone prefix.

        Returns:
            Matching people; an empty result body yields an empty list
        """
        _require(query, "query")
        logger.debug(f"Searching other contacts: {query!r}")

        path = with_mask("otherContacts:search", "readMask", read_mask)
        path = with_params(path, {"query": query, "pageSize": page_size})
        people = handle_response_with_null(self._get(path), decode_person_search)

        logger.info(f"Search for {query!r} returned {len(people or [])} other contacts")
        return people or []

    def copy_other_contact(
        self,
        resource_name: str,
        copy_mask: Mask = DEFAULT_COPY_MASK,
        read_mask: Mask | None = None,
    ) -> Person:
        """
        Copy an "other contact" into the user's contacts.

        Args:
            resource_name: Other contact's resource name ("otherContacts/c123")
            copy_mask: Fields to copy (names, emailAddresses, phoneNumbers)
            read_mask: Fields to return for the new contact (default: copy_mask)

        Returns:
            The newly created contact
        """
        _require(resource_name, "resource_name")
        copy_fields = join_mask("copyMask", copy_mask)
        read_fields = (
            join_mask("readMask", read_mask) if read_mask is not None else copy_fields
        )

        logger.debug(f"Copying other contact: {resource_name}")

        body = {"copyMask": copy_fields, "readMask": read_fields}
        created = handle_response(
            self._request(
                "POST", f"{resource_name}:copyOtherContactToMyContactsGroup", body
            ),
            Person.from_api_response,
        )

        logger.info(f"Copied {resource_name} to {created.resource_name}")
        return created

    # ========== Contact Groups Methods ==========

    def create_contact_group(
        self, name: str, group_fields: Mask = DEFAULT_GROUP_FIELDS
    ) -> ContactGroup:
        """
        Create a new contact group.

        Args:
            name: Name for the new contact group
            group_fields: Fields to return for the created group

        Returns:
            Created ContactGroup with resource_name and etag

        Raises:
            ValueError: If name is empty
            APIError: If creation fails (409 if the name already exists)
        """
        _require(name, "name")
        logger.debug(f"Creating contact group: {name}")

        body = {
            "contactGroup": {"name": name},
            "readGroupFields": join_mask("readGroupFields", group_fields),
        }
        group = handle_response(
            self._request("POST", "contactGroups", body),
            ContactGroup.from_api_response,
        )

        logger.info(f"Created contact group: {group.resource_name} ({name})")
        return group

    def get_contact_group(
        self,
        resource_name: str,
        max_members: int = 0,
        group_fields: Mask = DEFAULT_GROUP_FIELDS,
    ) -> ContactGroup:
        """
        Get a single contact group by resource name.

        Args:
            resource_name: Group's resource name (e.g., "contactGroups/abc123")
            max_members: Maximum member resource names to return (0 for none,
                max 1000)
            group_fields: Fields to return

        Returns:
            ContactGroup

        Raises:
            APIError: If the group is not found (404) or the request fails
        """
        _require(resource_name, "resource_name")
        logger.debug(f"Getting contact group: {resource_name}")

        path = with_mask(resource_name, "groupFields", group_fields)
        if max_members > 0:
            path = with_params(
                path, {"maxMembers": min(max_members, MAX_GROUP_MEMBERS)}
            )
        return handle_response(self._get(path), ContactGroup.from_api_response)

    def get_batch_contact_groups(
        self,
        resource_names: list[str],
        max_members: int = 0,
        group_fields: Mask = DEFAULT_GROUP_FIELDS,
    ) -> list[ContactGroup]:
        """
        Get several contact groups in one request.

        Args:
            resource_names: Up to 200 group resource names
            max_members: Maximum member resource names per group
            group_fields: Fields to return

        Returns:
            Groups found, in response order; failed lookups are skipped
        """
        if not resource_names:
            return []
        if len(resource_names) > MAX_BATCH_GET_SIZE:
            raise ValueError(
                f"At most {MAX_BATCH_GET_SIZE} resource names per batch get, "
                f"got {len(resource_names)}"
            )

        logger.debug(f"Batch getting {len(resource_names)} contact groups")

        path = with_repeated("contactGroups:batchGet", "resourceNames", resource_names)
        path = with_mask(path, "groupFields", group_fields)
        if max_members > 0:
            path = with_params(
                path, {"maxMembers": min(max_members, MAX_GROUP_MEMBERS)}
            )
        groups = handle_response(self._get(path), decode_group_batch)

        logger.info(f"Batch got {len(groups)} of {len(resource_names)} contact groups")
        return groups

    def list_contact_groups(
        self,
        options: ListOptions | None = None,
        group_fields: Mask = DEFAULT_GROUP_FIELDS,
    ) -> PageStream[ContactGroup]:
        """
        Stream all contact groups, user-created and system.

        Args:
            options: Page size and sync token; sort_order is not supported
            group_fields: Fields to return for each group

        Returns:
            PageStream of ContactGroup

        Note:
            An expired or invalid sync token is reported by the API as 400.
        """
        options = self._default_options(options)
        if options.sort_order is not None:
            raise ValueError("contactGroups does not support sort_order")

        path = with_mask("contactGroups", "groupFields", group_fields)
        logger.debug(f"Listing contact groups: {path}")
        return PageStream(self._get, path, decode_contact_groups_page, options)

    def update_contact_group(
        self,
        resource_name: str,
        name: str,
        group_fields: Mask = DEFAULT_GROUP_FIELDS,
    ) -> ContactGroup:
        """
        Rename a contact group.

        Fetches the group, replaces its name, and PUTs the whole object back
        with its current etag.

        Args:
            resource_name: Group's resource name (e.g., "contactGroups/abc123")
            name: New name for the contact group
            group_fields: Fields to read back

        Returns:
            Updated ContactGroup

        Raises:
            APIError: 404 if not found, 409 if the name is already taken
        """
        _require(resource_name, "resource_name")
        _require(name, "name")
        logger.debug(f"Updating contact group: {resource_name}")

        group = self.get_contact_group(resource_name, group_fields=group_fields)
        group.name = name

        body = {
            "contactGroup": group.to_api_format(),
            "updateGroupFields": "name",
            "readGroupFields": join_mask("readGroupFields", group_fields),
        }
        updated = handle_response(
            self._request("PUT", resource_name, body), ContactGroup.from_api_response
        )

        logger.info(f"Updated contact group: {resource_name} -> {name}")
        return updated

    def delete_contact_group(
        self, resource_name: str, delete_contacts: bool = False
    ) -> None:
        """
        Delete a contact group.

        Args:
            resource_name: Group's resource name (e.g., "contactGroups/abc123")
            delete_contacts: Also delete the contacts in the group. If False
                (default), contacts are kept and only lose the membership.

        Raises:
            APIError: If deletion fails (system groups cannot be deleted)
        """
        _require(resource_name, "resource_name")
        logger.debug(f"Deleting contact group: {resource_name}")

        path = with_params(resource_name, {"deleteContacts": delete_contacts})
        handle_delete_response(self._request("DELETE", path))

        logger.info(f"Deleted contact group: {resource_name}")

    def modify_contact_group(
        self,
        resource_name: str,
        add_resource_names: list[str] | None = None,
        remove_resource_names: list[str] | None = None,
    ) -> None:
        """
        Add contacts to and/or remove contacts from a group.

        Args:
            resource_name: Group's resource name (e.g., "contactGroups/abc123")
            add_resource_names: Contact resource names to add
            remove_resource_names: Contact resource names to remove

        Raises:
            ValueError: If both lists are empty
            APIError: If the change fails (e.g., 404 group not found)

        Note:
            A contact can belong to at most 25 groups, and at most 1000
            contacts can be added or removed per call.
        """
        _require(resource_name, "resource_name")
        if not add_resource_names and not remove_resource_names:
            raise ValueError(
                "At least one of add_resource_names or remove_resource_names "
                "must be provided"
            )

        add_count = len(add_resource_names) if add_resource_names else 0
        remove_count = len(remove_resource_names) if remove_resource_names else 0
        logger.debug(
            f"Modifying group members for {resource_name}: "
            f"adding {add_count}, removing {remove_count}"
        )

        body: dict[str, Any] = {}
        if add_resource_names:
            body["resourceNamesToAdd"] = add_resource_names
        if remove_resource_names:
            body["resourceNamesToRemove"] = remove_resource_names

        handle_modify_response(
            self._request("POST", f"{resource_name}/members:modify", body)
        )

        logger.info(
            f"Modified group members for {resource_name}: "
            f"added {add_count}, removed {remove_count}"
        )
