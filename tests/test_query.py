"""Tests for request path and query string construction."""

import pytest

from gpeople_connector.api.query import join_mask, with_mask, with_params, with_repeated
from gpeople_connector.models.fields import PersonField, SortOrder


class TestWithMask:
    """Tests for with_mask."""

    def test_appends_comma_joined_values_in_order(self):
        """Mask values are joined with commas in the given order."""
        path = with_mask("people/c1", "personFields", ["names", "emailAddresses"])
        assert path == "people/c1?personFields=names,emailAddresses"

    def test_parameter_appears_once(self):
        """A multi-value mask is a single parameter, not a repeated one."""
        path = with_mask("people/c1", "personFields", ["names", "photos", "urls"])
        assert path.count("personFields=") == 1

    def test_uses_ampersand_when_query_exists(self):
        """An existing query string is extended with '&'."""
        path = with_mask("people:batchGet?resourceNames=people/c1", "personFields", ["names"])
        assert path == "people:batchGet?resourceNames=people/c1&personFields=names"

    def test_enum_members_serialized_by_value(self):
        """Enum members are written as their wire names."""
        path = with_mask(
            "people/me/connections",
            "personFields",
            [PersonField.NAMES, PersonField.PHONE_NUMBERS],
        )
        assert path.endswith("personFields=names,phoneNumbers")

    def test_mixed_enum_and_string(self):
        """Enum members and plain strings can be mixed."""
        path = with_mask("otherContacts", "readMask", [PersonField.NAMES, "emailAddresses"])
        assert path == "otherContacts?readMask=names,emailAddresses"

    def test_empty_mask_raises(self):
        """An empty mask is rejected before any request is built."""
        with pytest.raises(ValueError, match="personFields"):
            with_mask("people/c1", "personFields", [])

    def test_single_string_is_one_field(self):
        """A bare field name is a one-field mask, not a sequence of characters."""
        path = with_mask("people/c1", "personFields", "names")
        assert path == "people/c1?personFields=names"

    def test_single_enum_member_is_one_field(self):
        """A bare enum member is a one-field mask."""
        path = with_mask("people/c1", "personFields", PersonField.EMAIL_ADDRESSES)
        assert path == "people/c1?personFields=emailAddresses"

    def test_empty_string_raises(self):
        """An empty field name is rejected like an empty mask."""
        with pytest.raises(ValueError, match="readMask"):
            with_mask("otherContacts", "readMask", "")

    def test_accepts_generator(self):
        """Any iterable is accepted."""
        path = with_mask("contactGroups", "groupFields", (f for f in ["name"]))
        assert path == "contactGroups?groupFields=name"


class TestJoinMask:
    """Tests for join_mask."""

    def test_joins_values(self):
        """Values are comma-joined without escaping."""
        assert join_mask("readGroupFields", ["name", "memberCount"]) == "name,memberCount"

    def test_empty_raises(self):
        """An empty mask names the parameter in the error."""
        with pytest.raises(ValueError, match="readGroupFields"):
            join_mask("readGroupFields", [])


class TestWithRepeated:
    """Tests for with_repeated."""

    def test_one_pair_per_value(self):
        """Each resource name becomes its own parameter."""
        path = with_repeated("people:batchGet", "resourceNames", ["people/c1", "people/c2"])
        assert path == "people:batchGet?resourceNames=people/c1&resourceNames=people/c2"

    def test_preserves_order(self):
        """Values keep their input order."""
        path = with_repeated("x", "r", ["b", "a", "c"])
        assert path == "x?r=b&r=a&r=c"

    def test_empty_values_leave_path_unchanged(self):
        """No values means no parameters."""
        assert with_repeated("people:batchGet", "resourceNames", []) == "people:batchGet"

    def test_escapes_reserved_characters(self):
        """Characters outside the safe set are percent-encoded."""
        path = with_repeated("x", "r", ["a b&c"])
        assert path == "x?r=a%20b%26c"


class TestWithParams:
    """Tests for with_params."""

    def test_appends_scalar_params(self):
        """Scalar values are appended in insertion order."""
        path = with_params("people:searchContacts", {"query": "ada", "pageSize": 10})
        assert path == "people:searchContacts?query=ada&pageSize=10"

    def test_skips_none(self):
        """None values are omitted."""
        path = with_params("x", {"query": "ada", "pageSize": None})
        assert path == "x?query=ada"

    def test_booleans_lowercased(self):
        """Booleans are written as true/false."""
        assert with_params("g", {"deleteContacts": False}) == "g?deleteContacts=false"
        assert with_params("g", {"requestSyncToken": True}) == "g?requestSyncToken=true"

    def test_enum_value(self):
        """Enum values are written by value."""
        path = with_params("x", {"sortOrder": SortOrder.FIRST_NAME_ASCENDING})
        assert path == "x?sortOrder=FIRST_NAME_ASCENDING"

    def test_all_none_leaves_path_unchanged(self):
        """If every value is None the path is returned as-is."""
        assert with_params("x?a=1", {"b": None}) == "x?a=1"

    def test_extends_existing_query(self):
        """An existing query string is extended with '&'."""
        path = with_params("otherContacts?readMask=names", {"pageToken": "t1"})
        assert path == "otherContacts?readMask=names&pageToken=t1"

    def test_encodes_spaces_in_query(self):
        """Free-text values are form-encoded."""
        assert with_params("x", {"query": "ada love"}) == "x?query=ada+love"
