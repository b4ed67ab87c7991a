"""
Tests for the CLI module.

Tests the command-line interface using Click's testing utilities. The
People API client is replaced with a MagicMock in every command test.
"""

from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from gpeople_connector import __version__
from gpeople_connector.api.errors import APIError
from gpeople_connector.api.photo import PhotoError
from gpeople_connector.cli import (
    DEFAULT_CONFIG_DIR,
    cli,
    format_person_row,
    get_config_dir,
    get_config_file,
)
from gpeople_connector.models.contact_group import ContactGroup
from gpeople_connector.models.fields import SortOrder
from gpeople_connector.models.person import Person


@pytest.fixture(autouse=True)
def no_logging_setup():
    """Keep CLI invocations from installing handlers or deleting logs."""
    with (
        patch("gpeople_connector.cli.main.setup_logging") as mock_setup,
        patch("gpeople_connector.cli.main.cleanup_old_logs"),
    ):
        yield mock_setup


@pytest.fixture
def run(tmp_path):
    """Invoke the CLI with an isolated config directory."""
    runner = CliRunner()

    def invoke(*args, **kwargs):
        return runner.invoke(cli, ["--config-dir", str(tmp_path), *args], **kwargs)

    return invoke


@pytest.fixture
def client():
    """Mock PeopleClient returned by get_client."""
    with patch("gpeople_connector.cli.main.get_client") as mock_get_client:
        mock_client = MagicMock()
        mock_client.__enter__.return_value = mock_client
        mock_get_client.return_value = mock_client
        yield mock_client


def ada():
    return Person(
        resource_name="people/c1",
        names=[{"displayName": "Ada Lovelace"}],
        email_addresses=[{"value": "ada@example.com"}],
    )


class TestHelperFunctions:
    """Tests for CLI helper functions."""

    def test_default_config_dir_is_in_home(self):
        """The default config dir is ~/.gpeople-connector."""
        assert DEFAULT_CONFIG_DIR.name == ".gpeople-connector"

    def test_get_config_dir_with_custom_path(self, tmp_path):
        """An explicit directory is resolved."""
        assert get_config_dir(str(tmp_path)) == tmp_path.resolve()

    def test_get_config_file_default(self, tmp_path):
        """The config file defaults to config.yaml in the config dir."""
        assert get_config_file(tmp_path, None) == tmp_path / "config.yaml"

    def test_get_config_file_explicit(self, tmp_path):
        """An explicit config file wins."""
        assert get_config_file(tmp_path, "/etc/gp.yaml").as_posix() == "/etc/gp.yaml"

    def test_format_person_row(self):
        """A row shows resource name, name and first email."""
        row = format_person_row(ada())

        assert row.startswith("people/c1")
        assert "Ada Lovelace" in row
        assert row.endswith("ada@example.com")


class TestCliGroup:
    """Tests for the main CLI group."""

    def test_cli_help(self):
        """The CLI shows help."""
        result = CliRunner().invoke(cli, ["--help"])

        assert result.exit_code == 0
        assert "Google People API client" in result.output

    def test_cli_version(self):
        """The CLI shows its version."""
        result = CliRunner().invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_verbose_flag(self, run, client, no_logging_setup):
        """--verbose turns on verbose logging."""
        client.search_contacts.return_value = []

        result = run("--verbose", "search", "ada")

        assert result.exit_code == 0
        assert no_logging_setup.call_args.kwargs["verbose"] is True

    def test_verbose_from_config(self, run, client, no_logging_setup, tmp_path):
        """verbose in the config file turns on verbose logging."""
        (tmp_path / "config.yaml").write_text("verbose: true\n")
        client.search_contacts.return_value = []

        run("search", "ada")

        assert no_logging_setup.call_args.kwargs["verbose"] is True

    def test_invalid_config_warns(self, run, client, tmp_path):
        """An invalid config file produces a warning and defaults."""
        (tmp_path / "config.yaml").write_text("timeout: -1\n")
        client.search_contacts.return_value = []

        result = run("search", "ada")

        assert result.exit_code == 0
        assert "Configuration error" in result.output


class TestGetClient:
    """Tests for client construction from the CLI context."""

    @patch("gpeople_connector.cli.main.GoogleAuth")
    def test_not_authenticated(self, mock_auth_class, run):
        """Without stored credentials commands exit with an error."""
        mock_auth_class.return_value.get_credentials.return_value = None

        result = run("list")

        assert result.exit_code == 1
        assert "not authenticated" in result.output
        assert "gpeople auth" in result.output

    @patch("gpeople_connector.cli.main.PeopleClient")
    @patch("gpeople_connector.cli.main.GoogleAuth")
    def test_stored_credentials(self, mock_auth_class, mock_client_class, run, tmp_path):
        """Stored credentials are used when the config has no auth section."""
        creds = MagicMock()
        mock_auth_class.return_value.get_credentials.return_value = creds
        mock_client_class.return_value.search_contacts.return_value = []

        result = run("search", "ada")

        assert result.exit_code == 0
        mock_auth_class.assert_called_once_with(config_dir=tmp_path.resolve())
        assert mock_client_class.call_args.kwargs["credentials"] is creds

    @patch("gpeople_connector.cli.main.PeopleClient")
    def test_config_auth(self, mock_client_class, run, tmp_path):
        """An auth section in the config file is used directly."""
        (tmp_path / "config.yaml").write_text("auth:\n  token: abc\n")
        mock_client_class.from_config.return_value.search_contacts.return_value = []

        result = run("search", "ada")

        assert result.exit_code == 0
        connection = mock_client_class.from_config.call_args.args[0]
        assert connection.auth.token == "abc"


class TestAuthCommand:
    """Tests for the auth command."""

    @patch("gpeople_connector.cli.main.GoogleAuth")
    def test_already_authenticated(self, mock_auth_class, run):
        """Existing credentials are kept without --force."""
        mock_auth_class.return_value.is_authenticated.return_value = True

        result = run("auth")

        assert result.exit_code == 0
        assert "Already authenticated" in result.output
        mock_auth_class.return_value.authenticate.assert_not_called()

    @patch("gpeople_connector.cli.main.GoogleAuth")
    def test_force(self, mock_auth_class, run):
        """--force re-runs the OAuth flow."""
        mock_auth_class.return_value.is_authenticated.return_value = True

        result = run("auth", "--force")

        assert result.exit_code == 0
        mock_auth_class.return_value.authenticate.assert_called_once_with(
            force_reauth=True
        )
        assert "Authentication successful" in result.output

    @patch("gpeople_connector.cli.main.GoogleAuth")
    def test_missing_client_secrets(self, mock_auth_class, run):
        """A missing credentials.json is reported."""
        mock_auth = mock_auth_class.return_value
        mock_auth.is_authenticated.return_value = False
        mock_auth.authenticate.side_effect = FileNotFoundError("credentials.json missing")

        result = run("auth")

        assert result.exit_code == 1
        assert "credentials.json missing" in result.output

    @patch("gpeople_connector.cli.main.GoogleAuth")
    def test_clear(self, mock_auth_class, run):
        """--clear removes stored credentials."""
        mock_auth_class.return_value.clear_credentials.return_value = True

        result = run("auth", "--clear")

        assert result.exit_code == 0
        assert "removed" in result.output


class TestContactCommands:
    """Tests for contact commands."""

    def test_list(self, run, client):
        """Contacts are printed one per line with a total."""
        client.list_contacts.return_value = iter([ada()])

        result = run("list", "--page-size", "50", "--sort", "first_name_ascending")

        assert result.exit_code == 0
        assert "Ada Lovelace" in result.output
        assert "Total: 1 contact(s)" in result.output
        options = client.list_contacts.call_args.kwargs["options"]
        assert options.page_size == 50
        assert options.sort_order == SortOrder.FIRST_NAME_ASCENDING

    def test_list_limit_and_fields(self, run, client):
        """--limit stops early and --fields sets the mask."""
        client.list_contacts.return_value = iter([ada(), ada(), ada()])

        result = run("list", "--limit", "2", "--fields", "names, emailAddresses")

        assert "Total: 2 contact(s)" in result.output
        assert client.list_contacts.call_args.kwargs["person_fields"] == [
            "names",
            "emailAddresses",
        ]

    def test_list_limit_zero_rejected(self, run, client):
        """--limit must be at least 1."""
        result = run("list", "--limit", "0")

        assert result.exit_code == 2
        client.list_contacts.assert_not_called()

    def test_list_closes_client(self, run, client):
        """The client session is closed once the command finishes."""
        client.list_contacts.return_value = iter([ada()])

        run("list")

        client.__exit__.assert_called_once()

    def test_list_api_error(self, run, client):
        """API errors are reported and exit with 1."""
        client.list_contacts.side_effect = APIError(403, "Denied", "PERMISSION_DENIED")

        result = run("list")

        assert result.exit_code == 1
        assert "403 PERMISSION_DENIED: Denied" in result.output
        client.__exit__.assert_called_once()

    def test_list_other(self, run, client):
        """Other contacts are listed."""
        client.list_other_contacts.return_value = iter(
            [Person(resource_name="otherContacts/c1", names=[{"displayName": "Bob"}])]
        )

        result = run("list-other")

        assert result.exit_code == 0
        assert "otherContacts/c1" in result.output
        assert "Total: 1 other contact(s)" in result.output

    def test_search(self, run, client):
        """Matches are printed."""
        client.search_contacts.return_value = [ada()]

        result = run("search", "ada")

        assert result.exit_code == 0
        client.search_contacts.assert_called_once_with("ada")
        assert "Ada Lovelace" in result.output

    def test_search_other_no_results(self, run, client):
        """--other searches other contacts."""
        client.search_other_contacts.return_value = []

        result = run("search", "--other", "zed")

        assert "No contacts found." in result.output
        client.search_other_contacts.assert_called_once_with("zed")

    def test_get_single(self, run, client):
        """A single resource name uses get_contact."""
        client.get_contact.return_value = ada()

        result = run("get", "people/c1")

        assert result.exit_code == 0
        client.get_contact.assert_called_once_with("people/c1")
        assert "Resource name: people/c1" in result.output
        assert "ada@example.com" in result.output

    def test_get_many(self, run, client):
        """Several resource names use get_batch_contacts."""
        client.get_batch_contacts.return_value = [ada(), ada()]

        result = run("get", "people/c1", "people/c2", "--fields", "names")

        assert result.exit_code == 0
        client.get_batch_contacts.assert_called_once_with(
            ["people/c1", "people/c2"], person_fields=["names"]
        )

    def test_get_not_found(self, run, client):
        """A 404 is reported."""
        client.get_contact.side_effect = APIError(404, "Not found", "NOT_FOUND")

        result = run("get", "people/c404")

        assert result.exit_code == 1
        assert "NOT_FOUND" in result.output

    def test_create(self, run, client):
        """Options become person fields."""
        client.create_contact.return_value = Person(resource_name="people/c9")

        result = run(
            "create",
            "--given", "Ada",
            "--family", "Lovelace",
            "--email", "ada@example.com",
            "--phone", "+1 555",
            "--note", "Mathematician",
        )

        assert result.exit_code == 0
        assert "Created: people/c9" in result.output
        person = client.create_contact.call_args.args[0]
        assert person.names == [{"givenName": "Ada", "familyName": "Lovelace"}]
        assert person.email_addresses == [{"value": "ada@example.com"}]
        assert person.phone_numbers == [{"value": "+1 555"}]
        assert person.biographies == [{"value": "Mathematician", "contentType": "TEXT_PLAIN"}]

    def test_create_requires_a_field(self, run, client):
        """An empty contact is refused."""
        result = run("create")

        assert result.exit_code == 1
        client.create_contact.assert_not_called()

    def test_delete_confirmed(self, run, client):
        """--yes skips the prompt."""
        result = run("delete", "people/c1", "--yes")

        assert result.exit_code == 0
        client.delete_contact.assert_called_once_with("people/c1")

    def test_delete_declined(self, run, client):
        """Answering no aborts."""
        result = run("delete", "people/c1", input="n\n")

        assert result.exit_code == 1
        client.delete_contact.assert_not_called()

    def test_set_photo(self, run, client):
        """set-photo uploads the file."""
        result = run("set-photo", "people/c1", "face.png", "--optimize")

        assert result.exit_code == 0
        client.update_contact_photo.assert_called_once_with(
            "people/c1", "face.png", optimize=True
        )

    def test_set_photo_error(self, run, client):
        """PhotoError is reported."""
        client.update_contact_photo.side_effect = PhotoError("Cannot read photo face.png")

        result = run("set-photo", "people/c1", "face.png")

        assert result.exit_code == 1
        assert "Cannot read photo" in result.output

    def test_delete_photo(self, run, client):
        """delete-photo removes the photo."""
        result = run("delete-photo", "people/c1")

        assert result.exit_code == 0
        client.delete_contact_photo.assert_called_once_with("people/c1")


class TestGroupCommands:
    """Tests for contact group commands."""

    @pytest.fixture
    def groups(self):
        return [
            ContactGroup(
                resource_name="contactGroups/g1",
                name="Family",
                group_type="USER_CONTACT_GROUP",
                member_count=3,
            ),
            ContactGroup(
                resource_name="contactGroups/myContacts",
                name="myContacts",
                group_type="SYSTEM_CONTACT_GROUP",
            ),
        ]

    def test_groups_hides_system(self, run, client, groups):
        """System groups are hidden by default."""
        client.list_contact_groups.return_value = iter(groups)

        result = run("groups")

        assert result.exit_code == 0
        assert "Family" in result.output
        assert "myContacts" not in result.output
        assert "Total: 1 group(s)" in result.output

    def test_groups_all(self, run, client, groups):
        """--all includes system groups."""
        client.list_contact_groups.return_value = iter(groups)

        result = run("groups", "--all")

        assert "myContacts" in result.output
        assert "Total: 2 group(s)" in result.output

    def test_groups_none(self, run, client):
        """An empty listing says so."""
        client.list_contact_groups.return_value = iter([])

        result = run("groups")

        assert "No contact groups found." in result.output

    def test_create_group(self, run, client):
        """create-group prints the new resource name."""
        client.create_contact_group.return_value = ContactGroup(
            resource_name="contactGroups/g2", name="Work"
        )

        result = run("create-group", "Work")

        assert result.exit_code == 0
        client.create_contact_group.assert_called_once_with("Work")
        assert "contactGroups/g2" in result.output

    def test_rename_group(self, run, client):
        """rename-group updates the name."""
        client.update_contact_group.return_value = ContactGroup(
            resource_name="contactGroups/g1", name="NewName"
        )

        result = run("rename-group", "contactGroups/g1", "NewName")

        assert result.exit_code == 0
        client.update_contact_group.assert_called_once_with("contactGroups/g1", "NewName")
        assert "NewName" in result.output

    def test_rename_group_conflict(self, run, client):
        """A name clash is reported."""
        client.update_contact_group.side_effect = APIError(409, "Exists", "ALREADY_EXISTS")

        result = run("rename-group", "contactGroups/g1", "Family")

        assert result.exit_code == 1
        assert "ALREADY_EXISTS" in result.output

    def test_delete_group(self, run, client):
        """delete-group forwards --delete-contacts."""
        result = run("delete-group", "contactGroups/g1", "--delete-contacts", "-y")

        assert result.exit_code == 0
        client.delete_contact_group.assert_called_once_with(
            "contactGroups/g1", delete_contacts=True
        )

    def test_add_members(self, run, client):
        """add-members adds every contact given."""
        result = run("add-members", "contactGroups/g1", "people/c1", "people/c2")

        assert result.exit_code == 0
        client.modify_contact_group.assert_called_once_with(
            "contactGroups/g1", add_resource_names=["people/c1", "people/c2"]
        )
        assert "Added 2 contact(s)" in result.output

    def test_remove_members(self, run, client):
        """remove-members removes every contact given."""
        result = run("remove-members", "contactGroups/g1", "people/c1")

        assert result.exit_code == 0
        client.modify_contact_group.assert_called_once_with(
            "contactGroups/g1", remove_resource_names=["people/c1"]
        )
