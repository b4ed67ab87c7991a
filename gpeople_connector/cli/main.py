"""
Command-line interface for gpeople_connector.

Provides CLI commands for authentication and for every contact, other
contact and contact group operation of the People API client.

Usage:
    # Show help
    gpeople --help

    # Authenticate
    gpeople auth

    # Contacts
    gpeople list --limit 20
    gpeople get people/c12345
    gpeople create --given Ada --family Lovelace --email ada@example.com

    # Groups
    gpeople groups
    gpeople rename-group contactGroups/abc123 "New Name"
"""

import logging
import sys
from collections.abc import Iterator
from itertools import islice
from pathlib import Path
from typing import NoReturn

import click
import requests

from gpeople_connector import __version__
from gpeople_connector.api.errors import PeopleAPIError
from gpeople_connector.api.people_api import PeopleClient
from gpeople_connector.api.photo import PhotoError
from gpeople_connector.auth.google_auth import AuthenticationError, GoogleAuth
from gpeople_connector.cli.formatters import format_person_row, show_groups, show_person
from gpeople_connector.config.connection import ConnectionConfig
from gpeople_connector.config.loader import (
    DEFAULT_CONFIG_FILE,
    ConfigError,
    ConfigLoader,
    resolve_config_dir,
)
from gpeople_connector.models.fields import SortOrder
from gpeople_connector.models.pages import ListOptions
from gpeople_connector.models.person import Person
from gpeople_connector.utils.logging import cleanup_old_logs, setup_logging

# Errors reported to the user instead of a traceback
CLI_ERRORS = (
    PeopleAPIError,
    PhotoError,
    AuthenticationError,
    ValueError,
    requests.RequestException,
)

logger = logging.getLogger(__name__)


def get_config_dir(config_dir: str | None) -> Path:
    """Get the configuration directory path."""
    return resolve_config_dir(config_dir)


def get_config_file(config_dir: Path, config_file: str | None) -> Path:
    """Get the configuration file path."""
    if config_file:
        return Path(config_file)
    return config_dir / DEFAULT_CONFIG_FILE


def split_fields(value: str | None) -> list[str] | None:
    """Split a comma-separated --fields option, or None if not given."""
    if not value:
        return None
    return [f.strip() for f in value.split(",") if f.strip()]


def fail(message: str) -> NoReturn:
    """Print an error and exit with status 1."""
    click.echo(click.style(f"Error: {message}", fg="red"), err=True)
    sys.exit(1)


def get_client(ctx: click.Context) -> PeopleClient:
    """
    Build a PeopleClient from the loaded configuration.

    Uses the ``auth`` section of the config file when present, otherwise the
    token stored by ``gpeople auth``. Commands use the result as a context
    manager so its session is closed on exit.
    """
    connection: ConnectionConfig = ctx.obj["connection"]

    if ctx.obj["config"].get("auth"):
        try:
            return PeopleClient.from_config(connection)
        except AuthenticationError as e:
            fail(str(e))

    auth = GoogleAuth(config_dir=ctx.obj["config_dir"])
    creds = auth.get_credentials()
    if creds is None:
        click.echo(click.style("Error: not authenticated.", fg="red"), err=True)
        click.echo("Run: gpeople auth", err=True)
        sys.exit(1)

    return PeopleClient(credentials=creds, config=connection)


def take(items: Iterator, limit: int | None) -> Iterator:
    """Limit an iterator without consuming more pages than needed."""
    return items if limit is None else islice(items, limit)


@click.group()
@click.version_option(version=__version__, prog_name="gpeople")
@click.option(
    "--verbose", "-v", is_flag=True, help="Enable verbose output with detailed logging."
)
@click.option(
    "--config-dir",
    "-c",
    type=click.Path(exists=False, file_okay=False, dir_okay=True),
    envvar="GPEOPLE_CONNECTOR_CONFIG_DIR",
    help="Configuration directory path (default: ~/.gpeople-connector).",
)
@click.option(
    "--config-file",
    "-f",
    type=click.Path(exists=False, file_okay=True, dir_okay=False),
    envvar="GPEOPLE_CONNECTOR_CONFIG_FILE",
    help="Configuration file path (default: <config-dir>/config.yaml).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    config_dir: str | None,
    config_file: str | None,
) -> None:
    """
    Google People API client.

    List, search, create, update and delete Google contacts, other contacts
    and contact groups.
    """
    ctx.ensure_object(dict)

    resolved_config_dir = get_config_dir(config_dir)
    resolved_config_file = get_config_file(resolved_config_dir, config_file)

    ctx.obj["config_dir"] = resolved_config_dir
    ctx.obj["config_file"] = resolved_config_file

    config = {}
    try:
        loader = ConfigLoader(config_dir=resolved_config_dir)
        config = loader.load_from_file(resolved_config_file)
        if config:
            loader.validate(config)
    except ConfigError as e:
        # Continue with defaults so auth/help still work
        click.echo(
            click.style(f"Warning: Configuration error: {e}", fg="yellow"), err=True
        )
        config = {}

    ctx.obj["config"] = config
    ctx.obj["connection"] = ConnectionConfig.from_dict(config)

    effective_verbose = verbose or config.get("verbose", False)
    ctx.obj["verbose"] = effective_verbose

    log_dir = Path(config.get("log_dir") or resolved_config_dir / "logs")
    setup_logging(verbose=effective_verbose, log_dir=log_dir)
    cleanup_old_logs(log_dir, keep_count=config.get("log_retention_count", 10))


# =============================================================================
# Auth Command
# =============================================================================


@cli.command("auth")
@click.option(
    "--force",
    "-f",
    is_flag=True,
    help="Force re-authentication even if already authenticated.",
)
@click.option("--clear", is_flag=True, help="Remove stored credentials and exit.")
@click.pass_context
def auth_command(ctx: click.Context, force: bool, clear: bool) -> None:
    """
    Authenticate with Google.

    Opens a browser window to complete the OAuth flow and stores the
    credentials in the configuration directory.
    """
    auth = GoogleAuth(config_dir=ctx.obj["config_dir"])

    if clear:
        if auth.clear_credentials():
            click.echo("Stored credentials removed.")
        else:
            click.echo("No stored credentials found.")
        return

    if not force and auth.is_authenticated():
        click.echo("Already authenticated. Use --force to re-authenticate.")
        return

    try:
        auth.authenticate(force_reauth=force)
    except (AuthenticationError, FileNotFoundError) as e:
        logger.error(f"Authentication failed: {e}")
        fail(str(e))

    click.echo(click.style("Authentication successful.", fg="green"))


# =============================================================================
# Contact Commands
# =============================================================================


@cli.command("list")
@click.option("--fields", help="Comma-separated person fields to request.")
@click.option("--page-size", type=int, help="Contacts per page (max 1000).")
@click.option(
    "--sort",
    type=click.Choice([s.value for s in SortOrder], case_sensitive=False),
    help="Sort order.",
)
@click.option(
    "--limit", "-n", type=click.IntRange(min=1), help="Stop after this many contacts."
)
@click.pass_context
def list_command(
    ctx: click.Context,
    fields: str | None,
    page_size: int | None,
    sort: str | None,
    limit: int | None,
) -> None:
    """List your contacts."""
    options = ListOptions(
        page_size=page_size or ctx.obj["connection"].page_size,
        sort_order=SortOrder(sort.upper()) if sort else None,
    )
    kwargs = {"person_fields": split_fields(fields)} if fields else {}

    count = 0
    with get_client(ctx) as client:
        try:
            for person in take(client.list_contacts(options=options, **kwargs), limit):
                click.echo(format_person_row(person))
                count += 1
        except CLI_ERRORS as e:
            logger.error(f"Failed to list contacts: {e}")
            fail(str(e))

    click.echo()
    click.echo(f"Total: {count} contact(s)")


@cli.command("list-other")
@click.option("--page-size", type=int, help="Contacts per page (max 1000).")
@click.option(
    "--limit", "-n", type=click.IntRange(min=1), help="Stop after this many contacts."
)
@click.pass_context
def list_other_command(
    ctx: click.Context, page_size: int | None, limit: int | None
) -> None:
    """List your "other contacts" (people you have interacted with)."""
    options = ListOptions(page_size=page_size or ctx.obj["connection"].page_size)

    count = 0
    with get_client(ctx) as client:
        try:
            for person in take(client.list_other_contacts(options=options), limit):
                click.echo(format_person_row(person))
                count += 1
        except CLI_ERRORS as e:
            logger.error(f"Failed to list other contacts: {e}")
            fail(str(e))

    click.echo()
    click.echo(f"Total: {count} other contact(s)")


@cli.command("search")
@click.argument("query")
@click.option("--other", is_flag=True, help="Search other contacts instead.")
@click.pass_context
def search_command(ctx: click.Context, query: str, other: bool) -> None:
    """Search contacts by name, email or phone prefix."""
    with get_client(ctx) as client:
        try:
            if other:
                people = client.search_other_contacts(query)
            else:
                people = client.search_contacts(query)
        except CLI_ERRORS as e:
            fail(str(e))

    if not people:
        click.echo("No contacts found.")
        return

    for person in people:
        click.echo(format_person_row(person))


@cli.command("get")
@click.argument("resource_names", nargs=-1, required=True)
@click.option("--fields", help="Comma-separated person fields to request.")
@click.pass_context
def get_command(
    ctx: click.Context, resource_names: tuple[str, ...], fields: str | None
) -> None:
    """Show one or more contacts by resource name."""
    kwargs = {"person_fields": split_fields(fields)} if fields else {}

    with get_client(ctx) as client:
        try:
            if len(resource_names) == 1:
                people = [client.get_contact(resource_names[0], **kwargs)]
            else:
                people = client.get_batch_contacts(list(resource_names), **kwargs)
        except CLI_ERRORS as e:
            fail(str(e))

    for i, person in enumerate(people):
        if i:
            click.echo()
        show_person(person)


@cli.command("create")
@click.option("--given", help="Given (first) name.")
@click.option("--family", help="Family (last) name.")
@click.option("--email", "emails", multiple=True, help="Email address (repeatable).")
@click.option("--phone", "phones", multiple=True, help="Phone number (repeatable).")
@click.option("--note", help="Notes.")
@click.pass_context
def create_command(
    ctx: click.Context,
    given: str | None,
    family: str | None,
    emails: tuple[str, ...],
    phones: tuple[str, ...],
    note: str | None,
) -> None:
    """Create a contact."""
    name = {k: v for k, v in (("givenName", given), ("familyName", family)) if v}
    person = Person(
        names=[name] if name else [],
        email_addresses=[{"value": e} for e in emails],
        phone_numbers=[{"value": p} for p in phones],
        biographies=[{"value": note, "contentType": "TEXT_PLAIN"}] if note else [],
    )
    if not person.to_api_format():
        fail("Provide at least one of --given, --family, --email, --phone, --note.")

    with get_client(ctx) as client:
        try:
            created = client.create_contact(person)
        except CLI_ERRORS as e:
            fail(str(e))

    click.echo(click.style(f"Created: {created.resource_name}", fg="green"))


@cli.command("delete")
@click.argument("resource_name")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation prompt.")
@click.pass_context
def delete_command(ctx: click.Context, resource_name: str, yes: bool) -> None:
    """Delete a contact."""
    if not yes:
        click.confirm(f"Delete {resource_name}?", abort=True)

    with get_client(ctx) as client:
        try:
            client.delete_contact(resource_name)
        except CLI_ERRORS as e:
            fail(str(e))

    click.echo(f"Deleted: {resource_name}")


@cli.command("set-photo")
@click.argument("resource_name")
@click.argument("photo", type=click.Path(dir_okay=False))
@click.option(
    "--optimize", is_flag=True, help="Convert to JPEG and shrink before uploading."
)
@click.pass_context
def set_photo_command(
    ctx: click.Context, resource_name: str, photo: str, optimize: bool
) -> None:
    """Upload PHOTO as the contact's photo."""
    with get_client(ctx) as client:
        try:
            client.update_contact_photo(resource_name, photo, optimize=optimize)
        except CLI_ERRORS as e:
            fail(str(e))

    click.echo(f"Photo updated: {resource_name}")


@cli.command("delete-photo")
@click.argument("resource_name")
@click.pass_context
def delete_photo_command(ctx: click.Context, resource_name: str) -> None:
    """Remove the contact's photo."""
    with get_client(ctx) as client:
        try:
            client.delete_contact_photo(resource_name)
        except CLI_ERRORS as e:
            fail(str(e))

    click.echo(f"Photo removed: {resource_name}")


# =============================================================================
# Group Commands
# =============================================================================


@cli.command("groups")
@click.option(
    "--all",
    "-A",
    "show_all",
    is_flag=True,
    help="Show all groups including system groups.",
)
@click.pass_context
def groups_command(ctx: click.Context, show_all: bool) -> None:
    """
    List contact groups.

    System groups (myContacts, starred) are hidden unless --all is given.
    """
    with get_client(ctx) as client:
        try:
            groups = list(client.list_contact_groups())
        except CLI_ERRORS as e:
            fail(str(e))

    if not show_all:
        groups = [g for g in groups if g.is_user_group()]

    if not groups:
        click.echo("No contact groups found.")
        if not show_all:
            click.echo("Use --all to include system groups.")
        return

    show_groups(groups, verbose=ctx.obj["verbose"])


@cli.command("create-group")
@click.argument("name")
@click.pass_context
def create_group_command(ctx: click.Context, name: str) -> None:
    """Create a contact group called NAME."""
    with get_client(ctx) as client:
        try:
            group = client.create_contact_group(name)
        except CLI_ERRORS as e:
            fail(str(e))

    click.echo(click.style(f"Created: {group.resource_name} ({group.name})", fg="green"))


@cli.command("rename-group")
@click.argument("resource_name")
@click.argument("name")
@click.pass_context
def rename_group_command(ctx: click.Context, resource_name: str, name: str) -> None:
    """Rename the contact group RESOURCE_NAME to NAME."""
    with get_client(ctx) as client:
        try:
            group = client.update_contact_group(resource_name, name)
        except CLI_ERRORS as e:
            fail(str(e))

    click.echo(f"Renamed: {group.resource_name} -> {group.name}")


@cli.command("delete-group")
@click.argument("resource_name")
@click.option(
    "--delete-contacts", is_flag=True, help="Also delete the contacts in the group."
)
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation prompt.")
@click.pass_context
def delete_group_command(
    ctx: click.Context, resource_name: str, delete_contacts: bool, yes: bool
) -> None:
    """Delete a contact group."""
    if not yes:
        what = " and its contacts" if delete_contacts else ""
        click.confirm(f"Delete {resource_name}{what}?", abort=True)

    with get_client(ctx) as client:
        try:
            client.delete_contact_group(resource_name, delete_contacts=delete_contacts)
        except CLI_ERRORS as e:
            fail(str(e))

    click.echo(f"Deleted: {resource_name}")


@cli.command("add-members")
@click.argument("group")
@click.argument("resource_names", nargs=-1, required=True)
@click.pass_context
def add_members_command(
    ctx: click.Context, group: str, resource_names: tuple[str, ...]
) -> None:
    """Add contacts to GROUP."""
    with get_client(ctx) as client:
        try:
            client.modify_contact_group(group, add_resource_names=list(resource_names))
        except CLI_ERRORS as e:
            fail(str(e))

    click.echo(f"Added {len(resource_names)} contact(s) to {group}")


@cli.command("remove-members")
@click.argument("group")
@click.argument("resource_names", nargs=-1, required=True)
@click.pass_context
def remove_members_command(
    ctx: click.Context, group: str, resource_names: tuple[str, ...]
) -> None:
    """Remove contacts from GROUP."""
    with get_client(ctx) as client:
        try:
            client.modify_contact_group(
                group, remove_resource_names=list(resource_names)
            )
        except CLI_ERRORS as e:
            fail(str(e))

    click.echo(f"Removed {len(resource_names)} contact(s) from {group}")
