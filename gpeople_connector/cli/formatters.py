"""CLI output formatting functions.

This module contains functions for displaying people and contact groups
on the command line.
"""

import click

from gpeople_connector.models.contact_group import ContactGroup
from gpeople_connector.models.person import Person


def format_person_row(person: Person) -> str:
    """Return a one-line summary: resource name, name, first email."""
    name = person.display_name or "(no name)"
    email = person.emails[0] if person.emails else ""
    return f"{person.resource_name or '':<24} {name:<32} {email}"


def show_person(person: Person) -> None:
    """
    Display the populated fields of a person.

    Args:
        person: The person to display
    """
    click.echo(f"Resource name: {person.resource_name}")
    if person.etag:
        click.echo(f"Etag:          {person.etag}")
    click.echo(f"Name:          {person.display_name or '(no name)'}")

    if person.emails:
        click.echo("Emails:")
        for email in person.emails:
            click.echo(f"  {email}")

    if person.phones:
        click.echo("Phones:")
        for phone in person.phones:
            click.echo(f"  {phone}")

    organizations = [o.get("name") for o in person.organizations if o.get("name")]
    if organizations:
        click.echo("Organizations:")
        for org in organizations:
            click.echo(f"  {org}")

    groups = [
        m["contactGroupMembership"].get("contactGroupResourceName")
        for m in person.memberships
        if "contactGroupMembership" in m
    ]
    if groups:
        click.echo("Groups:")
        for group in groups:
            click.echo(f"  {group}")

    if person.biographies:
        click.echo(f"Notes:         {person.biographies[0].get('value', '')}")


def show_groups(groups: list[ContactGroup], verbose: bool = False) -> None:
    """
    Display contact groups as a table.

    Args:
        groups: Groups to display
        verbose: Also list resource names
    """
    click.echo(f"{'Name':<40} {'Type':<20} {'Members':<10}")
    click.echo("-" * 70)

    ordered = sorted(groups, key=lambda g: g.name.lower())
    for group in ordered:
        group_type = "User" if group.is_user_group() else "System"
        click.echo(f"{group.name:<40} {group_type:<20} {group.member_count:<10}")

    click.echo()
    click.echo(f"Total: {len(groups)} group(s)")

    if verbose:
        click.echo()
        click.echo("Resource names:")
        for group in ordered:
            click.echo(f"  {group.name}: {group.resource_name}")
