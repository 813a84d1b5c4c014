"""Commands to list participant groups and view their members."""

from __future__ import annotations

import sys
from contextlib import contextmanager
from typing import IO, Any, Iterator, Optional

import click

from prolificcli.client import DEFAULT_RECORD_LIMIT, DEFAULT_RECORD_OFFSET, APIError
from prolificcli.commands.base import (
    CommandError,
    format_datetime,
    format_table,
    render_record_counter,
)

_GROUP_LONG = """List your participant groups

Participant Groups allow you to create, modify, and use lists of participants
directly within the Prolific ecosystem.

Participant groups allow you do the following:

\b
- Create a new participant group within the scope of a project.
- Add and remove users manually to / from the participant group.
- Use one or more participant groups as eligibility requirements for a new study.
- Combined with study completion codes, automatically add or remove participants
  from a group when they submit a response to your study with the correct code."""

_LIST_LONG = """List your participant groups

Participant groups are assigned to a project within your workspace."""

_LIST_EXAMPLE = """\b
List the participant groups you have defined in a given project
$ prolific participant list -p 6261321e223a605c7a4f7623"""

_VIEW_LONG = """View your participant group

A participant group contains one or more participants."""

_VIEW_EXAMPLE = """\b
List the participants in your participant group
$ prolific participant view 6429b0ea05b2a24cac83c3a4"""


@contextmanager
def _reporting_errors() -> Iterator[None]:
    try:
        yield
    except (CommandError, APIError) as err:
        raise CommandError(f"error: {err}") from err


def _stream(out: Optional[IO[str]]) -> IO[str]:
    return out if out is not None else sys.stdout


def new_participant_command(client: Any, out: Optional[IO[str]] = None) -> click.Group:
    """Build the `participant` command group."""
    group = click.Group(
        name="participant",
        short_help="Manage and view your participant groups",
        help=_GROUP_LONG,
    )
    group.add_command(new_list_command("list", client, out))
    group.add_command(new_view_command("view", client, out))
    return group


def new_list_command(
    name: str, client: Any, out: Optional[IO[str]] = None
) -> click.Command:
    """Build the command that lists participant groups of a project."""

    @click.command(
        name=name,
        short_help="Provide details about your participant groups",
        help=_LIST_LONG,
        epilog=_LIST_EXAMPLE,
    )
    @click.option(
        "-p", "--project", "project_id", default="",
        help="Filter participant groups by project.",
    )
    @click.option(
        "-l",
        "--limit",
        type=int,
        default=DEFAULT_RECORD_LIMIT,
        help="Limit the number of participant groups returned",
    )
    @click.option(
        "-o",
        "--offset",
        type=int,
        default=DEFAULT_RECORD_OFFSET,
        help="The number of participant groups to offset",
    )
    @click.argument("args", nargs=-1)
    def command(project_id: str, limit: int, offset: int, args: tuple) -> None:
        with _reporting_errors():
            render_groups(client, project_id, limit, offset, _stream(out))

    return command


def new_view_command(
    name: str, client: Any, out: Optional[IO[str]] = None
) -> click.Command:
    """Build the command that lists the members of a participant group."""

    @click.command(
        name=name,
        short_help="Provide details about your participant group",
        help=_VIEW_LONG,
        epilog=_VIEW_EXAMPLE,
    )
    @click.argument("args", nargs=-1)
    def command(args: tuple) -> None:
        group_id = args[0] if args else ""
        with _reporting_errors():
            render_group(client, group_id, _stream(out))

    return command


def render_groups(
    client: Any, project_id: str, limit: int, offset: int, out: IO[str]
) -> None:
    """Write a table of the participant groups in a project."""
    if not project_id:
        raise CommandError("please provide a project ID")

    groups = client.get_participant_groups(project_id, limit, offset)
    count = groups.count if groups.count is not None else 0

    rows = [("ID", "Name")]
    rows.extend((group.id, group.name) for group in groups.results)
    out.write(format_table(rows))
    out.write(f"\n{render_record_counter(len(groups.results), count)}\n")


def render_group(client: Any, group_id: str, out: IO[str]) -> None:
    """Write a table of the participants in a group."""
    if not group_id:
        raise CommandError("please provide a participant group ID")

    membership = client.get_participant_group(group_id)

    rows = [("Participant ID", "Date added")]
    rows.extend(
        (member.participant_id, format_datetime(member.datetime_created))
        for member in membership.results
    )
    out.write(format_table(rows))