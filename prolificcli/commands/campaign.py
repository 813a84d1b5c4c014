"""Command that lists the campaigns of a workspace."""

from __future__ import annotations

import sys
from contextlib import contextmanager
from typing import IO, Any, Iterator, Optional

import click

from prolificcli.client import DEFAULT_RECORD_LIMIT, DEFAULT_RECORD_OFFSET, APIError
from prolificcli.commands.base import CommandError, format_table, render_record_counter

_LONG = """List your campaigns

Bring your own participants.

Researchers can bring participants to their workspace by creating a campaign.
A campaign is a unique URL that can be shared with potential participants to sign
up for a Prolific participant account."""

_EXAMPLE = """\b
List your campaigns
$ prolific campaign list -w <workspace_id>

\b
Utilise the paging options to limit your campaigns, for example one campaign
$ prolific campaign list -w <workspace_id> -l 1

\b
Offset records in the result set, for example by 2
$ prolific campaign list -w <workspace_id> -l 1 -o 2"""


@contextmanager
def _reporting_errors() -> Iterator[None]:
    try:
        yield
    except (CommandError, APIError) as err:
        raise CommandError(f"error: {err}") from err


def new_list_command(
    name: str, client: Any, out: Optional[IO[str]] = None, default_workspace: str = ""
) -> click.Command:
    """Build the command that lists campaigns."""

    @click.command(
        name=name,
        short_help="Provide details about your campaigns",
        help=_LONG,
        epilog=_EXAMPLE,
    )
    @click.option(
        "-w",
        "--workspace",
        "workspace_id",
        default=default_workspace or "",
        help="Filter campaigns by workspace.",
    )
    @click.option(
        "-l",
        "--limit",
        type=int,
        default=DEFAULT_RECORD_LIMIT,
        help="Limit the number of campaigns returned",
    )
    @click.option(
        "-o",
        "--offset",
        type=int,
        default=DEFAULT_RECORD_OFFSET,
        help="The number of campaigns to offset",
    )
    @click.argument("args", nargs=-1)
    def command(workspace_id: str, limit: int, offset: int, args: tuple) -> None:
        with _reporting_errors():
            render_campaigns(
                client, workspace_id, limit, offset, out if out is not None else sys.stdout
            )

    return command


def render_campaigns(
    client: Any, workspace_id: str, limit: int, offset: int, out: IO[str]
) -> None:
    """Write a table of the campaigns in a workspace."""
    if not workspace_id:
        raise CommandError("please provide a workspace ID")

    campaigns = client.get_campaigns(workspace_id, limit, offset)

    rows = [("ID", "Name", "Link")]
    rows.extend((c.id, c.name, c.signup_link) for c in campaigns.results)
    out.write(format_table(rows))
    total = campaigns.count or 0
    out.write(f"\n{render_record_counter(len(campaigns.results), total)}\n")