"""Commands to view hook subscriptions, event types, secrets and delivered events."""

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

_GROUP_LONG = """Manage your hook subscriptions.

A hook subscription registers your interest to be notified of events happening
in the the Prolific Platform."""

_LIST_LONG = """List your hook subscriptions.

A hook subscription registers your interest to be notified of events happening
in the the Prolific Platform. Given a workspace ID, this will return a list of
subscriptions and explain which event types you are listening to."""

_LIST_EXAMPLE = """\b
This will use your default workspace
$ prolific hook list

\b
This will use the specified workspace
$ prolific hook list -w 3461321e223a605c7a4f7612

\b
You can couple this with options to only show disabled or enabled subscriptions
$ prolific hook list -w 3461321e223a605c7a4f7612 -d
$ prolific hook list -w 3461321e223a605c7a4f7612 -e"""

_EVENT_TYPE_LONG = """List event types you can subscribe to.

There are several events in the Prolific Platform you can listen to. This
command aims to surface those events so you can decide what to register
interest for."""

_EVENTS_LONG = """List all events sent to your subscription

If you have a subscription for a Prolific Platform event, we will deliver a
payload to your target URL. We save this audit record. This means you can query
the Prolific Platform to get events for a given subscription. This maybe be
useful for reconciliation or testing."""

_EVENTS_EXAMPLE = """\b
Get the last 200 events for the 637e081185389c0ca5595915 subscription
$ prolific hook events -s 637e081185389c0ca5595915

\b
You can also use the standard limit and offset parameters. This will get you
the last 10 events for your subscription.
$ prolific hook events -s 637e081185389c0ca5595915 -l 10

\b
This will offset by 10 events, and get the next 10 events.
$ prolific hook events -s 637e081185389c0ca5595915 -l 10 -o 10"""


@contextmanager
def _reporting_errors() -> Iterator[None]:
    try:
        yield
    except (CommandError, APIError) as err:
        raise CommandError(f"error: {err}") from err


def _stream(out: Optional[IO[str]]) -> IO[str]:
    return out if out is not None else sys.stdout


def new_hook_command(
    client: Any, out: Optional[IO[str]] = None, default_workspace: str = ""
) -> click.Group:
    """Build the `hook` command group."""
    group = click.Group(
        name="hook",
        short_help="Manage and view your hook subscriptions",
        help=_GROUP_LONG,
    )
    group.add_command(new_list_command("list", client, out, default_workspace))
    group.add_command(new_event_type_command("event-types", client, out))
    group.add_command(new_list_secret_command("secrets", client, out, default_workspace))
    group.add_command(new_event_list_command("events", client, out))
    return group


def new_list_command(
    name: str, client: Any, out: Optional[IO[str]] = None, default_workspace: str = ""
) -> click.Command:
    """Build the command that lists hook subscriptions."""

    @click.command(
        name=name,
        short_help="Provide details about your hook subscriptions",
        help=_LIST_LONG,
        epilog=_LIST_EXAMPLE,
    )
    @click.option(
        "-w",
        "--workspace",
        "workspace_id",
        default=default_workspace or "",
        help="Filter hooks by workspace.",
    )
    @click.option(
        "-e",
        "--enabled/--no-enabled",
        default=True,
        help="Filter on enabled subscriptions.",
    )
    @click.option(
        "-d",
        "--disabled",
        is_flag=True,
        default=False,
        help="Filter on disabled subscriptions.",
    )
    @click.option(
        "-l",
        "--limit",
        type=int,
        default=DEFAULT_RECORD_LIMIT,
        help="Limit the number of subscriptions returned",
    )
    @click.option(
        "-o",
        "--offset",
        type=int,
        default=DEFAULT_RECORD_OFFSET,
        help="The number of subscriptions to offset",
    )
    @click.argument("args", nargs=-1)
    def command(
        workspace_id: str,
        enabled: bool,
        disabled: bool,
        limit: int,
        offset: int,
        args: tuple,
    ) -> None:
        with _reporting_errors():
            render_hooks(
                client, workspace_id, enabled and not disabled, limit, offset, _stream(out)
            )

    return command


def new_event_type_command(
    name: str, client: Any, out: Optional[IO[str]] = None
) -> click.Command:
    """Build the command that lists the event types a hook can subscribe to."""

    @click.command(
        name=name,
        short_help="List of event types you can subscribe to",
        help=_EVENT_TYPE_LONG,
    )
    @click.argument("args", nargs=-1)
    def command(args: tuple) -> None:
        with _reporting_errors():
            render_event_types(client, _stream(out))

    return command


def new_list_secret_command(
    name: str, client: Any, out: Optional[IO[str]] = None, default_workspace: str = ""
) -> click.Command:
    """Build the command that lists the hook secrets of a workspace."""

    @click.command(name=name, short_help="List your hook secrets", help="List your hook secrets")
    @click.option(
        "-w",
        "--workspace",
        "workspace_id",
        default=default_workspace or "",
        help="Filter secrets by workspace.",
    )
    @click.argument("args", nargs=-1)
    def command(workspace_id: str, args: tuple) -> None:
        with _reporting_errors():
            render_secrets(client, workspace_id, _stream(out))

    return command


def new_event_list_command(
    name: str, client: Any, out: Optional[IO[str]] = None
) -> click.Command:
    """Build the command that lists events delivered to a subscription."""

    @click.command(
        name=name,
        short_help="Provide a list of events for your subscription",
        help=_EVENTS_LONG,
        epilog=_EVENTS_EXAMPLE,
    )
    @click.option(
        "-s",
        "--subscription",
        "subscription_id",
        default="",
        help="List the events for a subscription",
    )
    @click.option(
        "-l",
        "--limit",
        type=int,
        default=DEFAULT_RECORD_LIMIT,
        help="Limit the number of events returned",
    )
    @click.option(
        "-o",
        "--offset",
        type=int,
        default=DEFAULT_RECORD_OFFSET,
        help="The number of events to offset",
    )
    @click.argument("args", nargs=-1)
    def command(subscription_id: str, limit: int, offset: int, args: tuple) -> None:
        with _reporting_errors():
            render_events(client, subscription_id, limit, offset, _stream(out))

    return command


def render_hooks(
    client: Any, workspace_id: str, enabled: bool, limit: int, offset: int, out: IO[str]
) -> None:
    """Write a table of the hook subscriptions."""
    hooks = client.get_hooks(workspace_id, enabled, limit, offset)
    count = hooks.count if hooks.count is not None else 0

    rows = [("ID", "Event", "Target URL", "Enabled", "Workspace ID")]
    rows.extend(
        (
            hook.id,
            hook.event_type,
            hook.target_url,
            "true" if hook.is_enabled else "false",
            hook.workspace_id,
        )
        for hook in hooks.results
    )
    out.write(format_table(rows))
    out.write(f"\n{render_record_counter(len(hooks.results), count)}\n")


def render_event_types(client: Any, out: IO[str]) -> None:
    """Write a table of the event types that can be subscribed to."""
    event_types = client.get_hook_event_types()

    rows = [("Event Type", "Description")]
    rows.extend((event.event_type, event.description) for event in event_types.results)
    out.write(format_table(rows))


def render_secrets(client: Any, workspace_id: str, out: IO[str]) -> None:
    """Write a table of the hook secrets in a workspace."""
    secrets = client.get_hook_secrets(workspace_id)

    rows = [("ID", "Secret", "Workspace ID")]
    rows.extend((item.id, item.value, item.workspace_id) for item in secrets.results)
    out.write(format_table(rows))


def render_events(
    client: Any, subscription_id: str, limit: int, offset: int, out: IO[str]
) -> None:
    """Write a table of the events delivered to a subscription."""
    if not subscription_id:
        raise CommandError("please provide a subscription ID")

    events = client.get_events(subscription_id, limit, offset)
    count = events.count if events.count is not None else 0

    rows = [("ID", "Created", "Updated", "Status", "Resource ID")]
    rows.extend(
        (
            event.id,
            format_datetime(event.date_created),
            format_datetime(event.date_updated),
            event.status,
            event.resource_id,
        )
        for event in events.results
    )
    out.write(format_table(rows))
    out.write(f"\n{render_record_counter(len(events.results), count)}\n")