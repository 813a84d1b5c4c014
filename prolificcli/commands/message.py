"""Commands to list and send messages."""

from __future__ import annotations

import sys
from contextlib import contextmanager
from typing import IO, Any, Iterator, Optional

import click

from prolificcli.client import APIError
from prolificcli.commands.base import (
    CommandError,
    format_datetime,
    format_table,
    render_application_link,
)

_LIST_LONG = """Retrieve your messages from the Prolific Platform

This command will allow you to send and retrieve messages on the Prolific
Platform. Please note that if you retrieve messages via the CLI, the notification
count is not updated in the web application."""

_LIST_EXAMPLE = """\b
If you want to see all the messages between you and another user, you can provide
their user ID
$ prolific message list -u 6262a15c0c745235a82a150c

\b
If, however, you want to see all messages in the last 30 days (or less), you can
run
$ prolific message list -c 2023-05-01

\b
You can also return unread messages. Please note, that if you call this command,
it will not mark the messages as read in the web application.
$ prolific message list -U"""

_SEND_LONG = """Send messages to other users

If participants have ever taken one of your studies before, you can message then.
This will appear in their Message Centre."""

_SEND_EXAMPLE = """\b
Sending a message takes a few arguments.
$ prolific message send -r participant-id -s study-id -b "This is my message"

Please make sure you quote the message with "" for the -b flag."""


@contextmanager
def _reporting_errors() -> Iterator[None]:
    try:
        yield
    except (CommandError, APIError) as err:
        raise CommandError(f"error: {err}") from err


def _stream(out: Optional[IO[str]]) -> IO[str]:
    return out if out is not None else sys.stdout


def new_message_command(client: Any, out: Optional[IO[str]] = None) -> click.Group:
    """Build the `message` command group."""
    group = click.Group(
        name="message",
        short_help="Send and retrieve messages",
        help="Send and retrieve messages",
    )
    group.add_command(new_list_command("list", client, out))
    group.add_command(new_send_command("send", client, out))
    return group


def new_list_command(
    name: str, client: Any, out: Optional[IO[str]] = None
) -> click.Command:
    """Build the command that lists messages."""

    @click.command(
        name=name,
        short_help="View all your messages",
        help=_LIST_LONG,
        epilog=_LIST_EXAMPLE,
    )
    @click.option("-u", "--user", "user_id", default="", help="Filter messages sent to user.")
    @click.option(
        "-c",
        "--created_after",
        "created_after",
        default="",
        help="Filter messages created after a certain date (YYYY-MM-DD). "
        "You can only fetch up to the last 30 days of messages.",
    )
    @click.option(
        "-U",
        "--unread",
        is_flag=True,
        default=False,
        help="Filter messages to show only unread. Cannot be used with any other flags.",
    )
    @click.argument("args", nargs=-1)
    def command(user_id: str, created_after: str, unread: bool, args: tuple) -> None:
        with _reporting_errors():
            render_messages(client, user_id, created_after, unread, _stream(out))

    return command


def new_send_command(
    name: str, client: Any, out: Optional[IO[str]] = None
) -> click.Command:
    """Build the command that sends a message."""

    @click.command(
        name=name,
        short_help="Send a message",
        help=_SEND_LONG,
        epilog=_SEND_EXAMPLE,
    )
    @click.option("-r", "--recipient", "recipient_id", default="", help="Specify the recipient.")
    @click.option(
        "-s",
        "--study",
        "study_id",
        default="",
        help="Specify the study to which the message relates.",
    )
    @click.option("-b", "--body", default="", help="Specific the body of message.")
    @click.argument("args", nargs=-1)
    def command(recipient_id: str, study_id: str, body: str, args: tuple) -> None:
        with _reporting_errors():
            send_message(client, recipient_id, study_id, body, _stream(out))

    return command


def render_messages(
    client: Any,
    user_id: Optional[str],
    created_after: Optional[str],
    unread: bool,
    out: IO[str],
) -> None:
    """Write a table of messages, either unread ones or those matching the filters."""
    if unread and (user_id or created_after):
        raise CommandError("'unread' cannot be used with any other flags")

    if unread:
        messages = client.get_unread_messages()
        rows = [("Sender ID", "Datetime Created", "Body")]
        rows.extend(
            (m.sender, format_datetime(m.datetime_created), m.body)
            for m in messages.results
        )
    else:
        messages = client.get_messages(user_id or None, created_after or None)
        rows = [("Sender ID", "Study ID", "Datetime Created", "Body")]
        rows.extend(
            (m.sender_id, m.study_id, format_datetime(m.datetime_created), m.body)
            for m in messages.results
        )

    out.write(format_table(rows))
    out.write(render_application_link("messages", "messages/inbox") + "\n")


def send_message(
    client: Any, recipient_id: str, study_id: str, body: str, out: IO[str]
) -> None:
    """Send a message and write a summary of what was sent."""
    client.send_message(body, recipient_id, study_id)

    rows = [("Recipient ID", "Study ID", "Body"), (recipient_id, study_id, body)]
    out.write(format_table(rows))