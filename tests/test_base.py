import io
from datetime import datetime, timezone

from prolificcli.commands.base import (
    CommandError,
    application_url,
    format_datetime,
    format_table,
    render_application_link,
    render_heading,
    render_record_counter,
    render_section_marker,
)


def test_format_table_campaigns():
    rows = [
        ("ID", "Name", "Link"),
        (
            "444",
            "Chili Peppers",
            "https://app.prolific.com/register/participant/waitlist/?campaign_code=BLUEBIRD",
        ),
        (
            "555",
            "Jovi",
            "https://app.prolific.com/register/participant/waitlist/?campaign_code=ORANGEBURST",
        ),
    ]
    expected = """ID  Name          Link
444 Chili Peppers https://app.prolific.com/register/participant/waitlist/?campaign_code=BLUEBIRD
555 Jovi          https://app.prolific.com/register/participant/waitlist/?campaign_code=ORANGEBURST
"""
    assert format_table(rows) == expected


def test_format_table_secrets():
    rows = [
        ("ID", "Secret", "Workspace ID"),
        ("63722971f9cc073ecc730f6a", "Leicester Square", "63722982f9cc073ecc730f6b"),
    ]
    expected = """ID                       Secret           Workspace ID
63722971f9cc073ecc730f6a Leicester Square 63722982f9cc073ecc730f6b
"""
    assert format_table(rows) == expected


def test_format_table_event_types():
    rows = [("Event Type", "Description"), ("wibble", "The wibble event")]
    assert format_table(rows) == "Event Type Description\nwibble     The wibble event\n"


def test_format_table_empty():
    assert format_table([]) == ""


def test_format_table_columns_line_up():
    rows = [("a", "bb", "c"), ("dddd", "e", "ffffff"), ("g", "hhhhh", "i")]
    lines = format_table(rows).splitlines()
    assert len(lines) == len(rows)
    second = {line.index(row[1]) for line, row in zip(lines, rows)}
    third = {line.rindex(row[2]) for line, row in zip(lines, rows)}
    assert len(second) == 1
    assert len(third) == 1
    assert all(line.endswith(row[2]) for line, row in zip(lines, rows))


def test_record_counter():
    assert render_record_counter(2, 10) == "Showing 2 records of 10"
    assert render_record_counter(1, 10) == "Showing 1 record of 10"


def test_heading_is_plain_text():
    assert render_heading("The best participants") == "The best participants"


def test_application_url():
    assert application_url() == "https://app.prolific.com"


def test_application_link():
    link = render_application_link("messages", "messages/inbox")
    assert link == "\n---\n\nView messages in the application: https://app.prolific.com/messages/inbox"
    assert link.startswith(render_section_marker())


def test_section_marker_is_rule_between_blank_lines():
    marker = render_section_marker()
    assert marker.strip() == "---"
    assert marker.startswith("\n")


def test_format_datetime():
    value = datetime(2023, 1, 27, 19, 39, tzinfo=timezone.utc)
    assert format_datetime(value) == "27-01-2023 19:39"
    assert format_datetime(datetime(2022, 7, 24, 8, 4)) == "24-07-2022 08:04"


def test_command_error_message_and_exit_code():
    error = CommandError("error: I am titanium")
    assert str(error) == "error: I am titanium"
    assert error.exit_code == 1
    stream = io.StringIO()
    error.show(file=stream)
    assert stream.getvalue() == "error: I am titanium\n"