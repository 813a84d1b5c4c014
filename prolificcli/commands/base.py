"""Shared rendering helpers and the error type used by the commands."""

from __future__ import annotations

from datetime import datetime
from typing import IO, Iterable, Optional, Sequence

import click

APPLICATION_URL = "https://app.prolific.com"
DATETIME_FORMAT = "%d-%m-%Y %H:%M"
_ZERO_DATETIME = "01-01-0001 00:00"


class CommandError(click.ClickException):
    """A command failure whose message is shown as is."""

    def show(self, file: Optional[IO] = None) -> None:
        click.echo(self.format_message(), file=file, err=True)


def format_table(rows: Iterable[Sequence[object]]) -> str:
    """Lay rows out in left-aligned columns separated by at least one space.

    Every cell except the last of a row is padded to the widest cell of its
    column among the neighbouring rows that share that column.
    """
    text = "".join("\t".join(str(cell) for cell in row) + "\n" for row in rows)
    lines = [line.split("\t") for line in text.split("\n")]
    widths: list[int] = []
    out: list[str] = []

    def write_lines(start: int, end: int) -> None:
        for line in lines[start:end]:
            parts = []
            for j, cell in enumerate(line):
                parts.append(cell)
                if j < len(widths):
                    parts.append(" " * (widths[j] - len(cell)))
            out.append("".join(parts))

    def format_block(line0: int, line1: int) -> None:
        column = len(widths)
        this = line0
        while this < line1:
            if column >= len(lines[this]) - 1:
                this += 1
                continue
            write_lines(line0, this)
            line0 = this
            width = 0
            while this < line1 and column < len(lines[this]) - 1:
                width = max(width, len(lines[this][column]) + 1)
                this += 1
            widths.append(width)
            format_block(line0, this)
            widths.pop()
            line0 = this
        write_lines(line0, line1)

    format_block(0, len(lines))
    return "\n".join(out)


def render_record_counter(shown: int, total: int) -> str:
    noun = "record" if shown == 1 else "records"
    return f"Showing {shown} {noun} of {total}"


def render_heading(text: str) -> str:
    return text


def render_section_marker() -> str:
    return "\n---\n\n"


def application_url() -> str:
    return APPLICATION_URL


def render_application_link(label: str, path: str) -> str:
    return (
        f"{render_section_marker()}View {label} in the application: "
        f"{application_url()}/{path}"
    )


def format_datetime(value: Optional[datetime]) -> str:
    """Format a timestamp as day-month-year hours:minutes in its own zone."""
    if value is None:
        return _ZERO_DATETIME
    return value.strftime(DATETIME_FORMAT)