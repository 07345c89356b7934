"""Time helpers shared by the registry, stores and reports."""

from __future__ import annotations

import datetime as dt

# Report consumers parse English month abbreviations whatever the process locale.
MONTH_ABBREVIATIONS = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)


def utcnow() -> dt.datetime:
    """Return an aware UTC timestamp."""
    return dt.datetime.now(dt.UTC)


def ensure_utc(value: dt.datetime) -> dt.datetime:
    """Return ``value`` as an aware UTC datetime; naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=dt.UTC)
    return value.astimezone(dt.UTC)


def format_report_time(value: dt.datetime) -> str:
    """Format ``value`` as ``dd MMM yyyy HH:mm:ss`` in UTC.

    >>> format_report_time(dt.datetime(2023, 1, 5, 7, 8, 9, tzinfo=dt.UTC))
    '05 Jan 2023 07:08:09'

    """
    moment = ensure_utc(value)
    month = MONTH_ABBREVIATIONS[moment.month - 1]
    return (
        f"{moment.day:02d} {month} {moment.year:04d} "
        f"{moment.hour:02d}:{moment.minute:02d}:{moment.second:02d}"
    )
