"""Date helpers for validation and log metadata."""

from __future__ import annotations

from datetime import date, datetime, timezone


def local_today() -> date:
    return date.today()


def utc_timestamp_iso() -> str:
    return datetime.now(tz=timezone.utc).isoformat(timespec="milliseconds")
