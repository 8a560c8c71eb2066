"""Clock helpers for run ids, backup stamps and metadata timestamps."""

from __future__ import annotations

from datetime import date, datetime, timezone


def utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


def generate_run_id(now: datetime | None = None) -> str:
    return (now or utc_now()).strftime("run-%Y%m%dT%H%M%S%fZ")


def parse_run_date(value: str | None) -> str:
    """Return ``value`` as a normalised ISO date, defaulting to today (UTC)."""
    if not value:
        return utc_now().date().isoformat()
    return date.fromisoformat(value).isoformat()


def utc_timestamp_iso() -> str:
    # e.g. 2026-02-17T08:30:00.000Z
    return utc_now().isoformat(timespec="milliseconds").replace("+00:00", "Z")
