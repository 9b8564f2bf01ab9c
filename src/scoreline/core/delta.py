"""Isolate and total the events newer than a player's snapshot.

A round is dated by calendar day. For comparison with the snapshot's
``updated_at`` a round date is taken as midnight UTC of that day, and only
rounds strictly after ``updated_at`` count. A round on the snapshot's own
day is treated as already inside the snapshot.
"""

from __future__ import annotations

from datetime import UTC, date, datetime, time

from scoreline.core.event_range import EventRange
from scoreline.core.totals import fold_events
from scoreline.models.stats import StatTotals


def as_utc(ts: datetime) -> datetime:
    """Interpret naive timestamps (as SQLite returns them) as UTC."""
    if ts.tzinfo is None:
        return ts.replace(tzinfo=UTC)
    return ts.astimezone(UTC)


def round_instant(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=UTC)


def is_after(day: date, boundary: datetime) -> bool:
    """True when a round on *day* happened strictly after *boundary*."""
    return round_instant(day) > as_utc(boundary)


def events_after(events: EventRange, boundary: datetime | None) -> EventRange:
    """Subset of *events* whose round is strictly newer than *boundary*."""
    if boundary is None:
        return events
    return EventRange(
        participations=tuple(p for p in events.participations if is_after(p.round_date, boundary)),
        goals=tuple(g for g in events.goals if is_after(g.round_date, boundary)),
        assists=tuple(a for a in events.assists if is_after(a.round_date, boundary)),
        penalties=tuple(p for p in events.penalties if is_after(p.round_date, boundary)),
    )


def compute_delta(events: EventRange, updated_at: datetime | None) -> StatTotals:
    """Totals for the rows the snapshot dated *updated_at* has not seen yet."""
    return fold_events(events_after(events, updated_at))
