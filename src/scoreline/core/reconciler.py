"""Choose how headline totals are computed, then compute them.

The snapshot is a rolling all-time/current-year aggregate with no per-month
or per-past-year breakdown, so it can only serve requests for that scope.
Anything narrower falls back to recomputing from the fetched rows.

In HYBRID mode goals/assists/penalties are snapshot-relative, while the
per-round chart (``scoreline.core.round_breakdown``) is always ground truth.
The chart's visible sum can therefore differ from the headline total.
"""

from __future__ import annotations

from scoreline.core.delta import compute_delta
from scoreline.core.event_range import EventRange
from scoreline.core.snapshot import Snapshot
from scoreline.core.totals import fold_events
from scoreline.models.stats import StatsMode, StatTotals


def select_mode(
    has_snapshot: bool,
    year: int | None,
    month: int | None,
    current_year: int,
) -> StatsMode:
    """HYBRID iff a snapshot exists, no month is set, and year is unset or current."""
    if has_snapshot and month is None and (year is None or year == current_year):
        return StatsMode.HYBRID
    return StatsMode.STANDARD


def reconcile(mode: StatsMode, snapshot: Snapshot | None, events: EventRange) -> StatTotals:
    """Produce headline totals for *events* under *mode*.

    In STANDARD mode *events* must already be month-filtered by the caller;
    the snapshot is ignored entirely.
    """
    if mode is StatsMode.HYBRID:
        if snapshot is None:
            raise ValueError("HYBRID mode requires a snapshot")
        return snapshot.totals + compute_delta(events, snapshot.updated_at)
    return fold_events(events)
