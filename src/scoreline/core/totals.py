"""Fold fetched event rows into a StatTotals.

Pure functions — no side effects, no database access.
"""

from __future__ import annotations

from scoreline.core.event_range import EventRange, RoundParticipation
from scoreline.models.stats import StatTotals


def participation_totals(row: RoundParticipation) -> StatTotals:
    """Counters contributed by a single round-participation row.

    Goals, assists and penalties are not taken from the round row; they are
    counted from their own event tables.
    """
    return StatTotals(
        presences=1 if row.presence_points > 0 else 0,
        wins=row.victories,
        draws=row.draws,
        losses=row.defeats,
        yellow_cards=row.yellow_cards,
        blue_cards=row.blue_cards,
        total_points=row.total_points,
        matches=row.victories + row.draws + row.defeats,
    )


def fold_events(events: EventRange) -> StatTotals:
    """Full fold over every row in *events*."""
    totals = StatTotals()
    for row in events.participations:
        totals = totals + participation_totals(row)
    return totals + StatTotals(
        goals=len(events.goals),
        assists=len(events.assists),
        penalties=sum(abs(p.points) for p in events.penalties),
    )
