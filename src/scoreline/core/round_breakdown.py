"""Per-round breakdown for time-series charts and best/worst search.

Always computed from the fetched rows, never from the snapshot, so charts
can be reproduced from raw data whatever strategy produced the headline
totals.
"""

from __future__ import annotations

from collections import Counter, defaultdict
from datetime import date

from scoreline.core.event_range import EventRange
from scoreline.core.totals import participation_totals
from scoreline.models.stats import RoundStats


def build_round_stats(events: EventRange) -> list[RoundStats]:
    """One RoundStats per participation row, ascending by round number.

    Goals and assists carry only a round date, so they land on the first
    round (in round-number order) with that date. Penalties carry a round id.
    """
    ordered = sorted(events.participations, key=lambda p: p.round_number)

    first_round_for_date: dict[date, str] = {}
    for p in ordered:
        first_round_for_date.setdefault(p.round_date, p.round_id)

    goals: Counter[str] = Counter()
    for goal in events.goals:
        round_id = first_round_for_date.get(goal.round_date)
        if round_id is not None:
            goals[round_id] += 1

    assists: Counter[str] = Counter()
    for assist in events.assists:
        round_id = first_round_for_date.get(assist.round_date)
        if round_id is not None:
            assists[round_id] += 1

    penalties: defaultdict[str, int] = defaultdict(int)
    for penalty in events.penalties:
        penalties[penalty.round_id] += abs(penalty.points)

    per_round: list[RoundStats] = []
    for p in ordered:
        base = participation_totals(p).model_dump()
        base.update(
            goals=goals[p.round_id],
            assists=assists[p.round_id],
            penalties=penalties[p.round_id],
        )
        per_round.append(
            RoundStats(
                round_id=p.round_id,
                round_number=p.round_number,
                round_date=p.round_date,
                **base,
            )
        )
    return per_round
