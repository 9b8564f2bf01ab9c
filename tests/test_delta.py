"""Tests for the totals fold and the snapshot delta boundary."""

from datetime import UTC, date, datetime, timedelta, timezone

from scoreline.core.delta import compute_delta, events_after, is_after
from scoreline.core.event_range import (
    AssistEvent,
    EventRange,
    GoalEvent,
    PenaltyEvent,
    RoundParticipation,
)
from scoreline.core.totals import fold_events, participation_totals
from scoreline.models.stats import StatTotals


def _round(rid: str, day: date, number: int = 1, **stats: int) -> RoundParticipation:
    return RoundParticipation(round_id=rid, round_number=number, round_date=day, **stats)


class TestFoldEvents:
    def test_empty_range_is_all_zero(self):
        assert fold_events(EventRange()) == StatTotals()

    def test_presence_is_one_only_when_presence_points_positive(self):
        assert participation_totals(_round("r1", date(2024, 1, 6), presence_points=3)).presences == 1
        assert participation_totals(_round("r2", date(2024, 1, 13), presence_points=0)).presences == 0

    def test_round_counters_summed_and_matches_derived(self):
        events = EventRange(
            participations=(
                _round("r1", date(2024, 1, 6), victories=2, draws=1, defeats=0, total_points=9,
                       yellow_cards=1, presence_points=1),
                _round("r2", date(2024, 1, 13), victories=0, draws=1, defeats=2, total_points=4,
                       blue_cards=1, presence_points=1),
            )
        )
        totals = fold_events(events)
        assert totals.wins == 2
        assert totals.draws == 2
        assert totals.losses == 2
        assert totals.matches == 6
        assert totals.yellow_cards == 1
        assert totals.blue_cards == 1
        assert totals.total_points == 13
        assert totals.presences == 2

    def test_goals_and_assists_are_counted_not_summed(self):
        day = date(2024, 1, 6)
        events = EventRange(
            participations=(_round("r1", day),),
            goals=(GoalEvent("g1", day), GoalEvent("g2", day), GoalEvent("g3", day)),
            assists=(AssistEvent("a1", day),),
        )
        totals = fold_events(events)
        assert totals.goals == 3
        assert totals.assists == 1

    def test_penalties_use_absolute_value(self):
        day = date(2024, 1, 6)
        events = EventRange(
            penalties=(
                PenaltyEvent("p1", "r1", day, -3),
                PenaltyEvent("p2", "r1", day, 2),
            )
        )
        assert fold_events(events).penalties == 5


class TestDeltaBoundary:
    def test_round_exactly_at_snapshot_is_excluded(self):
        boundary = datetime(2024, 6, 1, tzinfo=UTC)
        assert not is_after(date(2024, 6, 1), boundary)

    def test_round_same_day_as_snapshot_is_excluded(self):
        boundary = datetime(2024, 6, 1, 10, 30)
        assert not is_after(date(2024, 6, 1), boundary)

    def test_next_day_is_included(self):
        boundary = datetime(2024, 6, 1, 23, 59, tzinfo=UTC)
        assert is_after(date(2024, 6, 2), boundary)

    def test_naive_boundary_treated_as_utc(self):
        assert is_after(date(2024, 6, 2), datetime(2024, 6, 1, 12, 0))

    def test_offset_boundary_converted_to_utc(self):
        # 23:00 at UTC-3 is 02:00 UTC on June 2nd, which is after June 2nd midnight.
        boundary = datetime(2024, 6, 1, 23, 0, tzinfo=timezone(timedelta(hours=-3)))
        assert not is_after(date(2024, 6, 2), boundary)

    def test_no_boundary_keeps_everything(self):
        events = EventRange(participations=(_round("r1", date(2020, 1, 1)),))
        assert events_after(events, None) is events


class TestComputeDelta:
    def test_only_rows_after_snapshot_contribute(self):
        before = date(2024, 5, 25)
        at = date(2024, 6, 1)
        after = date(2024, 6, 15)
        events = EventRange(
            participations=(
                _round("r1", before, 1, victories=1, total_points=7, presence_points=1),
                _round("r2", at, 2, victories=1, total_points=6, presence_points=1),
                _round("r3", after, 3, defeats=1, total_points=10, presence_points=1),
            ),
            goals=(GoalEvent("g1", before), GoalEvent("g2", at), GoalEvent("g3", after)),
            assists=(AssistEvent("a1", after),),
            penalties=(PenaltyEvent("p1", "r2", at, -2), PenaltyEvent("p2", "r3", after, -1)),
        )
        delta = compute_delta(events, datetime(2024, 6, 1, tzinfo=UTC))
        assert delta == StatTotals(
            presences=1,
            goals=1,
            assists=1,
            losses=1,
            penalties=1,
            total_points=10,
            matches=1,
        )

    def test_none_boundary_folds_everything(self):
        events = EventRange(participations=(_round("r1", date(2024, 1, 1), total_points=4),))
        assert compute_delta(events, None).total_points == 4
