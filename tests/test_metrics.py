"""Tests for the metrics engine."""

from datetime import date, timedelta

import pytest

from ritual.metrics import (
    calendar_frame,
    compute_achievements,
    compute_calendar_buckets,
    compute_completion_rate,
    compute_insights,
    compute_streak,
    daily_progress,
    habit_completion_rate,
    heat_tier,
    integrity_matrix,
    momentum,
    peak_weekday,
    round_half_up,
    status_tier,
    trend_frame,
    trend_series,
    weekday_index,
    window_days,
)

from tests.conftest import TODAY


class TestDates:
    def test_window_is_inclusive_and_oldest_first(self, today):
        assert window_days(today, 3) == [date(2026, 3, 16), date(2026, 3, 17), today]

    def test_empty_window(self, today):
        assert window_days(today, 0) == []

    def test_weekday_index_starts_on_sunday(self):
        assert weekday_index(date(2026, 3, 1)) == 0  # Sunday
        assert weekday_index(TODAY) == 3  # Wednesday
        assert weekday_index(date(2026, 3, 7)) == 6  # Saturday

    def test_round_half_up(self):
        assert round_half_up(12.5) == 13
        assert round_half_up(2.5) == 3
        assert round_half_up(3.33) == 3


class TestHabitRate:
    def test_no_logs_is_zero(self, today):
        assert habit_completion_rate("a", [], today) == 0

    def test_half_the_window(self, today, make_log):
        logs = [make_log("a", i) for i in range(15)]
        assert habit_completion_rate("a", logs, today) == 50

    def test_window_edges(self, today, make_log):
        logs = [make_log("a", 29), make_log("a", 30), make_log("a", today + timedelta(days=1))]
        # only 29 days ago falls inside the 30-day window
        assert habit_completion_rate("a", logs, today) == 3

    def test_duplicates_never_exceed_100(self, today, make_log):
        logs = [make_log("a", i) for i in range(30)] * 2
        assert habit_completion_rate("a", logs, today) == 100

    def test_other_habits_ignored(self, today, make_log):
        assert habit_completion_rate("a", [make_log("b", 0)], today) == 0


class TestCompletionRate:
    def test_empty(self, today):
        assert compute_completion_rate([], [], today) == 0

    def test_no_habits_with_logs(self, today, make_log):
        assert compute_completion_rate([], [make_log("a", 0)], today) == 0

    def test_two_habits(self, today, make_habit, make_log):
        habits = [make_habit("a"), make_habit("b")]
        logs = [make_log("a", i) for i in range(30)]
        assert compute_completion_rate(habits, logs, today) == 50

    def test_orphan_logs_excluded(self, today, make_habit, make_log):
        habits = [make_habit("a")]
        logs = [make_log("a", 0), *[make_log("ghost", i) for i in range(30)]]
        assert compute_completion_rate(habits, logs, today) == 3

    def test_archived_habits_excluded(self, today, make_habit, make_log):
        habits = [make_habit("a"), make_habit("b", archived=True)]
        logs = [make_log("a", i) for i in range(30)] + [make_log("b", i) for i in range(30)]
        assert compute_completion_rate(habits, logs, today) == 100

    def test_only_archived_is_zero(self, today, make_habit, make_log):
        habits = [make_habit("a", archived=True)]
        assert compute_completion_rate(habits, [make_log("a", 0)], today) == 0

    @pytest.mark.parametrize("count", [0, 1, 7, 29, 30])
    def test_bounded(self, today, make_habit, make_log, count):
        habits = [make_habit("a"), make_habit("b"), make_habit("c")]
        logs = [make_log(h, i) for h in "abc" for i in range(count)]
        rate = compute_completion_rate(habits, logs, today)
        assert isinstance(rate, int)
        assert 0 <= rate <= 100


class TestStreak:
    def test_empty(self, today):
        assert compute_streak([], [], today) == 0

    def test_counts_fully_completed_days(self, today, make_habit, make_log):
        habits = [make_habit("a"), make_habit("b")]
        logs = [make_log(h, i) for h in "ab" for i in range(3)]
        # 3 days ago only "a" was done
        logs.append(make_log("a", 3))
        assert compute_streak(habits, logs, today) == 3

    def test_breaking_today_resets(self, today, make_habit, make_log):
        habits = [make_habit("a"), make_habit("b")]
        logs = [make_log(h, i) for h in "ab" for i in range(1, 20)]
        logs.append(make_log("a", 0))
        assert compute_streak(habits, logs, today) == 0

    def test_removing_latest_completion(self, today, make_habit, make_log):
        habits = [make_habit("a")]
        logs = [make_log("a", i) for i in range(10)]
        assert compute_streak(habits, logs, today) == 10
        assert compute_streak(habits, logs[1:], today) == 0

    def test_archived_not_required(self, today, make_habit, make_log):
        habits = [make_habit("a"), make_habit("b", archived=True)]
        logs = [make_log("a", i) for i in range(4)]
        assert compute_streak(habits, logs, today) == 4

    def test_orphan_logs_do_not_help(self, today, make_habit, make_log):
        habits = [make_habit("a")]
        assert compute_streak(habits, [make_log("ghost", 0)], today) == 0

    def test_all_archived_is_zero(self, today, make_habit, make_log):
        habits = [make_habit("a", archived=True)]
        assert compute_streak(habits, [make_log("a", 0)], today) == 0


class TestDailyProgress:
    def test_single_high_priority_habit_done(self, today, make_habit, make_log):
        progress = daily_progress([make_habit("A", priority="high")], [make_log("A", 0)], today)
        assert progress.completions == 1
        assert progress.target == 1
        assert progress.progress == 100

    def test_empty(self, today):
        progress = daily_progress([], [], today)
        assert (progress.completions, progress.target, progress.progress) == (0, 0, 0)

    def test_partial(self, today, make_habit, make_log):
        habits = [make_habit("a"), make_habit("b"), make_habit("c"), make_habit("d")]
        logs = [make_log("a", 0), make_log("b", 1), make_log("ghost", 0)]
        progress = daily_progress(habits, logs, today)
        assert progress.completions == 1
        assert progress.target == 4
        assert progress.progress == 25.0


def test_status_tier():
    assert status_tier(76) == "strong"
    assert status_tier(75) == "steady"
    assert status_tier(41) == "steady"
    assert status_tier(40) == "critical"
    assert status_tier(0) == "critical"


class TestInsights:
    def test_no_habits(self, today, make_log):
        assert compute_insights([], [make_log("a", 0)], today) == []

    def test_order_and_kinds(self, today, make_habit, make_log):
        habits = [make_habit("a", name="Stretch")]
        insights = compute_insights(habits, [make_log("a", 0)], today)
        assert [i.label for i in insights] == ["Tactical Peak", "Variance Alert", "System Momentum"]
        assert [i.kind for i in insights] == ["positive", "warning", "neutral"]
        assert "Wednesday" in insights[0].value
        assert '"Stretch"' in insights[1].value
        assert insights[2].value == "Protocol density at 0% capacity."

    def test_no_alert_when_two_completions(self, today, make_habit, make_log):
        habits = [make_habit("a")]
        insights = compute_insights(habits, [make_log("a", 0), make_log("a", 1)], today)
        assert [i.label for i in insights] == ["Tactical Peak", "System Momentum"]

    def test_no_alert_outside_week(self, today, make_habit, make_log):
        habits = [make_habit("a")]
        insights = compute_insights(habits, [make_log("a", 7)], today)
        assert "Variance Alert" not in [i.label for i in insights]

    def test_alert_picks_first_in_collection_order(self, today, make_habit, make_log):
        habits = [make_habit("a", name="First"), make_habit("b", name="Second")]
        logs = [make_log("b", 0), make_log("a", 2)]
        alert = [i for i in compute_insights(habits, logs, today) if i.label == "Variance Alert"]
        assert '"First"' in alert[0].value

    def test_peak_tie_goes_to_lowest_day(self, make_log):
        # Monday and Tuesday once each
        logs = [make_log("a", date(2026, 3, 16)), make_log("a", date(2026, 3, 17))]
        assert peak_weekday(logs) == 1

    def test_peak_without_logs_is_sunday(self):
        assert peak_weekday([]) == 0

    def test_peak_counts_history(self, make_log):
        logs = [make_log("a", 0), make_log("b", 0), make_log("a", 2)]
        assert peak_weekday(logs) == 3

    def test_peak_counts_logs_of_deleted_habits(self, today, make_habit, make_log):
        habits = [make_habit("a")]
        # one Monday for "a", three Fridays for a habit that no longer exists
        logs = [
            make_log("a", date(2026, 3, 16)),
            make_log("gone", date(2026, 3, 13)),
            make_log("gone", date(2026, 3, 6)),
            make_log("gone", date(2026, 2, 27)),
        ]
        assert peak_weekday(logs) == 5
        assert "Friday" in compute_insights(habits, logs, today)[0].value

    def test_all_archived_still_reports(self, today, make_habit, make_log):
        habits = [make_habit("a", archived=True)]
        insights = compute_insights(habits, [make_log("a", 0)], today)
        assert [i.label for i in insights] == ["Tactical Peak", "System Momentum"]
        assert "Wednesday" in insights[0].value

    def test_momentum(self, make_log):
        assert momentum([make_log("a", i) for i in range(3)]) == 1
        assert momentum([make_log("a", i) for i in range(250)]) == 50
        assert momentum([make_log("a", i) for i in range(750)]) == 150


class TestAchievements:
    def test_catalog_locked_when_empty(self, today):
        achievements = compute_achievements([], [], today)
        assert [a.id for a in achievements] == ["streak-7", "volume-100", "mastery-1"]
        assert [a.category for a in achievements] == ["streak", "volume", "mastery"]
        assert not any(a.unlocked for a in achievements)

    def test_volume_threshold(self, today, make_habit, make_log):
        habits = [make_habit("a")]
        logs = [make_log("a", i) for i in range(99)]

        def volume(logs):
            return next(a for a in compute_achievements(habits, logs, today) if a.id == "volume-100")

        assert not volume(logs).unlocked
        logs.append(make_log("a", 99))
        assert volume(logs).unlocked
        assert not volume(logs[:-1]).unlocked

    def test_streak_threshold(self, today, make_habit, make_log):
        habits = [make_habit("a")]

        def streak(days):
            logs = [make_log("a", i) for i in range(days)]
            return next(a for a in compute_achievements(habits, logs, today) if a.id == "streak-7")

        assert not streak(6).unlocked
        assert streak(7).unlocked

    def test_mastery_needs_more_than_90(self, today, make_habit, make_log):
        habits = [make_habit("a"), make_habit("b")]

        def mastery(days):
            logs = [make_log("a", i) for i in range(days)]
            return next(a for a in compute_achievements(habits, logs, today) if a.id == "mastery-1")

        assert not mastery(27).unlocked  # 90%
        assert mastery(28).unlocked  # 93%

    def test_recomputed_each_call(self, today, make_habit, make_log):
        habits = [make_habit("a")]
        logs = [make_log("a", i) for i in range(7)]
        assert compute_achievements(habits, logs, today) == compute_achievements(habits, logs, today)


class TestCalendar:
    @pytest.mark.parametrize(
        "rate, tier",
        [(0, 0), (0.1, 1), (0.15, 1), (0.16, 2), (0.3, 2), (0.5, 4), (0.75, 5), (0.9, 6), (0.95, 7), (1.0, 7)],
    )
    def test_heat_tier(self, rate, tier):
        assert heat_tier(rate) == tier

    def test_buckets_cover_window(self, today, make_habit, make_log):
        habits = [make_habit("a"), make_habit("b")]
        buckets = compute_calendar_buckets(habits, [make_log("a", 0)], today)
        assert len(buckets) == 35
        assert buckets[0].day == (today - timedelta(days=34)).isoformat()
        assert buckets[-1].is_today
        assert not any(b.is_today for b in buckets[:-1])
        assert buckets[-1].rate == 0.5
        assert buckets[-1].tier == 4
        assert buckets[0].rate == 0

    def test_no_habits(self, today, make_log):
        buckets = compute_calendar_buckets([], [make_log("a", 0)], today, 7)
        assert len(buckets) == 7
        assert all(b.rate == 0 and b.tier == 0 for b in buckets)

    def test_frame_layout(self, today, make_habit):
        buckets = compute_calendar_buckets([make_habit("a")], [], today)
        df = calendar_frame(buckets)
        assert len(df) == 35
        # window starts on Thursday 2026-02-12
        assert df["dow"].iloc[0] == 4
        assert df["week"].iloc[0] == 0
        assert df["week"].iloc[-1] == 5
        assert df["dow"].iloc[-1] == 3
        assert bool(df["is_today"].iloc[-1])

    def test_empty_frame(self):
        df = calendar_frame([])
        assert df.empty
        assert "week" in df.columns


class TestTrends:
    @pytest.mark.parametrize("timeframe, points", [("W", 8), ("M", 31), ("Y", 91)])
    def test_lengths(self, today, make_habit, timeframe, points):
        series = trend_series([make_habit("a")], [], today, timeframe)
        assert len(series) == points
        assert series[-1].day == today.isoformat()

    def test_rates(self, today, make_habit, make_log):
        habits = [make_habit("a"), make_habit("b"), make_habit("c")]
        series = trend_series(habits, [make_log("a", 0), make_log("b", 1)], today, "W")
        assert series[-1].rate == 33
        assert series[-2].rate == 33
        assert series[0].rate == 0

    def test_frame(self, today, make_habit):
        df = trend_frame(trend_series([make_habit("a")], [], today, "W"))
        assert list(df.columns) == ["day", "rate"]
        assert str(df["day"].dtype).startswith("datetime64")

    def test_integrity_matrix(self, today, make_habit, make_log):
        habits = [make_habit(str(i)) for i in range(5)]
        rows = integrity_matrix(habits, [make_log("0", 0), make_log("0", 6)], today)
        assert [r.habit["id"] for r in rows] == ["0", "1", "2", "3"]
        assert rows[0].strip == [True, False, False, False, False, False, True]
        assert rows[0].rate == 7
        assert rows[1].strip == [False] * 7
