"""
Metrics and date logic: completion rates, streaks, insights, achievements.

Everything here is a pure function of (habits, logs, today). Nothing reads
the clock, so the same inputs always give the same numbers.
"""

from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

import pandas as pd

from ritual.models import active_habits, to_day

WEEKDAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]  # 0..6

RATE_WINDOW_DAYS = 30
RISK_WINDOW_DAYS = 7
MOMENTUM_CAPACITY = 500

# Upper bounds of heat tiers 1..6; anything above the last one is tier 7
HEAT_THRESHOLDS = [0.15, 0.30, 0.45, 0.60, 0.75, 0.90]

TIMEFRAMES = {"W": 7, "M": 30, "Y": 90}


@dataclass(frozen=True)
class DailyProgress:
    completions: int
    target: int
    progress: float


@dataclass(frozen=True)
class Insight:
    label: str
    value: str
    kind: str  # positive | warning | neutral


@dataclass(frozen=True)
class Achievement:
    id: str
    title: str
    description: str
    requirement: str
    category: str  # streak | volume | mastery
    unlocked: bool


@dataclass(frozen=True)
class CalendarBucket:
    day: str
    rate: float
    tier: int
    is_today: bool


@dataclass(frozen=True)
class TrendPoint:
    day: str
    rate: int


@dataclass(frozen=True)
class IntegrityRow:
    habit: dict
    strip: List[bool]
    rate: int


# (id, title, description, requirement, category)
ACHIEVEMENT_CATALOG: List[Tuple[str, str, str, str, str]] = [
    (
        "streak-7",
        "Vanguard Protocol",
        "Establish a consistent 7-day operational chain.",
        "7 Day Streak",
        "streak",
    ),
    (
        "volume-100",
        "Century Merit",
        "Successfully log 100 high-performance rituals.",
        "100 Logs",
        "volume",
    ),
    (
        "mastery-1",
        "Peak Efficiency",
        "Maintain 90%+ integrity on a primary protocol for 30 days.",
        "1 Mastery Habit",
        "mastery",
    ),
]


# --- Dates -------------------------------------------------------------------

def daterange(start: date, end: date) -> List[date]:
    """
    Inclusive date range.
    """
    days = []
    cur = start
    while cur <= end:
        days.append(cur)
        cur += timedelta(days=1)
    return days


def window_days(today: date, days: int) -> List[date]:
    """
    The trailing `days` calendar days ending at today, oldest first.
    """
    if days <= 0:
        return []
    return daterange(today - timedelta(days=days - 1), today)


def weekday_index(d: date) -> int:
    """
    Sunday=0 .. Saturday=6.
    """
    return (d.weekday() + 1) % 7


def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


# --- Lookups -----------------------------------------------------------------

def completed_pairs(logs: Iterable[dict], habit_ids: Optional[Set[str]] = None) -> Set[Tuple[str, str]]:
    """
    Distinct (habitId, 'YYYY-MM-DD') pairs that were completed.

    With `habit_ids`, logs pointing anywhere else are dropped.
    """
    out = set()
    for log in logs:
        if not log.get("completed"):
            continue
        if habit_ids is not None and log["habitId"] not in habit_ids:
            continue
        out.add((log["habitId"], to_day(log["date"])))
    return out


def completions_by_day(logs: Iterable[dict], habit_ids: Set[str]) -> Dict[str, Set[str]]:
    """
    'YYYY-MM-DD' -> ids of active habits completed that day.
    """
    lookup: Dict[str, Set[str]] = {}
    for habit_id, day in completed_pairs(logs, habit_ids):
        lookup.setdefault(day, set()).add(habit_id)
    return lookup


def total_completions(logs: Sequence[dict]) -> int:
    return sum(1 for log in logs if log.get("completed"))


# --- Rates -------------------------------------------------------------------

def habit_completion_rate(habit_id: str, logs: Sequence[dict], today: date, days: int = RATE_WINDOW_DAYS) -> int:
    """
    Percentage of the last `days` days on which the habit was completed.
    """
    if days <= 0:
        return 0
    window = {d.isoformat() for d in window_days(today, days)}
    done = sum(1 for hid, day in completed_pairs(logs, {habit_id}) if day in window)
    return min(100, round_half_up(done / days * 100))


def compute_completion_rate(
    habits: Sequence[dict], logs: Sequence[dict], today: date, days: int = RATE_WINDOW_DAYS
) -> int:
    """
    Completed logs of active habits over the window, against one
    completion per active habit per day.
    """
    active = active_habits(habits)
    if not active or days <= 0:
        return 0
    ids = {h["id"] for h in active}
    window = {d.isoformat() for d in window_days(today, days)}
    done = sum(1 for _, day in completed_pairs(logs, ids) if day in window)
    return min(100, round_half_up(done / (len(active) * days) * 100))


def compute_streak(habits: Sequence[dict], logs: Sequence[dict], today: date) -> int:
    """
    Count consecutive days ending at today on which every active habit
    was completed.
    """
    ids = {h["id"] for h in active_habits(habits)}
    if not ids:
        return 0
    lookup = completions_by_day(logs, ids)
    streak = 0
    cur = today
    while ids <= lookup.get(cur.isoformat(), set()):
        streak += 1
        cur -= timedelta(days=1)
    return streak


def daily_progress(habits: Sequence[dict], logs: Sequence[dict], today: date) -> DailyProgress:
    ids = {h["id"] for h in active_habits(habits)}
    key = today.isoformat()
    completions = sum(1 for _, day in completed_pairs(logs, ids) if day == key)
    target = len(ids)
    progress = completions / target * 100 if target else 0.0
    return DailyProgress(completions=completions, target=target, progress=progress)


def status_tier(completion_rate: int) -> str:
    if completion_rate > 75:
        return "strong"
    if completion_rate > 40:
        return "steady"
    return "critical"


# --- Insights ----------------------------------------------------------------

def peak_weekday(logs: Sequence[dict]) -> int:
    """
    Weekday (Sunday=0) with the most completions across all history,
    whichever habit they belong to. Ties go to the lowest index.
    """
    counts = Counter(weekday_index(date.fromisoformat(day)) for _, day in completed_pairs(logs))
    return max(range(7), key=lambda i: (counts.get(i, 0), -i))


def at_risk_habit(habits: Sequence[dict], logs: Sequence[dict], today: date) -> Optional[dict]:
    """
    First active habit with exactly one completion in the last week.
    """
    window = {d.isoformat() for d in window_days(today, RISK_WINDOW_DAYS)}
    pairs = completed_pairs(logs)
    for h in active_habits(habits):
        done = sum(1 for hid, day in pairs if hid == h["id"] and day in window)
        if 0 < done < 2:
            return h
    return None


def momentum(logs: Sequence[dict]) -> int:
    """
    Log volume as a share of a nominal 500-log capacity. Not capped at 100.
    """
    return round_half_up(total_completions(logs) / MOMENTUM_CAPACITY * 100)


def compute_insights(habits: Sequence[dict], logs: Sequence[dict], today: date) -> List[Insight]:
    if not habits:
        return []

    insights = [
        Insight(
            label="Tactical Peak",
            value=f"Max output identified on {WEEKDAY_NAMES[peak_weekday(logs)]} cycles.",
            kind="positive",
        )
    ]

    risky = at_risk_habit(habits, logs, today)
    if risky is not None:
        insights.append(
            Insight(
                label="Variance Alert",
                value=f'"{risky["name"]}" is showing drop-off. Audit protocol.',
                kind="warning",
            )
        )

    insights.append(
        Insight(
            label="System Momentum",
            value=f"Protocol density at {momentum(logs)}% capacity.",
            kind="neutral",
        )
    )
    return insights


# --- Achievements ------------------------------------------------------------

def mastery_count(habits: Sequence[dict], logs: Sequence[dict], today: date) -> int:
    return sum(1 for h in active_habits(habits) if habit_completion_rate(h["id"], logs, today) > 90)


def compute_achievements(habits: Sequence[dict], logs: Sequence[dict], today: date) -> List[Achievement]:
    """
    Evaluate the whole catalog from scratch.
    """
    unlocked = {
        "streak-7": compute_streak(habits, logs, today) >= 7,
        "volume-100": total_completions(logs) >= 100,
        "mastery-1": mastery_count(habits, logs, today) >= 1,
    }
    return [
        Achievement(
            id=ach_id,
            title=title,
            description=description,
            requirement=requirement,
            category=category,
            unlocked=unlocked[ach_id],
        )
        for ach_id, title, description, requirement, category in ACHIEVEMENT_CATALOG
    ]


# --- Calendar / trends -------------------------------------------------------

def heat_tier(rate: float) -> int:
    """
    Map a day rate in [0, 1] to tiers 0..7.
    """
    if rate <= 0:
        return 0
    for tier, upper in enumerate(HEAT_THRESHOLDS, start=1):
        if rate <= upper:
            return tier
    return len(HEAT_THRESHOLDS) + 1


def _day_rates(habits: Sequence[dict], logs: Sequence[dict], days: List[date]) -> List[float]:
    ids = {h["id"] for h in active_habits(habits)}
    if not ids:
        return [0.0 for _ in days]
    lookup = completions_by_day(logs, ids)
    return [len(lookup.get(d.isoformat(), ())) / len(ids) for d in days]


def compute_calendar_buckets(
    habits: Sequence[dict], logs: Sequence[dict], today: date, window: int = 35
) -> List[CalendarBucket]:
    days = window_days(today, window)
    return [
        CalendarBucket(day=d.isoformat(), rate=rate, tier=heat_tier(rate), is_today=(d == today))
        for d, rate in zip(days, _day_rates(habits, logs, days))
    ]


def trend_series(habits: Sequence[dict], logs: Sequence[dict], today: date, timeframe: str = "W") -> List[TrendPoint]:
    """
    Per-day completion percentage, from `timeframe` days back through today.
    """
    span = TIMEFRAMES[timeframe]
    days = window_days(today, span + 1)
    return [
        TrendPoint(day=d.isoformat(), rate=round_half_up(rate * 100))
        for d, rate in zip(days, _day_rates(habits, logs, days))
    ]


def integrity_matrix(
    habits: Sequence[dict], logs: Sequence[dict], today: date, limit: int = 4
) -> List[IntegrityRow]:
    week = [d.isoformat() for d in window_days(today, RISK_WINDOW_DAYS)]
    pairs = completed_pairs(logs)
    return [
        IntegrityRow(
            habit=h,
            strip=[(h["id"], day) in pairs for day in week],
            rate=habit_completion_rate(h["id"], logs, today),
        )
        for h in active_habits(habits)[:limit]
    ]


def calendar_frame(buckets: Sequence[CalendarBucket]) -> pd.DataFrame:
    """
    Lay buckets out on a Sunday-first week grid for the heatmap.

    Columns: day, day_num, rate, pct, tier, dow (0..6, Sunday first),
    week (row index), is_today.
    """
    if not buckets:
        return pd.DataFrame(columns=["day", "day_num", "rate", "pct", "tier", "dow", "week", "is_today"])
    first = date.fromisoformat(buckets[0].day)
    offset = weekday_index(first)
    rows = []
    for i, b in enumerate(buckets):
        d = date.fromisoformat(b.day)
        rows.append(
            {
                "day": d,
                "day_num": d.day,
                "rate": b.rate,
                "pct": round_half_up(b.rate * 100),
                "tier": b.tier,
                "dow": weekday_index(d),
                "week": (i + offset) // 7,
                "is_today": b.is_today,
            }
        )
    return pd.DataFrame(rows)


def trend_frame(points: Sequence[TrendPoint]) -> pd.DataFrame:
    df = pd.DataFrame({"day": [p.day for p in points], "rate": [p.rate for p in points]})
    df["day"] = pd.to_datetime(df["day"])
    return df
