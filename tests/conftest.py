"""Shared fixtures: a fixed 'today', record factories and a throwaway database."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

# Wednesday
TODAY = date(2026, 3, 18)


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def make_habit():
    def _make(habit_id: str, name: str | None = None, priority: str = "medium", archived: bool = False, **extra) -> dict:
        return {
            "id": habit_id,
            "name": name or f"Habit {habit_id}",
            "category": "General",
            "frequency": "daily",
            "startDate": "2026-01-01",
            "priority": priority,
            "isArchived": archived,
            "color": "#10B981",
            **extra,
        }

    return _make


@pytest.fixture
def make_log():
    def _make(habit_id: str, day: date | int = 0) -> dict:
        """`day` is a date or a number of days before TODAY."""
        if isinstance(day, int):
            day = TODAY - timedelta(days=day)
        return {"habitId": habit_id, "date": day.isoformat(), "completed": True}

    return _make


@pytest.fixture
def db_path(tmp_path) -> str:
    from ritual import db

    path = str(tmp_path / "ritual.db")
    db.init_db(path)
    return path
