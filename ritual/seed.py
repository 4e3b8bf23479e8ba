"""
Default data set, used on first run and whenever stored data can't be read.
"""

from __future__ import annotations

import random
from datetime import date
from typing import List, Optional, Sequence

from ritual.metrics import window_days

INITIAL_HABITS: List[dict] = [
    {
        "id": "1",
        "name": "Deep Work",
        "category": "Productivity",
        "frequency": "daily",
        "startDate": "2024-01-01",
        "priority": "high",
        "isArchived": False,
        "color": "#10B981",
        "notes": "Focus on core business tasks for 90 mins",
    },
    {
        "id": "2",
        "name": "Zone 2 Cardio",
        "category": "Health",
        "frequency": "weekly",
        "frequencyValue": 4,
        "startDate": "2024-01-01",
        "priority": "medium",
        "isArchived": False,
        "color": "#F59E0B",
        "notes": "Keep heart rate between 130-145bpm",
    },
    {
        "id": "3",
        "name": "Evening Reflection",
        "category": "Mental",
        "frequency": "daily",
        "startDate": "2024-01-01",
        "priority": "low",
        "isArchived": False,
        "color": "#6366F1",
    },
]


def initial_habits() -> List[dict]:
    return [dict(h) for h in INITIAL_HABITS]


def generate_mock_logs(
    habits: Sequence[dict],
    today: date,
    days: int = 30,
    rng: Optional[random.Random] = None,
) -> List[dict]:
    """
    Random completions for the last `days` days, newest day first.
    High-priority habits hit 80% of days, the rest 60%.
    """
    rng = rng or random.Random()
    logs = []
    for d in reversed(window_days(today, days)):
        for h in habits:
            chance = 0.8 if h.get("priority") == "high" else 0.6
            if rng.random() < chance:
                logs.append({"habitId": h["id"], "date": d.isoformat(), "completed": True})
    return logs
