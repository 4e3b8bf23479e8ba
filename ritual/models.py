"""
Record shapes for habits and logs.

Records are plain dicts using the same keys as the stored JSON, e.g.

    {"id": "1", "name": "Deep Work", "category": "Productivity",
     "frequency": "daily", "startDate": "2024-01-01", "priority": "high",
     "isArchived": False, "color": "#10B981"}

    {"habitId": "1", "date": "2024-01-05", "completed": True}
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Iterable, List

from ritual.errors import SchemaError

FREQUENCIES = ("daily", "weekly", "custom")
PRIORITIES = ("low", "medium", "high")

PROTOCOL_COLORS = [
    ("Emerald", "#10B981"),
    ("Amber", "#F59E0B"),
    ("Rose", "#F43F5E"),
    ("Indigo", "#6366F1"),
    ("Violet", "#8B5CF6"),
    ("Slate", "#475569"),
    ("Teal", "#14B8A6"),
]

_REQUIRED_TEXT = ("id", "name", "category")


def to_day(value: date | datetime | str) -> str:
    """
    Normalize a date-ish value to 'YYYY-MM-DD'.
    """
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return date.fromisoformat(str(value).split("T")[0]).isoformat()


def is_active(habit: dict) -> bool:
    return not habit.get("isArchived", False)


def active_habits(habits: Iterable[dict]) -> List[dict]:
    return [h for h in habits if is_active(h)]


def validate_habit(obj: Any) -> dict:
    if not isinstance(obj, dict):
        raise SchemaError(f"habit must be an object, got {type(obj).__name__}")
    for key in _REQUIRED_TEXT:
        if not isinstance(obj.get(key), str) or not obj[key]:
            raise SchemaError(f"habit field '{key}' must be a non-empty string")
    if obj.get("frequency") not in FREQUENCIES:
        raise SchemaError(f"habit '{obj['id']}' has unknown frequency {obj.get('frequency')!r}")
    if obj.get("priority") not in PRIORITIES:
        raise SchemaError(f"habit '{obj['id']}' has unknown priority {obj.get('priority')!r}")
    if not isinstance(obj.get("isArchived"), bool):
        raise SchemaError(f"habit '{obj['id']}' is missing isArchived")
    freq_value = obj.get("frequencyValue")
    if freq_value is not None and (isinstance(freq_value, bool) or not isinstance(freq_value, (int, float))):
        raise SchemaError(f"habit '{obj['id']}' has a non-numeric frequencyValue")
    try:
        start = to_day(obj.get("startDate", ""))
    except ValueError as e:
        raise SchemaError(f"habit '{obj['id']}' has a bad startDate") from e
    return {**obj, "startDate": start}


def validate_log(obj: Any) -> dict:
    if not isinstance(obj, dict):
        raise SchemaError(f"log must be an object, got {type(obj).__name__}")
    if not isinstance(obj.get("habitId"), str) or not obj["habitId"]:
        raise SchemaError("log field 'habitId' must be a non-empty string")
    if not isinstance(obj.get("completed"), bool):
        raise SchemaError("log field 'completed' must be a boolean")
    try:
        day = to_day(obj.get("date", ""))
    except ValueError as e:
        raise SchemaError(f"log for '{obj['habitId']}' has a bad date") from e
    return {"habitId": obj["habitId"], "date": day, "completed": obj["completed"]}


def validate_habits(data: Any) -> List[dict]:
    if not isinstance(data, list):
        raise SchemaError("habits must be stored as a JSON array")
    return [validate_habit(h) for h in data]


def validate_logs(data: Any) -> List[dict]:
    if not isinstance(data, list):
        raise SchemaError("logs must be stored as a JSON array")
    return [validate_log(l) for l in data]
