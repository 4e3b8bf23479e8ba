"""
Application state and the commands that change it.

The command functions are pure: they take collections and return new ones.
`RitualApp` holds the current state, runs commands and writes every
accepted change back to storage.
"""

from __future__ import annotations

import logging
import random
import secrets
import string
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, List, Optional, Sequence, Tuple

from ritual import config, db
from ritual.errors import StorageError
from ritual.models import FREQUENCIES, PRIORITIES, PROTOCOL_COLORS, to_day, validate_habits, validate_logs
from ritual.seed import generate_mock_logs, initial_habits

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.digits + string.ascii_lowercase


@dataclass(frozen=True)
class AppState:
    habits: List[dict] = field(default_factory=list)
    logs: List[dict] = field(default_factory=list)


def new_habit_id() -> str:
    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))


# --- Commands ----------------------------------------------------------------

def toggle_habit_log(logs: Sequence[dict], habit_id: str, day: date | str) -> List[dict]:
    """
    Remove the completed (habit, day) log if there is one, otherwise add a
    completed one. Stale rows with completed=false are replaced, never kept.
    """
    key = to_day(day)
    matches = [l for l in logs if l["habitId"] == habit_id and l["date"] == key]
    kept = [l for l in logs if l not in matches]
    if any(l["completed"] for l in matches):
        return kept
    return [*kept, {"habitId": habit_id, "date": key, "completed": True}]


def draft_errors(draft: dict) -> List[str]:
    errors = []
    if not (draft.get("name") or "").strip():
        errors.append("name is required")
    if not (draft.get("category") or "").strip():
        errors.append("category is required")
    if draft.get("frequency", "daily") not in FREQUENCIES:
        errors.append(f"frequency must be one of {', '.join(FREQUENCIES)}")
    if draft.get("priority", "medium") not in PRIORITIES:
        errors.append(f"priority must be one of {', '.join(PRIORITIES)}")
    return errors


def build_habit(draft: dict, today: date, habit_id: Optional[str] = None) -> dict:
    frequency = draft.get("frequency", "daily")
    habit = {
        "id": habit_id or new_habit_id(),
        "name": draft["name"].strip(),
        "category": draft["category"].strip(),
        "frequency": frequency,
        "startDate": today.isoformat(),
        "priority": draft.get("priority", "medium"),
        "isArchived": False,
        "color": draft.get("color") or PROTOCOL_COLORS[0][1],
    }
    if frequency != "daily" and draft.get("frequencyValue") is not None:
        habit["frequencyValue"] = draft["frequencyValue"]
    notes = (draft.get("notes") or "").strip()
    if notes:
        habit["notes"] = notes
    return habit


def add_habit(habits: Sequence[dict], draft: dict, today: date, habit_id: Optional[str] = None) -> List[dict]:
    """
    Append a new habit built from `draft`. Incomplete drafts leave the
    collection as it was.
    """
    if draft_errors(draft):
        return list(habits)
    return [*habits, build_habit(draft, today, habit_id)]


def remove_habit(habits: Sequence[dict], logs: Sequence[dict], habit_id: str) -> Tuple[List[dict], List[dict]]:
    """
    Drop the habit together with every log that points at it.
    """
    return (
        [h for h in habits if h["id"] != habit_id],
        [l for l in logs if l["habitId"] != habit_id],
    )


# --- Controller --------------------------------------------------------------

class RitualApp:
    """
    Owns the habit/log collections for one session.

    Every accepted command replaces `state` and saves both storage slots.
    """

    def __init__(
        self,
        state: AppState,
        db_path: Optional[str] = None,
        clock: Callable[[], date] = date.today,
    ):
        self.state = state
        self.db_path = db_path
        self.clock = clock

    @property
    def habits(self) -> List[dict]:
        return self.state.habits

    @property
    def logs(self) -> List[dict]:
        return self.state.logs

    def today(self) -> date:
        return self.clock()

    @classmethod
    def load(
        cls,
        db_path: Optional[str] = None,
        clock: Callable[[], date] = date.today,
        seed_demo: Optional[bool] = None,
        rng: Optional[random.Random] = None,
    ) -> "RitualApp":
        """
        Read both slots, falling back to the default data set for any slot
        that is missing or unreadable. A database file that can't be opened
        at all is moved aside and replaced by a fresh one.
        """
        try:
            db.init_db(db_path)
        except StorageError as e:
            logger.warning("starting with empty storage: %s", e)
            db.discard(db_path)
            db.init_db(db_path)
        app = cls(AppState(), db_path=db_path, clock=clock)

        habits = app._read(db.HABITS_KEY, validate_habits)
        logs = app._read(db.LOGS_KEY, validate_logs)
        if habits is not None and logs is not None:
            app.state = AppState(habits=habits, logs=logs)
            return app

        if habits is None:
            habits = initial_habits()
        if logs is None:
            logs = app._seed_logs(habits, seed_demo, rng)
        app._commit(AppState(habits=habits, logs=logs))
        return app

    def _read(self, key: str, validate: Callable) -> Optional[List[dict]]:
        try:
            raw = db.load(key, self.db_path)
            if raw is None:
                logger.info("no stored %s, using defaults", key)
                return None
            return validate(raw)
        except StorageError as e:
            logger.warning("ignoring stored %s: %s", key, e)
            return None

    def _seed_logs(self, habits: List[dict], seed_demo: Optional[bool], rng: Optional[random.Random]) -> List[dict]:
        if seed_demo is None:
            seed_demo = config.SEED_DEMO_DATA
        if not seed_demo:
            return []
        if rng is None and config.DEMO_SEED is not None:
            rng = random.Random(config.DEMO_SEED)
        return generate_mock_logs(habits, self.today(), rng=rng)

    def _commit(self, state: AppState) -> None:
        self.state = state
        db.save_many({db.HABITS_KEY: state.habits, db.LOGS_KEY: state.logs}, self.db_path)

    # --- commands ---

    def toggle(self, habit_id: str, day: date | str | None = None) -> bool:
        """
        Flip the completion for `habit_id` on `day` (default today).
        Returns True when the habit is now completed for that day.
        Unknown habits are ignored.
        """
        if not any(h["id"] == habit_id for h in self.habits):
            logger.info("toggle ignored, no habit %s", habit_id)
            return False
        key = to_day(day if day is not None else self.today())
        logs = toggle_habit_log(self.logs, habit_id, key)
        self._commit(AppState(habits=self.habits, logs=logs))
        done = any(l["habitId"] == habit_id and l["date"] == key and l["completed"] for l in logs)
        logger.debug("toggled %s on %s -> %s", habit_id, key, done)
        return done

    def add(self, draft: dict) -> Optional[dict]:
        errors = draft_errors(draft)
        if errors:
            logger.info("rejected habit draft: %s", "; ".join(errors))
            return None
        habits = add_habit(self.habits, draft, self.today())
        habit = habits[-1]
        self._commit(AppState(habits=habits, logs=self.logs))
        logger.debug("added habit %s (%s)", habit["id"], habit["name"])
        return habit

    def remove(self, habit_id: str) -> bool:
        if not any(h["id"] == habit_id for h in self.habits):
            return False
        habits, logs = remove_habit(self.habits, self.logs, habit_id)
        self._commit(AppState(habits=habits, logs=logs))
        logger.debug("removed habit %s", habit_id)
        return True

    def reset(self, seed_demo: Optional[bool] = None, rng: Optional[random.Random] = None) -> None:
        """
        Wipe storage and start over from the default data set.
        """
        db.clear(self.db_path)
        habits = initial_habits()
        self._commit(AppState(habits=habits, logs=self._seed_logs(habits, seed_demo, rng)))
