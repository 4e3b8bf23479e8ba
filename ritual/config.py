"""
Configuration, read from the environment with sensible defaults.

A `.env` file in the project root is loaded first, so local overrides
don't need to be exported by hand.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

_PROJECT_ROOT = Path(__file__).resolve().parent.parent
load_dotenv(_PROJECT_ROOT / ".env")


def _env(key: str, default: str = "") -> str:
    return os.getenv(key, default)


def _env_int(key: str, default: int) -> int:
    return int(os.getenv(key, str(default)))


def _env_bool(key: str, default: bool = False) -> bool:
    return os.getenv(key, str(default)).lower() in ("1", "true", "yes")


# --- Storage -----------------------------------------------------------------

DB_PATH = _env("RITUAL_DB_PATH", os.path.join("data", "ritual.db"))

# --- Dashboard ---------------------------------------------------------------

CALENDAR_DAYS = _env_int("RITUAL_CALENDAR_DAYS", 35)

# First run: seed demo logs next to the default habits
SEED_DEMO_DATA = _env_bool("RITUAL_SEED_DEMO", True)

# Fixed RNG seed for demo logs; empty = different data every first run
_demo_seed = _env("RITUAL_DEMO_SEED")
DEMO_SEED: int | None = int(_demo_seed) if _demo_seed else None

# --- Logging -----------------------------------------------------------------

LOG_LEVEL = _env("RITUAL_LOG_LEVEL", "INFO").upper()
