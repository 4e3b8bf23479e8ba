"""
Ritual: a habit tracking dashboard.

The engine in `ritual.metrics` is pure; `ritual.state` owns the data and
`ritual.db` keeps it on disk between sessions.
"""

from __future__ import annotations

import logging

from ritual import config
from ritual.db import init_db

__all__ = ["configure_logging", "init_db"]


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=level or config.LOG_LEVEL,
        format="%(asctime)s %(levelname)-5s %(name)s - %(message)s",
        datefmt="%H:%M:%S",
    )
