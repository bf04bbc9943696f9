"""Configuration for the budgeting app.

Values come from environment variables with defaults relative to the
project root.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

DATA_DIR = Path(os.getenv("BUDGETING_DATA_DIR", _PROJECT_ROOT / "data")).resolve()

STORAGE_PREFIX = "budgeting_"

LOG_LEVEL = os.getenv("BUDGETING_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

CHART_MONTHS = int(os.getenv("BUDGETING_CHART_MONTHS", "6"))


def ensure_data_dir(path: Path | None = None) -> Path:
    target = path or DATA_DIR
    target.mkdir(parents=True, exist_ok=True)
    return target


def configure_logging(level: str | None = None) -> None:
    """Install a basic root handler; repeated calls only adjust the level."""
    resolved = getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO)
    logging.basicConfig(level=resolved, format=LOG_FORMAT)
    logging.getLogger().setLevel(resolved)
