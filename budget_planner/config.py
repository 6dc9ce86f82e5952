"""Configuration management for the budget planner.

This module centralizes all configuration values including paths,
defaults, and environment variable overrides.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, List

# Base project root - assumes this file is in budget_planner/
_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

# Data directories
DATA_DIR = Path(os.getenv("BUDGET_PLANNER_DATA_DIR", _PROJECT_ROOT / "data"))

# Durable key-value store
STORE_PATH = Path(
    os.getenv("BUDGET_PLANNER_STORE_PATH", DATA_DIR / "budget_planner.json")
).resolve()

LOG_LEVEL = os.getenv("BUDGET_PLANNER_LOG_LEVEL", "INFO").upper()

# Seed the ledger with demo items on first run
SEED_ON_FIRST_RUN = os.getenv("BUDGET_PLANNER_SEED", "0").strip().lower() in {"1", "true", "yes"}

# Settings defaults
DEFAULT_SAVING_PERCENTAGE = 20
DEFAULT_TIME_UNIT = "month"
DEFAULT_WALLET = 1_000_000
DEFAULT_CATEGORY = "wants"

SEED_ITEMS: List[Dict[str, Any]] = [
    {"id": 1, "name": "Advan WorkPlus", "price": 7_800_000, "category": "wants"},
    {"id": 2, "name": "Rinjani Mountain", "price": 5_000_000, "category": "wants"},
]


def ensure_data_directories() -> None:
    """Create the data directory if it doesn't exist."""
    DATA_DIR.mkdir(parents=True, exist_ok=True)


def configure_logging(level: str | None = None) -> None:
    """Apply a basic logging configuration for the app entry point."""
    logging.basicConfig(
        level=getattr(logging, (level or LOG_LEVEL), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
