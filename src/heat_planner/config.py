# src/heat_planner/config.py
from __future__ import annotations

import os

# ---- Matching tolerances ------------------------------------------------------
THICKNESS_TOLERANCE = 0.01      # "same thickness"
THICKNESS_RANGE = 0.25          # tier 3
APPROX_THICKNESS = 0.5          # tier 4
APPROX_WIDTH = 100.0            # tier 4

# Per-tier result caps (tiers 1..4)
STOCK_TIER_CAPS: tuple[int, int, int, int] = (10, 5, 5, 5)
WIP_TIER_CAPS: tuple[int, int, int, int] = (3, 2, 2, 2)

# ---- Heat planning ------------------------------------------------------------
HEAT_CAPACITY = 60  # quantity units per heat


# ---- Env ----------------------------------------------------------------------
def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "")
    try:
        return int(raw) if raw.strip() else default
    except ValueError:
        return default


# off | summary | full
LOG_MODE = os.getenv("HEATPLAN_LOG", "summary").strip().lower()
if LOG_MODE not in {"off", "summary", "full"}:
    LOG_MODE = "summary"

# rows per dataset accepted by the API
MAX_ROWS = _env_int("HEATPLAN_MAX_ROWS", 50000)
