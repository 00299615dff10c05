"""Centralized defaults for the roster engine. Tweak values here instead of touching the generator."""

import os

# ---------------------------------------------------------------------------
# Calendar shape
# ---------------------------------------------------------------------------
DEFAULT_DAYS = ("Mon", "Tue", "Wed", "Thu", "Fri")

# Exactly two slots per day; the consecutive-slot cap is defined over this pair.
DEFAULT_SLOTS = ("AM", "PM")

DEFAULT_ROOMS = (
    "Counselling Room A",
    "Counselling Room B",
    "Counselling Room C",
    "Counselling Room D",
)

# Scan order for the round-robin cursor
DEFAULT_PEOPLE = (
    "Dominic Yeo",
    "Kirsty Png",
    "Soon Jiaying",
    "Andrew Lim",
    "Janice Leong",
    "Oliver Tan",
    "Claudia Ahl",
    "Seanna Neo",
    "Xiao Hui",
    "Tika Zainal",
)

# ---------------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------------
# One unit of total-assignment difference must outweigh any per-room difference.
# Per-room counts stay far below this for a weekly grid.
TOTAL_ASSIGNMENT_WEIGHT = 1000

DEFAULT_MAX_CONSECUTIVE_PER_DAY = 2
ALLOWED_MAX_CONSECUTIVE = (1, 2)

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
LOG_LEVEL = os.environ.get("ROOMROSTER_LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
