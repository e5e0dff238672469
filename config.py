"""
Centralized configuration for the matchday team allocation engine.
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

load_dotenv()


def _parse_int(env_var: str, default: int) -> int:
    raw = os.getenv(env_var)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _parse_float(env_var: str, default: float) -> float:
    raw = os.getenv(env_var)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


# Roster limits
MIN_ATTENDEES = _parse_int("MIN_ATTENDEES", 8)
MAX_ATTENDEES = _parse_int("MAX_ATTENDEES", 20)

# Neutral rating used for players missing from the rating table (1..5 scale)
DEFAULT_SKILL = _parse_float("DEFAULT_SKILL", 3.0)
DEFAULT_STAMINA = _parse_float("DEFAULT_STAMINA", 3.0)

# Harmony (players who should not be teammates)
HARMONY_PENALTY = _parse_float("HARMONY_PENALTY", 0.4)  # Subtracted per conflicted teammate
HARMONY_STAMINA_WEIGHT = _parse_float("HARMONY_STAMINA_WEIGHT", 0.05)  # Resolver swap cost weight

# Local search
BALANCE_MAX_PASSES = _parse_int("BALANCE_MAX_PASSES", 8)
# Shared tolerance for "equal" scores across partition and both balancing passes
SCORE_EPSILON = 1e-9

# Teams
MAX_TEAMS = 4
TEAM_COLORS: list[tuple[str, str]] = [
    ("Green", "#10B981"),
    ("Blue", "#3B82F6"),
    ("Orange", "#F59E0B"),
    ("Grey", "#6B7280"),
]

# Schedule
DEFAULT_ROUNDS = _parse_int("DEFAULT_ROUNDS", 2)
MIN_REMOVABLE_ROUND = 2  # "Remove last round" never drops below this many rounds
KICKOFF_SEED_OFFSET = 0x9E3779B9  # Decorrelates kickoff coin flips from pairing order
MAX_STREAK = 2  # A team may appear in at most this many consecutive fixtures
