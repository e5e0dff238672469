"""
Domain models - pure data structures representing business entities.
"""

from domain.models.fixture import Fixture, Schedule, StreakFixOutcome, make_match_id
from domain.models.harmony import HarmonyPairs, pair_key
from domain.models.player import PlayerRating, RatingTable
from domain.models.team import Team, swap_members

__all__ = [
    "Fixture",
    "HarmonyPairs",
    "PlayerRating",
    "RatingTable",
    "Schedule",
    "StreakFixOutcome",
    "Team",
    "make_match_id",
    "pair_key",
    "swap_members",
]
