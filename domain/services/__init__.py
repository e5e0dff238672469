"""
Domain services containing pure business logic.
"""

from domain.services.harmony_service import HarmonyOutcome, HarmonyResolver
from domain.services.team_balancing_service import BalanceOutcome, TeamBalancingService

__all__ = ["BalanceOutcome", "HarmonyOutcome", "HarmonyResolver", "TeamBalancingService"]
