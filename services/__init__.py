"""
Application services layer.

Services orchestrate allocation and match-session operations using the
shuffler, the scheduler and domain services.
"""

from services.allocation_service import Allocation, AllocationService
from services.result import Result
from services.round_service import MatchResult, MatchSession, RoundService

__all__ = [
    "Allocation",
    "AllocationService",
    "MatchResult",
    "MatchSession",
    "Result",
    "RoundService",
]
