"""
Harmony conflict resolution.

Final pass over a balanced partition: any configured harmony pair that ended
up on the same team is split by the least disruptive cross-team swap.
"""

import logging
from dataclasses import dataclass, field

from config import HARMONY_STAMINA_WEIGHT
from domain.models.harmony import HarmonyPairs
from domain.models.player import RatingTable
from domain.models.team import Team, swap_members

logger = logging.getLogger("matchday.harmony")


@dataclass
class HarmonyOutcome:
    """Pairs that were split, and pairs left together because no swap was valid."""

    resolved: list[tuple[str, str]] = field(default_factory=list)
    unresolved: list[tuple[str, str]] = field(default_factory=list)
    swaps: list[tuple[int, str, int, str]] = field(default_factory=list)

    @property
    def all_resolved(self) -> bool:
        return not self.unresolved


@dataclass(frozen=True)
class _HarmonySwap:
    cost: float
    from_team: Team
    to_team: Team
    moving: str
    replacement: str


class HarmonyResolver:
    """Splits co-located harmony pairs by swapping one of them out."""

    def __init__(
        self,
        ratings: RatingTable,
        harmony: HarmonyPairs,
        stamina_weight: float = HARMONY_STAMINA_WEIGHT,
    ):
        self.ratings = ratings
        self.harmony = harmony
        self.stamina_weight = stamina_weight

    def swap_cost(self, moving: str, replacement: str) -> float:
        """|skill gap| + weight * |stamina gap| between the two players swapped."""
        skill_gap = abs(self.ratings.skill(moving) - self.ratings.skill(replacement))
        stamina_gap = abs(self.ratings.stamina(moving) - self.ratings.stamina(replacement))
        return skill_gap + stamina_gap * self.stamina_weight

    @staticmethod
    def _team_of(teams: list[Team], name: str) -> Team | None:
        for team in teams:
            if team.contains(name):
                return team
        return None

    def _cheapest_swap(
        self, teams: list[Team], conflict_team: Team, a: str, b: str
    ) -> _HarmonySwap | None:
        best: _HarmonySwap | None = None
        for moving in (a, b):
            counterpart = b if moving == a else a
            for target in teams:
                if target is conflict_team or target.contains(counterpart) or not target.members:
                    continue
                for candidate in target.members:
                    # The replacement would become the counterpart's teammate
                    if self.harmony.conflicts(candidate, counterpart):
                        continue
                    cost = self.swap_cost(moving, candidate)
                    if best is None or cost < best.cost:
                        best = _HarmonySwap(cost, conflict_team, target, moving, candidate)
        return best

    def resolve(self, teams: list[Team]) -> HarmonyOutcome:
        """
        Resolve every co-located harmony pair in configured order.

        Pairs that cannot be split are reported in ``unresolved``; this is an
        accepted outcome, never an error.
        """
        outcome = HarmonyOutcome()
        if len(teams) < 2 or not self.harmony:
            return outcome

        for a, b in self.harmony:
            team_a = self._team_of(teams, a)
            team_b = self._team_of(teams, b)
            if team_a is None or team_b is None or team_a is not team_b:
                continue

            swap = self._cheapest_swap(teams, team_a, a, b)
            if swap is None:
                logger.warning(f"Harmony conflict {a}/{b} on {team_a.name} left unresolved: no valid swap")
                outcome.unresolved.append((a, b))
                continue

            swap_members(swap.from_team, swap.moving, swap.to_team, swap.replacement)
            outcome.resolved.append((a, b))
            outcome.swaps.append((swap.from_team.id, swap.moving, swap.to_team.id, swap.replacement))
            logger.info(
                f"Harmony: moved {swap.moving} to {swap.to_team.name} for {swap.replacement} "
                f"(cost={swap.cost:.2f})"
            )
        return outcome
