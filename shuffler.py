"""
Balanced team allocation algorithm.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TypeVar

from config import (
    HARMONY_PENALTY,
    MAX_ATTENDEES,
    MAX_TEAMS,
    MIN_ATTENDEES,
    SCORE_EPSILON,
    TEAM_COLORS,
)
from domain.models.harmony import HarmonyPairs
from domain.models.player import RatingTable
from domain.models.team import Team
from domain.services.harmony_service import HarmonyOutcome, HarmonyResolver
from domain.services.team_balancing_service import BalanceOutcome, TeamBalancingService
from utils.seeding import derive_seed, seeded_shuffle

logger = logging.getLogger("matchday.shuffler")

T = TypeVar("T")


def compute_capacities(n_players: int, team_count: int) -> list[int]:
    """
    Per-team capacities: ``n // t`` each, remainder spread over the *last* teams.

    Examples:
        >>> compute_capacities(11, 2)
        [5, 6]
        >>> compute_capacities(11, 3)
        [3, 4, 4]
    """
    base = [n_players // team_count] * team_count
    remainder = n_players % team_count
    for i in range(team_count - remainder, team_count):
        base[i] += 1
    return base


@dataclass
class _TeamSlot:
    """Bookkeeping for one team while the greedy partition runs."""

    team: Team
    capacity: int
    target: float
    skill_sum: float = 0.0
    stamina_sum: float = 0.0

    @property
    def size(self) -> int:
        return self.team.size

    @property
    def has_room(self) -> bool:
        return self.team.size < self.capacity


@dataclass
class AllocationResult:
    """Finalized teams plus what each optimization pass did."""

    teams: list[Team]
    seed: int
    capacities: list[int]
    skill_outcome: BalanceOutcome | None = None
    stamina_outcome: BalanceOutcome | None = None
    harmony_outcome: HarmonyOutcome | None = None
    failed_passes: list[str] = field(default_factory=list)

    @property
    def sizes(self) -> list[int]:
        return [t.size for t in self.teams]


class BalancedShuffler:
    """
    Implements balanced team allocation.

    Greedy skill-deficit partition, then skill and stamina local search, then
    harmony conflict resolution. Every step is deterministic for a given
    roster, rating table and harmony set.
    """

    def __init__(
        self,
        ratings: RatingTable | None = None,
        harmony: HarmonyPairs | None = None,
        harmony_penalty: float | None = None,
        min_attendees: int | None = None,
        max_attendees: int | None = None,
        max_teams: int | None = None,
        epsilon: float = SCORE_EPSILON,
        balancer: TeamBalancingService | None = None,
    ):
        """
        Initialize the shuffler.

        Args:
            ratings: Skill/stamina lookup (defaults to an empty table, i.e. all neutral)
            harmony: Pairs that should not share a team
            harmony_penalty: Score penalty per conflicted teammate during the greedy partition
            min_attendees: Smallest roster accepted (default MIN_ATTENDEES)
            max_attendees: Largest roster accepted (default MAX_ATTENDEES)
            max_teams: Largest team count accepted (default MAX_TEAMS, bounded by colors)
            epsilon: Tolerance used to treat near-equal scores as ties
            balancer: Optional pre-built balancing service
        """
        self.ratings = ratings if ratings is not None else RatingTable()
        self.harmony = harmony if harmony is not None else HarmonyPairs()
        self.harmony_penalty = harmony_penalty if harmony_penalty is not None else HARMONY_PENALTY
        self.min_attendees = min_attendees if min_attendees is not None else MIN_ATTENDEES
        self.max_attendees = max_attendees if max_attendees is not None else MAX_ATTENDEES
        self.max_teams = min(max_teams if max_teams is not None else MAX_TEAMS, len(TEAM_COLORS))
        self.epsilon = epsilon
        self.balancer = balancer or TeamBalancingService(self.ratings, epsilon=epsilon)
        self.resolver = HarmonyResolver(self.ratings, self.harmony)

    def validate(self, roster: list[str], team_count: int) -> None:
        """
        Check the input contract before any allocation work.

        Raises:
            ValueError: If the roster or team count can't produce valid teams
        """
        n = len(roster)
        if n < self.min_attendees:
            raise ValueError(f"Need at least {self.min_attendees} attendees, got {n}")
        if n > self.max_attendees:
            raise ValueError(f"At most {self.max_attendees} attendees allowed, got {n}")
        if len(set(roster)) != n:
            duplicates = sorted({name for name in roster if roster.count(name) > 1})
            raise ValueError(f"Duplicate attendees: {', '.join(duplicates)}")
        if team_count < 2:
            raise ValueError(f"Need at least 2 teams, got {team_count}")
        if team_count > self.max_teams:
            raise ValueError(f"At most {self.max_teams} teams supported, got {team_count}")
        if team_count > n // 2:
            raise ValueError(f"{n} attendees can't fill {team_count} teams")

    def _prefer(self, slot: _TeamSlot, best: _TeamSlot, high_stamina: bool) -> bool:
        """
        Tie-break between two near-equal scores; the first decisive rule wins.

        High-stamina players go to smaller-capacity teams, then to the team with
        less stamina so far. Then fewer members, then lower skill sum. Remaining
        ties keep the earlier (lower index) team.
        """
        if high_stamina:
            if slot.capacity != best.capacity:
                return slot.capacity < best.capacity
            if slot.stamina_sum != best.stamina_sum:
                return slot.stamina_sum < best.stamina_sum
        if slot.size != best.size:
            return slot.size < best.size
        if slot.skill_sum != best.skill_sum:
            return slot.skill_sum < best.skill_sum
        return False

    def _pick_slot(self, slots: list[_TeamSlot], player: str, avg_stamina: float) -> int:
        high_stamina = self.ratings.stamina(player) >= avg_stamina
        best = -1
        best_score = float("-inf")
        for i, slot in enumerate(slots):
            if not slot.has_room:
                continue
            deficit = slot.target - slot.skill_sum
            score = deficit - self.harmony.bias(slot.team.members, player, self.harmony_penalty)
            if score > best_score + self.epsilon:
                best_score = score
                best = i
            elif abs(score - best_score) <= self.epsilon and best != -1:
                if self._prefer(slot, slots[best], high_stamina):
                    best = i
        if best == -1:
            # Capacities always sum to the roster size, so this only guards bookkeeping bugs
            logger.warning(f"No team had room for {player}; assigning to first team")
            best = 0
        return best

    def partition(self, roster: list[str], team_count: int, seed: int | None = None) -> list[Team]:
        """
        Greedy skill-balanced partition (no local search).

        Args:
            roster: Unique attendee names
            team_count: Number of teams
            seed: Tie-break seed (derived from the roster when omitted)

        Returns:
            Teams with ids 1..team_count
        """
        n = len(roster)
        seed = derive_seed(roster) if seed is None else seed
        capacities = compute_capacities(n, team_count)
        avg_skill = sum(self.ratings.skill(p) for p in roster) / n
        avg_stamina = sum(self.ratings.stamina(p) for p in roster) / n

        slots = []
        for i, capacity in enumerate(capacities):
            color_name, color_hex = TEAM_COLORS[i]
            slots.append(
                _TeamSlot(
                    team=Team(i + 1, color_name, color_hex),
                    capacity=capacity,
                    target=capacity * avg_skill,
                )
            )

        # Highest skill first; equal skill ordered by the seeded shuffle
        order_index = {name: idx for idx, name in enumerate(seeded_shuffle(roster, seed))}
        players_sorted = sorted(roster, key=lambda p: (-self.ratings.skill(p), order_index[p]))

        for player in players_sorted:
            slot = slots[self._pick_slot(slots, player, avg_stamina)]
            slot.team.add_member(player)
            slot.skill_sum += self.ratings.skill(player)
            slot.stamina_sum += self.ratings.stamina(player)

        return [slot.team for slot in slots]

    def _best_effort(
        self, label: str, teams: list[Team], run: Callable[[], T], failed: list[str]
    ) -> T | None:
        """Run a pass; on any error restore the partition from before it and carry on."""
        snapshot = [team.snapshot() for team in teams]
        try:
            return run()
        except Exception:
            logger.exception(f"{label} pass failed; keeping partition from before the pass")
            for team, members in zip(teams, snapshot):
                team.members = members
            failed.append(label)
            return None

    def shuffle(self, roster: list[str], team_count: int) -> AllocationResult:
        """
        Allocate the roster into ``team_count`` balanced teams.

        Args:
            roster: Unique attendee names (order only affects tie-breaking)
            team_count: Number of teams

        Returns:
            AllocationResult with finalized teams

        Raises:
            ValueError: If the input contract is violated
        """
        roster = list(roster)
        self.validate(roster, team_count)

        seed = derive_seed(roster)
        teams = self.partition(roster, team_count, seed)
        result = AllocationResult(
            teams=teams, seed=seed, capacities=compute_capacities(len(roster), team_count)
        )

        result.skill_outcome = self._best_effort(
            "skill", teams, lambda: self.balancer.balance_skill_to_targets(teams, roster),
            result.failed_passes,
        )
        result.stamina_outcome = self._best_effort(
            "stamina", teams, lambda: self.balancer.balance_stamina_equal_skill(teams),
            result.failed_passes,
        )
        result.harmony_outcome = self._best_effort(
            "harmony", teams, lambda: self.resolver.resolve(teams), result.failed_passes
        )

        self._log_allocation(roster, result)
        return result

    def _log_allocation(self, roster: list[str], result: AllocationResult) -> None:
        avg_skill = self.balancer.average_skill(roster)
        logger.info("=" * 60)
        logger.info(
            f"ALLOCATION: {len(roster)} players into {len(result.teams)} teams "
            f"(seed={result.seed:#010x}, sizes={result.sizes})"
        )
        for team in result.teams:
            logger.info(
                f"  {team.name}: skill={team.skill_sum(self.ratings):.1f} "
                f"(target {team.size * avg_skill:.1f}), stamina={team.stamina_sum(self.ratings):.1f} "
                f"| {', '.join(team.members)}"
            )
        logger.info(
            f"Total skill deviation: {self.balancer.total_skill_deviation(result.teams, avg_skill):.2f}"
        )
        logger.info("=" * 60)
