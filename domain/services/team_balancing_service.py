"""
Team balancing domain service.

Local search over an existing partition: pairwise member swaps that pull each
team's skill sum toward its target, followed by stamina smoothing that only
ever swaps players of equal skill.
"""

import logging
from dataclasses import dataclass, field

from config import BALANCE_MAX_PASSES, SCORE_EPSILON
from domain.models.player import RatingTable
from domain.models.team import Team, swap_members

logger = logging.getLogger("matchday.balancing")


@dataclass(frozen=True)
class SwapCandidate:
    """A hypothetical swap of member ``a`` (team index i) with ``b`` (team index j)."""

    gain: float
    i: int
    j: int
    a: str
    b: str

    def sort_key(self) -> tuple[int, int, str, str]:
        return (self.i, self.j, self.a, self.b)


@dataclass
class BalanceOutcome:
    """
    What a balancing pass did.

    Attributes:
        pass_name: "skill" or "stamina"
        passes: Number of search iterations run
        swaps: Accepted swaps as (team_a_id, member_a, team_b_id, member_b)
        converged: True when the last iteration found no improving swap
    """

    pass_name: str
    passes: int = 0
    swaps: list[tuple[int, str, int, str]] = field(default_factory=list)
    converged: bool = False

    @property
    def improved(self) -> bool:
        return bool(self.swaps)


class TeamBalancingService:
    """
    Pure domain service for post-partition balancing.

    Responsibilities:
    - Skill-to-target swap minimization
    - Stamina equalization between equal-skill players
    - Deviation metrics used by the shuffler and tests
    """

    def __init__(
        self,
        ratings: RatingTable,
        max_passes: int = BALANCE_MAX_PASSES,
        epsilon: float = SCORE_EPSILON,
    ):
        """
        Initialize team balancing service.

        Args:
            ratings: Rating lookup for the run
            max_passes: Iteration cap per pass (guarantees termination)
            epsilon: Tolerance below which gains count as zero / ties
        """
        self.ratings = ratings
        self.max_passes = max_passes
        self.epsilon = epsilon

    # ------------------------------------------------------------------
    # Metrics
    # ------------------------------------------------------------------

    def average_skill(self, names: list[str]) -> float:
        if not names:
            return 0.0
        return sum(self.ratings.skill(n) for n in names) / len(names)

    def total_skill_deviation(self, teams: list[Team], avg_skill: float) -> float:
        """Sum over teams of |skill sum - size * avg_skill|."""
        return sum(abs(t.skill_sum(self.ratings) - t.size * avg_skill) for t in teams)

    def stamina_averages(self, teams: list[Team]) -> list[float]:
        return [t.stamina_sum(self.ratings) / t.size if t.size else 0.0 for t in teams]

    # ------------------------------------------------------------------
    # Candidate selection
    # ------------------------------------------------------------------

    def _consider(
        self, best: SwapCandidate | None, gain: float, i: int, j: int, a: str, b: str
    ) -> SwapCandidate | None:
        """
        Keep the candidate with the largest gain.

        Near-equal gains (within epsilon) go to the lowest team-pair index and
        then the lexicographically lowest member names.
        """
        best_gain = best.gain if best is not None else 0.0
        improves = gain > best_gain + self.epsilon
        ties = not improves and abs(gain - best_gain) <= self.epsilon and gain > self.epsilon
        if improves:
            return SwapCandidate(gain, i, j, a, b)
        if ties and (best is None or (i, j, a, b) < best.sort_key()):
            return SwapCandidate(gain, i, j, a, b)
        return best

    def find_best_skill_swap(self, teams: list[Team], avg_skill: float) -> SwapCandidate | None:
        """Best single cross-team swap reducing total skill-to-target error, if any."""
        sums = [t.skill_sum(self.ratings) for t in teams]
        targets = [t.size * avg_skill for t in teams]
        best: SwapCandidate | None = None

        for i in range(len(teams)):
            for j in range(i + 1, len(teams)):
                members_i = teams[i].sorted_members()
                members_j = teams[j].sorted_members()
                before = abs(sums[i] - targets[i]) + abs(sums[j] - targets[j])
                for a in members_i:
                    skill_a = self.ratings.skill(a)
                    for b in members_j:
                        skill_b = self.ratings.skill(b)
                        after_i = sums[i] - skill_a + skill_b
                        after_j = sums[j] - skill_b + skill_a
                        after = abs(after_i - targets[i]) + abs(after_j - targets[j])
                        best = self._consider(best, before - after, i, j, a, b)
        return best

    def find_best_stamina_swap(self, teams: list[Team]) -> SwapCandidate | None:
        """
        Best equal-skill swap for stamina.

        Gain is the reduction of the absolute difference between the two
        teams' averages. With unequal sizes the smaller team must start below
        the larger one and the swap must raise its average.
        """
        sizes = [t.size for t in teams]
        sums = [t.stamina_sum(self.ratings) for t in teams]
        avgs = self.stamina_averages(teams)
        best: SwapCandidate | None = None

        for i in range(len(teams)):
            for j in range(i + 1, len(teams)):
                size_i, size_j = sizes[i], sizes[j]
                if size_i < size_j and avgs[i] >= avgs[j]:
                    continue
                if size_i > size_j and avgs[j] >= avgs[i]:
                    continue
                before_diff = abs(avgs[i] - avgs[j])
                for a in teams[i].sorted_members():
                    for b in teams[j].sorted_members():
                        if self.ratings.skill(a) != self.ratings.skill(b):
                            continue
                        st_a, st_b = self.ratings.stamina(a), self.ratings.stamina(b)
                        # Smaller team must receive the fresher player
                        if size_i < size_j and st_b <= st_a:
                            continue
                        if size_i > size_j and st_a <= st_b:
                            continue
                        after_i = (sums[i] + (st_b - st_a)) / size_i
                        after_j = (sums[j] + (st_a - st_b)) / size_j
                        gain = before_diff - abs(after_i - after_j)
                        best = self._consider(best, gain, i, j, a, b)
        return best

    # ------------------------------------------------------------------
    # Passes
    # ------------------------------------------------------------------

    def _apply(self, teams: list[Team], swap: SwapCandidate, outcome: BalanceOutcome) -> None:
        team_i, team_j = teams[swap.i], teams[swap.j]
        swap_members(team_i, swap.a, team_j, swap.b)
        outcome.swaps.append((team_i.id, swap.a, team_j.id, swap.b))
        logger.debug(
            f"{outcome.pass_name} swap: {swap.a} ({team_i.name}) <-> {swap.b} ({team_j.name}), "
            f"gain={swap.gain:.4f}"
        )

    def balance_skill_to_targets(
        self, teams: list[Team], roster: list[str] | None = None
    ) -> BalanceOutcome:
        """
        Repeatedly apply the best skill swap until none improves.

        Args:
            teams: Teams to rebalance in place
            roster: Attendees used for the average skill (defaults to all members)

        Returns:
            BalanceOutcome describing the accepted swaps
        """
        outcome = BalanceOutcome(pass_name="skill")
        names = list(roster) if roster is not None else [m for t in teams for m in t.members]
        if len(teams) < 2 or not names:
            outcome.converged = True
            return outcome

        avg_skill = self.average_skill(names)
        for _ in range(self.max_passes):
            outcome.passes += 1
            best = self.find_best_skill_swap(teams, avg_skill)
            if best is None:
                outcome.converged = True
                break
            self._apply(teams, best, outcome)
        return outcome

    def balance_stamina_equal_skill(self, teams: list[Team]) -> BalanceOutcome:
        """Smooth stamina across teams using equal-skill swaps only."""
        outcome = BalanceOutcome(pass_name="stamina")
        if len(teams) < 2:
            outcome.converged = True
            return outcome

        for _ in range(self.max_passes):
            outcome.passes += 1
            best = self.find_best_stamina_swap(teams)
            if best is None:
                outcome.converged = True
                break
            self._apply(teams, best, outcome)
        return outcome
