"""
Round-robin fixture scheduling.

Every team meets every other team once per round. The pairing order is chosen
once and replicated across rounds, so it has to avoid any team playing three
fixtures in a row both inside a round and across round boundaries.
"""

import logging
from collections.abc import Iterable
from dataclasses import replace

from config import KICKOFF_SEED_OFFSET, MAX_STREAK
from domain.models.fixture import Fixture, Schedule, StreakFixOutcome
from domain.models.team import Team
from utils.seeding import MASK_32, Mulberry32, seeded_shuffle

logger = logging.getLogger("matchday.scheduler")

Pairing = tuple[int, int]


def rotate(order: list[Pairing], k: int) -> list[Pairing]:
    """Rotate left by k positions."""
    n = len(order)
    return [order[(i + k) % n] for i in range(n)]


class RoundRobinScheduler:
    """
    Builds deterministic multi-round schedules with anti-streak ordering and
    kickoff fairness.
    """

    def __init__(self, max_streak: int = MAX_STREAK, kickoff_seed_offset: int = KICKOFF_SEED_OFFSET):
        """
        Initialize the scheduler.

        Args:
            max_streak: Most consecutive fixtures a team may play
            kickoff_seed_offset: Added to the schedule seed for kickoff coin flips
        """
        self.max_streak = max_streak
        self.kickoff_seed_offset = kickoff_seed_offset

    @staticmethod
    def build_pairings(teams: list[Team]) -> list[Pairing]:
        """All C(t, 2) unique pairings of team ids, in team list order."""
        return [
            (teams[i].id, teams[j].id)
            for i in range(len(teams))
            for j in range(i + 1, len(teams))
        ]

    def order_round_pairings(self, teams: list[Team], seed: int) -> list[Pairing]:
        """
        Order one round's pairings so no team plays more than ``max_streak`` in a row.

        Four teams use the classic A-B, C-D, A-C, B-D, A-D, B-C order (teams
        sorted by id). Otherwise the pairings are seed-shuffled and picked
        greedily; when every remaining pairing would extend a streak the first
        one is taken anyway.
        """
        if len(teams) == 4:
            a, b, c, d = sorted(t.id for t in teams)
            return [(a, b), (c, d), (a, c), (b, d), (a, d), (b, c)]

        remaining = seeded_shuffle(self.build_pairings(teams), seed)
        streaks = {t.id: 0 for t in teams}
        ordered: list[Pairing] = []
        while remaining:
            pick = next(
                (
                    i
                    for i, (a, b) in enumerate(remaining)
                    if streaks[a] < self.max_streak and streaks[b] < self.max_streak
                ),
                None,
            )
            if pick is None:
                logger.debug(f"No streak-safe pairing left; taking {remaining[0]}")
                pick = 0
            a, b = remaining.pop(pick)
            ordered.append((a, b))
            for team_id in streaks:
                streaks[team_id] = streaks[team_id] + 1 if team_id in (a, b) else 0
        return ordered

    @staticmethod
    def longest_streak(sequence: Iterable[Pairing], team_ids: Iterable[int]) -> int:
        """Longest run of consecutive fixtures any team appears in."""
        streaks = {team_id: 0 for team_id in team_ids}
        longest = 0
        for a, b in sequence:
            for team_id in streaks:
                streaks[team_id] = streaks[team_id] + 1 if team_id in (a, b) else 0
                longest = max(longest, streaks[team_id])
        return longest

    def has_streak_violation(self, order: list[Pairing], team_ids: list[int], rounds: int) -> bool:
        """Simulate the full flattened schedule and look for a streak past the limit."""
        return self.longest_streak(order * rounds, team_ids) > self.max_streak

    def fix_cross_round_streaks(
        self, order: list[Pairing], team_ids: list[int], rounds: int
    ) -> tuple[list[Pairing], StreakFixOutcome]:
        """
        Pick an order that stays streak-free once replicated across rounds.

        Tries the original order, the reversed order, then each rotation by
        1..len-1. The first clean candidate wins; if none is clean the
        original order is kept.
        """
        candidates: list[tuple[str, list[Pairing]]] = [
            ("original", order),
            ("reversed", list(reversed(order))),
        ]
        candidates.extend((f"rotation:{k}", rotate(order, k)) for k in range(1, len(order)))

        for tried, (strategy, candidate) in enumerate(candidates, 1):
            if not self.has_streak_violation(candidate, team_ids, rounds):
                if strategy != "original":
                    logger.debug(f"Cross-round streak fixed using {strategy}")
                return candidate, StreakFixOutcome(strategy, resolved=True, candidates_tried=tried)

        logger.warning(
            f"No order avoids {self.max_streak + 1}-in-a-row over {rounds} rounds "
            f"({len(candidates)} candidates tried); keeping original order"
        )
        return order, StreakFixOutcome(
            "unresolved", resolved=False, candidates_tried=len(candidates), exhausted=True
        )

    def assign_kickoff(
        self, fixtures: list[Fixture], team_ids: list[int], seed: int, played_ids: set[str]
    ) -> list[Fixture]:
        """
        Mark played fixtures and give the next unplayed one a kickoff team.

        Walks the played prefix crediting a kickoff to whichever team has had
        fewer so far (coin flip on ties), then applies the same rule to the
        first unplayed fixture.
        """
        rng = Mulberry32((seed + self.kickoff_seed_offset) & MASK_32)
        counts = {team_id: 0 for team_id in team_ids}

        def pick(fixture: Fixture) -> int:
            count_a, count_b = counts[fixture.team_a_id], counts[fixture.team_b_id]
            if count_a < count_b:
                return fixture.team_a_id
            if count_b < count_a:
                return fixture.team_b_id
            return fixture.team_a_id if rng.random() < 0.5 else fixture.team_b_id

        marked: list[Fixture] = []
        next_found = False
        for fixture in fixtures:
            played = fixture.match_id in played_ids
            if next_found:
                marked.append(replace(fixture, played=played))
            elif played:
                counts[pick(fixture)] += 1
                marked.append(replace(fixture, played=True))
            else:
                marked.append(replace(fixture, kickoff_team_id=pick(fixture)))
                next_found = True
        return marked

    def build_schedule(
        self,
        teams: list[Team],
        rounds: int,
        seed: int,
        played_match_ids: Iterable[str] | None = None,
    ) -> Schedule:
        """
        Build the full multi-round schedule.

        Args:
            teams: Finalized teams (read only)
            rounds: Number of rounds (>= 1)
            seed: Schedule seed, normally derived from the attendee set
            played_match_ids: Match ids that already have results

        Returns:
            Schedule with the per-round order and flattened fixtures

        Raises:
            ValueError: If there are fewer than two teams or rounds < 1
        """
        if len(teams) < 2:
            raise ValueError(f"Need at least 2 teams to schedule, got {len(teams)}")
        if rounds < 1:
            raise ValueError(f"Rounds must be at least 1, got {rounds}")
        team_ids = [t.id for t in teams]
        if len(set(team_ids)) != len(team_ids):
            raise ValueError(f"Team ids must be unique, got {team_ids}")

        base_order = self.order_round_pairings(teams, seed)
        order, streak_fix = self.fix_cross_round_streaks(base_order, team_ids, rounds)

        flat = [
            Fixture(team_a_id=a, team_b_id=b, round_index=round_index)
            for round_index in range(1, rounds + 1)
            for a, b in order
        ]
        fixtures = self.assign_kickoff(flat, team_ids, seed, set(played_match_ids or ()))

        logger.info(
            f"Schedule: {len(teams)} teams, {rounds} rounds, {len(fixtures)} fixtures, "
            f"order={order}, streak fix={streak_fix.strategy}"
        )
        return Schedule(
            round_order=order, rounds=rounds, fixtures=fixtures, seed=seed, streak_fix=streak_fix
        )
