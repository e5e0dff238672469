"""
In-memory match session: recorded results and round management.

Results are keyed by the stable match id, so the schedule can be rebuilt at
any time (for instance after adding a round) without losing them.
"""

import logging
from dataclasses import dataclass, field

from config import MIN_REMOVABLE_ROUND
from domain.models.fixture import Schedule
from domain.models.team import Team
from scheduler import RoundRobinScheduler
from services import error_codes
from services.allocation_service import Allocation
from services.result import Result

logger = logging.getLogger("matchday.rounds")


@dataclass(frozen=True)
class MatchResult:
    """Final score of a fixture, oriented as in the schedule (team A vs team B)."""

    match_id: str
    round_index: int
    team_a_id: int
    team_b_id: int
    goals_a: int
    goals_b: int

    @property
    def winner_id(self) -> int | None:
        if self.goals_a > self.goals_b:
            return self.team_a_id
        if self.goals_b > self.goals_a:
            return self.team_b_id
        return None


@dataclass
class MatchSession:
    """Teams for one matchday plus the results recorded so far."""

    teams: list[Team]
    rounds: int
    seed: int
    results: dict[str, MatchResult] = field(default_factory=dict)

    @classmethod
    def from_allocation(cls, allocation: Allocation) -> "MatchSession":
        return cls(teams=allocation.teams, rounds=allocation.schedule.rounds, seed=allocation.seed)

    @property
    def played_ids(self) -> set[str]:
        return set(self.results)


class RoundService:
    """
    Records results and grows or shrinks the number of rounds.

    Responsibilities:
    - Validate and store results against scheduled match ids
    - Add a round / remove the last round (only when it has no results)
    - Rebuild the schedule with played flags and the next kickoff
    """

    def __init__(self, scheduler: RoundRobinScheduler | None = None):
        self.scheduler = scheduler or RoundRobinScheduler()

    def current_schedule(self, session: MatchSession) -> Schedule:
        return self.scheduler.build_schedule(
            session.teams, session.rounds, session.seed, played_match_ids=session.played_ids
        )

    def record_result(
        self, session: MatchSession, match_id: str, goals_a: int, goals_b: int
    ) -> Result[MatchResult]:
        """
        Store (or overwrite) the score of a scheduled fixture.

        Args:
            session: Session to update
            match_id: Stable match id such as "1-2-r1"
            goals_a: Goals for the fixture's team A
            goals_b: Goals for the fixture's team B
        """
        if not session.teams:
            return Result.fail("Generate teams before entering results.", code=error_codes.NO_TEAMS)
        if not all(isinstance(g, int) and not isinstance(g, bool) for g in (goals_a, goals_b)):
            return Result.fail("Goals must be whole numbers.", code=error_codes.INVALID_RESULT)
        if goals_a < 0 or goals_b < 0:
            return Result.fail("Goals can't be negative.", code=error_codes.INVALID_RESULT)

        fixture = self.current_schedule(session).find(match_id)
        if fixture is None:
            return Result.fail(f"No scheduled match {match_id}.", code=error_codes.MATCH_NOT_FOUND)

        result = MatchResult(
            match_id=match_id,
            round_index=fixture.round_index,
            team_a_id=fixture.team_a_id,
            team_b_id=fixture.team_b_id,
            goals_a=goals_a,
            goals_b=goals_b,
        )
        session.results[match_id] = result
        logger.info(f"Recorded {match_id}: {goals_a}-{goals_b}")
        return Result.ok(result)

    def clear_result(self, session: MatchSession, match_id: str) -> Result[None]:
        if match_id not in session.results:
            return Result.fail(f"No result recorded for {match_id}.", code=error_codes.MATCH_NOT_FOUND)
        del session.results[match_id]
        return Result.ok()

    @staticmethod
    def round_has_results(session: MatchSession, round_index: int) -> bool:
        return any(r.round_index == round_index for r in session.results.values())

    def add_round(self, session: MatchSession) -> Result[int]:
        """Append another full round-robin round."""
        if len(session.teams) < 2:
            return Result.fail("Generate teams before adding rounds.", code=error_codes.NO_TEAMS)
        session.rounds = max(1, session.rounds) + 1
        logger.info(f"Added round {session.rounds}")
        return Result.ok(session.rounds)

    def remove_last_round(self, session: MatchSession) -> Result[int]:
        """
        Drop the last round.

        Refused when only MIN_REMOVABLE_ROUND rounds remain or when the last
        round already has a recorded result.
        """
        last = session.rounds
        if last <= MIN_REMOVABLE_ROUND:
            return Result.fail(
                f"At least {MIN_REMOVABLE_ROUND} rounds are always played.",
                code=error_codes.MIN_ROUNDS_REACHED,
            )
        if self.round_has_results(session, last):
            return Result.fail(
                f"Round {last} has recorded results and cannot be removed. "
                "You can only remove an empty round.",
                code=error_codes.ROUND_HAS_RESULTS,
            )
        session.rounds = last - 1
        logger.info(f"Removed round {last}")
        return Result.ok(session.rounds)

    def all_matches_scored(self, session: MatchSession) -> bool:
        if len(session.teams) < 2:
            return False
        schedule = self.current_schedule(session)
        return all(f.match_id in session.results for f in schedule.fixtures)
