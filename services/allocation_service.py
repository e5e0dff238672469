"""
Allocation service: roster in, teams and schedule out.

Wraps the shuffler and scheduler with roster policy (limits, team-count
choice) and reports input problems as Result failures instead of raising.
"""

import logging
from dataclasses import dataclass

from config import DEFAULT_ROUNDS, MAX_ATTENDEES, MAX_TEAMS, MIN_ATTENDEES, TEAM_COLORS
from domain.models.fixture import Schedule
from domain.models.harmony import HarmonyPairs
from domain.models.player import RatingTable
from domain.models.team import Team
from scheduler import RoundRobinScheduler
from services import error_codes
from services.result import Result
from shuffler import AllocationResult, BalancedShuffler, compute_capacities

logger = logging.getLogger("matchday.allocation")

# Roster sizes where either team count is reasonable; the caller must choose
AMBIGUOUS_TEAM_COUNTS: dict[int, tuple[int, int]] = {11: (2, 3)}


@dataclass
class Allocation:
    """Everything one generate() call produced."""

    roster: list[str]
    teams: list[Team]
    schedule: Schedule
    seed: int
    details: AllocationResult

    def team_by_id(self, team_id: int) -> Team | None:
        return next((t for t in self.teams if t.id == team_id), None)


def suggest_team_count(n_players: int) -> int:
    """Roughly four players per team, capped at MAX_TEAMS."""
    return max(1, min(MAX_TEAMS, n_players // 4))


def team_count_options(n_players: int) -> tuple[int, ...]:
    """Team counts to offer for a roster size (two options when ambiguous)."""
    if n_players in AMBIGUOUS_TEAM_COUNTS:
        return AMBIGUOUS_TEAM_COUNTS[n_players]
    return (suggest_team_count(n_players),)


def describe_team_sizes(n_players: int, team_count: int) -> str:
    """Team sizes largest first, e.g. ``describe_team_sizes(11, 3) == "4-4-3"``."""
    sizes = sorted(compute_capacities(n_players, team_count), reverse=True)
    return "-".join(str(s) for s in sizes)


def clamp_roster(roster: list[str], max_attendees: int = MAX_ATTENDEES) -> list[str]:
    """First ``max_attendees`` unique, non-blank names in their original order."""
    seen: set[str] = set()
    clamped = []
    for name in roster:
        name = name.strip()
        if not name or name in seen:
            continue
        seen.add(name)
        clamped.append(name)
        if len(clamped) >= max_attendees:
            break
    return clamped


class AllocationService:
    """Generates teams and schedules for a roster."""

    def __init__(
        self,
        ratings: RatingTable | None = None,
        harmony: HarmonyPairs | None = None,
        shuffler: BalancedShuffler | None = None,
        scheduler: RoundRobinScheduler | None = None,
        min_attendees: int = MIN_ATTENDEES,
        max_attendees: int = MAX_ATTENDEES,
    ):
        self.min_attendees = min_attendees
        self.max_attendees = max_attendees
        self.shuffler = shuffler or BalancedShuffler(
            ratings=ratings,
            harmony=harmony,
            min_attendees=min_attendees,
            max_attendees=max_attendees,
        )
        self.scheduler = scheduler or RoundRobinScheduler()

    def validate_roster(self, roster: list[str]) -> Result[None]:
        n = len(roster)
        if n < self.min_attendees:
            return Result.fail(
                f"Need at least {self.min_attendees} attendees to generate teams.",
                code=error_codes.INSUFFICIENT_PLAYERS,
            )
        if n > self.max_attendees:
            return Result.fail(
                f"Limit reached: maximum {self.max_attendees} players.",
                code=error_codes.TOO_MANY_PLAYERS,
            )
        duplicates = sorted({name for name in roster if roster.count(name) > 1})
        if duplicates:
            return Result.fail(
                f"Duplicate attendees: {', '.join(duplicates)}",
                code=error_codes.DUPLICATE_PLAYER,
            )
        return Result.ok()

    def resolve_team_count(self, n_players: int, team_count: int | None) -> Result[int]:
        """Pick or check the team count for a roster size."""
        options = team_count_options(n_players)
        if team_count is None:
            if len(options) > 1:
                choices = " or ".join(
                    f"{t} teams ({describe_team_sizes(n_players, t)})" for t in options
                )
                return Result.fail(
                    f"You have {n_players} players. Choose {choices}.",
                    code=error_codes.INVALID_TEAM_COUNT,
                )
            team_count = options[0]

        max_teams = min(MAX_TEAMS, len(TEAM_COLORS), n_players // 2)
        if team_count < 2 or team_count > max_teams:
            return Result.fail(
                f"{team_count} teams is not possible with {n_players} players "
                f"(choose between 2 and {max_teams}).",
                code=error_codes.INVALID_TEAM_COUNT,
            )
        return Result.ok(team_count)

    def generate(
        self,
        roster: list[str],
        team_count: int | None = None,
        rounds: int = DEFAULT_ROUNDS,
    ) -> Result[Allocation]:
        """
        Allocate teams and build the schedule.

        Args:
            roster: Attendee names
            team_count: Number of teams (required for ambiguous roster sizes)
            rounds: Number of round-robin rounds

        Returns:
            Result.ok(Allocation) or Result.fail(message, code)
        """
        roster = list(roster)
        check = self.validate_roster(roster)
        if not check:
            return check

        count_result = self.resolve_team_count(len(roster), team_count)
        if not count_result:
            return count_result
        if rounds < 1:
            return Result.fail(
                f"Rounds must be at least 1, got {rounds}.", code=error_codes.INVALID_ROUND_COUNT
            )

        try:
            details = self.shuffler.shuffle(roster, count_result.value)
        except ValueError as e:
            return Result.fail(str(e), code=error_codes.VALIDATION_ERROR)

        schedule = self.scheduler.build_schedule(details.teams, rounds, details.seed)
        logger.info(
            f"Generated {len(details.teams)} teams ({describe_team_sizes(len(roster), len(details.teams))}) "
            f"and {len(schedule.fixtures)} fixtures over {rounds} rounds"
        )
        return Result.ok(
            Allocation(
                roster=roster,
                teams=details.teams,
                schedule=schedule,
                seed=details.seed,
                details=details,
            )
        )
