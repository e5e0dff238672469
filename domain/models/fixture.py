"""
Fixture and schedule domain models.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field


def make_match_id(team_a_id: int, team_b_id: int, round_index: int) -> str:
    """
    Stable key for a fixture, e.g. ``"1-3-r2"``.

    Depends only on the unordered team pair and the round, so results can be
    recorded against it without access to any schedule state.
    """
    low, high = sorted((team_a_id, team_b_id))
    return f"{low}-{high}-r{round_index}"


@dataclass(frozen=True)
class Fixture:
    """One match between two teams in a given round (1-based)."""

    team_a_id: int
    team_b_id: int
    round_index: int
    played: bool = False
    kickoff_team_id: int | None = None  # Set only on the next unplayed fixture

    @property
    def match_id(self) -> str:
        return make_match_id(self.team_a_id, self.team_b_id, self.round_index)

    @property
    def team_ids(self) -> tuple[int, int]:
        return (self.team_a_id, self.team_b_id)

    def involves(self, team_id: int) -> bool:
        return team_id in (self.team_a_id, self.team_b_id)

    def __str__(self) -> str:
        return f"[{self.match_id}] {self.team_a_id} vs {self.team_b_id}"


@dataclass(frozen=True)
class StreakFixOutcome:
    """
    Result of the cross-round anti-streak check.

    Attributes:
        strategy: "original", "reversed", "rotation:<k>" or "unresolved"
        resolved: True when the chosen order has no streak of 3+
        candidates_tried: How many candidate orders were simulated
        exhausted: True when every candidate was tried without success
    """

    strategy: str
    resolved: bool
    candidates_tried: int
    exhausted: bool = False


@dataclass
class Schedule:
    """
    Per-round pairing order (identical for every round) plus the flattened,
    round-major fixture list.
    """

    round_order: list[tuple[int, int]]
    rounds: int
    fixtures: list[Fixture] = field(default_factory=list)
    seed: int = 0
    streak_fix: StreakFixOutcome | None = None

    @property
    def match_ids(self) -> list[str]:
        return [f.match_id for f in self.fixtures]

    def fixtures_for_round(self, round_index: int) -> list[Fixture]:
        return [f for f in self.fixtures if f.round_index == round_index]

    def find(self, match_id: str) -> Fixture | None:
        for fixture in self.fixtures:
            if fixture.match_id == match_id:
                return fixture
        return None

    def next_fixture(self, played_ids: Iterable[str] | None = None) -> Fixture | None:
        """
        First fixture in flattened order that has not been played.

        Without ``played_ids`` the fixtures' own ``played`` flags are used.
        """
        if played_ids is None:
            for fixture in self.fixtures:
                if not fixture.played:
                    return fixture
            return None
        played = set(played_ids)
        for fixture in self.fixtures:
            if fixture.match_id not in played:
                return fixture
        return None

    @property
    def kickoff_team_id(self) -> int | None:
        upcoming = self.next_fixture()
        return upcoming.kickoff_team_id if upcoming else None

    def team_sequence(self) -> list[tuple[int, int]]:
        """Flattened (team_a_id, team_b_id) pairs, round-major."""
        return [f.team_ids for f in self.fixtures]
