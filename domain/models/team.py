"""
Team domain model.
"""

from domain.models.player import RatingTable


class Team:
    """
    A team created by one allocation run.

    Members keep their insertion order; swaps replace a member in place so the
    position of everyone else is stable. This is a pure domain model with no
    infrastructure dependencies.
    """

    def __init__(self, team_id: int, name: str, color: str, members: list[str] | None = None):
        """
        Initialize a team.

        Args:
            team_id: Stable id for the run (1..N)
            name: Display name (the color name by default)
            color: Hex color tag
            members: Optional initial members
        """
        self.id = team_id
        self.name = name
        self.color = color
        self.members: list[str] = list(members or [])

    @property
    def size(self) -> int:
        return len(self.members)

    def contains(self, name: str) -> bool:
        return name in self.members

    def add_member(self, name: str) -> None:
        if name in self.members:
            raise ValueError(f"{name} is already on team {self.name}")
        self.members.append(name)

    def replace_member(self, old: str, new: str) -> None:
        """Swap ``old`` for ``new`` keeping the member's position."""
        idx = self.members.index(old)
        self.members[idx] = new

    def skill_sum(self, ratings: RatingTable) -> float:
        return sum(ratings.skill(m) for m in self.members)

    def stamina_sum(self, ratings: RatingTable) -> float:
        return sum(ratings.stamina(m) for m in self.members)

    def sorted_members(self) -> list[str]:
        return sorted(self.members)

    def snapshot(self) -> list[str]:
        """Copy of the member list, used to roll back a failed pass."""
        return list(self.members)

    def to_dict(self) -> dict:
        """Convert to dictionary format."""
        return {
            "id": self.id,
            "name": self.name,
            "color": self.color,
            "members": list(self.members),
        }

    def __repr__(self) -> str:
        return f"Team(id={self.id}, name={self.name!r}, members={self.members!r})"

    def __str__(self) -> str:
        return f"{self.name}: {', '.join(self.members)}"


def swap_members(team_a: Team, member_a: str, team_b: Team, member_b: str) -> None:
    """Exchange one member between two teams in place."""
    team_a.replace_member(member_a, member_b)
    team_b.replace_member(member_b, member_a)
