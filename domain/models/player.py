"""
Player rating domain model.
"""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from config import DEFAULT_SKILL, DEFAULT_STAMINA


@dataclass(frozen=True)
class PlayerRating:
    """
    Skill and stamina of a single player.

    Both values live on the same bounded scale (1..5 by convention).
    """

    name: str
    skill: float = DEFAULT_SKILL
    stamina: float = DEFAULT_STAMINA


@dataclass(frozen=True)
class RatingTable:
    """
    Immutable lookup of player ratings.

    Players missing from the table are rated with the neutral defaults, so an
    allocation never fails because someone new showed up.
    """

    skills: Mapping[str, float] = field(default_factory=dict)
    stamina_values: Mapping[str, float] = field(default_factory=dict)
    default_skill: float = DEFAULT_SKILL
    default_stamina: float = DEFAULT_STAMINA

    def __post_init__(self):
        # Freeze copies so callers can't mutate ratings mid-run
        object.__setattr__(self, "skills", MappingProxyType(dict(self.skills)))
        object.__setattr__(self, "stamina_values", MappingProxyType(dict(self.stamina_values)))

    @classmethod
    def from_ratings(
        cls,
        ratings: Mapping[str, tuple[float, float]],
        default_skill: float = DEFAULT_SKILL,
        default_stamina: float = DEFAULT_STAMINA,
    ) -> "RatingTable":
        """Build a table from ``{name: (skill, stamina)}``."""
        return cls(
            skills={name: skill for name, (skill, _) in ratings.items()},
            stamina_values={name: stamina for name, (_, stamina) in ratings.items()},
            default_skill=default_skill,
            default_stamina=default_stamina,
        )

    def skill(self, name: str) -> float:
        return self.skills.get(name, self.default_skill)

    def stamina(self, name: str) -> float:
        return self.stamina_values.get(name, self.default_stamina)

    def rating(self, name: str) -> PlayerRating:
        return PlayerRating(name=name, skill=self.skill(name), stamina=self.stamina(name))

    def __contains__(self, name: object) -> bool:
        return name in self.skills or name in self.stamina_values

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(set(self.skills) | set(self.stamina_values)))
