"""
Pytest fixtures for tests.

Centralizes the sample rating table and roster helper so each test module doesn't
redefine them.
"""

import pytest

from domain.models.player import RatingTable

# =============================================================================
# CENTRALIZED CONSTANTS
# =============================================================================

SAMPLE_RATINGS: dict[str, tuple[int, int]] = {
    "Ruben": (4, 4),
    "Job": (3, 3),
    "Ramtin": (2, 1),
    "Thijs": (4, 4),
    "Emiel": (4, 3),
    "Frits": (3, 2),
    "Gerjan": (3, 3),
    "Wout": (3, 2),
    "Aklilu": (1, 1),
    "Aron": (1, 1),
    "Aurant": (2, 2),
    "Bas": (4, 3),
    "Bjorn": (4, 3),
    "Danny": (3, 3),
    "David": (3, 3),
    "Hanno": (5, 5),
    "Jefta": (3, 4),
    "Lenn": (3, 4),
    "Nathan": (3, 4),
    "Rene": (3, 3),
    "Sem": (5, 4),
    "Timo": (3, 2),
    "Wijnand": (3, 4),
    "Willem": (4, 4),
    "Amir": (4, 4),
    "Ralph": (5, 5),
}
"""Skill and stamina (1..5) for the regular group."""

SAMPLE_NAMES = list(SAMPLE_RATINGS)


def make_roster(count: int) -> list[str]:
    """First ``count`` names of the regular group (at most 26)."""
    return SAMPLE_NAMES[:count]


@pytest.fixture
def sample_ratings() -> RatingTable:
    return RatingTable.from_ratings(SAMPLE_RATINGS)


@pytest.fixture
def neutral_ratings() -> RatingTable:
    """Everyone rated with the defaults."""
    return RatingTable()
