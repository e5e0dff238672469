"""
Tests for TeamBalancingService: skill swaps and equal-skill stamina smoothing.
"""

import pytest

from domain.models.player import RatingTable
from domain.models.team import Team
from domain.services.team_balancing_service import TeamBalancingService
from shuffler import BalancedShuffler
from tests.conftest import make_roster


def _teams(*member_lists):
    return [Team(i + 1, f"T{i + 1}", "#000000", members) for i, members in enumerate(member_lists)]


@pytest.fixture
def strong_weak():
    ratings = RatingTable.from_ratings(
        {**{f"S{i}": (5, 3) for i in range(1, 5)}, **{f"W{i}": (1, 3) for i in range(1, 5)}}
    )
    teams = _teams(["S1", "S2", "S3", "S4"], ["W1", "W2", "W3", "W4"])
    return ratings, teams


class TestSkillBalancing:
    """Tests for balance_skill_to_targets."""

    def test_strong_vs_weak_two_swaps(self, strong_weak):
        """All strong players on one side are evened out in two swaps."""
        ratings, teams = strong_weak
        service = TeamBalancingService(ratings)

        outcome = service.balance_skill_to_targets(teams)

        assert outcome.swaps == [(1, "S1", 2, "W1"), (1, "S2", 2, "W2")]
        assert outcome.converged is True
        assert outcome.improved is True
        assert outcome.passes == 3
        assert [t.skill_sum(ratings) for t in teams] == [12, 12]
        assert service.total_skill_deviation(teams, 3.0) == 0

    def test_swaps_keep_positions(self, strong_weak):
        """Swapped players take the departing member's slot."""
        ratings, teams = strong_weak
        TeamBalancingService(ratings).balance_skill_to_targets(teams)
        assert teams[0].members == ["W1", "W2", "S3", "S4"]
        assert teams[1].members == ["S1", "S2", "W3", "W4"]

    def test_pass_cap(self, strong_weak):
        """The iteration cap stops the search even when more swaps would help."""
        ratings, teams = strong_weak
        outcome = TeamBalancingService(ratings, max_passes=1).balance_skill_to_targets(teams)

        assert outcome.passes == 1
        assert len(outcome.swaps) == 1
        assert outcome.converged is False

    def test_balanced_partition_untouched(self):
        ratings = RatingTable.from_ratings({"A": (5, 3), "B": (1, 3), "C": (5, 3), "D": (1, 3)})
        teams = _teams(["A", "B"], ["C", "D"])
        outcome = TeamBalancingService(ratings).balance_skill_to_targets(teams)

        assert outcome.swaps == []
        assert outcome.improved is False
        assert outcome.converged is True

    def test_single_team_is_noop(self):
        ratings = RatingTable()
        outcome = TeamBalancingService(ratings).balance_skill_to_targets(_teams(["A", "B"]))
        assert outcome.converged is True
        assert outcome.passes == 0

    def test_converged_result_is_locally_optimal(self, sample_ratings):
        """After convergence no single cross-team swap lowers the total deviation."""
        roster = make_roster(16)
        teams = BalancedShuffler(sample_ratings).partition(roster, 4)
        service = TeamBalancingService(sample_ratings)

        outcome = service.balance_skill_to_targets(teams, roster)
        assert outcome.converged

        avg = service.average_skill(roster)
        baseline = service.total_skill_deviation(teams, avg)
        for i in range(len(teams)):
            for j in range(i + 1, len(teams)):
                for a in list(teams[i].members):
                    for b in list(teams[j].members):
                        teams[i].replace_member(a, b)
                        teams[j].replace_member(b, a)
                        after = service.total_skill_deviation(teams, avg)
                        teams[i].replace_member(b, a)
                        teams[j].replace_member(a, b)
                        assert after >= baseline - service.epsilon


class TestStaminaBalancing:
    """Tests for balance_stamina_equal_skill."""

    def test_equal_sizes_close_the_gap(self):
        ratings = RatingTable.from_ratings({"A": (3, 5), "B": (3, 5), "C": (3, 1), "D": (3, 1)})
        teams = _teams(["A", "B"], ["C", "D"])
        service = TeamBalancingService(ratings)

        outcome = service.balance_stamina_equal_skill(teams)

        assert outcome.swaps == [(1, "A", 2, "C")]
        assert service.stamina_averages(teams) == [3.0, 3.0]

    def test_unequal_sizes_lift_smaller_team(self):
        """The smaller team takes a fresher player, but never overshoots the gap."""
        ratings = RatingTable.from_ratings(
            {"A": (3, 1), "B": (3, 1), "C": (3, 5), "D": (3, 5), "E": (3, 5)}
        )
        teams = _teams(["A", "B"], ["C", "D", "E"])
        service = TeamBalancingService(ratings)

        outcome = service.balance_stamina_equal_skill(teams)

        assert outcome.swaps == [(1, "A", 2, "C")]
        assert service.stamina_averages(teams) == pytest.approx([3.0, 11 / 3])
        assert outcome.converged is True

    def test_unequal_sizes_smaller_team_already_fresher(self):
        """A smaller team above the larger one's average is left alone."""
        ratings = RatingTable.from_ratings(
            {
                "A": (3, 4), "B": (3, 4), "C": (3, 4), "D": (3, 3),
                "E": (3, 5), "F": (3, 1), "G": (3, 1), "H": (3, 1), "I": (3, 2),
            }
        )
        teams = _teams(["A", "B", "C", "D"], ["E", "F", "G", "H", "I"])
        service = TeamBalancingService(ratings)
        before = service.stamina_averages(teams)

        outcome = service.balance_stamina_equal_skill(teams)
        after = service.stamina_averages(teams)

        assert outcome.swaps == []
        assert abs(after[0] - after[1]) <= abs(before[0] - before[1])

    def test_unequal_sizes_gap_never_widens(self, sample_ratings):
        """Every accepted stamina swap narrows the gap between the pair it touches."""
        roster = make_roster(11)
        teams = BalancedShuffler(sample_ratings).partition(roster, 2)
        service = TeamBalancingService(sample_ratings)
        before = service.stamina_averages(teams)

        service.balance_stamina_equal_skill(teams)
        after = service.stamina_averages(teams)

        assert abs(after[0] - after[1]) <= abs(before[0] - before[1])

    def test_skill_differing_pairs_never_swapped(self):
        ratings = RatingTable.from_ratings({"A": (5, 5), "B": (1, 5), "C": (4, 1), "D": (2, 1)})
        teams = _teams(["A", "B"], ["C", "D"])

        outcome = TeamBalancingService(ratings).balance_stamina_equal_skill(teams)

        assert outcome.swaps == []
        assert teams[0].members == ["A", "B"]
        assert teams[1].members == ["C", "D"]

    def test_skill_sums_preserved(self, sample_ratings):
        """Stamina smoothing never changes any team's skill sum."""
        roster = make_roster(18)
        teams = BalancedShuffler(sample_ratings).partition(roster, 3)
        service = TeamBalancingService(sample_ratings)
        service.balance_skill_to_targets(teams, roster)
        before = [t.skill_sum(sample_ratings) for t in teams]

        outcome = service.balance_stamina_equal_skill(teams)

        assert [t.skill_sum(sample_ratings) for t in teams] == before
        for _, a, _, b in outcome.swaps:
            assert sample_ratings.skill(a) == sample_ratings.skill(b)


class TestTieBreaking:
    """Near-equal gains resolve to the lowest (team pair, member names)."""

    def test_consider_prefers_lower_indices(self):
        service = TeamBalancingService(RatingTable())
        best = service._consider(None, 2.0, 1, 2, "X", "Y")
        best = service._consider(best, 2.0 + 1e-12, 0, 1, "Z", "Z")
        assert (best.i, best.j, best.a, best.b) == (0, 1, "Z", "Z")

    def test_consider_takes_larger_gain(self):
        service = TeamBalancingService(RatingTable())
        best = service._consider(None, 1.0, 0, 1, "A", "B")
        best = service._consider(best, 3.0, 2, 3, "Z", "Z")
        assert best.gain == 3.0

    def test_consider_ignores_non_improving(self):
        service = TeamBalancingService(RatingTable())
        assert service._consider(None, 0.0, 0, 1, "A", "B") is None
        assert service._consider(None, -1.0, 0, 1, "A", "B") is None
