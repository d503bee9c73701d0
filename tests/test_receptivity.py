"""Tests for the receptivity calculation and ranking."""

import unittest

import pytest

from priority_index import AgePopulationRecord as Row
from priority_index import ConfigurationError
from priority_index import Diagnostics
from priority_index import PopulationTable
from priority_index.receptivity import ReceptivityScore
from priority_index.receptivity import rank
from priority_index.receptivity import receptivity


class TestReceptivity(unittest.TestCase):
    def setUp(self):
        self.rows = [
            Row("A", 85, 10),
            Row("A", 30, 90),
            Row("B", 40, 6000),
            Row("C", 60, 1),
            Row("C", 75, 2),
            Row("C", 80, 3),
            Row("C", 95, 4),
            Row("Z", 80, 0),
        ]

    def test_percentages(self):
        scores = receptivity(self.rows, 80)
        assert scores["A"] == ReceptivityScore("A", 10, 100, 10.0), f"Unexpected score {scores['A']}"
        assert scores["B"].percentage == 0.0
        assert scores["C"].receptive_population == 7
        assert scores["C"].total_population == 10
        assert scores["C"].percentage == pytest.approx(70.0)

    def test_zero_population_is_undefined(self):
        diagnostics = Diagnostics()
        scores = receptivity(self.rows, 80, diagnostics=diagnostics)
        assert scores["Z"] == ReceptivityScore("Z", 0, 0, None)
        assert diagnostics.zero_population_areas == 1

    def test_malformed_rows_are_counted(self):
        diagnostics = Diagnostics()
        scores = receptivity(self.rows + [Row("A", -1, 50), Row("A", 90, -50)], 80, diagnostics=diagnostics)
        assert scores["A"].percentage == 10.0
        assert diagnostics.malformed_records == 2

    def test_accepts_population_table(self):
        assert receptivity(PopulationTable(self.rows), 80) == receptivity(self.rows, 80)

    def test_bounds_and_monotonicity(self):
        previous = None
        for cutoff in range(0, 101, 5):
            scores = receptivity(self.rows, cutoff)
            for area_id, score in scores.items():
                if score.total_population > 0:
                    assert 0 <= score.percentage <= 100, f"{area_id} at cutoff {cutoff}: {score.percentage}"
                    if previous is not None:
                        assert score.percentage <= previous[area_id].percentage, f"{area_id} increased at cutoff {cutoff}"
            previous = scores

        assert all(score.percentage == 100.0 for score in receptivity(self.rows, 0).values() if score.total_population)

    def test_invalid_cutoff(self):
        for cutoff in (-1, 80.0, True, None):
            with pytest.raises(ConfigurationError, match="age_cutoff"):
                receptivity(self.rows, cutoff)


class TestRank(unittest.TestCase):
    def test_rank_descending_none_last(self):
        scores = {
            "a": ReceptivityScore("a", 1, 10, 10.0),
            "b": ReceptivityScore("b", 0, 0, None),
            "c": ReceptivityScore("c", 5, 10, 50.0),
            "d": ReceptivityScore("d", 1, 10, 10.0),
        }
        assert [score.area_id for score in rank(scores)] == ["c", "a", "d", "b"]

    def test_rank_by_other_key(self):
        scores = [ReceptivityScore("a", 3, 10, 30.0), ReceptivityScore("b", 9, 100, 9.0)]
        assert [score.area_id for score in rank(scores, key="receptive_population")] == ["b", "a"]


if __name__ == "__main__":
    unittest.main()
