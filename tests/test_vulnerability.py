"""Tests for population center selection and the vulnerability score."""

import math
import unittest

import numpy as np
import pytest

from priority_index import AgePopulationRecord as Row
from priority_index import Area
from priority_index import AreaRegistry
from priority_index import ConfigurationError
from priority_index import Diagnostics
from priority_index import ProximityMatrix
from priority_index.areas import grid
from priority_index.proximity import proximity_matrix
from priority_index.vulnerability import VulnerabilityScore
from priority_index.vulnerability import population_centers
from priority_index.vulnerability import vulnerability


class TestPopulationCenters(unittest.TestCase):
    def setUp(self):
        self.registry = AreaRegistry(
            [
                Area("A", "Alpha", 0.0, 0.0),
                Area("B", "Bravo", 0.0, 0.1),
                Area("C", "Charlie", 0.1, 0.0),
            ]
        )
        self.rows = [
            Row("A", 17, 9000),  # too young
            Row("A", 66, 9000),  # too old
            Row("A", 30, 10),
            Row("B", 18, 2500),  # band edges are inclusive
            Row("B", 65, 2500),
            Row("C", 40, 4999),
            Row("Z", 40, 8000),  # not in the registry
        ]

    def test_inclusive_band_and_threshold(self):
        diagnostics = Diagnostics()
        centers = population_centers(self.registry, self.rows, 18, 65, 5000, diagnostics=diagnostics)
        assert centers.ids == ["B"], f"Unexpected centers {centers.ids}"
        assert diagnostics.unknown_centers == 1

    def test_threshold_is_inclusive(self):
        centers = population_centers(self.registry, self.rows, 18, 65, 4999)
        assert centers.ids == ["B", "C"]

    def test_centers_carry_registry_data(self):
        centers = population_centers(self.registry, self.rows, 18, 65, 5000)
        assert centers["B"] == self.registry["B"]

    def test_configuration_errors(self):
        with pytest.raises(ConfigurationError, match="min_mobile_age must not exceed max_mobile_age"):
            population_centers(self.registry, self.rows, 66, 65, 5000)
        with pytest.raises(ConfigurationError, match="min_center_population must be a positive number"):
            population_centers(self.registry, self.rows, 18, 65, 0)

    def test_threshold_must_be_finite_number(self):
        for threshold in (float("nan"), float("inf"), True, "5000", None):
            with pytest.raises(ConfigurationError, match="min_center_population must be a positive number"):
                population_centers(self.registry, self.rows, 18, 65, threshold)

    def test_mobile_ages_must_be_integers(self):
        with pytest.raises(ConfigurationError, match="min_mobile_age must be a non-negative integer"):
            population_centers(self.registry, self.rows, 17.5, 65, 5000)
        with pytest.raises(ConfigurationError, match="max_mobile_age must be a non-negative integer"):
            population_centers(self.registry, self.rows, 18, None, 5000)
        with pytest.raises(ConfigurationError, match="min_mobile_age must be a non-negative integer"):
            population_centers(self.registry, self.rows, -1, 65, 5000)


class TestVulnerability(unittest.TestCase):
    def test_strict_radius(self):
        distances = np.array([[0.0, 100.0, 200.0], [100.0, 0.0, 99.9]])
        proximity = ProximityMatrix(["a", "b"], ["a", "b", "c"], distances)
        scores = vulnerability(proximity, 100.0)
        assert scores["a"] == VulnerabilityScore("a", 1, 1.0)
        assert scores["b"] == VulnerabilityScore("b", 1, 1.0)
        assert scores["c"] == VulnerabilityScore("c", 1, 1.0)

        scores = vulnerability(proximity, 100.5)
        assert scores["a"].neighbor_count == 2
        assert scores["a"].score == math.sqrt(2)
        assert scores["c"].neighbor_count == 1

    def test_excluding_self(self):
        distances = np.array([[0.0, 50.0, 500.0], [50.0, 0.0, 500.0]])
        proximity = ProximityMatrix(["a", "b"], ["a", "b", "c"], distances)
        included = vulnerability(proximity, 100.0)
        excluded = vulnerability(proximity, 100.0, count_self_as_neighbor=False)
        assert [included[key].neighbor_count for key in "abc"] == [2, 2, 0]
        assert [excluded[key].neighbor_count for key in "abc"] == [1, 1, 0]
        assert excluded["c"].score == 0.0

    def test_non_negative_and_monotone_in_radius(self):
        areas = grid(M=5, N=5, node_size_km=8)
        centers, _ = areas.subset(["0", "6", "12", "18", "24", "4"])
        proximity = proximity_matrix(areas, centers)
        previous = None
        for radius in (1.0, 5_000.0, 10_000.0, 20_000.0, 40_000.0, 80_000.0):
            scores = vulnerability(proximity, radius)
            for area_id, score in scores.items():
                assert score.score >= 0
                assert score.score == math.sqrt(score.neighbor_count)
                if previous is not None:
                    assert score.score >= previous[area_id].score, f"{area_id} decreased at radius {radius}"
            previous = scores
        assert all(score.neighbor_count == 6 for score in previous.values())

    def test_invalid_radius(self):
        proximity = ProximityMatrix(["a"], ["a"], np.zeros((1, 1)))
        for radius in (0, -1.0, None, True):
            with pytest.raises(ConfigurationError, match="radius_meters must be a positive number"):
                vulnerability(proximity, radius)

    def test_no_centers(self):
        proximity = ProximityMatrix([], ["a", "b"], np.zeros((0, 2)))
        scores = vulnerability(proximity, 1000.0)
        assert scores == {"a": VulnerabilityScore("a", 0, 0.0), "b": VulnerabilityScore("b", 0, 0.0)}


if __name__ == "__main__":
    unittest.main()
