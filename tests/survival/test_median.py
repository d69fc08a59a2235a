"""
Tests for median survival: first curve time with S(t) <= 0.5, no
interpolation, None when never reached.
"""

import pytest

from cohortsurv.survival import extract_median, kaplan_meier
from cohortsurv.survival._median import median_survival_time


TWO_GROUP_CENSORED = [
    {"time": 10, "event": 1, "group": "A"},
    {"time": 20, "event": 0, "group": "A"},
    {"time": 15, "event": 1, "group": "B"},
    {"time": 30, "event": 1, "group": "B"},
]


class TestExtractMedian:

    def test_exactly_half_counts(self):
        result = kaplan_meier(TWO_GROUP_CENSORED)
        assert extract_median(result["A"].curve) == 10.0
        assert extract_median(result["B"]) == 15.0

    def test_matches_group_result(self):
        for group in kaplan_meier(TWO_GROUP_CENSORED):
            assert extract_median(group.curve) == group.median_survival

    def test_no_interpolation(self):
        """S drops from 0.75 to 0.25 at t=7: the median is 7, not a
        point between the steps."""
        points = [
            {"time": 0, "survival": 1.0},
            {"time": 3, "survival": 0.75},
            {"time": 7, "survival": 0.25},
        ]
        assert extract_median(points) == 7.0

    def test_not_reached(self):
        points = [{"time": 0, "survival": 1.0}, {"time": 5, "survival": 0.6}]
        assert extract_median(points) is None

    def test_all_censored_not_reached(self):
        subjects = [{"time": t, "event": 0, "group": "A"} for t in (4, 8)]
        assert extract_median(kaplan_meier(subjects)["A"].curve) is None

    def test_survival_points_accepted(self):
        points = list(kaplan_meier(TWO_GROUP_CENSORED)["B"].curve)
        assert extract_median(points) == 15.0

    def test_empty_curve(self):
        assert extract_median([]) is None

    @pytest.mark.parametrize("threshold, expected", [(0.75, 3.0), (0.2, None)])
    def test_threshold(self, threshold, expected):
        assert median_survival_time([0, 3, 7], [1.0, 0.75, 0.25],
                                    threshold=threshold) == expected
