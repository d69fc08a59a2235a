"""
Tests for the synthetic cohort generator and cohort_summary().
"""

import numpy as np
import pytest
from numpy.testing import assert_allclose

from cohortsurv.core.exceptions import ValidationError
from cohortsurv.survival import (
    MUTATION_GROUPS,
    TREATMENT_GROUPS,
    CohortSummary,
    GroupProfile,
    Subject,
    cohort_summary,
    generate_cohort,
    group_colors,
    kaplan_meier,
    logrank,
)


class TestGenerateCohort:

    def test_size_and_split(self):
        cohort = generate_cohort(100, rng=1)
        assert len(cohort) == 100
        counts = {g: sum(1 for s in cohort if s.group == g) for g in TREATMENT_GROUPS}
        # 100 // 3 = 33; the last group takes the remainder
        assert counts == {"Control": 33, "Treatment A": 33, "Treatment B": 34}

    def test_sorted_rounded_and_bounded(self):
        cohort = generate_cohort(300, rng=2, max_follow_up=48.0)
        times = np.array([s.time for s in cohort])
        assert np.all(np.diff(times) >= 0)
        assert np.all((times >= 0) & (times <= 48.0))
        assert_allclose(times, np.round(times, 1))
        assert all(isinstance(s, Subject) for s in cohort)

    def test_reproducible_with_seed(self):
        assert generate_cohort(50, rng=7) == generate_cohort(50, rng=7)

    def test_no_dropout_censors_only_at_follow_up(self):
        cohort = generate_cohort(200, rng=3, dropout_rate=0.0, max_follow_up=12.0)
        assert all(s.time == 12.0 for s in cohort if not s.event)

    def test_shorter_median_fails_earlier(self, rng):
        cohort = generate_cohort(2000, MUTATION_GROUPS, rng=rng)
        result = kaplan_meier(cohort)
        assert result["TP53 Mutant"].median_survival < result["TP53 Wild-type"].median_survival
        assert logrank(cohort).significant

    def test_sampling_depends_only_on_median(self):
        """hazard_ratio and color are labels; they do not change the draw."""
        a = {"g": GroupProfile(median_survival=12.0, hazard_ratio=1.0, color="#111")}
        b = {"g": GroupProfile(median_survival=12.0, hazard_ratio=3.0, color="#222")}
        assert generate_cohort(40, a, rng=5) == generate_cohort(40, b, rng=5)

    def test_custom_groups(self):
        groups = {"only": GroupProfile(median_survival=5.0, hazard_ratio=1.0, color="#000")}
        cohort = generate_cohort(10, groups, rng=0)
        assert {s.group for s in cohort} == {"only"}

    @pytest.mark.parametrize("kwargs", [
        {"n": 0},
        {"n": 2},                      # fewer subjects than groups
        {"groups": {}},
        {"max_follow_up": 0.0},
        {"max_follow_up": float("inf")},
        {"dropout_rate": 1.5},
    ])
    def test_invalid_arguments(self, kwargs):
        with pytest.raises(ValidationError):
            generate_cohort(**kwargs)

    def test_group_colors(self):
        colors = group_colors(TREATMENT_GROUPS)
        assert colors["Control"] == "#4a90d9"
        result = kaplan_meier(generate_cohort(30, rng=0), colors=colors)
        assert result["Treatment A"].color == "#e74c3c"


class TestCohortSummary:

    def test_two_group_cohort(self):
        """Pooled KM: t=10 S=3/4, t=15 S=1/2 -> median 15.
        Median follow-up = median(10, 15, 20, 30) = 17.5."""
        subjects = [
            Subject(10, True, "A"), Subject(20, False, "A"),
            Subject(15, True, "B"), Subject(30, True, "B"),
        ]
        summary = cohort_summary(subjects)

        assert isinstance(summary, CohortSummary)
        assert summary.n_subjects == 4
        assert summary.n_events == 3
        assert summary.n_censored == 1
        assert summary.n_groups == 2
        assert summary.event_rate == 0.75
        assert summary.median_follow_up == 17.5
        assert summary.median_survival == 15.0

    def test_not_reached(self):
        subjects = [Subject(t, False, "A") for t in (1, 2)]
        summary = cohort_summary(subjects)
        assert summary.median_survival is None
        assert summary.to_dict()["event_rate"] == 0.0

    def test_groups_filter(self):
        subjects = [Subject(1, True, "A"), Subject(2, True, "B")]
        assert cohort_summary(subjects, groups=["B"]).n_subjects == 1
