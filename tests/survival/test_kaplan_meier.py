"""
Tests for kaplan_meier(): product-limit curves per group.

Reference values are derived by hand from S(t) = prod(1 - d_j / n_j) and
agree with R's survival::survfit(Surv(time, event) ~ group).
"""

import json

import numpy as np
import pytest
from numpy.testing import assert_allclose, assert_array_equal

from cohortsurv.core.exceptions import InconsistentAtRiskError, ValidationError
from cohortsurv.survival import (
    KMSolution,
    Subject,
    generate_cohort,
    kaplan_meier,
)
from cohortsurv.survival._km import kaplan_meier_curve


# ── Fixtures ─────────────────────────────────────────────────────────

TWO_GROUP_CENSORED = [
    Subject(time=10, event=True, group="A"),
    Subject(time=20, event=False, group="A"),
    Subject(time=15, event=True, group="B"),
    Subject(time=30, event=True, group="B"),
]

# Classic textbook: 6 subjects, 2 censored
# R:
#   time <- c(1, 2, 3, 4, 5, 6)
#   event <- c(1, 0, 1, 0, 1, 1)
BASIC = [
    {"time": t, "event": e, "group": "all"}
    for t, e in zip([1, 2, 3, 4, 5, 6], [1, 0, 1, 0, 1, 1])
]


class TestKaplanMeierHandWorked:
    """Small cohorts with curves worked out by hand."""

    def test_two_groups(self):
        """A: event at 10 (2 at risk) then censored at 20.
        B: events at 15 (2 at risk) and 30 (1 at risk)."""
        result = kaplan_meier(TWO_GROUP_CENSORED)

        assert isinstance(result, KMSolution)
        assert result.group_names == ("A", "B")

        a = result["A"].curve
        assert_array_equal(a.time, [0, 10, 20])
        assert_array_equal(a.survival, [1.0, 0.5, 0.5])
        assert_array_equal(a.n_risk, [2, 2, 1])
        assert_array_equal(a.n_events, [0, 1, 0])
        assert_array_equal(a.n_censored, [0, 0, 1])

        b = result["B"].curve
        assert_array_equal(b.time, [0, 15, 30])
        assert_array_equal(b.survival, [1.0, 0.5, 0.0])
        assert_array_equal(b.n_risk, [2, 2, 1])

        assert result["A"].n == 2
        assert result["A"].events == 1
        assert result["A"].censored == 1

    def test_tied_events_form_one_step(self):
        """Two events at t=10 with 2 at risk: S = 1 - 2/2 = 0 in one step."""
        subjects = [{"time": 10, "event": 1, "group": "A"}] * 2
        curve = kaplan_meier(subjects)["A"].curve

        assert len(curve) == 2
        assert curve[1].at_risk == 2
        assert curve[1].events == 2
        assert curve[1].survival == 0.0

    def test_all_censored(self):
        """No events: survival stays 1.0 and the median is not reached."""
        subjects = [{"time": t, "event": 0, "group": "A"} for t in (1, 2, 3)]
        group = kaplan_meier(subjects)["A"]

        assert_array_equal(group.curve.survival, [1.0, 1.0, 1.0, 1.0])
        assert group.median_survival is None
        assert_array_equal(group.curve.std_error, 0.0)
        assert_array_equal(group.curve.lower, 1.0)
        assert_array_equal(group.curve.upper, 1.0)

    def test_basic_curve(self):
        """
        S(1) = 5/6
        S(3) = 5/6 * 3/4 = 5/8
        S(5) = 5/8 * 1/2 = 5/16
        S(6) = 0
        Censor-only times 2 and 4 keep the previous value.
        """
        curve = kaplan_meier(BASIC)["all"].curve

        assert_array_equal(curve.time, [0, 1, 2, 3, 4, 5, 6])
        assert_allclose(curve.survival,
                        [1, 5/6, 5/6, 5/8, 5/8, 5/16, 0.0], rtol=1e-12)
        assert_array_equal(curve.n_risk, [6, 6, 5, 4, 3, 2, 1])

    def test_ties_between_event_and_censoring(self):
        """Event and censoring at the same time: the censored subject is
        still at risk for the step, then both leave.

        t=2: n=4, d=1, c=1 -> S = 3/4; t=3: n=2, d=1 -> S = 3/8
        """
        subjects = [
            {"time": 2, "event": 1, "group": "A"},
            {"time": 2, "event": 0, "group": "A"},
            {"time": 3, "event": 1, "group": "A"},
            {"time": 5, "event": 0, "group": "A"},
        ]
        curve = kaplan_meier(subjects)["A"].curve

        assert_array_equal(curve.n_risk, [4, 4, 2, 1])
        assert_allclose(curve.survival, [1.0, 0.75, 0.375, 0.375])

    def test_event_at_time_zero(self):
        """The origin point is always present; an event at t=0 adds a
        second point at the same time."""
        subjects = [{"time": 0, "event": 1, "group": "A"},
                    {"time": 4, "event": 0, "group": "A"}]
        curve = kaplan_meier(subjects)["A"].curve

        assert_array_equal(curve.time, [0, 0, 4])
        assert_array_equal(curve.survival, [1.0, 0.5, 0.5])


class TestKaplanMeierProperties:
    """Structural properties that hold for every cohort."""

    @pytest.mark.parametrize("conf_type", ["log-log", "log", "plain"])
    def test_monotone_and_bounded(self, rng, conf_type):
        cohort = generate_cohort(300, rng=rng)
        result = kaplan_meier(cohort, conf_type=conf_type)

        for group in result:
            c = group.curve
            assert c.survival[0] == 1.0
            assert c.n_risk[0] == group.n
            assert np.all(np.diff(c.survival) <= 0)
            assert np.all(np.diff(c.n_risk) <= 0)
            assert np.all(c.n_risk >= 0)
            for arr in (c.survival, c.lower, c.upper):
                assert np.all((arr >= 0) & (arr <= 1))
            assert np.all(c.lower <= c.survival)
            assert np.all(c.survival <= c.upper)

    def test_at_risk_decrements_by_events_and_censored(self, rng):
        curve = kaplan_meier(generate_cohort(120, rng=rng))["Control"].curve
        removed = curve.n_events[1:] + curve.n_censored[1:]
        assert_array_equal(curve.n_risk[2:], curve.n_risk[1:-1] - removed[:-1])

    def test_idempotent(self, rng):
        cohort = generate_cohort(150, rng=rng)
        first = kaplan_meier(cohort)
        second = kaplan_meier(cohort)

        for g1, g2 in zip(first, second):
            for name in ("time", "survival", "n_risk", "std_error", "lower", "upper"):
                assert_array_equal(getattr(g1.curve, name), getattr(g2.curve, name))
        assert first.to_dict() == second.to_dict()

    def test_curve_arrays_read_only(self):
        curve = kaplan_meier(TWO_GROUP_CENSORED)["A"].curve
        with pytest.raises(ValueError):
            curve.survival[1] = 0.9


class TestKaplanMeierOptions:

    def test_colors_and_metadata_pass_through(self):
        result = kaplan_meier(
            TWO_GROUP_CENSORED,
            colors={"A": "#e74c3c", "B": "#3498db"},
            metadata={"A": {"arm": "control"}},
        )
        assert result["A"].color == "#e74c3c"
        assert result["A"].metadata == {"arm": "control"}
        assert result["B"].metadata == {}
        assert result.warnings == ()

    def test_unknown_color_label_warns(self):
        with pytest.warns(UserWarning, match="colors given for unknown group"):
            result = kaplan_meier(TWO_GROUP_CENSORED, colors={"Z": "#000000"})
        assert any("unknown group" in w for w in result.warnings)

    def test_groups_option(self):
        result = kaplan_meier(TWO_GROUP_CENSORED, groups=["B", "A"])
        assert result.group_names == ("B", "A")

    @pytest.mark.parametrize("level", [0.0, 1.0, 1.5, -0.2])
    def test_bad_conf_level(self, level):
        with pytest.raises(ValidationError, match="conf_level"):
            kaplan_meier(TWO_GROUP_CENSORED, level)

    def test_bad_conf_type(self):
        with pytest.raises(ValidationError, match="conf_type"):
            kaplan_meier(TWO_GROUP_CENSORED, conf_type="arcsin")

    def test_conf_level_recorded(self):
        result = kaplan_meier(TWO_GROUP_CENSORED, 0.9, conf_type="log")
        assert result.conf_level == 0.9
        assert result.conf_type == "log"
        assert result["A"].curve.conf_level == 0.9


class TestKMSolution:

    def test_sequence_protocol(self):
        result = kaplan_meier(TWO_GROUP_CENSORED)
        assert len(result) == 2
        assert [g.name for g in result] == ["A", "B"]
        with pytest.raises(KeyError):
            result["C"]

    def test_totals_and_medians(self):
        result = kaplan_meier(TWO_GROUP_CENSORED)
        assert result.n_observations == 4
        assert result.n_events_total == 3
        assert result.medians == {"A": 10.0, "B": 15.0}

    def test_timing_and_backend(self):
        result = kaplan_meier(TWO_GROUP_CENSORED)
        assert result.backend_name == "cpu_km"
        assert {"total_seconds", "normalize", "estimate"} <= set(result.timing)

    def test_to_dict_is_json_ready(self):
        payload = kaplan_meier(TWO_GROUP_CENSORED).to_dict()
        text = json.dumps(payload)
        assert json.loads(text)["groups"][1]["curve"][2]["survival"] == 0.0
        first = payload["groups"][0]["curve"][0]
        assert first == {
            "time": 0.0, "survival": 1.0, "at_risk": 2, "events": 0,
            "censored": 0, "std_error": 0.0, "lower": 1.0, "upper": 1.0,
        }

    def test_summary_and_repr(self):
        result = kaplan_meier(TWO_GROUP_CENSORED)
        text = result.summary()
        assert "group=A" in text
        assert "n.risk" in text
        assert repr(result) == "KMSolution(groups=2, n=4, events=3)"


class TestInconsistentAtRisk:
    """A starting count smaller than the series is an internal error."""

    def test_start_count_too_small(self):
        time = np.array([1.0, 2.0, 3.0])
        event = np.array([1.0, 0.0, 1.0])
        with pytest.raises(InconsistentAtRiskError) as exc:
            kaplan_meier_curve(time, event, n_at_risk=2)
        assert exc.value.time == 3.0
        assert exc.value.at_risk == 0
        assert exc.value.removed == 1

    def test_larger_start_count_allowed(self):
        """A partial series may start from the full group size."""
        curve = kaplan_meier_curve(np.array([1.0, 2.0]), np.array([1.0, 1.0]),
                                   n_at_risk=4)
        assert_allclose(curve.survival, [1.0, 0.75, 0.5])
