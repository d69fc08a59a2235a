"""
Solution wrappers for survival analysis results.

Each Solution wraps a Result[Params] and exposes user-friendly properties,
an R-style summary() and a to_dict() that returns JSON-ready builtins at
full precision.
"""

from __future__ import annotations

from typing import Any, Hashable, Iterator

from cohortsurv.core.result import Result
from cohortsurv.survival._common import (
    AtRiskParams,
    AtRiskRow,
    GroupResult,
    KMParams,
    LogRankParams,
)


class KMSolution:
    """Kaplan-Meier curves, one GroupResult per group.

    Iterating yields GroupResult objects in group order; indexing looks a
    group up by label.
    """

    __slots__ = ('_result',)

    def __init__(self, _result: Result[KMParams]) -> None:
        self._result = _result

    # -- Sequence of groups --

    def __iter__(self) -> Iterator[GroupResult]:
        return iter(self._result.params.groups)

    def __len__(self) -> int:
        return len(self._result.params.groups)

    def __getitem__(self, label: Hashable) -> GroupResult:
        for g in self._result.params.groups:
            if g.name == label:
                return g
        raise KeyError(label)

    # -- Properties delegating to KMParams --

    @property
    def groups(self) -> tuple[GroupResult, ...]:
        return self._result.params.groups

    @property
    def group_names(self) -> tuple[Hashable, ...]:
        return tuple(g.name for g in self._result.params.groups)

    @property
    def conf_level(self) -> float:
        return self._result.params.conf_level

    @property
    def conf_type(self) -> str:
        return self._result.params.conf_type

    @property
    def n_observations(self) -> int:
        return self._result.params.n_observations

    @property
    def n_events_total(self) -> int:
        return self._result.params.n_events_total

    @property
    def medians(self) -> dict[Hashable, float | None]:
        """Median survival per group (None = not reached)."""
        return {g.name: g.median_survival for g in self._result.params.groups}

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def timing(self):
        return self._result.timing

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def to_dict(self) -> dict[str, Any]:
        return {
            "conf_level": self.conf_level,
            "conf_type": self.conf_type,
            "n_observations": self.n_observations,
            "n_events": self.n_events_total,
            "groups": [g.to_dict() for g in self.groups],
        }

    def summary(self) -> str:
        """R-style summary of the Kaplan-Meier fit."""
        lines = []
        lines.append("Call: kaplan_meier()")
        lines.append("")
        lines.append(
            f"  {'':>16s}  {'n':>6s}  {'events':>6s}  {'median':>8s}"
        )
        for g in self.groups:
            median = f"{g.median_survival:.4g}" if g.median_survival is not None else "NA"
            lines.append(
                f"  {str(g.name):>16s}  {g.n:6d}  {g.events:6d}  {median:>8s}"
            )

        ci_pct = f"{self.conf_level * 100:g}"
        for g in self.groups:
            lines.append("")
            lines.append(f"  group={g.name}")
            lines.append(
                f"  {'time':>8s}  {'n.risk':>8s}  {'n.event':>8s}  "
                f"{'n.censor':>8s}  {'survival':>10s}  {'std.err':>10s}  "
                f"{'lower ' + ci_pct + '%':>10s}  {'upper ' + ci_pct + '%':>10s}"
            )
            # Show up to 20 rows
            m = len(g.curve)
            for p in g.curve.points[:20]:
                lines.append(
                    f"  {p.time:8.4g}  {p.at_risk:8d}  {p.events:8d}  "
                    f"{p.censored:8d}  {p.survival:10.6f}  {p.std_error:10.6f}  "
                    f"{p.lower:10.6f}  {p.upper:10.6f}"
                )
            if m > 20:
                lines.append(f"  ... ({m - 20} more rows)")

        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"KMSolution(groups={len(self)}, "
            f"n={self.n_observations}, "
            f"events={self.n_events_total})"
        )


class LogRankSolution:
    """Log-rank test solution."""

    __slots__ = ('_result',)

    def __init__(self, _result: Result[LogRankParams]) -> None:
        self._result = _result

    @property
    def chi_square(self) -> float:
        return self._result.params.chi_square

    @property
    def degrees_of_freedom(self) -> int:
        return self._result.params.df

    @property
    def p_value(self) -> float:
        return self._result.params.p_value

    @property
    def alpha(self) -> float:
        return self._result.params.alpha

    @property
    def significant(self) -> bool:
        return self._result.params.significant

    @property
    def n_groups(self) -> int:
        return self._result.params.n_groups

    @property
    def observed(self):
        return self._result.params.observed

    @property
    def expected(self):
        return self._result.params.expected

    @property
    def variance(self):
        return self._result.params.variance

    @property
    def covariance(self):
        return self._result.params.covariance

    @property
    def n_per_group(self):
        return self._result.params.n_per_group

    @property
    def group_labels(self) -> tuple[Hashable, ...]:
        return self._result.params.group_labels

    @property
    def n_event_times(self) -> int:
        return self._result.params.n_event_times

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def timing(self):
        return self._result.timing

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def group_stats(self) -> dict[Hashable, dict[str, float]]:
        """Observed, expected and variance of O - E for each group."""
        return {
            label: {
                "n": int(self.n_per_group[k]),
                "observed": float(self.observed[k]),
                "expected": float(self.expected[k]),
                "variance": float(self.variance[k]),
            }
            for k, label in enumerate(self.group_labels)
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "chi_square": self.chi_square,
            "degrees_of_freedom": self.degrees_of_freedom,
            "p_value": self.p_value,
            "alpha": self.alpha,
            "significant": self.significant,
            "groups": [
                {"name": label, **stats}
                for label, stats in self.group_stats().items()
            ],
        }

    def summary(self) -> str:
        """R-style summary of the log-rank test."""
        lines = []
        lines.append("Call: logrank()")
        lines.append("")

        lines.append(
            f"  {'':>16s}  {'N':>6s}  {'Observed':>10s}  {'Expected':>10s}  "
            f"{'(O-E)^2/E':>10s}  {'(O-E)^2/V':>10s}"
        )
        for i in range(self.n_groups):
            o, e, v = self.observed[i], self.expected[i], self.variance[i]
            oe = (o - e) ** 2 / e if e > 0 else 0.0
            ov = (o - e) ** 2 / v if v > 0 else 0.0
            label = str(self.group_labels[i])
            lines.append(
                f"  {label:>16s}  {self.n_per_group[i]:6d}  "
                f"{o:10.1f}  {e:10.1f}  {oe:10.3f}  {ov:10.3f}"
            )

        lines.append("")
        lines.append(
            f"  Chisq= {self.chi_square:.4f} on {self.degrees_of_freedom} "
            f"degrees of freedom, p= {self.p_value:.4g}"
        )
        verdict = "significant" if self.significant else "not significant"
        lines.append(f"  {verdict} at alpha= {self.alpha:g}")

        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"LogRankSolution(chisq={self.chi_square:.4f}, "
            f"df={self.degrees_of_freedom}, p={self.p_value:.4g})"
        )


class AtRiskSolution:
    """Number-at-risk table, one AtRiskRow per checkpoint."""

    __slots__ = ('_result',)

    def __init__(self, _result: Result[AtRiskParams]) -> None:
        self._result = _result

    def __iter__(self) -> Iterator[AtRiskRow]:
        return iter(self.rows)

    def __len__(self) -> int:
        return len(self._result.params.checkpoints)

    def __getitem__(self, i: int) -> AtRiskRow:
        return self.rows[i]

    @property
    def rows(self) -> tuple[AtRiskRow, ...]:
        return self._result.params.rows

    @property
    def checkpoints(self):
        return self._result.params.checkpoints

    @property
    def counts(self):
        """(n_checkpoints, n_groups) count matrix."""
        return self._result.params.counts

    @property
    def group_labels(self) -> tuple[Hashable, ...]:
        return self._result.params.group_labels

    @property
    def auto_checkpoints(self) -> bool:
        return self._result.params.auto_checkpoints

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def timing(self):
        return self._result.timing

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def column(self, label: Hashable) -> tuple[int, ...]:
        """At-risk counts of one group across all checkpoints."""
        k = self.group_labels.index(label)
        return tuple(int(c) for c in self.counts[:, k])

    def to_dict(self) -> dict[str, Any]:
        return {
            "groups": list(self.group_labels),
            "rows": [row.to_dict() for row in self.rows],
        }

    def summary(self) -> str:
        """Number-at-risk table, groups as rows and checkpoints as columns."""
        lines = []
        lines.append("Number at risk")
        header = "".join(f"{t:>8.4g}" for t in self.checkpoints)
        lines.append(f"  {'time':>16s}{header}")
        for k, label in enumerate(self.group_labels):
            cells = "".join(f"{int(c):>8d}" for c in self.counts[:, k])
            lines.append(f"  {str(label):>16s}{cells}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"AtRiskSolution(checkpoints={len(self)}, "
            f"groups={len(self.group_labels)})"
        )
