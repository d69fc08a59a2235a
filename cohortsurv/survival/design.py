"""
CohortDesign: immutable, validated container for grouped time-to-event data.

Partitions subjects by group and stable-sorts each group by time.
Validates inputs at construction time; all downstream code trusts clean data.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from numbers import Real
from typing import Any, Callable, Hashable, Iterable, Mapping, Sequence

import numpy as np
from numpy.typing import NDArray

from cohortsurv.core.exceptions import InvalidInputError
from cohortsurv.core.validation import (
    check_1d,
    check_array,
    check_binary,
    check_consistent_length,
    check_finite,
    check_non_negative,
)
from cohortsurv.survival._common import Subject


@dataclass(frozen=True)
class GroupSeries:
    """One group's subjects, sorted ascending by time (stable)."""

    label: Hashable
    time: NDArray
    event: NDArray

    def __post_init__(self) -> None:
        self.time.flags.writeable = False
        self.event.flags.writeable = False

    @property
    def n(self) -> int:
        return len(self.time)

    @property
    def n_events(self) -> int:
        return int(np.sum(self.event))

    @property
    def subjects(self) -> tuple[Subject, ...]:
        return tuple(
            Subject(time=float(t), event=bool(e), group=self.label)
            for t, e in zip(self.time, self.event)
        )


@dataclass(frozen=True)
class CohortDesign:
    """Immutable grouped survival data.

    Construct via ``from_subjects`` or ``from_arrays``, not directly.

    Parameters
    ----------
    series : tuple of GroupSeries
        One entry per group, in first-appearance order (or the order
        given by ``groups``).
    """

    series: tuple[GroupSeries, ...]

    @classmethod
    def from_subjects(
        cls,
        subjects: Iterable[Subject | Mapping[str, Any]],
        *,
        groups: Sequence[Hashable] | None = None,
        group_key: Callable[[Any], Hashable] | None = None,
    ) -> CohortDesign:
        """Validate subject records and partition them into groups.

        Parameters
        ----------
        subjects : iterable
            ``Subject`` instances, or mappings with ``time``, ``event`` and
            ``group`` keys.
        groups : sequence or None
            Explicit group order. Subjects whose group is not listed are
            dropped; every listed group must keep at least one subject.
        group_key : callable or None
            Derives the group label from a raw record instead of reading
            its ``group`` field.

        Returns
        -------
        CohortDesign

        Raises
        ------
        InvalidInputError
            If any record is malformed, the dataset is empty, or a listed
            group has no subjects.
        """
        times: list[float] = []
        events: list[float] = []
        labels: list[Hashable] = []

        for i, record in enumerate(subjects):
            times.append(_read_time(record, i))
            events.append(_read_event(record, i))
            labels.append(_read_group(record, i, group_key))

        return cls._partition(
            np.asarray(times, dtype=np.float64),
            np.asarray(events, dtype=np.float64),
            labels,
            groups,
        )

    @classmethod
    def from_arrays(
        cls,
        time,
        event,
        group,
        *,
        groups: Sequence[Hashable] | None = None,
    ) -> CohortDesign:
        """Validate parallel arrays of time, event indicator and group label.

        Parameters
        ----------
        time : array-like
            Time to event or censoring. Must be finite and non-negative.
        event : array-like
            Event indicator (1/True = event, 0/False = censored).
        group : array-like
            Group labels.
        groups : sequence or None
            Explicit group order; see ``from_subjects``.

        Returns
        -------
        CohortDesign
        """
        time_arr = check_array(time, "time")
        event_arr = check_array(event, "event")
        check_1d(time_arr, "time")
        check_1d(event_arr, "event")

        label_arr = np.asarray(group)
        if label_arr.ndim != 1:
            raise InvalidInputError(
                f"group: expected 1D array, got {label_arr.ndim}D "
                f"with shape {label_arr.shape}",
                field="group",
            )

        check_consistent_length(
            time_arr, event_arr, label_arr, names=("time", "event", "group"),
        )
        check_finite(time_arr, "time")
        check_non_negative(time_arr, "time")
        check_binary(event_arr, "event")

        labels = label_arr.tolist()
        for i, label in enumerate(labels):
            if _is_missing(label):
                raise InvalidInputError(
                    f"group: missing label at index {i}",
                    index=i, field="group", value=label,
                )

        return cls._partition(time_arr, event_arr, labels, groups)

    @classmethod
    def _partition(
        cls,
        time: NDArray,
        event: NDArray,
        labels: list[Hashable],
        groups: Sequence[Hashable] | None,
    ) -> CohortDesign:
        if len(time) == 0:
            raise InvalidInputError("dataset is empty: at least one subject is required")

        if groups is None:
            order = list(dict.fromkeys(labels))
        else:
            order = list(dict.fromkeys(groups))
            if len(order) == 0:
                raise InvalidInputError("groups: at least one group is required")

        members: dict[Hashable, list[int]] = {g: [] for g in order}
        for i, label in enumerate(labels):
            if label in members:
                members[label].append(i)

        series = []
        for g in order:
            idx = np.asarray(members[g], dtype=np.intp)
            if len(idx) == 0:
                raise InvalidInputError(
                    f"group {g!r} has no subjects",
                    field="group", value=g,
                )
            t = time[idx]
            e = event[idx]
            sort = np.argsort(t, kind="stable")
            series.append(GroupSeries(label=g, time=t[sort], event=e[sort]))

        return cls(series=tuple(series))

    # -- Accessors --

    def __getitem__(self, label: Hashable) -> GroupSeries:
        for s in self.series:
            if s.label == label:
                return s
        raise KeyError(label)

    def __iter__(self):
        return iter(self.series)

    def __len__(self) -> int:
        return len(self.series)

    @property
    def labels(self) -> tuple[Hashable, ...]:
        return tuple(s.label for s in self.series)

    @property
    def n_groups(self) -> int:
        return len(self.series)

    @property
    def n(self) -> int:
        """Number of subjects across all groups."""
        return sum(s.n for s in self.series)

    @property
    def n_events(self) -> int:
        """Number of observed events across all groups."""
        return sum(s.n_events for s in self.series)

    @property
    def group_sizes(self) -> dict[Hashable, int]:
        return {s.label: s.n for s in self.series}

    @property
    def max_time(self) -> float:
        return max(float(s.time[-1]) for s in self.series)

    def pooled(self) -> tuple[NDArray, NDArray]:
        """All subjects as (time, event), sorted ascending by time."""
        time = np.concatenate([s.time for s in self.series])
        event = np.concatenate([s.event for s in self.series])
        order = np.argsort(time, kind="stable")
        return time[order], event[order]


# -- Record readers --

def _field(record: Any, name: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, float) and math.isnan(value)


def _read_time(record: Any, i: int) -> float:
    value = _field(record, "time")
    if value is None:
        raise InvalidInputError(
            f"subject {i}: missing time", index=i, field="time",
        )
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidInputError(
            f"subject {i}: time must be a real number, got {value!r}",
            index=i, field="time", value=value,
        )
    t = float(value)
    if not math.isfinite(t):
        raise InvalidInputError(
            f"subject {i}: time must be finite, got {t}",
            index=i, field="time", value=value,
        )
    if t < 0:
        raise InvalidInputError(
            f"subject {i}: time must be non-negative, got {t}",
            index=i, field="time", value=value,
        )
    return t


def _read_event(record: Any, i: int) -> float:
    value = _field(record, "event")
    if value is None:
        raise InvalidInputError(
            f"subject {i}: missing event", index=i, field="event",
        )
    if isinstance(value, (bool, np.bool_)):
        return 1.0 if value else 0.0
    if isinstance(value, Real) and float(value) in (0.0, 1.0):
        return float(value)
    raise InvalidInputError(
        f"subject {i}: event must be 0/1 or a boolean, got {value!r}",
        index=i, field="event", value=value,
    )


def _read_group(
    record: Any,
    i: int,
    group_key: Callable[[Any], Hashable] | None,
) -> Hashable:
    value = group_key(record) if group_key is not None else _field(record, "group")
    if _is_missing(value):
        raise InvalidInputError(
            f"subject {i}: missing group", index=i, field="group",
        )
    try:
        hash(value)
    except TypeError as e:
        raise InvalidInputError(
            f"subject {i}: group label must be hashable, got {type(value).__name__}",
            index=i, field="group", value=value,
        ) from e
    return value
