from __future__ import annotations

import warnings
from collections import defaultdict
from datetime import date
from typing import Any, Dict, List, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field, computed_field

from .activity import Activity, ActivityStatus
from .businessdays import (
    DateLike,
    add_business_days,
    as_date,
    business_days_between,
    end_date_for,
    ensure_valid_date,
    snap_to_business_day,
)
from .dependencies import DependencySource, build_dependency_graph, resolve_order
from .errors import InvalidDateWarning


def latest_end_date(activities: Sequence[Activity]) -> Optional[date]:
    """Return the latest end date, ignoring activities without one."""

    ends = [activity.end_date for activity in activities if activity.end_date is not None]
    return max(ends) if ends else None


class Timeline(BaseModel):
    """Dated snapshot of a project plan.

    ``activities`` keeps the order the caller supplied. ``end_date`` is
    always derived from the activities and is never stored on its own.
    ``original_end_date`` is an optional baseline used to report delays
    after rescheduling.
    """

    model_config = ConfigDict(frozen=True)

    start_date: Optional[date] = None
    activities: Tuple[Activity, ...] = Field(default_factory=tuple)
    original_end_date: Optional[date] = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def end_date(self) -> Optional[date]:
        return latest_end_date(self.activities)

    def get_activity(self, activity_type: str) -> Activity:
        """Return the activity by type; raises KeyError when missing."""

        activity = self.find_activity(activity_type)
        if activity is None:
            raise KeyError(activity_type)
        return activity

    def find_activity(self, activity_type: str) -> Optional[Activity]:
        return next((a for a in self.activities if a.activity_type == activity_type), None)

    def find_by_status(self, status: ActivityStatus) -> List[Activity]:
        return [a for a in self.activities if a.status == status]

    def activities_on_date(self, day: DateLike) -> List[Activity]:
        """List dated activities that occupy the given day."""

        target = as_date(day)
        return [a for a in self.activities if a.has_dates and a.start_date <= target <= a.end_date]  # type: ignore[operator]

    def activities_in_period(self, start: DateLike, end: DateLike) -> List[Activity]:
        """List dated activities that intersect the inclusive period [start, end]."""

        first, last = as_date(start), as_date(end)
        if last < first:
            raise ValueError("The end date must be on or after the start date.")
        return [a for a in self.activities if a.has_dates and a.start_date <= last and a.end_date >= first]  # type: ignore[operator]

    def duration_business_days(self) -> Optional[int]:
        """Business days from the first start to the plan end, both included."""

        starts = [a.start_date for a in self.activities if a.start_date is not None]
        first = self.start_date or (min(starts) if starts else None)
        if first is None or self.end_date is None:
            return None
        return business_days_between(first, self.end_date) + 1

    def delay_business_days(self) -> Optional[int]:
        """Business days the end date moved past the baseline; negative when expedited."""

        if self.original_end_date is None or self.end_date is None:
            return None
        return business_days_between(self.original_end_date, self.end_date)

    def with_baseline(self) -> "Timeline":
        """Return a copy whose baseline is the current end date."""

        return self.model_copy(update={"original_end_date": self.end_date})


def _schedule_sequence(
    ordered: Sequence[Activity],
    anchor: date,
    dependencies: DependencySource,
) -> List[Activity]:
    """Assign dates to already ordered activities in a single forward sweep.

    The cursor holds the first free business day and only moves forward.
    """

    graph = build_dependency_graph(ordered, dependencies)
    finished: Dict[str, date] = {}
    cursor = snap_to_business_day(anchor)
    scheduled: List[Activity] = []

    for activity in ordered:
        earliest = cursor
        for dep in graph[activity.activity_type]:
            dep_end = finished.get(dep)
            if dep_end is not None:
                earliest = max(earliest, add_business_days(dep_end, 1))

        start = snap_to_business_day(earliest)
        end = end_date_for(start, activity.duration)
        scheduled.append(activity.with_schedule(start, end))

        previous = finished.get(activity.activity_type)
        finished[activity.activity_type] = end if previous is None else max(previous, end)
        cursor = max(cursor, add_business_days(end, 1))

    return scheduled


def restore_input_order(
    items: Sequence[Activity],
    ordered: Sequence[Activity],
    updated: Sequence[Activity],
) -> List[Activity]:
    """Put ``updated`` (parallel to ``ordered``) back into the order of ``items``.

    ``ordered`` must hold the very objects found in ``items``.
    """

    positions: Dict[int, List[int]] = defaultdict(list)
    for index, activity in enumerate(items):
        positions[id(activity)].append(index)

    result: List[Any] = list(items)
    for original, replacement in zip(ordered, updated):
        result[positions[id(original)].pop(0)] = replacement
    return result


def compute_timeline(
    activities: Sequence[Activity],
    start_date: Any,
    dependencies: DependencySource = None,
    *,
    original_end_date: Optional[date] = None,
) -> Timeline:
    """Compute start and end dates for every activity.

    ``start_date`` is coerced and moved off weekends. When it cannot be
    interpreted, or the schedule would run past ``date.max``, an
    ``InvalidDateWarning`` is emitted and the activities are returned
    unchanged in a timeline without a start date.

    Each activity starts on the first free business day after the previous
    one, and never before the business day following the end of any of its
    prerequisites. Activities come back in input order; inputs are never
    modified.
    """

    items = list(activities)
    anchor = ensure_valid_date(start_date)
    if anchor is None:
        warnings.warn(
            f"Invalid project start date {start_date!r}; timeline left unchanged.",
            InvalidDateWarning,
            stacklevel=2,
        )
        return Timeline(activities=items, original_end_date=original_end_date)

    ordered = resolve_order(items, dependencies)
    try:
        scheduled = _schedule_sequence(ordered, anchor, dependencies)
    except OverflowError:
        warnings.warn(
            f"Timeline starting {anchor} runs past the last representable date; timeline left unchanged.",
            InvalidDateWarning,
            stacklevel=2,
        )
        return Timeline(activities=items, original_end_date=original_end_date)
    return Timeline(
        start_date=anchor,
        activities=restore_input_order(items, ordered, scheduled),
        original_end_date=original_end_date,
    )


def scheduled_prefix(
    activities: Sequence[Activity],
    start_date: Any,
    target_type: str,
    dependencies: DependencySource = None,
) -> List[Activity]:
    """Replay the calculator over the resolved order up to ``target_type``.

    Returns the scheduled activities in resolved order, the target being
    the last one. Empty when the start date is invalid, the target is
    absent, or the replay runs past ``date.max``.
    """

    anchor = ensure_valid_date(start_date)
    if anchor is None:
        return []

    ordered = resolve_order(activities, dependencies)
    for index, activity in enumerate(ordered):
        if activity.activity_type == target_type:
            try:
                return _schedule_sequence(ordered[: index + 1], anchor, dependencies)
            except OverflowError:
                return []
    return []
