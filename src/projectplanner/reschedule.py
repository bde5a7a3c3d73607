"""Localized edits to an already computed timeline.

An edit moves one activity to a new start date and optionally changes its
duration. With ``cascade`` enabled every activity after it in resolved
order is laid out again back to back; otherwise only the edited activity
moves and overlaps are accepted.
"""
from __future__ import annotations

import math
import warnings
from datetime import date
from typing import Any, List, Optional, Sequence

from .activity import Activity
from .businessdays import (
    add_business_days,
    business_days_between,
    end_date_for,
    ensure_valid_date,
    snap_to_business_day,
)
from .dependencies import DependencySource, resolve_order
from .errors import InvalidDateWarning, TargetNotFoundWarning
from .timeline import Timeline, restore_input_order, scheduled_prefix

CASCADE_BY_DEFAULT = True


def _plan_start(project_start: Any, activities: Sequence[Activity]) -> Optional[date]:
    anchor = ensure_valid_date(project_start)
    if anchor is not None:
        return anchor
    starts = [a.start_date for a in activities if a.start_date is not None]
    return min(starts) if starts else None


def _coerce_duration(value: Any, current: int) -> int:
    """Whole business days, rounding fractional durations up."""

    if value is None or isinstance(value, bool):
        return current
    try:
        number = float(value) if isinstance(value, str) else value
        return max(math.ceil(number), 1)
    except (TypeError, ValueError, OverflowError):
        return current


def effective_start(
    activities: Sequence[Activity],
    target_type: str,
    *,
    dependencies: DependencySource = None,
    project_start: Any = None,
) -> Optional[date]:
    """Start date the target had before an edit.

    Uses the activity's own start date when it has one; otherwise replays
    the timeline calculation from ``project_start`` through the activities
    preceding it. ``None`` when neither is possible.
    """

    target = next((a for a in activities if a.activity_type == target_type), None)
    if target is None:
        return None
    if target.start_date is not None:
        return target.start_date

    prefix = scheduled_prefix(activities, project_start, target_type, dependencies)
    return prefix[-1].start_date if prefix else None


def start_shift(
    activities: Sequence[Activity],
    target_type: str,
    new_start_date: Any,
    *,
    dependencies: DependencySource = None,
    project_start: Any = None,
) -> Optional[int]:
    """Business days between the target's previous start and ``new_start_date``.

    Both ends are reduced to calendar dates first and the new date is moved
    off weekends. Positive means later.
    """

    new_start = ensure_valid_date(new_start_date)
    previous = effective_start(
        activities,
        target_type,
        dependencies=dependencies,
        project_start=project_start,
    )
    if new_start is None or previous is None:
        return None
    return business_days_between(previous, new_start)


def _place(
    ordered: Sequence[Activity],
    position: int,
    start: date,
    duration: int,
    cascade: bool,
) -> List[Activity]:
    target = ordered[position]
    moved = target.model_copy(update={"duration": duration}).with_schedule(start, end_date_for(start, duration))

    updated: List[Activity] = list(ordered)
    updated[position] = moved

    if cascade:
        previous_end = moved.end_date
        for index in range(position + 1, len(ordered)):
            following = ordered[index]
            next_start = add_business_days(previous_end, 1)  # type: ignore[arg-type]
            next_end = end_date_for(next_start, following.duration)
            updated[index] = following.with_schedule(next_start, next_end)
            previous_end = next_end
    return updated


def reschedule(
    activities: Sequence[Activity],
    target_type: str,
    new_start_date: Any,
    cascade: bool = CASCADE_BY_DEFAULT,
    *,
    dependencies: DependencySource = None,
    new_duration: Optional[int] = None,
    project_start: Any = None,
    original_end_date: Optional[date] = None,
) -> Timeline:
    """Move one activity and return the resulting timeline.

    ``new_start_date`` is moved off weekends before anything else. When it
    is missing or invalid, the target keeps its effective previous start,
    which turns the call into a duration-only edit. An unknown
    ``target_type`` emits ``TargetNotFoundWarning`` and changes nothing.
    """

    items = list(activities)
    plan_start = _plan_start(project_start, items)

    def unchanged() -> Timeline:
        return Timeline(start_date=plan_start, activities=items, original_end_date=original_end_date)

    ordered = resolve_order(items, dependencies)
    position = next((i for i, a in enumerate(ordered) if a.activity_type == target_type), None)
    if position is None:
        warnings.warn(
            f"Activity {target_type!r} is not part of the plan; nothing rescheduled.",
            TargetNotFoundWarning,
            stacklevel=2,
        )
        return unchanged()

    target = ordered[position]
    start = ensure_valid_date(new_start_date)
    if start is None:
        if new_start_date is not None:
            warnings.warn(
                f"Invalid start date {new_start_date!r} for {target_type!r}; keeping its current start.",
                InvalidDateWarning,
                stacklevel=2,
            )
        previous = effective_start(items, target_type, dependencies=dependencies, project_start=plan_start)
        if previous is None:
            return unchanged()
        start = snap_to_business_day(previous)

    duration = _coerce_duration(new_duration, target.duration)
    try:
        updated = _place(ordered, position, start, duration, cascade)
    except OverflowError:
        warnings.warn(
            f"Moving {target_type!r} to {start} runs past the last representable date; nothing rescheduled.",
            InvalidDateWarning,
            stacklevel=2,
        )
        return unchanged()

    return Timeline(
        start_date=plan_start,
        activities=restore_input_order(items, ordered, updated),
        original_end_date=original_end_date,
    )


def reschedule_timeline(
    timeline: Timeline,
    target_type: str,
    new_start_date: Any,
    cascade: bool = CASCADE_BY_DEFAULT,
    *,
    dependencies: DependencySource = None,
    new_duration: Optional[int] = None,
) -> Timeline:
    """``reschedule`` applied to a timeline, keeping its anchor and baseline."""

    return reschedule(
        timeline.activities,
        target_type,
        new_start_date,
        cascade,
        dependencies=dependencies,
        new_duration=new_duration,
        project_start=timeline.start_date,
        original_end_date=timeline.original_end_date,
    )


def shift_timeline(timeline: Timeline, business_days: int) -> Timeline:
    """Move every dated activity by the same number of business days.

    A shift past the representable date range emits ``InvalidDateWarning``
    and returns the timeline unchanged.
    """

    shifted: List[Activity] = []
    try:
        for activity in timeline.activities:
            if activity.start_date is None:
                shifted.append(activity)
                continue
            start = add_business_days(snap_to_business_day(activity.start_date), business_days)
            shifted.append(activity.with_schedule(start, end_date_for(start, activity.duration)))

        start_date = timeline.start_date
        if start_date is not None:
            start_date = add_business_days(snap_to_business_day(start_date), business_days)
    except OverflowError:
        warnings.warn(
            f"Shifting by {business_days} business days leaves the representable date range; timeline unchanged.",
            InvalidDateWarning,
            stacklevel=2,
        )
        return timeline
    return timeline.model_copy(update={"start_date": start_date, "activities": tuple(shifted)})
