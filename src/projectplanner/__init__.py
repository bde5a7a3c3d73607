"""Business-day project timelines built from budget templates.

Typical use::

    from projectplanner import compute_timeline, reschedule

    timeline = compute_timeline(activities, start_date, dependencies)
    timeline = reschedule(timeline.activities, "animation", new_start, cascade=True,
                          dependencies=dependencies, project_start=timeline.start_date)

Every operation returns new objects; inputs are never modified.
"""
from __future__ import annotations

from .activity import ACTIVITY_STATUSES, Activity, ActivityStatus
from .businessdays import (
    add_business_days,
    business_days_between,
    end_date_for,
    ensure_valid_date,
    is_business_day,
    snap_to_business_day,
)
from .dependencies import (
    DependencyLookup,
    as_lookup,
    build_dependency_graph,
    depth_first_order,
    missing_dependencies,
    resolve_order,
    unresolved_types,
)
from .errors import (
    CycleWarning,
    InvalidDateWarning,
    ScheduleError,
    ScheduleWarning,
    TargetNotFoundWarning,
    TemplateError,
    UnknownTemplateError,
)
from .reschedule import effective_start, reschedule, reschedule_timeline, shift_timeline, start_shift
from .templates import (
    VIDEO_PRODUCTION_DEPENDENCIES,
    BudgetTemplate,
    TemplateActivity,
    TemplateLibrary,
    TemplateStage,
    activities_from_template,
    get_template_by_budget,
    get_template_by_id,
    load_template_library,
    plan_from_template,
    recommended_due_date,
    require_template,
    save_template_library,
)
from .timeline import Timeline, compute_timeline, latest_end_date, scheduled_prefix

__all__ = [
    "ACTIVITY_STATUSES",
    "Activity",
    "ActivityStatus",
    "BudgetTemplate",
    "CycleWarning",
    "DependencyLookup",
    "InvalidDateWarning",
    "ScheduleError",
    "ScheduleWarning",
    "TargetNotFoundWarning",
    "TemplateActivity",
    "TemplateError",
    "TemplateLibrary",
    "TemplateStage",
    "Timeline",
    "UnknownTemplateError",
    "VIDEO_PRODUCTION_DEPENDENCIES",
    "activities_from_template",
    "add_business_days",
    "as_lookup",
    "build_dependency_graph",
    "business_days_between",
    "compute_timeline",
    "depth_first_order",
    "effective_start",
    "end_date_for",
    "ensure_valid_date",
    "get_template_by_budget",
    "get_template_by_id",
    "is_business_day",
    "latest_end_date",
    "load_template_library",
    "missing_dependencies",
    "plan_from_template",
    "recommended_due_date",
    "require_template",
    "reschedule",
    "reschedule_timeline",
    "resolve_order",
    "save_template_library",
    "scheduled_prefix",
    "shift_timeline",
    "snap_to_business_day",
    "start_shift",
    "unresolved_types",
]
