"""Budget-driven activity templates.

A template groups activities into stages; picking one by budget and
flattening it yields the undated activity list the timeline calculator
works on. Template libraries are stored as JSON and accept the camelCase
keys used by the planning front end.
"""
from __future__ import annotations

import json
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .activity import Activity
from .businessdays import DateLike, add_business_days, snap_to_business_day
from .dependencies import DependencySource
from .errors import TemplateError, UnknownTemplateError
from .timeline import Timeline, compute_timeline

VIDEO_PRODUCTION_DEPENDENCIES: Dict[str, List[str]] = {
    "scriptwriting": [],
    "storyboarding": ["scriptwriting"],
    "voiceover": ["scriptwriting"],
    "animation": ["storyboarding", "voiceover"],
    "sound_design": ["animation"],
    "feedback_review": ["animation", "sound_design"],
    "revisions": ["feedback_review"],
    "final_delivery": ["revisions"],
    "kickoff_meeting": [],
    "client_interview": ["kickoff_meeting"],
    "research": ["client_interview"],
    "voice_talent": ["scriptwriting"],
    "style_frames": ["scriptwriting"],
    "character_design": ["style_frames"],
    "advanced_animation": ["animation", "character_design"],
    "color_grading": ["animation"],
    "custom_music": ["sound_design"],
}


class TemplateActivity(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    description: str = ""
    duration_days: int = Field(default=1, alias="durationDays")
    duration_hours: Optional[float] = Field(default=None, alias="durationHours")
    resource_type: Optional[str] = Field(default=None, alias="resourceType")
    can_have_revisions: bool = Field(default=False, alias="canHaveRevisions")
    default_revisions: int = Field(default=0, alias="defaultRevisions")
    visible_on_calendar: bool = Field(default=True, alias="visibleOnCalendar")

    @field_validator("default_revisions")
    @classmethod
    def validate_default_revisions(cls, value: int) -> int:
        if value < 0:
            raise ValueError("defaultRevisions must be zero or greater.")
        return value


class TemplateStage(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    description: str = ""
    activities: List[TemplateActivity] = Field(default_factory=list)
    is_milestone: bool = Field(default=False, alias="isMilestone")


class BudgetTemplate(BaseModel):
    """Activity template recommended for a given budget.

    ``total_days`` is the number of business days of project work, client
    reviews excluded. When absent it is the sum of the activity durations.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    budget_amount: float = Field(alias="budgetAmount")
    description: str = ""
    stages: List[TemplateStage] = Field(default_factory=list)
    total_days: Optional[int] = Field(default=None, alias="totalDays")

    @model_validator(mode="after")
    def fill_total_days(self) -> "BudgetTemplate":
        if self.total_days is None:
            self.total_days = sum(a.duration_days for a in self.template_activities())
        return self

    def template_activities(self) -> List[TemplateActivity]:
        """All template activities, stage by stage."""

        return [activity for stage in self.stages for activity in stage.activities]


class TemplateLibrary(BaseModel):
    """Templates plus the dependency vocabulary their activities share."""

    model_config = ConfigDict(populate_by_name=True)

    templates: List[BudgetTemplate] = Field(default_factory=list)
    dependencies: Dict[str, List[str]] = Field(default_factory=dict)

    @model_validator(mode="after")
    def ensure_unique_ids(self) -> "TemplateLibrary":
        ids = [t.id for t in self.templates]
        duplicates = sorted({template_id for template_id in ids if ids.count(template_id) > 1})
        if duplicates:
            raise ValueError(f"Duplicated template IDs: {', '.join(duplicates)}")
        return self


def get_template_by_id(library: TemplateLibrary, template_id: str) -> Optional[BudgetTemplate]:
    return next((t for t in library.templates if t.id == template_id), None)


def require_template(library: TemplateLibrary, template_id: str) -> BudgetTemplate:
    """Like ``get_template_by_id`` but raises ``UnknownTemplateError``."""

    template = get_template_by_id(library, template_id)
    if template is None:
        raise UnknownTemplateError(f"Unknown template: {template_id}")
    return template


def get_template_by_budget(library: TemplateLibrary, budget: float) -> BudgetTemplate:
    """Return the template for ``budget``, or the one with the closest budget.

    Ties keep the template listed first.
    """

    if not library.templates:
        raise TemplateError("The template library is empty.")

    exact = next((t for t in library.templates if t.budget_amount == budget), None)
    if exact is not None:
        return exact

    closest = library.templates[0]
    for template in library.templates[1:]:
        if abs(template.budget_amount - budget) < abs(closest.budget_amount - budget):
            closest = template
    return closest


def activities_from_template(template: BudgetTemplate) -> List[Activity]:
    """Flatten a template into undated activities, preserving stage order."""

    return [
        Activity(
            activity_type=item.id,
            name=item.name,
            duration=item.duration_days,
            hours_duration=item.duration_hours,
            revisions=item.default_revisions if item.can_have_revisions else 0,
            resource_type=item.resource_type,
            visible_on_calendar=item.visible_on_calendar,
        )
        for item in template.template_activities()
    ]


def recommended_due_date(kickoff: DateLike, template: BudgetTemplate, client_review_days: int = 0) -> date:
    """Due date suggested for a kickoff: project work plus two client review rounds."""

    total = (template.total_days or 0) + 2 * max(client_review_days, 0)
    return add_business_days(snap_to_business_day(kickoff), total)


def plan_from_template(
    template: BudgetTemplate,
    start_date: Any,
    dependencies: DependencySource = None,
) -> Timeline:
    """Build and date the activities of a template, recording the baseline end."""

    timeline = compute_timeline(activities_from_template(template), start_date, dependencies)
    return timeline.with_baseline()


def save_template_library(library: TemplateLibrary, path: str | Path) -> None:
    """Persist a ``TemplateLibrary`` to disk as JSON."""

    target = Path(path)
    target.write_text(
        json.dumps(library.model_dump(by_alias=True), indent=2, default=str),
        encoding="utf-8",
    )


def load_template_library(path: str | Path) -> TemplateLibrary:
    """Load a template library from JSON.

    The file may hold a full library object or just a list of templates.
    """

    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        if isinstance(data, list):
            data = {"templates": data}
        return TemplateLibrary.model_validate(data)
    except (OSError, ValueError) as exc:
        raise TemplateError(f"Could not load template library from {path}: {exc}") from exc
