from __future__ import annotations

from datetime import date
from typing import Any, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .businessdays import ensure_valid_date

ActivityStatus = Literal["not_started", "in_progress", "completed", "delayed"]
ACTIVITY_STATUSES: Tuple[str, ...] = ("not_started", "in_progress", "completed", "delayed")


class Activity(BaseModel):
    """A unit of project work placed on the timeline.

    ``activity_type`` (``type`` in serialized form) is the stable key used
    for dependency lookups; ``name`` is only for display. ``duration`` is
    measured in business days and an activity of duration ``D`` occupies
    exactly ``D`` business days, start date included. ``start_date`` and
    ``end_date`` stay empty until the timeline is computed.

    ``status``, ``revisions`` and the remaining descriptive fields travel
    with the activity untouched; scheduling never reads them.

    Instances are immutable. Use ``with_schedule``, ``with_status`` or
    ``clear_schedule`` to obtain modified copies.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    activity_type: str = Field(alias="type")
    duration: int = 1
    revisions: int = 0
    start_date: Optional[date] = Field(default=None, alias="startDate")
    end_date: Optional[date] = Field(default=None, alias="endDate")
    status: ActivityStatus = "not_started"
    name: Optional[str] = None
    hours_duration: Optional[float] = Field(default=None, alias="hoursDuration")
    resource_type: Optional[str] = Field(default=None, alias="resourceType")
    assigned_resource: Optional[str] = Field(default=None, alias="assignedResource")
    original_end_date: Optional[date] = Field(default=None, alias="originalEndDate")
    visible_on_calendar: bool = Field(default=True, alias="visibleOnCalendar")

    @field_validator("duration", mode="before")
    @classmethod
    def default_missing_duration(cls, value: Any) -> Any:
        """Treat an absent duration as a single day."""

        return 1 if value is None else value

    @field_validator("duration")
    @classmethod
    def clamp_duration(cls, value: int) -> int:
        """Clamp non-positive durations to one business day.

        Templates coming from spreadsheets occasionally carry zero or
        negative durations; they still need a slot on the timeline.
        """

        return max(value, 1)

    @field_validator("revisions")
    @classmethod
    def validate_revisions(cls, value: int) -> int:
        if value < 0:
            raise ValueError("revisions must be zero or greater.")
        return value

    @field_validator("start_date", "end_date", "original_end_date", mode="before")
    @classmethod
    def coerce_dates(cls, value: Any) -> Optional[date]:
        """Reduce datetimes to dates and discard values that cannot be parsed."""

        return ensure_valid_date(value, snap=False)

    @model_validator(mode="after")
    def validate_date_order(self) -> "Activity":
        if self.start_date is not None and self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("end_date must be on or after start_date.")
        return self

    @property
    def has_dates(self) -> bool:
        return self.start_date is not None and self.end_date is not None

    def with_schedule(self, start: date, end: date) -> "Activity":
        """Return a copy placed on ``start``..``end``."""

        return self.model_copy(update={"start_date": start, "end_date": end})

    def with_status(self, status: ActivityStatus) -> "Activity":
        """Return a copy carrying a new status."""

        if status not in ACTIVITY_STATUSES:
            raise ValueError(f"status must be one of {', '.join(ACTIVITY_STATUSES)}.")
        return self.model_copy(update={"status": status})

    def clear_schedule(self) -> "Activity":
        """Return a copy without computed dates."""

        return self.model_copy(update={"start_date": None, "end_date": None})
