from __future__ import annotations


class ScheduleError(Exception):
    """Generic planning error."""


class TemplateError(ScheduleError):
    """Raised when a budget template or template library is unusable."""


class UnknownTemplateError(TemplateError, KeyError):
    """Raised when a template ID is not present in the library."""

    def __str__(self) -> str:
        return Exception.__str__(self)


class ScheduleWarning(RuntimeWarning):
    """Base category for non-fatal scheduling conditions."""


class InvalidDateWarning(ScheduleWarning):
    """A date could not be interpreted; the operation fell back or did nothing."""


class CycleWarning(ScheduleWarning):
    """Dependencies form a cycle; a depth-first fallback order was used."""


class TargetNotFoundWarning(ScheduleWarning):
    """The activity to reschedule is not part of the plan."""
