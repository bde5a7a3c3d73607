from datetime import date, datetime

import pytest
from pydantic import ValidationError

from projectplanner.activity import Activity


def test_type_alias_and_field_name_are_both_accepted():
    assert Activity(type="animation").activity_type == "animation"
    assert Activity(activity_type="animation").activity_type == "animation"


@pytest.mark.parametrize("duration", [0, -3, None])
def test_non_positive_duration_is_clamped_to_one_day(duration):
    assert Activity(type="a", duration=duration).duration == 1


def test_negative_revisions_are_rejected():
    with pytest.raises(ValidationError):
        Activity(type="a", revisions=-1)


def test_dates_are_reduced_to_calendar_dates():
    activity = Activity(type="a", startDate=datetime(2024, 1, 2, 15, 30), endDate="2024-01-03")
    assert activity.start_date == date(2024, 1, 2)
    assert activity.end_date == date(2024, 1, 3)


def test_unparseable_dates_become_empty():
    activity = Activity(type="a", start_date="someday")
    assert activity.start_date is None
    assert not activity.has_dates


def test_end_before_start_is_rejected():
    with pytest.raises(ValidationError):
        Activity(type="a", start_date=date(2024, 1, 5), end_date=date(2024, 1, 4))


def test_activities_are_immutable():
    activity = Activity(type="a")
    with pytest.raises(ValidationError):
        activity.duration = 4  # type: ignore[misc]


def test_copy_helpers_leave_original_untouched():
    activity = Activity(type="a", duration=2, status="in_progress")
    scheduled = activity.with_schedule(date(2024, 1, 1), date(2024, 1, 2))

    assert scheduled.has_dates
    assert scheduled.status == "in_progress"
    assert activity.start_date is None
    assert scheduled.clear_schedule().start_date is None
    assert activity.with_status("completed").status == "completed"
    assert activity.status == "in_progress"


def test_with_status_rejects_unknown_status():
    with pytest.raises(ValueError):
        Activity(type="a").with_status("paused")  # type: ignore[arg-type]
