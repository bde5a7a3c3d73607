from datetime import date, datetime, timedelta

from projectplanner.businessdays import (
    add_business_days,
    business_days_between,
    end_date_for,
    ensure_valid_date,
    is_business_day,
    snap_to_business_day,
)

MONDAY = date(2024, 1, 1)
FRIDAY = date(2024, 1, 5)
SATURDAY = date(2024, 1, 6)
SUNDAY = date(2024, 1, 7)
NEXT_MONDAY = date(2024, 1, 8)


def test_weekends_are_not_business_days():
    assert is_business_day(MONDAY)
    assert is_business_day(FRIDAY)
    assert not is_business_day(SATURDAY)
    assert not is_business_day(SUNDAY)


def test_add_business_days_skips_weekend():
    assert add_business_days(FRIDAY, 1) == NEXT_MONDAY
    assert add_business_days(MONDAY, 5) == NEXT_MONDAY
    assert add_business_days(MONDAY, 4) == FRIDAY


def test_add_zero_business_days_returns_date_unchanged():
    assert add_business_days(MONDAY, 0) == MONDAY
    assert add_business_days(SATURDAY, 0) == SATURDAY


def test_add_negative_business_days_walks_backwards():
    assert add_business_days(NEXT_MONDAY, -1) == FRIDAY
    assert add_business_days(MONDAY, -1) == date(2023, 12, 29)


def test_datetime_input_ignores_time_of_day():
    assert add_business_days(datetime(2024, 1, 5, 23, 45), 1) == NEXT_MONDAY
    assert snap_to_business_day(datetime(2024, 1, 6, 8, 0)) == NEXT_MONDAY


def test_snap_to_business_day():
    assert snap_to_business_day(SATURDAY) == NEXT_MONDAY
    assert snap_to_business_day(SUNDAY) == NEXT_MONDAY
    assert snap_to_business_day(date(2024, 1, 3)) == date(2024, 1, 3)


def test_business_days_between():
    assert business_days_between(MONDAY, NEXT_MONDAY) == 5
    assert business_days_between(FRIDAY, NEXT_MONDAY) == 1
    assert business_days_between(NEXT_MONDAY, FRIDAY) == -1
    assert business_days_between(MONDAY, MONDAY) == 0
    assert business_days_between(MONDAY, date(2024, 1, 31)) == 22


def test_business_days_between_inverts_add_business_days():
    start = date(2024, 2, 1)
    for offset in range(40):
        end = start + timedelta(days=offset)
        if not is_business_day(end):
            continue
        assert add_business_days(start, business_days_between(start, end)) == end


def test_end_date_for_counts_start_day():
    assert end_date_for(MONDAY, 1) == MONDAY
    assert end_date_for(MONDAY, 3) == date(2024, 1, 3)
    assert end_date_for(date(2024, 1, 4), 3) == NEXT_MONDAY
    assert end_date_for(MONDAY, 0) == MONDAY


def test_ensure_valid_date_parses_and_snaps():
    assert ensure_valid_date("2024-01-06") == NEXT_MONDAY
    assert ensure_valid_date("2024-01-06", snap=False) == SATURDAY
    assert ensure_valid_date("2024-01-03T10:30:00Z") == date(2024, 1, 3)
    assert ensure_valid_date(datetime(2024, 1, 3, 23, 59)) == date(2024, 1, 3)
    assert ensure_valid_date(1704067200) == MONDAY


def test_ensure_valid_date_falls_back_instead_of_raising():
    assert ensure_valid_date(None) is None
    assert ensure_valid_date("not a date") is None
    assert ensure_valid_date(True) is None
    assert ensure_valid_date(object()) is None
    assert ensure_valid_date("not a date", fallback=date(2024, 1, 2)) == date(2024, 1, 2)
    assert ensure_valid_date(None, fallback=SUNDAY) == NEXT_MONDAY
