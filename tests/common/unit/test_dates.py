import pytest

from onetab_archive.dates import (
    epoch_to_iso,
    format_date_for_header,
    is_date_in_range,
    parse_flexible_date,
    parse_iso,
    year_week,
)


def test_epoch_to_iso_keeps_milliseconds():
    assert epoch_to_iso(1700000000000) == "2023-11-14T22:13:20.000Z"
    assert epoch_to_iso(1700000000123) == "2023-11-14T22:13:20.123Z"
    assert epoch_to_iso(0) == "1970-01-01T00:00:00.000Z"


@pytest.mark.parametrize(
    "value,start,end",
    [
        ("2025", "2025-01-01T00:00:00.000Z", "2025-12-31T23:59:59.999Z"),
        ("2025-06", "2025-06-01T00:00:00.000Z", "2025-06-30T23:59:59.999Z"),
        ("2024-02", "2024-02-01T00:00:00.000Z", "2024-02-29T23:59:59.999Z"),
        ("2025-06-15", "2025-06-15T00:00:00.000Z", "2025-06-15T23:59:59.999Z"),
    ],
)
def test_flexible_dates_expand_to_period_bounds(value, start, end):
    assert parse_flexible_date(value) == start
    assert parse_flexible_date(value, end_of_period=True) == end


def test_full_timestamps_pass_through():
    assert parse_flexible_date("2025-06-15T10:00:00Z") == "2025-06-15T10:00:00Z"
    assert parse_flexible_date("2025-06-15T10:00:00Z", end_of_period=True) == "2025-06-15T10:00:00Z"


@pytest.mark.parametrize("value", ["yesterday", "2025-13", "2025-02-30", "15/06/2025"])
def test_unparsable_dates_raise(value):
    with pytest.raises(ValueError):
        parse_flexible_date(value)


def test_range_check_is_inclusive():
    instant = "2025-06-15T12:00:00.000Z"
    assert is_date_in_range(instant, instant, instant)
    assert is_date_in_range(instant, None, None)
    assert not is_date_in_range(instant, "2025-06-15T12:00:00.001Z", None)
    assert not is_date_in_range(instant, None, "2025-06-15T11:59:59.999Z")


def test_year_week_counts_from_the_week_holding_january_first():
    assert year_week("2025-01-01T08:30:00.000Z") == "2025-W01"
    assert year_week("2025-01-05T09:00:00.000Z") == "2025-W02"
    assert year_week("2025-06-15T12:00:00.000Z") == "2025-W25"
    assert year_week("2024-12-31T10:00:00.000Z") == "2024-W53"


def test_year_week_uses_utc():
    # 2025-01-04T23:30-05:00 is already Sunday in UTC
    assert year_week("2025-01-04T23:30:00-05:00") == "2025-W02"


def test_header_dates():
    assert format_date_for_header("2025-06-15T12:00:00.000Z") == "Jun 15, 2025, 12:00 PM"
    assert format_date_for_header("2025-01-01T00:05:00.000Z") == "Jan 1, 2025, 12:05 AM"
    assert format_date_for_header("2025-03-10T14:05:00.000Z") == "Mar 10, 2025, 02:05 PM"


def test_parse_iso_treats_naive_as_utc():
    assert parse_iso("2025-06-15T12:00:00") == parse_iso("2025-06-15T12:00:00Z")
