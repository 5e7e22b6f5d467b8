"""Tests for time utilities."""

from datetime import date, datetime, timedelta, timezone

import pytest

from listquery.utils.time import calendar_day, parse_timestamp, to_utc_z, utc_now_z


def test_utc_now_z_format():
    value = utc_now_z()
    assert value.endswith("Z")
    assert "+00:00" not in value


def test_to_utc_z_converts_offsets():
    dt = datetime(2024, 3, 1, 12, 0, tzinfo=timezone(timedelta(hours=2)))
    assert to_utc_z(dt) == "2024-03-01T10:00:00Z"


def test_to_utc_z_rejects_naive():
    with pytest.raises(ValueError, match="Naive datetime"):
        to_utc_z(datetime(2024, 3, 1))


@pytest.mark.parametrize(
    "value, expected",
    [
        ("2024-03-01T10:00:00Z", datetime(2024, 3, 1, 10, tzinfo=timezone.utc)),
        ("2024-03-01T12:00:00+02:00", datetime(2024, 3, 1, 10, tzinfo=timezone.utc)),
        ("2024-03-01", datetime(2024, 3, 1, tzinfo=timezone.utc)),
        (date(2024, 3, 1), datetime(2024, 3, 1, tzinfo=timezone.utc)),
        (datetime(2024, 3, 1, 10), datetime(2024, 3, 1, 10, tzinfo=timezone.utc)),
        (0, datetime(1970, 1, 1, tzinfo=timezone.utc)),
    ],
)
def test_parse_timestamp(value, expected):
    assert parse_timestamp(value) == expected


@pytest.mark.parametrize("value", [None, "", "  ", "yesterday", True, {"a": 1}, [2024, 3, 1]])
def test_parse_timestamp_unparseable(value):
    assert parse_timestamp(value) is None


def test_calendar_day_drops_time_of_day():
    assert calendar_day("2024-03-01T23:59:59Z") == date(2024, 3, 1)
    assert calendar_day("bad") is None
