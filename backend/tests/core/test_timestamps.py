from datetime import datetime, timedelta, timezone

from l2rr2l_api.core.timestamps import format_timestamp, utcnow


def test_format_matches_javascript_iso_string():
    assert format_timestamp(datetime(2024, 1, 1, tzinfo=timezone.utc)) == "2024-01-01T00:00:00.000Z"


def test_format_truncates_to_milliseconds():
    dt = datetime(2024, 2, 29, 12, 30, 45, 123999, tzinfo=timezone.utc)
    assert format_timestamp(dt) == "2024-02-29T12:30:45.123Z"


def test_format_converts_offsets_to_utc():
    plus_two = timezone(timedelta(hours=2))
    dt = datetime(2024, 1, 1, 2, 0, tzinfo=plus_two)
    assert format_timestamp(dt) == "2024-01-01T00:00:00.000Z"


def test_naive_datetime_taken_as_utc():
    assert format_timestamp(datetime(2024, 1, 1)) == "2024-01-01T00:00:00.000Z"


def test_utcnow_is_aware():
    assert utcnow().tzinfo is timezone.utc
