from datetime import datetime, timedelta, timezone

import pytest

from wegli.common.time_utils import (
    format_export_timestamp,
    format_rfc3339,
    parse_export_timestamp,
    parse_rfc3339,
)


def test_parse_export_timestamp_keeps_the_instant():
    parsed = parse_export_timestamp("2023-10-25 09:23:00.000 +0100")
    assert parsed == datetime(2023, 10, 25, 8, 23, tzinfo=timezone.utc)
    assert parsed.utcoffset() == timedelta(hours=1)


@pytest.mark.parametrize(
    "value",
    [
        "2023-10-25 09:23:00 .000+0100",
        "2023-10-25 09:23:00 +0100",
        "2023-10-25 09:23:00 +01:00",
        "2023-10-25 09:23:00.000+01:00",
    ],
)
def test_parse_export_timestamp_accepts_known_variants(value):
    assert parse_export_timestamp(value) == datetime(2023, 10, 25, 8, 23, tzinfo=timezone.utc)


def test_parse_export_timestamp_keeps_milliseconds():
    assert parse_export_timestamp("2023-06-01 17:05:12.25 +0200").microsecond == 250000


@pytest.mark.parametrize("value", ["not-a-date", "", "2023-10-25 09:23:00", "2023-13-45 09:23:00 +0100"])
def test_parse_export_timestamp_rejects_malformed(value):
    with pytest.raises(ValueError):
        parse_export_timestamp(value)


def test_format_export_timestamp_matches_parse():
    raw = "2023-06-01 17:05:12.250 +0200"
    assert format_export_timestamp(parse_export_timestamp(raw)) == raw


def test_format_export_timestamp_rejects_naive():
    with pytest.raises(ValueError):
        format_export_timestamp(datetime(2023, 1, 1))


def test_parse_rfc3339_with_offset_and_zulu():
    parsed = parse_rfc3339("2023-09-18T15:30:14.053+02:00")
    assert parsed.utcoffset() == timedelta(hours=2)
    assert parsed.microsecond == 53000
    assert parse_rfc3339("2024-01-01T00:00:00Z") == datetime(2024, 1, 1, tzinfo=timezone.utc)


def test_parse_rfc3339_rejects_naive_and_non_strings():
    with pytest.raises(ValueError):
        parse_rfc3339("2024-01-01T00:00:00")
    with pytest.raises(ValueError):
        parse_rfc3339(None)


def test_format_rfc3339_uses_milliseconds():
    value = datetime(2021, 7, 28, tzinfo=timezone(timedelta(hours=2)))
    assert format_rfc3339(value) == "2021-07-28T00:00:00.000+02:00"
