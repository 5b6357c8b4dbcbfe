from datetime import datetime, timedelta, timezone

import pytest

from sensorwatch.errors import ParseError
from sensorwatch.normalizer import normalize, format_time_label
from conftest import make_reading


def test_normalize_builds_chart_point():
    result = normalize(make_reading(34, temp=22.5, hum=31.2, bat=3.61))
    p = result.point
    assert p.time == "12:34"
    assert p.temperature == 22.5
    assert p.humidity == 31.2
    assert p.battery == 3.61
    assert result.received_at == datetime(2025, 3, 1, 12, 34, tzinfo=timezone.utc)


def test_nanosecond_timestamp_is_accepted():
    raw = make_reading(0)
    raw["received_at"] = "2025-03-01T08:05:09.123456789Z"
    result = normalize(raw)
    assert result.point.time == "08:05"
    assert result.received_at.microsecond == 123456


def test_label_uses_the_timestamp_offset():
    raw = make_reading(0)
    raw["received_at"] = "2025-03-01T23:59:00+02:00"
    result = normalize(raw)
    assert result.point.time == "23:59"
    assert result.received_at.utcoffset() == timedelta(hours=2)


def test_naive_timestamp_is_treated_as_utc():
    raw = make_reading(0)
    raw["received_at"] = "2025-03-01T07:45:00"
    result = normalize(raw)
    assert result.received_at.tzinfo is not None
    assert result.received_at.utcoffset() == timedelta(0)
    assert result.point.time == "07:45"


def test_auxiliary_fields_are_ignored():
    raw = make_reading(1)
    raw["Door_status"] = {"unexpected": "shape"}
    raw["something_new"] = 42
    assert normalize(raw).point.time == "12:01"


@pytest.mark.parametrize("missing", ["TempC_SHT", "Hum_SHT", "BatV", "received_at"])
def test_missing_required_field(missing):
    raw = make_reading(1)
    del raw[missing]
    with pytest.raises(ParseError) as exc:
        normalize(raw)
    assert missing in str(exc.value)


@pytest.mark.parametrize("field, value", [
    ("Hum_SHT", "n/a"),
    ("BatV", "3.6"),
    ("TempC_SHT", True),
    ("Hum_SHT", None),
    ("BatV", [3.6]),
])
def test_non_numeric_channel(field, value):
    raw = make_reading(1)
    raw[field] = value
    with pytest.raises(ParseError) as exc:
        normalize(raw)
    assert field in str(exc.value)


def test_integer_channel_is_accepted():
    raw = make_reading(1)
    raw["TempC_SHT"] = 25
    assert normalize(raw).point.temperature == 25.0


def test_field_name_does_not_replace_upstream_key():
    raw = make_reading(1)
    raw["temperature"] = raw.pop("TempC_SHT")
    with pytest.raises(ParseError) as exc:
        normalize(raw)
    assert "TempC_SHT" in str(exc.value)


def test_non_finite_channel():
    raw = make_reading(1)
    raw["BatV"] = float("nan")
    with pytest.raises(ParseError):
        normalize(raw)


def test_bad_timestamp():
    raw = make_reading(1)
    raw["received_at"] = "yesterday-ish"
    with pytest.raises(ParseError):
        normalize(raw)


@pytest.mark.parametrize("payload", [None, [], "text", 3.5])
def test_payload_must_be_an_object(payload):
    with pytest.raises(ParseError):
        normalize(payload)


def test_format_time_label_pads():
    assert format_time_label(datetime(2025, 1, 1, 3, 7)) == "03:07"
