import pytest

from utils.time_range import normalize_time_range


@pytest.mark.parametrize("value,expected", [
    ("1h", "1h"),
    ("24h", "24h"),
    ("7d", "7d"),
    ("30m", "30m"),
    ("2 hours", "2h"),
    ("last 3 days", "3d"),
    ("1 week", "1w"),
    ("6M", "6M"),
    (" 15 MIN ", "15m"),
])
def test_recognised_ranges(value, expected):
    assert normalize_time_range(value) == expected


@pytest.mark.parametrize("value", [None, "", "recently", "0h", "-1h", "1 fortnight", 5, "suggested time range"])
def test_unrecognised_ranges_are_dropped(value):
    assert normalize_time_range(value) is None
