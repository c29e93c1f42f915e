import pytest

from pomodoro.utils import format_duration


@pytest.mark.parametrize("seconds,expected", [
    (0, "00:00"),
    (59, "00:59"),
    (25 * 60, "25:00"),
    (3600 + 61, "01:01:01"),
    (-3, "00:00"),
])
def test_format_duration(seconds, expected):
    assert format_duration(seconds) == expected
