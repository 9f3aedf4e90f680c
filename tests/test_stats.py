import pytest

from metrics.stats import BlinkStats, compute_stats, format_time


def test_zero_elapsed_has_zero_rate():
    assert compute_stats(5, 0, 999) == BlinkStats(5, 0, 0)


def test_rate_over_thirty_seconds():
    stats = compute_stats(10, 0, 30000)
    assert stats.elapsed_seconds == 30
    assert stats.blinks_per_minute == 20


def test_elapsed_seconds_are_floored():
    assert compute_stats(0, 1000, 3999).elapsed_seconds == 2


@pytest.mark.parametrize("count, elapsed_ms, expected", [
    (1, 120000, 1),   # 0.5 rounds up
    (1, 7000, 9),     # 8.57
    (7, 60000, 7),
    (0, 60000, 0),
])
def test_rate_rounding(count, elapsed_ms, expected):
    assert compute_stats(count, 0, elapsed_ms).blinks_per_minute == expected


def test_clock_before_start_clamped():
    assert compute_stats(3, 5000, 1000) == BlinkStats(3, 0, 0)


@pytest.mark.parametrize("seconds, text", [
    (0, "0:00"),
    (9, "0:09"),
    (60, "1:00"),
    (185, "3:05"),
    (-4, "0:00"),
])
def test_format_time(seconds, text):
    assert format_time(seconds) == text
