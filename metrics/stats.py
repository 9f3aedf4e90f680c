# metrics/stats.py
import math
from collections import namedtuple

BlinkStats = namedtuple('BlinkStats', ['blink_count', 'blinks_per_minute', 'elapsed_seconds'])


def compute_stats(blink_count, session_start_ms, session_clock_ms):
    """
    Derive elapsed time and blink rate from the detector counters

    Args:
        blink_count: Blinks counted so far in the session
        session_start_ms: Session clock time at reset, in milliseconds
        session_clock_ms: Current session clock time, in milliseconds

    Returns:
        BlinkStats: Snapshot with whole elapsed seconds and rounded blinks/min
    """
    elapsed_seconds = max(0, int(math.floor((session_clock_ms - session_start_ms) / 1000)))
    if elapsed_seconds > 0:
        # Half-up rounding, 2.5 -> 3
        blinks_per_minute = int(math.floor(blink_count / elapsed_seconds * 60 + 0.5))
    else:
        blinks_per_minute = 0
    return BlinkStats(blink_count, blinks_per_minute, elapsed_seconds)


def format_time(seconds):
    """Format a countdown as m:ss"""
    seconds = max(0, int(seconds))
    return f"{seconds // 60}:{seconds % 60:02d}"
