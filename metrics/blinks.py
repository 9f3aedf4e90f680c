# metrics/blinks.py
import math
from collections import deque
from enum import Enum

from metrics.stats import compute_stats


class BlinkState(Enum):
    OPEN = "OPEN"
    CLOSING = "CLOSING"


class SmoothingBuffer:
    """Fixed-size FIFO of recent eyelid-closure scores with a running sum"""

    def __init__(self, size):
        self.values = deque(maxlen=size)
        self.total = 0.0

    def push(self, value):
        if len(self.values) == self.values.maxlen:
            self.total -= self.values[0]
        self.values.append(value)
        self.total += value

    def average(self):
        if not self.values:
            return 0.0
        return self.total / len(self.values)

    def clear(self):
        self.values.clear()
        self.total = 0.0

    def __len__(self):
        return len(self.values)


class BlinkDetector:
    """
    Detects blinks from per-frame eyelid-closure scores
    - Smooths each eye over a short window
    - Rejects one-eyed closures and closures starting during head motion
    - Counts blinks using an edge-triggered FSM with duration gating
    """

    def __init__(self, config=None):
        """
        Initialize Blink Detector with configuration

        Args:
            config: Configuration dictionary with a 'blinks' section

        Raises:
            ValueError: smoothing window below 1 or threshold outside (0, 1)
        """
        self.config = config or {}
        blinks_config = self.config.get('blinks', {})

        self.smoothing_window = int(blinks_config.get('smoothing_window', 3))
        self.threshold = float(blinks_config.get('threshold', 0.3))
        self.sync_tolerance = blinks_config.get('sync_tolerance', 0.15)
        self.motion_tolerance = blinks_config.get('motion_tolerance', 0.05)
        self.min_duration_ms = blinks_config.get('min_duration_ms', 50)
        self.max_duration_ms = blinks_config.get('max_duration_ms', 500)

        if self.smoothing_window < 1:
            raise ValueError(f"smoothing_window must be >= 1, got {self.smoothing_window}")
        if not 0.0 < self.threshold < 1.0:
            raise ValueError(f"threshold must be in (0, 1), got {self.threshold}")

        self.left_scores = SmoothingBuffer(self.smoothing_window)
        self.right_scores = SmoothingBuffer(self.smoothing_window)

        # FSM
        self.current_state = BlinkState.OPEN
        self.closure_start_time = None
        self.was_blinking = False

        self.last_nose_position = None
        self.blink_count = 0
        self.session_start_time = None

    def reset(self, now_ms):
        """
        Start a new session: clear buffers, FSM and counters

        Args:
            now_ms: Session clock time in milliseconds
        """
        self.left_scores.clear()
        self.right_scores.clear()
        self.current_state = BlinkState.OPEN
        self.closure_start_time = None
        self.was_blinking = False
        self.last_nose_position = None
        self.blink_count = 0
        self.session_start_time = now_ms

    def step(self, sample, nose, now_ms, session_clock_ms):
        """
        Process one frame of eye data

        A None sample means no face was found. The frame is skipped without
        touching the buffers or the FSM, so a short tracking dropout in the
        middle of a blink does not abort it.

        Scores are not range checked.

        Args:
            sample: EyeSample (left_score, right_score) or None
            nose: NosePosition (x, y) in normalized frame units or None
            now_ms: Monotonic frame timestamp in milliseconds
            session_clock_ms: Session clock time in milliseconds

        Returns:
            dict: Blink event flag, stats snapshot and gate diagnostics
        """
        if self.session_start_time is None:
            raise RuntimeError("reset() must be called before step()")

        blink_detected = False
        avg_left = avg_right = None
        is_head_stable = eyes_in_sync = is_blinking = None

        if sample is not None:
            self.left_scores.push(sample.left_score)
            self.right_scores.push(sample.right_score)
            avg_left = self.left_scores.average()
            avg_right = self.right_scores.average()

            is_head_stable = self._update_head_stability(nose)
            eyes_in_sync = abs(avg_left - avg_right) < self.sync_tolerance

            avg_blink = (avg_left + avg_right) / 2
            is_blinking = avg_blink > self.threshold

            if self.current_state == BlinkState.OPEN:
                if is_blinking and not self.was_blinking:
                    if eyes_in_sync and is_head_stable:
                        # Blink start
                        self.current_state = BlinkState.CLOSING
                        self.closure_start_time = now_ms
                    # Otherwise the onset is rejected and this closure is never tracked

            elif self.current_state == BlinkState.CLOSING:
                if not is_blinking:
                    # Blink end
                    blink_duration = now_ms - self.closure_start_time
                    if self.min_duration_ms <= blink_duration <= self.max_duration_ms:
                        self.blink_count += 1
                        blink_detected = True
                    self.current_state = BlinkState.OPEN
                    self.closure_start_time = None

            self.was_blinking = is_blinking

        stats = compute_stats(self.blink_count, self.session_start_time, session_clock_ms)

        return {
            'blink_detected': blink_detected,
            'stats': stats,
            'current_state': self.current_state.value,
            'avg_left': avg_left,
            'avg_right': avg_right,
            'is_head_stable': is_head_stable,
            'eyes_in_sync': eyes_in_sync,
            'is_blinking': is_blinking,
        }

    def _update_head_stability(self, nose):
        """
        Compare the nose tip with the previous frame's position

        Args:
            nose: Current NosePosition or None

        Returns:
            bool: True when the head moved less than the motion tolerance
        """
        if nose is None:
            return True

        is_stable = True
        if self.last_nose_position is not None:
            movement = math.hypot(nose.x - self.last_nose_position[0],
                                  nose.y - self.last_nose_position[1])
            is_stable = movement < self.motion_tolerance

        self.last_nose_position = (nose.x, nose.y)
        return is_stable
