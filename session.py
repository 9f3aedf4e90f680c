# session.py - Measurement session control around the blink detector
import time

from data_logger import DataLogger
from metrics.blinks import BlinkDetector
from metrics.stats import compute_stats

MIN_DURATION_S = 10
MAX_DURATION_S = 600


def _monotonic_ms():
    return time.perf_counter() * 1000.0


def _wall_clock_ms():
    return time.time() * 1000.0


class MeasurementSession:
    """
    Runs one timed blink measurement at a time

    Owns the detector for the active session, the countdown and the liveness
    flag checked on every tick. Ticks are expected strictly one after another
    from a single loop.
    """

    def __init__(self, config, sample_source, event_log=None,
                 on_blink=None, on_stats=None, on_complete=None,
                 clock=None, session_clock=None):
        """
        Args:
            config: Configuration dictionary ('blinks' and 'session' sections)
            sample_source: Object with read(frame, timestamp_ms) -> (sample, nose)
            event_log: DataLogger for session events
            on_blink: Called with BlinkStats each time a blink is counted
            on_stats: Called with BlinkStats after every processed tick
            on_complete: Called with the final BlinkStats when the timer runs out
            clock: Monotonic millisecond clock for frame timestamps
            session_clock: Millisecond clock used for elapsed time

        Raises:
            ValueError: Invalid smoothing window or threshold in the config
        """
        self.config = config or {}
        self.sample_source = sample_source
        self.event_log = event_log if event_log is not None else DataLogger(echo=False)
        self.on_blink = on_blink
        self.on_stats = on_stats
        self.on_complete = on_complete
        self.clock = clock or _monotonic_ms
        self.session_clock = session_clock or _wall_clock_ms

        session_config = self.config.get('session', {})
        duration = int(session_config.get('duration_s', 60))
        self.duration_s = min(max(duration, MIN_DURATION_S), MAX_DURATION_S)

        # Reject a bad blinks section now rather than on the first start()
        BlinkDetector(self.config)

        self.detector = None
        self.is_active = False
        self.finished = False
        self.remaining_seconds = 0
        self.last_stats = None
        self.last_result = None

    def start(self, now_ms=None):
        """
        Begin a new measurement, tearing down any active one first

        Args:
            now_ms: Session clock time in milliseconds (defaults to session_clock())
        """
        if self.is_active:
            self.stop()

        if now_ms is None:
            now_ms = self.session_clock()

        self.event_log.clear()
        self.detector = BlinkDetector(self.config)
        self.detector.reset(now_ms)
        self.is_active = True
        self.finished = False
        self.remaining_seconds = self.duration_s
        self.last_stats = None
        self.last_result = None
        self.event_log.log_event("Measurement Started", f"Duration={self.duration_s}s")

    def stop(self):
        """Stop scheduling ticks and discard the detector state"""
        if not self.is_active:
            return
        self.is_active = False
        self.detector = None
        self.remaining_seconds = 0
        count = self.last_stats.blink_count if self.last_stats else 0
        if not self.finished:
            self.event_log.log_event("Measurement Stopped", f"Blinks={count}")

    def tick(self, frame, now_ms=None):
        """
        Process one frame of the active measurement

        Errors raised while reading the frame are reported and dropped; the
        detector is left as it was, the countdown still advances and the next
        tick runs normally. Callback errors are reported the same way.

        Args:
            frame: Camera frame handed to the sample source
            now_ms: Monotonic frame timestamp in milliseconds

        Returns:
            dict: Detector result, or None when inactive or on a failed frame
        """
        if not self.is_active:
            return None

        if now_ms is None:
            now_ms = self.clock()

        try:
            sample, nose = self.sample_source.read(frame, now_ms)
            result = self.detector.step(sample, nose, now_ms, self.session_clock())
        except Exception as e:
            print(f"Detection error: {e}")
            self.event_log.log_event("Detection Error", str(e))
            result = None

        if result is not None:
            stats = result['stats']
            self.last_stats = stats
            self.last_result = result

            if result['blink_detected']:
                self.event_log.log_event("Blink Detected", f"Count={stats.blink_count}")
                self._notify(self.on_blink, stats)
            self._notify(self.on_stats, stats)
        else:
            # The countdown keeps running while frames fail
            stats = compute_stats(self.detector.blink_count,
                                  self.detector.session_start_time,
                                  self.session_clock())

        self.remaining_seconds = max(0, self.duration_s - stats.elapsed_seconds)
        if self.remaining_seconds == 0:
            self.finished = True
            self.event_log.log_event(
                "Measurement Completed",
                f"Blinks={stats.blink_count}, Rate={stats.blinks_per_minute}/min"
            )
            self.stop()
            self._notify(self.on_complete, stats)

        return result

    def _notify(self, callback, stats):
        if callback is None:
            return
        try:
            callback(stats)
        except Exception as e:
            print(f"Callback error: {e}")
            self.event_log.log_event("Callback Error", str(e))
