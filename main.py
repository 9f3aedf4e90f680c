# main.py - Blink Counter
import sys
import threading
import time

import cv2
import numpy as np
import pygame

from args import apply_overrides, get_args
from config import load_config
from data_logger import DataLogger
from metrics.stats import format_time
from session import MeasurementSession
from vision.eyes import EyeDetector
from vision.samples import SourceUnavailableError

WINDOW_NAME = 'Blink Counter'


class BlinkCounterApp:
    """
    Camera loop, measurement session and dashboard for the blink counter
    All processing happens locally; frames are never stored
    """

    def __init__(self, config):
        """
        Initialize the application

        Args:
            config: Configuration dictionary

        Raises:
            SourceUnavailableError: Face landmark model could not be loaded
            ValueError: Invalid blink detector settings
        """
        self.config = config
        self.eye_detector = EyeDetector(self.config)
        self.event_log = DataLogger(echo=self.config['logging']['echo'])
        try:
            self.session = MeasurementSession(
                self.config,
                self.eye_detector,
                event_log=self.event_log,
                on_complete=self.on_measurement_complete
            )
        except ValueError:
            self.eye_detector.cleanup()
            raise
        self.show_preview = self.config['display']['show_preview']
        self.frame_count = 0

    def on_measurement_complete(self, stats):
        print(f"Measurement complete: {stats.blink_count} blinks, "
              f"{stats.blinks_per_minute} blinks/min over {stats.elapsed_seconds}s")
        sound_file = self.config['alerts'].get('sound_file')
        if sound_file:
            play_alert_sound(sound_file)

    def toggle_measurement(self):
        if self.session.is_active:
            self.session.stop()
        else:
            self.session.start()

    def process_frame(self, frame):
        """
        Run one frame through the active measurement

        Args:
            frame: Input camera frame

        Returns:
            tuple: (result dict or None, display_frame)
        """
        self.frame_count += 1

        if self.config['camera']['mirror_effect']:
            frame = cv2.flip(frame, 1)

        result = self.session.tick(frame)

        if self.show_preview:
            display_frame = frame.copy()
        else:
            display_frame = np.zeros_like(frame)
            height, width = frame.shape[:2]
            cv2.putText(display_frame, "CAMERA OFF", (width // 2 - 90, height // 2),
                        cv2.FONT_HERSHEY_DUPLEX, 1.0, (200, 200, 200), 2)

        return result, display_frame

    def draw_dashboard(self, frame):
        """
        Draw the stats panel for the current session

        Args:
            frame: Frame to use for dimensions

        Returns:
            numpy.ndarray: Dashboard image
        """
        height = frame.shape[0]
        dashboard_width = self.config['display']['dashboard_width']
        colors = self.config['display']['colors']

        dashboard = np.zeros((height, dashboard_width, 3), dtype=np.uint8)
        dashboard[:] = colors['background']

        y_position = 40
        cv2.putText(dashboard, "BLINK COUNTER", (20, y_position),
                    cv2.FONT_HERSHEY_DUPLEX, 0.8, colors['text_primary'], 2)
        y_position += 45

        session = self.session
        if session.is_active:
            status_text, status_color = "MEASURING", colors['active']
        elif session.finished:
            status_text, status_color = "COMPLETE", colors['idle']
        else:
            status_text, status_color = "READY", colors['idle']

        cv2.putText(dashboard, f"STATUS: {status_text}", (20, y_position),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.6, status_color, 1)
        y_position += 30

        remaining = session.remaining_seconds if session.is_active else session.duration_s
        cv2.putText(dashboard, f"TIME LEFT: {format_time(remaining)}", (20, y_position),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.6, colors['text_secondary'], 1)
        y_position += 30

        cv2.line(dashboard, (10, y_position), (dashboard_width - 10, y_position), colors['separator'], 2)
        y_position += 40

        stats = session.last_stats
        blink_count = stats.blink_count if stats else 0
        blinks_per_minute = stats.blinks_per_minute if stats else 0

        cv2.putText(dashboard, f"BLINKS: {blink_count}", (20, y_position),
                    cv2.FONT_HERSHEY_DUPLEX, 0.9, colors['text_primary'], 2)
        y_position += 40
        cv2.putText(dashboard, f"BLINKS/MIN: {blinks_per_minute}", (20, y_position),
                    cv2.FONT_HERSHEY_DUPLEX, 0.9, colors['text_primary'], 2)
        y_position += 40

        result = session.last_result
        if session.is_active and result is not None:
            face_found = result['avg_left'] is not None
            face_color = colors['active'] if face_found else colors['error']
            cv2.putText(dashboard, f"Face: {'DETECTED' if face_found else 'NOT DETECTED'}",
                        (20, y_position), cv2.FONT_HERSHEY_SIMPLEX, 0.5, face_color, 1)
            y_position += 20
            cv2.putText(dashboard, f"Eye state: {result['current_state']}", (20, y_position),
                        cv2.FONT_HERSHEY_SIMPLEX, 0.5, colors['text_secondary'], 1)
            y_position += 30

        y_position = height - 80
        for line in ("SPACE: start/stop   r: restart", "c: camera on/off   q: quit"):
            cv2.putText(dashboard, line, (20, y_position),
                        cv2.FONT_HERSHEY_SIMPLEX, 0.45, colors['text_secondary'], 1)
            y_position += 22

        return dashboard

    def cleanup(self):
        self.session.stop()
        self.eye_detector.cleanup()


def play_alert_sound(file_path):

    def _play():
        try:
            if not pygame.mixer.get_init():
                pygame.mixer.init()
            pygame.mixer.music.load(file_path)
            pygame.mixer.music.play()
        except pygame.error as e:
            print(f"Error playing alert sound: {e}")

    threading.Thread(target=_play, daemon=True).start()


def open_camera(camera_config):
    cap = cv2.VideoCapture(camera_config['index'])
    if not cap.isOpened():
        raise SourceUnavailableError(f"Could not open camera {camera_config['index']}")
    cap.set(cv2.CAP_PROP_FRAME_WIDTH, camera_config['width'])
    cap.set(cv2.CAP_PROP_FRAME_HEIGHT, camera_config['height'])
    cap.set(cv2.CAP_PROP_FPS, camera_config['fps'])
    return cap


def main(argv=None):
    """
    Main function to run the blink counter
    """
    args = get_args(argv)
    config = apply_overrides(load_config(args.config), args)

    try:
        app = BlinkCounterApp(config)
    except (SourceUnavailableError, ValueError) as e:
        print(f"Error: {e}")
        return 1

    try:
        cap = open_camera(config['camera'])
    except SourceUnavailableError as e:
        print(f"Error: {e}")
        app.cleanup()
        return 1

    actual_width = int(cap.get(cv2.CAP_PROP_FRAME_WIDTH))
    actual_height = int(cap.get(cv2.CAP_PROP_FRAME_HEIGHT))
    actual_fps = cap.get(cv2.CAP_PROP_FPS)

    print("Starting Blink Counter")
    print(f"Camera: {actual_width}x{actual_height} @ {actual_fps:.1f} FPS")
    print(f"Measurement duration: {format_time(app.session.duration_s)}")
    print("All processing stays on this machine. No video or images are saved.")
    print("\nControls:")
    print("  SPACE/'s' - Start or stop a measurement")
    print("  'r' - Restart the measurement")
    print("  'c' - Toggle camera preview")
    print("  'q' - Quit application")

    start_time = time.time()

    try:
        while True:
            ret, frame = cap.read()
            if not ret:
                print("Failed to capture frame from camera")
                break

            _, display_frame = app.process_frame(frame)
            dashboard = app.draw_dashboard(display_frame)
            combined = np.hstack([display_frame, dashboard])

            if config['display']['show_fps']:
                elapsed_time = time.time() - start_time
                fps = app.frame_count / elapsed_time if elapsed_time > 0 else 0
                cv2.putText(combined, f"FPS: {fps:.1f}", (10, 30),
                            cv2.FONT_HERSHEY_SIMPLEX, 0.6, (255, 255, 255), 1)

            cv2.imshow(WINDOW_NAME, combined)

            key = cv2.waitKey(1) & 0xFF
            if key == ord('q'):
                break
            elif key in (ord(' '), ord('s')):
                app.toggle_measurement()
            elif key == ord('r'):
                app.session.start()
                print("Measurement restarted")
            elif key == ord('c'):
                app.show_preview = not app.show_preview

    except KeyboardInterrupt:
        print("Interrupted by user")
    finally:
        stats = app.session.last_stats
        app.cleanup()
        cap.release()
        cv2.destroyAllWindows()

        total_time = time.time() - start_time
        print(f"\nSession Summary:")
        print(f"  Total runtime: {total_time:.1f} seconds")
        print(f"  Frames processed: {app.frame_count}")
        if stats is not None:
            print(f"  Last measurement: {stats.blink_count} blinks, {stats.blinks_per_minute} blinks/min")
            print(f"  Detection errors: {app.event_log.count('Detection Error')}")
        print("Shutdown complete")

    return 0


if __name__ == "__main__":
    sys.exit(main())
