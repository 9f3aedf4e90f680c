# data_logger.py
from datetime import datetime


class DataLogger:
    """
    Keeps measurement events for the current session in memory.
    Nothing is written to disk; the log is cleared when the next session starts.
    """

    def __init__(self, echo=True):
        """
        Initialize the logger.

        Args:
            echo: Print each event to the console as it is logged
        """
        self.echo = echo
        self.events = []

    def log_event(self, event_type, details=""):
        """
        Log an event with the current timestamp.
        """
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        self.events.append((timestamp, event_type, details))

        if self.echo:
            print(f"[LOG] {timestamp} - {event_type}: {details}")

    def count(self, event_type):
        """
        Count logged events of one type.
        """
        return sum(1 for _, kind, _ in self.events if kind == event_type)

    def clear(self):
        self.events.clear()
