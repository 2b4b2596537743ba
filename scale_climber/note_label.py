"""Rate-limited note label for display."""

from typing import Optional

from .note_utils import get_note_name


class NoteLabelThrottle:
    """Remembers the last label and only renames the note every ``interval`` seconds.

    Silence clears the label straight away, without touching the timer.
    """

    def __init__(self, interval: float = 1.0) -> None:
        self.interval = interval
        self.label = ""
        self._last_update: Optional[float] = None

    def update(self, frequency: Optional[float], now: float) -> str:
        """Feed the current frequency and return the label to show.

        Args:
            frequency: Current frequency in Hz, or None for no pitch
            now: Current time in seconds (any monotonic clock)
        """
        if frequency is None or frequency <= 0:
            self.label = ""
        elif self._last_update is None or now - self._last_update >= self.interval:
            self.label = get_note_name(frequency)
            self._last_update = now
        return self.label

    def reset(self) -> None:
        self.label = ""
        self._last_update = None
