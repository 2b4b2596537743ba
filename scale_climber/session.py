"""Listening session that ties audio input, pitch detection and scale mapping together."""

from __future__ import annotations
import threading
import time
from typing import Callable, Optional

from .logger import get_logger
from .note_label import NoteLabelThrottle
from .note_types import PollResult, ScaleData
from .pitch_detector import PitchDetector
from .scale_mapper import ScalePositionMapper, render_position
from .scales import DEFAULT_BASE_OCTAVE, generate_scale_data
from .core.config import ConfigManager
from .core.events import SessionEvents, SessionEventType
from .core.interfaces import IAudioInput

logger = get_logger(__name__)

MICROPHONE_ERROR = "Please allow microphone access to use the tuner."


class ScaleClimberSession:
    """Polls an audio input on a fixed cadence and tracks the singer on the tower.

    This class acts as a facade over the pitch detector, the position mapper
    and the note label, so clients only deal with start, stop and poll.
    Only one poll runs at a time; a tick that arrives while another is in
    flight is skipped.
    """

    def __init__(
        self,
        audio_input: IAudioInput,
        detector: Optional[PitchDetector] = None,
        mapper: Optional[ScalePositionMapper] = None,
        root_key: str = "C",
        base_octave: int = DEFAULT_BASE_OCTAVE,
        poll_interval: float = 0.3,
        label_interval: float = 1.0,
        min_frequency: float = 70.0,
        max_frequency: float = 1000.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the session.

        Args:
            audio_input: Source of frames
            detector: Pitch detector, or None to create a default one
            mapper: Position mapper, or None to create a default one
            root_key: Key of the scale on the tower
            base_octave: Octave of Do in the low register
            poll_interval: Seconds between polls in run()
            label_interval: Minimum seconds between note label changes
            min_frequency: Detections at or below this are ignored
            max_frequency: Detections at or above this are ignored
            clock: Monotonic time source in seconds
        """
        self._audio_input = audio_input
        self._detector = detector or PitchDetector()
        self._mapper = mapper or ScalePositionMapper()
        self._label = NoteLabelThrottle(label_interval)
        self._scale_data = generate_scale_data(root_key, base_octave)

        self.poll_interval = poll_interval
        self.min_frequency = min_frequency
        self.max_frequency = max_frequency
        self._clock = clock

        self.events = SessionEvents()
        # Reentrant so a position listener may call stop()
        self._poll_lock = threading.RLock()
        self._stop_event = threading.Event()
        self._stop_event.set()
        self._listening = False
        self._frequency: Optional[float] = None

    @classmethod
    def from_config(
        cls, config_manager: ConfigManager, audio_input: IAudioInput, **overrides
    ) -> "ScaleClimberSession":
        """Build a session from the 'session', 'pitch_detector' and 'mapper' sections."""
        session_config = config_manager.get_config("session")
        session_config.update(
            {key: value for key, value in overrides.items() if value is not None}
        )
        detector = PitchDetector(**config_manager.get_config("pitch_detector"))
        mapper = ScalePositionMapper(**config_manager.get_config("mapper"))
        return cls(audio_input, detector=detector, mapper=mapper, **session_config)

    @property
    def scale_data(self) -> ScaleData:
        return self._scale_data

    @property
    def frequency(self) -> Optional[float]:
        """The frequency currently shown, or None."""
        return self._frequency

    @property
    def continuity(self) -> Optional[float]:
        return self._mapper.continuity

    @property
    def label(self) -> str:
        return self._label.label

    def is_listening(self) -> bool:
        return self._listening

    def set_key(self, root_key: str, base_octave: Optional[int] = None) -> ScaleData:
        """Switch the tower to another key.

        Raises:
            ValueError: If root_key is unknown
        """
        octave = self._scale_data.base_octave if base_octave is None else base_octave
        self._scale_data = generate_scale_data(root_key, octave)
        logger.info(f"Scale set to {root_key} major (octave {octave})")
        return self._scale_data

    def start(self) -> bool:
        """Start listening.

        Returns:
            True if listening (including when already started), False if the
            audio input could not be started
        """
        if self._listening:
            return True

        if not self._audio_input.start():
            logger.error("Audio input failed to start")
            self.events.emit(SessionEventType.ERROR, MICROPHONE_ERROR)
            return False

        self._stop_event.clear()
        self._listening = True
        logger.info("Listening started")
        self.events.emit(SessionEventType.STARTED)
        return True

    def stop(self) -> None:
        """Stop listening and forget everything learned while listening."""
        self._stop_event.set()
        was_listening = self._listening
        self._listening = False
        self._audio_input.stop()

        with self._poll_lock:
            self._frequency = None
            self._mapper.reset()
            self._label.reset()

        if was_listening:
            logger.info("Listening stopped")
            self.events.emit(SessionEventType.STOPPED)

    def poll(self) -> Optional[PollResult]:
        """Run one detection cycle.

        Returns:
            The result, or None when another poll is still in progress
        """
        if not self._poll_lock.acquire(blocking=False):
            logger.debug("Poll already in progress, skipping tick")
            return None

        try:
            frame = self._audio_input.get_frame() if self._listening else None
            detected = self._detector.estimate(frame)

            if detected is None:
                self._frequency = None
            elif self.min_frequency < detected < self.max_frequency:
                self._frequency = detected
            else:
                logger.debug(f"Ignoring out-of-band detection {detected:.1f}Hz")

            now = self._clock()
            position = self._mapper.position_for(
                self._frequency, self._scale_data.low, self._scale_data.high
            )
            result = PollResult(
                frequency=self._frequency,
                position=position,
                render_position=render_position(position, self._listening),
                label=self._label.update(self._frequency, now),
                timestamp=now,
            )
            # Emitted under the lock so it can never follow STOPPED
            if self._listening:
                self.events.emit(SessionEventType.POSITION_UPDATED, result)
        finally:
            self._poll_lock.release()

        return result

    def run(self, duration: Optional[float] = None) -> None:
        """Poll every poll_interval seconds until stop() is called or duration elapses.

        Polls once immediately. Blocks the calling thread.
        """
        if not self._listening:
            logger.warning("run() called before start()")
            return

        deadline = None if duration is None else self._clock() + duration
        while not self._stop_event.is_set():
            self.poll()

            wait = self.poll_interval
            if deadline is not None:
                remaining = deadline - self._clock()
                if remaining <= 0:
                    break
                wait = min(wait, remaining)
            if self._stop_event.wait(wait):
                break
