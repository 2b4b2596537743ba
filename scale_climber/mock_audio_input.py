from typing import Iterable, List, Optional

import numpy as np

from .core.interfaces import IAudioInput
from .note_types import AudioFrame


def sine_frame(
    frequency: float,
    amplitude: float = 0.5,
    frame_size: int = 2048,
    sample_rate: int = 44100,
) -> AudioFrame:
    """A frame holding a pure tone, for tests and demos."""
    t = np.arange(frame_size) / sample_rate
    samples = (amplitude * np.sin(2 * np.pi * frequency * t)).astype(np.float32)
    return AudioFrame(samples=samples, sample_rate=sample_rate)


class MockAudioInput(IAudioInput):
    """A scripted input for unit tests. Hands out queued frames, then repeats the last one."""

    def __init__(
        self,
        frames: Optional[Iterable[Optional[AudioFrame]]] = None,
        sample_rate: int = 44100,
        frame_size: int = 2048,
        fail_on_start: bool = False,
    ):
        self.frames: List[Optional[AudioFrame]] = list(frames or [])
        self._sample_rate = sample_rate
        self._frame_size = frame_size
        self.fail_on_start = fail_on_start
        self.running = False
        self.start_calls = 0
        self.stop_calls = 0
        self._current: Optional[AudioFrame] = None

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    @property
    def frame_size(self) -> int:
        return self._frame_size

    def start(self) -> bool:
        self.start_calls += 1
        if self.fail_on_start:
            return False
        self.running = True
        return True

    def stop(self):
        self.stop_calls += 1
        self.running = False

    def is_running(self) -> bool:
        return self.running

    def push(self, frame: Optional[AudioFrame]) -> None:
        self.frames.append(frame)

    def get_frame(self) -> Optional[AudioFrame]:
        if not self.running:
            return None
        if self.frames:
            self._current = self.frames.pop(0)
        return self._current
