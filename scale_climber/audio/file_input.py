"""Audio input that replays a sound file frame by frame."""

from __future__ import annotations
from typing import Optional

import numpy as np
import soundfile as sf

from ..logger import get_logger
from ..note_types import AudioFrame
from ..core.interfaces import IAudioInput

logger = get_logger(__name__)


class WavFileInput(IAudioInput):
    """Provides frames by reading from a sound file.

    Every call to ``get_frame`` returns the next ``frame_size`` samples and
    advances by ``hop_size``. Multi-channel files are mixed down to mono.
    """

    def __init__(
        self,
        file_path: str,
        frame_size: int = 2048,
        hop_size: Optional[int] = None,
        loop: bool = False,
        gain: float = 1.0,
    ) -> None:
        self._file_path = file_path
        self._frame_size = frame_size
        self._hop_size = hop_size or frame_size
        self._loop = loop
        self._gain = gain
        self._samples: Optional[np.ndarray] = None
        self._position = 0
        self._sample_rate = 0
        self._running = False

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    @property
    def frame_size(self) -> int:
        return self._frame_size

    @property
    def position(self) -> int:
        """Index of the first sample of the next frame."""
        return self._position

    @property
    def exhausted(self) -> bool:
        """True once no further frame can be read."""
        if not self._running or self._samples is None:
            return True
        if self._loop:
            return len(self._samples) < self._frame_size
        return self._position + self._frame_size > len(self._samples)

    def is_running(self) -> bool:
        return self._running

    def start(self) -> bool:
        if self._running:
            return True
        try:
            data, sample_rate = sf.read(self._file_path, dtype="float32", always_2d=True)
        except (sf.LibsndfileError, OSError, RuntimeError) as e:
            logger.error(f"Could not open {self._file_path}: {e}")
            return False

        samples = data.mean(axis=1)
        if self._gain != 1.0:
            samples = samples * self._gain

        self._samples = samples.astype(np.float32)
        self._sample_rate = int(sample_rate)
        self._position = 0
        self._running = True
        logger.info(
            f"Opened {self._file_path}: {len(samples)} samples at {sample_rate} Hz"
        )
        return True

    def stop(self) -> None:
        if self._running:
            logger.info(f"Closed {self._file_path}")
        self._running = False
        self._samples = None
        self._position = 0

    def get_frame(self) -> Optional[AudioFrame]:
        if not self._running or self._samples is None:
            return None

        end = self._position + self._frame_size
        if end > len(self._samples):
            if not self._loop or len(self._samples) < self._frame_size:
                return None
            self._position = 0
            end = self._frame_size

        samples = self._samples[self._position : end].copy()
        self._position += self._hop_size
        return AudioFrame(samples=samples, sample_rate=self._sample_rate)
