"""Defines the core interfaces for the Scale Climber application."""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Optional

from ..note_types import AudioFrame


class IAudioInput(ABC):
    """Interface for pull-based audio inputs.

    The input buffers audio on its own; callers ask for the most recent
    frame whenever they are ready to analyze one.
    """

    @abstractmethod
    def start(self) -> bool:
        """Start capturing audio.

        Returns:
            True if capture is running, False if it could not be started. A
            failed start leaves nothing acquired.
        """
        pass

    @abstractmethod
    def stop(self) -> None:
        """Stop capturing audio. Safe to call repeatedly."""
        pass

    @abstractmethod
    def is_running(self) -> bool:
        """Check if audio is running."""
        pass

    @abstractmethod
    def get_frame(self) -> Optional[AudioFrame]:
        """Return the latest frame, or None if none is available."""
        pass

    @property
    @abstractmethod
    def sample_rate(self) -> int:
        """The sample rate of captured frames."""
        pass

    @property
    @abstractmethod
    def frame_size(self) -> int:
        """Number of samples in each frame."""
        pass
