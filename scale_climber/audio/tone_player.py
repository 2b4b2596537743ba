"""Plays reference tones through the default output device."""

from typing import Sequence, Union

import sounddevice as sd

from ..logger import get_logger
from .synthesis import SAMPLE_RATE, synthesize_tone

logger = get_logger(__name__)


def play_tone(
    frequency: Union[float, Sequence[float]],
    duration: float = 0.5,
    sample_rate: int = SAMPLE_RATE,
) -> bool:
    """Start playing one or more tones without blocking.

    Returns:
        True if playback started, False if the output device refused it
    """
    samples = synthesize_tone(frequency, duration, sample_rate)
    try:
        sd.play(samples, sample_rate)
    except sd.PortAudioError as e:
        logger.error(f"Could not play tone: {e}")
        return False
    return True
