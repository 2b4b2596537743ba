"""Tone synthesis for the tower's click-to-hear blocks."""

from typing import Sequence, Union

import numpy as np

SAMPLE_RATE = 44100
SINGLE_TONE_GAIN = 0.3
CHORD_GAIN = 0.2  # Lower gain when several tones sound together to avoid clipping
ENVELOPE_FLOOR = 0.001


def synthesize_tone(
    frequency: Union[float, Sequence[float]],
    duration: float = 0.5,
    sample_rate: int = SAMPLE_RATE,
) -> np.ndarray:
    """Render sine tones sharing one exponentially decaying envelope.

    Args:
        frequency: A frequency in Hz or several to play together
        duration: Length in seconds
        sample_rate: Output sample rate in Hz

    Returns:
        float32 mono samples
    """
    frequencies = (
        [float(frequency)]
        if np.isscalar(frequency)
        else [float(f) for f in frequency]
    )
    count = int(round(duration * sample_rate))
    if count <= 0 or not frequencies:
        return np.zeros(0, dtype=np.float32)

    gain = CHORD_GAIN if len(frequencies) > 1 else SINGLE_TONE_GAIN
    t = np.arange(count) / sample_rate

    # Decays from gain to ENVELOPE_FLOOR over the duration
    envelope = gain * (ENVELOPE_FLOOR / gain) ** (t / duration)
    tones = sum(np.sin(2 * np.pi * f * t) for f in frequencies)
    return (envelope * tones).astype(np.float32)
