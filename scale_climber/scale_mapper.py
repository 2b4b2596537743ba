"""Maps a detected frequency onto a continuous position on the eight-step tower."""

from __future__ import annotations
from typing import ClassVar, Optional, Tuple

import numpy as np

from .logger import get_logger
from .note_types import ScaleDefinition
from .note_utils import frequency_to_note_number

logger = get_logger(__name__)

# Hz of slack allowed below the lowest and above the highest tone
EDGE_BUFFER_HZ = 15.0
# Last position above which the low register wins in the overlap zone
CONTINUITY_SPLIT = 3.5
# Where the indicator rests while listening without a mapped pitch
REST_POSITION = -0.5

TOP_POSITION = 7.0


def warp_fraction(fraction: float, semitone_distance: int) -> float:
    """Remap the progress between two adjacent scale tones.

    Across a whole tone the middle quarter of the gap (the chromatic note)
    is squeezed into a tenth of the travel, so the indicator lingers near
    the scale tones on either side. Other gaps are left linear.

    fraction in [0, 0.375)      -> [0, 0.45)
    fraction in [0.375, 0.625]  -> [0.45, 0.55]
    fraction in (0.625, 1]      -> (0.55, 1]
    """
    if semitone_distance != 2:
        return fraction
    if fraction < 0.375:
        return (fraction / 0.375) * 0.45
    if fraction > 0.625:
        return 0.55 + ((fraction - 0.625) / 0.375) * 0.45
    return 0.45 + ((fraction - 0.375) / 0.25) * 0.1


def semitone_distance(start_freq: float, end_freq: float) -> int:
    """Distance in semitones between the nearest notes of two frequencies."""
    start = round(frequency_to_note_number(start_freq))
    end = round(frequency_to_note_number(end_freq))
    return abs(end - start)


def position_in_scale(
    freq: float, scale: ScaleDefinition, buffer_hz: float = EDGE_BUFFER_HZ
) -> Optional[float]:
    """Position of ``freq`` within one register, or None if it is out of range.

    Frequencies between two tones interpolate (and warp) between their
    indices; those within ``buffer_hz`` outside the register clamp to 0 or 7.
    """
    min_freq = scale.min_frequency
    max_freq = scale.max_frequency

    if freq < min_freq - buffer_hz or freq > max_freq + buffer_hz:
        return None

    for current, upcoming in zip(scale.tones, scale.tones[1:]):
        if current.frequency <= freq <= upcoming.frequency:
            raw_fraction = (freq - current.frequency) / (
                upcoming.frequency - current.frequency
            )
            fraction = warp_fraction(
                raw_fraction, semitone_distance(current.frequency, upcoming.frequency)
            )
            return current.index + fraction

    if freq < min_freq:
        return 0.0
    return TOP_POSITION


def locate_position(
    freq: Optional[float],
    low: ScaleDefinition,
    high: ScaleDefinition,
    continuity: Optional[float],
    buffer_hz: float = EDGE_BUFFER_HZ,
    continuity_split: float = CONTINUITY_SPLIT,
) -> Tuple[Optional[float], Optional[float]]:
    """Place a frequency on the tower using both registers.

    Args:
        freq: Frequency in Hz, or None for no pitch
        low: The low register
        high: The high register, an octave above ``low``
        continuity: The last position produced, or None
        buffer_hz: Tolerance outside each register
        continuity_split: Previous positions above this prefer the low register

    Returns:
        (position, updated continuity). A None position leaves continuity as it was.
    """
    if freq is None or not np.isfinite(freq) or freq <= 0:
        return None, continuity

    low_position = position_in_scale(freq, low, buffer_hz)
    high_position = position_in_scale(freq, high, buffer_hz)

    if low_position is not None and high_position is not None:
        # Around the shared octave keep the register the singer was already in
        if continuity is None or continuity > continuity_split:
            position = low_position
        else:
            position = high_position
    elif low_position is not None:
        position = low_position
    else:
        position = high_position

    if position is None:
        return None, continuity
    return position, position


def render_position(position: Optional[float], is_listening: bool) -> Optional[float]:
    """Where to draw the indicator: at rest below Do while listening without a position."""
    if position is None and is_listening:
        return REST_POSITION
    return position


class ScalePositionMapper:
    """Stateful wrapper around locate_position that owns the continuity state."""

    EDGE_BUFFER_HZ: ClassVar[float] = EDGE_BUFFER_HZ
    CONTINUITY_SPLIT: ClassVar[float] = CONTINUITY_SPLIT

    def __init__(
        self,
        buffer_hz: Optional[float] = None,
        continuity_split: Optional[float] = None,
    ) -> None:
        self.buffer_hz = self.EDGE_BUFFER_HZ if buffer_hz is None else buffer_hz
        self.continuity_split = (
            self.CONTINUITY_SPLIT if continuity_split is None else continuity_split
        )
        self.continuity: Optional[float] = None

    def position_for(
        self, freq: Optional[float], low: ScaleDefinition, high: ScaleDefinition
    ) -> Optional[float]:
        """Map a frequency and remember the result for the next overlap decision."""
        position, self.continuity = locate_position(
            freq,
            low,
            high,
            self.continuity,
            buffer_hz=self.buffer_hz,
            continuity_split=self.continuity_split,
        )
        if position is not None:
            logger.debug(f"{freq:.2f}Hz -> position {position:.3f}")
        return position

    def reset(self) -> None:
        """Forget the last position."""
        self.continuity = None
