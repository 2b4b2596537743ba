"""Utility functions for working with musical notes and frequencies."""

import math
from typing import List, Optional

import numpy as np


# Standard reference: A4 = 440Hz = MIDI 69
A4_FREQUENCY = 440.0
A4_MIDI = 69

NOTE_NAMES: List[str] = [
    "C",
    "C#",
    "D",
    "Eb",
    "E",
    "F",
    "F#",
    "G",
    "G#",
    "A",
    "Bb",
    "B",
]

# Pitch classes whose acceptance window is narrowed to +/- NARROW_TOLERANCE
NARROW_PITCH_CLASSES = frozenset({1, 3, 8, 10})  # C#, Eb, G#, Bb
NARROW_TOLERANCE = 0.25


def midi_to_frequency(midi: float) -> float:
    """Frequency in Hz of a (possibly fractional) MIDI note number."""
    return A4_FREQUENCY * 2.0 ** ((midi - A4_MIDI) / 12.0)


def frequency_to_note_number(freq: float) -> float:
    """Fractional MIDI note number of a frequency (A4 = 69)."""
    return A4_MIDI + 12.0 * math.log2(freq / A4_FREQUENCY)


def pitch_class(note_number: int) -> int:
    return ((note_number % 12) + 12) % 12


def nearest_note_number(freq: float) -> Optional[int]:
    """Round a frequency to a MIDI note number, favouring diatonic neighbours.

    The four classes in NARROW_PITCH_CLASSES only claim frequencies within
    NARROW_TOLERANCE of their centre; anything further out goes to the
    neighbour on the same side.

    Returns:
        The note number, or None for non-positive or non-finite input
    """
    if freq is None or not np.isfinite(freq) or freq <= 0:
        return None

    note_number = frequency_to_note_number(freq)
    # Halves round up
    rounded = math.floor(note_number + 0.5)
    deviation = note_number - rounded

    if pitch_class(rounded) in NARROW_PITCH_CLASSES and abs(deviation) > NARROW_TOLERANCE:
        rounded = rounded + 1 if deviation > 0 else rounded - 1

    return rounded


def get_note_name(freq: float) -> str:
    """Convert frequency to a note label in Scientific Pitch Notation.

    Args:
        freq: Frequency in Hz

    Returns:
        Note name with octave (e.g., 'A4', 'Eb3', 'F#2'), or '' if freq is not positive

    Note:
        - Middle C is C4 (261.63 Hz)
        - Octave numbers change between B and C (e.g., B3 -> C4)
        - Borderline pitches around C#, Eb, G# and Bb resolve to the nearer
          natural note
    """
    rounded = nearest_note_number(freq)
    if rounded is None:
        return ""

    octave = math.floor(rounded / 12) - 1
    return f"{NOTE_NAMES[pitch_class(rounded)]}{octave}"
