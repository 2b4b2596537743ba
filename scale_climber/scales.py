"""Scale data for the tower: the two registers and the eight display levels."""

from typing import Dict, List, Tuple

from .note_types import ScaleData, ScaleDefinition, ScaleLevel, ScaleTone
from .note_utils import midi_to_frequency

# Keys offered by the UI
KEYS: List[str] = ["C", "D", "E", "F", "G", "A", "B"]

# Root offsets from C
KEY_OFFSETS: Dict[str, int] = {
    "C": 0,
    "C#": 1,
    "Db": 1,
    "D": 2,
    "D#": 3,
    "Eb": 3,
    "E": 4,
    "F": 5,
    "F#": 6,
    "Gb": 6,
    "G": 7,
    "G#": 8,
    "Ab": 8,
    "A": 9,
    "A#": 10,
    "Bb": 10,
    "B": 11,
}

# Semitone intervals for the major scale, Do to high Do
MAJOR_SCALE_INTERVALS: Tuple[int, ...] = (0, 2, 4, 5, 7, 9, 11, 12)

DEFAULT_BASE_OCTAVE = 3  # Low register starts at C3 (MIDI 48) for the key of C

WHITE = (255, 255, 255)
BLACK = (0, 0, 0)

# (solfege, fill, text) for each block from the bottom up
LEVEL_TEMPLATES: Tuple[Tuple[str, Tuple[int, int, int], Tuple[int, int, int]], ...] = (
    ("Do", (239, 68, 68), WHITE),
    ("Re", (249, 115, 22), WHITE),
    ("Mi", (250, 204, 21), BLACK),
    ("Fa", (34, 197, 94), WHITE),
    ("So", (6, 182, 212), WHITE),
    ("La", (99, 102, 241), WHITE),
    ("Ti", (168, 85, 247), WHITE),
    ("Do", (220, 38, 38), WHITE),
)


def root_midi(root_key: str, base_octave: int = DEFAULT_BASE_OCTAVE) -> int:
    """MIDI note number of Do in the low register.

    Raises:
        ValueError: If root_key is not a known key name
    """
    if root_key not in KEY_OFFSETS:
        raise ValueError(
            f"Unknown key '{root_key}'. Expected one of: {', '.join(KEY_OFFSETS)}"
        )
    return 12 * (base_octave + 1) + KEY_OFFSETS[root_key]


def scale_definition(root: int) -> ScaleDefinition:
    """Build the eight tones of a major scale starting at MIDI note ``root``."""
    return ScaleDefinition(
        tuple(
            ScaleTone(index=index, frequency=midi_to_frequency(root + interval))
            for index, interval in enumerate(MAJOR_SCALE_INTERVALS)
        )
    )


def generate_scale_definitions(
    root_key: str = "C", base_octave: int = DEFAULT_BASE_OCTAVE
) -> Tuple[ScaleDefinition, ScaleDefinition]:
    """Return the (low, high) definitions, the high one an octave above the low."""
    root = root_midi(root_key, base_octave)
    return scale_definition(root), scale_definition(root + 12)


def generate_scale_data(
    root_key: str = "C", base_octave: int = DEFAULT_BASE_OCTAVE
) -> ScaleData:
    """Generate the registers and the tower levels for a key.

    Each level plays its tone in both registers at once, so Do plays the root
    together with the root an octave up.
    """
    root = root_midi(root_key, base_octave)
    low, high = generate_scale_definitions(root_key, base_octave)

    levels = tuple(
        ScaleLevel(
            solfege=solfege,
            color=color,
            text_color=text_color,
            play_frequencies=(
                midi_to_frequency(root + interval),
                midi_to_frequency(root + interval + 12),
            ),
        )
        for (solfege, color, text_color), interval in zip(
            LEVEL_TEMPLATES, MAJOR_SCALE_INTERVALS
        )
    )

    return ScaleData(
        root_key=root_key,
        base_octave=base_octave,
        levels=levels,
        low=low,
        high=high,
    )
