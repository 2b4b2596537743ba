"""Type definitions for the Scale Climber project."""

from typing import List, Optional, Tuple
from dataclasses import dataclass, field

import numpy as np


@dataclass
class AudioFrame:
    """A fixed-size block of time-domain samples captured from an input."""

    samples: np.ndarray  # Mono samples, normalized to [-1, 1]
    sample_rate: int  # Hz

    def __len__(self) -> int:
        return len(self.samples)


@dataclass(frozen=True)
class ScaleTone:
    """One step of a scale definition."""

    index: int  # Scale index 0..7 (Do .. high Do)
    frequency: float  # Hz


@dataclass(frozen=True)
class ScaleDefinition:
    """Eight ascending tones spanning one octave of a major scale."""

    tones: Tuple[ScaleTone, ...]

    def __post_init__(self):
        if len(self.tones) != 8:
            raise ValueError(
                f"A scale definition needs exactly 8 tones, got {len(self.tones)}"
            )

    def __iter__(self):
        return iter(self.tones)

    def __len__(self) -> int:
        return len(self.tones)

    def __getitem__(self, item: int) -> ScaleTone:
        return self.tones[item]

    @property
    def min_frequency(self) -> float:
        return self.tones[0].frequency

    @property
    def max_frequency(self) -> float:
        return self.tones[-1].frequency

    @property
    def frequencies(self) -> List[float]:
        return [tone.frequency for tone in self.tones]


@dataclass(frozen=True)
class ScaleLevel:
    """A block of the tower as shown to the singer."""

    solfege: str  # e.g. 'Do'
    color: Tuple[int, int, int]  # RGB fill
    text_color: Tuple[int, int, int]  # RGB label
    play_frequencies: Tuple[float, ...]  # Played together when the block is clicked


@dataclass(frozen=True)
class ScaleData:
    """Everything derived from a chosen key: display levels and both registers."""

    root_key: str
    base_octave: int
    levels: Tuple[ScaleLevel, ...]
    low: ScaleDefinition
    high: ScaleDefinition


@dataclass
class PollResult:
    """Outcome of one polling cycle of a session."""

    frequency: Optional[float]  # Current frequency in Hz, None when no pitch
    position: Optional[float]  # Scale position in [0, 7], None when unmapped
    render_position: Optional[float]  # Position to draw, -0.5 when resting
    label: str  # Note label such as 'C4', '' when silent
    timestamp: float = field(default=0.0)
