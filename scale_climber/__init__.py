"""Scale Climber: real-time pitch tracking on a major-scale tower for ear training."""

from .note_types import AudioFrame, PollResult, ScaleData, ScaleDefinition, ScaleTone
from .note_utils import get_note_name
from .pitch_detector import NO_PITCH, PitchDetector, estimate_pitch
from .scale_mapper import ScalePositionMapper, locate_position, warp_fraction
from .scales import generate_scale_data, generate_scale_definitions

__version__ = "0.1.0"

__all__ = [
    "AudioFrame",
    "PollResult",
    "ScaleData",
    "ScaleDefinition",
    "ScaleTone",
    "get_note_name",
    "NO_PITCH",
    "PitchDetector",
    "estimate_pitch",
    "ScalePositionMapper",
    "locate_position",
    "warp_fraction",
    "generate_scale_data",
    "generate_scale_definitions",
]
