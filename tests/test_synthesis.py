import unittest

import numpy as np

from scale_climber.audio.synthesis import (
    CHORD_GAIN,
    ENVELOPE_FLOOR,
    SINGLE_TONE_GAIN,
    synthesize_tone,
)
from scale_climber.pitch_detector import estimate_pitch


class TestSynthesizeTone(unittest.TestCase):
    def test_length_and_dtype(self):
        samples = synthesize_tone(440.0, duration=0.5, sample_rate=8000)
        self.assertEqual(len(samples), 4000)
        self.assertEqual(samples.dtype, np.float32)

    def test_single_tone_gain(self):
        samples = synthesize_tone(440.0)
        self.assertLessEqual(np.max(np.abs(samples)), SINGLE_TONE_GAIN + 1e-6)
        self.assertGreater(np.max(np.abs(samples)), 0.9 * SINGLE_TONE_GAIN)

    def test_chord_gain(self):
        samples = synthesize_tone([220.0, 440.0])
        self.assertLessEqual(np.max(np.abs(samples)), 2 * CHORD_GAIN + 1e-6)

    def test_envelope_decays(self):
        samples = synthesize_tone(440.0, duration=0.5)
        tail = np.max(np.abs(samples[-200:]))
        self.assertLess(tail, 2 * ENVELOPE_FLOOR)

    def test_pitch_is_recognisable(self):
        samples = synthesize_tone(330.0, duration=0.5)
        estimate = estimate_pitch(samples[:2048], 44100)
        self.assertAlmostEqual(estimate, 330.0, delta=3.3)

    def test_empty(self):
        self.assertEqual(len(synthesize_tone(440.0, duration=0.0)), 0)
        self.assertEqual(len(synthesize_tone([], duration=0.5)), 0)


if __name__ == "__main__":
    unittest.main()
