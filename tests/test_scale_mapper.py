import math
import unittest

import numpy as np

from scale_climber.scale_mapper import (
    REST_POSITION,
    ScalePositionMapper,
    locate_position,
    position_in_scale,
    render_position,
    semitone_distance,
    warp_fraction,
)
from scale_climber.scales import generate_scale_definitions


class TestWarpFraction(unittest.TestCase):
    def test_segment_boundaries(self):
        self.assertEqual(warp_fraction(0.0, 2), 0.0)
        self.assertAlmostEqual(warp_fraction(1.0, 2), 1.0)
        self.assertAlmostEqual(warp_fraction(0.375, 2), 0.45)
        self.assertAlmostEqual(warp_fraction(0.625, 2), 0.55)
        self.assertAlmostEqual(warp_fraction(0.5, 2), 0.5)

    def test_monotonic_non_decreasing(self):
        values = [warp_fraction(x, 2) for x in np.linspace(0.0, 1.0, 1001)]
        self.assertTrue(all(b >= a for a, b in zip(values, values[1:])))

    def test_continuous_at_boundaries(self):
        eps = 1e-9
        for boundary in (0.375, 0.625):
            self.assertAlmostEqual(
                warp_fraction(boundary - eps, 2),
                warp_fraction(boundary + eps, 2),
                places=6,
            )

    def test_lingers_near_scale_tones(self):
        # The outer segments are stretched, the middle one squeezed
        self.assertGreater(warp_fraction(0.25, 2), 0.25)
        self.assertLess(warp_fraction(0.75, 2), 0.75)

    def test_identity_for_other_gaps(self):
        for distance in (0, 1, 3):
            for x in (0.0, 0.2, 0.375, 0.5, 0.9, 1.0):
                self.assertEqual(warp_fraction(x, distance), x)


class TestPositionInScale(unittest.TestCase):
    def setUp(self):
        self.low, self.high = generate_scale_definitions("C", 3)

    def test_semitone_distance(self):
        self.assertEqual(semitone_distance(self.low[0].frequency, self.low[1].frequency), 2)
        self.assertEqual(semitone_distance(self.low[2].frequency, self.low[3].frequency), 1)
        self.assertEqual(semitone_distance(self.low[6].frequency, self.low[7].frequency), 1)

    def test_exact_tones_snap_to_integers(self):
        for scale in (self.low, self.high):
            for tone in scale:
                position = position_in_scale(tone.frequency, scale)
                self.assertEqual(position, float(tone.index))
                self.assertEqual(math.modf(position)[0], 0.0)

    def test_whole_step_midpoint(self):
        c3, d3 = self.low[0].frequency, self.low[1].frequency
        position = position_in_scale((c3 + d3) / 2, self.low)
        self.assertAlmostEqual(position, 0.5)

    def test_whole_step_is_warped(self):
        c3, d3 = self.low[0].frequency, self.low[1].frequency
        position = position_in_scale(c3 + 0.25 * (d3 - c3), self.low)
        self.assertAlmostEqual(position, 0.3)

    def test_half_step_is_linear(self):
        e3, f3 = self.low[2].frequency, self.low[3].frequency
        position = position_in_scale(e3 + 0.25 * (f3 - e3), self.low)
        self.assertAlmostEqual(position, 2.25)

    def test_clamps_within_buffer(self):
        self.assertEqual(position_in_scale(self.low.min_frequency - 10, self.low), 0.0)
        self.assertEqual(position_in_scale(self.high.max_frequency + 10, self.high), 7.0)

    def test_outside_buffer(self):
        self.assertIsNone(position_in_scale(self.low.min_frequency - 20, self.low))
        self.assertIsNone(position_in_scale(self.high.max_frequency + 20, self.high))


class TestLocatePosition(unittest.TestCase):
    # Valid in both registers: just above C4, the top of low and the bottom of high
    OVERLAP = 265.0

    def setUp(self):
        self.low, self.high = generate_scale_definitions("C", 3)

    def test_overlap_prefers_low_near_the_top(self):
        position, continuity = locate_position(self.OVERLAP, self.low, self.high, 7.0)
        self.assertEqual(position, 7.0)
        self.assertEqual(continuity, 7.0)

    def test_overlap_prefers_high_near_the_bottom(self):
        position, continuity = locate_position(self.OVERLAP, self.low, self.high, 0.0)
        self.assertLess(position, 1.0)
        self.assertEqual(continuity, position)

    def test_overlap_at_split_prefers_high(self):
        position, _ = locate_position(self.OVERLAP, self.low, self.high, 3.5)
        self.assertLess(position, 1.0)

    def test_overlap_without_history_prefers_low(self):
        position, _ = locate_position(self.OVERLAP, self.low, self.high, None)
        self.assertEqual(position, 7.0)

    def test_single_register(self):
        position, _ = locate_position(440.0, self.low, self.high, None)
        self.assertAlmostEqual(position, 5.0)
        position, _ = locate_position(self.low[3].frequency, self.low, self.high, 6.0)
        self.assertEqual(position, 3.0)

    def test_out_of_range_keeps_continuity(self):
        self.assertEqual(locate_position(50.0, self.low, self.high, 4.2), (None, 4.2))
        self.assertEqual(locate_position(2000.0, self.low, self.high, None), (None, None))

    def test_no_pitch_keeps_continuity(self):
        for freq in (None, 0.0, -1.0, float("nan")):
            self.assertEqual(locate_position(freq, self.low, self.high, 2.0), (None, 2.0))


class TestScalePositionMapper(unittest.TestCase):
    def setUp(self):
        self.low, self.high = generate_scale_definitions("C", 3)
        self.mapper = ScalePositionMapper()

    def test_continuity_follows_the_singer(self):
        self.assertEqual(self.mapper.position_for(265.0, self.low, self.high), 7.0)

        # G4..A4 only exists in the high register
        upper = self.mapper.position_for(400.0, self.low, self.high)
        self.assertTrue(4.0 < upper < 5.0)
        self.assertEqual(self.mapper.continuity, upper)
        self.assertEqual(self.mapper.position_for(265.0, self.low, self.high), 7.0)

        # E3..F3 only exists in the low register
        lower = self.mapper.position_for(165.0, self.low, self.high)
        self.assertTrue(2.0 < lower < 2.1)
        self.assertLess(self.mapper.position_for(265.0, self.low, self.high), 1.0)

    def test_no_pitch_does_not_overwrite_continuity(self):
        self.mapper.position_for(440.0, self.low, self.high)
        remembered = self.mapper.continuity
        self.assertIsNone(self.mapper.position_for(None, self.low, self.high))
        self.assertIsNone(self.mapper.position_for(5000.0, self.low, self.high))
        self.assertEqual(self.mapper.continuity, remembered)

    def test_reset(self):
        self.mapper.position_for(440.0, self.low, self.high)
        self.mapper.reset()
        self.assertIsNone(self.mapper.continuity)

    def test_custom_buffer(self):
        mapper = ScalePositionMapper(buffer_hz=1.0)
        self.assertIsNone(mapper.position_for(self.low.min_frequency - 5, self.low, self.high))


class TestRenderPosition(unittest.TestCase):
    def test_rest_while_listening(self):
        self.assertEqual(render_position(None, True), REST_POSITION)
        self.assertEqual(REST_POSITION, -0.5)

    def test_hidden_when_not_listening(self):
        self.assertIsNone(render_position(None, False))

    def test_passes_positions_through(self):
        self.assertEqual(render_position(3.2, True), 3.2)
        self.assertEqual(render_position(0.0, False), 0.0)

    def test_rest_is_not_remembered(self):
        low, high = generate_scale_definitions("C", 3)
        mapper = ScalePositionMapper()
        render_position(mapper.position_for(None, low, high), True)
        self.assertIsNone(mapper.continuity)


if __name__ == "__main__":
    unittest.main()
