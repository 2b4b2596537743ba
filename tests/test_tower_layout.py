import unittest

from scale_climber.tower_layout import block_at, block_rect, indicator_center_fraction


class TestTowerLayout(unittest.TestCase):
    def test_indicator_positions(self):
        self.assertAlmostEqual(indicator_center_fraction(-0.5), 0.0)
        self.assertAlmostEqual(indicator_center_fraction(0.0), 1 / 16)
        self.assertAlmostEqual(indicator_center_fraction(7.0), 15 / 16)

    def test_indicator_hidden(self):
        self.assertIsNone(indicator_center_fraction(None))
        self.assertIsNone(indicator_center_fraction(-1.5))
        self.assertIsNone(indicator_center_fraction(8.5))

    def test_block_rects_stack_bottom_up(self):
        self.assertEqual(block_rect(0, 10, 0, 100, 400), (10, 350, 100, 50))
        self.assertEqual(block_rect(7, 10, 0, 100, 400), (10, 0, 100, 50))

    def test_block_at(self):
        self.assertEqual(block_at(399, 0, 400), 0)
        self.assertEqual(block_at(0, 0, 400), 7)
        self.assertEqual(block_at(175, 0, 400), 4)
        self.assertIsNone(block_at(400, 0, 400))
        self.assertIsNone(block_at(-1, 0, 400))


if __name__ == "__main__":
    unittest.main()
