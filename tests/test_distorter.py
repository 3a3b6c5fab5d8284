import unittest

import numpy as np

from utilities.global_definitions import symbol_colors_bgr
from utilities.image_generation_functions import create_color_frame
from webcam_simulation.distorter import FrameDistorter, PRESETS


class TestFrameDistorter(unittest.TestCase):
    def setUp(self):
        self.frame = create_color_frame(symbol_colors_bgr["001"], 16, 16)

    def test_none_preset_returns_the_frame_unchanged(self):
        distorter = FrameDistorter("none")
        self.assertIs(distorter.apply(self.frame), self.frame)

    def test_presets_keep_shape_and_dtype(self):
        for preset in PRESETS:
            with self.subTest(preset=preset):
                distorted = FrameDistorter(preset, seed=1).apply(self.frame)
                self.assertEqual(distorted.shape, self.frame.shape)
                self.assertEqual(distorted.dtype, np.uint8)

    def test_distortion_changes_pixels(self):
        distorted = FrameDistorter("medium", seed=3).apply(self.frame)
        self.assertFalse(np.array_equal(distorted, self.frame))

    def test_same_seed_gives_same_frames(self):
        first = FrameDistorter("light", seed=7).apply(self.frame)
        second = FrameDistorter("light", seed=7).apply(self.frame)
        np.testing.assert_array_equal(first, second)

    def test_effects_are_ordered_by_priority(self):
        distorter = FrameDistorter("webcam_realistic", seed=0)
        names = [effect.__name__ for effect in distorter.effects]
        self.assertEqual(names, ["noise", "jitter_color", "white_balance_shift", "blur", "temporal_instability"])

    def test_unknown_preset(self):
        with self.assertRaises(ValueError):
            FrameDistorter("fisheye")


if __name__ == "__main__":
    unittest.main()
