import unittest

import numpy as np

from utilities.color_functions import classify_frame, INVALID_FRAME, END_OF_TRANSMISSION
from utilities.image_conversion_functions import nv21_to_rgb, yuv_planes_to_rgb, rgb_to_nv21

WIDTH = 8
HEIGHT = 6


def solid_rgb(color):
    return np.full((HEIGHT, WIDTH, 3), color, dtype=np.uint8)


def camera_planes(rgb_frame):
    """Splits an NV21 buffer the way a camera with chroma pixel stride 2 hands it over."""
    nv21 = rgb_to_nv21(rgb_frame)
    luma_size = WIDTH * HEIGHT
    y_plane, vu_plane = nv21[:luma_size], nv21[luma_size:]
    return y_plane, vu_plane[1:], vu_plane[:-1]


class TestNv21ToRgb(unittest.TestCase):
    def test_output_shape(self):
        rgb = nv21_to_rgb(rgb_to_nv21(solid_rgb((0, 255, 0))), WIDTH, HEIGHT)
        self.assertEqual(rgb.shape, (HEIGHT, WIDTH, 3))
        self.assertEqual(rgb.dtype, np.uint8)

    def test_solid_colors_survive_conversion(self):
        for rgb_color, code in [((255, 0, 255), "100"), ((0, 255, 0), "001")]:
            with self.subTest(code=code):
                rgb = nv21_to_rgb(rgb_to_nv21(solid_rgb(rgb_color)), WIDTH, HEIGHT)
                self.assertEqual(classify_frame(rgb, color_order="rgb").code, code)

    def test_white_survives_conversion(self):
        rgb = nv21_to_rgb(rgb_to_nv21(solid_rgb((255, 255, 255))), WIDTH, HEIGHT)
        self.assertEqual(classify_frame(rgb, color_order="rgb").kind, END_OF_TRANSMISSION)

    def test_accepts_numpy_buffers(self):
        buffer = np.frombuffer(rgb_to_nv21(solid_rgb((0, 255, 0))), dtype=np.uint8)
        self.assertEqual(nv21_to_rgb(buffer, WIDTH, HEIGHT).shape, (HEIGHT, WIDTH, 3))

    def test_empty_or_short_buffers_give_empty_frames(self):
        for buffer, width, height in [(b"", WIDTH, HEIGHT), (b"\x00" * 10, WIDTH, HEIGHT), (b"\x00" * 72, 0, HEIGHT)]:
            with self.subTest(size=len(buffer), width=width):
                frame = nv21_to_rgb(buffer, width, height)
                self.assertEqual(frame.size, 0)
                self.assertEqual(classify_frame(frame).kind, INVALID_FRAME)


class TestYuvPlanesToRgb(unittest.TestCase):
    def test_camera_planes_with_pixel_stride_two(self):
        y_plane, u_plane, v_plane = camera_planes(solid_rgb((0, 255, 0)))
        rgb = yuv_planes_to_rgb(y_plane, u_plane, v_plane, WIDTH, HEIGHT)
        self.assertEqual(classify_frame(rgb, color_order="rgb").code, "001")

    def test_planar_planes_with_pixel_stride_one(self):
        nv21 = rgb_to_nv21(solid_rgb((255, 0, 255)))
        luma_size = WIDTH * HEIGHT
        vu_plane = nv21[luma_size:]
        rgb = yuv_planes_to_rgb(nv21[:luma_size], vu_plane[1::2], vu_plane[0::2], WIDTH, HEIGHT, pixel_stride=1)
        self.assertEqual(classify_frame(rgb, color_order="rgb").code, "100")

    def test_any_empty_plane_gives_an_empty_frame(self):
        y_plane, u_plane, v_plane = camera_planes(solid_rgb((0, 255, 0)))
        for planes in [(b"", u_plane, v_plane), (y_plane, b"", v_plane), (y_plane, u_plane, b"")]:
            with self.subTest(sizes=[len(plane) for plane in planes]):
                frame = yuv_planes_to_rgb(*planes, WIDTH, HEIGHT)
                self.assertEqual(frame.size, 0)


if __name__ == "__main__":
    unittest.main()
