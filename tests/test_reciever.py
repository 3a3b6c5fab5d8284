import os
import tempfile
import unittest

import cv2
import numpy as np

import reciever
from utilities.decoding_functions import SessionDecoder, SessionSnapshot
from utilities.global_definitions import symbol_colors_bgr, white_bgr, black_bgr, red_bgr
from utilities.image_conversion_functions import rgb_to_nv21
from utilities.image_generation_functions import create_color_frame, message_to_frames


def frame(color):
    return create_color_frame(color, 4, 4)


class TestReceiveMessage(unittest.TestCase):
    def test_decodes_a_frame_sequence(self):
        decoder = SessionDecoder()
        decoder.start()
        frames = [frame(symbol_colors_bgr["110"]), None, frame(black_bgr), frame(symbol_colors_bgr["001"]), frame(white_bgr)]
        self.assertEqual(reciever.receive_message(frames, decoder, display=False), "110001")

    def test_frames_after_the_end_are_ignored(self):
        decoder = SessionDecoder()
        decoder.start()
        frames = message_to_frames("ok", height=4, width=4) + [frame(symbol_colors_bgr["111"])]
        last_message = reciever.receive_message(frames, decoder, display=False, stop_after_message=True)
        self.assertTrue(last_message.startswith("0110111101101011"))
        self.assertFalse(decoder.receiving)

    def test_unfinished_transmission_returns_none(self):
        decoder = SessionDecoder()
        decoder.start()
        frames = [frame(symbol_colors_bgr["010"])]
        self.assertIsNone(reciever.receive_message(frames, decoder, display=False))
        self.assertEqual(decoder.bits, "010")

    def test_draw_display_text_keeps_the_source_frame(self):
        source = np.zeros((120, 400, 3), dtype=np.uint8)
        display = reciever.draw_display_text(source, SessionSnapshot("line one\nline two", True))
        self.assertEqual(int(source.sum()), 0)
        self.assertGreater(int(display.sum()), 0)


class TestDirectoryFrames(unittest.TestCase):
    def setUp(self):
        self.directory = tempfile.TemporaryDirectory()
        self.path = self.directory.name

    def tearDown(self):
        self.directory.cleanup()

    def test_still_images_in_name_order(self):
        cv2.imwrite(os.path.join(self.path, "frame_0.png"), frame(symbol_colors_bgr["011"]))
        cv2.imwrite(os.path.join(self.path, "frame_1.png"), frame(white_bgr))
        with open(os.path.join(self.path, "notes.txt"), "w") as notes:
            notes.write("not a frame")

        decoder = SessionDecoder()
        decoder.start()
        last_message = reciever.receive_message(reciever.directory_frames(self.path), decoder, display=False)
        self.assertEqual(last_message, "011")

    def test_nv21_dumps(self):
        green_rgb = np.full((6, 8, 3), (0, 255, 0), dtype=np.uint8)
        white_rgb = np.full((6, 8, 3), (255, 255, 255), dtype=np.uint8)
        for index, rgb in enumerate([green_rgb, white_rgb]):
            with open(os.path.join(self.path, f"frame_{index}.nv21"), "wb") as dump:
                dump.write(rgb_to_nv21(rgb))
        # An empty dump is skipped as an invalid frame
        open(os.path.join(self.path, "frame_0a.nv21"), "wb").close()

        decoder = SessionDecoder()
        decoder.start()
        frames = reciever.directory_frames(self.path, width=8, height=6)
        self.assertEqual(reciever.receive_message(frames, decoder, display=False), "001")

    def test_mixed_directory_keeps_each_file_in_its_own_channel_order(self):
        cv2.imwrite(os.path.join(self.path, "frame_0.png"), frame(red_bgr))
        purple_rgb = np.full((6, 8, 3), (128, 0, 255), dtype=np.uint8)
        with open(os.path.join(self.path, "frame_1.nv21"), "wb") as dump:
            dump.write(rgb_to_nv21(purple_rgb))
        open(os.path.join(self.path, "frame_1a.nv21"), "wb").close()
        cv2.imwrite(os.path.join(self.path, "frame_2.png"), frame(white_bgr))

        self.assertTrue(reciever.directory_has_nv21_frames(self.path))

        decoder = SessionDecoder()
        decoder.start()
        frames = reciever.directory_frames(self.path, width=8, height=6)
        self.assertEqual(reciever.receive_message(frames, decoder, display=False), "000110")

    def test_still_image_directory_has_no_nv21_frames(self):
        cv2.imwrite(os.path.join(self.path, "frame_0.png"), frame(red_bgr))
        self.assertFalse(reciever.directory_has_nv21_frames(self.path))

    def test_main_decodes_a_directory_headless(self):
        for index, image in enumerate(message_to_frames("A", height=4, width=4)):
            cv2.imwrite(os.path.join(self.path, f"frame_{index:03d}.png"), image)
        reciever.main(["--frames", self.path, "--no-display"])

    def test_main_rejects_a_missing_directory(self):
        with self.assertRaises(SystemExit):
            reciever.main(["--frames", os.path.join(self.path, "missing"), "--no-display"])

    def test_main_needs_the_size_of_nv21_dumps(self):
        open(os.path.join(self.path, "frame_0.nv21"), "wb").close()
        with self.assertRaises(SystemExit):
            reciever.main(["--frames", self.path, "--no-display"])


if __name__ == "__main__":
    unittest.main()
