# --- Imports ---

import argparse
import os
import time

import cv2

from webcam_simulation.webcamSimulator import VideoThreadedCapture, VideoCaptureSingle
from utilities.color_functions import find_overlapping_ranges
from utilities.decoding_functions import SessionDecoder, bits_to_message
from utilities.image_conversion_functions import nv21_to_rgb
from utilities.global_definitions import (
    symbol_table, symbol_color_names, default_color_order,
    laptop_webcam_pixel_height, laptop_webcam_pixel_width,
    receiver_window_name, receiver_window_width, receiver_window_height,
    start_key, quit_key,
    still_frame_extensions, nv21_frame_extension,
    display_text_font, display_text_size, display_text_thickness,
    display_text_line_height, display_text_origin,
    green_bgr, red_bgr
)

# --- Frame sources ---

def camera_frames(camera_index, distortion_preset = None):

    """
    Yields the latest frame of a live camera, skipping frames that were already analysed.

    Arguments:
        "camera_index" (int): OpenCV camera index.
        "distortion_preset" (str | None): Optional FrameDistorter preset.

    Returns:
        Generator of BGR frames.

    """

    capture = VideoThreadedCapture(camera_index, distortion_preset = distortion_preset)

    capture.cap.set(cv2.CAP_PROP_FRAME_WIDTH, laptop_webcam_pixel_width)
    capture.cap.set(cv2.CAP_PROP_FRAME_HEIGHT, laptop_webcam_pixel_height)

    last_frame_id = 0

    try:

        while capture.isOpened():

            read_was_sucessful, frame, frame_id = capture.read_new()

            if not read_was_sucessful or frame_id == last_frame_id: # Nothing new yet
                time.sleep(0.005)
                continue

            last_frame_id = frame_id

            yield frame

        print("\n[WARNING] Camera stopped delivering frames.")

    finally:
        capture.release()

def video_frames(video_path, distortion_preset = None):

    """
    Yields every frame of a video file in order.

    """

    capture = VideoCaptureSingle(video_path, distortion_preset = distortion_preset)

    try:

        while True:

            read_was_sucessful, frame = capture.read()

            if not read_was_sucessful:
                break

            yield frame

    finally:
        capture.release()

def directory_frames(frames_directory, width = None, height = None):

    """
    Yields the frames stored in a directory, in file name order, all in BGR order. Still images
    are read as BGR, raw ".nv21" dumps need the frame width and height and are converted
    to BGR so both kinds can share one directory.

    An unreadable file is yielded as None or an empty frame so the decoder reports it as an invalid frame.

    """

    for file_name in sorted(os.listdir(frames_directory)):

        file_path = os.path.join(frames_directory, file_name)
        extension = os.path.splitext(file_name)[1].lower()

        if extension == nv21_frame_extension:

            with open(file_path, "rb") as nv21_file:
                rgb_frame = nv21_to_rgb(nv21_file.read(), width, height)

            if rgb_frame.size == 0: # Empty or short dump, nothing to convert
                yield rgb_frame

            else:
                yield cv2.cvtColor(rgb_frame, cv2.COLOR_RGB2BGR)

        elif extension in still_frame_extensions:
            yield cv2.imread(file_path)

def directory_has_nv21_frames(frames_directory):

    """
    Returns True if the directory holds raw ".nv21" dumps.

    """

    for file_name in os.listdir(frames_directory):

        if file_name.lower().endswith(nv21_frame_extension):
            return True

    return False

# --- Display ---

def draw_display_text(frame, snapshot):

    """
    Draws the decoder text on a copy of the frame, one line per text line.

    """

    display = frame.copy()

    text_color = green_bgr if snapshot.receiving else red_bgr

    x, y = display_text_origin

    for line in snapshot.display_text.split("\n"):
        cv2.putText(display, line, (x, y), display_text_font, display_text_size, text_color, display_text_thickness)
        y += display_text_line_height

    return display

# --- Main function ---

def receive_message(frames, decoder, display = True, stop_after_message = False):

    """
    Feeds frames to the session decoder until the source ends or the user quits.

    Arguments:
        "frames" (iterable): The frames to analyse.
        "decoder" (SessionDecoder): The session decoder.
        "display" (bool): Show the frames with the decoder text, "s" starts a session, "q" quits.
        "stop_after_message" (bool): Return as soon as a transmission has ended.

    Returns:
        "last_message" (str | None): The binary data of the last completed transmission.

    """

    was_receiving = decoder.snapshot().receiving

    if display:
        cv2.namedWindow(receiver_window_name, cv2.WINDOW_NORMAL)
        cv2.resizeWindow(receiver_window_name, receiver_window_width, receiver_window_height)
        print(f"\n[INFO] Press {start_key} to start receiving, {quit_key} to quit.")

    try:

        for frame in frames:

            snapshot = decoder.process_frame(frame)

            if was_receiving and not snapshot.receiving: # If a transmission just ended:

                print(f"\n[INFO] {snapshot.display_text}")

                if stop_after_message:
                    break

            was_receiving = snapshot.receiving

            if display:

                if frame is not None and frame.size > 0:
                    cv2.imshow(receiver_window_name, draw_display_text(frame, snapshot))

                key = cv2.waitKey(1) & 0xFF

                if key == ord(start_key):
                    was_receiving = decoder.start().receiving

                elif key == ord(quit_key):
                    break

    finally:

        if display:
            cv2.destroyAllWindows()

    if decoder.receiving:
        print(f"\n[WARNING] Source ended during a transmission, bits not yet terminated: {decoder.bits}")

    return decoder.last_message

def main(argv = None):

    parser = argparse.ArgumentParser(description = "Decodes a message sent as solid LED colors, 3 bits per color, ending with white")

    source = parser.add_mutually_exclusive_group()
    source.add_argument("--camera", type = int, default = 0, help = "Camera index (default 0)")
    source.add_argument("--video", help = "Decode a video file instead of a camera")
    source.add_argument("--frames", help = "Decode a directory of still images or .nv21 dumps")

    parser.add_argument("--width", type = int, help = "Frame width of .nv21 dumps")
    parser.add_argument("--height", type = int, help = "Frame height of .nv21 dumps")
    parser.add_argument("--color-order", choices = ["bgr", "rgb"], default = default_color_order, help = "Channel order of camera and video frames")
    parser.add_argument("--distortion", help = "Frame distorter preset for camera and video frames")
    parser.add_argument("--auto-start", action = "store_true", help = "Start receiving immediately")
    parser.add_argument("--no-display", action = "store_true", help = "Run without a window, implies --auto-start")
    args = parser.parse_args(argv)

    color_order = args.color_order

    if args.frames:

        if not os.path.isdir(args.frames):
            raise SystemExit(f"Frames directory not found: {args.frames}")

        color_order = default_color_order # directory_frames yields BGR frames only

        if directory_has_nv21_frames(args.frames) and (not args.width or not args.height):
            raise SystemExit("--width and --height are required for .nv21 frames")

        frames = directory_frames(args.frames, args.width, args.height)

    elif args.video:
        frames = video_frames(args.video, args.distortion)

    else:
        frames = camera_frames(args.camera, args.distortion)

    for earlier_code, later_code in find_overlapping_ranges(symbol_table):
        print(f"[WARNING] Color ranges of {earlier_code} ({symbol_color_names[earlier_code]}) and {later_code} ({symbol_color_names[later_code]}) overlap, {earlier_code} wins")

    decoder = SessionDecoder(color_order = color_order, verbose = True)

    display = not args.no_display

    if args.auto_start or not display:
        decoder.start()

    print("\n[INFO] Receiver started")

    last_message = receive_message(frames, decoder, display = display, stop_after_message = not display)

    if last_message is not None:

        print(f"\n[INFO] Final binary data: {last_message}")
        print(f"[INFO] Final message: {bits_to_message(last_message)}")

    else:
        print("\n[INFO] No transmission completed.")

# --- Execution ---

if __name__ == "__main__":
    main()
