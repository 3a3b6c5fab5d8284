# --- Imports ---

import argparse
import cv2

from utilities.image_generation_functions import message_to_frames, message_to_bits, bits_to_symbols
from utilities.global_definitions import (
    message as default_message,
    symbol_duration as default_symbol_duration,
    frames_per_symbol as default_frames_per_symbol,
    gap_frames_per_symbol as default_gap_frames_per_symbol,
    sender_fps, sender_output_height, sender_output_width,
    symbol_color_names, quit_key
)

# --- Functions ---

def frames_per_symbol_for(symbol_duration, fps):

    """
    Returns how many frames a symbol lasts at the given frame rate, at least one.

    """

    return max(1, int(round(symbol_duration * fps)))

def show_message(message, symbol_duration = default_symbol_duration, fps = sender_fps, loop = True):

    """
    Displays the message on the screen using OpenCV.

    Each symbol stays up for "symbol_duration", so a live receiver sees it in several
    consecutive frames and repeats its bits once per frame (there is no timing sync).

    Arguments:
        "message" (str): The message string to display.
        "symbol_duration" (float): Seconds each symbol color is shown.
        "fps" (int): Display rate in frames per second.
        "loop" (bool): Restart the transmission after the white end frame.

    Returns:
        None

    """

    frames_per_symbol = frames_per_symbol_for(symbol_duration, fps)
    frames = message_to_frames(message, frames_per_symbol = frames_per_symbol, gap_frames = frames_per_symbol)

    window_name = "SENDER"
    cv2.namedWindow(window_name, cv2.WINDOW_NORMAL)
    cv2.setWindowProperty(window_name, cv2.WND_PROP_FULLSCREEN, cv2.WINDOW_FULLSCREEN)

    print(f"\n[INFO] Position the receiver so the webcam sees this display. Press {quit_key} to quit.")

    frame_index = 0

    while True:

        cv2.imshow(window_name, frames[frame_index])

        key = cv2.waitKey(int(1000 / fps)) & 0xFF

        frame_index += 1

        if frame_index >= len(frames): # If the end frame has been shown:

            if not loop:
                break

            frame_index = 0

        if key == ord(quit_key):
            break

    cv2.destroyAllWindows()

def write_message_video(message, video_path, frames_per_symbol = default_frames_per_symbol, gap_frames = default_gap_frames_per_symbol, fps = sender_fps, height = sender_output_height, width = sender_output_width):

    """
    Writes the transmission of a message to a video file for offline decoding.

    The receiver adds three bits for every frame it classifies, so by default each symbol
    is written as a single frame followed by a black gap frame and the video decodes back
    to exactly the sent bits.

    Arguments:
        "message" (str): The message string to encode.
        "video_path" (str): Output path, ".mp4" or ".avi".
        "frames_per_symbol" (int): How many frames each symbol color is written for.
        "gap_frames" (int): How many black frames follow each symbol.
        "fps" (int): Video frame rate.
        "height" (int): Frame height in pixels.
        "width" (int): Frame width in pixels.

    Returns:
        int: The number of frames written.

    """

    frames = message_to_frames(message, frames_per_symbol, gap_frames, height, width)

    fourcc = cv2.VideoWriter_fourcc(*"mp4v")
    writer = cv2.VideoWriter(video_path, fourcc, fps, (width, height))

    if not writer.isOpened():
        raise ValueError(f"Could not open video writer: {video_path}")

    try:
        for frame in frames:
            writer.write(frame)

    finally:
        writer.release()

    print(f"\n[INFO] Wrote {len(frames)} frames to {video_path}")

    return len(frames)

def main(argv = None):

    parser = argparse.ArgumentParser(description = "Transmits a message as a sequence of solid colors ending with white")
    parser.add_argument("--message", default = default_message, help = "Message to transmit")
    parser.add_argument("--video", help = "Write the transmission to this video file instead of showing it")
    parser.add_argument("--symbol-duration", type = float, default = default_symbol_duration, help = "Seconds per symbol on screen")
    parser.add_argument("--frames-per-symbol", type = int, default = default_frames_per_symbol, help = "Video frames per symbol")
    parser.add_argument("--fps", type = int, default = sender_fps, help = "Frames per second")
    parser.add_argument("--once", action = "store_true", help = "Show the transmission once instead of looping")
    args = parser.parse_args(argv)

    symbols = bits_to_symbols(message_to_bits(args.message))

    print(f"\n[INFO] Message: {args.message}")
    print(f"[INFO] Symbols: {' '.join(symbols)}")
    print(f"[INFO] Colors: {' '.join(symbol_color_names[symbol] for symbol in symbols)}")

    if args.video:
        write_message_video(args.message, args.video, args.frames_per_symbol, fps = args.fps)

    else:
        show_message(args.message, args.symbol_duration, args.fps, loop = not args.once)

# --- Execution ---

if __name__ == "__main__":
    main()
