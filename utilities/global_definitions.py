# --- Imports ---

import cv2
from collections import namedtuple

# --- Types ---

ColorRange = namedtuple("ColorRange", ["lower", "upper"]) # Closed HSV interval, lower and upper are (h, s, v) triples

# --- BGR definitions ---

red_bgr = (0, 0, 255)
green_bgr = (0, 255, 0)
blue_bgr = (255, 0, 0)
cyan_bgr = (255, 255, 128) # Desaturated, the cyan range stops at saturation 150
magenta_bgr = (255, 0, 255)
yellow_bgr = (0, 255, 255)
purple_bgr = (255, 0, 128)
orange_bgr = (0, 128, 255)
black_bgr = (0, 0, 0)
white_bgr = (255, 255, 255)
gray_bgr = (128, 128, 128)

# --- HSV definitions ---

# OpenCV 8-bit convention for every range below, end range included:
# hue 0-179 (degrees / 2), saturation 0-255, value 0-255

hsv_hue_max = 179
hsv_saturation_max = 255
hsv_value_max = 255

red_hsv_range = ColorRange((0, 120, 70), (10, 255, 255))
green_hsv_range = ColorRange((35, 100, 100), (85, 255, 255))
blue_hsv_range = ColorRange((100, 150, 50), (120, 255, 255))
cyan_hsv_range = ColorRange((80, 50, 180), (95, 150, 255))
magenta_hsv_range = ColorRange((140, 100, 100), (160, 255, 255))
yellow_hsv_range = ColorRange((20, 100, 100), (30, 255, 255))
purple_hsv_range = ColorRange((128, 100, 50), (148, 255, 255))
orange_hsv_range = ColorRange((10, 100, 100), (20, 255, 255))

white_hsv_range = ColorRange((0, 0, 200), (hsv_hue_max, 50, 255))

# --- Symbol definitions ---

bits_per_symbol = 3

# Iteration order is the match order, the first matching range wins
symbol_table = {
    "000": red_hsv_range,
    "001": green_hsv_range,
    "010": blue_hsv_range,
    "011": cyan_hsv_range,
    "100": magenta_hsv_range,
    "101": yellow_hsv_range,
    "110": purple_hsv_range,
    "111": orange_hsv_range,
}

end_range = white_hsv_range

symbol_colors_bgr = {
    "000": red_bgr,
    "001": green_bgr,
    "010": blue_bgr,
    "011": cyan_bgr,
    "100": magenta_bgr,
    "101": yellow_bgr,
    "110": purple_bgr,
    "111": orange_bgr,
}

symbol_color_names = {
    "000": "red",
    "001": "green",
    "010": "blue",
    "011": "cyan",
    "100": "magenta",
    "101": "yellow",
    "110": "purple",
    "111": "orange",
}

end_color_bgr = white_bgr
gap_color_bgr = black_bgr # Shown between symbols, matches no range

# --- Frame definitions ---

default_color_order = "bgr" # cv2.VideoCapture delivers BGR, the NV21 converter delivers RGB

hsv_conversion_codes = {
    "bgr": cv2.COLOR_BGR2HSV,
    "rgb": cv2.COLOR_RGB2HSV,
}

# --- Display text definitions ---

waiting_display_text = "Waiting for transmission..."
receiving_display_text = "Receiving Binary Data... {bit_count} bits received\nBinary Data: {bits}"
complete_display_text = "Transmission Ended\nBinary Data: {bits}"
complete_message_display_text = "\nMessage: {message}"

# --- Sender output definitions ---

sender_output_width = 1920 # Width of the sender output in pixels
sender_output_height = 1200 # Height of the sender output in pixels

symbol_duration = 0.3 # Duration for each symbol in seconds
sender_fps = 30

frames_per_symbol = 1
gap_frames_per_symbol = 1

message = "Hello LED"

# --- Reciever input definitions ---

laptop_webcam_pixel_height = 1440
laptop_webcam_pixel_width = 2560

receiver_window_name = "LED Receiver"
receiver_window_width = 854
receiver_window_height = 480

start_key = "s"
quit_key = "q"

still_frame_extensions = (".png", ".jpg", ".jpeg", ".bmp")
nv21_frame_extension = ".nv21"

# --- Display definitions ---

display_text_font = cv2.FONT_HERSHEY_SIMPLEX
display_text_size = 1.0
display_text_thickness = 2
display_text_line_height = 40
display_text_origin = (20, 40)
