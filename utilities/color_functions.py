# --- Imports ---

import cv2
from collections import namedtuple

from utilities.global_definitions import (
    symbol_table as default_symbol_table,
    end_range as default_end_range,
    default_color_order,
    hsv_conversion_codes
)

# --- Verdict definitions ---

SYMBOL = "symbol"
END_OF_TRANSMISSION = "end_of_transmission"
NO_MATCH = "no_match"
INVALID_FRAME = "invalid_frame"

Verdict = namedtuple("Verdict", ["kind", "code"])

def symbol_verdict(code):
    return Verdict(SYMBOL, code)

end_of_transmission_verdict = Verdict(END_OF_TRANSMISSION, None)
no_match_verdict = Verdict(NO_MATCH, None)
invalid_frame_verdict = Verdict(INVALID_FRAME, None)

# --- Functions ---

def is_valid_frame(frame):

    """
    Checks that a frame is a populated three channel image.

    Arguments:
        "frame" (np.ndarray | None): The frame to check.

    Returns:
        bool: True if the frame can be converted to HSV, False otherwise.

    """

    if frame is None or frame.size == 0:
        return False

    return frame.ndim == 3 and frame.shape[2] == 3

def count_pixels_in_range(hsv_frame, color_range):

    """
    Counts the pixels of an HSV frame that fall inside a color range.

    Arguments:
        "hsv_frame" (np.ndarray): A NumPy array with the HSV frame pixels.
        "color_range" (ColorRange): The inclusive HSV bounds.

    Returns:
        int: The number of pixels inside the range.

    """

    mask = cv2.inRange(hsv_frame, color_range.lower, color_range.upper) # Binary mask, 255 where the pixel is inside the range

    return int(cv2.countNonZero(mask))

def classify_frame(frame, symbol_table = None, end_range = None, color_order = default_color_order):

    """
    Classifies a frame as one of the symbols, the end of transmission or no match.

    The end range is checked first and wins over any symbol. Symbols are then checked
    in table order and the first range with at least one pixel is returned.

    Arguments:
        "frame" (np.ndarray): A NumPy array representing the frame pixels.
        "symbol_table" (dict): Three bit code to ColorRange, in match order.
        "end_range" (ColorRange): The end of transmission (white) range.
        "color_order" (str): "bgr" or "rgb", the channel order of the frame.

    Returns:
        Verdict: The verdict for the frame.

    """

    if symbol_table is None:
        symbol_table = default_symbol_table

    if end_range is None:
        end_range = default_end_range

    if not is_valid_frame(frame): # Empty or malformed frames are skipped without converting
        return invalid_frame_verdict

    hsv_frame = cv2.cvtColor(frame, hsv_conversion_codes[color_order])

    if count_pixels_in_range(hsv_frame, end_range) > 0: # If any white pixel is present:
        return end_of_transmission_verdict

    for code, color_range in symbol_table.items(): # For each symbol in table order:

        if count_pixels_in_range(hsv_frame, color_range) > 0:
            return symbol_verdict(code)

    return no_match_verdict

def ranges_overlap(first_range, second_range):

    """
    Checks if two HSV ranges share at least one HSV value.

    Arguments:
        "first_range" (ColorRange)
        "second_range" (ColorRange)

    Returns:
        bool

    """

    for channel in range(3):

        if first_range.upper[channel] < second_range.lower[channel] or second_range.upper[channel] < first_range.lower[channel]:
            return False

    return True

def find_overlapping_ranges(symbol_table = None):

    """
    Lists every pair of symbols whose color ranges overlap. For an overlapping color the
    earlier symbol in the table is the one returned by classify_frame.

    Arguments:
        "symbol_table" (dict): Three bit code to ColorRange.

    Returns:
        list: (earlier_code, later_code) tuples in table order.

    """

    if symbol_table is None:
        symbol_table = default_symbol_table

    entries = list(symbol_table.items())
    overlapping_pairs = []

    for index, (first_code, first_range) in enumerate(entries):

        for second_code, second_range in entries[index + 1:]:

            if ranges_overlap(first_range, second_range):
                overlapping_pairs.append((first_code, second_code))

    return overlapping_pairs
