# --- Imports ---

import numpy as np

from utilities.global_definitions import (
    sender_output_height, sender_output_width,
    bits_per_symbol, symbol_colors_bgr,
    end_color_bgr, gap_color_bgr,
    frames_per_symbol as default_frames_per_symbol,
    gap_frames_per_symbol as default_gap_frames_per_symbol
)

# --- Functions ---

def create_color_frame(color, height = sender_output_height, width = sender_output_width):

    """
    Creates a solid color frame.

    Arguments:
        "color" (tuple): A tuple representing the BGR color.
        "height" (int): Frame height in pixels.
        "width" (int): Frame width in pixels.

    Returns:
        "frame" (np.ndarray): A NumPy array representing the solid color frame pixels.

    """

    return np.full((height, width, 3), color, dtype = np.uint8)

def message_to_bits(message):

    """
    Converts a message to a string of bits, 8 bits per character.

    """

    return "".join(format(ord(character), "08b") for character in message)

def bits_to_symbols(bits):

    """
    Splits a bit string into three bit symbols, padding the last symbol with zeros.

    Arguments:
        "bits" (str): A string of "0" and "1".

    Returns:
        list: The three bit codes in transmission order.

    """

    remainder = len(bits) % bits_per_symbol

    if remainder:
        bits += "0" * (bits_per_symbol - remainder)

    return [bits[index:index + bits_per_symbol] for index in range(0, len(bits), bits_per_symbol)]

def symbols_to_frames(symbols, frames_per_symbol = default_frames_per_symbol, gap_frames = default_gap_frames_per_symbol, height = sender_output_height, width = sender_output_width):

    """
    Renders the frames for a transmission: every symbol color followed by a gap, then the white end frame.

    Arguments:
        "symbols" (list): Three bit codes.
        "frames_per_symbol" (int): How many frames each symbol color is shown for.
        "gap_frames" (int): How many black frames follow each symbol.
        "height" (int): Frame height in pixels.
        "width" (int): Frame width in pixels.

    Returns:
        "frames" (list): BGR frames, the last one white.

    """

    frames = []

    gap_frame = create_color_frame(gap_color_bgr, height, width)

    for symbol in symbols: # For each symbol:

        symbol_frame = create_color_frame(symbol_colors_bgr[symbol], height, width)

        frames += [symbol_frame] * frames_per_symbol
        frames += [gap_frame] * gap_frames

    frames.append(create_color_frame(end_color_bgr, height, width)) # End of transmission

    return frames

def message_to_frames(message, frames_per_symbol = default_frames_per_symbol, gap_frames = default_gap_frames_per_symbol, height = sender_output_height, width = sender_output_width):

    """
    Converts a message string into the sequence of frames that transmits it.

    """

    symbols = bits_to_symbols(message_to_bits(message))

    return symbols_to_frames(symbols, frames_per_symbol, gap_frames, height, width)
