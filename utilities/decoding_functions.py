# --- Imports ---

import threading
from collections import namedtuple

from utilities.color_functions import classify_frame, SYMBOL, END_OF_TRANSMISSION
from utilities.global_definitions import (
    symbol_table as default_symbol_table,
    end_range as default_end_range,
    default_color_order,
    waiting_display_text, receiving_display_text,
    complete_display_text, complete_message_display_text
)

# --- Definitions ---

debug_decoder = False

SessionSnapshot = namedtuple("SessionSnapshot", ["display_text", "receiving"])

# --- Functions ---

def bits_to_message(bits):

    """
    Converts a string of bits into a readable message.

    Arguments:
        "bits" (str): A string representing the bits to be converted.

    Returns:
        str: A string representing the decoded message.

    """

    characters = []

    for bit_index in range(0, len(bits), 8): # For each byte (8 bits) in the bit string:

        byte = bits[bit_index:bit_index + 8] # Extract the byte using slicing

        if len(byte) < 8: # If the length of the byte is less than 8 bits:
            continue # Skip it

        characters.append(chr(int(byte, 2))) # Convert the byte to a character and append it to the list

    return "".join(characters) # Return the decoded message by joining the list of characters into a string

# --- Main class ---

class SessionDecoder:

    """
    Turns per-frame verdicts into a message.

    Idle until start() is called, then every symbol verdict appends its three bits until
    an end of transmission verdict stores the message and returns to idle. Verdicts
    received while idle are dropped. start(), on_verdict() and snapshot() share one lock
    so a user start can't interleave with a frame callback.

    """

    def __init__(self, symbol_table = None, end_range = None, color_order = default_color_order, verbose = False):

        """

        Arguments:
            "symbol_table" (dict): Passed on to classify_frame.
            "end_range" (ColorRange): Passed on to classify_frame.
            "color_order" (str): Channel order of the frames given to process_frame.
            "verbose" (bool): Print session start and end lines.

        """

        self.symbol_table = symbol_table if symbol_table is not None else default_symbol_table
        self.end_range = end_range if end_range is not None else default_end_range
        self.color_order = color_order
        self.verbose = verbose

        self.accumulated_bits = []
        self.receiving = False
        self.last_message = None

        self.lock = threading.Lock()

    @property
    def bits(self):
        with self.lock:
            return "".join(self.accumulated_bits)

    def start(self):

        """
        Starts a new session. Does nothing if a session is already running.

        Returns:
            SessionSnapshot

        """

        with self.lock:

            if not self.receiving:

                self.accumulated_bits = []
                self.receiving = True

                if self.verbose:
                    print("\n[INFO] Receiving started")

            return self._snapshot()

    def on_verdict(self, verdict):

        """
        Applies one verdict to the session.

        Arguments:
            "verdict" (Verdict): The classification of one frame.

        Returns:
            SessionSnapshot

        """

        with self.lock:

            if not self.receiving: # Verdicts before start or after the end are dropped
                return self._snapshot()

            if verdict.kind == SYMBOL:

                self.accumulated_bits.append(verdict.code)

                if debug_decoder:
                    print(f"[DEBUG] Symbol {verdict.code}, {len(self.accumulated_bits)} symbols so far")

            elif verdict.kind == END_OF_TRANSMISSION:

                self.last_message = "".join(self.accumulated_bits)
                self.accumulated_bits = []
                self.receiving = False

                if self.verbose:
                    print(f"\n[INFO] Transmission ended, binary data: {self.last_message}")

            # No match and invalid frames contribute nothing

            return self._snapshot()

    def process_frame(self, frame):

        """
        Classifies a frame and applies the verdict. Frames are not classified while idle.

        Arguments:
            "frame" (np.ndarray): A NumPy array representing the frame pixels.

        Returns:
            SessionSnapshot

        """

        if not self.receiving:
            return self.snapshot()

        verdict = classify_frame(frame, self.symbol_table, self.end_range, self.color_order)

        return self.on_verdict(verdict)

    def snapshot(self):

        """
        Returns the text to display and whether a session is running.

        """

        with self.lock:
            return self._snapshot()

    def _snapshot(self):

        if self.receiving:

            bits = "".join(self.accumulated_bits)
            display_text = receiving_display_text.format(bit_count = len(bits), bits = bits)

        elif self.last_message is not None:

            display_text = complete_display_text.format(bits = self.last_message)

            decoded_text = bits_to_message(self.last_message)

            if decoded_text and decoded_text.isprintable():
                display_text += complete_message_display_text.format(message = decoded_text)

        else:
            display_text = waiting_display_text

        return SessionSnapshot(display_text, self.receiving)
