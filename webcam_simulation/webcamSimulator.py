# --- Imports ---

import cv2
import threading
import time

from webcam_simulation.distorter import FrameDistorter

# --- Definitions ---

default_fps = 30

debug_frames = False

# --- Helper functions ---

def open_capture(source):

    """
    Opens a cv2.VideoCapture on a camera index or a video path.

    Arguments:
        "source" (int | str): Camera index or video file path.

    Returns:
        cv2.VideoCapture

    """

    capture = cv2.VideoCapture(source)

    if not capture.isOpened():
        raise ValueError(f"Could not open video: {source}")

    return capture

# --- Main classes ---

class VideoThreadedCapture:

    """
    Threaded frame producer that keeps only the latest frame:

    - A background thread reads frames into a double buffer
    - read() returns a copy of the most recent complete frame
    - Frames the consumer was too slow for are dropped
    - Video files are paced to their FPS, cameras pace themselves

    """

    def __init__(self, source, loop = False, distortion_preset = None):

        """

        Arguments:
            "source" (int | str): Camera index or video file path.
            "loop" (bool): Restart a video file when it ends.
            "distortion_preset" (str | None): FrameDistorter preset applied to every frame.

        Returns:
            None

        """

        self.cap = open_capture(source)

        self.is_camera = isinstance(source, int)
        self.loop = loop
        self.distorter = FrameDistorter(distortion_preset) if distortion_preset else None

        self.buffer_a = None
        self.buffer_b = None

        self.read_buffer = 0
        self.write_buffer = 1

        self.swap_lock = threading.Lock()

        self.frame_id = 0 # Increases with every stored frame
        self.stopped = False

        fps = self.cap.get(cv2.CAP_PROP_FPS)

        if not fps or fps < 2:
            fps = default_fps

        self.frame_delay = 1.0 / fps

        self.thread = threading.Thread(target = self._update, daemon = True)
        self.thread.start()

    def _update(self):

        """
        Background frame reader.

        """

        next_frame_time = time.time()
        last_debug_time = time.time()

        while not self.stopped:

            if not self.is_camera:

                delay = next_frame_time - time.time()

                if delay > 0:
                    time.sleep(delay)

                next_frame_time += self.frame_delay

            ret, frame = self.cap.read()

            if not ret:

                if self.loop and not self.is_camera:
                    self.cap.set(cv2.CAP_PROP_POS_FRAMES, 0)
                    continue

                break

            if self.distorter is not None:
                frame = self.distorter.apply(frame)

            if self.write_buffer == 0:
                self.buffer_a = frame

            else:
                self.buffer_b = frame

            with self.swap_lock:
                self.read_buffer, self.write_buffer = self.write_buffer, self.read_buffer
                self.frame_id += 1

            if debug_frames and time.time() - last_debug_time > 0.5:
                print(f"[DEBUG] Capture thread stored frame {self.frame_id}")
                last_debug_time = time.time()

        self.stopped = True

    def read(self):

        """
        Thread-safe frame grab.

        Returns:
            True/False
            "frame" (np.ndarray | None): A copy of the latest frame.

        """

        with self.swap_lock:

            if self.frame_id == 0:
                return False, None

            frame = self.buffer_a if self.read_buffer == 0 else self.buffer_b

            return True, frame.copy()

    def read_new(self):

        """
        Like read(), but also returns the id of the frame so callers can skip frames they already analysed.

        """

        with self.swap_lock:

            if self.frame_id == 0:
                return False, None, 0

            frame = self.buffer_a if self.read_buffer == 0 else self.buffer_b

            return True, frame.copy(), self.frame_id

    def isOpened(self):
        return not self.stopped

    def release(self):

        self.stopped = True

        if self.thread.is_alive():
            self.thread.join()

        self.cap.release()

class VideoCaptureSingle:

    """
    Synchronous, zero-thread video reader. Returns frames EXACTLY in the order they are encoded.

    """

    def __init__(self, source, loop = False, distortion_preset = None):

        self.cap = open_capture(source)

        self.loop = loop
        self.distorter = FrameDistorter(distortion_preset) if distortion_preset else None
        self.stopped = False

    def read(self):

        if self.stopped:
            return False, None

        ret, frame = self.cap.read()

        if not ret:

            if self.loop:
                self.cap.set(cv2.CAP_PROP_POS_FRAMES, 0)
                ret, frame = self.cap.read()

            if not ret:
                self.stopped = True
                return False, None

        if self.distorter is not None:
            frame = self.distorter.apply(frame)

        return True, frame

    def isOpened(self):
        return not self.stopped

    def release(self):

        self.stopped = True
        self.cap.release()
