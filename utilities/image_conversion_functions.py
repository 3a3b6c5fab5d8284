# --- Imports ---

import cv2
import numpy as np

# --- Functions ---

def empty_frame():

    """
    Returns the empty image used to signal an unusable camera buffer.

    """

    return np.zeros((0, 0, 3), dtype = np.uint8)

def nv21_to_rgb(nv21_bytes, width, height):

    """
    Converts an NV21 camera buffer (full size Y plane followed by interleaved V/U at quarter size) to an RGB image.

    Arguments:
        "nv21_bytes" (bytes | np.ndarray): The raw NV21 buffer.
        "width" (int): Frame width in pixels.
        "height" (int): Frame height in pixels.

    Returns:
        "rgb_frame" (np.ndarray): An H x W x 3 RGB image, or an empty image if the buffer is empty or too short.

    """

    if width <= 0 or height <= 0 or width % 2 or height % 2: # NV21 needs even dimensions
        return empty_frame()

    buffer = np.frombuffer(nv21_bytes, dtype = np.uint8) if isinstance(nv21_bytes, (bytes, bytearray, memoryview)) else np.asarray(nv21_bytes, dtype = np.uint8).ravel()

    expected_size = width * height + 2 * (width // 2) * (height // 2) # Y plane + interleaved chroma plane

    if buffer.size == 0 or buffer.size < expected_size:
        return empty_frame()

    yuv_frame = buffer[:expected_size].reshape(height + height // 2, width).copy() # Single channel, 1.5 x height rows, writable

    return cv2.cvtColor(yuv_frame, cv2.COLOR_YUV2RGB_NV21)

def yuv_planes_to_rgb(y_plane, u_plane, v_plane, width, height, pixel_stride = 2):

    """
    Converts the three planes delivered by a camera (Y, U, V) to an RGB image.

    With a chroma pixel stride of two the V plane already holds the interleaved VU bytes
    (minus the last U), so the planes are stacked Y, V, U and cut to the NV21 size.
    With a pixel stride of one the chroma planes are interleaved first.

    Arguments:
        "y_plane" (bytes): Luma plane.
        "u_plane" (bytes): U chroma plane.
        "v_plane" (bytes): V chroma plane.
        "width" (int): Frame width in pixels.
        "height" (int): Frame height in pixels.
        "pixel_stride" (int): Chroma pixel stride reported by the camera, 1 or 2.

    Returns:
        "rgb_frame" (np.ndarray): An RGB image, or an empty image if any plane is empty.

    """

    if len(y_plane) == 0 or len(u_plane) == 0 or len(v_plane) == 0: # If any required plane is empty:
        return empty_frame()

    if pixel_stride == 1:

        u_values = np.frombuffer(bytes(u_plane), dtype = np.uint8)
        v_values = np.frombuffer(bytes(v_plane), dtype = np.uint8)

        chroma_size = min(u_values.size, v_values.size)

        vu_plane = np.empty(2 * chroma_size, dtype = np.uint8)
        vu_plane[0::2] = v_values[:chroma_size]
        vu_plane[1::2] = u_values[:chroma_size]

        return nv21_to_rgb(bytes(y_plane) + vu_plane.tobytes(), width, height)

    return nv21_to_rgb(bytes(y_plane) + bytes(v_plane) + bytes(u_plane), width, height)

def rgb_to_nv21(rgb_frame):

    """
    Converts an RGB image with even width and height to an NV21 buffer.

    Arguments:
        "rgb_frame" (np.ndarray): An H x W x 3 RGB image.

    Returns:
        bytes: The NV21 buffer.

    """

    height, width = rgb_frame.shape[:2]

    yuv_i420 = cv2.cvtColor(rgb_frame, cv2.COLOR_RGB2YUV_I420).ravel() # Planar Y, U, V

    luma_size = width * height
    chroma_size = luma_size // 4

    y_plane = yuv_i420[:luma_size]
    u_plane = yuv_i420[luma_size:luma_size + chroma_size]
    v_plane = yuv_i420[luma_size + chroma_size:luma_size + 2 * chroma_size]

    vu_plane = np.empty(2 * chroma_size, dtype = np.uint8)
    vu_plane[0::2] = v_plane
    vu_plane[1::2] = u_plane

    return y_plane.tobytes() + vu_plane.tobytes()
