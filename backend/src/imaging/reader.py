"""Image decoding via OpenCV, keeping each file's native sample depth."""

import cv2
import numpy as np


def load_image(path: str) -> np.ndarray:
    """Decode an image file (PNG, JPEG, anything OpenCV reads) at full depth.

    Returns an RGB(A) or grayscale array: (H, W), (H, W, 3) or (H, W, 4),
    dtype uint8 or uint16. 16-bit PNGs keep all 16 bits per channel.

    Raises:
        FileNotFoundError: path does not exist.
        OSError: the file is empty or cannot be decoded.
    """
    data = np.fromfile(path, dtype=np.uint8)
    if data.size == 0:
        raise OSError(f"Empty image file: {path}")

    pixels = cv2.imdecode(data, cv2.IMREAD_UNCHANGED)
    if pixels is None:
        raise OSError(f"Could not decode image: {path}")

    if pixels.ndim == 3 and pixels.shape[2] == 3:
        return cv2.cvtColor(pixels, cv2.COLOR_BGR2RGB)
    if pixels.ndim == 3 and pixels.shape[2] == 4:
        return cv2.cvtColor(pixels, cv2.COLOR_BGRA2RGBA)
    return pixels
