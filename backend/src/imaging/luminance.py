"""Luminance extraction — decoded image to an 8-bit single-channel grid."""

import numpy as np
from PIL import Image

LUMA_WEIGHTS = (0.299, 0.587, 0.114)

# 8-bit samples are widened to the 16-bit channel range (255 -> 65535)
_WIDEN_8_TO_16 = 0x101

_SIXTEEN_BIT_MODES = {"I;16", "I;16L", "I;16B", "I;16N", "I"}


def _rgb16_from_pil(image: Image.Image) -> np.ndarray:
    if image.mode in _SIXTEEN_BIT_MODES:
        gray = np.clip(np.asarray(image, dtype=np.int64), 0, 0xFFFF)
        return np.repeat(gray[:, :, np.newaxis].astype(np.float64), 3, axis=2)
    rgb = np.asarray(image.convert("RGB"), dtype=np.float64)
    return rgb * _WIDEN_8_TO_16


def _rgb16_from_array(pixels: np.ndarray) -> np.ndarray:
    if pixels.dtype == np.uint8:
        scale = _WIDEN_8_TO_16
    elif pixels.dtype == np.uint16:
        scale = 1
    else:
        raise ValueError(f"Unsupported sample type {pixels.dtype}, expected uint8 or uint16")

    if pixels.ndim == 2:
        rgb = np.repeat(pixels[:, :, np.newaxis], 3, axis=2)
    elif pixels.ndim == 3 and pixels.shape[2] in (3, 4):
        rgb = pixels[:, :, :3]  # alpha ignored
    else:
        raise ValueError(
            f"Unsupported pixel array shape {pixels.shape}, expected (H, W), "
            "(H, W, 3) or (H, W, 4)"
        )
    return rgb.astype(np.float64) * scale


def extract_luminance(image: Image.Image | np.ndarray) -> np.ndarray:
    """Convert a decoded image to an (H, W) uint8 luminance grid.

    Each sample is floor((0.299*R + 0.587*G + 0.114*B) / 256) with R, G, B
    in the 16-bit channel range. Alpha is ignored.
    """
    if isinstance(image, Image.Image):
        rgb = _rgb16_from_pil(image)
    elif isinstance(image, np.ndarray):
        rgb = _rgb16_from_array(image)
    else:
        raise ValueError(f"Unsupported image type: {type(image).__name__}")

    r_w, g_w, b_w = LUMA_WEIGHTS
    lum = r_w * rgb[:, :, 0] + g_w * rgb[:, :, 1] + b_w * rgb[:, :, 2]
    return (lum / 256).astype(np.uint8)
