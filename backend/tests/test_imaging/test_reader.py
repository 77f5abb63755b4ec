"""Tests for imaging.reader and imaging.writer."""

import cv2
import numpy as np
import pytest
from PIL import Image

from imaging.reader import load_image
from imaging.writer import save_grayscale

pytestmark = pytest.mark.smoke


def test_load_png(rgb_png):
    pixels = load_image(str(rgb_png))
    assert pixels.shape == (24, 32, 3)
    assert pixels.dtype == np.uint8
    np.testing.assert_array_equal(pixels, np.asarray(Image.open(rgb_png)))


def test_channels_in_rgb_order(tmp_path):
    path = tmp_path / "red.png"
    Image.new("RGB", (3, 2), (200, 10, 0)).save(path)
    pixels = load_image(str(path))
    assert tuple(pixels[0, 0]) == (200, 10, 0)


def test_rgba_keeps_alpha_last(tmp_path):
    path = tmp_path / "rgba.png"
    Image.new("RGBA", (3, 2), (1, 2, 3, 4)).save(path)
    pixels = load_image(str(path))
    assert tuple(pixels[1, 2]) == (1, 2, 3, 4)


def test_load_grayscale(tmp_path):
    path = tmp_path / "gray.png"
    Image.new("L", (4, 3), 7).save(path)
    pixels = load_image(str(path))
    assert pixels.shape == (3, 4)
    assert (pixels == 7).all()


def test_load_sixteen_bit_color_keeps_full_depth(tmp_path):
    rng = np.random.default_rng(9)
    rgb16 = rng.integers(0, 65536, (8, 8, 3), dtype=np.uint16)
    path = tmp_path / "deep.png"
    assert cv2.imwrite(str(path), np.ascontiguousarray(rgb16[:, :, ::-1]))
    pixels = load_image(str(path))
    assert pixels.dtype == np.uint16
    np.testing.assert_array_equal(pixels, rgb16)


def test_load_jpeg(tmp_path):
    path = tmp_path / "photo.jpg"
    Image.new("RGB", (12, 9), (40, 80, 120)).save(path, format="JPEG")
    assert load_image(str(path)).shape == (9, 12, 3)


def test_load_undecodable_file(tmp_path):
    path = tmp_path / "junk.png"
    path.write_bytes(b"definitely not a png")
    with pytest.raises(OSError, match="Could not decode"):
        load_image(str(path))


def test_load_empty_file(tmp_path):
    path = tmp_path / "empty.png"
    path.write_bytes(b"")
    with pytest.raises(OSError, match="Empty"):
        load_image(str(path))


def test_load_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_image(str(tmp_path / "missing.png"))


def test_save_grayscale_roundtrip(tmp_path, noisy_grid):
    path = tmp_path / "gray.png"
    save_grayscale(noisy_grid, str(path))
    with Image.open(path) as img:
        assert img.mode == "L"
        np.testing.assert_array_equal(np.asarray(img), noisy_grid)


def test_save_always_png(tmp_path, noisy_grid):
    path = tmp_path / "gray.jpg"
    save_grayscale(noisy_grid, str(path))
    with Image.open(path) as img:
        assert img.format == "PNG"


def test_save_non_contiguous_grid(tmp_path, noisy_grid):
    path = tmp_path / "slice.png"
    sliced = noisy_grid[:, ::2]
    save_grayscale(sliced, str(path))
    np.testing.assert_array_equal(np.asarray(Image.open(path)), sliced)


def test_save_rejects_color(tmp_path):
    with pytest.raises(ValueError, match="2-D"):
        save_grayscale(np.zeros((4, 4, 3), dtype=np.uint8), str(tmp_path / "x.png"))


def test_save_rejects_wide_samples(tmp_path):
    with pytest.raises(ValueError, match="uint8"):
        save_grayscale(np.zeros((4, 4), dtype=np.uint16), str(tmp_path / "x.png"))
