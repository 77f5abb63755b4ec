"""Tests for engine.export — end-to-end decode, filter, encode."""

import numpy as np
import pytest
from PIL import Image

from engine.export import FilterReport, filter_file
from engine.grid import GridView
from engine.median import filter_region
from engine.partition import ConfigurationError, SeamPolicy
from imaging.luminance import extract_luminance
from imaging.reader import load_image


def test_filter_file_writes_grayscale_png(rgb_png, tmp_path):
    out_path = tmp_path / "out.png"
    report = filter_file(str(rgb_png), str(out_path))

    assert isinstance(report, FilterReport)
    assert (report.width, report.height) == (32, 24)
    assert report.threads == 1
    assert report.seam is SeamPolicy.LEGACY
    assert report.elapsed_ms >= 0

    with Image.open(out_path) as img:
        assert img.format == "PNG"
        assert img.mode == "L"
        assert img.size == (32, 24)


def test_output_matches_in_memory_pipeline(rgb_png, tmp_path):
    out_path = tmp_path / "out.png"
    filter_file(str(rgb_png), str(out_path))

    lum = extract_luminance(load_image(str(rgb_png)))
    expected = filter_region(0, 24, 0, 32, GridView(lum))
    actual = np.asarray(Image.open(out_path))
    np.testing.assert_array_equal(actual, expected)


def test_threads_and_overlap(rgb_png, tmp_path):
    single = tmp_path / "single.png"
    overlap = tmp_path / "overlap.png"
    legacy = tmp_path / "legacy.png"
    filter_file(str(rgb_png), str(single), threads=1)
    filter_file(str(rgb_png), str(overlap), threads=4, seam=SeamPolicy.OVERLAP)
    filter_file(str(rgb_png), str(legacy), threads=4)

    a = np.asarray(Image.open(single))
    b = np.asarray(Image.open(overlap))
    c = np.asarray(Image.open(legacy))
    np.testing.assert_array_equal(a, b)
    assert not np.array_equal(a, c)


def test_bad_thread_count_writes_nothing(rgb_png, tmp_path):
    out_path = tmp_path / "out.png"
    with pytest.raises(ConfigurationError):
        filter_file(str(rgb_png), str(out_path), threads=25)
    assert not out_path.exists()


def test_missing_input_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        filter_file(str(tmp_path / "nope.png"), str(tmp_path / "out.png"))


def test_undecodable_input_raises(tmp_path):
    bogus = tmp_path / "bogus.png"
    bogus.write_bytes(b"not an image at all")
    out_path = tmp_path / "out.png"
    with pytest.raises(OSError):
        filter_file(str(bogus), str(out_path))
    assert not out_path.exists()


def test_oversized_image_rejected(rgb_png, tmp_path, monkeypatch):
    import security

    monkeypatch.setattr(security, "MAX_PIXELS", 100)
    with pytest.raises(ValueError, match="exceeds maximum"):
        filter_file(str(rgb_png), str(tmp_path / "out.png"))
