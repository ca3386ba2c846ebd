import numpy as np
import pytest
from PIL import Image

from median_cut.image_io import (
    is_image_file,
    load_image_rgba,
    packed_to_rgba,
    rgba_to_packed,
    save_image_rgba,
)


def _sample_rgba():
    rgba = np.zeros((2, 3, 4), dtype=np.uint8)
    rgba[0, :, :3] = [255, 0, 0]
    rgba[1, :, :3] = [0, 128, 255]
    rgba[..., 3] = [[255, 128, 0], [10, 20, 30]]
    return rgba


def test_save_and_load_round_trip(tmp_path):
    rgba = _sample_rgba()
    path = save_image_rgba(tmp_path / "out.jpg", rgba)
    assert path.suffix == ".png"
    assert np.array_equal(load_image_rgba(path), rgba)


def test_load_converts_rgb_to_rgba(tmp_path):
    path = tmp_path / "rgb.png"
    Image.new("RGB", (2, 2), (1, 2, 3)).save(path)
    arr = load_image_rgba(path)
    assert arr.shape == (2, 2, 4)
    assert arr[0, 0].tolist() == [1, 2, 3, 255]


def test_packed_conversion_round_trip():
    rgba = _sample_rgba()
    packed = rgba_to_packed(rgba)
    assert packed.tolist() == [0xFF0000] * 3 + [0x0080FF] * 3
    back = packed_to_rgba(packed, 2, 3, alpha=rgba[..., 3])
    assert np.array_equal(back, rgba)


def test_packed_to_rgba_defaults_to_opaque():
    out = packed_to_rgba(np.array([0x010203], dtype=np.uint32), 1, 1)
    assert out[0, 0].tolist() == [1, 2, 3, 255]


def test_packed_to_rgba_size_mismatch():
    with pytest.raises(ValueError):
        packed_to_rgba(np.zeros((5,), dtype=np.uint32), 2, 3)


def test_rgba_to_packed_rejects_rgb():
    with pytest.raises(TypeError):
        rgba_to_packed(np.zeros((2, 2, 3), dtype=np.uint8))


def test_is_image_file(tmp_path):
    good = save_image_rgba(tmp_path / "a.png", _sample_rgba())
    bad = tmp_path / "b.png"
    bad.write_text("not an image")
    assert is_image_file(good)
    assert not is_image_file(bad)
