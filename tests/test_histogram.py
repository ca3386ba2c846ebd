import numpy as np
import pytest

from median_cut.core_types import ColorNode, pack_rgb, unpack_rgb
from median_cut.histogram import (
    as_packed_pixels,
    build_histogram,
    coerce_pixels,
    decode_rgba_bytes,
)


def test_histogram_counts_sorted_runs():
    hist = build_histogram([0xFF0000, 0x00FF00, 0xFF0000, 0x0000FF])
    assert hist.color_array.tolist() == [0x0000FF, 0x00FF00, 0xFF0000]
    assert hist.count_array.tolist() == [1, 1, 2]
    assert len(hist) == 3
    assert hist.total == 4


def test_histogram_ignores_alpha_byte():
    hist = build_histogram([0xFF112233, 0x00112233, 0x80112233])
    assert hist.color_array.tolist() == [0x112233]
    assert hist.count_array.tolist() == [3]


def test_histogram_empty_input():
    hist = build_histogram([])
    assert len(hist) == 0
    assert hist.total == 0
    assert hist.to_nodes() == []


def test_histogram_nodes_decode_channels():
    nodes = build_histogram(np.array([0x102030, 0x102030], dtype=np.uint32)).to_nodes()
    assert nodes == [ColorNode(rgb=0x102030, red=0x10, grn=0x20, blu=0x30, cnt=2)]


def test_histogram_debug_line(capsys):
    build_histogram([1, 2, 2], debug=True)
    out = capsys.readouterr().out
    assert "[debug] histogram" in out
    assert "distinct=2" in out


def test_decode_rgba_bytes_fixed_order():
    data = bytes([1, 2, 3, 4, 255, 0, 0, 9])
    assert decode_rgba_bytes(data).tolist() == [0x010203, 0xFF0000]
    assert decode_rgba_bytes(bytearray(data)).tolist() == [0x010203, 0xFF0000]
    assert decode_rgba_bytes(memoryview(data)).tolist() == [0x010203, 0xFF0000]


def test_decode_rgba_bytes_from_uint8_array():
    arr = np.array([[[0, 128, 255, 0]]], dtype=np.uint8)
    assert decode_rgba_bytes(arr).tolist() == [0x0080FF]


@pytest.mark.parametrize("length", [1, 3, 5, 7])
def test_decode_rgba_bytes_rejects_partial_pixels(length):
    with pytest.raises(ValueError):
        decode_rgba_bytes(bytes(length))


def test_decode_rgba_bytes_rejects_wide_arrays():
    with pytest.raises(TypeError):
        decode_rgba_bytes(np.zeros((4,), dtype=np.int32))


def test_as_packed_pixels_validation():
    with pytest.raises(ValueError):
        as_packed_pixels([-1, 2])
    with pytest.raises(ValueError):
        as_packed_pixels([0x1FFFFFFFF])
    with pytest.raises(ValueError):
        as_packed_pixels(np.zeros((2, 2), dtype=np.uint32))
    with pytest.raises(TypeError):
        as_packed_pixels([0.5, 1.0])


def test_coerce_pixels_dispatch():
    assert coerce_pixels(bytes([9, 8, 7, 0])).tolist() == [0x090807]
    assert coerce_pixels([0xAA090807]).tolist() == [0x090807]
    assert coerce_pixels(np.array([9, 8, 7, 255], dtype=np.uint8)).tolist() == [0x090807]


def test_pack_unpack_helpers_agree():
    assert pack_rgb(0x12, 0x34, 0x56) == 0x123456
    assert unpack_rgb(0xFF123456) == (0x12, 0x34, 0x56)
    node = ColorNode.from_channels(0x12, 0x34, 0x56, 1)
    assert node == ColorNode.from_rgb(0x123456, 1)
    assert node.hex == "#123456"
