import numpy as np
import pytest

from median_cut.core_types import ColorNode
from median_cut.nearest import NearestColorMapper


def _palette(*colors):
    return [ColorNode.from_rgb(c, 1) for c in colors]


def test_closest_index_ties_go_to_lowest_index():
    mapper = NearestColorMapper(_palette(0x000000, 0x020000))
    assert mapper.closest_index(0x010000) == 0
    assert mapper.closest_index(0x020000) == 1


def test_closest_color_returns_palette_node():
    pal = _palette(0x000000, 0xFFFFFF, 0xFF0000)
    mapper = NearestColorMapper(pal)
    assert mapper.closest_color(0xEE1111) is pal[2]
    assert len(mapper) == 3


def test_quantize_preserves_length_and_order():
    mapper = NearestColorMapper(_palette(0x000000, 0xFFFFFF))
    out = mapper.quantize([0x101010, 0xF0F0F0, 0x101010, 0x808080])
    assert out.tolist() == [0x000000, 0xFFFFFF, 0x000000, 0xFFFFFF]
    assert out.dtype == np.uint32


def test_quantize_drops_alpha_bits():
    mapper = NearestColorMapper(_palette(0x010101))
    assert mapper.quantize([0xFF010101, 0x7F020202]).tolist() == [0x010101, 0x010101]


def test_quantize_ties_match_scalar_lookup():
    mapper = NearestColorMapper(_palette(0x000000, 0x020000, 0x000002))
    pixels = [0x010000, 0x000001, 0x010001]
    assert mapper.quantize(pixels).tolist() == [
        mapper.palette[mapper.closest_index(p)].rgb for p in pixels
    ]


def test_threaded_chunks_match_single_thread():
    rng = np.random.default_rng(1)
    pal = _palette(*rng.integers(0, 1 << 24, size=24).tolist())
    pixels = rng.integers(0, 1 << 32, size=5000, dtype=np.uint64).astype(np.uint32)

    single = NearestColorMapper(pal).quantize(pixels)
    threaded = NearestColorMapper(pal, chunk=97).quantize(pixels, workers=4)
    assert np.array_equal(single, threaded)

    expected = [pal[NearestColorMapper(pal).closest_index(p)].rgb for p in pixels[:300].tolist()]
    assert single[:300].tolist() == expected


def test_empty_palette():
    mapper = NearestColorMapper([])
    assert mapper.quantize([]).tolist() == []
    with pytest.raises(ValueError):
        mapper.quantize([0x123456])
    with pytest.raises(ValueError):
        mapper.closest_index(0x123456)


def test_quantize_rgba_bytes_rejects_partial_pixels():
    mapper = NearestColorMapper(_palette(0x000000))
    with pytest.raises(ValueError):
        mapper.quantize_rgba_bytes(bytes(6))


def test_quantize_rgba_bytes_from_array():
    mapper = NearestColorMapper(_palette(0x000000, 0xFFFFFF))
    arr = np.array([[[250, 250, 250, 7], [3, 3, 3, 200]]], dtype=np.uint8)
    out = mapper.quantize_rgba_bytes(arr)
    assert list(out) == [255, 255, 255, 7, 0, 0, 0, 200]
