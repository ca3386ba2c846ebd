# median_cut/histogram.py
from __future__ import annotations

"""
Pixel decoding and colour histograms.

Two input layouts are accepted:
  packed : 1-D sequence/array of 32-bit ints laid out 0xAARRGGBB; the top byte is ignored.
  rgba   : bytes-like buffer, 4 bytes per pixel in R, G, B, A order
           (byte 0 = red ... byte 3 = alpha), independent of platform endianness.

Both decode to a uint32 array of 0x00RRGGBB values.
"""

from typing import Union

import numpy as np

from .constants import (
    BLUE_SHIFT,
    GREEN_SHIFT,
    MAX_PACKED,
    RED_SHIFT,
    RGB_MASK,
    RGBA_BYTES_PER_PIXEL,
)
from .core_types import ColorHistogram, PackedPixels, PixelInput
from .utils import debug_log

BytesLike = Union[bytes, bytearray, memoryview]


def _is_rgba_buffer(pixels: object) -> bool:
    if isinstance(pixels, (bytes, bytearray, memoryview)):
        return True
    return isinstance(pixels, np.ndarray) and pixels.dtype == np.uint8


def decode_rgba_bytes(data: Union[BytesLike, np.ndarray]) -> PackedPixels:
    """Decode an RGBA byte buffer into packed 0x00RRGGBB pixels."""
    if isinstance(data, np.ndarray):
        if data.dtype != np.uint8:
            raise TypeError("expected a uint8 RGBA buffer")
        flat = data.reshape(-1)
    else:
        flat = np.frombuffer(data, dtype=np.uint8)

    if flat.shape[0] % RGBA_BYTES_PER_PIXEL != 0:
        raise ValueError(
            f"RGBA buffer length {flat.shape[0]} is not a multiple of {RGBA_BYTES_PER_PIXEL}"
        )

    rgba = flat.reshape(-1, RGBA_BYTES_PER_PIXEL).astype(np.uint32)
    return (
        (rgba[:, 0] << RED_SHIFT) | (rgba[:, 1] << GREEN_SHIFT) | (rgba[:, 2] << BLUE_SHIFT)
    ).astype(np.uint32, copy=False)


def as_packed_pixels(pixels: PixelInput) -> PackedPixels:
    """Validate 32-bit packed pixels and strip their alpha bits."""
    arr = np.asarray(pixels)
    if arr.size == 0:
        return np.zeros((0,), dtype=np.uint32)
    if arr.ndim != 1:
        raise ValueError(f"expected a flat pixel sequence, got shape {arr.shape}")
    if arr.dtype == np.bool_ or not np.issubdtype(arr.dtype, np.integer):
        raise TypeError(f"expected integer pixels, got {arr.dtype}")
    if int(arr.min()) < 0 or int(arr.max()) > MAX_PACKED:
        raise ValueError("packed pixels must be in 0..0xFFFFFFFF")
    return (arr.astype(np.uint32) & np.uint32(RGB_MASK)).astype(np.uint32, copy=False)


def coerce_pixels(pixels: Union[PixelInput, BytesLike]) -> PackedPixels:
    """
    Normalise either input layout to packed pixels.

    bytes / bytearray / memoryview / uint8 arrays are read as RGBA bytes,
    everything else as packed 32-bit colours.
    """
    if _is_rgba_buffer(pixels):
        return decode_rgba_bytes(pixels)  # type: ignore[arg-type]
    return as_packed_pixels(pixels)  # type: ignore[arg-type]


def build_histogram(pixels: PixelInput, debug: bool = False) -> ColorHistogram:
    """
    Count distinct colours.

    Alpha is masked off, values are sorted numerically and each run of equal
    values becomes one (colour, count) pair in ascending colour order.
    """
    packed = as_packed_pixels(pixels)
    if packed.shape[0] == 0:
        return ColorHistogram(
            color_array=np.zeros((0,), dtype=np.uint32),
            count_array=np.zeros((0,), dtype=np.int64),
        )

    colors, counts = np.unique(packed, return_counts=True)
    hist = ColorHistogram(
        color_array=colors.astype(np.uint32, copy=False),
        count_array=counts.astype(np.int64, copy=False),
    )
    if debug:
        debug_log(f"histogram  pixels={packed.shape[0]:,}  distinct={len(hist):,}")
    return hist


__all__ = [
    "decode_rgba_bytes",
    "as_packed_pixels",
    "coerce_pixels",
    "build_histogram",
]
