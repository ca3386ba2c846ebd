# median_cut/quantizer.py
from __future__ import annotations

"""
Median-cut colour quantizer (Heckbert, 1982).

Unlike Heckbert's formulation no initial uniform quantization is applied:
every distinct colour of the input takes part. Once the representative
colours are found, any image can be mapped to them by nearest RGB distance.

Typical use:
  q = MedianCutQuantizer.from_rgba_bytes(data, 16)
  q.quantized_colors          # palette, most used first
  q.quantize_rgba_bytes(data) # remapped buffer, alpha kept
"""

from typing import Iterable, List, Optional, Union

import numpy as np

from .color_box import ColorBox
from .core_types import ColorHistogram, ColorNode, PackedPixels, PixelInput
from .histogram import BytesLike, build_histogram, coerce_pixels, decode_rgba_bytes
from .nearest import NearestColorMapper
from .utils import debug_log


def find_box_to_split(boxes: Iterable[ColorBox]) -> Optional[ColorBox]:
    """
    Splittable box (two or more colours) with the lowest level.

    The first box found at that level wins. None when nothing can be split.
    """
    box_to_split: Optional[ColorBox] = None
    min_level: Optional[int] = None
    for box in boxes:
        if box.color_count() >= 2:
            if min_level is None or box.level < min_level:
                min_level = box.level
                box_to_split = box
    return box_to_split


def average_colors(boxes: Iterable[ColorBox], nodes: List[ColorNode]) -> List[ColorNode]:
    return [box.average_color(nodes) for box in boxes]


def find_representative_colors(
    nodes: List[ColorNode], max_colors: int, debug: bool = False
) -> List[ColorNode]:
    """
    Build an unsorted palette of at most max_colors entries.

    nodes is reordered in place while boxes are split. When the input has no
    more than max_colors distinct colours they are returned unchanged.
    """
    if max_colors < 0:
        raise ValueError(f"max_colors must be >= 0, got {max_colors}")
    if max_colors == 0 or not nodes:
        return []

    cnum = len(nodes)
    if cnum <= max_colors:
        if debug:
            debug_log(f"distinct={cnum} <= k={max_colors}; palette is the histogram")
        return list(nodes)

    color_set: List[ColorBox] = [ColorBox.create(0, cnum, 0, nodes)]
    k = 1
    while k < max_colors:
        next_box = find_box_to_split(color_set)
        if next_box is None:
            if debug:
                debug_log(f"no splittable box left at k={k}")
            break
        new_box = next_box.split(nodes)
        if new_box is None:
            break
        color_set.append(new_box)
        k += 1
        if debug:
            debug_log(
                f"split level={next_box.level}  "
                f"[{next_box.lower},{next_box.upper}) n={next_box.count}  "
                f"[{new_box.lower},{new_box.upper}) n={new_box.count}"
            )

    return average_colors(color_set, nodes)


def sort_by_usage(palette: Iterable[ColorNode]) -> List[ColorNode]:
    """Most used colours first; equal counts keep their order."""
    return sorted(palette, key=lambda node: -node.cnt)


class MedianCutQuantizer:
    """
    Palette built from one pixel buffer, reusable to remap any buffer.

    Packed pixels are 0xAARRGGBB with alpha ignored; RGBA buffers hold
    bytes in R, G, B, A order.
    """

    def __init__(self, histogram: ColorHistogram, max_colors: int, debug: bool = False):
        self.histogram = histogram
        self.max_colors = int(max_colors)
        self.image_colors: List[ColorNode] = histogram.to_nodes()
        palette = find_representative_colors(
            self.image_colors, self.max_colors, debug=debug
        )
        self.quant_colors: List[ColorNode] = sort_by_usage(palette)
        self._mapper = NearestColorMapper(self.quant_colors)

        if debug:
            debug_log(
                f"palette  k={self.max_colors}  distinct={len(histogram):,}  "
                f"colours={len(self.quant_colors)}"
            )

    @classmethod
    def from_pixels_u32(
        cls, pixels: PixelInput, max_colors: int, *, debug: bool = False
    ) -> "MedianCutQuantizer":
        return cls(build_histogram(pixels, debug=debug), max_colors, debug=debug)

    @classmethod
    def from_rgba_bytes(
        cls,
        data: Union[BytesLike, np.ndarray],
        max_colors: int,
        *,
        debug: bool = False,
    ) -> "MedianCutQuantizer":
        return cls.from_pixels_u32(decode_rgba_bytes(data), max_colors, debug=debug)

    @property
    def quantized_colors(self) -> List[ColorNode]:
        return self.quant_colors

    def get_quantized_colors(self) -> List[ColorNode]:
        return self.quant_colors

    def find_closest_color_index(self, rgb: int) -> int:
        return self._mapper.closest_index(rgb)

    def find_closest_color(self, rgb: int) -> ColorNode:
        return self._mapper.closest_color(rgb)

    def quantize_image(self, pixels: PixelInput, workers: int = 1) -> PackedPixels:
        return self._mapper.quantize(pixels, workers=workers)

    def quantize_rgba_bytes(
        self, data: Union[BytesLike, np.ndarray], workers: int = 1
    ) -> bytes:
        return self._mapper.quantize_rgba_bytes(data, workers=workers)


def build_palette(
    pixels: Union[PixelInput, BytesLike], max_colors: int, debug: bool = False
) -> List[ColorNode]:
    """
    Palette of at most max_colors colours, most used first.

    Bytes-like input (and uint8 arrays) is read as RGBA bytes, anything
    else as packed 32-bit colours.
    """
    hist = build_histogram(coerce_pixels(pixels), debug=debug)
    return MedianCutQuantizer(hist, max_colors, debug=debug).quantized_colors


def quantize_image(
    palette: List[ColorNode], pixels: PixelInput, workers: int = 1
) -> PackedPixels:
    """Remap packed pixels to their nearest palette colours."""
    return NearestColorMapper(palette).quantize(pixels, workers=workers)


__all__ = [
    "find_box_to_split",
    "average_colors",
    "find_representative_colors",
    "sort_by_usage",
    "MedianCutQuantizer",
    "build_palette",
    "quantize_image",
]
