# median_cut/nearest.py
from __future__ import annotations

"""
Nearest-palette lookup by squared Euclidean RGB distance.

Ties resolve to the lowest palette index. Whole-buffer remaps work on the
unique input colours and scatter the result back through the inverse index.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import List, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from .constants import LOOKUP_CHUNK, RGBA_BYTES_PER_PIXEL
from .core_types import ColorNode, PackedPixels, PixelInput, unpack_rgb, unpack_rgb_array
from .histogram import BytesLike, as_packed_pixels, decode_rgba_bytes


def _split_spans(length: int, chunk: int) -> List[Tuple[int, int]]:
    """Partition [0, length) into contiguous [start, end) spans of at most chunk."""
    chunk = max(1, int(chunk))
    return [(start, min(start + chunk, length)) for start in range(0, length, chunk)]


class NearestColorMapper:
    """Maps colours to the closest entry of a fixed palette."""

    def __init__(self, palette: Sequence[ColorNode], chunk: int = LOOKUP_CHUNK):
        self.palette: List[ColorNode] = list(palette)
        self.chunk = chunk
        self._pal_rgb = np.array(
            [node.as_tuple() for node in self.palette], dtype=np.int32
        ).reshape(-1, 3)
        self._pal_packed = np.array(
            [node.rgb for node in self.palette], dtype=np.uint32
        )

    def __len__(self) -> int:
        return len(self.palette)

    def closest_index(self, color: int) -> int:
        """Index of the palette entry nearest to a packed colour."""
        if not self.palette:
            raise ValueError("palette is empty")
        red, grn, blu = unpack_rgb(int(color))
        min_idx = 0
        min_distance = None
        for i, node in enumerate(self.palette):
            d2 = node.distance2(red, grn, blu)
            if min_distance is None or d2 < min_distance:
                min_distance = d2
                min_idx = i
        return min_idx

    def closest_color(self, color: int) -> ColorNode:
        return self.palette[self.closest_index(color)]

    def _nearest_indices(self, src_rgb: NDArray[np.int32]) -> NDArray[np.intp]:
        # int32 is wide enough: 3 * 255**2 fits easily
        diff = src_rgb[:, None, :] - self._pal_rgb[None, :, :]
        dist2 = np.sum(diff * diff, axis=2)
        return np.argmin(dist2, axis=1)

    def quantize(self, pixels: PixelInput, workers: int = 1) -> PackedPixels:
        """
        Replace every pixel by its nearest palette colour.

        Output has the input's length and order; alpha bits are dropped.
        workers > 1 spreads the lookup over threads.
        """
        packed = as_packed_pixels(pixels)
        if packed.shape[0] == 0:
            return np.zeros((0,), dtype=np.uint32)
        if not self.palette:
            raise ValueError("cannot remap pixels with an empty palette")

        uniques, inverse = np.unique(packed, return_inverse=True)
        src_rgb = unpack_rgb_array(uniques)
        nearest = np.empty((uniques.shape[0],), dtype=np.intp)
        spans = _split_spans(uniques.shape[0], self.chunk)

        def _run(span: Tuple[int, int]) -> None:
            start, end = span
            nearest[start:end] = self._nearest_indices(src_rgb[start:end])

        if workers > 1 and len(spans) > 1:
            with ThreadPoolExecutor(max_workers=workers) as ex:
                list(ex.map(_run, spans))
        else:
            for span in spans:
                _run(span)

        return self._pal_packed[nearest][inverse.reshape(-1)]

    def quantize_rgba_bytes(
        self, data: Union[BytesLike, np.ndarray], workers: int = 1
    ) -> bytes:
        """Remap an RGBA byte buffer; each pixel keeps its own alpha byte."""
        packed = decode_rgba_bytes(data)
        mapped = self.quantize(packed, workers=workers)

        if isinstance(data, np.ndarray):
            src = data.reshape(-1)
        else:
            src = np.frombuffer(data, dtype=np.uint8)
        out = np.empty((packed.shape[0], RGBA_BYTES_PER_PIXEL), dtype=np.uint8)
        out[:, :3] = unpack_rgb_array(mapped).astype(np.uint8)
        out[:, 3] = src.reshape(-1, RGBA_BYTES_PER_PIXEL)[:, 3]
        return out.tobytes()


__all__ = ["NearestColorMapper"]
