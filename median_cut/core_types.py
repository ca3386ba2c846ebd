# median_cut/core_types.py
from __future__ import annotations

"""
Core type aliases, small value objects, and lightweight helpers.
"""

from dataclasses import dataclass
from typing import List, Literal, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from .constants import BLUE_SHIFT, GREEN_SHIFT, RED_SHIFT, RGB_MASK

# Basic aliases

RGBTuple = Tuple[int, int, int]
HexStr = str

PackedPixels = NDArray[np.uint32]  # (N,) 0x00RRGGBB
PixelInput = Union[Sequence[int], NDArray[np.integer]]

# Node attribute a box is sorted by when it is split.
ColorDimension = Literal["red", "grn", "blu"]

# Value objects


@dataclass(frozen=True)
class ColorNode:
    """One distinct colour and the number of pixels that use it."""

    rgb: int  # (red << 16) | (grn << 8) | blu
    red: int
    grn: int
    blu: int
    cnt: int

    @classmethod
    def from_rgb(cls, rgb: int, cnt: int) -> "ColorNode":
        """Decode a packed colour; alpha bits are dropped."""
        rgb = int(rgb) & RGB_MASK
        return cls(
            rgb=rgb,
            red=(rgb >> RED_SHIFT) & 0xFF,
            grn=(rgb >> GREEN_SHIFT) & 0xFF,
            blu=(rgb >> BLUE_SHIFT) & 0xFF,
            cnt=int(cnt),
        )

    @classmethod
    def from_channels(cls, red: int, grn: int, blu: int, cnt: int) -> "ColorNode":
        """Build a node from channel values, e.g. a box average."""
        red, grn, blu = int(red) & 0xFF, int(grn) & 0xFF, int(blu) & 0xFF
        return cls(
            rgb=pack_rgb(red, grn, blu),
            red=red,
            grn=grn,
            blu=blu,
            cnt=int(cnt),
        )

    def distance2(self, red: int, grn: int, blu: int) -> int:
        """Squared Euclidean RGB distance between this node and a colour."""
        dr = self.red - red
        dg = self.grn - grn
        db = self.blu - blu
        return dr * dr + dg * dg + db * db

    def as_tuple(self) -> RGBTuple:
        return (self.red, self.grn, self.blu)

    @property
    def hex(self) -> HexStr:
        return rgb_to_hex(self.as_tuple())


@dataclass(frozen=True, eq=False)
class ColorHistogram:
    """
    Distinct colours of an image with their pixel counts.

    color_array is strictly increasing; count_array is co-indexed.
    """

    color_array: NDArray[np.uint32]
    count_array: NDArray[np.int64]

    def __len__(self) -> int:
        return int(self.color_array.shape[0])

    @property
    def total(self) -> int:
        return int(self.count_array.sum()) if len(self) else 0

    def to_nodes(self) -> List[ColorNode]:
        """Node array in ascending colour order."""
        return [
            ColorNode.from_rgb(rgb, cnt)
            for rgb, cnt in zip(self.color_array.tolist(), self.count_array.tolist())
        ]


# Small helpers


def pack_rgb(red: int, grn: int, blu: int) -> int:
    """Channels to a packed 0xRRGGBB integer."""
    return (
        ((red & 0xFF) << RED_SHIFT)
        | ((grn & 0xFF) << GREEN_SHIFT)
        | ((blu & 0xFF) << BLUE_SHIFT)
    )


def unpack_rgb(rgb: int) -> RGBTuple:
    """Packed colour to an (r, g, b) tuple; alpha bits are ignored."""
    return (
        (rgb >> RED_SHIFT) & 0xFF,
        (rgb >> GREEN_SHIFT) & 0xFF,
        (rgb >> BLUE_SHIFT) & 0xFF,
    )


def rgb_to_hex(rgb: RGBTuple) -> HexStr:
    """RGB tuple to lowercase hex string '#rrggbb'."""
    return f"#{rgb[0]:02x}{rgb[1]:02x}{rgb[2]:02x}"


def unpack_rgb_array(packed: NDArray[np.integer]) -> NDArray[np.int32]:
    """(N,) packed colours to an (N,3) int32 array of channels."""
    p = np.asarray(packed, dtype=np.uint32)
    out = np.empty((p.shape[0], 3), dtype=np.int32)
    out[:, 0] = (p >> RED_SHIFT) & 0xFF
    out[:, 1] = (p >> GREEN_SHIFT) & 0xFF
    out[:, 2] = (p >> BLUE_SHIFT) & 0xFF
    return out


__all__ = [
    # aliases / types
    "RGBTuple",
    "HexStr",
    "PackedPixels",
    "PixelInput",
    "ColorDimension",
    # value objects
    "ColorNode",
    "ColorHistogram",
    # helpers
    "pack_rgb",
    "unpack_rgb",
    "rgb_to_hex",
    "unpack_rgb_array",
]
