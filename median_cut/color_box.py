# median_cut/color_box.py
from __future__ import annotations

"""
Colour boxes for median-cut quantization.

A box is a half-open index range [lower, upper) into a node list shared by
every box of one palette build. Splitting reorders the nodes inside the box's
own range and hands the upper part to a new box, so the boxes always tile a
contiguous stretch of the list without overlap.
"""

from dataclasses import dataclass
from operator import attrgetter
from typing import List, Optional

from .constants import CHANNEL_MAX
from .core_types import ColorDimension, ColorNode


@dataclass
class ColorBox:
    lower: int
    upper: int
    level: int = 0
    count: int = 0
    rmin: int = CHANNEL_MAX
    rmax: int = 0
    gmin: int = CHANNEL_MAX
    gmax: int = 0
    bmin: int = CHANNEL_MAX
    bmax: int = 0

    @classmethod
    def create(
        cls, lower: int, upper: int, level: int, nodes: List[ColorNode]
    ) -> "ColorBox":
        """New box over nodes[lower:upper] with bounds already trimmed."""
        if lower > upper:
            raise ValueError(f"invalid box range [{lower}, {upper})")
        box = cls(lower=lower, upper=upper, level=level)
        box.trim(nodes)
        return box

    def color_count(self) -> int:
        """Number of distinct colours (nodes) in the box."""
        return self.upper - self.lower

    def trim(self, nodes: List[ColorNode]) -> None:
        """Recompute the pixel count and channel bounds from the current range."""
        self.rmin = self.gmin = self.bmin = CHANNEL_MAX
        self.rmax = self.gmax = self.bmax = 0
        self.count = 0
        for i in range(self.lower, self.upper):
            node = nodes[i]
            self.count += node.cnt
            r, g, b = node.red, node.grn, node.blu
            if r > self.rmax:
                self.rmax = r
            if r < self.rmin:
                self.rmin = r
            if g > self.gmax:
                self.gmax = g
            if g < self.gmin:
                self.gmin = g
            if b > self.bmax:
                self.bmax = b
            if b < self.bmin:
                self.bmin = b

    def longest_dimension(self) -> ColorDimension:
        """
        Channel with the widest extent.

        Ties go to blue, then green; red only wins outright.
        """
        r_length = self.rmax - self.rmin
        g_length = self.gmax - self.gmin
        b_length = self.bmax - self.bmin

        if b_length >= r_length and b_length >= g_length:
            return "blu"
        if g_length >= r_length and g_length >= b_length:
            return "grn"
        return "red"

    def find_median(self, dim: ColorDimension, nodes: List[ColorNode]) -> int:
        """
        Sort the box's nodes along dim and return the median index.

        The median is the first index at which the running pixel count
        reaches half of the box count. Only nodes[lower:upper] is reordered.
        """
        nodes[self.lower : self.upper] = sorted(
            nodes[self.lower : self.upper], key=attrgetter(dim)
        )

        half = self.count // 2
        n_pixels = 0
        for median in range(self.lower, self.upper):
            n_pixels += nodes[median].cnt
            if n_pixels >= half:
                return median
        return self.lower

    def split(self, nodes: List[ColorNode]) -> Optional["ColorBox"]:
        """
        Split at the median of the longest dimension.

        This box keeps [lower, median] and the returned box takes the rest;
        both move one level down. Returns None when the box holds fewer than
        two colours.
        """
        if self.color_count() < 2:
            return None

        dim = self.longest_dimension()
        med = self.find_median(dim, nodes)
        # the upper half must keep at least one node
        med = min(med, self.upper - 2)

        next_level = self.level + 1
        new_box = ColorBox.create(med + 1, self.upper, next_level, nodes)
        self.upper = med + 1
        self.level = next_level
        self.trim(nodes)
        return new_box

    def average_color(self, nodes: List[ColorNode]) -> ColorNode:
        """Count-weighted mean colour of the box, rounded half up."""
        r_sum = g_sum = b_sum = 0
        n = 0
        for i in range(self.lower, self.upper):
            node = nodes[i]
            cnt = node.cnt
            r_sum += cnt * node.red
            g_sum += cnt * node.grn
            b_sum += cnt * node.blu
            n += cnt
        if n == 0:
            raise RuntimeError(
                f"colour box [{self.lower}, {self.upper}) holds no pixels"
            )
        avg_red = int(0.5 + r_sum / n)
        avg_grn = int(0.5 + g_sum / n)
        avg_blu = int(0.5 + b_sum / n)
        return ColorNode.from_channels(avg_red, avg_grn, avg_blu, n)


__all__ = ["ColorBox"]
