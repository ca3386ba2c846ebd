"""
median_cut package.

Purpose:
  Median-cut colour quantization of flat pixel buffers. See quantize_image.py for CLI.

Public API:
  MedianCutQuantizer : palette build from one buffer, nearest-colour remap of any buffer.
  build_palette      : palette of at most K colours, most used first.
  quantize_image     : remap packed pixels to a palette.
  ColorNode          : one palette / histogram colour with its pixel count.
  histogram          : pixel decoding and colour counting.
  color_box          : median-cut boxes (trim, split, average).
  nearest            : nearest-colour lookup.
  image_io           : Pillow load/save and image <-> buffer conversion (import explicitly).
  utils              : shared helpers (formatting, reports, logging).

Pixel layouts:
  packed : 0xAARRGGBB integers, alpha ignored.
  rgba   : bytes R, G, B, A per pixel.

Quick start:
  from median_cut import build_palette, quantize_image
  palette = build_palette([0xFF0000, 0x00FF00, 0x0000FF], 2)
"""

__version__ = "0.1.0"

# Re-export namespaces for convenience.
from . import constants
from . import core_types
from . import histogram
from . import color_box
from . import nearest
from . import utils

from .core_types import ColorHistogram, ColorNode  # noqa: E402,F401
from .histogram import build_histogram  # noqa: E402,F401
from .nearest import NearestColorMapper  # noqa: E402,F401
from .quantizer import (  # noqa: E402,F401
    MedianCutQuantizer,
    build_palette,
    quantize_image,
)

__all__ = [
    "__version__",
    "constants",
    "core_types",
    "histogram",
    "color_box",
    "nearest",
    "utils",
    "ColorHistogram",
    "ColorNode",
    "build_histogram",
    "NearestColorMapper",
    "MedianCutQuantizer",
    "build_palette",
    "quantize_image",
]
