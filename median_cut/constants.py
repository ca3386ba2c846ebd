# median_cut/constants.py
"""
Global tunables and pixel-layout constants used across the project.

- Packed colour layout (0xAARRGGBB, alpha ignored)
- RGBA byte-buffer layout (R, G, B, A per pixel)
- Quantizer / lookup defaults
"""
from __future__ import annotations

import os

# =========================
# Packed colour layout
# =========================
RGB_MASK: int = 0x00FFFFFF
MAX_PACKED: int = 0xFFFFFFFF

RED_SHIFT: int = 16
GREEN_SHIFT: int = 8
BLUE_SHIFT: int = 0

CHANNEL_MAX: int = 255

# =========================
# RGBA byte buffers
# =========================
# bytes per pixel, laid out R, G, B, A
RGBA_BYTES_PER_PIXEL: int = 4

# =========================
# Quantizer defaults
# =========================
DEFAULT_MAX_COLORS: int = 16

# unique colours compared against the palette per numpy batch
LOOKUP_CHUNK: int = 4096

# =========================
# CLI defaults
# =========================
IMAGE_EXTENSIONS = {".png", ".jpg", ".jpeg", ".webp", ".bmp", ".gif"}
OUTPUT_SUFFIX: str = "_mcq"


def default_workers() -> int:
    """Leave a few cores free for the system; returns a sensible worker count."""
    n = os.cpu_count() or 4
    reserve = 1 if n <= 6 else 2 if n <= 12 else 3 if n <= 18 else 4
    return max(1, n - reserve)


__all__ = [
    "RGB_MASK",
    "MAX_PACKED",
    "RED_SHIFT",
    "GREEN_SHIFT",
    "BLUE_SHIFT",
    "CHANNEL_MAX",
    "RGBA_BYTES_PER_PIXEL",
    "DEFAULT_MAX_COLORS",
    "LOOKUP_CHUNK",
    "IMAGE_EXTENSIONS",
    "OUTPUT_SUFFIX",
    "default_workers",
]
