# median_cut/image_io.py
from __future__ import annotations

import io
from pathlib import Path
from typing import Optional

import numpy as np
from PIL import Image, ImageOps, UnidentifiedImageError

from .core_types import PackedPixels, unpack_rgb_array
from .histogram import decode_rgba_bytes

"""
Image I/O helpers (RGBA in sRGB) and conversion between Pillow images and
the flat pixel buffers the quantizer works on.
"""

try:
    from PIL import ImageCms  # ICC conversion if profile present
except ImportError:  # pragma: no cover
    ImageCms = None  # type: ignore[assignment]


def _convert_to_srgb_rgba(im: Image.Image) -> Image.Image:
    im = ImageOps.exif_transpose(im)
    icc_bytes = im.info.get("icc_profile")

    if icc_bytes and ImageCms is not None:
        try:
            src_prof = ImageCms.ImageCmsProfile(io.BytesIO(icc_bytes))
            dst_prof = ImageCms.createProfile("sRGB")
            im2 = ImageCms.profileToProfile(
                im,
                src_prof,
                dst_prof,
                renderingIntent=ImageCms.Intent.PERCEPTUAL,
                outputMode="RGBA",
            )
            if im2 is None:
                return im.convert("RGBA")
            return im2
        except (ImageCms.PyCMSError, OSError):
            return im.convert("RGBA")

    return im.convert("RGBA")


def load_image_rgba(path: Path) -> np.ndarray:
    """Load any Pillow-readable image as a uint8 (H, W, 4) RGBA array."""
    with Image.open(path) as im0:
        im = _convert_to_srgb_rgba(im0)
        arr = np.array(im, dtype=np.uint8)
    return arr


def save_image_rgba(path: Path, rgba: np.ndarray) -> Path:
    """Save a uint8 (H, W, 4) array as PNG; the suffix is forced to .png."""
    if path.suffix.lower() != ".png":
        path = path.with_suffix(".png")
    if rgba.dtype != np.uint8 or rgba.ndim != 3 or rgba.shape[-1] != 4:
        raise TypeError("expected uint8 (H,W,4) image")
    Image.fromarray(rgba).save(path)
    return path


def rgba_to_packed(rgba: np.ndarray) -> PackedPixels:
    """(H, W, 4) RGBA array to flat packed 0x00RRGGBB pixels, row-major."""
    if rgba.dtype != np.uint8 or rgba.ndim != 3 or rgba.shape[-1] != 4:
        raise TypeError("expected uint8 (H,W,4) image")
    return decode_rgba_bytes(np.ascontiguousarray(rgba))


def packed_to_rgba(
    packed: PackedPixels, height: int, width: int, alpha: Optional[np.ndarray] = None
) -> np.ndarray:
    """
    Flat packed pixels back to a (H, W, 4) array.

    alpha is an (H, W) uint8 mask; fully opaque when omitted.
    """
    if packed.shape[0] != height * width:
        raise ValueError(
            f"pixel count {packed.shape[0]} does not match {width}x{height}"
        )
    out = np.empty((height, width, 4), dtype=np.uint8)
    out[..., :3] = unpack_rgb_array(packed).reshape(height, width, 3).astype(np.uint8)
    out[..., 3] = 255 if alpha is None else alpha
    return out


def is_image_file(path: Path) -> bool:
    try:
        with Image.open(path) as im:
            im.seek(0)
            im.load()
        return True
    except (UnidentifiedImageError, OSError):
        return False


__all__ = [
    "load_image_rgba",
    "save_image_rgba",
    "rgba_to_packed",
    "packed_to_rgba",
    "is_image_file",
]
