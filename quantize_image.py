#!/usr/bin/env python3
"""
quantize_image.py
Reduce images to a K-colour median-cut palette and remap every pixel to it.

Usage:
  python quantize_image.py INPUT [--outdir DIR] --colors K --workers N --jobs J --top T --palette-only --debug

Input:
  Any Pillow-readable image, or a folder of them. Alpha is preserved but does
  not take part in the quantization.

Output:
  PNG written as <stem>_mcq.png next to INPUT (or in --outdir), plus the
  palette printed most-used first. --palette-only skips the image.

Notes:
  The quantizer lives in median_cut.quantizer; image conversion in median_cut.image_io.
  CPU bound. Folders are spread over processes; the nearest-colour lookup over threads.
"""

from __future__ import annotations

import argparse
import io
import os
import sys
import time
from concurrent.futures import ProcessPoolExecutor
from contextlib import redirect_stdout
from pathlib import Path
from typing import List, Optional

from median_cut.constants import (
    DEFAULT_MAX_COLORS,
    IMAGE_EXTENSIONS,
    OUTPUT_SUFFIX,
    default_workers,
)
from median_cut.image_io import (
    is_image_file,
    load_image_rgba,
    packed_to_rgba,
    rgba_to_packed,
    save_image_rgba,
)
from median_cut.quantizer import MedianCutQuantizer
from median_cut.utils import (
    debug_log,
    enable_line_buffered_stdout,
    error,
    format_percentage,
    format_seconds_compact,
    format_total_duration_compact,
    key_value_pairs_to_string,
    log,
    palette_usage_report,
    print_banner,
    print_config_line,
    warn,
)

# CLI args


def parse_cli_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse CLI arguments for median-cut quantization.

    Returns:
      argparse.Namespace with:
        src: Path to image or folder
        outdir: optional Path for outputs
        colors: palette size K
        workers: threads for the nearest-colour lookup
        jobs: files processed in parallel
        top: palette rows to print (0 = all)
        palette_only: print the palette without writing an image
        debug: bool for verbose quantizer details
    """
    parser = argparse.ArgumentParser(
        prog="median-cut",
        description="Quantize image(s) to a median-cut palette.",
    )
    parser.add_argument("src", type=Path, help="Input image or folder")
    parser.add_argument(
        "--outdir", type=Path, default=None, help="Output directory (optional)"
    )
    parser.add_argument(
        "--colors",
        type=int,
        default=DEFAULT_MAX_COLORS,
        help=f"Maximum palette size (default {DEFAULT_MAX_COLORS})",
    )
    parser.add_argument(
        "--workers", type=int, default=default_workers(), help="Lookup threads"
    )
    parser.add_argument(
        "--jobs", type=int, default=2, help="Files processed in parallel"
    )
    parser.add_argument(
        "--top", type=int, default=0, help="Palette rows to print (0 = all)"
    )
    parser.add_argument(
        "--palette-only",
        action="store_true",
        help="Print the palette without writing a quantized image",
    )
    parser.add_argument("--debug", action="store_true", help="Verbose quantizer details")
    args = parser.parse_args(argv)
    if args.colors < 0:
        parser.error("--colors must be >= 0")
    return args


# Per-file processing


def _output_path(src_path: Path, outdir: Optional[Path]) -> Path:
    name = f"{src_path.stem}{OUTPUT_SUFFIX}.png"
    return (outdir / name) if outdir else src_path.with_name(name)


def _process_single_image(
    src_path: Path,
    out_path: Path,
    max_colors: int,
    workers: int,
    top: int,
    palette_only: bool,
    debug: bool,
) -> None:
    """
    Process a single image path end-to-end:
      load -> histogram -> palette -> remap -> save -> report.
    """
    t_start = time.perf_counter()
    print_banner(src_path.name)

    rgba = load_image_rgba(src_path)
    height, width = rgba.shape[0], rgba.shape[1]
    packed = rgba_to_packed(rgba)
    t_loaded = time.perf_counter()

    quantizer = MedianCutQuantizer.from_pixels_u32(packed, max_colors, debug=debug)
    palette = quantizer.quantized_colors
    t_palette = time.perf_counter()

    if debug:
        debug_log(
            key_value_pairs_to_string(
                [
                    ("Loaded", f"{width}x{height}"),
                    ("Distinct colours", len(quantizer.histogram)),
                    ("Palette", len(palette)),
                    ("Palette time", format_seconds_compact(t_palette - t_loaded)),
                ]
            )
        )

    if not palette_only:
        mapped = quantizer.quantize_image(packed, workers=workers)
        out_rgba = packed_to_rgba(mapped, height, width, alpha=rgba[..., 3])
        out_path = save_image_rgba(out_path, out_rgba)
        if debug:
            debug_log(
                f"remap {format_seconds_compact(time.perf_counter() - t_palette)}"
            )
        log(f"Wrote {out_path.name} | size={width}x{height} | palette_size={len(palette)}")

    log("Palette:")
    rows = palette_usage_report(palette, total=packed.shape[0])
    for hex_code, count, share in rows[: top or None]:
        log(f"  {hex_code}  {count:>9,}  {format_percentage(share)}")

    log(f"Total pixels: {packed.shape[0]:,}")
    log(f"Total time {format_total_duration_compact(time.perf_counter() - t_start)}")


def _process_one_live(path: Path, args: argparse.Namespace) -> None:
    """Process a single file and stream logs to stdout."""
    try:
        _process_single_image(
            path,
            _output_path(path, args.outdir),
            args.colors,
            args.workers,
            args.top,
            args.palette_only,
            args.debug,
        )
    except (OSError, ValueError) as e:
        error(f"{path.name}: {e}")


def _process_one_captured(path: Path, args: argparse.Namespace) -> str:
    """
    Process a single file with stdout capture.

    Useful for concurrent execution where output should be printed in order.
    """
    buf = io.StringIO()
    with redirect_stdout(buf):
        _process_one_live(path, args)
    return buf.getvalue()


def _collect_images(folder: Path) -> List[Path]:
    files = [
        p
        for p in folder.iterdir()
        if p.is_file()
        and p.suffix.lower() in IMAGE_EXTENSIONS
        and not p.stem.endswith(OUTPUT_SUFFIX)
        and is_image_file(p)
    ]
    files.sort(key=lambda p: p.name.lower())
    return files


# Entry point


def main(argv: Optional[List[str]] = None) -> None:
    """
    CLI entry point.

    Handles single file or folder. In folder mode supports --jobs parallelism
    while preserving readable output ordering.
    """
    enable_line_buffered_stdout()
    args = parse_cli_args(argv)

    print_config_line(
        "run",
        [
            ("CPU cores", os.cpu_count() or 1),
            ("Workers", args.workers),
            ("Jobs", args.jobs),
            ("Colours", args.colors),
        ],
        debug=False,
    )

    src = args.src
    if not src.exists():
        error(f"not found: {src}")
        sys.exit(2)

    if args.colors == 0 and not args.palette_only:
        warn("--colors 0 gives an empty palette; no images will be written")
        args.palette_only = True

    if args.outdir is not None:
        args.outdir.mkdir(parents=True, exist_ok=True)

    if not src.is_dir():
        _process_one_live(src, args)
        return

    files = _collect_images(src)
    if args.debug:
        debug_log(
            key_value_pairs_to_string([("Images", len(files)), ("Jobs", args.jobs)])
        )

    if args.jobs <= 1:
        for p in files:
            _process_one_live(p, args)
    else:
        with ProcessPoolExecutor(max_workers=args.jobs) as ex:
            blocks = list(ex.map(_process_one_captured, files, [args] * len(files)))
        print("".join(blocks), end="", flush=True)


if __name__ == "__main__":
    main()
