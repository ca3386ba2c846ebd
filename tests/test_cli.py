import numpy as np
import pytest
from PIL import Image

import quantize_image
from median_cut.constants import DEFAULT_MAX_COLORS


def _write_image(path, seed=0):
    rng = np.random.default_rng(seed)
    rgba = rng.integers(0, 256, size=(8, 8, 4), dtype=np.uint8)
    Image.fromarray(rgba).save(path)
    return rgba


def _colours(path):
    arr = np.array(Image.open(path).convert("RGBA"))
    return {tuple(px) for px in arr[..., :3].reshape(-1, 3).tolist()}, arr


def test_parse_defaults(tmp_path):
    args = quantize_image.parse_cli_args([str(tmp_path)])
    assert args.colors == DEFAULT_MAX_COLORS
    assert args.outdir is None
    assert not args.palette_only


def test_parse_rejects_negative_colours(tmp_path):
    with pytest.raises(SystemExit):
        quantize_image.parse_cli_args([str(tmp_path), "--colors", "-3"])


def test_single_image(tmp_path, capsys):
    src = tmp_path / "pic.png"
    rgba = _write_image(src)

    quantize_image.main([str(src), "--colors", "4", "--workers", "1"])

    out_path = tmp_path / "pic_mcq.png"
    assert out_path.exists()
    colours, arr = _colours(out_path)
    assert len(colours) <= 4
    assert np.array_equal(arr[..., 3], rgba[..., 3])

    out = capsys.readouterr().out
    assert "Palette:" in out
    assert "Total pixels: 64" in out


def test_palette_only_writes_nothing(tmp_path, capsys):
    src = tmp_path / "pic.png"
    _write_image(src)

    quantize_image.main([str(src), "--colors", "3", "--palette-only", "--top", "2"])

    assert not (tmp_path / "pic_mcq.png").exists()
    out = capsys.readouterr().out
    rows = [line for line in out.splitlines() if line.startswith("  #")]
    assert len(rows) == 2


def test_folder_with_jobs(tmp_path, capsys):
    for i in range(3):
        _write_image(tmp_path / f"img{i}.png", seed=i)
    (tmp_path / "notes.png").write_text("not an image")
    outdir = tmp_path / "out"

    quantize_image.main(
        [str(tmp_path), "--outdir", str(outdir), "--colors", "2", "--jobs", "2"]
    )

    assert sorted(p.name for p in outdir.iterdir()) == [
        "img0_mcq.png",
        "img1_mcq.png",
        "img2_mcq.png",
    ]
    out = capsys.readouterr().out
    assert out.index("=== img0.png ===") < out.index("=== img1.png ===")


def test_missing_source_exits_2(tmp_path, capsys):
    with pytest.raises(SystemExit) as exc:
        quantize_image.main([str(tmp_path / "nope.png")])
    assert exc.value.code == 2
    assert "[error] not found" in capsys.readouterr().err


def test_zero_colours_only_prints(tmp_path, capsys):
    src = tmp_path / "pic.png"
    _write_image(src)

    quantize_image.main([str(src), "--colors", "0"])

    assert not (tmp_path / "pic_mcq.png").exists()
    out = capsys.readouterr().out
    assert "[warn]" in out
    assert "Total pixels: 64" in out
