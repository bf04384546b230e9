import json

import numpy as np
import pytest
from click.testing import CliRunner
from PIL import Image

from colorblend import __version__
from colorblend.cli import main


@pytest.fixture
def images(tmp_path):
    fg = np.zeros((6, 8, 4), dtype=np.uint8)
    fg[..., 0] = 255
    fg[..., 3] = 255
    mask = np.zeros((6, 8), dtype=np.uint8)
    mask[:, :4] = 255
    mask[:, 4:] = 128

    fg_path = tmp_path / "fg.png"
    mask_path = tmp_path / "mask.png"
    Image.fromarray(fg, "RGBA").save(fg_path)
    Image.fromarray(mask, "L").save(mask_path)
    return fg_path, mask_path


def test_composite_writes_png(images, tmp_path):
    fg_path, mask_path = images
    out_path = tmp_path / "out.png"
    result = CliRunner().invoke(
        main,
        ["composite", str(fg_path), str(mask_path), "-o", str(out_path), "-b", "#0000ff"],
    )
    assert result.exit_code == 0, result.output

    out = np.array(Image.open(out_path))
    assert out.shape == (6, 8, 4)
    assert out[0, 0].tolist() == [255, 0, 0, 255]
    assert out[0, 7].tolist() == [128, 0, 127, 255]


def test_composite_linear_mode(images, tmp_path):
    fg_path, mask_path = images
    out_path = tmp_path / "out.png"
    result = CliRunner().invoke(
        main,
        ["composite", str(fg_path), str(mask_path), "-o", str(out_path),
         "-m", "linear", "-t", "srgb", "-w", "2"],
    )
    assert result.exit_code == 0, result.output
    out = np.array(Image.open(out_path))
    # 128/255 coverage of linear red over black
    assert out[0, 7, 0] == 188


def test_transfer_alone_selects_linear_mode(images, tmp_path):
    fg_path, mask_path = images
    out_path = tmp_path / "out.png"
    result = CliRunner().invoke(
        main, ["composite", str(fg_path), str(mask_path), "-o", str(out_path), "-t", "srgb"]
    )
    assert result.exit_code == 0, result.output
    assert "linear[srgb]" in result.output
    out = np.array(Image.open(out_path))
    assert out[0, 7, 0] == 188


def test_composite_with_config_file(images, tmp_path):
    fg_path, mask_path = images
    config_path = tmp_path / "config.json"
    config_path.write_text(json.dumps({"mode": "yuv_full", "band_rows": 2}))
    out_path = tmp_path / "out.png"
    result = CliRunner().invoke(
        main,
        ["composite", str(fg_path), str(mask_path), "-o", str(out_path), "-c", str(config_path)],
    )
    assert result.exit_code == 0, result.output
    assert "yuv_full" in result.output


def test_composite_with_bad_config_values(images, tmp_path):
    fg_path, mask_path = images
    config_path = tmp_path / "config.json"
    config_path.write_text(json.dumps({"num_workers": "two"}))
    result = CliRunner().invoke(
        main,
        ["composite", str(fg_path), str(mask_path), "-o", str(tmp_path / "o.png"),
         "-c", str(config_path)],
    )
    assert result.exit_code != 0
    assert "num_workers must be an integer" in result.output
    assert isinstance(result.exception, SystemExit)


def test_composite_dimension_mismatch(images, tmp_path):
    fg_path, _ = images
    small_mask = tmp_path / "small.png"
    Image.new("L", (3, 3), 255).save(small_mask)
    out_path = tmp_path / "out.png"
    result = CliRunner().invoke(
        main, ["composite", str(fg_path), str(small_mask), "-o", str(out_path)]
    )
    assert result.exit_code != 0
    assert "mask is 3x3" in result.output
    assert not out_path.exists()


@pytest.mark.parametrize(
    "args, message",
    [
        (["-m", "hsv"], "Unknown blend mode"),
        (["-m", "linear", "-t", "rec2020"], "Unknown transfer function"),
        (["-b", "#zzzzzz"], "Not a hex color"),
        (["-w", "0"], "num_workers"),
        (["-m", "gamma", "-t", "srgb"], "does not take a transfer function"),
        (["-m", "yuv_full", "-t", "bogus"], "Unknown transfer function"),
    ],
)
def test_composite_bad_options(images, tmp_path, args, message):
    fg_path, mask_path = images
    result = CliRunner().invoke(
        main, ["composite", str(fg_path), str(mask_path), "-o", str(tmp_path / "o.png"), *args]
    )
    assert result.exit_code != 0
    assert message in result.output


def test_composite_unreadable_image(images, tmp_path):
    _, mask_path = images
    bogus = tmp_path / "bogus.png"
    bogus.write_text("not an image")
    result = CliRunner().invoke(
        main, ["composite", str(bogus), str(mask_path), "-o", str(tmp_path / "o.png")]
    )
    assert result.exit_code != 0
    assert "Failed to load image" in result.output


def test_compare_renders_every_mode(images, tmp_path):
    fg_path, mask_path = images
    out_dir = tmp_path / "modes"
    result = CliRunner().invoke(
        main, ["compare", str(fg_path), str(mask_path), "-o", str(out_dir), "-b", "0,0,255"]
    )
    assert result.exit_code == 0, result.output
    written = sorted(p.name for p in out_dir.glob("*.png"))
    assert len(written) == 11
    assert "fg_gamma.png" in written
    assert "fg_linear_gamma2_2.png" in written
    assert "fg_yuv_limited.png" in written


def test_curves_table():
    result = CliRunner().invoke(main, ["curves", "-t", "srgb", "-t", "hlg"])
    assert result.exit_code == 0, result.output
    assert "srgb" in result.output
    assert "hlg" in result.output
    assert "bt709" not in result.output


def test_curves_unknown_transfer():
    result = CliRunner().invoke(main, ["curves", "-t", "nope"])
    assert result.exit_code != 0


def test_modes_listing():
    result = CliRunner().invoke(main, ["modes"])
    assert result.exit_code == 0
    assert "yuv_limited" in result.output
    assert "gamma2.8" in result.output


def test_version():
    result = CliRunner().invoke(main, ["--version"])
    assert __version__ in result.output
