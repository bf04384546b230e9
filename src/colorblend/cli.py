"""
CLI for ColorBlend
==================

Command-line interface for compositing images with a color-space-aware
alpha blend.
"""

import dataclasses
import logging
from pathlib import Path
from typing import Optional, Tuple

import click
import numpy as np
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn, BarColumn, TimeElapsedColumn
from rich.table import Table
from rich.panel import Panel

from colorblend import __version__
from colorblend.color.transfer import PRESETS, TransferFunction
from colorblend.compositing.compositor import BlendMode, BlendSpace, available_blend_modes
from colorblend.core.config import PipelineConfig, load_config
from colorblend.core.errors import CompositeError
from colorblend.pipeline.pixel import PixelPipeline
from colorblend.utils.color import parse_color, rgb_to_hex
from colorblend.utils.image import load_image, load_mask, save_image

console = Console()
logger = logging.getLogger(__name__)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _build_config(
    config_path: Optional[str],
    mode: Optional[str],
    transfer: Optional[str],
    workers: Optional[int],
) -> PipelineConfig:
    """Load the config file (if any) and apply command line overrides."""
    config = load_config(config_path) if config_path else PipelineConfig()

    if mode is None:
        # --transfer alone selects linear blending under that curve
        mode = BlendSpace.RGB_LINEAR if transfer is not None else config.mode

    blend_mode = BlendMode.resolve(mode, transfer)
    overrides = {"compositor": dataclasses.replace(config.compositor, mode=blend_mode)}
    if workers is not None:
        overrides["num_workers"] = workers

    return dataclasses.replace(config, **overrides)


def _load_inputs(foreground: str, mask: str) -> Tuple[np.ndarray, np.ndarray]:
    try:
        return load_image(foreground), load_mask(mask)
    except OSError as e:
        raise click.ClickException(f"Failed to load image: {e}")


@click.group()
@click.version_option(version=__version__, prog_name="ColorBlend")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging")
def main(verbose: bool):
    """
    ColorBlend - color-space-aware alpha compositing

    Blends a foreground over a background color through an alpha mask in
    gamma RGB, linear RGB (sRGB, BT.709, PQ, HLG, gamma) or BT.709 YUV.
    """
    _setup_logging(verbose)


@main.command()
@click.argument("foreground", type=click.Path(exists=True, dir_okay=False))
@click.argument("mask", type=click.Path(exists=True, dir_okay=False))
@click.option("-o", "--output", type=click.Path(dir_okay=False), required=True, help="Output image")
@click.option("-b", "--background", type=str, default="#000000", show_default=True,
              help="Background color: '#RRGGBB' or 'r,g,b'")
@click.option("-m", "--mode", type=str, default=None,
              help="Blend mode: gamma, linear, linear:<transfer>, yuv_full, yuv_limited")
@click.option("-t", "--transfer", type=str, default=None,
              help="Transfer function for linear blending (implies --mode linear)")
@click.option("-w", "--workers", type=int, default=None, help="Worker threads")
@click.option("-c", "--config", "config_path", type=click.Path(exists=True, dir_okay=False),
              help="JSON pipeline config")
def composite(
    foreground: str,
    mask: str,
    output: str,
    background: str,
    mode: Optional[str],
    transfer: Optional[str],
    workers: Optional[int],
    config_path: Optional[str],
):
    """
    Composite FOREGROUND over a background color through MASK.

    Examples:

        # Gamma-space blend over blue
        colorblend composite fg.png mask.png -o out.png -b "#0000ff"

        # Linear-light blend under PQ
        colorblend composite fg.png mask.png -o out.png -m linear -t pq
    """
    try:
        config = _build_config(config_path, mode, transfer, workers)
        bg = parse_color(background)
    except CompositeError as e:
        raise click.ClickException(str(e))

    fg_image, mask_image = _load_inputs(foreground, mask)

    console.print(Panel.fit(
        f"[bold blue]ColorBlend[/bold blue]\n"
        f"Foreground: {Path(foreground).name}\n"
        f"Mask: {Path(mask).name}\n"
        f"Background: {rgb_to_hex(bg)}\n"
        f"Mode: {escape(config.mode.name)}",
        title="Configuration"
    ))

    pipeline = PixelPipeline(config)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TimeElapsedColumn(),
        console=console,
    ) as progress:
        task = progress.add_task("Compositing...", total=None)

        def on_progress(done: int, total: int) -> None:
            progress.update(task, completed=done, total=total)

        try:
            result = pipeline.composite(fg_image, mask_image, bg, progress_callback=on_progress)
        except CompositeError as e:
            raise click.ClickException(str(e))

    save_image(result, output)
    logger.info("Wrote %s", output)

    table = Table(title="Composite")
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Size", f"{result.shape[1]}x{result.shape[0]}")
    table.add_row("Mode", escape(config.mode.name))
    table.add_row("Workers", str(config.num_workers))
    table.add_row("Output", str(output))
    console.print(table)


@main.command()
@click.argument("foreground", type=click.Path(exists=True, dir_okay=False))
@click.argument("mask", type=click.Path(exists=True, dir_okay=False))
@click.option("-o", "--output", type=click.Path(file_okay=False), required=True, help="Output directory")
@click.option("-b", "--background", type=str, default="#000000", show_default=True)
@click.option("-w", "--workers", type=int, default=1, show_default=True)
def compare(foreground: str, mask: str, output: str, background: str, workers: int):
    """
    Render every blend mode for the same inputs.

    Writes one image per mode into the output directory and reports how far
    each differs from gamma-space blending.
    """
    try:
        bg = parse_color(background)
        pipeline = PixelPipeline(PipelineConfig(num_workers=workers))
    except CompositeError as e:
        raise click.ClickException(str(e))

    fg_image, mask_image = _load_inputs(foreground, mask)
    output_dir = Path(output)
    output_dir.mkdir(parents=True, exist_ok=True)
    stem = Path(foreground).stem

    try:
        reference = pipeline.composite(fg_image, mask_image, bg, BlendMode.gamma())
    except CompositeError as e:
        raise click.ClickException(str(e))

    table = Table(title=f"Blend modes over {rgb_to_hex(bg)}")
    table.add_column("Mode", style="cyan")
    table.add_column("Mean |diff|", justify="right")
    table.add_column("Max |diff|", justify="right")
    table.add_column("File", style="green")

    for mode in available_blend_modes():
        result = pipeline.composite(fg_image, mask_image, bg, mode)
        diff = np.abs(result[..., :3].astype(np.int16) - reference[..., :3].astype(np.int16))

        safe_name = mode.name.replace("[", "_").replace("]", "").replace(".", "_")
        path = output_dir / f"{stem}_{safe_name}.png"
        save_image(result, path)
        logger.debug("Wrote %s", path)

        mean_diff = float(diff.mean()) if diff.size else 0.0
        max_diff = int(diff.max()) if diff.size else 0
        table.add_row(escape(mode.name), f"{mean_diff:.2f}", str(max_diff), path.name)

    console.print(table)


@main.command()
@click.option("-t", "--transfer", "transfers", type=str, multiple=True,
              help="Transfer function(s) to show (default: all presets)")
def curves(transfers: Tuple[str, ...]):
    """Show transfer functions and their 8-bit round-trip error."""
    try:
        selected = [TransferFunction.from_name(t) for t in transfers] if transfers else PRESETS
    except CompositeError as e:
        raise click.ClickException(str(e))

    samples = np.arange(256)
    shown = (64, 128, 192, 255)

    table = Table(title="Transfer Functions")
    table.add_column("Name", style="cyan")
    for sample in shown:
        table.add_column(f"L({sample})", justify="right")
    table.add_column("Max round-trip error", justify="right", style="green")

    for tf in selected:
        linear = tf.to_linear(samples)
        round_trip = tf.from_linear(linear).astype(np.int16)
        error = int(np.abs(round_trip - samples).max())
        table.add_row(tf.name, *(f"{linear[p]:.6g}" for p in shown), str(error))

    console.print(table)


@main.command()
def modes():
    """List blend modes and transfer function names."""
    table = Table(title="Blend Modes")
    table.add_column("Mode", style="cyan")
    table.add_column("Description")

    descriptions = {
        BlendSpace.RGB_GAMMA: "Blend the encoded samples directly",
        BlendSpace.RGB_LINEAR: "Decode, blend in linear light, re-encode (sRGB unless --transfer is given)",
        BlendSpace.YUV_FULL: "Blend in BT.709 YUV, full range",
        BlendSpace.YUV_LIMITED: "Blend in BT.709 YUV, limited range",
    }
    for space in BlendSpace:
        table.add_row(space.value, descriptions[space])

    console.print(table)
    console.print(f"Transfer functions: {', '.join(tf.name for tf in PRESETS)}, gamma:<exponent>")


if __name__ == "__main__":
    main()
