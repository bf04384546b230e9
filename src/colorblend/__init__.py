"""
ColorBlend - Color-Space-Aware Alpha Compositing
================================================

Composites a foreground image over a background color through an alpha
mask, blending in a selectable working representation:

- Gamma-encoded RGB (blend the stored samples)
- Linear RGB under sRGB, BT.709, PQ (ST 2084), HLG (ARIB STD-B67) or a
  generic power-law gamma
- BT.709 YUV in full or limited (studio) range

The result is display-ready 8-bit RGBA with an opaque alpha channel.
"""

__version__ = "1.0.0"

# Color
from colorblend.color.transfer import TransferFunction, TransferFunctionKind
from colorblend.color.yuv import YUVRange, rgb_to_yuv, yuv_to_rgb

# Compositing
from colorblend.compositing.compositor import (
    BlendMode,
    BlendSpace,
    Compositor,
    CompositorConfig,
    blend_pixel,
    select_blend,
)

# Pipeline
from colorblend.core.config import PipelineConfig, load_config, save_config
from colorblend.pipeline.pixel import PixelPipeline, composite

# Errors
from colorblend.core.errors import CompositeError, DimensionMismatch, InvalidParameter

__all__ = [
    # Color
    "TransferFunction",
    "TransferFunctionKind",
    "YUVRange",
    "rgb_to_yuv",
    "yuv_to_rgb",
    # Compositing
    "BlendMode",
    "BlendSpace",
    "Compositor",
    "CompositorConfig",
    "blend_pixel",
    "select_blend",
    # Pipeline
    "PipelineConfig",
    "PixelPipeline",
    "composite",
    "load_config",
    "save_config",
    # Errors
    "CompositeError",
    "DimensionMismatch",
    "InvalidParameter",
    # Meta
    "__version__",
]
