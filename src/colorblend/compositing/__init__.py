"""
Compositing for ColorBlend
==========================

Blend-mode selection and per-pixel blending.
"""

from colorblend.compositing.compositor import (
    BlendFunction,
    BlendMode,
    BlendSpace,
    Compositor,
    CompositorConfig,
    available_blend_modes,
    blend_pixel,
    select_blend,
)

__all__ = [
    "BlendFunction",
    "BlendMode",
    "BlendSpace",
    "Compositor",
    "CompositorConfig",
    "available_blend_modes",
    "blend_pixel",
    "select_blend",
]
