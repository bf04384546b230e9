"""Utilities for ColorBlend."""

from colorblend.utils.color import hex_to_rgb, parse_color, rgb_to_hex
from colorblend.utils.image import load_image, load_mask, save_image

__all__ = [
    "hex_to_rgb",
    "parse_color",
    "rgb_to_hex",
    "load_image",
    "load_mask",
    "save_image",
]
