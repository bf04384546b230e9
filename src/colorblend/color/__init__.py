"""
Color conversions for ColorBlend.

- Transfer functions (sRGB, BT.709, PQ, HLG, gamma, identity)
- BT.709 RGB <-> YUV in full and limited range
"""

from colorblend.color.transfer import (
    TransferFunction,
    TransferFunctionKind,
    available_transfer_functions,
    from_linear,
    quantize,
    to_linear,
    SRGB,
    BT709,
    PQ,
    HLG,
    IDENTITY,
    GAMMA_2_2,
    GAMMA_2_4,
    GAMMA_2_8,
)
from colorblend.color.yuv import YUVRange, rgb_to_yuv, yuv_to_rgb

__all__ = [
    "TransferFunction",
    "TransferFunctionKind",
    "available_transfer_functions",
    "from_linear",
    "quantize",
    "to_linear",
    "SRGB",
    "BT709",
    "PQ",
    "HLG",
    "IDENTITY",
    "GAMMA_2_2",
    "GAMMA_2_4",
    "GAMMA_2_8",
    "YUVRange",
    "rgb_to_yuv",
    "yuv_to_rgb",
]
