"""
YUV Conversion for ColorBlend
=============================

RGB <-> YUV with BT.709 luma/chroma coefficients, in two byte-range
conventions:

- Full range: Y, U, V all in 0..255, chroma centred on 128
- Limited (studio swing): Y in 16..235, U/V in 16..240, chroma centred on 128

The functions work on the last axis of any ``(..., 3)`` array, so one pixel
and a whole image go through the same matrices. Nothing is clamped here;
out-of-range results are left for the caller to clamp at output.
"""

from enum import Enum
from typing import Dict, Sequence, Union

import numpy as np

from colorblend.core.errors import InvalidParameter


class YUVRange(Enum):
    """YUV quantization ranges."""
    FULL = "full"         # 0-255 on every channel
    LIMITED = "limited"   # Studio swing, 16-235 luma / 16-240 chroma

    @classmethod
    def from_name(cls, name: Union[str, "YUVRange"]) -> "YUVRange":
        if isinstance(name, YUVRange):
            return name
        key = str(name).strip().lower()
        for member in cls:
            if key in (member.value, member.name.lower(), f"yuv_{member.value}"):
                return member
        if key in ("studio", "tv"):
            return cls.LIMITED
        if key in ("pc", "jpeg"):
            return cls.FULL
        raise InvalidParameter(f"Unknown YUV range '{name}', expected 'full' or 'limited'")


# Forward matrices act on RGB in 0..255; offsets are added afterwards.
RGB_TO_YUV: Dict[YUVRange, np.ndarray] = {
    YUVRange.FULL: np.array([
        [0.2126, 0.7152, 0.0722],
        [-0.09991, -0.33609, 0.436],
        [0.615, -0.55861, -0.05639],
    ]),
    YUVRange.LIMITED: np.array([
        [0.182585, 0.614231, 0.062002],
        [-0.100644, -0.338573, 0.439217],
        [0.439217, -0.398942, -0.040275],
    ]),
}

# Inverse matrices act on (Y - offset_y, U - 128, V - 128).
YUV_TO_RGB: Dict[YUVRange, np.ndarray] = {
    YUVRange.FULL: np.array([
        [1.0, 0.0, 1.28033],
        [1.0, -0.21482, -0.38059],
        [1.0, 2.12798, 0.0],
    ]),
    # BT.709 studio swing, the exact inverse of the forward matrix above
    YUVRange.LIMITED: np.array([
        [1.164384, 0.0, 1.792741],
        [1.164384, -0.213249, -0.532909],
        [1.164384, 2.112402, 0.0],
    ]),
}

YUV_OFFSETS: Dict[YUVRange, np.ndarray] = {
    YUVRange.FULL: np.array([0.0, 128.0, 128.0]),
    YUVRange.LIMITED: np.array([16.0, 128.0, 128.0]),
}


def _as_triples(values: Union[Sequence[float], np.ndarray]) -> np.ndarray:
    arr = np.asarray(values, dtype=np.float64)
    if arr.ndim == 0 or arr.shape[-1] != 3:
        raise InvalidParameter(f"Expected (..., 3) color values, got shape {arr.shape}")
    return arr


def rgb_to_yuv(
    rgb: Union[Sequence[float], np.ndarray],
    yuv_range: Union[YUVRange, str] = YUVRange.FULL,
) -> np.ndarray:
    """
    Convert display-encoded RGB to YUV.

    Args:
        rgb: RGB values in 0..255, shape (..., 3)
        yuv_range: Full or limited range output

    Returns:
        float64 YUV array with the same shape
    """
    yuv_range = YUVRange.from_name(yuv_range)
    arr = _as_triples(rgb)
    return arr @ RGB_TO_YUV[yuv_range].T + YUV_OFFSETS[yuv_range]


def yuv_to_rgb(
    yuv: Union[Sequence[float], np.ndarray],
    yuv_range: Union[YUVRange, str] = YUVRange.FULL,
) -> np.ndarray:
    """
    Convert YUV back to RGB floats in nominal 0..255.

    Args:
        yuv: YUV values, shape (..., 3)
        yuv_range: Range the values are encoded in

    Returns:
        float64 RGB array, unclamped
    """
    yuv_range = YUVRange.from_name(yuv_range)
    arr = _as_triples(yuv)
    return (arr - YUV_OFFSETS[yuv_range]) @ YUV_TO_RGB[yuv_range].T
