"""
Image Utilities for ColorBlend
==============================

File I/O for the command line. The compositing core only sees arrays.
"""

from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image


def load_image(path: Union[str, Path], mode: str = "RGBA") -> np.ndarray:
    """
    Load an image from disk as 8-bit samples.

    Args:
        path: Image file path
        mode: Pillow mode to convert to (RGBA for foregrounds, masks keep
            their first channel as alpha either way)

    Returns:
        uint8 array, HxWxC
    """
    path = Path(path)

    with Image.open(path) as img:
        img = img.convert(mode)
        arr = np.array(img, dtype=np.uint8)

    if arr.ndim == 2:
        arr = arr[..., np.newaxis]
    return arr


def load_mask(path: Union[str, Path]) -> np.ndarray:
    """
    Load an alpha mask.

    Grayscale masks are returned as HxWx1; color masks as HxWx4 with the
    red channel carrying the alpha.
    """
    path = Path(path)

    with Image.open(path) as img:
        mode = "L" if img.mode in ("1", "L", "I", "I;16", "F") else "RGBA"

    return load_image(path, mode=mode)


def save_image(image: np.ndarray, path: Union[str, Path]) -> None:
    """
    Save an 8-bit image to disk.

    Args:
        image: HxW, HxWx3 or HxWx4 uint8 array
        path: Output path; the format follows the suffix
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    if image.dtype != np.uint8:
        image = np.clip(image, 0, 255).astype(np.uint8)

    if image.ndim == 3 and image.shape[-1] == 4 and path.suffix.lower() in (".jpg", ".jpeg"):
        image = image[..., :3]

    Image.fromarray(image).save(path)
