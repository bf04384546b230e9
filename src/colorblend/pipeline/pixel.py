"""
Pixel Pipeline for ColorBlend
=============================

Drives the compositor over a whole foreground buffer and its alpha mask.

The blend function is selected once per call and then applied to bands of
rows. Every output pixel depends only on its own foreground pixel and mask
sample, so bands can run on worker threads, each writing a disjoint slice
of the preallocated output.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Callable, List, Optional, Sequence, Tuple, Union

import numpy as np

from colorblend.color.transfer import TransferFunction, TransferFunctionKind
from colorblend.compositing.compositor import (
    OPAQUE,
    BlendMode,
    BlendSpace,
    select_blend,
)
from colorblend.core.config import PipelineConfig
from colorblend.core.errors import DimensionMismatch, InvalidParameter

logger = logging.getLogger(__name__)


def _check_foreground(foreground: np.ndarray) -> np.ndarray:
    fg = np.asarray(foreground)
    if fg.ndim != 3 or fg.shape[-1] not in (3, 4):
        raise InvalidParameter(
            f"Foreground must be HxWx3 or HxWx4, got shape {fg.shape}"
        )
    return fg


def _check_mask(mask: np.ndarray) -> np.ndarray:
    mask = np.asarray(mask)
    if mask.ndim == 2:
        return mask
    if mask.ndim == 3 and mask.shape[-1] >= 1:
        return mask[..., 0]
    raise InvalidParameter(f"Mask must be HxW or HxWxC, got shape {mask.shape}")


def _check_background(background: Union[Sequence[int], np.ndarray]) -> np.ndarray:
    bg = np.asarray(background, dtype=np.float64)
    if bg.shape not in ((3,), (4,)):
        raise InvalidParameter(
            f"Background must be an RGB triple, got {tuple(np.ravel(bg))}"
        )
    if not np.all(np.isfinite(bg)) or bg.min() < 0 or bg.max() > 255:
        raise InvalidParameter(
            f"Background samples must be within 0-255, got {tuple(bg[:3])}"
        )
    return bg[:3]


class PixelPipeline:
    """
    Composites a foreground over a solid background through an alpha mask.

    Example:
        >>> pipeline = PixelPipeline(PipelineConfig(num_workers=4))
        >>> out = pipeline.composite(
        ...     foreground,                  # HxWx4 uint8
        ...     mask,                        # HxWx4 uint8, red channel used
        ...     background=(0, 0, 255),
        ...     mode=BlendMode.linear("srgb"),
        ... )
        >>> out.shape
        (480, 640, 4)
    """

    def __init__(self, config: Optional[PipelineConfig] = None):
        self.config = config or PipelineConfig()

    def composite(
        self,
        foreground: np.ndarray,
        mask: np.ndarray,
        background: Union[Sequence[int], np.ndarray],
        mode: Optional[Union[BlendMode, BlendSpace, str]] = None,
        transfer: Optional[Union[TransferFunction, TransferFunctionKind, str]] = None,
        progress_callback: Optional[Callable[[int, int], None]] = None,
    ) -> np.ndarray:
        """
        Composite a full buffer.

        Args:
            foreground: HxWx3 or HxWx4 uint8 samples; foreground alpha is ignored
            mask: HxW or HxWxC samples; channel 0 is the linear alpha
            background: RGB triple in 0-255
            mode: Blend mode, defaults to the configured one
            transfer: Transfer function for linear blending
            progress_callback: Called with (bands_done, bands_total)

        Returns:
            HxWx4 uint8 buffer with alpha 255

        Raises:
            DimensionMismatch: If foreground and mask sizes differ
            InvalidParameter: For malformed buffers, background or mode
        """
        fg = _check_foreground(foreground)
        alpha_source = _check_mask(mask)

        if fg.shape[:2] != alpha_source.shape[:2]:
            raise DimensionMismatch(fg.shape, alpha_source.shape)

        bg = _check_background(background)
        mode = BlendMode.resolve(mode if mode is not None else self.config.mode, transfer)
        blend = select_blend(mode)

        height, width = fg.shape[:2]
        output = np.empty((height, width, 4), dtype=np.uint8)
        output[..., 3] = OPAQUE

        bands = self._bands(height)
        workers = self._worker_count(height * width, len(bands))

        logger.debug(
            "Compositing %dx%d in %s over %s: %d bands, %d workers",
            width, height, mode.name, tuple(int(v) for v in bg), len(bands), workers,
        )

        def process_band(band: Tuple[int, int]) -> None:
            start, stop = band
            alpha = alpha_source[start:stop].astype(np.float64) / 255.0
            output[start:stop, :, :3] = blend(fg[start:stop], bg, alpha)

        if workers > 1:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                futures = [executor.submit(process_band, band) for band in bands]

                completed = 0
                for future in as_completed(futures):
                    future.result()
                    completed += 1

                    if progress_callback:
                        progress_callback(completed, len(bands))
        else:
            for completed, band in enumerate(bands, start=1):
                process_band(band)

                if progress_callback:
                    progress_callback(completed, len(bands))

        return output

    def _bands(self, height: int) -> List[Tuple[int, int]]:
        """Split rows into (start, stop) bands."""
        step = self.config.band_rows
        return [(start, min(start + step, height)) for start in range(0, height, step)]

    def _worker_count(self, num_pixels: int, num_bands: int) -> int:
        if self.config.num_workers <= 1 or num_pixels < self.config.parallel_threshold:
            return 1
        return max(1, min(self.config.num_workers, num_bands))


def composite(
    foreground: np.ndarray,
    mask: np.ndarray,
    background: Union[Sequence[int], np.ndarray],
    mode: Union[BlendMode, BlendSpace, str] = BlendSpace.RGB_GAMMA,
    transfer: Optional[Union[TransferFunction, TransferFunctionKind, str]] = None,
    num_workers: int = 1,
) -> np.ndarray:
    """
    Quick compositing with a default pipeline.

    Args:
        foreground: HxWx3 or HxWx4 uint8 image
        mask: Alpha mask of the same size
        background: RGB triple
        mode: Blend mode
        transfer: Transfer function for linear blending
        num_workers: Worker threads

    Returns:
        HxWx4 uint8 composite
    """
    pipeline = PixelPipeline(PipelineConfig(num_workers=num_workers))
    return pipeline.composite(foreground, mask, background, mode, transfer)
