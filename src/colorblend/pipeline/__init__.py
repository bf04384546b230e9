"""
Processing Pipeline for ColorBlend
==================================

Whole-buffer compositing, serial or banded over worker threads.
"""

from colorblend.pipeline.pixel import PixelPipeline, composite

__all__ = [
    "PixelPipeline",
    "composite",
]
