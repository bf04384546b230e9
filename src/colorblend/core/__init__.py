"""Core types shared by the ColorBlend modules."""

from colorblend.core.errors import CompositeError, DimensionMismatch, InvalidParameter

__all__ = [
    "CompositeError",
    "DimensionMismatch",
    "InvalidParameter",
]
