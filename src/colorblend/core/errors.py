"""
Errors for ColorBlend
=====================

Every failure the compositing core reports is a ``CompositeError``.
Numeric domain problems (negative bases, logarithms of values at or below
zero) are clamped away inside the curves and never surface here.
"""


class CompositeError(Exception):
    """Base class for compositing failures."""


class DimensionMismatch(CompositeError, ValueError):
    """Foreground and alpha mask buffers differ in width or height."""

    def __init__(self, foreground_shape, mask_shape):
        self.foreground_shape = tuple(foreground_shape)
        self.mask_shape = tuple(mask_shape)
        super().__init__(
            f"Foreground is {self.foreground_shape[1]}x{self.foreground_shape[0]} "
            f"but mask is {self.mask_shape[1]}x{self.mask_shape[0]}"
        )


class InvalidParameter(CompositeError, ValueError):
    """Unsupported blend mode, transfer function, range or malformed input."""
