"""
Compositor for ColorBlend
=========================

Blends a foreground over a background with a single linear alpha, in one
of four working representations:

- RGB_GAMMA: directly on the display-encoded samples
- RGB_LINEAR: in linear light under a chosen transfer function
- YUV_FULL: in BT.709 YUV, full range
- YUV_LIMITED: in BT.709 YUV, limited (studio) range

The blend mode is resolved once into a vectorized ``BlendFunction`` which
is then applied unchanged to every pixel, tile or band. The output alpha
is always fully opaque.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple, Union

import numpy as np

from colorblend.color.transfer import (
    PRESETS,
    SRGB,
    TransferFunction,
    TransferFunctionKind,
    quantize,
)
from colorblend.color.yuv import YUVRange, rgb_to_yuv, yuv_to_rgb
from colorblend.core.errors import InvalidParameter


OPAQUE = 255

# (foreground RGB, background RGB, alpha) -> uint8 RGB
BlendFunction = Callable[[np.ndarray, np.ndarray, np.ndarray], np.ndarray]


class BlendSpace(Enum):
    """Working representation for the blend."""
    RGB_GAMMA = "gamma"            # Encoded samples, no linearization
    RGB_LINEAR = "linear"          # Linear light under a transfer function
    YUV_FULL = "yuv_full"          # BT.709 YUV, 0-255
    YUV_LIMITED = "yuv_limited"    # BT.709 YUV, 16-235/240

    @classmethod
    def from_name(cls, name: Union[str, "BlendSpace"]) -> "BlendSpace":
        if isinstance(name, BlendSpace):
            return name
        if not isinstance(name, str):
            raise InvalidParameter(f"Unsupported blend mode: {name!r}")

        key = name.strip().lower().replace("-", "_")
        aliases = {
            "gamma": cls.RGB_GAMMA,
            "rgb_gamma": cls.RGB_GAMMA,
            "gamma_space_blending": cls.RGB_GAMMA,
            "linear": cls.RGB_LINEAR,
            "rgb_linear": cls.RGB_LINEAR,
            "yuv_full": cls.YUV_FULL,
            "yuv_limited": cls.YUV_LIMITED,
        }
        if key not in aliases:
            raise InvalidParameter(
                f"Unknown blend mode '{name}'. "
                f"Choose from: {', '.join(space.value for space in cls)}"
            )
        return aliases[key]


@dataclass(frozen=True)
class BlendMode:
    """
    A blend space plus, for RGB_LINEAR, its transfer function.

    Example:
        >>> BlendMode.linear("pq").name
        'linear[pq]'
        >>> BlendMode.from_name("yuv-limited").space
        <BlendSpace.YUV_LIMITED: 'yuv_limited'>
    """
    space: BlendSpace
    transfer: Optional[TransferFunction] = None

    def __post_init__(self):
        if not isinstance(self.space, BlendSpace):
            raise InvalidParameter(f"Unsupported blend mode: {self.space!r}")

        if self.space == BlendSpace.RGB_LINEAR:
            transfer = SRGB if self.transfer is None else self.transfer
            object.__setattr__(self, "transfer", TransferFunction.resolve(transfer))
        elif self.transfer is not None:
            raise InvalidParameter(
                f"Blend mode '{self.space.value}' does not take a transfer function"
            )

    @classmethod
    def gamma(cls) -> "BlendMode":
        return cls(BlendSpace.RGB_GAMMA)

    @classmethod
    def linear(cls, transfer: Union[TransferFunction, TransferFunctionKind, str] = SRGB) -> "BlendMode":
        return cls(BlendSpace.RGB_LINEAR, TransferFunction.resolve(transfer))

    @classmethod
    def yuv(cls, yuv_range: Union[YUVRange, str] = YUVRange.FULL) -> "BlendMode":
        if YUVRange.from_name(yuv_range) == YUVRange.FULL:
            return cls(BlendSpace.YUV_FULL)
        return cls(BlendSpace.YUV_LIMITED)

    @classmethod
    def from_name(cls, name: str) -> "BlendMode":
        """
        Parse ``gamma``, ``yuv_full``, ``yuv_limited``, ``linear``,
        ``linear:<transfer>`` or ``linear[<transfer>]``.

        Linear blending without a transfer function uses sRGB, whether the
        mode is given as ``"linear"``, ``BlendSpace.RGB_LINEAR`` or
        ``BlendMode(BlendSpace.RGB_LINEAR)``.

        Raises:
            InvalidParameter: For an unknown mode, or a transfer function
                attached to a mode other than linear
        """
        if isinstance(name, BlendMode):
            return name
        if not isinstance(name, str):
            raise InvalidParameter(f"Unsupported blend mode: {name!r}")

        text = name.strip()
        transfer = None
        if "[" in text and text.endswith("]"):
            text, transfer = text[:-1].split("[", 1)
        elif ":" in text:
            text, transfer = text.split(":", 1)

        space = BlendSpace.from_name(text)
        if space == BlendSpace.RGB_LINEAR:
            return cls.linear(transfer or SRGB)
        if transfer:
            raise InvalidParameter(f"Blend mode '{space.value}' does not take a transfer function")
        return cls(space)

    @classmethod
    def from_options(cls, color_space: str, transfer: str) -> "BlendMode":
        """
        Build a mode from a (color space, transfer function) selector pair.

        ``color_space`` is ``RGB``, ``YUV_Full`` or ``YUV_Limited``. For
        RGB, ``Gamma_Space_Blending`` selects gamma-space blending and any
        other transfer name selects linear blending under that curve. The
        transfer selector is ignored for YUV.
        """
        if not isinstance(color_space, str) or not isinstance(transfer, str):
            raise InvalidParameter(
                f"Color space and transfer must be names, got {color_space!r}, {transfer!r}"
            )

        key = color_space.strip().lower().replace("-", "_")
        if key == "rgb":
            if transfer.strip().lower() == "gamma_space_blending":
                return cls.gamma()
            return cls.linear(transfer)
        space = BlendSpace.from_name(key)
        if space not in (BlendSpace.YUV_FULL, BlendSpace.YUV_LIMITED):
            raise InvalidParameter(f"Unknown color space '{color_space}'")
        return cls(space)

    @classmethod
    def resolve(
        cls,
        mode: Union["BlendMode", BlendSpace, str],
        transfer: Optional[Union[TransferFunction, TransferFunctionKind, str]] = None,
    ) -> "BlendMode":
        """
        Coerce a mode and an optional separate transfer function.

        A separate transfer function overrides the one carried by a linear
        mode. It is always validated, and passing one with any other mode
        raises ``InvalidParameter``.
        """
        tf = TransferFunction.resolve(transfer) if transfer is not None else None

        if isinstance(mode, BlendMode):
            resolved = mode
        elif isinstance(mode, BlendSpace):
            resolved = cls(mode)
        elif isinstance(mode, str):
            resolved = cls.from_name(mode)
        else:
            raise InvalidParameter(f"Unsupported blend mode: {mode!r}")

        if tf is None:
            return resolved
        if resolved.space != BlendSpace.RGB_LINEAR:
            raise InvalidParameter(
                f"Blend mode '{resolved.space.value}' does not take a transfer function"
            )
        return cls.linear(tf)

    @property
    def name(self) -> str:
        if self.space == BlendSpace.RGB_LINEAR:
            return f"{self.space.value}[{self.transfer.name}]"
        return self.space.value

    def __str__(self) -> str:
        return self.name


def available_blend_modes() -> List[BlendMode]:
    """Every mode with each preset transfer function for linear blending."""
    modes = [BlendMode.gamma()]
    modes.extend(BlendMode.linear(tf) for tf in PRESETS)
    modes.extend([BlendMode(BlendSpace.YUV_FULL), BlendMode(BlendSpace.YUV_LIMITED)])
    return modes


# --- Blend kernels -----------------------------------------------------------

def _blend_gamma(fg: np.ndarray, bg: np.ndarray, alpha: np.ndarray) -> np.ndarray:
    a = alpha[..., np.newaxis]
    return quantize(fg * a + bg * (1.0 - a))


def _linear_kernel(transfer: TransferFunction) -> BlendFunction:
    def blend(fg: np.ndarray, bg: np.ndarray, alpha: np.ndarray) -> np.ndarray:
        a = alpha[..., np.newaxis]
        mixed = transfer.to_linear(fg) * a + transfer.to_linear(bg) * (1.0 - a)
        return np.asarray(transfer.from_linear(mixed), dtype=np.uint8)

    return blend


def _yuv_kernel(yuv_range: YUVRange) -> BlendFunction:
    def blend(fg: np.ndarray, bg: np.ndarray, alpha: np.ndarray) -> np.ndarray:
        a = alpha[..., np.newaxis]
        mixed = rgb_to_yuv(fg, yuv_range) * a + rgb_to_yuv(bg, yuv_range) * (1.0 - a)
        return quantize(yuv_to_rgb(mixed, yuv_range))

    return blend


def select_blend(
    mode: Union[BlendMode, BlendSpace, str],
    transfer: Optional[Union[TransferFunction, TransferFunctionKind, str]] = None,
) -> BlendFunction:
    """
    Resolve a blend mode into a vectorized blend function.

    The returned function takes foreground RGB of shape (..., 3), a
    background broadcastable to it, and alpha of shape (...). Alpha is
    clamped to [0, 1]. Channels beyond the third are ignored.

    Raises:
        InvalidParameter: For an unsupported mode or transfer function
    """
    mode = BlendMode.resolve(mode, transfer)

    if mode.space == BlendSpace.RGB_GAMMA:
        kernel = _blend_gamma
    elif mode.space == BlendSpace.RGB_LINEAR:
        kernel = _linear_kernel(mode.transfer)
    elif mode.space == BlendSpace.YUV_FULL:
        kernel = _yuv_kernel(YUVRange.FULL)
    elif mode.space == BlendSpace.YUV_LIMITED:
        kernel = _yuv_kernel(YUVRange.LIMITED)
    else:
        raise InvalidParameter(f"Unsupported blend mode: {mode!r}")

    def blend(foreground, background, alpha) -> np.ndarray:
        fg = np.asarray(foreground, dtype=np.float64)[..., :3]
        bg = np.asarray(background, dtype=np.float64)[..., :3]
        a = np.clip(np.asarray(alpha, dtype=np.float64), 0.0, 1.0)
        return kernel(fg, bg, a)

    return blend


def _as_pixel(values: Union[Sequence[int], np.ndarray], label: str) -> np.ndarray:
    arr = np.asarray(values)
    if arr.shape not in ((3,), (4,)):
        raise InvalidParameter(f"{label} must be an RGB or RGBA triple, got shape {arr.shape}")
    return arr


def blend_pixel(
    fg: Union[Sequence[int], np.ndarray],
    bg: Union[Sequence[int], np.ndarray],
    alpha: float,
    mode: Union[BlendMode, BlendSpace, str],
    transfer: Optional[Union[TransferFunction, TransferFunctionKind, str]] = None,
) -> Tuple[int, int, int, int]:
    """
    Blend a single foreground pixel over a background pixel.

    Args:
        fg: Foreground (R, G, B) or (R, G, B, A); its alpha is ignored
        bg: Background (R, G, B)
        alpha: Linear coverage in [0, 1], clamped if outside
        mode: Blend mode
        transfer: Transfer function when ``mode`` is RGB_LINEAR

    Returns:
        Opaque (R, G, B, 255)
    """
    fg = _as_pixel(fg, "Foreground pixel")
    bg = _as_pixel(bg, "Background pixel")
    r, g, b = select_blend(mode, transfer)(fg, bg, alpha)
    return int(r), int(g), int(b), OPAQUE


@dataclass
class CompositorConfig:
    """Compositor configuration."""
    mode: BlendMode = field(default_factory=BlendMode.gamma)


class Compositor:
    """
    Per-pixel blending with a fixed blend mode.

    Example:
        >>> compositor = Compositor(CompositorConfig(mode=BlendMode.linear("srgb")))
        >>> compositor.blend_pixel((255, 255, 255), (0, 0, 0), 0.5)
        (188, 188, 188, 255)
    """

    def __init__(self, config: Optional[CompositorConfig] = None):
        self.config = config or CompositorConfig()
        self.mode = BlendMode.resolve(self.config.mode)
        self._blend = select_blend(self.mode)

    def blend(
        self,
        foreground: np.ndarray,
        background: Union[Sequence[int], np.ndarray],
        alpha: np.ndarray,
    ) -> np.ndarray:
        """
        Blend an array of foreground pixels.

        Args:
            foreground: RGB(A) samples, shape (..., 3|4)
            background: RGB samples broadcastable to the foreground
            alpha: Linear alpha, shape (...)

        Returns:
            uint8 RGB, shape (..., 3)
        """
        return self._blend(foreground, background, alpha)

    def blend_pixel(
        self,
        fg: Union[Sequence[int], np.ndarray],
        bg: Union[Sequence[int], np.ndarray],
        alpha: float,
    ) -> Tuple[int, int, int, int]:
        fg = _as_pixel(fg, "Foreground pixel")
        bg = _as_pixel(bg, "Background pixel")
        r, g, b = self._blend(fg, bg, alpha)
        return int(r), int(g), int(b), OPAQUE
