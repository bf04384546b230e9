"""
Transfer Functions for ColorBlend
=================================

Conversions between 8-bit display-encoded samples and normalized linear
light for the curves a compositor is likely to meet:

- sRGB (IEC 61966-2-1)
- BT.709 camera OETF
- PQ (SMPTE ST 2084)
- HLG (ARIB STD-B67)
- Generic power-law gamma (2.2, 2.4, 2.8 or any positive exponent)
- Identity (sample / 255, used for gamma-space blending)

All functions are vectorized over numpy arrays and also accept plain
Python scalars. Encoders clamp linear input to [0, 1] before any power or
logarithm is taken, then round half up to the nearest sample.
"""

import numbers
import re
from dataclasses import dataclass
from enum import Enum
from functools import partial
from typing import Callable, Dict, List, Optional, Tuple, Union

import numpy as np

from colorblend.core.errors import InvalidParameter


SAMPLE_MAX = 255.0

# PQ code values cover 0..10000 cd/m^2
PQ_PEAK_NITS = 10000.0

# SMPTE ST 2084 constants
PQ_M1 = 2610 / 16384
PQ_M2 = 2523 / 4096 * 128
PQ_C1 = 3424 / 4096
PQ_C2 = 2374 / 4096 * 128
PQ_C3 = 32 / 4096 * 128

# ARIB STD-B67 constants
HLG_A = 0.17883277
HLG_B = 0.28466892
HLG_C = 0.55991073

_TINY = np.finfo(np.float64).tiny

ArrayLike = Union[float, int, np.ndarray]


class TransferFunctionKind(Enum):
    """Supported transfer curves."""
    SRGB = "srgb"           # IEC 61966-2-1 (CICP 13)
    BT709 = "bt709"         # ITU-R BT.709 (CICP 1)
    PQ = "pq"               # SMPTE ST 2084 (CICP 16)
    HLG = "hlg"             # ARIB STD-B67 (CICP 18)
    GAMMA = "gamma"         # Pure power law, exponent carried separately
    IDENTITY = "identity"   # No curve


def round_half_up(values: np.ndarray) -> np.ndarray:
    """Round half up. Used for every float to sample conversion."""
    return np.floor(values + 0.5)


def quantize(values: ArrayLike) -> np.ndarray:
    """Clamp to [0, 255] and round half up to ``uint8``."""
    clipped = np.clip(np.asarray(values, dtype=np.float64), 0.0, SAMPLE_MAX)
    return round_half_up(clipped).astype(np.uint8)


# --- Curves on normalized [0, 1] values --------------------------------------

def _srgb_decode(c: np.ndarray) -> np.ndarray:
    return np.where(c <= 0.04045, c / 12.92, np.power((c + 0.055) / 1.055, 2.4))


def _srgb_encode(l: np.ndarray) -> np.ndarray:
    return np.where(l <= 0.0031308, l * 12.92, 1.055 * np.power(l, 1 / 2.4) - 0.055)


def _bt709_decode(c: np.ndarray) -> np.ndarray:
    return np.where(c < 0.081, c / 4.5, np.power((c + 0.099) / 1.099, 1 / 0.45))


def _bt709_encode(l: np.ndarray) -> np.ndarray:
    return np.where(l < 0.018, l * 4.5, 1.099 * np.power(l, 0.45) - 0.099)


# c is the code value as a fraction of PQ_PEAK_NITS
def _pq_decode(c: np.ndarray) -> np.ndarray:
    p = np.power(c, 1 / PQ_M2)
    return np.power(np.maximum(p - PQ_C1, 0.0), 1 / PQ_M1)


def _pq_encode(l: np.ndarray) -> np.ndarray:
    return np.power(np.power(l, PQ_M1) + PQ_C1, PQ_M2)


def _hlg_decode(e: np.ndarray) -> np.ndarray:
    return np.where(
        e <= 0.5,
        e * e / 3.0,
        (np.exp((e - HLG_C) / HLG_A) + HLG_B) / 12.0,
    )


def _hlg_encode(l: np.ndarray) -> np.ndarray:
    # np.where evaluates both branches; keep the log argument positive
    return np.where(
        l <= 1 / 12,
        np.sqrt(3.0 * l),
        HLG_A * np.log(np.maximum(12.0 * l - HLG_B, _TINY)) + HLG_C,
    )


def _gamma_decode(c: np.ndarray, exponent: float) -> np.ndarray:
    return np.power(c, exponent)


def _gamma_encode(l: np.ndarray, exponent: float) -> np.ndarray:
    return np.power(l, 1 / exponent)


def _identity(values: np.ndarray) -> np.ndarray:
    return values


_CURVES: Dict[TransferFunctionKind, Tuple[Callable, Callable]] = {
    TransferFunctionKind.SRGB: (_srgb_decode, _srgb_encode),
    TransferFunctionKind.BT709: (_bt709_decode, _bt709_encode),
    TransferFunctionKind.PQ: (_pq_decode, _pq_encode),
    TransferFunctionKind.HLG: (_hlg_decode, _hlg_encode),
    TransferFunctionKind.IDENTITY: (_identity, _identity),
}


@dataclass(frozen=True)
class TransferFunction:
    """
    A transfer curve with its decode/encode pair.

    ``exponent`` is only meaningful for ``TransferFunctionKind.GAMMA``.

    Example:
        >>> tf = TransferFunction.from_name("srgb")
        >>> tf.from_linear(tf.to_linear(200))
        200
        >>> TransferFunction.with_gamma(2.4).name
        'gamma2.4'
    """
    kind: TransferFunctionKind
    exponent: Optional[float] = None

    def __post_init__(self):
        if not isinstance(self.kind, TransferFunctionKind):
            raise InvalidParameter(f"Unsupported transfer function: {self.kind!r}")

        if self.kind == TransferFunctionKind.GAMMA:
            if (
                not isinstance(self.exponent, numbers.Real)
                or isinstance(self.exponent, bool)
                or not np.isfinite(self.exponent)
                or self.exponent <= 0
            ):
                raise InvalidParameter(
                    f"Gamma exponent must be a positive finite number, got {self.exponent!r}"
                )
            object.__setattr__(self, "exponent", float(self.exponent))
        elif self.exponent is not None:
            raise InvalidParameter(f"{self.kind.value} does not take an exponent")

    @classmethod
    def with_gamma(cls, exponent: float) -> "TransferFunction":
        """Power-law curve with the given exponent."""
        return cls(TransferFunctionKind.GAMMA, exponent)

    @classmethod
    def from_name(cls, name: str) -> "TransferFunction":
        """
        Parse a transfer function name.

        Accepts the short names (``srgb``, ``bt709``, ``pq``, ``hlg``,
        ``identity``), gamma forms (``gamma2.2``, ``gamma:2.6``,
        ``Gamma_2_4``) and the long CICP-style option ids such as
        ``sRGB_IEC_61966_2_1`` and ``BT_709``.

        Raises:
            InvalidParameter: If the name is not recognised
        """
        if not isinstance(name, str):
            raise InvalidParameter(f"Transfer function name must be a string, got {name!r}")

        key = name.strip().lower().replace("-", "_")
        if key in _ALIASES:
            return _ALIASES[key]

        match = re.fullmatch(r"gamma[_:]?(\d+(?:[._]\d+)?)", key)
        if match:
            return cls.with_gamma(float(match.group(1).replace("_", ".")))

        raise InvalidParameter(
            f"Unknown transfer function '{name}'. "
            f"Choose from: {', '.join(available_transfer_functions())}"
        )

    @classmethod
    def resolve(
        cls,
        value: Union["TransferFunction", TransferFunctionKind, str],
    ) -> "TransferFunction":
        """Coerce a name, kind or instance to a ``TransferFunction``."""
        if isinstance(value, TransferFunction):
            return value
        if isinstance(value, TransferFunctionKind):
            if value == TransferFunctionKind.GAMMA:
                raise InvalidParameter("GAMMA needs an exponent, use TransferFunction.with_gamma()")
            return cls(value)
        if isinstance(value, str):
            return cls.from_name(value)
        raise InvalidParameter(f"Unsupported transfer function: {value!r}")

    @property
    def name(self) -> str:
        if self.kind == TransferFunctionKind.GAMMA:
            return f"gamma{self.exponent:g}"
        return self.kind.value

    @property
    def _curves(self) -> Tuple[Callable, Callable]:
        if self.kind == TransferFunctionKind.GAMMA:
            return (
                partial(_gamma_decode, exponent=self.exponent),
                partial(_gamma_encode, exponent=self.exponent),
            )
        return _CURVES[self.kind]

    def to_linear(self, sample: ArrayLike) -> Union[float, np.ndarray]:
        """
        Decode 8-bit samples to normalized linear light.

        Args:
            sample: Sample value(s) in 0..255

        Returns:
            Linear light as float64 (a float for scalar input)
        """
        decode, _ = self._curves
        c = np.clip(np.asarray(sample, dtype=np.float64) / SAMPLE_MAX, 0.0, 1.0)
        linear = decode(c)

        if np.ndim(linear) == 0:
            return float(linear)
        return linear

    def from_linear(self, value: ArrayLike) -> Union[int, np.ndarray]:
        """
        Encode normalized linear light to 8-bit samples.

        Args:
            value: Linear light, clamped to [0, 1] before encoding

        Returns:
            ``uint8`` samples (an int for scalar input)
        """
        _, encode = self._curves
        linear = np.clip(np.asarray(value, dtype=np.float64), 0.0, 1.0)
        samples = quantize(encode(linear) * SAMPLE_MAX)

        if np.ndim(samples) == 0:
            return int(samples)
        return samples

    def __str__(self) -> str:
        return self.name


SRGB = TransferFunction(TransferFunctionKind.SRGB)
BT709 = TransferFunction(TransferFunctionKind.BT709)
PQ = TransferFunction(TransferFunctionKind.PQ)
HLG = TransferFunction(TransferFunctionKind.HLG)
IDENTITY = TransferFunction(TransferFunctionKind.IDENTITY)
GAMMA_2_2 = TransferFunction.with_gamma(2.2)
GAMMA_2_4 = TransferFunction.with_gamma(2.4)
GAMMA_2_8 = TransferFunction.with_gamma(2.8)

PRESETS: List[TransferFunction] = [
    SRGB, BT709, PQ, HLG, GAMMA_2_2, GAMMA_2_4, GAMMA_2_8, IDENTITY,
]

_ALIASES: Dict[str, TransferFunction] = {
    "srgb": SRGB,
    "srgb_iec_61966_2_1": SRGB,
    "iec_61966_2_1": SRGB,
    "bt709": BT709,
    "bt_709": BT709,
    "rec709": BT709,
    "pq": PQ,
    "st2084": PQ,
    "smpte_st_2084": PQ,
    "hlg": HLG,
    "arib_std_b67": HLG,
    "identity": IDENTITY,
    "linear": IDENTITY,
    "none": IDENTITY,
}


def available_transfer_functions() -> List[str]:
    """Names of the preset transfer functions."""
    return [tf.name for tf in PRESETS]


def to_linear(sample: ArrayLike, transfer: Union[TransferFunction, str] = SRGB):
    """Quick decode with a named or given transfer function."""
    return TransferFunction.resolve(transfer).to_linear(sample)


def from_linear(value: ArrayLike, transfer: Union[TransferFunction, str] = SRGB):
    """Quick encode with a named or given transfer function."""
    return TransferFunction.resolve(transfer).from_linear(value)
