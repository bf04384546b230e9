"""
Configuration for ColorBlend
============================

Dataclass configs with JSON persistence. Defaults live in code; a JSON
file only needs the keys it overrides.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Union

from colorblend.compositing.compositor import BlendMode, CompositorConfig
from colorblend.core.errors import InvalidParameter


def _as_int(name: str, value: Any, minimum: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError, OverflowError) as e:
        raise InvalidParameter(f"{name} must be an integer, got {value!r}") from e

    if number < minimum:
        raise InvalidParameter(f"{name} must be >= {minimum}, got {value}")
    return number

@dataclass
class PipelineConfig:
    """Pixel pipeline configuration."""
    # Threading
    num_workers: int = 1                # 1 = serial
    band_rows: int = 64                 # Rows per work item
    parallel_threshold: int = 65536     # Min pixels before using workers

    # Blending
    compositor: CompositorConfig = field(default_factory=CompositorConfig)

    def __post_init__(self):
        self.num_workers = _as_int("num_workers", self.num_workers, minimum=1)
        self.band_rows = _as_int("band_rows", self.band_rows, minimum=1)
        self.parallel_threshold = _as_int(
            "parallel_threshold", self.parallel_threshold, minimum=0
        )

    @property
    def mode(self) -> BlendMode:
        return self.compositor.mode

    def to_dict(self) -> Dict[str, Any]:
        return {
            "num_workers": self.num_workers,
            "band_rows": self.band_rows,
            "parallel_threshold": self.parallel_threshold,
            "mode": self.compositor.mode.name,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PipelineConfig":
        """
        Build a config from a plain dict.

        Unknown keys are rejected so typos in config files do not go
        unnoticed.
        """
        known = {"num_workers", "band_rows", "parallel_threshold", "mode"}
        unknown = set(data) - known
        if unknown:
            raise InvalidParameter(f"Unknown config keys: {', '.join(sorted(unknown))}")

        defaults = cls()
        mode = data.get("mode")
        compositor = CompositorConfig(
            mode=BlendMode.from_name(mode) if mode is not None else defaults.mode,
        )

        return cls(
            num_workers=data.get("num_workers", defaults.num_workers),
            band_rows=data.get("band_rows", defaults.band_rows),
            parallel_threshold=data.get("parallel_threshold", defaults.parallel_threshold),
            compositor=compositor,
        )


def load_config(path: Union[str, Path]) -> PipelineConfig:
    """Load a ``PipelineConfig`` from a JSON file."""
    path = Path(path)

    with open(path, "r") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise InvalidParameter(f"Invalid config file {path}: {e}") from e

    if not isinstance(data, dict):
        raise InvalidParameter(f"Config file {path} must contain a JSON object")

    return PipelineConfig.from_dict(data)


def save_config(config: PipelineConfig, path: Union[str, Path]) -> None:
    """Save a ``PipelineConfig`` as JSON."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w") as f:
        json.dump(config.to_dict(), f, indent=2)
