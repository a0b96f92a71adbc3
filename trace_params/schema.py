"""Parameter value types: user-facing and engine-facing configs.

Two vocabularies, kept apart on purpose:
    - UserConfig: what a person types. Degrees, linear speckle size in px,
      color precision in significant bits. Validated pydantic model.
    - EngineConfig: what the vectorization engine consumes. Radians,
      speckle area in px², color precision *loss* in bits. Frozen dataclass,
      produced only by ``trace_params.derive.derive``.

Closed ranges live in ``PARAMETER_RANGES`` and are shared by the string
validators and the pydantic ``Field`` constraints, so a UserConfig can
never hold an out-of-range value no matter how it was constructed.
Numeric fields are strict: booleans and numeric strings are rejected.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

Number = Union[int, float]

# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class ColorMode(str, Enum):
    """True color tracing or binary (black & white) tracing."""

    COLOR = "color"
    BINARY = "binary"


class Hierarchical(str, Enum):
    """Color-region layering; only meaningful for ``ColorMode.COLOR``."""

    STACKED = "stacked"
    CUTOUT = "cutout"


class PathSimplifyMode(str, Enum):
    """Curve fitting applied to traced boundaries.

    ``NONE`` keeps raw per-pixel paths (the ``pixel`` command-line token).
    """

    POLYGON = "polygon"
    SPLINE = "spline"
    NONE = "none"


class Preset(str, Enum):
    BW = "bw"
    POSTER = "poster"
    PHOTO = "photo"


# ---------------------------------------------------------------------------
# Closed ranges, keyed by UserConfig attribute. ``None`` = unbounded.
# ---------------------------------------------------------------------------

PARAMETER_RANGES: Dict[str, Tuple[Number, Optional[Number]]] = {
    'filter_speckle': (1, 16),
    'color_precision': (1, 8),
    'gradient_step': (0, 255),
    'corner_threshold_deg': (0, 180),
    'segment_length': (3.5, 10.0),
    'splice_threshold_deg': (0, 180),
    'path_precision': (0, None),
}

# Significant bits per RGB channel; precision loss is measured against this.
CHANNEL_BITS = 8


def _ranged(default: Any, attr: str, description: str) -> Any:
    lo, hi = PARAMETER_RANGES[attr]
    return Field(default, ge=lo, le=hi, strict=True, description=description)


# ---------------------------------------------------------------------------
# User-facing config
# ---------------------------------------------------------------------------


class UserConfig(BaseModel):
    """Validated tracing parameters as supplied by the user.

    Angles in degrees, speckle size in px (linear), precision in bits.
    Instances are immutable. Make variants by constructing a new
    UserConfig, not with ``model_copy(update=...)``, which skips the range
    constraints.
    """

    model_config = ConfigDict(frozen=True, extra='forbid')

    input_path: Path = Field(Path(), description="Path to input raster image")
    output_path: Path = Field(Path(), description="Path to output vector graphics")
    color_mode: ColorMode = Field(ColorMode.COLOR, description="Color or binary tracing")
    hierarchical: Hierarchical = Field(Hierarchical.STACKED, description="Stacked or cutout layers")
    mode: PathSimplifyMode = Field(PathSimplifyMode.SPLINE, description="Curve fitting mode")
    filter_speckle: int = _ranged(4, 'filter_speckle', "Discard patches smaller than X px in size")
    color_precision: int = _ranged(6, 'color_precision', "Significant bits per RGB channel")
    gradient_step: int = _ranged(16, 'gradient_step', "Color difference between gradient layers")
    corner_threshold_deg: int = _ranged(
        60, 'corner_threshold_deg', "Minimum momentary angle (deg) to be considered a corner"
    )
    segment_length: float = _ranged(
        4.0, 'segment_length', "Subdivide-smooth until all segments are shorter than this (px)"
    )
    splice_threshold_deg: int = _ranged(
        45, 'splice_threshold_deg', "Minimum angle displacement (deg) to splice a spline"
    )
    path_precision: Optional[int] = _ranged(
        8, 'path_precision', "Decimal places in path strings; None = engine default"
    )
    max_iterations: int = Field(10, ge=1, strict=True, description="Subdivide-smooth iteration cap")


# ---------------------------------------------------------------------------
# Engine-facing config
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class EngineConfig:
    """Parameters in the units the vectorization engine expects.

    Parameters
    ----------
    filter_speckle_area : int
        Minimum patch area in px² (speckle size squared).
    color_precision_loss : int
        Bits discarded per channel, ``8 - color_precision``, in [0, 7].
    corner_threshold_rad, splice_threshold_rad : float
        Angle thresholds in radians.
    """

    input_path: Path
    output_path: Path
    color_mode: ColorMode
    hierarchical: Hierarchical
    mode: PathSimplifyMode
    filter_speckle_area: int
    color_precision_loss: int
    gradient_step: int
    corner_threshold_rad: float
    segment_length: float
    max_iterations: int
    splice_threshold_rad: float
    path_precision: Optional[int]

    def to_dict(self) -> Dict[str, Any]:
        """Plain mapping with paths and enums as strings (YAML/JSON safe)."""
        out = asdict(self)
        for key, value in out.items():
            if isinstance(value, Enum):
                out[key] = value.value
            elif isinstance(value, Path):
                out[key] = str(value)
        return out
