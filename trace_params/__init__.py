"""trace-params: tracing-parameter acquisition for raster-to-vector conversion.

Gathers tracing parameters (flags, YAML file, or a named preset), validates
them against closed ranges, and derives the engine-facing configuration.

Architecture (strict one-way dependency):
    cli → loader → {sources, presets, validators} → schema → utils
    derive → schema

Key invariants:
    - UserConfig numeric fields always lie in their closed ranges
    - Precedence: defaults < preset < explicit values
    - A preset replaces all defaults; it never merges with them
    - EngineConfig is produced only by derive(), never built by hand
"""

__version__ = "0.4.0"

from trace_params.derive import derive
from trace_params.loader import build_config, load_config
from trace_params.presets import defaults, resolve
from trace_params.schema import (
    ColorMode,
    EngineConfig,
    Hierarchical,
    PathSimplifyMode,
    Preset,
    UserConfig,
)
from trace_params.validators import (
    ConfigError,
    MissingRequiredField,
    NonNumericValue,
    OutOfRange,
    ParameterError,
    ParameterErrors,
    UnknownParameter,
    UnrecognizedEnumToken,
)

__all__ = [
    "ColorMode",
    "ConfigError",
    "EngineConfig",
    "Hierarchical",
    "MissingRequiredField",
    "NonNumericValue",
    "OutOfRange",
    "ParameterError",
    "ParameterErrors",
    "PathSimplifyMode",
    "Preset",
    "UnknownParameter",
    "UnrecognizedEnumToken",
    "UserConfig",
    "build_config",
    "defaults",
    "derive",
    "load_config",
    "resolve",
]
