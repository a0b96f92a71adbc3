"""Raw parameter sources: command-line flags, mappings and YAML files.

Every source yields a plain ``dict[str, str]`` keyed by input key
(``filter_speckle``, ``preset``, ...). Absent keys are simply missing; no
parsing or defaulting happens here. Layer sources with :func:`merge`.
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml

from trace_params import __version__
from trace_params.utils import fs
from trace_params.validators import UNSET_TOKEN, ConfigError

RawParameters = Dict[str, str]

# Keys where an explicit null (YAML ``~``) means "leave to the engine".
NULLABLE_KEYS = ('path_precision',)

# (input key, flags, help). All values are taken as strings; validation
# happens in trace_params.validators, not in argparse.
PARAMETER_FLAGS = (
    ('input', ('-i', '--input'), "Path to input raster image"),
    ('output', ('-o', '--output'), "Path to output vector graphics"),
    ('color_mode', ('--color_mode', '--colormode'),
     "True color image `color` (default) or binary image `bw`"),
    ('hierarchical', ('--hierarchical',),
     "Hierarchical clustering `stacked` (default) or non-stacked `cutout`. "
     "Only applies to color mode."),
    ('preset', ('--preset',), "Use one of the preset configs `bw`, `poster`, `photo`"),
    ('filter_speckle', ('-f', '--filter_speckle'),
     "Discard patches smaller than X px in size [1,16]"),
    ('color_precision', ('-p', '--color_precision'),
     "Number of significant bits to use in an RGB channel [1,8]"),
    ('gradient_step', ('-g', '--gradient_step'),
     "Color difference between gradient layers [0,255]"),
    ('corner_threshold', ('-c', '--corner_threshold'),
     "Minimum momentary angle (degree) to be considered a corner [0,180]"),
    ('segment_length', ('-l', '--segment_length'),
     "Perform iterative subdivide smooth until all segments are shorter "
     "than this length [3.5,10]"),
    ('splice_threshold', ('-s', '--splice_threshold'),
     "Minimum angle displacement (degree) to splice a spline [0,180]"),
    ('mode', ('-m', '--mode'), "Curve fitting mode `pixel`, `polygon`, `spline`"),
    ('path_precision', ('--path_precision',),
     "Number of decimal places to use in path string, or `none` for the "
     "engine default"),
)


def build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="trace-params",
        description="Validate raster-to-vector tracing parameters and derive "
                    "the engine configuration.",
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    g_params = p.add_argument_group("Tracing parameters")
    for key, flags, help_text in PARAMETER_FLAGS:
        g_params.add_argument(*flags, dest=key, type=str, default=None, help=help_text)

    g_run = p.add_argument_group("Run")
    g_run.add_argument("--config", type=str, default=None,
                       help="YAML parameter file; flags override its values")
    g_run.add_argument("--collect-errors", action="store_true",
                       help="Report every invalid parameter instead of the first")
    g_run.add_argument("--log-level", type=str.upper, default="INFO",
                       choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                       help="Logging level")
    g_run.add_argument("--log-file", type=str, default=None, help="Optional log file")
    g_run.add_argument("--log-json", action="store_true", help="Log JSON lines")
    return p


def from_namespace(args: argparse.Namespace) -> RawParameters:
    """Extract the tracing parameters given on the command line."""
    raw = {}
    for key, _, _ in PARAMETER_FLAGS:
        value = getattr(args, key, None)
        if value is not None:
            raw[key] = value
    return raw


def from_mapping(data: Mapping[str, Any]) -> RawParameters:
    """Stringify a mapping of scalars.

    None counts as absent, except for keys in ``NULLABLE_KEYS`` where it
    becomes the ``none`` token and unsets the field.

    Raises
    ------
    ConfigError
        If a key is not a string or a value is a list/mapping.
    """
    raw = {}
    for key, value in data.items():
        if not isinstance(key, str):
            raise ConfigError(f"Parameter names must be strings, got {key!r}")
        if value is None:
            if key in NULLABLE_KEYS:
                raw[key] = UNSET_TOKEN
            continue
        if isinstance(value, (list, tuple, dict)):
            raise ConfigError(f"Parameter {key!r} must be a scalar, got {value!r}")
        raw[key] = str(value)
    return raw


def from_yaml(path: Union[str, Path]) -> RawParameters:
    """Read a YAML parameter file (a flat mapping of input keys).

    An empty file is an empty source.

    Raises
    ------
    FileNotFoundError
        If *path* does not exist.
    ConfigError
        If the file is unreadable, not UTF-8, not valid YAML or not a flat
        mapping.
    """
    path = Path(path)
    try:
        data: Optional[Any] = fs.load_yaml(path)
    except FileNotFoundError:
        raise
    except yaml.YAMLError as e:
        raise ConfigError(str(e)) from e
    except OSError as e:
        raise ConfigError(f"Cannot read parameter file {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(
            f"Parameter file {path} must contain a mapping, got {type(data).__name__}"
        )
    return from_mapping(data)


def merge(*layers: Mapping[str, str]) -> RawParameters:
    """Combine sources key by key; later layers win."""
    merged: RawParameters = {}
    for layer in layers:
        merged.update(layer)
    return merged
