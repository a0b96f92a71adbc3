"""Default tracing parameters and the fixed preset catalog.

A preset is a complete UserConfig, not a patch over the defaults: selecting
one replaces every tracing parameter at once.

Usage::

    from trace_params.presets import defaults, resolve
    cfg = defaults()
    photo = resolve(Preset.PHOTO, "in.png", "out.svg")
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Union

from trace_params.schema import ColorMode, Hierarchical, PathSimplifyMode, Preset, UserConfig

PathLike = Union[str, Path]

_DEFAULT_PARAMS: Dict[str, Any] = {
    'color_mode': ColorMode.COLOR,
    'hierarchical': Hierarchical.STACKED,
    'mode': PathSimplifyMode.SPLINE,
    'filter_speckle': 4,
    'color_precision': 6,
    'gradient_step': 16,
    'corner_threshold_deg': 60,
    'segment_length': 4.0,
    'splice_threshold_deg': 45,
    'max_iterations': 10,
    'path_precision': 8,
}

# Every bundle lists every tracing field; nothing is inherited from the defaults.
PRESETS: Dict[Preset, Dict[str, Any]] = {
    Preset.BW: {
        'color_mode': ColorMode.BINARY,
        'hierarchical': Hierarchical.STACKED,
        'mode': PathSimplifyMode.SPLINE,
        'filter_speckle': 4,
        'color_precision': 6,
        'gradient_step': 16,
        'corner_threshold_deg': 60,
        'segment_length': 4.0,
        'splice_threshold_deg': 45,
        'max_iterations': 10,
        'path_precision': 8,
    },
    Preset.POSTER: {
        'color_mode': ColorMode.COLOR,
        'hierarchical': Hierarchical.STACKED,
        'mode': PathSimplifyMode.SPLINE,
        'filter_speckle': 4,
        'color_precision': 8,
        'gradient_step': 16,
        'corner_threshold_deg': 60,
        'segment_length': 4.0,
        'splice_threshold_deg': 45,
        'max_iterations': 10,
        'path_precision': 8,
    },
    Preset.PHOTO: {
        'color_mode': ColorMode.COLOR,
        'hierarchical': Hierarchical.STACKED,
        'mode': PathSimplifyMode.SPLINE,
        'filter_speckle': 10,
        'color_precision': 8,
        'gradient_step': 48,
        'corner_threshold_deg': 180,
        'segment_length': 4.0,
        'splice_threshold_deg': 45,
        'max_iterations': 10,
        'path_precision': 8,
    },
}


def defaults(input_path: PathLike = Path(), output_path: PathLike = Path()) -> UserConfig:
    """Baseline parameters used when no preset is selected."""
    return UserConfig(
        input_path=Path(input_path),
        output_path=Path(output_path),
        **_DEFAULT_PARAMS,
    )


def resolve(
    preset: Preset,
    input_path: PathLike = Path(),
    output_path: PathLike = Path(),
) -> UserConfig:
    """Return the fixed bundle for *preset*.

    Parameters
    ----------
    preset : Preset
        Catalog entry to select.
    input_path, output_path : str | Path
        Paths are never part of a preset; callers pass them through.

    Raises
    ------
    ValueError
        If *preset* is not a catalog entry.
    """
    return UserConfig(
        input_path=Path(input_path),
        output_path=Path(output_path),
        **PRESETS[Preset(preset)],
    )
