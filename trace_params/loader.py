"""Build a validated UserConfig from raw parameter sources.

Precedence, lowest to highest::

    defaults()  <  resolve(preset)  <  explicit per-field values

A preset replaces the defaults wholesale; explicit values then replace
single fields of whatever the preset (or the defaults) produced. The
``input``/``output`` paths are required, checked before anything else, and
never come from a preset.

Usage::

    from trace_params.loader import build_config, load_config
    cfg = build_config({"input": "a.png", "output": "a.svg", "preset": "photo"})
    cfg = load_config(["-i", "a.png", "-o", "a.svg", "--preset", "bw"])
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence, Union

from pydantic import ValidationError

from trace_params import presets, sources
from trace_params.schema import UserConfig
from trace_params.validators import (
    ConfigError,
    ParameterErrors,
    check_parameters,
    check_required,
)

logger = logging.getLogger(__name__)


def build_config(
    source: Mapping[str, Any],
    *,
    collect_errors: bool = False,
) -> UserConfig:
    """Merge defaults, preset and explicit values into a UserConfig.

    Parameters
    ----------
    source : Mapping[str, Any]
        Raw values keyed by input key (see ``validators.RECOGNIZED_KEYS``).
        None or a missing key means "not given".
    collect_errors : bool
        If True, report every invalid parameter in one ParameterErrors
        instead of stopping at the first.

    Returns
    -------
    UserConfig
        Fully validated, frozen configuration.

    Raises
    ------
    MissingRequiredField
        If ``input`` or ``output`` is absent (checked first).
    UnrecognizedEnumToken, NonNumericValue, OutOfRange, UnknownParameter
        On the first invalid parameter (fail-fast mode).
    ParameterErrors
        On any invalid parameter when *collect_errors* is True.
    """
    missing = check_required(source)
    if missing and not collect_errors:
        raise missing[0]

    values, errors = check_parameters(source, fail_fast=not collect_errors)
    errors = missing + errors
    if errors:
        raise ParameterErrors(errors)

    input_path = Path(str(source['input']))
    output_path = Path(str(source['output']))

    preset = values.pop('preset', None)
    if preset is not None:
        logger.info("Using preset '%s'", preset.value)
        base = presets.resolve(preset, input_path, output_path)
    else:
        base = presets.defaults(input_path, output_path)

    for attr, value in values.items():
        logger.debug("Override %s=%r", attr, value)

    try:
        return UserConfig(**{**base.model_dump(), **values})
    except ValidationError as e:
        raise ConfigError(f"Parameter set failed validation: {e}") from e


def load_config(
    argv: Optional[Sequence[str]] = None,
    config_file: Union[str, Path, None] = None,
    *,
    collect_errors: bool = False,
) -> UserConfig:
    """Parse command-line flags (and an optional YAML file) into a UserConfig.

    Flags override values from *config_file* key by key.

    Parameters
    ----------
    argv : Sequence[str], optional
        Command-line arguments without the program name; None reads
        ``sys.argv[1:]``.
    config_file : str | Path, optional
        YAML parameter file. A ``--config`` flag in *argv* takes precedence.
    collect_errors : bool
        Report every invalid parameter at once.
    """
    args = sources.build_argparser().parse_args(argv)
    return config_from_args(args, config_file, collect_errors=collect_errors)


def config_from_args(
    args: argparse.Namespace,
    config_file: Union[str, Path, None] = None,
    *,
    collect_errors: bool = False,
) -> UserConfig:
    """Build a UserConfig from already-parsed flags (see ``load_config``)."""
    config_file = args.config or config_file
    layers = []
    if config_file is not None:
        layers.append(sources.from_yaml(config_file))
    layers.append(sources.from_namespace(args))
    return build_config(
        sources.merge(*layers),
        collect_errors=collect_errors or args.collect_errors,
    )
