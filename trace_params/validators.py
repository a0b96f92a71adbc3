"""String parameter validation.

Turns raw string values (flags, parameter files) into typed, range-checked
values. Every recognized key is described by one ``FieldRule`` row in
``RULES``: the key, the UserConfig attribute it sets, a parser, and the
closed range from ``schema.PARAMETER_RANGES``.

Failures are never clamped or defaulted. Each raises a ``ParameterError``
subclass carrying the key, the raw value and, for range errors, the bounds:

    MissingRequiredField   input/output path absent
    UnrecognizedEnumToken  token not accepted by an enum field
    NonNumericValue        value does not parse as the expected number
    OutOfRange             parsed value outside its closed range
    UnknownParameter       key not recognized at all

Usage:
    from trace_params import validators
    values = validators.validate_parameters({"filter_speckle": "8"})
    # {'filter_speckle': 8}
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from trace_params.schema import (
    PARAMETER_RANGES,
    ColorMode,
    Hierarchical,
    Number,
    PathSimplifyMode,
    Preset,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigError(Exception):
    """Raised when configuration validation fails."""

    pass


class ParameterError(ConfigError):
    """A single rejected parameter.

    Attributes
    ----------
    field : str
        Input key, e.g. ``"filter_speckle"``.
    value : str | None
        Raw value as supplied; None when the key was absent.
    """

    def __init__(self, field: str, value: Optional[str], message: str):
        super().__init__(message)
        self.field = field
        self.value = value


class MissingRequiredField(ParameterError):
    def __init__(self, field: str, flags: str):
        super().__init__(
            field,
            None,
            f"{_label(field)} is required, please specify it by {flags}.",
        )


class UnrecognizedEnumToken(ParameterError):
    def __init__(self, field: str, value: str, accepted: Sequence[str]):
        self.accepted = tuple(accepted)
        super().__init__(
            field,
            value,
            f"{_label(field)} is invalid: {value!r}. "
            f"Expected one of {', '.join(self.accepted)}.",
        )


class NonNumericValue(ParameterError):
    def __init__(self, field: str, value: str, expected: str):
        self.expected = expected
        super().__init__(
            field,
            value,
            f"{_label(field)} is not {expected}: {value!r}.",
        )


class OutOfRange(ParameterError):
    def __init__(self, field: str, value: str, bounds: Tuple[Number, Optional[Number]]):
        self.bounds = bounds
        lo, hi = bounds
        upper = "∞)" if hi is None else f"{hi}]"
        super().__init__(
            field,
            value,
            f"{_label(field)} is invalid at {value.strip()}. "
            f"It must be within [{lo},{upper}.",
        )


class UnknownParameter(ParameterError):
    def __init__(self, field: str, value: Optional[str]):
        super().__init__(
            field,
            value,
            f"Unknown parameter {field!r}. "
            f"Recognized: {', '.join(RECOGNIZED_KEYS)}.",
        )


class ParameterErrors(ConfigError):
    """Every rejected parameter of one source, reported together."""

    def __init__(self, errors: Sequence[ParameterError]):
        self.errors: List[ParameterError] = list(errors)
        lines = "\n".join(f"  - {e}" for e in self.errors)
        super().__init__(f"{len(self.errors)} invalid parameter(s):\n{lines}")


_LABELS = {
    'input': "Input path",
    'output': "Output path",
    'preset': "Preset",
    'color_mode': "Color mode",
    'hierarchical': "Hierarchical mode",
    'mode': "Curve fitting mode",
    'filter_speckle': "Filter speckle",
    'color_precision': "Color precision",
    'gradient_step': "Gradient step",
    'corner_threshold': "Corner threshold",
    'segment_length': "Segment length",
    'splice_threshold': "Splice threshold",
    'path_precision': "Path precision",
}


def _label(field: str) -> str:
    return _LABELS.get(field, field)


# ---------------------------------------------------------------------------
# Parsers. Each takes a stripped token and raises ValueError on bad syntax.
# ---------------------------------------------------------------------------

_INT_RE = re.compile(r'[+-]?[0-9]+')
_UINT_RE = re.compile(r'\+?[0-9]+')
_FLOAT_RE = re.compile(
    r'[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf|infinity|nan)',
    re.IGNORECASE,
)


def parse_int(token: str) -> int:
    if not _INT_RE.fullmatch(token):
        raise ValueError(f"not an integer: {token!r}")
    return int(token)


def parse_uint(token: str) -> int:
    if not _UINT_RE.fullmatch(token):
        raise ValueError(f"not an unsigned integer: {token!r}")
    return int(token)


# Token that leaves an optional field unset, so the engine applies its default.
UNSET_TOKEN = "none"


def parse_optional_uint(token: str) -> Optional[int]:
    if token.lower() == UNSET_TOKEN:
        return None
    return parse_uint(token)


def parse_float(token: str) -> float:
    if not _FLOAT_RE.fullmatch(token):
        raise ValueError(f"not a number: {token!r}")
    return float(token)


def parse_color_mode(token: str) -> ColorMode:
    """``bw``/``binary`` select binary tracing; any other token selects color.

    An unrecognized token falls back to color tracing and logs a warning.
    """
    lowered = token.lower()
    if lowered in ('bw', 'binary'):
        return ColorMode.BINARY
    if lowered != 'color':
        logger.warning("Color mode %r not recognized, tracing in color", token)
    return ColorMode.COLOR


def _token_parser(tokens: Mapping[str, Any]) -> Callable[[str], Any]:
    def parse(token: str) -> Any:
        try:
            return tokens[token.lower()]
        except KeyError:
            raise ValueError(f"unrecognized token: {token!r}") from None
    return parse


HIERARCHICAL_TOKENS = {
    'stacked': Hierarchical.STACKED,
    'cutout': Hierarchical.CUTOUT,
}

MODE_TOKENS = {
    'pixel': PathSimplifyMode.NONE,
    'none': PathSimplifyMode.NONE,
    'polygon': PathSimplifyMode.POLYGON,
    'spline': PathSimplifyMode.SPLINE,
}

PRESET_TOKENS = {p.value: p for p in Preset}


# ---------------------------------------------------------------------------
# Rule table
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FieldRule:
    """How one input key is parsed, range-checked and stored.

    ``accepted`` is non-empty for enum fields; a parse failure is then an
    UnrecognizedEnumToken rather than a NonNumericValue.
    """

    key: str
    attr: str
    parse: Callable[[str], Any]
    expected: str = ""
    accepted: Tuple[str, ...] = ()

    @property
    def bounds(self) -> Optional[Tuple[Number, Optional[Number]]]:
        return PARAMETER_RANGES.get(self.attr)

    def validate(self, raw: Any) -> Any:
        raw = str(raw)
        token = raw.strip()
        try:
            value = self.parse(token)
        except ValueError:
            if self.accepted:
                raise UnrecognizedEnumToken(self.key, raw, self.accepted) from None
            raise NonNumericValue(self.key, raw, self.expected) from None

        bounds = self.bounds
        if bounds is not None and value is not None:
            lo, hi = bounds
            # NaN fails both comparisons, so it is rejected here too.
            if not (value >= lo and (hi is None or value <= hi)):
                raise OutOfRange(self.key, raw, bounds)
        return value


# Evaluation order: preset, enums, then numeric fields.
RULES: Tuple[FieldRule, ...] = (
    FieldRule('preset', 'preset', _token_parser(PRESET_TOKENS),
              accepted=tuple(PRESET_TOKENS)),
    FieldRule('color_mode', 'color_mode', parse_color_mode),
    FieldRule('hierarchical', 'hierarchical', _token_parser(HIERARCHICAL_TOKENS),
              accepted=tuple(HIERARCHICAL_TOKENS)),
    FieldRule('mode', 'mode', _token_parser(MODE_TOKENS),
              accepted=('pixel', 'polygon', 'spline', 'none')),
    FieldRule('filter_speckle', 'filter_speckle', parse_uint, "a positive integer"),
    FieldRule('color_precision', 'color_precision', parse_int, "an integer"),
    FieldRule('gradient_step', 'gradient_step', parse_int, "an integer"),
    FieldRule('corner_threshold', 'corner_threshold_deg', parse_int, "an integer"),
    FieldRule('segment_length', 'segment_length', parse_float, "numeric"),
    FieldRule('splice_threshold', 'splice_threshold_deg', parse_int, "an integer"),
    FieldRule('path_precision', 'path_precision', parse_optional_uint,
              "an unsigned integer or 'none'"),
)

RULES_BY_KEY: Dict[str, FieldRule] = {rule.key: rule for rule in RULES}

REQUIRED_KEYS: Dict[str, str] = {
    'input': "--input or -i",
    'output': "--output or -o",
}

RECOGNIZED_KEYS: Tuple[str, ...] = tuple(REQUIRED_KEYS) + tuple(RULES_BY_KEY)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def validate_field(key: str, raw: Any) -> Any:
    """Parse and range-check one raw value.

    Raises
    ------
    UnknownParameter
        If *key* has no rule.
    UnrecognizedEnumToken, NonNumericValue, OutOfRange
        If *raw* is rejected.
    """
    rule = RULES_BY_KEY.get(key)
    if rule is None:
        raise UnknownParameter(key, None if raw is None else str(raw))
    return rule.validate(raw)


def check_required(source: Mapping[str, Any]) -> List[ParameterError]:
    """Return a MissingRequiredField for each absent or blank path key."""
    errors: List[ParameterError] = []
    for key, flags in REQUIRED_KEYS.items():
        raw = source.get(key)
        if raw is None or not str(raw).strip():
            errors.append(MissingRequiredField(key, flags))
    return errors


def check_parameters(
    source: Mapping[str, Any],
    *,
    fail_fast: bool = False,
) -> Tuple[Dict[str, Any], List[ParameterError]]:
    """Validate every present key of *source*.

    Unknown keys are reported first, then the rules in ``RULES`` order.

    Parameters
    ----------
    source : Mapping[str, Any]
        Raw values keyed by input key; None means absent.
    fail_fast : bool
        Raise the first ParameterError instead of collecting it.

    Returns
    -------
    values : dict
        Attribute name → parsed value, for keys that passed.
    errors : list[ParameterError]
        One entry per rejected key, in evaluation order (always empty
        when *fail_fast* is True).
    """
    values: Dict[str, Any] = {}
    errors: List[ParameterError] = []

    def reject(error: ParameterError) -> None:
        if fail_fast:
            raise error
        errors.append(error)

    for key in source:
        if key not in RECOGNIZED_KEYS:
            raw = source[key]
            reject(UnknownParameter(key, None if raw is None else str(raw)))

    for rule in RULES:
        raw = source.get(rule.key)
        if raw is None:
            continue
        try:
            values[rule.attr] = rule.validate(raw)
        except ParameterError as e:
            reject(e)

    return values, errors


def validate_parameters(
    source: Mapping[str, Any],
    *,
    collect_errors: bool = False,
) -> Dict[str, Any]:
    """Validate all optional parameters of *source*.

    Path keys (``input``/``output``) are ignored here; see ``check_required``.

    Parameters
    ----------
    source : Mapping[str, Any]
        Raw values keyed by input key; None means absent.
    collect_errors : bool
        If False (default) raise the first failure in evaluation order.
        If True raise one ParameterErrors listing every failure.

    Returns
    -------
    dict
        Attribute name → parsed value for each present key.
    """
    values, errors = check_parameters(source, fail_fast=not collect_errors)
    if errors:
        raise ParameterErrors(errors)
    return values
