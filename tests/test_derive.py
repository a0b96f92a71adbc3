"""Tests for the UserConfig → EngineConfig derivation.

Validates unit conversions (area, precision loss, radians), pass-through
fields, determinism, and the plain-dict view handed to the engine.
"""

from __future__ import annotations

import dataclasses
import math
from pathlib import Path

import pytest

from trace_params.derive import deg2rad, derive
from trace_params.presets import defaults, resolve
from trace_params.schema import (
    ColorMode,
    EngineConfig,
    Hierarchical,
    PathSimplifyMode,
    Preset,
    UserConfig,
)


@pytest.fixture()
def user_cfg() -> UserConfig:
    return defaults("in.png", "out.svg")


class TestConversions:
    @pytest.mark.parametrize("speckle", range(1, 17))
    def test_speckle_area_is_square(self, speckle: int) -> None:
        cfg = derive(UserConfig(filter_speckle=speckle))
        assert cfg.filter_speckle_area == speckle * speckle

    def test_speckle_4_area_16(self, user_cfg: UserConfig) -> None:
        assert derive(user_cfg).filter_speckle_area == 16

    @pytest.mark.parametrize("bits", range(1, 9))
    def test_precision_loss(self, bits: int) -> None:
        loss = derive(UserConfig(color_precision=bits)).color_precision_loss
        assert loss == 8 - bits
        assert 0 <= loss <= 7

    @pytest.mark.parametrize("deg, rad", [
        (0, 0.0),
        (45, math.pi / 4),
        (60, math.pi / 3),
        (180, math.pi),
    ])
    def test_angles_in_radians(self, deg: int, rad: float) -> None:
        cfg = derive(UserConfig(corner_threshold_deg=deg, splice_threshold_deg=deg))
        assert cfg.corner_threshold_rad == pytest.approx(rad)
        assert cfg.splice_threshold_rad == pytest.approx(rad)

    def test_deg2rad(self) -> None:
        assert deg2rad(90) == pytest.approx(math.pi / 2)


class TestPassThrough:
    def test_unchanged_fields(self) -> None:
        cfg = UserConfig(
            input_path=Path("a.png"),
            output_path=Path("a.svg"),
            color_mode=ColorMode.BINARY,
            hierarchical=Hierarchical.CUTOUT,
            mode=PathSimplifyMode.POLYGON,
            gradient_step=33,
            segment_length=7.25,
            path_precision=None,
        )
        out = derive(cfg)
        assert out.input_path == Path("a.png")
        assert out.output_path == Path("a.svg")
        assert out.color_mode is ColorMode.BINARY
        assert out.hierarchical is Hierarchical.CUTOUT
        assert out.mode is PathSimplifyMode.POLYGON
        assert out.gradient_step == 33
        assert out.segment_length == 7.25
        assert out.max_iterations == 10
        assert out.path_precision is None


class TestEngineConfig:
    def test_deterministic(self, user_cfg: UserConfig) -> None:
        assert derive(user_cfg) == derive(user_cfg)

    def test_input_untouched(self, user_cfg: UserConfig) -> None:
        before = user_cfg.model_dump()
        derive(user_cfg)
        assert user_cfg.model_dump() == before

    def test_frozen(self, user_cfg: UserConfig) -> None:
        cfg = derive(user_cfg)
        with pytest.raises(dataclasses.FrozenInstanceError):
            cfg.filter_speckle_area = 1

    def test_bw_preset_end_to_end(self) -> None:
        cfg = derive(resolve(Preset.BW, "in.png", "out.svg"))
        assert isinstance(cfg, EngineConfig)
        assert cfg.color_mode is ColorMode.BINARY
        assert cfg.filter_speckle_area == 16
        assert cfg.color_precision_loss == 2
        assert cfg.corner_threshold_rad == pytest.approx(math.pi / 3)
        assert cfg.splice_threshold_rad == pytest.approx(math.pi / 4)

    def test_to_dict_is_plain(self, user_cfg: UserConfig) -> None:
        d = derive(user_cfg).to_dict()
        assert d["input_path"] == "in.png"
        assert d["color_mode"] == "color"
        assert d["hierarchical"] == "stacked"
        assert d["mode"] == "spline"
        assert d["filter_speckle_area"] == 16
        assert d["color_precision_loss"] == 2
        assert list(d) == [f.name for f in dataclasses.fields(EngineConfig)]
