"""UserConfig → EngineConfig unit conversion.

Pure and total: any UserConfig is already range-checked, so nothing here
can fail.

    filter_speckle_area   = filter_speckle ** 2             (px → px²)
    color_precision_loss  = 8 - color_precision             (bits kept → bits dropped)
    corner_threshold_rad  = deg2rad(corner_threshold_deg)
    splice_threshold_rad  = deg2rad(splice_threshold_deg)
"""

from __future__ import annotations

import math

from trace_params.schema import CHANNEL_BITS, EngineConfig, UserConfig


def deg2rad(deg: float) -> float:
    return deg / 180.0 * math.pi


def derive(cfg: UserConfig) -> EngineConfig:
    """Convert user-facing parameters to the engine's units."""
    return EngineConfig(
        input_path=cfg.input_path,
        output_path=cfg.output_path,
        color_mode=cfg.color_mode,
        hierarchical=cfg.hierarchical,
        mode=cfg.mode,
        filter_speckle_area=cfg.filter_speckle * cfg.filter_speckle,
        color_precision_loss=CHANNEL_BITS - cfg.color_precision,
        gradient_step=cfg.gradient_step,
        corner_threshold_rad=deg2rad(cfg.corner_threshold_deg),
        segment_length=cfg.segment_length,
        max_iterations=cfg.max_iterations,
        splice_threshold_rad=deg2rad(cfg.splice_threshold_deg),
        path_precision=cfg.path_precision,
    )
