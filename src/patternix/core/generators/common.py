# どこで: `src/patternix/core/generators/common.py`。
# 何を: generator 共通のキャンバス系パラメータと、custom path の採用判定・曲線化ヘルパを提供する。
# なぜ: 幅/高さ/オフセットや custom path のフォールバック規則を各 generator で重複させないため。

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import numpy as np

from patternix.core.curve_smoother import accepts_custom_path, as_points, smooth_and_resample
from patternix.core.draw import StrokeCurve
from patternix.core.parameters.meta import ParamMeta
from patternix.core.spline import to_smooth_curve

_logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CanvasParams:
    """全 generator が持つキャンバス寸法・全体不透明度・平行移動量。"""

    width: float = 1280.0
    height: float = 1040.0
    opacity: float = 1.0
    horizontal_offset: float = 0.0
    vertical_offset: float = 0.0


canvas_meta = {
    "width": ParamMeta(kind="float", ui_min=100.0, ui_max=4000.0, clamp_min=1.0),
    "height": ParamMeta(kind="float", ui_min=100.0, ui_max=4000.0, clamp_min=1.0),
    "opacity": ParamMeta(kind="float", ui_min=0.0, ui_max=1.0, clamp_min=0.0, clamp_max=1.0),
    "horizontal_offset": ParamMeta(kind="float", ui_min=-1000.0, ui_max=1000.0),
    "vertical_offset": ParamMeta(kind="float", ui_min=-1000.0, ui_max=1000.0),
}
"""CanvasParams のフィールド用 ParamMeta。各 generator の meta に展開して使う。"""


def center_of(params: CanvasParams) -> tuple[float, float]:
    """オフセット込みのキャンバス中心 (cx, cy) を返す。"""
    return (
        float(params.width) / 2.0 + float(params.horizontal_offset),
        float(params.height) / 2.0 + float(params.vertical_offset),
    )


def custom_baseline(
    custom_path: Any,
    target_count: int,
    *,
    generator_name: str,
    passes: int = 2,
    max_window: int = 15,
    window_divisor: int = 8,
) -> np.ndarray | None:
    """custom path を平滑化・再標本化した基準曲線を返す。

    Returns
    -------
    np.ndarray | None
        shape (target_count, 2)。短すぎる（10 点以下）パスは None を返し、
        呼び出し側はアルゴリズムの基準曲線にフォールバックする。
    """
    if custom_path is None:
        return None
    pts = as_points(custom_path)
    if not accepts_custom_path(pts):
        _logger.debug(
            "%s: custom path が短いため既定の基準曲線を使う (points=%d)",
            generator_name,
            int(pts.shape[0]),
        )
        return None
    return smooth_and_resample(
        pts,
        target_count,
        passes=passes,
        max_window=max_window,
        window_divisor=window_divisor,
    )


def stroke(
    points: np.ndarray,
    *,
    color: str,
    stroke_width: float,
    opacity: float,
    depth: float = 0.0,
) -> StrokeCurve:
    """点列を通る滑らかな StrokeCurve を作る。"""
    return StrokeCurve(
        path=to_smooth_curve(points),
        color=str(color),
        stroke_width=float(stroke_width),
        opacity=float(opacity),
        depth=float(depth),
    )


__all__ = ["CanvasParams", "canvas_meta", "center_of", "custom_baseline", "stroke"]
