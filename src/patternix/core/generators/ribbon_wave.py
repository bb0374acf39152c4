"""
どこで: `src/patternix/core/generators/ribbon_wave.py`。
何を: 1 本の基準曲線に沿って平行な線を重ね、間隔が伸縮するリボン状の波を生成する。
なぜ: 線の疎密（spread）と両端のテーパで、線だけの面に濃淡と流れを出すため。
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

import numpy as np

from patternix.core.curve_smoother import (
    WEIGHTS_5,
    WEIGHTS_7,
    stencil_tangents,
    weighted_moving_average,
)
from patternix.core.draw import RenderOutput
from patternix.core.generator_registry import generator
from patternix.core.generators.common import CanvasParams, canvas_meta, custom_baseline, stroke
from patternix.core.parameters.meta import ParamMeta

SAMPLE_COUNT = 800
BASE_SPACING = 8.0
TAPER_LENGTH = 0.15
PHASE_VARIATION = 0.02


@dataclass(frozen=True, slots=True)
class RibbonWaveParams(CanvasParams):
    """RibbonWave のパラメータ。"""

    opacity: float = 0.8
    amplitude: float = 80.0
    frequency: float = 2.0
    stroke_width: float = 3.0
    color: str = "#667eea"
    layers: int = 5


ribbon_wave_meta = {
    **canvas_meta,
    "amplitude": ParamMeta(kind="float", ui_min=0.0, ui_max=400.0),
    "frequency": ParamMeta(kind="float", ui_min=0.1, ui_max=10.0),
    "stroke_width": ParamMeta(kind="float", ui_min=0.1, ui_max=20.0, clamp_min=0.0),
    "color": ParamMeta(kind="color"),
    "layers": ParamMeta(kind="int", ui_min=1, ui_max=200, clamp_min=1, clamp_max=1000),
}


def _spread_factor(t: np.ndarray, frequency: float) -> np.ndarray:
    # 小さいほど線が詰まり（濃く）、大きいほど隙間が開く
    return 0.2 + np.abs(np.sin(t * math.pi * frequency * 2.5)) * 2.5


def _default_baseline(params: RibbonWaveParams) -> np.ndarray:
    t = np.linspace(0.0, 1.0, SAMPLE_COUNT)
    x = t * float(params.width)
    y = float(params.height) / 2.0 + np.sin(t * math.pi * params.frequency * 2.0) * float(
        params.amplitude
    ) * np.sin(t * math.pi * 1.5)
    return np.stack((x, y), axis=1)


def taper(t: np.ndarray, length: float = TAPER_LENGTH) -> np.ndarray:
    """両端 length の区間で 0→1 に smoothstep するテーパ係数を返す。"""
    tt = np.asarray(t, dtype=np.float64)
    out = np.ones_like(tt)
    head = tt < length
    tail = tt > 1.0 - length
    u = tt[head] / length
    out[head] = u * u * (3.0 - 2.0 * u)
    v = (1.0 - tt[tail]) / length
    out[tail] = v * v * (3.0 - 2.0 * v)
    return out


def _phase_of(phase: Sequence[float] | None, layer: int) -> float:
    if phase is None or layer >= len(phase):
        return 0.0
    try:
        value = float(phase[layer])
    except (TypeError, ValueError):
        return 0.0
    return value if math.isfinite(value) else 0.0


@generator(name="ribbon_wave", params=RibbonWaveParams, meta=ribbon_wave_meta)
def ribbon_wave(
    params: RibbonWaveParams,
    *,
    seed: int | float | None = None,
    phase: Sequence[float] | None = None,
    custom_path: Any = None,
) -> RenderOutput:
    """リボン状の平行線を生成する。

    Parameters
    ----------
    params : RibbonWaveParams
        解決済みパラメータ。
    seed : int | float | None, optional
        未使用（他 generator とシグネチャを揃えるため受け取る）。
    phase : Sequence[float] | None, optional
        層ごとの位相。間隔に ±2% の揺らぎを与える。欠けた層は 0。
    custom_path : Any, optional
        10 点を超える手描きパス。基準曲線を置き換える。

    Returns
    -------
    RenderOutput
        layers 本の StrokeCurve（層番号順）。
    """
    base = custom_baseline(custom_path, SAMPLE_COUNT, generator_name="ribbon_wave")
    if base is None:
        base = _default_baseline(params)

    n = base.shape[0]
    t = np.linspace(0.0, 1.0, n) if n > 1 else np.zeros(n)
    raw = np.column_stack((base, _spread_factor(t, float(params.frequency))))

    # 7 点 → 5 点の 2 段移動平均（x, y, spread を同時に）
    core = weighted_moving_average(weighted_moving_average(raw, WEIGHTS_7), WEIGHTS_5)
    points = core[:, :2]
    spread = core[:, 2]

    tangents = stencil_tangents(points)
    normals = np.column_stack((-tangents[:, 1], tangents[:, 0]))
    taper_factor = taper(t)
    offset = np.array(
        [float(params.horizontal_offset), float(params.vertical_offset)], dtype=np.float64
    )

    layers = max(1, int(params.layers))
    middle = layers // 2
    out: RenderOutput = []
    for layer in range(layers):
        distance = float(layer - middle)
        variation = np.sin(t * math.pi * 4.0 + _phase_of(phase, layer)) * PHASE_VARIATION
        spacing = BASE_SPACING * spread * (1.0 + variation)
        shift = distance * spacing * taper_factor
        layer_points = points + normals * shift[:, None] + offset
        out.append(
            stroke(
                layer_points,
                color=params.color,
                stroke_width=params.stroke_width,
                opacity=params.opacity,
            )
        )
    return out


__all__ = ["RibbonWaveParams", "ribbon_wave", "ribbon_wave_meta", "taper"]
