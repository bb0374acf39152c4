"""
どこで: `src/patternix/core/generators/flow_field.py`。
何を: 水平な走査線を、ランダムに置いた楕円状の波源の影響で上下に歪ませたフローフィールドを生成する。
なぜ: 平行線の歪みだけで、見えない球体や波紋が面を押し上げているような錯視を作るため。
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

import numpy as np

from patternix.core.curve_smoother import WEIGHTS_5, weighted_moving_average
from patternix.core.draw import RenderOutput
from patternix.core.generator_registry import generator
from patternix.core.generators.common import CanvasParams, canvas_meta, stroke
from patternix.core.noise import line_noise
from patternix.core.parameters.meta import ParamMeta
from patternix.core.seeded_stream import SeededStream

SAMPLE_COUNT = 300
INFLUENCE_CUTOFF = 1.5
MIN_SMOOTHNESS = 0.01


@dataclass(frozen=True, slots=True)
class FlowFieldParams(CanvasParams):
    """FlowField のパラメータ。"""

    stroke_width: float = 1.0
    color: str = "#000000"
    lines: int = 40
    distortion_strength: float = 60.0
    distortion_frequency: float = 3.0
    noise_scale: float = 0.8
    smoothness: float = 0.7


flow_field_meta = {
    **canvas_meta,
    "stroke_width": ParamMeta(kind="float", ui_min=0.1, ui_max=10.0, clamp_min=0.0),
    "color": ParamMeta(kind="color"),
    "lines": ParamMeta(kind="int", ui_min=2, ui_max=200, clamp_min=0, clamp_max=2000),
    "distortion_strength": ParamMeta(kind="float", ui_min=0.0, ui_max=300.0),
    "distortion_frequency": ParamMeta(kind="float", ui_min=0.1, ui_max=10.0),
    "noise_scale": ParamMeta(kind="float", ui_min=0.0, ui_max=2.0),
    "smoothness": ParamMeta(
        kind="float", ui_min=0.0, ui_max=1.0, clamp_min=MIN_SMOOTHNESS, clamp_max=1.0
    ),
}


@dataclass(frozen=True, slots=True)
class WaveCenter:
    """走査線を歪ませる楕円状の波源。"""

    x: float
    y: float
    radius_x: float
    radius_y: float
    strength: float
    phase: float


def wave_centers(params: FlowFieldParams, random: SeededStream) -> list[WaveCenter]:
    """2–4 個の波源を乱数で配置する（乱数は 1 回 + 波源ごとに 6 回消費）。"""
    w = float(params.width)
    h = float(params.height)
    count = int(math.floor(2 + random.next() * 3))
    centers: list[WaveCenter] = []
    for _ in range(count):
        centers.append(
            WaveCenter(
                x=w * (0.2 + random.next() * 0.6),
                y=h * (0.2 + random.next() * 0.6),
                radius_x=w * (0.15 + random.next() * 0.25),
                radius_y=h * (0.15 + random.next() * 0.25),
                strength=float(params.distortion_strength)
                * (0.8 + random.next() * 0.4)
                * float(params.noise_scale),
                phase=random.next() * math.pi * 2.0,
            )
        )
    return centers


def displace(
    x: np.ndarray,
    base_y: float,
    centers: list[WaveCenter],
    *,
    frequency: float,
    smoothness: float,
) -> np.ndarray:
    """走査線 y=base_y 上の点 x に対する、全波源からの縦変位の和を返す。"""
    dy_total = np.zeros_like(x)
    two_s2 = 2.0 * smoothness * smoothness
    for c in centers:
        dx = x - c.x
        dy = base_y - c.y
        d = np.sqrt(dx * dx / (c.radius_x * c.radius_x) + dy * dy / (c.radius_y * c.radius_y))
        influence = np.exp(-(d * d) / two_s2)
        wave = np.sin(d * math.pi * frequency + c.phase) * influence * c.strength
        dy_total += np.where(d < INFLUENCE_CUTOFF, wave, 0.0)
    return dy_total


@generator(name="flow_field", params=FlowFieldParams, meta=flow_field_meta)
def flow_field(
    params: FlowFieldParams,
    *,
    seed: int | float | None = None,
    phase: Any = None,
    custom_path: Any = None,
) -> RenderOutput:
    """歪んだ水平線 lines 本を上から順に生成する。

    Notes
    -----
    lines == 1 のときは唯一の線をキャンバス中央の高さに置く。
    """
    random = SeededStream(seed)
    centers = wave_centers(params, random)
    smoothness = max(MIN_SMOOTHNESS, float(params.smoothness))
    width = float(params.width)
    height = float(params.height)
    t = np.linspace(0.0, 1.0, SAMPLE_COUNT)
    x = t * width + float(params.horizontal_offset)

    lines = max(0, int(params.lines))
    out: RenderOutput = []
    for li in range(lines):
        frac = li / (lines - 1) if lines > 1 else 0.5
        base_y = frac * height + float(params.vertical_offset)
        y = base_y + displace(
            x,
            base_y,
            centers,
            frequency=float(params.distortion_frequency),
            smoothness=smoothness,
        )
        y = y + line_noise(x * 0.01, base_y * 0.01, li) * float(
            params.distortion_strength
        ) * 0.1 * (1.0 - smoothness)
        points = weighted_moving_average(np.column_stack((x, y)), WEIGHTS_5)
        out.append(
            stroke(
                points,
                color=params.color,
                stroke_width=params.stroke_width,
                opacity=params.opacity,
            )
        )
    return out


__all__ = [
    "FlowFieldParams",
    "WaveCenter",
    "displace",
    "flow_field",
    "flow_field_meta",
    "wave_centers",
]
