"""
どこで: `src/patternix/core/generators/spirograph.py`。
何を: 外トロコイド（epitrochoid）を回転コピー × 奥行きレイヤで重ね、3D 投影して描く。
なぜ: 少しずつ膨らむレイヤを z 方向に並べ、1 本の曲線から立体的なモアレを作るため。
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

import numpy as np

from patternix.core.draw import RenderOutput, StrokeCurve
from patternix.core.generator_registry import generator
from patternix.core.generators.common import CanvasParams, canvas_meta, center_of, stroke
from patternix.core.parameters.meta import ParamMeta
from patternix.core.transform3d import Rotation3D, depth_ratio, depth_sorted, project, visible_runs

FOCAL = 1200.0
SAMPLE_COUNT = 800
TURNS = 12
LAYER_INFLATION = 0.3


@dataclass(frozen=True, slots=True)
class SpirographParams(CanvasParams):
    """Spirograph のパラメータ。"""

    stroke_width: float = 1.0
    color: str = "#4300B0"
    curves: int = 4
    layers: int = 60
    fixed_radius: float = 120.0
    rolling_radius: float = 45.0
    pen_distance: float = 80.0
    depth: float = 50.0
    rotation: float = 0.0
    rotate_x: float = 0.0
    rotate_y: float = 0.0
    scale: float = 1.0


spirograph_meta = {
    **canvas_meta,
    "stroke_width": ParamMeta(kind="float", ui_min=0.1, ui_max=10.0, clamp_min=0.0),
    "color": ParamMeta(kind="color"),
    "curves": ParamMeta(kind="int", ui_min=1, ui_max=12, clamp_min=0, clamp_max=360),
    "layers": ParamMeta(kind="int", ui_min=1, ui_max=120, clamp_min=1, clamp_max=1000),
    "fixed_radius": ParamMeta(kind="float", ui_min=10.0, ui_max=400.0),
    "rolling_radius": ParamMeta(kind="float", ui_min=5.0, ui_max=200.0, clamp_min=0.01),
    "pen_distance": ParamMeta(kind="float", ui_min=0.0, ui_max=300.0),
    "depth": ParamMeta(kind="float", ui_min=0.0, ui_max=200.0),
    "rotation": ParamMeta(kind="float", ui_min=-180.0, ui_max=180.0),
    "rotate_x": ParamMeta(kind="float", ui_min=-180.0, ui_max=180.0),
    "rotate_y": ParamMeta(kind="float", ui_min=-180.0, ui_max=180.0),
    "scale": ParamMeta(kind="float", ui_min=0.1, ui_max=3.0),
}

spirograph_aliases = {"R": "fixed_radius", "r": "rolling_radius", "d": "pen_distance"}


def epitrochoid(
    fixed_radius: float,
    rolling_radius: float,
    pen_distance: float,
    *,
    samples: int = SAMPLE_COUNT,
    turns: int = TURNS,
) -> np.ndarray:
    """外トロコイドを samples+1 点で評価し shape (samples+1, 2) で返す。

    Notes
    -----
    パラメータ t は 0..2π·turns を等分する。
    """
    t = np.linspace(0.0, math.pi * 2.0 * turns, int(samples) + 1)
    big = float(fixed_radius) + float(rolling_radius)
    k = big / float(rolling_radius)
    x = big * np.cos(t) - float(pen_distance) * np.cos(k * t)
    y = big * np.sin(t) - float(pen_distance) * np.sin(k * t)
    return np.stack((x, y), axis=1)


@generator(
    name="spirograph",
    params=SpirographParams,
    meta=spirograph_meta,
    aliases=spirograph_aliases,
)
def spirograph(
    params: SpirographParams,
    *,
    seed: int | float | None = None,
    phase: Any = None,
    custom_path: Any = None,
) -> RenderOutput:
    """回転コピーとレイヤを重ねたスピログラフを生成する。

    Returns
    -------
    RenderOutput
        全曲線を平均 z の昇順（奥→手前）に並べた StrokeCurve 列。
        可視判定で途切れた曲線は連続区間ごとに別の曲線になる。
    """
    cx, cy = center_of(params)
    rotation3d = Rotation3D(x=float(params.rotate_x), y=float(params.rotate_y))
    curves = max(0, int(params.curves))
    layers = max(1, int(params.layers))
    depth = float(params.depth)
    scale = float(params.scale)
    rolling = float(params.rolling_radius)
    if rolling == 0.0:
        rolling = 0.01

    strokes: list[StrokeCurve] = []
    for curve_index in range(curves):
        angle = math.radians(curve_index * (360.0 / curves) + float(params.rotation))
        ca, sa = math.cos(angle), math.sin(angle)
        for layer in range(layers):
            ratio = layer / layers
            inflate = 1.0 + ratio * LAYER_INFLATION
            pts = epitrochoid(
                params.fixed_radius, rolling * inflate, float(params.pen_distance) * inflate
            )
            pts = pts * scale
            rx = pts[:, 0] * ca - pts[:, 1] * sa
            ry = pts[:, 0] * sa + pts[:, 1] * ca
            layer_z = (layer - layers / 2.0) * depth
            model = np.column_stack((rx, ry, np.full(rx.shape, layer_z)))

            proj = project(model, rotation3d, focal=FOCAL)
            base_opacity = float(params.opacity) * (0.3 + ratio * 0.7)
            for run in visible_runs(proj.visible):
                xy = proj.xy[run] + (cx, cy)
                avg_z = float(np.mean(proj.z[run]))
                depth_opacity = 0.5 + float(depth_ratio(avg_z, layers * depth)) * 0.5
                strokes.append(
                    stroke(
                        xy,
                        color=params.color,
                        stroke_width=params.stroke_width,
                        opacity=base_opacity * min(1.0, max(0.3, depth_opacity)),
                        depth=avg_z,
                    )
                )

    return list(depth_sorted(strokes))


__all__ = ["SpirographParams", "epitrochoid", "spirograph", "spirograph_aliases", "spirograph_meta"]
