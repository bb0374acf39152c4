# どこで: `src/patternix/core/draw.py`。
# 何を: generator の出力単位（StrokeCurve / FilledDot）と RenderOutput を定義する。
# なぜ: 生成と直列化（SVG 等）を分離し、描画順・深度・不透明度の性質を直接検査できるようにするため。

from __future__ import annotations

import math
from dataclasses import dataclass

from patternix.core.spline import CubicPath


def _unit(value: float) -> float:
    v = float(value)
    if not math.isfinite(v):
        return 0.0
    return 0.0 if v < 0.0 else 1.0 if v > 1.0 else v


def _non_negative(value: float) -> float:
    v = float(value)
    if not math.isfinite(v) or v < 0.0:
        return 0.0
    return v


def _finite(value: float) -> float:
    v = float(value)
    return v if math.isfinite(v) else 0.0


@dataclass(frozen=True, slots=True)
class StrokeCurve:
    """線として描く開いた曲線。

    Notes
    -----
    opacity は 0..1、stroke_width は 0 以上にクランプして保持する。
    depth は 3D generator の描画順ソートキー（大きいほど手前）。
    """

    path: CubicPath
    color: str
    stroke_width: float
    opacity: float
    depth: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "stroke_width", _non_negative(self.stroke_width))
        object.__setattr__(self, "opacity", _unit(self.opacity))
        object.__setattr__(self, "depth", _finite(self.depth))


@dataclass(frozen=True, slots=True)
class FilledDot:
    """塗りつぶした円。

    Notes
    -----
    opacity は 0..1、radius は 0 以上にクランプして保持する。
    """

    center: tuple[float, float]
    radius: float
    color: str
    opacity: float
    depth: float = 0.0

    def __post_init__(self) -> None:
        cx, cy = self.center
        object.__setattr__(self, "center", (float(cx), float(cy)))
        object.__setattr__(self, "radius", _non_negative(self.radius))
        object.__setattr__(self, "opacity", _unit(self.opacity))
        object.__setattr__(self, "depth", _finite(self.depth))


DrawPrimitive = StrokeCurve | FilledDot

RenderOutput = list[DrawPrimitive]
"""描画順（先頭から塗る）に並んだ DrawPrimitive 列。"""


__all__ = ["DrawPrimitive", "FilledDot", "RenderOutput", "StrokeCurve"]
