"""
どこで: `src/patternix/core/color.py`。
何を: 単色/グラデーション（linear・radial）の色指定モデルと、キャンバス位置での色評価を提供する。
なぜ: aurora のように点ごとに色を変える generator と UI のカラーピッカー出力を同じ表現で扱うため。
"""

from __future__ import annotations

import math
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Literal

RGB = tuple[int, int, int]

FALLBACK_RGB: RGB = (77, 255, 223)
"""解釈できない色・ストップ無しのグラデーションで使う色。"""

_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{6}|[0-9a-fA-F]{3})$")
_RGB_FUNC_RE = re.compile(r"^rgb\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*\)$")


def _clamp(value: float, lo: float, hi: float) -> float:
    if not math.isfinite(value):
        return lo
    return lo if value < lo else hi if value > hi else value


def parse_color(text: object, fallback: RGB = FALLBACK_RGB) -> RGB:
    """`#RRGGBB` / `RRGGBB` / `#RGB` / `rgb(r,g,b)` を RGB255 に変換する。

    解釈できない値は fallback を返す（例外は投げない）。
    """
    s = str(text).strip()
    m = _HEX_RE.match(s)
    if m is not None:
        h = m.group(1)
        if len(h) == 3:
            h = "".join(c * 2 for c in h)
        return int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16)
    m = _RGB_FUNC_RE.match(s)
    if m is not None:
        r, g, b = (min(255, int(v)) for v in m.groups())
        return r, g, b
    return fallback


def rgb_to_hex(rgb: RGB) -> str:
    """RGB255 を `#rrggbb` に変換する。"""
    r, g, b = (int(_clamp(float(v), 0.0, 255.0)) for v in rgb)
    return f"#{r:02x}{g:02x}{b:02x}"


def lighten(rgb: RGB, amount: float) -> RGB:
    """白へ向けて amount（0..1）だけ寄せた色を返す。"""
    a = _clamp(float(amount), 0.0, 1.0)
    out = [min(255, int(round(c + (255 - c) * a))) for c in rgb]
    return out[0], out[1], out[2]


@dataclass(frozen=True, slots=True)
class SolidColor:
    """単色指定。"""

    color: str


@dataclass(frozen=True, slots=True)
class GradientStop:
    """グラデーションのストップ。position/opacity は 0..100 にクランプする。"""

    color: str
    position: float = 0.0
    opacity: float = 100.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "position", _clamp(float(self.position), 0.0, 100.0))
        object.__setattr__(self, "opacity", _clamp(float(self.opacity), 0.0, 100.0))


@dataclass(frozen=True, slots=True)
class Gradient:
    """linear / radial グラデーション指定。stops は position 昇順に整列して保持する。"""

    kind: Literal["linear", "radial"]
    stops: tuple[GradientStop, ...] = field(default_factory=tuple)
    angle: float = 90.0

    def __post_init__(self) -> None:
        if self.kind not in ("linear", "radial"):
            raise ValueError(f"未対応のグラデーション種別: {self.kind!r}")
        ordered = tuple(sorted(self.stops, key=lambda s: s.position))
        object.__setattr__(self, "stops", ordered)
        angle = float(self.angle)
        object.__setattr__(self, "angle", angle if math.isfinite(angle) else 90.0)


ColorSpec = SolidColor | Gradient


def _hex_text(value: object) -> str:
    s = str(value).strip()
    return s if s.startswith("#") or s.startswith("rgb") else f"#{s}"


def color_spec_from_value(value: Any, fallback: str) -> ColorSpec:
    """UI のカラーピッカー出力（mapping）・色文字列・ColorSpec を ColorSpec に揃える。

    Parameters
    ----------
    value : Any
        None / 色文字列 / ColorSpec / `{"type": ..., "value"?, "angle"?, "stops"?}`。
    fallback : str
        単色として使う既定色。

    Returns
    -------
    ColorSpec
        正規化済みの色指定。解釈できない入力は fallback の単色。
    """
    if isinstance(value, (SolidColor, Gradient)):
        return value
    if value is None:
        return SolidColor(fallback)
    if isinstance(value, str):
        return SolidColor(value)
    if not isinstance(value, Mapping):
        return SolidColor(fallback)

    kind = str(value.get("type", value.get("kind", "solid"))).lower()
    if kind not in ("linear", "radial"):
        raw = value.get("value", value.get("color"))
        return SolidColor(_hex_text(raw) if raw else fallback)

    stops: list[GradientStop] = []
    raw_stops = value.get("stops") or ()
    if isinstance(raw_stops, Sequence):
        for s in raw_stops:
            if not isinstance(s, Mapping):
                continue
            try:
                stops.append(
                    GradientStop(
                        color=_hex_text(s.get("color", fallback)),
                        position=float(s.get("position", 0.0)),
                        opacity=float(s.get("opacity", 100.0)),
                    )
                )
            except (TypeError, ValueError):
                continue
    try:
        angle = float(value.get("angle", 90.0) or 90.0)
    except (TypeError, ValueError):
        angle = 90.0
    return Gradient(kind="linear" if kind == "linear" else "radial", stops=tuple(stops), angle=angle)


def gradient_position(
    spec: Gradient,
    position: tuple[float, float],
    canvas_size: tuple[float, float],
) -> float:
    """キャンバス位置をグラデーション上の位置（0..100）に写す。"""
    width, height = float(canvas_size[0]), float(canvas_size[1])
    cx, cy = width / 2.0, height / 2.0
    dx = float(position[0]) - cx
    dy = float(position[1]) - cy
    half_diagonal = math.hypot(width, height) / 2.0
    if half_diagonal <= 0.0:
        return 0.0

    if spec.kind == "linear":
        a = math.radians(spec.angle)
        projected = (dx * math.cos(a) + dy * math.sin(a)) / half_diagonal
        u = (projected + 1.0) / 2.0
    else:
        u = math.hypot(dx, dy) / half_diagonal
    return _clamp(u, 0.0, 1.0) * 100.0


def resolve_color(
    spec: ColorSpec,
    position: tuple[float, float],
    canvas_size: tuple[float, float],
) -> RGB:
    """色指定を position で評価して RGB255 を返す。

    Parameters
    ----------
    spec : ColorSpec
        単色またはグラデーション。
    position : tuple[float, float]
        評価位置（キャンバス座標）。
    canvas_size : tuple[float, float]
        キャンバス寸法 (width, height)。

    Returns
    -------
    RGB
        評価色。ストップが 1 つならその色、0 なら FALLBACK_RGB。
    """
    if isinstance(spec, SolidColor):
        return parse_color(spec.color)

    stops = spec.stops
    if not stops:
        return FALLBACK_RGB
    if len(stops) == 1:
        return parse_color(stops[0].color)

    pos = gradient_position(spec, position, canvas_size)
    first, last = stops[0], stops[-1]
    if pos <= first.position:
        return parse_color(first.color)
    if pos >= last.position:
        return parse_color(last.color)

    lo, hi = first, last
    for a, b in zip(stops[:-1], stops[1:]):
        if a.position <= pos <= b.position:
            lo, hi = a, b
            break

    span = hi.position - lo.position
    t = (pos - lo.position) / span if span > 0.0 else 0.0
    c1 = parse_color(lo.color)
    c2 = parse_color(hi.color)
    r = int(round(c1[0] * (1.0 - t) + c2[0] * t))
    g = int(round(c1[1] * (1.0 - t) + c2[1] * t))
    b = int(round(c1[2] * (1.0 - t) + c2[2] * t))
    return r, g, b


__all__ = [
    "ColorSpec",
    "FALLBACK_RGB",
    "Gradient",
    "GradientStop",
    "RGB",
    "SolidColor",
    "color_spec_from_value",
    "gradient_position",
    "lighten",
    "parse_color",
    "resolve_color",
    "rgb_to_hex",
]
