"""
どこで: `src/patternix/core/generators/aurora_stack.py`。
何を: 基準曲線に沿って、法線方向へ小さな円を高さ可変で積み上げたオーロラ状の帯を生成する。
なぜ: 根元の色と上方へ明るくなるハロー色の点描で、光の帯のゆらぎを表現するため。
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

import numpy as np

from patternix.core.color import ColorSpec, SolidColor, lighten, resolve_color, rgb_to_hex
from patternix.core.curve_smoother import accepts_custom_path, as_points, smooth_and_resample
from patternix.core.draw import FilledDot, RenderOutput
from patternix.core.generator_registry import generator
from patternix.core.generators.common import CanvasParams, canvas_meta
from patternix.core.noise import turbulence_noise
from patternix.core.parameters.meta import ParamMeta
from patternix.core.seeded_stream import SeededStream

_logger = logging.getLogger(__name__)

STACK_SPACING = 1.8
HALO_LIGHTEN = 0.2
MIN_DOT_OPACITY = 0.05


@dataclass(frozen=True, slots=True)
class AuroraStackParams(CanvasParams):
    """AuroraStack のパラメータ。

    color_data / color2_data はグラデーションを含む色指定で、None なら
    color / color2 の単色を使う。path_offsets は custom path ごとの (dx, dy)。
    """

    color: str = "#4DFFDF"
    color2: str = "#FF1493"
    color_data: ColorSpec | None = None
    color2_data: ColorSpec | None = None
    dot_density: int = 150
    flow_amplitude: float = 80.0
    flow_frequency: float = 2.0
    band_width: float = 120.0
    turbulence: float = 0.3
    fade_edges: float = 0.7
    path_offsets: tuple[tuple[float, float], ...] = ()


aurora_stack_meta = {
    **canvas_meta,
    "color": ParamMeta(kind="color"),
    "color2": ParamMeta(kind="color"),
    "color_data": ParamMeta(kind="color_spec"),
    "color2_data": ParamMeta(kind="color_spec"),
    "dot_density": ParamMeta(kind="int", ui_min=20, ui_max=500, clamp_min=0, clamp_max=20000),
    "flow_amplitude": ParamMeta(kind="float", ui_min=0.0, ui_max=400.0),
    "flow_frequency": ParamMeta(kind="float", ui_min=0.1, ui_max=10.0),
    "band_width": ParamMeta(kind="float", ui_min=0.0, ui_max=400.0),
    "turbulence": ParamMeta(kind="float", ui_min=0.0, ui_max=1.0),
    "fade_edges": ParamMeta(kind="float", ui_min=0.0, ui_max=3.0),
    "path_offsets": ParamMeta(kind="offsets"),
}


def _is_point(value: Any) -> bool:
    if isinstance(value, Mapping):
        return True
    if isinstance(value, (str, bytes)) or not isinstance(value, (Sequence, np.ndarray)):
        return False
    return len(value) >= 2 and isinstance(value[0], (int, float, np.number))


def split_paths(custom_path: Any) -> list[Any]:
    """custom path を「パスのリスト」に揃える（単一パスは 1 要素のリスト）。"""
    if custom_path is None:
        return []
    if isinstance(custom_path, np.ndarray):
        if custom_path.ndim == 3:
            return list(custom_path)
        return [custom_path]
    if len(custom_path) == 0:
        return []
    if _is_point(custom_path[0]):
        return [custom_path]
    return list(custom_path)


def _default_base(params: AuroraStackParams, count: int) -> np.ndarray:
    t = np.linspace(0.0, 1.0, count) if count > 1 else np.zeros(count)
    x = t * float(params.width)
    y = float(params.height) / 2.0 + np.sin(t * math.pi * float(params.flow_frequency) * 2.0) * float(
        params.flow_amplitude
    ) * np.sin(t * math.pi * 1.5)
    return np.stack((x, y), axis=1)


def base_paths(params: AuroraStackParams, custom_path: Any) -> list[np.ndarray]:
    """帯の基準曲線（各 dot_density 点）を返す。採用できるパスが無ければ既定の波 1 本。"""
    count = max(0, int(params.dot_density))
    paths: list[np.ndarray] = []
    for raw in split_paths(custom_path):
        pts = as_points(raw)
        if not accepts_custom_path(pts):
            _logger.debug("aurora_stack: 短い custom path を無視する (points=%d)", int(pts.shape[0]))
            continue
        paths.append(smooth_and_resample(pts, count, passes=1, max_window=8, window_divisor=10))
    if not paths:
        paths.append(_default_base(params, count))
    return paths


def _spec_or_solid(spec: ColorSpec | None, fallback: str) -> ColorSpec:
    if spec is None or (isinstance(spec, SolidColor) and not spec.color):
        return SolidColor(fallback)
    return spec


@generator(name="aurora_stack", params=AuroraStackParams, meta=aurora_stack_meta)
def aurora_stack(
    params: AuroraStackParams,
    *,
    seed: int | float | None = None,
    phase: Any = None,
    custom_path: Any = None,
) -> RenderOutput:
    """オーロラ状に積み上げた点の帯を生成する。

    Parameters
    ----------
    params : AuroraStackParams
        解決済みパラメータ。
    seed : int | float | None, optional
        乱数 seed。
    phase : Any, optional
        未使用。
    custom_path : Any, optional
        単一のパス、またはパスのリスト。10 点以下のパスは無視する。

    Returns
    -------
    RenderOutput
        パス順 → 基準点順 → 積み上げ順に並んだ FilledDot 列。
    """
    random = SeededStream(seed)
    canvas = (float(params.width), float(params.height))
    base_spec = _spec_or_solid(params.color_data, params.color)
    halo_spec = _spec_or_solid(params.color2_data, params.color2)
    turbulence = float(params.turbulence)
    frequency = float(params.flow_frequency)

    out: RenderOutput = []
    for path_index, base in enumerate(base_paths(params, custom_path)):
        dx, dy = (
            params.path_offsets[path_index]
            if path_index < len(params.path_offsets)
            else (0.0, 0.0)
        )
        shift_x = float(params.horizontal_offset) + float(dx)
        shift_y = float(params.vertical_offset) + float(dy)
        n = base.shape[0]
        for i in range(n):
            t = i / (n - 1) if n > 1 else 0.0
            px, py = float(base[i, 0]), float(base[i, 1])

            # 端点は接線 (0, 1) のまま（正規化しない）
            tx, ty = 0.0, 1.0
            if 0 < i < n - 1:
                tx = float(base[i + 1, 0] - base[i - 1, 0])
                ty = float(base[i + 1, 1] - base[i - 1, 1])
                norm = math.hypot(tx, ty)
                if norm > 0.0:
                    tx /= norm
                    ty /= norm
            nx, ny = -ty, tx
            if ny > 0.0:
                nx, ny = -nx, -ny

            envelope = abs(math.sin(t * math.pi * frequency * 3.0 + random.next() * 0.5)) * math.sin(
                t * math.pi
            )
            variation = 1.0 + float(turbulence_noise(px * 0.01, py * 0.01)) * turbulence
            stack = max(1, int(math.floor(float(params.band_width) / 6.0 * envelope * variation)))
            size = 2.0 + random.next() * 2.0
            edge = math.sin(t * math.pi)

            for si in range(stack):
                progress = si / max(1, stack - 1)
                distance = si * size * STACK_SPACING
                jitter = random.centered(size * 0.5 * turbulence)
                x = px + nx * distance + tx * jitter + shift_x
                y = py + ny * distance + ty * jitter + shift_y
                radius = size * (0.6 + (1.0 - progress) ** 0.3 * 0.4)
                alpha = (
                    float(params.opacity)
                    * math.exp(-progress * float(params.fade_edges))
                    * edge
                    * (0.6 + random.next() * 0.4)
                )
                if not alpha > MIN_DOT_OPACITY:
                    continue
                if si == 0:
                    rgb = resolve_color(base_spec, (x, y), canvas)
                else:
                    rgb = lighten(resolve_color(halo_spec, (x, y), canvas), progress * HALO_LIGHTEN)
                out.append(FilledDot((x, y), radius, rgb_to_hex(rgb), min(1.0, alpha)))
    return out


__all__ = [
    "AuroraStackParams",
    "aurora_stack",
    "aurora_stack_meta",
    "base_paths",
    "split_paths",
]
