# どこで: `src/patternix/core/generators/sound_columns.py`。
# 何を: 合成正弦波の高さまで点を縦に積んだ列を並べ、音声波形のような点描を生成する。
# なぜ: 点の間隔と先端のフェードだけで波形の起伏を表現するため。

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from patternix.core.draw import FilledDot, RenderOutput
from patternix.core.generator_registry import generator
from patternix.core.generators.common import CanvasParams, canvas_meta
from patternix.core.parameters.meta import ParamMeta
from patternix.core.seeded_stream import SeededStream

TIP_FADE = 0.3


@dataclass(frozen=True, slots=True)
class SoundColumnsParams(CanvasParams):
    """SoundColumns のパラメータ。"""

    color: str = "#FFFFFF"
    columns: int = 200
    dot_size: float = 2.0
    dot_spacing: float = 4.0
    amplitude: float = 0.4
    frequency: float = 2.0
    waveforms: int = 1
    symmetrical: bool = True


sound_columns_meta = {
    **canvas_meta,
    "color": ParamMeta(kind="color"),
    "columns": ParamMeta(kind="int", ui_min=10, ui_max=500, clamp_min=1, clamp_max=10000),
    "dot_size": ParamMeta(kind="float", ui_min=0.5, ui_max=10.0, clamp_min=0.0),
    "dot_spacing": ParamMeta(kind="float", ui_min=1.0, ui_max=20.0, clamp_min=0.1),
    "amplitude": ParamMeta(kind="float", ui_min=0.0, ui_max=1.0),
    "frequency": ParamMeta(kind="float", ui_min=0.1, ui_max=10.0),
    "waveforms": ParamMeta(kind="int", ui_min=1, ui_max=5, clamp_min=0, clamp_max=100),
    "symmetrical": ParamMeta(kind="bool"),
}


def wave_height(t: float, *, height: float, amplitude: float, frequency: float, phase: float) -> float:
    """列位置 t（0..1）の波形の高さ（符号付き、上向きが正）を返す。"""
    value = (
        math.sin(t * math.pi * frequency * 2.0 + phase)
        + math.sin(t * math.pi * frequency * 4.0 + phase * 0.5) * 0.3
        + math.sin(t * math.pi * frequency * 8.0 + phase * 0.25) * 0.15
    )
    return height * amplitude * value * math.sin(t * math.pi) / 2.0


@generator(name="sound_columns", params=SoundColumnsParams, meta=sound_columns_meta)
def sound_columns(
    params: SoundColumnsParams,
    *,
    seed: int | float | None = None,
    phase: Any = None,
    custom_path: Any = None,
) -> RenderOutput:
    """点の列で描く音声波形を生成する。

    キャンバス外（x < 0 または x > width）の列は乱数を消費せずに飛ばす。
    各列は積んだ点のあとに中心線上の薄い基準点を 1 つ置く。
    """
    random = SeededStream(seed)
    width = float(params.width)
    height = float(params.height)
    cy = height / 2.0 + float(params.vertical_offset)
    spacing = float(params.dot_spacing)
    dot_size = float(params.dot_size)
    opacity = float(params.opacity)
    columns = max(1, int(params.columns))
    waveforms = max(0, int(params.waveforms))

    out: RenderOutput = []
    for wi in range(waveforms):
        wave_offset = (wi / max(1, waveforms - 1) - 0.5) * width * 0.6
        phase_shift = wi * math.pi * 2.0 / waveforms
        for col in range(columns):
            t = col / columns
            x = t * width + float(params.horizontal_offset) + wave_offset
            if x < 0.0 or x > width:
                continue

            h = wave_height(
                t,
                height=height,
                amplitude=float(params.amplitude),
                frequency=float(params.frequency),
                phase=phase_shift,
            )
            jitter_x = x + random.centered(spacing * 0.3)
            reach = abs(h)
            count = math.ceil(reach / spacing)

            for dot in range(count):
                fade = 1.0 - dot / count * TIP_FADE
                size = dot_size * fade
                alpha = opacity * fade
                step = dot * spacing + spacing / 2.0
                if params.symmetrical:
                    if step <= reach:
                        out.append(FilledDot((jitter_x, cy - step), size, params.color, alpha))
                        out.append(FilledDot((jitter_x, cy + step), size, params.color, alpha))
                else:
                    direction = -1.0 if h >= 0.0 else 1.0
                    out.append(FilledDot((jitter_x, cy + direction * step), size, params.color, alpha))

            out.append(FilledDot((x, cy), dot_size * 0.6, params.color, opacity * 0.5))
    return out


__all__ = ["SoundColumnsParams", "sound_columns", "sound_columns_meta", "wave_height"]
