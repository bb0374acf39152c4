"""
どこで: `src/patternix/core/generators/sphere_wireframe.py`。
何を: 波で半径を揺らした緯線・経線の球を 3D 回転・透視投影し、奥から順に描く。
なぜ: 線だけで立体感のある球体を表現するため（奥の線ほど薄くする）。
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

FOCAL = 1500.0
RING_SAMPLES = 200
MERIDIAN_SAMPLES = 150
MIN_RUN_POINTS = 4


@dataclass(frozen=True, slots=True)
class SphereWireframeParams(CanvasParams):
    """SphereWireframe のパラメータ。"""

    stroke_width: float = 1.0
    color: str = "#FFFFFF"
    layers: int = 30
    meridians: int = 20
    radius: float = 200.0
    wave_amplitude: float = 0.15
    wave_frequency: float = 4.0
    rotate_x: float = 0.0
    rotate_y: float = 0.0
    rotate_z: float = 0.0


sphere_wireframe_meta = {
    **canvas_meta,
    "stroke_width": ParamMeta(kind="float", ui_min=0.1, ui_max=10.0, clamp_min=0.0),
    "color": ParamMeta(kind="color"),
    "layers": ParamMeta(kind="int", ui_min=0, ui_max=100, clamp_min=0, clamp_max=1000),
    "meridians": ParamMeta(kind="int", ui_min=0, ui_max=100, clamp_min=0, clamp_max=1000),
    "radius": ParamMeta(kind="float", ui_min=10.0, ui_max=600.0),
    "wave_amplitude": ParamMeta(kind="float", ui_min=0.0, ui_max=1.0),
    "wave_frequency": ParamMeta(kind="float", ui_min=0.0, ui_max=20.0),
    "rotate_x": ParamMeta(kind="float", ui_min=-180.0, ui_max=180.0),
    "rotate_y": ParamMeta(kind="float", ui_min=-180.0, ui_max=180.0),
    "rotate_z": ParamMeta(kind="float", ui_min=-180.0, ui_max=180.0),
}


def latitude_ring(
    phi: float, radius: float, amplitude: float, frequency: float, samples: int = RING_SAMPLES
) -> np.ndarray:
    """極角 phi の緯線を samples+1 点の shape (N, 3) で返す。"""
    theta = np.linspace(0.0, math.pi * 2.0, samples + 1)
    wave = np.sin(theta * frequency + phi * 2.0) * radius * amplitude if amplitude > 0 else 0.0
    r = radius * math.sin(phi) + wave
    y = np.full(theta.shape, radius * math.cos(phi))
    return np.column_stack((r * np.cos(theta), y, r * np.sin(theta)))


def meridian(
    theta: float,
    radius: float,
    amplitude: float,
    frequency: float,
    samples: int = MERIDIAN_SAMPLES,
) -> np.ndarray:
    """方位角 theta の経線を samples+1 点の shape (N, 3) で返す。"""
    phi = np.linspace(0.0, math.pi, samples + 1)
    wave = np.sin(phi * frequency + theta * 3.0) * radius * amplitude if amplitude > 0 else 0.0
    r = radius * np.sin(phi) + wave
    return np.column_stack((r * math.cos(theta), radius * np.cos(phi), r * math.sin(theta)))


@generator(name="sphere_wireframe", params=SphereWireframeParams, meta=sphere_wireframe_meta)
def sphere_wireframe(
    params: SphereWireframeParams,
    *,
    seed: int | float | None = None,
    phase: Any = None,
    custom_path: Any = None,
) -> RenderOutput:
    """緯線 layers 本と経線 meridians 本からなる波打つ球を生成する。

    Returns
    -------
    RenderOutput
        平均 z の昇順に並べた StrokeCurve 列。3 点以下の可視区間は描かない。
    """
    cx, cy = center_of(params)
    radius = float(params.radius)
    amplitude = float(params.wave_amplitude)
    frequency = float(params.wave_frequency)
    rotation = Rotation3D(
        x=float(params.rotate_x), y=float(params.rotate_y), z=float(params.rotate_z)
    )

    lines: list[np.ndarray] = []
    layers = max(0, int(params.layers))
    for i in range(layers):
        phi = (i / (layers - 1) if layers > 1 else 0.5) * math.pi
        lines.append(latitude_ring(phi, radius, amplitude, frequency))
    meridians = max(0, int(params.meridians))
    for i in range(meridians):
        theta = i / meridians * math.pi * 2.0
        lines.append(meridian(theta, radius, amplitude, frequency))

    strokes: list[StrokeCurve] = []
    for model in lines:
        proj = project(model, rotation, focal=FOCAL)
        for run in visible_runs(proj.visible, min_length=MIN_RUN_POINTS):
            avg_z = float(np.mean(proj.z[run]))
            depth_opacity = 0.4 + float(depth_ratio(avg_z, radius * 2.0)) * 0.6
            strokes.append(
                stroke(
                    proj.xy[run] + (cx, cy),
                    color=params.color,
                    stroke_width=params.stroke_width,
                    opacity=float(params.opacity) * min(1.0, max(0.2, depth_opacity)),
                    depth=avg_z,
                )
            )
    return list(depth_sorted(strokes))


__all__ = [
    "SphereWireframeParams",
    "latitude_ring",
    "meridian",
    "sphere_wireframe",
    "sphere_wireframe_meta",
]
