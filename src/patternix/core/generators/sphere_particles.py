"""
どこで: `src/patternix/core/generators/sphere_particles.py`。
何を: Fibonacci 球面格子に点を置き、波とノイズで半径を揺らして 3D 投影した点群の球を生成する。
なぜ: 点の大きさと濃さを奥行きで変え、粒子で質感のある球体を表現するため。
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

import numpy as np

from patternix.core.draw import FilledDot, RenderOutput
from patternix.core.generator_registry import generator
from patternix.core.generators.common import CanvasParams, canvas_meta, center_of
from patternix.core.noise import sine_noise3
from patternix.core.parameters.meta import ParamMeta
from patternix.core.seeded_stream import SeededStream
from patternix.core.transform3d import Rotation3D, depth_ratio, project

FOCAL = 1500.0
GOLDEN_RATIO = (1.0 + math.sqrt(5.0)) / 2.0


@dataclass(frozen=True, slots=True)
class SphereParticleParams(CanvasParams):
    """SphereParticleField のパラメータ。"""

    color: str = "#FFFFFF"
    dot_density: int = 2500
    radius: float = 250.0
    dot_size_min: float = 1.0
    dot_size_max: float = 4.0
    noise_scale: float = 0.15
    noise_frequency: float = 3.0
    wave_amplitude: float = 0.08
    wave_frequency: float = 4.0
    rotate_x: float = 0.0
    rotate_y: float = 0.0
    rotate_z: float = 0.0


sphere_particles_meta = {
    **canvas_meta,
    "color": ParamMeta(kind="color"),
    "dot_density": ParamMeta(kind="int", ui_min=100, ui_max=10000, clamp_min=0, clamp_max=100000),
    "radius": ParamMeta(kind="float", ui_min=10.0, ui_max=600.0),
    "dot_size_min": ParamMeta(kind="float", ui_min=0.1, ui_max=10.0, clamp_min=0.0),
    "dot_size_max": ParamMeta(kind="float", ui_min=0.1, ui_max=20.0, clamp_min=0.0),
    "noise_scale": ParamMeta(kind="float", ui_min=0.0, ui_max=1.0),
    "noise_frequency": ParamMeta(kind="float", ui_min=0.0, ui_max=20.0),
    "wave_amplitude": ParamMeta(kind="float", ui_min=0.0, ui_max=1.0),
    "wave_frequency": ParamMeta(kind="float", ui_min=0.0, ui_max=20.0),
    "rotate_x": ParamMeta(kind="float", ui_min=-180.0, ui_max=180.0),
    "rotate_y": ParamMeta(kind="float", ui_min=-180.0, ui_max=180.0),
    "rotate_z": ParamMeta(kind="float", ui_min=-180.0, ui_max=180.0),
}


def fibonacci_sphere(count: int, *, phase: float = 0.0) -> tuple[np.ndarray, np.ndarray]:
    """Fibonacci 球面格子の (phi, theta) を返す。

    phi = acos(1 - 2t), theta = 2π·golden·i + phase（t = i / count）。
    """
    n = max(0, int(count))
    i = np.arange(n, dtype=np.float64)
    t = i / n if n > 0 else i
    phi = np.arccos(1.0 - 2.0 * t)
    theta = math.pi * 2.0 * GOLDEN_RATIO * i + float(phase)
    return phi, theta


@generator(name="sphere_particles", params=SphereParticleParams, meta=sphere_particles_meta)
def sphere_particles(
    params: SphereParticleParams,
    *,
    seed: int | float | None = None,
    phase: Any = None,
    custom_path: Any = None,
) -> RenderOutput:
    """点群で質感を付けた球を生成する。

    Parameters
    ----------
    params : SphereParticleParams
        解決済みパラメータ。
    seed : int | float | None, optional
        格子の経度方向の位相をずらす seed。
    phase : Any, optional
        未使用。
    custom_path : Any, optional
        未使用。

    Returns
    -------
    RenderOutput
        可視点の FilledDot を z の昇順（奥→手前）に並べた列。
    """
    cx, cy = center_of(params)
    radius = float(params.radius)
    longitude_phase = SeededStream(seed).next() * math.pi * 2.0
    phi, theta = fibonacci_sphere(int(params.dot_density), phase=longitude_phase)

    sin_phi = np.sin(phi)
    unit = np.column_stack((sin_phi * np.cos(theta), sin_phi * np.sin(theta), np.cos(phi)))

    wf = float(params.wave_frequency)
    wave = np.sin(theta * wf) * np.cos(phi * wf * 0.5)
    wave_factor = 1.0 + wave * float(params.wave_amplitude)

    scale = float(params.noise_frequency) / radius if radius != 0.0 else 0.0
    base = unit * radius
    n = sine_noise3(base[:, 0] * scale, base[:, 1] * scale, base[:, 2] * scale)
    noise_factor = 1.0 + n * float(params.noise_scale)

    model = unit * (radius * wave_factor * noise_factor)[:, None]
    proj = project(model, Rotation3D(params.rotate_x, params.rotate_y, params.rotate_z), focal=FOCAL)

    ratio = np.asarray(depth_ratio(proj.z, radius * 2.0))
    size_min = float(params.dot_size_min)
    size_max = float(params.dot_size_max)
    sizes = (size_min + (size_max - size_min) * (0.6 + ratio * 0.4)) * (0.8 + n * 0.4)
    opacities = float(params.opacity) * np.clip((0.3 + ratio * 0.7) * (0.7 + n * 0.3), 0.2, 1.0)

    visible = np.flatnonzero(proj.visible)
    order = visible[np.argsort(proj.z[visible], kind="stable")]
    return [
        FilledDot(
            center=(cx + float(proj.xy[i, 0]), cy + float(proj.xy[i, 1])),
            radius=float(sizes[i]),
            color=params.color,
            opacity=float(opacities[i]),
            depth=float(proj.z[i]),
        )
        for i in order
    ]


__all__ = [
    "SphereParticleParams",
    "fibonacci_sphere",
    "sphere_particles",
    "sphere_particles_meta",
]
