"""
どこで: `src/patternix/core/generators/branching_tree.py`。
何を: 中心点から放射状に、または基準線上のノードから、曲がった枝を再帰的に伸ばす樹状パターンを生成する。
なぜ: 世代ごとに細く短くなる枝と末端の点で、神経細胞のような有機的な形を作るため。

Notes
-----
乱数は 1 本の枝ごとに「角度ゆらぎ → cp1 ゆらぎ → cp2 ゆらぎ → 分岐判定 →（世代 > 0 なら）子の本数
→ 長さ係数 → 子ごとの角度ゆらぎ」の順で消費する。同じ seed で同じ形を再現するための約束事。
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

import numpy as np

from patternix.core.draw import FilledDot, RenderOutput, StrokeCurve
from patternix.core.generator_registry import generator
from patternix.core.generators.common import (
    CanvasParams,
    canvas_meta,
    center_of,
    custom_baseline,
    stroke,
)
from patternix.core.parameters.meta import ParamMeta
from patternix.core.seeded_stream import SeededStream
from patternix.core.spline import CubicPath

MIN_BRANCH_LENGTH = 5.0
MAX_DEPTH = 10
BASELINE_SAMPLES = 200
WIDTH_DECAY = 0.7
NODE_DECAY = 0.85


@dataclass(frozen=True, slots=True)
class BranchingTreeParams(CanvasParams):
    """放射型 BranchingTree のパラメータ。"""

    stroke_width: float = 1.5
    color: str = "#4300B0"
    node_color: str = "#4300B0"
    branches: int = 12
    depth: int = 4
    spread: float = 0.8
    curvature: float = 0.3
    node_size: float = 3.0
    branch_probability: float = 0.7


@dataclass(frozen=True, slots=True)
class BranchingTreeLineParams(BranchingTreeParams):
    """基準線型 BranchingTree のパラメータ（branches はノードあたりの根の本数）。"""

    branches: int = 3
    nodes: int = 8
    baseline_amplitude: float = 0.08


branching_tree_meta = {
    **canvas_meta,
    "stroke_width": ParamMeta(kind="float", ui_min=0.1, ui_max=10.0, clamp_min=0.0),
    "color": ParamMeta(kind="color"),
    "node_color": ParamMeta(kind="color"),
    "branches": ParamMeta(kind="int", ui_min=1, ui_max=36, clamp_min=0, clamp_max=360),
    "depth": ParamMeta(kind="int", ui_min=0, ui_max=8, clamp_min=0, clamp_max=MAX_DEPTH),
    "spread": ParamMeta(kind="float", ui_min=0.0, ui_max=1.0),
    "curvature": ParamMeta(kind="float", ui_min=0.0, ui_max=1.0),
    "node_size": ParamMeta(kind="float", ui_min=0.0, ui_max=20.0, clamp_min=0.0),
    "branch_probability": ParamMeta(
        kind="float", ui_min=0.0, ui_max=1.0, clamp_min=0.0, clamp_max=1.0
    ),
}

branching_tree_line_meta = {
    **branching_tree_meta,
    "branches": ParamMeta(kind="int", ui_min=1, ui_max=8, clamp_min=0, clamp_max=64),
    "nodes": ParamMeta(kind="int", ui_min=1, ui_max=30, clamp_min=0, clamp_max=500),
    "baseline_amplitude": ParamMeta(kind="float", ui_min=0.0, ui_max=0.5),
}


class _Grower:
    """1 回の生成で共有する乱数・パラメータ・出力先をまとめた再帰ヘルパ。"""

    __slots__ = ("_params", "_random", "_out", "_first_fanout")

    def __init__(
        self,
        params: BranchingTreeParams,
        random: SeededStream,
        out: RenderOutput,
        *,
        first_fanout: int,
    ) -> None:
        self._params = params
        self._random = random
        self._out = out
        self._first_fanout = int(first_fanout)

    def grow(self, start: tuple[float, float], angle: float, length: float, generation: int) -> None:
        """start から angle 方向に 1 本の枝を描き、必要なら子枝を再帰的に伸ばす。"""
        p = self._params
        rnd = self._random
        depth = int(p.depth)
        if generation > depth or not length >= MIN_BRANCH_LENGTH:
            return

        final_angle = angle + rnd.centered(math.pi * float(p.curvature))
        segment = length / 3.0
        cp1_angle = angle + rnd.centered(0.3)
        cp2_angle = final_angle + rnd.centered(0.3)

        sx, sy = start
        ex = sx + math.cos(final_angle) * length
        ey = sy + math.sin(final_angle) * length
        cp1 = (sx + math.cos(cp1_angle) * segment, sy + math.sin(cp1_angle) * segment)
        cp2 = (ex - math.cos(cp2_angle) * segment, ey - math.sin(cp2_angle) * segment)

        self._out.append(
            StrokeCurve(
                path=CubicPath.single(start, cp1, cp2, (ex, ey)),
                color=p.color,
                stroke_width=float(p.stroke_width) * WIDTH_DECAY**generation,
                opacity=p.opacity,
            )
        )

        should_branch = rnd.next() < float(p.branch_probability) and generation < depth
        if not should_branch:
            self._out.append(
                FilledDot(
                    center=(ex, ey),
                    radius=float(p.node_size) * NODE_DECAY**generation,
                    color=p.node_color,
                    opacity=p.opacity,
                )
            )
            return

        if generation == 0:
            children = self._first_fanout
        else:
            children = 2 if rnd.next() > 0.5 else 3
        child_length = length * (0.6 + rnd.next() * 0.2)
        fan = (math.pi / 3.0) * float(p.spread)
        for i in range(children):
            child_angle = final_angle + (i - (children - 1) / 2.0) * fan + rnd.centered(0.4)
            self.grow((ex, ey), child_angle, child_length, generation + 1)


@generator(name="branching_tree", params=BranchingTreeParams, meta=branching_tree_meta)
def branching_tree(
    params: BranchingTreeParams,
    *,
    seed: int | float | None = None,
    phase: Any = None,
    custom_path: Any = None,
) -> RenderOutput:
    """中心点から branches 本の枝を放射状に伸ばす。

    Returns
    -------
    RenderOutput
        枝（StrokeCurve）と末端の点（FilledDot）を生成順に並べ、最後に中心の点を置く。
    """
    random = SeededStream(seed)
    out: RenderOutput = []
    grower = _Grower(params, random, out, first_fanout=2)
    center = center_of(params)
    branches = max(0, int(params.branches))
    extent = min(float(params.width), float(params.height))
    for i in range(branches):
        angle = i / branches * math.pi * 2.0
        length = extent * 0.15 * (0.8 + random.next() * 0.4)
        grower.grow(center, angle, length, 0)

    out.append(
        FilledDot(
            center=center,
            radius=float(params.node_size) * 1.5,
            color=params.node_color,
            opacity=params.opacity,
        )
    )
    return out


def _default_line_baseline(params: BranchingTreeLineParams) -> np.ndarray:
    w = float(params.width)
    h = float(params.height)
    t = np.linspace(0.0, 1.0, BASELINE_SAMPLES)
    x = w * 0.1 + w * 0.8 * t
    y = h * 0.5 + np.sin(t * math.pi * 2.0) * h * float(params.baseline_amplitude) * np.sin(
        t * math.pi
    )
    return np.stack((x, y), axis=1)


def _node_frame(baseline: np.ndarray, t: float) -> tuple[tuple[float, float], tuple[float, float]]:
    """基準線上の位置 t（0..1）のノード座標と法線を返す。"""
    n = baseline.shape[0]
    index = t * (n - 1)
    i1 = min(int(math.floor(index)), n - 1)
    i2 = min(i1 + 1, n - 1)
    f = index - i1
    p1 = baseline[i1]
    p2 = baseline[i2]
    node = (float(p1[0] + (p2[0] - p1[0]) * f), float(p1[1] + (p2[1] - p1[1]) * f))

    # 両端の区間は接線を水平とみなす
    tx, ty = 1.0, 0.0
    if i2 < n - 1 and i1 > 0:
        tx = float(p2[0] - p1[0])
        ty = float(p2[1] - p1[1])
    norm = math.hypot(tx, ty)
    if norm > 0.0:
        tx /= norm
        ty /= norm
    return node, (-ty, tx)


@generator(
    name="branching_tree_line",
    params=BranchingTreeLineParams,
    meta=branching_tree_line_meta,
)
def branching_tree_line(
    params: BranchingTreeLineParams,
    *,
    seed: int | float | None = None,
    phase: Any = None,
    custom_path: Any = None,
) -> RenderOutput:
    """基準線上の nodes 個のノードから、線の上下どちらかへ枝を伸ばす。

    Parameters
    ----------
    params : BranchingTreeLineParams
        解決済みパラメータ。
    seed : int | float | None, optional
        乱数 seed。
    phase : Any, optional
        未使用。
    custom_path : Any, optional
        10 点を超える手描きパス。基準線を置き換える（200 点へ再標本化）。

    Returns
    -------
    RenderOutput
        基準線 → ノードごとに（ノード点 → 枝と末端点）の順。
    """
    random = SeededStream(seed)
    baseline = custom_baseline(custom_path, BASELINE_SAMPLES, generator_name="branching_tree_line")
    if baseline is None:
        baseline = _default_line_baseline(params)
    baseline = baseline + np.array(
        [float(params.horizontal_offset), float(params.vertical_offset)], dtype=np.float64
    )

    out: RenderOutput = [
        stroke(
            baseline,
            color=params.color,
            stroke_width=float(params.stroke_width) * 1.5,
            opacity=params.opacity,
        )
    ]

    branches = max(0, int(params.branches))
    grower = _Grower(params, random, out, first_fanout=branches)
    nodes = max(0, int(params.nodes))
    extent = min(float(params.width), float(params.height))
    for i in range(nodes):
        t = i / (nodes - 1) if nodes > 1 else 0.0
        node, (nx, ny) = _node_frame(baseline, t)
        if not random.next() > 0.5:
            nx, ny = -nx, -ny

        out.append(
            FilledDot(
                center=node,
                radius=float(params.node_size) * 1.5,
                color=params.node_color,
                opacity=params.opacity,
            )
        )

        base_angle = math.atan2(ny, nx)
        for b in range(branches):
            offset = (b - (branches - 1) / 2.0) * (math.pi / 6.0) * float(params.spread)
            angle = base_angle + offset + random.centered(0.3)
            length = extent * 0.12 * (0.8 + random.next() * 0.4)
            grower.grow(node, angle, length, 0)
    return out


__all__ = [
    "BranchingTreeLineParams",
    "BranchingTreeParams",
    "branching_tree",
    "branching_tree_line",
    "branching_tree_line_meta",
    "branching_tree_meta",
]
