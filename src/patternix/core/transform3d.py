"""
どこで: `src/patternix/core/transform3d.py`。
何を: XYZ 回転 + 透視投影と、可視区間の分割・深度ソートのユーティリティを提供する。
なぜ: 球やスピログラフなど 3D 由来の generator が同じ投影と描画順（painter's algorithm）を共有するため。
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Protocol, TypeVar

import numpy as np

BEHIND_CUTOFF = 0.8
"""z < -focal * BEHIND_CUTOFF の点は不可視とする。"""

_FOCAL_PLANE_EPS = 1e-6


@dataclass(frozen=True, slots=True)
class Rotation3D:
    """各軸の回転角 [deg]。適用順序は x → y → z。"""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


@dataclass(frozen=True, slots=True)
class Projection:
    """投影結果。

    Parameters
    ----------
    xy : np.ndarray
        shape (N, 2) の投影後座標（原点は投影中心）。
    z : np.ndarray
        shape (N,) の回転後 z。大きいほど手前。
    visible : np.ndarray
        shape (N,) の bool 配列。
    """

    xy: np.ndarray
    z: np.ndarray
    visible: np.ndarray


def rotate(points: np.ndarray, rotation: Rotation3D) -> np.ndarray:
    """shape (N, 3) の点列を x → y → z の順に回転して返す。"""
    pts = np.asarray(points, dtype=np.float64).reshape(-1, 3)
    ax, ay, az = np.deg2rad([float(rotation.x), float(rotation.y), float(rotation.z)])

    x = pts[:, 0]
    y = pts[:, 1]
    z = pts[:, 2]

    cx, sx = np.cos(ax), np.sin(ax)
    y1 = y * cx - z * sx
    z1 = y * sx + z * cx

    cy, sy = np.cos(ay), np.sin(ay)
    x1 = x * cy + z1 * sy
    z2 = -x * sy + z1 * cy

    cz, sz = np.cos(az), np.sin(az)
    x2 = x1 * cz - y1 * sz
    y2 = x1 * sz + y1 * cz

    return np.stack((x2, y2, z2), axis=1)


def project(points: np.ndarray, rotation: Rotation3D, *, focal: float) -> Projection:
    """点列を回転し、scale = focal / (focal - z) で透視投影する。

    Parameters
    ----------
    points : np.ndarray
        shape (N, 3) のモデル空間座標。
    rotation : Rotation3D
        回転角 [deg]。
    focal : float
        透視距離。小さいほど遠近感が強い。

    Returns
    -------
    Projection
        投影座標・回転後 z・可視フラグ。

    Notes
    -----
    z < -focal*0.8（カメラの遥か後方）と、焦点面以遠（focal - z <= eps）の点は
    不可視とし、投影座標は元の xy のまま返す。
    """
    f = float(focal)
    rotated = rotate(points, rotation)
    z = rotated[:, 2]
    denom = f - z
    visible = (z >= -f * BEHIND_CUTOFF) & (denom > _FOCAL_PLANE_EPS)
    scale = np.ones_like(z)
    np.divide(f, denom, out=scale, where=visible)
    xy = rotated[:, :2] * scale[:, None]
    return Projection(xy=xy, z=z, visible=visible)


def visible_runs(visible: np.ndarray, *, min_length: int = 2) -> Iterator[slice]:
    """可視フラグ列から、連続して可視な区間の slice を列挙する。"""
    mask = np.asarray(visible, dtype=bool)
    n = mask.shape[0]
    start: int | None = None
    for i in range(n):
        if mask[i]:
            if start is None:
                start = i
            continue
        if start is not None and i - start >= min_length:
            yield slice(start, i)
        start = None
    if start is not None and n - start >= min_length:
        yield slice(start, n)


def depth_ratio(z: float | np.ndarray, extent: float) -> float | np.ndarray:
    """z を extent で割った正規化深度。extent <= 0 は 0 を返す。"""
    e = float(extent)
    if e <= 0.0:
        return np.zeros_like(z) if isinstance(z, np.ndarray) else 0.0
    return z / e


class _HasDepth(Protocol):
    @property
    def depth(self) -> float: ...


_D = TypeVar("_D", bound=_HasDepth)


def depth_sorted(items: Iterable[_D]) -> list[_D]:
    """depth 昇順（奥→手前）に安定ソートして返す。"""
    return sorted(items, key=lambda item: item.depth)


__all__ = [
    "BEHIND_CUTOFF",
    "Projection",
    "Rotation3D",
    "depth_ratio",
    "depth_sorted",
    "project",
    "rotate",
    "visible_runs",
]
