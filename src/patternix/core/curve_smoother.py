"""
どこで: `src/patternix/core/curve_smoother.py`。
何を: 点列のガウス平滑化 + Catmull-Rom 再標本化と、固定カーネルの移動平均・接線推定を提供する。
なぜ: 手描きパスや生成した基準曲線を、各 generator が同じ手順で滑らかな密な曲線へ整えるため。
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from typing import Any

import numpy as np
from numba import njit  # type: ignore[import-untyped]

CUSTOM_PATH_MIN_POINTS = 10
"""custom path を採用する最小点数（この値を「超える」必要がある）。"""

WEIGHTS_7 = np.array([1.0, 2.0, 3.0, 4.0, 3.0, 2.0, 1.0], dtype=np.float64)
WEIGHTS_5 = np.array([1.0, 2.0, 3.0, 2.0, 1.0], dtype=np.float64)


def _point_row(p: Any) -> tuple[float, float] | None:
    try:
        if isinstance(p, Mapping):
            return float(p.get("x", 0.0)), float(p.get("y", 0.0))
        return float(p[0]), float(p[1])
    except (TypeError, ValueError, IndexError, KeyError):
        return None


def as_points(points: Any) -> np.ndarray:
    """点列を float64 の shape (N, 2) 配列へ変換して返す。

    Parameters
    ----------
    points : Any
        (x, y) のシーケンス、`{"x": .., "y": ..}` のシーケンス、または ndarray。

    Returns
    -------
    np.ndarray
        shape (N, 2) の配列。None や空入力は shape (0, 2)。

    Notes
    -----
    数値に変換できない点と NaN/inf を含む点は捨てる。
    """
    if points is None or isinstance(points, (str, bytes)):
        return np.zeros((0, 2), dtype=np.float64)
    if isinstance(points, np.ndarray) and points.dtype.kind in "biuf":
        arr = points.astype(np.float64, copy=False)
        if arr.ndim != 2 or arr.shape[1] < 2:
            return np.zeros((0, 2), dtype=np.float64)
        arr = arr[:, :2]
    else:
        try:
            items = list(points)
        except TypeError:
            return np.zeros((0, 2), dtype=np.float64)
        rows = [row for row in map(_point_row, items) if row is not None]
        if not rows:
            return np.zeros((0, 2), dtype=np.float64)
        arr = np.asarray(rows, dtype=np.float64)
    return np.ascontiguousarray(arr[np.isfinite(arr).all(axis=1)])


def accepts_custom_path(path: Sequence[Any] | np.ndarray | None) -> bool:
    """custom path が基準曲線の置き換えに十分な長さかを返す。"""
    if path is None:
        return False
    return len(path) > CUSTOM_PATH_MIN_POINTS


def smoothing_window(length: int, *, max_window: int = 15, divisor: int = 8) -> int:
    """入力長に応じたガウス窓の半幅を返す（最小 1）。"""
    return max(1, min(int(max_window), int(length) // max(1, int(divisor))))


@njit(cache=True)
def _gaussian_pass_nb(points: np.ndarray, window: int) -> np.ndarray:
    n = points.shape[0]
    out = np.empty_like(points)
    sigma = window / 2.5
    two_sigma2 = 2.0 * sigma * sigma
    for i in range(n):
        sx = 0.0
        sy = 0.0
        total = 0.0
        for j in range(-window, window + 1):
            idx = i + j
            if idx < 0 or idx >= n:
                continue
            w = math.exp(-(j * j) / two_sigma2)
            sx += points[idx, 0] * w
            sy += points[idx, 1] * w
            total += w
        # 中心サンプル (j=0, w=1) を必ず含むので total > 0
        out[i, 0] = sx / total
        out[i, 1] = sy / total
    return out


@njit(cache=True)
def _catmull_rom_resample_nb(points: np.ndarray, count: int) -> np.ndarray:
    n = points.shape[0]
    out = np.empty((count, 2), dtype=np.float64)
    for i in range(count):
        t = 0.0
        if count > 1:
            t = i / (count - 1)
        index = t * (n - 1)
        i1 = int(math.floor(index))
        if i1 > n - 1:
            i1 = n - 1
        i2 = min(i1 + 1, n - 1)
        f = index - i1
        i0 = max(0, i1 - 1)
        i3 = min(n - 1, i2 + 1)
        f2 = f * f
        f3 = f2 * f
        for k in range(2):
            p0 = points[i0, k]
            p1 = points[i1, k]
            p2 = points[i2, k]
            p3 = points[i3, k]
            out[i, k] = 0.5 * (
                (2.0 * p1)
                + (-p0 + p2) * f
                + (2.0 * p0 - 5.0 * p1 + 4.0 * p2 - p3) * f2
                + (-p0 + 3.0 * p1 - 3.0 * p2 + p3) * f3
            )
    return out


def gaussian_smooth(
    points: np.ndarray,
    *,
    passes: int = 2,
    max_window: int = 15,
    window_divisor: int = 8,
) -> np.ndarray:
    """ガウス重み移動平均を passes 回適用した同じ長さの点列を返す。"""
    pts = np.ascontiguousarray(points, dtype=np.float64)
    if pts.shape[0] == 0:
        return pts.copy()
    for _ in range(max(0, int(passes))):
        window = smoothing_window(pts.shape[0], max_window=max_window, divisor=window_divisor)
        pts = _gaussian_pass_nb(pts, window)
    return pts


def smooth_and_resample(
    points: Any,
    target_count: int,
    *,
    passes: int = 2,
    max_window: int = 15,
    window_divisor: int = 8,
) -> np.ndarray:
    """点列を平滑化し、ちょうど target_count 点へ再標本化する。

    Parameters
    ----------
    points : Any
        入力点列（`as_points` が受け付ける形式）。
    target_count : int
        出力点数。負値は 0 扱い。
    passes : int, optional
        ガウス平滑化の回数（1–2 を想定）。
    max_window : int, optional
        ガウス窓の半幅の上限。
    window_divisor : int, optional
        半幅 = len // window_divisor（上限 max_window、下限 1）。

    Returns
    -------
    np.ndarray
        shape (target_count, 2) の点列。入力が空なら shape (0, 2)。

    Notes
    -----
    再標本化はパラメータ t を等間隔に取り、近傍 4 点の Catmull-Rom で評価する。
    端では境界点を繰り返してクランプする。
    """
    pts = as_points(points)
    count = max(0, int(target_count))
    if pts.shape[0] == 0 or count == 0:
        return np.zeros((0, 2), dtype=np.float64)
    smoothed = gaussian_smooth(
        pts, passes=passes, max_window=max_window, window_divisor=window_divisor
    )
    return _catmull_rom_resample_nb(smoothed, count)


def weighted_moving_average(values: np.ndarray, weights: np.ndarray) -> np.ndarray:
    """奇数長カーネルで移動平均する。窓が収まらない両端は元の値を残す。

    Parameters
    ----------
    values : np.ndarray
        shape (N,) または (N, K) の値列。
    weights : np.ndarray
        奇数長の重み列。

    Returns
    -------
    np.ndarray
        入力と同じ shape の平滑化済み配列。
    """
    vals = np.asarray(values, dtype=np.float64)
    w = np.asarray(weights, dtype=np.float64)
    out = vals.copy()
    half = w.shape[0] // 2
    n = vals.shape[0]
    if n <= 2 * half:
        return out
    total = float(w.sum())
    acc = np.zeros_like(vals[half : n - half])
    for j in range(w.shape[0]):
        acc += vals[j : n - 2 * half + j] * w[j]
    out[half : n - half] = acc / total
    return out


def stencil_tangents(
    points: np.ndarray,
    half_widths: tuple[int, ...] = (8, 5, 3, 2),
) -> np.ndarray:
    """中心差分で単位接線を推定する。

    各点で取れる最も広い半幅の中心差分を使い、どれも取れない端点は片側差分を使う。
    長さ 0 の接線は正規化せず、1 点だけの入力は (0, 1) を返す。
    """
    pts = np.asarray(points, dtype=np.float64)
    n = pts.shape[0]
    tangents = np.zeros((n, 2), dtype=np.float64)
    tangents[:, 1] = 1.0
    if n == 0:
        return tangents

    idx = np.arange(n)
    assigned = np.zeros(n, dtype=bool)
    for h in half_widths:
        mask = (~assigned) & (idx >= h) & (idx < n - h)
        sel = idx[mask]
        tangents[sel] = (pts[sel + h] - pts[sel - h]) / float(2 * h)
        assigned |= mask

    forward = (~assigned) & (idx < n - 1)
    sel = idx[forward]
    tangents[sel] = pts[sel + 1] - pts[sel]
    assigned |= forward

    backward = (~assigned) & (idx > 0)
    sel = idx[backward]
    tangents[sel] = pts[sel] - pts[sel - 1]

    lengths = np.hypot(tangents[:, 0], tangents[:, 1])
    nz = lengths > 0.0
    tangents[nz] /= lengths[nz, None]
    return tangents


__all__ = [
    "CUSTOM_PATH_MIN_POINTS",
    "WEIGHTS_5",
    "WEIGHTS_7",
    "accepts_custom_path",
    "as_points",
    "gaussian_smooth",
    "smooth_and_resample",
    "smoothing_window",
    "stencil_tangents",
    "weighted_moving_average",
]
