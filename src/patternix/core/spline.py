"""
どこで: `src/patternix/core/spline.py`。
何を: 3 次ベジェ区間列 `CubicPath` と、点列から Catmull-Rom 相当の滑らかな曲線を作る変換を提供する。
なぜ: 生成した点列を全点を通る C1 連続な曲線として描画・検証できる形に統一するため。
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from patternix.core.curve_smoother import as_points


@dataclass(frozen=True, slots=True)
class CubicPath:
    """始点と (cp1, cp2, end) 区間列で表す開いた 3 次ベジェ曲線。

    Parameters
    ----------
    anchors : np.ndarray
        float64 型 shape (M+1, 2) の通過点列。空曲線は shape (0, 2)。
    controls : np.ndarray
        float64 型 shape (M, 2, 2) の制御点列。controls[i] = (cp1, cp2)。

    Notes
    -----
    区間 i は anchors[i] → anchors[i+1] を結ぶ。配列は writeable=False で保持する。
    """

    anchors: np.ndarray
    controls: np.ndarray

    def __post_init__(self) -> None:
        anchors = np.asarray(self.anchors, dtype=np.float64)
        controls = np.asarray(self.controls, dtype=np.float64)

        if anchors.size == 0:
            anchors = np.zeros((0, 2), dtype=np.float64)
        if controls.size == 0:
            controls = np.zeros((0, 2, 2), dtype=np.float64)

        if anchors.ndim != 2 or anchors.shape[1] != 2:
            raise ValueError("anchors は shape (M+1, 2) である必要がある")
        if controls.ndim != 3 or controls.shape[1:] != (2, 2):
            raise ValueError("controls は shape (M, 2, 2) である必要がある")

        expected = max(0, anchors.shape[0] - 1)
        if controls.shape[0] != expected:
            raise ValueError("controls の区間数は anchors 数 - 1 と一致する必要がある")

        anchors = anchors.copy()
        controls = controls.copy()
        anchors.setflags(write=False)
        controls.setflags(write=False)
        object.__setattr__(self, "anchors", anchors)
        object.__setattr__(self, "controls", controls)

    @classmethod
    def single(
        cls,
        start: tuple[float, float],
        cp1: tuple[float, float],
        cp2: tuple[float, float],
        end: tuple[float, float],
    ) -> "CubicPath":
        """1 区間だけの曲線を作る。"""
        anchors = np.array([start, end], dtype=np.float64)
        controls = np.array([[cp1, cp2]], dtype=np.float64)
        return cls(anchors=anchors, controls=controls)

    @property
    def segment_count(self) -> int:
        """区間数 M。"""
        return int(self.controls.shape[0])

    @property
    def is_empty(self) -> bool:
        """点を 1 つも持たないかどうか。"""
        return self.anchors.shape[0] == 0

    def segment(self, index: int) -> np.ndarray:
        """区間 index の (p1, cp1, cp2, p2) を shape (4, 2) で返す。"""
        i = int(index)
        return np.stack(
            (self.anchors[i], self.controls[i, 0], self.controls[i, 1], self.anchors[i + 1])
        )

    def evaluate(self, index: int, t: float | np.ndarray) -> np.ndarray:
        """区間 index をパラメータ t（0..1）で評価する。"""
        p1, c1, c2, p2 = self.segment(index)
        tt = np.asarray(t, dtype=np.float64)[..., None]
        u = 1.0 - tt
        return u**3 * p1 + 3.0 * u * u * tt * c1 + 3.0 * u * tt * tt * c2 + tt**3 * p2

    def sample(self, per_segment: int = 8) -> np.ndarray:
        """曲線を折れ線として標本化し shape (K, 2) で返す。"""
        if self.is_empty:
            return np.zeros((0, 2), dtype=np.float64)
        if self.segment_count == 0:
            return np.array(self.anchors, dtype=np.float64)
        k = max(1, int(per_segment))
        ts = np.linspace(0.0, 1.0, k + 1)[1:]
        parts = [self.anchors[:1]]
        for i in range(self.segment_count):
            parts.append(self.evaluate(i, ts))
        return np.concatenate(parts, axis=0)


def to_smooth_curve(points: object) -> CubicPath:
    """点列を全点を通る 3 次ベジェ区間列に変換する。

    Parameters
    ----------
    points : object
        通過点列（`as_points` が受け付ける形式）。

    Returns
    -------
    CubicPath
        区間 (p1, p2) ごとに、前後の近傍 p0/p3（端では p1/p2 で代用）から
        cp1 = p1 + (p2 - p0) / 6, cp2 = p2 - (p3 - p1) / 6 を求めた曲線。
        0 点なら空曲線、1 点なら区間 0 の曲線。
    """
    pts = as_points(points)
    n = pts.shape[0]
    if n < 2:
        return CubicPath(anchors=pts, controls=np.zeros((0, 2, 2), dtype=np.float64))

    idx = np.arange(n - 1)
    p0 = pts[np.maximum(idx - 1, 0)]
    p1 = pts[idx]
    p2 = pts[idx + 1]
    p3 = pts[np.minimum(idx + 2, n - 1)]

    cp1 = p1 + (p2 - p0) / 6.0
    cp2 = p2 - (p3 - p1) / 6.0
    controls = np.stack((cp1, cp2), axis=1)
    return CubicPath(anchors=pts, controls=controls)


__all__ = ["CubicPath", "to_smooth_curve"]
