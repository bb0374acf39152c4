"""サイン波の和で作る軽量な疑似ノイズ関数群（値域はおおよそ [-1, 1]）。"""

from __future__ import annotations

import numpy as np

ArrayLike = float | np.ndarray


def sine_noise3(x: ArrayLike, y: ArrayLike, z: ArrayLike) -> ArrayLike:
    """3 項の 3D 疑似ノイズ。球面テクスチャの半径変位に使う。"""
    a = np.sin(x * 2.1 + y * 1.3) * np.cos(z * 1.7)
    b = np.cos(x * 1.5 - z * 2.3) * np.sin(y * 1.9)
    c = np.sin(z * 1.8 + x * 2.2) * np.cos(y * 1.4)
    return (a + b + c) / 3.0


def line_noise(x: ArrayLike, y: ArrayLike, line_index: float) -> ArrayLike:
    """線番号で位相をずらす 2D 疑似ノイズ。flow field の細かな揺らぎに使う。"""
    n1 = np.sin(x * 2.1 + y * 1.3 + line_index * 0.7)
    n2 = np.cos(x * 1.5 - y * 2.3 + line_index * 0.5)
    n3 = np.sin(y * 1.8 + x * 2.2 + line_index * 0.3)
    return (n1 + n2 + n3) / 3.0


def turbulence_noise(x: ArrayLike, y: ArrayLike) -> ArrayLike:
    """aurora の積み上げ高さを揺らす 2D 疑似ノイズ。"""
    n1 = np.sin(x * 2.3 + y * 1.7)
    n2 = np.cos(x * 1.8 - y * 2.1)
    n3 = np.sin(y * 2.5 + x * 1.3)
    return (n1 + n2 + n3) / 3.0


__all__ = ["line_noise", "sine_noise3", "turbulence_noise"]
