"""
どこで: `src/patternix/core/seeded_stream.py`。
何を: seed から決定的な [0, 1) 乱数列を生成する SeededStream（Mulberry32）を提供する。
なぜ: 同じ seed と同じ呼び出し順なら常に同じパターンになるよう、乱数源を明示的な状態として扱うため。
"""

from __future__ import annotations

from math import floor, isfinite

_MASK32 = 0xFFFFFFFF
_INCREMENT = 0x6D2B79F5
_DENOMINATOR = 4294967296.0

DEFAULT_SEED = 0
"""seed 未指定時に使う既定値。"""

FALLBACK_SEED = 0x9E3779B9
"""NaN/inf など不正な seed の置き換え先。"""


def _imul(a: int, b: int) -> int:
    """32bit 乗算の下位 32bit を返す。"""
    return (a * b) & _MASK32


def coerce_seed(seed: int | float | None) -> int:
    """seed を 32bit 符号なし整数の初期状態へ正規化する。

    Parameters
    ----------
    seed : int | float | None
        整数 seed、または [0, 1) の float（2**32 倍して使う）。None は既定 seed。

    Returns
    -------
    int
        0..2**32-1 の初期状態。

    Notes
    -----
    例外は投げない。非有限の float は固定の代替値に置き換える。
    """
    if seed is None:
        return DEFAULT_SEED
    if isinstance(seed, bool):
        return int(seed)
    if isinstance(seed, int):
        return seed & _MASK32
    try:
        value = float(seed)
    except (TypeError, ValueError):
        return FALLBACK_SEED
    if not isfinite(value):
        return FALLBACK_SEED
    if 0.0 <= value < 1.0 and value != 0.0:
        value = value * _DENOMINATOR
    return int(floor(value)) & _MASK32


def next_value(state: int) -> tuple[float, int]:
    """状態を 1 ステップ進め、(乱数値, 新しい状態) を返す純関数。"""
    state = (state + _INCREMENT) & _MASK32
    t = state
    t = _imul(t ^ (t >> 15), t | 1)
    t = (t ^ ((t + _imul(t ^ (t >> 7), t | 61)) & _MASK32)) & _MASK32
    value = ((t ^ (t >> 14)) & _MASK32) / _DENOMINATOR
    return value, state


class SeededStream:
    """seed で初期化される決定的な乱数ストリーム。

    Notes
    -----
    1 回の generator 呼び出しごとに新しく作り、呼び出し間で共有しない。
    再 seed の API は持たない。
    """

    __slots__ = ("_state",)

    def __init__(self, seed: int | float | None = None) -> None:
        self._state = coerce_seed(seed)

    @property
    def state(self) -> int:
        """現在の内部状態（32bit）。"""
        return self._state

    def next(self) -> float:
        """[0, 1) の乱数を 1 つ返す。"""
        value, self._state = next_value(self._state)
        return value

    def uniform(self, lo: float, hi: float) -> float:
        """[lo, hi) の一様乱数を返す。"""
        return lo + (hi - lo) * self.next()

    def centered(self, scale: float = 1.0) -> float:
        """(next() - 0.5) * scale を返す。角度ゆらぎなどの対称なジッタ用。"""
        return (self.next() - 0.5) * scale


__all__ = [
    "DEFAULT_SEED",
    "FALLBACK_SEED",
    "SeededStream",
    "coerce_seed",
    "next_value",
]
