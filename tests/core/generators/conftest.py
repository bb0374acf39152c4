"""generator テスト共通のヘルパ。"""

from __future__ import annotations

from typing import Any, Callable

import pytest

from patternix.core.draw import FilledDot, RenderOutput, StrokeCurve


def _fingerprint(output: RenderOutput) -> list[tuple[Any, ...]]:
    rows: list[tuple[Any, ...]] = []
    for prim in output:
        if isinstance(prim, StrokeCurve):
            rows.append(
                (
                    "stroke",
                    prim.path.anchors.tolist(),
                    prim.path.controls.tolist(),
                    prim.color,
                    prim.stroke_width,
                    prim.opacity,
                    prim.depth,
                )
            )
        elif isinstance(prim, FilledDot):
            rows.append(("dot", prim.center, prim.radius, prim.color, prim.opacity, prim.depth))
        else:
            raise TypeError(type(prim))
    return rows


@pytest.fixture
def fingerprint() -> Callable[[RenderOutput], list[tuple[Any, ...]]]:
    """RenderOutput を比較可能な値（配列は list）に変換する関数。"""
    return _fingerprint
