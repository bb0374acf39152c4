"""DrawPrimitive の値クランプのテスト。"""

from __future__ import annotations

import math

from patternix.core.draw import FilledDot, StrokeCurve
from patternix.core.spline import to_smooth_curve


def test_stroke_curve_clamps_opacity_and_width() -> None:
    path = to_smooth_curve([(0.0, 0.0), (1.0, 1.0)])
    s = StrokeCurve(path=path, color="#000", stroke_width=-2.0, opacity=1.7)
    assert s.stroke_width == 0.0
    assert s.opacity == 1.0
    assert s.depth == 0.0


def test_filled_dot_clamps_radius_opacity_and_depth() -> None:
    d = FilledDot(center=(1, 2), radius=-1.0, color="#fff", opacity=-0.5, depth=math.nan)
    assert d.center == (1.0, 2.0)
    assert d.radius == 0.0
    assert d.opacity == 0.0
    assert d.depth == 0.0


def test_non_finite_opacity_becomes_zero() -> None:
    d = FilledDot(center=(0.0, 0.0), radius=1.0, color="#fff", opacity=math.inf)
    assert d.opacity == 0.0
