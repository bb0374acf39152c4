"""AuroraStack generator のテスト。"""

from __future__ import annotations

import re

import numpy as np

from patternix.core.color import Gradient
from patternix.core.generator_registry import generator_registry
from patternix.core.generators.aurora_stack import (
    AuroraStackParams,
    aurora_stack,
    base_paths,
    split_paths,
)

_HEX = re.compile(r"^#[0-9a-f]{6}$")


def _line(y: float, n: int = 20) -> list[tuple[float, float]]:
    return [(100.0 + 50.0 * i, y) for i in range(n)]


def test_dots_have_hex_colors_and_visible_opacity() -> None:
    out = aurora_stack(AuroraStackParams(dot_density=40), seed=2)
    assert out
    for p in out:
        assert _HEX.match(p.color)
        assert 0.05 < p.opacity <= 1.0
        assert p.radius > 0.0


def test_split_paths_shapes() -> None:
    assert split_paths(None) == []
    assert split_paths([]) == []
    single = _line(0.0)
    assert split_paths(single) == [single]
    assert split_paths([single, single]) == [single, single]
    assert split_paths([{"x": 0, "y": 0}]) == [[{"x": 0, "y": 0}]]
    assert len(split_paths(np.zeros((3, 12, 2)))) == 3


def test_short_paths_are_ignored(fingerprint) -> None:
    params = AuroraStackParams(dot_density=30)
    long_path = _line(300.0)
    short = _line(700.0, n=5)
    assert fingerprint(aurora_stack(params, seed=1, custom_path=[short, long_path])) == fingerprint(
        aurora_stack(params, seed=1, custom_path=[long_path])
    )
    assert fingerprint(aurora_stack(params, seed=1, custom_path=[short])) == fingerprint(
        aurora_stack(params, seed=1)
    )


def test_multiple_paths_each_get_a_band() -> None:
    params = AuroraStackParams(dot_density=30, band_width=30.0)
    paths = base_paths(params, [_line(200.0), _line(800.0)])
    assert [p.shape for p in paths] == [(30, 2), (30, 2)]

    out = aurora_stack(params, seed=5, custom_path=[_line(200.0), _line(800.0)])
    ys = np.array([p.center[1] for p in out])
    assert np.any(ys < 500.0)
    assert np.any(ys > 500.0)


def test_path_offsets_shift_each_path() -> None:
    entry = generator_registry["aurora_stack"]
    base = entry({"dotDensity": 30}, seed=5, custom_path=[_line(300.0)])
    moved = entry(
        {"dotDensity": 30, "pathOffsets": [{"horizontal": 15, "vertical": -10}]},
        seed=5,
        custom_path=[_line(300.0)],
    )
    assert len(base) == len(moved)
    for a, b in zip(base, moved):
        np.testing.assert_allclose(np.subtract(b.center, a.center), [15.0, -10.0], atol=1e-9)


def test_gradient_color_follows_position() -> None:
    gradient = {
        "type": "linear",
        "angle": 0,
        "stops": [{"color": "#ff0000", "position": 0}, {"color": "#0000ff", "position": 100}],
    }
    entry = generator_registry["aurora_stack"]
    params = entry.resolve({"dotDensity": 60, "colorData": gradient, "color2Data": gradient})
    assert isinstance(params.color_data, Gradient)

    out = aurora_stack(params, seed=3)
    left = [p for p in out if p.center[0] < 300.0]
    right = [p for p in out if p.center[0] > 980.0]
    assert left and right
    for p in left:
        r, b = int(p.color[1:3], 16), int(p.color[5:7], 16)
        assert r > b
    for p in right:
        r, b = int(p.color[1:3], 16), int(p.color[5:7], 16)
        assert b > r
