"""FlowField generator のテスト。"""

from __future__ import annotations

import numpy as np
import pytest

from patternix.core.generator_registry import generator_registry
from patternix.core.generators.flow_field import (
    FlowFieldParams,
    WaveCenter,
    displace,
    flow_field,
    wave_centers,
)
from patternix.core.seeded_stream import SeededStream


def test_one_stroke_per_line() -> None:
    out = flow_field(FlowFieldParams(lines=7), seed=3)
    assert len(out) == 7


def test_single_line_sits_at_mid_height() -> None:
    out = flow_field(FlowFieldParams(lines=1, distortion_strength=0.0), seed=3)
    assert len(out) == 1
    np.testing.assert_allclose(out[0].path.anchors[:, 1], 520.0)


def test_undistorted_lines_are_evenly_spaced() -> None:
    out = flow_field(FlowFieldParams(lines=3, distortion_strength=0.0), seed=3)
    ys = [float(p.path.anchors[0, 1]) for p in out]
    assert ys == pytest.approx([0.0, 520.0, 1040.0])
    xs = out[0].path.anchors[:, 0]
    assert xs[0] == 0.0
    assert xs[-1] == pytest.approx(1280.0)


def test_wave_centers_count_and_placement() -> None:
    params = FlowFieldParams()
    for seed in range(20):
        centers = wave_centers(params, SeededStream(seed))
        assert 2 <= len(centers) <= 4
        for c in centers:
            assert 0.2 * 1280 <= c.x <= 0.8 * 1280
            assert 0.2 * 1040 <= c.y <= 0.8 * 1040


def test_displacement_is_zero_outside_influence() -> None:
    far = WaveCenter(x=0.0, y=0.0, radius_x=10.0, radius_y=10.0, strength=50.0, phase=0.3)
    x = np.array([100.0, 200.0])
    np.testing.assert_array_equal(displace(x, 500.0, [far], frequency=3.0, smoothness=0.7), 0.0)


def test_displacement_inside_influence() -> None:
    c = WaveCenter(x=0.0, y=0.0, radius_x=100.0, radius_y=100.0, strength=10.0, phase=np.pi / 2)
    dy = displace(np.array([0.0]), 0.0, [c], frequency=3.0, smoothness=0.7)
    # d=0 → sin(phase) * 1 * strength
    assert dy[0] == pytest.approx(10.0)


def test_smoothness_is_clamped() -> None:
    params = generator_registry["flow_field"].resolve({"smoothness": 0})
    assert params.smoothness == 0.01
