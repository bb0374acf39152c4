"""SphereWireframe generator のテスト。"""

from __future__ import annotations

import numpy as np

from patternix.core.generators.sphere_wireframe import (
    SphereWireframeParams,
    latitude_ring,
    meridian,
    sphere_wireframe,
)


def test_depth_is_non_decreasing() -> None:
    out = sphere_wireframe(
        SphereWireframeParams(layers=8, meridians=8, rotate_x=25.0, rotate_y=40.0, rotate_z=10.0)
    )
    depths = [p.depth for p in out]
    assert len(depths) == 16
    assert all(a <= b for a, b in zip(depths, depths[1:]))


def test_back_lines_are_fainter() -> None:
    out = sphere_wireframe(SphereWireframeParams(layers=0, meridians=12, wave_amplitude=0.0))
    assert out[0].opacity < out[-1].opacity
    assert all(0.2 - 1e-12 <= p.opacity <= 1.0 for p in out)


def test_single_layer_is_equator() -> None:
    ring = latitude_ring(np.pi / 2.0, 100.0, 0.0, 4.0)
    np.testing.assert_allclose(ring[:, 1], 0.0, atol=1e-9)
    np.testing.assert_allclose(np.hypot(ring[:, 0], ring[:, 2]), 100.0)

    out = sphere_wireframe(SphereWireframeParams(layers=1, meridians=0, wave_amplitude=0.0))
    assert len(out) == 1
    np.testing.assert_allclose(out[0].path.anchors[:, 1], 520.0, atol=1e-6)


def test_meridian_runs_pole_to_pole() -> None:
    line = meridian(0.0, 50.0, 0.0, 4.0, samples=10)
    np.testing.assert_allclose(line[0], [0.0, 50.0, 0.0], atol=1e-12)
    np.testing.assert_allclose(line[-1], [0.0, -50.0, 0.0], atol=1e-12)


def test_empty_sphere() -> None:
    assert sphere_wireframe(SphereWireframeParams(layers=0, meridians=0)) == []
