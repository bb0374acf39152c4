"""SVG export（`patternix.export.svg`）のテスト。"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path

import pytest

from patternix.core.draw import FilledDot, StrokeCurve
from patternix.core.runtime_config import set_config_path
from patternix.core.spline import CubicPath, to_smooth_curve
from patternix.export.svg import export_svg, path_to_d, render_svg

_SVG_NS = "http://www.w3.org/2000/svg"
_NS = {"svg": _SVG_NS}


@pytest.fixture(autouse=True)
def _isolate_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    set_config_path(None)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    yield
    set_config_path(None)


def _parse_svg(text: str) -> ET.Element:
    root = ET.fromstring(text.encode("utf-8"))
    assert root.tag == f"{{{_SVG_NS}}}svg"
    return root


def _curve(**kwargs) -> StrokeCurve:
    defaults = dict(
        path=to_smooth_curve([(0.0, 0.0), (10.0, 20.0), (30.0, 20.0)]),
        color="#ff0000",
        stroke_width=2.0,
        opacity=0.5,
    )
    defaults.update(kwargs)
    return StrokeCurve(**defaults)


def test_render_svg_writes_root_attributes() -> None:
    root = _parse_svg(render_svg([], (1280, 1040), decimals=3))
    assert root.attrib["viewBox"] == "0 0 1280 1040"
    assert root.attrib["width"] == "1280"
    assert root.attrib["height"] == "1040"
    assert list(root) == []


def test_elements_follow_primitive_order() -> None:
    dot = FilledDot(center=(5.0, 6.0), radius=1.5, color="#00ff00", opacity=0.25)
    text = render_svg([dot, _curve(), dot], (100, 100), decimals=2)
    root = _parse_svg(text)
    tags = [child.tag.split("}")[1] for child in root]
    assert tags == ["circle", "path", "circle"]


def test_path_attributes() -> None:
    root = _parse_svg(render_svg([_curve()], (100, 100), decimals=2))
    path = root.find("svg:path", _NS)
    assert path is not None
    assert path.attrib["fill"] == "none"
    assert path.attrib["stroke"] == "#ff0000"
    assert path.attrib["stroke-width"] == "2.00"
    assert path.attrib["opacity"] == "0.50"
    assert path.attrib["stroke-linecap"] == "round"
    assert path.attrib["d"].startswith("M 0.00 0.00 C ")
    assert path.attrib["d"].count("C ") == 2


def test_circle_attributes() -> None:
    dot = FilledDot(center=(5.0, -6.25), radius=1.5, color="#00ff00", opacity=0.25)
    circle = _parse_svg(render_svg([dot], (100, 100), decimals=1)).find("svg:circle", _NS)
    assert circle is not None
    assert circle.attrib == {
        "cx": "5.0",
        "cy": "-6.2",
        "r": "1.5",
        "fill": "#00ff00",
        "opacity": "0.2",
    }


def test_path_to_d_for_single_segment() -> None:
    path = CubicPath.single((0.0, 0.0), (1.0, 2.0), (3.0, 4.0), (5.0, -0.0001))
    assert path_to_d(path, decimals=0) == "M 0 0 C 1 2, 3 4, 5 0"


def test_degenerate_paths_are_skipped() -> None:
    empty = _curve(path=to_smooth_curve([]))
    root = _parse_svg(render_svg([empty], (100, 100), decimals=2))
    assert root.find("svg:path", _NS) is None

    single = _curve(path=to_smooth_curve([(1.0, 1.0)]))
    path = _parse_svg(render_svg([single], (100, 100), decimals=0)).find("svg:path", _NS)
    assert path is not None
    assert path.attrib["d"] == "M 1 1"


def test_background_rect_is_first() -> None:
    root = _parse_svg(render_svg([_curve()], (100, 100), background_color="#101010", decimals=2))
    first = list(root)[0]
    assert first.tag == f"{{{_SVG_NS}}}rect"
    assert first.attrib["fill"] == "#101010"


def test_decimals_default_comes_from_config() -> None:
    dot = FilledDot(center=(1.0, 2.0), radius=3.0, color="#000", opacity=1.0)
    circle = _parse_svg(render_svg([dot], (10, 10))).find("svg:circle", _NS)
    assert circle is not None
    assert circle.attrib["cx"] == "1.000"


def test_invalid_canvas_size_raises() -> None:
    with pytest.raises(ValueError):
        render_svg([], None)
    with pytest.raises(ValueError):
        render_svg([], (0, 100))


def test_unknown_primitive_raises() -> None:
    with pytest.raises(TypeError):
        render_svg([object()], (10, 10), decimals=1)  # type: ignore[list-item]


def test_export_svg_writes_file(tmp_path: Path) -> None:
    out = export_svg([_curve()], tmp_path / "nested" / "out.svg", canvas_size=(100, 50))
    assert out == tmp_path / "nested" / "out.svg"
    text = out.read_text(encoding="utf-8")
    assert text.endswith("</svg>\n")
    assert _parse_svg(text).attrib["viewBox"] == "0 0 100 50"
