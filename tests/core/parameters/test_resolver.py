"""`resolve_params` による生パラメータ → Params dataclass 解決のテスト。"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

import pytest

from patternix.core.color import Gradient, SolidColor
from patternix.core.parameters import ParamMeta, coerce_value, resolve_params, snake_case


@dataclass(frozen=True, slots=True)
class _Params:
    stroke_width: float = 1.0
    layers: int = 5
    symmetrical: bool = True
    color: str = "#000000"
    mode: str = "a"
    color_data: object = None
    path_offsets: tuple = ()


_META = {
    "stroke_width": ParamMeta(kind="float", clamp_min=0.0, clamp_max=10.0),
    "layers": ParamMeta(kind="int", clamp_min=1),
    "symmetrical": ParamMeta(kind="bool"),
    "color": ParamMeta(kind="color"),
    "mode": ParamMeta(kind="choice", choices=("a", "b")),
    "color_data": ParamMeta(kind="color_spec"),
    "path_offsets": ParamMeta(kind="offsets"),
}


def _resolve(values=None, **kwargs) -> _Params:
    return resolve_params(_Params, values, meta=_META, **kwargs)


def test_none_gives_all_defaults() -> None:
    assert _resolve() == _Params()


@pytest.mark.parametrize(
    ("name", "expected"),
    [("strokeWidth", "stroke_width"), ("dotSizeMin", "dot_size_min"), ("layers", "layers")],
)
def test_snake_case(name: str, expected: str) -> None:
    assert snake_case(name) == expected


def test_camel_and_snake_keys_are_both_accepted() -> None:
    assert _resolve({"strokeWidth": 3}).stroke_width == 3.0
    assert _resolve({"stroke_width": 4}).stroke_width == 4.0


def test_unknown_keys_are_ignored_with_warning(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="patternix.core.parameters.resolver"):
        p = _resolve({"bogus": 1, "layers": 2})
    assert p.layers == 2
    assert "bogus" in caplog.text


@pytest.mark.parametrize("bad", [math.nan, math.inf, "abc", None, [1, 2]])
def test_unparseable_numbers_fall_back_to_default(bad) -> None:
    p = _resolve({"stroke_width": bad, "layers": bad})
    assert p.stroke_width == 1.0
    assert p.layers == 5


def test_numeric_strings_are_parsed() -> None:
    p = _resolve({"stroke_width": " 2.5 ", "layers": "7"})
    assert p.stroke_width == 2.5
    assert p.layers == 7


def test_values_are_clamped() -> None:
    p = _resolve({"stroke_width": 99, "layers": -3})
    assert p.stroke_width == 10.0
    assert p.layers == 1


def test_int_is_rounded() -> None:
    assert _resolve({"layers": 2.6}).layers == 3


def test_bool_from_text() -> None:
    assert _resolve({"symmetrical": "false"}).symmetrical is False
    assert _resolve({"symmetrical": "yes"}).symmetrical is True
    assert _resolve({"symmetrical": 0}).symmetrical is False


def test_choice_outside_choices_uses_default() -> None:
    assert _resolve({"mode": "b"}).mode == "b"
    assert _resolve({"mode": "z"}).mode == "a"


def test_color_spec_is_normalized() -> None:
    assert _resolve({"color_data": "#ffffff"}).color_data == SolidColor("#ffffff")
    spec = _resolve({"colorData": {"type": "radial", "stops": []}}).color_data
    assert isinstance(spec, Gradient)


def test_offsets_accept_pairs_and_mappings() -> None:
    p = _resolve({"pathOffsets": [[1, 2], {"horizontal": 3, "vertical": 4}, {"x": 5}]})
    assert p.path_offsets == ((1.0, 2.0), (3.0, 4.0), (5.0, 0.0))


def test_aliases_map_ui_keys() -> None:
    p = _resolve({"W": 2.0}, aliases={"W": "stroke_width"})
    assert p.stroke_width == 2.0


def test_instance_is_re_normalized() -> None:
    p = _resolve(_Params(stroke_width=50.0))
    assert p.stroke_width == 10.0


def test_invalid_values_type_raises() -> None:
    with pytest.raises(TypeError):
        _resolve(42)


def test_coerce_value_without_meta_infers_from_default() -> None:
    assert coerce_value("3", 1, None) == 3
    assert coerce_value("x", 1.5, None) == 1.5
    assert coerce_value(None, "#fff", None) == "#fff"


def test_fields_without_defaults_are_rejected() -> None:
    @dataclass(frozen=True)
    class _NoDefault:
        value: float

    with pytest.raises(ValueError):
        resolve_params(_NoDefault, {})
