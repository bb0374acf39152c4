"""generator レジストリとデコレータのテスト。"""

from __future__ import annotations

from dataclasses import dataclass

import pytest

from patternix.core.draw import FilledDot
from patternix.core.generator_registry import GeneratorRegistry, generator, generator_registry
from patternix.core.parameters import ParamMeta


@dataclass(frozen=True, slots=True)
class _DotParams:
    radius: float = 2.0
    count: int = 3


_DOT_META = {
    "radius": ParamMeta(kind="float", clamp_min=0.0),
    "count": ParamMeta(kind="int", clamp_min=0),
}


def test_decorator_registers_and_resolves_params() -> None:
    seen = {}

    @generator(params=_DotParams, meta=_DOT_META, name="_test_dots")
    def _test_dots(params, *, seed=None, phase=None, custom_path=None):
        seen["params"] = params
        seen["seed"] = seed
        return [
            FilledDot(center=(float(i), 0.0), radius=params.radius, color="#000", opacity=1.0)
            for i in range(params.count)
        ]

    assert "_test_dots" in generator_registry
    entry = generator_registry["_test_dots"]
    out = entry({"radius": -1, "count": "2"}, seed=9)
    assert len(out) == 2
    assert seen["params"] == _DotParams(radius=0.0, count=2)
    assert seen["seed"] == 9
    assert generator_registry.get_defaults("_test_dots") == {"radius": 2.0, "count": 3}
    assert generator_registry.get_params_class("_test_dots") is _DotParams
    assert set(generator_registry.get_meta("_test_dots")) == {"radius", "count"}


def test_meta_keys_must_exist_on_params() -> None:
    with pytest.raises(ValueError):
        generator(params=_DotParams, meta={"nope": ParamMeta(kind="float")})


def test_alias_targets_must_exist_on_params() -> None:
    with pytest.raises(ValueError):
        generator(params=_DotParams, meta=_DOT_META, aliases={"R": "missing"})


def test_params_must_be_dataclass() -> None:
    with pytest.raises(TypeError):
        generator(params=dict, meta={})


def test_unknown_name_raises_key_error() -> None:
    registry = GeneratorRegistry()
    with pytest.raises(KeyError):
        registry.get("missing")
    assert registry.names() == ()
