# どこで: `src/patternix/api/generators.py`。
# 何を: generator を名前で呼ぶ `generate` と公開名前空間 G、seed/phase の生成ヘルパを提供する。
# なぜ: UI やスクリプトから、登録済み generator を同じ呼び出し形で使えるようにするため。

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any, Callable

import numpy as np

from patternix.core.draw import RenderOutput
from patternix.core.generator_registry import generator_registry

# generator 実装モジュールをインポートしてレジストリに登録させる。
from patternix.core.generators import aurora_stack as _generator_aurora_stack  # noqa: F401
from patternix.core.generators import branching_tree as _generator_branching_tree  # noqa: F401
from patternix.core.generators import flow_field as _generator_flow_field  # noqa: F401
from patternix.core.generators import ribbon_wave as _generator_ribbon_wave  # noqa: F401
from patternix.core.generators import sound_columns as _generator_sound_columns  # noqa: F401
from patternix.core.generators import sphere_particles as _generator_sphere_particles  # noqa: F401
from patternix.core.generators import sphere_wireframe as _generator_sphere_wireframe  # noqa: F401
from patternix.core.generators import spirograph as _generator_spirograph  # noqa: F401


def generate(
    name: str,
    params: Mapping[str, Any] | Any = None,
    *,
    seed: int | float | None = None,
    phase: Any = None,
    custom_path: Any = None,
) -> RenderOutput:
    """登録済み generator を名前で実行する。

    Parameters
    ----------
    name : str
        generator 名（例: ``"spirograph"``）。
    params : Mapping[str, Any] or Params, optional
        パラメータ。camelCase / snake_case のキー、または Params インスタンス。
    seed : int | float | None, optional
        乱数 seed。None は既定 seed。
    phase : Any, optional
        層ごとの位相列（ribbon_wave のみ使用）。
    custom_path : Any, optional
        手描きパス（aurora_stack はパスのリストも可）。

    Returns
    -------
    RenderOutput
        描画順に並んだプリミティブ列。

    Raises
    ------
    KeyError
        未登録の generator 名が指定された場合。
    """
    entry = generator_registry.get(name)
    return entry(params, seed=seed, phase=phase, custom_path=custom_path)


def new_seed() -> float:
    """新しい seed（[0, 1) の float）を返す。"""
    return float(np.random.default_rng().random())


def new_phases(count: int) -> tuple[float, ...]:
    """層ごとの位相（[0, 2π) の float）を count 個返す。"""
    n = max(0, int(count))
    values = np.random.default_rng().random(n) * math.pi * 2.0
    return tuple(float(v) for v in values)


class GeneratorNamespace:
    """登録済み generator を属性として呼べる名前空間。

    Attributes
    ----------
    <name> : Callable[..., RenderOutput]
        登録済み generator 名ごとの呼び出し関数。
        例: G.spirograph(seed=3, curves=5) -> RenderOutput
    """

    def __getattr__(self, name: str) -> Callable[..., RenderOutput]:
        """generator 名に対応する呼び出し関数を返す。

        Raises
        ------
        AttributeError
            未登録の generator 名が指定された場合。
        """
        if name.startswith("_"):
            raise AttributeError(name)

        if name not in generator_registry:
            raise AttributeError(f"未登録の generator: {name!r}")

        def call(
            *,
            seed: int | float | None = None,
            phase: Any = None,
            custom_path: Any = None,
            **params: Any,
        ) -> RenderOutput:
            return generate(name, params, seed=seed, phase=phase, custom_path=custom_path)

        call.__name__ = name
        return call

    def __dir__(self) -> list[str]:
        return sorted(set(super().__dir__()) | set(generator_registry.names()))


G = GeneratorNamespace()
"""登録済み generator を呼び出す公開名前空間。"""

__all__ = ["G", "GeneratorNamespace", "generate", "new_phases", "new_seed"]
