# src/patternix/core/generator_registry.py
# パターン generator の生成関数レジストリ。
# generator 名から生成関数・Params クラス・ParamMeta を引けるようにする。

from __future__ import annotations

import dataclasses
import logging
from collections.abc import ItemsView, Mapping
from typing import Any, Callable

from patternix.core.draw import RenderOutput
from patternix.core.parameters.meta import ParamMeta
from patternix.core.parameters.resolver import resolve_params

_logger = logging.getLogger(__name__)

GeneratorFunc = Callable[..., RenderOutput]


@dataclasses.dataclass(frozen=True, slots=True)
class GeneratorEntry:
    """登録済み generator 1 件分の情報。"""

    name: str
    func: GeneratorFunc
    params_cls: type
    meta: Mapping[str, ParamMeta]
    aliases: Mapping[str, str]

    def resolve(self, values: Any = None) -> Any:
        """生の値をこの generator の Params に解決する。"""
        return resolve_params(self.params_cls, values, meta=self.meta, aliases=self.aliases)

    def __call__(
        self,
        params: Any = None,
        *,
        seed: int | float | None = None,
        phase: Any = None,
        custom_path: Any = None,
    ) -> RenderOutput:
        resolved = self.resolve(params)
        _logger.debug("generator 実行: %s seed=%r", self.name, seed)
        return self.func(resolved, seed=seed, phase=phase, custom_path=custom_path)


class GeneratorRegistry:
    """generator 名と生成関数を対応付けるレジストリ。

    Notes
    -----
    登録された関数のシグネチャは
    ``func(params, *, seed=None, phase=None, custom_path=None) -> RenderOutput`` を想定する。
    params は `resolve_params` で正規化済みの Params インスタンスを受け取る。
    """

    def __init__(self) -> None:
        """空のレジストリを初期化する。"""
        self._items: dict[str, GeneratorEntry] = {}

    def _register(self, entry: GeneratorEntry, *, overwrite: bool = True) -> None:
        """generator を登録する（内部用）。

        Notes
        -----
        登録は `@generator` デコレータ経由に統一する。
        """
        if not overwrite and entry.name in self._items:
            raise ValueError(f"generator '{entry.name}' は既に登録されている")
        self._items[entry.name] = entry

    def get(self, name: str) -> GeneratorEntry:
        """generator 名に対応するエントリを取得する。

        Parameters
        ----------
        name : str
            generator 名。

        Returns
        -------
        GeneratorEntry
            対応するエントリ（呼び出し可能）。

        Raises
        ------
        KeyError
            未登録の generator 名が指定された場合。
        """
        return self._items[name]

    def __contains__(self, name: object) -> bool:
        """指定された名前が登録済みかどうかを返す。"""
        return name in self._items

    def __getitem__(self, name: str) -> GeneratorEntry:
        """辞書風に generator を取得するショートカット。"""
        return self.get(name)

    def items(self) -> ItemsView[str, GeneratorEntry]:
        """登録済みエントリの (name, entry) ビューを返す。"""
        return self._items.items()

    def names(self) -> tuple[str, ...]:
        """登録済み generator 名を登録順に返す。"""
        return tuple(self._items)

    def get_meta(self, name: str) -> dict[str, ParamMeta]:
        """generator 名に対応する ParamMeta 辞書を取得する。"""
        return dict(self._items[name].meta)

    def get_params_class(self, name: str) -> type:
        """generator 名に対応する Params クラスを取得する。"""
        return self._items[name].params_cls

    def get_defaults(self, name: str) -> dict[str, Any]:
        """generator 名に対応する既定パラメータ辞書を取得する。"""
        return dataclasses.asdict(self._items[name].params_cls())


generator_registry = GeneratorRegistry()
"""グローバルな generator レジストリインスタンス。"""


def generator(
    *,
    params: type,
    meta: Mapping[str, ParamMeta],
    name: str | None = None,
    aliases: Mapping[str, str] | None = None,
    overwrite: bool = True,
) -> Callable[[GeneratorFunc], GeneratorFunc]:
    """グローバル generator レジストリ用デコレータ。

    name を省略した場合は関数名をそのまま generator 名として登録する。

    Parameters
    ----------
    params : type
        全フィールドが既定値を持つ Params dataclass。
    meta : Mapping[str, ParamMeta]
        Params の各フィールドの ParamMeta。
    name : str or None, optional
        登録名。
    aliases : Mapping[str, str] or None, optional
        UI キー名 → フィールド名の対応。
    overwrite : bool, optional
        既存エントリがある場合に上書きするかどうか。

    Examples
    --------
    @generator(params=WaveParams, meta=WAVE_META)
    def ribbon_wave(params, *, seed=None, phase=None, custom_path=None):
        ...
    """
    if not dataclasses.is_dataclass(params):
        raise TypeError(f"params は dataclass である必要がある: {params!r}")
    field_names = {f.name for f in dataclasses.fields(params)}
    unknown = [k for k in meta if k not in field_names]
    if unknown:
        raise ValueError(f"meta のキーが Params に存在しない: {unknown!r}")
    alias_map = dict(aliases or {})
    bad_alias = [v for v in alias_map.values() if v not in field_names]
    if bad_alias:
        raise ValueError(f"aliases の対象が Params に存在しない: {bad_alias!r}")

    def decorator(f: GeneratorFunc) -> GeneratorFunc:
        entry = GeneratorEntry(
            name=str(name or f.__name__),
            func=f,
            params_cls=params,
            meta=dict(meta),
            aliases=alias_map,
        )
        generator_registry._register(entry, overwrite=overwrite)
        return f

    return decorator


__all__ = ["GeneratorEntry", "GeneratorRegistry", "generator", "generator_registry"]
