# どこで: `src/patternix/core/parameters/resolver.py`。
# 何を: UI などから来た生のパラメータ辞書を generator 専用の Params dataclass に解決する。
# なぜ: 既定値の補完・型変換・クランプを境界で一度だけ行い、generator 本体を素直に保つため。

from __future__ import annotations

import dataclasses
import logging
import math
import re
from collections.abc import Mapping, Sequence
from typing import Any, TypeVar

from patternix.core.color import color_spec_from_value

from .meta import ParamMeta

_logger = logging.getLogger(__name__)

_P = TypeVar("_P")

_CAMEL_RE = re.compile(r"(?<=[a-z0-9])([A-Z])")
_FALSE_TEXTS = frozenset({"", "0", "false", "no", "off"})


def snake_case(name: str) -> str:
    """camelCase のキーを snake_case に変換する（例: strokeWidth → stroke_width）。"""
    return _CAMEL_RE.sub(r"_\1", str(name)).lower()


def _field_defaults(cls: type) -> dict[str, Any]:
    defaults: dict[str, Any] = {}
    for f in dataclasses.fields(cls):
        if f.default is not dataclasses.MISSING:
            defaults[f.name] = f.default
        elif f.default_factory is not dataclasses.MISSING:
            defaults[f.name] = f.default_factory()
        else:
            raise ValueError(f"Params のフィールドは既定値必須: {cls.__name__}.{f.name}")
    return defaults


def _infer_kind(default: Any) -> str:
    if isinstance(default, bool):
        return "bool"
    if isinstance(default, int):
        return "int"
    if isinstance(default, float):
        return "float"
    if isinstance(default, str):
        return "str"
    return "any"


def _clamp(value: float, meta: ParamMeta | None) -> float:
    if meta is None:
        return value
    if meta.clamp_min is not None and value < meta.clamp_min:
        value = meta.clamp_min
    if meta.clamp_max is not None and value > meta.clamp_max:
        value = meta.clamp_max
    return value


def _as_float(value: Any) -> float | None:
    if isinstance(value, str):
        value = value.strip()
    try:
        v = float(value)
    except (TypeError, ValueError):
        return None
    return v if math.isfinite(v) else None


def _as_offsets(value: Any) -> tuple[tuple[float, float], ...] | None:
    if value is None:
        return ()
    if not isinstance(value, Sequence) or isinstance(value, str):
        return None
    out: list[tuple[float, float]] = []
    for item in value:
        if isinstance(item, Mapping):
            dx = _as_float(item.get("horizontal", item.get("x", 0.0)))
            dy = _as_float(item.get("vertical", item.get("y", 0.0)))
        else:
            try:
                dx = _as_float(item[0])
                dy = _as_float(item[1])
            except (TypeError, IndexError, KeyError):
                dx = dy = None
        out.append((dx or 0.0, dy or 0.0))
    return tuple(out)


def coerce_value(value: Any, default: Any, meta: ParamMeta | None) -> Any:
    """1 つの値を meta（無ければ既定値の型）に従って正規化する。

    解釈できない値・NaN/inf は default を返す。数値は meta のクランプ範囲に収める。
    """
    kind = meta.kind if meta is not None else _infer_kind(default)

    if kind == "float":
        v = _as_float(value)
        if v is None:
            return default
        return float(_clamp(v, meta))
    if kind == "int":
        v = _as_float(value)
        if v is None:
            return default
        return int(_clamp(float(int(round(v))), meta))
    if kind == "bool":
        if isinstance(value, str):
            return value.strip().lower() not in _FALSE_TEXTS
        return bool(value)
    if kind in ("str", "color"):
        return default if value is None else str(value)
    if kind == "choice":
        s = str(value)
        choices = tuple(meta.choices or ()) if meta is not None else ()
        return s if not choices or s in choices else default
    if kind == "color_spec":
        if value is None:
            return None
        return color_spec_from_value(value, fallback="")
    if kind == "offsets":
        offsets = _as_offsets(value)
        return default if offsets is None else offsets
    return value


def resolve_params(
    cls: type[_P],
    values: Mapping[str, Any] | _P | None = None,
    *,
    meta: Mapping[str, ParamMeta] | None = None,
    aliases: Mapping[str, str] | None = None,
) -> _P:
    """生の値から Params dataclass を組み立てる。

    Parameters
    ----------
    cls : type
        全フィールドが既定値を持つ frozen dataclass。
    values : Mapping[str, Any] | cls | None, optional
        入力値。キーは snake_case / camelCase のどちらでもよい。None は全既定値。
    meta : Mapping[str, ParamMeta] | None, optional
        フィールドごとの型・クランプ情報。
    aliases : Mapping[str, str] | None, optional
        UI 側のキー名 → フィールド名の明示対応（例: ``{"R": "fixed_radius"}``）。

    Returns
    -------
    cls
        正規化済みの Params インスタンス。

    Notes
    -----
    例外は投げない。未登録キーは WARNING ログを出して無視する。
    """
    defaults = _field_defaults(cls)
    metas = dict(meta or {})
    alias_map = dict(aliases or {})

    if values is None:
        raw: Mapping[str, Any] = {}
    elif isinstance(values, cls):
        raw = {name: getattr(values, name) for name in defaults}
    elif isinstance(values, Mapping):
        raw = values
    else:
        raise TypeError(f"パラメータは mapping か {cls.__name__} である必要がある: {type(values)!r}")

    resolved = dict(defaults)
    ignored: list[str] = []
    for key, value in raw.items():
        k = str(key)
        name = alias_map.get(k)
        if name is None:
            name = k if k in defaults else snake_case(k)
        if name not in defaults:
            ignored.append(k)
            continue
        resolved[name] = coerce_value(value, defaults[name], metas.get(name))

    if ignored:
        _logger.warning("未登録のパラメータを無視します (%s): %s", cls.__name__, ", ".join(ignored))

    return cls(**resolved)


__all__ = ["coerce_value", "resolve_params", "snake_case"]
