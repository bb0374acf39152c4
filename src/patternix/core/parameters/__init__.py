# どこで: `src/patternix/core/parameters/__init__.py`。
# 何を: パラメータ解決バックエンドの公開エイリアスをまとめる。
# なぜ: generator / API 層から最小インポートで使えるようにするため。

from .meta import ParamMeta
from .resolver import coerce_value, resolve_params, snake_case

__all__ = [
    "ParamMeta",
    "coerce_value",
    "resolve_params",
    "snake_case",
]
