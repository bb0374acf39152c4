# どこで: `src/patternix/api/__init__.py`。
# 何を: 公開 API パッケージのエントリポイントとして G/generate/Export と、ユーザー定義登録用の generator を再エクスポートする。
# なぜ: ユーザーコードからシンプルに API を import できるようにするため。

from __future__ import annotations

from patternix.core.generator_registry import generator

from .export import Export
from .generators import G, generate, new_phases, new_seed

__all__ = ["Export", "G", "generate", "generator", "new_phases", "new_seed"]
