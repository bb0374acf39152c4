# どこで: `src/patternix/__init__.py`。
# 何を: ルート `patternix` パッケージを定義する。
# なぜ: import 起点を `patternix` に統一するため。

from __future__ import annotations

from patternix.api import Export, G, generate, new_phases, new_seed

__all__ = ["Export", "G", "generate", "new_phases", "new_seed"]
