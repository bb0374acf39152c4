# どこで: `src/patternix/core/parameters/meta.py`。
# 何を: ParamMeta（UI 表示レンジと境界でのクランプ範囲）を提供する。
# なぜ: スライダー生成と入力値の検証に必要な型・レンジ情報を一元管理するため。

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence


@dataclass(frozen=True, slots=True)
class ParamMeta:
    """パラメータの UI/検証用メタ情報。

    ui_min/ui_max はスライダー初期レンジを示すだけで、実値をクランプしない。
    clamp_min/clamp_max は `resolve_params` が境界で適用する実値の範囲。
    """

    kind: str  # "float" | "int" | "bool" | "str" | "color" | "choice" | "color_spec" | "offsets"
    ui_min: Any | None = None
    ui_max: Any | None = None
    choices: Sequence[str] | None = None
    clamp_min: float | None = None
    clamp_max: float | None = None
