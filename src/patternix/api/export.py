"""
どこで: `src/patternix/api/export.py`。
何を: generator の実行とファイル書き出しを 1 回の呼び出しで行う公開導線 `Export` を提供する。
なぜ: UI を介さずに、パラメータと seed からパターンを SVG/PNG として保存できるようにするため。
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from patternix.core.draw import RenderOutput
from patternix.core.generator_registry import generator_registry
from patternix.core.runtime_config import output_root_dir
from patternix.export.image import export_image
from patternix.export.svg import export_svg

from .generators import generate


class Export:
    """generator を 1 回実行し、結果をファイルへ書き出す。

    Attributes
    ----------
    path : Path
        実際に書き出したパス。
    primitives : RenderOutput
        書き出した描画プリミティブ列。
    """

    def __init__(
        self,
        name: str,
        path: str | Path,
        *,
        params: Mapping[str, Any] | Any = None,
        seed: int | float | None = None,
        phase: Any = None,
        custom_path: Any = None,
        fmt: str | None = None,
        background_color: str | None = None,
    ) -> None:
        """export を実行する。

        Parameters
        ----------
        name : str
            generator 名。
        path : str or Path
            出力先パス。相対パスは runtime config の paths.output_dir を基準にする。
        params, seed, phase, custom_path
            `generate` にそのまま渡す。
        fmt : str or None, optional
            `"svg"` / `"png"` / `"image"`。None なら拡張子から決める。
        background_color : str or None, optional
            背景色。None なら config の既定値。

        Raises
        ------
        KeyError
            未登録の generator 名が指定された場合。
        ValueError
            未対応のフォーマットが指定された場合。
        """
        p = Path(path)
        if not p.is_absolute():
            p = output_root_dir() / p

        resolved = generator_registry.get(name).resolve(params)
        canvas_size = (float(resolved.width), float(resolved.height))
        self.primitives: RenderOutput = generate(
            name, resolved, seed=seed, phase=phase, custom_path=custom_path
        )

        kind = (fmt if fmt is not None else p.suffix.lstrip(".")).lower().strip()
        if kind == "svg":
            self.path = export_svg(
                self.primitives,
                p.with_suffix(".svg"),
                canvas_size=canvas_size,
                background_color=background_color,
            )
            return
        if kind in {"image", "png"}:
            self.path = export_image(
                self.primitives,
                p.with_suffix(".png"),
                canvas_size=canvas_size,
                background_color=background_color,
            )
            return

        raise ValueError(f"未対応の export fmt: {kind!r}")


__all__ = ["Export"]
