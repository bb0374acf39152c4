"""
どこで: `src/patternix/export/image.py`。
何を: SVG を外部ラスタライザ（resvg）で PNG に変換して保存する関数を提供する。
なぜ: SVG を正（ソース）として保存し、PNG は任意の倍率で再生成できる導線を用意するため。
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Iterable
from pathlib import Path

from patternix.core.color import parse_color, rgb_to_hex
from patternix.core.draw import DrawPrimitive
from patternix.core.runtime_config import runtime_config
from patternix.export.svg import export_svg

_logger = logging.getLogger(__name__)


def export_image(
    primitives: Iterable[DrawPrimitive],
    path: str | Path,
    *,
    canvas_size: tuple[float, float] | None = None,
    background_color: str | None = None,
) -> Path:
    """描画プリミティブ列を画像として保存する。

    Notes
    -----
    `.svg` はそのまま保存する。`.png` は同名の SVG を保存してから resvg でラスタライズする。
    background_color が None のときは runtime config の export.background_color を使う。

    Raises
    ------
    ValueError
        canvas_size が無い、または拡張子が未対応の場合。
    RuntimeError
        resvg が見つからない、または失敗した場合。
    """
    _path = Path(path)
    suffix = _path.suffix.lower()
    if canvas_size is None:
        raise ValueError("canvas_size=None は未対応（現在は必須）")
    if background_color is None:
        background_color = runtime_config().background_color

    if suffix == ".svg":
        return export_svg(
            primitives, _path, canvas_size=canvas_size, background_color=background_color
        )

    if suffix == ".png":
        svg_path = _path.with_suffix(".svg")
        export_svg(primitives, svg_path, canvas_size=canvas_size, background_color=background_color)
        return rasterize_svg_to_png(
            svg_path,
            _path,
            output_size=png_output_size(canvas_size),
            background_color=background_color,
        )

    raise ValueError(f"未対応の画像フォーマット: {suffix!r}")


def png_output_size(canvas_size: tuple[float, float]) -> tuple[int, int]:
    """canvas_size を基準に PNG 出力ピクセルサイズを返す。"""

    canvas_w, canvas_h = canvas_size
    if not (float(canvas_w) > 0 and float(canvas_h) > 0):
        raise ValueError("canvas_size は正の (width, height) である必要がある")
    scale = float(runtime_config().png_scale)
    return max(1, int(float(canvas_w) * scale)), max(1, int(float(canvas_h) * scale))


def _resvg_command(
    *,
    input_svg: Path,
    output_png: Path,
    output_size: tuple[int, int],
    background_color: str | None,
) -> list[str]:
    out_w, out_h = output_size
    if int(out_w) <= 0 or int(out_h) <= 0:
        raise ValueError("output_size は正の (width, height) である必要がある")
    cmd = ["resvg", "--width", str(int(out_w)), "--height", str(int(out_h))]
    if background_color is not None:
        cmd += ["--background", rgb_to_hex(parse_color(background_color))]
    cmd += [str(input_svg), str(output_png)]
    return cmd


def rasterize_svg_to_png(
    svg_path: str | Path,
    png_path: str | Path,
    *,
    output_size: tuple[int, int],
    background_color: str | None = None,
) -> Path:
    """SVG を PNG として保存する。

    Parameters
    ----------
    svg_path : str or Path
        入力 SVG パス。
    png_path : str or Path
        出力 PNG パス。
    output_size : tuple[int, int]
        出力 PNG の (width, height) ピクセルサイズ。
    background_color : str or None, optional
        背景色。None なら透明。

    Returns
    -------
    Path
        出力 PNG パス。

    Raises
    ------
    RuntimeError
        resvg が見つからない、またはラスタライズに失敗した場合。
    """

    _svg_path = Path(svg_path)
    _png_path = Path(png_path)
    _png_path.parent.mkdir(parents=True, exist_ok=True)

    cmd = _resvg_command(
        input_svg=_svg_path,
        output_png=_png_path,
        output_size=output_size,
        background_color=background_color,
    )
    try:
        proc = subprocess.run(cmd, capture_output=True, text=True, check=False)
    except FileNotFoundError as e:
        raise RuntimeError(
            "resvg が見つかりません（`resvg` をインストールして PATH を通してください）"
        ) from e

    if proc.returncode != 0:
        details = (proc.stderr or proc.stdout or "").strip()
        _logger.error("resvg 失敗: code=%s cmd=%s", proc.returncode, cmd)
        raise RuntimeError(f"resvg が失敗しました (code={proc.returncode}). {details}".strip())

    return _png_path


__all__ = ["export_image", "png_output_size", "rasterize_svg_to_png"]
