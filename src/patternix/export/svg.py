"""
どこで: `src/patternix/export/svg.py`。
何を: RenderOutput（StrokeCurve / FilledDot 列）を SVG 文書に直列化して返す・保存する関数を提供する。
なぜ: generator は構造化された描画命令だけを返し、ファイル形式への変換をこの層に閉じ込めるため。
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from xml.sax.saxutils import escape

from patternix.core.draw import DrawPrimitive, FilledDot, StrokeCurve
from patternix.core.runtime_config import runtime_config
from patternix.core.spline import CubicPath

_SVG_NS = "http://www.w3.org/2000/svg"
_ATTR_ENTITIES = {'"': "&quot;"}


def _fmt(value: float, *, decimals: int) -> str:
    """SVG 出力向けに float を決定的な文字列へ変換して返す。"""
    text = f"{float(value):.{int(decimals)}f}"
    if text.startswith("-0") and float(text) == 0.0:
        return text[1:]
    return text


def _attr(value: object) -> str:
    return escape(str(value), _ATTR_ENTITIES)


def path_to_d(path: CubicPath, *, decimals: int) -> str:
    """CubicPath を SVG path の d 属性（`M x y C x y, x y, x y ...`）へ変換して返す。"""
    if path.is_empty:
        return ""
    a = path.anchors
    parts = [f"M {_fmt(a[0, 0], decimals=decimals)} {_fmt(a[0, 1], decimals=decimals)}"]
    for i in range(path.segment_count):
        (c1x, c1y), (c2x, c2y) = path.controls[i]
        ex, ey = a[i + 1]
        parts.append(
            f"C {_fmt(c1x, decimals=decimals)} {_fmt(c1y, decimals=decimals)}, "
            f"{_fmt(c2x, decimals=decimals)} {_fmt(c2y, decimals=decimals)}, "
            f"{_fmt(ex, decimals=decimals)} {_fmt(ey, decimals=decimals)}"
        )
    return " ".join(parts)


def _element(primitive: DrawPrimitive, *, decimals: int) -> str | None:
    if isinstance(primitive, StrokeCurve):
        d = path_to_d(primitive.path, decimals=decimals)
        if not d:
            return None
        return (
            f'  <path d="{d}" fill="none" stroke="{_attr(primitive.color)}" '
            f'stroke-width="{_fmt(primitive.stroke_width, decimals=decimals)}" '
            f'opacity="{_fmt(primitive.opacity, decimals=decimals)}" '
            f'stroke-linecap="round" stroke-linejoin="round" />'
        )
    if isinstance(primitive, FilledDot):
        cx, cy = primitive.center
        return (
            f'  <circle cx="{_fmt(cx, decimals=decimals)}" cy="{_fmt(cy, decimals=decimals)}" '
            f'r="{_fmt(primitive.radius, decimals=decimals)}" fill="{_attr(primitive.color)}" '
            f'opacity="{_fmt(primitive.opacity, decimals=decimals)}" />'
        )
    raise TypeError(f"未対応の描画プリミティブ: {type(primitive)!r}")


def _validate_canvas(canvas_size: tuple[float, float] | None) -> tuple[float, float]:
    if canvas_size is None:
        raise ValueError("canvas_size=None は未対応（現在は必須）")
    canvas_w, canvas_h = canvas_size
    if not (float(canvas_w) > 0 and float(canvas_h) > 0):
        raise ValueError("canvas_size は正の値である必要がある")
    return float(canvas_w), float(canvas_h)


def render_svg(
    primitives: Iterable[DrawPrimitive],
    canvas_size: tuple[float, float] | None,
    *,
    background_color: str | None = None,
    decimals: int | None = None,
) -> str:
    """描画プリミティブ列を SVG 文書の文字列にする。

    Parameters
    ----------
    primitives : Iterable[DrawPrimitive]
        描画順に並んだプリミティブ列。
    canvas_size : tuple[float, float]
        キャンバス寸法 (width, height)。viewBox に使う。
    background_color : str or None, optional
        背景色。None なら背景矩形を出力しない。
    decimals : int or None, optional
        座標の小数桁数。None なら runtime config の export.svg.decimals。

    Returns
    -------
    str
        末尾改行付きの SVG 文書。要素順はプリミティブ順と一致する。

    Raises
    ------
    ValueError
        canvas_size が None または正でない場合。
    """
    canvas_w, canvas_h = _validate_canvas(canvas_size)
    digits = runtime_config().svg_decimals if decimals is None else int(decimals)

    w = _fmt(canvas_w, decimals=0) if canvas_w.is_integer() else _fmt(canvas_w, decimals=digits)
    h = _fmt(canvas_h, decimals=0) if canvas_h.is_integer() else _fmt(canvas_h, decimals=digits)

    lines: list[str] = []
    lines.append('<?xml version="1.0" encoding="UTF-8"?>')
    lines.append(f'<svg xmlns="{_SVG_NS}" viewBox="0 0 {w} {h}" width="{w}" height="{h}">')
    if background_color is not None:
        lines.append(f'  <rect width="100%" height="100%" fill="{_attr(background_color)}" />')

    for primitive in primitives:
        element = _element(primitive, decimals=digits)
        if element is not None:
            lines.append(element)

    lines.append("</svg>")
    return "\n".join(lines) + "\n"


def export_svg(
    primitives: Iterable[DrawPrimitive],
    path: str | Path,
    *,
    canvas_size: tuple[float, float] | None = None,
    background_color: str | None = None,
) -> Path:
    """描画プリミティブ列を SVG として保存する。

    background_color が None のときは runtime config の export.background_color を使う。

    Returns
    -------
    Path
        保存先パス。

    Raises
    ------
    ValueError
        canvas_size が None または正でない場合。
    """
    _path = Path(path)
    if background_color is None:
        background_color = runtime_config().background_color
    text = render_svg(primitives, canvas_size, background_color=background_color)

    _path.parent.mkdir(parents=True, exist_ok=True)
    with _path.open("w", encoding="utf-8", newline="\n") as f:
        f.write(text)

    return _path


__all__ = ["export_svg", "path_to_d", "render_svg"]
