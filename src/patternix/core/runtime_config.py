# どこで: `src/patternix/core/runtime_config.py`。
# 何を: config.yaml による実行時設定（探索・ロード・キャッシュ）を提供する。
# なぜ: 出力先や SVG/PNG の書き出し設定をユーザーが指定できるようにするため。

from __future__ import annotations

import os
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

MAX_SVG_DECIMALS = 8


@dataclass(frozen=True, slots=True)
class RuntimeConfig:
    """patternix の実行時設定。"""

    config_path: Path | None
    output_dir: Path
    png_scale: float
    svg_decimals: int
    background_color: str | None


_EXPLICIT_CONFIG_PATH: Path | None = None
_CONFIG_CACHE: RuntimeConfig | None = None


def set_config_path(path: str | Path | None) -> None:
    """以降の設定探索で使う明示 config パスを設定する。

    Notes
    -----
    `path` を None にすると明示指定を解除し、既定の探索に戻る。
    """

    global _EXPLICIT_CONFIG_PATH, _CONFIG_CACHE
    if path is None:
        _EXPLICIT_CONFIG_PATH = None
        _CONFIG_CACHE = None
        return
    p = Path(str(path)).expanduser()
    _EXPLICIT_CONFIG_PATH = p
    _CONFIG_CACHE = None


def _default_config_candidates() -> tuple[Path, ...]:
    cwd = Path.cwd()
    home = Path.home()
    return (
        cwd / ".patternix" / "config.yaml",
        home / ".config" / "patternix" / "config.yaml",
    )


def _expand_path_text(text: str) -> str:
    return os.path.expandvars(os.path.expanduser(str(text)))


def _as_optional_path(value: Any) -> Path | None:
    if value is None:
        return None
    s = str(value).strip()
    if not s:
        return None
    return Path(_expand_path_text(s))


def _as_mapping(value: Any, *, key: str) -> dict[str, Any]:
    if value is None:
        return {}
    if isinstance(value, dict):
        return dict(value)
    raise RuntimeError(f"{key} は mapping である必要があります: got={value!r}")


def _as_float(value: Any, *, key: str) -> float | None:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise RuntimeError(f"{key} は数値である必要があります: got={value!r}") from exc


def _as_int(value: Any, *, key: str) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool):
        raise RuntimeError(f"{key} は整数である必要があります: got={value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise RuntimeError(f"{key} は整数である必要があります: got={value!r}") from exc


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """mapping を再帰的にマージする（override 側が勝つ）。"""
    out = dict(base)
    for key, value in override.items():
        current = out.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            out[key] = _merge(current, value)
        else:
            out[key] = value
    return out


def _load_yaml_text(text: str, *, source: str) -> dict[str, Any]:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise RuntimeError(f"config.yaml の読み込みに失敗しました: source={source}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise RuntimeError(f"config.yaml は mapping である必要があります: source={source}")

    return dict(data)


def _load_yaml_config(path: Path) -> dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    return _load_yaml_text(text, source=str(path))


def _load_packaged_default_config() -> dict[str, Any]:
    """同梱デフォルト config をロードして dict を返す。"""

    try:
        blob = (
            resources.files("patternix")
            .joinpath("resource", "default_config.yaml")
            .read_text(encoding="utf-8")
        )
    except OSError as exc:  # pragma: no cover
        raise RuntimeError(
            "同梱 default_config.yaml の読み込みに失敗しました"
            "（パッケージ配布物の package-data を確認してください）"
        ) from exc

    return _load_yaml_text(blob, source="patternix/resource/default_config.yaml")


def runtime_config() -> RuntimeConfig:
    """実行時設定をロードして返す（キャッシュ）。

    上書き順（後勝ち）:
    1) 同梱 default_config.yaml
    2) `./.patternix/config.yaml` / `~/.config/patternix/config.yaml`（先に見つかった方）
    3) `set_config_path()` で指定したパス

    Raises
    ------
    FileNotFoundError
        明示パスのファイルが存在しない場合。
    RuntimeError
        YAML が壊れている、または必須キーが不正な場合。
    """

    global _CONFIG_CACHE
    if _CONFIG_CACHE is not None:
        return _CONFIG_CACHE

    explicit_path = _EXPLICIT_CONFIG_PATH
    if explicit_path is not None and not explicit_path.is_file():
        raise FileNotFoundError(f"config.yaml が見つかりません: {explicit_path}")

    discovered_path: Path | None = None
    for p in _default_config_candidates():
        if p.is_file():
            discovered_path = p
            break

    payload = _load_packaged_default_config()
    if discovered_path is not None:
        payload = _merge(payload, _load_yaml_config(discovered_path))
    if explicit_path is not None:
        payload = _merge(payload, _load_yaml_config(explicit_path))

    version = _as_int(payload.get("version"), key="version")
    if version is None:
        raise RuntimeError(
            "config.yaml の version が未設定です（同梱 default_config.yaml を確認してください）"
        )
    if version != 1:
        raise RuntimeError(f"未対応の config.yaml version です: got={version}")

    paths = _as_mapping(payload.get("paths"), key="paths")
    output_dir = _as_optional_path(paths.get("output_dir"))
    if output_dir is None:
        raise RuntimeError(
            "paths.output_dir が未設定です（同梱 default_config.yaml を確認してください）"
        )

    export = _as_mapping(payload.get("export"), key="export")
    png = _as_mapping(export.get("png"), key="export.png")
    png_scale = _as_float(png.get("scale"), key="export.png.scale")
    if png_scale is None:
        raise RuntimeError(
            "export.png.scale が未設定です（同梱 default_config.yaml を確認してください）"
        )
    if not png_scale > 0:
        raise RuntimeError(f"export.png.scale は正の値である必要があります: got={png_scale}")

    svg = _as_mapping(export.get("svg"), key="export.svg")
    decimals = _as_int(svg.get("decimals"), key="export.svg.decimals")
    if decimals is None:
        raise RuntimeError(
            "export.svg.decimals が未設定です（同梱 default_config.yaml を確認してください）"
        )
    if not 0 <= decimals <= MAX_SVG_DECIMALS:
        raise RuntimeError(
            f"export.svg.decimals は 0..{MAX_SVG_DECIMALS} である必要があります: got={decimals}"
        )

    background = export.get("background_color")
    background_color = None if background is None else str(background).strip() or None

    cfg = RuntimeConfig(
        config_path=explicit_path or discovered_path,
        output_dir=output_dir,
        png_scale=float(png_scale),
        svg_decimals=int(decimals),
        background_color=background_color,
    )
    _CONFIG_CACHE = cfg
    return cfg


def output_root_dir() -> Path:
    """出力ファイルを保存する既定ルートディレクトリを返す。"""

    cfg = runtime_config()
    return Path(cfg.output_dir)


__all__ = ["RuntimeConfig", "output_root_dir", "runtime_config", "set_config_path"]
