from pathlib import Path

import pytest

from patternix.core.runtime_config import output_root_dir, runtime_config, set_config_path


@pytest.fixture(autouse=True)
def _reset_runtime_config() -> None:
    set_config_path(None)
    yield
    set_config_path(None)


def _isolate_config_discovery(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def test_output_root_dir_uses_packaged_defaults(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    assert output_root_dir() == Path("data") / "output"
    cfg = runtime_config()
    assert cfg.config_path is None
    assert cfg.png_scale == 1.0
    assert cfg.svg_decimals == 3
    assert cfg.background_color is None


def test_discovered_config_overrides_packaged_defaults(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)
    discovered = _write(
        tmp_path / ".patternix" / "config.yaml",
        'paths:\n  output_dir: "./out_discovered"\nexport:\n  svg:\n    decimals: 1\n',
    )

    cfg = runtime_config()
    assert cfg.config_path == discovered
    assert cfg.output_dir == Path("out_discovered")
    assert cfg.svg_decimals == 1
    # 部分的な上書きでも同梱デフォルトの兄弟キーは残る
    assert cfg.png_scale == 1.0


def test_home_config_is_discovered(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)
    discovered = _write(
        tmp_path / ".config" / "patternix" / "config.yaml",
        "export:\n  background_color: '#101010'\n",
    )

    cfg = runtime_config()
    assert cfg.config_path == discovered
    assert cfg.background_color == "#101010"


def test_explicit_config_overrides_discovered_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)
    _write(tmp_path / ".patternix" / "config.yaml", 'paths:\n  output_dir: "./out_discovered"\n')
    explicit = _write(
        tmp_path / "explicit.yaml",
        'paths:\n  output_dir: "./out_explicit"\nexport:\n  png:\n    scale: 2\n',
    )

    set_config_path(explicit)
    cfg = runtime_config()
    assert cfg.config_path == explicit
    assert cfg.output_dir == Path("out_explicit")
    assert cfg.png_scale == 2.0


def test_missing_explicit_config_raises(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)
    set_config_path(tmp_path / "missing.yaml")

    with pytest.raises(FileNotFoundError):
        runtime_config()


def test_result_is_cached_until_path_changes(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)
    first = runtime_config()
    assert runtime_config() is first

    explicit = _write(tmp_path / "c.yaml", "export:\n  svg:\n    decimals: 5\n")
    set_config_path(explicit)
    assert runtime_config().svg_decimals == 5


@pytest.mark.parametrize(
    "text",
    [
        "version: 2\n",
        "export:\n  png:\n    scale: 0\n",
        "export:\n  png:\n    scale: abc\n",
        "export:\n  svg:\n    decimals: 9\n",
        "export:\n  svg:\n    decimals: -1\n",
        "paths: [1, 2]\n",
        "- just\n- a list\n",
        "key: [unclosed\n",
    ],
)
def test_invalid_config_raises_runtime_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, text: str
):
    _isolate_config_discovery(tmp_path, monkeypatch)
    set_config_path(_write(tmp_path / "bad.yaml", text))

    with pytest.raises(RuntimeError):
        runtime_config()
