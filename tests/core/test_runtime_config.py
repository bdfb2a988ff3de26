from pathlib import Path

import pytest

from faustui.core.runtime_config import runtime_config, set_config_path


@pytest.fixture(autouse=True)
def _reset_runtime_config() -> None:
    set_config_path(None)
    yield
    set_config_path(None)


def _isolate_config_discovery(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))


def test_packaged_defaults(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    cfg = runtime_config()
    assert cfg.config_path is None
    assert cfg.max_depth == 64
    assert cfg.empty_label_sentinel == "0x00"
    assert cfg.window_size == (800, 700)
    assert cfg.value_precision == 2
    assert cfg.boxes_default_open is True


def test_runtime_config_is_cached(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    assert runtime_config() is runtime_config()


def test_discovered_config_overrides_only_given_keys(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
):
    _isolate_config_discovery(tmp_path, monkeypatch)

    discovered = tmp_path / ".faustui" / "config.yaml"
    discovered.parent.mkdir(parents=True, exist_ok=True)
    discovered.write_text("builder:\n  max_depth: 8\nui:\n  value_precision: 4\n", encoding="utf-8")

    cfg = runtime_config()
    assert cfg.config_path == discovered
    assert cfg.max_depth == 8
    assert cfg.value_precision == 4
    # 同じセクションの未指定キーは同梱値のまま
    assert cfg.window_size == (800, 700)
    assert cfg.empty_label_sentinel == "0x00"


def test_home_config_is_discovered(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    home_cfg = tmp_path / ".config" / "faustui" / "config.yaml"
    home_cfg.parent.mkdir(parents=True, exist_ok=True)
    home_cfg.write_text('labels:\n  empty_sentinel: "<none>"\n', encoding="utf-8")

    cfg = runtime_config()
    assert cfg.config_path == home_cfg
    assert cfg.empty_label_sentinel == "<none>"


def test_explicit_config_overrides_discovered_config(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
):
    _isolate_config_discovery(tmp_path, monkeypatch)

    discovered = tmp_path / ".faustui" / "config.yaml"
    discovered.parent.mkdir(parents=True, exist_ok=True)
    discovered.write_text("builder:\n  max_depth: 8\n", encoding="utf-8")

    explicit = tmp_path / "explicit.yaml"
    explicit.write_text("builder:\n  max_depth: 3\nui:\n  window_size: [320, 240]\n", encoding="utf-8")
    set_config_path(explicit)

    cfg = runtime_config()
    assert cfg.config_path == explicit
    assert cfg.max_depth == 3
    assert cfg.window_size == (320, 240)


def test_explicit_config_path_missing_raises(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    _isolate_config_discovery(tmp_path, monkeypatch)

    set_config_path(tmp_path / "missing.yaml")

    with pytest.raises(FileNotFoundError):
        runtime_config()


@pytest.mark.parametrize(
    "text, error",
    [
        ("version: 2\n", RuntimeError),
        ("builder:\n  max_depth: 0\n", ValueError),
        ("builder:\n  max_depth: deep\n", RuntimeError),
        ("ui:\n  window_size: [1, 2, 3]\n", RuntimeError),
        ("ui:\n  value_precision: -1\n", ValueError),
        ("ui:\n  boxes_default_open: 1\n", RuntimeError),
        ("builder: 3\n", RuntimeError),
        ("- a\n- b\n", RuntimeError),
    ],
)
def test_invalid_values_raise(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, text: str, error: type
):
    _isolate_config_discovery(tmp_path, monkeypatch)

    explicit = tmp_path / "bad.yaml"
    explicit.write_text(text, encoding="utf-8")
    set_config_path(explicit)

    with pytest.raises(error):
        runtime_config()
