# どこで: `src/faustui/core/runtime_config.py`。
# 何を: config.yaml による実行時設定（探索・ロード・キャッシュ）を提供する。
# なぜ: 入れ子上限や空ラベル記号、パネル表示設定をユーザーが上書きできるようにするため。

from __future__ import annotations

from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any


@dataclass(frozen=True, slots=True)
class RuntimeConfig:
    """faustui の実行時設定。"""

    config_path: Path | None
    max_depth: int
    empty_label_sentinel: str
    window_size: tuple[int, int]
    value_precision: int
    boxes_default_open: bool


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
    _EXPLICIT_CONFIG_PATH = Path(str(path)).expanduser()
    _CONFIG_CACHE = None


def _default_config_candidates() -> tuple[Path, ...]:
    cwd = Path.cwd()
    home = Path.home()
    return (
        cwd / ".faustui" / "config.yaml",
        home / ".config" / "faustui" / "config.yaml",
    )


def _as_mapping(value: Any, *, key: str) -> dict[str, Any]:
    if value is None:
        return {}
    if isinstance(value, dict):
        return dict(value)
    raise RuntimeError(f"{key} は mapping である必要があります: got={value!r}")


def _as_int(value: Any, *, key: str) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool):
        raise RuntimeError(f"{key} は整数である必要があります: got={value!r}")
    try:
        return int(value)
    except Exception as exc:
        raise RuntimeError(f"{key} は整数である必要があります: got={value!r}") from exc


def _as_int_pair(value: Any, *, key: str) -> tuple[int, int] | None:
    if value is None:
        return None
    try:
        seq = list(value)
    except Exception as exc:
        raise RuntimeError(f"{key} は [w, h] の配列である必要があります: got={value!r}") from exc
    if len(seq) != 2:
        raise RuntimeError(f"{key} は [w, h] の配列である必要があります: got={value!r}")
    try:
        w = int(seq[0])
        h = int(seq[1])
    except Exception as exc:
        raise RuntimeError(f"{key} は [w, h] の整数配列である必要があります: got={value!r}") from exc
    return (w, h)


def _as_bool(value: Any, *, key: str) -> bool | None:
    if value is None:
        return None
    if not isinstance(value, bool):
        raise RuntimeError(f"{key} は true/false である必要があります: got={value!r}")
    return value


def _load_yaml_text(text: str, *, source: str) -> dict[str, Any]:
    try:
        import yaml  # type: ignore[import-untyped]
    except Exception as exc:  # pragma: no cover
        raise RuntimeError(f"PyYAML を import できません: {exc}") from exc

    try:
        data = yaml.safe_load(text)
    except Exception as exc:
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
            resources.files("faustui")
            .joinpath("resource", "default_config.yaml")
            .read_text(encoding="utf-8")
        )
    except Exception as exc:  # pragma: no cover
        raise RuntimeError(
            "同梱 default_config.yaml の読み込みに失敗しました"
            "（パッケージ配布物の package-data を確認してください）"
        ) from exc

    return _load_yaml_text(blob, source="faustui/resource/default_config.yaml")


def _merge_sections(base: dict[str, Any], override: dict[str, Any]) -> None:
    """トップレベルのセクション単位で上書きする（1 段だけ潜る）。"""

    for key, value in override.items():
        current = base.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged = dict(current)
            merged.update(value)
            base[key] = merged
        else:
            base[key] = value


def runtime_config() -> RuntimeConfig:
    """実行時設定をロードして返す（キャッシュ）。

    上書き順（後勝ち）:
    1) 同梱 default_config.yaml
    2) `./.faustui/config.yaml` / `~/.config/faustui/config.yaml`（先に見つかった方）
    3) `set_config_path()` で指定したパス
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
        _merge_sections(payload, _load_yaml_config(discovered_path))
    if explicit_path is not None:
        _merge_sections(payload, _load_yaml_config(explicit_path))

    version = _as_int(payload.get("version"), key="version")
    if version is None:
        raise RuntimeError(
            "config.yaml の version が未設定です（同梱 default_config.yaml を確認してください）"
        )
    if version != 1:
        raise RuntimeError(f"未対応の config.yaml version です: got={version}")

    builder = _as_mapping(payload.get("builder"), key="builder")
    max_depth = _as_int(builder.get("max_depth"), key="builder.max_depth")
    if max_depth is None:
        raise RuntimeError(
            "builder.max_depth が未設定です（同梱 default_config.yaml を確認してください）"
        )
    if max_depth < 1:
        raise ValueError(f"builder.max_depth は 1 以上である必要があります: got={max_depth}")

    labels = _as_mapping(payload.get("labels"), key="labels")
    sentinel = labels.get("empty_sentinel")
    if sentinel is None:
        raise RuntimeError(
            "labels.empty_sentinel が未設定です（同梱 default_config.yaml を確認してください）"
        )

    ui = _as_mapping(payload.get("ui"), key="ui")
    window_size = _as_int_pair(ui.get("window_size"), key="ui.window_size")
    if window_size is None:
        raise RuntimeError(
            "ui.window_size が未設定です（同梱 default_config.yaml を確認してください）"
        )
    precision = _as_int(ui.get("value_precision"), key="ui.value_precision")
    if precision is None:
        raise RuntimeError(
            "ui.value_precision が未設定です（同梱 default_config.yaml を確認してください）"
        )
    if precision < 0:
        raise ValueError(f"ui.value_precision は 0 以上である必要があります: got={precision}")
    default_open = _as_bool(ui.get("boxes_default_open"), key="ui.boxes_default_open")
    if default_open is None:
        raise RuntimeError(
            "ui.boxes_default_open が未設定です（同梱 default_config.yaml を確認してください）"
        )

    cfg = RuntimeConfig(
        config_path=explicit_path or discovered_path,
        max_depth=max_depth,
        empty_label_sentinel=str(sentinel),
        window_size=window_size,
        value_precision=precision,
        boxes_default_open=default_open,
    )
    _CONFIG_CACHE = cfg
    return cfg


__all__ = ["RuntimeConfig", "runtime_config", "set_config_path"]
