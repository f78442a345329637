# どこで: `src/shadervariants/core/runtime_config.py`。
# 何を: config.yaml による実行時設定（探索・ロード・キャッシュ）を提供する。
# なぜ: 展開上限やファイル拡張子を、コードを変えずにユーザーが指定できるようにするため。

from __future__ import annotations

from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any


@dataclass(frozen=True, slots=True)
class RuntimeConfig:
    """shadervariants の実行時設定。"""

    config_path: Path | None
    max_variant_count: int
    variant_list_extension: str
    shader_extension: str
    system_options_extension: str
    json_indent: int | None


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
        cwd / ".shadervariants" / "config.yaml",
        home / ".config" / "shadervariants" / "config.yaml",
    )


def _as_mapping(value: Any, *, key: str) -> dict[str, Any]:
    if value is None:
        return {}
    if isinstance(value, dict):
        return dict(value)
    raise RuntimeError(f"{key} は mapping である必要があります: got={value!r}")


def _as_positive_int(value: Any, *, key: str) -> int:
    if isinstance(value, bool):
        raise RuntimeError(f"{key} は整数である必要があります: got={value!r}")
    try:
        out = int(value)
    except Exception as exc:
        raise RuntimeError(f"{key} は整数である必要があります: got={value!r}") from exc
    if out <= 0:
        raise ValueError(f"{key} は正の値である必要があります: got={out}")
    return out


def _as_extension(value: Any, *, key: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise RuntimeError(f"{key} は空でない文字列である必要があります: got={value!r}")
    s = value.strip()
    return s if s.startswith(".") else f".{s}"


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
            resources.files("shadervariants")
            .joinpath("resource", "default_config.yaml")
            .read_text(encoding="utf-8")
        )
    except Exception as exc:  # pragma: no cover
        raise RuntimeError(
            "同梱 default_config.yaml の読み込みに失敗しました"
            "（パッケージ配布物の package-data を確認してください）"
        ) from exc

    return _load_yaml_text(blob, source="shadervariants/resource/default_config.yaml")


def _merge_sections(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    # セクション（1 段目の mapping）単位でキーを上書きする。
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = {**current, **value}
        else:
            merged[key] = value
    return merged


def runtime_config() -> RuntimeConfig:
    """実行時設定をロードして返す（キャッシュ）。"""

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
        payload = _merge_sections(payload, _load_yaml_config(discovered_path))
    if explicit_path is not None:
        payload = _merge_sections(payload, _load_yaml_config(explicit_path))

    version = payload.get("version")
    if version is None:
        raise RuntimeError(
            "config.yaml の version が未設定です（同梱 default_config.yaml を確認してください）"
        )
    try:
        version_i = int(version)
    except Exception as exc:
        raise RuntimeError(f"config.yaml の version は整数である必要があります: got={version!r}") from exc
    if version_i != 1:
        raise RuntimeError(f"未対応の config.yaml version です: got={version_i}")

    expansion = _as_mapping(payload.get("expansion"), key="expansion")
    max_variant_count = _as_positive_int(
        expansion.get("max_variant_count"),
        key="expansion.max_variant_count",
    )

    files = _as_mapping(payload.get("files"), key="files")
    variant_list_extension = _as_extension(
        files.get("variant_list_extension"), key="files.variant_list_extension"
    )
    shader_extension = _as_extension(files.get("shader_extension"), key="files.shader_extension")
    system_options_extension = _as_extension(
        files.get("system_options_extension"), key="files.system_options_extension"
    )

    raw_indent = files.get("json_indent")
    json_indent = None if raw_indent is None else _as_positive_int(raw_indent, key="files.json_indent")

    cfg = RuntimeConfig(
        config_path=explicit_path or discovered_path,
        max_variant_count=max_variant_count,
        variant_list_extension=variant_list_extension,
        shader_extension=shader_extension,
        system_options_extension=system_options_extension,
        json_indent=json_indent,
    )
    _CONFIG_CACHE = cfg
    return cfg


__all__ = ["RuntimeConfig", "runtime_config", "set_config_path"]
