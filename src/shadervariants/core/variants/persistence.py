# どこで: `src/shadervariants/core/variants/persistence.py`。
# 何を: VariantList / system option ファイルの読み書きとパス算出を提供する。
# なぜ: ファイル I/O を純粋な操作群（展開/追加/デフラグ）から切り離すため。

from __future__ import annotations

import json
import logging
from pathlib import Path

from .codec import decode_system_options, dumps_variant_list, loads_variant_list
from .errors import VariantListFormatError
from .variant_list import VariantList

from shadervariants.core.runtime_config import runtime_config

_logger = logging.getLogger(__name__)


def resolve_shader_path(document_path: Path | None, shader_file_path: str) -> Path:
    """shader_file_path を document_path の親ディレクトリ基準で解決して返す。"""

    shader = Path(shader_file_path)
    if shader.is_absolute() or document_path is None:
        return shader
    return Path(document_path).parent / shader


def system_options_path(shader_path: Path) -> Path:
    """シェーダと同名の system option ファイルのパスを返す。"""

    return Path(shader_path).with_suffix(runtime_config().system_options_extension)


def load_system_options(path: Path) -> dict[str, str] | None:
    """system option ファイルをロードして返す。無い/壊れている場合は None（警告ログ）。"""

    try:
        payload = Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        _logger.warning("system option ファイルが見つかりません: %s", path)
        return None
    except OSError as exc:
        _logger.warning("system option ファイルを読めません: %s (%s)", path, exc)
        return None

    try:
        return decode_system_options(json.loads(payload))
    except (json.JSONDecodeError, VariantListFormatError) as exc:
        _logger.warning("system option ファイルが不正です: %s (%s)", path, exc)
        return None


def load_variant_list(path: Path) -> VariantList:
    """JSON ファイルから VariantList をロードして返す。

    Raises
    ------
    OSError
        ファイルを読めない場合。
    VariantListFormatError
        内容が不正な場合。
    """

    payload = Path(path).read_text(encoding="utf-8")
    return loads_variant_list(payload)


def save_variant_list(variant_list: VariantList, path: Path) -> None:
    """VariantList を JSON として path に保存する（親ディレクトリは作成する）。"""

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    text = dumps_variant_list(variant_list, indent=runtime_config().json_indent)
    path.write_text(text + "\n", encoding="utf-8")


__all__ = [
    "load_system_options",
    "load_variant_list",
    "resolve_shader_path",
    "save_variant_list",
    "system_options_path",
]
