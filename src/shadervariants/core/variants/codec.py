# どこで: `src/shadervariants/core/variants/codec.py`。
# 何を: VariantList の JSON encode/decode を提供する。
# なぜ: 永続化仕様を VariantList 本体から分離し、スキーマ変更の影響範囲を局所化するため。

from __future__ import annotations

import copy
import json
from typing import Any

from .errors import VariantListFormatError
from .record import VariantRecord
from .variant_list import VariantList

SHADER_KEY = "Shader"
MATERIAL_OPTIONS_HINT_KEY = "MaterialOptionsHint"
VARIANTS_KEY = "Variants"
STABLE_ID_KEY = "StableId"
OPTIONS_KEY = "Options"


def encode_variant_list(variant_list: VariantList) -> dict[str, Any]:
    """VariantList を JSON 化可能な dict に変換して返す。"""

    payload: dict[str, Any] = {SHADER_KEY: variant_list.shader_file_path}
    if variant_list.material_options_hint is not None:
        payload[MATERIAL_OPTIONS_HINT_KEY] = copy.deepcopy(variant_list.material_options_hint)
    payload[VARIANTS_KEY] = [
        {STABLE_ID_KEY: v.stable_id, OPTIONS_KEY: dict(v.options)}
        for v in variant_list.variants
    ]
    return payload


def dumps_variant_list(variant_list: VariantList, *, indent: int | None = None) -> str:
    return json.dumps(encode_variant_list(variant_list), indent=indent)


def _decode_record(item: object, position: int) -> VariantRecord:
    if not isinstance(item, dict):
        raise VariantListFormatError(f"{VARIANTS_KEY}[{position}] は object である必要があります")

    stable_id = item.get(STABLE_ID_KEY)
    if isinstance(stable_id, bool) or not isinstance(stable_id, int) or stable_id < 1:
        raise VariantListFormatError(
            f"{VARIANTS_KEY}[{position}].{STABLE_ID_KEY} は 1 以上の整数である必要があります"
            f": got={stable_id!r}"
        )

    raw_options = item.get(OPTIONS_KEY, {})
    if not isinstance(raw_options, dict):
        raise VariantListFormatError(f"{VARIANTS_KEY}[{position}].{OPTIONS_KEY} は object である必要があります")
    options: dict[str, str] = {}
    for name, value in raw_options.items():
        if isinstance(value, (dict, list)) or value is None:
            raise VariantListFormatError(
                f"{VARIANTS_KEY}[{position}].{OPTIONS_KEY}.{name} はスカラー値である必要があります"
            )
        # JSON で bool/数値として書かれた値も値名として扱う。
        options[str(name)] = str(value).lower() if isinstance(value, bool) else str(value)
    return VariantRecord(stable_id=stable_id, options=options)


def decode_variant_list(obj: object) -> VariantList:
    """JSON 由来の dict から VariantList を復元して返す。

    Raises
    ------
    VariantListFormatError
        形式不正、または stable id が重複している場合。
    """

    if not isinstance(obj, dict):
        raise VariantListFormatError("VariantList payload は object である必要があります")

    shader = obj.get(SHADER_KEY, "")
    if not isinstance(shader, str):
        raise VariantListFormatError(f"{SHADER_KEY} は str である必要があります")

    raw_variants = obj.get(VARIANTS_KEY, [])
    if not isinstance(raw_variants, list):
        raise VariantListFormatError(f"{VARIANTS_KEY} は配列である必要があります")

    variants = [_decode_record(item, i) for i, item in enumerate(raw_variants)]
    seen: set[int] = set()
    for record in variants:
        if record.stable_id in seen:
            raise VariantListFormatError(f"{STABLE_ID_KEY} が重複しています: {record.stable_id}")
        seen.add(record.stable_id)

    return VariantList(
        shader_file_path=shader,
        material_options_hint=copy.deepcopy(obj.get(MATERIAL_OPTIONS_HINT_KEY)),
        variants=tuple(variants),
    )


def loads_variant_list(payload: str) -> VariantList:
    try:
        obj = json.loads(payload)
    except json.JSONDecodeError as exc:
        raise VariantListFormatError(f"JSON として読めません: {exc}") from exc
    return decode_variant_list(obj)


def decode_system_options(obj: object) -> dict[str, str]:
    """system option の JSON object（option 名 -> 値）を dict にして返す。"""

    if not isinstance(obj, dict):
        raise VariantListFormatError("system option は object である必要があります")
    out: dict[str, str] = {}
    for name, value in obj.items():
        if value is None:
            out[str(name)] = ""
        elif isinstance(value, bool):
            out[str(name)] = str(value).lower()
        elif isinstance(value, (str, int, float)):
            out[str(name)] = str(value)
        else:
            raise VariantListFormatError(f"system option {name!r} はスカラー値である必要があります")
    return out


__all__ = [
    "decode_system_options",
    "decode_variant_list",
    "dumps_variant_list",
    "encode_variant_list",
    "loads_variant_list",
]
