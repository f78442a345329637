# どこで: `src/shadervariants/core/variants/sparse_ops.py`。
# 何を: ヘッダ + 行優先の値行列からバリアントを一括追加する操作と、空行 1 件の追加を提供する。
# なぜ: 表形式の疎な入力（指定列のみ拘束）をバリアントリストへ取り込むため。

from __future__ import annotations

import logging
from collections.abc import Sequence

from .catalog import OptionCatalog, iter_options
from .errors import NotReadyError, ValidationError
from .record import VariantRecord
from .stable_ids import next_stable_id
from .variant_list import VariantList

_logger = logging.getLogger(__name__)


def _header_index(headers: Sequence[str]) -> dict[str, int]:
    index: dict[str, int] = {}
    for column, name in enumerate(headers):
        name = str(name)
        if name in index:
            raise ValidationError(f"ヘッダのオプション名が重複しています: {name!r}")
        index[name] = column
    return index


def append_sparse_variant_set(
    variant_list: VariantList,
    catalog: OptionCatalog | None,
    headers: Sequence[str],
    values: Sequence[str],
) -> VariantList:
    """値行列の各行を 1 バリアントとして末尾に追加した VariantList を返す。

    Notes
    -----
    - 行 r / 列 c の値は `values[r * len(headers) + c]`。
    - オプションはカタログ順に走査し、ヘッダに無いオプションは mapping に含めない。
    - stable id は `next_stable_id()` から行順に連番。
    - 入力が不正なら例外を送出し、variant_list は変更しない。
    """

    if catalog is None:
        raise NotReadyError("オプションカタログが未準備です（シェーダアセット未ロード）")
    if isinstance(headers, (str, bytes)) or isinstance(values, (str, bytes)):
        raise ValidationError("headers/values は str の列である必要があります")

    width = len(headers)
    if width == 0:
        raise ValidationError("ヘッダが空です")
    if len(values) % width != 0:
        raise ValidationError(
            "値行列の長さはヘッダ数の倍数である必要があります"
            f": values={len(values)}, headers={width}"
        )
    column_by_name = _header_index(headers)

    descriptors = list(iter_options(catalog))
    unknown = sorted(set(column_by_name) - {d.name for d in descriptors})
    if unknown:
        # カタログに無い列は取り込まれない。
        _logger.warning("カタログに無いヘッダを無視しました: %s", ", ".join(unknown))

    stable_id = next_stable_id(variant_list)
    rows = len(values) // width
    appended: list[VariantRecord] = []
    for row in range(rows):
        options: dict[str, str] = {}
        for descriptor in descriptors:
            column = column_by_name.get(descriptor.name)
            if column is None:
                continue
            options[descriptor.name] = str(values[row * width + column])
        appended.append(VariantRecord(stable_id=stable_id, options=options))
        stable_id += 1

    return variant_list.appended(appended)


def add_one_variant_row(variant_list: VariantList) -> tuple[VariantList, int]:
    """オプション未拘束のバリアントを 1 件追加し、(新リスト, 割り当てた stable id) を返す。"""

    stable_id = next_stable_id(variant_list)
    return variant_list.appended([VariantRecord(stable_id=stable_id)]), stable_id


__all__ = ["add_one_variant_row", "append_sparse_variant_set"]
