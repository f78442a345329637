# どこで: `src/shadervariants/core/variants/expand_ops.py`。
# 何を: system option 既定値から、未設定オプションの全組み合わせのバリアント列を生成する。
# なぜ: 空のバリアントリストを「既定構成の直積」で初期化するため。

from __future__ import annotations

import logging
import warnings
from collections.abc import Mapping

from .catalog import OptionCatalog, iter_options
from .errors import ConsistencyWarning, NotReadyError, VariantCountLimitError
from .options import OptionDescriptor
from .record import VariantRecord
from .stable_ids import FIRST_STABLE_ID

_logger = logging.getLogger(__name__)

# system option で「未設定（全値を列挙する）」を表す値。
UNSET_VALUE = ""


def _require_catalog(catalog: OptionCatalog | None) -> OptionCatalog:
    if catalog is None:
        raise NotReadyError("オプションカタログが未準備です（シェーダアセット未ロード）")
    return catalog


def split_system_options(
    catalog: OptionCatalog | None,
    system_options: Mapping[str, str],
) -> tuple[dict[str, str], list[OptionDescriptor]]:
    """(既定値で埋めた mapping, 未設定オプション列) を返す。

    未設定オプションはカタログ順に並ぶ。system option に無いオプションは mapping に含めない。
    """

    catalog = _require_catalog(catalog)
    seeded = {str(k): str(v) for k, v in system_options.items()}
    unset: list[OptionDescriptor] = []
    for descriptor in iter_options(catalog):
        value = seeded.get(descriptor.name)
        if value is None or value != UNSET_VALUE:
            continue
        unset.append(descriptor)
        seeded[descriptor.name] = descriptor.default_value
    return seeded, unset


def expected_variant_count(
    catalog: OptionCatalog | None,
    system_options: Mapping[str, str],
) -> int:
    """展開後のバリアント数（未設定オプションの値数の積）を返す。"""

    _seeded, unset = split_system_options(catalog, system_options)
    total = 1
    for descriptor in unset:
        total *= descriptor.value_count
    return total


def _warn_inconsistent_defaults(unset: list[OptionDescriptor]) -> None:
    for descriptor in unset:
        if descriptor.has_value(descriptor.default_value):
            continue
        message = (
            "既定値がオプション自身の列挙値に含まれません（展開数が見込みを超えます）"
            f": name={descriptor.name!r}, default={descriptor.default_value!r}"
        )
        _logger.warning(message)
        warnings.warn(message, ConsistencyWarning, stacklevel=3)


def expand_system_options(
    catalog: OptionCatalog | None,
    system_options: Mapping[str, str],
    *,
    max_variants: int | None = None,
) -> list[VariantRecord]:
    """system option 既定値を直積展開したバリアント列を返す。

    Parameters
    ----------
    catalog : OptionCatalog | None
        オプションカタログ。None は未準備扱い。
    system_options : Mapping[str, str]
        option 名 -> 値。値が空文字のオプションは全値を列挙する。
    max_variants : int | None
        展開数の上限。超える場合は何も生成せずに例外を送出する。

    Returns
    -------
    list[VariantRecord]
        先頭が全既定値のレコード（stable id 1）。以降は未設定オプションを
        カタログ順に 1 つずつ掛け合わせた順で、stable id は連番。

    Raises
    ------
    NotReadyError
        catalog が None の場合。
    VariantCountLimitError
        展開数が max_variants を超える場合。
    """

    seeded, unset = split_system_options(catalog, system_options)

    total = 1
    for descriptor in unset:
        total *= descriptor.value_count
    if max_variants is not None and total > int(max_variants):
        raise VariantCountLimitError(total, int(max_variants))

    _warn_inconsistent_defaults(unset)

    result: list[VariantRecord] = [VariantRecord(stable_id=FIRST_STABLE_ID, options=seeded)]
    stable_id = FIRST_STABLE_ID + 1

    for descriptor in unset:
        # このオプションの展開前の列だけを複製元にする（値ごとに全体を 1 回ずつ複製）。
        base = list(result)
        staged: list[VariantRecord] = []
        for index in range(descriptor.min_index, descriptor.max_index + 1):
            value = descriptor.value_at(index)
            if value == descriptor.default_value:
                continue
            for record in base:
                if descriptor.name not in record.options:
                    continue
                staged.append(
                    VariantRecord(
                        stable_id=stable_id,
                        options={**record.options, descriptor.name: value},
                    )
                )
                stable_id += 1
        result.extend(staged)

    if len(result) != total:
        _logger.warning("展開数が見込みと一致しません: expected=%d actual=%d", total, len(result))
    _logger.debug(
        "system option を展開しました: unset=%s variants=%d",
        [d.name for d in unset],
        len(result),
    )
    return result


__all__ = [
    "UNSET_VALUE",
    "expand_system_options",
    "expected_variant_count",
    "split_system_options",
]
