# どこで: `src/shadervariants/core/variants/invariants.py`。
# 何を: VariantList の不変条件をテストで検証する関数を提供する。
# なぜ: 操作を分割しても整合性の知識を 1 箇所へ固定し、踏み抜きを早期検知するため。

from __future__ import annotations

from .record import RESERVED_STABLE_ID, VariantRecord
from .variant_list import VariantList


def assert_invariants(variant_list: VariantList) -> None:
    """VariantList の不変条件を検査する。

    Notes
    -----
    テスト専用の検査関数。実行時に常時呼ぶことは想定しない。
    """

    assert isinstance(variant_list.shader_file_path, str)
    assert isinstance(variant_list.variants, tuple)

    seen: set[int] = set()
    for record in variant_list.variants:
        assert isinstance(record, VariantRecord)
        assert isinstance(record.stable_id, int)
        assert record.stable_id > RESERVED_STABLE_ID
        assert record.stable_id not in seen
        seen.add(record.stable_id)
        for name, value in record.options.items():
            assert isinstance(name, str)
            assert isinstance(value, str)


def assert_defragmented(variant_list: VariantList) -> None:
    """デフラグ済み（id が 1..n の連番で、option 内容の重複が無い）ことを検査する。"""

    assert_invariants(variant_list)
    assert variant_list.stable_ids() == list(range(1, len(variant_list.variants) + 1))
    contents = [tuple(sorted(v.options.items())) for v in variant_list.variants]
    assert len(set(contents)) == len(contents)


__all__ = ["assert_defragmented", "assert_invariants"]
