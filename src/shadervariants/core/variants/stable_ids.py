# どこで: `src/shadervariants/core/variants/stable_ids.py`。
# 何を: 新規バリアントへ割り当てる stable id の採番を提供する。
# なぜ: 展開/疎追加/1 行追加の全経路で同じ採番規則を使うため。

from __future__ import annotations

from .variant_list import VariantList

FIRST_STABLE_ID = 1


def next_stable_id(variant_list: VariantList) -> int:
    """次に割り当てる stable id を返す。空リストなら 1。

    追記順のリストでは「末尾の id + 1」と一致する。並べ替え済みのリストでも
    既存 id と衝突しないよう、末尾ではなく最大値 + 1 を返す。
    """

    if not variant_list.variants:
        return FIRST_STABLE_ID
    return max(v.stable_id for v in variant_list.variants) + 1


__all__ = ["FIRST_STABLE_ID", "next_stable_id"]
