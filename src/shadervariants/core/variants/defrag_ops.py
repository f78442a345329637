# どこで: `src/shadervariants/core/variants/defrag_ops.py`。
# 何を: バリアントリストのデフラグ（option 内容の重複除去 + stable id の詰め直し）を提供する。
# なぜ: 追加を繰り返して溜まった重複と id の穴を、順序を保ったまま解消するため。

from __future__ import annotations

from hashlib import blake2b

from .record import OptionValues, VariantRecord
from .stable_ids import FIRST_STABLE_ID
from .variant_list import VariantList


def options_hash(options: OptionValues) -> int:
    """option mapping の内容ハッシュを返す。

    キーでソートしてから結合するので、挿入順が違っても同じ内容なら同じ値になる。
    """

    h = blake2b(digest_size=8)
    for name in sorted(options.keys()):
        h.update(b"k:")
        h.update(str(name).encode("utf-8"))
        h.update(b"=v:")
        h.update(str(options[name]).encode("utf-8"))
        h.update(b";")
    return int.from_bytes(h.digest(), "little")


def unique_variant_groups(variants: tuple[VariantRecord, ...]) -> list[tuple[int, int]]:
    """option 内容ごとに (初出 index, グループ内の最小 stable id) をリスト順で返す。"""

    buckets: dict[int, list[int]] = {}
    groups: list[list[int]] = []
    for index, record in enumerate(variants):
        bucket = buckets.setdefault(options_hash(record.options), [])
        options = dict(record.options)
        for group_index in bucket:
            group = groups[group_index]
            if dict(variants[group[0]].options) == options:
                group[1] = min(group[1], record.stable_id)
                break
        else:
            bucket.append(len(groups))
            groups.append([index, record.stable_id])
    return [(first, min_id) for first, min_id in groups]


def defragment_variant_list(variant_list: VariantList) -> VariantList:
    """重複を除き、旧 stable id 昇順に並べて 1 から振り直した VariantList を返す。

    Notes
    -----
    重複グループの並び順はグループ内で最小の旧 stable id で決まる。
    旧 stable id は保持されない（呼び出し側は id を引き直す必要がある）。
    shader_file_path と material_options_hint はそのまま運ぶ。
    """

    variants = variant_list.variants
    groups = sorted(unique_variant_groups(variants), key=lambda group: group[1])
    renumbered = [
        variants[first].with_stable_id(stable_id)
        for stable_id, (first, _) in enumerate(groups, start=FIRST_STABLE_ID)
    ]
    return variant_list.with_variants(renumbered)


__all__ = ["defragment_variant_list", "options_hash", "unique_variant_groups"]
