# どこで: `src/shadervariants/core/variants/variant_list.py`。
# 何を: VariantList（シェーダパス + material options hint + VariantRecord 列）を定義する。
# なぜ: ドキュメントの永続状態を値として受け渡し、各操作が新しい値を返す形に揃えるため。

from __future__ import annotations

import copy
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from .record import VariantRecord


@dataclass(frozen=True, slots=True)
class VariantList:
    """シェーダバリアントリスト。

    Notes
    -----
    - variants の順序には意味がある（追加は末尾、デフラグは旧 stable id 昇順）。
    - material_options_hint は解釈せず、操作をまたいでそのまま運ぶ。
    """

    shader_file_path: str = ""
    material_options_hint: Any = None
    variants: tuple[VariantRecord, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "shader_file_path", str(self.shader_file_path))
        object.__setattr__(self, "variants", tuple(self.variants))

    def __len__(self) -> int:
        return len(self.variants)

    def stable_ids(self) -> list[int]:
        return [v.stable_id for v in self.variants]

    def with_variants(self, variants: Iterable[VariantRecord]) -> VariantList:
        """variants だけを差し替えた新しい VariantList を返す。"""

        return VariantList(
            shader_file_path=self.shader_file_path,
            material_options_hint=copy.deepcopy(self.material_options_hint),
            variants=tuple(variants),
        )

    def appended(self, records: Iterable[VariantRecord]) -> VariantList:
        return self.with_variants((*self.variants, *records))

    def snapshot(self) -> VariantList:
        """深いコピーを返す（編集前スナップショット用）。"""

        return self.with_variants(self.variants)


def variant_lists_differ(before: VariantList, after: VariantList) -> bool:
    """シェーダパス/件数/位置ごとの (stable id, options) のいずれかが異なれば True。

    material_options_hint は比較しない。
    """

    if before.shader_file_path != after.shader_file_path:
        return True
    if len(before.variants) != len(after.variants):
        return True
    for a, b in zip(before.variants, after.variants):
        if a.stable_id != b.stable_id or dict(a.options) != dict(b.options):
            return True
    return False


__all__ = ["VariantList", "variant_lists_differ"]
