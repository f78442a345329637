# どこで: `src/shadervariants/core/variants/errors.py`。
# 何を: バリアントリスト操作の例外/警告クラスを定義する。
# なぜ: 呼び出し側が失敗の種類（入力不正/カタログ未準備/範囲外）を区別できるようにするため。

from __future__ import annotations


class ValidationError(ValueError):
    """入力が不正で操作を中断した（リストは変更されない）。"""


class VariantCountLimitError(ValidationError):
    """展開後のバリアント数が上限を超える。"""

    def __init__(self, count: int, limit: int) -> None:
        super().__init__(f"展開後のバリアント数が上限を超えます: count={count}, limit={limit}")
        self.count = int(count)
        self.limit = int(limit)


class NotReadyError(RuntimeError):
    """オプションカタログ（シェーダアセット）が未準備。"""


class OutOfRangeError(IndexError):
    """オプション記述子の index がカタログ範囲外。"""


class EditStateError(RuntimeError):
    """begin_edit/end_edit の呼び出し順が不正。"""


class VariantListFormatError(ValueError):
    """永続化 payload の形式が不正。"""


class ConsistencyWarning(UserWarning):
    """カタログの既定値が自身の列挙値に含まれない。"""


__all__ = [
    "ConsistencyWarning",
    "EditStateError",
    "NotReadyError",
    "OutOfRangeError",
    "ValidationError",
    "VariantCountLimitError",
    "VariantListFormatError",
]
