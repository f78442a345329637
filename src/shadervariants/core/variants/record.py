# どこで: `src/shadervariants/core/variants/record.py`。
# 何を: VariantRecord（option 名 -> 値 と stable id の組）を定義する。
# なぜ: バリアントリストの最小単位を不変値として扱い、スナップショット比較を単純にするため。

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

OptionValues = Mapping[str, str]

# 0 は「バリアント無し（ベースシェーダを使う）」の予約値。
RESERVED_STABLE_ID = 0


def _freeze_options(options: Mapping[str, object]) -> Mapping[str, str]:
    return MappingProxyType({str(k): str(v) for k, v in options.items()})


@dataclass(frozen=True, slots=True)
class VariantRecord:
    """1 バリアント分のオプション割り当て。

    options に無いキーは「このレコードでは未拘束」を意味する。
    """

    stable_id: int
    options: OptionValues = field(default_factory=dict)

    def __post_init__(self) -> None:
        if isinstance(self.stable_id, bool) or not isinstance(self.stable_id, int):
            raise TypeError(f"stable_id は int である必要があります: got={self.stable_id!r}")
        if self.stable_id <= RESERVED_STABLE_ID:
            raise ValueError(f"stable_id は 1 以上である必要があります: got={self.stable_id}")
        object.__setattr__(self, "options", _freeze_options(self.options))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, VariantRecord):
            return NotImplemented
        return self.stable_id == other.stable_id and dict(self.options) == dict(other.options)

    def __hash__(self) -> int:
        return hash((self.stable_id, tuple(sorted(self.options.items()))))

    def __repr__(self) -> str:
        return f"VariantRecord(stable_id={self.stable_id}, options={dict(self.options)!r})"

    def __reduce__(self):
        return (VariantRecord, (self.stable_id, dict(self.options)))

    def __copy__(self) -> VariantRecord:
        return self

    def __deepcopy__(self, memo: dict) -> VariantRecord:
        return self

    def with_stable_id(self, stable_id: int) -> VariantRecord:
        return VariantRecord(stable_id=stable_id, options=self.options)

    def with_option(self, name: str, value: str) -> VariantRecord:
        """name の値を value に置き換えたコピーを返す（stable id は保持）。"""

        options = dict(self.options)
        options[str(name)] = str(value)
        return VariantRecord(stable_id=self.stable_id, options=options)


__all__ = ["OptionValues", "RESERVED_STABLE_ID", "VariantRecord"]
