# どこで: `src/shadervariants/core/variants/options.py`。
# 何を: OptionDescriptor（シェーダオプション 1 個分の列挙情報）を定義する。
# なぜ: 展開/疎追加が「合法な値」を参照する単位を 1 箇所に固定するため。

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class OptionDescriptor:
    """シェーダオプションの記述子。

    Notes
    -----
    `values[i]` は index `min_index + i` の値名。index は 0 始まりとは限らない。
    """

    name: str
    default_value: str
    values: tuple[str, ...]
    min_index: int = 0

    def __post_init__(self) -> None:
        if not self.values:
            raise ValueError(f"オプションの値が空です: name={self.name!r}")
        if int(self.min_index) < 0:
            raise ValueError(f"min_index は 0 以上である必要があります: got={self.min_index}")

    @property
    def max_index(self) -> int:
        return int(self.min_index) + len(self.values) - 1

    @property
    def value_count(self) -> int:
        """合法な値の個数（max_index - min_index + 1）。"""

        return self.max_index - int(self.min_index) + 1

    @property
    def is_valid(self) -> bool:
        return bool(self.name)

    def value_at(self, index: int) -> str:
        """index（min_index..max_index）の値名を返す。"""

        i = int(index)
        if i < int(self.min_index) or i > self.max_index:
            raise IndexError(
                f"値 index が範囲外です: name={self.name!r}, index={i},"
                f" range=[{self.min_index}, {self.max_index}]"
            )
        return self.values[i - int(self.min_index)]

    def has_value(self, value: str) -> bool:
        return str(value) in self.values


# カタログ未準備/範囲外のときに返す番兵。
INVALID_DESCRIPTOR = OptionDescriptor(name="", default_value="", values=("",))


__all__ = ["INVALID_DESCRIPTOR", "OptionDescriptor"]
