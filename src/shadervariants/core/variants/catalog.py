# どこで: `src/shadervariants/core/variants/catalog.py`。
# 何を: OptionCatalog（シェーダのオプション記述子列）の読み取り口と、dict spec からの生成を提供する。
# なぜ: アセットローダを core から切り離し、展開/疎追加が読み取り専用の記述子列だけに依存するようにするため。

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from typing import Protocol, runtime_checkable

from .errors import OutOfRangeError
from .options import OptionDescriptor

_ALLOWED_OPTION_SPEC_KEYS = {"name", "default", "values", "min_index"}


@runtime_checkable
class OptionCatalog(Protocol):
    """シェーダオプション記述子の読み取り専用ビュー。"""

    def option_count(self) -> int: ...

    def get_option(self, index: int) -> OptionDescriptor: ...


class StaticOptionCatalog:
    """記述子タプルを保持するだけの OptionCatalog 実装。"""

    def __init__(self, options: Sequence[OptionDescriptor]) -> None:
        names = [o.name for o in options]
        if len(set(names)) != len(names):
            raise ValueError(f"オプション名が重複しています: {names}")
        self._options: tuple[OptionDescriptor, ...] = tuple(options)

    def option_count(self) -> int:
        return len(self._options)

    def get_option(self, index: int) -> OptionDescriptor:
        i = int(index)
        if i < 0 or i >= len(self._options):
            raise OutOfRangeError(
                f"オプション index が範囲外です: index={i}, count={len(self._options)}"
            )
        return self._options[i]

    def __repr__(self) -> str:
        return f"StaticOptionCatalog({[o.name for o in self._options]!r})"


def iter_options(catalog: OptionCatalog) -> Iterator[OptionDescriptor]:
    """カタログ順に記述子を返す。"""

    for i in range(int(catalog.option_count())):
        yield catalog.get_option(i)


def option_from_spec(spec: OptionDescriptor | Mapping[str, object]) -> OptionDescriptor:
    """dict spec または `OptionDescriptor` から `OptionDescriptor` を返す。

    Parameters
    ----------
    spec : OptionDescriptor | Mapping[str, object]
        dict spec の形式:
        - name: str（必須）
        - values: Sequence[str]（必須）
        - default: str（任意。省略時は values の先頭）
        - min_index: int（任意。既定 0）

    Raises
    ------
    TypeError
        spec の型が不正な場合。
    ValueError
        必須キー欠落や未知キーなど、spec の内容が不正な場合。
    """

    if isinstance(spec, OptionDescriptor):
        return spec
    if not isinstance(spec, Mapping):
        raise TypeError("option spec は OptionDescriptor または dict である必要があります")

    unknown = set(spec.keys()) - _ALLOWED_OPTION_SPEC_KEYS
    if unknown:
        names = ", ".join(sorted(str(k) for k in unknown))
        raise ValueError(f"option spec に未知キーがあります: {names}")

    if "name" not in spec:
        raise ValueError("option spec には 'name' が必要です")
    name = spec["name"]
    if not isinstance(name, str) or not name:
        raise TypeError("option spec の 'name' は空でない str である必要があります")

    raw_values = spec.get("values")
    if raw_values is None:
        raise ValueError(f"option spec には 'values' が必要です: name={name!r}")
    if isinstance(raw_values, (str, bytes)) or not isinstance(raw_values, Sequence):
        raise TypeError("option spec の 'values' は Sequence[str] である必要があります")
    values = tuple(str(v) for v in raw_values)
    if not values:
        raise ValueError(f"option spec の 'values' が空です: name={name!r}")

    default = spec.get("default", values[0])
    min_index = spec.get("min_index", 0)
    if isinstance(min_index, bool) or not isinstance(min_index, int):
        raise TypeError("option spec の 'min_index' は int である必要があります")

    return OptionDescriptor(
        name=name,
        default_value=str(default),
        values=values,
        min_index=int(min_index),
    )


def catalog_from_spec(
    specs: Sequence[OptionDescriptor | Mapping[str, object]],
) -> StaticOptionCatalog:
    """dict spec 列から StaticOptionCatalog を生成して返す。"""

    return StaticOptionCatalog([option_from_spec(s) for s in specs])


__all__ = [
    "OptionCatalog",
    "StaticOptionCatalog",
    "catalog_from_spec",
    "iter_options",
    "option_from_spec",
]
