# どこで: `src/shadervariants/core/variants/history.py`。
# 何を: undo/redo 履歴（復元クロージャの組のスタック）を提供する。
# なぜ: 編集トランザクションごとに「編集前へ戻す/編集後へ進める」操作を積むため。

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    undo: Callable[[], None]
    redo: Callable[[], None]


class UndoRedoHistory:
    """線形の undo/redo 履歴。

    Notes
    -----
    push すると現在位置より後ろ（redo 可能な分）は破棄する。
    """

    def __init__(self) -> None:
        self._entries: list[HistoryEntry] = []
        self._index = 0

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def can_undo(self) -> bool:
        return self._index > 0

    @property
    def can_redo(self) -> bool:
        return self._index < len(self._entries)

    def push(self, undo: Callable[[], None], redo: Callable[[], None]) -> None:
        del self._entries[self._index :]
        self._entries.append(HistoryEntry(undo=undo, redo=redo))
        self._index = len(self._entries)

    def undo(self) -> bool:
        """1 つ戻す。戻せなければ False。"""

        if not self.can_undo:
            return False
        self._index -= 1
        self._entries[self._index].undo()
        return True

    def redo(self) -> bool:
        """1 つ進める。進められなければ False。"""

        if not self.can_redo:
            return False
        entry = self._entries[self._index]
        self._index += 1
        entry.redo()
        return True

    def clear(self) -> None:
        self._entries.clear()
        self._index = 0


__all__ = ["HistoryEntry", "UndoRedoHistory"]
