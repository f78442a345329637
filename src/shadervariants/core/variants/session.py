# どこで: `src/shadervariants/core/variants/session.py`。
# 何を: VariantList の編集トランザクション（begin/end + スナップショット比較 + undo/redo 登録）を提供する。
# なぜ: どの変更経路でも「変化があった編集だけ」を 1 件の履歴として積み、通知するため。

from __future__ import annotations

import contextlib
import logging
from collections.abc import Callable
from typing import Iterator

from .errors import EditStateError
from .history import UndoRedoHistory
from .variant_list import VariantList, variant_lists_differ

_logger = logging.getLogger(__name__)


class EditSession:
    """Idle -> Editing -> Idle の編集状態機械。

    Parameters
    ----------
    read : Callable[[], VariantList]
        現在の（live な）VariantList を返す。
    write : Callable[[VariantList], None]
        live な VariantList を置き換える。通知は行わない想定。
    history : UndoRedoHistory
        確定した編集を積む履歴。
    on_committed : Callable[[], None] | None
        編集確定/undo/redo で状態が変わった直後に呼ぶ。
    """

    def __init__(
        self,
        read: Callable[[], VariantList],
        write: Callable[[VariantList], None],
        history: UndoRedoHistory,
        *,
        on_committed: Callable[[], None] | None = None,
    ) -> None:
        self._read = read
        self._write = write
        self._history = history
        self._on_committed = on_committed
        self._before: VariantList | None = None

    @property
    def is_editing(self) -> bool:
        return self._before is not None

    def begin_edit(self) -> None:
        """編集前スナップショットを取り、Editing へ遷移する。"""

        if self._before is not None:
            raise EditStateError("編集中に begin_edit が呼ばれました")
        self._before = self._read().snapshot()

    def end_edit(self) -> bool:
        """Idle へ戻る。変化があれば履歴を積んで通知し、True を返す。"""

        before = self._before
        if before is None:
            raise EditStateError("begin_edit の前に end_edit が呼ばれました")
        self._before = None

        after = self._read().snapshot()
        if not variant_lists_differ(before, after):
            return False

        self._history.push(
            undo=lambda: self._restore(before),
            redo=lambda: self._restore(after),
        )
        _logger.debug("編集を確定しました: variants %d -> %d", len(before), len(after))
        self._notify()
        return True

    def cancel_edit(self) -> None:
        """編集前の状態へ戻し、履歴を積まずに Idle へ戻る。"""

        before = self._before
        if before is None:
            raise EditStateError("begin_edit の前に cancel_edit が呼ばれました")
        self._before = None
        self._write(before)

    @contextlib.contextmanager
    def edit(self) -> Iterator[None]:
        """begin_edit/end_edit を囲むコンテキストマネージャ。

        ブロック内で例外が出た場合は編集前へ戻してから再送出する。
        """

        self.begin_edit()
        try:
            yield
        except BaseException:
            self.cancel_edit()
            raise
        self.end_edit()

    def _restore(self, state: VariantList) -> None:
        self._write(state.snapshot())
        self._notify()

    def _notify(self) -> None:
        if self._on_committed is not None:
            self._on_committed()


__all__ = ["EditSession"]
