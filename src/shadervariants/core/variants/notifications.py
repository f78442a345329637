# どこで: `src/shadervariants/core/variants/notifications.py`。
# 何を: 確定した変更を外部へ知らせる observer プロトコルと、その登録リストを提供する。
# なぜ: イベントバスに依存せず、呼び出し側が明示的に登録した相手にだけ通知するため。

from __future__ import annotations

from typing import Any, Protocol


class DocumentObserver(Protocol):
    def on_object_info_invalidated(self, document: Any) -> None: ...

    def on_document_modified(self, document: Any) -> None: ...


class ObserverList:
    """登録順に通知する observer の集合（同一 observer の二重登録は無視）。"""

    def __init__(self) -> None:
        self._observers: list[DocumentObserver] = []

    def __len__(self) -> int:
        return len(self._observers)

    def add(self, observer: DocumentObserver) -> None:
        if any(o is observer for o in self._observers):
            return
        self._observers.append(observer)

    def remove(self, observer: DocumentObserver) -> None:
        self._observers = [o for o in self._observers if o is not observer]

    def notify_changed(self, document: Any) -> None:
        """object info invalidated → document modified の順に通知する。"""

        for observer in list(self._observers):
            observer.on_object_info_invalidated(document)
        for observer in list(self._observers):
            observer.on_document_modified(document)


__all__ = ["DocumentObserver", "ObserverList"]
