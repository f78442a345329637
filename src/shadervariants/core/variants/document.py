# どこで: `src/shadervariants/core/variants/document.py`。
# 何を: ShaderVariantDocument（1 つのバリアントリストを所有し、編集/undo/保存を束ねる）を提供する。
# なぜ: 純粋な操作群とカタログ/ファイル/通知を、単一の書き手として 1 箇所で接続するため。

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from pathlib import Path

from .catalog import OptionCatalog
from .defrag_ops import defragment_variant_list
from .errors import NotReadyError, ValidationError, VariantListFormatError
from .expand_ops import expand_system_options
from .history import UndoRedoHistory
from .notifications import DocumentObserver, ObserverList
from .options import INVALID_DESCRIPTOR, OptionDescriptor
from .persistence import (
    load_system_options,
    load_variant_list,
    resolve_shader_path,
    save_variant_list,
    system_options_path,
)
from .session import EditSession
from .sparse_ops import add_one_variant_row, append_sparse_variant_set
from .variant_list import VariantList

from shadervariants.core.runtime_config import runtime_config

_logger = logging.getLogger(__name__)

# シェーダパスからオプションカタログを返す。ロードできなければ None（または NotReadyError）。
CatalogLoader = Callable[[Path], "OptionCatalog | None"]


class ShaderVariantDocument:
    """シェーダバリアントリストのドキュメント。

    Notes
    -----
    - live な VariantList はこのドキュメントだけが書き換える。
    - 変更操作は EditSession で囲み、変化があったときだけ履歴と通知を出す。
    """

    def __init__(self, catalog_loader: CatalogLoader) -> None:
        self._catalog_loader = catalog_loader
        self._variant_list = VariantList()
        self._catalog: OptionCatalog | None = None
        self._path: Path | None = None
        self._modified = False

        self._observers = ObserverList()
        self._history = UndoRedoHistory()
        self._session = EditSession(
            read=lambda: self._variant_list,
            write=self._write,
            history=self._history,
            on_committed=self._on_committed,
        )

    # --- 参照 ---
    @property
    def variant_list(self) -> VariantList:
        return self._variant_list.snapshot()

    @property
    def catalog(self) -> OptionCatalog | None:
        return self._catalog

    @property
    def path(self) -> Path | None:
        return self._path

    @property
    def is_modified(self) -> bool:
        return self._modified

    @property
    def history(self) -> UndoRedoHistory:
        return self._history

    def add_observer(self, observer: DocumentObserver) -> None:
        self._observers.add(observer)

    def remove_observer(self, observer: DocumentObserver) -> None:
        self._observers.remove(observer)

    def option_descriptor_count(self) -> int:
        """カタログのオプション数を返す。未準備なら 0。"""

        if self._catalog is None:
            _logger.error("option_descriptor_count: オプションカタログが未準備です")
            return 0
        return int(self._catalog.option_count())

    def option_descriptor(self, index: int) -> OptionDescriptor:
        """index の記述子を返す。未準備/範囲外ならエラーログを出して番兵を返す。"""

        try:
            if self._catalog is None:
                raise NotReadyError("オプションカタログが未準備です")
            return self._catalog.get_option(index)
        except (NotReadyError, IndexError) as exc:
            _logger.error("オプション記述子を取得できません: index=%s (%s)", index, exc)
            return INVALID_DESCRIPTOR

    # --- 編集トランザクション ---
    def begin_edit(self) -> None:
        self._session.begin_edit()

    def end_edit(self) -> bool:
        return self._session.end_edit()

    def undo(self) -> bool:
        return self._history.undo()

    def redo(self) -> bool:
        return self._history.redo()

    def set_variant_list(self, variant_list: VariantList) -> bool:
        """live な VariantList を置き換える。

        空のリストは初期化要求として扱い、シェーダと同名の system option を展開する。
        カタログをロードできない場合はリストだけを置き換え、False を返す。
        """

        shader_path = resolve_shader_path(self._path, variant_list.shader_file_path)
        catalog = self._load_catalog(shader_path)
        if catalog is None:
            self._catalog = None
            self._variant_list = variant_list.snapshot()
            _logger.error("シェーダアセットをロードできません: %s", variant_list.shader_file_path)
            return False

        self._catalog = catalog
        if not variant_list.variants:
            variant_list = self._initialize_variants(variant_list, shader_path)
        self._variant_list = variant_list.snapshot()
        self._on_committed()
        return True

    def append_sparse_variant_set(self, headers: Sequence[str], values: Sequence[str]) -> bool:
        """ヘッダ + 値行列を末尾に追加する。入力不正/カタログ未準備ならエラーログを出して False。"""

        try:
            self._apply(
                lambda current: append_sparse_variant_set(current, self._catalog, headers, values)
            )
        except (ValidationError, NotReadyError) as exc:
            _logger.error("append_sparse_variant_set: %s", exc)
            return False
        return True

    def defragment_variant_list(self) -> None:
        self._apply(defragment_variant_list)

    def add_one_variant_row(self) -> int:
        """空のバリアントを 1 件追加し、その stable id を返す。カタログ未準備なら 0。"""

        if self._catalog is None:
            _logger.error("add_one_variant_row: オプションカタログが未準備です")
            return 0
        allocated: list[int] = []

        def _add(current: VariantList) -> VariantList:
            updated, stable_id = add_one_variant_row(current)
            allocated.append(stable_id)
            return updated

        self._apply(_add)
        return allocated[0]

    # --- ファイル ---
    def open(self, path: str | Path) -> bool:
        """シェーダ（新規リスト）またはバリアントリストファイルを開く。

        シェーダを開いた場合は保存先を持たないので、保存には save_as を使う。
        """

        self.clear()
        path = Path(path).resolve()
        cfg = runtime_config()
        suffix = path.suffix.lower()

        if suffix == cfg.shader_extension:
            self.set_variant_list(VariantList(shader_file_path=str(path)))
        elif suffix == cfg.variant_list_extension:
            try:
                loaded = load_variant_list(path)
            except (OSError, VariantListFormatError) as exc:
                _logger.error("バリアントリストをロードできません: %s (%s)", path, exc)
                return False
            self._path = path
            self.set_variant_list(loaded)
        else:
            _logger.error("対応していない拡張子です: %s", path)
            return False

        self._modified = False
        return True

    def save(self) -> bool:
        if self._path is None:
            _logger.error("保存先が未設定です（save_as を使ってください）")
            return False
        return self._save_to(self._path)

    def save_as(self, path: str | Path) -> bool:
        return self._save_to(Path(path).resolve())

    def clear(self) -> None:
        """ドキュメントを空の状態に戻す（履歴も破棄する）。"""

        if self._session.is_editing:
            self._session.cancel_edit()
        self._variant_list = VariantList()
        self._catalog = None
        self._path = None
        self._modified = False
        self._history.clear()

    # --- 内部 ---
    def _write(self, variant_list: VariantList) -> None:
        self._variant_list = variant_list

    def _on_committed(self) -> None:
        self._modified = True
        self._observers.notify_changed(self)

    def _apply(self, mutate: Callable[[VariantList], VariantList]) -> None:
        # 呼び出し側が begin_edit 済みならそのトランザクションに含める。
        if self._session.is_editing:
            self._write(mutate(self._variant_list))
            return
        with self._session.edit():
            self._write(mutate(self._variant_list))

    def _load_catalog(self, shader_path: Path) -> OptionCatalog | None:
        try:
            return self._catalog_loader(shader_path)
        except NotReadyError as exc:
            _logger.debug("カタログ未準備: %s (%s)", shader_path, exc)
            return None

    def _initialize_variants(self, variant_list: VariantList, shader_path: Path) -> VariantList:
        system_options = load_system_options(system_options_path(shader_path))
        if not system_options:
            return variant_list
        try:
            records = expand_system_options(
                self._catalog,
                system_options,
                max_variants=runtime_config().max_variant_count,
            )
        except ValidationError as exc:
            _logger.error("system option を展開できません: %s", exc)
            return variant_list
        return variant_list.with_variants(records)

    def _save_to(self, path: Path) -> bool:
        extension = runtime_config().variant_list_extension
        if path.suffix.lower() != extension:
            _logger.error("%s 以外には保存できません: %s", extension, path)
            return False
        try:
            save_variant_list(self._variant_list, path)
        except OSError as exc:
            _logger.error("ドキュメントを保存できません: %s (%s)", path, exc)
            return False
        self._path = path
        self._modified = False
        return True


__all__ = ["CatalogLoader", "ShaderVariantDocument"]
