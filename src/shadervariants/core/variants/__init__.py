# どこで: `src/shadervariants/core/variants/__init__.py`。
# 何を: バリアントリストのデータモデルと操作の公開エイリアスをまとめる。
# なぜ: 呼び出し側から最小インポートで使えるようにするため。

from .catalog import OptionCatalog, StaticOptionCatalog, catalog_from_spec, iter_options
from .defrag_ops import defragment_variant_list, options_hash
from .document import CatalogLoader, ShaderVariantDocument
from .errors import (
    ConsistencyWarning,
    EditStateError,
    NotReadyError,
    OutOfRangeError,
    ValidationError,
    VariantCountLimitError,
    VariantListFormatError,
)
from .expand_ops import UNSET_VALUE, expand_system_options, expected_variant_count
from .history import UndoRedoHistory
from .notifications import DocumentObserver
from .options import INVALID_DESCRIPTOR, OptionDescriptor
from .record import VariantRecord
from .session import EditSession
from .sparse_ops import add_one_variant_row, append_sparse_variant_set
from .stable_ids import next_stable_id
from .variant_list import VariantList, variant_lists_differ

__all__ = [
    "CatalogLoader",
    "ConsistencyWarning",
    "DocumentObserver",
    "EditSession",
    "EditStateError",
    "INVALID_DESCRIPTOR",
    "NotReadyError",
    "OptionCatalog",
    "OptionDescriptor",
    "OutOfRangeError",
    "ShaderVariantDocument",
    "StaticOptionCatalog",
    "UNSET_VALUE",
    "UndoRedoHistory",
    "ValidationError",
    "VariantCountLimitError",
    "VariantList",
    "VariantListFormatError",
    "VariantRecord",
    "add_one_variant_row",
    "append_sparse_variant_set",
    "catalog_from_spec",
    "defragment_variant_list",
    "expand_system_options",
    "expected_variant_count",
    "iter_options",
    "next_stable_id",
    "options_hash",
    "variant_lists_differ",
]
