# どこで: `src/shadervariants/__init__.py`。
# 何を: ルート `shadervariants` パッケージを定義する。
# なぜ: import 起点を `shadervariants` に統一するため。

from __future__ import annotations

from shadervariants.core.variants import (
    ShaderVariantDocument,
    VariantList,
    VariantRecord,
    catalog_from_spec,
)

__all__ = ["ShaderVariantDocument", "VariantList", "VariantRecord", "catalog_from_spec"]
