# どこで: `src/faustui/__init__.py`。
# 何を: ルート `faustui` パッケージを定義する。
# なぜ: import 起点を `faustui` に統一するため。

from __future__ import annotations

from faustui.core import (
    DeclarationCollector,
    StructureError,
    WidgetDecl,
    Zone,
    ZoneBuffer,
    ZoneId,
    build_widgets,
)
from faustui.interactive.session import DspProgram, DspSession

__all__ = [
    "DeclarationCollector",
    "DspProgram",
    "DspSession",
    "StructureError",
    "WidgetDecl",
    "Zone",
    "ZoneBuffer",
    "ZoneId",
    "build_widgets",
]
