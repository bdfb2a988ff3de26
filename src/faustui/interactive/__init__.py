# どこで: `src/faustui/interactive/__init__.py`。
# 何を: セッション管理とパネル描画の公開 API を集約する。

from __future__ import annotations

from .panel import render_widgets
from .session import DspProgram, DspSession, DspState, Failed, Loaded, NoDsp

__all__ = [
    "DspProgram",
    "DspSession",
    "DspState",
    "Failed",
    "Loaded",
    "NoDsp",
    "render_widgets",
]
