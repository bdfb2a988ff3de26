# どこで: `src/faustui/core/errors.py`。
# 何を: ウィジェットツリー構築で使う例外を定義する。

from __future__ import annotations


class FaustUiError(RuntimeError):
    """faustui の実行時エラーの基底。"""


class StructureError(FaustUiError):
    """宣言列の入れ子が壊れている（open/close 不一致など）。

    Attributes
    ----------
    position : int | None
        問題を検出した宣言の 0 始まりインデックス。
    """

    def __init__(self, message: str, *, position: int | None = None) -> None:
        if position is not None:
            message = f"{message} (position={position})"
        super().__init__(message)
        self.position = position


class CollectorConsumedError(FaustUiError):
    """消費済みの DeclarationCollector を再利用しようとした。"""


class MetadataError(ValueError):
    """メタデータ値が解釈できない。collector 内で握りつぶされ、イベントごと破棄される。"""


class MetadataDictError(MetadataError):
    """`{'label':value;...}` 形式の辞書文字列の構文エラー。"""


__all__ = [
    "CollectorConsumedError",
    "FaustUiError",
    "MetadataDictError",
    "MetadataError",
    "StructureError",
]
