# どこで: `src/faustui/core/builder.py`。
# 何を: DeclarationCollector を 1 度だけ消費して、入れ子のウィジェットツリーを組み上げる。
# なぜ: open/close マーカーだけで表現された前順の宣言列から階層を復元するため。

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from .collector import DeclarationCollector
from .errors import StructureError
from .metadata import MetadataEvent, fold_display_metadata, fold_param_metadata
from .runtime_config import runtime_config
from .widgets import (
    Box,
    BoxLayout,
    Button,
    ButtonLayout,
    DeclKind,
    DspWidget,
    LeafWidget,
    NumDisplay,
    NumDisplayLayout,
    NumParam,
    NumParamLayout,
    WidgetDecl,
)
from .zone import Zone

_logger = logging.getLogger(__name__)


@dataclass
class _OpenBox:
    """close 待ちのボックス 1 段ぶんのフレーム。"""

    layout: BoxLayout
    label: str
    position: int
    children: list[DspWidget] = field(default_factory=list)


def _make_leaf(
    label: str, decl: WidgetDecl, events: Sequence[MetadataEvent], position: int
) -> LeafWidget:
    if decl.zone is None:
        raise StructureError(f"zone のない葉宣言です: kind={decl.kind.value}", position=position)
    if decl.zone.address == 0:
        raise StructureError(f"NULL zone の葉宣言です: kind={decl.kind.value}", position=position)
    zone = Zone.from_address(decl.zone)
    kind = decl.kind

    if kind.is_button:
        _style, metadata = fold_param_metadata(events)
        return Button(
            layout=ButtonLayout(kind),
            label=label,
            zone=zone,
            hidden=metadata.hidden,
            tooltip=metadata.tooltip,
        )

    if kind.is_num_param:
        style, metadata = fold_param_metadata(events)
        return NumParam(
            layout=NumParamLayout(kind),
            label=label,
            zone=zone,
            init=decl.init,
            min=decl.min,
            max=decl.max,
            step=decl.step,
            style=style,
            metadata=metadata,
        )

    if kind.is_num_display:
        dstyle, metadata = fold_display_metadata(events)
        return NumDisplay(
            layout=NumDisplayLayout(kind),
            label=label,
            zone=zone,
            min=decl.min,
            max=decl.max,
            style=dstyle,
            metadata=metadata,
        )

    raise StructureError(f"葉ではない宣言です: kind={kind.value}", position=position)


def build_widgets(
    collector: DeclarationCollector, *, max_depth: int | None = None
) -> tuple[DspWidget, ...]:
    """collector を消費し、トップレベルのウィジェット列を返す。

    Parameters
    ----------
    collector : DeclarationCollector
        記録済みの collector。この呼び出しで消費済みになる。
    max_depth : int | None
        ボックスの入れ子上限。None なら config の `builder.max_depth`。

    Returns
    -------
    tuple[DspWidget, ...]
        トップレベルのウィジェット。ボックスの子は宣言順に並ぶ。

    Raises
    ------
    StructureError
        open/close が対応しない、入れ子が上限を超える、葉に zone がない場合。
        途中まで組んだツリーは返さない。
    ValueError
        max_depth が 1 未満の場合。
    """

    if max_depth is None:
        max_depth = runtime_config().max_depth
    if max_depth < 1:
        raise ValueError(f"max_depth は 1 以上である必要があります: got={max_depth}")
    decls, metadata = collector._consume()

    root: list[DspWidget] = []
    stack: list[_OpenBox] = []
    current = root
    count = 0

    for position, (label, decl) in enumerate(decls):
        kind = decl.kind
        if kind.is_box:
            if len(stack) >= max_depth:
                raise StructureError(
                    f"ボックスの入れ子が上限を超えました: max_depth={max_depth}",
                    position=position,
                )
            frame = _OpenBox(layout=BoxLayout(kind), label=label, position=position)
            stack.append(frame)
            current = frame.children
            continue

        if kind is DeclKind.CLOSE_BOX:
            if not stack:
                raise StructureError("対応する open のない close です", position=position)
            frame = stack.pop()
            current = stack[-1].children if stack else root
            current.append(
                Box(layout=frame.layout, label=frame.label, children=tuple(frame.children))
            )
            count += 1
            continue

        events = metadata.get(decl.zone, ()) if decl.zone is not None else ()
        current.append(_make_leaf(label, decl, events, position))
        count += 1

    if stack:
        frame = stack[-1]
        raise StructureError(
            f"close されていないボックスがあります: label={frame.label!r}",
            position=frame.position,
        )

    _logger.debug("built %d widgets (%d top-level)", count, len(root))
    return tuple(root)


__all__ = ["build_widgets"]
