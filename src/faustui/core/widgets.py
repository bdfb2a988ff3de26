# どこで: `src/faustui/core/widgets.py`。
# 何を: 構造宣言（WidgetDecl）と、その結果として組み上がるウィジェットノード型を定義する。
# なぜ: collector/builder/描画層が共有する語彙を 1 箇所に固定するため。

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from .metadata import DEFAULT_METADATA, Metadata, NumDisplayStyle, NumParamStyle
from .zone import Zone, ZoneId


class DeclKind(Enum):
    """DSP ランタイムが宣言する UI 要素の種類。"""

    TAB_BOX = "tab_box"
    HORIZONTAL_BOX = "horizontal_box"
    VERTICAL_BOX = "vertical_box"
    CLOSE_BOX = "close_box"
    BUTTON = "button"
    CHECK_BUTTON = "check_button"
    NUM_ENTRY = "num_entry"
    HORIZONTAL_SLIDER = "horizontal_slider"
    VERTICAL_SLIDER = "vertical_slider"
    HORIZONTAL_BARGRAPH = "horizontal_bargraph"
    VERTICAL_BARGRAPH = "vertical_bargraph"

    @property
    def is_box(self) -> bool:
        return self in _BOX_KINDS

    @property
    def is_button(self) -> bool:
        return self in (DeclKind.BUTTON, DeclKind.CHECK_BUTTON)

    @property
    def is_num_param(self) -> bool:
        return self in (
            DeclKind.NUM_ENTRY,
            DeclKind.HORIZONTAL_SLIDER,
            DeclKind.VERTICAL_SLIDER,
        )

    @property
    def is_num_display(self) -> bool:
        return self in (DeclKind.HORIZONTAL_BARGRAPH, DeclKind.VERTICAL_BARGRAPH)


_BOX_KINDS = frozenset({DeclKind.TAB_BOX, DeclKind.HORIZONTAL_BOX, DeclKind.VERTICAL_BOX})


@dataclass(frozen=True, slots=True)
class WidgetDecl:
    """1 件の構造宣言。init/min/max/step は数値系の kind でのみ意味を持つ。"""

    kind: DeclKind
    zone: ZoneId | None = None
    init: float = 0.0
    min: float = 0.0
    max: float = 0.0
    step: float = 0.0


CLOSE_BOX_DECL = WidgetDecl(kind=DeclKind.CLOSE_BOX)


class BoxLayout(Enum):
    TAB = DeclKind.TAB_BOX
    HORIZONTAL = DeclKind.HORIZONTAL_BOX
    VERTICAL = DeclKind.VERTICAL_BOX


class ButtonLayout(Enum):
    HELD = DeclKind.BUTTON
    CHECKBOX = DeclKind.CHECK_BUTTON


class NumParamLayout(Enum):
    NUM_ENTRY = DeclKind.NUM_ENTRY
    HORIZONTAL_SLIDER = DeclKind.HORIZONTAL_SLIDER
    VERTICAL_SLIDER = DeclKind.VERTICAL_SLIDER


class NumDisplayLayout(Enum):
    HORIZONTAL = DeclKind.HORIZONTAL_BARGRAPH
    VERTICAL = DeclKind.VERTICAL_BARGRAPH


@dataclass(slots=True)
class Box:
    """コンテナ。`selected` は TAB レイアウトで表示中の子の index（GUI 状態）。"""

    layout: BoxLayout
    label: str
    children: tuple["DspWidget", ...] = ()
    selected: int = 0

    @property
    def decl_kind(self) -> DeclKind:
        return self.layout.value


@dataclass(frozen=True, slots=True)
class Button:
    layout: ButtonLayout
    label: str
    zone: Zone
    hidden: bool = False
    tooltip: str | None = None

    @property
    def decl_kind(self) -> DeclKind:
        return self.layout.value


@dataclass(frozen=True, slots=True)
class NumParam:
    layout: NumParamLayout
    label: str
    zone: Zone
    init: float
    min: float
    max: float
    step: float
    style: NumParamStyle = field(default_factory=NumParamStyle)
    metadata: Metadata = DEFAULT_METADATA

    @property
    def decl_kind(self) -> DeclKind:
        return self.layout.value


@dataclass(frozen=True, slots=True)
class NumDisplay:
    layout: NumDisplayLayout
    label: str
    zone: Zone
    min: float
    max: float
    style: NumDisplayStyle = NumDisplayStyle.REGULAR
    metadata: Metadata = DEFAULT_METADATA

    @property
    def decl_kind(self) -> DeclKind:
        return self.layout.value


DspWidget = Union[Box, Button, NumParam, NumDisplay]
LeafWidget = Union[Button, NumParam, NumDisplay]


def iter_widgets(widgets: Iterable[DspWidget]) -> Iterator[DspWidget]:
    """ウィジェットを前順（親 -> 子）で列挙する。"""

    stack: list[Iterator[DspWidget]] = [iter(widgets)]
    while stack:
        w = next(stack[-1], None)
        if w is None:
            stack.pop()
            continue
        yield w
        if isinstance(w, Box):
            stack.append(iter(w.children))


def iter_leaves(widgets: Iterable[DspWidget]) -> Iterator[LeafWidget]:
    for w in iter_widgets(widgets):
        if not isinstance(w, Box):
            yield w


def declaration_events(widgets: Iterable[DspWidget]) -> list[tuple[DeclKind, str]]:
    """ツリーを宣言列 `(kind, label)` へ戻す。Box の終端には `(CLOSE_BOX, "")` を置く。"""

    out: list[tuple[DeclKind, str]] = []

    def visit(level: Iterable[DspWidget]) -> None:
        for w in level:
            out.append((w.decl_kind, w.label))
            if isinstance(w, Box):
                visit(w.children)
                out.append((DeclKind.CLOSE_BOX, ""))

    visit(widgets)
    return out


def find_by_label(widgets: Iterable[DspWidget], label: str) -> DspWidget | None:
    """前順で最初に `label` が一致したウィジェットを返す。"""

    for w in iter_widgets(widgets):
        if w.label == label:
            return w
    return None


__all__ = [
    "Box",
    "BoxLayout",
    "Button",
    "ButtonLayout",
    "CLOSE_BOX_DECL",
    "DeclKind",
    "DspWidget",
    "LeafWidget",
    "NumDisplay",
    "NumDisplayLayout",
    "NumParam",
    "NumParamLayout",
    "WidgetDecl",
    "declaration_events",
    "find_by_label",
    "iter_leaves",
    "iter_widgets",
]
