# どこで: `src/faustui/interactive/panel_rules.py`。
# 何を: パネル描画で使う「何をどう出すか」の判定を純粋関数として集約する。
# なぜ: pyimgui 依存部と切り離し、単体テスト可能に保つため。

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from faustui.core.metadata import NumDisplayStyle, NumParamStyle, NumParamStyleKind, WidgetScale
from faustui.core.widgets import (
    Box,
    BoxLayout,
    Button,
    DspWidget,
    NumDisplay,
    NumDisplayLayout,
    NumParam,
    NumParamLayout,
)

ParamControl = Literal["drag", "hslider", "vslider", "knob", "menu", "radio"]
DisplayControl = Literal["hbar", "vbar", "led", "numerical"]


@dataclass(frozen=True, slots=True)
class ParamUiRules:
    """NumParam をどう描画するかのルール。"""

    control: ParamControl
    logarithmic: bool


def param_ui_rules(widget: NumParam) -> ParamUiRules:
    """NumParam の描画ルールを返す。

    優先順位:
    1) style（knob/menu/radio）
    2) layout（entry/h-slider/v-slider）
    """

    kind = widget.style.kind
    control: ParamControl
    if kind is NumParamStyleKind.KNOB:
        control = "knob"
    elif kind is NumParamStyleKind.MENU and widget.style.options:
        control = "menu"
    elif kind is NumParamStyleKind.RADIO and widget.style.options:
        control = "radio"
    elif widget.layout is NumParamLayout.HORIZONTAL_SLIDER:
        control = "hslider"
    elif widget.layout is NumParamLayout.VERTICAL_SLIDER:
        control = "vslider"
    else:
        control = "drag"
    return ParamUiRules(control=control, logarithmic=widget.metadata.scale is WidgetScale.LOG)


def display_control(widget: NumDisplay) -> DisplayControl:
    if widget.style is NumDisplayStyle.LED:
        return "led"
    if widget.style is NumDisplayStyle.NUMERICAL:
        return "numerical"
    if widget.layout is NumDisplayLayout.VERTICAL:
        return "vbar"
    return "hbar"


def slider_range(widget: NumParam | NumDisplay) -> tuple[float, float]:
    """(min, max) を返す。逆転していれば入れ替える。"""

    lo = float(widget.min)
    hi = float(widget.max)
    if lo > hi:
        lo, hi = hi, lo
    return lo, hi


def snap_to_step(widget: NumParam, value: float) -> float:
    """min を起点に step 刻みへ丸め、レンジ内へ clamp した値を返す。step<=0 なら clamp のみ。"""

    lo, hi = slider_range(widget)
    v = float(value)
    step = float(widget.step)
    if step > 0.0:
        v = lo + round((v - lo) / step) * step
    return max(lo, min(hi, v))


def display_fraction(widget: NumDisplay, value: float) -> float:
    """bargraph の塗り率（0..1）を返す。レンジが潰れていれば 0。"""

    lo, hi = slider_range(widget)
    if hi <= lo:
        return 0.0
    x = (float(value) - lo) / (hi - lo)
    if x <= 0.0:
        return 0.0
    if x >= 1.0:
        return 1.0
    return float(x)


def menu_labels(style: NumParamStyle) -> list[str]:
    return [label for label, _value in style.options]


def menu_index(style: NumParamStyle, value: float) -> int:
    """現在値に最も近い選択肢の index を返す。選択肢が無ければ -1。"""

    if not style.options:
        return -1
    best = 0
    best_dist = abs(style.options[0][1] - float(value))
    for i, (_label, v) in enumerate(style.options[1:], start=1):
        dist = abs(v - float(value))
        if dist < best_dist:
            best, best_dist = i, dist
    return best


def tab_child(box: Box) -> DspWidget | None:
    """TAB ボックスで表示する子を返す。selected は範囲内へ丸める。"""

    if box.layout is not BoxLayout.TAB or not box.children:
        return None
    idx = max(0, min(len(box.children) - 1, int(box.selected)))
    return box.children[idx]


def is_visible(widget: DspWidget) -> bool:
    """hidden メタデータが立っていれば False。"""

    if isinstance(widget, Button):
        return not widget.hidden
    if isinstance(widget, (NumParam, NumDisplay)):
        return not widget.metadata.hidden
    return True


def tooltip_for(widget: DspWidget) -> str | None:
    if isinstance(widget, Button):
        return widget.tooltip
    if isinstance(widget, (NumParam, NumDisplay)):
        return widget.metadata.tooltip
    return None


def format_value(value: float, *, precision: int, unit: str | None = None) -> str:
    """表示用の数値文字列を返す（unit があれば後置する）。"""

    text = f"{float(value):.{int(precision)}f}"
    if unit:
        return f"{text} {unit}"
    return text


def imgui_format(*, precision: int, unit: str | None = None) -> str:
    """pyimgui の format 引数（printf 形式）を返す。"""

    fmt = f"%.{int(precision)}f"
    if unit:
        fmt = f"{fmt} {unit.replace('%', '%%')}"
    return fmt


__all__ = [
    "DisplayControl",
    "ParamControl",
    "ParamUiRules",
    "display_control",
    "display_fraction",
    "format_value",
    "imgui_format",
    "is_visible",
    "menu_index",
    "menu_labels",
    "param_ui_rules",
    "slider_range",
    "snap_to_step",
    "tab_child",
    "tooltip_for",
]
