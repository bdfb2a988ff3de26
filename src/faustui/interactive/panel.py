# どこで: `src/faustui/interactive/panel.py`。
# 何を: ウィジェットツリーを pyimgui で描画し、操作結果を zone へ直接書き込む。
# なぜ: DSP プログラムの UI 記述をそのまま操作パネルとして見せるため。

from __future__ import annotations

from collections.abc import Sequence

from faustui.core.runtime_config import runtime_config
from faustui.core.widgets import (
    Box,
    BoxLayout,
    Button,
    ButtonLayout,
    DspWidget,
    NumDisplay,
    NumParam,
)

from .panel_rules import (
    display_control,
    display_fraction,
    format_value,
    imgui_format,
    is_visible,
    menu_index,
    menu_labels,
    param_ui_rules,
    slider_range,
    snap_to_step,
    tab_child,
    tooltip_for,
)

_LED_ON_RGBA = (1.0, 0.85, 0.1, 1.0)
_LED_OFF_RGBA = (0.35, 0.35, 0.35, 1.0)
_VSLIDER_SIZE = (28.0, 120.0)


def _show_tooltip(imgui, widget: DspWidget) -> None:
    text = tooltip_for(widget)
    if text and imgui.is_item_hovered():
        imgui.set_tooltip(text)


def _render_button(imgui, widget: Button) -> None:
    zone = widget.zone
    if widget.layout is ButtonLayout.HELD:
        # 押している間だけ 1、離すと 0
        imgui.button(widget.label or "##button")
        zone.write(1.0 if imgui.is_item_active() else 0.0)
    else:
        clicked, state = imgui.checkbox(widget.label or "##check", zone.read() != 0.0)
        if clicked:
            zone.write(1.0 if state else 0.0)
    _show_tooltip(imgui, widget)


def _render_num_param(imgui, widget: NumParam, *, precision: int) -> None:
    zone = widget.zone
    rules = param_ui_rules(widget)
    lo, hi = slider_range(widget)
    unit = widget.metadata.unit
    fmt = imgui_format(precision=precision, unit=unit)
    flags = imgui.SLIDER_FLAGS_LOGARITHMIC if rules.logarithmic else 0

    imgui.begin_group()
    if widget.label:
        imgui.text(widget.label)
        # ラベルのダブルクリックで初期値へ戻す
        if imgui.is_item_hovered() and imgui.is_mouse_double_clicked(0):
            zone.write(widget.init)
        _show_tooltip(imgui, widget)

    value = zone.read()
    changed = False
    new_value = value

    if rules.control in ("menu", "radio"):
        labels = menu_labels(widget.style)
        current = menu_index(widget.style, value)
        if rules.control == "menu":
            changed, current = imgui.combo("##value", current, labels)
        else:
            for i, label in enumerate(labels):
                if imgui.radio_button(f"{label}##{i}", i == current):
                    current = i
                    changed = True
                if i != len(labels) - 1:
                    imgui.same_line(0.0, 6.0)
        if changed:
            new_value = widget.style.options[int(current)][1]
    elif rules.control == "hslider":
        changed, new_value = imgui.slider_float("##value", value, lo, hi, format=fmt, flags=flags)
    elif rules.control == "vslider":
        w, h = _VSLIDER_SIZE
        changed, new_value = imgui.v_slider_float(
            "##value", w, h, value, lo, hi, format=fmt, flags=flags
        )
    else:
        speed = float(widget.step) if widget.step > 0 else (hi - lo) / 100.0 or 0.01
        changed, new_value = imgui.drag_float(
            "##value",
            value,
            change_speed=speed,
            min_value=lo,
            max_value=hi,
            format=fmt,
            flags=flags,
        )
    _show_tooltip(imgui, widget)
    imgui.end_group()

    if changed:
        if rules.control in ("menu", "radio"):
            zone.write(float(new_value))
        else:
            zone.write(snap_to_step(widget, float(new_value)))


def _render_num_display(imgui, widget: NumDisplay, *, precision: int) -> None:
    value = widget.zone.read()
    text = format_value(value, precision=precision, unit=widget.metadata.unit)
    control = display_control(widget)
    lo, hi = slider_range(widget)

    imgui.begin_group()
    if widget.label:
        imgui.text(f"{widget.label}:")
    if control == "led":
        rgba = _LED_ON_RGBA if display_fraction(widget, value) > 0.0 else _LED_OFF_RGBA
        imgui.text_colored("(*)", *rgba)
    elif control == "numerical":
        imgui.text(text)
    elif control == "vbar":
        imgui.text(format_value(hi, precision=precision))
        imgui.text_colored(text, *_LED_ON_RGBA)
        imgui.text(format_value(lo, precision=precision))
    else:
        imgui.progress_bar(display_fraction(widget, value), (-1, 0), text)
    imgui.end_group()
    _show_tooltip(imgui, widget)


def _render_tab_box(imgui, box: Box, *, precision: int, default_open: bool) -> None:
    flags = imgui.TREE_NODE_DEFAULT_OPEN if default_open else 0
    expanded, _visible = imgui.collapsing_header(f"{box.label}##tabs", None, flags=flags)
    for idx, child in enumerate(box.children):
        if idx:
            imgui.same_line()
        selected = idx == box.selected
        if selected:
            imgui.push_style_color(imgui.COLOR_BUTTON, 0.1, 0.2, 0.55, 1.0)
        try:
            if imgui.button(f"{child.label or idx}##tab{idx}"):
                box.selected = idx
        finally:
            if selected:
                imgui.pop_style_color(1)
    imgui.separator()
    child = tab_child(box)
    if expanded and child is not None:
        _render_level(imgui, [child], in_tab=True, precision=precision, default_open=default_open)


def _render_box(imgui, box: Box, *, in_tab: bool, precision: int, default_open: bool) -> None:
    if box.layout is BoxLayout.TAB:
        _render_tab_box(imgui, box, precision=precision, default_open=default_open)
        return

    expanded = True
    if not in_tab and box.label:
        flags = imgui.TREE_NODE_DEFAULT_OPEN if default_open else 0
        expanded, _visible = imgui.collapsing_header(f"{box.label}##box", None, flags=flags)
    if not expanded:
        return
    imgui.indent()
    _render_level(
        imgui,
        box.children,
        in_tab=False,
        precision=precision,
        default_open=default_open,
        horizontal=box.layout is BoxLayout.HORIZONTAL,
    )
    imgui.unindent()


def _render_level(
    imgui,
    widgets: Sequence[DspWidget],
    *,
    in_tab: bool,
    precision: int,
    default_open: bool,
    horizontal: bool = False,
) -> None:
    first = True
    for idx, widget in enumerate(widgets):
        if not is_visible(widget):
            continue
        if horizontal and not first:
            imgui.same_line()
        first = False

        # 同名ラベルの兄弟で ID が衝突しないよう、index 付きでスコープを切る。
        imgui.push_id(f"{idx}:{widget.label}")
        try:
            imgui.begin_group()
            if isinstance(widget, Box):
                _render_box(
                    imgui, widget, in_tab=in_tab, precision=precision, default_open=default_open
                )
            elif isinstance(widget, Button):
                _render_button(imgui, widget)
            elif isinstance(widget, NumParam):
                _render_num_param(imgui, widget, precision=precision)
            else:
                _render_num_display(imgui, widget, precision=precision)
            imgui.end_group()
        finally:
            imgui.pop_id()


def render_widgets(
    widgets: Sequence[DspWidget],
    *,
    precision: int | None = None,
    default_open: bool | None = None,
) -> None:
    """ウィジェットツリーを現在の ImGui ウィンドウへ描画する。

    Parameters
    ----------
    widgets : Sequence[DspWidget]
        `build_widgets()` の戻り値。
    precision : int | None
        数値表示の小数桁。None なら config の `ui.value_precision`。
    default_open : bool | None
        ボックスの折りたたみ初期状態。None なら config の `ui.boxes_default_open`。

    Notes
    -----
    ツリー差し替えと競合しないよう、呼び出し側は `DspSession.locked()` の中で呼ぶこと。
    """

    import imgui  # type: ignore[import-untyped]

    cfg = runtime_config()
    if precision is None:
        precision = cfg.value_precision
    if default_open is None:
        default_open = cfg.boxes_default_open
    _render_level(imgui, widgets, in_tab=False, precision=precision, default_open=default_open)


__all__ = ["render_widgets"]
