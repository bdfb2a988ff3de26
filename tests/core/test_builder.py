import pytest

from faustui.core.builder import build_widgets
from faustui.core.collector import DeclarationCollector
from faustui.core.errors import StructureError
from faustui.core.labels import placeholder_label
from faustui.core.metadata import NumDisplayStyle, NumParamStyle, NumParamStyleKind, WidgetScale
from faustui.core.widgets import (
    Box,
    BoxLayout,
    Button,
    ButtonLayout,
    DeclKind,
    NumDisplay,
    NumDisplayLayout,
    NumParam,
    NumParamLayout,
    WidgetDecl,
    declaration_events,
    find_by_label,
    iter_leaves,
)
from faustui.core.zone import ZoneBuffer, ZoneId


def test_gain_slider_in_main_box():
    buf = ZoneBuffer(1)
    buf[0] = 0.5
    ui = DeclarationCollector()
    ui.declare(buf.zone_id(0), "unit", "dB")
    ui.open_horizontal_box("Main")
    ui.add_horizontal_slider("Gain", buf.zone_id(0), 0.0, 0.0, 1.0, 0.01)
    ui.close_box()

    widgets = build_widgets(ui)

    assert len(widgets) == 1
    (main,) = widgets
    assert isinstance(main, Box)
    assert main.layout is BoxLayout.HORIZONTAL
    assert main.label == "Main"
    (gain,) = main.children
    assert isinstance(gain, NumParam)
    assert gain.layout is NumParamLayout.HORIZONTAL_SLIDER
    assert (gain.init, gain.min, gain.max, gain.step) == pytest.approx((0.0, 0.0, 1.0, 0.01))
    assert gain.metadata.unit == "dB"
    assert gain.style == NumParamStyle()
    assert gain.zone.read() == 0.5

    gain.zone.write(0.8)
    assert buf[0] == pytest.approx(0.8)


def test_nested_tree_round_trips_to_declarations():
    buf = ZoneBuffer(6)
    ui = DeclarationCollector()
    ui.open_tab_box("Synth")
    ui.open_horizontal_box("Osc")
    ui.add_num_entry("Freq", buf.zone_id(0), 440, 20, 20000, 1)
    ui.add_vertical_slider("Detune", buf.zone_id(1), 0, -1, 1, 0.01)
    ui.close_box()
    ui.open_vertical_box("0x00")
    ui.add_button("Gate", buf.zone_id(2))
    ui.add_check_button("Hold", buf.zone_id(3))
    ui.close_box()
    ui.close_box()
    ui.add_horizontal_bargraph("Level", buf.zone_id(4), -60, 0)
    ui.add_vertical_bargraph("Peak", buf.zone_id(5), 0, 1)

    widgets = build_widgets(ui)

    assert declaration_events(widgets) == [
        (DeclKind.TAB_BOX, "Synth"),
        (DeclKind.HORIZONTAL_BOX, "Osc"),
        (DeclKind.NUM_ENTRY, "Freq"),
        (DeclKind.VERTICAL_SLIDER, "Detune"),
        (DeclKind.CLOSE_BOX, ""),
        (DeclKind.VERTICAL_BOX, ""),
        (DeclKind.BUTTON, "Gate"),
        (DeclKind.CHECK_BUTTON, "Hold"),
        (DeclKind.CLOSE_BOX, ""),
        (DeclKind.CLOSE_BOX, ""),
        (DeclKind.HORIZONTAL_BARGRAPH, "Level"),
        (DeclKind.VERTICAL_BARGRAPH, "Peak"),
    ]
    assert [w.label for w in iter_leaves(widgets)] == [
        "Freq",
        "Detune",
        "Gate",
        "Hold",
        "Level",
        "Peak",
    ]
    synth = widgets[0]
    assert isinstance(synth, Box) and synth.layout is BoxLayout.TAB
    assert synth.selected == 0
    gate = find_by_label(widgets, "Gate")
    assert isinstance(gate, Button) and gate.layout is ButtonLayout.HELD
    peak = find_by_label(widgets, "Peak")
    assert isinstance(peak, NumDisplay) and peak.layout is NumDisplayLayout.VERTICAL
    assert find_by_label(widgets, "missing") is None


def test_empty_collector_builds_empty_tree():
    assert build_widgets(DeclarationCollector()) == ()


def test_empty_box_is_kept():
    ui = DeclarationCollector()
    ui.open_horizontal_box("Empty")
    ui.close_box()

    (box,) = build_widgets(ui)
    assert isinstance(box, Box)
    assert box.children == ()


def test_unmatched_close_raises():
    buf = ZoneBuffer(1)
    ui = DeclarationCollector()
    ui.add_button("A", buf.zone_id(0))
    ui.close_box()

    with pytest.raises(StructureError) as excinfo:
        build_widgets(ui)
    assert excinfo.value.position == 1


def test_unclosed_box_raises_at_open_position():
    buf = ZoneBuffer(1)
    ui = DeclarationCollector()
    ui.open_vertical_box("Outer")
    ui.open_horizontal_box("Inner")
    ui.add_button("A", buf.zone_id(0))
    ui.close_box()

    with pytest.raises(StructureError) as excinfo:
        build_widgets(ui)
    assert excinfo.value.position == 0
    assert "Outer" in str(excinfo.value)


def test_depth_limit():
    ui = DeclarationCollector()
    for i in range(3):
        ui.open_vertical_box(f"b{i}")
    for _ in range(3):
        ui.close_box()

    with pytest.raises(StructureError) as excinfo:
        build_widgets(ui, max_depth=2)
    assert excinfo.value.position == 2


def test_depth_limit_allows_exact_depth():
    ui = DeclarationCollector()
    ui.open_vertical_box("a")
    ui.open_vertical_box("b")
    ui.close_box()
    ui.close_box()

    (outer,) = build_widgets(ui, max_depth=2)
    assert outer.children[0].label == "b"


def test_leaf_without_zone_raises():
    ui = DeclarationCollector()
    ui.record_declaration("Broken", WidgetDecl(kind=DeclKind.BUTTON))

    with pytest.raises(StructureError):
        build_widgets(ui)


def test_latest_style_wins():
    buf = ZoneBuffer(1)
    ui = DeclarationCollector()
    ui.declare(buf.zone_id(0), "style", "knob")
    ui.declare(buf.zone_id(0), "style", "menu{'lo':0;'hi':1}")
    ui.add_num_entry("Mode", buf.zone_id(0), 0, 0, 1, 1)

    (mode,) = build_widgets(ui)

    assert mode.style.kind is NumParamStyleKind.MENU
    assert mode.style.mapping == {"lo": 0.0, "hi": 1.0}


def test_display_style_on_param_is_ignored():
    buf = ZoneBuffer(2)
    ui = DeclarationCollector()
    ui.declare(buf.zone_id(0), "style", "led")
    ui.declare(buf.zone_id(1), "style", "knob")
    ui.add_horizontal_slider("Param", buf.zone_id(0), 0, 0, 1, 0.1)
    ui.add_horizontal_bargraph("Meter", buf.zone_id(1), 0, 1)

    param, meter = build_widgets(ui)

    assert param.style == NumParamStyle()
    assert meter.style is NumDisplayStyle.REGULAR


def test_malformed_menu_dict_drops_style():
    buf = ZoneBuffer(2)
    ui = DeclarationCollector()
    ui.declare(buf.zone_id(0), "style", "menu{'only':5")
    ui.declare(buf.zone_id(1), "style", "radio{'x':abc}")
    ui.add_num_entry("A", buf.zone_id(0), 0, 0, 5, 1)
    ui.add_num_entry("B", buf.zone_id(1), 0, 0, 5, 1)

    a, b = build_widgets(ui)

    assert a.style == NumParamStyle()
    assert b.style == NumParamStyle()


def test_metadata_shared_by_widgets_on_same_zone():
    buf = ZoneBuffer(1)
    ui = DeclarationCollector()
    ui.declare(buf.zone_id(0), "scale", "log")
    ui.declare(buf.zone_id(0), "tooltip", "cutoff")
    ui.add_horizontal_slider("Cutoff", buf.zone_id(0), 1000, 20, 20000, 1)
    ui.add_horizontal_bargraph("Cutoff view", buf.zone_id(0), 20, 20000)

    slider, view = build_widgets(ui)

    assert slider.metadata.scale is WidgetScale.LOG
    assert view.metadata.scale is WidgetScale.LOG
    assert slider.metadata.tooltip == view.metadata.tooltip == "cutoff"

    slider.zone.write(440.0)
    assert view.zone.read() == 440.0


def test_hidden_and_tooltip_reach_buttons():
    buf = ZoneBuffer(1)
    ui = DeclarationCollector()
    ui.declare(buf.zone_id(0), "hidden", "1")
    ui.declare(buf.zone_id(0), "tooltip", "internal")
    ui.add_check_button("Bypass", buf.zone_id(0))

    (bypass,) = build_widgets(ui)

    assert bypass.layout is ButtonLayout.CHECKBOX
    assert bypass.hidden is True
    assert bypass.tooltip == "internal"


def test_invalid_utf8_label_gets_placeholder():
    buf = ZoneBuffer(1)
    raw = b"\xc3\x28"
    ui = DeclarationCollector()
    ui.add_button(raw, buf.zone_id(0))

    (button,) = build_widgets(ui)

    assert button.label == placeholder_label(raw)


def test_null_zone_leaf_raises():
    ui = DeclarationCollector()
    ui.open_vertical_box("Main")
    ui.add_num_entry("Broken", ZoneId(address=0), 0, 0, 1, 1)
    ui.close_box()

    with pytest.raises(StructureError) as excinfo:
        build_widgets(ui)
    assert excinfo.value.position == 1


@pytest.mark.parametrize("max_depth", [0, -3])
def test_non_positive_max_depth_is_rejected(max_depth: int):
    ui = DeclarationCollector()
    ui.open_vertical_box("a")
    ui.close_box()

    with pytest.raises(ValueError):
        build_widgets(ui, max_depth=max_depth)
    assert not ui.consumed


# 形状文字列: "(" = open, ")" = close, "l" = 葉
_BOX_OPENERS = ("open_vertical_box", "open_horizontal_box", "open_tab_box")
_BOX_KINDS = (DeclKind.VERTICAL_BOX, DeclKind.HORIZONTAL_BOX, DeclKind.TAB_BOX)
_LEAF_KINDS = (
    DeclKind.BUTTON,
    DeclKind.CHECK_BUTTON,
    DeclKind.NUM_ENTRY,
    DeclKind.HORIZONTAL_SLIDER,
    DeclKind.VERTICAL_SLIDER,
    DeclKind.HORIZONTAL_BARGRAPH,
    DeclKind.VERTICAL_BARGRAPH,
)


def _record_shape(
    ui: DeclarationCollector, buf: ZoneBuffer, shape: str
) -> list[tuple[DeclKind, str]]:
    """shape どおりに宣言を記録し、期待する宣言列を返す。"""

    expected: list[tuple[DeclKind, str]] = []
    for i, ch in enumerate(shape):
        if ch == "(":
            label = f"box{i}"
            getattr(ui, _BOX_OPENERS[i % 3])(label)
            expected.append((_BOX_KINDS[i % 3], label))
        elif ch == ")":
            ui.close_box()
            expected.append((DeclKind.CLOSE_BOX, ""))
        else:
            label = f"leaf{i}"
            kind = _LEAF_KINDS[i % len(_LEAF_KINDS)]
            zone = buf.zone_id(i)
            if kind in (DeclKind.BUTTON, DeclKind.CHECK_BUTTON):
                ui.record_declaration(label, WidgetDecl(kind=kind, zone=zone))
            else:
                ui.record_declaration(
                    label, WidgetDecl(kind=kind, zone=zone, init=0.5, min=0, max=1, step=0.1)
                )
            expected.append((kind, label))
    return expected


@pytest.mark.parametrize(
    "shape",
    [
        "",
        "l",
        "lll",
        "()",
        "(l)",
        "(l)l(l)",
        "((l))",
        "(()())",
        "l(l(l(l)l)l)l",
        "((((l))))",
        "((((llll))))",
        "(l(l)(l(l)))(())",
        "((l)(l)((l)))lll(((())))",
    ],
)
def test_well_nested_shapes_round_trip(shape: str):
    buf = ZoneBuffer(max(1, len(shape)))
    ui = DeclarationCollector()
    expected = _record_shape(ui, buf, shape)

    widgets = build_widgets(ui, max_depth=4)

    assert declaration_events(widgets) == expected


@pytest.mark.parametrize(
    "shape",
    [
        ")",
        "(",
        "l)",
        "(l",
        "(()",
        "())",
        ")(",
        "l)(l",
        "((l)",
        "(l))(",
        "((((l)))",
        "(((l))))",
        "()()(",
        "()())",
    ],
)
def test_unmatched_shapes_raise(shape: str):
    buf = ZoneBuffer(len(shape))
    ui = DeclarationCollector()
    _record_shape(ui, buf, shape)

    with pytest.raises(StructureError):
        build_widgets(ui)
