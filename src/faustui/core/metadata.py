# どこで: `src/faustui/core/metadata.py`。
# 何を: zone に付くメタデータイベント（unit/tooltip/hidden/scale/style）の型・パース・畳み込みを提供する。
# なぜ: 構造宣言とは別経路で届くメタデータを、葉ウィジェットの最終的な style/Metadata へ解決するため。

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Union

from .dict_parser import parse_metadata_dict
from .errors import MetadataError


class WidgetScale(Enum):
    LIN = "lin"
    LOG = "log"
    EXP = "exp"


class NumParamStyleKind(Enum):
    REGULAR = "regular"
    KNOB = "knob"
    MENU = "menu"
    RADIO = "radio"


@dataclass(frozen=True, slots=True)
class NumParamStyle:
    """スライダー/数値入力向けのスタイル。

    options は MENU/RADIO のときだけ使う (ラベル, 値) の列。
    """

    kind: NumParamStyleKind = NumParamStyleKind.REGULAR
    options: tuple[tuple[str, float], ...] = ()

    @classmethod
    def with_options(
        cls, kind: NumParamStyleKind, options: Mapping[str, float]
    ) -> "NumParamStyle":
        return cls(kind=kind, options=tuple((str(k), float(v)) for k, v in options.items()))

    @property
    def mapping(self) -> dict[str, float]:
        return dict(self.options)


class NumDisplayStyle(Enum):
    REGULAR = "regular"
    LED = "led"
    NUMERICAL = "numerical"


WidgetStyle = Union[NumParamStyle, NumDisplayStyle]


class MetadataKey(Enum):
    UNIT = "unit"
    TOOLTIP = "tooltip"
    HIDDEN = "hidden"
    SCALE = "scale"
    STYLE = "style"


@dataclass(frozen=True, slots=True)
class MetadataEvent:
    """1 件のメタデータ宣言（記録順に積まれる）。"""

    key: MetadataKey
    value: str | bool | WidgetScale | NumParamStyle | NumDisplayStyle


@dataclass(frozen=True, slots=True)
class Metadata:
    """葉ウィジェットに畳み込まれたメタデータ。"""

    unit: str | None = None
    scale: WidgetScale = WidgetScale.LIN
    hidden: bool = False
    tooltip: str | None = None


DEFAULT_METADATA = Metadata()

_HIDDEN_VALUES = {"0": False, "1": True}
_SCALE_VALUES = {s.value: s for s in WidgetScale}


def _parse_style(value: str) -> WidgetStyle:
    if value == "knob":
        return NumParamStyle(kind=NumParamStyleKind.KNOB)
    if value == "led":
        return NumDisplayStyle.LED
    if value == "numerical":
        return NumDisplayStyle.NUMERICAL
    for kind in (NumParamStyleKind.MENU, NumParamStyleKind.RADIO):
        prefix = kind.value
        if value.startswith(prefix):
            options = parse_metadata_dict(value[len(prefix) :])
            return NumParamStyle.with_options(kind, options)
    raise MetadataError(f"未知の style です: {value!r}")


def parse_metadata_event(key: str, value: str) -> MetadataEvent | None:
    """(key, value) 文字列を MetadataEvent へ変換する。

    前後の空白は除去する。未知 key は None を返す。

    Raises
    ------
    MetadataError
        既知 key の値が不正な場合（辞書構文エラーは MetadataDictError）。
    """

    k = str(key).strip()
    v = str(value).strip()
    try:
        mkey = MetadataKey(k)
    except ValueError:
        return None

    if mkey in (MetadataKey.UNIT, MetadataKey.TOOLTIP):
        return MetadataEvent(key=mkey, value=v)
    if mkey is MetadataKey.HIDDEN:
        if v not in _HIDDEN_VALUES:
            raise MetadataError(f"hidden は '0' または '1' である必要があります: got={v!r}")
        return MetadataEvent(key=mkey, value=_HIDDEN_VALUES[v])
    if mkey is MetadataKey.SCALE:
        if v not in _SCALE_VALUES:
            raise MetadataError(f"scale は lin/log/exp のいずれかである必要があります: got={v!r}")
        return MetadataEvent(key=mkey, value=_SCALE_VALUES[v])
    return MetadataEvent(key=mkey, value=_parse_style(v))


def _fold(
    events: Sequence[MetadataEvent], style_type: type
) -> tuple[WidgetStyle | None, Metadata]:
    """events を新しい順にたどり、kind ごとに最初に見つけた値を採用する。

    style は `style_type` のインスタンスだけを対象にし、型違いは読み飛ばす。
    events 自体は変更しない。
    """

    style: WidgetStyle | None = None
    found: dict[MetadataKey, object] = {}
    for event in reversed(events):
        if event.key is MetadataKey.STYLE:
            if style is None and isinstance(event.value, style_type):
                style = event.value
            continue
        found.setdefault(event.key, event.value)

    unit = found.get(MetadataKey.UNIT)
    tooltip = found.get(MetadataKey.TOOLTIP)
    metadata = Metadata(
        unit=None if unit is None else str(unit),
        scale=found.get(MetadataKey.SCALE, WidgetScale.LIN),  # type: ignore[arg-type]
        hidden=bool(found.get(MetadataKey.HIDDEN, False)),
        tooltip=None if tooltip is None else str(tooltip),
    )
    return style, metadata


def fold_param_metadata(
    events: Sequence[MetadataEvent],
) -> tuple[NumParamStyle, Metadata]:
    """ボタン/数値入力向けに畳み込む。display 用 style は無視する。"""

    style, metadata = _fold(events, NumParamStyle)
    if style is None:
        style = NumParamStyle()
    assert isinstance(style, NumParamStyle)
    return style, metadata


def fold_display_metadata(
    events: Sequence[MetadataEvent],
) -> tuple[NumDisplayStyle, Metadata]:
    """bargraph 向けに畳み込む。param 用 style は無視する。"""

    style, metadata = _fold(events, NumDisplayStyle)
    if style is None:
        style = NumDisplayStyle.REGULAR
    assert isinstance(style, NumDisplayStyle)
    return style, metadata


__all__ = [
    "DEFAULT_METADATA",
    "Metadata",
    "MetadataEvent",
    "MetadataKey",
    "NumDisplayStyle",
    "NumParamStyle",
    "NumParamStyleKind",
    "WidgetScale",
    "WidgetStyle",
    "fold_display_metadata",
    "fold_param_metadata",
    "parse_metadata_event",
]
