# どこで: `src/faustui/core/collector.py`。
# 何を: DSP ランタイムの UI 記述パスから届く構造宣言とメタデータを記録する DeclarationCollector を提供する。
# なぜ: 逐次に届くイベントを一旦溜め、パス完了後に builder がツリーへ組み上げられるようにするため。

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterator

from .errors import CollectorConsumedError, MetadataError
from .labels import decode_label
from .metadata import MetadataEvent, parse_metadata_event
from .runtime_config import runtime_config
from .widgets import CLOSE_BOX_DECL, DeclKind, WidgetDecl
from .zone import ZoneId

_logger = logging.getLogger(__name__)


class DeclarationCollector:
    """構造宣言キューと zone -> メタデータ列の表。

    Notes
    -----
    - 構造宣言は記録順がそのままツリーの前順になる（close も含む）。
    - メタデータは構造宣言と独立に、任意の順で届いてよい。
    - `build_widgets()` に 1 度渡すと消費済みになり、以後の記録は CollectorConsumedError。
    - 単一スレッドでの利用を前提とし、ロックは持たない。
    """

    def __init__(self, *, empty_label_sentinel: str | None = None) -> None:
        if empty_label_sentinel is None:
            empty_label_sentinel = runtime_config().empty_label_sentinel
        self._empty_label_sentinel = str(empty_label_sentinel)
        self._decls: deque[tuple[str, WidgetDecl]] = deque()
        self._metadata: dict[ZoneId | None, list[MetadataEvent]] = {}
        self._consumed = False

    # --- 記録 ---
    def record_declaration(self, label: bytes | str, decl: WidgetDecl) -> None:
        """構造宣言をキュー末尾へ追加する。"""

        self._ensure_open()
        text = decode_label(label, empty_sentinel=self._empty_label_sentinel)
        self._decls.append((text, decl))

    def record_metadata(self, zone: ZoneId | None, key: str, value: str) -> None:
        """zone に紐づくメタデータを記録する。

        未知 key は無視し、値が不正なイベントは警告ログを出して破棄する（例外は送出しない）。
        """

        self._ensure_open()
        try:
            event = parse_metadata_event(key, value)
        except MetadataError as exc:
            _logger.warning("不正なメタデータを破棄します: zone=%r key=%r: %s", zone, key, exc)
            return
        if event is None:
            _logger.debug("未知のメタデータ key を無視します: zone=%r key=%r", zone, key)
            return
        self._metadata.setdefault(zone, []).append(event)

    # --- DSP ランタイム向けの UI 記述呼び出し ---
    def open_tab_box(self, label: bytes | str) -> None:
        self.record_declaration(label, WidgetDecl(kind=DeclKind.TAB_BOX))

    def open_horizontal_box(self, label: bytes | str) -> None:
        self.record_declaration(label, WidgetDecl(kind=DeclKind.HORIZONTAL_BOX))

    def open_vertical_box(self, label: bytes | str) -> None:
        self.record_declaration(label, WidgetDecl(kind=DeclKind.VERTICAL_BOX))

    def close_box(self) -> None:
        self.record_declaration("", CLOSE_BOX_DECL)

    def add_button(self, label: bytes | str, zone: ZoneId) -> None:
        self.record_declaration(label, WidgetDecl(kind=DeclKind.BUTTON, zone=zone))

    def add_check_button(self, label: bytes | str, zone: ZoneId) -> None:
        self.record_declaration(label, WidgetDecl(kind=DeclKind.CHECK_BUTTON, zone=zone))

    def _add_num_param(
        self,
        kind: DeclKind,
        label: bytes | str,
        zone: ZoneId,
        init: float,
        min: float,
        max: float,
        step: float,
    ) -> None:
        decl = WidgetDecl(
            kind=kind,
            zone=zone,
            init=float(init),
            min=float(min),
            max=float(max),
            step=float(step),
        )
        self.record_declaration(label, decl)

    def add_horizontal_slider(
        self, label: bytes | str, zone: ZoneId, init: float, min: float, max: float, step: float
    ) -> None:
        self._add_num_param(DeclKind.HORIZONTAL_SLIDER, label, zone, init, min, max, step)

    def add_vertical_slider(
        self, label: bytes | str, zone: ZoneId, init: float, min: float, max: float, step: float
    ) -> None:
        self._add_num_param(DeclKind.VERTICAL_SLIDER, label, zone, init, min, max, step)

    def add_num_entry(
        self, label: bytes | str, zone: ZoneId, init: float, min: float, max: float, step: float
    ) -> None:
        self._add_num_param(DeclKind.NUM_ENTRY, label, zone, init, min, max, step)

    def add_horizontal_bargraph(
        self, label: bytes | str, zone: ZoneId, min: float, max: float
    ) -> None:
        decl = WidgetDecl(
            kind=DeclKind.HORIZONTAL_BARGRAPH, zone=zone, min=float(min), max=float(max)
        )
        self.record_declaration(label, decl)

    def add_vertical_bargraph(
        self, label: bytes | str, zone: ZoneId, min: float, max: float
    ) -> None:
        decl = WidgetDecl(
            kind=DeclKind.VERTICAL_BARGRAPH, zone=zone, min=float(min), max=float(max)
        )
        self.record_declaration(label, decl)

    def declare(self, zone: ZoneId | None, key: str, value: str) -> None:
        self.record_metadata(zone, key, value)

    # --- 参照 ---
    @property
    def consumed(self) -> bool:
        return self._consumed

    @property
    def pending_declarations(self) -> int:
        return len(self._decls)

    def metadata_for(self, zone: ZoneId | None) -> tuple[MetadataEvent, ...]:
        """zone に記録済みのメタデータを記録順で返す。"""

        return tuple(self._metadata.get(zone, ()))

    # --- builder からのみ利用する想定 ---
    def _consume(
        self,
    ) -> tuple[Iterator[tuple[str, WidgetDecl]], dict[ZoneId | None, list[MetadataEvent]]]:
        """キューを先頭から取り出すイテレータとメタデータ表を渡し、消費済みにする。"""

        self._ensure_open()
        self._consumed = True
        decls = self._decls

        def drain() -> Iterator[tuple[str, WidgetDecl]]:
            while decls:
                yield decls.popleft()

        return drain(), self._metadata

    def _ensure_open(self) -> None:
        if self._consumed:
            raise CollectorConsumedError("DeclarationCollector は既に消費されています")


__all__ = ["DeclarationCollector"]
