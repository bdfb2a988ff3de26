# どこで: `src/faustui/interactive/session.py`。
# 何を: DSP プログラムのロード/リロードごとにウィジェットツリーを作り直し、ロック下で差し替える DspSession を提供する。
# なぜ: 描画側が組み立て途中のツリーや破棄済みツリーを観測しないようにするため。

from __future__ import annotations

import contextlib
import logging
import threading
from dataclasses import dataclass
from typing import Iterator, Protocol, Union

from faustui.core.builder import build_widgets
from faustui.core.collector import DeclarationCollector
from faustui.core.errors import StructureError
from faustui.core.widgets import DspWidget

_logger = logging.getLogger(__name__)


class DspProgram(Protocol):
    """UI 記述パスを持つ DSP プログラム（外部ランタイム側）。

    `build_user_interface()` は collector の `open_*_box` / `add_*` / `declare` を
    前順で呼び出す。zone の指す領域は、このオブジェクトが生きている間有効であること。
    """

    def build_user_interface(self, ui: DeclarationCollector) -> None: ...


@dataclass(frozen=True, slots=True)
class NoDsp:
    pass


@dataclass(frozen=True, slots=True)
class Loaded:
    program: DspProgram
    widgets: tuple[DspWidget, ...]


@dataclass(frozen=True, slots=True)
class Failed:
    message: str


DspState = Union[NoDsp, Loaded, Failed]


class DspSession:
    """現在の DspState を保持し、ロード時に丸ごと差し替える。

    Notes
    -----
    - ツリー構築はロック外で行い、差し替えだけをロック下で行う。
    - 葉の zone の読み書きはこのロックを取らない（オーディオスレッドと直接共有する）。
    """

    def __init__(self, *, max_depth: int | None = None) -> None:
        self._lock = threading.RLock()
        self._state: DspState = NoDsp()
        self._max_depth = max_depth

    def load(self, program: DspProgram) -> DspState:
        """program の UI 記述からツリーを構築し、現在の状態と差し替える。

        入れ子不整合（StructureError）は Failed 状態として記録し、送出しない。
        """

        collector = DeclarationCollector()
        new_state: DspState
        try:
            program.build_user_interface(collector)
            widgets = build_widgets(collector, max_depth=self._max_depth)
        except StructureError as exc:
            new_state = Failed(message=f"DSP program failed to load: {exc}")
            _logger.error("DSP program failed to load: %s", exc)
        else:
            new_state = Loaded(program=program, widgets=widgets)
            _logger.info("Loaded DSP program %r with %d top-level widgets", program, len(widgets))

        self._swap(new_state)
        return new_state

    def unload(self) -> None:
        self._swap(NoDsp())

    def _swap(self, new_state: DspState) -> None:
        with self._lock:
            self._state = new_state

    @property
    def state(self) -> DspState:
        with self._lock:
            return self._state

    @contextlib.contextmanager
    def locked(self) -> Iterator[DspState]:
        """ロックを保持したまま現在の状態を渡す（描画中の差し替えを防ぐ）。"""

        with self._lock:
            yield self._state

    def widgets(self) -> tuple[DspWidget, ...]:
        """ロード済みならツリー、そうでなければ空タプルを返す。"""

        state = self.state
        if isinstance(state, Loaded):
            return state.widgets
        return ()


__all__ = ["DspProgram", "DspSession", "DspState", "Failed", "Loaded", "NoDsp"]
