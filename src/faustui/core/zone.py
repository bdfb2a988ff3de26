# どこで: `src/faustui/core/zone.py`。
# 何を: zone（DSP ランタイムが所有する float32 セル）の識別子 ZoneId と、借用ハンドル Zone を提供する。
# なぜ: オーディオスレッドと GUI が同じセルを直接読み書きできるよう、コピーせずにエイリアスするため。

from __future__ import annotations

import ctypes
from dataclasses import dataclass

import numpy as np

_CELL_DTYPE = np.dtype(np.float32)


@dataclass(frozen=True, slots=True)
class ZoneId:
    """float32 セルのアドレスを包む不透明キー。

    collector はこの値を比較・ハッシュにのみ使い、参照先を読まない。
    """

    address: int

    @classmethod
    def of(cls, array: np.ndarray, index: int) -> "ZoneId":
        """float32 配列 `array` の `index` 番目のセルを指す ZoneId を返す。

        Raises
        ------
        ValueError
            dtype が float32 でない、C 連続でない、または index が範囲外の場合。
        """

        if array.dtype != _CELL_DTYPE:
            raise ValueError(f"zone 配列は float32 である必要があります: got={array.dtype}")
        if not array.flags.c_contiguous:
            raise ValueError("zone 配列は C 連続である必要があります")
        i = int(index)
        if i < 0 or i >= array.size:
            raise ValueError(f"zone index が範囲外です: index={i}, size={array.size}")
        return cls(address=int(array.ctypes.data) + i * _CELL_DTYPE.itemsize)

    def __repr__(self) -> str:
        return f"ZoneId(0x{self.address:x})"


class Zone:
    """外部所有の float32 セル 1 個への非所有ハンドル。

    Notes
    -----
    - 中身はセルをエイリアスする要素数 1 の numpy ビューで、値のコピーは持たない。
    - ロックは取らない。オーディオスレッドとの競合はセルの仕様どおり許容する。
    - 所有者（DSP ランタイム）はツリーより長く生存している必要がある。
    """

    __slots__ = ("_id", "_cell")

    def __init__(self, zone_id: ZoneId, cell: np.ndarray) -> None:
        if cell.shape != (1,) or cell.dtype != _CELL_DTYPE:
            raise ValueError("cell は要素数 1 の float32 ビューである必要があります")
        self._id = zone_id
        self._cell = cell

    @classmethod
    def from_address(cls, zone_id: ZoneId) -> "Zone":
        """ZoneId のアドレスへ直接バインドする（未検査）。

        アドレスの生存は呼び出し側の契約であり、ここでは NULL 以外を検証しない。
        """

        if zone_id.address == 0:
            raise ValueError("NULL アドレスの zone にはバインドできません")
        ptr = ctypes.cast(zone_id.address, ctypes.POINTER(ctypes.c_float))
        cell = np.ctypeslib.as_array(ptr, shape=(1,))
        return cls(zone_id, cell)

    @property
    def id(self) -> ZoneId:
        return self._id

    def read(self) -> float:
        """セルの現在値を返す。"""

        return float(self._cell[0])

    def write(self, value: float) -> None:
        """セルへ値を書き込む。"""

        self._cell[0] = value

    @property
    def value(self) -> float:
        return self.read()

    @value.setter
    def value(self, value: float) -> None:
        self.write(value)

    def __repr__(self) -> str:
        return f"Zone({self._id!r}, value={self.read()!r})"


class ZoneBuffer:
    """DSP ランタイムのパラメータ領域に相当する float32 バッファ。

    このオブジェクトが生きている間、`zone_id()` が返すアドレスは有効。
    """

    def __init__(self, size: int) -> None:
        n = int(size)
        if n <= 0:
            raise ValueError(f"size は正の整数である必要があります: got={size!r}")
        self._data = np.zeros(n, dtype=_CELL_DTYPE)

    def __len__(self) -> int:
        return int(self._data.size)

    def zone_id(self, index: int) -> ZoneId:
        return ZoneId.of(self._data, index)

    def __getitem__(self, index: int) -> float:
        return float(self._data[index])

    def __setitem__(self, index: int, value: float) -> None:
        self._data[index] = value

    @property
    def values(self) -> np.ndarray:
        """読み取り専用ビューを返す。"""

        view = self._data.view()
        view.flags.writeable = False
        return view


__all__ = ["Zone", "ZoneBuffer", "ZoneId"]
