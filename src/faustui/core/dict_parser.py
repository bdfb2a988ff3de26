# どこで: `src/faustui/core/dict_parser.py`。
# 何を: style メタデータに埋め込まれる `{'label':value;...}` 形式の辞書文字列をパースする。
# なぜ: menu/radio スタイルの選択肢（ラベル -> 数値）を得るため。

from __future__ import annotations

import re
from math import isfinite

from .errors import MetadataDictError

_VALUE_TERMINATORS = frozenset(";}")
_DECIMAL_RE = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?", re.ASCII)


def _skip_ws(text: str, pos: int) -> int:
    n = len(text)
    while pos < n and text[pos].isspace():
        pos += 1
    return pos


def _read_label(text: str, pos: int) -> tuple[str, int]:
    """`'...'` を読み、(ラベル, 閉じクォート直後の位置) を返す。"""

    if pos >= len(text) or text[pos] != "'":
        raise MetadataDictError(f"ラベルは ' で囲む必要があります: {text!r}")
    end = text.find("'", pos + 1)
    if end < 0:
        raise MetadataDictError(f"ラベルのクォートが閉じていません: {text!r}")
    return text[pos + 1 : end], end + 1


def _read_value(text: str, pos: int) -> tuple[float, int]:
    """数値トークンを読み、(値, トークン直後の位置) を返す。"""

    pos = _skip_ws(text, pos)
    start = pos
    n = len(text)
    while pos < n and text[pos] not in _VALUE_TERMINATORS and not text[pos].isspace():
        pos += 1
    token = text[start:pos]
    if not token:
        raise MetadataDictError(f"値がありません: {text!r}")
    if _DECIMAL_RE.fullmatch(token) is None:
        raise MetadataDictError(f"10 進数ではありません: {token!r}")
    value = float(token)
    if not isfinite(value):
        raise MetadataDictError(f"有限の数値である必要があります: {token!r}")
    return value, pos


def parse_metadata_dict(text: str) -> dict[str, float]:
    """`{'label1':v1;'label2':v2}` を `{"label1": v1, "label2": v2}` へ変換する。

    同じラベルが複数回現れた場合は後勝ち（位置は最初の出現のまま）。
    空の `{}` は空 dict を返す。

    Raises
    ------
    MetadataDictError
        括弧の不足、区切りの欠落、非数値、ペアの欠けなど構文が不正な場合。
    """

    s = str(text)
    n = len(s)
    pos = _skip_ws(s, 0)
    if pos >= n or s[pos] != "{":
        raise MetadataDictError(f"'{{' で始まる必要があります: {s!r}")
    pos = _skip_ws(s, pos + 1)

    out: dict[str, float] = {}
    if pos < n and s[pos] == "}":
        return _finish(s, pos + 1, out)

    while True:
        label, pos = _read_label(s, pos)
        pos = _skip_ws(s, pos)
        if pos >= n or s[pos] != ":":
            raise MetadataDictError(f"':' がありません: label={label!r} in {s!r}")
        value, pos = _read_value(s, pos + 1)
        out[label] = value

        pos = _skip_ws(s, pos)
        if pos >= n:
            raise MetadataDictError(f"'}}' がありません: {s!r}")
        if s[pos] == "}":
            return _finish(s, pos + 1, out)
        if s[pos] != ";":
            raise MetadataDictError(f"';' がありません: {s!r}")
        pos = _skip_ws(s, pos + 1)


def _finish(text: str, pos: int, out: dict[str, float]) -> dict[str, float]:
    if _skip_ws(text, pos) != len(text):
        raise MetadataDictError(f"'}}' の後に余分な文字があります: {text!r}")
    return out


__all__ = ["parse_metadata_dict"]
