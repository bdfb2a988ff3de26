# どこで: `src/faustui/core/labels.py`。
# 何を: DSP ランタイムから届くラベル（bytes/str）を表示用 str へ正規化する。

from __future__ import annotations

from hashlib import blake2b

EMPTY_LABEL_SENTINEL = "0x00"


def placeholder_label(raw: bytes) -> str:
    """UTF-8 として読めないラベルの代替文字列を返す。

    raw bytes の 64bit blake2b ダイジェストを 10 進表記したもの。プロセスを跨いでも同じ値になる。
    """

    digest = blake2b(bytes(raw), digest_size=8).digest()
    return str(int.from_bytes(digest, "big"))


def decode_label(raw: bytes | str, *, empty_sentinel: str = EMPTY_LABEL_SENTINEL) -> str:
    """ラベルを str へ変換する。

    - `empty_sentinel`（既定 "0x00"）は空文字列へ正規化する。
    - UTF-8 デコードに失敗した bytes は `placeholder_label()` に置き換える。
    """

    if isinstance(raw, str):
        text = raw
    else:
        try:
            text = bytes(raw).decode("utf-8")
        except UnicodeDecodeError:
            return placeholder_label(bytes(raw))
    if text == empty_sentinel:
        return ""
    return text


__all__ = ["EMPTY_LABEL_SENTINEL", "decode_label", "placeholder_label"]
