from faustui.core.labels import EMPTY_LABEL_SENTINEL, decode_label, placeholder_label


def test_decode_utf8_bytes_and_str():
    assert decode_label("Gain") == "Gain"
    assert decode_label("音量".encode("utf-8")) == "音量"


def test_empty_sentinel_becomes_empty_label():
    assert EMPTY_LABEL_SENTINEL == "0x00"
    assert decode_label("0x00") == ""
    assert decode_label(b"0x00") == ""
    assert decode_label("0x00", empty_sentinel="<none>") == "0x00"
    assert decode_label("<none>", empty_sentinel="<none>") == ""


def test_invalid_utf8_gets_deterministic_placeholder():
    raw = b"\xff\xfe gain"

    label = decode_label(raw)

    assert label == placeholder_label(raw)
    assert label == decode_label(raw)
    assert label.isdigit()
    assert 0 <= int(label) < 2**64


def test_placeholder_differs_between_inputs():
    assert placeholder_label(b"\xff") != placeholder_label(b"\xfe")
