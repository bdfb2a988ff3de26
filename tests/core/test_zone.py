import numpy as np
import pytest

from faustui.core.zone import Zone, ZoneBuffer, ZoneId


def test_zone_aliases_buffer_cell():
    buf = ZoneBuffer(4)
    zone = Zone.from_address(buf.zone_id(2))

    zone.write(0.25)
    assert buf[2] == pytest.approx(0.25)
    assert buf[1] == 0.0

    buf[2] = -3.5
    assert zone.read() == pytest.approx(-3.5)


def test_zone_value_property_reads_and_writes():
    buf = ZoneBuffer(1)
    zone = Zone.from_address(buf.zone_id(0))

    zone.value = 7.0
    assert zone.value == 7.0
    assert buf[0] == 7.0


def test_zone_id_equality_follows_address():
    buf = ZoneBuffer(3)

    assert buf.zone_id(1) == buf.zone_id(1)
    assert hash(buf.zone_id(1)) == hash(buf.zone_id(1))
    assert buf.zone_id(0) != buf.zone_id(1)
    assert buf.zone_id(1).address - buf.zone_id(0).address == 4


def test_two_zones_on_same_cell_share_value():
    buf = ZoneBuffer(2)
    a = Zone.from_address(buf.zone_id(1))
    b = Zone.from_address(buf.zone_id(1))

    a.write(1.5)
    assert b.read() == 1.5


def test_zone_write_is_float32():
    buf = ZoneBuffer(1)
    zone = Zone.from_address(buf.zone_id(0))

    zone.write(0.1)
    assert zone.read() == float(np.float32(0.1))


@pytest.mark.parametrize(
    "array, index",
    [
        (np.zeros(3, dtype=np.float64), 0),
        (np.zeros(6, dtype=np.float32)[::2], 0),
        (np.zeros(3, dtype=np.float32), 3),
        (np.zeros(3, dtype=np.float32), -1),
    ],
)
def test_zone_id_of_rejects_invalid_cells(array: np.ndarray, index: int):
    with pytest.raises(ValueError):
        ZoneId.of(array, index)


def test_zone_from_null_address_raises():
    with pytest.raises(ValueError):
        Zone.from_address(ZoneId(address=0))


def test_zone_rejects_non_cell_view():
    with pytest.raises(ValueError):
        Zone(ZoneId(address=1), np.zeros(2, dtype=np.float32))


def test_zone_buffer_values_is_read_only():
    buf = ZoneBuffer(2)
    buf[0] = 1.0

    values = buf.values
    assert values.tolist() == [1.0, 0.0]
    with pytest.raises(ValueError):
        values[0] = 2.0


@pytest.mark.parametrize("size", [0, -1])
def test_zone_buffer_requires_positive_size(size: int):
    with pytest.raises(ValueError):
        ZoneBuffer(size)
