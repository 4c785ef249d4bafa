import struct

import pytest
from hypothesis import given
from hypothesis import strategies as st

from hackcon.bitcast import to_signed, to_unsigned

FORMATS = [(8, "<b", "<B"), (16, "<h", "<H"), (32, "<i", "<I"), (64, "<q", "<Q")]


@pytest.mark.parametrize("bits,signed_fmt,unsigned_fmt", FORMATS)
@given(data=st.data())
def test_to_signed_matches_struct(bits, signed_fmt, unsigned_fmt, data):
    value = data.draw(st.integers(min_value=0, max_value=(1 << bits) - 1))
    expected = struct.unpack(signed_fmt, struct.pack(unsigned_fmt, value))[0]
    assert to_signed(value, bits) == expected


@pytest.mark.parametrize("bits,signed_fmt,unsigned_fmt", FORMATS)
@given(data=st.data())
def test_to_unsigned_matches_struct(bits, signed_fmt, unsigned_fmt, data):
    value = data.draw(st.integers(min_value=-(1 << (bits - 1)), max_value=(1 << (bits - 1)) - 1))
    expected = struct.unpack(unsigned_fmt, struct.pack(signed_fmt, value))[0]
    assert to_unsigned(value, bits) == expected


@given(st.integers(min_value=-(1 << 31), max_value=(1 << 31) - 1))
def test_round_trip(value):
    assert to_signed(to_unsigned(value, 32), 32) == value


def test_sign_boundary():
    assert to_signed(0x80, 8) == -128
    assert to_signed(0x7F, 8) == 0x7F


def test_truncates_wide_values():
    assert to_unsigned(0x1_0000_0001, 32) == to_unsigned(1, 32)


@pytest.mark.parametrize("bits", [0, -8])
def test_bad_width(bits):
    with pytest.raises(ValueError):
        to_signed(1, bits)
    with pytest.raises(ValueError):
        to_unsigned(1, bits)