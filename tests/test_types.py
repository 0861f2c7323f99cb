import pytest
from hypothesis import given, strategies as st

from torken.types import (
    SerialType,
    SerializationError,
    bigint_to_bytes,
    bytes_to_bigint,
)


def test_zero_is_sign_byte_only():
    assert bigint_to_bytes(0) == b"\x00"


def test_minus_one_layout():
    assert bigint_to_bytes(-1) == b"\x01\x01"


def test_little_endian_magnitude():
    assert bigint_to_bytes(256) == b"\x00\x00\x01"


def test_zero_decodes():
    assert bytes_to_bigint(b"\x00") == 0


def test_empty_buffer_rejected():
    with pytest.raises(SerializationError):
        bytes_to_bigint(b"")


def test_serial_type_lookup_by_wire_byte():
    assert SerialType(0x1D) is SerialType.UUID
    assert SerialType(0x0A) is SerialType.OBJECT


def test_unknown_wire_byte_rejected():
    with pytest.raises(ValueError):
        SerialType(0xFE)


@given(st.integers(min_value=-(2**200), max_value=2**200))
def test_round_trip(value):
    assert bytes_to_bigint(bigint_to_bytes(value)) == value


@given(st.integers(min_value=-(2**200), max_value=2**200))
def test_sign_byte_matches_sign(value):
    encoded = bigint_to_bytes(value)
    assert encoded[0] == (1 if value < 0 else 0)


@given(st.integers(min_value=1, max_value=2**200))
def test_negation_only_changes_sign_byte(value):
    assert bigint_to_bytes(value)[1:] == bigint_to_bytes(-value)[1:]


@given(st.binary(min_size=1, max_size=40))
def test_non_one_sign_byte_is_positive(magnitude):
    assert bytes_to_bigint(b"\x00" + magnitude) == bytes_to_bigint(b"\x02" + magnitude)
    assert bytes_to_bigint(b"\x00" + magnitude) >= 0