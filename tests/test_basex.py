import pytest
from hypothesis import given, strategies as st

from torken.basex import DEFAULT_ALPHABET, BaseX, BaseXError


def test_default_alphabet_is_used():
    bx = BaseX()
    assert bx.alphabet == DEFAULT_ALPHABET
    assert bx.base == len(DEFAULT_ALPHABET)


def test_known_vector_default_alphabet():
    assert BaseX().encode(b"hello world") == "StV1DL6CwTryKyV"


def test_known_vector_binary_alphabet():
    assert BaseX("01").encode(b"\x05") == "101"


def test_empty_input():
    bx = BaseX()
    assert bx.encode(b"") == ""
    assert bx.decode("") == b""


def test_leading_zero_bytes_become_leaders():
    bx = BaseX()
    encoded = bx.encode(b"\x00\x00\x07")
    assert encoded.startswith(DEFAULT_ALPHABET[0] * 2)
    assert bx.decode(encoded) == b"\x00\x00\x07"


def test_only_zero_bytes():
    bx = BaseX()
    assert bx.encode(b"\x00\x00\x00") == DEFAULT_ALPHABET[0] * 3
    assert bx.decode(DEFAULT_ALPHABET[0] * 3) == b"\x00\x00\x00"


def test_invalid_character_rejected():
    with pytest.raises(BaseXError):
        BaseX().decode("abc0")


def test_alphabet_too_short():
    with pytest.raises(BaseXError):
        BaseX("a")


def test_alphabet_ambiguous():
    with pytest.raises(BaseXError):
        BaseX("abca")


def test_alphabet_too_long():
    alphabet = "".join(chr(0x100 + i) for i in range(255))
    with pytest.raises(BaseXError):
        BaseX(alphabet)


def test_setting_invalid_alphabet_keeps_previous():
    bx = BaseX("0123456789")
    with pytest.raises(BaseXError):
        bx.alphabet = "x"
    assert bx.alphabet == "0123456789"
    assert bx.base == 10


def test_output_uses_only_alphabet_characters():
    bx = BaseX("abcdef")
    encoded = bx.encode(b"\x01\x02\x03\xff")
    assert set(encoded) <= set("abcdef")


@given(st.binary(max_size=64))
def test_round_trip_default(data):
    bx = BaseX()
    assert bx.decode(bx.encode(data)) == data


@given(
    st.binary(max_size=48),
    st.sampled_from(["01", "0123456789", "0123456789abcdef", "xyz", DEFAULT_ALPHABET]),
)
def test_round_trip_custom(data, alphabet):
    bx = BaseX(alphabet)
    assert bx.decode(bx.encode(data)) == data


@given(st.binary(min_size=1, max_size=32))
def test_encoding_preserves_order_for_equal_length_inputs(data):
    bx = BaseX("0123456789abcdef")
    other = bytes([0xFF]) * len(data)
    a, b = bx.encode(b"\x01" + data), bx.encode(b"\x01" + other)
    assert (len(a), a) <= (len(b), b)