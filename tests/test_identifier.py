import binascii

import pytest

from torken.identifier import Identifier


def test_new_identifier_has_twelve_bytes():
    identifier = Identifier.new()
    assert len(identifier.data) == 12
    assert identifier.is_anonymous() is False
    assert identifier.is_valid is True
    assert len(identifier.hex()) == 24


def test_new_identifiers_are_random():
    first, second = Identifier.new(), Identifier.new()
    assert len(first.data) == len(second.data) == 12
    assert first != second


def test_anonymous():
    identifier = Identifier.anonymous()
    assert identifier.is_anonymous() is True
    assert identifier.is_valid is False
    assert identifier.hex() == ""
    assert identifier.data is None


def test_from_bytes_round_trip():
    raw = bytes(range(12))
    identifier = Identifier.from_bytes(raw)
    assert identifier.data == raw
    assert identifier.hex() == raw.hex()


def test_from_bytes_none_is_anonymous():
    assert Identifier.from_bytes(None).is_anonymous() is True


@pytest.mark.parametrize("length", [0, 1, 11, 13, 16])
def test_from_bytes_wrong_length(length):
    with pytest.raises(ValueError):
        Identifier.from_bytes(b"\x01" * length)


def test_hex_round_trip():
    original = Identifier.new()
    restored = Identifier.from_hex(original.hex())
    assert restored == original
    assert restored.data == original.data


def test_from_hex_empty_is_anonymous():
    assert Identifier.from_hex("") == Identifier.anonymous()


@pytest.mark.parametrize("text", ["zz" * 12, "abc", "00" * 11, "00" * 13])
def test_from_hex_rejects_bad_input(text):
    with pytest.raises(ValueError):
        Identifier.from_hex(text)


def test_from_hex_rejects_non_hex_as_binascii_error():
    with pytest.raises(binascii.Error):
        Identifier.from_hex("g" * 24)


def test_identifier_is_immutable():
    raw = bytes(range(12))
    identifier = Identifier.from_bytes(raw)
    with pytest.raises(AttributeError):
        identifier.data = b"\x00" * 12
    assert identifier.data == raw
    assert identifier.hex() == raw.hex()