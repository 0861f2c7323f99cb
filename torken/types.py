"""Wire type tags and shared helpers for the binary serializer."""

from __future__ import annotations

from enum import IntEnum


class SerializationError(ValueError):
    """Raised when a value cannot be serialized or deserialized."""


class SerialType(IntEnum):
    """Type tag preceding every serialized value."""

    UNKNOWN = 0x00
    STRING = 0x01
    INT32 = 0x02
    INT64 = 0x03
    FLOAT = 0x04
    DOUBLE = 0x05
    BOOLEAN = 0x06
    NULL = 0x07
    UNDEFINED = 0x08
    ARRAY = 0x09
    OBJECT = 0x0A
    BIGINT = 0x0B
    BUFFER = 0x0C
    FUNCTION = 0x0D
    CUSTOM = 0x0E
    DATE = 0x0F

    # Fixed-length buffer wrappers
    BYTE = 0x10
    WORD = 0x11
    DWORD = 0x12
    LWORD = 0x13
    MWORD = 0x14  # 12 bytes
    XWORD = 0x15  # 16 bytes

    INT8 = 0x16
    INT16 = 0x17
    UINT8 = 0x18
    UINT16 = 0x19
    UINT32 = 0x1A
    UINT64 = 0x1B
    FLOAT16 = 0x1C
    UUID = 0x1D


def bigint_to_bytes(value: int) -> bytes:
    """Encode an integer as a sign byte followed by little-endian magnitude."""
    sign = 1 if value < 0 else 0
    magnitude = abs(value)
    return bytes([sign]) + magnitude.to_bytes((magnitude.bit_length() + 7) // 8, "little")


def bytes_to_bigint(buffer: bytes) -> int:
    """Decode the layout produced by :func:`bigint_to_bytes`."""
    if not buffer:
        raise SerializationError("bigint buffer is empty")
    magnitude = int.from_bytes(buffer[1:], "little")
    return -magnitude if buffer[0] == 1 else magnitude