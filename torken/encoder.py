"""Binary serialization of Python values into the torken wire format."""

from __future__ import annotations

import dataclasses
import struct
import uuid
from collections.abc import Callable, Mapping
from datetime import datetime, timedelta, timezone
from typing import Any

from torken.types import SerialType, SerializationError, bigint_to_bytes

TAG_KEY = "torken"
"""Dataclass field metadata key naming the field on the wire."""

_UINT32_MAX = 0xFFFFFFFF
_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_FIXED_BUFFER_TYPES = {
    1: SerialType.BYTE,
    2: SerialType.WORD,
    4: SerialType.DWORD,
    8: SerialType.LWORD,
    12: SerialType.MWORD,
    16: SerialType.XWORD,
}


def tagged(key: str, **kwargs: Any) -> Any:
    """Declare a dataclass field that is serialized under ``key``.

    Extra keyword arguments are passed on to :func:`dataclasses.field`.
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[TAG_KEY] = key
    return dataclasses.field(metadata=metadata, **kwargs)


def tagged_fields(cls_or_instance: Any) -> list[tuple[str, dataclasses.Field]]:
    """Return ``(wire name, field)`` pairs of the public, tagged fields."""
    result = []
    for field in dataclasses.fields(cls_or_instance):
        if field.name.startswith("_"):
            continue
        key = field.metadata.get(TAG_KEY)
        if key:
            result.append((key, field))
    return result


def _length(count: int) -> bytes:
    if count > _UINT32_MAX:
        raise SerializationError("length exceeds 32-bit range")
    return struct.pack("<I", count)


def _write_named(buf: bytearray, key: str) -> None:
    raw = key.encode("utf-8")
    buf += _length(len(raw))
    buf += raw


def _write_bytes(buf: bytearray, data: bytes) -> None:
    fixed = _FIXED_BUFFER_TYPES.get(len(data))
    if fixed is not None:
        buf.append(fixed)
    else:
        buf.append(SerialType.BUFFER)
        buf += _length(len(data))
    buf += data


def _write_bigint(buf: bytearray, value: int) -> None:
    raw = bigint_to_bytes(value)
    buf.append(SerialType.BIGINT)
    buf += _length(len(raw))
    buf += raw


def _unix_millis(moment: datetime) -> int:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return (moment - _EPOCH) // timedelta(milliseconds=1)


def _write_object(buf: bytearray, items: list[tuple[str, Any]]) -> None:
    buf.append(SerialType.OBJECT)
    buf += _length(len(items))
    for key, item in items:
        _write_named(buf, key)
        _write(buf, item)


def _write(buf: bytearray, value: Any) -> None:
    if value is None:
        buf.append(SerialType.NULL)
    elif isinstance(value, bool):
        buf.append(SerialType.BOOLEAN)
        buf.append(1 if value else 0)
    elif isinstance(value, int):
        if _INT64_MIN <= value <= _INT64_MAX:
            buf.append(SerialType.INT64)
            buf += struct.pack("<q", value)
        else:
            _write_bigint(buf, value)
    elif isinstance(value, float):
        buf.append(SerialType.DOUBLE)
        buf += struct.pack("<d", value)
    elif isinstance(value, str):
        raw = value.encode("utf-8")
        buf.append(SerialType.STRING)
        buf += _length(len(raw))
        buf += raw
    elif isinstance(value, uuid.UUID):
        buf.append(SerialType.UUID)
        buf += value.bytes
    elif isinstance(value, (bytes, bytearray, memoryview)):
        _write_bytes(buf, bytes(value))
    elif isinstance(value, datetime):
        buf.append(SerialType.DATE)
        buf += struct.pack("<d", float(_unix_millis(value)))
    elif isinstance(value, (list, tuple)):
        buf.append(SerialType.ARRAY)
        buf += _length(len(value))
        for item in value:
            _write(buf, item)
    elif isinstance(value, Mapping):
        if not all(isinstance(key, str) for key in value):
            raise SerializationError("Cannot serialize maps with non-string key types")
        _write_object(buf, list(value.items()))
    elif dataclasses.is_dataclass(value) and not isinstance(value, type):
        items = [(key, getattr(value, field.name)) for key, field in tagged_fields(value)]
        _write_object(buf, items)
    elif isinstance(value, Callable):
        raise SerializationError("Function serialization is not supported")
    else:
        raise SerializationError(f"Unsupported type: {type(value).__name__}")


def marshal(value: Any) -> bytes:
    """Serialize ``value`` into its binary wire representation."""
    buf = bytearray()
    _write(buf, value)
    return bytes(buf)