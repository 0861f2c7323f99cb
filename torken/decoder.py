"""Decoding of the torken binary wire format back into Python values."""

from __future__ import annotations

import dataclasses
import struct
import types
import typing
import uuid
from collections.abc import Mapping, MutableMapping, MutableSequence, Sequence
from datetime import datetime, timedelta, timezone
from typing import Any, Union

from torken.encoder import tagged_fields
from torken.types import SerialType, SerializationError, bytes_to_bigint

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_NUMERIC_FORMATS = {
    SerialType.INT8: "<b",
    SerialType.UINT8: "<B",
    SerialType.INT16: "<h",
    SerialType.UINT16: "<H",
    SerialType.INT32: "<i",
    SerialType.UINT32: "<I",
    SerialType.INT64: "<q",
    SerialType.UINT64: "<Q",
    SerialType.FLOAT: "<f",
    SerialType.DOUBLE: "<d",
}

_FIXED_BUFFER_LENGTHS = {
    SerialType.BYTE: 1,
    SerialType.WORD: 2,
    SerialType.DWORD: 4,
    SerialType.LWORD: 8,
    SerialType.MWORD: 12,
    SerialType.XWORD: 16,
}

_NULL_TYPES = {SerialType.UNKNOWN, SerialType.UNDEFINED, SerialType.NULL}
_GENERIC = {None, Any, object}
_LIST_ORIGINS = {list, Sequence, MutableSequence}
_DICT_ORIGINS = {dict, Mapping, MutableMapping}


class _Reader:
    """Sequential reader over an immutable byte buffer."""

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self._pos = 0

    def take(self, count: int) -> bytes:
        end = self._pos + count
        if end > len(self._data):
            raise SerializationError("unexpected end of data")
        chunk = self._data[self._pos:end]
        self._pos = end
        return chunk

    def byte(self) -> int:
        return self.take(1)[0]

    def unpack(self, fmt: str) -> Any:
        return struct.unpack(fmt, self.take(struct.calcsize(fmt)))[0]

    def length(self) -> int:
        return self.unpack("<I")

    def sized(self) -> bytes:
        return self.take(self.length())


def _unwrap_optional(target: Any) -> Any:
    origin = typing.get_origin(target)
    if origin is Union or (hasattr(types, "UnionType") and origin is types.UnionType):
        remaining = [arg for arg in typing.get_args(target) if arg is not type(None)]
        return remaining[0] if len(remaining) == 1 else Any
    return target


def _is_generic(target: Any) -> bool:
    return target in _GENERIC or isinstance(target, (str, typing.ForwardRef))


def _type_name(target: Any) -> str:
    return getattr(target, "__name__", None) or str(target)


def _coerce(value: Any, target: Any) -> Any:
    if value is None or _is_generic(target):
        return value
    if not isinstance(target, type):
        return value
    is_number = isinstance(value, (int, float)) and not isinstance(value, bool)
    if target is float and is_number:
        return float(value)
    if target is int and is_number:
        return int(value)
    if target in (bytes, bytearray) and isinstance(value, bytes):
        return target(value)
    if isinstance(value, target):
        return value
    raise SerializationError(
        f"cannot store {type(value).__name__} into {_type_name(target)}"
    )


def _field_hints(cls: type) -> dict[str, Any]:
    """Declared field types; annotations kept as text are treated as untyped."""
    return {field.name: field.type for field in dataclasses.fields(cls)}


def _decode_array(reader: _Reader, target: Any) -> Any:
    count = reader.length()
    origin = typing.get_origin(target) or target
    args = typing.get_args(target)

    if _is_generic(target):
        return [_decode(reader, Any) for _ in range(count)]
    if origin in _LIST_ORIGINS:
        element = args[0] if args else Any
        return [_decode(reader, element) for _ in range(count)]
    if origin is tuple:
        if len(args) == 2 and args[1] is Ellipsis:
            return tuple(_decode(reader, args[0]) for _ in range(count))
        if args:
            if len(args) != count:
                raise SerializationError("Inappropriate array size")
            return tuple(_decode(reader, arg) for arg in args)
        return tuple(_decode(reader, Any) for _ in range(count))
    raise SerializationError(f"Inappropriate array container -> {_type_name(target)}")


def _decode_dataclass(reader: _Reader, count: int, target: Any) -> Any:
    cls = target if isinstance(target, type) else type(target)
    by_key = dict(tagged_fields(cls))
    hints = _field_hints(cls)

    values: dict[str, Any] = {}
    for _ in range(count):
        key = reader.sized().decode("utf-8", errors="replace")
        field = by_key.get(key)
        if field is None:
            _decode(reader, Any)
            continue
        values[field.name] = _decode(reader, hints.get(field.name, Any))

    if not isinstance(target, type):
        for name, value in values.items():
            setattr(target, name, value)
        return target

    init_names = {field.name for field in dataclasses.fields(cls) if field.init}
    try:
        instance = cls(**{name: v for name, v in values.items() if name in init_names})
    except TypeError as exc:
        raise SerializationError(f"cannot build {cls.__name__}: {exc}") from exc
    for name, value in values.items():
        if name not in init_names:
            setattr(instance, name, value)
    return instance


def _decode_object(reader: _Reader, target: Any) -> Any:
    count = reader.length()
    origin = typing.get_origin(target) or target
    args = typing.get_args(target)

    if _is_generic(target) or origin in _DICT_ORIGINS:
        value_type = args[1] if len(args) == 2 else Any
        result: dict[str, Any] = {}
        for _ in range(count):
            key = reader.sized().decode("utf-8", errors="replace")
            result[key] = _decode(reader, value_type)
        return result
    if dataclasses.is_dataclass(target):
        return _decode_dataclass(reader, count, target)
    raise SerializationError(f"Inappropriate object container -> {_type_name(target)}")


def _decode_date(reader: _Reader) -> datetime:
    millis = reader.unpack("<d")
    try:
        return _EPOCH + timedelta(milliseconds=int(millis))
    except (ValueError, OverflowError) as exc:
        raise SerializationError(f"invalid date value {millis!r}") from exc


def _decode(reader: _Reader, target: Any) -> Any:
    tag = reader.byte()
    try:
        kind = SerialType(tag)
    except ValueError:
        raise SerializationError("Unexpected serial type") from None
    target = _unwrap_optional(target)

    if kind in _NULL_TYPES:
        return None
    if kind is SerialType.STRING:
        return _coerce(reader.sized().decode("utf-8", errors="replace"), target)
    if kind is SerialType.UUID:
        return _coerce(uuid.UUID(bytes=reader.take(16)), target)
    fmt = _NUMERIC_FORMATS.get(kind)
    if fmt is not None:
        return _coerce(reader.unpack(fmt), target)
    if kind is SerialType.DATE:
        return _coerce(_decode_date(reader), target)
    if kind is SerialType.BUFFER:
        return _coerce(reader.sized(), target)
    fixed = _FIXED_BUFFER_LENGTHS.get(kind)
    if fixed is not None:
        return _coerce(reader.take(fixed), target)
    if kind is SerialType.BOOLEAN:
        return _coerce(reader.byte() == 1, target)
    if kind is SerialType.FUNCTION:
        _decode(reader, Any)
        return None
    if kind is SerialType.ARRAY:
        return _decode_array(reader, target)
    if kind is SerialType.OBJECT:
        return _decode_object(reader, target)
    if kind is SerialType.BIGINT:
        return _coerce(bytes_to_bigint(reader.sized()), target)
    raise SerializationError("Unexpected serial type")


def unmarshal(data: bytes, into: Any = None) -> Any:
    """Decode ``data`` and return the value it holds.

    ``into`` describes the expected shape: ``None`` or ``Any`` for plain
    Python values, a type or type hint such as ``list[int]``, a dataclass
    class to build, or a dataclass instance to update in place (which is
    then returned). Keys without a matching tagged field are skipped.
    """
    return _decode(_Reader(data), into)