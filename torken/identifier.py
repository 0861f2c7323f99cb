"""Identifiers that can be attached to tokens."""

from __future__ import annotations

import binascii
import secrets
from dataclasses import dataclass

IDENTIFIER_LENGTH = 12


@dataclass(frozen=True)
class Identifier:
    """A 12-byte token identifier, or an anonymous one holding no bytes."""

    data: bytes | None = None

    def __post_init__(self) -> None:
        if self.data is not None:
            object.__setattr__(self, "data", bytes(self.data))
            if len(self.data) != IDENTIFIER_LENGTH:
                raise ValueError(
                    f"Identifier has to be either None or {IDENTIFIER_LENGTH} bytes long"
                )

    @classmethod
    def new(cls) -> Identifier:
        """Create a random identifier."""
        return cls(secrets.token_bytes(IDENTIFIER_LENGTH))

    @classmethod
    def anonymous(cls) -> Identifier:
        """Create an identifier that carries no bytes."""
        return cls(None)

    @classmethod
    def from_bytes(cls, data: bytes | None) -> Identifier:
        """Create an identifier from 12 bytes, or an anonymous one from None."""
        return cls(data)

    @classmethod
    def from_hex(cls, text: str) -> Identifier:
        """Create an identifier from hex text; empty text gives an anonymous one."""
        if not text:
            return cls(None)
        return cls(binascii.unhexlify(text))

    def hex(self) -> str:
        """Hex form of the identifier, empty when anonymous."""
        return self.data.hex() if self.data is not None else ""

    def is_anonymous(self) -> bool:
        """Whether the identifier carries no bytes."""
        return self.data is None

    @property
    def is_valid(self) -> bool:
        """Whether the identifier carries bytes."""
        return self.data is not None