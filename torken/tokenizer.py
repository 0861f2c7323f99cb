"""Parsing and integrity checking of torken token strings."""

from __future__ import annotations

import struct
import time
from dataclasses import dataclass
from enum import IntEnum

from torken.basex import BaseX, BaseXError
from torken.identifier import IDENTIFIER_LENGTH, Identifier
from torken.shuffle import CHECKSUM_LENGTH, make_checksum, pseudo_unshuffle

DEFAULT_SCRAMBLER = "DEFAULT_SCRAMBLER"
LATEST_VERSION = 0x01
NONCE_LENGTH = 16

_IDENTIFIER_FLAG = 0x80
_VERSION_MASK = 0x0F
_ALGORITHM_SHIFT = 4
_ALGORITHM_MASK = 0x07
_TIMES = struct.Struct("<II")


class Algorithm(IntEnum):
    """Payload encryption algorithm recorded in a token header."""

    CHACHA20 = 0
    AES = 1  # AES-256 GCM


class TokenError(ValueError):
    """Raised for malformed tokens or tokens failing the integrity check."""


@dataclass(frozen=True)
class DecryptOptions:
    """Per-call overrides for parsing a token."""

    scrambler: str | None = None
    alphabet: str | None = None


@dataclass
class TokenHeader:
    """The plain parts of a token, available before the payload is decrypted."""

    vhead: int
    identifier: bytes
    nonce: bytes
    encrypted_payload: bytes
    valid_from: int
    expires_in: int
    is_valid: bool
    payload_type: int = 0

    def uses_identifier(self) -> bool:
        """Whether the token carries an identifier."""
        return bool(self.vhead & _IDENTIFIER_FLAG)

    def version(self) -> int:
        """Token format version the token was created with."""
        return self.vhead & _VERSION_MASK

    def algorithm(self) -> Algorithm:
        """Encryption algorithm used for the payload."""
        value = (self.vhead >> _ALGORITHM_SHIFT) & _ALGORITHM_MASK
        try:
            return Algorithm(value)
        except ValueError:
            raise TokenError(f"unknown algorithm {value}") from None

    def identifier_object(self) -> Identifier:
        """The token's identifier, anonymous when it carries none."""
        if self.uses_identifier():
            return Identifier.from_bytes(self.identifier)
        return Identifier.anonymous()

    @property
    def checksum(self) -> bytes:
        """Checksum stored in the nonce."""
        return self.nonce[8:8 + CHECKSUM_LENGTH]


class Tokenizer:
    """Reads token strings using a scrambler key and a text alphabet."""

    def __init__(self, scrambler: str = DEFAULT_SCRAMBLER, alphabet: str | None = None) -> None:
        self.scrambler = scrambler
        self._basex = BaseX(alphabet)

    @property
    def alphabet(self) -> str:
        """Alphabet used for the token text."""
        return self._basex.alphabet

    @alphabet.setter
    def alphabet(self, alphabet: str) -> None:
        if len(alphabet) < 2:
            raise TokenError("invalid alphabet length")
        try:
            self._basex.alphabet = alphabet
        except BaseXError as exc:
            raise TokenError(str(exc)) from exc

    def parse(self, token: str, options: DecryptOptions | None = None) -> TokenHeader:
        """Decode and unscramble ``token`` and split it into its header parts."""
        options = options or DecryptOptions()
        scrambler = options.scrambler if options.scrambler is not None else self.scrambler
        try:
            codec = BaseX(options.alphabet) if options.alphabet is not None else self._basex
            raw = codec.decode(token)
        except BaseXError as exc:
            raise TokenError(str(exc)) from exc

        data = pseudo_unshuffle(raw, scrambler)
        if not data:
            raise TokenError("corrupt data: too short")

        vhead = data[0]
        id_size = IDENTIFIER_LENGTH if vhead & _IDENTIFIER_FLAG else 0
        nonce_start = 1 + id_size
        if len(data) < nonce_start + NONCE_LENGTH:
            raise TokenError("corrupt data: length too small")

        nonce = data[nonce_start:nonce_start + NONCE_LENGTH]
        valid_from, expires_in = _TIMES.unpack(nonce[:_TIMES.size])
        now = int(time.time())
        is_valid = expires_in == 0 or valid_from <= now < valid_from + expires_in

        return TokenHeader(
            vhead=vhead,
            identifier=data[1:nonce_start],
            nonce=nonce,
            encrypted_payload=data[nonce_start + NONCE_LENGTH:],
            valid_from=valid_from,
            expires_in=expires_in,
            is_valid=is_valid,
        )

    def verify(self, header: TokenHeader, decrypted: bytes) -> bytes:
        """Check the decrypted payload against the header checksum and return it."""
        decrypted = bytes(decrypted)
        checksum_input = self.build_checksum_input(
            header.vhead,
            header.identifier if header.uses_identifier() else None,
            header.valid_from,
            header.expires_in,
            decrypted,
        )
        if make_checksum(checksum_input) != header.checksum:
            raise TokenError("token integrity invalid")
        if decrypted:
            header.payload_type = decrypted[0]
        return decrypted

    def build_checksum_input(
        self,
        vhead: int,
        identifier: bytes | None,
        valid_from: int,
        expires_in: int,
        payload: bytes,
    ) -> bytes:
        """Bytes the token checksum is computed over."""
        return b"".join(
            (
                bytes([vhead]),
                bytes(identifier) if identifier is not None else b"",
                _TIMES.pack(valid_from, expires_in),
                bytes(payload),
            )
        )