"""Arbitrary-alphabet base encoding of byte strings (base-x style)."""

from __future__ import annotations

DEFAULT_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
_MAX_ALPHABET_LENGTH = 255


class BaseXError(ValueError):
    """Raised for invalid alphabets or undecodable input."""


class BaseX:
    """Encodes bytes to text and back using a configurable alphabet.

    Leading zero bytes map to leading copies of the alphabet's first
    character, so they survive a round trip.
    """

    def __init__(self, alphabet: str | None = None) -> None:
        if alphabet is None:
            alphabet = DEFAULT_ALPHABET
        elif len(alphabet) >= _MAX_ALPHABET_LENGTH:
            raise BaseXError("alphabet too long")
        self._alphabet = ""
        self._digits: dict[str, int] = {}
        self.alphabet = alphabet

    @property
    def alphabet(self) -> str:
        """The characters used as digits, in order of value."""
        return self._alphabet

    @alphabet.setter
    def alphabet(self, alphabet: str) -> None:
        if len(alphabet) < 2:
            raise BaseXError("alphabet must be at least 2 characters long")
        digits: dict[str, int] = {}
        for index, char in enumerate(alphabet):
            if char in digits:
                raise BaseXError(f"{char!r} is ambiguous in alphabet")
            digits[char] = index
        self._alphabet = alphabet
        self._digits = digits

    @property
    def base(self) -> int:
        """Number of digits in the alphabet."""
        return len(self._alphabet)

    @property
    def _leader(self) -> str:
        return self._alphabet[0]

    def encode(self, data: bytes) -> str:
        """Encode a byte string into text."""
        data = bytes(data)
        rest = data.lstrip(b"\x00")
        zero_count = len(data) - len(rest)

        value = int.from_bytes(rest, "big")
        digits: list[str] = []
        while value:
            value, remainder = divmod(value, self.base)
            digits.append(self._alphabet[remainder])
        digits.reverse()
        return self._leader * zero_count + "".join(digits)

    def decode(self, text: str) -> bytes:
        """Decode text produced by :meth:`encode` back into bytes."""
        rest = text.lstrip(self._leader)
        zero_count = len(text) - len(rest)

        value = 0
        for char in rest:
            digit = self._digits.get(char)
            if digit is None:
                raise BaseXError(f"invalid char {char!r} for base {self.base}")
            value = value * self.base + digit

        body = value.to_bytes((value.bit_length() + 7) // 8, "big") if value else b""
        return b"\x00" * zero_count + body