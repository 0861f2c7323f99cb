# torken

`torken` reads and writes a compact token format. A token carries a header byte, an
optional 12-byte identifier, a 16-byte nonce (issue time, lifetime and an 8-byte
checksum) and an encrypted payload. The whole buffer is scrambled with a keyed
byte permutation and written as base-X text.

The package has no dependencies beyond the Python standard library (3.10 or later).

## Install

```
pip install .
```

For the test suite:

```
pip install ".[test]"
pytest
```

## What is inside

### Base-X text encoding — `torken.basex`

`BaseX` turns bytes into text over any alphabet of at least two distinct
characters, and back. Leading zero bytes turn into leading copies of the first
alphabet character, so they survive the round trip. The default alphabet is the
58-character one without `0`, `O`, `I` and `l`.

```python
from torken.basex import BaseX

codec = BaseX()
text = codec.encode(b"\x00\x00hello")
assert codec.decode(text) == b"\x00\x00hello"
```

A duplicate character in the alphabet, an alphabet that is too short or too long,
or a character outside the alphabet in `decode` raises `BaseXError`.

### Binary value serialization — `torken.encoder`, `torken.decoder`

`marshal(value)` writes a value as tagged little-endian binary: strings, integers,
floats, booleans, `None`, lists, string-keyed dicts, bytes (fixed-width tags for
1, 2, 4, 8, 12 and 16 bytes), UUIDs, datetimes (as milliseconds) and arbitrary
precision integers. Objects take part through fields declared with `tagged(...)`,
which names the key each field is written under.

`unmarshal(data, into)` reads such a buffer back. Unknown object keys are skipped;
bytes that do not form a valid value raise `SerializationError`.

The one-byte type tags are listed in `torken.types.SerialType`, and
`bigint_to_bytes` / `bytes_to_bigint` give the sign-and-magnitude layout used for
big integers.

```python
from torken.encoder import marshal

blob = marshal({"name": "example", "count": 3})
```

### Scrambling and checksums — `torken.shuffle`

`pseudo_shuffle(data, key)` reorders bytes by a stable sort on the SHA-256 hash of
the key, and `pseudo_unshuffle(data, key)` undoes it. `make_checksum(data)` gives
the first 8 bytes of the SHA-256 digest, the checksum stored in every token nonce.

### Identifiers — `torken.identifier`

An `Identifier` is either 12 random bytes or anonymous.

```python
from torken.identifier import Identifier

ident = Identifier.new()
same = Identifier.from_hex(ident.hex())
assert Identifier.anonymous().is_anonymous()
```

`Identifier.from_bytes` and `Identifier.from_hex` reject anything that is not
exactly 12 bytes (an empty hex string gives an anonymous identifier).

### Tokens — `torken.tokenizer`

`Tokenizer.parse(token, options)` decodes and unscrambles a token string into a
`TokenHeader`: the version, the `Algorithm`, whether an identifier is present
(`identifier_object()` returns it as an `Identifier`), the issue time, the
lifetime in seconds (0 means it never expires) and whether it is currently valid.
`DecryptOptions` overrides the scrambler key and the alphabet for one call.

Once the payload has been decrypted with the key that belongs to the token,
`Tokenizer.verify(header, decrypted)` recomputes the checksum over header,
identifier, timestamps and payload and raises `TokenError` if it does not match
the one in the nonce. `Tokenizer.build_checksum_input(...)` exposes the exact
bytes that checksum covers.