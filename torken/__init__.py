"""Compact scrambled tokens with a tagged binary serializer and base-X encoding."""

__version__ = "0.1.0"

__all__ = ["basex", "types", "encoder", "decoder", "shuffle", "identifier", "tokenizer"]