"""
Canonical encoding.

Deterministic MessagePack codec for generic field maps.
"""

from src.core.encoding.canonical import (
    DecodeError,
    canonicalize,
    decode_map,
    encode_canonical,
)

__all__ = [
    "DecodeError",
    "canonicalize",
    "decode_map",
    "encode_canonical",
]
