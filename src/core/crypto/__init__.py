"""
Crypto primitives.

Domain-separated SHA-512/256 hashing and digest constants.
"""

from src.core.crypto.digest import (
    DIGEST_SIZE,
    TGID_PREFIX,
    TXID_PREFIX,
    ZERO_DIGEST,
    digest_to_b64,
    hash_with_prefix,
    is_zero_digest,
    sha512_256,
    validate_digest,
)

__all__ = [
    # Constants
    "DIGEST_SIZE",
    "ZERO_DIGEST",
    "TXID_PREFIX",
    "TGID_PREFIX",
    # Functions
    "sha512_256",
    "hash_with_prefix",
    "is_zero_digest",
    "validate_digest",
    "digest_to_b64",
]
