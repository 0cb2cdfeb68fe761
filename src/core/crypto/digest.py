"""
Digest — доменно-разделённое хеширование

Единственный допустимый способ получить digest транзакции или группы:
- hash примитив: SHA-512/256 (32 байта)
- domain separation: короткий ASCII префикс перед payload
- "TX" — digest отдельной транзакции
- "TG" — digest группы транзакций

Нулевой digest (32 нулевых байта) зарезервирован и означает "отсутствует".
"""

import base64
import hashlib
from typing import Final


# =============================================================================
# DIGEST-ПАРАМЕТРЫ
# =============================================================================

# Размер digest в байтах (SHA-512/256)
DIGEST_SIZE: Final[int] = 32

# Зарезервированное значение "группа не назначена"
ZERO_DIGEST: Final[bytes] = bytes(DIGEST_SIZE)

# Префикс для digest транзакции
TXID_PREFIX: Final[bytes] = b"TX"

# Префикс для digest группы
TGID_PREFIX: Final[bytes] = b"TG"

_HASH_NAME: Final[str] = "sha512_256"


# =============================================================================
# HASHING
# =============================================================================


def sha512_256(data: bytes) -> bytes:
    """SHA-512/256 от data (32 байта)."""
    return hashlib.new(_HASH_NAME, data).digest()


def hash_with_prefix(prefix: bytes, payload: bytes) -> bytes:
    """
    Доменно-разделённый hash: SHA-512/256(prefix ++ payload).

    Args:
        prefix: Domain-separation префикс (TXID_PREFIX или TGID_PREFIX)
        payload: Каноническое представление хешируемой записи

    Returns:
        32-байтовый digest

    Raises:
        ValueError: Если префикс пустой
    """
    if not prefix:
        raise ValueError("Domain-separation prefix must not be empty")
    return sha512_256(bytes(prefix) + bytes(payload))


# =============================================================================
# ВАЛИДАЦИЯ
# =============================================================================


def is_zero_digest(value: bytes) -> bool:
    """True если value — зарезервированный нулевой digest."""
    return bytes(value) == ZERO_DIGEST


def validate_digest(value: bytes) -> bytes:
    """
    Проверка, что value — digest корректного размера.

    Args:
        value: Кандидат в digest

    Returns:
        value как immutable bytes

    Raises:
        ValueError: Если тип или длина не соответствуют DIGEST_SIZE
    """
    if not isinstance(value, (bytes, bytearray, memoryview)):
        raise ValueError(f"Digest must be bytes, got {type(value).__name__}")

    value = bytes(value)
    if len(value) != DIGEST_SIZE:
        raise ValueError(f"Digest must be {DIGEST_SIZE} bytes, got {len(value)}")
    return value


def digest_to_b64(value: bytes) -> str:
    """Текстовая форма digest (standard base64, как в векторах)."""
    return base64.b64encode(bytes(value)).decode("ascii")
