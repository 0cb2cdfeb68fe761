"""
TransactionRecord — Generic запись транзакции

Запись хранится как канонический key-ordered field map, а не как жёсткая
структура: неизвестные (будущие) поля проходят через stamping без изменений.

Единственное интерпретируемое поле — group field ("grp"):
- отсутствует или 32 нулевых байта → группа не назначена
- 32 ненулевых байта → digest группы
- любое другое значение → DecodeError

Все операции функциональные: каждое изменение создаёт новый экземпляр.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Final, Mapping

from src.core.crypto.digest import DIGEST_SIZE, ZERO_DIGEST, validate_digest
from src.core.encoding.canonical import DecodeError, decode_map, encode_canonical


# =============================================================================
# WIRE-ПАРАМЕТРЫ
# =============================================================================

# Зарезервированный ключ group field в field map
GROUP_FIELD_KEY: Final[str] = "grp"


# =============================================================================
# TRANSACTION RECORD
# =============================================================================


@dataclass(frozen=True)
class TransactionRecord:
    """
    Декодированная запись транзакции.

    Immutable: fields хранится как read-only view на приватную копию,
    group field нормализован (нулевой digest удалён из map).
    """

    fields: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        normalized: Dict[str, Any] = dict(self.fields)

        if GROUP_FIELD_KEY in normalized:
            group = normalized[GROUP_FIELD_KEY]
            if not isinstance(group, (bytes, bytearray, memoryview)):
                raise DecodeError(
                    f"group field must be binary, got {type(group).__name__}"
                )
            group = bytes(group)
            if len(group) != DIGEST_SIZE:
                raise DecodeError(
                    f"group field must be {DIGEST_SIZE} bytes, got {len(group)}"
                )
            if group == ZERO_DIGEST:
                del normalized[GROUP_FIELD_KEY]
            else:
                normalized[GROUP_FIELD_KEY] = group

        object.__setattr__(self, "fields", MappingProxyType(normalized))

    @classmethod
    def decode(cls, data: bytes) -> "TransactionRecord":
        """
        Декодирование записи из канонических байтов.

        Raises:
            DecodeError: Если байты не являются корректной записью
        """
        decoded = decode_map(data)
        for key in decoded:
            if not isinstance(key, str):
                raise DecodeError(f"field keys must be text, got {type(key).__name__}")
        return cls(decoded)

    def encode(self) -> bytes:
        """Каноническое кодирование записи."""
        return encode_canonical(dict(self.fields))

    @property
    def group(self) -> bytes:
        """Group field (ZERO_DIGEST если не назначен)."""
        return self.fields.get(GROUP_FIELD_KEY, ZERO_DIGEST)

    @property
    def has_group(self) -> bool:
        return GROUP_FIELD_KEY in self.fields

    def with_group(self, group: bytes) -> "TransactionRecord":
        """
        Копия записи с перезаписанным group field.

        Args:
            group: 32-байтовый digest (ZERO_DIGEST очищает поле)

        Raises:
            ValueError: Если group не является digest корректного размера
        """
        updated = dict(self.fields)
        updated[GROUP_FIELD_KEY] = validate_digest(group)
        return TransactionRecord(updated)

    def without_group(self) -> "TransactionRecord":
        """Копия записи без group field."""
        if not self.has_group:
            return self
        updated = dict(self.fields)
        del updated[GROUP_FIELD_KEY]
        return TransactionRecord(updated)
