"""Конфигурация операций над группами транзакций."""

from dataclasses import dataclass
from typing import Final, Optional, Sequence


# Обычный лимит размера группы в ledger
MAX_TXN_GROUP_SIZE: Final[int] = 16


class BatchTooLargeError(ValueError):
    """Batch превышает сконфигурированный лимит размера."""

    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(f"Batch of {size} transactions exceeds limit of {limit}")


@dataclass(frozen=True)
class GroupingConfig:
    """Конфигурация операций группировки.

    - max_batch_size: лимит длины batch, проверяется до декодирования
      (None — без лимита)
    """
    max_batch_size: Optional[int] = None

    def __post_init__(self):
        if self.max_batch_size is not None and self.max_batch_size < 1:
            raise ValueError(f"max_batch_size must be >= 1, got {self.max_batch_size}")

    @classmethod
    def ledger_default(cls) -> "GroupingConfig":
        """Конфигурация с лимитом MAX_TXN_GROUP_SIZE."""
        return cls(max_batch_size=MAX_TXN_GROUP_SIZE)

    def check_batch_size(self, batch: Sequence[bytes]) -> None:
        """
        Raises:
            BatchTooLargeError: Если batch длиннее max_batch_size
        """
        if self.max_batch_size is not None and len(batch) > self.max_batch_size:
            raise BatchTooLargeError(len(batch), self.max_batch_size)


DEFAULT_CONFIG: Final[GroupingConfig] = GroupingConfig()
