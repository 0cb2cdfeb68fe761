"""
Group Assigner — назначение group id всем транзакциям batch

1. Digest каждой транзакции (без group field), в порядке batch
2. Group digest по списку digest
3. Каждая запись получает group digest в group field и кодируется заново

Остальные поля записи не изменяются. Входной batch не модифицируется.
"""

import logging
from typing import List, Optional, Sequence

from src.core.crypto.digest import digest_to_b64
from src.core.domain.transaction import TransactionRecord
from src.txngroup.composer import compute_group_digest
from src.txngroup.config import DEFAULT_CONFIG, GroupingConfig
from src.txngroup.record_digest import decode_batch, record_digest

logger = logging.getLogger(__name__)


class EmptyBatchError(ValueError):
    """Group id нельзя назначить пустому batch."""

    def __init__(self):
        super().__init__("Cannot assign a group id to an empty batch")


def _decode_nonempty(
    batch: Sequence[bytes], config: Optional[GroupingConfig]
) -> List[TransactionRecord]:
    config = config or DEFAULT_CONFIG
    if not batch:
        raise EmptyBatchError()
    config.check_batch_size(batch)
    return decode_batch(batch)


def compute_batch_group_id(
    batch: Sequence[bytes], config: Optional[GroupingConfig] = None
) -> bytes:
    """
    Group id, который получит batch при assign_group_id.

    Raises:
        EmptyBatchError: Если batch пустой
        DecodeError: Если элемент batch некорректен
        BatchTooLargeError: Если batch превышает лимит config
    """
    records = _decode_nonempty(batch, config)
    return compute_group_digest([record_digest(r) for r in records])


def assign_group_id(
    batch: Sequence[bytes], config: Optional[GroupingConfig] = None
) -> List[bytes]:
    """
    Назначение group id транзакциям batch.

    Существующие group id перезаписываются: digest транзакции от них не зависит.

    Args:
        batch: Закодированные транзакции (порядок значим)
        config: Конфигурация (default: без лимита размера)

    Returns:
        Новый batch: те же транзакции с group field = group digest

    Raises:
        EmptyBatchError: Если batch пустой
        DecodeError: Если элемент batch некорректен (с его index)
        BatchTooLargeError: Если batch превышает лимит config
    """
    records = _decode_nonempty(batch, config)
    group_id = compute_group_digest([record_digest(r) for r in records])
    logger.debug(
        "Assigning group id %s to %d transactions", digest_to_b64(group_id), len(records)
    )

    return [record.with_group(group_id).encode() for record in records]
