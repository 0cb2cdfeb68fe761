"""
Group Verifier — проверка согласованности group field с batch

expected = group digest по всему batch
batch валиден ⇔ group field каждой транзакции нулевой или равен expected

Несогласованная группировка — это обычный отрицательный результат (False),
а не исключение. Исключение только для структурно нечитаемого входа (DecodeError).
"""

import logging
from typing import Optional, Sequence

from src.core.crypto.digest import ZERO_DIGEST, digest_to_b64
from src.core.domain.transaction import TransactionRecord
from src.txngroup.composer import compute_group_digest
from src.txngroup.config import DEFAULT_CONFIG, GroupingConfig
from src.txngroup.record_digest import decode_batch, record_digest

logger = logging.getLogger(__name__)


def group_claims_consistent(
    records: Sequence[TransactionRecord], txn_digests: Sequence[bytes]
) -> bool:
    """
    Проверка group field записей против digest, пересчитанного по ним же.

    Args:
        records: Декодированные записи (порядок значим)
        txn_digests: Digest этих записей, в том же порядке

    Returns:
        True если каждый group field нулевой или равен пересчитанному digest
    """
    if not records:
        return True

    expected = compute_group_digest(txn_digests)
    for i, record in enumerate(records):
        group = record.group
        if group != ZERO_DIGEST and group != expected:
            logger.debug(
                "Group field at offset %d is %s, expected %s",
                i,
                digest_to_b64(group),
                digest_to_b64(expected),
            )
            return False
    return True


def verify_group_id(
    batch: Sequence[bytes], config: Optional[GroupingConfig] = None
) -> bool:
    """
    Проверка group id, встроенных в batch.

    Batch только из транзакций без group id валиден тривиально;
    пустой batch валиден.

    Args:
        batch: Закодированные транзакции (порядок значим)
        config: Конфигурация (default: без лимита размера)

    Returns:
        True если группировка согласована, False иначе

    Raises:
        DecodeError: Если элемент batch некорректен (с его index)
        BatchTooLargeError: Если batch превышает лимит config
    """
    config = config or DEFAULT_CONFIG
    config.check_batch_size(batch)

    records = decode_batch(batch)
    return group_claims_consistent(records, [record_digest(r) for r in records])
