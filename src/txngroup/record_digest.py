"""
Canonical Record Digest — digest отдельной транзакции

digest = SHA-512/256("TX" ++ canonical(record без group field))

Digest не зависит от текущего group field: идентичность транзакции
стабильна до и после stamping.
"""

from typing import List, Sequence

from src.core.crypto.digest import TXID_PREFIX, hash_with_prefix
from src.core.domain.transaction import TransactionRecord
from src.core.encoding.canonical import DecodeError


def record_digest(record: TransactionRecord) -> bytes:
    """Digest уже декодированной записи."""
    return hash_with_prefix(TXID_PREFIX, record.without_group().encode())


def compute_txn_digest(encoded: bytes) -> bytes:
    """
    Digest закодированной транзакции.

    Args:
        encoded: Канонические байты записи транзакции

    Returns:
        32-байтовый digest

    Raises:
        DecodeError: Если байты не являются корректной записью
    """
    return record_digest(TransactionRecord.decode(encoded))


def decode_batch(batch: Sequence[bytes]) -> List[TransactionRecord]:
    """
    Декодирование batch с привязкой ошибок к позиции.

    Raises:
        DecodeError: С index элемента, который не удалось декодировать
    """
    records = []
    for i, encoded in enumerate(batch):
        try:
            records.append(TransactionRecord.decode(encoded))
        except DecodeError as e:
            raise e.at_index(i) from e
    return records
