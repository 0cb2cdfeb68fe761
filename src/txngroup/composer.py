"""
Group Digest Composer — digest группы по упорядоченному списку digest транзакций

group_digest = SHA-512/256("TG" ++ canonical({"txlist": [d0, d1, ...]}))

Чувствителен к составу и порядку; группа из одной транзакции даёт
ненулевой digest (отличный от "группа не назначена").
"""

from typing import Final, Sequence

from src.core.crypto.digest import TGID_PREFIX, hash_with_prefix, validate_digest
from src.core.encoding.canonical import encode_canonical


# Ключ списка digest в канонической записи группы
GROUP_LIST_KEY: Final[str] = "txlist"


def compute_group_digest(txn_digests: Sequence[bytes]) -> bytes:
    """
    Composition digest группы.

    Args:
        txn_digests: Digest транзакций в порядке batch

    Returns:
        32-байтовый group digest

    Raises:
        ValueError: Если элемент не является 32-байтовым digest
    """
    digests = [validate_digest(d) for d in txn_digests]
    return hash_with_prefix(TGID_PREFIX, encode_canonical({GROUP_LIST_KEY: digests}))
