"""Transaction groups — атомарное объединение транзакций по content-derived group id.

- Canonical Record Digest: digest транзакции без group field ("TX")
- Group Digest Composer: digest группы по упорядоченному списку digest ("TG")
- Group Assigner: stamping group id во все транзакции batch
- Group Verifier: проверка group field против пересчитанного digest (bool)
- Group Segmentation Engine: разбиение batch на runs с проверкой (GroupingError)
"""

from src.core.encoding.canonical import DecodeError
from .assigner import EmptyBatchError, assign_group_id, compute_batch_group_id
from .composer import GROUP_LIST_KEY, compute_group_digest
from .config import MAX_TXN_GROUP_SIZE, BatchTooLargeError, GroupingConfig
from .record_digest import compute_txn_digest, decode_batch, record_digest
from .segmentation import (
    GroupingError,
    GroupingViolation,
    GroupSegmenter,
    find_and_verify_txn_groups,
    segment_txn_groups,
)
from .verifier import group_claims_consistent, verify_group_id

__all__ = [
    # Exceptions
    "DecodeError",
    "GroupingError",
    "GroupingViolation",
    "EmptyBatchError",
    "BatchTooLargeError",
    # Config
    "GroupingConfig",
    "MAX_TXN_GROUP_SIZE",
    # Digests
    "GROUP_LIST_KEY",
    "compute_txn_digest",
    "record_digest",
    "decode_batch",
    "compute_group_digest",
    # Operations
    "assign_group_id",
    "compute_batch_group_id",
    "verify_group_id",
    "group_claims_consistent",
    "GroupSegmenter",
    "segment_txn_groups",
    "find_and_verify_txn_groups",
]
