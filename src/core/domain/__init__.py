"""
Domain models and value objects.

Contains the generic transaction record and group segmentation results.
"""

from src.core.domain.group import GroupRun, GroupSegmentation
from src.core.domain.transaction import GROUP_FIELD_KEY, TransactionRecord

__all__ = [
    # Transaction record
    "GROUP_FIELD_KEY",
    "TransactionRecord",
    # Group models
    "GroupRun",
    "GroupSegmentation",
]
