"""
Contract Validation Module

Модуль для валидации JSON контрактов (conformance векторы группировки).
"""

from .validators import (
    ContractValidator,
    SchemaLoader,
    TxnGroupVectorsValidator,
    validate_txn_group_vectors,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "TxnGroupVectorsValidator",
    # Functions
    "validate_txn_group_vectors",
]
