"""
Group Segmentation Engine — поиск и проверка групп в произвольном batch

Batch сканируется слева направо и разбивается на максимальные runs:
- транзакция без group id — всегда отдельный run длины 1
  (соседние транзакции без group id не объединяются)
- транзакция с group id продолжает открытый run с тем же group id,
  иначе открывает новый

При закрытии run с group id digest пересчитывается по его транзакциям;
несовпадение → GroupingError для диапазона run.

Group id, уже использованный закрытым run, не может открыть новый run
(группа, разорванная посторонней транзакцией) → GroupingError.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Индексы групп плотные: начинаются с 0 и растут ровно на 1 на границе run
2. Ошибка прерывает весь вызов, частичный результат не возвращается
3. Каждая транзакция декодируется и хешируется один раз
"""

import logging
from enum import Enum
from typing import Dict, List, Optional, Sequence

from src.core.crypto.digest import ZERO_DIGEST, digest_to_b64
from src.core.domain.group import GroupRun, GroupSegmentation
from src.core.domain.transaction import TransactionRecord
from src.txngroup.config import DEFAULT_CONFIG, GroupingConfig
from src.txngroup.record_digest import decode_batch, record_digest
from src.txngroup.verifier import group_claims_consistent

logger = logging.getLogger(__name__)


# =============================================================================
# EXCEPTIONS
# =============================================================================


class GroupingViolation(str, Enum):
    """Вид нарушения группировки"""

    DIGEST_MISMATCH = "do not form a valid group"
    NON_CONTIGUOUS = "do not form a contiguous group"


class GroupingError(ValueError):
    """
    Batch корректен на уровне записей, но нарушает инвариант группировки.

    Attributes:
        start: Первая позиция диапазона (включительно)
        end: Позиция после последней (исключительно)
        violation: Вид нарушения
    """

    def __init__(self, start: int, end: int, violation: GroupingViolation):
        self.start = start
        self.end = end
        self.violation = violation
        super().__init__(f"The transactions in range [{start}, {end}) {violation.value}")


# =============================================================================
# SEGMENTER
# =============================================================================


class GroupSegmenter:
    """Сегментация batch на runs с проверкой каждого run.

    Stateless между вызовами: всё состояние скана локально для segment().
    """

    def __init__(self, config: Optional[GroupingConfig] = None):
        """
        Args:
            config: конфигурация (default: без лимита размера)
        """
        self.config = config or DEFAULT_CONFIG

    def segment(self, batch: Sequence[bytes]) -> GroupSegmentation:
        """Разбиение batch на проверенные runs.

        Args:
            batch: закодированные транзакции (порядок значим)

        Returns:
            GroupSegmentation с runs и индексом группы для каждой позиции

        Raises:
            DecodeError: элемент batch некорректен (с его index)
            GroupingError: несовпадение digest в run или разорванная группа
            BatchTooLargeError: batch превышает лимит config
        """
        self.config.check_batch_size(batch)

        records = decode_batch(batch)
        digests = [record_digest(r) for r in records]

        runs: List[GroupRun] = []
        closed_groups: Dict[bytes, int] = {}  # group id → start закрытого run
        run_start = 0

        for i in range(1, len(records) + 1):
            if i < len(records) and self._extends_run(records[i - 1], records[i]):
                continue

            run = self._close_run(
                records, digests, run_start, i, len(runs), closed_groups
            )
            runs.append(run)
            run_start = i

        group_indices = tuple(run.index for run in runs for _ in range(run.size))
        logger.debug("Segmented %d transactions into %d groups", len(records), len(runs))
        return GroupSegmentation(runs=tuple(runs), group_indices=group_indices)

    @staticmethod
    def _extends_run(previous: TransactionRecord, current: TransactionRecord) -> bool:
        group = current.group
        return group != ZERO_DIGEST and group == previous.group

    def _close_run(
        self,
        records: Sequence[TransactionRecord],
        digests: Sequence[bytes],
        start: int,
        end: int,
        index: int,
        closed_groups: Dict[bytes, int],
    ) -> GroupRun:
        claim = records[start].group

        if claim == ZERO_DIGEST:
            logger.debug("Group %d: unstamped transaction at %d", index, start)
            return GroupRun(index=index, start=start, end=end)

        if claim in closed_groups:
            raise GroupingError(
                closed_groups[claim], start + 1, GroupingViolation.NON_CONTIGUOUS
            )

        if not group_claims_consistent(records[start:end], digests[start:end]):
            raise GroupingError(start, end, GroupingViolation.DIGEST_MISMATCH)

        closed_groups[claim] = start
        logger.debug(
            "Group %d: range [%d, %d) verified with id %s",
            index,
            start,
            end,
            digest_to_b64(claim),
        )
        return GroupRun(index=index, start=start, end=end, group_id=claim)


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def segment_txn_groups(
    batch: Sequence[bytes], config: Optional[GroupingConfig] = None
) -> GroupSegmentation:
    """
    Сегментация batch на проверенные группы.

    Raises:
        DecodeError: Если элемент batch некорректен
        GroupingError: Если группировка нарушена
    """
    return GroupSegmenter(config).segment(batch)


def find_and_verify_txn_groups(
    batch: Sequence[bytes], config: Optional[GroupingConfig] = None
) -> List[int]:
    """
    Индекс группы для каждой позиции batch.

    Args:
        batch: Закодированные транзакции (порядок значим)
        config: Конфигурация (default: без лимита размера)

    Returns:
        Список индексов групп, параллельный batch

    Raises:
        DecodeError: Если элемент batch некорректен
        GroupingError: Если группировка нарушена
    """
    return list(segment_txn_groups(batch, config).group_indices)
