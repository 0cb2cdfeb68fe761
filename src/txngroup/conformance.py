"""
Conformance — cross-implementation векторы группировки транзакций

Файл векторов (contracts/vectors/txn_group_vectors.json):
- transactions: именованные закодированные транзакции (base64)
- assign: batch → ожидаемый group id (и, опционально, ожидаемые байты после stamping)
- verify: batch → ожидаемый результат verify_group_id
- segmentation: batch → ожидаемые индексы групп или ожидаемая GroupingError

Файл валидируется JSON Schema контрактом перед разбором в Pydantic модели.
Результаты должны совпадать байт-в-байт с другими реализациями.
"""

import base64
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, Field

from src.core.contracts import validate_txn_group_vectors
from src.core.crypto.digest import digest_to_b64
from src.txngroup.assigner import assign_group_id, compute_batch_group_id
from src.txngroup.segmentation import (
    GroupingError,
    GroupingViolation,
    find_and_verify_txn_groups,
)
from src.txngroup.verifier import verify_group_id

logger = logging.getLogger(__name__)

DEFAULT_VECTORS_PATH = (
    Path(__file__).parent.parent.parent / "contracts" / "vectors" / "txn_group_vectors.json"
)


# =============================================================================
# VECTOR MODELS
# =============================================================================


class AssignVector(BaseModel):
    """Вектор assign_group_id."""

    name: str = Field(..., min_length=1)
    txns: Tuple[bytes, ...] = Field(..., min_length=1)
    group_id: bytes
    stamped: Optional[Tuple[bytes, ...]] = None

    model_config = {"frozen": True}


class VerifyVector(BaseModel):
    """Вектор verify_group_id."""

    name: str = Field(..., min_length=1)
    txns: Tuple[bytes, ...] = Field(..., min_length=1)
    valid: bool

    model_config = {"frozen": True}


class SegmentationVector(BaseModel):
    """Вектор find_and_verify_txn_groups."""

    name: str = Field(..., min_length=1)
    txns: Tuple[bytes, ...] = Field(..., min_length=1)
    valid: bool
    groups: Optional[Tuple[int, ...]] = None
    violation: Optional[GroupingViolation] = None

    model_config = {"frozen": True}


class ConformanceSuite(BaseModel):
    """Полный набор векторов."""

    assign: Tuple[AssignVector, ...] = ()
    verify: Tuple[VerifyVector, ...] = ()
    segmentation: Tuple[SegmentationVector, ...] = ()

    model_config = {"frozen": True}

    @property
    def vector_count(self) -> int:
        return len(self.assign) + len(self.verify) + len(self.segmentation)


class ConformanceResult(BaseModel):
    """Результат прогона одного вектора."""

    section: str
    name: str
    passed: bool
    detail: str = ""

    model_config = {"frozen": True}


# =============================================================================
# LOADING
# =============================================================================

_VIOLATIONS_BY_NAME = {v.name.lower(): v for v in GroupingViolation}


def _resolve(refs: List[str], transactions: Dict[str, bytes]) -> Tuple[bytes, ...]:
    return tuple(transactions[ref] for ref in refs)


def parse_conformance_suite(data: Dict[str, Any]) -> ConformanceSuite:
    """
    Разбор уже загруженного JSON векторов.

    Raises:
        jsonschema.ValidationError: Если данные не соответствуют контракту
    """
    validate_txn_group_vectors(data)

    transactions = {
        name: base64.b64decode(encoded) for name, encoded in data["transactions"].items()
    }

    assign = tuple(
        AssignVector(
            name=v["name"],
            txns=_resolve(v["txns"], transactions),
            group_id=base64.b64decode(v["group_id"]),
            stamped=_resolve(v["stamped"], transactions) if "stamped" in v else None,
        )
        for v in data["assign"]
    )
    verify = tuple(
        VerifyVector(name=v["name"], txns=_resolve(v["txns"], transactions), valid=v["valid"])
        for v in data["verify"]
    )
    segmentation = tuple(
        SegmentationVector(
            name=v["name"],
            txns=_resolve(v["txns"], transactions),
            valid=v["valid"],
            groups=tuple(v["groups"]) if "groups" in v else None,
            violation=_VIOLATIONS_BY_NAME[v["violation"]] if "violation" in v else None,
        )
        for v in data["segmentation"]
    )
    return ConformanceSuite(assign=assign, verify=verify, segmentation=segmentation)


def load_conformance_suite(path: Optional[Union[str, Path]] = None) -> ConformanceSuite:
    """
    Загрузка и валидация файла векторов.

    Args:
        path: Путь к JSON файлу (default: contracts/vectors/txn_group_vectors.json)

    Raises:
        FileNotFoundError: Если файл не найден
        json.JSONDecodeError: Если файл не является валидным JSON
        jsonschema.ValidationError: Если файл не соответствует контракту
    """
    vectors_path = Path(path) if path is not None else DEFAULT_VECTORS_PATH
    with open(vectors_path, "r", encoding="utf-8") as f:
        data = json.load(f)
    return parse_conformance_suite(data)


# =============================================================================
# RUNNING
# =============================================================================


def _run_assign(vector: AssignVector) -> ConformanceResult:
    group_id = compute_batch_group_id(vector.txns)
    if group_id != vector.group_id:
        return ConformanceResult(
            section="assign",
            name=vector.name,
            passed=False,
            detail=f"group id {digest_to_b64(group_id)}, expected {digest_to_b64(vector.group_id)}",
        )

    if vector.stamped is not None:
        stamped = assign_group_id(vector.txns)
        if len(stamped) != len(vector.stamped):
            return ConformanceResult(
                section="assign",
                name=vector.name,
                passed=False,
                detail=f"{len(stamped)} stamped transactions, expected {len(vector.stamped)}",
            )
        for i, (actual, expected) in enumerate(zip(stamped, vector.stamped)):
            if actual != expected:
                return ConformanceResult(
                    section="assign",
                    name=vector.name,
                    passed=False,
                    detail=f"stamped transaction at index {i} differs",
                )
    return ConformanceResult(section="assign", name=vector.name, passed=True)


def _run_verify(vector: VerifyVector) -> ConformanceResult:
    valid = verify_group_id(vector.txns)
    return ConformanceResult(
        section="verify",
        name=vector.name,
        passed=valid == vector.valid,
        detail="" if valid == vector.valid else f"got {valid}, expected {vector.valid}",
    )


def _run_segmentation(vector: SegmentationVector) -> ConformanceResult:
    try:
        groups = tuple(find_and_verify_txn_groups(vector.txns))
    except GroupingError as e:
        if vector.valid:
            return ConformanceResult(
                section="segmentation", name=vector.name, passed=False, detail=str(e)
            )
        if vector.violation is not None and e.violation != vector.violation:
            return ConformanceResult(
                section="segmentation",
                name=vector.name,
                passed=False,
                detail=f"violation {e.violation.name}, expected {vector.violation.name}",
            )
        return ConformanceResult(section="segmentation", name=vector.name, passed=True)

    if not vector.valid:
        return ConformanceResult(
            section="segmentation",
            name=vector.name,
            passed=False,
            detail=f"succeeded with {list(groups)} on invalid input",
        )
    return ConformanceResult(
        section="segmentation",
        name=vector.name,
        passed=groups == vector.groups,
        detail="" if groups == vector.groups else f"got {list(groups)}, expected {list(vector.groups)}",
    )


def run_conformance_suite(suite: ConformanceSuite) -> List[ConformanceResult]:
    """
    Прогон всех векторов suite.

    Returns:
        Результат для каждого вектора, в порядке assign → verify → segmentation

    Raises:
        DecodeError: Если вектор содержит некорректную транзакцию
    """
    results: List[ConformanceResult] = []
    results.extend(_run_assign(v) for v in suite.assign)
    results.extend(_run_verify(v) for v in suite.verify)
    results.extend(_run_segmentation(v) for v in suite.segmentation)

    failed = [r for r in results if not r.passed]
    for result in failed:
        logger.warning("Vector %s/%s failed: %s", result.section, result.name, result.detail)
    logger.info("Conformance: %d/%d vectors passed", len(results) - len(failed), len(results))
    return results
