"""
Group — Модели результата сегментации batch на группы

Immutable Pydantic модели:
- GroupRun: максимальный непрерывный участок batch с одним решением о группе
- GroupSegmentation: разбиение всего batch на runs + индексы групп по позициям
"""

from typing import Optional, Tuple

from pydantic import BaseModel, Field, field_validator, model_validator

from src.core.crypto.digest import DIGEST_SIZE, ZERO_DIGEST, digest_to_b64


# =============================================================================
# GROUP RUN
# =============================================================================


class GroupRun(BaseModel):
    """
    Run — непрерывный участок [start, end) batch.

    Либо все транзакции несут один и тот же ненулевой group id,
    либо run состоит из одной транзакции без group id.
    """

    index: int = Field(..., ge=0, description="Индекс группы (плотный, с 0)")
    start: int = Field(..., ge=0, description="Первая позиция run (включительно)")
    end: int = Field(..., gt=0, description="Позиция после последней (исключительно)")
    group_id: Optional[bytes] = Field(
        default=None, description="Group digest (None для транзакции без группы)"
    )

    model_config = {"frozen": True}

    @field_validator("group_id")
    @classmethod
    def validate_group_id(cls, v: Optional[bytes]) -> Optional[bytes]:
        if v is None:
            return v
        if len(v) != DIGEST_SIZE:
            raise ValueError(f"group_id must be {DIGEST_SIZE} bytes, got {len(v)}")
        if v == ZERO_DIGEST:
            raise ValueError("group_id must not be the zero digest, use None")
        return v

    @model_validator(mode="after")
    def validate_bounds(self) -> "GroupRun":
        if self.end <= self.start:
            raise ValueError(f"Empty run: start={self.start}, end={self.end}")
        if self.group_id is None and self.end - self.start != 1:
            raise ValueError(
                f"Unstamped run must be a singleton, got [{self.start}, {self.end})"
            )
        return self

    @property
    def size(self) -> int:
        return self.end - self.start

    @property
    def is_stamped(self) -> bool:
        return self.group_id is not None

    def group_id_b64(self) -> Optional[str]:
        """Group id в base64 (None для транзакции без группы)."""
        if self.group_id is None:
            return None
        return digest_to_b64(self.group_id)


# =============================================================================
# GROUP SEGMENTATION
# =============================================================================


class GroupSegmentation(BaseModel):
    """
    Результат сегментации batch.

    Инварианты:
    - runs покрывают [0, n) без пропусков и пересечений
    - индексы групп плотные: 0, 1, 2, ... по порядку runs
    - group_indices[i] == индекс run, содержащего позицию i
    """

    runs: Tuple[GroupRun, ...] = Field(default=(), description="Runs в порядке batch")
    group_indices: Tuple[int, ...] = Field(
        default=(), description="Индекс группы для каждой позиции batch"
    )

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_tiling(self) -> "GroupSegmentation":
        position = 0
        for expected_index, run in enumerate(self.runs):
            if run.index != expected_index:
                raise ValueError(
                    f"Run index {run.index} at position {position}, expected {expected_index}"
                )
            if run.start != position:
                raise ValueError(f"Run {run.index} starts at {run.start}, expected {position}")
            position = run.end

        if position != len(self.group_indices):
            raise ValueError(
                f"Runs cover {position} positions, batch has {len(self.group_indices)}"
            )

        for run in self.runs:
            for i in range(run.start, run.end):
                if self.group_indices[i] != run.index:
                    raise ValueError(
                        f"group_indices[{i}]={self.group_indices[i]} disagrees with run {run.index}"
                    )
        return self

    @property
    def group_count(self) -> int:
        return len(self.runs)

    def run_for(self, position: int) -> GroupRun:
        """
        Run, содержащий позицию batch.

        Raises:
            IndexError: Если позиция вне batch
        """
        if position < 0 or position >= len(self.group_indices):
            raise IndexError(f"Position {position} outside batch of {len(self.group_indices)}")
        return self.runs[self.group_indices[position]]
