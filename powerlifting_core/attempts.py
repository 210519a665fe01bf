"""Attempt projection engine (per lifter, per lift type).

Turns a lifter's plan for one lift plus whatever attempts have been recorded
so far into exactly three attempts with a resolved weight and status.

Progression rules applied to every attempt that has not been recorded yet:
- Previous attempt failed: repeat its weight (the plan is ignored).
- Previous attempt succeeded: at least previous weight + 2.5 kg.
- First attempt (or previous still pending): planned weight as-is.

Recorded attempts are ground truth and pass through untouched, even when the
weight is not a multiple of 2.5 kg. Validation of new attempts lives in
validation.AttemptCreate, not here.

The projection is pure: same (plan, recorded) in, same tuple out.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Sequence

logger = logging.getLogger(__name__)


class LiftType(str, Enum):
    SQUAT = "squat"
    BENCH = "bench"
    DEADLIFT = "deadlift"

    @property
    def wire_name(self) -> str:
        """Backend name of this lift (TipoMovimiento)."""
        return _WIRE_BY_LIFT[self]

    @classmethod
    def from_wire(cls, value: str) -> "LiftType":
        """Accept backend names ('SENTADILLA') as well as our own ('squat')."""
        if isinstance(value, LiftType):
            return value
        key = str(value).strip()
        if key.upper() in _LIFT_BY_WIRE:
            return _LIFT_BY_WIRE[key.upper()]
        try:
            return cls(key.lower())
        except ValueError:
            raise ValueError(f"unknown lift type: {value!r}")


_WIRE_BY_LIFT = {
    LiftType.SQUAT: "SENTADILLA",
    LiftType.BENCH: "BANCA",
    LiftType.DEADLIFT: "MUERTO",
}
_LIFT_BY_WIRE = {wire: lift for lift, wire in _WIRE_BY_LIFT.items()}

LIFT_ORDER: tuple[LiftType, ...] = (LiftType.SQUAT, LiftType.BENCH, LiftType.DEADLIFT)


class AttemptResult(str, Enum):
    """Result stored by the backend (ResultadoIntento)."""

    PENDING = "PENDIENTE"
    SUCCESS = "EXITO"
    FAILURE = "FALLO"


class AttemptStatus(str, Enum):
    """Status of a projected attempt."""

    SUCCESS = "success"
    FAILURE = "failure"
    PENDING = "pending"


class ProgressionRules:
    """Federation progression constants (kg)."""

    ATTEMPTS_PER_LIFT = 3
    MIN_INCREMENT_KG = 2.5
    PLATE_STEP_KG = 2.5


MIN_INCREMENT_KG = ProgressionRules.MIN_INCREMENT_KG


@dataclass(frozen=True)
class RecordedAttempt:
    weight: float
    result: AttemptResult
    id: int | None = None


@dataclass(frozen=True)
class ProjectedAttempt:
    number: int
    weight: float
    status: AttemptStatus
    recorded: bool = False
    # Backend id of the recorded attempt, when known.
    id: int | None = None

    @property
    def is_pending(self) -> bool:
        return self.status is AttemptStatus.PENDING


def status_for_result(result: AttemptResult) -> AttemptStatus:
    if result is AttemptResult.SUCCESS:
        return AttemptStatus.SUCCESS
    if result is AttemptResult.FAILURE:
        return AttemptStatus.FAILURE
    if result is AttemptResult.PENDING:
        return AttemptStatus.PENDING
    raise ValueError(f"unknown attempt result: {result!r}")


def _planned_weight(planned: Sequence[float] | None, number: int) -> float:
    if not planned:
        return 0.0
    # Plans shorter than three attempts repeat their last weight.
    idx = min(number, len(planned)) - 1
    return float(planned[idx] or 0)


def _apply_progression(candidate: float, previous: ProjectedAttempt | None) -> float:
    if previous is None:
        return candidate
    if previous.status is AttemptStatus.FAILURE:
        return previous.weight
    if previous.status is AttemptStatus.SUCCESS:
        floor = previous.weight + ProgressionRules.MIN_INCREMENT_KG
        return max(candidate, floor)
    return candidate


def project_attempts(
    planned: Sequence[float] | None,
    recorded: Mapping[int, RecordedAttempt] | None = None,
) -> tuple[ProjectedAttempt, ...]:
    """
    Project the three attempts of one lift.

    Args:
      planned: planned weights for attempts 1..3, or None when no plan exists.
      recorded: sparse mapping attempt number -> RecordedAttempt.

    Returns:
      Exactly three ProjectedAttempt values, attempt 1 first.

    Raises:
      ValueError: a recorded attempt number is outside 1..3.
    """
    recorded = recorded or {}
    total = ProgressionRules.ATTEMPTS_PER_LIFT
    for number in recorded:
        if not isinstance(number, int) or isinstance(number, bool) or not 1 <= number <= total:
            raise ValueError(f"attempt number must be 1..{total}, got {number!r}")

    attempts: list[ProjectedAttempt] = []
    previous: ProjectedAttempt | None = None
    for number in range(1, total + 1):
        executed = recorded.get(number)
        if executed is not None:
            current = ProjectedAttempt(
                number=number,
                weight=float(executed.weight),
                status=status_for_result(executed.result),
                recorded=True,
                id=executed.id,
            )
        else:
            candidate = _planned_weight(planned, number)
            weight = _apply_progression(candidate, previous)
            if weight != candidate:
                logger.debug(
                    "attempt %s: planned %s overridden to %s (previous %s)",
                    number,
                    candidate,
                    weight,
                    previous.status.value if previous else None,
                )
            current = ProjectedAttempt(
                number=number, weight=weight, status=AttemptStatus.PENDING
            )
        attempts.append(current)
        previous = current
    return tuple(attempts)


def best_successful_weight(attempts: Sequence[ProjectedAttempt]) -> float:
    """Heaviest successful attempt, 0 when none succeeded."""
    return max(
        (a.weight for a in attempts if a.status is AttemptStatus.SUCCESS),
        default=0.0,
    )
