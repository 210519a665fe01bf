"""
Input validation schemas using Pydantic v2
Validates backend records (participants, lift plans, attempts) before projection
"""

import logging
import re
from typing import List, Optional, Self

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from .attempts import AttemptResult, LiftType, ProgressionRules

logger = logging.getLogger(__name__)

# ==================== VALIDATOR FUNCTIONS ====================


def _coerce_lift(v):
    if v is None or isinstance(v, LiftType):
        return v
    return LiftType.from_wire(v)


def _coerce_result(v):
    if v is None or isinstance(v, AttemptResult):
        return v
    key = str(v).strip().upper()
    aliases = {
        "SUCCESS": AttemptResult.SUCCESS,
        "VALID": AttemptResult.SUCCESS,
        "FAILURE": AttemptResult.FAILURE,
        "INVALID": AttemptResult.FAILURE,
        "PENDING": AttemptResult.PENDING,
    }
    if key in aliases:
        return aliases[key]
    return AttemptResult(key)


def _is_plate_multiple(weight: float) -> bool:
    steps = weight / ProgressionRules.PLATE_STEP_KG
    return abs(steps - round(steps)) < 1e-9


def _check_creation_weight(v: float, field: str) -> float:
    if v <= 0:
        raise ValueError(f"{field} must be positive")
    if not _is_plate_multiple(v):
        raise ValueError(
            f"{field} must be a multiple of {ProgressionRules.PLATE_STEP_KG} kg, got {v}"
        )
    return v


# ==================== INGEST MODELS ====================


class ParticipantRecord(BaseModel):
    """Participant as fetched from the backend"""

    id: int
    first_name: str = Field("", alias="nombre", max_length=255)
    last_name: str = Field("", alias="apellido", max_length=255)
    body_weight: float = Field(0.0, alias="peso", ge=0, le=500)
    competition_id: Optional[int] = Field(None, alias="competenciaId")

    # Per-discipline opt-in flags (backend defaults them to True)
    squat: bool = Field(True, alias="participaSentadilla")
    bench: bool = Field(True, alias="participaBanca")
    deadlift: bool = Field(True, alias="participaMuerto")

    @field_validator("body_weight", mode="before")
    @classmethod
    def default_missing_body_weight(cls, v):
        # peso is nullable in the backend
        return 0.0 if v is None else v

    @field_validator("first_name", "last_name", mode="before")
    @classmethod
    def sanitize_names(cls, v):
        if v is None:
            return ""
        return InputSanitizer.sanitize_person_name(str(v))

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def participates_in(self, lift: LiftType) -> bool:
        if lift is LiftType.SQUAT:
            return self.squat
        if lift is LiftType.BENCH:
            return self.bench
        if lift is LiftType.DEADLIFT:
            return self.deadlift
        raise ValueError(f"unknown lift type: {lift!r}")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class LiftPlanRecord(BaseModel):
    """Lift plan (levantamiento) as fetched from the backend"""

    participant_id: int = Field(..., alias="participanteId")
    lift: LiftType = Field(..., alias="tipo")
    weight1: float = Field(0.0, alias="peso1", ge=0)
    weight2: float = Field(0.0, alias="peso2", ge=0)
    weight3: float = Field(0.0, alias="peso3", ge=0)

    @field_validator("lift", mode="before")
    @classmethod
    def coerce_lift(cls, v):
        return _coerce_lift(v)

    @property
    def weights(self) -> tuple[float, float, float]:
        return (self.weight1, self.weight2, self.weight3)

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class AttemptRecord(BaseModel):
    """
    Recorded attempt (intento) as fetched from the backend.

    Weights are not checked against the plate step: whatever was recorded
    is historical fact and the projector must see it unchanged.
    """

    id: Optional[int] = None
    participant_id: int = Field(..., alias="participanteId")
    lift: LiftType = Field(..., alias="tipo")
    number: int = Field(..., alias="numero", ge=1, le=ProgressionRules.ATTEMPTS_PER_LIFT)
    weight: float = Field(..., alias="peso", ge=0)
    result: AttemptResult = Field(AttemptResult.PENDING, alias="resultado")

    @field_validator("lift", mode="before")
    @classmethod
    def coerce_lift(cls, v):
        return _coerce_lift(v)

    @field_validator("result", mode="before")
    @classmethod
    def coerce_result(cls, v):
        if v is None:
            return AttemptResult.PENDING
        return _coerce_result(v)

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


# ==================== CREATION MODELS ====================


class LiftPlanCreate(LiftPlanRecord):
    """Strict lift plan for creation: positive plate-step multiples only"""

    @model_validator(mode="after")
    def validate_weights(self) -> Self:
        _check_creation_weight(self.weight1, "peso1")
        _check_creation_weight(self.weight2, "peso2")
        _check_creation_weight(self.weight3, "peso3")
        return self


class AttemptCreate(AttemptRecord):
    """Strict attempt for creation/correction"""

    @field_validator("weight")
    @classmethod
    def validate_weight(cls, v: float) -> float:
        return _check_creation_weight(v, "peso")


class InputSanitizer:
    """Utility class for input sanitization"""

    @staticmethod
    def sanitize_string(value: str, max_length: int = 255) -> str:
        """Sanitize string input"""
        if not isinstance(value, str):
            return str(value)[:max_length]

        # Strip whitespace
        value = value.strip()

        # Limit length
        value = value[:max_length]

        # Remove null bytes
        value = value.replace("\0", "")

        return value

    @staticmethod
    def sanitize_person_name(name: str) -> str:
        """Sanitize a lifter name for display - preserve Spanish accents"""
        name = InputSanitizer.sanitize_string(name, 255)

        # Keep letters (including á, é, ñ, ü...), digits, spaces, dashes, apostrophes
        dangerous_chars = r'[<>{}[\]\\|;()&$`"\*\x00-\x1f\x7f]'
        name = re.sub(dangerous_chars, "", name)

        # Collapse internal whitespace
        return re.sub(r"\s+", " ", name).strip()


class RecordValidator:
    """Parse raw backend payloads into validated records"""

    @staticmethod
    def _parse(model: type[BaseModel], payload: dict, kind: str):
        try:
            return model.model_validate(payload)
        except ValidationError as e:
            logger.warning(f"{kind} validation failed: {e}")
            raise ValueError(f"Invalid {kind}: {str(e)}")

    @staticmethod
    def parse_participant(payload: dict) -> ParticipantRecord:
        return RecordValidator._parse(ParticipantRecord, payload, "participant")

    @staticmethod
    def parse_lift_plan(payload: dict) -> LiftPlanRecord:
        return RecordValidator._parse(LiftPlanRecord, payload, "lift plan")

    @staticmethod
    def parse_attempt(payload: dict) -> AttemptRecord:
        return RecordValidator._parse(AttemptRecord, payload, "attempt")

    @staticmethod
    def validate_new_attempt(payload: dict) -> AttemptCreate:
        """
        Validate an attempt about to be created or corrected

        Raises:
            ValueError: If validation fails
        """
        return RecordValidator._parse(AttemptCreate, payload, "attempt")

    @staticmethod
    def validate_new_lift_plan(payload: dict) -> LiftPlanCreate:
        return RecordValidator._parse(LiftPlanCreate, payload, "lift plan")

    @staticmethod
    def parse_many(payloads: List[dict], parser) -> list:
        """Parse a list, dropping (and logging) invalid entries"""
        parsed = []
        for i, payload in enumerate(payloads or []):
            try:
                parsed.append(parser(payload))
            except ValueError:
                logger.warning(f"Dropping invalid record at index {i}")
        return parsed


# ==================== EXPORT ====================

__all__ = [
    "ParticipantRecord",
    "LiftPlanRecord",
    "AttemptRecord",
    "LiftPlanCreate",
    "AttemptCreate",
    "InputSanitizer",
    "RecordValidator",
]
