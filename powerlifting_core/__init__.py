from .attempts import (
    LIFT_ORDER,
    MIN_INCREMENT_KG,
    AttemptResult,
    AttemptStatus,
    LiftType,
    ProgressionRules,
    ProjectedAttempt,
    RecordedAttempt,
    best_successful_weight,
    project_attempts,
    status_for_result,
)
from .roster import (
    WEIGHT_CATEGORIES,
    Lifter,
    build_lifter,
    build_roster,
    discipline_ranking,
    discipline_winner,
    find_lifter,
    group_by_category,
    id_sort_key,
    rank_lifters,
    replace_lifter,
    weight_category,
    with_recorded_attempt,
)
from .sequencer import (
    CurrentTurn,
    RecordOutcome,
    Transition,
    correct_attempt,
    find_current_turn,
    lifting_order,
    on_deck,
    record_result,
    resume_turn,
)
from .types import AttemptPayload, CachedTurnPointer, LiftPlanPayload, ParticipantPayload
from .validation import (
    AttemptCreate,
    AttemptRecord,
    InputSanitizer,
    LiftPlanCreate,
    LiftPlanRecord,
    ParticipantRecord,
    RecordValidator,
)

__all__ = [
    "LIFT_ORDER",
    "MIN_INCREMENT_KG",
    "AttemptResult",
    "AttemptStatus",
    "LiftType",
    "ProgressionRules",
    "ProjectedAttempt",
    "RecordedAttempt",
    "best_successful_weight",
    "project_attempts",
    "status_for_result",
    "WEIGHT_CATEGORIES",
    "Lifter",
    "build_lifter",
    "build_roster",
    "discipline_ranking",
    "discipline_winner",
    "find_lifter",
    "group_by_category",
    "id_sort_key",
    "rank_lifters",
    "replace_lifter",
    "weight_category",
    "with_recorded_attempt",
    "CurrentTurn",
    "RecordOutcome",
    "Transition",
    "correct_attempt",
    "find_current_turn",
    "lifting_order",
    "on_deck",
    "record_result",
    "resume_turn",
    "AttemptPayload",
    "CachedTurnPointer",
    "LiftPlanPayload",
    "ParticipantPayload",
    "AttemptCreate",
    "AttemptRecord",
    "InputSanitizer",
    "LiftPlanCreate",
    "LiftPlanRecord",
    "ParticipantRecord",
    "RecordValidator",
]
