"""Roster assembly: backend records -> immutable lifters with projected attempts.

Single place where participants, lift plans and recorded attempts meet:
- Plans/attempts are grouped by (participant, lift) and projected per lift.
- Bests and total are derived from the projected (recorded) attempts.
- Lifters are frozen values; recording an attempt returns a new lifter.
- Rankings used by the scoreboard (overall, per discipline) live here too.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping, Sequence

from .attempts import (
    LIFT_ORDER,
    AttemptResult,
    LiftType,
    ProgressionRules,
    ProjectedAttempt,
    RecordedAttempt,
    best_successful_weight,
    project_attempts,
)
from .types import AttemptPayload, LiftPlanPayload, ParticipantPayload
from .validation import (
    AttemptRecord,
    LiftPlanRecord,
    ParticipantRecord,
    RecordValidator,
)

logger = logging.getLogger(__name__)


# (label, upper bound in kg); None is the open class.
WEIGHT_CATEGORIES: tuple[tuple[str, float | None], ...] = (
    ("-59kg", 59),
    ("-66kg", 66),
    ("-74kg", 74),
    ("-83kg", 83),
    ("-93kg", 93),
    ("-105kg", 105),
    ("-120kg", 120),
    ("+120kg", None),
)


def weight_category(body_weight: float) -> str:
    for label, limit in WEIGHT_CATEGORIES:
        if limit is None or body_weight <= limit:
            return label
    return WEIGHT_CATEGORIES[-1][0]


def id_sort_key(lifter_id: str) -> tuple[int, int, str]:
    """Numeric backend ids sort by value ('9' before '10'), others by text."""
    if lifter_id.isascii() and lifter_id.isdigit():
        return (0, int(lifter_id), lifter_id)
    return (1, 0, lifter_id)


@dataclass(frozen=True)
class Lifter:
    """
    Immutable lifter value.

    Mapping fields are read-only views. Not hashable: key lifters by id.
    """

    __hash__ = None

    id: str
    name: str
    body_weight: float
    category: str
    entered: frozenset[LiftType]
    attempts: Mapping[LiftType, tuple[ProjectedAttempt, ...]]
    best: Mapping[LiftType, float]
    total: float
    # Inputs kept so the lifter can be re-projected after a new result.
    plans: Mapping[LiftType, tuple[float, ...]] = field(default_factory=dict, repr=False)
    recorded: Mapping[LiftType, Mapping[int, RecordedAttempt]] = field(
        default_factory=dict, repr=False
    )

    def attempt(self, lift: LiftType, round_number: int) -> ProjectedAttempt:
        if not 1 <= round_number <= ProgressionRules.ATTEMPTS_PER_LIFT:
            raise ValueError(f"round must be 1..3, got {round_number!r}")
        return self.attempts[lift][round_number - 1]

    def best_for(self, lift: LiftType) -> float:
        return self.best.get(lift, 0.0)

    @property
    def is_bombed_out(self) -> bool:
        """Finished an entered lift without a single good attempt."""
        for lift in self.entered:
            attempts = self.attempts[lift]
            if all(a.weight <= 0 for a in attempts):
                continue
            finished = not any(a.is_pending for a in attempts if a.weight > 0)
            if finished and self.best_for(lift) <= 0:
                return True
        return False

    @property
    def official_total(self) -> float:
        return 0.0 if self.is_bombed_out else self.total


def build_lifter(
    *,
    lifter_id: str,
    name: str,
    body_weight: float,
    entered: Iterable[LiftType] = LIFT_ORDER,
    plans: Mapping[LiftType, Sequence[float]] | None = None,
    recorded: Mapping[LiftType, Mapping[int, RecordedAttempt]] | None = None,
) -> Lifter:
    """
    Project every lift of one lifter and derive bests/total.

    Lifts the lifter is not entered in project to three weight-0 attempts,
    which keeps them out of every lifting order.
    """
    entered_set = frozenset(entered)
    plans = {lift: tuple(w) for lift, w in (plans or {}).items()}
    recorded = {lift: dict(r) for lift, r in (recorded or {}).items()}

    attempts: dict[LiftType, tuple[ProjectedAttempt, ...]] = {}
    best: dict[LiftType, float] = {}
    for lift in LIFT_ORDER:
        if lift in entered_set:
            projected = project_attempts(plans.get(lift), recorded.get(lift))
        else:
            projected = project_attempts(None, None)
        attempts[lift] = projected
        best[lift] = best_successful_weight(projected)

    return Lifter(
        id=str(lifter_id),
        name=name,
        body_weight=float(body_weight or 0),
        category=weight_category(float(body_weight or 0)),
        entered=entered_set,
        attempts=MappingProxyType(attempts),
        best=MappingProxyType(best),
        total=sum(best.values()),
        plans=MappingProxyType(plans),
        recorded=MappingProxyType(
            {lift: MappingProxyType(slots) for lift, slots in recorded.items()}
        ),
    )


def with_recorded_attempt(
    lifter: Lifter,
    lift: LiftType,
    attempt_number: int,
    result: AttemptResult,
    weight: float | None = None,
) -> Lifter:
    """
    Return a new lifter with one attempt recorded (or corrected).

    weight defaults to the attempt's currently projected weight, which is what
    the platform loads when a result is entered for the spotlighted lifter.
    """
    if not 1 <= attempt_number <= ProgressionRules.ATTEMPTS_PER_LIFT:
        raise ValueError(f"attempt number must be 1..3, got {attempt_number!r}")
    if lift not in lifter.entered:
        raise ValueError(f"lifter {lifter.id} is not entered in {lift.value}")
    if weight is None:
        weight = lifter.attempt(lift, attempt_number).weight
    existing = lifter.recorded.get(lift, {}).get(attempt_number)
    lift_recorded = dict(lifter.recorded.get(lift, {}))
    lift_recorded[attempt_number] = RecordedAttempt(
        weight=float(weight),
        result=result,
        id=existing.id if existing else None,
    )
    recorded = dict(lifter.recorded)
    recorded[lift] = lift_recorded
    return build_lifter(
        lifter_id=lifter.id,
        name=lifter.name,
        body_weight=lifter.body_weight,
        entered=lifter.entered,
        plans=lifter.plans,
        recorded=recorded,
    )


def _as_record(payload, parser, model):
    if isinstance(payload, model):
        return payload
    return parser(payload)


def build_roster(
    participants: Iterable[ParticipantPayload | ParticipantRecord],
    plans: Iterable[LiftPlanPayload | LiftPlanRecord] = (),
    attempts: Iterable[AttemptPayload | AttemptRecord] = (),
) -> tuple[Lifter, ...]:
    """
    Assemble the roster for one competition.

    Args:
      participants: participant payloads (dicts with backend keys) or ParticipantRecord.
      plans: lift plan payloads or LiftPlanRecord.
      attempts: attempt payloads or AttemptRecord.

    Invalid records are dropped with a warning; records pointing at unknown
    participants are ignored. Participant order is preserved.
    """
    parsed_participants: list[ParticipantRecord] = RecordValidator.parse_many(
        list(participants),
        lambda p: _as_record(p, RecordValidator.parse_participant, ParticipantRecord),
    )
    parsed_plans: list[LiftPlanRecord] = RecordValidator.parse_many(
        list(plans),
        lambda p: _as_record(p, RecordValidator.parse_lift_plan, LiftPlanRecord),
    )
    parsed_attempts: list[AttemptRecord] = RecordValidator.parse_many(
        list(attempts),
        lambda p: _as_record(p, RecordValidator.parse_attempt, AttemptRecord),
    )

    known_ids = {p.id for p in parsed_participants}
    plans_by: dict[int, dict[LiftType, tuple[float, ...]]] = {}
    for plan in parsed_plans:
        if plan.participant_id not in known_ids:
            logger.warning(f"Ignoring lift plan for unknown participant {plan.participant_id}")
            continue
        by_lift = plans_by.setdefault(plan.participant_id, {})
        if plan.lift in by_lift:
            logger.warning(
                f"Duplicate {plan.lift.value} plan for participant {plan.participant_id}; keeping first"
            )
            continue
        by_lift[plan.lift] = plan.weights

    recorded_by: dict[int, dict[LiftType, dict[int, RecordedAttempt]]] = {}
    for att in parsed_attempts:
        if att.participant_id not in known_ids:
            logger.warning(f"Ignoring attempt for unknown participant {att.participant_id}")
            continue
        by_lift = recorded_by.setdefault(att.participant_id, {})
        slots = by_lift.setdefault(att.lift, {})
        # Attempt numbers are unique per (participant, lift); last write wins.
        slots[att.number] = RecordedAttempt(weight=att.weight, result=att.result, id=att.id)

    roster = []
    for participant in parsed_participants:
        roster.append(
            build_lifter(
                lifter_id=str(participant.id),
                name=participant.display_name,
                body_weight=participant.body_weight,
                entered=[lift for lift in LIFT_ORDER if participant.participates_in(lift)],
                plans=plans_by.get(participant.id),
                recorded=recorded_by.get(participant.id),
            )
        )
    logger.debug(
        "Built roster: %d lifters, %d plans, %d attempts",
        len(roster),
        len(parsed_plans),
        len(parsed_attempts),
    )
    return tuple(roster)


def replace_lifter(roster: Sequence[Lifter], lifter: Lifter) -> tuple[Lifter, ...]:
    """New roster with the lifter of the same id swapped in."""
    if not any(item.id == lifter.id for item in roster):
        raise ValueError(f"unknown lifter id: {lifter.id!r}")
    return tuple(lifter if item.id == lifter.id else item for item in roster)


def find_lifter(roster: Sequence[Lifter], lifter_id: str) -> Lifter:
    for lifter in roster:
        if lifter.id == str(lifter_id):
            return lifter
    raise ValueError(f"unknown lifter id: {lifter_id!r}")


# ==================== RANKINGS ====================


def rank_lifters(roster: Sequence[Lifter]) -> list[Lifter]:
    """Overall ranking: total desc, lighter lifter first on equal total."""
    return sorted(
        roster,
        key=lambda lifter: (-lifter.total, lifter.body_weight, id_sort_key(lifter.id)),
    )


def discipline_ranking(roster: Sequence[Lifter], lift: LiftType) -> list[Lifter]:
    return sorted(
        roster,
        key=lambda lifter: (
            -lifter.best_for(lift),
            lifter.body_weight,
            id_sort_key(lifter.id),
        ),
    )


def discipline_winner(roster: Sequence[Lifter], lift: LiftType) -> Lifter | None:
    """Best lift in the discipline; None when nobody has a good lift."""
    ranking = discipline_ranking(roster, lift)
    if not ranking or ranking[0].best_for(lift) <= 0:
        return None
    return ranking[0]


def group_by_category(roster: Sequence[Lifter]) -> dict[str, list[Lifter]]:
    """Ranked lifters per weight category, categories in ascending order."""
    grouped: dict[str, list[Lifter]] = {label: [] for label, _ in WEIGHT_CATEGORIES}
    for lifter in rank_lifters(roster):
        grouped[lifter.category].append(lifter)
    return {label: lifters for label, lifters in grouped.items() if lifters}


__all__ = [
    "Lifter",
    "WEIGHT_CATEGORIES",
    "build_lifter",
    "build_roster",
    "discipline_ranking",
    "discipline_winner",
    "find_lifter",
    "id_sort_key",
    "group_by_category",
    "rank_lifters",
    "replace_lifter",
    "weight_category",
    "with_recorded_attempt",
]
