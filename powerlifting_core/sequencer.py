"""Competition sequencer: whose turn is it, and what happens after a result.

The current turn is always derived from the roster (recorded attempts), never
trusted from a cached client pointer:
- Lifts in fixed order (squat -> bench -> deadlift), rounds 1..3 per lift.
- Per (lift, round) the lifting order holds lifters with attempt weight > 0,
  sorted by attempt weight asc, then body weight asc, then lifter id
  (numeric ids by value).
- The first pending attempt in that scan is the spotlight.
- Nothing pending anywhere: finished, reported at the last lift / round 3.

Recording a result returns a new roster (value semantics) together with the
next turn and the transition the UI should surface (next lifter, round
rankings, discipline winner, final results).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Sequence

from .attempts import LIFT_ORDER, AttemptResult, LiftType, ProgressionRules
from .roster import (
    Lifter,
    find_lifter,
    id_sort_key,
    replace_lifter,
    with_recorded_attempt,
)
from .types import CachedTurnPointer

logger = logging.getLogger(__name__)


class Transition(str, Enum):
    NEXT_LIFTER = "next_lifter"
    ROUND_COMPLETE = "round_complete"
    DISCIPLINE_COMPLETE = "discipline_complete"
    COMPETITION_FINISHED = "competition_finished"


@dataclass(frozen=True)
class CurrentTurn:
    lift: LiftType
    round: int
    # Position of the lifter in lifting_order(roster, lift, round).
    lifter_index: int
    lifter_id: str | None
    finished: bool = False

    def to_pointer(self) -> CachedTurnPointer:
        """Shape stored client-side as a resume hint."""
        pointer: CachedTurnPointer = {
            "lift": self.lift.value,
            "round": self.round,
            "finished": self.finished,
        }
        if self.lifter_id is not None:
            pointer["lifterId"] = self.lifter_id
        return pointer


@dataclass(frozen=True)
class RecordOutcome:
    """Result of recording an attempt for the spotlighted lifter."""

    roster: tuple[Lifter, ...]
    lifter: Lifter
    previous: CurrentTurn
    turn: CurrentTurn
    transition: Transition
    # Set when a round / discipline just closed (for the ranking overlays).
    completed_round: int | None = None
    completed_lift: LiftType | None = None


def lifting_order(
    roster: Sequence[Lifter], lift: LiftType, round_number: int
) -> list[Lifter]:
    """Eligible lifters for (lift, round), lightest bar first."""
    eligible = [
        lifter for lifter in roster if lifter.attempt(lift, round_number).weight > 0
    ]
    return sorted(
        eligible,
        key=lambda lifter: (
            lifter.attempt(lift, round_number).weight,
            lifter.body_weight,
            id_sort_key(lifter.id),
        ),
    )


def _finished_turn(lift_order: Sequence[LiftType]) -> CurrentTurn:
    return CurrentTurn(
        lift=lift_order[-1],
        round=ProgressionRules.ATTEMPTS_PER_LIFT,
        lifter_index=0,
        lifter_id=None,
        finished=True,
    )


def find_current_turn(
    roster: Sequence[Lifter], lift_order: Sequence[LiftType] = LIFT_ORDER
) -> CurrentTurn:
    """First pending attempt in competition order, or a finished turn."""
    if not lift_order:
        raise ValueError("lift_order must name at least one lift")
    for lift in lift_order:
        for round_number in range(1, ProgressionRules.ATTEMPTS_PER_LIFT + 1):
            for idx, lifter in enumerate(lifting_order(roster, lift, round_number)):
                if lifter.attempt(lift, round_number).is_pending:
                    return CurrentTurn(
                        lift=lift,
                        round=round_number,
                        lifter_index=idx,
                        lifter_id=lifter.id,
                    )
    return _finished_turn(lift_order)


def on_deck(roster: Sequence[Lifter], turn: CurrentTurn) -> Lifter | None:
    """Next pending lifter after the spotlight in the same lifting order."""
    if turn.finished:
        return None
    order = lifting_order(roster, turn.lift, turn.round)
    for lifter in order[turn.lifter_index + 1 :]:
        if lifter.attempt(turn.lift, turn.round).is_pending:
            return lifter
    return None


def _classify(
    previous: CurrentTurn, turn: CurrentTurn, lift_order: Sequence[LiftType]
) -> Transition:
    if turn.finished:
        return Transition.COMPETITION_FINISHED
    prev_lift_idx = lift_order.index(previous.lift)
    lift_idx = lift_order.index(turn.lift)
    if lift_idx > prev_lift_idx:
        return Transition.DISCIPLINE_COMPLETE
    if lift_idx == prev_lift_idx and turn.round > previous.round:
        return Transition.ROUND_COMPLETE
    # Same round, or an earlier attempt reopened by a correction.
    return Transition.NEXT_LIFTER


def record_result(
    roster: Sequence[Lifter],
    turn: CurrentTurn,
    result: AttemptResult,
    weight: float | None = None,
    *,
    lift_order: Sequence[LiftType] = LIFT_ORDER,
) -> RecordOutcome:
    """
    Record the spotlighted lifter's attempt and derive what comes next.

    Args:
      roster: current roster (not mutated).
      turn: the spotlight being judged.
      result: EXITO or FALLO.
      weight: weight actually lifted; defaults to the projected weight.

    Raises:
      ValueError: finished turn, unknown lifter, PENDIENTE result, a turn
        lift missing from lift_order, or the attempt is no longer pending
        (already judged).
    """
    if turn.finished or turn.lifter_id is None:
        raise ValueError("competition is finished; no attempt to record")
    if result is AttemptResult.PENDING:
        raise ValueError("record_result requires a success or failure result")
    if turn.lift not in lift_order:
        raise ValueError(
            f"turn lift {turn.lift.value} is not part of lift_order "
            f"{[lift.value for lift in lift_order]}"
        )

    lifter = find_lifter(roster, turn.lifter_id)
    attempt = lifter.attempt(turn.lift, turn.round)
    if not attempt.is_pending:
        raise ValueError(
            f"attempt {turn.round} of {turn.lift.value} for lifter {lifter.id} "
            f"is already {attempt.status.value}"
        )

    updated = with_recorded_attempt(lifter, turn.lift, turn.round, result, weight)
    new_roster = replace_lifter(roster, updated)
    next_turn = find_current_turn(new_roster, lift_order)
    transition = _classify(turn, next_turn, lift_order)

    completed_round = None
    completed_lift = None
    if transition is not Transition.NEXT_LIFTER:
        completed_round = turn.round
    if transition in (Transition.DISCIPLINE_COMPLETE, Transition.COMPETITION_FINISHED):
        completed_lift = turn.lift

    logger.info(
        "Recorded %s for lifter %s (%s round %s): %s",
        result.value,
        lifter.id,
        turn.lift.value,
        turn.round,
        transition.value,
    )
    return RecordOutcome(
        roster=new_roster,
        lifter=updated,
        previous=turn,
        turn=next_turn,
        transition=transition,
        completed_round=completed_round,
        completed_lift=completed_lift,
    )


def correct_attempt(
    roster: Sequence[Lifter],
    lifter_id: str,
    lift: LiftType,
    attempt_number: int,
    result: AttemptResult,
    weight: float | None = None,
) -> tuple[Lifter, ...]:
    """
    Admin override of any attempt (weight and/or result).

    Returns the new roster; callers re-derive the turn with find_current_turn().
    """
    lifter = find_lifter(roster, lifter_id)
    updated = with_recorded_attempt(lifter, lift, attempt_number, result, weight)
    logger.info(
        "Corrected attempt %s of %s for lifter %s: %s",
        attempt_number,
        lift.value,
        lifter.id,
        result.value,
    )
    return replace_lifter(roster, updated)


def _pointer_matches(cached: Mapping[str, Any], turn: CurrentTurn) -> bool:
    try:
        cached_lift = LiftType.from_wire(cached.get("lift"))
    except ValueError:
        return False
    if cached_lift is not turn.lift or cached.get("round") != turn.round:
        return False
    if bool(cached.get("finished", False)) != turn.finished:
        return False
    if turn.finished:
        return True
    return str(cached.get("lifterId")) == turn.lifter_id


def resume_turn(
    roster: Sequence[Lifter],
    cached: CachedTurnPointer | Mapping[str, Any] | None,
    lift_order: Sequence[LiftType] = LIFT_ORDER,
) -> tuple[CurrentTurn, bool]:
    """
    Resume after a reload.

    The cached pointer is only a hint: the turn is always recomputed from the
    roster. Returns (turn, cache_was_current); a stale pointer is discarded.
    """
    turn = find_current_turn(roster, lift_order)
    if not cached:
        return turn, False
    if _pointer_matches(cached, turn):
        return turn, True
    logger.debug("Discarding stale cached turn %s; derived %s", dict(cached), turn)
    return turn, False
