import pytest

from powerlifting_core import (
    AttemptResult,
    AttemptStatus,
    LiftType,
    RecordedAttempt,
    build_lifter,
    build_roster,
    discipline_ranking,
    discipline_winner,
    group_by_category,
    rank_lifters,
    weight_category,
    with_recorded_attempt,
)


def _participants():
    return [
        {
            "id": 1,
            "nombre": "Carlos",
            "apellido": "Mendoza",
            "peso": 82.5,
            "competenciaId": 7,
            "participaSentadilla": True,
            "participaBanca": True,
            "participaMuerto": False,
        },
        {
            "id": 2,
            "nombre": "Andrés",
            "apellido": "Silva",
            "peso": None,
            "competenciaId": 7,
            "participaSentadilla": True,
            "participaBanca": True,
            "participaMuerto": True,
        },
    ]


def _plans():
    return [
        {"id": "p1", "participanteId": 1, "tipo": "SENTADILLA", "peso1": 250, "peso2": 265, "peso3": 275},
        {"id": "p2", "participanteId": 1, "tipo": "BANCA", "peso1": 160, "peso2": 170, "peso3": 177.5},
        {"id": "p3", "participanteId": 1, "tipo": "MUERTO", "peso1": 280, "peso2": 295, "peso3": 310},
        {"id": "p4", "participanteId": 99, "tipo": "BANCA", "peso1": 100, "peso2": 110, "peso3": 120},
    ]


def _attempts():
    return [
        {"id": 10, "participanteId": 1, "tipo": "SENTADILLA", "numero": 1, "peso": 250, "resultado": "EXITO"},
        {"id": 11, "participanteId": 1, "tipo": "SENTADILLA", "numero": 2, "peso": 265, "resultado": "FALLO"},
        # Invalid attempt number: dropped at ingest.
        {"id": 12, "participanteId": 1, "tipo": "BANCA", "numero": 4, "peso": 160, "resultado": "EXITO"},
        {"id": 13, "participanteId": 99, "tipo": "BANCA", "numero": 1, "peso": 100, "resultado": "EXITO"},
    ]


def test_build_roster_projects_each_lift():
    roster = build_roster(_participants(), _plans(), _attempts())
    assert [lifter.id for lifter in roster] == ["1", "2"]

    carlos = roster[0]
    assert carlos.name == "Carlos Mendoza"
    assert carlos.category == "-83kg"
    squat = carlos.attempts[LiftType.SQUAT]
    assert [a.weight for a in squat] == [250, 265, 265]
    assert [a.status for a in squat] == [
        AttemptStatus.SUCCESS,
        AttemptStatus.FAILURE,
        AttemptStatus.PENDING,
    ]
    assert squat[0].id == 10
    assert [a.weight for a in carlos.attempts[LiftType.BENCH]] == [160, 170, 177.5]
    assert carlos.best_for(LiftType.SQUAT) == 250
    assert carlos.total == 250


def test_opted_out_lift_projects_zero_even_with_plan():
    carlos = build_roster(_participants(), _plans(), _attempts())[0]
    assert LiftType.DEADLIFT not in carlos.entered
    assert [a.weight for a in carlos.attempts[LiftType.DEADLIFT]] == [0, 0, 0]


def test_participant_without_plan_or_body_weight():
    andres = build_roster(_participants(), _plans(), _attempts())[1]
    assert andres.body_weight == 0.0
    assert andres.category == "-59kg"
    for lift in LiftType:
        assert [a.weight for a in andres.attempts[lift]] == [0, 0, 0]
    assert andres.total == 0


def test_build_roster_accepts_empty_input():
    assert build_roster([], [], []) == ()


@pytest.mark.parametrize(
    "body_weight,expected",
    [(55.0, "-59kg"), (59.0, "-59kg"), (59.1, "-66kg"), (83.0, "-83kg"), (120.0, "-120kg"), (120.5, "+120kg")],
)
def test_weight_category_boundaries(body_weight, expected):
    assert weight_category(body_weight) == expected


def test_with_recorded_attempt_returns_new_lifter():
    lifter = build_lifter(
        lifter_id="A",
        name="Ana",
        body_weight=63,
        plans={LiftType.SQUAT: (100, 110, 120)},
    )
    updated = with_recorded_attempt(lifter, LiftType.SQUAT, 1, AttemptResult.FAILURE)
    assert lifter.attempt(LiftType.SQUAT, 1).status is AttemptStatus.PENDING
    assert updated.attempt(LiftType.SQUAT, 1).status is AttemptStatus.FAILURE
    # Default weight is the projected one; attempt 2 repeats it.
    assert updated.attempt(LiftType.SQUAT, 2).weight == 100
    assert updated.recorded[LiftType.SQUAT][1] == RecordedAttempt(
        weight=100, result=AttemptResult.FAILURE
    )


def test_with_recorded_attempt_keeps_backend_id_on_correction():
    lifter = build_lifter(
        lifter_id="A",
        name="Ana",
        body_weight=63,
        plans={LiftType.BENCH: (50, 55, 60)},
        recorded={LiftType.BENCH: {1: RecordedAttempt(weight=50, result=AttemptResult.FAILURE, id=42)}},
    )
    corrected = with_recorded_attempt(lifter, LiftType.BENCH, 1, AttemptResult.SUCCESS, 52.5)
    first = corrected.attempt(LiftType.BENCH, 1)
    assert first.id == 42
    assert first.weight == 52.5
    assert corrected.best_for(LiftType.BENCH) == 52.5
    assert corrected.attempt(LiftType.BENCH, 2).weight == 55


def test_with_recorded_attempt_rejects_bad_input():
    lifter = build_lifter(
        lifter_id="A",
        name="Ana",
        body_weight=63,
        entered=[LiftType.SQUAT],
        plans={LiftType.SQUAT: (100, 110, 120)},
    )
    with pytest.raises(ValueError):
        with_recorded_attempt(lifter, LiftType.SQUAT, 4, AttemptResult.SUCCESS)
    with pytest.raises(ValueError):
        with_recorded_attempt(lifter, LiftType.BENCH, 1, AttemptResult.SUCCESS)


def test_bomb_out_zeroes_official_total():
    lifter = build_lifter(
        lifter_id="A",
        name="Ana",
        body_weight=63,
        entered=[LiftType.SQUAT, LiftType.BENCH],
        plans={LiftType.SQUAT: (100, 110, 120), LiftType.BENCH: (60, 65, 70)},
        recorded={
            LiftType.SQUAT: {1: RecordedAttempt(weight=100, result=AttemptResult.SUCCESS)},
            LiftType.BENCH: {
                1: RecordedAttempt(weight=60, result=AttemptResult.FAILURE),
                2: RecordedAttempt(weight=60, result=AttemptResult.FAILURE),
                3: RecordedAttempt(weight=60, result=AttemptResult.FAILURE),
            },
        },
    )
    assert lifter.total == 100
    assert lifter.is_bombed_out is True
    assert lifter.official_total == 0


def test_lift_in_progress_is_not_a_bomb_out():
    lifter = build_lifter(
        lifter_id="A",
        name="Ana",
        body_weight=63,
        plans={LiftType.SQUAT: (100, 110, 120)},
        recorded={LiftType.SQUAT: {1: RecordedAttempt(weight=100, result=AttemptResult.FAILURE)}},
    )
    assert lifter.is_bombed_out is False


def _ranked_roster():
    def lifter(lifter_id, body_weight, squat_best):
        return build_lifter(
            lifter_id=lifter_id,
            name=lifter_id,
            body_weight=body_weight,
            plans={LiftType.SQUAT: (squat_best, squat_best + 10, squat_best + 20)},
            recorded={
                LiftType.SQUAT: {1: RecordedAttempt(weight=squat_best, result=AttemptResult.SUCCESS)}
            },
        )

    return (
        lifter("A", 82.0, 200),
        lifter("B", 81.0, 200),
        lifter("C", 92.0, 250),
        lifter("D", 60.0, 150),
    )


def test_rank_lifters_by_total_then_body_weight():
    ranked = rank_lifters(_ranked_roster())
    assert [lifter.id for lifter in ranked] == ["C", "B", "A", "D"]


def test_discipline_winner_and_ranking():
    roster = _ranked_roster()
    assert discipline_winner(roster, LiftType.SQUAT).id == "C"
    assert [lifter.id for lifter in discipline_ranking(roster, LiftType.SQUAT)][:3] == ["C", "B", "A"]
    assert discipline_winner(roster, LiftType.BENCH) is None
    assert discipline_winner((), LiftType.SQUAT) is None


def test_group_by_category_keeps_ranking_inside_class():
    grouped = group_by_category(_ranked_roster())
    assert list(grouped.keys()) == ["-66kg", "-83kg", "-93kg"]
    assert [lifter.id for lifter in grouped["-83kg"]] == ["B", "A"]


def test_lifter_mappings_are_read_only():
    lifter = build_lifter(
        lifter_id="A",
        name="Ana",
        body_weight=63,
        plans={LiftType.SQUAT: (100, 110, 120)},
        recorded={LiftType.SQUAT: {1: RecordedAttempt(weight=100, result=AttemptResult.SUCCESS)}},
    )
    with pytest.raises(TypeError):
        lifter.best[LiftType.SQUAT] = 500
    with pytest.raises(TypeError):
        lifter.attempts[LiftType.BENCH] = ()
    with pytest.raises(TypeError):
        lifter.recorded[LiftType.SQUAT][2] = RecordedAttempt(weight=1, result=AttemptResult.SUCCESS)
    with pytest.raises(TypeError):
        hash(lifter)
    # Value equality still holds for identical inputs.
    assert lifter == build_lifter(
        lifter_id="A",
        name="Ana",
        body_weight=63,
        plans={LiftType.SQUAT: (100, 110, 120)},
        recorded={LiftType.SQUAT: {1: RecordedAttempt(weight=100, result=AttemptResult.SUCCESS)}},
    )


def test_rankings_order_numeric_ids_by_value():
    roster = tuple(
        build_lifter(lifter_id=lifter_id, name=lifter_id, body_weight=80, plans={})
        for lifter_id in ("10", "9", "2")
    )
    assert [lifter.id for lifter in rank_lifters(roster)] == ["2", "9", "10"]
