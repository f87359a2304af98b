from __future__ import annotations

import random
from itertools import count

from custom_components.program_builder.circuits import create_circuit, create_group
from custom_components.program_builder.document import ProgramDocument
from custom_components.program_builder.models import Program, Week, Workout, create_sample_program


def _id_factory():
    ids = count(1)
    return lambda: f"id{next(ids)}"


def _document() -> ProgramDocument:
    return ProgramDocument(id_factory=_id_factory())


def test_add_week_then_workout_numbers_days() -> None:
    doc = _document()
    week_id = doc.add_week()

    workouts = doc.week_workouts(week_id)
    assert len(workouts) == 1
    assert workouts[0].day == 1
    assert workouts[0].week_id == week_id

    workout_id = doc.add_workout(week_id)
    assert doc.get_workout(workout_id).day == 2
    assert doc.get_week(week_id).name == "Week 1"
    assert doc.check_integrity() == []


def test_unresolved_ids_leave_program_untouched() -> None:
    doc = _document()
    doc.add_week()
    before = doc.program.as_dict()

    assert doc.add_workout("missing") is None
    assert doc.add_exercise("missing") is None
    assert doc.add_set("missing", "missing") is None
    assert doc.update_exercise("missing", "missing", {"name": "x"}) is False
    assert doc.delete_workout("missing", "missing") is False
    assert doc.move_workout("missing", "a", "b") is False
    assert doc.delete_week("missing") is False

    assert doc.program.as_dict() == before


def test_delete_workout_is_a_soft_unlink() -> None:
    doc = _document()
    week_id = doc.add_week()
    workout_id = doc.add_workout(week_id)

    assert doc.delete_workout(week_id, workout_id) is True
    assert workout_id not in doc.get_week(week_id).workout_ids
    assert workout_id in doc.program.workouts
    assert doc.check_integrity() == []

    assert doc.collect_unreferenced_workouts() == [workout_id]
    assert workout_id not in doc.program.workouts
    assert doc.collect_unreferenced_workouts() == []


def test_delete_week_keeps_workouts_unless_asked() -> None:
    doc = _document()
    first = doc.add_week()
    second = doc.add_week()
    kept = doc.get_week(first).workout_ids[0]
    dropped = doc.get_week(second).workout_ids[0]

    doc.delete_week(first)
    assert kept in doc.program.workouts
    assert doc.get_week(second).order == 0

    doc.delete_week(second, delete_workouts=True)
    assert dropped not in doc.program.workouts
    assert doc.program.weeks == []


def test_deleting_circuit_header_cascades_to_members_only() -> None:
    doc = _document()
    week_id = doc.add_week()
    workout = doc.week_workouts(week_id)[0]
    standalone = workout.exercises[0].id
    circuit_id = create_circuit(doc, workout.id)
    other_circuit = create_circuit(doc, workout.id)
    header = workout.exercises[1]
    assert header.is_circuit and header.circuit_id == circuit_id

    assert doc.delete_exercise(workout.id, header.id) is True

    assert all(ex.circuit_id != circuit_id for ex in workout.exercises)
    assert workout.exercises[0].id == standalone
    assert len(workout.exercises) == 1 + 3
    assert circuit_id not in workout.circuits
    assert other_circuit in workout.circuits
    assert doc.check_integrity() == []


def test_deleting_a_member_keeps_the_rest_of_the_circuit() -> None:
    doc = _document()
    week_id = doc.add_week()
    workout = doc.week_workouts(week_id)[0]
    circuit_id = create_circuit(doc, workout.id)
    member = workout.circuits[circuit_id][1]

    doc.delete_exercise(workout.id, member)

    assert len(workout.circuits[circuit_id]) == 2
    assert doc.check_integrity() == []


def test_update_exercise_ignores_structural_fields() -> None:
    doc = _document()
    week_id = doc.add_week()
    workout = doc.week_workouts(week_id)[0]
    exercise = workout.exercises[0]

    assert doc.update_exercise(workout.id, exercise.id, {"name": "Squat", "is_circuit": True, "id": "x"})
    assert exercise.name == "Squat"
    assert exercise.is_circuit is False
    assert exercise.id != "x"


def test_update_set_and_delete_last_set() -> None:
    doc = _document()
    week_id = doc.add_week()
    workout = doc.week_workouts(week_id)[0]
    exercise = workout.exercises[0]
    set_id = exercise.sets[0].id

    assert doc.update_set(workout.id, exercise.id, set_id, {"reps": "10,8,8,6", "weight": 135})
    assert exercise.sets[0].reps == "10,8,8,6"
    assert exercise.sets[0].weight == "135"

    assert doc.delete_set(workout.id, exercise.id, set_id) is True
    assert exercise.sets == []
    assert doc.delete_set(workout.id, exercise.id, set_id) is False


def test_move_workout_takes_next_day_slot() -> None:
    doc = _document()
    source = doc.add_week()
    target = doc.add_week()
    workout_id = doc.get_week(source).workout_ids[0]

    assert doc.move_workout(workout_id, source, target) is True

    workout = doc.get_workout(workout_id)
    assert workout.week_id == target
    assert workout.day == 2
    assert doc.get_week(source).workout_ids == []
    assert doc.check_integrity() == []


def test_move_week_renumbers_order() -> None:
    doc = _document()
    first, second, third = doc.add_week(), doc.add_week(), doc.add_week()

    doc.move_week(third, 0)

    assert [w.id for w in doc.program.weeks] == [third, first, second]
    assert [w.order for w in doc.program.weeks] == [0, 1, 2]


def test_move_week_with_bad_index_is_a_no_op() -> None:
    doc = _document()
    first, second = doc.add_week(), doc.add_week()

    assert doc.move_week(second, "first") is False
    assert doc.move_week(second, None) is False
    assert [w.id for w in doc.program.weeks] == [first, second]


def test_update_workout_merges_known_fields_only() -> None:
    doc = _document()
    week_id = doc.add_week()
    workout = doc.week_workouts(week_id)[0]
    exercises = list(workout.exercises)

    assert doc.update_workout(
        workout.id, {"name": "Lower body", "week_id": "elsewhere", "exercises": [], "id": "x", "color": "red"}
    )
    assert workout.name == "Lower body"
    assert workout.week_id == week_id
    assert workout.exercises == exercises
    assert workout.id != "x"
    assert doc.check_integrity() == []


def test_update_workout_keeps_day_one_based() -> None:
    doc = _document()
    week_id = doc.add_week()
    workout = doc.week_workouts(week_id)[0]

    assert doc.update_workout(workout.id, {"day": 3}) is True
    assert workout.day == 3

    doc.update_workout(workout.id, {"day": 0})
    assert workout.day == 1
    doc.update_workout(workout.id, {"day": -4})
    assert workout.day == 1
    doc.update_workout(workout.id, {"day": "soon"})
    assert workout.day == 1

    reloaded = Program.from_dict(doc.program.as_dict())
    assert reloaded.workouts[workout.id].day == workout.day


def test_update_workout_unknown_id_is_a_no_op() -> None:
    doc = _document()
    doc.add_week()
    before = doc.program.as_dict()

    assert doc.update_workout("missing", {"name": "x", "day": 2}) is False
    assert doc.program.as_dict() == before


def test_update_program_renames_but_keeps_structure() -> None:
    doc = _document()
    week_id = doc.add_week()
    program_id = doc.program.id
    changes = []
    doc.add_listener(lambda: changes.append(True))

    assert doc.update_program({"name": "Strength block", "id": "x", "weeks": [], "workouts": {}}) is True
    assert doc.program.name == "Strength block"
    assert doc.program.id == program_id
    assert [w.id for w in doc.program.weeks] == [week_id]
    assert len(doc.program.workouts) == 1
    assert changes == [True]

    doc.update_program({"name": "Strength block"})
    assert changes == [True]


def test_update_exercise_rejects_unknown_choices() -> None:
    doc = _document()
    week_id = doc.add_week()
    workout = doc.week_workouts(week_id)[0]
    exercise = workout.exercises[0]

    assert doc.update_exercise(workout.id, exercise.id, {"rep_type": "bogus", "intensity_type": "percent"})
    assert exercise.rep_type == "fixed"
    assert exercise.intensity_type == "percent"

    doc.update_exercise(workout.id, exercise.id, {"rep_type": "time", "weight_type": "stones"})
    assert exercise.rep_type == "time"
    assert exercise.weight_type == "pounds"


def test_insert_week_appends_week_and_its_workouts() -> None:
    doc = _document()
    doc.add_week()
    workout = Workout(id="loaded-workout", name="Loaded", day=1, week_id="loaded-week")
    week = Week(id="loaded-week", name="Loaded week", order=1, workout_ids=[workout.id])

    doc.insert_week(week, [workout])

    assert doc.program.weeks[-1] is week
    assert doc.get_workout(workout.id) is workout
    assert doc.week_workouts(week.id) == [workout]
    assert doc.check_integrity() == []


def test_duplicate_circuit_header_copies_whole_block() -> None:
    doc = _document()
    week_id = doc.add_week()
    workout = doc.week_workouts(week_id)[0]
    circuit_id = create_circuit(doc, workout.id)
    header_id = workout.circuits[circuit_id][0]

    copy_id = doc.duplicate_exercise(workout.id, header_id)

    copy = workout.find_exercise(copy_id)
    assert copy.is_circuit
    assert copy.circuit_id != circuit_id
    assert len(workout.circuits[copy.circuit_id]) == 3
    assert len(workout.exercises) == 1 + 3 + 3
    assert doc.check_integrity() == []


def test_duplicate_circuit_member_renumbers_member_order() -> None:
    doc = _document()
    week_id = doc.add_week()
    workout = doc.week_workouts(week_id)[0]
    circuit_id = create_circuit(doc, workout.id)
    first_member = workout.circuits[circuit_id][1]

    copy_id = doc.duplicate_exercise(workout.id, first_member)

    members = [workout.find_exercise(eid) for eid in workout.circuits[circuit_id][1:]]
    assert [m.id for m in members][:2] == [first_member, copy_id]
    assert [m.circuit_order for m in members] == [0, 1, 2]
    assert doc.check_integrity() == []


def test_group_and_ungroup() -> None:
    doc = _document()
    week_id = doc.add_week()
    workout = doc.week_workouts(week_id)[0]
    first = workout.exercises[0].id
    second = doc.add_exercise(workout.id)

    group_id = doc.create_group(workout.id, [first, second], "Warm-up")
    assert workout.exercises[0].id == group_id
    assert workout.exercises[0].is_group
    assert all(workout.find_exercise(eid).group_id == group_id for eid in (first, second))
    assert doc.create_group(workout.id, [first]) is None

    assert doc.ungroup(workout.id, group_id) is True
    assert [ex.id for ex in workout.exercises] == [first, second]
    assert workout.find_exercise(first).group_id is None


def test_deleting_group_header_removes_members() -> None:
    doc = _document()
    week_id = doc.add_week()
    workout = doc.week_workouts(week_id)[0]
    first = workout.exercises[0].id
    second = doc.add_exercise(workout.id)
    loner = doc.add_exercise(workout.id)
    group_id = doc.create_group(workout.id, [first, second])

    doc.delete_exercise(workout.id, group_id)

    assert [ex.id for ex in workout.exercises] == [loner]


def test_listeners_fire_on_change_and_can_be_removed() -> None:
    doc = _document()
    calls: list[int] = []
    remove = doc.add_listener(lambda: calls.append(1))

    week_id = doc.add_week()
    doc.update_week(week_id, {"name": "Week 1"})
    assert len(calls) == 1

    doc.update_week(week_id, {"name": "Deload"})
    assert len(calls) == 2

    remove()
    doc.add_week()
    assert len(calls) == 2


def test_sample_program_is_consistent_and_round_trips() -> None:
    program = create_sample_program(_id_factory())
    doc = ProgramDocument(program)

    assert doc.check_integrity() == []
    assert [w.name for w in doc.week_workouts(program.weeks[0].id)] == ["Upper Body", "Lower Body"]
    assert Program.from_dict(program.as_dict()).as_dict() == program.as_dict()


def test_check_integrity_reports_broken_references() -> None:
    doc = _document()
    week_id = doc.add_week()
    doc.get_week(week_id).workout_ids.append("ghost")
    workout = doc.week_workouts(week_id)[0]
    workout.exercises[0].is_in_circuit = True
    workout.exercises[0].circuit_id = "nowhere"

    problems = doc.check_integrity()

    assert any("ghost" in p for p in problems)
    assert any("nowhere" in p for p in problems)


def test_random_edit_sequences_keep_references_consistent() -> None:
    rng = random.Random(20240601)
    doc = _document()
    variants = ["circuit", "superset", "emom", "amrap", "tabata"]

    for _step in range(400):
        weeks = doc.program.weeks
        op = rng.choice(
            ["add_week", "add_workout", "add_exercise", "circuit", "delete_exercise", "duplicate",
             "delete_workout", "move_workout", "delete_week", "move_week", "clone_workout", "collect"]
        )
        if op == "add_week" or not weeks:
            doc.add_week()
            continue
        week = rng.choice(weeks)
        workouts = doc.week_workouts(week.id)
        if op == "add_workout":
            doc.add_workout(week.id)
        elif op == "delete_week":
            doc.delete_week(week.id, delete_workouts=rng.random() < 0.5)
        elif op == "move_week":
            doc.move_week(week.id, rng.randrange(len(weeks)))
        elif op == "collect":
            doc.collect_unreferenced_workouts()
        elif not workouts:
            doc.add_workout(week.id)
        else:
            workout = rng.choice(workouts)
            if op == "add_exercise":
                doc.add_exercise(workout.id)
            elif op == "circuit":
                create_group(doc, workout.id, rng.choice(variants))
            elif op in ("delete_exercise", "duplicate") and workout.exercises:
                exercise = rng.choice(workout.exercises)
                if op == "delete_exercise":
                    doc.delete_exercise(workout.id, exercise.id)
                else:
                    doc.duplicate_exercise(workout.id, exercise.id)
            elif op == "delete_workout":
                doc.delete_workout(week.id, workout.id)
            elif op == "move_workout":
                doc.move_workout(workout.id, week.id, rng.choice(weeks).id)
            elif op == "clone_workout":
                doc.clone_workout(workout.id)

        assert doc.check_integrity() == [], op
