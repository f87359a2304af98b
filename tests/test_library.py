from __future__ import annotations

from itertools import count

from custom_components.program_builder.circuits import create_superset
from custom_components.program_builder.document import ProgramDocument
from custom_components.program_builder.library import (
    ProgramLibrary,
    load_program_from_library,
    load_week_to_program,
    load_workout_to_program,
    save_program_to_library,
    save_week_to_library,
    save_workout_to_library,
)
from custom_components.program_builder.models import Program, Workout


def _id_factory(prefix: str):
    ids = count(1)
    return lambda: f"{prefix}{next(ids)}"


def _workout_ids(workout: Workout) -> set[str]:
    found = {workout.id}
    for ex in workout.exercises:
        found.add(ex.id)
        found.update(s.id for s in ex.sets)
    return found


def _program_ids(program: Program) -> set[str]:
    found = {program.id, *(w.id for w in program.weeks)}
    for workout in program.workouts.values():
        found |= _workout_ids(workout)
    return found


def _two_day_week(doc: ProgramDocument) -> str:
    week_id = doc.add_week()
    doc.add_workout(week_id)
    return week_id


def test_week_save_and_load_mints_fresh_ids() -> None:
    source = ProgramDocument(id_factory=_id_factory("src"))
    week_id = _two_day_week(source)
    library = ProgramLibrary(id_factory=_id_factory("lib"))

    entry = save_week_to_library(library, source.program, week_id, "Base week")
    assert entry is not None
    assert entry.name == "Base week"
    assert len(entry.workouts) == 2
    library_ids = {entry.id}
    for workout in entry.workouts:
        assert workout.week_id == entry.id
        library_ids |= _workout_ids(workout)
    assert library_ids.isdisjoint(_program_ids(source.program))

    target = ProgramDocument(id_factory=_id_factory("dst"))
    new_week_id = load_week_to_program(target, library, entry.id)

    program = target.program
    assert len(program.weeks) == 1
    assert program.weeks[0].id == new_week_id
    assert program.weeks[0].order == 0
    assert len(program.workouts) == 2
    for workout in program.workouts.values():
        assert workout.week_id == new_week_id
        assert len(workout.exercises) == 1
        assert len(workout.exercises[0].sets) == 1
    assert _program_ids(program).isdisjoint(library_ids)
    assert target.check_integrity() == []


def test_loaded_week_is_appended_after_existing_weeks() -> None:
    doc = ProgramDocument(id_factory=_id_factory("a"))
    week_id = _two_day_week(doc)
    library = ProgramLibrary(id_factory=_id_factory("lib"))
    entry = save_week_to_library(library, doc.program, week_id, "Copy")

    before = _program_ids(doc.program)
    new_week_id = load_week_to_program(doc, library, entry)

    assert [w.order for w in doc.program.weeks] == [0, 1]
    inserted = {new_week_id}
    for workout in doc.week_workouts(new_week_id):
        inserted |= _workout_ids(workout)
    assert inserted.isdisjoint(before)


def test_save_workout_keeps_nested_ids_and_load_replaces_them() -> None:
    doc = ProgramDocument(id_factory=_id_factory("p"))
    week_id = doc.add_week()
    workout = doc.week_workouts(week_id)[0]
    library = ProgramLibrary(id_factory=_id_factory("lib"))

    entry = save_workout_to_library(library, workout, "Push day")

    assert entry.id != workout.id
    assert entry.name == "Push day"
    assert entry.week_id is None
    assert [ex.id for ex in entry.exercises] == [ex.id for ex in workout.exercises]
    assert entry.exercises[0] is not workout.exercises[0]

    before = _program_ids(doc.program)
    new_id = load_workout_to_program(doc, library, entry.id, week_id, day=3)

    loaded = doc.get_workout(new_id)
    assert loaded.day == 3
    assert loaded.week_id == week_id
    assert new_id in doc.get_week(week_id).workout_ids
    assert _workout_ids(loaded).isdisjoint(before | _workout_ids(entry))


def test_load_workout_defaults_to_source_day() -> None:
    doc = ProgramDocument(id_factory=_id_factory("p"))
    week_id = doc.add_week()
    source = doc.add_workout(week_id)
    library = ProgramLibrary(id_factory=_id_factory("lib"))
    entry = save_workout_to_library(library, doc.get_workout(source), "Day two")

    new_id = load_workout_to_program(doc, library, entry, week_id)

    assert doc.get_workout(new_id).day == 2


def test_unresolved_entries_leave_program_untouched() -> None:
    doc = ProgramDocument(id_factory=_id_factory("p"))
    week_id = doc.add_week()
    library = ProgramLibrary(id_factory=_id_factory("lib"))
    entry = save_workout_to_library(library, doc.week_workouts(week_id)[0], "W")
    before = doc.program.as_dict()

    assert load_workout_to_program(doc, library, "missing", week_id) is None
    assert load_workout_to_program(doc, library, entry.id, "missing-week") is None
    assert load_week_to_program(doc, library, "missing") is None
    assert load_program_from_library(doc, library, "missing") is None
    assert save_week_to_library(library, doc.program, "missing", "x") is None

    assert doc.program.as_dict() == before


def test_circuits_survive_cloning_with_new_circuit_ids() -> None:
    doc = ProgramDocument(id_factory=_id_factory("p"))
    week_id = doc.add_week()
    workout = doc.week_workouts(week_id)[0]
    circuit_id = create_superset(doc, workout.id)
    library = ProgramLibrary(id_factory=_id_factory("lib"))

    entry = save_week_to_library(library, doc.program, week_id, "Supersets")
    new_week_id = load_week_to_program(doc, library, entry.id)

    (loaded,) = doc.week_workouts(new_week_id)
    (loaded_circuit,) = loaded.circuits
    assert loaded_circuit != circuit_id
    assert loaded_circuit not in entry.workouts[0].circuits
    assert len(loaded.circuits[loaded_circuit]) == 3
    assert doc.check_integrity() == []


def test_program_round_trip_through_library() -> None:
    doc = ProgramDocument(id_factory=_id_factory("p"))
    doc.load_sample_program()
    library = ProgramLibrary(id_factory=_id_factory("lib"))

    entry = save_program_to_library(library, doc.program, "Sample copy")
    assert entry.id != doc.program.id
    assert [w.id for w in entry.weeks] == [w.id for w in doc.program.weeks]

    new_id = load_program_from_library(doc, library, entry.id)

    assert doc.program.id == new_id
    assert doc.program.name == "Sample copy"
    assert _program_ids(doc.program).isdisjoint(_program_ids(entry))
    assert len(doc.program.workouts) == 2
    assert doc.check_integrity() == []


def test_collections_persist_and_notify_by_key() -> None:
    doc = ProgramDocument(id_factory=_id_factory("p"))
    week_id = _two_day_week(doc)
    library = ProgramLibrary(id_factory=_id_factory("lib"))
    changed: list[str] = []
    library.add_listener(changed.append)

    workout_entry = save_workout_to_library(library, doc.week_workouts(week_id)[0], "W")
    week_entry = save_week_to_library(library, doc.program, week_id, "Wk")
    program_entry = save_program_to_library(library, doc.program, "P")
    assert changed == ["workout-library", "week-library", "program-library"]

    restored = ProgramLibrary()
    for key in ("workout-library", "week-library", "program-library"):
        restored.load(key, library.as_dict(key))
        assert restored.as_dict(key) == library.as_dict(key)
    assert len(restored.get_week(week_entry.id).workouts) == 2

    assert restored.rename("workout-library", workout_entry.id, "Renamed") is True
    assert restored.get_workout(workout_entry.id).name == "Renamed"
    assert restored.remove("program-library", program_entry.id) is True
    assert restored.remove("program-library", program_entry.id) is False
    assert restored.programs == []
