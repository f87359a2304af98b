"""Program document store.

``ProgramDocument`` owns one mutable ``Program`` and is its only mutator.
Every operation tolerates stale ids: an id that does not resolve is a logged no-op
returning ``None``/``False`` so the UI can call these without pre-checks.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import fields
from typing import TYPE_CHECKING, Any

from .const import ALL_WEIGHT_TYPES, INTENSITY_TYPES, REP_TYPES
from .models import (
    Exercise,
    IdFactory,
    Program,
    Week,
    Workout,
    WorkoutSet,
    clone_exercises,
    clone_workout,
    create_sample_program,
    new_exercise,
    new_id,
    new_set,
    new_workout,
)

if TYPE_CHECKING:
    from .catalog import ExerciseCatalog

_LOGGER = logging.getLogger(__name__)

# Structural fields are maintained by dedicated operations only.
_PROGRAM_LOCKED = frozenset({"id", "weeks", "workouts"})
_WEEK_LOCKED = frozenset({"id", "order", "workout_ids"})
_WORKOUT_LOCKED = frozenset({"id", "week_id", "exercises", "circuits"})
_EXERCISE_LOCKED = frozenset(
    {"id", "sets", "is_circuit", "is_in_circuit", "circuit_id", "circuit_order", "is_group", "group_id"}
)
_SET_LOCKED = frozenset({"id"})

_EXERCISE_CHOICES = {
    "rep_type": frozenset(REP_TYPES),
    "intensity_type": frozenset(INTENSITY_TYPES),
    "weight_type": frozenset(ALL_WEIGHT_TYPES),
}


def _coerce(current: Any, value: Any) -> Any:
    if isinstance(current, bool):
        return bool(value)
    if isinstance(current, int):
        try:
            return int(value)
        except (TypeError, ValueError):
            return current
    if value is None:
        return None if current is None else ""
    return str(value)


def _merge(
    target: Any,
    updates: dict[str, Any] | None,
    locked: frozenset[str],
    choices: dict[str, frozenset[str]] | None = None,
) -> bool:
    """Shallow-merge known, writable fields; return True if anything changed."""
    known = {f.name for f in fields(target)}
    changed = False
    for key, value in (updates or {}).items():
        if key in locked or key not in known:
            _LOGGER.debug("Ignoring update of %s on %s", key, type(target).__name__)
            continue
        current = getattr(target, key)
        new_value = _coerce(current, value)
        allowed = (choices or {}).get(key)
        if allowed is not None and new_value not in allowed:
            _LOGGER.debug("Ignoring %s=%r on %s", key, value, type(target).__name__)
            continue
        if new_value != current:
            setattr(target, key, new_value)
            changed = True
    return changed


class ProgramDocument:
    """Single owned program plus the structural operations on it."""

    def __init__(
        self,
        program: Program | None = None,
        *,
        id_factory: IdFactory = new_id,
        catalog: ExerciseCatalog | None = None,
    ) -> None:
        self._id_factory = id_factory
        self._catalog = catalog
        self._program = program if program is not None else Program(id=id_factory())
        self._listeners: list[Callable[[], None]] = []

    @property
    def program(self) -> Program:
        return self._program

    @property
    def id_factory(self) -> IdFactory:
        return self._id_factory

    def add_listener(self, listener: Callable[[], None]) -> Callable[[], None]:
        """Register a change callback; returns a function that removes it."""
        self._listeners.append(listener)

        def _remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _remove

    def _changed(self) -> None:
        for listener in list(self._listeners):
            listener()

    # Lookups

    def get_week(self, week_id: str) -> Week | None:
        return next((w for w in self._program.weeks if w.id == week_id), None)

    def get_workout(self, workout_id: str) -> Workout | None:
        return self._program.workouts.get(workout_id)

    def get_exercise(self, workout_id: str, exercise_id: str) -> Exercise | None:
        workout = self.get_workout(workout_id)
        if workout is None:
            return None
        return workout.find_exercise(exercise_id)

    def week_workouts(self, week_id: str) -> list[Workout]:
        week = self.get_week(week_id)
        if week is None:
            return []
        pool = self._program.workouts
        return [pool[wid] for wid in week.workout_ids if wid in pool]

    def get_exercise_details(self, exercise_id: str) -> tuple[Exercise, dict[str, Any] | None] | None:
        """Find an exercise anywhere in the program plus its catalog entry."""
        for workout in self._program.workouts.values():
            exercise = workout.find_exercise(exercise_id)
            if exercise is None:
                continue
            entry = None
            if exercise.library_exercise_id and self._catalog is not None:
                entry = self._catalog.get(exercise.library_exercise_id)
            return exercise, entry
        return None

    def ids(self) -> set[str]:
        """Every program, week, workout, exercise and set id in the document."""
        found = {self._program.id}
        found.update(w.id for w in self._program.weeks)
        for workout in self._program.workouts.values():
            found.add(workout.id)
            for ex in workout.exercises:
                found.add(ex.id)
                found.update(s.id for s in ex.sets)
        return found

    def _resolve_workout(self, workout_id: str, op: str) -> Workout | None:
        workout = self.get_workout(workout_id)
        if workout is None:
            _LOGGER.debug("%s: workout %s not found", op, workout_id)
        return workout

    def _resolve_exercise(self, workout_id: str, exercise_id: str, op: str) -> tuple[Workout, Exercise] | None:
        workout = self._resolve_workout(workout_id, op)
        if workout is None:
            return None
        exercise = workout.find_exercise(exercise_id)
        if exercise is None:
            _LOGGER.debug("%s: exercise %s not found in workout %s", op, exercise_id, workout_id)
            return None
        return workout, exercise

    # Program level

    def reset(self, program: Program | None = None) -> None:
        self._program = program if program is not None else Program(id=self._id_factory())
        self._changed()

    def load_sample_program(self) -> None:
        self.reset(create_sample_program(self._id_factory))

    def update_program(self, updates: dict[str, Any]) -> bool:
        if _merge(self._program, updates, _PROGRAM_LOCKED):
            self._changed()
        return True

    # Weeks

    def add_week(self) -> str:
        """Append a week holding one default workout; return the week id."""
        weeks = self._program.weeks
        week = Week(id=self._id_factory(), name=f"Week {len(weeks) + 1}", order=len(weeks))
        workout = new_workout(week.id, 1, self._id_factory)
        week.workout_ids.append(workout.id)
        self._program.workouts[workout.id] = workout
        weeks.append(week)
        self._changed()
        return week.id

    def update_week(self, week_id: str, updates: dict[str, Any]) -> bool:
        week = self.get_week(week_id)
        if week is None:
            _LOGGER.debug("update_week: week %s not found", week_id)
            return False
        if _merge(week, updates, _WEEK_LOCKED):
            self._changed()
        return True

    def move_week(self, week_id: str, new_index: int) -> bool:
        weeks = self._program.weeks
        index = next((i for i, w in enumerate(weeks) if w.id == week_id), None)
        if index is None:
            _LOGGER.debug("move_week: week %s not found", week_id)
            return False
        try:
            requested = int(new_index)
        except (TypeError, ValueError):
            _LOGGER.debug("move_week: invalid index %r", new_index)
            return False
        target = max(0, min(len(weeks) - 1, requested))
        weeks.insert(target, weeks.pop(index))
        self._renumber_weeks()
        self._changed()
        return True

    def delete_week(self, week_id: str, *, delete_workouts: bool = False) -> bool:
        """Remove a week; its workouts stay in the pool unless asked otherwise."""
        week = self.get_week(week_id)
        if week is None:
            _LOGGER.debug("delete_week: week %s not found", week_id)
            return False
        self._program.weeks.remove(week)
        if delete_workouts:
            for workout_id in week.workout_ids:
                self._program.workouts.pop(workout_id, None)
        self._renumber_weeks()
        self._changed()
        return True

    def _renumber_weeks(self) -> None:
        for idx, week in enumerate(self._program.weeks):
            week.order = idx

    # Workouts

    def add_workout(self, week_id: str) -> str | None:
        week = self.get_week(week_id)
        if week is None:
            _LOGGER.debug("add_workout: week %s not found", week_id)
            return None
        workout = new_workout(week.id, len(week.workout_ids) + 1, self._id_factory)
        self._program.workouts[workout.id] = workout
        week.workout_ids.append(workout.id)
        self._changed()
        return workout.id

    def insert_workout(self, week_id: str, workout: Workout) -> bool:
        """Attach an already-built workout to the pool and to a week."""
        week = self.get_week(week_id)
        if week is None:
            _LOGGER.debug("insert_workout: week %s not found", week_id)
            return False
        workout.week_id = week.id
        self._program.workouts[workout.id] = workout
        week.workout_ids.append(workout.id)
        self._changed()
        return True

    def insert_week(self, week: Week, workouts: Iterable[Workout]) -> None:
        """Append a fully built week together with the workouts it references."""
        for workout in workouts:
            self._program.workouts[workout.id] = workout
        self._program.weeks.append(week)
        self._changed()

    def update_workout(self, workout_id: str, updates: dict[str, Any]) -> bool:
        workout = self._resolve_workout(workout_id, "update_workout")
        if workout is None:
            return False
        updates = dict(updates or {})
        if "day" in updates:
            # Day slots are 1-based.
            updates["day"] = max(1, _coerce(workout.day, updates["day"]))
        if _merge(workout, updates, _WORKOUT_LOCKED):
            self._changed()
        return True

    def delete_workout(self, week_id: str, workout_id: str) -> bool:
        """Unlink a workout from its week.

        The workout object stays in the pool; ``collect_unreferenced_workouts``
        reclaims such entries.
        """
        week = self.get_week(week_id)
        if week is None or workout_id not in week.workout_ids:
            _LOGGER.debug("delete_workout: workout %s not linked to week %s", workout_id, week_id)
            return False
        week.workout_ids.remove(workout_id)
        self._changed()
        return True

    def collect_unreferenced_workouts(self) -> list[str]:
        referenced = {wid for week in self._program.weeks for wid in week.workout_ids}
        orphans = [wid for wid in self._program.workouts if wid not in referenced]
        for wid in orphans:
            del self._program.workouts[wid]
        if orphans:
            _LOGGER.debug("Reclaimed %s unreferenced workouts", len(orphans))
            self._changed()
        return orphans

    def move_workout(self, workout_id: str, from_week_id: str, to_week_id: str) -> bool:
        source = self.get_week(from_week_id)
        target = self.get_week(to_week_id)
        workout = self.get_workout(workout_id)
        if source is None or target is None or workout is None or workout_id not in source.workout_ids:
            _LOGGER.debug("move_workout: cannot move %s from %s to %s", workout_id, from_week_id, to_week_id)
            return False
        if source is target:
            return True
        source.workout_ids.remove(workout_id)
        target.workout_ids.append(workout_id)
        workout.week_id = target.id
        # Keep day slots unique within the receiving week.
        workout.day = len(target.workout_ids)
        self._changed()
        return True

    def clone_workout(self, workout_id: str, week_id: str | None = None) -> str | None:
        source = self._resolve_workout(workout_id, "clone_workout")
        if source is None:
            return None
        week = self.get_week(week_id or source.week_id or "")
        if week is None:
            _LOGGER.debug("clone_workout: no target week for %s", workout_id)
            return None
        copy = clone_workout(source, self._id_factory, week_id=week.id, day=len(week.workout_ids) + 1)
        self.insert_workout(week.id, copy)
        return copy.id

    # Exercises

    def add_exercise(self, workout_id: str, library_exercise_id: str | None = None) -> str | None:
        workout = self._resolve_workout(workout_id, "add_exercise")
        if workout is None:
            return None
        exercise = None
        if library_exercise_id:
            entry = self._catalog.get(library_exercise_id) if self._catalog is not None else None
            if entry is None:
                _LOGGER.warning("add_exercise: catalog exercise %s not found", library_exercise_id)
            else:
                exercise = self._catalog.to_exercise(entry, self._id_factory)
        if exercise is None:
            exercise = new_exercise(self._id_factory)
        workout.exercises.append(exercise)
        self._changed()
        return exercise.id

    def append_exercises(self, workout_id: str, exercises: list[Exercise]) -> bool:
        """Append several exercises in one step, preserving their order."""
        workout = self._resolve_workout(workout_id, "append_exercises")
        if workout is None:
            return False
        workout.exercises.extend(exercises)
        workout.reindex()
        self._changed()
        return True

    def update_exercise(self, workout_id: str, exercise_id: str, updates: dict[str, Any]) -> bool:
        resolved = self._resolve_exercise(workout_id, exercise_id, "update_exercise")
        if resolved is None:
            return False
        if _merge(resolved[1], updates, _EXERCISE_LOCKED, _EXERCISE_CHOICES):
            self._changed()
        return True

    def duplicate_exercise(self, workout_id: str, exercise_id: str) -> str | None:
        """Copy an exercise (or a whole circuit/group block) right after itself."""
        resolved = self._resolve_exercise(workout_id, exercise_id, "duplicate_exercise")
        if resolved is None:
            return None
        workout, exercise = resolved
        if exercise.is_circuit or exercise.is_group:
            block = self._block(workout, exercise)
            copies = clone_exercises(block, self._id_factory)
            position = workout.exercises.index(block[-1]) + 1
        else:
            copies = clone_exercises([exercise], self._id_factory)
            # A plain copy stays in the source's circuit or group.
            copies[0].circuit_id = exercise.circuit_id
            copies[0].group_id = exercise.group_id
            position = workout.exercises.index(exercise) + 1
        workout.exercises[position:position] = copies
        workout.reindex()
        if exercise.is_in_circuit and exercise.circuit_id:
            self._renumber_circuit(workout, exercise.circuit_id)
        self._changed()
        return copies[0].id

    def _renumber_circuit(self, workout: Workout, circuit_id: str) -> None:
        members = [ex for ex in workout.exercises if ex.is_in_circuit and ex.circuit_id == circuit_id]
        for order, member in enumerate(members):
            member.circuit_order = order

    def _block(self, workout: Workout, header: Exercise) -> list[Exercise]:
        if header.is_circuit and header.circuit_id:
            members = set(workout.circuits.get(header.circuit_id, []))
            return [ex for ex in workout.exercises if ex.id in members or ex.id == header.id]
        return [ex for ex in workout.exercises if ex.id == header.id or ex.group_id == header.id]

    def delete_exercise(self, workout_id: str, exercise_id: str) -> bool:
        """Remove an exercise; circuit and group headers take their members along."""
        resolved = self._resolve_exercise(workout_id, exercise_id, "delete_exercise")
        if resolved is None:
            return False
        workout, exercise = resolved
        if exercise.is_circuit or exercise.is_group:
            doomed = {ex.id for ex in self._block(workout, exercise)}
        else:
            doomed = {exercise.id}
        workout.exercises = [ex for ex in workout.exercises if ex.id not in doomed]
        workout.reindex()
        self._changed()
        return True

    def create_group(self, workout_id: str, exercise_ids: list[str], name: str = "Group") -> str | None:
        """Group standalone exercises under a new header inserted before the first one."""
        workout = self._resolve_workout(workout_id, "create_group")
        if workout is None or not exercise_ids:
            return None
        members = [workout.find_exercise(eid) for eid in exercise_ids]
        if any(
            ex is None or ex.is_circuit or ex.is_in_circuit or ex.is_group or ex.group_id
            for ex in members
        ):
            _LOGGER.debug("create_group: %s are not all standalone exercises", exercise_ids)
            return None
        header = Exercise(id=self._id_factory(), name=name, is_group=True)
        for ex in members:
            ex.group_id = header.id
        position = min(workout.exercises.index(ex) for ex in members)
        workout.exercises.insert(position, header)
        self._changed()
        return header.id

    def ungroup(self, workout_id: str, group_id: str) -> bool:
        resolved = self._resolve_exercise(workout_id, group_id, "ungroup")
        if resolved is None or not resolved[1].is_group:
            return False
        workout, header = resolved
        for ex in workout.exercises:
            if ex.group_id == header.id:
                ex.group_id = None
        workout.exercises.remove(header)
        self._changed()
        return True

    def replace_exercises(self, workout_id: str, exercises: list[Exercise]) -> bool:
        workout = self._resolve_workout(workout_id, "replace_exercises")
        if workout is None:
            return False
        workout.exercises = list(exercises)
        workout.reindex()
        self._changed()
        return True

    # Sets

    def add_set(self, workout_id: str, exercise_id: str) -> str | None:
        resolved = self._resolve_exercise(workout_id, exercise_id, "add_set")
        if resolved is None:
            return None
        workout_set = new_set(self._id_factory)
        resolved[1].sets.append(workout_set)
        self._changed()
        return workout_set.id

    def _find_set(self, exercise: Exercise, set_id: str) -> WorkoutSet | None:
        return next((s for s in exercise.sets if s.id == set_id), None)

    def update_set(self, workout_id: str, exercise_id: str, set_id: str, updates: dict[str, Any]) -> bool:
        resolved = self._resolve_exercise(workout_id, exercise_id, "update_set")
        if resolved is None:
            return False
        workout_set = self._find_set(resolved[1], set_id)
        if workout_set is None:
            _LOGGER.debug("update_set: set %s not found", set_id)
            return False
        if _merge(workout_set, updates, _SET_LOCKED):
            self._changed()
        return True

    def delete_set(self, workout_id: str, exercise_id: str, set_id: str) -> bool:
        resolved = self._resolve_exercise(workout_id, exercise_id, "delete_set")
        if resolved is None:
            return False
        exercise = resolved[1]
        workout_set = self._find_set(exercise, set_id)
        if workout_set is None:
            _LOGGER.debug("delete_set: set %s not found", set_id)
            return False
        exercise.sets.remove(workout_set)
        self._changed()
        return True

    # Integrity

    def check_integrity(self) -> list[str]:
        """Describe every broken cross-reference; empty when consistent.

        Pool entries that no week references are not reported here; they are
        the expected result of ``delete_workout``.
        """
        problems: list[str] = []
        program = self._program
        listed_by: dict[str, list[str]] = {}
        for week in program.weeks:
            for wid in week.workout_ids:
                listed_by.setdefault(wid, []).append(week.id)
                if wid not in program.workouts:
                    problems.append(f"week {week.id} references missing workout {wid}")
        for wid, week_ids in listed_by.items():
            workout = program.workouts.get(wid)
            if workout is None:
                continue
            if len(week_ids) > 1:
                problems.append(f"workout {wid} is listed by {len(week_ids)} weeks")
            if workout.week_id not in week_ids:
                problems.append(f"workout {wid} points at week {workout.week_id} which does not list it")
        for workout in program.workouts.values():
            problems.extend(_workout_problems(workout))

        seen: set[str] = set()
        for ident in _all_ids(program):
            if ident in seen:
                problems.append(f"duplicate id {ident}")
            seen.add(ident)
        return problems


def _workout_problems(workout: Workout) -> list[str]:
    problems: list[str] = []
    headers: dict[str, int] = {}
    group_headers = {ex.id for ex in workout.exercises if ex.is_group}
    for ex in workout.exercises:
        if ex.is_circuit and ex.circuit_id:
            headers[ex.circuit_id] = headers.get(ex.circuit_id, 0) + 1
    for ex in workout.exercises:
        if ex.is_in_circuit:
            if not ex.circuit_id:
                problems.append(f"exercise {ex.id} is in a circuit without a circuit id")
            elif headers.get(ex.circuit_id, 0) != 1:
                problems.append(
                    f"exercise {ex.id} has {headers.get(ex.circuit_id, 0)} headers for circuit {ex.circuit_id}"
                )
        if ex.group_id and ex.group_id not in group_headers:
            problems.append(f"exercise {ex.id} references missing group {ex.group_id}")
    return problems


def _all_ids(program: Program) -> Iterable[str]:
    yield program.id
    for week in program.weeks:
        yield week.id
    for workout in program.workouts.values():
        yield workout.id
        for ex in workout.exercises:
            yield ex.id
            for s in ex.sets:
                yield s.id
