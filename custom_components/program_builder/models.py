"""Program document model.

A Program owns a flat pool (arena) of workouts keyed by id. Weeks hold only
workout-id references into that pool and every workout points back at its
week through ``week_id``. Exercises inside a workout are a flat list; circuit
headers and their members share a ``circuit_id`` and group headers are
referenced by ``group_id`` on their members.

Set fields are free-form strings on purpose: ``"10,8,8,6"`` or ``"135 lbs"``
are valid values and are stored uninterpreted.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field, replace
from typing import Any
from uuid import uuid4

from .const import ALL_WEIGHT_TYPES, DEFAULT_PROGRAM_NAME, DEFAULT_WEIGHT_TYPE, INTENSITY_TYPES, REP_TYPES

IdFactory = Callable[[], str]


def new_id() -> str:
    return uuid4().hex


def _str(value: Any, default: str = "") -> str:
    if value is None:
        return default
    return str(value)


def _int(value: Any, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _choice(value: Any, allowed: list[str], default: str) -> str:
    text = _str(value)
    return text if text in allowed else default


def _dicts(value: Any) -> list[dict[str, Any]]:
    if not isinstance(value, list):
        return []
    return [v for v in value if isinstance(v, dict)]


@dataclass(slots=True)
class WorkoutSet:
    """One prescribed unit of work."""

    id: str
    reps: str = ""
    weight: str = ""
    intensity: str = ""
    rest: str = ""

    def as_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "reps": self.reps,
            "weight": self.weight,
            "intensity": self.intensity,
            "rest": self.rest,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> WorkoutSet:
        return cls(
            id=_str(data.get("id")),
            reps=_str(data.get("reps")),
            weight=_str(data.get("weight")),
            intensity=_str(data.get("intensity")),
            rest=_str(data.get("rest")),
        )


@dataclass(slots=True)
class Exercise:
    """One movement within a workout, or a circuit/group header."""

    id: str
    name: str = "New Exercise"
    sets: list[WorkoutSet] = field(default_factory=list)
    notes: str = ""
    is_circuit: bool = False
    is_in_circuit: bool = False
    circuit_id: str | None = None
    circuit_order: int | None = None
    is_group: bool = False
    group_id: str | None = None
    rep_type: str = "fixed"
    intensity_type: str = "rpe"
    weight_type: str = DEFAULT_WEIGHT_TYPE
    library_exercise_id: str | None = None

    def as_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "sets": [s.as_dict() for s in self.sets],
            "notes": self.notes,
            "is_circuit": self.is_circuit,
            "is_in_circuit": self.is_in_circuit,
            "circuit_id": self.circuit_id,
            "circuit_order": self.circuit_order,
            "is_group": self.is_group,
            "group_id": self.group_id,
            "rep_type": self.rep_type,
            "intensity_type": self.intensity_type,
            "weight_type": self.weight_type,
            "library_exercise_id": self.library_exercise_id,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Exercise:
        order = data.get("circuit_order")
        return cls(
            id=_str(data.get("id")),
            name=_str(data.get("name")),
            sets=[WorkoutSet.from_dict(s) for s in _dicts(data.get("sets"))],
            notes=_str(data.get("notes")),
            is_circuit=bool(data.get("is_circuit")),
            is_in_circuit=bool(data.get("is_in_circuit")),
            circuit_id=_str(data.get("circuit_id")) or None,
            circuit_order=_int(order) if order is not None else None,
            is_group=bool(data.get("is_group")),
            group_id=_str(data.get("group_id")) or None,
            rep_type=_choice(data.get("rep_type"), REP_TYPES, "fixed"),
            intensity_type=_choice(data.get("intensity_type"), INTENSITY_TYPES, "rpe"),
            weight_type=_choice(data.get("weight_type"), ALL_WEIGHT_TYPES, DEFAULT_WEIGHT_TYPE),
            library_exercise_id=_str(data.get("library_exercise_id")) or None,
        )


@dataclass(slots=True)
class Workout:
    """A training session assigned to a day slot within a week.

    ``circuits`` is derived state: circuit id -> ids of the header and members
    in list order. It is rebuilt by ``reindex()`` and never serialized.
    """

    id: str
    name: str = ""
    day: int = 1
    week_id: str | None = None
    exercises: list[Exercise] = field(default_factory=list)
    circuits: dict[str, list[str]] = field(default_factory=dict, compare=False, repr=False)

    def __post_init__(self) -> None:
        self.reindex()

    def reindex(self) -> None:
        index: dict[str, list[str]] = {}
        for ex in self.exercises:
            if ex.circuit_id and (ex.is_circuit or ex.is_in_circuit):
                index.setdefault(ex.circuit_id, []).append(ex.id)
        self.circuits = index

    def find_exercise(self, exercise_id: str) -> Exercise | None:
        return next((ex for ex in self.exercises if ex.id == exercise_id), None)

    def as_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "day": self.day,
            "week_id": self.week_id,
            "exercises": [ex.as_dict() for ex in self.exercises],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Workout:
        return cls(
            id=_str(data.get("id")),
            name=_str(data.get("name")),
            day=max(1, _int(data.get("day"), 1)),
            week_id=_str(data.get("week_id")) or None,
            exercises=[Exercise.from_dict(ex) for ex in _dicts(data.get("exercises"))],
        )


@dataclass(slots=True)
class Week:
    id: str
    name: str = ""
    order: int = 0
    workout_ids: list[str] = field(default_factory=list)

    def as_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "order": self.order,
            "workout_ids": list(self.workout_ids),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Week:
        ids = data.get("workout_ids")
        return cls(
            id=_str(data.get("id")),
            name=_str(data.get("name")),
            order=_int(data.get("order")),
            workout_ids=[str(w) for w in ids if w] if isinstance(ids, list) else [],
        )


@dataclass(slots=True)
class LibraryWeek(Week):
    """A week saved to the library together with the workouts it references."""

    workouts: list[Workout] = field(default_factory=list)

    def as_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "order": self.order,
            "workout_ids": list(self.workout_ids),
            "workouts": [w.as_dict() for w in self.workouts],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LibraryWeek:
        week = Week.from_dict(data)
        return cls(
            id=week.id,
            name=week.name,
            order=week.order,
            workout_ids=week.workout_ids,
            workouts=[Workout.from_dict(w) for w in _dicts(data.get("workouts"))],
        )


@dataclass(slots=True)
class Program:
    """Top-level training plan: ordered weeks plus the workout arena."""

    id: str
    name: str = DEFAULT_PROGRAM_NAME
    weeks: list[Week] = field(default_factory=list)
    workouts: dict[str, Workout] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "weeks": [w.as_dict() for w in self.weeks],
            "workouts": [w.as_dict() for w in self.workouts.values()],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Program:
        if not isinstance(data, dict):
            data = {}
        weeks = [Week.from_dict(w) for w in _dicts(data.get("weeks"))]
        weeks.sort(key=lambda w: w.order)
        workouts: dict[str, Workout] = {}
        for raw in _dicts(data.get("workouts")):
            workout = Workout.from_dict(raw)
            if workout.id:
                workouts[workout.id] = workout
        return cls(
            id=_str(data.get("id")) or new_id(),
            name=_str(data.get("name"), DEFAULT_PROGRAM_NAME),
            weeks=weeks,
            workouts=workouts,
        )


def new_set(id_factory: IdFactory = new_id, **values: str) -> WorkoutSet:
    return WorkoutSet(id=id_factory(), **values)


def new_exercise(id_factory: IdFactory = new_id, name: str = "New Exercise") -> Exercise:
    return Exercise(id=id_factory(), name=name, sets=[new_set(id_factory)])


def new_workout(week_id: str, day: int, id_factory: IdFactory = new_id) -> Workout:
    return Workout(
        id=id_factory(),
        name=f"Day {day}",
        day=day,
        week_id=week_id,
        exercises=[new_exercise(id_factory)],
    )


def create_sample_program(id_factory: IdFactory = new_id) -> Program:
    """Build a small two-day program for first-run UX."""

    def _ex(name: str, reps: str, weight: str, rest: str, notes: str = "") -> Exercise:
        return Exercise(
            id=id_factory(),
            name=name,
            notes=notes,
            sets=[new_set(id_factory, reps=reps, weight=weight, rest=rest)],
        )

    week = Week(id=id_factory(), name="Week 1", order=0)
    upper = Workout(
        id=id_factory(),
        name="Upper Body",
        day=1,
        week_id=week.id,
        exercises=[
            _ex("Bench Press", "10,8,8,6", "135,145,155,165", "90s", "Focus on chest contraction"),
            _ex("Pull-ups", "8,8,8", "BW", "60s"),
        ],
    )
    lower = Workout(
        id=id_factory(),
        name="Lower Body",
        day=2,
        week_id=week.id,
        exercises=[
            _ex("Squats", "10,8,6", "185,205,225", "120s"),
            _ex("Romanian Deadlift", "10,10,10", "135,145,155", "90s", "Keep back straight"),
        ],
    )
    week.workout_ids = [upper.id, lower.id]
    return Program(
        id=id_factory(),
        name="Sample Training Program",
        weeks=[week],
        workouts={upper.id: upper, lower.id: lower},
    )


def clone_exercises(exercises: list[Exercise], id_factory: IdFactory = new_id) -> list[Exercise]:
    """Copy exercises with fresh exercise, set and circuit ids.

    Circuit ids are remapped consistently so a cloned header still matches
    its cloned members, and ``group_id`` follows its header's new id.
    """
    exercise_ids = {ex.id: id_factory() for ex in exercises}
    circuit_ids: dict[str, str] = {}
    cloned: list[Exercise] = []
    for ex in exercises:
        copy = replace(
            ex,
            id=exercise_ids[ex.id],
            sets=[replace(s, id=id_factory()) for s in ex.sets],
        )
        if ex.circuit_id:
            copy.circuit_id = circuit_ids.setdefault(ex.circuit_id, id_factory())
        if ex.group_id:
            copy.group_id = exercise_ids.get(ex.group_id)
        cloned.append(copy)
    return cloned


def clone_workout(
    workout: Workout,
    id_factory: IdFactory = new_id,
    *,
    week_id: str | None = None,
    day: int | None = None,
) -> Workout:
    return Workout(
        id=id_factory(),
        name=workout.name,
        day=day if day else workout.day,
        week_id=week_id,
        exercises=clone_exercises(workout.exercises, id_factory),
    )
