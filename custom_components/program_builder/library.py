"""Library of reusable workouts, weeks and programs.

Saving copies a unit out of the live program into a library collection;
loading copies a library entry back into the live program. Every load mints
fresh ids for the inserted subtree so a template never shares ids with a
program built from it.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from .const import KEY_PROGRAM_LIBRARY, KEY_WEEK_LIBRARY, KEY_WORKOUT_LIBRARY
from .document import ProgramDocument
from .models import IdFactory, LibraryWeek, Program, Week, Workout, clone_workout, new_id

_LOGGER = logging.getLogger(__name__)

_ENTRY_TYPES: dict[str, type] = {
    KEY_WORKOUT_LIBRARY: Workout,
    KEY_WEEK_LIBRARY: LibraryWeek,
    KEY_PROGRAM_LIBRARY: Program,
}


class ProgramLibrary:
    """The three library collections, each persisted as one blob."""

    def __init__(self, id_factory: IdFactory = new_id) -> None:
        self.id_factory = id_factory
        self._collections: dict[str, list[Any]] = {key: [] for key in _ENTRY_TYPES}
        self._listeners: list[Callable[[str], None]] = []

    def add_listener(self, listener: Callable[[str], None]) -> Callable[[], None]:
        """Register a callback receiving the storage key of the changed collection."""
        self._listeners.append(listener)

        def _remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _remove

    def _notify(self, key: str) -> None:
        for listener in list(self._listeners):
            listener(key)

    @property
    def workouts(self) -> list[Workout]:
        return list(self._collections[KEY_WORKOUT_LIBRARY])

    @property
    def weeks(self) -> list[LibraryWeek]:
        return list(self._collections[KEY_WEEK_LIBRARY])

    @property
    def programs(self) -> list[Program]:
        return list(self._collections[KEY_PROGRAM_LIBRARY])

    def _get(self, key: str, entry_id: str) -> Any:
        return next((e for e in self._collections[key] if e.id == entry_id), None)

    def get_workout(self, workout_id: str) -> Workout | None:
        return self._get(KEY_WORKOUT_LIBRARY, workout_id)

    def get_week(self, week_id: str) -> LibraryWeek | None:
        return self._get(KEY_WEEK_LIBRARY, week_id)

    def get_program(self, program_id: str) -> Program | None:
        return self._get(KEY_PROGRAM_LIBRARY, program_id)

    def add(self, key: str, entry: Any) -> None:
        self._collections[key].append(entry)
        self._notify(key)

    def remove(self, key: str, entry_id: str) -> bool:
        entry = self._get(key, entry_id)
        if entry is None:
            _LOGGER.debug("Library %s has no entry %s", key, entry_id)
            return False
        self._collections[key].remove(entry)
        self._notify(key)
        return True

    def rename(self, key: str, entry_id: str, name: str) -> bool:
        entry = self._get(key, entry_id)
        if entry is None:
            _LOGGER.debug("Library %s has no entry %s", key, entry_id)
            return False
        entry.name = str(name)
        self._notify(key)
        return True

    def as_dict(self, key: str) -> dict[str, Any]:
        return {"items": [entry.as_dict() for entry in self._collections[key]]}

    def load(self, key: str, data: Any) -> None:
        """Replace one collection from a stored blob without notifying."""
        entry_type = _ENTRY_TYPES[key]
        items = data.get("items") if isinstance(data, dict) else None
        entries = []
        for raw in items if isinstance(items, list) else []:
            if not isinstance(raw, dict) or not raw.get("id"):
                continue
            entries.append(entry_type.from_dict(raw))
        self._collections[key] = entries


def save_workout_to_library(library: ProgramLibrary, workout: Workout, name: str) -> Workout:
    """Store a copy of a workout under a new id.

    Exercise and set ids are kept; loading the entry later re-identifies them.
    """
    entry = Workout.from_dict(workout.as_dict())
    entry.id = library.id_factory()
    entry.name = str(name)
    entry.week_id = None
    library.add(KEY_WORKOUT_LIBRARY, entry)
    return entry


def save_week_to_library(library: ProgramLibrary, program: Program, week_id: str, name: str) -> LibraryWeek | None:
    """Store a week together with re-identified copies of its workouts."""
    week = next((w for w in program.weeks if w.id == week_id), None)
    if week is None:
        _LOGGER.debug("save_week_to_library: week %s not found", week_id)
        return None
    entry = LibraryWeek(id=library.id_factory(), name=str(name), order=week.order)
    for workout_id in week.workout_ids:
        workout = program.workouts.get(workout_id)
        if workout is None:
            _LOGGER.debug("save_week_to_library: skipping missing workout %s", workout_id)
            continue
        copy = clone_workout(workout, library.id_factory, week_id=entry.id)
        entry.workouts.append(copy)
        entry.workout_ids.append(copy.id)
    library.add(KEY_WEEK_LIBRARY, entry)
    return entry


def save_program_to_library(library: ProgramLibrary, program: Program, name: str) -> Program:
    """Store a copy of the whole program; only the program id is replaced."""
    entry = Program.from_dict(program.as_dict())
    entry.id = library.id_factory()
    entry.name = str(name)
    library.add(KEY_PROGRAM_LIBRARY, entry)
    return entry


def load_workout_to_program(
    document: ProgramDocument,
    library: ProgramLibrary,
    workout: Workout | str,
    week_id: str,
    day: int | None = None,
) -> str | None:
    """Insert a re-identified copy of a library workout into a week."""
    source = library.get_workout(workout) if isinstance(workout, str) else workout
    if source is None:
        _LOGGER.warning("load_workout_to_program: library workout %s not found", workout)
        return None
    if document.get_week(week_id) is None:
        _LOGGER.debug("load_workout_to_program: week %s not found", week_id)
        return None
    copy = clone_workout(source, document.id_factory, week_id=week_id, day=day)
    document.insert_workout(week_id, copy)
    return copy.id


def load_week_to_program(document: ProgramDocument, library: ProgramLibrary, week: Week | str) -> str | None:
    """Append a library week and re-identified copies of its workouts."""
    source = library.get_week(week) if isinstance(week, str) else week
    if source is None:
        _LOGGER.warning("load_week_to_program: library week %s not found", week)
        return None
    embedded = {w.id: w for w in getattr(source, "workouts", [])}
    new_week = Week(
        id=document.id_factory(),
        name=source.name,
        order=len(document.program.weeks),
    )
    copies = []
    for workout_id in source.workout_ids:
        template = embedded.get(workout_id) or library.get_workout(workout_id)
        if template is None:
            _LOGGER.debug("load_week_to_program: skipping missing workout %s", workout_id)
            continue
        copy = clone_workout(template, document.id_factory, week_id=new_week.id)
        copies.append(copy)
        new_week.workout_ids.append(copy.id)
    document.insert_week(new_week, copies)
    return new_week.id


def load_program_from_library(
    document: ProgramDocument, library: ProgramLibrary, program: Program | str
) -> str | None:
    """Replace the live program with a fully re-identified copy of a library program."""
    source = library.get_program(program) if isinstance(program, str) else program
    if source is None:
        _LOGGER.warning("load_program_from_library: library program %s not found", program)
        return None
    id_factory = document.id_factory
    weeks: list[Week] = []
    workouts: dict[str, Workout] = {}
    for old_week in source.weeks:
        week = Week(id=id_factory(), name=old_week.name, order=len(weeks))
        for workout_id in old_week.workout_ids:
            template = source.workouts.get(workout_id)
            if template is None:
                continue
            copy = clone_workout(template, id_factory, week_id=week.id)
            workouts[copy.id] = copy
            week.workout_ids.append(copy.id)
        weeks.append(week)
    copy_program = Program(id=id_factory(), name=source.name, weeks=weeks, workouts=workouts)
    document.reset(copy_program)
    return copy_program.id
