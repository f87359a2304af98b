"""Circuit, superset, EMOM, AMRAP and Tabata blocks.

A block is a header exercise (``is_circuit``, no sets) followed by member
exercises (``is_in_circuit``), all sharing one ``circuit_id``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from enum import StrEnum

from .document import ProgramDocument
from .models import Exercise, IdFactory, Workout, new_set

_LOGGER = logging.getLogger(__name__)


class CircuitVariant(StrEnum):
    CIRCUIT = "circuit"
    SUPERSET = "superset"
    EMOM = "emom"
    AMRAP = "amrap"
    TABATA = "tabata"


@dataclass(frozen=True, slots=True)
class _Member:
    name: str
    reps: str
    rest: str
    notes: str = ""
    rep_type: str = "fixed"


@dataclass(frozen=True, slots=True)
class _Template:
    header: str
    notes: str
    members: tuple[_Member, ...]


VARIANTS: dict[CircuitVariant, _Template] = {
    CircuitVariant.CIRCUIT: _Template(
        "Circuit",
        "Perform exercises in sequence with minimal rest",
        (_Member("Exercise 1", "10", "30s"), _Member("Exercise 2", "10", "30s")),
    ),
    CircuitVariant.SUPERSET: _Template(
        "Superset",
        "Perform these exercises back-to-back with no rest between",
        (_Member("Exercise A", "12", "0s"), _Member("Exercise B", "12", "60s")),
    ),
    CircuitVariant.EMOM: _Template(
        "EMOM - 10 min",
        "Every Minute On the Minute for 10 minutes",
        (_Member("Even Minutes", "10", "0s"), _Member("Odd Minutes", "8", "0s")),
    ),
    CircuitVariant.AMRAP: _Template(
        "AMRAP - 12 min",
        "As Many Rounds As Possible in 12 minutes",
        (
            _Member("Exercise 1", "10", "0s"),
            _Member("Exercise 2", "15", "0s"),
            _Member("Exercise 3", "20", "0s"),
        ),
    ),
    CircuitVariant.TABATA: _Template(
        "Tabata - 4 min",
        "8 rounds of 20s work, 10s rest",
        (
            _Member(
                "Tabata Exercise",
                "20s",
                "10s",
                notes="Max effort for 20 seconds, then rest 10 seconds. Repeat 8 times.",
                rep_type="time",
            ),
        ),
    ),
}


def build_block(variant: CircuitVariant | str, id_factory: IdFactory) -> list[Exercise]:
    """Header followed by members for a variant; raises ValueError if unknown."""
    template = VARIANTS[CircuitVariant(variant)]
    circuit_id = id_factory()
    block = [
        Exercise(
            id=id_factory(),
            name=template.header,
            notes=template.notes,
            is_circuit=True,
            circuit_id=circuit_id,
        )
    ]
    for order, member in enumerate(template.members):
        block.append(
            Exercise(
                id=id_factory(),
                name=member.name,
                notes=member.notes,
                sets=[new_set(id_factory, reps=member.reps, rest=member.rest)],
                is_in_circuit=True,
                circuit_id=circuit_id,
                circuit_order=order,
                rep_type=member.rep_type,
            )
        )
    return block


def create_group(document: ProgramDocument, workout_id: str, variant: CircuitVariant | str) -> str | None:
    """Append a new block to a workout and return its circuit id."""
    block = build_block(variant, document.id_factory)
    if not document.append_exercises(workout_id, block):
        _LOGGER.debug("Cannot add %s to missing workout %s", variant, workout_id)
        return None
    return block[0].circuit_id


def create_circuit(document: ProgramDocument, workout_id: str) -> str | None:
    return create_group(document, workout_id, CircuitVariant.CIRCUIT)


def create_superset(document: ProgramDocument, workout_id: str) -> str | None:
    return create_group(document, workout_id, CircuitVariant.SUPERSET)


def create_emom(document: ProgramDocument, workout_id: str) -> str | None:
    return create_group(document, workout_id, CircuitVariant.EMOM)


def create_amrap(document: ProgramDocument, workout_id: str) -> str | None:
    return create_group(document, workout_id, CircuitVariant.AMRAP)


def create_tabata(document: ProgramDocument, workout_id: str) -> str | None:
    return create_group(document, workout_id, CircuitVariant.TABATA)


def circuit_header(workout: Workout, circuit_id: str) -> Exercise | None:
    for exercise_id in workout.circuits.get(circuit_id, []):
        exercise = workout.find_exercise(exercise_id)
        if exercise is not None and exercise.is_circuit:
            return exercise
    return None


def circuit_members(workout: Workout, circuit_id: str) -> list[Exercise]:
    members = []
    for exercise_id in workout.circuits.get(circuit_id, []):
        exercise = workout.find_exercise(exercise_id)
        if exercise is not None and exercise.is_in_circuit:
            members.append(exercise)
    return members


def iter_circuit_blocks(workout: Workout) -> Iterator[tuple[Exercise, list[Exercise]]]:
    """Yield (header, members) for every block, in list order."""
    for circuit_id in workout.circuits:
        header = circuit_header(workout, circuit_id)
        if header is None:
            continue
        yield header, circuit_members(workout, circuit_id)


def dissolve_circuit(document: ProgramDocument, workout_id: str, circuit_id: str) -> bool:
    """Remove a block's header and turn its members into plain exercises."""
    workout = document.get_workout(workout_id)
    if workout is None or circuit_id not in workout.circuits:
        _LOGGER.debug("dissolve_circuit: circuit %s not in workout %s", circuit_id, workout_id)
        return False
    remaining = []
    for exercise in workout.exercises:
        if exercise.circuit_id != circuit_id:
            remaining.append(exercise)
            continue
        if exercise.is_circuit:
            continue
        exercise.is_in_circuit = False
        exercise.circuit_id = None
        exercise.circuit_order = None
        remaining.append(exercise)
    return document.replace_exercises(workout_id, remaining)
