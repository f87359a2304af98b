"""Websocket state helpers."""

from __future__ import annotations

from typing import Any

from .const import KEY_PROGRAM_LIBRARY, KEY_WEEK_LIBRARY, KEY_WORKOUT_LIBRARY
from .document import ProgramDocument
from .library import ProgramLibrary
from .max_weights import MaxWeightRegistry


def public_state(
    document: ProgramDocument,
    library: ProgramLibrary,
    registry: MaxWeightRegistry,
    *,
    runtime: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Return a stable public payload for the UI."""
    return {
        "schema": 1,
        "program": document.program.as_dict(),
        "library": {
            "workouts": library.as_dict(KEY_WORKOUT_LIBRARY)["items"],
            "weeks": library.as_dict(KEY_WEEK_LIBRARY)["items"],
            "programs": library.as_dict(KEY_PROGRAM_LIBRARY)["items"],
        },
        "max_weights": registry.as_dict()["records"],
        "runtime": runtime or {},
    }
