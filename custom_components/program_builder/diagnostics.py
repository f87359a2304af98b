"""Diagnostics support for Program Builder.

This file is picked up by Home Assistant automatically when present.
"""

from __future__ import annotations

from typing import Any

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant

from .const import DOMAIN


async def async_get_config_entry_diagnostics(
    hass: HomeAssistant,
    entry: ConfigEntry,
) -> dict[str, Any]:
    """Return diagnostics for a config entry."""
    coordinator = hass.data.get(DOMAIN, {}).get(entry.entry_id)
    payload: dict[str, Any] = {
        "entry": {
            "entry_id": entry.entry_id,
            "title": entry.title,
            "version": entry.version,
            "data": dict(entry.data),
            "options": dict(entry.options),
        },
    }

    if coordinator is not None:
        program = coordinator.document.program
        referenced = {wid for week in program.weeks for wid in week.workout_ids}
        payload["coordinator"] = {
            "last_update_success": bool(getattr(coordinator, "last_update_success", False)),
            "last_exception": repr(getattr(coordinator, "last_exception", None)),
        }
        payload["program"] = {
            "id": program.id,
            "weeks": len(program.weeks),
            "workouts": len(program.workouts),
            "unreferenced_workouts": len(set(program.workouts) - referenced),
            "exercises": sum(len(w.exercises) for w in program.workouts.values()),
            "integrity_problems": coordinator.document.check_integrity(),
        }
        payload["library"] = {
            "workouts": len(coordinator.library.workouts),
            "weeks": len(coordinator.library.weeks),
            "programs": len(coordinator.library.programs),
        }
        payload["max_weights"] = len(coordinator.registry.records)

    return payload
