"""Websocket API for Program Builder.

Mutating commands answer with ``{"result": ..., "state": ...}`` so the UI can
redraw from one round trip. An id that does not resolve answers with a
``not_found`` error and leaves the program untouched.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

import voluptuous as vol

from homeassistant.components import websocket_api
from homeassistant.core import HomeAssistant

from . import circuits
from .circuits import CircuitVariant
from .const import ALL_WEIGHT_TYPES, DOMAIN, LIBRARY_KEYS
from .coordinator import ProgramBuilderCoordinator
from .library import (
    load_program_from_library,
    load_week_to_program,
    load_workout_to_program,
    save_program_to_library,
    save_week_to_library,
    save_workout_to_library,
)

_LOGGER = logging.getLogger(__name__)

_ENTRY = {vol.Required("entry_id"): str}
_WORKOUT = {**_ENTRY, vol.Required("workout_id"): str}
_EXERCISE = {**_WORKOUT, vol.Required("exercise_id"): str}


def _coordinator(
    hass: HomeAssistant, connection: websocket_api.ActiveConnection, msg: dict[str, Any]
) -> ProgramBuilderCoordinator | None:
    entry_id = msg["entry_id"]
    coordinator = hass.data.get(DOMAIN, {}).get(entry_id)
    if coordinator is None:
        connection.send_error(msg["id"], "entry_not_found", f"No entry found for entry_id={entry_id}")
    return coordinator


def _apply(
    hass: HomeAssistant,
    connection: websocket_api.ActiveConnection,
    msg: dict[str, Any],
    operation: Callable[[ProgramBuilderCoordinator], Any],
) -> None:
    coordinator = _coordinator(hass, connection, msg)
    if coordinator is None:
        return
    result = operation(coordinator)
    if result is None or result is False:
        connection.send_error(msg["id"], "not_found", f"{msg['type']}: target not found")
        return
    connection.send_result(msg["id"], {"result": result, "state": coordinator.public_state()})


@websocket_api.websocket_command({vol.Required("type"): "program_builder/list_entries"})
@websocket_api.async_response
async def ws_list_entries(
    hass: HomeAssistant,
    connection: websocket_api.ActiveConnection,
    msg: dict[str, Any],
) -> None:
    entries = hass.config_entries.async_entries(DOMAIN)
    payload = [{"entry_id": entry.entry_id, "title": entry.title} for entry in entries]
    connection.send_result(msg["id"], {"entries": payload})


@websocket_api.websocket_command({vol.Required("type"): "program_builder/get_state", **_ENTRY})
@websocket_api.async_response
async def ws_get_state(
    hass: HomeAssistant,
    connection: websocket_api.ActiveConnection,
    msg: dict[str, Any],
) -> None:
    coordinator = _coordinator(hass, connection, msg)
    if coordinator is None:
        return
    connection.send_result(msg["id"], coordinator.public_state())


@websocket_api.websocket_command(
    {
        vol.Required("type"): "program_builder/get_catalog",
        **_ENTRY,
        vol.Optional("search", default=""): str,
    }
)
@websocket_api.async_response
async def ws_get_catalog(
    hass: HomeAssistant,
    connection: websocket_api.ActiveConnection,
    msg: dict[str, Any],
) -> None:
    coordinator = _coordinator(hass, connection, msg)
    if coordinator is None:
        return
    await coordinator.catalog.async_load()
    connection.send_result(msg["id"], {"exercises": coordinator.catalog.search(msg["search"])})


@websocket_api.websocket_command({vol.Required("type"): "program_builder/get_exercise_details", **_ENTRY, vol.Required("exercise_id"): str})
@websocket_api.async_response
async def ws_get_exercise_details(
    hass: HomeAssistant,
    connection: websocket_api.ActiveConnection,
    msg: dict[str, Any],
) -> None:
    coordinator = _coordinator(hass, connection, msg)
    if coordinator is None:
        return
    found = coordinator.document.get_exercise_details(msg["exercise_id"])
    if found is None:
        connection.send_error(msg["id"], "not_found", f"No exercise {msg['exercise_id']}")
        return
    exercise, entry = found
    connection.send_result(msg["id"], {"exercise": exercise.as_dict(), "catalog": entry})


@websocket_api.websocket_command({vol.Required("type"): "program_builder/check_integrity", **_ENTRY})
@websocket_api.async_response
async def ws_check_integrity(
    hass: HomeAssistant,
    connection: websocket_api.ActiveConnection,
    msg: dict[str, Any],
) -> None:
    coordinator = _coordinator(hass, connection, msg)
    if coordinator is None:
        return
    connection.send_result(msg["id"], {"problems": coordinator.document.check_integrity()})


# Program


@websocket_api.websocket_command({vol.Required("type"): "program_builder/reset_program", **_ENTRY})
@websocket_api.async_response
async def ws_reset_program(
    hass: HomeAssistant, connection: websocket_api.ActiveConnection, msg: dict[str, Any]
) -> None:
    def _op(c: ProgramBuilderCoordinator):
        c.document.reset()
        return c.document.program.id

    _apply(hass, connection, msg, _op)


@websocket_api.websocket_command({vol.Required("type"): "program_builder/load_sample_program", **_ENTRY})
@websocket_api.async_response
async def ws_load_sample_program(
    hass: HomeAssistant, connection: websocket_api.ActiveConnection, msg: dict[str, Any]
) -> None:
    def _op(c: ProgramBuilderCoordinator):
        c.document.load_sample_program()
        return c.document.program.id

    _apply(hass, connection, msg, _op)


@websocket_api.websocket_command(
    {vol.Required("type"): "program_builder/update_program", **_ENTRY, vol.Required("updates"): dict}
)
@websocket_api.async_response
async def ws_update_program(
    hass: HomeAssistant, connection: websocket_api.ActiveConnection, msg: dict[str, Any]
) -> None:
    _apply(hass, connection, msg, lambda c: c.document.update_program(msg["updates"]))


# Weeks


@websocket_api.websocket_command({vol.Required("type"): "program_builder/add_week", **_ENTRY})
@websocket_api.async_response
async def ws_add_week(
    hass: HomeAssistant, connection: websocket_api.ActiveConnection, msg: dict[str, Any]
) -> None:
    _apply(hass, connection, msg, lambda c: c.document.add_week())


@websocket_api.websocket_command(
    {
        vol.Required("type"): "program_builder/update_week",
        **_ENTRY,
        vol.Required("week_id"): str,
        vol.Required("updates"): dict,
    }
)
@websocket_api.async_response
async def ws_update_week(
    hass: HomeAssistant, connection: websocket_api.ActiveConnection, msg: dict[str, Any]
) -> None:
    _apply(hass, connection, msg, lambda c: c.document.update_week(msg["week_id"], msg["updates"]))


@websocket_api.websocket_command(
    {
        vol.Required("type"): "program_builder/move_week",
        **_ENTRY,
        vol.Required("week_id"): str,
        vol.Required("index"): vol.Coerce(int),
    }
)
@websocket_api.async_response
async def ws_move_week(
    hass: HomeAssistant, connection: websocket_api.ActiveConnection, msg: dict[str, Any]
) -> None:
    _apply(hass, connection, msg, lambda c: c.document.move_week(msg["week_id"], msg["index"]))


@websocket_api.websocket_command(
    {
        vol.Required("type"): "program_builder/delete_week",
        **_ENTRY,
        vol.Required("week_id"): str,
        vol.Optional("delete_workouts", default=False): bool,
    }
)
@websocket_api.async_response
async def ws_delete_week(
    hass: HomeAssistant, connection: websocket_api.ActiveConnection, msg: dict[str, Any]
) -> None:
    _apply(
        hass,
        connection,
        msg,
        lambda c: c.document.delete_week(msg["week_id"], delete_workouts=msg["delete_workouts"]),
    )


@websocket_api.websocket_command({vol.Required("type"): "program_builder/collect_unreferenced_workouts", **_ENTRY})
@websocket_api.async_response
async def ws_collect_unreferenced_workouts(
    hass: HomeAssistant, connection: websocket_api.ActiveConnection, msg: dict[str, Any]
) -> None:
    _apply(hass, connection, msg, lambda c: {"removed": c.document.collect_unreferenced_workouts()})


# Workouts


@websocket_api.websocket_command({vol.Required("type"): "program_builder/add_workout", **_ENTRY, vol.Required("week_id"): str})
@websocket_api.async_response
async def ws_add_workout(
    hass: HomeAssistant, connection: websocket_api.ActiveConnection, msg: dict[str, Any]
) -> None:
    _apply(hass, connection, msg, lambda c: c.document.add_workout(msg["week_id"]))


@websocket_api.websocket_command(
    {vol.Required("type"): "program_builder/update_workout", **_WORKOUT, vol.Required("updates"): dict}
)
@websocket_api.async_response
async def ws_update_workout(
    hass: HomeAssistant, connection: websocket_api.ActiveConnection, msg: dict[str, Any]
) -> None:
    _apply(hass, connection, msg, lambda c: c.document.update_workout(msg["workout_id"], msg["updates"]))


@websocket_api.websocket_command(
    {vol.Required("type"): "program_builder/delete_workout", **_WORKOUT, vol.Required("week_id"): str}
)
@websocket_api.async_response
async def ws_delete_workout(
    hass: HomeAssistant, connection: websocket_api.ActiveConnection, msg: dict[str, Any]
) -> None:
    _apply(hass, connection, msg, lambda c: c.document.delete_workout(msg["week_id"], msg["workout_id"]))


@websocket_api.websocket_command(
    {
        vol.Required("type"): "program_builder/move_workout",
        **_WORKOUT,
        vol.Required("from_week_id"): str,
        vol.Required("to_week_id"): str,
    }
)
@websocket_api.async_response
async def ws_move_workout(
    hass: HomeAssistant, connection: websocket_api.ActiveConnection, msg: dict[str, Any]
) -> None:
    _apply(
        hass,
        connection,
        msg,
        lambda c: c.document.move_workout(msg["workout_id"], msg["from_week_id"], msg["to_week_id"]),
    )


@websocket_api.websocket_command(
    {vol.Required("type"): "program_builder/clone_workout", **_WORKOUT, vol.Optional("week_id"): str}
)
@websocket_api.async_response
async def ws_clone_workout(
    hass: HomeAssistant, connection: websocket_api.ActiveConnection, msg: dict[str, Any]
) -> None:
    _apply(hass, connection, msg, lambda c: c.document.clone_workout(msg["workout_id"], msg.get("week_id")))


# Exercises


@websocket_api.websocket_command(
    {
        vol.Required("type"): "program_builder/add_exercise",
        **_WORKOUT,
        vol.Optional("library_exercise_id"): str,
    }
)
@websocket_api.async_response
async def ws_add_exercise(
    hass: HomeAssistant, connection: websocket_api.ActiveConnection, msg: dict[str, Any]
) -> None:
    _apply(
        hass,
        connection,
        msg,
        lambda c: c.document.add_exercise(msg["workout_id"], msg.get("library_exercise_id")),
    )


@websocket_api.websocket_command(
    {vol.Required("type"): "program_builder/update_exercise", **_EXERCISE, vol.Required("updates"): dict}
)
@websocket_api.async_response
async def ws_update_exercise(
    hass: HomeAssistant, connection: websocket_api.ActiveConnection, msg: dict[str, Any]
) -> None:
    _apply(
        hass,
        connection,
        msg,
        lambda c: c.document.update_exercise(msg["workout_id"], msg["exercise_id"], msg["updates"]),
    )


@websocket_api.websocket_command({vol.Required("type"): "program_builder/duplicate_exercise", **_EXERCISE})
@websocket_api.async_response
async def ws_duplicate_exercise(
    hass: HomeAssistant, connection: websocket_api.ActiveConnection, msg: dict[str, Any]
) -> None:
    _apply(hass, connection, msg, lambda c: c.document.duplicate_exercise(msg["workout_id"], msg["exercise_id"]))


@websocket_api.websocket_command({vol.Required("type"): "program_builder/delete_exercise", **_EXERCISE})
@websocket_api.async_response
async def ws_delete_exercise(
    hass: HomeAssistant, connection: websocket_api.ActiveConnection, msg: dict[str, Any]
) -> None:
    _apply(hass, connection, msg, lambda c: c.document.delete_exercise(msg["workout_id"], msg["exercise_id"]))


@websocket_api.websocket_command(
    {
        vol.Required("type"): "program_builder/create_group",
        **_WORKOUT,
        vol.Required("exercise_ids"): [str],
        vol.Optional("name", default="Group"): str,
    }
)
@websocket_api.async_response
async def ws_create_group(
    hass: HomeAssistant, connection: websocket_api.ActiveConnection, msg: dict[str, Any]
) -> None:
    _apply(
        hass,
        connection,
        msg,
        lambda c: c.document.create_group(msg["workout_id"], msg["exercise_ids"], msg["name"]),
    )


@websocket_api.websocket_command(
    {vol.Required("type"): "program_builder/ungroup", **_WORKOUT, vol.Required("group_id"): str}
)
@websocket_api.async_response
async def ws_ungroup(
    hass: HomeAssistant, connection: websocket_api.ActiveConnection, msg: dict[str, Any]
) -> None:
    _apply(hass, connection, msg, lambda c: c.document.ungroup(msg["workout_id"], msg["group_id"]))


# Circuits


@websocket_api.websocket_command(
    {
        vol.Required("type"): "program_builder/create_circuit",
        **_WORKOUT,
        vol.Required("variant"): vol.In([v.value for v in CircuitVariant]),
    }
)
@websocket_api.async_response
async def ws_create_circuit(
    hass: HomeAssistant, connection: websocket_api.ActiveConnection, msg: dict[str, Any]
) -> None:
    _apply(hass, connection, msg, lambda c: circuits.create_group(c.document, msg["workout_id"], msg["variant"]))


@websocket_api.websocket_command(
    {vol.Required("type"): "program_builder/dissolve_circuit", **_WORKOUT, vol.Required("circuit_id"): str}
)
@websocket_api.async_response
async def ws_dissolve_circuit(
    hass: HomeAssistant, connection: websocket_api.ActiveConnection, msg: dict[str, Any]
) -> None:
    _apply(
        hass,
        connection,
        msg,
        lambda c: circuits.dissolve_circuit(c.document, msg["workout_id"], msg["circuit_id"]),
    )


# Sets


@websocket_api.websocket_command({vol.Required("type"): "program_builder/add_set", **_EXERCISE})
@websocket_api.async_response
async def ws_add_set(
    hass: HomeAssistant, connection: websocket_api.ActiveConnection, msg: dict[str, Any]
) -> None:
    _apply(hass, connection, msg, lambda c: c.document.add_set(msg["workout_id"], msg["exercise_id"]))


@websocket_api.websocket_command(
    {
        vol.Required("type"): "program_builder/update_set",
        **_EXERCISE,
        vol.Required("set_id"): str,
        vol.Required("updates"): dict,
    }
)
@websocket_api.async_response
async def ws_update_set(
    hass: HomeAssistant, connection: websocket_api.ActiveConnection, msg: dict[str, Any]
) -> None:
    _apply(
        hass,
        connection,
        msg,
        lambda c: c.document.update_set(msg["workout_id"], msg["exercise_id"], msg["set_id"], msg["updates"]),
    )


@websocket_api.websocket_command(
    {vol.Required("type"): "program_builder/delete_set", **_EXERCISE, vol.Required("set_id"): str}
)
@websocket_api.async_response
async def ws_delete_set(
    hass: HomeAssistant, connection: websocket_api.ActiveConnection, msg: dict[str, Any]
) -> None:
    _apply(
        hass,
        connection,
        msg,
        lambda c: c.document.delete_set(msg["workout_id"], msg["exercise_id"], msg["set_id"]),
    )


# Library


@websocket_api.websocket_command(
    {vol.Required("type"): "program_builder/save_workout_to_library", **_WORKOUT, vol.Required("name"): str}
)
@websocket_api.async_response
async def ws_save_workout_to_library(
    hass: HomeAssistant, connection: websocket_api.ActiveConnection, msg: dict[str, Any]
) -> None:
    def _op(c: ProgramBuilderCoordinator):
        workout = c.document.get_workout(msg["workout_id"])
        if workout is None:
            return None
        return save_workout_to_library(c.library, workout, msg["name"]).id

    _apply(hass, connection, msg, _op)


@websocket_api.websocket_command(
    {
        vol.Required("type"): "program_builder/save_week_to_library",
        **_ENTRY,
        vol.Required("week_id"): str,
        vol.Required("name"): str,
    }
)
@websocket_api.async_response
async def ws_save_week_to_library(
    hass: HomeAssistant, connection: websocket_api.ActiveConnection, msg: dict[str, Any]
) -> None:
    def _op(c: ProgramBuilderCoordinator):
        entry = save_week_to_library(c.library, c.document.program, msg["week_id"], msg["name"])
        return entry.id if entry is not None else None

    _apply(hass, connection, msg, _op)


@websocket_api.websocket_command(
    {vol.Required("type"): "program_builder/save_program_to_library", **_ENTRY, vol.Required("name"): str}
)
@websocket_api.async_response
async def ws_save_program_to_library(
    hass: HomeAssistant, connection: websocket_api.ActiveConnection, msg: dict[str, Any]
) -> None:
    _apply(hass, connection, msg, lambda c: save_program_to_library(c.library, c.document.program, msg["name"]).id)


@websocket_api.websocket_command(
    {
        vol.Required("type"): "program_builder/load_workout_to_program",
        **_ENTRY,
        vol.Required("library_workout_id"): str,
        vol.Required("week_id"): str,
        vol.Optional("day"): vol.All(vol.Coerce(int), vol.Range(min=1)),
    }
)
@websocket_api.async_response
async def ws_load_workout_to_program(
    hass: HomeAssistant, connection: websocket_api.ActiveConnection, msg: dict[str, Any]
) -> None:
    _apply(
        hass,
        connection,
        msg,
        lambda c: load_workout_to_program(
            c.document, c.library, msg["library_workout_id"], msg["week_id"], msg.get("day")
        ),
    )


@websocket_api.websocket_command(
    {vol.Required("type"): "program_builder/load_week_to_program", **_ENTRY, vol.Required("library_week_id"): str}
)
@websocket_api.async_response
async def ws_load_week_to_program(
    hass: HomeAssistant, connection: websocket_api.ActiveConnection, msg: dict[str, Any]
) -> None:
    _apply(hass, connection, msg, lambda c: load_week_to_program(c.document, c.library, msg["library_week_id"]))


@websocket_api.websocket_command(
    {vol.Required("type"): "program_builder/load_program_from_library", **_ENTRY, vol.Required("library_program_id"): str}
)
@websocket_api.async_response
async def ws_load_program_from_library(
    hass: HomeAssistant, connection: websocket_api.ActiveConnection, msg: dict[str, Any]
) -> None:
    _apply(
        hass,
        connection,
        msg,
        lambda c: load_program_from_library(c.document, c.library, msg["library_program_id"]),
    )


@websocket_api.websocket_command(
    {
        vol.Required("type"): "program_builder/remove_library_entry",
        **_ENTRY,
        vol.Required("collection"): vol.In(LIBRARY_KEYS),
        vol.Required("item_id"): str,
    }
)
@websocket_api.async_response
async def ws_remove_library_entry(
    hass: HomeAssistant, connection: websocket_api.ActiveConnection, msg: dict[str, Any]
) -> None:
    _apply(hass, connection, msg, lambda c: c.library.remove(msg["collection"], msg["item_id"]))


@websocket_api.websocket_command(
    {
        vol.Required("type"): "program_builder/rename_library_entry",
        **_ENTRY,
        vol.Required("collection"): vol.In(LIBRARY_KEYS),
        vol.Required("item_id"): str,
        vol.Required("name"): str,
    }
)
@websocket_api.async_response
async def ws_rename_library_entry(
    hass: HomeAssistant, connection: websocket_api.ActiveConnection, msg: dict[str, Any]
) -> None:
    _apply(hass, connection, msg, lambda c: c.library.rename(msg["collection"], msg["item_id"], msg["name"]))


# Max weights


@websocket_api.websocket_command(
    {
        vol.Required("type"): "program_builder/set_max_weight",
        **_ENTRY,
        vol.Required("exercise_name"): str,
        vol.Required("max_weight"): vol.Coerce(str),
        vol.Optional("weight_type"): vol.In(ALL_WEIGHT_TYPES),
    }
)
@websocket_api.async_response
async def ws_set_max_weight(
    hass: HomeAssistant, connection: websocket_api.ActiveConnection, msg: dict[str, Any]
) -> None:
    _apply(
        hass,
        connection,
        msg,
        lambda c: c.registry.set(
            msg["exercise_name"], msg["max_weight"], msg.get("weight_type", c.weight_type)
        ).as_dict(),
    )


@websocket_api.websocket_command(
    {vol.Required("type"): "program_builder/remove_max_weight", **_ENTRY, vol.Required("exercise_name"): str}
)
@websocket_api.async_response
async def ws_remove_max_weight(
    hass: HomeAssistant, connection: websocket_api.ActiveConnection, msg: dict[str, Any]
) -> None:
    _apply(hass, connection, msg, lambda c: c.registry.remove(msg["exercise_name"]))


@websocket_api.websocket_command(
    {
        vol.Required("type"): "program_builder/calculate_weight",
        **_ENTRY,
        vol.Required("exercise_name"): str,
        vol.Required("percentage"): vol.Coerce(str),
        vol.Optional("weight_type"): vol.In(ALL_WEIGHT_TYPES),
    }
)
@websocket_api.async_response
async def ws_calculate_weight(
    hass: HomeAssistant, connection: websocket_api.ActiveConnection, msg: dict[str, Any]
) -> None:
    coordinator = _coordinator(hass, connection, msg)
    if coordinator is None:
        return
    weight = coordinator.registry.percentage_to_weight(
        msg["percentage"], msg["exercise_name"], msg.get("weight_type", coordinator.weight_type)
    )
    connection.send_result(msg["id"], {"weight": weight})


@websocket_api.websocket_command(
    {
        vol.Required("type"): "program_builder/calculate_percentage",
        **_ENTRY,
        vol.Required("exercise_name"): str,
        vol.Required("weight"): vol.Coerce(str),
    }
)
@websocket_api.async_response
async def ws_calculate_percentage(
    hass: HomeAssistant, connection: websocket_api.ActiveConnection, msg: dict[str, Any]
) -> None:
    coordinator = _coordinator(hass, connection, msg)
    if coordinator is None:
        return
    percentage = coordinator.registry.weight_to_percentage(msg["weight"], msg["exercise_name"])
    connection.send_result(msg["id"], {"percentage": percentage})


def async_register(hass: HomeAssistant) -> None:
    for handler in (
        ws_list_entries,
        ws_get_state,
        ws_get_catalog,
        ws_get_exercise_details,
        ws_check_integrity,
        ws_reset_program,
        ws_load_sample_program,
        ws_update_program,
        ws_add_week,
        ws_update_week,
        ws_move_week,
        ws_delete_week,
        ws_collect_unreferenced_workouts,
        ws_add_workout,
        ws_update_workout,
        ws_delete_workout,
        ws_move_workout,
        ws_clone_workout,
        ws_add_exercise,
        ws_update_exercise,
        ws_duplicate_exercise,
        ws_delete_exercise,
        ws_create_group,
        ws_ungroup,
        ws_create_circuit,
        ws_dissolve_circuit,
        ws_add_set,
        ws_update_set,
        ws_delete_set,
        ws_save_workout_to_library,
        ws_save_week_to_library,
        ws_save_program_to_library,
        ws_load_workout_to_program,
        ws_load_week_to_program,
        ws_load_program_from_library,
        ws_remove_library_entry,
        ws_rename_library_entry,
        ws_set_max_weight,
        ws_remove_max_weight,
        ws_calculate_weight,
        ws_calculate_percentage,
    ):
        websocket_api.async_register_command(hass, handler)
    _LOGGER.debug("Registered program builder websocket commands")
