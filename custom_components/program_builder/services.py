"""Services for Program Builder."""

from __future__ import annotations

import voluptuous as vol

from homeassistant.core import HomeAssistant, ServiceCall, ServiceResponse, SupportsResponse

from .const import ALL_WEIGHT_TYPES, DOMAIN
from .library import save_program_to_library

SERVICE_SET_MAX_WEIGHT = "set_max_weight"
SERVICE_REMOVE_MAX_WEIGHT = "remove_max_weight"
SERVICE_CALCULATE_WEIGHT = "calculate_weight"
SERVICE_CALCULATE_PERCENTAGE = "calculate_percentage"
SERVICE_SAVE_PROGRAM_TO_LIBRARY = "save_program_to_library"
SERVICE_LOAD_SAMPLE_PROGRAM = "load_sample_program"
SERVICE_RESET_PROGRAM = "reset_program"

_ENTRY_SCHEMA = vol.Schema({vol.Required("entry_id"): str})
_EXERCISE_SCHEMA = vol.Schema({vol.Required("entry_id"): str, vol.Required("exercise_name"): str})
_SET_MAX_SCHEMA = vol.Schema(
    {
        vol.Required("entry_id"): str,
        vol.Required("exercise_name"): str,
        vol.Required("max_weight"): vol.Coerce(str),
        vol.Optional("weight_type"): vol.In(ALL_WEIGHT_TYPES),
    }
)
_CALCULATE_WEIGHT_SCHEMA = vol.Schema(
    {
        vol.Required("entry_id"): str,
        vol.Required("exercise_name"): str,
        vol.Required("percentage"): vol.Coerce(str),
        vol.Optional("weight_type"): vol.In(ALL_WEIGHT_TYPES),
    }
)
_CALCULATE_PERCENTAGE_SCHEMA = vol.Schema(
    {
        vol.Required("entry_id"): str,
        vol.Required("exercise_name"): str,
        vol.Required("weight"): vol.Coerce(str),
    }
)
_SAVE_PROGRAM_SCHEMA = vol.Schema({vol.Required("entry_id"): str, vol.Required("name"): str})


async def async_register(hass: HomeAssistant) -> None:
    def _coordinator_for_entry(entry_id: str):
        return hass.data.get(DOMAIN, {}).get(entry_id)

    async def _async_set_max_weight(call: ServiceCall) -> ServiceResponse:
        entry_id = str(call.data["entry_id"])
        coordinator = _coordinator_for_entry(entry_id)
        if coordinator is None:
            return {"ok": False, "error": "entry_not_found"}
        record = coordinator.registry.set(
            str(call.data["exercise_name"]).strip(),
            str(call.data["max_weight"]).strip(),
            call.data.get("weight_type", coordinator.weight_type),
        )
        return {"ok": True, "entry_id": entry_id, "record": record.as_dict()}

    async def _async_remove_max_weight(call: ServiceCall) -> ServiceResponse:
        entry_id = str(call.data["entry_id"])
        coordinator = _coordinator_for_entry(entry_id)
        if coordinator is None:
            return {"ok": False, "error": "entry_not_found"}
        if not coordinator.registry.remove(str(call.data["exercise_name"])):
            return {"ok": False, "error": "max_weight_not_found"}
        return {"ok": True, "entry_id": entry_id}

    async def _async_calculate_weight(call: ServiceCall) -> ServiceResponse:
        entry_id = str(call.data["entry_id"])
        coordinator = _coordinator_for_entry(entry_id)
        if coordinator is None:
            return {"ok": False, "error": "entry_not_found"}
        weight = coordinator.registry.percentage_to_weight(
            call.data["percentage"],
            str(call.data["exercise_name"]),
            call.data.get("weight_type", coordinator.weight_type),
        )
        return {"ok": bool(weight), "entry_id": entry_id, "weight": weight}

    async def _async_calculate_percentage(call: ServiceCall) -> ServiceResponse:
        entry_id = str(call.data["entry_id"])
        coordinator = _coordinator_for_entry(entry_id)
        if coordinator is None:
            return {"ok": False, "error": "entry_not_found"}
        percentage = coordinator.registry.weight_to_percentage(call.data["weight"], str(call.data["exercise_name"]))
        return {"ok": bool(percentage), "entry_id": entry_id, "percentage": percentage}

    async def _async_save_program_to_library(call: ServiceCall) -> ServiceResponse:
        entry_id = str(call.data["entry_id"])
        coordinator = _coordinator_for_entry(entry_id)
        if coordinator is None:
            return {"ok": False, "error": "entry_not_found"}
        entry = save_program_to_library(coordinator.library, coordinator.document.program, str(call.data["name"]))
        return {"ok": True, "entry_id": entry_id, "library_program_id": entry.id}

    async def _async_load_sample_program(call: ServiceCall) -> ServiceResponse:
        entry_id = str(call.data["entry_id"])
        coordinator = _coordinator_for_entry(entry_id)
        if coordinator is None:
            return {"ok": False, "error": "entry_not_found"}
        coordinator.document.load_sample_program()
        return {"ok": True, "entry_id": entry_id, "program": coordinator.document.program.as_dict()}

    async def _async_reset_program(call: ServiceCall) -> ServiceResponse:
        entry_id = str(call.data["entry_id"])
        coordinator = _coordinator_for_entry(entry_id)
        if coordinator is None:
            return {"ok": False, "error": "entry_not_found"}
        coordinator.document.reset()
        return {"ok": True, "entry_id": entry_id, "program": coordinator.document.program.as_dict()}

    for name, handler, schema in (
        (SERVICE_SET_MAX_WEIGHT, _async_set_max_weight, _SET_MAX_SCHEMA),
        (SERVICE_REMOVE_MAX_WEIGHT, _async_remove_max_weight, _EXERCISE_SCHEMA),
        (SERVICE_CALCULATE_WEIGHT, _async_calculate_weight, _CALCULATE_WEIGHT_SCHEMA),
        (SERVICE_CALCULATE_PERCENTAGE, _async_calculate_percentage, _CALCULATE_PERCENTAGE_SCHEMA),
        (SERVICE_SAVE_PROGRAM_TO_LIBRARY, _async_save_program_to_library, _SAVE_PROGRAM_SCHEMA),
        (SERVICE_LOAD_SAMPLE_PROGRAM, _async_load_sample_program, _ENTRY_SCHEMA),
        (SERVICE_RESET_PROGRAM, _async_reset_program, _ENTRY_SCHEMA),
    ):
        if hass.services.has_service(DOMAIN, name):
            continue
        hass.services.async_register(
            DOMAIN,
            name,
            handler,
            schema=schema,
            supports_response=SupportsResponse.ONLY,
        )
