"""Sensor platform for Program Builder."""

from __future__ import annotations

from typing import Any

from homeassistant.components.sensor import SensorEntity
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback
from homeassistant.helpers.update_coordinator import CoordinatorEntity

from .const import DOMAIN
from .coordinator import ProgramBuilderCoordinator
from .entity import device_info_from_entry


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    coordinator: ProgramBuilderCoordinator = hass.data[DOMAIN][entry.entry_id]
    async_add_entities([ProgramSensor(entry, coordinator), MaxWeightsSensor(entry, coordinator)])


class _ProgramBuilderSensor(CoordinatorEntity[ProgramBuilderCoordinator], SensorEntity):
    _attr_has_entity_name = True

    def __init__(self, entry: ConfigEntry, coordinator: ProgramBuilderCoordinator, key: str) -> None:
        super().__init__(coordinator)
        self._entry = entry
        self._attr_unique_id = f"{entry.entry_id}_{key}"
        self._attr_translation_key = key
        self._attr_device_info = device_info_from_entry(entry)


class ProgramSensor(_ProgramBuilderSensor):
    """Number of weeks in the live program, with a summary as attributes."""

    _attr_icon = "mdi:calendar-week"

    def __init__(self, entry: ConfigEntry, coordinator: ProgramBuilderCoordinator) -> None:
        super().__init__(entry, coordinator, "program")

    @property
    def native_value(self) -> int:
        program = (self.coordinator.data or {}).get("program") or {}
        weeks = program.get("weeks")
        return len(weeks) if isinstance(weeks, list) else 0

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        data = self.coordinator.data or {}
        program = data.get("program") or {}
        library = data.get("library") or {}
        weeks = program.get("weeks") if isinstance(program.get("weeks"), list) else []
        workouts = program.get("workouts") if isinstance(program.get("workouts"), list) else []
        return {
            "entry_id": self._entry.entry_id,
            "program_id": program.get("id"),
            "program_name": program.get("name"),
            "weeks": [{"id": w.get("id"), "name": w.get("name"), "workouts": len(w.get("workout_ids") or [])} for w in weeks],
            "workout_count": len(workouts),
            "library_workouts": len(library.get("workouts") or []),
            "library_weeks": len(library.get("weeks") or []),
            "library_programs": len(library.get("programs") or []),
        }


class MaxWeightsSensor(_ProgramBuilderSensor):
    """Number of recorded max weights."""

    _attr_icon = "mdi:weight-lifter"

    def __init__(self, entry: ConfigEntry, coordinator: ProgramBuilderCoordinator) -> None:
        super().__init__(entry, coordinator, "max_weights")

    @property
    def native_value(self) -> int:
        records = (self.coordinator.data or {}).get("max_weights") or {}
        return len(records)

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        records = (self.coordinator.data or {}).get("max_weights") or {}
        return {
            "entry_id": self._entry.entry_id,
            "records": {
                r.get("exercise_name"): f"{r.get('max_weight')} ({r.get('weight_type')})" for r in records.values()
            },
        }
