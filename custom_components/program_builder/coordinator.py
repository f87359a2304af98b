"""Coordinator for Program Builder."""

from __future__ import annotations

import logging
from typing import Any

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant, callback
from homeassistant.helpers.dispatcher import async_dispatcher_send
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator

from .catalog import ExerciseCatalog
from .const import (
    ALL_WEIGHT_TYPES,
    CONF_WEIGHT_TYPE,
    DEFAULT_WEIGHT_TYPE,
    DOMAIN,
    KEY_MAX_WEIGHTS,
    KEY_PROGRAM,
    LIBRARY_KEYS,
    SIGNAL_PROGRAM_UPDATED,
)
from .document import ProgramDocument
from .entity import entry_option
from .library import ProgramLibrary
from .max_weights import MaxWeightRegistry
from .models import Program
from .storage import ProgramBuilderStore
from .version import BACKEND_VERSION
from .ws_state import public_state

_LOGGER = logging.getLogger(__name__)


class ProgramBuilderCoordinator(DataUpdateCoordinator[dict[str, Any]]):
    """Owns the live program, the library and the max-weight registry.

    Mutations happen synchronously on the in-memory objects; change listeners
    schedule a delayed save of the affected blob and push fresh state to
    entities and the UI.
    """

    def __init__(self, hass: HomeAssistant, entry: ConfigEntry) -> None:
        self.entry = entry
        self.store = ProgramBuilderStore(hass, entry.entry_id)
        self.catalog = ExerciseCatalog()
        self.library = ProgramLibrary()
        self.registry = MaxWeightRegistry()
        self.document = ProgramDocument(catalog=self.catalog)
        self._loaded = False

        super().__init__(
            hass,
            logger=_LOGGER,
            name=f"{DOMAIN}_{entry.entry_id}",
            update_interval=None,
        )

    @property
    def weight_type(self) -> str:
        value = str(entry_option(self.entry, CONF_WEIGHT_TYPE, DEFAULT_WEIGHT_TYPE))
        return value if value in ALL_WEIGHT_TYPES else DEFAULT_WEIGHT_TYPE

    async def _async_update_data(self) -> dict[str, Any]:
        # Storage is read once; afterwards the in-memory objects are the source of truth.
        if not self._loaded:
            await self._async_load()
        return self.public_state()

    async def _async_load(self) -> None:
        blobs = await self.store.async_load()
        await self.catalog.async_load()

        raw_program = blobs.get(KEY_PROGRAM) or {}
        if raw_program.get("id"):
            self.document.reset(Program.from_dict(raw_program))
        for key in LIBRARY_KEYS:
            self.library.load(key, blobs.get(key))
        self.registry.load(blobs.get(KEY_MAX_WEIGHTS))

        problems = self.document.check_integrity()
        if problems:
            _LOGGER.warning(
                "Stored program for entry_id=%s has %s integrity problems: %s",
                self.entry.entry_id,
                len(problems),
                problems[:5],
            )

        remove_listeners = [
            self.document.add_listener(self._program_changed),
            self.library.add_listener(self._library_changed),
            self.registry.add_listener(self._max_weights_changed),
        ]
        for remove in remove_listeners:
            self.entry.async_on_unload(remove)
        self._loaded = True

    def public_state(self) -> dict[str, Any]:
        return public_state(
            self.document,
            self.library,
            self.registry,
            runtime={"weight_type": self.weight_type, "backend_version": BACKEND_VERSION},
        )

    @callback
    def _program_changed(self) -> None:
        self.store.schedule_save(KEY_PROGRAM, lambda: self.document.program.as_dict())
        self._async_publish()

    @callback
    def _library_changed(self, key: str) -> None:
        self.store.schedule_save(key, lambda: self.library.as_dict(key))
        self._async_publish()

    @callback
    def _max_weights_changed(self) -> None:
        self.store.schedule_save(KEY_MAX_WEIGHTS, self.registry.as_dict)
        self._async_publish()

    @callback
    def _async_publish(self) -> None:
        async_dispatcher_send(self.hass, f"{SIGNAL_PROGRAM_UPDATED}_{self.entry.entry_id}")
        self.async_set_updated_data(self.public_state())
