"""Storage for Program Builder (.storage).

Each collection is persisted as its own whole JSON blob:
- program: the live program document
- workout-library / week-library / program-library: saved templates
- user-max-weights: the max-weight registry

Blobs are read and written whole; there are no partial updates.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

from homeassistant.core import HomeAssistant
from homeassistant.helpers.storage import Store

from .const import DOMAIN, KEY_MAX_WEIGHTS, KEY_PROGRAM, LIBRARY_KEYS, SAVE_DELAY_SECONDS, STORAGE_KEYS

_LOGGER = logging.getLogger(__name__)

_STORAGE_VERSION = 1


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()


def _default_for(key: str) -> dict[str, Any]:
    if key == KEY_PROGRAM:
        return {}
    if key == KEY_MAX_WEIGHTS:
        return {"records": {}}
    return {"items": []}


class ProgramBuilderStore:
    """Per-config-entry key/value storage wrapper."""

    def __init__(self, hass: HomeAssistant, entry_id: str) -> None:
        self._stores: dict[str, Store[dict[str, Any]]] = {
            key: Store(hass, _STORAGE_VERSION, f"{DOMAIN}_{entry_id}_{key}") for key in STORAGE_KEYS
        }
        self._data: dict[str, dict[str, Any]] = {}

    def _store(self, key: str) -> Store[dict[str, Any]]:
        store = self._stores.get(key)
        if store is None:
            raise KeyError(f"Unknown storage key: {key}")
        return store

    async def async_get(self, key: str) -> dict[str, Any]:
        """Return the blob stored under ``key`` or its empty default."""
        if key not in self._data:
            loaded = await self._store(key).async_load()
            if not isinstance(loaded, dict):
                loaded = _default_for(key)
            self._data[key] = loaded
        return self._data[key]

    def schedule_save(self, key: str, data_func: Callable[[], dict[str, Any]]) -> None:
        """Write ``key`` shortly after the latest change, coalescing bursts."""
        store = self._store(key)

        def _data() -> dict[str, Any]:
            try:
                next_data = dict(data_func() or {})
            except Exception:
                _LOGGER.exception("Could not serialize %s for saving", key)
                raise
            next_data["updated_at"] = _now_iso()
            self._data[key] = next_data
            return next_data

        store.async_delay_save(_data, SAVE_DELAY_SECONDS)

    async def async_load(self) -> dict[str, dict[str, Any]]:
        """Load every collection, filling in defaults for missing ones."""
        for key in STORAGE_KEYS:
            await self.async_get(key)
        _LOGGER.debug(
            "Loaded program builder storage (%s library collections)",
            len(LIBRARY_KEYS),
        )
        return dict(self._data)

    async def async_remove(self) -> None:
        for store in self._stores.values():
            await store.async_remove()
        self._data = {}
