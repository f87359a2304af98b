"""Entity helpers for Program Builder."""

from __future__ import annotations

from homeassistant.config_entries import ConfigEntry
from homeassistant.helpers.device_registry import DeviceInfo

from .const import CONF_NAME, DEFAULT_NAME, DOMAIN
from .version import BACKEND_VERSION


def entry_option(entry: ConfigEntry, key: str, default):
    """Options win over the data captured by the config flow."""
    return entry.options.get(key, entry.data.get(key, default))


def device_info_from_entry(entry: ConfigEntry) -> DeviceInfo:
    name = entry_option(entry, CONF_NAME, DEFAULT_NAME)
    return DeviceInfo(
        identifiers={(DOMAIN, entry.entry_id)},
        name=str(name),
        manufacturer="Open source",
        model="Program Builder",
        sw_version=BACKEND_VERSION,
    )
