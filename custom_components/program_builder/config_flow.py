"""Config flow for Program Builder."""

from __future__ import annotations

from typing import Any

import voluptuous as vol

from homeassistant import config_entries
from homeassistant.core import callback

from .const import (
    ALL_WEIGHT_TYPES,
    CONF_NAME,
    CONF_WEIGHT_TYPE,
    DEFAULT_NAME,
    DEFAULT_WEIGHT_TYPE,
    DOMAIN,
)


def _schema(name: str, weight_type: str) -> vol.Schema:
    return vol.Schema(
        {
            vol.Required(CONF_NAME, default=name): str,
            vol.Required(CONF_WEIGHT_TYPE, default=weight_type): vol.In(ALL_WEIGHT_TYPES),
        }
    )


def _clean(user_input: dict[str, Any]) -> dict[str, Any]:
    name = str(user_input.get(CONF_NAME, DEFAULT_NAME)).strip() or DEFAULT_NAME
    weight_type = str(user_input.get(CONF_WEIGHT_TYPE) or DEFAULT_WEIGHT_TYPE)
    if weight_type not in ALL_WEIGHT_TYPES:
        weight_type = DEFAULT_WEIGHT_TYPE
    return {CONF_NAME: name, CONF_WEIGHT_TYPE: weight_type}


class ProgramBuilderConfigFlow(config_entries.ConfigFlow, domain=DOMAIN):
    """Handle a config flow for Program Builder."""

    VERSION = 1

    async def async_step_user(self, user_input: dict[str, Any] | None = None):
        if user_input is not None:
            data = _clean(user_input)
            await self.async_set_unique_id(data[CONF_NAME].lower())
            self._abort_if_unique_id_configured()
            return self.async_create_entry(title=data[CONF_NAME], data=data)

        return self.async_show_form(step_id="user", data_schema=_schema(DEFAULT_NAME, DEFAULT_WEIGHT_TYPE))

    @staticmethod
    @callback
    def async_get_options_flow(config_entry):
        return ProgramBuilderOptionsFlow(config_entry)


class ProgramBuilderOptionsFlow(config_entries.OptionsFlow):
    """Handle options for Program Builder."""

    def __init__(self, config_entry) -> None:
        self._entry = config_entry

    async def async_step_init(self, user_input: dict[str, Any] | None = None):
        if user_input is not None:
            return self.async_create_entry(title="", data=_clean(user_input))

        current = {**self._entry.data, **self._entry.options}
        schema = _schema(
            str(current.get(CONF_NAME, DEFAULT_NAME)),
            str(current.get(CONF_WEIGHT_TYPE, DEFAULT_WEIGHT_TYPE)),
        )
        return self.async_show_form(step_id="init", data_schema=schema)
