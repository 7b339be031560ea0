"""Config flow for HottoH pellet stove integration."""

from __future__ import annotations

import logging
from typing import Any

import voluptuous as vol

from homeassistant.config_entries import ConfigFlow, ConfigFlowResult
from homeassistant.const import CONF_HOST, CONF_PORT

from .connection import StoveConnection
from .const import COMMAND_DATA, DATA_PARAMETERS, DEFAULT_PORT, DOMAIN
from .exceptions import HottohError
from .protocol import CommandMode, Frame

_LOGGER = logging.getLogger(__name__)

TEST_RESPONSE_TIMEOUT = 10.0


class HottohConfigFlow(ConfigFlow, domain=DOMAIN):
    """Handle config flow for HottoH."""

    VERSION = 1

    async def async_step_user(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """Handle user input."""
        errors: dict[str, str] = {}

        if user_input is not None:
            host = user_input[CONF_HOST]
            port = user_input.get(CONF_PORT, DEFAULT_PORT)
            _LOGGER.debug("Testing connection to stove at %s:%s", host, port)

            # Validate connection before accepting
            try:
                await self._test_connection(host, port)
            except HottohError as ex:
                _LOGGER.warning("Connection test failed for %s:%s: %s", host, port, ex)
                errors["base"] = "cannot_connect"
            else:
                _LOGGER.info("Connection test successful for %s:%s", host, port)
                # Create unique ID from IP to prevent duplicates
                await self.async_set_unique_id(host)
                self._abort_if_unique_id_configured()

                return self.async_create_entry(
                    title=f"HottoH ({host})",
                    data={CONF_HOST: host, CONF_PORT: port},
                )

        return self.async_show_form(
            step_id="user",
            data_schema=vol.Schema(
                {
                    vol.Required(CONF_HOST): str,
                    vol.Optional(CONF_PORT, default=DEFAULT_PORT): int,
                }
            ),
            errors=errors,
        )

    async def _test_connection(self, host: str, port: int) -> None:
        """Connect and read the main status block once."""
        connection = StoveConnection(host, port)
        await connection.async_connect()
        try:
            response = await connection.async_exchange(
                Frame(COMMAND_DATA, CommandMode.READ, tuple(DATA_PARAMETERS)),
                TEST_RESPONSE_TIMEOUT,
            )
        finally:
            await connection.async_close()
        _LOGGER.debug("Stove answered DAT 0 with %d fields", len(response))
