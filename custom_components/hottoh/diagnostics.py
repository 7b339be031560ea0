"""Diagnostics support for HottoH pellet stove integration."""

from __future__ import annotations

from dataclasses import asdict
from typing import Any

from homeassistant.config_entries import ConfigEntry
from homeassistant.const import CONF_HOST, CONF_PORT
from homeassistant.core import HomeAssistant

from .const import DOMAIN
from .coordinator import HottohCoordinator


async def async_get_config_entry_diagnostics(
    hass: HomeAssistant, entry: ConfigEntry
) -> dict[str, Any]:
    """Return diagnostics for the config entry."""
    coordinator: HottohCoordinator = hass.data[DOMAIN][entry.entry_id]

    return {
        "config": {
            "host": entry.data.get(CONF_HOST),
            "port": entry.data.get(CONF_PORT),
        },
        "snapshots": {
            "info": coordinator.info,
            "data": coordinator.data,
            "data2": coordinator.data2,
        },
        "capabilities": asdict(coordinator.capabilities),
        "connection": {
            "state": coordinator.connection_state.value,
            "reconnect_attempts": coordinator.reconnect_attempts,
            "last_error": coordinator.last_error,
            "queue_size": coordinator.command_queue_size,
        },
    }
