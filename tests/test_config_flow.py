"""Tests for HottoH config flow."""

from __future__ import annotations

from collections.abc import Generator
from unittest.mock import AsyncMock, patch

import pytest
from homeassistant import config_entries
from homeassistant.const import CONF_HOST, CONF_PORT
from homeassistant.core import HomeAssistant
from homeassistant.data_entry_flow import FlowResultType

from custom_components.hottoh.config_flow import HottohConfigFlow
from custom_components.hottoh.const import DEFAULT_PORT, DOMAIN
from custom_components.hottoh.exceptions import ConnectFailure, ExchangeTimeout
from custom_components.hottoh.protocol import CommandMode

from .conftest import FakeStove

TEST_CONNECTION = "custom_components.hottoh.config_flow.HottohConfigFlow._test_connection"


@pytest.fixture(autouse=True)
def auto_enable_custom_integrations(enable_custom_integrations: None) -> None:
    """Load integrations from custom_components."""


@pytest.fixture(autouse=True)
def mock_setup_entry() -> Generator[AsyncMock, None, None]:
    """Keep the created entry from polling a real stove."""
    with patch("custom_components.hottoh.async_setup_entry", return_value=True) as mock:
        yield mock


async def test_form_success(hass: HomeAssistant) -> None:
    """Test successful config flow."""
    result = await hass.config_entries.flow.async_init(
        DOMAIN, context={"source": config_entries.SOURCE_USER}
    )
    assert result["type"] == FlowResultType.FORM
    assert result["errors"] == {}

    with patch(TEST_CONNECTION, return_value=None):
        result = await hass.config_entries.flow.async_configure(
            result["flow_id"],
            {CONF_HOST: "192.168.1.100", CONF_PORT: 5001},
        )
        await hass.async_block_till_done()

    assert result["type"] == FlowResultType.CREATE_ENTRY
    assert result["title"] == "HottoH (192.168.1.100)"
    assert result["data"] == {CONF_HOST: "192.168.1.100", CONF_PORT: 5001}


async def test_form_connection_error(hass: HomeAssistant) -> None:
    """Test config flow with a refused connection."""
    result = await hass.config_entries.flow.async_init(
        DOMAIN, context={"source": config_entries.SOURCE_USER}
    )

    with patch(TEST_CONNECTION, side_effect=ConnectFailure("refused")):
        result = await hass.config_entries.flow.async_configure(
            result["flow_id"],
            {CONF_HOST: "192.168.1.100", CONF_PORT: 5001},
        )

    assert result["type"] == FlowResultType.FORM
    assert result["errors"]["base"] == "cannot_connect"


async def test_form_no_response(hass: HomeAssistant) -> None:
    """Test config flow when the stove accepts the socket but never answers."""
    result = await hass.config_entries.flow.async_init(
        DOMAIN, context={"source": config_entries.SOURCE_USER}
    )

    with patch(TEST_CONNECTION, side_effect=ExchangeTimeout("silent")):
        result = await hass.config_entries.flow.async_configure(
            result["flow_id"],
            {CONF_HOST: "192.168.1.100", CONF_PORT: 5001},
        )

    assert result["type"] == FlowResultType.FORM
    assert result["errors"]["base"] == "cannot_connect"


async def test_form_default_port(hass: HomeAssistant) -> None:
    """Test config flow uses default port when not specified."""
    result = await hass.config_entries.flow.async_init(
        DOMAIN, context={"source": config_entries.SOURCE_USER}
    )

    with patch(TEST_CONNECTION, return_value=None):
        result = await hass.config_entries.flow.async_configure(
            result["flow_id"],
            {CONF_HOST: "192.168.1.100"},
        )
        await hass.async_block_till_done()

    assert result["type"] == FlowResultType.CREATE_ENTRY
    assert result["data"][CONF_PORT] == DEFAULT_PORT


async def test_form_duplicate_host(hass: HomeAssistant) -> None:
    """Test config flow aborts on duplicate host."""
    result = await hass.config_entries.flow.async_init(
        DOMAIN, context={"source": config_entries.SOURCE_USER}
    )

    with patch(TEST_CONNECTION, return_value=None):
        result = await hass.config_entries.flow.async_configure(
            result["flow_id"],
            {CONF_HOST: "192.168.1.100", CONF_PORT: 5001},
        )
        await hass.async_block_till_done()

    assert result["type"] == FlowResultType.CREATE_ENTRY

    # Try to create duplicate
    result = await hass.config_entries.flow.async_init(
        DOMAIN, context={"source": config_entries.SOURCE_USER}
    )

    with patch(TEST_CONNECTION, return_value=None):
        result = await hass.config_entries.flow.async_configure(
            result["flow_id"],
            {CONF_HOST: "192.168.1.100", CONF_PORT: 5001},
        )

    assert result["type"] == FlowResultType.ABORT
    assert result["reason"] == "already_configured"


async def test_connection_probe_reads_data_block(
    hass: HomeAssistant, mock_connection: AsyncMock, stove: FakeStove
) -> None:
    """Test the connection probe sends one DAT 0 read and closes the socket."""
    await HottohConfigFlow()._test_connection("192.168.1.100", 5001)

    mock_connection.assert_called_once_with("192.168.1.100", 5001)
    assert [(f.command, f.mode, f.parameters) for f in stove.frames] == [
        ("DAT", CommandMode.READ, ("0",))
    ]
    stove.writer.close.assert_called_once()
