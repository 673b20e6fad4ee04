"""The H806SB LAN LED integration."""

from __future__ import annotations

import logging

from homeassistant.config_entries import ConfigEntry
from homeassistant.const import CONF_NAME, Platform
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import ConfigEntryError, ConfigEntryNotReady

from .api import H806Error, H806LanApi, Identified, Matched
from .const import CONF_DISCOVERY_TIMEOUT, DEFAULT_NAME, DOMAIN, TIMEOUT_DISCOVERY
from .coordinator import H806Coordinator

_LOGGER = logging.getLogger(__name__)

PLATFORMS: list[Platform] = [Platform.LIGHT, Platform.NUMBER, Platform.SWITCH]


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up H806SB LAN LED from a config entry."""
    name = entry.data.get(CONF_NAME, DEFAULT_NAME)
    timeout = entry.data.get(CONF_DISCOVERY_TIMEOUT, TIMEOUT_DISCOVERY)

    _LOGGER.debug("Setting up H806SB controller %s", name)

    api = H806LanApi()
    try:
        coordinator = await _async_discover_and_setup(hass, entry, api, name, timeout)
    except BaseException:
        api.close()
        raise

    hass.data.setdefault(DOMAIN, {})
    hass.data[DOMAIN][entry.entry_id] = coordinator

    try:
        await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)
    except BaseException:
        hass.data[DOMAIN].pop(entry.entry_id, None)
        api.close()
        raise

    return True


async def _async_discover_and_setup(
    hass: HomeAssistant,
    entry: ConfigEntry,
    api: H806LanApi,
    name: str,
    timeout: float,
) -> H806Coordinator:
    """Bind the socket, find the controller and build the coordinator."""
    try:
        api.open()
        outcome = await api.discover(timeout)
    except OSError as err:
        raise ConfigEntryNotReady(f"Cannot reach {name}: {err}") from err
    except H806Error as err:
        raise ConfigEntryError(f"Unexpected discovery reply from {name}: {err}") from err

    if isinstance(outcome, Matched):
        raise ConfigEntryNotReady(
            f"Controller at {outcome.address} did not report a serial number"
        )
    if not isinstance(outcome, Identified):
        raise ConfigEntryNotReady(f"No reply from {name} within {timeout} seconds")

    _LOGGER.debug("Controller %s found at %s", outcome.name, outcome.address)

    coordinator = H806Coordinator(hass, entry, api, name)

    # Perform initial data fetch
    await coordinator.async_config_entry_first_refresh()
    return coordinator


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Unload a config entry."""
    if unload_ok := await hass.config_entries.async_unload_platforms(entry, PLATFORMS):
        coordinator: H806Coordinator = hass.data[DOMAIN].pop(entry.entry_id)
        coordinator.api.close()

    return unload_ok
