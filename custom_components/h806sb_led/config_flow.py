"""Config flow for H806SB LAN LED integration."""

from __future__ import annotations

import logging
from typing import Any

import voluptuous as vol

from homeassistant.config_entries import ConfigFlow, ConfigFlowResult
from homeassistant.const import CONF_NAME
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import HomeAssistantError

from .api import (
    Identified,
    InvalidDeviceNameFormat,
    InvalidSerialFormat,
    Matched,
    discover_device,
)
from .const import (
    CONF_DISCOVERY_TIMEOUT,
    DEFAULT_NAME,
    DOMAIN,
    MAX_DISCOVERY_TIMEOUT,
    MIN_DISCOVERY_TIMEOUT,
    PORT_LISTEN,
    TIMEOUT_DISCOVERY,
)

_LOGGER = logging.getLogger(__name__)

STEP_USER_DATA_SCHEMA = vol.Schema(
    {
        vol.Optional(CONF_NAME, default=DEFAULT_NAME): str,
        vol.Optional(CONF_DISCOVERY_TIMEOUT, default=TIMEOUT_DISCOVERY): vol.All(
            vol.Coerce(float),
            vol.Range(min=MIN_DISCOVERY_TIMEOUT, max=MAX_DISCOVERY_TIMEOUT),
        ),
    }
)


async def validate_input(hass: HomeAssistant, data: dict[str, Any]) -> dict[str, Any]:
    """Validate the user input by running discovery.

    Data has the keys from STEP_USER_DATA_SCHEMA with values provided by the user.

    Only the user's settings are stored; the controller's address and
    serial number are discovered again every time the entry is set up.
    """
    timeout = data.get(CONF_DISCOVERY_TIMEOUT, TIMEOUT_DISCOVERY)

    try:
        outcome = await discover_device(timeout)
    except OSError as err:
        _LOGGER.error("Failed to bind to port %d: %s", PORT_LISTEN, err)
        raise CannotBind from err

    if isinstance(outcome, Matched):
        raise LegacyDevice
    if not isinstance(outcome, Identified):
        raise NoDevicesFound

    _LOGGER.debug("Discovered %s at %s", outcome.name, outcome.address)
    return {
        "title": data.get(CONF_NAME) or outcome.name,
    }


class H806ConfigFlow(ConfigFlow, domain=DOMAIN):
    """Handle a config flow for H806SB LAN LED."""

    VERSION = 1

    async def async_step_user(
        self, user_input: dict[str, Any] | None = None
    ) -> ConfigFlowResult:
        """Handle the initial step."""
        # The protocol addresses a single controller per network
        await self.async_set_unique_id(DOMAIN)
        self._abort_if_unique_id_configured()

        if user_input is None:
            return self.async_show_form(
                step_id="user",
                data_schema=STEP_USER_DATA_SCHEMA,
            )

        errors: dict[str, str] = {}

        try:
            info = await validate_input(self.hass, user_input)
        except NoDevicesFound:
            errors["base"] = "no_devices_found"
        except LegacyDevice:
            errors["base"] = "legacy_device"
        except CannotBind:
            errors["base"] = "cannot_bind"
        except InvalidDeviceNameFormat:
            errors["base"] = "invalid_device_name"
        except InvalidSerialFormat:
            errors["base"] = "invalid_serial"
        except Exception:
            _LOGGER.exception("Unexpected exception")
            errors["base"] = "unknown"
        else:
            return self.async_create_entry(
                title=info["title"],
                data={
                    CONF_NAME: info["title"],
                    CONF_DISCOVERY_TIMEOUT: user_input.get(
                        CONF_DISCOVERY_TIMEOUT, TIMEOUT_DISCOVERY
                    ),
                },
            )

        return self.async_show_form(
            step_id="user",
            data_schema=STEP_USER_DATA_SCHEMA,
            errors=errors,
        )


class NoDevicesFound(HomeAssistantError):
    """Error to indicate no controller answered discovery."""


class LegacyDevice(HomeAssistantError):
    """Error to indicate the controller did not report a serial number."""


class CannotBind(HomeAssistantError):
    """Error to indicate the discovery port is unavailable."""
