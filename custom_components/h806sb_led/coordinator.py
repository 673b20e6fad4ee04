"""DataUpdateCoordinator for the H806SB LAN LED controller."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator

from .api import CommandPacket, H806Error, H806LanApi
from .const import DOMAIN

_LOGGER = logging.getLogger(__name__)


@dataclass
class H806DeviceState:
    """Represents the settings last sent to the controller."""

    brightness: int
    speed: int
    single_file: bool

    @classmethod
    def from_packet(cls, packet: CommandPacket) -> H806DeviceState:
        return cls(
            brightness=packet.brightness,
            speed=packet.speed,
            single_file=bool(packet.single_file),
        )


class H806Coordinator(DataUpdateCoordinator[H806DeviceState]):
    """Coordinator tracking the controller's state locally.

    The controller never reports its state, so there is no polling: the
    state is whatever the last command packet carried.
    """

    def __init__(
        self,
        hass: HomeAssistant,
        entry: ConfigEntry,
        api: H806LanApi,
        name: str,
    ) -> None:
        """Initialize the coordinator.

        Args:
            hass: Home Assistant instance.
            entry: Config entry the coordinator belongs to.
            api: H806LanApi with a discovered identity.
            name: Name of the device for logging.
        """
        super().__init__(
            hass,
            _LOGGER,
            config_entry=entry,
            name=f"{DOMAIN}_{name}",
            update_interval=None,
        )
        self.api = api

    async def _async_update_data(self) -> H806DeviceState:
        """Return the state carried by the current packet template."""
        return H806DeviceState.from_packet(self.api.packet)

    async def async_set_brightness(self, brightness: int) -> None:
        """Send a brightness command (0-31)."""
        await self._async_send(self.api.set_brightness, brightness)

    async def async_set_speed(self, speed: int) -> None:
        """Send a playback speed command (1-100)."""
        await self._async_send(self.api.set_speed, speed)

    async def async_set_single_file(self, single_file: bool) -> None:
        """Send a single-file playback command."""
        await self._async_send(self.api.set_single_file, int(single_file))

    async def _async_send(self, command, value: int) -> None:
        try:
            packet = await command(value)
        except (H806Error, OSError) as err:
            raise HomeAssistantError(
                f"Error sending command to {self.name}: {err}"
            ) from err

        _LOGGER.debug("Sent packet %s", packet.to_bytes().hex())
        self.async_set_updated_data(H806DeviceState.from_packet(packet))
