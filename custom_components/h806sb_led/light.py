"""Light entity for the H806SB LAN LED integration."""

from __future__ import annotations

import logging
from typing import Any

from homeassistant.components.light import ATTR_BRIGHTNESS, ColorMode, LightEntity
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .const import DOMAIN, MAX_BRIGHTNESS, MIN_BRIGHTNESS
from .coordinator import H806Coordinator
from .entity import H806Entity

_LOGGER = logging.getLogger(__name__)


def to_device_brightness(ha_brightness: int) -> int:
    """Convert HA brightness (0-255) to controller brightness (0-31).

    Any non-zero HA level maps to at least 1 so the strip stays lit.
    """
    if ha_brightness <= 0:
        return MIN_BRIGHTNESS
    return max(
        MIN_BRIGHTNESS + 1,
        min(MAX_BRIGHTNESS, round((ha_brightness / 255) * MAX_BRIGHTNESS)),
    )


def to_ha_brightness(device_brightness: int) -> int:
    """Convert controller brightness (0-31) to HA brightness (0-255)."""
    return round((device_brightness / MAX_BRIGHTNESS) * 255)


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up the H806SB light from a config entry."""
    coordinator: H806Coordinator = hass.data[DOMAIN][entry.entry_id]
    async_add_entities([H806Light(coordinator, entry)])


class H806Light(H806Entity, LightEntity):
    """Representation of the LED strip driven by the controller.

    The protocol has no power command; off is brightness 0.
    """

    _attr_name = None
    _attr_color_mode = ColorMode.BRIGHTNESS
    _attr_supported_color_modes = {ColorMode.BRIGHTNESS}

    def __init__(self, coordinator: H806Coordinator, entry: ConfigEntry) -> None:
        super().__init__(coordinator, entry)
        self._last_brightness = MAX_BRIGHTNESS

    @property
    def is_on(self) -> bool | None:
        """Return true if light is on."""
        if self.coordinator.data is None:
            return None
        return self.coordinator.data.brightness > MIN_BRIGHTNESS

    @property
    def brightness(self) -> int | None:
        """Return the brightness of the light (0-255)."""
        if self.coordinator.data is None:
            return None
        return to_ha_brightness(self.coordinator.data.brightness)

    async def async_turn_on(self, **kwargs: Any) -> None:
        """Turn the light on."""
        if ATTR_BRIGHTNESS in kwargs:
            brightness = to_device_brightness(kwargs[ATTR_BRIGHTNESS])
        elif self.coordinator.data and self.coordinator.data.brightness > MIN_BRIGHTNESS:
            brightness = self.coordinator.data.brightness
        else:
            brightness = self._last_brightness

        if brightness > MIN_BRIGHTNESS:
            self._last_brightness = brightness
        await self.coordinator.async_set_brightness(brightness)

    async def async_turn_off(self, **kwargs: Any) -> None:
        """Turn the light off."""
        if self.coordinator.data and self.coordinator.data.brightness > MIN_BRIGHTNESS:
            self._last_brightness = self.coordinator.data.brightness
        await self.coordinator.async_set_brightness(MIN_BRIGHTNESS)

