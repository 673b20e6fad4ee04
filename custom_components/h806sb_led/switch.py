"""Switch entity for single-file playback."""

from __future__ import annotations

from typing import Any

from homeassistant.components.switch import SwitchEntity
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .const import DOMAIN
from .coordinator import H806Coordinator
from .entity import H806Entity


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up the single-file playback switch from a config entry."""
    coordinator: H806Coordinator = hass.data[DOMAIN][entry.entry_id]
    async_add_entities([H806SingleFileSwitch(coordinator, entry)])


class H806SingleFileSwitch(H806Entity, SwitchEntity):
    """Loop the current program instead of playing the sequence."""

    _attr_translation_key = "single_file"
    _attr_icon = "mdi:repeat-once"

    def __init__(self, coordinator: H806Coordinator, entry: ConfigEntry) -> None:
        super().__init__(coordinator, entry, "single_file")

    @property
    def is_on(self) -> bool | None:
        if self.coordinator.data is None:
            return None
        return self.coordinator.data.single_file

    async def async_turn_on(self, **kwargs: Any) -> None:
        await self.coordinator.async_set_single_file(True)

    async def async_turn_off(self, **kwargs: Any) -> None:
        await self.coordinator.async_set_single_file(False)
