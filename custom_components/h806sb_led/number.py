"""Number entity for the controller's playback speed."""

from __future__ import annotations

from homeassistant.components.number import NumberEntity, NumberMode
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .const import DOMAIN, MAX_SPEED, MIN_SPEED
from .coordinator import H806Coordinator
from .entity import H806Entity


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up the playback speed number from a config entry."""
    coordinator: H806Coordinator = hass.data[DOMAIN][entry.entry_id]
    async_add_entities([H806SpeedNumber(coordinator, entry)])


class H806SpeedNumber(H806Entity, NumberEntity):
    """Playback speed of the running program."""

    _attr_translation_key = "speed"
    _attr_icon = "mdi:speedometer"
    _attr_mode = NumberMode.SLIDER
    _attr_native_min_value = MIN_SPEED
    _attr_native_max_value = MAX_SPEED
    _attr_native_step = 1

    def __init__(self, coordinator: H806Coordinator, entry: ConfigEntry) -> None:
        super().__init__(coordinator, entry, "speed")

    @property
    def native_value(self) -> float | None:
        if self.coordinator.data is None:
            return None
        return self.coordinator.data.speed

    async def async_set_native_value(self, value: float) -> None:
        await self.coordinator.async_set_speed(round(value))
