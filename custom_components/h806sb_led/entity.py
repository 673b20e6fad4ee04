"""Base entity for the H806SB LAN LED integration."""

from __future__ import annotations

from homeassistant.config_entries import ConfigEntry
from homeassistant.const import CONF_NAME
from homeassistant.helpers.device_registry import DeviceInfo
from homeassistant.helpers.update_coordinator import CoordinatorEntity

from .const import DEFAULT_NAME, DOMAIN
from .coordinator import H806Coordinator


class H806Entity(CoordinatorEntity[H806Coordinator]):
    """Entity backed by the controller's locally tracked state."""

    _attr_has_entity_name = True
    _attr_assumed_state = True

    def __init__(
        self,
        coordinator: H806Coordinator,
        entry: ConfigEntry,
        key: str | None = None,
    ) -> None:
        """Initialize the entity.

        Args:
            coordinator: The data update coordinator.
            entry: The config entry.
            key: Suffix distinguishing this entity on the device.
        """
        super().__init__(coordinator)
        self._attr_unique_id = (
            entry.entry_id if key is None else f"{entry.entry_id}_{key}"
        )

        identity = coordinator.api.identity
        device_name = identity.name if identity and identity.name else entry.entry_id
        self._attr_device_info = DeviceInfo(
            identifiers={(DOMAIN, device_name)},
            name=entry.data.get(CONF_NAME, DEFAULT_NAME),
            model="H806SB",
        )
