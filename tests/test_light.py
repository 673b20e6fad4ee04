"""Tests for the H806Light entity."""

from unittest.mock import MagicMock

import pytest

from custom_components.h806sb_led.coordinator import H806DeviceState
from custom_components.h806sb_led.light import H806Light


class RecordingCoordinator:
    """Coordinator stand-in recording the brightness levels sent."""

    def __init__(self, brightness: int) -> None:
        self.data = H806DeviceState(brightness=brightness, speed=19, single_file=True)
        self.api = MagicMock(identity=None)
        self.sent: list[int] = []

    async def async_set_brightness(self, brightness: int) -> None:
        self.sent.append(brightness)
        self.data = H806DeviceState(
            brightness=brightness,
            speed=self.data.speed,
            single_file=self.data.single_file,
        )


def make_light(brightness: int) -> tuple[H806Light, RecordingCoordinator]:
    coordinator = RecordingCoordinator(brightness)
    entry = MagicMock(entry_id="entry-1", data={"name": "Strip"})
    return H806Light(coordinator, entry), coordinator


class TestH806Light:
    """Tests for H806Light"""

    @pytest.mark.asyncio
    async def test_turn_on_keeps_current_level(self):
        light, coordinator = make_light(31)

        await light.async_turn_on(brightness=82)
        await light.async_turn_on()

        assert coordinator.sent == [10, 10]

    @pytest.mark.asyncio
    async def test_turn_on_restores_level_after_off(self):
        light, coordinator = make_light(31)

        await light.async_turn_on(brightness=82)
        await light.async_turn_off()
        await light.async_turn_on()

        assert coordinator.sent == [10, 0, 10]
        assert light.is_on is True

    @pytest.mark.asyncio
    async def test_turn_on_from_dark_start_uses_full_brightness(self):
        light, coordinator = make_light(0)

        await light.async_turn_on()

        assert coordinator.sent == [31]

    @pytest.mark.asyncio
    async def test_low_brightness_stays_lit(self):
        light, coordinator = make_light(31)

        await light.async_turn_on(brightness=3)

        assert coordinator.sent == [1]
        assert light.is_on is True

    @pytest.mark.asyncio
    async def test_turn_off(self):
        light, coordinator = make_light(20)

        await light.async_turn_off()

        assert coordinator.sent == [0]
        assert light.is_on is False
        assert light.brightness == 0

    def test_brightness_reported_on_ha_scale(self):
        light, _ = make_light(31)
        assert light.brightness == 255
