"""Tests for the Home Assistant side value mapping."""

import pytest

from custom_components.h806sb_led.api import CommandPacket
from custom_components.h806sb_led.coordinator import H806DeviceState
from custom_components.h806sb_led.light import to_device_brightness, to_ha_brightness


@pytest.mark.parametrize(
    ("ha_brightness", "expected"),
    [(0, 0), (1, 1), (4, 1), (128, 16), (255, 31)],
)
def test_to_device_brightness(ha_brightness, expected):
    assert to_device_brightness(ha_brightness) == expected


@pytest.mark.parametrize(
    ("device_brightness", "expected"),
    [(0, 0), (16, 132), (31, 255)],
)
def test_to_ha_brightness(device_brightness, expected):
    assert to_ha_brightness(device_brightness) == expected


def test_every_device_level_survives_conversion():
    for level in range(32):
        assert to_device_brightness(to_ha_brightness(level)) == level


def test_state_from_packet():
    packet = CommandPacket(counter=3, speed=42, brightness=7, single_file=0)

    state = H806DeviceState.from_packet(packet)

    assert state == H806DeviceState(brightness=7, speed=42, single_file=False)
