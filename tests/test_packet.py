"""Tests for the command packet layout."""

import pytest

from custom_components.h806sb_led.api import CommandPacket, clamp
from custom_components.h806sb_led.const import PACKET_SIZE

SERIAL = bytes([0x51, 0x39, 0x0C, 0x00])


def test_default_template():
    """A fresh template follows the extended discovery request's layout."""
    packet = CommandPacket()
    assert packet.to_bytes() == bytes.fromhex("fb c1 00 13 1f 01 00 ae 00 00 00 00 00 00 00 00")


def test_packet_size():
    assert len(CommandPacket(serial=SERIAL).to_bytes()) == PACKET_SIZE


def test_field_offsets():
    """Each field lands on its own offset."""
    raw = CommandPacket(counter=7, speed=55, brightness=12, single_file=0, serial=SERIAL).to_bytes()
    assert raw[0] == 0xFB
    assert raw[1] == 0xC1
    assert raw[2] == 7
    assert raw[3] == 55
    assert raw[4] == 12
    assert raw[5] == 0
    assert raw[6] == 0x00
    assert raw[7] == 0xAE
    assert raw[8:12] == bytes(4)


def test_serial_written_reversed():
    """Offsets 12-15 carry the serial in reverse order."""
    raw = CommandPacket(serial=SERIAL).to_bytes()
    assert raw[12:16] == bytes([0x00, 0x0C, 0x39, 0x51])


def test_serial_length_enforced():
    with pytest.raises(ValueError, match="4 bytes"):
        CommandPacket(serial=b"\x01\x02")


def test_is_addressed():
    assert CommandPacket().is_addressed is False
    assert CommandPacket(serial=SERIAL).is_addressed is True
    # Only the last serial byte set still counts
    assert CommandPacket(serial=b"\x01\x00\x00\x00").is_addressed is True


def test_advance_increments_counter_and_patches_field():
    packet = CommandPacket(counter=4, serial=SERIAL)
    advanced = packet.advance(brightness=3)

    assert advanced.counter == 5
    assert advanced.brightness == 3
    assert advanced.speed == packet.speed
    assert advanced.serial == SERIAL
    # The source packet is untouched
    assert packet.counter == 4
    assert packet.brightness == 31


def test_advance_wraps_counter():
    assert CommandPacket(counter=255).advance().counter == 0


@pytest.mark.parametrize(
    ("value", "expected"),
    [(-5, 0), (0, 0), (17, 17), (31, 31), (32, 31), (1000, 31)],
)
def test_clamp(value, expected):
    assert clamp(value, 0, 31) == expected
