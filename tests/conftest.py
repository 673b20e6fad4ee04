"""Shared fixtures for the H806SB protocol tests."""

import asyncio

import pytest

from custom_components.h806sb_led.api import DeviceIdentity

DEVICE_IP = "192.168.1.50"


class FakeTransport:
    """In-memory stand-in for H806Socket."""

    def __init__(self):
        self.sent: list[bytes] = []
        self.sent_at: list[float] = []
        self.replies: asyncio.Queue = asyncio.Queue()
        self.is_open = False

    def open(self) -> None:
        self.is_open = True

    def close(self) -> None:
        self.is_open = False

    async def __aenter__(self):
        self.open()
        return self

    async def __aexit__(self, *exc_info):
        self.close()

    async def send(self, data: bytes) -> None:
        self.sent.append(data)
        self.sent_at.append(asyncio.get_running_loop().time())

    async def receive(self) -> tuple[bytes, str]:
        return await self.replies.get()

    def queue_reply(self, data: bytes, address: str = DEVICE_IP) -> None:
        self.replies.put_nowait((data, address))


@pytest.fixture
def transport():
    """Transport recording sent datagrams and serving queued replies."""
    return FakeTransport()


@pytest.fixture
def identity():
    """Identity decoded from the name HCX_51390C00."""
    return DeviceIdentity(
        address=DEVICE_IP,
        name="HCX_51390C00",
        serial=bytes([0x51, 0x39, 0x0C, 0x00]),
    )
