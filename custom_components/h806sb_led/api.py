"""UDP API implementation for the H806SB LAN LED controller."""

from __future__ import annotations

import asyncio
import logging
import socket
import struct
from dataclasses import dataclass, replace

from .const import (
    BROADCAST_ADDRESS,
    COUNTER_MODULUS,
    DEFAULT_BRIGHTNESS,
    DEFAULT_SINGLE_FILE,
    DEFAULT_SPEED,
    DISCOVERY_PACKET_DELAY,
    DISCOVERY_REPLY_LEGACY,
    DISCOVERY_REPLY_NAMED,
    DISCOVERY_REQUEST,
    DISCOVERY_REQUEST_LEGACY,
    MAX_BRIGHTNESS,
    MAX_SINGLE_FILE,
    MAX_SPEED,
    MIN_BRIGHTNESS,
    MIN_SINGLE_FILE,
    MIN_SPEED,
    PACKET_MARKER_A,
    PACKET_MARKER_B,
    PACKET_RESERVED_6,
    PACKET_RESERVED_7,
    PORT_DEVICE,
    PORT_LISTEN,
    RECEIVE_BUFFER_SIZE,
    SERIAL_LENGTH,
    TIMEOUT_DISCOVERY,
)

_LOGGER = logging.getLogger(__name__)

# Markers, counter, speed, brightness, single file, two reserved bytes,
# four zero bytes, then the serial number.
PACKET_FORMAT = ">8B4x4s"


class H806Error(Exception):
    """Base class for H806SB protocol errors."""


class InvalidDeviceNameFormat(H806Error):
    """The discovery reply name is not of the form PREFIX_HEX."""


class InvalidSerialFormat(H806Error):
    """The hex part of the discovery reply name is not a 4-byte serial."""


class DeviceNotDiscovered(H806Error):
    """A command was attempted before a serial number was known."""


@dataclass(frozen=True)
class DeviceIdentity:
    """Represents what discovery learned about the controller."""

    address: str
    name: str | None = None
    serial: bytes = b""


@dataclass(frozen=True)
class Matched:
    """Legacy two-byte acknowledgement: device found, identity unknown."""

    address: str

    @property
    def identity(self) -> DeviceIdentity:
        return DeviceIdentity(address=self.address)


@dataclass(frozen=True)
class Identified:
    """Named reply carrying the device name and serial number."""

    address: str
    name: str
    serial: bytes

    @property
    def identity(self) -> DeviceIdentity:
        return DeviceIdentity(address=self.address, name=self.name, serial=self.serial)


@dataclass(frozen=True)
class NoMatch:
    """No matching reply arrived before the deadline."""


DiscoveryOutcome = Matched | Identified | NoMatch


def clamp(value: int, minimum: int, maximum: int) -> int:
    """Clamp value into the inclusive range [minimum, maximum]."""
    return max(minimum, min(maximum, int(value)))


def decode_serial(name: str) -> bytes:
    """Decode the serial number embedded in a device name.

    Args:
        name: Device name such as ``HCX_51390C00``.

    Returns:
        The serial number bytes in the order they appear in the name.

    Raises:
        InvalidDeviceNameFormat: If the name has no ``_`` separator.
        InvalidSerialFormat: If the part after the separator is not 4 hex-encoded bytes.
    """
    _, separator, hex_part = name.partition("_")
    if not separator:
        raise InvalidDeviceNameFormat(
            f"Invalid device name format. Expected 'HCX_XXXXXXXX', got '{name}'"
        )

    # bytes.fromhex skips whitespace between pairs
    if not hex_part.isascii() or not hex_part.isalnum():
        raise InvalidSerialFormat(f"Invalid hex format in device name '{name}'")

    try:
        serial = bytes.fromhex(hex_part)
    except ValueError as err:
        raise InvalidSerialFormat(
            f"Invalid hex format in device name '{name}'"
        ) from err

    if len(serial) != SERIAL_LENGTH:
        raise InvalidSerialFormat(
            f"Expected a {SERIAL_LENGTH}-byte serial in device name '{name}', "
            f"got {len(serial)} bytes"
        )
    return serial


def parse_discovery_reply(data: bytes, address: str) -> DiscoveryOutcome | None:
    """Match a datagram against the two known discovery replies.

    Args:
        data: Datagram payload.
        address: IP address the datagram came from.

    Returns:
        Matched or Identified for a discovery reply, None for anything else.

    Raises:
        InvalidDeviceNameFormat: If a named reply carries a malformed name.
        InvalidSerialFormat: If a named reply carries a malformed serial.
    """
    if data == DISCOVERY_REPLY_LEGACY:
        return Matched(address)

    if data[: len(DISCOVERY_REPLY_NAMED)] == DISCOVERY_REPLY_NAMED:
        start = len(DISCOVERY_REPLY_NAMED)
        end = data.find(0, start)
        if end == -1:
            end = len(data)
        name = data[start:end].decode("ascii", errors="replace")
        return Identified(address, name, decode_serial(name))

    return None


@dataclass(frozen=True)
class CommandPacket:
    """The 16-byte command sent to the controller.

    Packets are immutable; every command derives a new packet from the
    current one with ``advance``.
    """

    counter: int = 0
    speed: int = DEFAULT_SPEED
    brightness: int = DEFAULT_BRIGHTNESS
    single_file: int = DEFAULT_SINGLE_FILE
    serial: bytes = bytes(SERIAL_LENGTH)

    def __post_init__(self) -> None:
        if len(self.serial) != SERIAL_LENGTH:
            raise ValueError(
                f"Serial must be {SERIAL_LENGTH} bytes, got {len(self.serial)}"
            )

    @property
    def is_addressed(self) -> bool:
        """Return False while the trailing six bytes are all zero."""
        return any(self.to_bytes()[-6:])

    def advance(self, **changes: int) -> CommandPacket:
        """Return the next packet: counter incremented, fields replaced."""
        return replace(
            self, counter=(self.counter + 1) % COUNTER_MODULUS, **changes
        )

    def to_bytes(self) -> bytes:
        """Render the wire format.

        The serial number is written in reverse order relative to the
        discovery reply.
        """
        return struct.pack(
            PACKET_FORMAT,
            PACKET_MARKER_A,
            PACKET_MARKER_B,
            self.counter,
            self.speed,
            self.brightness,
            self.single_file,
            PACKET_RESERVED_6,
            PACKET_RESERVED_7,
            self.serial[::-1],
        )


class H806Socket:
    """Broadcast UDP endpoint shared by discovery and commands.

    The socket is bound to the discovery listen port so replies reach it,
    and every datagram it sends goes to the broadcast address on the
    device port.
    """

    def __init__(
        self,
        listen_port: int = PORT_LISTEN,
        device_port: int = PORT_DEVICE,
        broadcast_address: str = BROADCAST_ADDRESS,
    ) -> None:
        """Initialize the endpoint.

        Args:
            listen_port: Local port replies are received on.
            device_port: Port the controller listens on.
            broadcast_address: Destination address for every datagram.
        """
        self._listen_port = listen_port
        self._target = (broadcast_address, device_port)
        self._sock: socket.socket | None = None

    @property
    def is_open(self) -> bool:
        """Return True while the socket is bound."""
        return self._sock is not None

    def open(self) -> None:
        """Create and bind the socket.

        Raises:
            OSError: If the listen port cannot be bound.
        """
        if self._sock is not None:
            return

        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_UDP)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_BROADCAST, 1)
        sock.setblocking(False)

        try:
            sock.bind(("", self._listen_port))
        except OSError as err:
            _LOGGER.debug("Failed to bind to port %d: %s", self._listen_port, err)
            sock.close()
            raise

        self._sock = sock

    def close(self) -> None:
        """Release the socket."""
        if self._sock is not None:
            self._sock.close()
            self._sock = None

    async def __aenter__(self) -> H806Socket:
        self.open()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.close()

    def _require_socket(self) -> socket.socket:
        if self._sock is None:
            raise RuntimeError("UDP socket is not open")
        return self._sock

    async def send(self, data: bytes) -> None:
        """Broadcast a datagram to the device port."""
        sock = self._require_socket()
        loop = asyncio.get_running_loop()
        _LOGGER.debug("Sending to %s:%d: %s", *self._target, data.hex())
        await loop.sock_sendto(sock, data, self._target)

    async def receive(self) -> tuple[bytes, str]:
        """Wait for the next datagram.

        Returns:
            The payload and the sender's IP address.
        """
        sock = self._require_socket()
        loop = asyncio.get_running_loop()
        data, sender_addr = await loop.sock_recvfrom(sock, RECEIVE_BUFFER_SIZE)
        return data, sender_addr[0]


class DiscoveryClient:
    """Broadcasts the discovery handshake and waits for a reply."""

    def __init__(self, transport: H806Socket) -> None:
        self._transport = transport

    async def discover(
        self,
        timeout: float = TIMEOUT_DISCOVERY,
        cancel: asyncio.Event | None = None,
    ) -> DiscoveryOutcome:
        """Locate the controller on the local network.

        The legacy request is sent first and the extended request
        DISCOVERY_PACKET_DELAY seconds later. Datagrams that are not a
        discovery reply are ignored until the deadline.

        Args:
            timeout: Seconds to wait for a reply, counted from the second request.
            cancel: Optional event; once set, discovery stops with NoMatch.

        Returns:
            Matched, Identified, or NoMatch if nothing answered in time.

        Raises:
            InvalidDeviceNameFormat: If the reply name is malformed.
            InvalidSerialFormat: If the reply serial is malformed.
            OSError: On socket send or receive failure.
        """
        await self._transport.send(DISCOVERY_REQUEST_LEGACY)
        await asyncio.sleep(DISCOVERY_PACKET_DELAY)
        await self._transport.send(DISCOVERY_REQUEST)

        loop = asyncio.get_running_loop()
        end_time = loop.time() + timeout

        while cancel is None or not cancel.is_set():
            remaining = end_time - loop.time()
            if remaining <= 0:
                break

            received = await self._receive(remaining, cancel)
            if received is None:
                break

            data, sender_ip = received
            outcome = parse_discovery_reply(data, sender_ip)
            if outcome is None:
                _LOGGER.debug("Ignoring datagram from %s: %s", sender_ip, data.hex())
                continue

            _LOGGER.debug("Discovery reply from %s: %s", sender_ip, outcome)
            return outcome

        _LOGGER.debug("No discovery reply within %.1f seconds", timeout)
        return NoMatch()

    async def _receive(
        self, timeout: float, cancel: asyncio.Event | None
    ) -> tuple[bytes, str] | None:
        """Receive one datagram, or None on timeout or cancel."""
        receive_task = asyncio.ensure_future(self._transport.receive())
        waiters: set[asyncio.Future] = {receive_task}
        if cancel is not None:
            waiters.add(asyncio.ensure_future(cancel.wait()))

        try:
            done, _ = await asyncio.wait(
                waiters, timeout=timeout, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            for waiter in waiters:
                if not waiter.done():
                    waiter.cancel()

        if receive_task in done:
            return receive_task.result()
        return None


class CommandSession:
    """Holds the packet template and sends commands to one controller.

    Commands are fire-and-forget broadcasts; the controller never answers.
    """

    def __init__(
        self,
        transport: H806Socket,
        identity: DeviceIdentity | None = None,
        template: CommandPacket | None = None,
    ) -> None:
        """Initialize the session.

        Args:
            transport: Socket the commands are broadcast on.
            identity: Discovered controller, if already known.
            template: Starting packet, defaults to CommandPacket().
        """
        self._transport = transport
        self._packet = template or CommandPacket()
        self._identity: DeviceIdentity | None = None
        if identity is not None:
            self.adopt_identity(identity)

    @property
    def packet(self) -> CommandPacket:
        """Return the most recently sent packet (or the initial template)."""
        return self._packet

    @property
    def identity(self) -> DeviceIdentity | None:
        """Return the adopted identity."""
        return self._identity

    def adopt_identity(self, identity: DeviceIdentity) -> None:
        """Write the identity's serial number into the template.

        An identity without a serial resets the serial to zero, which
        blocks commands until a named reply is adopted.
        """
        serial = identity.serial or bytes(SERIAL_LENGTH)
        if len(serial) != SERIAL_LENGTH:
            raise InvalidSerialFormat(
                f"Expected a {SERIAL_LENGTH}-byte serial, got {len(serial)} bytes"
            )
        self._packet = replace(self._packet, serial=serial)
        self._identity = identity

    async def set_brightness(self, brightness: int) -> CommandPacket:
        """Set the brightness level.

        Args:
            brightness: Brightness value (0-31), clamped.

        Returns:
            The transmitted packet.
        """
        return await self._send(
            brightness=clamp(brightness, MIN_BRIGHTNESS, MAX_BRIGHTNESS)
        )

    async def set_speed(self, speed: int) -> CommandPacket:
        """Set the playback speed.

        Args:
            speed: Speed value (1-100), clamped.

        Returns:
            The transmitted packet.
        """
        return await self._send(speed=clamp(speed, MIN_SPEED, MAX_SPEED))

    async def set_single_file(self, single_file: int) -> CommandPacket:
        """Set the single-file playback flag.

        Args:
            single_file: 1 to loop a single program, 0 to play the sequence.

        Returns:
            The transmitted packet.
        """
        return await self._send(
            single_file=clamp(single_file, MIN_SINGLE_FILE, MAX_SINGLE_FILE)
        )

    async def _send(self, **changes: int) -> CommandPacket:
        packet = self._packet.advance(**changes)
        if not packet.is_addressed:
            raise DeviceNotDiscovered(
                "No device serial number known. Run discovery first."
            )

        await self._transport.send(packet.to_bytes())
        self._packet = packet
        return packet


class H806LanApi:
    """API for communicating with an H806SB controller over LAN."""

    def __init__(self, transport: H806Socket | None = None) -> None:
        """Initialize the API.

        Args:
            transport: Socket to use, a new H806Socket by default.
        """
        self._transport = transport or H806Socket()
        self._discovery = DiscoveryClient(self._transport)
        self._session = CommandSession(self._transport)
        self._lock = asyncio.Lock()

    @property
    def identity(self) -> DeviceIdentity | None:
        """Return the identity commands are addressed to."""
        return self._session.identity

    @property
    def packet(self) -> CommandPacket:
        """Return the current packet template."""
        return self._session.packet

    def open(self) -> None:
        """Bind the UDP socket."""
        self._transport.open()

    def close(self) -> None:
        """Release the UDP socket."""
        self._transport.close()

    async def __aenter__(self) -> H806LanApi:
        self.open()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.close()

    async def discover(
        self,
        timeout: float = TIMEOUT_DISCOVERY,
        cancel: asyncio.Event | None = None,
    ) -> DiscoveryOutcome:
        """Run discovery and address later commands to the reply's serial.

        A legacy acknowledgement carries no serial and leaves the
        session unchanged.
        """
        async with self._lock:
            outcome = await self._discovery.discover(timeout, cancel)

            if isinstance(outcome, Identified):
                self._session.adopt_identity(outcome.identity)
            elif isinstance(outcome, Matched):
                _LOGGER.debug(
                    "Legacy controller at %s did not report a serial number",
                    outcome.address,
                )
        return outcome

    async def set_brightness(self, brightness: int) -> CommandPacket:
        async with self._lock:
            return await self._session.set_brightness(brightness)

    async def set_speed(self, speed: int) -> CommandPacket:
        async with self._lock:
            return await self._session.set_speed(speed)

    async def set_single_file(self, single_file: int) -> CommandPacket:
        async with self._lock:
            return await self._session.set_single_file(single_file)


async def discover_device(timeout: float = TIMEOUT_DISCOVERY) -> DiscoveryOutcome:
    """Discover the controller using a temporary socket.

    Args:
        timeout: Discovery timeout in seconds.

    Returns:
        The discovery outcome.
    """
    async with H806Socket() as transport:
        return await DiscoveryClient(transport).discover(timeout)
