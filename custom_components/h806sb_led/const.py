"""Constants for the H806SB LAN LED integration."""

DOMAIN = "h806sb_led"

DEFAULT_NAME = "H806SB LED"

# Config entry keys
CONF_DISCOVERY_TIMEOUT = "discovery_timeout"

# UDP Ports
PORT_DEVICE = 4626
PORT_LISTEN = 4882

# Broadcast address for discovery and commands
BROADCAST_ADDRESS = "255.255.255.255"

# Timeouts (seconds)
TIMEOUT_DISCOVERY = 3.0
MIN_DISCOVERY_TIMEOUT = 0.5
MAX_DISCOVERY_TIMEOUT = 30.0

# The controller expects the legacy request to be handled before the extended one
DISCOVERY_PACKET_DELAY = 0.05

# Discovery requests, sent in this order
DISCOVERY_REQUEST_LEGACY = bytes.fromhex("ab 01 00 02 00 00 00 00")
DISCOVERY_REQUEST = bytes.fromhex("fb c1 01 13 00 01 00 ae 00 00 00 00")

# Discovery replies
DISCOVERY_REPLY_LEGACY = bytes.fromhex("fb c0")
DISCOVERY_REPLY_NAMED = bytes.fromhex("ab 02")

RECEIVE_BUFFER_SIZE = 1024

# Command packet
PACKET_SIZE = 16
PACKET_MARKER_A = 0xFB
PACKET_MARKER_B = 0xC1
PACKET_RESERVED_6 = 0x00
PACKET_RESERVED_7 = 0xAE
SERIAL_LENGTH = 4
COUNTER_MODULUS = 256

# Value ranges
MIN_BRIGHTNESS = 0
MAX_BRIGHTNESS = 31
MIN_SPEED = 1
MAX_SPEED = 100
MIN_SINGLE_FILE = 0
MAX_SINGLE_FILE = 1

# Template values used before the first command
DEFAULT_SPEED = 0x13
DEFAULT_BRIGHTNESS = MAX_BRIGHTNESS
DEFAULT_SINGLE_FILE = 1
