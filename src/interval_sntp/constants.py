"""NTP wire constants and client defaults."""

# Packet layout (bytes)
NTP_PACKET_SIZE = 48
ORIGINATE_TIME_OFFSET = 24
RECEIVE_TIME_OFFSET = 32
TRANSMIT_TIME_OFFSET = 40

NTP_PORT = 123

# Byte 0: LI (bits 6-7), version (bits 3-5), mode (bits 0-2)
NTP_MODE_CLIENT = 3
NTP_MODE_SERVER = 4
NTP_MODE_BROADCAST = 5
NTP_VERSION = 3
NTP_MODE_MASK = 0x07

# Seconds between 1900-01-01 and 1970-01-01: 70 years plus 17 leap days
OFFSET_1900_TO_1970 = (365 * 70 + 17) * 24 * 60 * 60

# 32-bit fixed point scale for the fractional second
FRACTION_SCALE = 2 ** 32

# One NTP era (2^32 seconds) expressed in milliseconds
NTP_ERA_MILLIS = FRACTION_SCALE * 1000

DEFAULT_SERVER = "time.google.com"
DEFAULT_TIMEOUT_MS = 5000
DEFAULT_INTERVAL_SECONDS = 1.0

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
