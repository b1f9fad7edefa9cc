"""
NTP timestamp codec

An NTP timestamp is 64-bit fixed point: 32 bits of seconds since 1900-01-01
followed by 32 bits of fractional seconds, both big-endian. The helpers here
convert between that form and milliseconds since the Unix epoch.
"""

import random
import struct
from typing import NamedTuple, Optional

from .constants import FRACTION_SCALE, NTP_ERA_MILLIS, OFFSET_1900_TO_1970

_UINT32 = struct.Struct("!I")
_TIMESTAMP = struct.Struct("!II")


class NtpTimestamp(NamedTuple):
    """Raw 64-bit NTP timestamp"""
    seconds: int    # Seconds since 1900 (modulo one era)
    fraction: int   # Fractional second in units of 2^-32 s

    def to_millis(self, pivot_millis: Optional[int] = None) -> int:
        return ntp_to_millis(self.seconds, self.fraction, pivot_millis)

    def is_zero(self) -> bool:
        return self.seconds == 0 and self.fraction == 0


def read_uint32(buffer, offset: int) -> int:
    """Read an unsigned 32-bit big-endian integer at ``offset``."""
    return _UINT32.unpack_from(buffer, offset)[0]


def write_uint32(buffer: bytearray, offset: int, value: int) -> None:
    """Write ``value`` as an unsigned 32-bit big-endian integer at ``offset``."""
    _UINT32.pack_into(buffer, offset, value & 0xFFFFFFFF)


def ntp_to_millis(seconds: int, fraction: int, pivot_millis: Optional[int] = None) -> int:
    """
    Convert an NTP timestamp to milliseconds since 1970-01-01.

    Args:
        seconds: 32-bit seconds since 1900
        fraction: 32-bit fractional second
        pivot_millis: If given, the result is moved to the NTP era closest to
            this epoch-millisecond value. Without it era 0 (1900-2036) is assumed.

    Returns:
        Epoch milliseconds
    """
    millis = (seconds - OFFSET_1900_TO_1970) * 1000 + fraction * 1000 // FRACTION_SCALE
    if pivot_millis is not None:
        eras = (pivot_millis - millis + NTP_ERA_MILLIS // 2) // NTP_ERA_MILLIS
        millis += eras * NTP_ERA_MILLIS
    return millis


def millis_to_ntp(millis: int) -> NtpTimestamp:
    """Convert epoch milliseconds to an NTP timestamp (seconds wrap per era)."""
    whole_seconds, fractional_millis = divmod(millis, 1000)
    seconds = (whole_seconds + OFFSET_1900_TO_1970) % FRACTION_SCALE
    fraction = fractional_millis * FRACTION_SCALE // 1000
    return NtpTimestamp(seconds, fraction)


def read_timestamp(buffer, offset: int) -> NtpTimestamp:
    """Read the 8-byte NTP timestamp stored at ``offset``."""
    return NtpTimestamp(*_TIMESTAMP.unpack_from(buffer, offset))


def write_timestamp(buffer: bytearray, offset: int, millis: int,
                    nonce: Optional[int] = None) -> NtpTimestamp:
    """
    Write epoch milliseconds as an NTP timestamp at ``offset``.

    The lowest byte of the fraction is below millisecond resolution and is
    filled with random data (``nonce`` overrides it). Returns the timestamp
    exactly as written.
    """
    timestamp = millis_to_ntp(millis)
    if nonce is None:
        nonce = random.getrandbits(8)
    fraction = (timestamp.fraction & 0xFFFFFF00) | (nonce & 0xFF)
    write_uint32(buffer, offset, timestamp.seconds)
    write_uint32(buffer, offset + 4, fraction)
    return NtpTimestamp(timestamp.seconds, fraction)
