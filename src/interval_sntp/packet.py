"""
SNTP packet construction and parsing

Only the fields a simple client needs are interpreted: the mode/version byte
and the originate, receive and transmit timestamps.
"""

import logging
from typing import NamedTuple, Optional, Tuple

from .constants import (
    NTP_PACKET_SIZE,
    NTP_MODE_CLIENT,
    NTP_MODE_SERVER,
    NTP_MODE_BROADCAST,
    NTP_MODE_MASK,
    NTP_VERSION,
    ORIGINATE_TIME_OFFSET,
    RECEIVE_TIME_OFFSET,
    TRANSMIT_TIME_OFFSET
)
from .exceptions import ProtocolError
from .timestamp import NtpTimestamp, read_timestamp, write_timestamp

logger = logging.getLogger(__name__)

# 0x1B: LI=0, VN=3, Mode=3
REQUEST_HEADER = NTP_MODE_CLIENT | (NTP_VERSION << 3)


class NtpResponse(NamedTuple):
    """Timestamps decoded from a server reply"""
    mode: int
    version: int
    stratum: int
    originate: NtpTimestamp
    receive: NtpTimestamp
    transmit: NtpTimestamp


def build_request(wall_millis: int, nonce: Optional[int] = None) -> Tuple[bytearray, NtpTimestamp]:
    """
    Build a 48-byte client request stamped with ``wall_millis``.

    Returns the packet and the transmit timestamp written into it.
    """
    packet = bytearray(NTP_PACKET_SIZE)
    packet[0] = REQUEST_HEADER
    transmit = write_timestamp(packet, TRANSMIT_TIME_OFFSET, wall_millis, nonce)
    return packet, transmit


def parse_response(buffer, length: Optional[int] = None) -> NtpResponse:
    """
    Decode a server reply.

    Args:
        buffer: Receive buffer
        length: Number of bytes actually received (defaults to len(buffer))

    Raises:
        ProtocolError: short packet, unexpected mode or unset transmit time
    """
    if length is None:
        length = len(buffer)
    if length < NTP_PACKET_SIZE:
        raise ProtocolError(f"Short NTP response: {length} bytes, expected {NTP_PACKET_SIZE}")

    header = buffer[0]
    mode = header & NTP_MODE_MASK
    version = (header >> 3) & 0x07
    if mode not in (NTP_MODE_SERVER, NTP_MODE_BROADCAST):
        raise ProtocolError(f"Unexpected NTP mode {mode} in response")

    response = NtpResponse(
        mode=mode,
        version=version,
        stratum=buffer[1],
        originate=read_timestamp(buffer, ORIGINATE_TIME_OFFSET),
        receive=read_timestamp(buffer, RECEIVE_TIME_OFFSET),
        transmit=read_timestamp(buffer, TRANSMIT_TIME_OFFSET)
    )

    if response.transmit.is_zero():
        raise ProtocolError("NTP response has zero transmit timestamp")

    logger.debug(f"Parsed NTP response: mode={mode}, version={version}, stratum={response.stratum}")
    return response
