#!/usr/bin/env python3
"""
Interval SNTP Client

Single-shot SNTP transaction: one request, one reply, no retries.
The reply's timestamps are combined with a monotonic round-trip measurement
to produce a corrected wall-clock time.
"""

import time
import socket
import logging
from typing import Callable, NamedTuple, Optional

from .constants import NTP_PACKET_SIZE, NTP_PORT
from .exceptions import NetworkError, NtpTimeoutError
from .packet import build_request, parse_response

logger = logging.getLogger(__name__)


def _wall_clock_millis() -> int:
    return time.time_ns() // 1_000_000


def _monotonic_millis() -> int:
    return time.monotonic_ns() // 1_000_000


class TransactionResult(NamedTuple):
    """Outcome of one successful SNTP transaction"""
    corrected_epoch_millis: int      # Server-corrected wall clock at response time
    reference_monotonic_millis: int  # Monotonic clock reading matching corrected time
    round_trip_millis: int           # Network delay, server hold time excluded
    clock_offset_millis: int = 0     # Server time - local time

    def current_epoch_millis(self, monotonic_millis: Optional[int] = None) -> int:
        """Project the corrected time forward using the monotonic clock."""
        if monotonic_millis is None:
            monotonic_millis = _monotonic_millis()
        return self.corrected_epoch_millis + (monotonic_millis - self.reference_monotonic_millis)


def _halve(value: int) -> int:
    # Integer halving that truncates toward zero
    return value // 2 if value >= 0 else -(-value // 2)


def compute_transaction(request_wall: int, request_ticks: int, response_ticks: int,
                        originate: int, receive: int, transmit: int) -> TransactionResult:
    """
    Combine the four timestamps of an exchange into a TransactionResult.

    The arrival wall-clock time is estimated as ``request_wall`` plus the
    monotonic elapsed time, so a wall-clock step during the exchange does not
    leak into the result. All values are milliseconds.
    """
    elapsed = response_ticks - request_ticks
    response_wall = request_wall + elapsed

    round_trip = elapsed - (transmit - receive)
    clock_offset = _halve((receive - originate) + (transmit - response_wall))

    return TransactionResult(
        corrected_epoch_millis=response_wall + clock_offset,
        reference_monotonic_millis=response_ticks,
        round_trip_millis=round_trip,
        clock_offset_millis=clock_offset
    )


class SntpClient:
    """
    Simple SNTP client for retrieving network time.

    Every call to request_time owns its own socket, so one instance may be
    shared between threads. Clocks can be injected for testing.
    """

    def __init__(self, port: int = NTP_PORT,
                 wall_clock: Callable[[], int] = _wall_clock_millis,
                 monotonic_clock: Callable[[], int] = _monotonic_millis):
        self.port = port
        self.wall_clock = wall_clock
        self.monotonic_clock = monotonic_clock

    def _resolve(self, host: str):
        try:
            infos = socket.getaddrinfo(host, self.port, type=socket.SOCK_DGRAM)
        except (OSError, UnicodeError) as e:
            # Malformed names fail IDNA encoding before any lookup
            raise NetworkError(f"Cannot resolve NTP server {host}: {e}") from e
        if not infos:
            raise NetworkError(f"No address found for NTP server {host}")
        family, _, _, _, address = infos[0]
        return family, address

    def request_time(self, host: str, timeout_ms: int) -> TransactionResult:
        """
        Send an SNTP request to ``host`` and process the response.

        Args:
            host: Host name or address of the server
            timeout_ms: Receive timeout in milliseconds

        Returns:
            TransactionResult for this exchange

        Raises:
            NetworkError: resolution or socket failure
            NtpTimeoutError: no reply within timeout_ms
            ProtocolError: malformed reply
            ValueError: timeout_ms is not positive
        """
        if timeout_ms <= 0:
            raise ValueError(f"timeout_ms must be positive, got {timeout_ms}")

        family, address = self._resolve(host)

        try:
            sock = socket.socket(family, socket.SOCK_DGRAM)
        except OSError as e:
            raise NetworkError(f"Cannot open UDP socket: {e}") from e

        try:
            sock.settimeout(timeout_ms / 1000.0)

            request_wall = self.wall_clock()
            request_ticks = self.monotonic_clock()
            request, _ = build_request(request_wall)

            buffer = bytearray(NTP_PACKET_SIZE)
            try:
                sock.sendto(request, address)
                logger.debug(f"Sent SNTP request to {host} ({address[0]}:{address[1]})")
                received, _ = sock.recvfrom_into(buffer)
            except socket.timeout as e:
                raise NtpTimeoutError(f"No NTP response from {host} within {timeout_ms}ms") from e
            except OSError as e:
                raise NetworkError(f"NTP exchange with {host} failed: {e}") from e
            response_ticks = self.monotonic_clock()

            response = parse_response(buffer, received)
        finally:
            sock.close()

        result = compute_transaction(
            request_wall,
            request_ticks,
            response_ticks,
            originate=response.originate.to_millis(request_wall),
            receive=response.receive.to_millis(request_wall),
            transmit=response.transmit.to_millis(request_wall)
        )

        logger.debug(f"SNTP from {host}: offset={result.clock_offset_millis}ms, "
                     f"round_trip={result.round_trip_millis}ms")
        return result
