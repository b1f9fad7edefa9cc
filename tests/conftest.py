"""
Pytest configuration and shared fixtures for Interval SNTP tests.
"""

import socket
import struct
import threading

import pytest

NTP_EPOCH_OFFSET = 2208988800  # Seconds between 1900 and 1970


def ntp_words(millis):
    """Encode epoch milliseconds as (seconds, fraction) NTP words that decode exactly."""
    seconds, rem = divmod(millis, 1000)
    fraction = -(-rem * 2**32 // 1000)
    return seconds + NTP_EPOCH_OFFSET, fraction


def build_server_response(originate, receive, transmit, mode=4, stratum=2, raw_originate=None):
    """
    Build a 48-byte server reply.

    Timestamps are epoch milliseconds. ``raw_originate`` copies the 8 originate
    bytes verbatim (as a real server echoing the request would).
    """
    # Word 0: LI=0, VN=3, Mode, Stratum, Poll=6, Precision=-20
    precision_byte = struct.unpack('B', struct.pack('b', -20))[0]
    word0 = (3 << 27) | (mode << 24) | (stratum << 16) | (6 << 8) | precision_byte

    packet = bytearray(struct.pack(
        "!12I",
        word0, 0x100, 0x50, 0x01020304, 0, 0,
        *ntp_words(originate),
        *ntp_words(receive),
        *ntp_words(transmit)
    ))
    if raw_originate is not None:
        packet[24:32] = raw_originate
    return bytes(packet)


class FakeNtpServer:
    """Loopback UDP server answering each datagram through ``handler``."""

    def __init__(self, handler):
        self.handler = handler
        self.requests = []
        self.sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        self.sock.bind(("127.0.0.1", 0))
        self.sock.settimeout(0.1)
        self.port = self.sock.getsockname()[1]
        self.running = True
        self.thread = threading.Thread(target=self._serve, daemon=True)
        self.thread.start()

    def _serve(self):
        while self.running:
            try:
                data, address = self.sock.recvfrom(1024)
            except socket.timeout:
                continue
            except OSError:
                break
            self.requests.append(data)
            reply = self.handler(data)
            if reply is not None:
                self.sock.sendto(reply, address)

    def close(self):
        self.running = False
        self.thread.join(timeout=2.0)
        self.sock.close()


@pytest.fixture
def fake_ntp_server():
    """Factory fixture starting FakeNtpServer instances on 127.0.0.1."""
    servers = []

    def start(handler):
        server = FakeNtpServer(handler)
        servers.append(server)
        return server

    yield start

    for server in servers:
        server.close()


@pytest.fixture
def server_response():
    """Builder for 48-byte server replies (see build_server_response)."""
    return build_server_response


@pytest.fixture
def echo_handler():
    """Handler behaving like a server 25ms ahead of the request's clock."""
    def handler(request):
        seconds, fraction = struct.unpack("!II", request[40:48])
        request_millis = (seconds - NTP_EPOCH_OFFSET) * 1000 + fraction * 1000 // 2**32
        return build_server_response(
            originate=request_millis,
            receive=request_millis + 25,
            transmit=request_millis + 26,
            raw_originate=request[40:48]
        )
    return handler


class TickClock:
    """Clock returning scripted values, repeating the last one when exhausted."""

    def __init__(self, *values):
        self.values = list(values)
        self.calls = 0

    def __call__(self):
        value = self.values[min(self.calls, len(self.values) - 1)]
        self.calls += 1
        return value


@pytest.fixture
def tick_clock():
    return TickClock


# Test markers for different test categories
def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests"
    )
    config.addinivalue_line(
        "markers", "network: Tests requiring network access"
    )
