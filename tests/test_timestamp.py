"""
Tests for the NTP timestamp codec.
"""

import random
import struct

import pytest

from interval_sntp.constants import FRACTION_SCALE, OFFSET_1900_TO_1970
from interval_sntp.timestamp import (
    NtpTimestamp,
    millis_to_ntp,
    ntp_to_millis,
    read_timestamp,
    read_uint32,
    write_timestamp,
    write_uint32
)


class TestUint32:
    """Unsigned 32-bit big-endian access"""

    def test_all_ones_is_unsigned(self):
        assert read_uint32(bytes([0xFF, 0xFF, 0xFF, 0xFF]), 0) == 4294967295

    def test_high_bit_bytes_not_sign_extended(self):
        assert read_uint32(bytes([0x80, 0x00, 0x00, 0x81]), 0) == 0x80000081

    def test_reads_at_offset(self):
        buffer = bytes([0, 0, 0xE9, 0xDF, 0x12, 0x34])
        assert read_uint32(buffer, 2) == 0xE9DF1234

    def test_write_then_read(self):
        buffer = bytearray(8)
        write_uint32(buffer, 4, 0xDEADBEEF)
        assert bytes(buffer) == b"\x00\x00\x00\x00\xde\xad\xbe\xef"
        assert read_uint32(buffer, 4) == 0xDEADBEEF


class TestConversion:
    """NTP timestamp <-> epoch milliseconds"""

    def test_epoch_offset_constant(self):
        assert OFFSET_1900_TO_1970 == 2208988800

    def test_known_vector(self):
        seconds = 3923699299
        assert ntp_to_millis(seconds, 0) == (3923699299 - 2208988800) * 1000
        assert ntp_to_millis(seconds, 0) // 1000 == 1714710499

    def test_half_second_fraction(self):
        assert ntp_to_millis(OFFSET_1900_TO_1970, FRACTION_SCALE // 2) == 500

    def test_unix_epoch(self):
        assert millis_to_ntp(0) == NtpTimestamp(OFFSET_1900_TO_1970, 0)

    def test_encode_splits_seconds_and_fraction(self):
        timestamp = millis_to_ntp(1_714_710_499_250)
        assert timestamp.seconds == 3923699299
        assert timestamp.fraction == FRACTION_SCALE // 4

    def test_seconds_wrap_after_2036(self):
        # 2036-02-07T06:28:16Z is the start of NTP era 1
        era_one_start = (FRACTION_SCALE - OFFSET_1900_TO_1970) * 1000
        assert millis_to_ntp(era_one_start) == NtpTimestamp(0, 0)
        assert millis_to_ntp(era_one_start + 1000).seconds == 1

    def test_pivot_selects_nearest_era(self):
        era_one_start = (FRACTION_SCALE - OFFSET_1900_TO_1970) * 1000
        timestamp = millis_to_ntp(era_one_start + 5000)
        # Without a pivot the value is read as era 0 (1900)
        assert timestamp.to_millis() < 0
        assert timestamp.to_millis(pivot_millis=era_one_start) == era_one_start + 5000

    def test_pivot_keeps_era_zero_values(self):
        millis = 1_714_710_499_000
        timestamp = millis_to_ntp(millis)
        assert timestamp.to_millis(pivot_millis=0) == millis
        assert timestamp.to_millis(pivot_millis=millis) == millis

    @pytest.mark.parametrize("millis", [0, 1, 999, 1000, 1_714_710_499_123, 2**40 + 7])
    def test_roundtrip_within_one_millisecond(self, millis):
        buffer = bytearray(8)
        write_timestamp(buffer, 0, millis)
        decoded = read_timestamp(buffer, 0).to_millis(pivot_millis=millis)
        assert millis - 1 <= decoded <= millis

    def test_roundtrip_random_sample(self):
        rng = random.Random(1234)
        for _ in range(500):
            millis = rng.randrange(0, 2**53)
            buffer = bytearray(8)
            write_timestamp(buffer, 0, millis)
            decoded = read_timestamp(buffer, 0).to_millis(pivot_millis=millis)
            assert abs(decoded - millis) <= 1


class TestWriteTimestamp:
    """Timestamp serialization with the random low byte"""

    def test_layout_is_big_endian_seconds_then_fraction(self):
        buffer = bytearray(8)
        write_timestamp(buffer, 0, 1_714_710_499_500, nonce=0)
        seconds, fraction = struct.unpack("!II", buffer)
        assert seconds == 3923699299
        assert fraction == FRACTION_SCALE // 2

    def test_only_low_byte_varies(self):
        first, second = bytearray(8), bytearray(8)
        write_timestamp(first, 0, 1_714_710_499_321)
        write_timestamp(second, 0, 1_714_710_499_321)
        assert first[:7] == second[:7]

    def test_nonce_override(self):
        buffer = bytearray(8)
        written = write_timestamp(buffer, 0, 1000, nonce=0xAB)
        assert buffer[7] == 0xAB
        assert read_timestamp(buffer, 0) == written

    def test_writes_at_offset_only(self):
        buffer = bytearray(48)
        write_timestamp(buffer, 40, 1000, nonce=0)
        assert buffer[:40] == bytearray(40)
        assert read_timestamp(buffer, 40).to_millis() == 1000
