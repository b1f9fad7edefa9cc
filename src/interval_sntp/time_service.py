"""
Network time service

Wraps one SNTP transaction into a display-ready TimeResponse. The blocking
call must stay off UI and event-loop threads; use get_current_time_async from
asyncio code.
"""

import asyncio
import logging
from datetime import datetime, timezone, tzinfo
from typing import Optional, Union
from zoneinfo import ZoneInfo

from .constants import DATE_FORMAT, DEFAULT_SERVER, DEFAULT_TIMEOUT_MS, NTP_PORT
from .models import TimeResponse
from .ntp_client import SntpClient

logger = logging.getLogger(__name__)

Zone = Union[str, tzinfo, None]


def resolve_zone(zone: Zone) -> Optional[tzinfo]:
    """Turn an IANA name or tzinfo into a tzinfo; None means the local zone."""
    if zone is None or isinstance(zone, tzinfo):
        return zone
    if zone.upper() == "UTC":
        return timezone.utc
    return ZoneInfo(zone)


def get_current_time(zone: Zone = None,
                     host: str = DEFAULT_SERVER,
                     timeout_ms: int = DEFAULT_TIMEOUT_MS,
                     port: int = NTP_PORT,
                     client: Optional[SntpClient] = None) -> TimeResponse:
    """Query ``host`` once and return the corrected time rendered in ``zone``."""
    target_zone = resolve_zone(zone)
    if client is None:
        client = SntpClient(port=port)

    result = client.request_time(host, timeout_ms)

    epoch_seconds = result.corrected_epoch_millis // 1000
    zoned = datetime.fromtimestamp(epoch_seconds, tz=timezone.utc)
    zoned = zoned.astimezone(target_zone)

    response = TimeResponse.from_transaction(result, zoned, DATE_FORMAT)
    logger.info(f"Network time from {host}: {response.datetime_string} "
                f"(offset={result.clock_offset_millis}ms, rtt={result.round_trip_millis}ms)")
    return response


async def get_current_time_async(zone: Zone = None,
                                 host: str = DEFAULT_SERVER,
                                 timeout_ms: int = DEFAULT_TIMEOUT_MS,
                                 port: int = NTP_PORT,
                                 client: Optional[SntpClient] = None) -> TimeResponse:
    """Run get_current_time in a worker thread."""
    return await asyncio.to_thread(get_current_time, zone, host, timeout_ms, port, client)
