"""
Interval SNTP

Minimal SNTP client that corrects the local wall clock against a time server,
plus a small periodic refresher for displaying network time.
"""

__version__ = "0.1.0"
__author__ = "Interval SNTP Team"

from .exceptions import (
    SntpError,
    NetworkError,
    NtpTimeoutError,
    ProtocolError
)

from .ntp_client import (
    SntpClient,
    TransactionResult,
    compute_transaction
)

from .models import TimeResponse
from .time_service import get_current_time, get_current_time_async
from .scheduler import IntervalRefresher, TimerState
from .config import SntpConfig, load_config

__all__ = [
    "SntpError",
    "NetworkError",
    "NtpTimeoutError",
    "ProtocolError",
    "SntpClient",
    "TransactionResult",
    "compute_transaction",
    "TimeResponse",
    "get_current_time",
    "get_current_time_async",
    "IntervalRefresher",
    "TimerState",
    "SntpConfig",
    "load_config",
    "__version__"
]
