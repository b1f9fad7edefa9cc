"""Error taxonomy for a single SNTP transaction."""


class SntpError(Exception):
    """Base class for every failed SNTP transaction."""


class NetworkError(SntpError, OSError):
    """Address resolution or socket I/O failed."""


class NtpTimeoutError(SntpError, TimeoutError):
    """No response arrived before the receive deadline."""


class ProtocolError(SntpError):
    """Response was too short or structurally invalid."""
