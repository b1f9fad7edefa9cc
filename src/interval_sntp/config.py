"""Client configuration loaded from YAML."""

import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional, Union
from zoneinfo import ZoneInfoNotFoundError

import yaml

from .constants import DEFAULT_INTERVAL_SECONDS, DEFAULT_SERVER, DEFAULT_TIMEOUT_MS, NTP_PORT
from .time_service import resolve_zone

logger = logging.getLogger(__name__)


@dataclass
class SntpConfig:
    """SNTP client configuration"""
    host: str = DEFAULT_SERVER
    port: int = NTP_PORT
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    zone: Optional[str] = None  # IANA zone name, None = system local zone
    interval_seconds: float = DEFAULT_INTERVAL_SECONDS
    log_level: str = "INFO"

    def __post_init__(self):
        if not self.host:
            raise ValueError("host must not be empty")
        if not 0 < self.port < 65536:
            raise ValueError(f"port out of range: {self.port}")
        if self.timeout_ms <= 0:
            raise ValueError(f"timeout_ms must be positive, got {self.timeout_ms}")
        if self.interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be positive, got {self.interval_seconds}")
        if self.zone is not None:
            self._check_zone()

    def _check_zone(self):
        if not isinstance(self.zone, str) or not self.zone:
            raise ValueError(f"zone must be an IANA timezone name, got {self.zone!r}")
        try:
            resolve_zone(self.zone)
        except (ZoneInfoNotFoundError, ValueError, OSError) as e:
            raise ValueError(f"Unknown timezone: {self.zone}") from e

    @classmethod
    def from_dict(cls, data: dict) -> "SntpConfig":
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown sntp config keys: {sorted(unknown)}")
        return cls(**data)

    def merged(self, **overrides) -> "SntpConfig":
        """Copy with every non-None override applied."""
        values = {f.name: getattr(self, f.name) for f in fields(self)}
        values.update({k: v for k, v in overrides.items() if v is not None})
        return SntpConfig(**values)


def load_config(config_path: Union[str, Path]) -> SntpConfig:
    """Load the ``sntp`` section of a YAML file."""
    try:
        with open(config_path, 'r') as f:
            raw = yaml.safe_load(f) or {}
    except Exception as e:
        logger.error(f"Failed to load config {config_path}: {e}")
        raise

    section = raw.get('sntp', {}) if isinstance(raw, dict) else None
    if not isinstance(section, dict):
        raise ValueError(f"Config {config_path} has no 'sntp' mapping")
    return SntpConfig.from_dict(section)
