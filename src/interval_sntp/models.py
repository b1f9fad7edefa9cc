"""Caller-facing time models."""

from datetime import datetime

from pydantic import BaseModel, Field

from .ntp_client import TransactionResult


class TimeResponse(BaseModel):
    """Network time rendered for display."""

    datetime_string: str = Field(description="Time formatted as yyyy-MM-dd HH:mm:ss")
    zoned_datetime: datetime = Field(description="Timezone-aware corrected time (whole seconds)")
    round_trip_ms: int = Field(description="Round-trip delay of the transaction in milliseconds")
    clock_offset_ms: int = Field(description="Server time minus local time in milliseconds")

    @classmethod
    def from_transaction(cls, result: TransactionResult, zoned_datetime: datetime,
                         date_format: str) -> "TimeResponse":
        return cls(
            datetime_string=zoned_datetime.strftime(date_format),
            zoned_datetime=zoned_datetime,
            round_trip_ms=result.round_trip_millis,
            clock_offset_ms=result.clock_offset_millis
        )
