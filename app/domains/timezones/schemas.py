from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class TimeReport(BaseModel):
    local_time: str = Field(description="Local wall-clock time with numeric UTC offset")
    utc_time: str = Field(description="UTC time with a 'Z' suffix")
    timezone: str
    offset: str = Field(description="Offset from UTC as UTC±HH:MM")
    offset_minutes: int
    timezone_abbreviation: str
    is_dst: bool
    day_of_week: str
    iso_week_number: int = Field(ge=1, le=53)
    iso_year: int
    day_of_year: int = Field(ge=1, le=366)
    days_in_month: int = Field(ge=28, le=31)
    days_in_year: int = Field(ge=365, le=366)
    is_leap_year: bool
    start_of_day: str
    end_of_day: str
    utc_difference: str
    timestamp_milliseconds: int

    model_config = ConfigDict(frozen=True)


class ErrorResponse(BaseModel):
    error: str


class TimezoneCollection(BaseModel):
    timezones: list[str]
    count: int
