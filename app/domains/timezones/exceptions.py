from __future__ import annotations

from fastapi import status


class TimeServiceError(Exception):
    """Base for failures rendered to clients as ``{"error": message}``"""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Internal Server Error. Please try again later."

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class TimezoneValidationError(TimeServiceError):
    status_code = status.HTTP_400_BAD_REQUEST


class MissingTimezoneError(TimezoneValidationError):
    message = "Missing 'timezone' query parameter."


class InvalidTimezoneFormatError(TimezoneValidationError):
    message = "Invalid timezone format. Please provide a valid IANA timezone identifier."

    def __init__(self, timezone: str) -> None:
        self.timezone = timezone
        super().__init__()


class UnknownTimezoneError(TimezoneValidationError):
    def __init__(self, timezone: str) -> None:
        self.timezone = timezone
        super().__init__(f"Invalid timezone '{timezone}'. Please provide a valid IANA timezone identifier.")


class RateLimitExceededError(TimeServiceError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    message = "Rate limit exceeded. Please try again later."

    def __init__(self, client_id: str) -> None:
        self.client_id = client_id
        super().__init__()


class TimeComputationError(TimeServiceError):
    """Raised when a report cannot be built; the cause is logged, never returned"""


__all__ = [
    "TimeServiceError",
    "TimezoneValidationError",
    "MissingTimezoneError",
    "InvalidTimezoneFormatError",
    "UnknownTimezoneError",
    "RateLimitExceededError",
    "TimeComputationError",
]
