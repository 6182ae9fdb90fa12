"""Failures reported by occupancy clients.

Every client failure maps to one of four kinds. The scheduler handles them
identically for retry timing; the kind only feeds logging and diagnostics.
"""

from __future__ import annotations

from parking_occupancy.domain.models.error_details import ErrorDetails


class OccupancyClientError(Exception):
    """Base class for occupancy fetch failures."""

    kind = "unknown"

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code

    @property
    def details(self) -> ErrorDetails:
        return ErrorDetails(kind=self.kind, reason=str(self), status_code=self.status_code)


class InvalidRequestError(OccupancyClientError):
    """The facility id or URL could not form a valid request."""

    kind = "invalid_request"


class NoDataError(OccupancyClientError):
    """The response did not contain any facility."""

    kind = "no_data"


class NetworkError(OccupancyClientError):
    """Transport level failure (connection, timeout, HTTP error status)."""

    kind = "network"

    def __init__(
        self, message: str, cause: BaseException | None = None, status_code: int | None = None
    ) -> None:
        super().__init__(message, status_code=status_code)
        self.cause = cause


class DecodeError(OccupancyClientError):
    """The response body did not match the expected schema."""

    kind = "decode"

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause


def describe_failure(error: BaseException) -> ErrorDetails:
    """Extract loggable details from any exception raised while fetching."""
    if isinstance(error, OccupancyClientError):
        return error.details
    return ErrorDetails(kind="unexpected", reason=f"{type(error).__name__}: {error}")
