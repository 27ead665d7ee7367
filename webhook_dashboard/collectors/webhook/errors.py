"""Failures of a single poll cycle."""


class FetchError(Exception):
    """Base class for anything that makes a fetch attempt fail."""

    pass


class NetworkError(FetchError):
    """Transport failure, timeout or non-2xx response."""

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status


class FormatError(FetchError):
    """Response body is missing or not array-shaped."""

    pass
