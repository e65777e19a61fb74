"""PushShift client exceptions."""


class PushShiftError(Exception):
    """Base exception for pullcaps errors."""

    pass


class ConfigurationError(PushShiftError, ValueError):
    """Raised when a filter holds unknown, invalid or conflicting options.

    Always raised before any request is issued.
    """

    pass


class PushShiftFetchError(PushShiftError):
    """Base class for errors that terminate a stream.

    Raised at the point where the affected page would have produced items.
    A stream that raised one of these is finished; create a new one to retry.
    """

    pass


class TransportError(PushShiftFetchError):
    """Raised when no usable response was delivered.

    Covers network failures, timeouts and non-success status codes.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RateLimitError(TransportError):
    """Raised when the server rejects a request with 429."""

    def __init__(
        self,
        message: str,
        status_code: int | None = 429,
        retry_after: float | None = None,
    ) -> None:
        super().__init__(message, status_code=status_code)
        self.retry_after = retry_after


class DecodeError(PushShiftFetchError):
    """Raised when a response body cannot be decoded into a page."""

    pass
