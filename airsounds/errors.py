"""Error kinds raised by fetchers, parsers and the update pipeline."""


class AirsoundsError(Exception):
    """Base class for all airsounds failures."""


class FetchError(AirsoundsError):
    """Raised when an upstream returns a non-success status or cannot be reached.

    The body of a failed response is never decoded.
    """

    def __init__(
        self, message: str, status_code: int | None = None, url: str | None = None
    ):
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class ParseError(AirsoundsError):
    """Raised when upstream bytes are structurally malformed.

    Carries the offending fragment (row, token, timestamp) for diagnosis.
    """

    def __init__(self, message: str, fragment: object = None):
        self.fragment = fragment
        if fragment is not None:
            message = f"{message}: {fragment!r}"
        super().__init__(message)


class InternalError(AirsoundsError):
    """Raised when an internal invariant is violated (e.g. interpolating unequal arrays)."""


class PublishError(AirsoundsError):
    """Raised when committing or pushing updated data files fails."""
