"""Errors raised while mapping a prefix to a manifest."""


class GcsHelperError(Exception):
    """Base class for gcs-helper errors."""


class InvalidRequestError(GcsHelperError):
    """Request rejected before any storage call (wrong method, empty prefix)."""

    def __init__(self, message: str, status_code: int = 400) -> None:
        self.status_code = status_code
        super().__init__(message)


class ListingError(GcsHelperError):
    """Listing a prefix kept failing until the retry budget ran out.

    The message is the text of the last underlying error, which is also
    available as ``__cause__``.
    """

    def __init__(self, prefix: str, attempts: int, cause: BaseException) -> None:
        self.prefix = prefix
        self.attempts = attempts
        super().__init__(str(cause))


class SigningError(GcsHelperError):
    """The URL signer rejected a clip; the whole manifest is discarded."""

    def __init__(self, bucket: str, key: str, cause: BaseException) -> None:
        self.bucket = bucket
        self.key = key
        super().__init__(str(cause))
