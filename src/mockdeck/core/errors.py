"""Exceptions raised by the mockdeck core."""


class MockdeckError(Exception):
    """Base class for exceptions raised by this package."""

    pass


class ValidationError(MockdeckError):
    """Raised when the endpoint form cannot be turned into a request.

    Always raised before any network call; the form is left untouched.
    """

    pass


class NetworkError(MockdeckError):
    """Raised on transport failure or a non-2xx answer from the backend."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ConfirmationDeclined(MockdeckError):
    """Raised when the operator declines a destructive-action prompt."""

    pass
