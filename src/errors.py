"""Domain errors — each one knows the HTTP status it maps to."""


class CallbackDeskError(Exception):
    """Base class for errors reported to API clients as {success: false}."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(CallbackDeskError):
    """Required submission field is missing."""

    status_code = 400


class NotFound(CallbackDeskError):
    """No callback request with the given id."""

    status_code = 404


class UnsupportedMediaType(CallbackDeskError):
    """Attachment type is not on the allow-list."""

    status_code = 400


class PayloadTooLarge(CallbackDeskError):
    """Attachment exceeds the size limit."""

    status_code = 400


class InvalidInput(CallbackDeskError):
    """Calculator input cannot be priced."""

    status_code = 400


class PersistenceError(CallbackDeskError):
    """Durable storage could not be read or written."""

    status_code = 500
