"""Error conditions reported by the conversion endpoint."""
from app.config import GENERIC_FAILURE_MESSAGE


class ConverterError(Exception):
    """Base error carrying the HTTP status and the client-facing message."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInput(ConverterError):
    """Missing file or disallowed content type. Reported verbatim."""

    status_code = 400


class ConversionFailed(ConverterError):
    """Any failure inside the image pipeline. The cause is only logged."""

    status_code = 500

    def __init__(self, message: str = GENERIC_FAILURE_MESSAGE):
        super().__init__(message)
