"""
Domain errors raised by the game core and mapped to HTTP responses by the API layer.
"""


class FlagGuessError(Exception):
    """Base class for errors that are safe to report to clients."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(FlagGuessError):
    """Missing or malformed input (never retried)."""

    status_code = 400


class InsufficientPoolError(FlagGuessError):
    """Fewer than four entities available for the requested difficulty."""

    status_code = 400


class DataUnavailableError(FlagGuessError):
    """The country dataset was not loaded."""

    status_code = 503
