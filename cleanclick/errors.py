"""
Error taxonomy shared by the scheduling core, the repositories and the API.

Every error carries the HTTP status the API layer answers with.
"""


class CleanClickError(Exception):
    """Base class for all domain errors."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(CleanClickError):
    """Unknown cleaner or booking."""

    status_code = 404


class InvalidInputError(CleanClickError):
    """Bad house size, unpriceable combination or malformed request."""

    status_code = 400


class NotPricedError(InvalidInputError):
    """The pricing table has no rate for the requested house configuration."""


class ConflictError(CleanClickError):
    """The requested slot is no longer available."""

    status_code = 409


class UnauthorizedError(CleanClickError):
    """Missing, invalid or foreign bearer credential."""

    status_code = 401


class StorageError(CleanClickError):
    """The underlying record store failed."""

    status_code = 500
