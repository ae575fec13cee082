"""
Error taxonomy for the short link service.

Services raise these; the HTTP layer maps ``status_code`` onto the response.
"""


class ShortLinkError(Exception):
    """Base class for every failure the service reports to callers."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidURL(ShortLinkError):
    """Long URL rejected by the validator (user-correctable)."""
    status_code = 400


class InvalidShortID(ShortLinkError):
    """Short ID has the wrong shape (user-correctable)."""
    status_code = 400


class NotFound(ShortLinkError):
    """No record exists for the short ID."""
    status_code = 404


class AllocationExhausted(ShortLinkError):
    """
    Every candidate ID collided with an existing record.

    Transient from the caller's point of view: retrying the whole request
    is safe. Repeated occurrences mean the ID space is too small.
    """
    status_code = 500


class StoreFailure(ShortLinkError):
    """The persistent record store is unavailable or failed."""
    status_code = 500


class DuplicateKey(StoreFailure):
    """
    A unique constraint rejected a create.

    ``field`` is ``"short_id"`` or ``"redirect_url"``.
    """

    def __init__(self, field: str, value: str):
        super().__init__(f"Duplicate {field}: {value}")
        self.field = field
        self.value = value
