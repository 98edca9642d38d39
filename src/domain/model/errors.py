"""Domain-level exceptions.

Adapters and services raise these errors; route handlers catch them and map
to HTTP status codes.
"""


class DomainError(Exception):
    """Base class for all domain errors."""


class BackendError(DomainError):
    """Persistence backend rejected or failed the operation.

    Covers driver errors, unique constraint violations and writes against a
    missing record. The message is passed through to the client as-is.
    """
