# backend/domain/exceptions.py
"""Error kinds raised by repositories and services.

Routes never catch these one by one: main.py registers a handler per
class and turns them into HTTP status codes.
"""


class DomainException(Exception):
    """Base class for all inventory errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(DomainException):
    """Referenced product/category (by id, SKU or name) does not exist."""


class ConflictError(DomainException):
    """A uniqueness rule (product SKU, category name) would be violated."""


class InvalidArgumentError(DomainException):
    """Malformed query parameters, e.g. an inverted price range."""


class StorageUnavailableError(DomainException):
    """The database could not be reached. Never retried here."""
