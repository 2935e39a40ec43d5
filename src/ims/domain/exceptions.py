"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer (or any other adapter) can catch them uniformly and map
them to its own error responses.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """An argument was malformed or out of range (negative quantity, etc.)."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class AlreadyExistsError(DomainException):
    """A uniqueness rule would be broken (SKU, name, active alert, ...)."""


class InvalidStateError(DomainException):
    """The operation is not allowed in the entity's current state."""


class InsufficientStockError(DomainException):
    """Not enough stock in the bucket the operation draws from."""


class ConcurrencyConflictError(DomainException):
    """The stored row changed between read and write."""


class PermissionDeniedError(DomainException):
    """The acting principal lacks the role the operation requires."""
