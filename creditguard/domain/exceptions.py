"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class BureauAliasConflictError(DomainException):
    """The same provider code was registered for more than one bureau"""

    pass
