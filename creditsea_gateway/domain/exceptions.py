"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class ValidationError(DomainException):
    """Upload or request parameter is missing, malformed or too large"""

    pass


class NotFoundError(DomainException):
    """No credit report exists for the given identifier"""

    pass


class ParseError(DomainException):
    """Report markup is not well-formed or has no usable root element"""

    pass


class StoreError(DomainException):
    """Report store is unavailable or rejected the operation"""

    pass
