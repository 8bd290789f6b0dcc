"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class MissingDateRangeError(DomainException):
    """Summary requested over a record set with no min/max date"""

    pass


class TransactionNotFoundError(DomainException):
    """Transaction does not exist or was deleted"""

    pass


class UserNotFoundError(DomainException):
    """User does not exist or was deleted"""

    pass


class DuplicateUserError(DomainException):
    """Username or email already registered"""

    pass


class InvalidCredentialsError(DomainException):
    """Username/password pair does not match"""

    pass


class InvalidTokenError(DomainException):
    """Bearer token is malformed, expired, or of the wrong kind"""

    pass


class SlipReadError(DomainException):
    """Slip image could not be stored, read, or parsed"""

    pass
