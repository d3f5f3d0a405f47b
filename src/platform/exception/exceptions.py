class CustomBaseError(Exception):
    """Base class for all custom exceptions - controls logging behavior in @Logger.io"""

    def __init__(self, message: str, status_code: int = 500) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class DomainError(CustomBaseError):
    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message, status_code)


class ForbiddenError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 403)


class NotFoundError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 404)


class ConflictError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 409)


class AuthenticationError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 401)


class InsufficientStockError(DomainError):
    def __init__(self, message: str = 'Not enough tickets left in this price tier') -> None:
        super().__init__(message, 409)


class InsufficientBalanceError(DomainError):
    def __init__(self, message: str = 'Insufficient loyalty points available') -> None:
        super().__init__(message, 400)


class InvalidDiscountError(DomainError):
    def __init__(self, message: str = 'Invalid or expired discount code') -> None:
        super().__init__(message, 400)


class TransactionFailureError(CustomBaseError):
    """Raised when an all-or-nothing write was rolled back; the caller may retry."""

    def __init__(self, message: str) -> None:
        super().__init__(message, 500)
