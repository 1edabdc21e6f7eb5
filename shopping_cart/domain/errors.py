# shopping_cart/domain/errors.py
"""
Domain errors raised by the cart lifecycle.

Every error carries an ``ErrorKind`` so the HTTP layer can map it without
inspecting messages: NOT_FOUND becomes 404, CONFLICT becomes 400.
"""
from enum import Enum


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"


class CartServiceError(Exception):
    kind: ErrorKind

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(CartServiceError):
    kind = ErrorKind.NOT_FOUND


class UserNotFoundError(NotFoundError):
    pass


class CartNotFoundError(NotFoundError):
    pass


class ConflictError(CartServiceError):
    kind = ErrorKind.CONFLICT


class CartAlreadyExistsError(ConflictError):
    pass


class EmptyCartError(ConflictError):
    pass


class CartLockedError(ConflictError):
    pass


class OrderNotificationError(ConflictError):
    pass
