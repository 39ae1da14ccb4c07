"""
Domain errors raised by the catalog, cart and user services.

Every error carries the HTTP status the API answers with; the message is
returned to the client as-is.
"""


class StoreError(Exception):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(StoreError):
    pass


class NotFound(StoreError):
    pass


class PermissionDenied(StoreError):
    status_code = 401


class InsufficientStock(StoreError):
    pass


class OutOfStock(StoreError):
    pass


class NotInCart(StoreError):
    pass


class StoreUnavailable(StoreError):
    pass


class ProductNotFound(NotFound):
    def __init__(self, message: str = "Product not found"):
        super().__init__(message)
