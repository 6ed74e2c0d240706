# storefront/domain/errors.py
"""
Wyjatki domenowe sklepu.
Kazdy niesie status HTTP, routery tlumacza je na HTTPException.
"""


class StorefrontError(Exception):
    status_code = 500
    default_message = "Unexpected error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class NotFound(StorefrontError):
    status_code = 404
    default_message = "Not found"


class OrderNotFound(NotFound):
    default_message = "Order not found"


class CheckoutNotFound(NotFound):
    default_message = "Checkout not found"


class Unauthenticated(StorefrontError):
    status_code = 401
    default_message = "Unauthorized"


class Unauthorized(StorefrontError):
    status_code = 403
    default_message = "Forbidden"


class ValidationError(StorefrontError):
    status_code = 400
    default_message = "Invalid input"


class EmptyCart(StorefrontError):
    status_code = 400
    default_message = "Cart is empty"


class AmountMismatch(StorefrontError):
    status_code = 400
    default_message = "Payment amount does not match order total"


class PaymentDeclined(StorefrontError):
    status_code = 400
    default_message = "Payment was declined"


class InvalidTransition(StorefrontError):
    status_code = 400
    default_message = "Checkout cannot move to the requested step"


class AlreadySettled(StorefrontError):
    status_code = 409
    default_message = "Order is already paid"


class SettlementInProgress(StorefrontError):
    status_code = 409
    default_message = "Payment for this order is already being processed"


class CheckoutInProgress(StorefrontError):
    status_code = 409
    default_message = "Checkout is already being submitted"


class UpstreamFailure(StorefrontError):
    status_code = 500
    default_message = "Service temporarily unavailable, please try again"
