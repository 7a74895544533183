"""Order domain errors - rendered as {success: false, message, ...context} by main.py"""

from typing import Any, Optional


class OrderError(Exception):
    """Base class for order domain failures"""

    status_code = 400

    def __init__(self, message: str, **context: Any):
        super().__init__(message)
        self.message = message
        self.context = context

    def to_dict(self) -> dict:
        return {"success": False, "message": self.message, **self.context}


class NotFoundError(OrderError):
    status_code = 404

    def __init__(self, resource: str, resource_id: Optional[Any] = None):
        super().__init__(f"{resource} not found", resource=resource)
        self.resource_id = resource_id


class InvalidSelectionError(OrderError):
    def __init__(self, message: str, option_id: Optional[Any] = None):
        context = {}
        if option_id is not None:
            context["optionId"] = option_id
        super().__init__(message, **context)


class InvalidStatusError(OrderError):
    def __init__(self, value: Any, allowed: tuple, field: str = "status"):
        super().__init__(
            f"Invalid {field}: {value}",
            value=value,
            allowed=list(allowed),
        )


class InvalidTransitionError(OrderError):
    def __init__(self, message: str, current_status: str):
        super().__init__(message, currentStatus=current_status)


class ForbiddenError(OrderError):
    status_code = 403

    def __init__(self, operation: str):
        super().__init__("Not authorized to access this order", operation=operation)


class MethodMismatchError(OrderError):
    def __init__(self, payment_method: str, expected: str):
        super().__init__(
            f"Order payment method is {payment_method}, not {expected}",
            paymentMethod=payment_method,
        )


class MissingFieldsError(OrderError):
    def __init__(self, fields: list):
        super().__init__(
            f"Missing required payment information: {', '.join(fields)}",
            missingFields=list(fields),
        )


class ConcurrentModificationError(OrderError):
    status_code = 409

    def __init__(self, order_id: str):
        super().__init__(
            "Order was modified by another request. Please reload and try again.",
            orderId=order_id,
        )
