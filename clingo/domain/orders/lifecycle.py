"""
Order lifecycle engine

Fulfillment statuses: pending → confirmed → in-progress → completed, or cancelled
Payment statuses: pending → processing → completed / failed, completed → refunded

Payment events drive fulfillment through fulfillment_after_payment(); every write
path that changes payment_status goes through apply_payment_status().
Explicit fulfillment changes are permissive: any known status may be set.
"""

import logging

from ... import config
from .errors import InvalidStatusError, InvalidTransitionError

logger = logging.getLogger(__name__)

FULFILLMENT_STATUSES = ("pending", "confirmed", "in-progress", "completed", "cancelled")
PAYMENT_STATUSES = ("pending", "processing", "completed", "failed", "refunded")
PAYMENT_METHODS = ("card", "paypal", "cash")

CANCELLABLE_STATUSES = ("pending", "confirmed")

# Payment events record payment data on these orders but never move fulfillment
TERMINAL_STATUSES = ("completed", "cancelled")


def check_gateway_payment_method(method: str) -> str:
    """
    Raises:
        ValueError: If the configured gateway method is not a payment method
    """
    if method not in PAYMENT_METHODS:
        raise ValueError(
            f"GATEWAY_PAYMENT_METHOD={method!r} is not one of: {', '.join(PAYMENT_METHODS)}"
        )
    return method


check_gateway_payment_method(config.GATEWAY_PAYMENT_METHOD)


def is_valid_fulfillment_status(status) -> bool:
    return status in FULFILLMENT_STATUSES


def is_valid_payment_status(status) -> bool:
    return status in PAYMENT_STATUSES


def fulfillment_after_payment(current: str, payment_status: str) -> str:
    """
    Fulfillment status that follows a payment status change.

    completed  → pending becomes confirmed
    failed     → back to pending
    refunded   → cancelled
    pending / processing → unchanged
    """
    if current in TERMINAL_STATUSES:
        return current

    if payment_status == "completed":
        return "confirmed" if current == "pending" else current
    if payment_status == "failed":
        return "pending"
    if payment_status == "refunded":
        return "cancelled"
    return current


def apply_payment_status(order, payment_status: str) -> bool:
    """
    Set the order's payment status and run the payment-driven transition.

    Returns True if the payment status changed.
    Raises:
        InvalidStatusError: If payment_status is not a known payment status
    """
    if not is_valid_payment_status(payment_status):
        raise InvalidStatusError(payment_status, PAYMENT_STATUSES, field="paymentStatus")

    previous_payment = order.payment_status
    if previous_payment == payment_status:
        return False

    previous_status = order.status
    order.payment_status = payment_status
    order.status = fulfillment_after_payment(previous_status, payment_status)

    logger.info(
        f"💳 Order {order.id} payment: {previous_payment} → {payment_status}"
        f" (status: {previous_status} → {order.status})"
    )
    return True


def set_fulfillment_status(order, status: str) -> None:
    """
    Explicitly set fulfillment status.

    Raises:
        InvalidStatusError: If status is not a known fulfillment status
    """
    if not is_valid_fulfillment_status(status):
        raise InvalidStatusError(status, FULFILLMENT_STATUSES)

    previous = order.status
    order.status = status
    logger.info(f"✅ Order {order.id} transitioned: {previous} → {status}")


def cancel(order) -> None:
    """
    Cancel an order that has not started.

    Raises:
        InvalidTransitionError: If the order is past confirmed or already cancelled
    """
    if order.status not in CANCELLABLE_STATUSES:
        logger.warning(f"⚠️ Rejected cancel of order {order.id} in status {order.status}")
        raise InvalidTransitionError(
            f"Cannot cancel order with status: {order.status}", current_status=order.status
        )

    previous = order.status
    order.status = "cancelled"
    logger.info(f"✅ Order {order.id} transitioned: {previous} → cancelled")
