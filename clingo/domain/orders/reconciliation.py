"""
Payment reconciliation - maps payment updates and relayed gateway callbacks
onto an order's payment details, then hands the payment status to the
lifecycle engine in the same unit of work.
"""

import logging
from datetime import datetime
from typing import Optional

from ... import config
from ...models import utcnow
from .errors import InvalidStatusError, MethodMismatchError, MissingFieldsError
from .lifecycle import PAYMENT_STATUSES, apply_payment_status, is_valid_payment_status

logger = logging.getLogger(__name__)

CAPTURE_STATUS_MAP = {
    "COMPLETED": "completed",
    "DECLINED": "failed",
}

GATEWAY_DETAIL_FIELDS = ("gatewayOrderId", "gatewayPayerId", "gatewayCapture")
CARD_DETAIL_FIELDS = ("cardLast4", "cardBrand")


def normalize_capture_status(capture_status) -> str:
    """Gateway capture status → payment status; anything unrecognised is still processing"""
    if not capture_status:
        return "processing"
    return CAPTURE_STATUS_MAP.get(str(capture_status).strip().upper(), "processing")


def merge_payment_details(existing: Optional[dict], updates: dict) -> dict:
    """Return a new details dict with the non-empty updates laid over the existing ones"""
    merged = dict(existing or {})
    for key, value in updates.items():
        if value is not None:
            merged[key] = value
    return merged


def _without_timestamp(details: Optional[dict]) -> dict:
    return {k: v for k, v in (details or {}).items() if k != "timestamp"}


def _blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def apply_gateway_callback(order, callback: dict, now: Optional[datetime] = None) -> bool:
    """
    Record a gateway capture on the order.

    Returns False when the callback was already recorded (replay), True otherwise.
    Raises:
        MethodMismatchError: If the order is not paid through the gateway
        MissingFieldsError: If the gateway order id or capture id is missing
    """
    if order.payment_method != config.GATEWAY_PAYMENT_METHOD:
        raise MethodMismatchError(order.payment_method, config.GATEWAY_PAYMENT_METHOD)

    missing = [field for field in ("gatewayOrderId", "captureId") if _blank(callback.get(field))]
    if missing:
        raise MissingFieldsError(missing)

    payment_status = normalize_capture_status(callback.get("captureStatus"))
    updates = {
        "gatewayOrderId": callback["gatewayOrderId"],
        "gatewayPayerId": callback.get("gatewayPayerId"),
        "gatewayCapture": {
            "id": callback["captureId"],
            "status": callback.get("captureStatus"),
        },
    }

    current = _without_timestamp(order.payment_details)
    if order.payment_status == payment_status and merge_payment_details(current, updates) == current:
        logger.info(f"🔁 Gateway callback for order {order.id} already recorded, skipping")
        return False

    updates["timestamp"] = (now or utcnow()).isoformat()
    order.payment_details = merge_payment_details(order.payment_details, updates)
    apply_payment_status(order, payment_status)

    logger.info(
        f"✅ Gateway capture {callback['captureId']} recorded on order {order.id}: {payment_status}"
    )
    return True


def apply_payment_update(
    order,
    payment_status: str,
    details: Optional[dict] = None,
    now: Optional[datetime] = None,
) -> None:
    """
    Record a generic payment status update.

    The transaction id is always kept; gateway fields only for gateway orders
    and card metadata only for card orders. The timestamp is refreshed each time.

    Raises:
        InvalidStatusError: If payment_status is not a known payment status
    """
    details = details or {}
    updates = {"transactionId": details.get("transactionId")}

    if order.payment_method == config.GATEWAY_PAYMENT_METHOD:
        for field in GATEWAY_DETAIL_FIELDS:
            updates[field] = details.get(field)
    elif order.payment_method == "card":
        for field in CARD_DETAIL_FIELDS:
            updates[field] = details.get(field)

    if not is_valid_payment_status(payment_status):
        raise InvalidStatusError(payment_status, PAYMENT_STATUSES, field="paymentStatus")

    updates["timestamp"] = (now or utcnow()).isoformat()
    order.payment_details = merge_payment_details(order.payment_details, updates)
    apply_payment_status(order, payment_status)
