from datetime import datetime, timezone

import pytest

from clingo.domain.orders import reconciliation
from clingo.domain.orders.errors import (
    InvalidStatusError,
    MethodMismatchError,
    MissingFieldsError,
)
from clingo.models_order import Order

NOW = datetime(2024, 5, 1, 10, 30, tzinfo=timezone.utc)


def make_order(payment_method="paypal", status="pending", payment_status="processing", details=None):
    return Order(
        id="22222222-2222-2222-2222-222222222222",
        status=status,
        payment_status=payment_status,
        payment_method=payment_method,
        payment_details=details,
    )


def callback(**overrides):
    data = {
        "gatewayOrderId": "G1",
        "gatewayPayerId": "P1",
        "captureId": "C1",
        "captureStatus": "COMPLETED",
    }
    data.update(overrides)
    return data


class TestNormalizeCaptureStatus:
    @pytest.mark.parametrize(
        "gateway_status, expected",
        [
            ("COMPLETED", "completed"),
            ("completed", "completed"),
            ("DECLINED", "failed"),
            ("PENDING", "processing"),
            ("SOMETHING_NEW", "processing"),
            (None, "processing"),
        ],
    )
    def test_mapping(self, gateway_status, expected):
        assert reconciliation.normalize_capture_status(gateway_status) == expected


class TestGatewayCallback:
    def test_completed_capture_confirms_order(self):
        order = make_order()

        changed = reconciliation.apply_gateway_callback(order, callback(), now=NOW)

        assert changed is True
        assert order.payment_status == "completed"
        assert order.status == "confirmed"
        assert order.payment_details == {
            "gatewayOrderId": "G1",
            "gatewayPayerId": "P1",
            "gatewayCapture": {"id": "C1", "status": "COMPLETED"},
            "timestamp": NOW.isoformat(),
        }

    def test_declined_capture_marks_payment_failed(self):
        order = make_order(status="confirmed")

        reconciliation.apply_gateway_callback(order, callback(captureStatus="DECLINED"), now=NOW)

        assert order.payment_status == "failed"
        assert order.status == "pending"

    def test_existing_details_are_kept(self):
        order = make_order(details={"gatewayOrderId": "G1", "transactionId": "T-9"})

        reconciliation.apply_gateway_callback(order, callback(gatewayPayerId=None), now=NOW)

        assert order.payment_details["transactionId"] == "T-9"
        assert "gatewayPayerId" not in order.payment_details

    def test_replayed_callback_is_a_no_op(self):
        order = make_order()
        reconciliation.apply_gateway_callback(order, callback(), now=NOW)
        snapshot = dict(order.payment_details)

        later = datetime(2024, 5, 2, tzinfo=timezone.utc)
        changed = reconciliation.apply_gateway_callback(order, callback(), now=later)

        assert changed is False
        assert order.payment_details == snapshot
        assert order.status == "confirmed"

    def test_non_gateway_order_is_rejected(self):
        order = make_order(payment_method="card", payment_status="pending")

        with pytest.raises(MethodMismatchError) as exc_info:
            reconciliation.apply_gateway_callback(order, callback(), now=NOW)

        assert exc_info.value.context["paymentMethod"] == "card"
        assert order.payment_details is None

    def test_missing_fields_are_listed(self):
        order = make_order()

        with pytest.raises(MissingFieldsError) as exc_info:
            reconciliation.apply_gateway_callback(
                order, callback(gatewayOrderId="  ", captureId=None), now=NOW
            )

        assert exc_info.value.context["missingFields"] == ["gatewayOrderId", "captureId"]
        assert order.payment_status == "processing"


class TestPaymentUpdate:
    def test_card_order_keeps_card_metadata_only(self):
        order = make_order(payment_method="card", payment_status="pending")

        reconciliation.apply_payment_update(
            order,
            "completed",
            {"transactionId": "T1", "cardLast4": "4242", "cardBrand": "visa", "gatewayOrderId": "G1"},
            now=NOW,
        )

        assert order.payment_details == {
            "transactionId": "T1",
            "cardLast4": "4242",
            "cardBrand": "visa",
            "timestamp": NOW.isoformat(),
        }
        assert order.status == "confirmed"

    def test_gateway_order_keeps_gateway_fields_only(self):
        order = make_order()

        reconciliation.apply_payment_update(
            order,
            "refunded",
            {"transactionId": "T2", "gatewayOrderId": "G1", "cardLast4": "4242"},
            now=NOW,
        )

        assert order.payment_details["gatewayOrderId"] == "G1"
        assert "cardLast4" not in order.payment_details
        assert order.status == "cancelled"

    def test_unknown_payment_status_leaves_order_untouched(self):
        order = make_order(payment_method="cash", payment_status="pending")

        with pytest.raises(InvalidStatusError):
            reconciliation.apply_payment_update(order, "settled", {"transactionId": "T3"}, now=NOW)

        assert order.payment_details is None
        assert order.payment_status == "pending"

    def test_merge_payment_details_returns_new_dict(self):
        existing = {"transactionId": "T1"}

        merged = reconciliation.merge_payment_details(existing, {"cardBrand": "visa", "cardLast4": None})

        assert merged == {"transactionId": "T1", "cardBrand": "visa"}
        assert existing == {"transactionId": "T1"}
