import pytest

from clingo.domain.orders import lifecycle
from clingo.domain.orders.errors import InvalidStatusError, InvalidTransitionError
from clingo.models_order import Order


def make_order(status="pending", payment_status="pending", payment_method="card"):
    return Order(
        id="11111111-1111-1111-1111-111111111111",
        status=status,
        payment_status=payment_status,
        payment_method=payment_method,
    )


class TestPaymentDrivenTransition:
    @pytest.mark.parametrize(
        "current, payment, expected",
        [
            ("pending", "completed", "confirmed"),
            ("confirmed", "completed", "confirmed"),
            ("in-progress", "completed", "in-progress"),
            ("confirmed", "failed", "pending"),
            ("in-progress", "failed", "pending"),
            ("pending", "refunded", "cancelled"),
            ("confirmed", "refunded", "cancelled"),
            ("confirmed", "pending", "confirmed"),
            ("in-progress", "processing", "in-progress"),
        ],
    )
    def test_transition_table(self, current, payment, expected):
        assert lifecycle.fulfillment_after_payment(current, payment) == expected

    @pytest.mark.parametrize("terminal", ["completed", "cancelled"])
    @pytest.mark.parametrize("payment", ["completed", "failed", "refunded"])
    def test_terminal_statuses_are_not_moved(self, terminal, payment):
        assert lifecycle.fulfillment_after_payment(terminal, payment) == terminal

    def test_apply_payment_status_confirms_pending_order(self):
        order = make_order(payment_status="processing")

        changed = lifecycle.apply_payment_status(order, "completed")

        assert changed is True
        assert order.payment_status == "completed"
        assert order.status == "confirmed"

    def test_apply_same_payment_status_is_a_no_op(self):
        order = make_order(status="in-progress", payment_status="failed")

        changed = lifecycle.apply_payment_status(order, "failed")

        assert changed is False
        assert order.status == "in-progress"

    def test_unknown_payment_status_is_rejected_before_any_change(self):
        order = make_order(payment_status="processing")

        with pytest.raises(InvalidStatusError) as exc_info:
            lifecycle.apply_payment_status(order, "paid")

        assert exc_info.value.context["value"] == "paid"
        assert order.payment_status == "processing"
        assert order.status == "pending"


class TestExplicitTransitions:
    def test_any_known_status_can_be_set(self):
        order = make_order(status="completed")

        lifecycle.set_fulfillment_status(order, "pending")

        assert order.status == "pending"

    def test_unknown_status_is_rejected(self):
        order = make_order()

        with pytest.raises(InvalidStatusError) as exc_info:
            lifecycle.set_fulfillment_status(order, "shipped")

        assert "in-progress" in exc_info.value.context["allowed"]
        assert order.status == "pending"

    @pytest.mark.parametrize("status", ["pending", "confirmed"])
    def test_cancel_from_cancellable_status(self, status):
        order = make_order(status=status)

        lifecycle.cancel(order)

        assert order.status == "cancelled"

    @pytest.mark.parametrize("status", ["in-progress", "completed", "cancelled"])
    def test_cancel_is_guarded(self, status):
        order = make_order(status=status)

        with pytest.raises(InvalidTransitionError) as exc_info:
            lifecycle.cancel(order)

        assert exc_info.value.message == f"Cannot cancel order with status: {status}"
        assert exc_info.value.context["currentStatus"] == status
        assert order.status == status

    def test_gateway_payment_method_must_be_a_payment_method(self):
        assert lifecycle.check_gateway_payment_method("paypal") == "paypal"

        with pytest.raises(ValueError, match="GATEWAY_PAYMENT_METHOD"):
            lifecycle.check_gateway_payment_method("stripe")

    def test_status_validators(self):
        assert lifecycle.is_valid_fulfillment_status("in-progress")
        assert not lifecycle.is_valid_fulfillment_status("processing")
        assert lifecycle.is_valid_payment_status("refunded")
        assert not lifecycle.is_valid_payment_status("cancelled")
