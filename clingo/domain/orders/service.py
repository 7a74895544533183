"""Order service - Business logic for the order lifecycle"""

import logging
import math
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from ... import config
from ...models import User, utcnow
from ...models_order import Order
from . import lifecycle, reconciliation
from .catalog import CatalogSnapshotResolver
from .errors import ConcurrentModificationError, InvalidStatusError, NotFoundError
from .policy import OrderOperation, OrderPolicy
from .repository import OrderRepository
from .schemas import GatewayCallback, OrderCreate, PaymentDetailsUpdate

logger = logging.getLogger(__name__)

DEFAULT_TIME_SLOT = {"start": "09:00", "end": "12:00"}


class OrderService:
    """Service layer for order business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = OrderRepository()
        self.policy = OrderPolicy(db)
        self.resolver = CatalogSnapshotResolver(db)

    # ------------------------------------------------------------------
    # Persistence boundary
    # ------------------------------------------------------------------

    def _save(self, order: Order, action: str) -> Order:
        """Commit the unit of work; nothing is left half-applied on failure"""
        try:
            return self.repo.save_order(self.db, order)
        except StaleDataError:
            self.db.rollback()
            logger.warning(f"⚠️ Concurrent modification of order {order.id} during {action}")
            raise ConcurrentModificationError(order.id)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Database error during {action}: {e}")
            raise HTTPException(status_code=500, detail=f"Error {action}")

    def _load(self, order_id: str) -> Order:
        order = self.repo.get_order_by_id(self.db, order_id)
        if not order:
            raise NotFoundError("Order", order_id)
        return order

    def _load_authorized(self, actor: User, order_id: str, operation: OrderOperation) -> Order:
        order = self._load(order_id)
        self.policy.authorize(actor, operation, order)
        return order

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def create_order(self, owner: User, data: OrderCreate) -> Order:
        """Create an order from a catalog snapshot of the selected options"""
        logger.info(f"📥 Creating order for user_id: {owner.id}, service: {data.serviceId}")

        service = self.resolver.load_service(data.serviceId)
        line_items = self.resolver.snapshot(service, data.selectedOptions)

        subtotal = round(sum(item["unitPrice"] * item["quantity"] for item in line_items), 2)
        if not math.isclose(subtotal, data.totalAmount, abs_tol=0.01):
            logger.warning(
                f"⚠️ Order total {data.totalAmount} differs from line item subtotal {subtotal}"
                f" for user_id: {owner.id}"
            )

        payment_status = "pending"
        payment_details = None
        if data.paymentMethod == config.GATEWAY_PAYMENT_METHOD:
            payment_status = "processing"
            if data.gatewayOrderId:
                payment_details = {"gatewayOrderId": data.gatewayOrderId}

        order = Order(
            owner_id=owner.id,
            service_id=service.id,
            line_items=line_items,
            total_amount=data.totalAmount,
            tax=data.tax,
            grand_total=data.grandTotal,
            address=data.address.model_dump() if data.address else None,
            scheduled_date=data.scheduledDate or utcnow(),
            time_slot=data.timeSlot.model_dump() if data.timeSlot else dict(DEFAULT_TIME_SLOT),
            status="pending",
            payment_status=payment_status,
            payment_method=data.paymentMethod,
            payment_details=payment_details,
        )

        order = self._save(order, "creating order")
        logger.info(f"✅ Order {order.id} created for user_id: {owner.id}")
        return order

    def get_order(self, actor: User, order_id: str) -> Order:
        """Get a single order"""
        return self._load_authorized(actor, order_id, OrderOperation.READ)

    def _list(self, owner_id: Optional[int], status: Optional[str], page: int, limit: int) -> dict:
        if status == "all":
            status = None
        if status is not None and not lifecycle.is_valid_fulfillment_status(status):
            raise InvalidStatusError(status, lifecycle.FULFILLMENT_STATUSES)

        page = max(page, 1)
        limit = min(max(limit, 1), config.MAX_PAGE_LIMIT)

        orders, total = self.repo.list_orders(self.db, owner_id, status, page, limit)
        return {
            "orders": orders,
            "pagination": {
                "total": total,
                "page": page,
                "limit": limit,
                "pages": math.ceil(total / limit),
            },
        }

    def list_orders(
        self, actor: User, status: Optional[str] = None, page: int = 1, limit: int = 10
    ) -> dict:
        """List the actor's own orders, newest first"""
        return self._list(actor.id, status, page, limit)

    def list_admin_orders(
        self, actor: User, status: Optional[str] = None, page: int = 1, limit: int = 10
    ) -> dict:
        """List every order; admin only"""
        self.policy.authorize(actor, OrderOperation.LIST_ALL)
        return self._list(None, status, page, limit)

    def set_order_status(self, actor: User, order_id: str, status: str) -> Order:
        """Explicitly set the fulfillment status"""
        order = self._load_authorized(actor, order_id, OrderOperation.UPDATE_STATUS)
        lifecycle.set_fulfillment_status(order, status)
        return self._save(order, "updating order status")

    def cancel_order(self, actor: User, order_id: str) -> Order:
        """Cancel an order that is still pending or confirmed"""
        order = self._load_authorized(actor, order_id, OrderOperation.CANCEL)
        lifecycle.cancel(order)
        return self._save(order, "cancelling order")

    def update_payment_status(
        self,
        actor: User,
        order_id: str,
        payment_status: str,
        details: Optional[PaymentDetailsUpdate] = None,
    ) -> Order:
        """Record a payment status update and run the payment-driven transition"""
        order = self._load_authorized(actor, order_id, OrderOperation.UPDATE_PAYMENT)
        reconciliation.apply_payment_update(
            order, payment_status, details.model_dump(exclude_none=True) if details else None
        )
        return self._save(order, "updating payment status")

    def apply_gateway_callback(self, actor: User, order_id: str, callback: GatewayCallback) -> Order:
        """Reconcile a gateway capture relayed by the client"""
        order = self._load_authorized(actor, order_id, OrderOperation.UPDATE_PAYMENT)
        changed = reconciliation.apply_gateway_callback(order, callback.model_dump())
        if not changed:
            return order
        return self._save(order, "verifying gateway payment")

    def delete_order(self, actor: User, order_id: str) -> dict:
        """Delete an order; admin only"""
        order = self._load_authorized(actor, order_id, OrderOperation.DELETE)
        try:
            self.repo.delete_order(self.db, order)
        except StaleDataError:
            self.db.rollback()
            logger.warning(f"⚠️ Concurrent modification of order {order_id} during delete")
            raise ConcurrentModificationError(order_id)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Database error deleting order {order_id}: {e}")
            raise HTTPException(status_code=500, detail="Error deleting order")

        logger.info(f"🗑️ Order {order_id} deleted by user_id: {actor.id}")
        return {"message": "Order deleted successfully"}
