"""Order router - FastAPI endpoints for order operations"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...config import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT
from ...database import get_db
from ...models import User
from ...models_order import Order
from .schemas import (
    AckResponse,
    GatewayCallback,
    LineItemResponse,
    OrderCreate,
    OrderEnvelope,
    OrderListEnvelope,
    OrderResponse,
    OrderStatusUpdate,
    OwnerSummary,
    Pagination,
    PaymentStatusUpdate,
    ServiceSummary,
)
from .service import OrderService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/orders", tags=["Orders"])


def get_order_service(db: Session = Depends(get_db)) -> OrderService:
    """Dependency injection for OrderService"""
    return OrderService(db)


def _order_response(order: Order) -> OrderResponse:
    service = order.service
    owner = order.owner
    return OrderResponse(
        id=order.id,
        ownerId=order.owner_id,
        owner=OwnerSummary(id=owner.id, name=owner.name, email=owner.email) if owner else None,
        serviceId=order.service_id,
        service=ServiceSummary(id=service.id, name=service.name, type=service.type)
        if service
        else None,
        lineItems=[LineItemResponse(**item) for item in order.line_items or []],
        totalAmount=order.total_amount,
        tax=order.tax,
        grandTotal=order.grand_total,
        address=order.address,
        scheduledDate=order.scheduled_date,
        timeSlot=order.time_slot,
        status=order.status,
        paymentStatus=order.payment_status,
        paymentMethod=order.payment_method,
        paymentDetails=order.payment_details,
        version=order.version,
        createdAt=order.created_at,
        updatedAt=order.updated_at,
    )


def _list_response(result: dict) -> OrderListEnvelope:
    return OrderListEnvelope(
        orders=[_order_response(o) for o in result["orders"]],
        pagination=Pagination(**result["pagination"]),
    )


# ============================================================================
# CUSTOMER OPERATIONS
# ============================================================================


@router.post("", response_model=OrderEnvelope, status_code=201)
async def create_order(
    data: OrderCreate,
    current_user: User = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
):
    """Create an order from the selected service options"""
    order = service.create_order(current_user, data)
    return OrderEnvelope(message="Order created successfully", order=_order_response(order))


@router.get("/my-orders", response_model=OrderListEnvelope)
async def get_my_orders(
    status: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_LIMIT, ge=1, le=MAX_PAGE_LIMIT),
    current_user: User = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
):
    """Get the current user's orders, newest first"""
    return _list_response(service.list_orders(current_user, status, page, limit))


# ============================================================================
# ADMIN OPERATIONS
# ============================================================================


@router.get("/admin/all", response_model=OrderListEnvelope)
async def get_all_orders(
    status: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_LIMIT, ge=1, le=MAX_PAGE_LIMIT),
    current_user: User = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
):
    """Get all orders (admin only); status=all means no filter"""
    return _list_response(service.list_admin_orders(current_user, status, page, limit))


# ============================================================================
# SINGLE ORDER OPERATIONS
# ============================================================================


@router.get("/{order_id}", response_model=OrderEnvelope)
async def get_order(
    order_id: str,
    current_user: User = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
):
    """Get a specific order (owner or admin)"""
    order = service.get_order(current_user, order_id)
    return OrderEnvelope(order=_order_response(order))


@router.put("/{order_id}/status", response_model=OrderEnvelope)
async def update_order_status(
    order_id: str,
    data: OrderStatusUpdate,
    current_user: User = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
):
    """Set the fulfillment status"""
    order = service.set_order_status(current_user, order_id, data.status)
    return OrderEnvelope(message="Order status updated successfully", order=_order_response(order))


@router.put("/{order_id}/cancel", response_model=OrderEnvelope)
async def cancel_order(
    order_id: str,
    current_user: User = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
):
    """Cancel a pending or confirmed order"""
    order = service.cancel_order(current_user, order_id)
    return OrderEnvelope(message="Order cancelled successfully", order=_order_response(order))


@router.put("/{order_id}/payment", response_model=OrderEnvelope)
async def update_payment_status(
    order_id: str,
    data: PaymentStatusUpdate,
    current_user: User = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
):
    """Record a payment status update"""
    order = service.update_payment_status(
        current_user, order_id, data.paymentStatus, data.paymentDetails
    )
    return OrderEnvelope(
        message="Payment status updated successfully", order=_order_response(order)
    )


@router.post("/{order_id}/verify-paypal", response_model=OrderEnvelope)
async def verify_gateway_payment(
    order_id: str,
    data: GatewayCallback,
    current_user: User = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
):
    """Reconcile a PayPal capture relayed by the client"""
    order = service.apply_gateway_callback(current_user, order_id, data)
    return OrderEnvelope(message="Payment verified successfully", order=_order_response(order))


@router.delete("/{order_id}", response_model=AckResponse)
async def delete_order(
    order_id: str,
    current_user: User = Depends(get_current_user),
    service: OrderService = Depends(get_order_service),
):
    """Delete an order (admin only)"""
    result = service.delete_order(current_user, order_id)
    return AckResponse(message=result["message"])
