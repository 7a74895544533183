"""
Order model - the booking aggregate

Fulfillment workflow: pending → confirmed → in-progress → completed, or cancelled
Payment workflow: pending → processing → completed / failed → refunded

Line items and pricing are a snapshot frozen at creation; only the status
fields and payment_details change afterwards.
"""

from sqlalchemy import JSON, Column, DateTime, Float, ForeignKey, Integer, String, inspect
from sqlalchemy.orm import relationship, validates

from .database import Base
from .models import generate_public_id, utcnow

FROZEN_FIELDS = (
    "owner_id",
    "service_id",
    "line_items",
    "total_amount",
    "tax",
    "grand_total",
    "payment_method",
)


class Order(Base):
    __tablename__ = "orders"

    id = Column(String(36), primary_key=True, default=generate_public_id)

    # Relationships
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    service_id = Column(Integer, ForeignKey("services.id"), nullable=False, index=True)

    # [{optionId, name, unitPrice, quantity}] copied from the catalog at creation
    line_items = Column(JSON, nullable=False, default=list)

    # Pricing (supplied by the checkout, never recomputed)
    total_amount = Column(Float, nullable=False, default=0)
    tax = Column(Float, nullable=False, default=0)
    grand_total = Column(Float, nullable=False, default=0)

    # Scheduling
    address = Column(JSON, nullable=True)  # {street, city, zipCode, country}
    scheduled_date = Column(DateTime, nullable=False, default=utcnow)
    time_slot = Column(JSON, nullable=True)  # {start, end} in HH:MM

    # Status tracking
    status = Column(String(20), default="pending", nullable=False, index=True)
    payment_status = Column(String(20), default="pending", nullable=False)
    payment_method = Column(String(20), default="card", nullable=False)
    # {transactionId, timestamp, gatewayOrderId, gatewayPayerId, gatewayCapture: {id, status},
    #  cardLast4, cardBrand}
    payment_details = Column(JSON, nullable=True)

    # Optimistic concurrency: every UPDATE is guarded by the version it was loaded with
    version = Column(Integer, nullable=False)

    # Timestamps
    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    owner = relationship("User", back_populates="orders")
    service = relationship("Service")

    __mapper_args__ = {"version_id_col": version}

    @validates(*FROZEN_FIELDS)
    def _guard_frozen_fields(self, key, value):
        state = inspect(self)
        if state.persistent or state.detached:
            raise AttributeError(f"Order.{key} cannot change once the order is saved")
        return value
