"""Order repository - Database operations for orders"""

from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models_order import Order
from ...shared.validators import validate_uuid


class OrderRepository:
    """Repository for order database operations"""

    @staticmethod
    def get_order_by_id(db: Session, order_id: str) -> Optional[Order]:
        """Get order by ID; malformed ids are treated as unknown"""
        if not validate_uuid(order_id):
            return None
        return (
            db.query(Order)
            .options(joinedload(Order.service), joinedload(Order.owner))
            .filter(Order.id == str(order_id))
            .first()
        )

    @staticmethod
    def save_order(db: Session, order: Order) -> Order:
        """Persist a new or modified order"""
        db.add(order)
        db.commit()
        db.refresh(order)
        return order

    @staticmethod
    def delete_order(db: Session, order: Order) -> None:
        """Delete an order"""
        db.delete(order)
        db.commit()

    @staticmethod
    def list_orders(
        db: Session,
        owner_id: Optional[int] = None,
        status: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[Order], int]:
        """List orders newest first, optionally scoped to an owner and status"""
        query = db.query(Order)
        if owner_id is not None:
            query = query.filter(Order.owner_id == owner_id)
        if status:
            query = query.filter(Order.status == status)

        total = query.count()
        orders = (
            query.options(joinedload(Order.service), joinedload(Order.owner))
            .order_by(Order.created_at.desc(), Order.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return orders, total
