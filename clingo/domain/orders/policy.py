"""Order authorization policy"""

import logging
from enum import Enum
from typing import Optional

from sqlalchemy.orm import Session

from ...models import User
from ..users.repository import UserRepository
from .errors import ForbiddenError

logger = logging.getLogger(__name__)


class OrderOperation(str, Enum):
    READ = "read"
    UPDATE_STATUS = "update_status"
    CANCEL = "cancel"
    UPDATE_PAYMENT = "update_payment"
    DELETE = "delete"
    LIST_ALL = "list_all"


OWNER_OPERATIONS = {
    OrderOperation.READ,
    OrderOperation.UPDATE_STATUS,
    OrderOperation.CANCEL,
    OrderOperation.UPDATE_PAYMENT,
}


class OrderPolicy:
    """
    Decides who may perform which operation on an order.

    Owner operations are open to the owner and to admins; DELETE and LIST_ALL
    are admin only. The admin flag is looked up per check.
    """

    def __init__(self, db: Session, repo: Optional[UserRepository] = None):
        self.db = db
        self.repo = repo or UserRepository()

    @staticmethod
    def is_owner(actor: User, order) -> bool:
        return order is not None and actor.id == order.owner_id

    def is_admin(self, actor: User) -> bool:
        return self.repo.is_admin(self.db, actor.id)

    def can(self, actor: User, operation: OrderOperation, order=None) -> bool:
        if operation in OWNER_OPERATIONS and self.is_owner(actor, order):
            return True
        return self.is_admin(actor)

    def authorize(self, actor: User, operation: OrderOperation, order=None) -> None:
        """
        Raises:
            ForbiddenError: If the actor may not perform the operation
        """
        if not self.can(actor, operation, order):
            target = f" on order {order.id}" if order is not None else ""
            logger.warning(f"⚠️ User {actor.id} denied {operation.value}{target}")
            raise ForbiddenError(operation.value)
