"""User repository - principal lookups used by authentication and authorization"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import User


class UserRepository:
    """Repository for principal database operations"""

    @staticmethod
    def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
        """Get user by ID"""
        return db.query(User).filter(User.id == user_id).first()

    @staticmethod
    def is_admin(db: Session, user_id: Optional[int]) -> bool:
        """
        Read the admin flag straight from the users table.

        Selects the column rather than the entity so an already-loaded User in
        the session identity map can never answer with a stale value.
        """
        if user_id is None:
            return False
        value = db.query(User.is_admin).filter(User.id == user_id).scalar()
        return bool(value)
