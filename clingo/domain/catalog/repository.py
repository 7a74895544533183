"""Catalog repository - read-only service and option lookups"""

from typing import Optional, Union

from sqlalchemy.orm import Session, selectinload

from ...models import Service
from ...shared.validators import parse_numeric_id


class CatalogRepository:
    """Repository for catalog reads needed by ordering"""

    @staticmethod
    def get_service_by_id(db: Session, service_id: Union[int, str, None]) -> Optional[Service]:
        """Get a service with its options; accepts the id or its string form"""
        numeric_id = parse_numeric_id(service_id)
        if numeric_id is None:
            return None
        return (
            db.query(Service)
            .options(selectinload(Service.options))
            .filter(Service.id == numeric_id)
            .first()
        )
