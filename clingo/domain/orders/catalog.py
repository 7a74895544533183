"""Catalog snapshot resolver - turns option selections into priced line items"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ...models import Service, ServiceOption
from ..catalog.repository import CatalogRepository
from .errors import InvalidSelectionError, NotFoundError

logger = logging.getLogger(__name__)


def find_option(options: list, option_id) -> Optional[ServiceOption]:
    """
    Match a requested option id against a service's options.

    Exact id first; then the canonical string form, so "3" and " 3 " find option 3.
    """
    for option in options:
        if option.id == option_id and not isinstance(option_id, bool):
            return option

    if option_id is None or isinstance(option_id, bool):
        return None
    wanted = str(option_id).strip()
    for option in options:
        if str(option.id) == wanted:
            return option
    return None


def _selection_value(selection, key: str, default=None):
    if isinstance(selection, dict):
        return selection.get(key, default)
    return getattr(selection, key, default)


class CatalogSnapshotResolver:
    """Resolves selections against the service's current option set (read-only)"""

    def __init__(self, db: Session, repo: Optional[CatalogRepository] = None):
        self.db = db
        self.repo = repo or CatalogRepository()

    def load_service(self, service_id) -> Service:
        """
        Raises:
            NotFoundError: If the service does not exist
        """
        service = self.repo.get_service_by_id(self.db, service_id)
        if not service:
            raise NotFoundError("Service", service_id)
        return service

    def resolve(self, service_id, selections) -> list[dict]:
        """
        Build line items for the selected options.

        Raises:
            NotFoundError: If the service does not exist
            InvalidSelectionError: If nothing is selected or an option id is unknown
        """
        return self.snapshot(self.load_service(service_id), selections)

    def snapshot(self, service: Service, selections) -> list[dict]:
        """Copy name and unit price of each selected option, by value"""
        if not selections:
            raise InvalidSelectionError("At least one option must be selected")

        line_items = []
        for selection in selections:
            option_id = _selection_value(selection, "optionId")
            option = find_option(service.options, option_id)
            if not option:
                logger.warning(f"⚠️ Option {option_id} not found on service {service.id}")
                raise InvalidSelectionError(f"Option not found: {option_id}", option_id=option_id)

            quantity = _selection_value(selection, "quantity", 1)
            if quantity is None:
                quantity = 1
            if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
                raise InvalidSelectionError(
                    f"Invalid quantity for option {option_id}: {quantity}", option_id=option_id
                )

            line_items.append(
                {
                    "optionId": option.id,
                    "name": option.name,
                    "unitPrice": float(option.price),
                    "quantity": quantity,
                }
            )

        return line_items
