"""
Maintenance Mode Middleware

While the settings row has maintenance_mode on, every request outside the
bypass list is answered with 503, except for requests from administrators.
"""

import logging
from typing import Callable, Optional

from fastapi import Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from . import database
from .config import MAINTENANCE_BYPASS_ROUTES
from .domain.settings.repository import SettingsRepository
from .domain.users.repository import UserRepository
from .security_utils import user_id_from_token

logger = logging.getLogger(__name__)

MAINTENANCE_MESSAGE = "The site is currently under maintenance. Please try again later."


def _bearer_token(request: Request) -> Optional[str]:
    header = request.headers.get("authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


class MaintenanceModeMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, bypass_paths: Optional[list[str]] = None):
        super().__init__(app)
        self.bypass_paths = bypass_paths if bypass_paths is not None else MAINTENANCE_BYPASS_ROUTES

    def is_bypassed(self, path: str) -> bool:
        path = path.rstrip("/") or "/"
        return any(path == route or path.startswith(route + "/") for route in self.bypass_paths)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if self.is_bypassed(request.url.path):
            return await call_next(request)

        if self.is_blocked(request):
            logger.info(f"🚧 Maintenance mode: blocked {request.method} {request.url.path}")
            return JSONResponse(
                status_code=503, content={"success": False, "message": MAINTENANCE_MESSAGE}
            )
        return await call_next(request)

    def is_blocked(self, request: Request) -> bool:
        """Session is closed before the request continues down the stack"""
        db = database.SessionLocal()
        try:
            if not SettingsRepository.is_maintenance_mode(db):
                return False

            token = _bearer_token(request)
            user_id = user_id_from_token(token) if token else None
            return not (user_id is not None and UserRepository.is_admin(db, user_id))
        except SQLAlchemyError as e:
            # Settings unreadable: serve the request rather than take the site down
            logger.error(f"❌ Maintenance check failed for {request.url.path}: {e}")
            return False
        finally:
            db.close()
