"""Settings router - site settings and the maintenance switch (admin only)"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import require_admin
from ...database import get_db
from ...models import Setting, User
from .repository import SettingsRepository
from .schemas import SettingsEnvelope, SettingsResponse, SettingsUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/settings", tags=["Settings"])


def _settings_response(settings: Setting) -> SettingsResponse:
    return SettingsResponse(
        maintenanceMode=settings.maintenance_mode,
        siteTitle=settings.site_title,
        siteDescription=settings.site_description,
    )


@router.get("", response_model=SettingsEnvelope)
async def get_settings(
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Get site settings"""
    settings = SettingsRepository.get_settings(db)
    return SettingsEnvelope(settings=_settings_response(settings))


@router.put("", response_model=SettingsEnvelope)
async def update_settings(
    data: SettingsUpdate,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Update site settings"""
    settings = SettingsRepository.get_settings(db)
    settings = SettingsRepository.update_settings(
        db,
        settings,
        maintenance_mode=data.maintenanceMode,
        site_title=data.siteTitle,
        site_description=data.siteDescription,
    )
    logger.info(
        f"⚙️ Settings updated by {current_user.email}: maintenance_mode={settings.maintenance_mode}"
    )
    return SettingsEnvelope(
        message="Settings updated successfully", settings=_settings_response(settings)
    )
