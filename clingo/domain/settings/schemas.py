"""Settings schemas"""

from typing import Optional

from pydantic import BaseModel


class SettingsUpdate(BaseModel):
    maintenanceMode: Optional[bool] = None
    siteTitle: Optional[str] = None
    siteDescription: Optional[str] = None


class SettingsResponse(BaseModel):
    maintenanceMode: bool
    siteTitle: Optional[str] = None
    siteDescription: Optional[str] = None


class SettingsEnvelope(BaseModel):
    success: bool = True
    message: Optional[str] = None
    settings: SettingsResponse
