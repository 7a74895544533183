"""Settings repository - the single site settings row"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Setting


class SettingsRepository:
    """Repository for site settings"""

    @staticmethod
    def get_settings(db: Session) -> Setting:
        """Get the settings row, creating it with defaults on first use"""
        settings = db.query(Setting).order_by(Setting.id.asc()).first()
        if not settings:
            settings = Setting(maintenance_mode=False)
            db.add(settings)
            db.commit()
            db.refresh(settings)
        return settings

    @staticmethod
    def is_maintenance_mode(db: Session) -> bool:
        """Read-only check used by the maintenance gate"""
        value = db.query(Setting.maintenance_mode).order_by(Setting.id.asc()).limit(1).scalar()
        return bool(value)

    @staticmethod
    def update_settings(
        db: Session,
        settings: Setting,
        maintenance_mode: Optional[bool] = None,
        site_title: Optional[str] = None,
        site_description: Optional[str] = None,
    ) -> Setting:
        """Update the provided settings fields"""
        if maintenance_mode is not None:
            settings.maintenance_mode = maintenance_mode
        if site_title is not None:
            settings.site_title = site_title
        if site_description is not None:
            settings.site_description = site_description

        db.commit()
        db.refresh(settings)
        return settings
