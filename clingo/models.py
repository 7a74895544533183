import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


def generate_public_id():
    """Generate a unique public ID for secure public access"""
    return str(uuid.uuid4())


def utcnow():
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=False)
    is_verified = Column(Boolean, default=False, nullable=False)
    # Authorization checks re-read this column; never trust a cached copy
    is_admin = Column(Boolean, default=False, nullable=False)
    is_provider = Column(Boolean, default=False, nullable=False)
    last_login = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    orders = relationship("Order", back_populates="owner")


class Service(Base):
    """Catalog service (e.g. home cleaning) with its priced options"""

    __tablename__ = "services"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    type = Column(String(100), nullable=False)
    price = Column(String(50), default="FREE")  # Display price shown on the service card
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    options = relationship(
        "ServiceOption",
        back_populates="service",
        order_by="ServiceOption.id",
        cascade="all, delete-orphan",
    )


class ServiceOption(Base):
    __tablename__ = "service_options"

    id = Column(Integer, primary_key=True, index=True)
    service_id = Column(Integer, ForeignKey("services.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    icon = Column(String(255), nullable=True)
    price = Column(Float, nullable=False)
    description = Column(Text, nullable=True)

    service = relationship("Service", back_populates="options")


class Setting(Base):
    """Site-wide settings; a single row, created on first read"""

    __tablename__ = "settings"

    id = Column(Integer, primary_key=True)
    maintenance_mode = Column(Boolean, default=False, nullable=False)
    site_title = Column(String(255), default="Clingo Admin")
    site_description = Column(String(500), default="Admin dashboard for service management")
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
