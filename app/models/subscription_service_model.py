# app/models/subscription_service_model.py
from sqlalchemy import Column, Integer, String, Text, DateTime, func

from .base import Base


class SubscriptionService(Base):
    """Catalog entry for a shareable service (e.g. a streaming platform)."""
    __tablename__ = "subscription_services"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), unique=True, nullable=False)
    logo_url = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
