from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime

from app.utils.url_builder import add_app_base_url


class SubscriptionServiceCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)
    logo_url: Optional[str] = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        value = value.strip()
        if len(value) < 2:
            raise ValueError("name must contain at least 2 non-blank characters")
        return value


class SubscriptionService(BaseModel):
    id: int
    name: str
    logo_url: Optional[str] = None
    created_at: Optional[datetime] = None

    @field_validator("logo_url", mode="before")
    @classmethod
    def build_logo_url(cls, value: Optional[str]) -> Optional[str]:
        return add_app_base_url(value)

    class Config:
        from_attributes = True
