from pydantic import BaseModel, EmailStr, field_validator
from typing import Optional

from app.utils.url_builder import add_app_base_url


class UserSummary(BaseModel):
    id: int
    full_name: Optional[str] = None
    email: Optional[EmailStr] = None
    profile_picture_url: Optional[str] = None

    @field_validator("profile_picture_url", mode="before")
    @classmethod
    def build_profile_picture_url(cls, value: Optional[str]) -> Optional[str]:
        return add_app_base_url(value)

    class Config:
        from_attributes = True
