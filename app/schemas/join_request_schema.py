from pydantic import BaseModel
from typing import Optional
from datetime import datetime

from app.models.join_request_model import JoinRequestStatus
from .user_schema import UserSummary


class JoinRequest(BaseModel):
    id: int
    requester_user_id: int
    hosted_subscription_id: int
    request_date: datetime
    status: JoinRequestStatus
    created_at: Optional[datetime] = None

    requester: Optional[UserSummary] = None
    subscription_title: Optional[str] = None
    service_name: Optional[str] = None
