from pydantic import BaseModel, Field
from typing import List, Optional, Literal
from datetime import datetime
from decimal import Decimal

from app.core.config import settings
from app.models.hosted_subscription_model import BillingCycle
from .user_schema import UserSummary

SortOption = Literal["cost_asc", "cost_desc", "name_asc", "name_desc"]


class HostedSubscriptionCreate(BaseModel):
    subscription_service_id: int = Field(..., gt=0)
    subscription_title: str = Field(..., min_length=3, max_length=100)
    plan_details: Optional[str] = None
    total_slots: int = Field(..., ge=1, le=settings.MAX_SLOTS_PER_SUBSCRIPTION)
    cost_per_cycle: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    billing_cycle: BillingCycle
    payment_qr_code_url: Optional[str] = None
    description: Optional[str] = None


class HostedSubscription(BaseModel):
    """Hosted subscription as shown on cards and detail pages."""
    id: int
    host_user_id: int
    subscription_service_id: int
    subscription_title: str
    plan_details: Optional[str] = None
    total_slots: int
    cost_per_cycle: Decimal
    billing_cycle: BillingCycle
    payment_qr_code_url: Optional[str] = None
    description: Optional[str] = None
    created_at: Optional[datetime] = None

    members_count: int
    available_slots: int
    cost_per_slot: Decimal
    member_avatars: List[str] = []
    host: Optional[UserSummary] = None
    service_name: Optional[str] = None
    service_logo_url: Optional[str] = None
