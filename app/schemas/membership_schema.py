from pydantic import BaseModel
from typing import Optional
from datetime import datetime
from decimal import Decimal

from app.models.hosted_subscription_model import BillingCycle
from app.models.membership_model import PaymentStatus
from .user_schema import UserSummary


class Membership(BaseModel):
    id: int
    member_user_id: int
    hosted_subscription_id: int
    joined_date: datetime
    payment_status: PaymentStatus
    next_payment_date: Optional[datetime] = None

    subscription_title: Optional[str] = None
    service_name: Optional[str] = None
    service_logo_url: Optional[str] = None
    host_name: Optional[str] = None
    payment_qr_code_url: Optional[str] = None
    billing_cycle: Optional[BillingCycle] = None
    cost_per_slot: Optional[Decimal] = None
    # Only filled in member listings for hosts
    member: Optional[UserSummary] = None
