from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime
from decimal import Decimal

from app.models.payment_record_model import PaymentRecordStatus


class PaymentProofSubmission(BaseModel):
    payment_cycle_identifier: str = Field(..., min_length=3, max_length=100)  # e.g. "Oct 2026"
    amount_paid: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    proof_image_url: str = Field(..., min_length=1)
    payment_method: Optional[str] = Field(None, max_length=100)
    transaction_reference: Optional[str] = Field(None, max_length=255)

    @field_validator("proof_image_url")
    @classmethod
    def require_proof_url(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("proof_image_url must not be blank")
        return value.strip()


class PaymentRecord(BaseModel):
    id: int
    subscription_membership_id: int
    payment_cycle_identifier: str
    amount_expected: Decimal
    amount_paid: Decimal
    payment_method: Optional[str] = None
    transaction_reference: Optional[str] = None
    proof_image_url: str
    submitted_at: datetime
    status: PaymentRecordStatus
    reviewed_by_user_id: Optional[int] = None
    reviewed_at: Optional[datetime] = None

    member_user_id: Optional[int] = None
    member_name: Optional[str] = None
    member_avatar_url: Optional[str] = None
    hosted_subscription_id: Optional[int] = None
    subscription_title: Optional[str] = None
