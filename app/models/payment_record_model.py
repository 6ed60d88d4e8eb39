# app/models/payment_record_model.py
import enum
from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    Numeric,
    DateTime,
    ForeignKey,
    Index,
    Enum as SQLAlchemyEnum,
    func,
)
from sqlalchemy.orm import relationship

from .base import Base


class PaymentRecordStatus(str, enum.Enum):
    PROOF_SUBMITTED = "ProofSubmitted"
    APPROVED = "Approved"
    DECLINED = "Declined"
    REQUIRES_ATTENTION = "RequiresAttention"


class PaymentRecord(Base):
    """One proof-of-payment submission for one billing cycle of a membership."""
    __tablename__ = "payment_records"
    __table_args__ = (
        Index("ix_payment_records_membership_status", "subscription_membership_id", "status"),
    )

    id = Column(Integer, primary_key=True, index=True)
    subscription_membership_id = Column(
        Integer, ForeignKey("subscription_memberships.id"), nullable=False, index=True
    )
    payment_cycle_identifier = Column(String(100), nullable=False)
    amount_expected = Column(Numeric(10, 2), nullable=False)
    amount_paid = Column(Numeric(10, 2), nullable=False)
    payment_method = Column(String(100), nullable=True)
    transaction_reference = Column(String(255), nullable=True)
    proof_image_url = Column(Text, nullable=False)
    submitted_at = Column(DateTime, nullable=False)
    status = Column(
        SQLAlchemyEnum(
            PaymentRecordStatus,
            name="payment_record_status",
            native_enum=False,
            length=50,
            values_callable=lambda statuses: [s.value for s in statuses],
        ),
        nullable=False,
        default=PaymentRecordStatus.PROOF_SUBMITTED,
    )
    reviewed_by_user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    reviewed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    membership = relationship("SubscriptionMembership", back_populates="payment_records")
    reviewed_by = relationship("Users", foreign_keys=[reviewed_by_user_id])
