# app/models/membership_model.py
import enum
from sqlalchemy import (
    Column,
    Integer,
    DateTime,
    ForeignKey,
    UniqueConstraint,
    Enum as SQLAlchemyEnum,
    func,
)
from sqlalchemy.orm import relationship

from .base import Base


class PaymentStatus(str, enum.Enum):
    PAYMENT_DUE = "PaymentDue"
    PAID = "Paid"
    UNPAID = "Unpaid"
    PROOF_SUBMITTED = "ProofSubmitted"
    PROOF_DECLINED = "ProofDeclined"


class SubscriptionMembership(Base):
    """An occupied slot: links a member to a hosted subscription."""
    __tablename__ = "subscription_memberships"
    __table_args__ = (
        UniqueConstraint("member_user_id", "hosted_subscription_id", name="uq_member_subscription"),
    )

    id = Column(Integer, primary_key=True, index=True)
    member_user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    hosted_subscription_id = Column(Integer, ForeignKey("hosted_subscriptions.id"), nullable=False, index=True)
    joined_date = Column(DateTime, nullable=False)
    payment_status = Column(
        SQLAlchemyEnum(
            PaymentStatus,
            name="payment_status",
            native_enum=False,
            length=50,
            values_callable=lambda statuses: [s.value for s in statuses],
        ),
        nullable=False,
        default=PaymentStatus.PAYMENT_DUE,
    )
    next_payment_date = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    member = relationship("Users", back_populates="memberships")
    hosted_subscription = relationship("HostedSubscription", back_populates="memberships")
    payment_records = relationship("PaymentRecord", back_populates="membership")
