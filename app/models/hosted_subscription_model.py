# app/models/hosted_subscription_model.py
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


class BillingCycle(str, enum.Enum):
    MONTHLY = "Monthly"
    ANNUALLY = "Annually"


class HostedSubscription(Base):
    __tablename__ = "hosted_subscriptions"
    __table_args__ = (
        Index("ix_hosted_subscriptions_host_created", "host_user_id", "created_at"),
        Index("ix_hosted_subscriptions_service", "subscription_service_id"),
    )

    id = Column(Integer, primary_key=True, index=True)
    host_user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    subscription_service_id = Column(Integer, ForeignKey("subscription_services.id"), nullable=False)
    subscription_title = Column(String(255), nullable=False)
    plan_details = Column(Text, nullable=True)
    total_slots = Column(Integer, nullable=False)
    cost_per_cycle = Column(Numeric(10, 2), nullable=False)
    billing_cycle = Column(
        SQLAlchemyEnum(
            BillingCycle,
            name="billing_cycle",
            native_enum=False,
            length=20,
            values_callable=lambda cycles: [c.value for c in cycles],
        ),
        nullable=False,
    )
    payment_qr_code_url = Column(Text, nullable=True)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    host = relationship("Users", back_populates="hosted_subscriptions")
    subscription_service = relationship("SubscriptionService")
    # Storage order (ascending id) matters for member avatars
    memberships = relationship(
        "SubscriptionMembership",
        back_populates="hosted_subscription",
        order_by="SubscriptionMembership.id",
    )
    join_requests = relationship("JoinRequest", back_populates="hosted_subscription")
