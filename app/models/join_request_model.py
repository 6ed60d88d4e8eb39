# app/models/join_request_model.py
import enum
from sqlalchemy import (
    Column,
    Integer,
    DateTime,
    ForeignKey,
    Index,
    Enum as SQLAlchemyEnum,
    func,
    text,
)
from sqlalchemy.orm import relationship

from .base import Base


class JoinRequestStatus(str, enum.Enum):
    PENDING = "Pending"
    APPROVED = "Approved"
    DECLINED = "Declined"
    CANCELLED = "Cancelled"


class JoinRequest(Base):
    __tablename__ = "join_requests"
    __table_args__ = (
        # At most one pending request per (requester, subscription)
        Index(
            "uq_join_requests_pending_requester_subscription",
            "requester_user_id",
            "hosted_subscription_id",
            unique=True,
            postgresql_where=text("status = 'Pending'"),
            sqlite_where=text("status = 'Pending'"),
        ),
        Index("ix_join_requests_subscription_status", "hosted_subscription_id", "status"),
    )

    id = Column(Integer, primary_key=True, index=True)
    requester_user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    hosted_subscription_id = Column(Integer, ForeignKey("hosted_subscriptions.id"), nullable=False)
    request_date = Column(DateTime, nullable=False)
    status = Column(
        SQLAlchemyEnum(
            JoinRequestStatus,
            name="join_request_status",
            native_enum=False,
            length=20,
            values_callable=lambda statuses: [s.value for s in statuses],
        ),
        nullable=False,
        default=JoinRequestStatus.PENDING,
    )
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    requester = relationship("Users", back_populates="join_requests")
    hosted_subscription = relationship("HostedSubscription", back_populates="join_requests")
