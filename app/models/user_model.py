from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    func,
)
from sqlalchemy.orm import relationship
from app.models.base import Base


class Users(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    full_name = Column(String(255), nullable=False)
    profile_picture_url = Column(String, nullable=True)
    phone_number = Column(String(30), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    hosted_subscriptions = relationship("HostedSubscription", back_populates="host")
    memberships = relationship("SubscriptionMembership", back_populates="member")
    join_requests = relationship("JoinRequest", back_populates="requester")
