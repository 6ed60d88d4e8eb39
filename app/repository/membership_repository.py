from datetime import datetime
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from sqlalchemy.orm import selectinload
from typing import List, Optional

from app.models import SubscriptionMembership, HostedSubscription, PaymentStatus
from app.repository.base_repository import BaseRepository


class MembershipRepository(BaseRepository[SubscriptionMembership]):
    def __init__(self):
        super().__init__(SubscriptionMembership)

    def _with_subscription(self, stmt):
        return stmt.options(
            selectinload(self.model.member),
            selectinload(self.model.hosted_subscription).selectinload(HostedSubscription.host),
            selectinload(self.model.hosted_subscription).selectinload(HostedSubscription.subscription_service),
        ).execution_options(populate_existing=True)

    async def get_by_id(self, db: AsyncSession, membership_id: int) -> Optional[SubscriptionMembership]:
        stmt = select(self.model).filter(self.model.id == membership_id)
        result = await db.execute(self._with_subscription(stmt))
        return result.scalar_one_or_none()

    async def find_by_user_and_subscription(
        self, db: AsyncSession, user_id: int, subscription_id: int
    ) -> Optional[SubscriptionMembership]:
        result = await db.execute(
            select(self.model).filter(
                self.model.member_user_id == user_id,
                self.model.hosted_subscription_id == subscription_id,
            )
        )
        return result.scalars().first()

    async def count_by_subscription(self, db: AsyncSession, subscription_id: int) -> int:
        result = await db.execute(
            select(func.count(self.model.id)).filter(self.model.hosted_subscription_id == subscription_id)
        )
        return result.scalar_one()

    async def list_by_user(self, db: AsyncSession, user_id: int) -> List[SubscriptionMembership]:
        stmt = (
            select(self.model)
            .filter(self.model.member_user_id == user_id)
            .order_by(self.model.created_at.desc(), self.model.id.desc())
        )
        result = await db.execute(self._with_subscription(stmt))
        return list(result.scalars().all())

    async def list_by_subscription(self, db: AsyncSession, subscription_id: int) -> List[SubscriptionMembership]:
        stmt = (
            select(self.model)
            .filter(self.model.hosted_subscription_id == subscription_id)
            .order_by(self.model.created_at.asc(), self.model.id.asc())
        )
        result = await db.execute(self._with_subscription(stmt))
        return list(result.scalars().all())

    async def update_payment_status(self, db: AsyncSession, membership_id: int, status: PaymentStatus) -> int:
        return await self.update_fields(db, membership_id, {"payment_status": status})

    async def update_payment_and_next_due(
        self,
        db: AsyncSession,
        membership_id: int,
        status: PaymentStatus,
        next_due: Optional[datetime],
    ) -> int:
        return await self.update_fields(
            db, membership_id, {"payment_status": status, "next_payment_date": next_due}
        )
