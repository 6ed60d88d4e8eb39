from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.orm import selectinload
from typing import List, Optional

from app.models import PaymentRecord, PaymentRecordStatus, SubscriptionMembership, HostedSubscription
from app.repository.base_repository import BaseRepository
from app.utils.helpers import utcnow


class PaymentRecordRepository(BaseRepository[PaymentRecord]):
    def __init__(self):
        super().__init__(PaymentRecord)

    def _with_membership(self, stmt):
        return stmt.options(
            selectinload(self.model.membership).selectinload(SubscriptionMembership.member),
            selectinload(self.model.membership)
            .selectinload(SubscriptionMembership.hosted_subscription)
            .selectinload(HostedSubscription.host),
            selectinload(self.model.membership)
            .selectinload(SubscriptionMembership.hosted_subscription)
            .selectinload(HostedSubscription.subscription_service),
        ).execution_options(populate_existing=True)

    async def get_by_id(self, db: AsyncSession, record_id: int) -> Optional[PaymentRecord]:
        stmt = select(self.model).filter(self.model.id == record_id)
        result = await db.execute(self._with_membership(stmt))
        return result.scalar_one_or_none()

    async def update_status(
        self,
        db: AsyncSession,
        record_id: int,
        status: PaymentRecordStatus,
        reviewed_by_user_id: Optional[int] = None,
    ) -> int:
        values = {"status": status, "reviewed_at": utcnow()}
        if reviewed_by_user_id is not None:
            values["reviewed_by_user_id"] = reviewed_by_user_id
        # Only a submitted proof can be reviewed, and only once
        return await self.update_fields(
            db, record_id, values, self.model.status == PaymentRecordStatus.PROOF_SUBMITTED
        )

    async def list_by_membership(self, db: AsyncSession, membership_id: int) -> List[PaymentRecord]:
        stmt = (
            select(self.model)
            .filter(self.model.subscription_membership_id == membership_id)
            .order_by(self.model.created_at.desc(), self.model.id.desc())
        )
        result = await db.execute(self._with_membership(stmt))
        return list(result.scalars().all())

    async def list_by_subscription_and_status(
        self,
        db: AsyncSession,
        subscription_id: int,
        status: PaymentRecordStatus,
    ) -> List[PaymentRecord]:
        stmt = (
            select(self.model)
            .join(SubscriptionMembership, SubscriptionMembership.id == self.model.subscription_membership_id)
            .filter(
                SubscriptionMembership.hosted_subscription_id == subscription_id,
                self.model.status == status,
            )
            .order_by(self.model.created_at.asc(), self.model.id.asc())
        )
        result = await db.execute(self._with_membership(stmt))
        return list(result.scalars().all())
