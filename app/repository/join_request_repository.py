from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.orm import selectinload
from typing import List, Optional

from app.models import JoinRequest, JoinRequestStatus, HostedSubscription
from app.repository.base_repository import BaseRepository


class JoinRequestRepository(BaseRepository[JoinRequest]):
    def __init__(self):
        super().__init__(JoinRequest)

    def _with_details(self, stmt):
        return stmt.options(
            selectinload(self.model.requester),
            selectinload(self.model.hosted_subscription).selectinload(HostedSubscription.subscription_service),
        ).execution_options(populate_existing=True)

    async def get_by_id(self, db: AsyncSession, request_id: int) -> Optional[JoinRequest]:
        stmt = select(self.model).filter(self.model.id == request_id)
        result = await db.execute(self._with_details(stmt))
        return result.scalar_one_or_none()

    async def find_pending(self, db: AsyncSession, requester_id: int, subscription_id: int) -> Optional[JoinRequest]:
        result = await db.execute(
            select(self.model).filter(
                self.model.requester_user_id == requester_id,
                self.model.hosted_subscription_id == subscription_id,
                self.model.status == JoinRequestStatus.PENDING,
            )
        )
        return result.scalars().first()

    async def update_status(self, db: AsyncSession, request_id: int, status: JoinRequestStatus) -> int:
        """Moves a Pending request to `status`. Returns 0 when the request already left Pending."""
        return await self.update_fields(
            db, request_id, {"status": status}, self.model.status == JoinRequestStatus.PENDING
        )

    async def list_by_subscription(
        self,
        db: AsyncSession,
        subscription_id: int,
        status: Optional[JoinRequestStatus] = None,
    ) -> List[JoinRequest]:
        stmt = select(self.model).filter(self.model.hosted_subscription_id == subscription_id)
        if status is not None:
            stmt = stmt.filter(self.model.status == status)
        stmt = stmt.order_by(self.model.created_at.asc(), self.model.id.asc())
        result = await db.execute(self._with_details(stmt))
        return list(result.scalars().all())

    async def list_by_requester(self, db: AsyncSession, requester_id: int) -> List[JoinRequest]:
        stmt = (
            select(self.model)
            .filter(self.model.requester_user_id == requester_id)
            .order_by(self.model.created_at.desc(), self.model.id.desc())
        )
        result = await db.execute(self._with_details(stmt))
        return list(result.scalars().all())
