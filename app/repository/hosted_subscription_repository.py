from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, or_, func
from sqlalchemy.orm import selectinload
from typing import List, Optional

from app.models import HostedSubscription, SubscriptionMembership
from app.repository.base_repository import BaseRepository

_SORT_ORDERS = {
    "cost_asc": (HostedSubscription.cost_per_cycle.asc(),),
    "cost_desc": (HostedSubscription.cost_per_cycle.desc(),),
    "name_asc": (HostedSubscription.subscription_title.asc(),),
    "name_desc": (HostedSubscription.subscription_title.desc(),),
}


class HostedSubscriptionRepository(BaseRepository[HostedSubscription]):
    def __init__(self):
        super().__init__(HostedSubscription)

    def _with_details(self, stmt):
        """Eager-loads everything the enrichment layer reads."""
        return stmt.options(
            selectinload(self.model.host),
            selectinload(self.model.subscription_service),
            selectinload(self.model.memberships).selectinload(SubscriptionMembership.member),
        ).execution_options(populate_existing=True)

    async def get_by_id(
        self,
        db: AsyncSession,
        subscription_id: int,
        *,
        for_update: bool = False,
    ) -> Optional[HostedSubscription]:
        """
        Loads a hosted subscription with host, service and memberships.
        With for_update the row is locked until the current transaction ends,
        which serializes capacity checks on backends that support row locks.
        """
        stmt = select(self.model).filter(self.model.id == subscription_id)
        if for_update:
            stmt = stmt.with_for_update(of=self.model)
        result = await db.execute(self._with_details(stmt))
        return result.scalar_one_or_none()

    async def list_by_host(self, db: AsyncSession, host_user_id: int) -> List[HostedSubscription]:
        stmt = (
            select(self.model)
            .filter(self.model.host_user_id == host_user_id)
            .order_by(self.model.created_at.desc(), self.model.id.desc())
        )
        result = await db.execute(self._with_details(stmt))
        return list(result.scalars().all())

    async def list_filtered(
        self,
        db: AsyncSession,
        search: Optional[str] = None,
        subscription_service_id: Optional[int] = None,
        sort_by: Optional[str] = None,
    ) -> List[HostedSubscription]:
        """Explore listing with case-insensitive search, service filter and sort key."""
        stmt = select(self.model)

        if search and search.strip():
            pattern = f"%{search.strip().lower()}%"
            stmt = stmt.filter(
                or_(
                    func.lower(self.model.subscription_title).like(pattern),
                    func.lower(self.model.plan_details).like(pattern),
                    func.lower(self.model.description).like(pattern),
                )
            )
        if subscription_service_id:
            stmt = stmt.filter(self.model.subscription_service_id == subscription_service_id)

        order = _SORT_ORDERS.get((sort_by or "").lower(), ())
        stmt = stmt.order_by(*order, self.model.created_at.desc(), self.model.id.desc())

        result = await db.execute(self._with_details(stmt))
        return list(result.scalars().all())
