import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import SubscriptionNotFound, Forbidden
from app.core.uow import primary_write
from app.models import HostedSubscription, SubscriptionMembership
from app.modules.catalog.service import CatalogService
from app.repository.hosted_subscription_repository import HostedSubscriptionRepository
from app.repository.membership_repository import MembershipRepository
from app.schemas.hosted_subscription_schema import HostedSubscriptionCreate

logger = logging.getLogger(__name__)


class HostedSubscriptionService:
    def __init__(
        self,
        hosted_subscription_repository: HostedSubscriptionRepository,
        membership_repository: MembershipRepository,
        catalog: CatalogService,
    ):
        self.hosted_subscription_repository = hosted_subscription_repository
        self.membership_repository = membership_repository
        self.catalog = catalog

    async def create(self, db: AsyncSession, host_id: int, payload: HostedSubscriptionCreate) -> HostedSubscription:
        await self.catalog.get_service_by_id(db, payload.subscription_service_id)

        subscription = HostedSubscription(
            host_user_id=host_id,
            subscription_service_id=payload.subscription_service_id,
            subscription_title=payload.subscription_title.strip(),
            plan_details=payload.plan_details,
            total_slots=payload.total_slots,
            cost_per_cycle=payload.cost_per_cycle,
            billing_cycle=payload.billing_cycle,
            payment_qr_code_url=payload.payment_qr_code_url,
            description=payload.description,
        )
        async with primary_write(db, "create hosted subscription"):
            await self.hosted_subscription_repository.add(db, subscription, commit=False)

        logger.info("User %s is now hosting subscription %s", host_id, subscription.id)
        return await self.hosted_subscription_repository.get_by_id(db, subscription.id)

    async def get_details(self, db: AsyncSession, subscription_id: int) -> HostedSubscription:
        subscription = await self.hosted_subscription_repository.get_by_id(db, subscription_id)
        if not subscription:
            raise SubscriptionNotFound()
        return subscription

    async def list_mine(self, db: AsyncSession, host_id: int) -> List[HostedSubscription]:
        return await self.hosted_subscription_repository.list_by_host(db, host_id)

    async def explore(
        self,
        db: AsyncSession,
        search: Optional[str] = None,
        service_id: Optional[int] = None,
        sort_by: Optional[str] = None,
    ) -> List[HostedSubscription]:
        return await self.hosted_subscription_repository.list_filtered(
            db, search=search, subscription_service_id=service_id, sort_by=sort_by
        )

    async def list_members(self, db: AsyncSession, host_id: int, subscription_id: int) -> List[SubscriptionMembership]:
        subscription = await self.get_details(db, subscription_id)
        if subscription.host_user_id != host_id:
            raise Forbidden("only the host can view the members of this subscription")
        return await self.membership_repository.list_by_subscription(db, subscription_id)

    async def list_my_memberships(self, db: AsyncSession, member_id: int) -> List[SubscriptionMembership]:
        return await self.membership_repository.list_by_user(db, member_id)
