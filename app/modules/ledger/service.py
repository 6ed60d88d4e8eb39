import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import SubscriptionFull
from app.models import HostedSubscription, SubscriptionMembership, PaymentStatus
from app.repository.membership_repository import MembershipRepository
from app.utils.helpers import utcnow, end_of_next_month

logger = logging.getLogger(__name__)


class MembershipLedger:
    """
    Source of truth for who occupies which slot of a hosted subscription.

    The ledger never commits: the calling workflow owns the transaction so the
    capacity check and the membership insert can share one commit.
    """

    def __init__(self, membership_repository: MembershipRepository):
        self.membership_repository = membership_repository

    async def has_membership(self, db: AsyncSession, user_id: int, subscription_id: int) -> bool:
        membership = await self.membership_repository.find_by_user_and_subscription(db, user_id, subscription_id)
        return membership is not None

    def occupied_slots(self, subscription: HostedSubscription) -> int:
        return len(subscription.memberships or [])

    def has_capacity(self, subscription: HostedSubscription) -> bool:
        # The host's own seat counts as occupied
        return self.occupied_slots(subscription) + 1 < subscription.total_slots

    async def create_membership(
        self,
        db: AsyncSession,
        requester_id: int,
        subscription: HostedSubscription,
    ) -> SubscriptionMembership:
        if not self.has_capacity(subscription):
            raise SubscriptionFull()

        now = utcnow()
        membership = SubscriptionMembership(
            member_user_id=requester_id,
            hosted_subscription_id=subscription.id,
            joined_date=now,
            payment_status=PaymentStatus.PAYMENT_DUE,
            next_payment_date=end_of_next_month(now),
        )
        await self.membership_repository.add(db, membership, commit=False)
        logger.info(
            "Membership %s created for user %s in hosted subscription %s",
            membership.id,
            requester_id,
            subscription.id,
        )
        return membership

    async def get_membership(self, db: AsyncSession, membership_id: int) -> Optional[SubscriptionMembership]:
        return await self.membership_repository.get_by_id(db, membership_id)

    async def update_payment_status(self, db: AsyncSession, membership_id: int, status: PaymentStatus) -> None:
        await self.membership_repository.update_payment_status(db, membership_id, status)

    async def update_payment_and_next_due(
        self,
        db: AsyncSession,
        membership_id: int,
        status: PaymentStatus,
        next_due: Optional[datetime],
    ) -> None:
        await self.membership_repository.update_payment_and_next_due(db, membership_id, status, next_due)
