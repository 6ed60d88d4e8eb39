import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    SubscriptionNotFound,
    JoinRequestNotFound,
    HostCannotJoinOwn,
    AlreadyMember,
    AlreadyRequested,
    SubscriptionFull,
    CannotManageRequest,
    JoinRequestNotPending,
    Forbidden,
)
from app.core.uow import primary_write
from app.models import (
    HostedSubscription,
    JoinRequest,
    JoinRequestStatus,
    SubscriptionMembership,
)
from app.modules.ledger.service import MembershipLedger
from app.repository.hosted_subscription_repository import HostedSubscriptionRepository
from app.repository.join_request_repository import JoinRequestRepository
from app.utils.helpers import utcnow

logger = logging.getLogger(__name__)


class JoinRequestWorkflow:
    """
    Pending -> Approved | Declined | Cancelled. Every transition out of
    Pending is terminal.
    """

    def __init__(
        self,
        join_request_repository: JoinRequestRepository,
        hosted_subscription_repository: HostedSubscriptionRepository,
        ledger: MembershipLedger,
    ):
        self.join_request_repository = join_request_repository
        self.hosted_subscription_repository = hosted_subscription_repository
        self.ledger = ledger

    async def _get_subscription(
        self, db: AsyncSession, subscription_id: int, *, for_update: bool = False
    ) -> HostedSubscription:
        subscription = await self.hosted_subscription_repository.get_by_id(
            db, subscription_id, for_update=for_update
        )
        if not subscription:
            raise SubscriptionNotFound()
        return subscription

    async def _get_request_for_host(self, db: AsyncSession, host_id: int, request_id: int):
        """Loads a pending request together with its (locked) subscription after checking ownership."""
        join_request = await self.join_request_repository.get_by_id(db, request_id)
        if not join_request:
            raise JoinRequestNotFound()

        subscription = await self._get_subscription(db, join_request.hosted_subscription_id, for_update=True)
        if subscription.host_user_id != host_id:
            raise CannotManageRequest()
        if join_request.status != JoinRequestStatus.PENDING:
            raise JoinRequestNotPending()
        return join_request, subscription

    async def _set_status(self, db: AsyncSession, request_id: int, status: JoinRequestStatus) -> None:
        async with primary_write(db, f"mark join request {request_id} as {status.value}"):
            if not await self.join_request_repository.update_status(db, request_id, status):
                raise JoinRequestNotPending()

    async def submit(self, db: AsyncSession, requester_id: int, subscription_id: int) -> JoinRequest:
        subscription = await self._get_subscription(db, subscription_id, for_update=True)

        if subscription.host_user_id == requester_id:
            raise HostCannotJoinOwn()
        if await self.ledger.has_membership(db, requester_id, subscription_id):
            raise AlreadyMember()
        if await self.join_request_repository.find_pending(db, requester_id, subscription_id):
            raise AlreadyRequested()
        if not self.ledger.has_capacity(subscription):
            raise SubscriptionFull()

        join_request = JoinRequest(
            requester_user_id=requester_id,
            hosted_subscription_id=subscription_id,
            request_date=utcnow(),
            status=JoinRequestStatus.PENDING,
        )
        try:
            async with primary_write(db, "create join request"):
                await self.join_request_repository.add(db, join_request, commit=False)
        except IntegrityError as exc:
            # Lost a race against another pending request from the same user
            raise AlreadyRequested() from exc

        logger.info("User %s requested to join hosted subscription %s", requester_id, subscription_id)
        return await self.join_request_repository.get_by_id(db, join_request.id)

    async def approve(self, db: AsyncSession, host_id: int, request_id: int) -> SubscriptionMembership:
        join_request, subscription = await self._get_request_for_host(db, host_id, request_id)
        requester_id = join_request.requester_user_id

        if await self.ledger.has_membership(db, requester_id, subscription.id):
            await self._set_status(db, request_id, JoinRequestStatus.APPROVED)
            raise AlreadyMember()

        if not self.ledger.has_capacity(subscription):
            await self._set_status(db, request_id, JoinRequestStatus.DECLINED)
            raise SubscriptionFull()

        # Leaving Pending and seating the member share one commit
        try:
            async with primary_write(db, f"approve join request {request_id}"):
                if not await self.join_request_repository.update_status(db, request_id, JoinRequestStatus.APPROVED):
                    raise JoinRequestNotPending()
                membership = await self.ledger.create_membership(db, requester_id, subscription)
        except IntegrityError as exc:
            # Another approval seated this requester first
            await self._set_status(db, request_id, JoinRequestStatus.APPROVED)
            raise AlreadyMember() from exc

        logger.info("Host %s approved join request %s (membership %s)", host_id, request_id, membership.id)
        return await self.ledger.get_membership(db, membership.id)

    async def decline(self, db: AsyncSession, host_id: int, request_id: int) -> None:
        await self._get_request_for_host(db, host_id, request_id)
        await self._set_status(db, request_id, JoinRequestStatus.DECLINED)
        logger.info("Host %s declined join request %s", host_id, request_id)

    async def cancel(self, db: AsyncSession, requester_id: int, request_id: int) -> JoinRequest:
        join_request = await self.join_request_repository.get_by_id(db, request_id)
        if not join_request:
            raise JoinRequestNotFound()
        if join_request.requester_user_id != requester_id:
            raise CannotManageRequest()
        if join_request.status != JoinRequestStatus.PENDING:
            raise JoinRequestNotPending()

        await self._set_status(db, request_id, JoinRequestStatus.CANCELLED)
        logger.info("User %s cancelled join request %s", requester_id, request_id)
        return await self.join_request_repository.get_by_id(db, request_id)

    async def list_for_host(
        self,
        db: AsyncSession,
        host_id: int,
        subscription_id: int,
        status_filter: Optional[JoinRequestStatus] = None,
    ) -> List[JoinRequest]:
        subscription = await self._get_subscription(db, subscription_id)
        if subscription.host_user_id != host_id:
            raise Forbidden("you are not the host of this subscription")
        return await self.join_request_repository.list_by_subscription(db, subscription_id, status_filter)

    async def list_mine(self, db: AsyncSession, requester_id: int) -> List[JoinRequest]:
        return await self.join_request_repository.list_by_requester(db, requester_id)
