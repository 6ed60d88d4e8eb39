import logging
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    MembershipNotFound,
    NotMember,
    Forbidden,
    PaymentRecordNotFound,
    PaymentRecordNotModifiable,
    SubscriptionNotFound,
    InternalError,
)
from app.core.uow import primary_write, secondary_write
from app.models import (
    PaymentRecord,
    PaymentRecordStatus,
    PaymentStatus,
    SubscriptionMembership,
)
from app.modules.ledger.service import MembershipLedger
from app.repository.hosted_subscription_repository import HostedSubscriptionRepository
from app.repository.payment_record_repository import PaymentRecordRepository
from app.schemas.payment_record_schema import PaymentProofSubmission
from app.utils.helpers import utcnow, add_billing_cycle, cost_per_slot

logger = logging.getLogger(__name__)


class PaymentProofWorkflow:
    """
    Members upload a proof of payment per billing cycle; the host approves or
    declines it. The record status is the primary write, the membership's
    payment status mirrors it as a best-effort follow-up.
    """

    def __init__(
        self,
        payment_record_repository: PaymentRecordRepository,
        hosted_subscription_repository: HostedSubscriptionRepository,
        ledger: MembershipLedger,
    ):
        self.payment_record_repository = payment_record_repository
        self.hosted_subscription_repository = hosted_subscription_repository
        self.ledger = ledger

    async def _get_membership(self, db: AsyncSession, membership_id: int) -> SubscriptionMembership:
        membership = await self.ledger.get_membership(db, membership_id)
        if not membership:
            raise MembershipNotFound()
        return membership

    async def _get_record_for_host(self, db: AsyncSession, host_id: int, record_id: int) -> PaymentRecord:
        record = await self.payment_record_repository.get_by_id(db, record_id)
        if not record:
            raise PaymentRecordNotFound()

        subscription = record.membership.hosted_subscription
        if subscription.host_user_id != host_id:
            raise Forbidden("you are not the host of this subscription")
        if record.status != PaymentRecordStatus.PROOF_SUBMITTED:
            raise PaymentRecordNotModifiable()
        return record

    async def submit_proof(
        self,
        db: AsyncSession,
        member_id: int,
        membership_id: int,
        proof: PaymentProofSubmission,
    ) -> PaymentRecord:
        membership = await self._get_membership(db, membership_id)
        if membership.member_user_id != member_id:
            raise NotMember()

        subscription = membership.hosted_subscription
        if not subscription.total_slots or subscription.total_slots <= 0:
            raise InternalError(f"hosted subscription {subscription.id} has no slots to split the cost across")

        now = utcnow()
        record = PaymentRecord(
            subscription_membership_id=membership.id,
            payment_cycle_identifier=proof.payment_cycle_identifier,
            amount_expected=cost_per_slot(subscription.cost_per_cycle, subscription.total_slots),
            amount_paid=proof.amount_paid,
            payment_method=proof.payment_method,
            transaction_reference=proof.transaction_reference,
            proof_image_url=proof.proof_image_url,
            submitted_at=now,
            status=PaymentRecordStatus.PROOF_SUBMITTED,
        )
        async with primary_write(db, "create payment record"):
            await self.payment_record_repository.add(db, record, commit=False)

        async with secondary_write(db, f"set membership {membership.id} to ProofSubmitted for payment record {record.id}"):
            await self.ledger.update_payment_status(db, membership.id, PaymentStatus.PROOF_SUBMITTED)

        logger.info(
            "Member %s submitted payment proof %s for membership %s (%s)",
            member_id,
            record.id,
            membership.id,
            proof.payment_cycle_identifier,
        )
        return await self.payment_record_repository.get_by_id(db, record.id)

    async def approve(self, db: AsyncSession, host_id: int, record_id: int) -> PaymentRecord:
        record = await self._get_record_for_host(db, host_id, record_id)
        membership = record.membership
        subscription = membership.hosted_subscription

        async with primary_write(db, f"approve payment record {record_id}"):
            reviewed = await self.payment_record_repository.update_status(
                db, record_id, PaymentRecordStatus.APPROVED, reviewed_by_user_id=host_id
            )
            if not reviewed:
                raise PaymentRecordNotModifiable()

        now = utcnow()
        if membership.next_payment_date is not None:
            base = membership.next_payment_date if membership.next_payment_date > now else now
        else:
            base = membership.joined_date
        next_due = add_billing_cycle(base, subscription.billing_cycle, subscription.id)

        async with secondary_write(db, f"set membership {membership.id} to Paid (next due {next_due.isoformat()})"):
            await self.ledger.update_payment_and_next_due(db, membership.id, PaymentStatus.PAID, next_due)

        logger.info("Host %s approved payment record %s, next due %s", host_id, record_id, next_due)
        return await self.payment_record_repository.get_by_id(db, record_id)

    async def decline(self, db: AsyncSession, host_id: int, record_id: int) -> PaymentRecord:
        record = await self._get_record_for_host(db, host_id, record_id)
        membership_id = record.subscription_membership_id

        async with primary_write(db, f"decline payment record {record_id}"):
            reviewed = await self.payment_record_repository.update_status(
                db, record_id, PaymentRecordStatus.DECLINED, reviewed_by_user_id=host_id
            )
            if not reviewed:
                raise PaymentRecordNotModifiable()

        async with secondary_write(db, f"reset membership {membership_id} to PaymentDue"):
            await self.ledger.update_payment_status(db, membership_id, PaymentStatus.PAYMENT_DUE)

        logger.info("Host %s declined payment record %s", host_id, record_id)
        return await self.payment_record_repository.get_by_id(db, record_id)

    async def list_for_host(
        self,
        db: AsyncSession,
        host_id: int,
        subscription_id: int,
        status_filter: Optional[PaymentRecordStatus] = None,
    ) -> List[PaymentRecord]:
        subscription = await self.hosted_subscription_repository.get_by_id(db, subscription_id)
        if not subscription:
            raise SubscriptionNotFound()
        if subscription.host_user_id != host_id:
            raise Forbidden("you are not the host of this subscription")

        status = status_filter or PaymentRecordStatus.PROOF_SUBMITTED
        return await self.payment_record_repository.list_by_subscription_and_status(db, subscription_id, status)

    async def list_for_membership(self, db: AsyncSession, member_id: int, membership_id: int) -> List[PaymentRecord]:
        membership = await self._get_membership(db, membership_id)
        if membership.member_user_id != member_id:
            raise Forbidden("you can only view payment records of your own membership")
        return await self.payment_record_repository.list_by_membership(db, membership_id)

    async def get_details(self, db: AsyncSession, record_id: int, accessor_id: int) -> PaymentRecord:
        record = await self.payment_record_repository.get_by_id(db, record_id)
        if not record:
            raise PaymentRecordNotFound()

        membership = record.membership
        if accessor_id not in (membership.member_user_id, membership.hosted_subscription.host_user_id):
            raise Forbidden("you are not allowed to view this payment record")
        return record
