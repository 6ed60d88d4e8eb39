import asyncio
import pytest
from unittest.mock import AsyncMock
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

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
    InternalError,
)
from app.models import JoinRequest, JoinRequestStatus, PaymentStatus, SubscriptionMembership
from app.modules.enrichment.service import hosted_subscription_view


async def _reload_request(db_session, join_workflow, request_id):
    return await join_workflow.join_request_repository.get_by_id(db_session, request_id)


@pytest.mark.asyncio
async def test_submit_creates_pending_request(db_session, factory, join_workflow):
    host = await factory.user()
    requester = await factory.user(full_name="Rina")
    subscription = await factory.subscription(host)

    join_request = await join_workflow.submit(db_session, requester.id, subscription.id)

    assert join_request.status == JoinRequestStatus.PENDING
    assert join_request.requester_user_id == requester.id
    assert join_request.hosted_subscription_id == subscription.id
    assert join_request.request_date is not None
    assert join_request.requester.full_name == "Rina"


@pytest.mark.asyncio
async def test_submit_unknown_subscription(db_session, factory, join_workflow):
    requester = await factory.user()
    with pytest.raises(SubscriptionNotFound):
        await join_workflow.submit(db_session, requester.id, 9999)


@pytest.mark.asyncio
async def test_host_cannot_join_own_subscription(db_session, factory, join_workflow):
    host = await factory.user()
    subscription = await factory.subscription(host)

    with pytest.raises(HostCannotJoinOwn):
        await join_workflow.submit(db_session, host.id, subscription.id)


@pytest.mark.asyncio
async def test_second_pending_submit_is_rejected(db_session, factory, join_workflow):
    host = await factory.user()
    requester = await factory.user()
    subscription = await factory.subscription(host)

    await join_workflow.submit(db_session, requester.id, subscription.id)
    with pytest.raises(AlreadyRequested):
        await join_workflow.submit(db_session, requester.id, subscription.id)


@pytest.mark.asyncio
async def test_submit_after_decline_is_allowed(db_session, factory, join_workflow):
    host = await factory.user()
    requester = await factory.user()
    subscription = await factory.subscription(host)

    first = await join_workflow.submit(db_session, requester.id, subscription.id)
    await join_workflow.decline(db_session, host.id, first.id)

    second = await join_workflow.submit(db_session, requester.id, subscription.id)
    assert second.id != first.id
    assert second.status == JoinRequestStatus.PENDING


@pytest.mark.asyncio
async def test_member_cannot_submit_again(db_session, factory, join_workflow):
    host = await factory.user()
    member = await factory.user()
    subscription = await factory.subscription(host)
    await factory.membership(member, subscription)

    with pytest.raises(AlreadyMember):
        await join_workflow.submit(db_session, member.id, subscription.id)


@pytest.mark.asyncio
async def test_approve_creates_membership_and_marks_request(db_session, factory, join_workflow):
    host = await factory.user(full_name="Host")
    requester = await factory.user()
    subscription = await factory.subscription(host, total_slots=4)
    join_request = await join_workflow.submit(db_session, requester.id, subscription.id)

    membership = await join_workflow.approve(db_session, host.id, join_request.id)

    assert membership.member_user_id == requester.id
    assert membership.hosted_subscription_id == subscription.id
    assert membership.payment_status == PaymentStatus.PAYMENT_DUE
    assert membership.next_payment_date > membership.joined_date
    assert membership.hosted_subscription.host.full_name == "Host"

    reloaded = await _reload_request(db_session, join_workflow, join_request.id)
    assert reloaded.status == JoinRequestStatus.APPROVED


@pytest.mark.asyncio
async def test_two_slot_plan_fills_after_one_approval(db_session, factory, join_workflow):
    host = await factory.user()
    first = await factory.user()
    second = await factory.user()
    subscription = await factory.subscription(host, total_slots=2)

    join_request = await join_workflow.submit(db_session, first.id, subscription.id)
    await join_workflow.approve(db_session, host.id, join_request.id)

    loaded = await join_workflow.hosted_subscription_repository.get_by_id(db_session, subscription.id)
    view = hosted_subscription_view(loaded)
    assert view.members_count == 1
    assert view.available_slots == 0

    with pytest.raises(SubscriptionFull):
        await join_workflow.submit(db_session, second.id, subscription.id)


@pytest.mark.asyncio
async def test_approve_at_capacity_declines_request(db_session, factory, join_workflow):
    host = await factory.user()
    first = await factory.user()
    second = await factory.user()
    subscription = await factory.subscription(host, total_slots=2)

    first_request = await join_workflow.submit(db_session, first.id, subscription.id)
    second_request = await join_workflow.submit(db_session, second.id, subscription.id)
    await join_workflow.approve(db_session, host.id, first_request.id)

    with pytest.raises(SubscriptionFull):
        await join_workflow.approve(db_session, host.id, second_request.id)

    reloaded = await _reload_request(db_session, join_workflow, second_request.id)
    assert reloaded.status == JoinRequestStatus.DECLINED


@pytest.mark.asyncio
async def test_approve_for_existing_member_marks_approved(db_session, factory, join_workflow):
    host = await factory.user()
    member = await factory.user()
    subscription = await factory.subscription(host)
    await factory.membership(member, subscription)
    stale_request = await factory.join_request(member, subscription)

    with pytest.raises(AlreadyMember):
        await join_workflow.approve(db_session, host.id, stale_request.id)

    reloaded = await _reload_request(db_session, join_workflow, stale_request.id)
    assert reloaded.status == JoinRequestStatus.APPROVED


@pytest.mark.asyncio
async def test_only_host_can_approve_or_decline(db_session, factory, join_workflow):
    host = await factory.user()
    requester = await factory.user()
    stranger = await factory.user()
    subscription = await factory.subscription(host)
    join_request = await join_workflow.submit(db_session, requester.id, subscription.id)

    with pytest.raises(CannotManageRequest):
        await join_workflow.approve(db_session, stranger.id, join_request.id)
    with pytest.raises(CannotManageRequest):
        await join_workflow.decline(db_session, requester.id, join_request.id)

    reloaded = await _reload_request(db_session, join_workflow, join_request.id)
    assert reloaded.status == JoinRequestStatus.PENDING


@pytest.mark.asyncio
async def test_approving_declined_request_is_rejected(db_session, factory, join_workflow):
    host = await factory.user()
    requester = await factory.user()
    subscription = await factory.subscription(host)
    join_request = await join_workflow.submit(db_session, requester.id, subscription.id)
    await join_workflow.decline(db_session, host.id, join_request.id)

    with pytest.raises(JoinRequestNotPending):
        await join_workflow.approve(db_session, host.id, join_request.id)

    reloaded = await _reload_request(db_session, join_workflow, join_request.id)
    assert reloaded.status == JoinRequestStatus.DECLINED
    assert not await join_workflow.ledger.has_membership(db_session, requester.id, subscription.id)


@pytest.mark.asyncio
async def test_approve_unknown_request(db_session, factory, join_workflow):
    host = await factory.user()
    with pytest.raises(JoinRequestNotFound):
        await join_workflow.approve(db_session, host.id, 4242)


@pytest.mark.asyncio
async def test_storage_failure_on_approval_seats_nobody(db_session, factory, join_workflow):
    host = await factory.user()
    requester = await factory.user()
    subscription = await factory.subscription(host)
    join_request = await join_workflow.submit(db_session, requester.id, subscription.id)

    join_workflow.join_request_repository.update_status = AsyncMock(side_effect=SQLAlchemyError("disk full"))

    with pytest.raises(InternalError):
        await join_workflow.approve(db_session, host.id, join_request.id)

    assert not await join_workflow.ledger.has_membership(db_session, requester.id, subscription.id)
    reloaded = await join_workflow.join_request_repository.get_by_id(db_session, join_request.id)
    assert reloaded.status == JoinRequestStatus.PENDING


@pytest.mark.asyncio
async def test_duplicate_membership_on_insert_still_marks_approved(db_session, factory, join_workflow):
    host = await factory.user()
    requester = await factory.user()
    subscription = await factory.subscription(host)
    join_request = await join_workflow.submit(db_session, requester.id, subscription.id)

    join_workflow.ledger.create_membership = AsyncMock(
        side_effect=IntegrityError("INSERT INTO subscription_memberships", {}, Exception("duplicate"))
    )

    with pytest.raises(AlreadyMember):
        await join_workflow.approve(db_session, host.id, join_request.id)

    reloaded = await _reload_request(db_session, join_workflow, join_request.id)
    assert reloaded.status == JoinRequestStatus.APPROVED


@pytest.mark.asyncio
async def test_requester_can_cancel_pending_request(db_session, factory, join_workflow):
    host = await factory.user()
    requester = await factory.user()
    subscription = await factory.subscription(host)
    join_request = await join_workflow.submit(db_session, requester.id, subscription.id)

    with pytest.raises(CannotManageRequest):
        await join_workflow.cancel(db_session, host.id, join_request.id)

    cancelled = await join_workflow.cancel(db_session, requester.id, join_request.id)
    assert cancelled.status == JoinRequestStatus.CANCELLED

    with pytest.raises(JoinRequestNotPending):
        await join_workflow.cancel(db_session, requester.id, join_request.id)
    with pytest.raises(JoinRequestNotPending):
        await join_workflow.approve(db_session, host.id, join_request.id)


@pytest.mark.asyncio
async def test_list_for_host_filters_and_orders_oldest_first(db_session, factory, join_workflow):
    host = await factory.user()
    first = await factory.user()
    second = await factory.user()
    third = await factory.user()
    subscription = await factory.subscription(host, total_slots=5)

    r1 = await join_workflow.submit(db_session, first.id, subscription.id)
    r2 = await join_workflow.submit(db_session, second.id, subscription.id)
    r3 = await join_workflow.submit(db_session, third.id, subscription.id)
    await join_workflow.decline(db_session, host.id, r2.id)

    everything = await join_workflow.list_for_host(db_session, host.id, subscription.id)
    assert [r.id for r in everything] == [r1.id, r2.id, r3.id]

    pending = await join_workflow.list_for_host(db_session, host.id, subscription.id, JoinRequestStatus.PENDING)
    assert [r.id for r in pending] == [r1.id, r3.id]
    assert pending[0].requester.id == first.id

    with pytest.raises(Forbidden):
        await join_workflow.list_for_host(db_session, first.id, subscription.id)
    with pytest.raises(SubscriptionNotFound):
        await join_workflow.list_for_host(db_session, host.id, 9999)


@pytest.mark.asyncio
async def test_list_mine_newest_first_with_display_fields(db_session, factory, join_workflow):
    host = await factory.user()
    requester = await factory.user()
    service = await factory.service(name="Streamflix")
    older = await factory.subscription(host, service=service, subscription_title="Older plan")
    newer = await factory.subscription(host, service=service, subscription_title="Newer plan")

    await join_workflow.submit(db_session, requester.id, older.id)
    await join_workflow.submit(db_session, requester.id, newer.id)

    mine = await join_workflow.list_mine(db_session, requester.id)
    assert [r.hosted_subscription.subscription_title for r in mine] == ["Newer plan", "Older plan"]
    assert mine[0].hosted_subscription.subscription_service.name == "Streamflix"


@pytest.mark.asyncio
async def test_cancel_racing_approve_has_one_winner(shared_database, make_factory, join_workflow):
    async with shared_database() as setup, shared_database() as first, shared_database() as second:
        factory = make_factory(setup)
        host = await factory.user()
        requester = await factory.user()
        subscription = await factory.subscription(host)
        join_request = await join_workflow.submit(setup, requester.id, subscription.id)

        approved, cancelled = await asyncio.gather(
            join_workflow.approve(first, host.id, join_request.id),
            join_workflow.cancel(second, requester.id, join_request.id),
            return_exceptions=True,
        )

        reloaded = await _reload_request(setup, join_workflow, join_request.id)
        seated = await join_workflow.ledger.has_membership(setup, requester.id, subscription.id)
        if isinstance(approved, SubscriptionMembership):
            assert isinstance(cancelled, JoinRequestNotPending)
            assert reloaded.status == JoinRequestStatus.APPROVED
            assert seated
        else:
            assert isinstance(approved, JoinRequestNotPending)
            assert isinstance(cancelled, JoinRequest)
            assert reloaded.status == JoinRequestStatus.CANCELLED
            assert not seated
