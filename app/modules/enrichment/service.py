"""
Read-side projections from ORM rows into response schemas.

Nothing here touches the session: callers load the rows with the
relationships these functions read (see the repositories' eager loads).
"""
from typing import List, Optional

from app.models import (
    Users,
    HostedSubscription,
    SubscriptionMembership,
    JoinRequest,
    PaymentRecord,
)
from app.schemas.user_schema import UserSummary
from app.schemas import (
    hosted_subscription_schema,
    membership_schema,
    join_request_schema,
    payment_record_schema,
)
from app.utils.helpers import cost_per_slot
from app.utils.url_builder import add_app_base_url

MAX_MEMBER_AVATARS = 4


def user_summary(user: Optional[Users]) -> Optional[UserSummary]:
    if user is None:
        return None
    return UserSummary.model_validate(user)


def members_count(subscription: HostedSubscription) -> int:
    return len(subscription.memberships or [])


def available_slots(subscription: HostedSubscription) -> int:
    # The host holds one of the slots
    return max(subscription.total_slots - (members_count(subscription) + 1), 0)


def member_avatars(subscription: HostedSubscription) -> List[str]:
    """Up to four avatar URLs, host first, then members in storage order."""
    people = [subscription.host] + [m.member for m in subscription.memberships or []]
    avatars = []
    for person in people:
        if person is None or not person.profile_picture_url:
            continue
        avatars.append(add_app_base_url(person.profile_picture_url))
        if len(avatars) == MAX_MEMBER_AVATARS:
            break
    return avatars


def hosted_subscription_view(subscription: HostedSubscription) -> hosted_subscription_schema.HostedSubscription:
    service = subscription.subscription_service
    return hosted_subscription_schema.HostedSubscription(
        id=subscription.id,
        host_user_id=subscription.host_user_id,
        subscription_service_id=subscription.subscription_service_id,
        subscription_title=subscription.subscription_title,
        plan_details=subscription.plan_details,
        total_slots=subscription.total_slots,
        cost_per_cycle=subscription.cost_per_cycle,
        billing_cycle=subscription.billing_cycle,
        payment_qr_code_url=subscription.payment_qr_code_url,
        description=subscription.description,
        created_at=subscription.created_at,
        members_count=members_count(subscription),
        available_slots=available_slots(subscription),
        cost_per_slot=cost_per_slot(subscription.cost_per_cycle, subscription.total_slots),
        member_avatars=member_avatars(subscription),
        host=user_summary(subscription.host),
        service_name=service.name if service else None,
        service_logo_url=add_app_base_url(service.logo_url) if service else None,
    )


def membership_view(
    membership: SubscriptionMembership,
    include_member: bool = False,
) -> membership_schema.Membership:
    view = membership_schema.Membership(
        id=membership.id,
        member_user_id=membership.member_user_id,
        hosted_subscription_id=membership.hosted_subscription_id,
        joined_date=membership.joined_date,
        payment_status=membership.payment_status,
        next_payment_date=membership.next_payment_date,
    )

    subscription = membership.hosted_subscription
    if subscription is not None:
        view.subscription_title = subscription.subscription_title
        view.payment_qr_code_url = subscription.payment_qr_code_url
        view.billing_cycle = subscription.billing_cycle
        view.cost_per_slot = cost_per_slot(subscription.cost_per_cycle, subscription.total_slots)
        if subscription.host is not None:
            view.host_name = subscription.host.full_name
        if subscription.subscription_service is not None:
            view.service_name = subscription.subscription_service.name
            view.service_logo_url = add_app_base_url(subscription.subscription_service.logo_url)

    if include_member:
        view.member = user_summary(membership.member)
    return view


def payment_record_view(record: PaymentRecord) -> payment_record_schema.PaymentRecord:
    view = payment_record_schema.PaymentRecord(
        id=record.id,
        subscription_membership_id=record.subscription_membership_id,
        payment_cycle_identifier=record.payment_cycle_identifier,
        amount_expected=record.amount_expected,
        amount_paid=record.amount_paid,
        payment_method=record.payment_method,
        transaction_reference=record.transaction_reference,
        proof_image_url=record.proof_image_url,
        submitted_at=record.submitted_at,
        status=record.status,
        reviewed_by_user_id=record.reviewed_by_user_id,
        reviewed_at=record.reviewed_at,
    )

    membership = record.membership
    if membership is not None:
        view.member_user_id = membership.member_user_id
        view.hosted_subscription_id = membership.hosted_subscription_id
        if membership.member is not None:
            view.member_name = membership.member.full_name
            view.member_avatar_url = add_app_base_url(membership.member.profile_picture_url)
        if membership.hosted_subscription is not None:
            view.subscription_title = membership.hosted_subscription.subscription_title
    return view


def join_request_view(request: JoinRequest) -> join_request_schema.JoinRequest:
    subscription = request.hosted_subscription
    service = subscription.subscription_service if subscription is not None else None
    return join_request_schema.JoinRequest(
        id=request.id,
        requester_user_id=request.requester_user_id,
        hosted_subscription_id=request.hosted_subscription_id,
        request_date=request.request_date,
        status=request.status,
        created_at=request.created_at,
        requester=user_summary(request.requester),
        subscription_title=subscription.subscription_title if subscription is not None else None,
        service_name=service.name if service is not None else None,
    )
