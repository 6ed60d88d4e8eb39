from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from app.core.dependencies import get_db, get_current_user, get_hosted_subscription_service
from app.models.user_model import Users
from app.modules.enrichment import service as enrichment
from app.modules.hosted_subscriptions.service import HostedSubscriptionService
from app.schemas import hosted_subscription_schema, membership_schema
from app.schemas.hosted_subscription_schema import SortOption

router = APIRouter(
    prefix="/hosted-subscriptions",
    tags=["Hosted Subscriptions"],
)

user_router = APIRouter(
    prefix="/users/me",
    tags=["Me"],
)


@router.post("", response_model=hosted_subscription_schema.HostedSubscription, status_code=status.HTTP_201_CREATED)
async def create_hosted_subscription(
    payload: hosted_subscription_schema.HostedSubscriptionCreate,
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    service: HostedSubscriptionService = Depends(get_hosted_subscription_service),
):
    subscription = await service.create(db, host_id=current_user.id, payload=payload)
    return enrichment.hosted_subscription_view(subscription)


@router.get("", response_model=List[hosted_subscription_schema.HostedSubscription])
async def explore_hosted_subscriptions(
    search: Optional[str] = Query(None, max_length=100),
    service_id: Optional[int] = Query(None, gt=0),
    sort_by: Optional[SortOption] = Query(None),
    db: AsyncSession = Depends(get_db),
    service: HostedSubscriptionService = Depends(get_hosted_subscription_service),
):
    subscriptions = await service.explore(db, search=search, service_id=service_id, sort_by=sort_by)
    return [enrichment.hosted_subscription_view(s) for s in subscriptions]


@router.get("/{subscription_id}", response_model=hosted_subscription_schema.HostedSubscription)
async def get_hosted_subscription(
    subscription_id: int,
    db: AsyncSession = Depends(get_db),
    service: HostedSubscriptionService = Depends(get_hosted_subscription_service),
):
    subscription = await service.get_details(db, subscription_id)
    return enrichment.hosted_subscription_view(subscription)


@router.get("/{subscription_id}/members", response_model=List[membership_schema.Membership])
async def list_subscription_members(
    subscription_id: int,
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    service: HostedSubscriptionService = Depends(get_hosted_subscription_service),
):
    memberships = await service.list_members(db, host_id=current_user.id, subscription_id=subscription_id)
    return [enrichment.membership_view(m, include_member=True) for m in memberships]


@user_router.get("/hosted-subscriptions", response_model=List[hosted_subscription_schema.HostedSubscription])
async def list_my_hosted_subscriptions(
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    service: HostedSubscriptionService = Depends(get_hosted_subscription_service),
):
    subscriptions = await service.list_mine(db, host_id=current_user.id)
    return [enrichment.hosted_subscription_view(s) for s in subscriptions]


@user_router.get("/memberships", response_model=List[membership_schema.Membership])
async def list_my_memberships(
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    service: HostedSubscriptionService = Depends(get_hosted_subscription_service),
):
    memberships = await service.list_my_memberships(db, member_id=current_user.id)
    return [enrichment.membership_view(m) for m in memberships]
