from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from app.core.dependencies import get_db, get_current_user, get_join_request_workflow
from app.models.user_model import Users
from app.models.join_request_model import JoinRequestStatus
from app.modules.enrichment import service as enrichment
from app.modules.join_requests.service import JoinRequestWorkflow
from app.schemas import join_request_schema, membership_schema

# Join requests are created and listed under their hosted subscription
subscription_router = APIRouter(
    prefix="/hosted-subscriptions",
    tags=["Join Requests"],
)

router = APIRouter(
    prefix="/join-requests",
    tags=["Join Requests"],
)

user_router = APIRouter(
    prefix="/users/me",
    tags=["Me"],
)


@subscription_router.post(
    "/{subscription_id}/join-requests",
    response_model=join_request_schema.JoinRequest,
    status_code=status.HTTP_201_CREATED,
)
async def request_to_join(
    subscription_id: int,
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    workflow: JoinRequestWorkflow = Depends(get_join_request_workflow),
):
    join_request = await workflow.submit(db, requester_id=current_user.id, subscription_id=subscription_id)
    return enrichment.join_request_view(join_request)


@subscription_router.get("/{subscription_id}/join-requests", response_model=List[join_request_schema.JoinRequest])
async def list_join_requests_for_subscription(
    subscription_id: int,
    status_filter: Optional[JoinRequestStatus] = Query(None, alias="status"),
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    workflow: JoinRequestWorkflow = Depends(get_join_request_workflow),
):
    join_requests = await workflow.list_for_host(
        db, host_id=current_user.id, subscription_id=subscription_id, status_filter=status_filter
    )
    return [enrichment.join_request_view(r) for r in join_requests]


@router.patch("/{request_id}/approve", response_model=membership_schema.Membership)
async def approve_join_request(
    request_id: int,
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    workflow: JoinRequestWorkflow = Depends(get_join_request_workflow),
):
    membership = await workflow.approve(db, host_id=current_user.id, request_id=request_id)
    return enrichment.membership_view(membership, include_member=True)


@router.patch("/{request_id}/decline")
async def decline_join_request(
    request_id: int,
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    workflow: JoinRequestWorkflow = Depends(get_join_request_workflow),
):
    await workflow.decline(db, host_id=current_user.id, request_id=request_id)
    return {"message": "Join request declined"}


@router.patch("/{request_id}/cancel", response_model=join_request_schema.JoinRequest)
async def cancel_join_request(
    request_id: int,
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    workflow: JoinRequestWorkflow = Depends(get_join_request_workflow),
):
    join_request = await workflow.cancel(db, requester_id=current_user.id, request_id=request_id)
    return enrichment.join_request_view(join_request)


@user_router.get("/join-requests", response_model=List[join_request_schema.JoinRequest])
async def list_my_join_requests(
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    workflow: JoinRequestWorkflow = Depends(get_join_request_workflow),
):
    join_requests = await workflow.list_mine(db, requester_id=current_user.id)
    return [enrichment.join_request_view(r) for r in join_requests]
