from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from app.core.dependencies import get_db, get_current_user, get_payment_proof_workflow
from app.models.user_model import Users
from app.models.payment_record_model import PaymentRecordStatus
from app.modules.enrichment import service as enrichment
from app.modules.payments.service import PaymentProofWorkflow
from app.schemas import payment_record_schema

subscription_router = APIRouter(
    prefix="/hosted-subscriptions",
    tags=["Payment Records"],
)

membership_router = APIRouter(
    prefix="/memberships",
    tags=["Payment Records"],
)

router = APIRouter(
    prefix="/payment-records",
    tags=["Payment Records"],
)


@subscription_router.get(
    "/{subscription_id}/payment-records",
    response_model=List[payment_record_schema.PaymentRecord],
)
async def list_payment_records_for_host(
    subscription_id: int,
    status_filter: Optional[PaymentRecordStatus] = Query(None, alias="status"),
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    workflow: PaymentProofWorkflow = Depends(get_payment_proof_workflow),
):
    records = await workflow.list_for_host(
        db, host_id=current_user.id, subscription_id=subscription_id, status_filter=status_filter
    )
    return [enrichment.payment_record_view(r) for r in records]


@membership_router.post(
    "/{membership_id}/payment-records",
    response_model=payment_record_schema.PaymentRecord,
    status_code=status.HTTP_201_CREATED,
)
async def submit_payment_proof(
    membership_id: int,
    proof: payment_record_schema.PaymentProofSubmission,
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    workflow: PaymentProofWorkflow = Depends(get_payment_proof_workflow),
):
    record = await workflow.submit_proof(db, member_id=current_user.id, membership_id=membership_id, proof=proof)
    return enrichment.payment_record_view(record)


@membership_router.get("/{membership_id}/payment-records", response_model=List[payment_record_schema.PaymentRecord])
async def list_payment_records_for_membership(
    membership_id: int,
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    workflow: PaymentProofWorkflow = Depends(get_payment_proof_workflow),
):
    records = await workflow.list_for_membership(db, member_id=current_user.id, membership_id=membership_id)
    return [enrichment.payment_record_view(r) for r in records]


@router.get("/{record_id}", response_model=payment_record_schema.PaymentRecord)
async def get_payment_record(
    record_id: int,
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    workflow: PaymentProofWorkflow = Depends(get_payment_proof_workflow),
):
    record = await workflow.get_details(db, record_id=record_id, accessor_id=current_user.id)
    return enrichment.payment_record_view(record)


@router.patch("/{record_id}/approve", response_model=payment_record_schema.PaymentRecord)
async def approve_payment_record(
    record_id: int,
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    workflow: PaymentProofWorkflow = Depends(get_payment_proof_workflow),
):
    record = await workflow.approve(db, host_id=current_user.id, record_id=record_id)
    return enrichment.payment_record_view(record)


@router.patch("/{record_id}/decline", response_model=payment_record_schema.PaymentRecord)
async def decline_payment_record(
    record_id: int,
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    workflow: PaymentProofWorkflow = Depends(get_payment_proof_workflow),
):
    record = await workflow.decline(db, host_id=current_user.id, record_id=record_id)
    return enrichment.payment_record_view(record)
