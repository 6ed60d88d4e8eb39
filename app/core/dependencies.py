from typing import AsyncGenerator
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.database import db_manager
from jose import JWTError, jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from app.core.config import settings
from app.models import user_model
from app.repository.user_repository import UserRepository
from app.repository.subscription_service_repository import SubscriptionServiceRepository
from app.repository.hosted_subscription_repository import HostedSubscriptionRepository
from app.repository.membership_repository import MembershipRepository
from app.repository.join_request_repository import JoinRequestRepository
from app.repository.payment_record_repository import PaymentRecordRepository
from app.modules.catalog.service import CatalogService
from app.modules.ledger.service import MembershipLedger
from app.modules.join_requests.service import JoinRequestWorkflow
from app.modules.payments.service import PaymentProofWorkflow
from app.modules.hosted_subscriptions.service import HostedSubscriptionService

# Tokens are issued by the auth service; this API only verifies them
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/user/token")

async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async for session in db_manager.get_db_session():
        yield session

# --- User Authentication ---

async def get_current_user(token: str = Depends(oauth2_scheme), db: AsyncSession = Depends(get_db)) -> user_model.Users:
    """
    Dependency to get the current user from a JWT token.
    The token's `sub` claim carries the user id.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        user_id = payload.get("sub")
        if user_id is None:
            raise credentials_exception
        user_id = int(user_id)
    except (JWTError, ValueError):
        raise credentials_exception

    user = await UserRepository().get_user(db, user_id=user_id)
    if user is None:
        raise credentials_exception
    return user

# --- Workflow providers ---
# Each request gets components wired with their repositories; tests override these.

def get_catalog_service() -> CatalogService:
    return CatalogService(SubscriptionServiceRepository())

def get_membership_ledger() -> MembershipLedger:
    return MembershipLedger(MembershipRepository())

def get_join_request_workflow(ledger: MembershipLedger = Depends(get_membership_ledger)) -> JoinRequestWorkflow:
    return JoinRequestWorkflow(
        join_request_repository=JoinRequestRepository(),
        hosted_subscription_repository=HostedSubscriptionRepository(),
        ledger=ledger,
    )

def get_payment_proof_workflow(ledger: MembershipLedger = Depends(get_membership_ledger)) -> PaymentProofWorkflow:
    return PaymentProofWorkflow(
        payment_record_repository=PaymentRecordRepository(),
        hosted_subscription_repository=HostedSubscriptionRepository(),
        ledger=ledger,
    )

def get_hosted_subscription_service(
    catalog: CatalogService = Depends(get_catalog_service),
) -> HostedSubscriptionService:
    return HostedSubscriptionService(
        hosted_subscription_repository=HostedSubscriptionRepository(),
        membership_repository=MembershipRepository(),
        catalog=catalog,
    )
