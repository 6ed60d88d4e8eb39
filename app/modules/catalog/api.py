from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from app.core.dependencies import get_db, get_current_user, get_catalog_service
from app.models.user_model import Users
from app.modules.catalog.service import CatalogService
from app.schemas import catalog_schema

router = APIRouter(prefix="/subscription-services", tags=["Subscription Services"])


@router.get("", response_model=List[catalog_schema.SubscriptionService])
async def list_subscription_services(
    db: AsyncSession = Depends(get_db),
    catalog: CatalogService = Depends(get_catalog_service),
):
    return await catalog.list_services(db)


@router.post("", response_model=catalog_schema.SubscriptionService, status_code=status.HTTP_201_CREATED)
async def create_subscription_service(
    payload: catalog_schema.SubscriptionServiceCreate,
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    catalog: CatalogService = Depends(get_catalog_service),
):
    return await catalog.create_service(db, payload)
