import logging
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ServiceNotFound, ServiceAlreadyExists
from app.core.uow import primary_write
from app.models import SubscriptionService
from app.repository.subscription_service_repository import SubscriptionServiceRepository
from app.schemas.catalog_schema import SubscriptionServiceCreate

logger = logging.getLogger(__name__)


class CatalogService:
    """Lookup and registration of the services that can be hosted (Netflix, Spotify, ...)."""

    def __init__(self, service_repository: SubscriptionServiceRepository):
        self.service_repository = service_repository

    async def get_service_by_id(self, db: AsyncSession, service_id: int) -> SubscriptionService:
        service = await self.service_repository.get(db, service_id)
        if not service:
            raise ServiceNotFound()
        return service

    async def list_services(self, db: AsyncSession) -> List[SubscriptionService]:
        return await self.service_repository.list_all(db)

    async def create_service(self, db: AsyncSession, payload: SubscriptionServiceCreate) -> SubscriptionService:
        if await self.service_repository.get_by_name(db, payload.name):
            raise ServiceAlreadyExists()

        service = SubscriptionService(name=payload.name, logo_url=payload.logo_url)
        try:
            async with primary_write(db, "create subscription service"):
                await self.service_repository.add(db, service, commit=False)
        except IntegrityError as exc:
            raise ServiceAlreadyExists() from exc

        await db.refresh(service)
        logger.info("Subscription service '%s' registered with id %s", service.name, service.id)
        return service
