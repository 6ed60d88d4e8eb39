from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from typing import List, Optional

from app.models.subscription_service_model import SubscriptionService
from app.repository.base_repository import BaseRepository


class SubscriptionServiceRepository(BaseRepository[SubscriptionService]):
    def __init__(self):
        super().__init__(SubscriptionService)

    async def get_by_name(self, db: AsyncSession, name: str) -> Optional[SubscriptionService]:
        result = await db.execute(
            select(self.model).filter(func.lower(self.model.name) == name.strip().lower())
        )
        return result.scalars().first()

    async def list_all(self, db: AsyncSession) -> List[SubscriptionService]:
        result = await db.execute(select(self.model).order_by(self.model.name.asc()))
        return list(result.scalars().all())
