from sqlalchemy.ext.asyncio import AsyncSession
from app.models import user_model
from app.repository.base_repository import BaseRepository
from typing import Optional

class UserRepository(BaseRepository[user_model.Users]):
    """Read access to users. Accounts are created by the auth service."""

    def __init__(self):
        super().__init__(user_model.Users)

    async def get_user(self, db: AsyncSession, user_id: int) -> Optional[user_model.Users]:
        return await self.get(db, user_id)
