from typing import TypeVar, Type, Optional, Generic, Any
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update
from app.models.base import Base

ModelType = TypeVar("ModelType", bound=Base)

class BaseRepository(Generic[ModelType]):
    """
    Storage access for one model. Repositories hold no session; every method
    takes the request-scoped AsyncSession so workflows decide where commits happen.
    """

    def __init__(self, model: Type[ModelType]):
        self.model = model

    async def add(self, db: AsyncSession, db_obj: ModelType, *, commit: bool = True) -> ModelType:
        db.add(db_obj)
        if commit:
            await db.commit()
            await db.refresh(db_obj)
        else:
            await db.flush()
        return db_obj

    async def get(self, db: AsyncSession, id: int) -> Optional[ModelType]:
        result = await db.execute(
            select(self.model)
            .filter(self.model.id == id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def update_fields(self, db: AsyncSession, id: int, values: dict[str, Any], *criteria) -> int:
        """
        Column-level UPDATE by primary key, optionally narrowed by extra WHERE
        criteria. Returns the number of rows matched. Does not commit.
        """
        if not values:
            return 0
        result = await db.execute(
            update(self.model).where(self.model.id == id, *criteria).values(**values)
        )
        return result.rowcount
