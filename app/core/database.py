from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from app.core.config import settings
from typing import AsyncGenerator

# Make sure every model is registered before the first session is opened
import app.models  # noqa: F401

class DatabaseManager:
    def __init__(self, database_url: str = settings.DATABASE_URL):
        """Initializes the database engine and session maker upon creation."""
        self.engine = create_async_engine(database_url, echo=settings.DB_ECHO)
        self.async_session_maker = async_sessionmaker(
            self.engine, expire_on_commit=False, class_=AsyncSession
        )

    async def close(self):
        """Closes the database engine connections."""
        if self.engine:
            await self.engine.dispose()

    async def get_db_session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provides a database session."""
        async with self.async_session_maker() as session:
            yield session

db_manager = DatabaseManager()
