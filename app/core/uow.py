import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import InternalError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def primary_write(db: AsyncSession, action: str) -> AsyncGenerator[AsyncSession, None]:
    """
    Commits the writes made inside the block. Any exception rolls the session
    back. IntegrityError is re-raised so callers can map it to a conflict,
    other storage failures become an InternalError and business errors
    propagate unchanged.
    """
    try:
        yield db
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.error("Storage failure while trying to %s: %s", action, exc)
        raise InternalError(f"failed to {action}") from exc
    except Exception:
        await db.rollback()
        raise


@asynccontextmanager
async def secondary_write(db: AsyncSession, action: str) -> AsyncGenerator[AsyncSession, None]:
    """
    Commits a follow-up write whose primary write is already durable.
    A failure here is rolled back and logged at CRITICAL, but never raised:
    the caller's operation has already succeeded and the stores are left
    for manual reconciliation.
    """
    try:
        yield db
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.critical("Data drift: failed to %s after the primary write committed", action, exc_info=True)
