import logging

from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession
from app.modules.catalog.api import router as catalog_router
from app.modules.hosted_subscriptions.api import router as hosted_subscriptions_router, user_router as hosted_subscriptions_user_router
from app.modules.join_requests.api import router as join_requests_router, subscription_router as join_requests_subscription_router, user_router as join_requests_user_router
from app.modules.payments.api import router as payment_records_router, subscription_router as payment_records_subscription_router, membership_router as payment_records_membership_router
from app.core.database import db_manager
from app.core.dependencies import get_db
from app.core.global_error_handler import register_global_exception_handlers
from app.core.config import settings

logger = logging.getLogger(__name__)

app = FastAPI(
    title=f"{settings.APP_NAME} API",
    description="Subscription-sharing marketplace: host a plan, let others join, verify their payments.",
    version="1.0.0"
)

# Register global exception handlers
register_global_exception_handlers(app)

@app.on_event("shutdown")
async def shutdown_event():
    """Close database connections on shutdown."""
    await db_manager.close()
    logger.info("Database engine closed.")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(catalog_router, prefix="/api")
app.include_router(hosted_subscriptions_router, prefix="/api")
app.include_router(join_requests_subscription_router, prefix="/api")
app.include_router(payment_records_subscription_router, prefix="/api")
app.include_router(join_requests_router, prefix="/api")
app.include_router(payment_records_membership_router, prefix="/api")
app.include_router(payment_records_router, prefix="/api")
app.include_router(hosted_subscriptions_user_router, prefix="/api")
app.include_router(join_requests_user_router, prefix="/api")

@app.get("/api/")
async def root():
    return {"message": f"{settings.APP_NAME} API is running"}

@app.get("/api/health")
async def health_check(db: AsyncSession = Depends(get_db)):
    await db.execute(text("SELECT 1"))
    return {"status": "ok"}
