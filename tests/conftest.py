import pytest
import pytest_asyncio
from decimal import Decimal
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.core.dependencies import get_current_user, get_db
from app.models.base import Base
from app.models import (
    Users,
    SubscriptionService,
    HostedSubscription,
    BillingCycle,
    SubscriptionMembership,
    JoinRequest,
    JoinRequestStatus,
    PaymentStatus,
)
from app.modules.ledger.service import MembershipLedger
from app.modules.join_requests.service import JoinRequestWorkflow
from app.modules.payments.service import PaymentProofWorkflow
from app.modules.catalog.service import CatalogService
from app.modules.hosted_subscriptions.service import HostedSubscriptionService
from app.repository.membership_repository import MembershipRepository
from app.repository.join_request_repository import JoinRequestRepository
from app.repository.hosted_subscription_repository import HostedSubscriptionRepository
from app.repository.payment_record_repository import PaymentRecordRepository
from app.repository.subscription_service_repository import SubscriptionServiceRepository
from app.utils.helpers import utcnow, end_of_next_month

TEST_DATABASE_URL = "sqlite+aiosqlite://"


# --- HTTP layer fixtures (database mocked out) ---

@pytest.fixture
def mock_db_session():
    return AsyncMock(spec=AsyncSession)


@pytest.fixture(autouse=True)
def override_get_db(mock_db_session):
    async def _override():
        yield mock_db_session
    app.dependency_overrides[get_db] = _override
    yield
    app.dependency_overrides.pop(get_db, None)


@pytest.fixture
def current_user():
    return Users(id=1, email="member@example.com", full_name="Test Member")


@pytest.fixture
def authenticated_client(current_user):
    """Client whose requests are made as `current_user`."""
    app.dependency_overrides[get_current_user] = lambda: current_user
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.pop(get_current_user, None)


@pytest.fixture
def app_instance():
    return app


# --- Database fixtures (in-memory SQLite) ---

@pytest_asyncio.fixture
async def db_session():
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_maker = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)
    async with session_maker() as session:
        yield session

    await engine.dispose()


@pytest_asyncio.fixture
async def shared_database(tmp_path):
    """Session maker over a file-backed database so several sessions can race on the same rows."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'slotshare.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)

    await engine.dispose()


class Factory:
    """Inserts rows the workflows need as preconditions."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self._counter = 0

    async def _save(self, obj):
        self.db.add(obj)
        await self.db.commit()
        await self.db.refresh(obj)
        return obj

    async def user(self, full_name: str = None, profile_picture_url: str = None) -> Users:
        self._counter += 1
        return await self._save(
            Users(
                email=f"user{self._counter}@example.com",
                full_name=full_name or f"User {self._counter}",
                profile_picture_url=profile_picture_url,
            )
        )

    async def service(self, name: str = None, logo_url: str = "https://cdn.example.com/logo.png") -> SubscriptionService:
        self._counter += 1
        return await self._save(SubscriptionService(name=name or f"Service {self._counter}", logo_url=logo_url))

    async def subscription(
        self,
        host: Users,
        service: SubscriptionService = None,
        total_slots: int = 4,
        cost_per_cycle: Decimal = Decimal("60.00"),
        billing_cycle: BillingCycle = BillingCycle.MONTHLY,
        subscription_title: str = "Family plan",
        plan_details: str = None,
        description: str = None,
    ) -> HostedSubscription:
        if service is None:
            service = await self.service()
        return await self._save(
            HostedSubscription(
                host_user_id=host.id,
                subscription_service_id=service.id,
                subscription_title=subscription_title,
                plan_details=plan_details,
                total_slots=total_slots,
                cost_per_cycle=cost_per_cycle,
                billing_cycle=billing_cycle,
                payment_qr_code_url="https://cdn.example.com/qr.png",
                description=description,
            )
        )

    async def membership(self, member: Users, subscription: HostedSubscription) -> SubscriptionMembership:
        now = utcnow()
        return await self._save(
            SubscriptionMembership(
                member_user_id=member.id,
                hosted_subscription_id=subscription.id,
                joined_date=now,
                payment_status=PaymentStatus.PAYMENT_DUE,
                next_payment_date=end_of_next_month(now),
            )
        )

    async def join_request(
        self,
        requester: Users,
        subscription: HostedSubscription,
        status: JoinRequestStatus = JoinRequestStatus.PENDING,
    ) -> JoinRequest:
        return await self._save(
            JoinRequest(
                requester_user_id=requester.id,
                hosted_subscription_id=subscription.id,
                request_date=utcnow(),
                status=status,
            )
        )


@pytest_asyncio.fixture
async def factory(db_session):
    return Factory(db_session)


@pytest.fixture
def ledger():
    return MembershipLedger(MembershipRepository())


@pytest.fixture
def join_workflow(ledger):
    return JoinRequestWorkflow(
        join_request_repository=JoinRequestRepository(),
        hosted_subscription_repository=HostedSubscriptionRepository(),
        ledger=ledger,
    )


@pytest.fixture
def payment_workflow(ledger):
    return PaymentProofWorkflow(
        payment_record_repository=PaymentRecordRepository(),
        hosted_subscription_repository=HostedSubscriptionRepository(),
        ledger=ledger,
    )


@pytest.fixture
def catalog():
    return CatalogService(SubscriptionServiceRepository())


@pytest.fixture
def hosted_subscription_service(catalog):
    return HostedSubscriptionService(
        hosted_subscription_repository=HostedSubscriptionRepository(),
        membership_repository=MembershipRepository(),
        catalog=catalog,
    )


@pytest.fixture
def make_factory():
    return Factory
