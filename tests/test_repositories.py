import pytest
from unittest.mock import AsyncMock, MagicMock
from app.repository.user_repository import UserRepository
from app.repository.join_request_repository import JoinRequestRepository
from app.repository.payment_record_repository import PaymentRecordRepository
from app.repository.subscription_service_repository import SubscriptionServiceRepository
from app.models.user_model import Users
from app.models import JoinRequestStatus, PaymentRecordStatus, SubscriptionService


class MockDBSession:
    def __init__(self):
        self.add = MagicMock()
        self.commit = AsyncMock()
        self.flush = AsyncMock()
        self.refresh = AsyncMock()
        self.execute = AsyncMock()


@pytest.mark.asyncio
async def test_get_user():
    db = MockDBSession()
    user = Users(id=1, email="host@example.com", full_name="Test User")
    mock_result = MagicMock()
    mock_result.scalar_one_or_none.return_value = user
    db.execute.return_value = mock_result

    result = await UserRepository().get_user(db, user_id=1)

    assert result.id == 1
    assert result.full_name == "Test User"
    db.execute.assert_awaited_once()


@pytest.mark.asyncio
async def test_add_commits_and_refreshes():
    db = MockDBSession()
    service = SubscriptionService(name="Streamflix")

    result = await SubscriptionServiceRepository().add(db, service)

    assert result is service
    db.add.assert_called_once_with(service)
    db.commit.assert_awaited_once()
    db.refresh.assert_awaited_once_with(service)
    db.flush.assert_not_awaited()


@pytest.mark.asyncio
async def test_add_without_commit_only_flushes():
    db = MockDBSession()
    service = SubscriptionService(name="Streamflix")

    await SubscriptionServiceRepository().add(db, service, commit=False)

    db.flush.assert_awaited_once()
    db.commit.assert_not_awaited()


@pytest.mark.asyncio
async def test_update_status_returns_rowcount_without_committing():
    db = MockDBSession()
    db.execute.return_value = MagicMock(rowcount=1)

    updated = await JoinRequestRepository().update_status(db, 5, JoinRequestStatus.DECLINED)

    assert updated == 1
    db.commit.assert_not_awaited()
    statement = db.execute.await_args.args[0]
    assert str(statement).startswith("UPDATE join_requests")
    # Only a request still Pending is matched
    assert "join_requests.status = :status_1" in str(statement)
    assert statement.compile().params["status_1"] == JoinRequestStatus.PENDING


@pytest.mark.asyncio
async def test_payment_record_review_stamps_reviewer():
    db = MockDBSession()
    db.execute.return_value = MagicMock(rowcount=1)

    await PaymentRecordRepository().update_status(db, 7, PaymentRecordStatus.APPROVED, reviewed_by_user_id=2)

    statement = db.execute.await_args.args[0]
    params = statement.compile().params
    assert params["status"] == PaymentRecordStatus.APPROVED
    assert params["reviewed_by_user_id"] == 2
    assert params["reviewed_at"] is not None
    assert "payment_records.status = :status_1" in str(statement)
    assert params["status_1"] == PaymentRecordStatus.PROOF_SUBMITTED
