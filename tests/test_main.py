from fastapi.testclient import TestClient
from app.main import app
from app.core.config import settings


def test_root():
    with TestClient(app) as client:
        response = client.get("/api/")
        assert response.status_code == 200
        assert response.json() == {"message": f"{settings.APP_NAME} API is running"}


def test_health_check(mock_db_session):
    with TestClient(app) as client:
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}
    mock_db_session.execute.assert_awaited_once()
