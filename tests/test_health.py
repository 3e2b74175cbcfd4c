from fastapi.testclient import TestClient

from results_portal.config.settings import Settings
from results_portal.main import build_allowed_origins, create_app


def test_health_check(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["environment"] == "development"
    assert body["sheetsConfigured"] is True


def test_health_check_reports_missing_sheets_settings():
    settings = Settings(APP_ENV="development", GOOGLE_SPREADSHEET_ID="", GOOGLE_PRIVATE_KEY="")
    app = create_app(settings)
    with TestClient(app) as client:
        response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["sheetsConfigured"] is False


def test_allowed_origins():
    settings = Settings(FRONTEND_URL="https://results.example.com/", ALLOW_ALL_ORIGINS=False)
    origins = build_allowed_origins(settings)
    assert "https://results.example.com/" in origins
    assert "https://results.example.com" in origins

    assert build_allowed_origins(Settings(ALLOW_ALL_ORIGINS=True)) == ["*"]
