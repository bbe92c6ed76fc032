import pytest

from app.platform.config import settings


@pytest.mark.asyncio
async def test_health_check(client):
    response = await client.get("/health")
    assert response.status_code == 200

    payload = response.json()
    assert payload["status_code"] == 200
    assert payload["status"] == "success"
    assert payload["message"] == "Service is healthy"
    assert payload["data"] == {"status": "ok", "service": settings.APP_NAME}


@pytest.mark.asyncio
async def test_root_info(client):
    response = await client.get("/")
    assert response.status_code == 200
    payload = response.json()
    assert payload["app_name"] == f"{settings.APP_NAME} API"
    assert payload["version"] == "1.0.0"
    assert payload["docs_url"] == "/docs"
    assert payload["api_base"] == "/api/v1"
    assert payload["feed_url"] == "/posts/feed"
