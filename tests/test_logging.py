import uuid

from fastapi.testclient import TestClient

from app.database import get_data_source
from app.logging_setup import build_logging_config
from main import app


class BrokenDataSource:
    async def select(self, *args, **kwargs):
        raise RuntimeError("driver exploded")


def test_logging_config_levels_and_handlers():
    config = build_logging_config("debug")
    assert config["loggers"]["catalog"]["level"] == "DEBUG"
    assert config["loggers"]["uvicorn"]["handlers"] == ["json_stream"]
    assert config["handlers"]["json_stream"]["filters"] == ["correlation_id"]
    assert config["formatters"]["json"]["()"] == "pythonjsonlogger.json.JsonFormatter"


def test_unhandled_error_returns_500_with_correlation_id():
    request_id = uuid.uuid4().hex
    app.dependency_overrides[get_data_source] = lambda: BrokenDataSource()
    try:
        response = TestClient(app).get("/", headers={"X-Request-ID": request_id})
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    body = response.json()
    assert body["error"] == "Internal Server Error"
    assert body["correlation_id"] == request_id
    assert response.headers["x-request-id"] == request_id
