import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from app.core.config import settings
from app.core.docs import load_openapi_document, mount_docs


@pytest.fixture
def docs_profile(monkeypatch):
    """Pretend to run outside the test profile on a custom port."""
    monkeypatch.setattr(settings, "app_env", "development")
    monkeypatch.setattr(settings, "port", 9123)


@pytest.fixture
def bare_app():
    app = FastAPI(docs_url=None, redoc_url=None)

    @app.get("/ping")
    async def ping():
        return {"pong": True}

    return app


def test_docs_skipped_in_test_profile(bare_app):
    assert settings.is_testing
    assert load_openapi_document(bare_app) is None


def test_document_advertises_configured_port(docs_profile, bare_app):
    document = load_openapi_document(bare_app)

    assert document["servers"] == [{"url": "http://localhost:9123"}]
    assert "/ping" in document["paths"]


def test_broken_document_disables_docs(docs_profile, bare_app, monkeypatch):
    def broken_openapi():
        raise RuntimeError("schema generation failed")

    monkeypatch.setattr(bare_app, "openapi", broken_openapi)

    assert load_openapi_document(bare_app) is None


async def test_mounted_docs_are_served(docs_profile, bare_app):
    mount_docs(bare_app, load_openapi_document(bare_app))

    async with AsyncClient(
        transport=ASGITransport(app=bare_app), base_url="http://localhost"
    ) as ac:
        ui = await ac.get("/docs")
        document = await ac.get("/docs/openapi.json")

    assert ui.status_code == 200
    assert "swagger-ui" in ui.text
    assert document.status_code == 200
    assert document.json()["servers"][0]["url"] == "http://localhost:9123"
