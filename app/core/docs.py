import logging

from fastapi import FastAPI
from fastapi.openapi.docs import get_swagger_ui_html
from fastapi.responses import JSONResponse

from app.core.config import settings

logger = logging.getLogger(__name__)

DOCS_PATH = "/docs"
OPENAPI_PATH = "/docs/openapi.json"


def load_openapi_document(app: FastAPI) -> dict | None:
    """
    Build the OpenAPI document advertised by /docs.

    Returns None in the test profile or when the document cannot be
    built, which leaves /docs disabled while the API keeps running.
    """
    if settings.is_testing:
        return None

    try:
        document = app.openapi()
    except Exception as e:
        logger.error(f"Failed to build the OpenAPI document: {e}", exc_info=True)
        return None

    document = dict(document)
    document["servers"] = [{"url": f"http://localhost:{settings.port}"}]
    return document


def mount_docs(app: FastAPI, document: dict) -> None:
    """Serve Swagger UI for ``document`` under /docs."""

    @app.get(OPENAPI_PATH, include_in_schema=False)
    async def openapi_json():
        return JSONResponse(document)

    @app.get(DOCS_PATH, include_in_schema=False)
    async def swagger_ui():
        return get_swagger_ui_html(
            openapi_url=OPENAPI_PATH,
            title=f"{settings.app_name} Documentation",
            swagger_ui_parameters={"filter": True},
        )
