import logging
import time
import uuid
from pathlib import Path

from fastapi import Depends, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from redis.asyncio import Redis
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.router import router as api_router
from app.core.config import settings
from app.core.deps import get_redis
from app.core.docs import load_openapi_document, mount_docs
from app.core.exceptions import AppError, ValidationError
from app.core.limiter import init_limiter_error_handlers
from app.core.logging import request_id_var, setup_logging
from app.db.sessions import get_async_session

# LOGGING
setup_logging()
logger = logging.getLogger(__name__)


# APP INITIALIZATION
app = FastAPI(
    title=settings.app_name,
    version="1.0.0",
    docs_url=None,
    redoc_url=None,
)


# ERROR HANDLING
@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "errors": jsonable_encoder(exc.errors)},
    )


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=422,
        content={"detail": "Validation failed", "errors": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code in (401, 403):
        logger.warning(f"Auth failure: {exc.message} | RequestID: {getattr(request.state, 'request_id', 'n/a')}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message},
    )


@app.exception_handler(Exception)
async def universal_exception_handler(request: Request, exc: Exception):
    # Log the real error for the developer
    logger.error(f"Unhandled error: {str(exc)}", exc_info=True)

    # Send a polite message to the user
    return JSONResponse(
        status_code=500, content={"detail": "An unexpected error occurred."}
    )


# RATE LIMITING
init_limiter_error_handlers(app)


# ROUTERS
app.include_router(api_router, prefix="/api")


# STATIC FILES (stored item images)
storage_root = Path(settings.storage_root)
storage_root.mkdir(parents=True, exist_ok=True)
app.mount("/storage", StaticFiles(directory=storage_root), name="storage")


# SECURITY MIDDLEWARES
app.add_middleware(
    TrustedHostMiddleware,
    allowed_hosts=settings.allowed_hosts,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type", "Authorization"],
)


# REQUEST TRACING & SECURITY HEADERS
@app.middleware("http")
async def security_and_tracing_middleware(request: Request, call_next):
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id
    token = request_id_var.set(request_id)
    started = time.perf_counter()

    try:
        response = await call_next(request)

        response.headers["X-Request-Id"] = request_id
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "no-referrer"

        if settings.is_production:
            response.headers["Strict-Transport-Security"] = (
                "max-age=63072000; includeSubDomains"
            )

        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            f"{request.method} {request.url.path} {response.status_code} {elapsed_ms:.1f}ms"
        )
        return response

    except Exception as e:
        logger.error(f"Middleware caught crash: {e}", exc_info=True)
        return JSONResponse(
            status_code=500, content={"detail": "Internal Server Error"}
        )

    finally:
        request_id_var.reset(token)


# HEALTH CHECKS
@app.get("/", response_class=HTMLResponse, include_in_schema=False)
async def liveness():
    return "<h1>Health Check: Server is running successfully!</h1>"


@app.get("/health")
async def health_check(
    db: AsyncSession = Depends(get_async_session),
    redis: Redis = Depends(get_redis),
):
    health_status = {"status": "healthy", "dependencies": {}}

    try:
        await db.execute(text("SELECT 1"))
        health_status["dependencies"]["database"] = "ok"
    except Exception as e:
        health_status["status"] = "unhealthy"
        health_status["dependencies"]["database"] = str(e)

    try:
        await redis.ping()
        health_status["dependencies"]["redis"] = "ok"
    except Exception as e:
        health_status["status"] = "unhealthy"
        health_status["dependencies"]["redis"] = str(e)

    return health_status


# API DOCS (disabled when the document cannot be built)
openapi_doc = load_openapi_document(app)
if openapi_doc:
    mount_docs(app, openapi_doc)
else:
    logger.info("API docs disabled")
