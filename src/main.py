import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from urllib.parse import urlparse

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.docs import get_redoc_html, get_swagger_ui_html
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.v1.api import api_router
from core.config import get_settings
from core.error_handler import (
    ExceptionNormalizationMiddleware,
    global_exception_handler,
    setup_logging,
)
from core.exceptions import DomainError
from core.middleware import CorrelationIdMiddleware
from dependencies.db import engine
from services.quiz.persistence import drain_inflight_writes


logger = logging.getLogger(__name__)


def validate_cors_origins(origins: list[str]) -> list[str]:
    """Drop origins that are not absolute http(s) URLs."""
    validated_origins = []

    def is_valid_url(url: str) -> bool:
        parsed = urlparse(url)
        return bool(parsed.scheme in {"http", "https"} and parsed.netloc)

    for origin in origins:
        if is_valid_url(origin):
            validated_origins.append(origin)
        else:
            logging.warning(f"Invalid CORS origin '{origin}' ignored")

    return validated_origins


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()
    settings = get_settings()
    logger.info("StudyLoop API starting (environment=%s)", settings.ENVIRONMENT)
    try:
        yield
    finally:
        # Quiz question writes outlive their request; let them land first
        await drain_inflight_writes(settings.QUIZ_PERSIST_SHUTDOWN_TIMEOUT_SECONDS)
        await engine.dispose()
        logger.info("StudyLoop API shut down")


settings = get_settings()

app = FastAPI(
    title=settings.APP_NAME,
    description="Study assistant API with streaming quiz generation",
    version="0.1.0",
    docs_url=None,  # We'll mount docs under /api/v1/docs
    redoc_url=None,
    lifespan=lifespan,
)

# Order matters: the last middleware added is the outermost
app.add_middleware(ExceptionNormalizationMiddleware)
app.add_middleware(CorrelationIdMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=validate_cors_origins(list(settings.CORS_ORIGINS)),
    allow_credentials=settings.ALLOW_CREDENTIALS,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(StarletteHTTPException, global_exception_handler)
app.add_exception_handler(RequestValidationError, global_exception_handler)
app.add_exception_handler(DomainError, global_exception_handler)

# Include API routes
app.include_router(api_router, prefix="/api/v1")


# Mount OpenAPI docs under /api/v1/docs and /api/v1/redoc
@app.get("/api/v1/docs", include_in_schema=False)
def custom_swagger_ui_html():
    return get_swagger_ui_html(
        openapi_url="/openapi.json", title=f"{settings.APP_NAME} Docs"
    )


@app.get("/api/v1/redoc", include_in_schema=False)
def redoc_html():
    return get_redoc_html(
        openapi_url="/openapi.json", title=f"{settings.APP_NAME} Redoc"
    )


@app.get("/")
def read_root() -> dict[str, str]:
    return {"message": "StudyLoop API"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
