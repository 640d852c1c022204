from contextlib import asynccontextmanager
from typing import cast, Optional

from fastapi import FastAPI, APIRouter
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from app.core.settings import Settings
from app.core.logger import logger, configure_logging
from app.core.errors import (
    RelayError,
    relay_error_handler,
    validation_error_handler,
    unhandled_error_handler,
)
from app.app_containers import ApplicationContainer
from app.v1_0.v1_router import v1_router
from app.v1_0.routers.upload_router import upload_file, ERROR_RESPONSES as UPLOAD_ERRORS
from app.v1_0.routers.file_router import legacy_delete_file, ERROR_RESPONSES as FILE_ERRORS
from app.v1_0.schemas import UploadResponse, DeleteResponse


@asynccontextmanager
async def lifespan(app: FastAPI):
    container = cast(ApplicationContainer, app.state.container)
    settings = cast(Settings, app.state.settings)
    logger.info("%s (%s) starting in %s", settings.APP_NAME, settings.VARIANT, settings.APP_ENV)
    if not settings.GITHUB_TOKEN.get_secret_value():
        logger.warning("GITHUB_TOKEN is empty; writes to %s/%s will be rejected", settings.GITHUB_USERNAME, settings.GITHUB_REPO)
    try:
        yield
    finally:
        logger.info("%s shutdown", settings.APP_NAME)
        store = container.api_container.content_store()
        await store.aclose()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings()
    configure_logging(settings.LOG_LEVEL)

    container = ApplicationContainer()
    container.settings.override(settings)

    api_prefix = settings.API_PREFIX.rstrip("/")
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        debug=settings.DEBUG,
        openapi_url=f"{api_prefix}/openapi.json",
        docs_url=f"{api_prefix}/docs",
        redoc_url=f"{api_prefix}/redoc",
        lifespan=lifespan,
    )

    app.state.container = container
    app.state.settings = settings

    app.add_exception_handler(RelayError, relay_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    origins = settings.CORS_ORIGINS_LIST
    allow_credentials = True

    if "*" in origins:
        # wildcard + credentials is not valid CORS
        allow_credentials = False

    logger.info("CORS origins=%s allow_credentials=%s", origins, allow_credentials)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    base_router = APIRouter(prefix=api_prefix)
    base_router.include_router(v1_router)

    @base_router.get("/", tags=["health"])
    @base_router.get("/ready", tags=["health"])
    async def ready():
        return {
            "message": "ready",
            "name": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "env": settings.APP_ENV,
            "variant": settings.VARIANT,
            "prefix": api_prefix,
            "limits": {
                "maxFileMb": settings.MAX_FILE_MB,
                "maxBatchFiles": settings.MAX_BATCH_FILES,
                "rateLimitMax": settings.RATE_LIMIT_MAX,
                "rateLimitWindowSec": settings.RATE_LIMIT_WINDOW_SEC,
            },
            "categories": settings.folders,
        }

    app.include_router(base_router)

    if settings.LEGACY_UPLOAD_PATH:
        app.add_api_route(
            settings.LEGACY_UPLOAD_PATH,
            upload_file,
            methods=["POST"],
            response_model=UploadResponse,
            response_model_exclude_none=True,
            responses=UPLOAD_ERRORS,
            tags=["legacy"],
        )
    if settings.LEGACY_DELETE_PATH:
        app.add_api_route(
            settings.LEGACY_DELETE_PATH,
            legacy_delete_file,
            methods=["DELETE"],
            response_model=DeleteResponse,
            responses=FILE_ERRORS,
            tags=["legacy"],
        )

    return app


app = create_app()
