import logging
from contextlib import asynccontextmanager

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from darkvision.config import Settings, settings
from darkvision.exceptions import ConfigurationError, DarkVisionError, NotFoundError
from darkvision.routers import images, status, upload, videos
from darkvision.services.storage import MediaStorage
from darkvision.services.summary import SummaryService

logger = logging.getLogger(__name__)


def create_app(app_settings: Settings = settings) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Open the media store and build the summary service."""
        logger.info("Starting DarkVision service ...")

        storage = MediaStorage(app_settings.data_dir)
        app.state.settings = app_settings
        app.state.storage = storage
        app.state.summary = SummaryService(
            storage,
            face_thresholds=app_settings.face_thresholds(),
            keyword_thresholds=app_settings.keyword_thresholds(),
        )
        if app_settings.auth_enabled:
            logger.info("Admin endpoints protected by basic authentication")
        else:
            logger.info("No authentication configured")

        logger.info("DarkVision service ready (data dir: %s)", app_settings.data_dir)
        yield
        logger.info("Shutting down DarkVision service ...")

    app = FastAPI(
        title="DarkVision",
        description="Video and image analysis browsing service",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(images.router)
    app.include_router(videos.router)
    app.include_router(upload.router)
    app.include_router(status.router)

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(ConfigurationError)
    async def configuration_error_handler(request: Request, exc: ConfigurationError):
        return JSONResponse(
            status_code=422, content={"detail": str(exc), "field": exc.field}
        )

    @app.exception_handler(DarkVisionError)
    async def darkvision_error_handler(request: Request, exc: DarkVisionError):
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=500, content={"detail": str(exc)})

    return app


app = create_app()
