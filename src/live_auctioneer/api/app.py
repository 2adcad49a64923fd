"""FastAPI application factory."""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from src.live_auctioneer.api.routes import create_router
from src.live_auctioneer.config import Settings
from src.live_auctioneer.errors import LiveAuctioneerError
from src.live_auctioneer.services.gateway import DIDGateway
from src.live_auctioneer.services.uploads import AvatarImageStore

logger = structlog.get_logger()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    if settings is None:
        settings = Settings()

    gateway = DIDGateway(settings)
    image_store = AvatarImageStore(settings)

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        logger.info("Starting Live Auctioneer service")
        if not settings.did_configured:
            logger.warning("DID_API_KEY not set, video endpoints will answer 500")
        yield
        logger.info("Shutting down Live Auctioneer")

    app = FastAPI(
        title="Live Auctioneer",
        description="Talking-avatar auctioneer backed by the D-ID API",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(LiveAuctioneerError)
    async def handle_domain_error(_request: Request, exc: LiveAuctioneerError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def handle_bad_body(_request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.info("Malformed request body", errors=exc.errors())
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid request body", "code": "validation_error"},
        )

    app.state.settings = settings
    app.state.gateway = gateway
    app.state.image_store = image_store
    app.include_router(create_router())
    app.mount(
        image_store.url_prefix.rstrip("/"),
        StaticFiles(directory=image_store.directory),
        name="avatars",
    )

    return app
